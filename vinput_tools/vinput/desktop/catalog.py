#!/usr/bin/env python3
"""
Key and Button Catalog

Fixed enumerations of the keys and pointer buttons a script can name. The
value of each member is what the compiler stores in an instruction operand.
"""

from enum import Enum
from typing import Dict, Optional, Union


class Key(Enum):
    """Keyboard keys"""

    DIGIT_0 = 0
    DIGIT_1 = 1
    DIGIT_2 = 2
    DIGIT_3 = 3
    DIGIT_4 = 4
    DIGIT_5 = 5
    DIGIT_6 = 6
    DIGIT_7 = 7
    DIGIT_8 = 8
    DIGIT_9 = 9
    A = 10
    B = 11
    C = 12
    D = 13
    E = 14
    F = 15
    G = 16
    H = 17
    I = 18  # noqa: E741
    J = 19
    K = 20
    L = 21
    M = 22
    N = 23
    O = 24  # noqa: E741
    P = 25
    Q = 26
    R = 27
    S = 28
    T = 29
    U = 30
    V = 31
    W = 32
    X = 33
    Y = 34
    Z = 35
    a = 36
    b = 37
    c = 38
    d = 39
    e = 40
    f = 41
    g = 42
    h = 43
    i = 44
    j = 45
    k = 46
    l = 47  # noqa: E741
    m = 48
    n = 49
    o = 50
    p = 51
    q = 52
    r = 53
    s = 54
    t = 55
    u = 56
    v = 57
    w = 58
    x = 59
    y = 60
    z = 61
    SPACE = 62
    EXCLAM = 63
    QUOTATION = 64
    NUMBERSIGN = 65
    DOLLAR = 66
    PERCENT = 67
    AMPERSAND = 68
    APOSTROPHE = 69
    PARENLEFT = 70
    PARENRIGHT = 71
    ASTERISK = 72
    PLUS = 73
    COMMA = 74
    MINUS = 75
    PERIOD = 76
    SLASH = 77
    COLON = 78
    SEMICOLON = 79
    LESS = 80
    EQUAL = 81
    GREATER = 82
    QUESTION = 83
    AT = 84
    BRACKETLEFT = 85
    BACKSLASH = 86
    BRACKETRIGHT = 87
    ASCIICIRCUM = 88
    UNDERSCORE = 89
    GRAVE = 90
    BRACELEFT = 91
    BAR = 92
    BRACERIGHT = 93
    ASCIITILDE = 94
    BACKSPACE = 95
    TAB = 96
    RETURN = 97
    ESCAPE = 98
    DELETE = 99
    CONTROL_L = 100
    SHIFT_L = 101
    ALT_L = 102
    META_L = 103
    SUPER_L = 104
    CONTROL_R = 105
    SHIFT_R = 106
    ALT_R = 107
    META_R = 108
    SUPER_R = 109


class Button(Enum):
    """Mouse buttons and wheel actions"""

    LEFT = 0
    MIDDLE = 1
    RIGHT = 2
    SCROLL_UP = 3
    SCROLL_DOWN = 4


Symbol = Union[Key, Button]

# Digit keys are named by the digit itself
KEY_NAMES: Dict[Key, str] = {
    key: key.name[len("DIGIT_"):] if key.name.startswith("DIGIT_") else key.name
    for key in Key
}
KEYS_BY_NAME: Dict[str, Key] = {name: key for key, name in KEY_NAMES.items()}

BUTTON_NAMES: Dict[Button, str] = {button: button.name for button in Button}
BUTTONS_BY_NAME: Dict[str, Button] = {
    name: button for button, name in BUTTON_NAMES.items()
}

# Character typed by each printable key
KEY_CHARS: Dict[Key, str] = {
    key: KEY_NAMES[key] for key in Key if len(KEY_NAMES[key]) == 1
}
KEY_CHARS.update({
    Key.SPACE: " ",
    Key.EXCLAM: "!",
    Key.QUOTATION: '"',
    Key.NUMBERSIGN: "#",
    Key.DOLLAR: "$",
    Key.PERCENT: "%",
    Key.AMPERSAND: "&",
    Key.APOSTROPHE: "'",
    Key.PARENLEFT: "(",
    Key.PARENRIGHT: ")",
    Key.ASTERISK: "*",
    Key.PLUS: "+",
    Key.COMMA: ",",
    Key.MINUS: "-",
    Key.PERIOD: ".",
    Key.SLASH: "/",
    Key.COLON: ":",
    Key.SEMICOLON: ";",
    Key.LESS: "<",
    Key.EQUAL: "=",
    Key.GREATER: ">",
    Key.QUESTION: "?",
    Key.AT: "@",
    Key.BRACKETLEFT: "[",
    Key.BACKSLASH: "\\",
    Key.BRACKETRIGHT: "]",
    Key.ASCIICIRCUM: "^",
    Key.UNDERSCORE: "_",
    Key.GRAVE: "`",
    Key.BRACELEFT: "{",
    Key.BAR: "|",
    Key.BRACERIGHT: "}",
    Key.ASCIITILDE: "~",
})

# Wheel "buttons" have no independent press and release
SCROLL_BUTTONS = (Button.SCROLL_UP, Button.SCROLL_DOWN)


def key_from_name(name: str) -> Optional[Key]:
    """Look up a key by its canonical name (exact, case-sensitive)"""
    return KEYS_BY_NAME.get(name)


def key_name(key: Key) -> str:
    return KEY_NAMES[key]


def key_char(key: Key) -> Optional[str]:
    """Character typed by a printable key, None for control keys"""
    return KEY_CHARS.get(key)


def button_from_name(name: str) -> Optional[Button]:
    """Look up a button by its canonical name (exact, case-sensitive)"""
    return BUTTONS_BY_NAME.get(name)


def button_name(button: Button) -> str:
    return BUTTON_NAMES[button]


def symbol_name(symbol: Symbol) -> str:
    """Canonical name of a key or a button"""
    if isinstance(symbol, Key):
        return key_name(symbol)
    return button_name(symbol)
