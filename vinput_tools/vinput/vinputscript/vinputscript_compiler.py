#!/usr/bin/env python3
"""
vinput Script Compiler

Compiles vinput script text into a Program for the vinput player.
"""

import io
import math
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, NamedTuple, NoReturn, Optional, TextIO, Tuple, Union

from ..desktop.catalog import (
    BUTTON_NAMES,
    KEY_CHARS,
    KEY_NAMES,
    Button,
    Key,
    button_from_name,
    key_from_name,
)
from ..desktop.desktop import POINTER_MAX
from .constants import (
    OPERAND_MAX,
    POINTER_WHERE_NO_NEWLINE,
    SLEEP_MIN_SECONDS,
    SLEEP_SEC_CHUNK,
)
from .vinputscript_program import Opcode, Program


class SyntaxErrorKind(Enum):
    """Classes of script syntax errors"""

    UNKNOWN_KEY = "unknown key"
    UNKNOWN_COMMAND = "unknown command"
    ILLEGAL_ARGUMENT = "illegal argument"


@dataclass
class ScriptSyntaxError(Exception):
    """Script syntax error with location information"""

    error: SyntaxErrorKind
    message: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.message} (line {self.line}, column {self.column})"


# Whitespace characters typed as keys unless whitespace is ignored
WHITESPACE_KEY_MAP: Dict[str, Key] = {
    "\t": Key.TAB,
    "\n": Key.RETURN,
    "\r": Key.RETURN,
    " ": Key.SPACE,
}

# Printable characters typed as-is; backslash starts a command instead
CHAR_KEY_MAP: Dict[str, Key] = {
    char: key
    for key, char in KEY_CHARS.items()
    if char not in WHITESPACE_KEY_MAP and char != "\\"
}
CHAR_KEY_MAP["\x7f"] = Key.BACKSPACE


class CommandEntry(NamedTuple):
    """One entry of the command table"""

    chars: str
    syntax: Tuple[str, ...]
    description: str
    handler: str


COMMANDS: List[CommandEntry] = [
    CommandEntry("\\", (r'"\\"',), "backslash key", "_command_backslash"),
    CommandEntry("nr", (r'"\n"', r'"\r"'), "enter key", "_command_enter"),
    CommandEntry("t", (r'"\t"',), "tab key", "_command_tab"),
    CommandEntry("s", (r'"\s"',), "space key", "_command_space"),
    CommandEntry(
        "#",
        (r'"\#"', r'("\[#" FLOAT "]")'),
        "sleep for 1 or FLOAT seconds",
        "_command_sleep",
    ),
    CommandEntry("<", (r'"\<"',), "left click", "_command_click_left"),
    CommandEntry(
        "|",
        (r'"\|"', r'"\[|^]"', r'"\[|v]"'),
        "middle click / scroll up / scroll down",
        "_command_click_middle",
    ),
    CommandEntry(">", (r'"\>"',), "right click", "_command_click_right"),
    CommandEntry(
        "@",
        (r'"\[@" INT "," INT "]"',),
        "move pointer to the coordinate",
        "_command_move_pointer",
    ),
    CommandEntry(
        "?",
        (r'"\?"', r'"\[?!]"'),
        "get pointer coordinate and print / print without LF",
        "_command_find_pointer",
    ),
    CommandEntry(
        "{",
        (r'"\{"', r'"\[{" INT "]"'),
        "begin loop forever / INT times (INT <= 0 means forever)",
        "_command_begin_loop",
    ),
    CommandEntry("}", (r'"\}"',), "end loop", "_command_end_loop"),
    CommandEntry(
        "$",
        (r'"\[$" KEY_NAME [ "," "v" | "^" ] "]"',),
        "click / press / release key",
        "_command_send_key",
    ),
    CommandEntry(
        "%",
        (r'"\[%" BUTTON_NAME [ "," "v" | "^" ] "]"',),
        "click / press / release button",
        "_command_send_button",
    ),
]

COMMAND_MAP: Dict[str, CommandEntry] = {
    char: entry for entry in COMMANDS for char in entry.chars
}


class Lexer:
    """Character reader for vinput script source"""

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1
        # Location of the character most recently returned by get()
        self.char_line = 1
        self.char_column = 0

    def get(self) -> str:
        """Return the next character, or an empty string at end of input"""
        if self.position >= len(self.source):
            return ""

        char = self.source[self.position]
        self.position += 1
        self.char_line = self.line
        self.char_column = self.column
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char


class Compiler:
    """vinput script compiler"""

    def __init__(self, ignore_space: bool = False) -> None:
        self.ignore_space = ignore_space
        self.string_buffer: List[str] = []  # raw text of the current argument
        self.args: List[str] = []  # arguments of the current command
        self.command_location: Tuple[int, int] = (0, 0)

    def compile(
        self, source: Union[str, TextIO], program: Optional[Program] = None
    ) -> Program:
        """Compile one chunk of script source, appending to program

        A syntax error discards everything this chunk added; instructions
        from earlier chunks are kept.
        """
        if program is None:
            program = Program()
        if not isinstance(source, str):
            source = source.read()

        instruction_count = len(program.instructions)
        position_count = len(program.positions)
        lexer = Lexer(source)
        try:
            while self._next_instruction(lexer, program):
                pass
        except ScriptSyntaxError:
            program.truncate(instruction_count, position_count)
            raise
        return program

    @staticmethod
    def print_doc(out: TextIO) -> None:
        """Write the script grammar, including every key and button name"""
        out.write("(* vinput script *)\n")
        out.write("script = { key | command } ;\n")
        out.write("key    = ALPHA | DIGIT | PUNCT ;\n")
        out.write("command\n")
        for i, entry in enumerate(COMMANDS):
            out.write("\t| " if i else "\t= ")
            out.write(" | ".join(entry.syntax))
            out.write(f"  (* {entry.description} *)\n")
        out.write("\t;\n")

        for title, names in (
            ("KEY_NAME", KEY_NAMES.values()),
            ("BUTTON_NAME", BUTTON_NAMES.values()),
        ):
            out.write(f"{title}\n")
            for i, name in enumerate(names):
                out.write("\t|" if i else "\t=")
                out.write(f' "{name}"\n')
            out.write("\t;\n")

    def _next_instruction(self, lexer: Lexer, program: Program) -> bool:
        """Compile one character; return False at end of input"""
        char = lexer.get()
        if not char:
            return False

        if char == "\\":
            self._parse_command(lexer, program)
            return True

        if char in WHITESPACE_KEY_MAP:
            if self.ignore_space:
                return True
            key = WHITESPACE_KEY_MAP[char]
        elif char in CHAR_KEY_MAP:
            key = CHAR_KEY_MAP[char]
        else:
            raise ScriptSyntaxError(
                SyntaxErrorKind.UNKNOWN_KEY,
                f"Unexpected character: {char!r}",
                lexer.char_line,
                lexer.char_column,
            )

        program.emit(Opcode.KEY_CLICK, key.value)
        return True

    def _parse_command(self, lexer: Lexer, program: Program) -> None:
        """Compile the command following a backslash"""
        self.command_location = (lexer.char_line, lexer.char_column)

        first = lexer.get()
        has_args = first == "["
        command = lexer.get() if has_args else first

        if not command:
            self._fail(SyntaxErrorKind.UNKNOWN_COMMAND, "Unterminated command")
        entry = COMMAND_MAP.get(command)
        if entry is None:
            self._fail(
                SyntaxErrorKind.UNKNOWN_COMMAND, f"Unknown command: {command!r}"
            )

        self.args.clear()
        if has_args:
            self._read_arguments(lexer)

        getattr(self, entry.handler)(self.args, program)

    def _read_arguments(self, lexer: Lexer) -> None:
        """Read a bracket body up to the closing ']' and split it on ','"""
        buffer = self.string_buffer
        buffer.clear()

        while True:
            char = lexer.get()
            if char == "\\":
                # Escaped characters never end or split the body
                char = lexer.get()
                if char:
                    buffer.append(char)
                    continue
            if not char:
                self._fail(
                    SyntaxErrorKind.ILLEGAL_ARGUMENT,
                    "Unterminated command arguments, expected ']'",
                )
            if char == "]":
                break
            if char == ",":
                self.args.append("".join(buffer))
                buffer.clear()
            else:
                buffer.append(char)

        # An empty body means no arguments at all
        if self.args or buffer:
            self.args.append("".join(buffer))

    def _fail(self, kind: SyntaxErrorKind, message: str) -> NoReturn:
        line, column = self.command_location
        raise ScriptSyntaxError(kind, message, line, column)

    def _expect_no_args(self, args: List[str], what: str) -> None:
        if args:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT, f"{what} takes no arguments"
            )

    def _parse_int(self, arg: str, what: str) -> int:
        try:
            return int(arg.strip())
        except ValueError:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT,
                f"Expected integer for {what}, got {arg!r}",
            )

    def _parse_direction(
        self, arg: str, down: Opcode, up: Opcode
    ) -> Opcode:
        """Map a '^' / 'v' suffix to the release / press opcode"""
        if arg == "^":
            return up
        if arg in ("v", "V"):
            return down
        self._fail(
            SyntaxErrorKind.ILLEGAL_ARGUMENT,
            f"Expected '^', 'v' or 'V', got {arg!r}",
        )

    def _command_backslash(self, args: List[str], program: Program) -> None:
        self._expect_no_args(args, "backslash")
        program.emit(Opcode.KEY_CLICK, Key.BACKSLASH.value)

    def _command_enter(self, args: List[str], program: Program) -> None:
        self._expect_no_args(args, "enter")
        program.emit(Opcode.KEY_CLICK, Key.RETURN.value)

    def _command_tab(self, args: List[str], program: Program) -> None:
        self._expect_no_args(args, "tab")
        program.emit(Opcode.KEY_CLICK, Key.TAB.value)

    def _command_space(self, args: List[str], program: Program) -> None:
        self._expect_no_args(args, "space")
        program.emit(Opcode.KEY_CLICK, Key.SPACE.value)

    def _command_sleep(self, args: List[str], program: Program) -> None:
        """Compile a sleep, split so that every operand fits its field"""
        if not args:
            program.emit(Opcode.SLEEP_SEC, 1)
            return
        if len(args) != 1:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT, "sleep takes at most one argument"
            )

        try:
            seconds = float(args[0].strip())
        except ValueError:
            seconds = math.nan
        if not math.isfinite(seconds):
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT,
                f"Expected number of seconds, got {args[0]!r}",
            )
        if seconds < SLEEP_MIN_SECONDS:
            return

        fraction, whole = math.modf(seconds)
        whole_seconds = int(whole)
        while whole_seconds > SLEEP_SEC_CHUNK:
            program.emit(Opcode.SLEEP_SEC, SLEEP_SEC_CHUNK)
            whole_seconds -= SLEEP_SEC_CHUNK
        if whole_seconds:
            program.emit(Opcode.SLEEP_SEC, whole_seconds)
        if fraction:
            program.emit(Opcode.SLEEP_MS, round(fraction * 1000))

    def _command_click_left(self, args: List[str], program: Program) -> None:
        self._expect_no_args(args, "left click")
        program.emit(Opcode.BUTTON_CLICK, Button.LEFT.value)

    def _command_click_middle(self, args: List[str], program: Program) -> None:
        if not args:
            button = Button.MIDDLE
        elif len(args) == 1 and args[0] == "^":
            button = Button.SCROLL_UP
        elif len(args) == 1 and args[0] in ("v", "V"):
            button = Button.SCROLL_DOWN
        else:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT,
                "middle click takes no argument or one of '^', 'v', 'V'",
            )
        program.emit(Opcode.BUTTON_CLICK, button.value)

    def _command_click_right(self, args: List[str], program: Program) -> None:
        self._expect_no_args(args, "right click")
        program.emit(Opcode.BUTTON_CLICK, Button.RIGHT.value)

    def _command_move_pointer(self, args: List[str], program: Program) -> None:
        if len(args) != 2:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT,
                "pointer move takes exactly two arguments",
            )
        x = min(max(self._parse_int(args[0], "x"), 0), POINTER_MAX)
        y = min(max(self._parse_int(args[1], "y"), 0), POINTER_MAX)

        if len(program.positions) > OPERAND_MAX:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT,
                f"Too many pointer positions (maximum {OPERAND_MAX + 1})",
            )
        index = program.add_position(x, y)
        program.emit(Opcode.POINTER_GOTO, index)

    def _command_find_pointer(self, args: List[str], program: Program) -> None:
        flags = 0
        if len(args) > 1:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT,
                "pointer query takes at most one argument",
            )
        for arg in args:
            if arg != "!":
                self._fail(
                    SyntaxErrorKind.ILLEGAL_ARGUMENT, f"Expected '!', got {arg!r}"
                )
            flags |= POINTER_WHERE_NO_NEWLINE
        program.emit(Opcode.POINTER_WHERE, flags)

    def _command_begin_loop(self, args: List[str], program: Program) -> None:
        if not args:
            count = 0
        elif len(args) == 1:
            count = self._parse_int(args[0], "loop count")
        else:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT, "loop takes at most one argument"
            )
        if count > OPERAND_MAX:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT,
                f"Loop count must be at most {OPERAND_MAX}",
            )
        program.emit(Opcode.LOOP_BEGIN, count if count > 0 else 0)

    def _command_end_loop(self, args: List[str], program: Program) -> None:
        self._expect_no_args(args, "end loop")
        program.emit(Opcode.LOOP_END, 0)

    def _command_send_key(self, args: List[str], program: Program) -> None:
        if not 1 <= len(args) <= 2:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT, "key command takes one or two arguments"
            )
        key = key_from_name(args[0])
        if key is None:
            self._fail(SyntaxErrorKind.UNKNOWN_KEY, f"Unknown key: {args[0]}")

        opcode = Opcode.KEY_CLICK
        if len(args) == 2:
            opcode = self._parse_direction(args[1], Opcode.KEY_DOWN, Opcode.KEY_UP)
        program.emit(opcode, key.value)

    def _command_send_button(self, args: List[str], program: Program) -> None:
        if not 1 <= len(args) <= 2:
            self._fail(
                SyntaxErrorKind.ILLEGAL_ARGUMENT,
                "button command takes one or two arguments",
            )
        button = button_from_name(args[0])
        if button is None:
            self._fail(SyntaxErrorKind.UNKNOWN_KEY, f"Unknown button: {args[0]}")

        opcode = Opcode.BUTTON_CLICK
        if len(args) == 2:
            opcode = self._parse_direction(
                args[1], Opcode.BUTTON_DOWN, Opcode.BUTTON_UP
            )
        program.emit(opcode, button.value)


def script_doc() -> str:
    """The script grammar as a string"""
    out = io.StringIO()
    Compiler.print_doc(out)
    return out.getvalue()


def main() -> None:
    """Main function for command-line usage"""
    if len(sys.argv) != 2:
        print("Usage: python vinputscript_compiler.py <script.vin>")
        sys.exit(1)

    input_file = sys.argv[1]

    try:
        with open(input_file, "r", encoding="utf-8") as f:
            program = Compiler().compile(f)

        print(
            f"Compiled {input_file}: {len(program)} instructions, "
            f"{len(program.positions)} positions"
        )

    except ScriptSyntaxError as e:
        print(f"Syntax error at line {e.line}, column {e.column}: {e.message}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
