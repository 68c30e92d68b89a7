#!/usr/bin/env python3
"""
vinput Program Disassembler

Renders a compiled Program back to a human-readable listing.
"""

from typing import Dict, List

from ..desktop.catalog import Button, Key, button_name, key_name
from .constants import POINTER_WHERE_NO_NEWLINE
from .vinputscript_program import Instruction, Opcode, Program

# Reverse lookups from operand to catalog symbol
KEYS_BY_VALUE: Dict[int, Key] = {key.value: key for key in Key}
BUTTONS_BY_VALUE: Dict[int, Button] = {button.value: button for button in Button}

KEY_OPCODES = (Opcode.KEY_UP, Opcode.KEY_DOWN, Opcode.KEY_CLICK)
BUTTON_OPCODES = (Opcode.BUTTON_UP, Opcode.BUTTON_DOWN, Opcode.BUTTON_CLICK)


def format_key(operand: int) -> str:
    key = KEYS_BY_VALUE.get(operand)
    if key is None:
        return f"0x{operand:02X}"
    return key_name(key)


def format_button(operand: int) -> str:
    button = BUTTONS_BY_VALUE.get(operand)
    if button is None:
        return f"0x{operand:02X}"
    return button_name(button)


def format_instruction(instruction: Instruction, program: Program) -> str:
    """Format one instruction; program supplies the position table"""
    opcode = instruction.opcode
    operand = instruction.operand

    if opcode in KEY_OPCODES:
        return f"{opcode.name} {format_key(operand)}"
    if opcode in BUTTON_OPCODES:
        return f"{opcode.name} {format_button(operand)}"
    if opcode == Opcode.POINTER_GOTO:
        if operand < len(program.positions):
            x, y = program.positions[operand]
            return f"POINTER_GOTO #{operand} ({x},{y})"
        return f"POINTER_GOTO #{operand} (invalid)"
    if opcode == Opcode.POINTER_WHERE:
        if operand & POINTER_WHERE_NO_NEWLINE:
            return "POINTER_WHERE !"
        return "POINTER_WHERE"
    if opcode == Opcode.LOOP_BEGIN:
        return f"LOOP_BEGIN {operand if operand else 'forever'}"
    if opcode == Opcode.LOOP_END:
        return "LOOP_END"
    return f"{opcode.name} {operand}"


def disassemble(program: Program) -> List[str]:
    """Disassemble a program to human-readable lines"""
    lines = []
    depth = 0

    for address, instruction in enumerate(program.instructions):
        if instruction.opcode == Opcode.LOOP_END and depth:
            depth -= 1
        indent = "  " * depth
        lines.append(
            f"0x{address:04X}: {indent}{format_instruction(instruction, program)}"
        )
        if instruction.opcode == Opcode.LOOP_BEGIN:
            depth += 1

    return lines
