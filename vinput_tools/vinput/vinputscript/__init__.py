"""
vinput Script Compiler, Player and Disassembler

This module provides compilation, playback and disassembly for vinput scripts.
"""

from .vinputscript_compiler import (
    Compiler,
    ScriptSyntaxError,
    SyntaxErrorKind,
    script_doc,
)
from .vinputscript_disassembler import disassemble
from .vinputscript_player import CancelToken, Player, interrupt_cancels
from .vinputscript_program import Instruction, Opcode, Program, decode, encode

__all__ = [
    "Compiler",
    "ScriptSyntaxError",
    "SyntaxErrorKind",
    "script_doc",
    "disassemble",
    "CancelToken",
    "Player",
    "interrupt_cancels",
    "Instruction",
    "Opcode",
    "Program",
    "encode",
    "decode",
]
