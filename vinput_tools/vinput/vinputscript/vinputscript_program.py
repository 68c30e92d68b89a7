#!/usr/bin/env python3
"""
vinput Script Program

Instruction encoding and the compiled program: a linear instruction list plus
the position table that POINTER_GOTO operands index into.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Tuple

from .constants import (
    INSTRUCTION_BITS,
    OPCODE_BITS,
    OPCODE_MASK,
    OPERAND_MAX,
)


class Opcode(Enum):
    """vinput Virtual Machine Opcodes"""

    SLEEP_MS = 0x0
    SLEEP_SEC = 0x1
    KEY_UP = 0x2
    KEY_DOWN = 0x3
    KEY_CLICK = 0x4
    BUTTON_UP = 0x5
    BUTTON_DOWN = 0x6
    BUTTON_CLICK = 0x7
    POINTER_GOTO = 0x8
    POINTER_WHERE = 0x9
    LOOP_BEGIN = 0xA
    LOOP_END = 0xB


assert len(Opcode) <= 1 << OPCODE_BITS, "opcode set exceeds the opcode field"
assert all(op.value <= OPCODE_MASK for op in Opcode)


@dataclass(frozen=True)
class Instruction:
    """One (opcode, operand) unit of execution"""

    opcode: Opcode
    operand: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.operand <= OPERAND_MAX:
            raise ValueError(
                f"operand {self.operand} out of range for {self.opcode.name} "
                f"(0..{OPERAND_MAX})"
            )

    def encode(self) -> int:
        """Pack into a single instruction word"""
        return self.opcode.value | (self.operand << OPCODE_BITS)

    @classmethod
    def decode(cls, word: int) -> "Instruction":
        """Unpack an instruction word produced by encode()"""
        if not 0 <= word < 1 << INSTRUCTION_BITS:
            raise ValueError(f"instruction word 0x{word:X} out of range")
        return cls(Opcode(word & OPCODE_MASK), word >> OPCODE_BITS)

    def __str__(self) -> str:
        return f"{self.opcode.name}({self.operand})"


def encode(opcode: Opcode, operand: int) -> int:
    return Instruction(opcode, operand).encode()


def decode(word: int) -> Tuple[Opcode, int]:
    instruction = Instruction.decode(word)
    return instruction.opcode, instruction.operand


@dataclass
class Program:
    """Compiled script: instructions in execution order and the position table"""

    instructions: List[Instruction] = field(default_factory=list)
    positions: List[Tuple[int, int]] = field(default_factory=list)

    def emit(self, opcode: Opcode, operand: int = 0) -> None:
        self.instructions.append(Instruction(opcode, operand))

    def add_position(self, x: int, y: int) -> int:
        """Append a coordinate pair and return its index"""
        self.positions.append((x, y))
        return len(self.positions) - 1

    def truncate(self, instruction_count: int, position_count: int) -> None:
        """Drop everything appended after the given lengths"""
        del self.instructions[instruction_count:]
        del self.positions[position_count:]

    def clear(self) -> None:
        self.truncate(0, 0)

    def empty(self) -> bool:
        return not self.instructions

    def words(self) -> List[int]:
        """Packed form of the instruction list"""
        return [instruction.encode() for instruction in self.instructions]

    @classmethod
    def from_words(
        cls, words: List[int], positions: List[Tuple[int, int]]
    ) -> "Program":
        return cls([Instruction.decode(word) for word in words], list(positions))

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)
