#!/usr/bin/env python3
"""
vinput Script Player

Executes a compiled Program against a Desktop, one instruction at a time.
"""

import random
import signal
import sys
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, TextIO

from ..desktop.catalog import Symbol
from ..desktop.desktop import Desktop
from .constants import (
    PACING_DELAY_MS,
    POINTER_WHERE_NO_NEWLINE,
    RANDOM_SLEEP_SPREAD,
)
from .vinputscript_disassembler import (
    BUTTON_OPCODES,
    BUTTONS_BY_VALUE,
    KEY_OPCODES,
    KEYS_BY_VALUE,
    format_instruction,
)
from .vinputscript_program import Instruction, Opcode, Program

PRESS_OPCODES = (Opcode.KEY_DOWN, Opcode.BUTTON_DOWN)
RELEASE_OPCODES = (Opcode.KEY_UP, Opcode.BUTTON_UP)


class CancelToken:
    """Cancellation flag shared between the player and whoever stops it"""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    def is_cancelled(self) -> bool:
        return self._event.is_set()


@contextmanager
def interrupt_cancels(token: CancelToken) -> Iterator[CancelToken]:
    """Route SIGINT to token.cancel() for the duration of the block

    Signal handlers can only be installed from the main thread; elsewhere the
    token is yielded untouched.
    """
    if threading.current_thread() is not threading.main_thread():
        yield token
        return

    def handle_interrupt(signum, frame):
        token.cancel()

    previous = signal.signal(signal.SIGINT, handle_interrupt)
    try:
        yield token
    finally:
        signal.signal(
            signal.SIGINT, previous if previous is not None else signal.SIG_DFL
        )


@dataclass
class LoopFrame:
    """An active loop: where its body starts and how many passes remain"""

    target: int
    remaining: int  # 0 means forever


class Player:
    """vinput script player"""

    def __init__(
        self,
        random_sleep: bool = True,
        seed: Optional[int] = None,
        output: Optional[TextIO] = None,
        sleep: Callable[[float], None] = time.sleep,
        trace: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.random_sleep = random_sleep
        self.random = random.Random(seed)
        self.output = output
        self.sleep = sleep
        self.trace = trace
        self.loops: List[LoopFrame] = []
        self._playing = False

    def play(
        self,
        program: Program,
        desktop: Desktop,
        cancel: Optional[CancelToken] = None,
    ) -> bool:
        """Run program to completion or cancellation

        Returns True when the program ran off its end, False when it was
        cancelled. Without a token, Ctrl-C cancels playback.
        """
        if self._playing:
            raise RuntimeError("Player is already playing")

        if cancel is None:
            with interrupt_cancels(CancelToken()) as token:
                return self._run(program, desktop, token)
        return self._run(program, desktop, cancel)

    def _run(self, program: Program, desktop: Desktop, cancel: CancelToken) -> bool:
        self._playing = True
        self.loops.clear()
        try:
            code = program.instructions
            cursor = 0
            while cursor < len(code):
                instruction = code[cursor]
                if self.trace is not None:
                    self.trace(
                        f"0x{cursor:04X}: {format_instruction(instruction, program)}"
                    )
                cursor += 1

                opcode = instruction.opcode
                if opcode == Opcode.SLEEP_MS:
                    self.sleep_ms(instruction.operand)
                elif opcode == Opcode.SLEEP_SEC:
                    self.sleep_ms(instruction.operand * 1000)
                else:
                    executed = True
                    if opcode == Opcode.LOOP_BEGIN:
                        self.loops.append(LoopFrame(cursor, instruction.operand))
                    elif opcode == Opcode.LOOP_END:
                        cursor = self._end_loop(cursor)
                    else:
                        executed = self._execute(instruction, program, desktop)
                    if executed:
                        desktop.flush()
                        self.sleep_ms(PACING_DELAY_MS)
                    # The first pass of a loop body always runs
                    if opcode == Opcode.LOOP_BEGIN:
                        continue

                if cancel.is_cancelled():
                    return False
            return True
        finally:
            self._playing = False

    def _end_loop(self, cursor: int) -> int:
        """Return the next cursor after a LOOP_END at cursor - 1"""
        if not self.loops:
            return cursor
        frame = self.loops[-1]
        if frame.remaining == 0:
            return frame.target
        frame.remaining -= 1
        if frame.remaining == 0:
            self.loops.pop()
            return cursor
        return frame.target

    def _execute(
        self, instruction: Instruction, program: Program, desktop: Desktop
    ) -> bool:
        """Perform a device instruction; return False if it was skipped"""
        opcode = instruction.opcode
        operand = instruction.operand

        if opcode == Opcode.POINTER_GOTO:
            if operand >= len(program.positions):
                return False
            desktop.move_to(*program.positions[operand])
            return True

        if opcode == Opcode.POINTER_WHERE:
            self.print_pointer(desktop, operand)
            return True

        symbol: Optional[Symbol] = None
        if opcode in KEY_OPCODES:
            symbol = KEYS_BY_VALUE.get(operand)
        elif opcode in BUTTON_OPCODES:
            symbol = BUTTONS_BY_VALUE.get(operand)
        if symbol is None:
            return False

        if opcode in PRESS_OPCODES:
            desktop.press(symbol)
        elif opcode in RELEASE_OPCODES:
            desktop.release(symbol)
        else:
            desktop.press(symbol)
            desktop.release(symbol)
        return True

    def print_pointer(self, desktop: Desktop, flags: int) -> None:
        out = self.output if self.output is not None else sys.stdout
        x, y = desktop.current_pointer()
        out.write(f"({x},{y})")
        if flags & POINTER_WHERE_NO_NEWLINE:
            out.write("\x1b[K\r")
        else:
            out.write("\n")
        out.flush()

    def sleep_ms(self, ms: int) -> None:
        """Sleep for ms milliseconds, jittered when random sleep is on"""
        if self.random_sleep and ms > 0:
            offset = self.random.gauss(0.0, 1.0) * RANDOM_SLEEP_SPREAD * ms
            if -offset >= ms:
                offset = 0
            ms += int(offset)
        self.sleep(ms / 1000)
