#!/usr/bin/env python3
"""
Tests for the vinput script player
"""

import io
import signal
from typing import List, Optional, Tuple

import pytest

from ..desktop.catalog import Button, Key, Symbol
from ..desktop.desktop import Desktop, DesktopError
from .vinputscript_compiler import Compiler
from .vinputscript_player import CancelToken, Player, interrupt_cancels
from .vinputscript_program import Instruction, Opcode, Program


class RecordingDesktop(Desktop):
    """Desktop that records every call it receives"""

    name = "recording"

    def __init__(self, pointer: Tuple[int, int] = (12, 34)):
        self.calls: List[tuple] = []
        self.pointer = pointer

    def ready(self) -> bool:
        return True

    def press(self, symbol: Symbol) -> None:
        self.calls.append(("press", symbol))

    def release(self, symbol: Symbol) -> None:
        self.calls.append(("release", symbol))

    def move_to(self, x: int, y: int) -> None:
        self.calls.append(("move_to", x, y))

    def current_pointer(self) -> Tuple[int, int]:
        return self.pointer

    def flush(self) -> None:
        self.calls.append(("flush",))

    def presses(self, symbol: Symbol) -> int:
        return self.calls.count(("press", symbol))


class CancellingDesktop(RecordingDesktop):
    """Cancels playback on the nth press"""

    def __init__(self, token: CancelToken, after: int):
        super().__init__()
        self.token = token
        self.after = after

    def press(self, symbol: Symbol) -> None:
        super().press(symbol)
        if len([c for c in self.calls if c[0] == "press"]) == self.after:
            self.token.cancel()


def compile_script(source: str) -> Program:
    return Compiler().compile(source)


def exact_player(sleeps: Optional[List[float]] = None, **kwargs) -> Player:
    """Player without jitter that records sleeps instead of sleeping"""
    if sleeps is None:
        sleeps = []
    return Player(random_sleep=False, sleep=sleeps.append, **kwargs)


def test_counted_loop() -> None:
    desktop = RecordingDesktop()
    player = exact_player()

    assert player.play(compile_script(r"\[{3]X\}"), desktop, CancelToken())
    assert desktop.presses(Key.X) == 3
    assert desktop.calls.count(("release", Key.X)) == 3
    assert player.loops == []


def test_nested_loops() -> None:
    desktop = RecordingDesktop()
    exact_player().play(compile_script(r"\[{2]a\[{3]b\}\}"), desktop, CancelToken())
    assert desktop.presses(Key.a) == 2
    assert desktop.presses(Key.b) == 6


def test_loop_of_one() -> None:
    desktop = RecordingDesktop()
    exact_player().play(compile_script(r"\[{1]a\}b"), desktop, CancelToken())
    assert desktop.presses(Key.a) == 1
    assert desktop.presses(Key.b) == 1


def test_pending_cancel_runs_loop_body_once() -> None:
    desktop = RecordingDesktop()
    token = CancelToken()
    token.cancel()

    assert not exact_player().play(compile_script(r"\[{0]X\}"), desktop, token)
    assert desktop.presses(Key.X) == 1
    assert desktop.calls.count(("release", Key.X)) == 1


def test_cancel_during_forever_loop() -> None:
    token = CancelToken()
    desktop = CancellingDesktop(token, after=3)

    assert not exact_player().play(compile_script(r"\{X\}"), desktop, token)
    assert desktop.presses(Key.X) == 3
    # The cancelled instruction finishes before playback stops
    assert desktop.calls[-2:] == [("release", Key.X), ("flush",)]


def test_token_reset() -> None:
    token = CancelToken()
    token.cancel()
    assert token.is_cancelled()
    token.reset()
    assert not token.is_cancelled()


def test_flush_after_every_dispatch() -> None:
    desktop = RecordingDesktop()
    exact_player().play(
        compile_script(r"ab\[@1,2]\<\[$A,v]\[$A,^]"), desktop, CancelToken()
    )
    assert desktop.calls == [
        ("press", Key.a),
        ("release", Key.a),
        ("flush",),
        ("press", Key.b),
        ("release", Key.b),
        ("flush",),
        ("move_to", 1, 2),
        ("flush",),
        ("press", Button.LEFT),
        ("release", Button.LEFT),
        ("flush",),
        ("press", Key.A),
        ("flush",),
        ("release", Key.A),
        ("flush",),
    ]


def test_sleeps_are_pure_waits() -> None:
    desktop = RecordingDesktop()
    sleeps: List[float] = []
    exact_player(sleeps).play(compile_script(r"\[#2.5]"), desktop, CancelToken())

    assert desktop.calls == []
    assert sleeps == [2.0, 0.5]


def test_pacing_delay() -> None:
    sleeps: List[float] = []
    exact_player(sleeps).play(compile_script("ab"), RecordingDesktop(), CancelToken())
    assert sleeps == [0.05, 0.05]


def test_random_sleep_is_seeded() -> None:
    program = compile_script(r"a\[#1]b\[#0.2]")
    runs = []
    for _ in range(2):
        sleeps: List[float] = []
        player = Player(random_sleep=True, seed=1234, sleep=sleeps.append)
        player.play(program, RecordingDesktop(), CancelToken())
        runs.append(sleeps)

    assert runs[0] == runs[1]
    assert len(runs[0]) == 4
    assert all(duration > 0 for duration in runs[0])
    assert runs[0] != [0.05, 1.0, 0.05, 0.2]


def test_random_sleep_never_reaches_zero() -> None:
    sleeps: List[float] = []
    player = Player(random_sleep=True, seed=7, sleep=sleeps.append)
    for _ in range(2000):
        player.sleep_ms(1)
    assert min(sleeps) > 0


def test_stray_loop_end_is_ignored() -> None:
    desktop = RecordingDesktop()
    assert exact_player().play(compile_script(r"\}a"), desktop, CancelToken())
    assert desktop.presses(Key.a) == 1


def test_pointer_where() -> None:
    output = io.StringIO()
    desktop = RecordingDesktop(pointer=(640, 480))
    exact_player(output=output).play(compile_script(r"\?\[?!]"), desktop, CancelToken())

    assert output.getvalue() == "(640,480)\n(640,480)\x1b[K\r"
    assert desktop.calls == [("flush",), ("flush",)]


def test_out_of_range_operands_are_skipped() -> None:
    program = Program(
        [
            Instruction(Opcode.KEY_CLICK, 500),
            Instruction(Opcode.BUTTON_DOWN, 9),
            Instruction(Opcode.POINTER_GOTO, 3),
            Instruction(Opcode.KEY_CLICK, Key.q.value),
        ]
    )
    desktop = RecordingDesktop()
    sleeps: List[float] = []

    assert exact_player(sleeps).play(program, desktop, CancelToken())
    assert desktop.calls == [("press", Key.q), ("release", Key.q), ("flush",)]
    assert sleeps == [0.05]


def test_skipped_instruction_checks_cancel() -> None:
    program = Program(
        [
            Instruction(Opcode.KEY_CLICK, 500),
            Instruction(Opcode.KEY_CLICK, Key.q.value),
        ]
    )
    desktop = RecordingDesktop()
    token = CancelToken()
    token.cancel()

    assert not exact_player().play(program, desktop, token)
    assert desktop.calls == []


def test_program_can_be_replayed() -> None:
    program = compile_script(r"\[{2]z\}")
    player = exact_player()
    first, second = RecordingDesktop(), RecordingDesktop()
    player.play(program, first, CancelToken())
    player.play(program, second, CancelToken())
    assert first.calls == second.calls


def test_trace() -> None:
    lines: List[str] = []
    exact_player(trace=lines.append).play(
        compile_script(r"\[{2]a\}"), RecordingDesktop(), CancelToken()
    )
    assert lines == [
        "0x0000: LOOP_BEGIN 2",
        "0x0001: KEY_CLICK a",
        "0x0002: LOOP_END",
        "0x0001: KEY_CLICK a",
        "0x0002: LOOP_END",
    ]


def test_desktop_errors_propagate() -> None:
    class FailingDesktop(RecordingDesktop):
        def press(self, symbol: Symbol) -> None:
            raise DesktopError("failing", "device unplugged")

    player = exact_player()
    with pytest.raises(DesktopError):
        player.play(compile_script("a"), FailingDesktop(), CancelToken())

    # The player is usable again afterwards
    assert player.play(compile_script(""), RecordingDesktop(), CancelToken())


def test_reentrant_play_is_rejected() -> None:
    player = exact_player()

    class ReentrantDesktop(RecordingDesktop):
        def press(self, symbol: Symbol) -> None:
            player.play(Program(), RecordingDesktop(), CancelToken())

    with pytest.raises(RuntimeError):
        player.play(compile_script("a"), ReentrantDesktop(), CancelToken())


def test_play_without_token() -> None:
    desktop = RecordingDesktop()
    previous = signal.getsignal(signal.SIGINT)

    assert exact_player().play(compile_script("a"), desktop)
    assert desktop.presses(Key.a) == 1
    assert signal.getsignal(signal.SIGINT) is previous


def test_interrupt_cancels() -> None:
    token = CancelToken()
    previous = signal.getsignal(signal.SIGINT)

    with interrupt_cancels(token):
        handler = signal.getsignal(signal.SIGINT)
        assert handler is not previous
        handler(signal.SIGINT, None)
        assert token.is_cancelled()

    assert signal.getsignal(signal.SIGINT) is previous
