from __future__ import annotations

import signal
import time

import pytest

from rqreader.errors import ReaderIOError
from rqreader.runtime.signals import PendingSignals
from rqreader.runtime.timer import PacingTimer


class RecordingSetTimer:
    def __init__(self) -> None:
        self.calls: list[tuple[int, float]] = []

    def __call__(self, which: int, seconds: float) -> tuple[float, float]:
        self.calls.append((which, seconds))
        return (0.0, 0.0)


def test_arm_uses_one_shot_real_timer() -> None:
    setitimer = RecordingSetTimer()
    timer = PacingTimer(PendingSignals(), setitimer=setitimer)

    assert timer.arm(120) == pytest.approx(0.5)

    assert setitimer.calls == [(signal.ITIMER_REAL, pytest.approx(0.5))]
    assert timer.armed is True


def test_arm_clamps_non_positive_rates() -> None:
    setitimer = RecordingSetTimer()
    timer = PacingTimer(PendingSignals(), setitimer=setitimer)

    assert timer.arm(0) == pytest.approx(60.0)
    assert timer.arm(-30) == pytest.approx(60.0)


def test_disarm_discards_latched_expiry() -> None:
    setitimer = RecordingSetTimer()
    pending = PendingSignals(timer_expired=True)
    timer = PacingTimer(pending, setitimer=setitimer)
    timer.arm(60)

    timer.disarm()
    timer.disarm()

    assert setitimer.calls[-2:] == [(signal.ITIMER_REAL, 0), (signal.ITIMER_REAL, 0)]
    assert pending.timer_expired is False
    assert timer.armed is False


def test_setitimer_failure_is_an_io_error() -> None:
    def _failing(which: int, seconds: float) -> None:
        raise signal.ItimerError(22, "Invalid argument")

    timer = PacingTimer(PendingSignals(), setitimer=_failing)

    with pytest.raises(ReaderIOError, match="setitimer"):
        timer.arm(120)


def test_real_timer_fires_into_pending_signals() -> None:
    pending = PendingSignals()
    previous = signal.signal(signal.SIGALRM, pending.notify_timer)
    try:
        PacingTimer(pending).arm(60_000)
        deadline = time.monotonic() + 2.0
        while not pending.timer_expired and time.monotonic() < deadline:
            time.sleep(0.01)
        assert pending.consume_timer() is True
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(signal.SIGALRM, previous)
