"""One-shot pacing timer built on ``ITIMER_REAL``."""
from __future__ import annotations

import logging
import signal
from typing import Callable

from ..errors import ReaderIOError
from ..rate import clamp_rate, dwell_seconds
from .signals import PendingSignals

LOGGER = logging.getLogger(__name__)

SetTimer = Callable[[int, float], object]


class PacingTimer:
    """Fire SIGALRM once per word at the current rate."""

    def __init__(
        self,
        signals: PendingSignals,
        *,
        setitimer: SetTimer | None = None,
    ) -> None:
        self.signals = signals
        self._setitimer = setitimer or signal.setitimer
        self.armed = False
        self.interval: float | None = None

    def arm(self, rate: int) -> float:
        """Start a fresh countdown for one word at ``rate``; return its length."""

        interval = dwell_seconds(clamp_rate(rate))
        self._set(interval)
        self.armed = True
        self.interval = interval
        return interval

    def disarm(self) -> None:
        """Stop the countdown and drop an expiry that was already latched."""

        self._set(0)
        self.armed = False
        self.signals.consume_timer()

    def _set(self, seconds: float) -> None:
        try:
            self._setitimer(signal.ITIMER_REAL, seconds)
        except OSError as exc:
            raise ReaderIOError.from_os_error("setitimer", exc) from exc
        LOGGER.debug("Interval timer set to %.6fs", seconds)


__all__ = ["PacingTimer"]
