"""Sticky flags raised by SIGWINCH/SIGALRM and the handlers that set them."""
from __future__ import annotations

import contextlib
import os
import signal
from dataclasses import dataclass
from typing import Iterator


@dataclass
class PendingSignals:
    """Resize and timer notifications waiting to be consumed by the engine.

    Handlers only assign ``True``; the engine clears a flag through the
    ``consume_*`` helpers, which check before clearing so a signal landing
    between the two steps is merged into the current notification instead of
    being lost. ``resize_pending`` starts set so the first frame queries the
    real terminal size.
    """

    resize_pending: bool = True
    timer_expired: bool = False

    def notify_resize(self, signum: int | None = None, frame: object = None) -> None:
        self.resize_pending = True

    def notify_timer(self, signum: int | None = None, frame: object = None) -> None:
        self.timer_expired = True

    def consume_resize(self) -> bool:
        """Return ``True`` and clear the flag if a resize was reported."""

        if not self.resize_pending:
            return False
        self.resize_pending = False
        return True

    def consume_timer(self) -> bool:
        """Return ``True`` and clear the flag if the pacing timer fired."""

        if not self.timer_expired:
            return False
        self.timer_expired = False
        return True


def _open_wakeup_pipe() -> tuple[int, int]:
    read_fd, write_fd = os.pipe()
    os.set_blocking(read_fd, False)
    os.set_blocking(write_fd, False)
    return read_fd, write_fd


@contextlib.contextmanager
def install_signal_handlers(pending: PendingSignals) -> Iterator[int]:
    """Route SIGWINCH/SIGALRM into ``pending`` for the duration of the block.

    Yields the read end of the wake-up pipe. Python writes one byte
    per delivered signal into it, which is what interrupts a blocking wait on
    the terminal. On exit the interval timer is stopped before SIGALRM gets
    its previous disposition back.
    """

    read_fd, write_fd = _open_wakeup_pipe()
    try:
        previous_wakeup = signal.set_wakeup_fd(write_fd)
        previous_handlers: dict[int, object] = {}
        try:
            previous_handlers[signal.SIGALRM] = signal.signal(
                signal.SIGALRM, pending.notify_timer
            )
            previous_handlers[signal.SIGWINCH] = signal.signal(
                signal.SIGWINCH, pending.notify_resize
            )
            yield read_fd
        finally:
            signal.setitimer(signal.ITIMER_REAL, 0)
            for signum, handler in previous_handlers.items():
                if handler is not None:
                    signal.signal(signum, handler)
            signal.set_wakeup_fd(previous_wakeup)
    finally:
        os.close(read_fd)
        os.close(write_fd)


__all__ = ["PendingSignals", "install_signal_handlers"]
