"""Terminal geometry tracking and the raw-mode alternate-screen session."""
from __future__ import annotations

import logging
import os
import termios
from types import ModuleType, TracebackType
from typing import Any, BinaryIO, Callable, List, Tuple

from ..errors import ReaderIOError
from .signals import PendingSignals

LOGGER = logging.getLogger(__name__)

ENTER_ALTERNATE_SCREEN = b"\033[?1049h\033[?25l"
LEAVE_ALTERNATE_SCREEN = b"\033[?25h\033[?1049l"

DEFAULT_ROWS = 30
DEFAULT_COLUMNS = 80

_LFLAG = 3
_CC = 6

SizeQuery = Callable[[int], os.terminal_size]


class TerminalGeometry:
    """Report the terminal size, re-querying only after a resize notice."""

    def __init__(
        self,
        signals: PendingSignals,
        *,
        fd: int = 1,
        query: SizeQuery | None = None,
        rows: int = DEFAULT_ROWS,
        columns: int = DEFAULT_COLUMNS,
    ) -> None:
        self.signals = signals
        self.fd = fd
        self._query = query or os.get_terminal_size
        self.rows = rows
        self.columns = columns

    def size(self) -> Tuple[int, int]:
        """Return ``(rows, columns)`` current as of the latest SIGWINCH."""

        if self.signals.consume_resize():
            self.refresh()
        return self.rows, self.columns

    def refresh(self) -> None:
        try:
            size = self._query(self.fd)
        except OSError as exc:
            # Why: keep drawing with the last known size; the next resize retries.
            LOGGER.debug("Terminal size query failed on fd %d: %s", self.fd, exc)
            return
        self.columns, self.rows = size.columns, size.lines
        LOGGER.debug("Terminal size is %dx%d", self.columns, self.rows)


class TerminalSession:
    """Context manager holding the terminal in cbreak-without-signals mode.

    Entering switches to the alternate screen with the cursor hidden and
    clears ``ICANON``, ``ECHO`` and ``ISIG``. Leaving undoes whichever of
    those steps happened, even when the block raised.
    """

    def __init__(
        self,
        tty_fd: int,
        output: BinaryIO,
        *,
        termios_module: ModuleType | None = None,
    ) -> None:
        self.tty_fd = tty_fd
        self.output = output
        self._termios = termios_module or termios
        self._saved_attributes: List[Any] | None = None
        self._screen_entered = False

    @property
    def configured(self) -> bool:
        return self._saved_attributes is not None

    def __enter__(self) -> "TerminalSession":
        try:
            self._write(ENTER_ALTERNATE_SCREEN, "cannot enter the alternate screen")
            self._screen_entered = True
            self._configure_mode()
        except BaseException:
            self.restore()
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.restore()

    def _configure_mode(self) -> None:
        tios = self._termios
        try:
            attributes = tios.tcgetattr(self.tty_fd)
        except tios.error as exc:
            raise ReaderIOError("tcgetattr", _termios_reason(exc)) from exc
        self._saved_attributes = _copy_attributes(attributes)
        raw = _copy_attributes(attributes)
        raw[_LFLAG] &= ~(tios.ICANON | tios.ECHO | tios.ISIG)
        raw[_CC][tios.VMIN] = 1
        raw[_CC][tios.VTIME] = 0
        try:
            tios.tcsetattr(self.tty_fd, tios.TCSAFLUSH, raw)
        except tios.error as exc:
            self._saved_attributes = None
            raise ReaderIOError("tcsetattr", _termios_reason(exc)) from exc

    def restore(self) -> None:
        """Put the terminal back the way it was found; safe to call twice."""

        tios = self._termios
        if self._saved_attributes is not None:
            try:
                tios.tcsetattr(self.tty_fd, tios.TCSAFLUSH, self._saved_attributes)
            except tios.error as exc:
                LOGGER.warning("Could not restore terminal attributes: %s", exc)
            self._saved_attributes = None
        if self._screen_entered:
            self._screen_entered = False
            try:
                self.output.write(LEAVE_ALTERNATE_SCREEN)
                self.output.flush()
            except OSError as exc:
                LOGGER.warning("Could not leave the alternate screen: %s", exc)

    def _write(self, data: bytes, operation: str) -> None:
        try:
            self.output.write(data)
            self.output.flush()
        except OSError as exc:
            raise ReaderIOError.from_os_error(operation, exc) from exc


def _copy_attributes(attributes: List[Any]) -> List[Any]:
    copied = list(attributes)
    copied[_CC] = list(attributes[_CC])
    return copied


def _termios_reason(exc: Exception) -> str:
    args = getattr(exc, "args", ())
    if len(args) >= 2:
        return str(args[1])
    return str(exc)


__all__ = [
    "DEFAULT_COLUMNS",
    "DEFAULT_ROWS",
    "ENTER_ALTERNATE_SCREEN",
    "LEAVE_ALTERNATE_SCREEN",
    "TerminalGeometry",
    "TerminalSession",
]
