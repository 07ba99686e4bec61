"""Keyboard input for the reader: byte source, key decoding and dispatch."""
from __future__ import annotations

import logging
import os
import select
from enum import Enum, auto
from typing import Mapping, Protocol

from ..errors import ReaderIOError
from .signals import PendingSignals

LOGGER = logging.getLogger(__name__)

TICK_BYTE = 0
ESCAPE = 0x1B
_SEQUENCE_INTRODUCERS = frozenset({ord("["), ord("O")})


class Command(Enum):
    """Engine stimuli decoded from the terminal."""

    TICK = auto()
    SPEED_UP = auto()
    SLOW_DOWN = auto()
    PAUSE = auto()
    QUIT = auto()
    FORWARD = auto()
    BACK = auto()


KEY_BINDINGS: Mapping[int, Command] = {
    ord("+"): Command.SPEED_UP,
    ord("-"): Command.SLOW_DOWN,
    ord("p"): Command.PAUSE,
    ord("q"): Command.QUIT,
}

ARROW_BINDINGS: Mapping[int, Command] = {
    ord("A"): Command.BACK,  # up
    ord("B"): Command.FORWARD,  # down
    ord("C"): Command.FORWARD,  # right
    ord("D"): Command.BACK,  # left
}


class ByteSource(Protocol):
    """Anything that yields terminal bytes one at a time."""

    def read_byte(self) -> int | None:
        """Return the next byte, :data:`TICK_BYTE` when interrupted, ``None`` at EOF."""


class TerminalInput:
    """Blocking single-byte reads that a delivered signal cuts short.

    ``wakeup_fd`` is the read end of the pipe registered with
    :func:`signal.set_wakeup_fd`; a byte there means a handler ran while we
    were waiting, which is reported as :data:`TICK_BYTE`.
    """

    def __init__(self, tty_fd: int, wakeup_fd: int | None = None) -> None:
        self.tty_fd = tty_fd
        self.wakeup_fd = wakeup_fd

    def read_byte(self) -> int | None:
        readers = [self.tty_fd]
        if self.wakeup_fd is not None:
            readers.append(self.wakeup_fd)
        try:
            ready, _, _ = select.select(readers, [], [])
        except OSError as exc:
            raise ReaderIOError.from_os_error("cannot wait for terminal input", exc) from exc
        if self.wakeup_fd is not None and self.wakeup_fd in ready:
            self._drain_wakeup()
            return TICK_BYTE
        try:
            data = os.read(self.tty_fd, 1)
        except OSError as exc:
            raise ReaderIOError.from_os_error("cannot read from the terminal", exc) from exc
        if not data:
            return None
        return data[0]

    def _drain_wakeup(self) -> None:
        assert self.wakeup_fd is not None
        while True:
            try:
                if not os.read(self.wakeup_fd, 512):
                    return
            except BlockingIOError:
                return


class KeyDecoder:
    """Turn raw key bytes into commands, folding ``ESC [ X`` arrow sequences."""

    _PLAIN = 0
    _AFTER_ESCAPE = 1
    _IN_SEQUENCE = 2

    def __init__(self) -> None:
        self._state = self._PLAIN

    def feed(self, byte: int) -> Command | None:
        if self._state == self._IN_SEQUENCE:
            self._state = self._PLAIN
            return ARROW_BINDINGS.get(byte)
        if self._state == self._AFTER_ESCAPE:
            self._state = self._PLAIN
            if byte in _SEQUENCE_INTRODUCERS:
                self._state = self._IN_SEQUENCE
                return None
        if byte == ESCAPE:
            self._state = self._AFTER_ESCAPE
            return None
        return KEY_BINDINGS.get(byte)


class CommandInterpreter:
    """Wait on ``source`` until something the engine must react to happens."""

    def __init__(
        self,
        source: ByteSource,
        signals: PendingSignals,
        *,
        decoder: KeyDecoder | None = None,
    ) -> None:
        self.source = source
        self.signals = signals
        self.decoder = decoder or KeyDecoder()

    def next_command(self) -> Command:
        """Block until a recognised key, a timer tick, or end of input.

        Unbound keys and interruptions without a pending timer expiry (a
        resize, for instance) are swallowed and the wait resumes.
        """

        while True:
            byte = self.source.read_byte()
            if byte is None:
                LOGGER.debug("End of terminal input")
                return Command.QUIT
            if byte == TICK_BYTE:
                if self.signals.consume_timer():
                    return Command.TICK
                continue
            command = self.decoder.feed(byte)
            if command is not None:
                return command

    def wait_any(self) -> None:
        """Block for one input event of any kind and discard it."""

        self.source.read_byte()


__all__ = [
    "ARROW_BINDINGS",
    "ByteSource",
    "Command",
    "CommandInterpreter",
    "KEY_BINDINGS",
    "KeyDecoder",
    "TICK_BYTE",
    "TerminalInput",
]
