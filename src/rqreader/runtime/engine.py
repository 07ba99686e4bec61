"""State machine that paces words onto the screen and reacts to keys."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol, Sequence, Tuple

from ..rate import DEFAULT_RATE, RATE_DELTA, adjust_rate, clamp_rate
from ..tokenizer import Token
from .commands import Command

LOGGER = logging.getLogger(__name__)


class EngineState(Enum):
    """Lifecycle phases of :class:`PresentationEngine`."""

    RUNNING = auto()
    PAUSED = auto()
    DONE = auto()


class FrameSink(Protocol):
    def draw(self, token: Token, rows: int, columns: int) -> None:
        """Put ``token`` on screen for a terminal of ``rows`` x ``columns``."""


class Pacer(Protocol):
    def arm(self, rate: int) -> float:
        """Start the dwell countdown for one word at ``rate``."""

    def disarm(self) -> None:
        """Stop the countdown."""


class GeometrySource(Protocol):
    def size(self) -> Tuple[int, int]:
        """Return the current ``(rows, columns)``."""


class CommandSource(Protocol):
    def next_command(self) -> Command:
        """Block until the engine has something to react to."""

    def wait_any(self) -> None:
        """Block for one input event of any kind."""


@dataclass
class PresentationEngine:
    """Drive the cursor through ``tokens`` one dwell at a time.

    ``cursor`` counts the words already shown, so it is the index of the
    next word and the word on screen is ``tokens[cursor - 1]``. Stepping back
    moves it by two, landing on the word before the visible one.
    """

    tokens: Sequence[Token]
    renderer: FrameSink
    timer: Pacer
    geometry: GeometrySource
    rate: int = DEFAULT_RATE
    rate_delta: int = RATE_DELTA
    state: EngineState = field(init=False, default=EngineState.RUNNING)
    cursor: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.tokens = tuple(self.tokens)
        self.rate = clamp_rate(self.rate)

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.tokens)

    @property
    def current_token(self) -> Token | None:
        """Return the word on screen, or ``None`` before the first frame."""

        if self.cursor == 0:
            return None
        return self.tokens[self.cursor - 1]

    def start(self) -> EngineState:
        """Arm the first dwell; an empty text finishes immediately."""

        if not self.tokens:
            LOGGER.debug("Nothing to read")
            self.state = EngineState.DONE
            return self.state
        self.state = EngineState.RUNNING
        self.timer.arm(self.rate)
        return self.state

    def step(self, command: Command) -> EngineState:
        """Apply ``command`` and return the resulting state."""

        if self.state is EngineState.DONE:
            return self.state
        if command is Command.QUIT or self.exhausted:
            return self.finish()

        if command is Command.TICK:
            if self.state is EngineState.RUNNING:
                self._advance()
        elif command is Command.SPEED_UP:
            self._change_rate(self.rate_delta)
        elif command is Command.SLOW_DOWN:
            self._change_rate(-self.rate_delta)
        elif command is Command.PAUSE:
            self._toggle_pause()
        elif command is Command.FORWARD:
            self._advance()
        elif command is Command.BACK:
            self.cursor = max(0, self.cursor - 2)
            self._advance()
        return self.state

    def run(self, commands: CommandSource) -> EngineState:
        """Present every word, reading commands until the session ends."""

        self.start()
        while self.state is not EngineState.DONE:
            if self.exhausted:
                # The last word stays up until its dwell ends or a key arrives.
                commands.wait_any()
                self.finish()
                break
            self.step(commands.next_command())
        return self.state

    def finish(self) -> EngineState:
        self.timer.disarm()
        self.state = EngineState.DONE
        LOGGER.debug("Session finished at word %d of %d", self.cursor, len(self.tokens))
        return self.state

    def _advance(self) -> None:
        token = self.tokens[self.cursor]
        rows, columns = self.geometry.size()
        self.renderer.draw(token, rows, columns)
        self.cursor += 1
        if self.state is EngineState.RUNNING:
            self.timer.arm(self.rate)

    def _change_rate(self, delta: int) -> None:
        self.rate = adjust_rate(self.rate, delta)
        LOGGER.debug("Rate changed to %d words per minute", self.rate)
        if self.state is EngineState.RUNNING:
            self.timer.arm(self.rate)

    def _toggle_pause(self) -> None:
        if self.state is EngineState.RUNNING:
            self.timer.disarm()
            self.state = EngineState.PAUSED
        else:
            self.state = EngineState.RUNNING
            self.timer.arm(self.rate)
        LOGGER.debug("Engine %s", self.state.name.lower())


__all__ = [
    "CommandSource",
    "EngineState",
    "FrameSink",
    "GeometrySource",
    "Pacer",
    "PresentationEngine",
]
