"""Interactive presentation runtime: signals, timer, terminal and engine."""
from __future__ import annotations

from .commands import Command, CommandInterpreter, KeyDecoder, TerminalInput
from .engine import EngineState, PresentationEngine
from .renderer import Renderer, format_frame, frame_position
from .signals import PendingSignals, install_signal_handlers
from .terminal import TerminalGeometry, TerminalSession
from .timer import PacingTimer

__all__ = [
    "Command",
    "CommandInterpreter",
    "EngineState",
    "KeyDecoder",
    "PacingTimer",
    "PendingSignals",
    "PresentationEngine",
    "Renderer",
    "TerminalGeometry",
    "TerminalInput",
    "TerminalSession",
    "format_frame",
    "frame_position",
    "install_signal_handlers",
]
