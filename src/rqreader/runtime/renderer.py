"""Escape-sequence frames that centre one word on an otherwise blank screen."""
from __future__ import annotations

from typing import BinaryIO, Tuple

from ..errors import ReaderIOError
from ..tokenizer import Token

CLEAR_SCREEN = b"\033[H\033[2J"
REVERSE_VIDEO_ON = b"\033[7m"
REVERSE_VIDEO_OFF = b"\033[27m"


def frame_position(width: int, rows: int, columns: int) -> Tuple[int, int]:
    """Return the 1-based ``(row, column)`` where a word of ``width`` starts.

    Words wider than the terminal produce a column below 1; no clipping is
    attempted.
    """

    return (rows + 1) // 2, (columns - width) // 2 + 1


def format_frame(token: Token, rows: int, columns: int) -> bytes:
    """Return the bytes that clear the screen and draw ``token`` centred."""

    row, column = frame_position(token.width, rows, columns)
    parts = [CLEAR_SCREEN, b"\033[%d;%dH" % (row, column)]
    if token.emphasis:
        parts.extend((REVERSE_VIDEO_ON, token.text, REVERSE_VIDEO_OFF))
    else:
        parts.append(token.text)
    return b"".join(parts)


class Renderer:
    """Write frames to ``output`` with one flush per word."""

    def __init__(self, output: BinaryIO) -> None:
        self.output = output
        self.frames_drawn = 0

    def draw(self, token: Token, rows: int, columns: int) -> None:
        frame = format_frame(token, rows, columns)
        try:
            self.output.write(frame)
            self.output.flush()
        except OSError as exc:
            raise ReaderIOError.from_os_error("cannot write to standard output", exc) from exc
        self.frames_drawn += 1


__all__ = [
    "CLEAR_SCREEN",
    "REVERSE_VIDEO_OFF",
    "REVERSE_VIDEO_ON",
    "Renderer",
    "format_frame",
    "frame_position",
]
