"""Load the text to be read into memory before presentation starts."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO

from .errors import ReaderIOError, ResourceError


STDIN_PATH = "-"


def load_text(path: str | Path | None, *, stdin: BinaryIO | None = None) -> bytes:
    """Return the full contents of ``path`` or of standard input.

    ``None`` and ``"-"`` select standard input, read as bytes until EOF.
    """

    try:
        if path is None or str(path) == STDIN_PATH:
            stream = stdin if stdin is not None else sys.stdin.buffer
            try:
                return stream.read()
            except OSError as exc:
                raise ReaderIOError.from_os_error("cannot read standard input", exc) from exc
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise ReaderIOError.from_os_error(f"cannot read {path}", exc) from exc
    except MemoryError as exc:
        raise ResourceError("cannot allocate memory for the text") from exc


__all__ = ["STDIN_PATH", "load_text"]
