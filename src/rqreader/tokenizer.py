"""Split a loaded text buffer into the words flashed by the reader."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .errors import ResourceError


# ``bytes.split()`` without a separator splits on exactly this set and drops
# empty fields, so runs of mixed delimiters collapse.
DELIMITERS = b" \f\n\r\t\v"

_CONTINUATION_MASK = 0xC0
_CONTINUATION_BITS = 0x80


def display_width(text: bytes) -> int:
    """Return the number of characters in ``text`` assuming UTF-8.

    Continuation bytes are skipped, so the result counts code points rather
    than terminal columns. Wide glyphs and combining marks are therefore
    centred slightly off.
    """

    return sum(
        1 for byte in text if byte & _CONTINUATION_MASK != _CONTINUATION_BITS
    )


@dataclass(frozen=True, slots=True)
class Token:
    """One displayable word and whether it is drawn in reverse video."""

    text: bytes
    emphasis: bool = False

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("tokens must not be empty")

    @property
    def width(self) -> int:
        return display_width(self.text)


def split_words(buffer: bytes) -> List[bytes]:
    """Return the whitespace-delimited words of ``buffer`` in order."""

    return buffer.split()


def tokenize(buffer: bytes, *, emphasis: bool = True) -> Tuple[Token, ...]:
    """Build the immutable token sequence for ``buffer``.

    With ``emphasis`` enabled a word that repeats its predecessor verbatim is
    flagged for reverse video, alternating across a run of repeats so every
    other copy stands out.
    """

    try:
        words = split_words(buffer)
        tokens: List[Token] = []
        previous: Token | None = None
        for word in words:
            flagged = False
            if emphasis and previous is not None and previous.text == word:
                flagged = not previous.emphasis
            previous = Token(word, flagged)
            tokens.append(previous)
        return tuple(tokens)
    except MemoryError as exc:
        raise ResourceError("cannot allocate the word table") from exc


__all__ = ["DELIMITERS", "Token", "display_width", "split_words", "tokenize"]
