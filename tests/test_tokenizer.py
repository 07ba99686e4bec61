from __future__ import annotations

import pytest

from rqreader.errors import ResourceError
from rqreader.tokenizer import Token, display_width, tokenize
from rqreader import tokenizer as tokenizer_module


def _texts(tokens: tuple[Token, ...]) -> list[bytes]:
    return [token.text for token in tokens]


def test_tokenize_collapses_mixed_delimiters() -> None:
    tokens = tokenize(b"a\n\nb\t c")

    assert _texts(tokens) == [b"a", b"b", b"c"]


def test_tokenize_accepts_every_delimiter_kind() -> None:
    tokens = tokenize(b" one\ftwo\rthree\vfour\tfive\nsix  ")

    assert _texts(tokens) == [b"one", b"two", b"three", b"four", b"five", b"six"]


def test_tokenize_preserves_non_whitespace_order() -> None:
    source = b"  The quick\t\tbrown\r\nfox  jumps\x0b over\x0c\x0cthe lazy dog.\n"

    tokens = tokenize(source)

    joined = b" ".join(_texts(tokens))
    assert joined.replace(b" ", b"") == bytes(
        byte for byte in source if byte not in b" \f\n\r\t\v"
    )
    assert all(token.text for token in tokens)


def test_tokenize_empty_and_blank_buffers_yield_nothing() -> None:
    assert tokenize(b"") == ()
    assert tokenize(b" \n\t\r\v\f ") == ()


def test_nul_bytes_are_ordinary_content() -> None:
    assert _texts(tokenize(b"a\x00b c")) == [b"a\x00b", b"c"]


def test_emphasis_alternates_across_repeats() -> None:
    tokens = tokenize(b"x x x y x x")

    assert [token.emphasis for token in tokens] == [
        False,
        True,
        False,
        False,
        False,
        True,
    ]


def test_emphasis_requires_verbatim_match() -> None:
    tokens = tokenize(b"Word word word, word")

    assert [token.emphasis for token in tokens] == [False, False, False, False]


def test_emphasis_can_be_disabled() -> None:
    tokens = tokenize(b"x x x x", emphasis=False)

    assert [token.emphasis for token in tokens] == [False] * 4


def test_display_width_skips_continuation_bytes() -> None:
    assert display_width(b"word") == 4
    assert display_width("héllo".encode("utf-8")) == 5
    assert display_width("日本".encode("utf-8")) == 2
    assert Token("naïve".encode("utf-8")).width == 5


def test_invalid_utf8_passes_through_untouched() -> None:
    tokens = tokenize(b"\xff\xfe \x80abc")

    assert _texts(tokens) == [b"\xff\xfe", b"\x80abc"]
    assert tokens[1].width == 3


def test_token_rejects_empty_text() -> None:
    with pytest.raises(ValueError):
        Token(b"")


def test_tokenize_reports_allocation_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def _exhausted(buffer: bytes) -> list[bytes]:
        raise MemoryError

    monkeypatch.setattr(tokenizer_module, "split_words", _exhausted)

    with pytest.raises(ResourceError, match="word table"):
        tokenize(b"anything")
