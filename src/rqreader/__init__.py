"""Public rqreader API: tokenizer, rate handling and configuration."""
from __future__ import annotations

from .config import ReaderConfigError, ReaderSettings, load_reader_config, resolve_settings
from .errors import InvocationError, ReaderError, ReaderIOError, ResourceError
from .rate import DEFAULT_RATE, RATE_DELTA, parse_rate
from .source import load_text
from .tokenizer import Token, display_width, tokenize

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_RATE",
    "InvocationError",
    "RATE_DELTA",
    "ReaderConfigError",
    "ReaderError",
    "ReaderIOError",
    "ReaderSettings",
    "ResourceError",
    "Token",
    "display_width",
    "load_reader_config",
    "load_text",
    "parse_rate",
    "resolve_settings",
    "tokenize",
]
