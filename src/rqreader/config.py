"""Reader settings assembled from defaults, a TOML file and the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import tomllib

from .errors import InvocationError, ReaderIOError
from .rate import DEFAULT_RATE, RATE_DELTA, parse_rate, parse_rate_strict

LOGGER = logging.getLogger(__name__)

RATE_ENVIRONMENT_VARIABLE = "RQ_RATE"

_KNOWN_KEYS = frozenset({"rate", "rate_delta", "emphasis"})


class ReaderConfigError(InvocationError, ValueError):
    """Raised when a reader configuration file fails validation."""


@dataclass(frozen=True)
class ReaderSettings:
    """Effective pacing and display options for one reading session."""

    rate: int = DEFAULT_RATE
    rate_delta: int = RATE_DELTA
    emphasis: bool = True


def load_reader_config(
    config_path: Path, *, base: ReaderSettings | None = None
) -> ReaderSettings:
    """Parse and validate the ``[reader]`` table stored at ``config_path``."""

    settings = base if base is not None else ReaderSettings()
    try:
        with config_path.open("rb") as stream:
            raw_data = tomllib.load(stream)
    except tomllib.TOMLDecodeError as exc:
        raise ReaderConfigError(f"{config_path}: {exc}") from exc
    except OSError as exc:
        raise ReaderIOError.from_os_error(f"cannot read {config_path}", exc) from exc

    reader = _parse_reader_section(raw_data, config_path)
    unknown = sorted(set(reader) - _KNOWN_KEYS)
    if unknown:
        raise ReaderConfigError(
            f"{config_path}: unknown [reader] keys: {', '.join(unknown)}"
        )

    if "rate" in reader:
        settings = replace(settings, rate=_coerce_rate(reader["rate"], config_path))
    if "rate_delta" in reader:
        settings = replace(
            settings, rate_delta=_coerce_rate_delta(reader["rate_delta"], config_path)
        )
    if "emphasis" in reader:
        emphasis = reader["emphasis"]
        if not isinstance(emphasis, bool):
            raise ReaderConfigError(f"{config_path}: emphasis must be true or false")
        settings = replace(settings, emphasis=emphasis)
    return settings


def _parse_reader_section(data: Mapping[str, Any], config_path: Path) -> Mapping[str, Any]:
    reader = data.get("reader")
    if reader is None:
        raise ReaderConfigError(f"{config_path}: configuration requires a [reader] table")
    if not isinstance(reader, Mapping):
        raise ReaderConfigError(f"{config_path}: [reader] section must be a table")
    return reader


def _coerce_rate(raw_rate: Any, config_path: Path) -> int:
    if isinstance(raw_rate, bool):
        raise ReaderConfigError(f"{config_path}: rate must be a number or rate string")
    if isinstance(raw_rate, int):
        if raw_rate <= 0:
            raise ReaderConfigError(f"{config_path}: rate must be positive")
        return raw_rate
    if isinstance(raw_rate, str):
        rate = parse_rate_strict(raw_rate.strip())
        if rate is None:
            raise ReaderConfigError(f"{config_path}: invalid rate: {raw_rate!r}")
        return rate
    raise ReaderConfigError(f"{config_path}: rate must be a number or rate string")


def _coerce_rate_delta(raw_delta: Any, config_path: Path) -> int:
    if isinstance(raw_delta, bool) or not isinstance(raw_delta, int):
        raise ReaderConfigError(f"{config_path}: rate_delta must be an integer")
    if raw_delta <= 0:
        raise ReaderConfigError(f"{config_path}: rate_delta must be positive")
    return raw_delta


def resolve_settings(
    *,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    rate: int | None = None,
    emphasis: bool | None = None,
) -> ReaderSettings:
    """Combine configuration sources, later ones overriding earlier ones.

    Order: built-in defaults, ``config_path``, ``RQ_RATE`` and finally the
    explicit ``rate``/``emphasis`` arguments from the command line.
    """

    settings = ReaderSettings()
    if config_path is not None:
        settings = load_reader_config(config_path, base=settings)
        LOGGER.info("Loaded reader configuration from %s", config_path)

    env = os.environ if environ is None else environ
    raw_rate = env.get(RATE_ENVIRONMENT_VARIABLE)
    if raw_rate:
        env_rate = parse_rate(raw_rate, default=settings.rate)
        if parse_rate_strict(raw_rate) is None:
            LOGGER.warning(
                "Ignoring invalid %s=%r; using %d words per minute",
                RATE_ENVIRONMENT_VARIABLE,
                raw_rate,
                env_rate,
            )
        settings = replace(settings, rate=env_rate)

    if rate is not None:
        settings = replace(settings, rate=rate)
    if emphasis is not None:
        settings = replace(settings, emphasis=emphasis)

    LOGGER.info(
        "Reading at %d words per minute (step %d, emphasis %s)",
        settings.rate,
        settings.rate_delta,
        "on" if settings.emphasis else "off",
    )
    return settings


__all__ = [
    "RATE_ENVIRONMENT_VARIABLE",
    "ReaderConfigError",
    "ReaderSettings",
    "load_reader_config",
    "resolve_settings",
]
