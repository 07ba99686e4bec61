"""Command-line entry point: ``rq [options] [FILE]``."""

from __future__ import annotations

import argparse
import contextlib
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO, Mapping, Sequence

from ..config import ReaderSettings, resolve_settings
from ..errors import EXIT_SUCCESS, ReaderError, ReaderIOError
from ..rate import parse_rate_strict
from ..source import STDIN_PATH, load_text
from ..tokenizer import Token, tokenize
from .commands import CommandInterpreter, TerminalInput
from .engine import EngineState, PresentationEngine
from .renderer import Renderer
from .signals import PendingSignals, install_signal_handlers
from .terminal import TerminalGeometry, TerminalSession
from .timer import PacingTimer

LOGGER = logging.getLogger(__name__)

PROG = "rq"
DEFAULT_TTY_PATH = "/dev/tty"
STDOUT_FILENO = 1


def _rate_argument(value: str) -> int:
    rate = parse_rate_strict(value.strip())
    if rate is None:
        raise argparse.ArgumentTypeError(
            f"invalid rate {value!r} (expected e.g. 300, 300wpm or 5hz)"
        )
    return rate


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed arguments for the reader CLI."""

    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Flash a text one word at a time in the middle of the terminal.",
        epilog=(
            "Keys: + faster, - slower, p pause/resume, q quit, "
            "up/left previous word, down/right next word."
        ),
    )
    parser.add_argument(
        "file",
        nargs="?",
        default=STDIN_PATH,
        help="Text to read; '-' or no argument reads standard input",
    )
    parser.add_argument(
        "--rate",
        type=_rate_argument,
        default=None,
        help="Initial rate, e.g. 300, 300wpm, 5wps or 5hz (overrides RQ_RATE)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML file with a [reader] table",
    )
    parser.add_argument(
        "--no-emphasis",
        dest="emphasis",
        action="store_const",
        const=False,
        default=None,
        help="Do not draw immediately repeated words in reverse video",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write log records to this file instead of standard error",
    )
    return parser.parse_args(argv)


def configure_logging(level: str, log_file: Path | None = None) -> None:
    # Why: records written to stderr would land on the alternate screen mid-session.
    if log_file is not None:
        logging.basicConfig(level=getattr(logging, level), filename=str(log_file))
    else:
        logging.basicConfig(level=getattr(logging, level))


def open_terminal(path: str = DEFAULT_TTY_PATH) -> int:
    """Open the controlling terminal for keyboard input."""

    try:
        return os.open(path, os.O_RDONLY)
    except OSError as exc:
        raise ReaderIOError.from_os_error(f"cannot open {path}", exc) from exc


def _output_fd(output: BinaryIO) -> int:
    try:
        return output.fileno()
    except (AttributeError, OSError):
        return STDOUT_FILENO


def run_session(
    tokens: Sequence[Token],
    settings: ReaderSettings,
    *,
    output: BinaryIO,
    tty_path: str = DEFAULT_TTY_PATH,
) -> EngineState:
    """Present ``tokens`` on ``output`` while reading keys from ``tty_path``."""

    tty_fd = open_terminal(tty_path)
    try:
        pending = PendingSignals()
        with contextlib.ExitStack() as stack:
            wakeup_fd = stack.enter_context(install_signal_handlers(pending))
            stack.enter_context(TerminalSession(tty_fd, output))
            engine = PresentationEngine(
                tokens,
                renderer=Renderer(output),
                timer=PacingTimer(pending),
                geometry=TerminalGeometry(pending, fd=_output_fd(output)),
                rate=settings.rate,
                rate_delta=settings.rate_delta,
            )
            interpreter = CommandInterpreter(TerminalInput(tty_fd, wakeup_fd), pending)
            return engine.run(interpreter)
    finally:
        os.close(tty_fd)


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
    environ: Mapping[str, str] | None = None,
    tty_path: str = DEFAULT_TTY_PATH,
) -> int:
    """Entry point for the reader CLI."""

    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)
    output = stdout if stdout is not None else sys.stdout.buffer
    try:
        settings = resolve_settings(
            config_path=args.config,
            environ=environ,
            rate=args.rate,
            emphasis=args.emphasis,
        )
        text = load_text(args.file, stdin=stdin)
        tokens = tokenize(text, emphasis=settings.emphasis)
        LOGGER.info("Loaded %d words from %s", len(tokens), args.file)
        run_session(tokens, settings, output=output, tty_path=tty_path)
    except ReaderError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return exc.exit_code
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main())


__all__ = [
    "DEFAULT_TTY_PATH",
    "configure_logging",
    "main",
    "open_terminal",
    "parse_args",
    "run_session",
]
