"""
Logging configuration for the cudaflags CLI.

stdout carries flags that build scripts capture verbatim
(``nvcc $(cudaflags flags --field gencode) ...``), so every log record
goes to stderr or to a file, never to stdout.

Levels are resolved in precedence order:
    --debug / --verbose / --quiet  >  CUDAFLAGS_LOG_LEVEL  >  WARNING

Optional file output via CUDAFLAGS_LOG_FILE / CUDAFLAGS_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, TextIO

ENV_LOG_LEVEL = "CUDAFLAGS_LOG_LEVEL"
ENV_LOG_FILE = "CUDAFLAGS_LOG_FILE"
ENV_LOG_FILE_LEVEL = "CUDAFLAGS_LOG_FILE_LEVEL"

# Warnings and errors read like CLI diagnostics
_FMT_CONSOLE = "cudaflags: %(levelname)s: %(message)s"

# -v / --debug add the emitting module
_FMT_DIAGNOSTIC = "%(asctime)s %(levelname)-5s %(name)s — %(message)s"
_DATEFMT_DIAGNOSTIC = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(ENV_LOG_LEVEL) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route all cudaflags logging to stderr (and optionally a file).

    Args:
        level: Console level name or number.
        log_file: Optional path to a log file.
        log_file_level: Level for the file (default: ``level``).
        stream: Console stream (default: ``sys.stderr``).
    """
    console_level = parse_level(level)

    if console_level < logging.WARNING:
        formatter = logging.Formatter(_FMT_DIAGNOSTIC, datefmt=_DATEFMT_DIAGNOSTIC)
    else:
        formatter = logging.Formatter(_FMT_CONSOLE)

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(root_level)


def setup_logging_from_env(
    level: str,
    environ: Mapping[str, str] | None = None,
) -> None:
    """``setup_logging`` with the file options taken from CUDAFLAGS_LOG_FILE*."""
    env = os.environ if environ is None else environ
    setup_logging(
        level=level,
        log_file=env.get(ENV_LOG_FILE) or None,
        log_file_level=env.get(ENV_LOG_FILE_LEVEL) or None,
    )


def parse_level(level: str | None) -> int:
    """``"debug"`` → ``logging.DEBUG``; ``"10"`` → 10; unknown → WARNING."""
    if not level:
        return logging.WARNING
    level = level.strip()
    if level.isdigit():
        return int(level)
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.WARNING
