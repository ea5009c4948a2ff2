"""
Logging configuration — one call at process start, from ``pgbridge.main``.

Every module logs through ``logger = logging.getLogger(__name__)``; this
module only decides where records go and how they look.

    stderr   always (stdout carries the MCP stdio transport; a stray line
             there corrupts the protocol stream)
    file     optional, ``logFile`` / PGBRIDGE_LOG_FILE

Levels are resolved in precedence order:
    CLI flag  >  LOG_LEVEL env var  >  pgbridge.yml  >  INFO (default)
"""

from __future__ import annotations

import logging
import sys

# Console format per threshold: (max level, format, datefmt)
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%H:%M:%S"),
)
_CONSOLE_DEFAULT = ("[%(levelname)s] %(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Chatty below WARNING: HTTP stacks and the MCP SDK's per-message logs
_NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "anyio", "mcp")

_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


def _console_format(numeric_level: int) -> tuple[str, str | None]:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if numeric_level <= threshold:
            return fmt, datefmt
    return _CONSOLE_DEFAULT


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (debug, info, warn/warning, error).
        log_file: Optional path of a log file to append to.
        log_file_level: Separate level for the file; defaults to ``level``.
        quiet_third_party: Hold noisy third-party loggers at WARNING unless
            the console is at DEBUG.
    """
    console_level = parse_level(level)
    fmt, datefmt = _console_format(console_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(fh)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # A failing handler must never take a tool call down with it
    logging.raiseExceptions = False


def parse_level(level: str | None) -> int:
    """Level name to numeric constant; unknown or empty means INFO."""
    if not level:
        return logging.INFO
    name = level.strip().upper()
    numeric = getattr(logging, _LEVEL_ALIASES.get(name, name), None)
    return numeric if isinstance(numeric, int) else logging.INFO
