"""
Logging setup for the CLI.

Every module logs through `logging.getLogger(__name__)`; this module only wires
handlers and levels once per process.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"
LOG_ENV_VAR = "XMLSTRUCT_LOG"

LOG_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(level: str) -> int:
    """Map a level name to a logging level; unknown names fall back to INFO."""
    value = LOG_LEVELS.get((level or "").strip().lower())
    if value is None:
        print(f"Invalid log level '{level}', defaulting to INFO", file=sys.stderr)
        return logging.INFO
    return value


def init_logging(level: str, log_file: Optional[Path] = None) -> None:
    """
    Configure the root logger: stderr handler plus an optional UTF-8 file handler.
    The XMLSTRUCT_LOG environment variable, when set, overrides `level`.
    """
    effective = os.environ.get(LOG_ENV_VAR) or level
    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    logging.basicConfig(
        level=parse_log_level(effective),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
