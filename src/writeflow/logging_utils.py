"""Logging setup for the writeflow CLI.

Console output goes through rich so log lines share the terminal with the
CLI's tables and panels. A plain-text log file can be added for long sessions.
Third-party HTTP loggers are held at WARNING or above so ``--verbose`` shows
writeflow's own debug output without every request line.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("httpx", "httpcore", "anthropic")


def setup_logging(log_path: Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """Install the rich console handler (plus ``log_path`` if given) on the root logger."""
    handlers: list[logging.Handler] = [
        RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    ]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, FILE_DATE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, format="%(message)s", force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return logging.getLogger("writeflow")
