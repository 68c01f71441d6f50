"""Logging setup for the command-line tool."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    verbose: bool = False,
    level: str = "WARNING",
    log_file: str | Path | None = None,
    console: Console | None = None,
) -> None:
    """Configure root logging.

    Console output goes through Rich. When a log file is given, errors are
    also appended to it with timestamps.

    Args:
        verbose: Log everything at DEBUG level.
        level: Level used when not verbose.
        log_file: Optional file for error records.
        console: Console for the Rich handler (stderr by default).
    """
    handlers: list[logging.Handler] = [
        RichHandler(console=console or Console(stderr=True), show_path=False)
    ]

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level="DEBUG" if verbose else level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )
