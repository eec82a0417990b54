"""Logging configuration for the command line entry points."""
from __future__ import annotations

import logging
import sys
from pathlib import Path


def setup_logging(level: str | int = logging.WARNING, log_file: Path | None = None) -> None:
    """Send logs to stderr at ``level`` and, optionally, everything to ``log_file``.

    Pre-existing root handlers are removed, so repeated calls do not
    duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(fmt)
    root.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    logging.captureWarnings(True)
