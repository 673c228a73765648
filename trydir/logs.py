"""Logging setup.

Stdout carries shell-evaluable output only and stderr doubles as the UI
stream, so stderr only receives warnings and errors. Debug detail goes to an
optional log file.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

STDERR_FORMAT = "<level>{level}</level>: {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def setup_logging(log_file: Path | None = None) -> None:
    logger.remove()
    logger.add(sys.stderr, format=STDERR_FORMAT, level="WARNING")
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, format=FILE_FORMAT, level="DEBUG", rotation="1 MB", retention=3)
