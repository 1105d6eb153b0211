"""Logging configuration.

The list is redrawn over the whole screen every cycle, so the console
handler only lets errors through; everything else goes to the log file.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Union

LOG_FILE_NAME = 'tasklist.log'


def setup_logging(
    *,
    log_dir: Union[str, Path],
    file_level: Union[int, str] = logging.INFO,
    console_level: int = logging.ERROR,
) -> Path:
    """Install a file handler and a quiet stderr handler on the root logger.

    Call once, before the first log line. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
