from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    logger = logging.getLogger("matleiden")
    logger.setLevel(level)
    logger.handlers.clear()

    ch = logging.StreamHandler(stream=sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(ch)
    logger.propagate = False

    if log_file is not None:
        attach_file_handler(logger, log_file)
    return logger


def attach_file_handler(logger: logging.Logger, log_file: Path) -> None:
    """Mirror the logger into `log_file` (the CLI uses <run_dir>/run.log)."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(logger.level)
    fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(fh)
