"""
brainbender/log.py – Centralised Loguru configuration
"""
from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


def configure_logger(level: str = "INFO", log_dir: Path | None = None) -> None:
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level,
        colorize=True,
    )
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "brainbender_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="7 days",
            level=level,
            encoding="utf-8",
        )
