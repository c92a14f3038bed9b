"""Central logging configuration using loguru."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from specmatrix.config import SpecMatrixSettings

_LOGGER_CONFIGURED = False


def configure_logging(settings: SpecMatrixSettings, level: str = "INFO") -> None:
    """Route logs to stderr and a rotating file, once per process."""

    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    log_dir: Path = settings.paths.logs_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.configure(extra={"context": "specmatrix"})
    # stdout carries the report, so console logs go to stderr
    logger.add(
        sys.stderr,
        level=level,
        colorize=True,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {extra[context]} | {message}",
    )
    logger.add(
        log_dir / "specmatrix.log",
        level="DEBUG",
        rotation="1 week",
        retention=4,
        compression="zip",
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )

    _LOGGER_CONFIGURED = True


def get_logger(name: str | None = None):
    return logger.bind(context=name or "specmatrix")
