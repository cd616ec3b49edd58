from __future__ import annotations

import sys

from loguru import logger

from jewelgst.config import settings


def configure_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with one at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level or ("DEBUG" if settings.DEBUG else settings.LOG_LEVEL),
        backtrace=settings.DEBUG,
        diagnose=settings.DEBUG,
    )
