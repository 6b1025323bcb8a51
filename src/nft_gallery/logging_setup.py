"""Logging configuration"""

import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Replace loguru's default sink with a stderr sink and optional rotating file"""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
    if log_file:
        logger.add(log_file, level=level.upper(), rotation="10 MB", retention=5, enqueue=True)
