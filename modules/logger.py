import sys

from loguru import logger

import settings

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)


def configure_logging(level: str = None, log_file: str = None) -> None:
    """Replace loguru's default sink with the app's stderr and file sinks."""
    logger.remove()
    logger.add(sys.stderr, level=level or settings.LOG_LEVEL, format=LOG_FORMAT)

    if log_file:
        logger.add(log_file, level="DEBUG", rotation="10 MB", retention=5)


__all__ = ["logger", "configure_logging"]
