"""
Logging utility with loguru.
Provides console logging and an optional rotating file sink.
"""

import sys

from loguru import logger

from src.config.settings import settings, resolve_log_dir

_configured = False


def setup_logger(force: bool = False):
    """
    Configure loguru logger with console and (optionally) file outputs.

    Safe to call more than once; later calls are no-ops unless force=True.
    """
    global _configured
    if _configured and not force:
        return logger

    logger.remove()

    logger.add(
        sys.stdout,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level.upper(),
    )

    if settings.log_to_file:
        log_dir = resolve_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "assistant.log",
            rotation="10 MB",
            retention="1 week",
            compression="zip",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
        )

    _configured = True
    logger.info("Logger initialized")
    return logger
