"""
Logging infrastructure for the referral matching service.

Uses Loguru for console and rotating file output. Modules obtain a bound
logger through get_logger(__name__).
"""

import sys
from typing import Any

from loguru import logger

from referral_match.utils.config import get_settings


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Sets up both console and file logging with appropriate formatting,
    rotation, and retention policies.
    """
    settings = get_settings()
    log_settings = settings.logging

    # Remove default handler
    logger.remove()

    # diagnose=False outside development so stack traces don't dump referral data
    enable_diagnose = settings.debug and settings.environment == "development"

    if log_settings.console_output:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>",
            level=log_settings.level,
            colorize=True,
            backtrace=True,
            diagnose=enable_diagnose,
        )

    # File handler with rotation
    log_file = log_settings.file_path
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        format=log_settings.format,
        level=log_settings.level,
        rotation=log_settings.rotation,
        retention=log_settings.retention,
        compression="zip",
        backtrace=True,
        diagnose=enable_diagnose,
        enqueue=True,
    )

    logger.info(f"Logging initialized - Level: {log_settings.level}")


def get_logger(name: str) -> Any:
    """
    Get a logger instance with the specified name.

    Args:
        name: The name for the logger (typically __name__)

    Returns:
        A configured logger instance
    """
    return logger.bind(name=name)


# Module-level logger for quick access
log = logger.bind(name="referral_match")
