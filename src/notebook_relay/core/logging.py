"""
Logging setup for the relay service.
"""

import sys

from loguru import logger


def setup_logging(
    service_name: str = "notebook-relay",
    log_level: str = "INFO",
    enable_json: bool = False,
):
    """
    Configure loguru with a single stdout sink.

    Args:
        service_name: Name shown in every log line
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json: Emit serialized JSON records instead of text
    """
    logger.remove()

    if enable_json:
        logger.add(sys.stdout, level=log_level.upper(), serialize=True)
    else:
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
            f"{service_name}:<cyan>{{function}}</cyan>:<cyan>{{line}}</cyan> - <level>{{message}}</level>"
        )
        logger.add(
            sys.stdout,
            format=log_format,
            level=log_level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    logger.info("Logging configured for {} at level: {}", service_name, log_level)


def mask_secret(value: str | None, visible: int = 10) -> str:
    """Show only the first characters of a secret."""
    if not value:
        return "<unset>"
    return value[:visible] + "..."
