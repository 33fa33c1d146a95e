"""
loguru sinks for the service.

Console output always; a rotating file sink in production. ``LOG_LEVEL``
overrides the per-environment default.
"""
import sys
from loguru import logger
from eventspotter.core.config import Settings, settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def _default_level(environment: str) -> str:
    return "DEBUG" if environment == "development" else "INFO"


def configure_logging(config: Settings) -> None:
    """Replace loguru's default handler with the service's sinks."""
    level = config.LOG_LEVEL or _default_level(config.ENVIRONMENT)
    logger.remove()
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=level, colorize=config.ENVIRONMENT != "test")

    if config.ENVIRONMENT == "production":
        logger.add(
            config.LOG_FILE,
            rotation="500 MB",
            retention="10 days",
            compression="zip",
            format=FILE_FORMAT,
            level=level,
        )


configure_logging(settings)

__all__ = ["logger", "configure_logging"]
