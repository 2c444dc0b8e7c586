"""
Advisor Back Office - Logger Configuration
Centralized logging with loguru
"""
import sys
from pathlib import Path
from loguru import logger

from backoffice.config import settings


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(
    level: str | None = None,
    log_to_file: bool | None = None,
    log_dir: str | None = None,
) -> None:
    """
    Configure loguru sinks.

    Replaces the default handler with a colorized console sink and,
    when enabled, rotating file sinks for all logs and for errors only.

    Args:
        level: Console log level (defaults to DEBUG in debug mode, else LOG_LEVEL)
        log_to_file: Whether to add file sinks (defaults to LOG_TO_FILE)
        log_dir: Directory for log files (defaults to LOG_DIR)
    """
    if level is None:
        level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
    if log_to_file is None:
        log_to_file = settings.LOG_TO_FILE

    # Remove default handler
    logger.remove()

    logger.add(
        sys.stdout,
        colorize=True,
        format=CONSOLE_FORMAT,
        level=level,
    )

    if not log_to_file:
        return

    log_path = Path(log_dir or settings.LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)

    # File handler for all logs
    logger.add(
        log_path / "app.log",
        rotation="10 MB",
        retention="30 days",
        compression="gz",
        format=FILE_FORMAT,
        level="DEBUG",
    )

    # File handler for errors only
    logger.add(
        log_path / "error.log",
        rotation="10 MB",
        retention="30 days",
        compression="gz",
        format=FILE_FORMAT,
        level="ERROR",
    )


# Export configured logger
__all__ = ["logger", "setup_logging"]
