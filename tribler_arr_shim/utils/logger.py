"""
Logging configuration using loguru.
"""
import sys
from loguru import logger
from tribler_arr_shim.config import Settings
from tribler_arr_shim.middleware.correlation import NO_CORRELATION_ID

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<dim>{extra[correlation_id]}</dim> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[correlation_id]} | {name}:{function}:{line} - {message}"


def setup_logger(settings: Settings):
    """Configure loguru sinks; request handlers add the correlation id to ``extra``."""
    level = "DEBUG" if settings.debug else settings.log_level.upper()

    # Replace the default handler, and give records logged outside a request a placeholder id
    logger.remove()
    logger.configure(extra={"correlation_id": NO_CORRELATION_ID})

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    # Optional file handler, rotated so a long-running shim cannot fill the disk
    if settings.log_file:
        logger.add(settings.log_file, format=FILE_FORMAT, level=level, rotation="10 MB", retention="7 days")

    logger.info(f"Logger initialized (level={level})")
