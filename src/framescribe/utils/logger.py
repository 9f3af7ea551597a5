import logging
import os

LOG_FORMAT = "[{asctime}|{filename}:{funcName}:{lineno:d}]{levelname}  {message}"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
}


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the root logger for command line use.

    The level comes from ``level`` or the ``LOG_LEVEL`` environment variable, defaulting to info.
    """
    level_name = (level or os.environ.get("LOG_LEVEL", "info")).lower()
    logging_level = LOG_LEVELS.get(level_name, logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(logging_level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, style="{", datefmt="%H:%M:%S"))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(console_handler)

    return logger
