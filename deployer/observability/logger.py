"""Logger construction for deployer components.

Components never look up module-level loggers; one handle is built at
startup and passed to every constructor that logs.
"""

import logging
from typing import Final, TextIO

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname).4s ▶ (%(funcName)s) %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y/%m/%d %H:%M:%S"


def observability_create_logger(stream: TextIO, level: str | int = "INFO", name: str = "deployer") -> logging.Logger:
    """Create a dedicated logger writing formatted records to one stream.

    Args:
        stream: Text stream receiving log records.
        level: Logging level name or numeric value.
        name: Logger name.

    Returns:
        logging.Logger: Logger with exactly one stream handler that does not propagate.

    Raises:
        ValueError: Raised when level name is unknown.
    """

    numeric_level = observability_resolve_level(level)

    logger = logging.getLogger(name)
    for existing_handler in list(logger.handlers):
        logger.removeHandler(existing_handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False
    return logger


def observability_resolve_level(level: str | int) -> int:
    """Resolve a logging level name or number to its numeric value.

    Args:
        level: Level name such as `DEBUG` or numeric level.

    Returns:
        int: Numeric logging level.

    Raises:
        ValueError: Raised when level name is unknown.
    """

    if isinstance(level, int):
        return level
    numeric_level = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric_level
