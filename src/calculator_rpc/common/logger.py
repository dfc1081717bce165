"""Package-wide logger."""
import logging
import sys

LOGGER_NAME = "calculator_rpc"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stream handler to the package logger and set its level.

    Calling it again only updates the level.

    :param str level: Logging level name (DEBUG, INFO, ...)

    :return: The configured package logger
    :rtype: logging.Logger
    """
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
