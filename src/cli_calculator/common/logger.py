"""Logger construction for the calculator application."""
import logging
import sys
from typing import Optional, TextIO

from cli_calculator.common.constants import APP_NAME


LOG_FORMAT = f"[%(asctime)s] [{APP_NAME}] [%(levelname)s] %(message)s"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_logger(
    name: str = "cli_calculator",
    verbose: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Create and configure the application logger.

    The logger is returned to the caller and handed explicitly to the
    components that log; nothing here is stored at module level.

    :param str name: Logger name
    :param bool verbose: Log at DEBUG level instead of INFO
    :param TextIO stream: Destination of log lines, stderr when omitted

    :return: Configured logger
    :rtype: logging.Logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    # Rebuilding replaces any handler installed by a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=TIME_FORMAT))
    logger.addHandler(handler)
    return logger
