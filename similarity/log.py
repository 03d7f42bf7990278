"""Loguru configuration for command-line runs of the similarity solver."""

import sys

from loguru import logger


def setup_logging(level="INFO", show_time=True):
    """Configure loguru for command-line runs.

    The solver logs one line per shooting iteration at INFO and the
    convergence messages at SUCCESS/WARNING. Library use leaves loguru's
    default sink alone; call this to get the project format.

    Parameters
    ----------
    level : str
        Logging level (DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL)
    show_time : bool
        Whether to show timestamps in the output.
    """
    logger.remove()

    if show_time:
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | <level>{message}</level>"
        )
    else:
        log_format = "<level>{level: <8}</level> | <level>{message}</level>"

    logger.add(sys.stderr, format=log_format, level=level, colorize=True)
    return logger
