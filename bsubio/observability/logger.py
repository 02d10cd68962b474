"""
Logger configuration.

The library itself only creates module loggers; configure_logging() is
called by the command line entry point (or by applications that want the
same format).
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with ISO timestamps and a plain text format."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    # One line per request is too much at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Args:
        name: Logger name (usually __name__)
    """
    return logging.getLogger(name)
