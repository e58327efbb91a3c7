"""Logging configuration for programs that embed apiwiki.

The library itself only creates module loggers; handlers are the embedding
program's choice. Call configure_logging() before run_generation() to get
the standard format on stderr.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int = logging.INFO) -> None:
    """Apply the standard format to the root logger.

    Does nothing to a root logger that already has handlers.
    """
    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        level=level,
    )
