"""Logging setup for the shopping planner.

Every module logs through ``logging.getLogger(__name__)``, so all of
them sit under the ``src`` logger configured here. Entry points call
``setup_logging`` once; library code never configures handlers.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP connection chatter from requests' transport layer.
_NOISY_LOGGERS = ("urllib3",)


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "src",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a single stdout handler to the project logger.

    Calling it again only changes the level, so a CLI flag like
    ``--verbose`` can raise verbosity after an earlier setup.

    Args:
        level: Level for the project logger and its handler.
        module_name: Logger to configure; "src" covers the whole tree.
        stream: Output stream (default stdout).

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger
