"""Shared logging configuration for the command-line entry points.

Call ``configure_logging()`` once at a CLI entry point. If the root logger
already has handlers it only adjusts the level.
"""

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Attach a console handler to the root logger (once) and set its level."""
    if isinstance(level, str):
        level = level.upper()
    root = logging.getLogger()
    if not root.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(console)
    root.setLevel(level)
