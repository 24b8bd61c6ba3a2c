"""
Logging setup.
"""

import logging
import os
from typing import Optional


def setup_logging(log_path: Optional[str], log_level: str = "INFO") -> None:
    """
    Configure the root logger.

    The terminal is taken over by the renderer, so records only ever go to
    a file. Without a log path they are discarded.
    """
    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers = [logging.FileHandler(log_path)]
    else:
        handlers = [logging.NullHandler()]

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )
