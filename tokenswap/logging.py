"""Central logging configuration for TokenSwap."""

from __future__ import annotations

import logging
from logging import Logger
from typing import Union


def configure_logging(level: Union[int, str] = logging.INFO) -> Logger:
    """Configure and return the package logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("tokenswap")
