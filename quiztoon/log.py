"""Logging setup for quiztoon.

Modules log through ``logging.getLogger(__name__)``; only entry points call
:func:`init`.
"""

from __future__ import annotations

import logging
import sys

__all__ = ["logger", "init"]

logger = logging.getLogger("quiztoon")

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def init(level: int | str = logging.INFO) -> None:
    """Attach a stderr handler to the package logger (idempotent)."""
    if not any(getattr(h, "_quiztoon", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        handler._quiztoon = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(level)
