"""Logging helpers shared by the combotable modules."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .intents import Intent

# Environment switches:
#   LOG_LEVEL=DEBUG / INFO / WARNING / ERROR
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Call once at program start."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_intent(
    logger: logging.Logger,
    intent: "Intent",
    note: str = "",
    level: int = logging.INFO,
) -> None:
    """One-line summary of an intent handed to the transport."""

    base = f"[INTENT][OUT] {intent.event}"
    if note:
        base += f" | {note}"
    base += f" | payload={intent.payload()}"
    logger.log(level, base)
