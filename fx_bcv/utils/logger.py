"""Logging utilities for the fx_bcv package."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None


def get_logger(name: str = "fx_bcv") -> logging.Logger:
    """Return a module-level logger configured with a simple formatter."""
    global _LOGGER
    if _LOGGER is None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        _LOGGER = logging.getLogger("fx_bcv")
    return logging.getLogger(name)


def set_verbosity(level: int) -> None:
    """Adjust the level of every ``fx_bcv`` logger at once (used by the CLI)."""

    logging.getLogger("fx_bcv").setLevel(level)
