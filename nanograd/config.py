"""
Runtime defaults for nanograd, read from the environment (or a .env file).

    NANOGRAD_LOG_LEVEL       logging level name, default WARNING
    NANOGRAD_LEARNING_RATE   default step size for train_step, default 0.01
    NANOGRAD_SEED            seed for weight initialisation, default unset

Nothing is read at import time; each accessor loads .env on first use and
then consults os.environ, so later changes to the environment are honoured.
"""

import logging
import os
from typing import Optional

import numpy as np
from dotenv import load_dotenv

_dotenv_loaded = False


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    global _dotenv_loaded
    if not _dotenv_loaded:
        load_dotenv()
        _dotenv_loaded = True
    return os.getenv(name, default)


def log_level() -> str:
    return _getenv("NANOGRAD_LOG_LEVEL", "WARNING").upper()


def learning_rate() -> float:
    raw = _getenv("NANOGRAD_LEARNING_RATE", "0.01")
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"NANOGRAD_LEARNING_RATE must be a number, got {raw!r}") from None


def seed() -> Optional[int]:
    raw = _getenv("NANOGRAD_SEED")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"NANOGRAD_SEED must be an integer, got {raw!r}") from None


def make_rng(seed_value: Optional[int] = None) -> np.random.Generator:
    """
    Return a numpy Generator for weight initialisation.
    Falls back to NANOGRAD_SEED, then to fresh OS entropy.
    """
    return np.random.default_rng(seed_value if seed_value is not None else seed())


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or log_level()).upper(),
        format="[%(levelname)s] %(name)s: %(message)s",
    )
