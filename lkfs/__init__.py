# lkfs/__init__.py
import logging
from importlib.metadata import version
from typing import Union

from .processing import (
    FilteredSamples,
    FilterKind,
    KWeightingFilter,
    Loudness,
    PowerStats,
    loudness_from_power,
)
from .utils import generate_sample

__version__ = version(__package__ or "lkfs")
from_gated_powers = Loudness.from_gated_powers
generate_sin_frames = generate_sample.generate_sin_frames
__all__ = [
    "FilterKind",
    "FilteredSamples",
    "KWeightingFilter",
    "Loudness",
    "PowerStats",
    "from_gated_powers",
    "generate_sin_frames",
    "loudness_from_power",
    "setup_lkfs_logging",
]


def setup_lkfs_logging(
    level: Union[str, int] = "INFO", add_handler: bool = True
) -> logging.Logger:
    """
    Convenience function to set the log level of the lkfs library

    Parameters
    ----------
    level : str or int
        Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
    add_handler : bool
        If True, add a handler writing to the console
    """
    if isinstance(level, str):
        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        level = level_map.get(level.upper(), logging.INFO)

    logger = logging.getLogger("lkfs")
    logger.setLevel(level)

    if add_handler and not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger
