"""Configuration: data file locations and log level from environment."""

import logging
import os
from pathlib import Path

DEFAULT_DATA_PATH = './data'
DEFAULT_ASTEROID_FILE = 'asteroids.json'
DEFAULT_COMET_FILE = 'comets.json'
DEFAULT_GRS_FILE = 'grs_longitude.txt'
DEFAULT_LOG_LEVEL = 'WARNING'

_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def get_data_path() -> str:
    """Return the catalog data directory (SKYEPHEM_DATA_PATH or default)."""
    return os.environ.get('SKYEPHEM_DATA_PATH', DEFAULT_DATA_PATH)


def _resolve(name: str) -> str:
    path = Path(name)
    if path.is_absolute():
        return str(path)
    return str(Path(get_data_path()) / path)


def get_asteroid_file() -> str:
    """Return path of the asteroid element table (SKYEPHEM_ASTEROIDS)."""
    return _resolve(os.environ.get('SKYEPHEM_ASTEROIDS', DEFAULT_ASTEROID_FILE))


def get_comet_file() -> str:
    """Return path of the comet element table (SKYEPHEM_COMETS)."""
    return _resolve(os.environ.get('SKYEPHEM_COMETS', DEFAULT_COMET_FILE))


def get_grs_file() -> str:
    """Return path of the Great Red Spot longitude table (SKYEPHEM_GRS)."""
    return _resolve(os.environ.get('SKYEPHEM_GRS', DEFAULT_GRS_FILE))


def get_log_level() -> int:
    """Return the package log level (SKYEPHEM_LOG_LEVEL, default WARNING).

    Unrecognized names fall back to the default.
    """
    name = os.environ.get('SKYEPHEM_LOG_LEVEL', DEFAULT_LOG_LEVEL).strip().upper()
    if name not in _LOG_LEVELS:
        name = DEFAULT_LOG_LEVEL
    return getattr(logging, name)


def configure_logging(level: int | None = None) -> None:
    """Set the level of the ``skyephem`` logger hierarchy.

    Handlers are left to the host application.
    """
    logging.getLogger('skyephem').setLevel(get_log_level() if level is None else level)
