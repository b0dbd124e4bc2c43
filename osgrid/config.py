"""Application configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

from .grid.codec import VALID_DIGITS

# Load .env from project root
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path)


def _read_bool(name: str, default: bool) -> bool:
    """Read a boolean flag; accepts 1/0, true/false, yes/no, on/off."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _read_digits(name: str, default: int) -> int:
    """Read a grid reference precision, failing at startup if it is not 2, 4, 6, 8 or 10."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        digits = int(value)
    except ValueError:
        digits = None
    if digits not in VALID_DIGITS:
        raise ValueError(f"{name} must be one of {VALID_DIGITS}, got {value!r}")
    return digits


# CORS
CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Rate limiting
RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
RATE_LIMIT_ENABLED: bool = _read_bool("RATE_LIMIT_ENABLED", True)

# Grid conversion
GRID_DEFAULT_DIGITS: int = _read_digits("GRID_DEFAULT_DIGITS", 6)
# Off reproduces projecting WGS84 lat/lon directly, without the OSGB36 shift
GRID_DATUM_SHIFT: bool = _read_bool("GRID_DATUM_SHIFT", True)
GRID_MAX_ITERATIONS: int = int(os.getenv("GRID_MAX_ITERATIONS", "100"))
