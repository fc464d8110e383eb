# tracker_backend/settings.py
"""
Runtime settings for the productivity tracker.
Values come from environment variables, optionally seeded from a .env file.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

APP_DIR = os.path.join(os.path.dirname(__file__), '..')
DEFAULT_LOG_DIR = os.path.join(APP_DIR, 'data', 'logs')

DEFAULT_STREAK_THRESHOLD = 60.0
DEFAULT_TREND_MIN_REPORTS = 14
DEFAULT_WEIGHT_TOLERANCE = 0.1


@dataclass(frozen=True)
class TrackerSettings:
    streak_threshold: float
    trend_min_reports: int
    weight_tolerance: float
    log_dir: str
    log_level: str
    environment: str


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, '')
    if not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, '')
    if not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def load_settings() -> TrackerSettings:
    """Read settings from the environment (call again after changing env vars)."""
    return TrackerSettings(
        streak_threshold=_env_float('STREAK_THRESHOLD', DEFAULT_STREAK_THRESHOLD),
        trend_min_reports=_env_int('TREND_MIN_REPORTS', DEFAULT_TREND_MIN_REPORTS),
        weight_tolerance=_env_float('WEIGHT_TOLERANCE', DEFAULT_WEIGHT_TOLERANCE),
        log_dir=os.getenv('TRACKER_LOG_DIR') or DEFAULT_LOG_DIR,
        log_level=os.getenv('TRACKER_LOG_LEVEL', 'INFO').upper(),
        environment=os.getenv('ENVIRONMENT', 'development'),
    )
