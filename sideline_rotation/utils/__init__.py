"""
Utilities package for the Sideline Rotation engine.

This package contains utility functions and constants used throughout the application.
"""
from .time_utils import now_ts
from .constants import (
    APP_TITLE, ANIMATION_DURATION_MS, GLOW_DURATION_MS,
    DEFAULT_PERIOD_COUNT, DEFAULT_PERIOD_LENGTH_MIN, FAIRNESS_THRESHOLD_SECONDS
)

__all__ = [
    "now_ts", "APP_TITLE", "ANIMATION_DURATION_MS",
    "GLOW_DURATION_MS", "DEFAULT_PERIOD_COUNT", "DEFAULT_PERIOD_LENGTH_MIN",
    "FAIRNESS_THRESHOLD_SECONDS"
]
