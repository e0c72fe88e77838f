"""
Constants for the Sideline Rotation engine.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Sideline Rotation"

# Match timing defaults
DEFAULT_PERIOD_COUNT = 2
DEFAULT_PERIOD_LENGTH_MIN = 20
MIN_PERIOD_COUNT = 1
MAX_PERIOD_COUNT = 4

# Friendly labels for different period counts (used for UI hints)
PERIOD_LABELS = {
    1: "Full Time",
    2: "Half",
    3: "Third",
    4: "Quarter",
}

# Squad configuration
MIN_SQUAD_SIZE = 5
FIELD_PLAYERS_BY_FORMAT = {
    "5v5": 4,
    "7v7": 6,
}
MAX_SQUAD_SIZE_BY_FORMAT = {
    "5v5": 11,
    "7v7": 15,
}
FORMATIONS_BY_FORMAT = {
    "5v5": ["2-2", "1-2-1"],
    "7v7": ["2-2-2", "2-3-1"],
}
DEFAULT_FORMAT = "5v5"
DEFAULT_FORMATION = "2-2"
PAIRS_SQUAD_SIZE = 7

# Animation timing (milliseconds)
ANIMATION_DURATION_MS = 1000
GLOW_DURATION_MS = 900

# Position box measurements (pixels) used for animation distances
BOX_PADDING_PX = 16
BOX_BORDER_PX = 4
BOX_GAP_PX = 8
BOX_CONTENT_PAIRS_PX = 84
BOX_CONTENT_INDIVIDUAL_PX = 76
BOX_SPACING_FACTOR = 0.9025

# Rotation report
FAIRNESS_THRESHOLD_SECONDS = 120  # +/- 2 minutes regarded as notable variance
