"""
Sideline Rotation

Substitution rotation and playing-time accounting for youth team-sport
matches: fair rotation across pairs and individual formations, inactive
substitutes, goalie changes and single-level undo.

This package provides the in-process engine and a Flask web API around it.
"""
from .models import GameState, Player, TeamConfiguration, SubstitutionType
from .services import (
    MatchSession, TimerService, AnimationOrchestrator, build_game_state,
    calculate_substitution, calculate_undo, get_player_time_stats
)
from .ui import create_app, run_web_app
from .utils import now_ts, APP_TITLE

__version__ = "1.0.0"
__author__ = "Sideline Rotation Development Team"

__all__ = [
    "GameState", "Player", "TeamConfiguration", "SubstitutionType",
    "MatchSession", "TimerService", "AnimationOrchestrator", "build_game_state",
    "calculate_substitution", "calculate_undo", "get_player_time_stats",
    "create_app", "run_web_app", "now_ts", "APP_TITLE"
]
