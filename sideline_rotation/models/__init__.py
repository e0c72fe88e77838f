"""
Models package for the Sideline Rotation engine.

This package contains the immutable data models shared by every service.
"""
from .player import Player, PlayerStats, PlayerStatus, PlayerRole
from .team_config import (
    TeamConfiguration, TeamConfigurationError, SubstitutionType, ModeDefinition,
    get_mode_definition, GOALIE_SLOT, PAIR_DEFENDER, PAIR_ATTACKER
)
from .formation import Formation, Pair
from .substitution_record import QueuePointers, SubstitutionRecord, SubTimerRestore
from .game_state import GameState
from .animation import (
    AnimationType, AnimationPhase, AnimationState, PlayerAnimation, PlayerPosition
)
from .match_clock import MatchClock
from .rotation_report import RotationReport, PlayerTimeSummary

__all__ = [
    "Player", "PlayerStats", "PlayerStatus", "PlayerRole",
    "TeamConfiguration", "TeamConfigurationError", "SubstitutionType",
    "ModeDefinition", "get_mode_definition", "GOALIE_SLOT", "PAIR_DEFENDER",
    "PAIR_ATTACKER", "Formation", "Pair", "QueuePointers", "SubstitutionRecord",
    "SubTimerRestore", "GameState", "AnimationType", "AnimationPhase",
    "AnimationState", "PlayerAnimation", "PlayerPosition", "MatchClock",
    "RotationReport", "PlayerTimeSummary"
]
