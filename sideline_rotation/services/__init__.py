"""
Services package for the Sideline Rotation engine.

This package contains the rotation engine (time accounting, rotation queue,
formation transitions, undo, animation orchestration) and the services built
around it.
"""
from .time_accounting import (
    PlayerTimeStats, current_stint_duration, total_outfield_time,
    attack_defender_balance, get_player_time_stats, calculate_pause, calculate_resume
)
from .rotation_queue import RotationQueue, has_active_substitutes
from .formation_engine import (
    RotationError, InvalidTopologyOperation,
    calculate_substitution, calculate_next_substitution_target,
    calculate_position_switch, calculate_pair_role_swap,
    calculate_player_toggle_inactive, calculate_substitute_swap,
    calculate_substitute_promotion, calculate_goalie_switch, calculate_undo
)
from .animation_orchestrator import AnimationOrchestrator, AnimationCallbacks, immediate_scheduler
from .lineup_validator import LineupValidationError, LineupValidationService
from .match_setup import build_game_state, lineup_from_order
from .timer_service import TimerService
from .analytics_service import AnalyticsService
from .match_session import MatchSession, ActionResult

__all__ = [
    "PlayerTimeStats", "current_stint_duration", "total_outfield_time",
    "attack_defender_balance", "get_player_time_stats", "calculate_pause",
    "calculate_resume", "RotationQueue", "has_active_substitutes",
    "RotationError", "InvalidTopologyOperation", "calculate_substitution",
    "calculate_next_substitution_target", "calculate_position_switch",
    "calculate_pair_role_swap", "calculate_player_toggle_inactive",
    "calculate_substitute_swap", "calculate_substitute_promotion",
    "calculate_goalie_switch", "calculate_undo", "AnimationOrchestrator",
    "AnimationCallbacks", "immediate_scheduler", "LineupValidationError", "LineupValidationService",
    "build_game_state", "lineup_from_order", "TimerService", "AnalyticsService",
    "MatchSession", "ActionResult"
]
