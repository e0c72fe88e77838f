"""
Undo log entries for the Sideline Rotation engine.

A :class:`SubstitutionRecord` holds everything needed to reverse exactly one
rotation. Only the most recent record is ever kept.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .formation import Formation
from .player import PlayerStats
from .team_config import TeamConfiguration


@dataclass(frozen=True)
class QueuePointers:
    """Rotation queue and the next/next-next pointers derived from it."""
    rotation_queue: Tuple[str, ...] = ()
    next_physical_pair_to_sub_out: Optional[str] = None
    next_player_to_sub_out: Optional[str] = None
    next_player_id_to_sub_out: Optional[str] = None
    next_next_player_id_to_sub_out: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rotation_queue": list(self.rotation_queue),
            "next_physical_pair_to_sub_out": self.next_physical_pair_to_sub_out,
            "next_player_to_sub_out": self.next_player_to_sub_out,
            "next_player_id_to_sub_out": self.next_player_id_to_sub_out,
            "next_next_player_id_to_sub_out": self.next_next_player_id_to_sub_out,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueuePointers":
        return cls(
            rotation_queue=tuple(data.get("rotation_queue", [])),
            next_physical_pair_to_sub_out=data.get("next_physical_pair_to_sub_out"),
            next_player_to_sub_out=data.get("next_player_to_sub_out"),
            next_player_id_to_sub_out=data.get("next_player_id_to_sub_out"),
            next_next_player_id_to_sub_out=data.get("next_next_player_id_to_sub_out"),
        )


@dataclass(frozen=True)
class SubstitutionRecord:
    """
    Snapshot sufficient to reverse one completed rotation.

    Attributes:
        timestamp: When the rotation happened (epoch seconds)
        before_formation: Formation prior to the rotation
        before_pointers: Rotation queue and pointers prior to the rotation
        players_coming_on_ids: Players who moved onto the field or into goal
        players_going_off_ids: Players who moved to the bench or out of goal
        player_stats_before: Pre-rotation stats of every player whose stats changed
        team_config: Team configuration in effect
        sub_timer_seconds_at_substitution: Substitution timer value before the rotation
    """
    timestamp: float
    before_formation: Formation
    before_pointers: QueuePointers
    players_coming_on_ids: Tuple[str, ...]
    players_going_off_ids: Tuple[str, ...]
    player_stats_before: Dict[str, PlayerStats] = field(default_factory=dict)
    team_config: Optional[TeamConfiguration] = None
    sub_timer_seconds_at_substitution: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp,
            "before_formation": self.before_formation.to_dict(),
            "before_pointers": self.before_pointers.to_dict(),
            "players_coming_on_ids": list(self.players_coming_on_ids),
            "players_going_off_ids": list(self.players_going_off_ids),
            "player_stats_before": {
                pid: stats.to_dict() for pid, stats in self.player_stats_before.items()
            },
            "team_config": self.team_config.to_dict() if self.team_config else None,
            "sub_timer_seconds_at_substitution": self.sub_timer_seconds_at_substitution,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubstitutionRecord":
        """Create from dictionary for JSON deserialization."""
        config = data.get("team_config")
        return cls(
            timestamp=float(data["timestamp"]),
            before_formation=Formation.from_dict(data.get("before_formation", {})),
            before_pointers=QueuePointers.from_dict(data.get("before_pointers", {})),
            players_coming_on_ids=tuple(data.get("players_coming_on_ids", [])),
            players_going_off_ids=tuple(data.get("players_going_off_ids", [])),
            player_stats_before={
                pid: PlayerStats.from_dict(stats)
                for pid, stats in data.get("player_stats_before", {}).items()
            },
            team_config=TeamConfiguration.from_dict(config) if config else None,
            sub_timer_seconds_at_substitution=int(
                data.get("sub_timer_seconds_at_substitution", 0)
            ),
        )


@dataclass(frozen=True)
class SubTimerRestore:
    """Signal asking the timer owner to show ``seconds`` as of ``anchor_ts``."""
    seconds: int
    anchor_ts: float

    def to_dict(self) -> Dict[str, Any]:
        return {"seconds": self.seconds, "anchor_ts": self.anchor_ts}
