"""
Player model for the Sideline Rotation engine.

This module contains the Player dataclass and the per-player time tracking
record that the rotation engine updates on every lineup transition.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional


class PlayerStatus(Enum):
    """Where a player currently is."""
    ON_FIELD = "on_field"
    BENCH = "bench"
    GOALIE = "goalie"


class PlayerRole(Enum):
    """Field role of a player; bench and goalie players carry NONE."""
    ATTACKER = "attacker"
    DEFENDER = "defender"
    MIDFIELDER = "midfielder"
    NONE = "none"


@dataclass(frozen=True)
class PlayerStats:
    """
    Time tracking record for one player.

    Attributes:
        current_status: On field, on the bench or in goal
        current_role: Role implied by the occupied slot
        current_pair_key: Slot identifier currently occupied
        is_inactive: Whether the player is parked and skipped by rotation
        time_on_field_seconds: Accumulated outfield time from closed stints
        time_as_attacker_seconds: Accumulated time in attacking slots
        time_as_defender_seconds: Accumulated time in defending slots
        time_as_midfielder_seconds: Accumulated time in midfield slots
        time_as_goalie_seconds: Accumulated time in goal
        last_stint_start_time_epoch: Start of the open stint (epoch seconds)
    """
    current_status: PlayerStatus = PlayerStatus.BENCH
    current_role: PlayerRole = PlayerRole.NONE
    current_pair_key: Optional[str] = None
    is_inactive: bool = False
    time_on_field_seconds: int = 0
    time_as_attacker_seconds: int = 0
    time_as_defender_seconds: int = 0
    time_as_midfielder_seconds: int = 0
    time_as_goalie_seconds: int = 0
    last_stint_start_time_epoch: Optional[float] = None

    @property
    def has_open_stint(self) -> bool:
        return self.last_stint_start_time_epoch is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "current_status": self.current_status.value,
            "current_role": self.current_role.value,
            "current_pair_key": self.current_pair_key,
            "is_inactive": self.is_inactive,
            "time_on_field_seconds": self.time_on_field_seconds,
            "time_as_attacker_seconds": self.time_as_attacker_seconds,
            "time_as_defender_seconds": self.time_as_defender_seconds,
            "time_as_midfielder_seconds": self.time_as_midfielder_seconds,
            "time_as_goalie_seconds": self.time_as_goalie_seconds,
            "last_stint_start_time_epoch": self.last_stint_start_time_epoch,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlayerStats":
        """Create from dictionary for JSON deserialization."""
        if not data:
            return cls()
        return cls(
            current_status=PlayerStatus(data.get("current_status", PlayerStatus.BENCH.value)),
            current_role=PlayerRole(data.get("current_role", PlayerRole.NONE.value)),
            current_pair_key=data.get("current_pair_key"),
            is_inactive=bool(data.get("is_inactive", False)),
            time_on_field_seconds=int(data.get("time_on_field_seconds", 0)),
            time_as_attacker_seconds=int(data.get("time_as_attacker_seconds", 0)),
            time_as_defender_seconds=int(data.get("time_as_defender_seconds", 0)),
            time_as_midfielder_seconds=int(data.get("time_as_midfielder_seconds", 0)),
            time_as_goalie_seconds=int(data.get("time_as_goalie_seconds", 0)),
            last_stint_start_time_epoch=data.get("last_stint_start_time_epoch"),
        )


@dataclass(frozen=True)
class Player:
    """
    Represents a squad member.

    Attributes:
        id: Unique identifier used by formations and the rotation queue
        name: Display name
        number: Optional jersey number
        stats: Current time tracking record
    """
    id: str
    name: str
    number: Optional[int] = None
    stats: PlayerStats = field(default_factory=PlayerStats)

    def with_stats(self, stats: PlayerStats) -> "Player":
        """Return a copy of this player carrying ``stats``."""
        return replace(self, stats=stats)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "number": self.number,
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Create from dictionary for JSON deserialization."""
        number = data.get("number")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or str(data["id"]),
            number=int(number) if number is not None else None,
            stats=PlayerStats.from_dict(data.get("stats")),
        )
