"""Data structures describing playing-time fairness across the squad."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class PlayerTimeSummary:
    """Aggregated rotation metrics for a single player."""

    player_id: str
    name: str
    number: Optional[int]
    status: str
    role: str
    is_inactive: bool
    outfield_seconds: int
    goalie_seconds: int
    bench_seconds: int
    attack_defender_diff: int
    delta_seconds: int
    fairness: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "number": self.number,
            "status": self.status,
            "role": self.role,
            "is_inactive": self.is_inactive,
            "outfield_seconds": self.outfield_seconds,
            "goalie_seconds": self.goalie_seconds,
            "bench_seconds": self.bench_seconds,
            "attack_defender_diff": self.attack_defender_diff,
            "delta_seconds": self.delta_seconds,
            "fairness": self.fairness,
        }


@dataclass
class RotationReport:
    """Snapshot of playing-time distribution across the squad."""

    generated_ts: float
    elapsed_seconds: int
    players: List[PlayerTimeSummary] = field(default_factory=list)
    average_seconds: float = 0.0
    median_seconds: float = 0.0
    min_seconds: int = 0
    max_seconds: int = 0
    fairness_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def spread_seconds(self) -> int:
        return self.max_seconds - self.min_seconds

    def to_dict(self) -> Dict[str, object]:
        return {
            "generated_ts": self.generated_ts,
            "elapsed_seconds": self.elapsed_seconds,
            "players": [summary.to_dict() for summary in self.players],
            "average_seconds": self.average_seconds,
            "median_seconds": self.median_seconds,
            "min_seconds": self.min_seconds,
            "max_seconds": self.max_seconds,
            "spread_seconds": self.spread_seconds,
            "fairness_counts": dict(self.fairness_counts),
        }
