"""Animation state shared between the orchestrator and the UI layer."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class AnimationType(Enum):
    NONE = "none"
    GENERIC = "generic"


class AnimationPhase(Enum):
    IDLE = "idle"
    SWITCHING = "switching"
    COMPLETING = "completing"


@dataclass(frozen=True)
class PlayerPosition:
    """Where a player sits in the top-to-bottom slot order."""
    player_id: str
    position: str
    position_index: int
    pair_role: Optional[str] = None


@dataclass(frozen=True)
class PlayerAnimation:
    """Movement of one player between two slots."""
    player_id: str
    from_position: str
    to_position: str
    from_index: int
    to_index: int
    distance_px: float
    direction: str  # "up" or "down"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "from_position": self.from_position,
            "to_position": self.to_position,
            "from_index": self.from_index,
            "to_index": self.to_index,
            "distance_px": self.distance_px,
            "direction": self.direction,
        }


@dataclass(frozen=True)
class AnimationState:
    """Visual sequence state; idle between sequences."""
    type: AnimationType = AnimationType.NONE
    phase: AnimationPhase = AnimationPhase.IDLE
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_idle(self) -> bool:
        return self.phase is AnimationPhase.IDLE

    def to_dict(self) -> Dict[str, Any]:
        animations = self.data.get("animations", {})
        return {
            "type": self.type.value,
            "phase": self.phase.value,
            "data": {
                "animations": {
                    pid: anim.to_dict() for pid, anim in animations.items()
                }
            },
        }
