"""
Team configuration model for the Sideline Rotation engine.

A :class:`TeamConfiguration` fixes the match format, squad size, formation and
substitution topology for the duration of a match. The slot layout that the
rotation engine works with is derived from it as a :class:`ModeDefinition`, so
every topology is described by data rather than by branches in the engine.
"""
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Tuple

from .player import PlayerRole
from ..utils.constants import (
    FIELD_PLAYERS_BY_FORMAT,
    FORMATIONS_BY_FORMAT,
    MAX_SQUAD_SIZE_BY_FORMAT,
    MIN_SQUAD_SIZE,
    PAIRS_SQUAD_SIZE,
)

GOALIE_SLOT = "goalie"
PAIR_DEFENDER = "defender"
PAIR_ATTACKER = "attacker"


class TeamConfigurationError(ValueError):
    """Raised when a team configuration cannot describe a playable match."""


class SubstitutionType(Enum):
    """Substitution topology."""
    PAIRS = "pairs"
    INDIVIDUAL = "individual"


D = PlayerRole.DEFENDER
M = PlayerRole.MIDFIELDER
A = PlayerRole.ATTACKER

# Field slots per formation, in display order.
FORMATION_LAYOUTS: Dict[str, Tuple[Tuple[str, PlayerRole], ...]] = {
    "2-2": (
        ("left_defender", D),
        ("right_defender", D),
        ("left_attacker", A),
        ("right_attacker", A),
    ),
    "1-2-1": (
        ("defender", D),
        ("left_midfielder", M),
        ("right_midfielder", M),
        ("attacker", A),
    ),
    "2-2-2": (
        ("left_defender", D),
        ("right_defender", D),
        ("left_midfielder", M),
        ("right_midfielder", M),
        ("left_attacker", A),
        ("right_attacker", A),
    ),
    "2-3-1": (
        ("left_defender", D),
        ("right_defender", D),
        ("left_midfielder", M),
        ("center_midfielder", M),
        ("right_midfielder", M),
        ("attacker", A),
    ),
}

PAIR_FIELD_SLOTS = ("left_pair", "right_pair")
PAIR_SUBSTITUTE_SLOT = "sub_pair"


@dataclass(frozen=True)
class ModeDefinition:
    """
    Slot layout derived from a team configuration.

    Attributes:
        topology: Pairs or individual substitution
        field_positions: Field slot identifiers in display order
        substitute_positions: Substitute slot identifiers, foremost first
        position_roles: Role implied by each field slot (individual mode)
        supports_inactive_users: Whether substitutes can be parked as inactive
        supports_next_next_indicators: Whether a second "next off" is shown
        substitute_rotation_pattern: simple, carousel, advanced_carousel or pairs
    """
    topology: SubstitutionType
    field_positions: Tuple[str, ...]
    substitute_positions: Tuple[str, ...]
    position_roles: Tuple[Tuple[str, PlayerRole], ...]
    supports_inactive_users: bool
    supports_next_next_indicators: bool
    substitute_rotation_pattern: str

    @property
    def is_pairs(self) -> bool:
        return self.topology is SubstitutionType.PAIRS

    @property
    def position_order(self) -> Tuple[str, ...]:
        """All slots top to bottom: goalie, field, substitutes."""
        return (GOALIE_SLOT,) + self.field_positions + self.substitute_positions

    def is_field_position(self, slot: str) -> bool:
        return slot in self.field_positions

    def is_substitute_position(self, slot: str) -> bool:
        return slot in self.substitute_positions

    def role_for(self, slot: str) -> PlayerRole:
        """Return the role implied by ``slot`` (NONE for goal and bench)."""
        for key, role in self.position_roles:
            if key == slot:
                return role
        return PlayerRole.NONE


@dataclass(frozen=True)
class TeamConfiguration:
    """
    Match-level team configuration.

    Attributes:
        format: Match format, ``5v5`` or ``7v7``
        squad_size: Number of players available including the goalie
        formation: Formation name valid for the format
        substitution_type: Pairs or individual rotation
    """
    format: str = "5v5"
    squad_size: int = 6
    formation: str = "2-2"
    substitution_type: SubstitutionType = SubstitutionType.INDIVIDUAL

    def __post_init__(self) -> None:
        errors = validate_team_config(self)
        if errors:
            raise TeamConfigurationError("; ".join(errors))

    @property
    def field_player_count(self) -> int:
        return FIELD_PLAYERS_BY_FORMAT[self.format]

    @property
    def substitute_count(self) -> int:
        """Number of outfield players starting on the bench."""
        return self.squad_size - 1 - self.field_player_count

    @property
    def mode(self) -> ModeDefinition:
        return get_mode_definition(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "format": self.format,
            "squad_size": self.squad_size,
            "formation": self.formation,
            "substitution_type": self.substitution_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeamConfiguration":
        """Create from dictionary; raises TeamConfigurationError when invalid."""
        try:
            substitution_type = SubstitutionType(
                data.get("substitution_type", SubstitutionType.INDIVIDUAL.value)
            )
            squad_size = int(data.get("squad_size", 6))
        except ValueError as exc:
            raise TeamConfigurationError(str(exc)) from exc
        return cls(
            format=data.get("format", "5v5"),
            squad_size=squad_size,
            formation=data.get("formation", "2-2"),
            substitution_type=substitution_type,
        )


def validate_team_config(config: TeamConfiguration) -> list:
    """Return a list of problems with ``config`` (empty when valid)."""
    errors = []
    if config.format not in FIELD_PLAYERS_BY_FORMAT:
        return [f"Unsupported format '{config.format}'"]

    if config.formation not in FORMATIONS_BY_FORMAT[config.format]:
        errors.append(
            f"Formation '{config.formation}' is not available for {config.format}"
        )

    max_size = MAX_SQUAD_SIZE_BY_FORMAT[config.format]
    min_size = max(MIN_SQUAD_SIZE, FIELD_PLAYERS_BY_FORMAT[config.format] + 1)
    if not min_size <= config.squad_size <= max_size:
        errors.append(
            f"Squad size must be between {min_size} and {max_size} for {config.format}"
        )

    if config.substitution_type is SubstitutionType.PAIRS:
        if config.format != "5v5" or config.formation != "2-2":
            errors.append("Pairs substitution requires the 5v5 2-2 formation")
        if config.squad_size != PAIRS_SQUAD_SIZE:
            errors.append(f"Pairs substitution requires a squad of {PAIRS_SQUAD_SIZE}")
    return errors


@lru_cache(maxsize=None)
def get_mode_definition(config: TeamConfiguration) -> ModeDefinition:
    """Build the slot layout for ``config``."""
    if config.substitution_type is SubstitutionType.PAIRS:
        return ModeDefinition(
            topology=SubstitutionType.PAIRS,
            field_positions=PAIR_FIELD_SLOTS,
            substitute_positions=(PAIR_SUBSTITUTE_SLOT,),
            position_roles=(),
            supports_inactive_users=False,
            supports_next_next_indicators=False,
            substitute_rotation_pattern="pairs",
        )

    layout = FORMATION_LAYOUTS[config.formation]
    substitutes = tuple(
        f"substitute_{index}" for index in range(1, config.substitute_count + 1)
    )
    if len(substitutes) <= 1:
        pattern = "simple"
    elif len(substitutes) == 2:
        pattern = "carousel"
    else:
        pattern = "advanced_carousel"

    return ModeDefinition(
        topology=SubstitutionType.INDIVIDUAL,
        field_positions=tuple(slot for slot, _ in layout),
        substitute_positions=substitutes,
        position_roles=layout,
        supports_inactive_users=bool(substitutes),
        supports_next_next_indicators=len(substitutes) >= 2,
        substitute_rotation_pattern=pattern,
    )
