"""
Formation model for the Sideline Rotation engine.

A formation maps slot identifiers to the players occupying them. In
individual mode each slot holds one player id; in pairs mode each slot holds a
:class:`Pair` of defender and attacker.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .team_config import GOALIE_SLOT, PAIR_ATTACKER, PAIR_DEFENDER


@dataclass(frozen=True)
class Pair:
    """A bonded defender and attacker that rotate as one unit."""
    defender: Optional[str] = None
    attacker: Optional[str] = None

    def members(self) -> List[str]:
        return [pid for pid in (self.defender, self.attacker) if pid]

    def role_of(self, player_id: str) -> Optional[str]:
        if player_id == self.defender:
            return PAIR_DEFENDER
        if player_id == self.attacker:
            return PAIR_ATTACKER
        return None

    def with_member(self, pair_role: str, player_id: Optional[str]) -> "Pair":
        if pair_role == PAIR_DEFENDER:
            return replace(self, defender=player_id)
        return replace(self, attacker=player_id)

    def swapped(self) -> "Pair":
        return Pair(defender=self.attacker, attacker=self.defender)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"defender": self.defender, "attacker": self.attacker}


SlotValue = Union[Optional[str], Pair]


@dataclass(frozen=True)
class Formation:
    """
    Slot assignments for one moment of the match.

    Attributes:
        goalie: Player id in goal
        slots: Field and substitute slot assignments, in layout order
    """
    goalie: Optional[str] = None
    slots: Dict[str, SlotValue] = field(default_factory=dict)

    def get(self, slot: str) -> SlotValue:
        if slot == GOALIE_SLOT:
            return self.goalie
        return self.slots.get(slot)

    def find_player(self, player_id: str) -> Optional[Tuple[str, Optional[str]]]:
        """
        Locate a player.

        Returns:
            ``(slot, pair_role)`` where ``pair_role`` is ``None`` outside pairs
            mode, or ``None`` when the player is not in the formation.
        """
        if player_id is None:
            return None
        if self.goalie == player_id:
            return GOALIE_SLOT, None
        for slot, value in self.slots.items():
            if isinstance(value, Pair):
                pair_role = value.role_of(player_id)
                if pair_role:
                    return slot, pair_role
            elif value == player_id:
                return slot, None
        return None

    def slot_of(self, player_id: str) -> Optional[str]:
        located = self.find_player(player_id)
        return located[0] if located else None

    def player_ids(self) -> Iterator[str]:
        """Yield every assigned player id, goalie first."""
        if self.goalie:
            yield self.goalie
        for value in self.slots.values():
            if isinstance(value, Pair):
                yield from value.members()
            elif value:
                yield value

    def with_slots(self, updates: Dict[str, SlotValue], **changes: Any) -> "Formation":
        """Return a new formation with ``updates`` applied to the slot map."""
        slots = dict(self.slots)
        slots.update(updates)
        return replace(self, slots=slots, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, Any] = {GOALIE_SLOT: self.goalie}
        for slot, value in self.slots.items():
            data[slot] = value.to_dict() if isinstance(value, Pair) else value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Formation":
        """Create from dictionary; nested dicts become pairs."""
        slots: Dict[str, SlotValue] = {}
        for slot, value in data.items():
            if slot == GOALIE_SLOT:
                continue
            if isinstance(value, dict):
                slots[slot] = Pair(
                    defender=value.get(PAIR_DEFENDER),
                    attacker=value.get(PAIR_ATTACKER),
                )
            else:
                slots[slot] = value
        return cls(goalie=data.get(GOALIE_SLOT), slots=slots)
