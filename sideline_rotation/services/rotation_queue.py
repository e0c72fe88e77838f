"""
Rotation queue management for the Sideline Rotation engine.

The rotation queue orders outfield players by who comes off next. Its normal
form is the on-field players in rotation order followed by the active
substitutes in substitute-slot order; inactive players are parked outside
the queue and never become a next/next-next pointer.
"""
import logging
from typing import Callable, Dict, Iterable, List, Optional, Union

from ..models import (
    Formation,
    GameState,
    ModeDefinition,
    Pair,
    Player,
    QueuePointers,
    TeamConfiguration,
)

logger = logging.getLogger(__name__)

PlayerLookup = Callable[[str], Optional[Player]]


class RotationQueue:
    """Ordered, mutable working copy of a rotation queue."""

    def __init__(self, items: Iterable[str] = (), lookup: Optional[PlayerLookup] = None):
        self._queue: List[str] = list(items)
        self._inactive: List[str] = []
        self._lookup = lookup

    def initialize(self) -> "RotationQueue":
        """Split out inactive players using the player lookup."""
        if self._lookup is None:
            return self
        active: List[str] = []
        for player_id in self._queue:
            player = self._lookup(player_id)
            if player is not None and player.stats.is_inactive:
                if player_id not in self._inactive:
                    self._inactive.append(player_id)
            else:
                active.append(player_id)
        self._queue = active
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def to_list(self) -> List[str]:
        return list(self._queue)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._queue

    def get_position(self, player_id: str) -> int:
        """Queue index of ``player_id`` or -1."""
        try:
            return self._queue.index(player_id)
        except ValueError:
            return -1

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def rotate_player(self, player_id: str) -> bool:
        """Move ``player_id`` to the rear; False if not queued."""
        if player_id not in self._queue:
            return False
        self._queue.remove(player_id)
        self._queue.append(player_id)
        return True

    def add_player(self, player_id: str, position: Union[str, int] = "end") -> None:
        """Add a player at ``start``, ``end`` or a numeric index."""
        if player_id in self._queue:
            return
        if position == "start":
            self._queue.insert(0, player_id)
        elif isinstance(position, int):
            self._queue.insert(max(0, min(position, len(self._queue))), player_id)
        else:
            self._queue.append(player_id)

    def remove_player(self, player_id: str) -> bool:
        if player_id not in self._queue:
            return False
        self._queue.remove(player_id)
        return True

    def move_to_front(self, player_id: str) -> bool:
        if not self.remove_player(player_id):
            return False
        self._queue.insert(0, player_id)
        return True

    def replace_player(self, old_id: str, new_id: str) -> None:
        """Put ``new_id`` at ``old_id``'s exact index, or at the rear."""
        self.remove_player(new_id)
        index = self.get_position(old_id)
        if index < 0:
            self._queue.append(new_id)
        else:
            self._queue[index] = new_id

    def deactivate_player(self, player_id: str) -> None:
        """Park a player outside the queue."""
        self.remove_player(player_id)
        if player_id not in self._inactive:
            self._inactive.append(player_id)

    def reactivate_player(self, player_id: str) -> None:
        """Bring a parked player back at the rear of the queue."""
        if player_id in self._inactive:
            self._inactive.remove(player_id)
        self.add_player(player_id, "end")


# ----------------------------------------------------------------------
# Slot helpers
# ----------------------------------------------------------------------
def substitute_ids(formation: Formation, mode: ModeDefinition) -> List[str]:
    """Occupied substitute slots in order (individual mode)."""
    return [
        formation.slots[slot]
        for slot in mode.substitute_positions
        if formation.slots.get(slot)
    ]


def active_substitute_ids(formation: Formation, mode: ModeDefinition, players: Dict[str, Player]) -> List[str]:
    """Substitutes eligible to come on next, foremost first."""
    return [
        pid for pid in substitute_ids(formation, mode)
        if pid in players and not players[pid].stats.is_inactive
    ]


def inactive_substitute_ids(formation: Formation, mode: ModeDefinition, players: Dict[str, Player]) -> List[str]:
    return [
        pid for pid in substitute_ids(formation, mode)
        if pid in players and players[pid].stats.is_inactive
    ]


def field_ids(formation: Formation, mode: ModeDefinition) -> List[str]:
    """On-field players in field-slot order (individual mode)."""
    return [
        formation.slots[slot] for slot in mode.field_positions if formation.slots.get(slot)
    ]


def has_active_substitutes(state: GameState) -> bool:
    """Whether a "substitute now" trigger has anyone to bring on."""
    mode = state.team_config.mode
    if mode.is_pairs:
        sub_pair = state.formation.slots.get(mode.substitute_positions[0])
        return isinstance(sub_pair, Pair) and bool(sub_pair.members())
    return bool(active_substitute_ids(state.formation, mode, state.players))


# ----------------------------------------------------------------------
# Pointer computation
# ----------------------------------------------------------------------
def align_queue(
    queue: Iterable[str],
    formation: Formation,
    mode: ModeDefinition,
    players: Dict[str, Player],
) -> List[str]:
    """
    Bring a queue into normal form.

    On-field players keep their relative order (any missing ones join at the
    end of the on-field section in slot order), followed by the active
    substitutes in slot order.
    """
    on_field = field_ids(formation, mode)
    on_field_set = set(on_field)
    ordered = [pid for pid in queue if pid in on_field_set]
    ordered.extend(pid for pid in on_field if pid not in ordered)
    ordered.extend(active_substitute_ids(formation, mode, players))
    return ordered


def compute_individual_pointers(
    queue: Iterable[str],
    formation: Formation,
    mode: ModeDefinition,
    players: Dict[str, Player],
) -> QueuePointers:
    """Normalize ``queue`` and derive next/next-next from it."""
    ordered = align_queue(queue, formation, mode, players)
    on_field_set = set(field_ids(formation, mode))
    candidates = [
        pid for pid in ordered
        if pid in on_field_set and not (pid in players and players[pid].stats.is_inactive)
    ]
    next_id = candidates[0] if candidates else None
    next_next_id = None
    if mode.supports_next_next_indicators and len(candidates) > 1:
        next_next_id = candidates[1]
    return QueuePointers(
        rotation_queue=tuple(ordered),
        next_player_to_sub_out=formation.slot_of(next_id) if next_id else None,
        next_player_id_to_sub_out=next_id,
        next_next_player_id_to_sub_out=next_next_id,
    )


def next_pair_after(mode: ModeDefinition, pair_key: Optional[str]) -> str:
    """The field pair that follows ``pair_key`` in rotation."""
    pairs = mode.field_positions
    if pair_key not in pairs:
        return pairs[0]
    return pairs[(pairs.index(pair_key) + 1) % len(pairs)]


def compute_pair_pointers(formation: Formation, mode: ModeDefinition, next_pair: Optional[str]) -> QueuePointers:
    """
    Prioritized queue for pairs mode.

    Members of the next pair to leave come first, then the other field pairs
    in rotation order, then the substitute pair.
    """
    if next_pair not in mode.field_positions:
        next_pair = mode.field_positions[0]
    order = [next_pair]
    key = next_pair
    for _ in range(len(mode.field_positions) - 1):
        key = next_pair_after(mode, key)
        order.append(key)
    order.extend(mode.substitute_positions)

    queue: List[str] = []
    for slot in order:
        pair = formation.slots.get(slot)
        if isinstance(pair, Pair):
            queue.extend(pair.members())
    return QueuePointers(rotation_queue=tuple(queue), next_physical_pair_to_sub_out=next_pair)


def compute_pointers(
    queue: Iterable[str],
    formation: Formation,
    team_config: TeamConfiguration,
    players: Dict[str, Player],
    next_pair: Optional[str] = None,
) -> QueuePointers:
    """Pointers for either topology."""
    mode = team_config.mode
    if mode.is_pairs:
        return compute_pair_pointers(formation, mode, next_pair)
    return compute_individual_pointers(queue, formation, mode, players)
