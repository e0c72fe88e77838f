"""
Formation transition engine for the Sideline Rotation engine.

Every ``calculate_*`` function takes a complete :class:`GameState` and returns
a new, complete one; the input is never modified. Requests that make no sense
for the current lineup (unknown players, a goalie picked for a position
switch, and so on) are logged and answered with the unchanged state. Requests
the current topology cannot support at all raise
:class:`InvalidTopologyOperation`, whose message is meant for the coach.

All functions accept ``now`` (epoch seconds) so callers and tests can pin the
clock; it defaults to the current time.
"""
import logging
from dataclasses import replace
from typing import Dict, List, Optional

from ..models import (
    GOALIE_SLOT,
    GameState,
    Pair,
    Player,
    PlayerRole,
    PlayerStats,
    PlayerStatus,
    SubstitutionRecord,
)
from .rotation_queue import (
    RotationQueue,
    active_substitute_ids,
    compute_individual_pointers,
    compute_pair_pointers,
    inactive_substitute_ids,
)
from .substitution_manager import PAIR_ROLES, handler_for
from .time_accounting import close_stint, resolve_now, transition_player
from .undo_log import create_substitution_record, restore_from_record

logger = logging.getLogger(__name__)


class RotationError(Exception):
    """Base class for rotation errors surfaced to the coach."""


class InvalidTopologyOperation(RotationError):
    """The requested change is not available for this formation topology."""


def _with_stats(players: Dict[str, Player], updates: Dict[str, PlayerStats]) -> Dict[str, Player]:
    merged = dict(players)
    for player_id, stats in updates.items():
        merged[player_id] = merged[player_id].with_stats(stats)
    return merged


# ------------------------------------------------------------------
# Rotation
# ------------------------------------------------------------------
def calculate_substitution(state: GameState, now: Optional[float] = None) -> GameState:
    """
    Rotate the next player (or pair) off and the next substitute(s) on.

    Stints of everyone changing status close and open inside this call, the
    rotation queue advances, and an undo record for the rotation is stored on
    the returned state.
    """
    current = resolve_now(now)
    result = handler_for(state.team_config).substitute(state, current)
    if result is None:
        return state

    players = _with_stats(state.players, result.stats_updates)
    record = create_substitution_record(
        state, players, result.coming_on_ids, result.going_off_ids, current
    )
    logger.debug(
        "Substitution: %s on, %s off", list(result.coming_on_ids), list(result.going_off_ids)
    )
    return state.with_pointers(
        result.pointers,
        formation=result.formation,
        players=players,
        players_to_highlight=result.coming_on_ids,
        last_substitution=record,
        sub_timer_seconds=0,
        sub_timer_restore=None,
    )


def calculate_next_substitution_target(state: GameState, target: str, now: Optional[float] = None) -> GameState:
    """
    Choose who leaves at the next substitution.

    Args:
        state: Current game state
        target: A field pair slot (pairs mode) or a field slot (individual mode)
    """
    mode = state.team_config.mode
    if mode.is_pairs:
        if target not in mode.field_positions:
            logger.warning("Cannot target %s for the next substitution", target)
            return state
        pointers = compute_pair_pointers(state.formation, mode, target)
        return state.with_pointers(pointers)

    player_id = state.formation.slots.get(target) if mode.is_field_position(target) else None
    if not player_id:
        logger.warning("Cannot target %s for the next substitution", target)
        return state
    queue = RotationQueue(state.rotation_queue, state.players.get).initialize()
    if not queue.move_to_front(player_id):
        queue.add_player(player_id, "start")
    pointers = compute_individual_pointers(queue.to_list(), state.formation, mode, state.players)
    return state.with_pointers(pointers)


# ------------------------------------------------------------------
# Position changes
# ------------------------------------------------------------------
def calculate_position_switch(
    state: GameState,
    source_player_id: str,
    target_player_id: str,
    now: Optional[float] = None,
) -> GameState:
    """
    Exchange the field slots (and roles) of two on-field players.

    Both players stay on the field, so the on-field stint continues; the
    elapsed part of it is credited to the role it was played in.

    Raises:
        InvalidTopologyOperation: In pairs mode
    """
    mode = state.team_config.mode
    if mode.is_pairs:
        raise InvalidTopologyOperation(
            "Position switching is not available when playing in pairs. "
            "Swap defender and attacker within a pair instead."
        )
    if source_player_id == target_player_id:
        logger.warning("Position switch needs two different players")
        return state
    if source_player_id not in state.players or target_player_id not in state.players:
        logger.warning(
            "Position switch with unknown player(s) %s, %s", source_player_id, target_player_id
        )
        return state

    source_slot = state.formation.slot_of(source_player_id)
    target_slot = state.formation.slot_of(target_player_id)
    if not (mode.is_field_position(source_slot) and mode.is_field_position(target_slot)):
        logger.warning("Position switch is only possible between two outfield players on the field")
        return state

    current = resolve_now(now)
    paused = state.is_sub_timer_paused
    formation = state.formation.with_slots(
        {source_slot: target_player_id, target_slot: source_player_id}
    )
    updates = {
        source_player_id: transition_player(
            state.players[source_player_id].stats,
            PlayerStatus.ON_FIELD,
            mode.role_for(target_slot),
            target_slot,
            current,
            paused,
        ),
        target_player_id: transition_player(
            state.players[target_player_id].stats,
            PlayerStatus.ON_FIELD,
            mode.role_for(source_slot),
            source_slot,
            current,
            paused,
        ),
    }
    players = _with_stats(state.players, updates)
    pointers = compute_individual_pointers(state.rotation_queue, formation, mode, players)
    return state.with_pointers(
        pointers,
        formation=formation,
        players=players,
        players_to_highlight=(source_player_id, target_player_id),
        last_substitution=None,
    )


def calculate_pair_role_swap(state: GameState, pair_key: str, now: Optional[float] = None) -> GameState:
    """
    Swap defender and attacker within one pair.

    Raises:
        InvalidTopologyOperation: Outside pairs mode
    """
    mode = state.team_config.mode
    if not mode.is_pairs:
        raise InvalidTopologyOperation("Role swaps within a pair are only available when playing in pairs.")
    pair = state.formation.slots.get(pair_key)
    if not isinstance(pair, Pair) or not pair.members():
        logger.warning("No pair at %s to swap", pair_key)
        return state

    current = resolve_now(now)
    swapped = pair.swapped()
    updates: Dict[str, PlayerStats] = {}
    for pair_role, role in PAIR_ROLES.items():
        player_id = getattr(swapped, pair_role)
        if player_id:
            stats = state.players[player_id].stats
            updates[player_id] = transition_player(
                stats, stats.current_status, role, pair_key, current, state.is_sub_timer_paused
            )

    formation = state.formation.with_slots({pair_key: swapped})
    pointers = compute_pair_pointers(formation, mode, state.next_physical_pair_to_sub_out)
    return state.with_pointers(
        pointers,
        formation=formation,
        players=_with_stats(state.players, updates),
        players_to_highlight=tuple(swapped.members()),
        last_substitution=None,
    )


# ------------------------------------------------------------------
# Substitute management
# ------------------------------------------------------------------
def _reseat_substitutes(state: GameState, order: List[str], updates: Dict[str, PlayerStats]) -> Dict[str, Optional[str]]:
    """Seat ``order`` into the substitute slots, recording pair-key changes."""
    slots: Dict[str, Optional[str]] = {}
    for index, slot in enumerate(state.team_config.mode.substitute_positions):
        player_id = order[index] if index < len(order) else None
        slots[slot] = player_id
        if player_id is None:
            continue
        stats = updates.get(player_id, state.players[player_id].stats)
        if stats.current_pair_key != slot:
            updates[player_id] = replace(stats, current_pair_key=slot)
    return slots


def calculate_player_toggle_inactive(state: GameState, player_id: str, now: Optional[float] = None) -> GameState:
    """
    Park a substitute as unavailable, or bring a parked one back.

    A deactivated player moves behind every active substitute, so the others
    shift forward when needed. A reactivated player takes the rearmost
    active substitute slot and still-inactive players shift back.

    Raises:
        InvalidTopologyOperation: When the team setup has no inactive support
    """
    mode = state.team_config.mode
    if not mode.supports_inactive_users:
        raise InvalidTopologyOperation("Marking substitutes inactive is not available for this team setup.")
    player = state.players.get(player_id)
    if player is None:
        logger.warning("Cannot toggle unknown player %s", player_id)
        return state
    if not mode.is_substitute_position(state.formation.slot_of(player_id)):
        logger.warning("Only substitutes can be marked inactive (%s is not on the bench)", player_id)
        return state

    current = resolve_now(now)
    active = active_substitute_ids(state.formation, mode, state.players)
    inactive = inactive_substitute_ids(state.formation, mode, state.players)
    queue = RotationQueue(state.rotation_queue, state.players.get).initialize()

    if player.stats.is_inactive:
        order = active + [player_id] + [pid for pid in inactive if pid != player_id]
        new_stats = replace(player.stats, is_inactive=False)
        queue.reactivate_player(player_id)
        logger.debug("Player %s reactivated", player_id)
    else:
        order = [pid for pid in active if pid != player_id] + inactive + [player_id]
        new_stats = close_stint(
            replace(player.stats, is_inactive=True), current, state.is_sub_timer_paused
        )
        queue.deactivate_player(player_id)
        logger.debug("Player %s marked inactive", player_id)

    updates: Dict[str, PlayerStats] = {player_id: new_stats}
    formation = state.formation.with_slots(_reseat_substitutes(state, order, updates))
    players = _with_stats(state.players, updates)
    pointers = compute_individual_pointers(queue.to_list(), formation, mode, players)
    return state.with_pointers(
        pointers,
        formation=formation,
        players=players,
        players_to_highlight=(),
        last_substitution=None,
    )


def calculate_substitute_swap(
    state: GameState, slot_a: str, slot_b: str, now: Optional[float] = None
) -> GameState:
    """
    Exchange the players in two substitute slots.

    Raises:
        InvalidTopologyOperation: When there are fewer than two substitute slots
    """
    mode = state.team_config.mode
    if mode.is_pairs or len(mode.substitute_positions) < 2:
        raise InvalidTopologyOperation("Reordering substitutes needs at least two substitute slots.")
    if slot_a == slot_b or not (
        mode.is_substitute_position(slot_a) and mode.is_substitute_position(slot_b)
    ):
        logger.warning("Substitute swap needs two different substitute slots (%s, %s)", slot_a, slot_b)
        return state

    player_a = state.formation.slots.get(slot_a)
    player_b = state.formation.slots.get(slot_b)
    if not player_a or not player_b:
        logger.warning("Substitute swap between %s and %s involves an empty slot", slot_a, slot_b)
        return state
    if state.players[player_a].stats.is_inactive != state.players[player_b].stats.is_inactive:
        logger.warning("Cannot swap an active substitute with an inactive one")
        return state

    formation = state.formation.with_slots({slot_a: player_b, slot_b: player_a})
    updates = {
        player_a: replace(state.players[player_a].stats, current_pair_key=slot_b),
        player_b: replace(state.players[player_b].stats, current_pair_key=slot_a),
    }
    players = _with_stats(state.players, updates)
    pointers = compute_individual_pointers(state.rotation_queue, formation, mode, players)
    return state.with_pointers(
        pointers,
        formation=formation,
        players=players,
        players_to_highlight=(player_a, player_b),
        last_substitution=None,
    )


def calculate_substitute_promotion(state: GameState, player_id: str, now: Optional[float] = None) -> GameState:
    """
    Make an active substitute the next to come on.

    Everyone seated between the foremost slot and the promoted player moves
    back one slot.
    """
    mode = state.team_config.mode
    slot = state.formation.slot_of(player_id)
    if not mode.is_substitute_position(slot):
        logger.warning("Player %s is not on the bench", player_id)
        return state
    if state.players[player_id].stats.is_inactive:
        logger.warning("Inactive player %s cannot be next to go in", player_id)
        return state

    slots = mode.substitute_positions
    index = slots.index(slot)
    if index == 0:
        return state

    promoted = state
    for position in range(index, 0, -1):
        promoted = calculate_substitute_swap(promoted, slots[position - 1], slots[position], now)
    moved = tuple(promoted.formation.slots[s] for s in slots[: index + 1])
    return promoted.evolve(players_to_highlight=moved)


# ------------------------------------------------------------------
# Goalie
# ------------------------------------------------------------------
def calculate_goalie_switch(state: GameState, new_goalie_id: str, now: Optional[float] = None) -> GameState:
    """
    Put ``new_goalie_id`` in goal.

    The previous goalie takes over the new goalie's slot, role and exact
    place in the rotation queue. The switch is recorded for undo.
    """
    old_goalie_id = state.formation.goalie
    if new_goalie_id == old_goalie_id:
        logger.warning("Player %s is already the goalie", new_goalie_id)
        return state
    new_goalie = state.players.get(new_goalie_id)
    if new_goalie is None:
        logger.warning("Cannot make unknown player %s goalie", new_goalie_id)
        return state
    if new_goalie.stats.is_inactive:
        logger.warning("Inactive player %s cannot become goalie", new_goalie_id)
        return state
    located = state.formation.find_player(new_goalie_id)
    if located is None:
        logger.warning("Player %s is not in the lineup", new_goalie_id)
        return state

    mode = state.team_config.mode
    slot, pair_role = located
    on_field = mode.is_field_position(slot)
    old_status = PlayerStatus.ON_FIELD if on_field else PlayerStatus.BENCH
    if mode.is_pairs:
        pair = state.formation.slots[slot]
        slot_value = pair.with_member(pair_role, old_goalie_id)
        old_role = PAIR_ROLES[pair_role]
    else:
        slot_value = old_goalie_id
        old_role = mode.role_for(slot) if on_field else PlayerRole.NONE

    current = resolve_now(now)
    paused = state.is_sub_timer_paused
    formation = state.formation.with_slots({slot: slot_value}, goalie=new_goalie_id)
    updates = {
        new_goalie_id: transition_player(
            new_goalie.stats, PlayerStatus.GOALIE, PlayerRole.NONE, GOALIE_SLOT, current, paused
        )
    }
    if old_goalie_id and old_goalie_id in state.players:
        updates[old_goalie_id] = transition_player(
            state.players[old_goalie_id].stats, old_status, old_role, slot, current, paused
        )
    players = _with_stats(state.players, updates)

    if mode.is_pairs:
        pointers = compute_pair_pointers(formation, mode, state.next_physical_pair_to_sub_out)
    else:
        queue = RotationQueue(state.rotation_queue, players.get).initialize()
        if old_goalie_id:
            queue.replace_player(new_goalie_id, old_goalie_id)
        else:
            queue.remove_player(new_goalie_id)
        pointers = compute_individual_pointers(queue.to_list(), formation, mode, players)

    going_off = (old_goalie_id,) if old_goalie_id else ()
    record = create_substitution_record(state, players, (new_goalie_id,), going_off, current)
    logger.debug("Goalie switch: %s in goal, %s to %s", new_goalie_id, old_goalie_id, slot)
    return state.with_pointers(
        pointers,
        formation=formation,
        players=players,
        players_to_highlight=tuple(pid for pid in (old_goalie_id, new_goalie_id) if pid),
        last_substitution=record,
        sub_timer_restore=None,
    )


# ------------------------------------------------------------------
# Undo
# ------------------------------------------------------------------
def calculate_undo(
    state: GameState,
    record: Optional[SubstitutionRecord],
    now: Optional[float] = None,
) -> GameState:
    """
    Reverse the rotation described by ``record``.

    A missing record is logged and the state is returned unchanged.
    """
    return restore_from_record(state, record, now)
