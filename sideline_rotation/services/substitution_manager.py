"""
Substitution strategies per formation topology.

Each handler computes the lineup that results from one "substitute now"
trigger. Handlers never mutate their input; they return a
:class:`SubstitutionResult` that the formation engine folds into a new
game state.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from ..models import (
    Formation,
    GameState,
    PAIR_ATTACKER,
    PAIR_DEFENDER,
    Pair,
    PlayerRole,
    PlayerStats,
    PlayerStatus,
    QueuePointers,
    TeamConfiguration,
)
from .rotation_queue import (
    RotationQueue,
    active_substitute_ids,
    align_queue,
    compute_individual_pointers,
    compute_pair_pointers,
    field_ids,
    inactive_substitute_ids,
    next_pair_after,
)
from .time_accounting import transition_player

logger = logging.getLogger(__name__)

PAIR_ROLES = {
    PAIR_DEFENDER: PlayerRole.DEFENDER,
    PAIR_ATTACKER: PlayerRole.ATTACKER,
}


@dataclass(frozen=True)
class SubstitutionResult:
    """Outcome of one rotation, ready to be folded into a game state."""
    formation: Formation
    stats_updates: Dict[str, PlayerStats]
    pointers: QueuePointers
    coming_on_ids: Tuple[str, ...]
    going_off_ids: Tuple[str, ...]


class SubstitutionHandler(ABC):
    """Abstract base class for topology-specific substitution rules."""

    @abstractmethod
    def substitute(self, state: GameState, now: float) -> Optional[SubstitutionResult]:
        """
        Compute the rotation for ``state``.

        Returns:
            The rotation result, or None when nobody can be substituted
        """


class PairsSubstitutionHandler(SubstitutionHandler):
    """The next field pair and the substitute pair trade places as units."""

    def substitute(self, state: GameState, now: float) -> Optional[SubstitutionResult]:
        mode = state.team_config.mode
        formation = state.formation
        paused = state.is_sub_timer_paused

        next_pair = state.next_physical_pair_to_sub_out
        if next_pair not in mode.field_positions:
            next_pair = mode.field_positions[0]
        sub_slot = mode.substitute_positions[0]

        outgoing = formation.slots.get(next_pair)
        incoming = formation.slots.get(sub_slot)
        if not isinstance(incoming, Pair) or not incoming.members():
            logger.warning("Substitute pair is empty; nothing to rotate")
            return None
        if not isinstance(outgoing, Pair):
            outgoing = Pair()

        updates: Dict[str, PlayerStats] = {}
        for pair_role, role in PAIR_ROLES.items():
            going = getattr(outgoing, pair_role)
            coming = getattr(incoming, pair_role)
            if going:
                updates[going] = transition_player(
                    state.players[going].stats, PlayerStatus.BENCH, role, sub_slot, now, paused
                )
            if coming:
                updates[coming] = transition_player(
                    state.players[coming].stats, PlayerStatus.ON_FIELD, role, next_pair, now, paused
                )

        new_formation = formation.with_slots({next_pair: incoming, sub_slot: outgoing})
        pointers = compute_pair_pointers(new_formation, mode, next_pair_after(mode, next_pair))
        return SubstitutionResult(
            formation=new_formation,
            stats_updates=updates,
            pointers=pointers,
            coming_on_ids=tuple(incoming.members()),
            going_off_ids=tuple(outgoing.members()),
        )


class IndividualSubstitutionHandler(SubstitutionHandler):
    """
    One on-field player swaps with the foremost active substitute.

    The outgoing player joins the bench behind the remaining active
    substitutes, which each move one slot forward. Inactive substitutes stay
    parked in the rearmost slots.
    """

    def substitute(self, state: GameState, now: float) -> Optional[SubstitutionResult]:
        mode = state.team_config.mode
        formation = state.formation
        players = state.players
        paused = state.is_sub_timer_paused

        active = active_substitute_ids(formation, mode, players)
        if not active:
            logger.warning("No active substitute available; substitution skipped")
            return None

        outgoing = self.resolve_outgoing(state)
        if outgoing is None:
            logger.warning("No on-field player available to substitute out")
            return None

        out_slot = formation.slot_of(outgoing)
        incoming = active[0]
        bench_order: List[Optional[str]] = (
            active[1:] + [outgoing] + inactive_substitute_ids(formation, mode, players)
        )

        slot_updates: Dict[str, Optional[str]] = {out_slot: incoming}
        stats: Dict[str, PlayerStats] = {
            incoming: transition_player(
                players[incoming].stats,
                PlayerStatus.ON_FIELD,
                mode.role_for(out_slot),
                out_slot,
                now,
                paused,
            )
        }
        for index, slot in enumerate(mode.substitute_positions):
            player_id = bench_order[index] if index < len(bench_order) else None
            slot_updates[slot] = player_id
            if player_id is None:
                continue
            current = players[player_id].stats
            if player_id == outgoing:
                stats[player_id] = transition_player(
                    current, PlayerStatus.BENCH, PlayerRole.NONE, slot, now, paused
                )
            elif current.current_pair_key != slot:
                stats[player_id] = replace(current, current_pair_key=slot)

        new_formation = formation.with_slots(slot_updates)
        queue = RotationQueue(state.rotation_queue, players.get).initialize()
        if not queue.rotate_player(outgoing):
            queue.add_player(outgoing, "end")
        pointers = compute_individual_pointers(queue.to_list(), new_formation, mode, players)

        return SubstitutionResult(
            formation=new_formation,
            stats_updates=stats,
            pointers=pointers,
            coming_on_ids=(incoming,),
            going_off_ids=(outgoing,),
        )

    @staticmethod
    def resolve_outgoing(state: GameState) -> Optional[str]:
        """The designated next player out, or the first on-field player in queue order."""
        mode = state.team_config.mode
        on_field = set(field_ids(state.formation, mode))
        if state.next_player_id_to_sub_out in on_field:
            return state.next_player_id_to_sub_out
        ordered = align_queue(state.rotation_queue, state.formation, mode, state.players)
        for player_id in ordered:
            if player_id in on_field:
                return player_id
        return None


def handler_for(team_config: TeamConfiguration) -> SubstitutionHandler:
    """Pick the substitution rules for ``team_config``."""
    if team_config.mode.is_pairs:
        return PairsSubstitutionHandler()
    return IndividualSubstitutionHandler()
