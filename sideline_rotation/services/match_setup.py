"""
Match setup: turn a team configuration, squad and starting lineup into the
first :class:`GameState` of a match.
"""
import logging
from typing import Any, Dict, Iterable, Optional, Union

from ..models import (
    GOALIE_SLOT,
    Formation,
    GameState,
    Pair,
    Player,
    PlayerRole,
    PlayerStats,
    PlayerStatus,
    TeamConfiguration,
)
from .lineup_validator import LineupValidationError, LineupValidationService
from .rotation_queue import compute_pointers
from .substitution_manager import PAIR_ROLES
from .time_accounting import open_stint, resolve_now

logger = logging.getLogger(__name__)


def initial_player_stats(
    player_id: str,
    formation: Formation,
    team_config: TeamConfiguration,
) -> PlayerStats:
    """Status, role and slot for a player seated in ``formation``."""
    located = formation.find_player(player_id)
    if located is None:
        return PlayerStats()
    slot, pair_role = located
    mode = team_config.mode

    if slot == GOALIE_SLOT:
        return PlayerStats(PlayerStatus.GOALIE, PlayerRole.NONE, GOALIE_SLOT)
    status = PlayerStatus.ON_FIELD if mode.is_field_position(slot) else PlayerStatus.BENCH
    if pair_role:
        role = PAIR_ROLES[pair_role]
    elif status is PlayerStatus.ON_FIELD:
        role = mode.role_for(slot)
    else:
        role = PlayerRole.NONE
    return PlayerStats(status, role, slot)


def _coerce_players(players: Iterable[Union[Player, Dict[str, Any]]]) -> Dict[str, Player]:
    coerced: Dict[str, Player] = {}
    for entry in players:
        player = entry if isinstance(entry, Player) else Player.from_dict(entry)
        coerced[player.id] = player
    return coerced


def build_game_state(
    team_config: TeamConfiguration,
    players: Iterable[Union[Player, Dict[str, Any]]],
    formation: Union[Formation, Dict[str, Any]],
    *,
    is_paused: bool = True,
    now: Optional[float] = None,
) -> GameState:
    """
    Create the opening game state.

    Args:
        team_config: Team configuration for the match
        players: Squad as players or dictionaries with ``id``/``name``/``number``
        formation: Starting lineup as a Formation or its dictionary form
        is_paused: Whether the clock starts paused (no stints open)
        now: Start time used for stints when the clock is running

    Returns:
        A fully populated game state with fresh stats and rotation pointers

    Raises:
        LineupValidationError: If the lineup does not fit the configuration
    """
    squad = _coerce_players(players)
    lineup = formation if isinstance(formation, Formation) else Formation.from_dict(formation)

    result = LineupValidationService(team_config, squad).validate(lineup)
    if not result.is_valid:
        raise LineupValidationError(result.errors)

    current = resolve_now(now)
    seated: Dict[str, Player] = {}
    for player_id, player in squad.items():
        stats = initial_player_stats(player_id, lineup, team_config)
        seated[player_id] = player.with_stats(open_stint(stats, current, is_paused))

    mode = team_config.mode
    pointers = compute_pointers((), lineup, team_config, seated, next_pair=None)
    logger.info(
        "Match set up: %s %s, %d players, %s substitution",
        team_config.format,
        team_config.formation,
        len(seated),
        mode.topology.value,
    )
    return GameState(
        team_config=team_config,
        formation=lineup,
        players=seated,
        is_sub_timer_paused=is_paused,
    ).with_pointers(pointers)


def lineup_from_order(team_config: TeamConfiguration, goalie: str, outfield: Iterable[str]) -> Formation:
    """
    Seat players in slot order: field slots first, then substitutes.

    In pairs mode consecutive players form defender/attacker pairs.
    """
    mode = team_config.mode
    ids = list(outfield)
    slots: Dict[str, Any] = {}
    if mode.is_pairs:
        for index, slot in enumerate(mode.field_positions + mode.substitute_positions):
            defender = ids[2 * index] if 2 * index < len(ids) else None
            attacker = ids[2 * index + 1] if 2 * index + 1 < len(ids) else None
            slots[slot] = Pair(defender=defender, attacker=attacker)
    else:
        for index, slot in enumerate(mode.field_positions + mode.substitute_positions):
            slots[slot] = ids[index] if index < len(ids) else None
    return Formation(goalie=goalie, slots=slots)
