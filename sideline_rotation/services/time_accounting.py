"""
Time accounting for the Sideline Rotation engine.

Stints are the only source of accumulated playing time. A stint opens when a
player moves onto the field (or into goal) and closes when they leave it, and
both happen inside the transition that changes the player's status. While the
clock is paused no stint is open.
"""
import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional

from ..models import GameState, PlayerRole, PlayerStats, PlayerStatus
from ..utils import now_ts

logger = logging.getLogger(__name__)

STINT_STATUSES = (PlayerStatus.ON_FIELD, PlayerStatus.GOALIE)

_ROLE_COUNTERS = {
    PlayerRole.ATTACKER: "time_as_attacker_seconds",
    PlayerRole.DEFENDER: "time_as_defender_seconds",
    PlayerRole.MIDFIELDER: "time_as_midfielder_seconds",
}


@dataclass(frozen=True)
class PlayerTimeStats:
    """Display figures for one player."""
    total_outfield_time: int = 0
    attack_defender_diff: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total_outfield_time": self.total_outfield_time,
            "attack_defender_diff": self.attack_defender_diff,
        }


def resolve_now(now: Optional[float]) -> float:
    return now_ts() if now is None else now


# ------------------------------------------------------------------
# Read-side helpers
# ------------------------------------------------------------------
def current_stint_duration(stint_start_epoch: Optional[float], now_epoch: float) -> int:
    """
    Length of the open stint in whole seconds.

    Args:
        stint_start_epoch: When the stint began, or None if no stint is open
        now_epoch: Current time in epoch seconds

    Returns:
        Elapsed seconds, never negative
    """
    if stint_start_epoch is None:
        return 0
    return max(0, int(now_epoch - stint_start_epoch))


def total_outfield_time(stats: PlayerStats, is_paused: bool, now: Optional[float] = None) -> int:
    """Accumulated outfield time plus the live stint while the clock runs."""
    if is_paused or stats.current_status is not PlayerStatus.ON_FIELD:
        return stats.time_on_field_seconds
    live = current_stint_duration(stats.last_stint_start_time_epoch, resolve_now(now))
    return stats.time_on_field_seconds + live


def attack_defender_balance(stats: PlayerStats, is_paused: bool, now: Optional[float] = None) -> int:
    """Attacker time minus defender time; midfield time never counts."""
    attacker = stats.time_as_attacker_seconds
    defender = stats.time_as_defender_seconds
    if not is_paused and stats.current_status is PlayerStatus.ON_FIELD:
        live = current_stint_duration(stats.last_stint_start_time_epoch, resolve_now(now))
        if stats.current_role is PlayerRole.ATTACKER:
            attacker += live
        elif stats.current_role is PlayerRole.DEFENDER:
            defender += live
    return attacker - defender


def get_player_time_stats(
    state: GameState, player_id: str, now: Optional[float] = None
) -> PlayerTimeStats:
    """
    Time figures for ``player_id``.

    Unknown identifiers yield zeros so that display code keeps working while
    the player set is being swapped.
    """
    stats = state.stats_of(player_id)
    if stats is None:
        logger.debug("Time stats requested for unknown player %s", player_id)
        return PlayerTimeStats()
    current = resolve_now(now)
    return PlayerTimeStats(
        total_outfield_time=total_outfield_time(stats, state.is_sub_timer_paused, current),
        attack_defender_diff=attack_defender_balance(stats, state.is_sub_timer_paused, current),
    )


# ------------------------------------------------------------------
# Stint boundaries
# ------------------------------------------------------------------
def credit_time(stats: PlayerStats, seconds: int) -> PlayerStats:
    """Add ``seconds`` to the counters of the player's current status and role."""
    if seconds <= 0:
        return stats
    if stats.current_status is PlayerStatus.GOALIE:
        return replace(stats, time_as_goalie_seconds=stats.time_as_goalie_seconds + seconds)
    if stats.current_status is not PlayerStatus.ON_FIELD:
        return stats

    changes = {"time_on_field_seconds": stats.time_on_field_seconds + seconds}
    counter = _ROLE_COUNTERS.get(stats.current_role)
    if counter:
        changes[counter] = getattr(stats, counter) + seconds
    return replace(stats, **changes)


def close_stint(stats: PlayerStats, now: float, is_paused: bool = False) -> PlayerStats:
    """Fold the open stint into the totals and clear its start."""
    if stats.last_stint_start_time_epoch is None:
        return stats
    if not is_paused:
        stats = credit_time(stats, current_stint_duration(stats.last_stint_start_time_epoch, now))
    return replace(stats, last_stint_start_time_epoch=None)


def open_stint(stats: PlayerStats, now: float, is_paused: bool = False) -> PlayerStats:
    """Start a stint for a player on the field or in goal."""
    if is_paused or stats.current_status not in STINT_STATUSES:
        return replace(stats, last_stint_start_time_epoch=None)
    return replace(stats, last_stint_start_time_epoch=now)


def transition_player(
    stats: PlayerStats,
    status: PlayerStatus,
    role: PlayerRole,
    pair_key: Optional[str],
    now: float,
    is_paused: bool = False,
) -> PlayerStats:
    """
    Move a player to a new slot, closing and opening stints as needed.

    A status change closes the old stint and opens a new one. A role change
    within the same status checkpoints the stint so that time is credited to
    the role it was played in. A pure slot move (e.g. between substitute
    slots) leaves the stint untouched.
    """
    if status is stats.current_status and role is stats.current_role:
        return replace(stats, current_pair_key=pair_key)

    closed = close_stint(stats, now, is_paused)
    moved = replace(closed, current_status=status, current_role=role, current_pair_key=pair_key)
    if status is stats.current_status and stats.has_open_stint and not is_paused:
        # Checkpoint: the new stint starts where the credited whole seconds end.
        start = stats.last_stint_start_time_epoch
        return replace(moved, last_stint_start_time_epoch=start + current_stint_duration(start, now))
    return open_stint(moved, now, is_paused)


# ------------------------------------------------------------------
# Clock transitions
# ------------------------------------------------------------------
def calculate_pause(state: GameState, now: Optional[float] = None) -> GameState:
    """Close every open stint and mark the clock paused."""
    if state.is_sub_timer_paused:
        return state
    current = resolve_now(now)
    updates = {
        pid: close_stint(player.stats, current)
        for pid, player in state.players.items()
        if player.stats.has_open_stint
    }
    return state.with_player_stats(updates, is_sub_timer_paused=True)


def calculate_resume(state: GameState, now: Optional[float] = None) -> GameState:
    """Open stints for everyone on the field or in goal and unpause."""
    if not state.is_sub_timer_paused:
        return state
    current = resolve_now(now)
    updates = {
        pid: open_stint(player.stats, current)
        for pid, player in state.players.items()
        if player.stats.current_status in STINT_STATUSES
    }
    return state.with_player_stats(updates, is_sub_timer_paused=False)
