"""
Single-level undo for lineup rotations.

Every successful rotation stores one :class:`SubstitutionRecord` on the game
state, replacing any earlier record. Undo consumes it; there is no history
stack and no redo.
"""
import logging
from typing import Dict, Iterable, Optional

from ..models import GameState, Player, PlayerStats, SubstitutionRecord, SubTimerRestore
from .time_accounting import (
    STINT_STATUSES,
    close_stint,
    credit_time,
    current_stint_duration,
    open_stint,
    resolve_now,
)

logger = logging.getLogger(__name__)


def create_substitution_record(
    before: GameState,
    after_players: Dict[str, Player],
    coming_on_ids: Iterable[str],
    going_off_ids: Iterable[str],
    now: float,
) -> SubstitutionRecord:
    """
    Snapshot ``before`` so the rotation that produced ``after_players`` can be reversed.

    Args:
        before: State the rotation was computed from
        after_players: Player map after the rotation
        coming_on_ids: Players who moved onto the field or into goal
        going_off_ids: Players who moved to the bench or out of goal
        now: Time of the rotation

    Returns:
        Record holding pre-rotation stats of every player whose stats changed
    """
    coming_on = tuple(coming_on_ids)
    stats_before: Dict[str, PlayerStats] = {}
    for player_id, player in after_players.items():
        previous = before.players.get(player_id)
        if previous is not None and previous.stats != player.stats:
            stats_before[player_id] = previous.stats
    for player_id in coming_on:
        if player_id in before.players:
            stats_before.setdefault(player_id, before.players[player_id].stats)

    return SubstitutionRecord(
        timestamp=now,
        before_formation=before.formation,
        before_pointers=before.pointers,
        players_coming_on_ids=coming_on,
        players_going_off_ids=tuple(going_off_ids),
        player_stats_before=stats_before,
        team_config=before.team_config,
        sub_timer_seconds_at_substitution=before.sub_timer_seconds,
    )


def _played_seconds(stats: PlayerStats, now: float) -> int:
    live = current_stint_duration(stats.last_stint_start_time_epoch, now)
    return stats.time_on_field_seconds + stats.time_as_goalie_seconds + live


def running_seconds_since(state: GameState, record: SubstitutionRecord, now: float) -> int:
    """
    Clock-running seconds between the rotation in ``record`` and ``now``.

    Players brought on by the rotation have been on the field or in goal ever
    since, so the time they gained is exactly the time the clock ran.
    """
    elapsed = 0
    for player_id in record.players_coming_on_ids:
        snapshot = record.player_stats_before.get(player_id)
        player = state.players.get(player_id)
        if snapshot is None or player is None:
            continue
        gained = _played_seconds(player.stats, now) - _played_seconds(snapshot, record.timestamp)
        elapsed = max(elapsed, gained)
    return elapsed


def _reconcile_snapshot(
    snapshot: PlayerStats,
    record: SubstitutionRecord,
    running_seconds: int,
    is_paused: bool,
    now: float,
) -> PlayerStats:
    if snapshot.current_status not in STINT_STATUSES:
        return snapshot
    if snapshot.has_open_stint and not is_paused and running_seconds >= int(now - record.timestamp):
        # Clock ran without a break since the rotation; the old stint still holds.
        return snapshot
    restored = credit_time(close_stint(snapshot, record.timestamp), running_seconds)
    return open_stint(restored, now, is_paused)


def restore_from_record(
    state: GameState,
    record: Optional[SubstitutionRecord],
    now: Optional[float] = None,
) -> GameState:
    """
    Reverse the rotation described by ``record``.

    The formation, rotation queue and pointers are restored verbatim and the
    saved stats replace the current ones. The returned state carries a
    :class:`SubTimerRestore` signal for the timer owner.
    """
    if record is None:
        logger.warning("Undo requested but there is no substitution to undo")
        return state
    if record.team_config is not None and record.team_config != state.team_config:
        logger.warning("Undo record belongs to a different team configuration; ignoring")
        return state

    current = resolve_now(now)
    running_seconds = running_seconds_since(state, record, current)
    updates: Dict[str, PlayerStats] = {}
    for player_id, snapshot in record.player_stats_before.items():
        if player_id not in state.players:
            logger.warning("Undo skipped unknown player %s", player_id)
            continue
        updates[player_id] = _reconcile_snapshot(
            snapshot, record, running_seconds, state.is_sub_timer_paused, current
        )

    restored = state.with_player_stats(
        updates,
        formation=record.before_formation,
        players_to_highlight=tuple(record.players_going_off_ids),
        last_substitution=None,
        sub_timer_seconds=record.sub_timer_seconds_at_substitution,
        sub_timer_restore=SubTimerRestore(
            seconds=record.sub_timer_seconds_at_substitution,
            anchor_ts=record.timestamp,
        ),
    )
    logger.debug(
        "Undid rotation from %.0f: %s back off, %s back on",
        record.timestamp,
        list(record.players_coming_on_ids),
        list(record.players_going_off_ids),
    )
    return restored.with_pointers(record.before_pointers)
