"""
GameState model for the Sideline Rotation engine.

This module contains the GameState dataclass, the immutable snapshot that every
lineup transition consumes and produces, along with its JSON representation.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Tuple

from .formation import Formation
from .player import Player, PlayerStats, PlayerStatus
from .substitution_record import QueuePointers, SubstitutionRecord, SubTimerRestore
from .team_config import TeamConfiguration


@dataclass(frozen=True)
class GameState:
    """
    Represents one complete, self-consistent moment of a match.

    Attributes:
        team_config: Team configuration fixed for the match
        formation: Current slot assignments
        players: Players keyed by id
        rotation_queue: Order in which outfield players rotate off
        next_physical_pair_to_sub_out: Pair slot leaving next (pairs mode)
        next_player_to_sub_out: Slot of the player leaving next (individual mode)
        next_player_id_to_sub_out: Player leaving next (individual mode)
        next_next_player_id_to_sub_out: Player leaving after that
        is_sub_timer_paused: Whether the clock (and all stints) is paused
        sub_timer_seconds: Substitution timer value when the state was built
        period_number: Current period (1-based)
        own_score: Goals scored by the team
        opponent_score: Goals conceded
        players_to_highlight: Players that moved in the last transition
        last_substitution: Undo record of the last rotation, if any
        sub_timer_restore: Timer restore signal produced by an undo
    """
    team_config: TeamConfiguration
    formation: Formation = field(default_factory=Formation)
    players: Dict[str, Player] = field(default_factory=dict)
    rotation_queue: Tuple[str, ...] = ()
    next_physical_pair_to_sub_out: Optional[str] = None
    next_player_to_sub_out: Optional[str] = None
    next_player_id_to_sub_out: Optional[str] = None
    next_next_player_id_to_sub_out: Optional[str] = None
    is_sub_timer_paused: bool = False
    sub_timer_seconds: int = 0
    period_number: int = 1
    own_score: int = 0
    opponent_score: int = 0
    players_to_highlight: Tuple[str, ...] = ()
    last_substitution: Optional[SubstitutionRecord] = None
    sub_timer_restore: Optional[SubTimerRestore] = None

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------
    @property
    def pointers(self) -> QueuePointers:
        return QueuePointers(
            rotation_queue=self.rotation_queue,
            next_physical_pair_to_sub_out=self.next_physical_pair_to_sub_out,
            next_player_to_sub_out=self.next_player_to_sub_out,
            next_player_id_to_sub_out=self.next_player_id_to_sub_out,
            next_next_player_id_to_sub_out=self.next_next_player_id_to_sub_out,
        )

    def stats_of(self, player_id: str) -> Optional[PlayerStats]:
        player = self.players.get(player_id)
        return player.stats if player else None

    def players_with_status(self, status: PlayerStatus) -> Iterable[Player]:
        return [p for p in self.players.values() if p.stats.current_status is status]

    def evolve(self, **changes: Any) -> "GameState":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)

    def with_pointers(self, pointers: QueuePointers, **changes: Any) -> "GameState":
        return replace(
            self,
            rotation_queue=tuple(pointers.rotation_queue),
            next_physical_pair_to_sub_out=pointers.next_physical_pair_to_sub_out,
            next_player_to_sub_out=pointers.next_player_to_sub_out,
            next_player_id_to_sub_out=pointers.next_player_id_to_sub_out,
            next_next_player_id_to_sub_out=pointers.next_next_player_id_to_sub_out,
            **changes,
        )

    def with_player_stats(self, updates: Dict[str, PlayerStats], **changes: Any) -> "GameState":
        """Return a copy where the players in ``updates`` carry new stats."""
        players = dict(self.players)
        for player_id, stats in updates.items():
            players[player_id] = players[player_id].with_stats(stats)
        return replace(self, players=players, **changes)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_json(self) -> dict:
        """
        Convert GameState to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        data = {
            "team_config": self.team_config.to_dict(),
            "formation": self.formation.to_dict(),
            "players": {pid: p.to_dict() for pid, p in self.players.items()},
            "is_sub_timer_paused": self.is_sub_timer_paused,
            "sub_timer_seconds": self.sub_timer_seconds,
            "period_number": self.period_number,
            "own_score": self.own_score,
            "opponent_score": self.opponent_score,
            "players_to_highlight": list(self.players_to_highlight),
            "last_substitution": (
                self.last_substitution.to_dict() if self.last_substitution else None
            ),
            "sub_timer_restore": (
                self.sub_timer_restore.to_dict() if self.sub_timer_restore else None
            ),
        }
        data.update(self.pointers.to_dict())
        return data

    @staticmethod
    def from_json(data: dict) -> "GameState":
        """
        Create GameState from JSON dictionary.

        Args:
            data: Dictionary containing game state data

        Returns:
            GameState instance reconstructed from the data
        """
        record = data.get("last_substitution")
        restore = data.get("sub_timer_restore")
        pointers = QueuePointers.from_dict(data)
        state = GameState(
            team_config=TeamConfiguration.from_dict(data.get("team_config", {})),
            formation=Formation.from_dict(data.get("formation", {})),
            players={
                pid: Player.from_dict(p) for pid, p in data.get("players", {}).items()
            },
            is_sub_timer_paused=bool(data.get("is_sub_timer_paused", False)),
            sub_timer_seconds=int(data.get("sub_timer_seconds", 0)),
            period_number=int(data.get("period_number", 1)),
            own_score=int(data.get("own_score", 0)),
            opponent_score=int(data.get("opponent_score", 0)),
            players_to_highlight=tuple(data.get("players_to_highlight", [])),
            last_substitution=SubstitutionRecord.from_dict(record) if record else None,
            sub_timer_restore=(
                SubTimerRestore(int(restore["seconds"]), float(restore["anchor_ts"]))
                if restore
                else None
            ),
        )
        return state.with_pointers(pointers)
