"""
Match session: the state holder that drives the rotation engine.

The session owns the current :class:`GameState`, the timers and the animation
orchestrator. It exposes the state factory and commit surface the engine
expects, and the coach-facing handlers (substitute now, change position,
switch goalie, ...) that wire a transition function through the orchestrator.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Set

from ..models import (
    AnimationState,
    Formation,
    GameState,
    Player,
    QueuePointers,
    RotationReport,
)
from .analytics_service import AnalyticsService
from .animation_orchestrator import AnimationCallbacks, AnimationOrchestrator
from .formation_engine import (
    RotationError,
    calculate_goalie_switch,
    calculate_next_substitution_target,
    calculate_pair_role_swap,
    calculate_player_toggle_inactive,
    calculate_position_switch,
    calculate_substitute_promotion,
    calculate_substitute_swap,
    calculate_substitution,
    calculate_undo,
)
from .rotation_queue import has_active_substitutes
from .time_accounting import (
    PlayerTimeStats,
    calculate_pause,
    calculate_resume,
    get_player_time_stats,
)
from .timer_service import TimerService

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Please wait for the current change to finish"


@dataclass
class ActionResult:
    """Outcome of a coach action."""
    success: bool
    message: str = ""
    state: Optional[GameState] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        key = "message" if self.success else "error"
        return {"success": self.success, key: self.message}


class MatchSession:
    """
    Holds one match and serializes every change to it.

    All transitions go through :meth:`commit`, which swaps in a complete new
    game state under a lock.
    """

    def __init__(
        self,
        game_state: GameState,
        timer_service: Optional[TimerService] = None,
        orchestrator: Optional[AnimationOrchestrator] = None,
        analytics_service: Optional[AnalyticsService] = None,
    ):
        self._state = game_state
        self._lock = threading.RLock()
        self.timer_service = timer_service or TimerService()
        self.orchestrator = orchestrator or AnimationOrchestrator()
        self.analytics_service = analytics_service or AnalyticsService()

        self.animation_state = AnimationState()
        self.hide_next_off_indicator = False
        self.recently_substituted_players: Set[str] = set()
        self.callbacks = AnimationCallbacks(
            set_animation_state=self._set_animation_state,
            set_hide_next_off_indicator=self._set_hide_next_off_indicator,
            set_recently_substituted_players=self._set_recently_substituted_players,
        )

    # ------------------------------------------------------------------
    # State factory and commit surface
    # ------------------------------------------------------------------
    def get_game_state(self) -> GameState:
        """Current complete game state, with live timer figures folded in."""
        with self._lock:
            period_number, _ = self.timer_service.get_period_info()
            return self._state.evolve(
                sub_timer_seconds=self.timer_service.get_sub_timer_seconds(),
                period_number=period_number,
            )

    def commit(self, state: GameState) -> None:
        """Atomically replace the whole game state."""
        with self._lock:
            self._state = state

    def set_formation(self, formation: Formation) -> None:
        with self._lock:
            self._state = self._state.evolve(formation=formation)

    def set_players(self, players: Dict[str, Player]) -> None:
        with self._lock:
            self._state = self._state.evolve(players=dict(players))

    def set_queue_pointers(self, pointers: QueuePointers) -> None:
        with self._lock:
            self._state = self._state.with_pointers(pointers)

    def set_rotation_queue(self, queue: Iterable[str]) -> None:
        with self._lock:
            self._state = self._state.evolve(rotation_queue=tuple(queue))

    def _set_animation_state(self, state: AnimationState) -> None:
        self.animation_state = state

    def _set_hide_next_off_indicator(self, hidden: bool) -> None:
        self.hide_next_off_indicator = hidden

    def _set_recently_substituted_players(self, player_ids: Set[str]) -> None:
        self.recently_substituted_players = set(player_ids)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def _run(
        self,
        description: str,
        transition: Callable[[GameState], GameState],
        on_applied: Optional[Callable[[GameState], None]] = None,
    ) -> ActionResult:
        if not self.orchestrator.is_idle:
            return ActionResult(False, BUSY_MESSAGE)

        def apply(new_state: GameState) -> None:
            self.commit(new_state)
            if on_applied is not None:
                on_applied(new_state)

        try:
            # Clock changes must not land between reading the state and switching.
            with self._lock:
                before = self.get_game_state()
                after = self.orchestrator.animate(before, transition, apply, self.callbacks)
        except RotationError as exc:
            logger.info("%s rejected: %s", description, exc)
            return ActionResult(False, str(exc))

        if after is None:
            return ActionResult(False, BUSY_MESSAGE)
        if after is before:
            return ActionResult(False, f"{description} is not possible right now")
        logger.info("%s", description)
        return ActionResult(True, description, after)

    def substitute_now(self, target: Optional[str] = None) -> ActionResult:
        """Rotate the next player (or pair) off, optionally choosing who first."""
        if not self.has_active_substitutes():
            return ActionResult(False, "No active substitute available")

        def transition(state: GameState) -> GameState:
            if target:
                state = calculate_next_substitution_target(state, target)
            return calculate_substitution(state)

        return self._run(
            "Substitution made",
            transition,
            lambda _: self.timer_service.reset_sub_timer(),
        )

    def set_next_substitution(self, target: str) -> ActionResult:
        return self._run(
            "Next substitution updated",
            lambda state: calculate_next_substitution_target(state, target),
        )

    def change_position(self, source_player_id: str, target_player_id: str) -> ActionResult:
        return self._run(
            "Positions switched",
            lambda state: calculate_position_switch(state, source_player_id, target_player_id),
        )

    def swap_pair_roles(self, pair_key: str) -> ActionResult:
        return self._run(
            "Pair roles swapped",
            lambda state: calculate_pair_role_swap(state, pair_key),
        )

    def switch_goalie(self, new_goalie_id: str) -> ActionResult:
        return self._run(
            "Goalie changed",
            lambda state: calculate_goalie_switch(state, new_goalie_id),
        )

    def toggle_inactive(self, player_id: str) -> ActionResult:
        player = self._state.players.get(player_id)
        description = "Player activated" if player and player.stats.is_inactive else "Player inactivated"
        return self._run(
            description,
            lambda state: calculate_player_toggle_inactive(state, player_id),
        )

    def set_as_next_to_go_in(self, player_id: str) -> ActionResult:
        return self._run(
            "Substitute order updated",
            lambda state: calculate_substitute_promotion(state, player_id),
        )

    def swap_substitutes(self, slot_a: str, slot_b: str) -> ActionResult:
        return self._run(
            "Substitutes swapped",
            lambda state: calculate_substitute_swap(state, slot_a, slot_b),
        )

    def undo_last_substitution(self) -> ActionResult:
        """Reverse the most recent rotation and restore the substitution timer."""
        record = self._state.last_substitution
        if record is None:
            logger.warning("Undo requested with nothing to undo")
            return ActionResult(False, "Nothing to undo")

        def restore_timer(state: GameState) -> None:
            if state.sub_timer_restore is not None:
                self.timer_service.restore_sub_timer(
                    state.sub_timer_restore.seconds, state.sub_timer_restore.anchor_ts
                )

        return self._run(
            "Last substitution undone",
            lambda state: calculate_undo(state, record),
            restore_timer,
        )

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def _clock_blocked(self) -> bool:
        # A pending commit was computed against the old clock state.
        if self.orchestrator.is_switching:
            logger.info("Clock change refused while a lineup change is in progress")
            return True
        return False

    def pause(self) -> ActionResult:
        with self._lock:
            if self._clock_blocked():
                return ActionResult(False, BUSY_MESSAGE)
            self.timer_service.pause()
            self._state = calculate_pause(self._state)
        return ActionResult(True, "Match paused")

    def resume(self) -> ActionResult:
        with self._lock:
            if self._clock_blocked():
                return ActionResult(False, BUSY_MESSAGE)
            self.timer_service.resume()
            self._state = calculate_resume(self._state)
        return ActionResult(True, "Match running")

    def end_period(self) -> ActionResult:
        with self._lock:
            if self._clock_blocked():
                return ActionResult(False, BUSY_MESSAGE)
            self._state = calculate_pause(self._state)
            more = self.timer_service.end_period()
            period_number, _ = self.timer_service.get_period_info()
            self._state = self._state.evolve(period_number=period_number)
        return ActionResult(True, "Period ended" if more else "Match finished")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def has_active_substitutes(self) -> bool:
        return has_active_substitutes(self._state)

    def player_time_stats(self, player_id: str) -> PlayerTimeStats:
        return get_player_time_stats(self._state, player_id)

    def rotation_report(self) -> RotationReport:
        return self.analytics_service.generate_rotation_report(
            self._state, self.timer_service.get_match_elapsed_seconds()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Everything a client needs to render the sideline view."""
        state = self.get_game_state()
        return {
            "game_state": state.to_json(),
            "animation_state": self.animation_state.to_dict(),
            "hide_next_off_indicator": self.hide_next_off_indicator,
            "recently_substituted_players": sorted(self.recently_substituted_players),
            "has_active_substitutes": has_active_substitutes(state),
            "can_undo": state.last_substitution is not None,
            "timer": self.timer_service.snapshot(),
        }
