"""
Animation orchestration around lineup transitions.

The orchestrator computes the new state up front, works out which players
change slot, and then walks a two-phase visual sequence (``switching`` then
``completing``) using delayed callbacks before returning to ``idle``. The new
state is committed exactly once, through ``apply_fn``, at the end of the
switching phase.

The scheduler is any callable shaped like Tk's ``after``:
``scheduler(delay_ms, callback)``. By default callbacks run on
``threading.Timer`` threads.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Set

from ..models import (
    AnimationPhase,
    AnimationState,
    AnimationType,
    GameState,
    Pair,
    PlayerAnimation,
    PlayerPosition,
    TeamConfiguration,
)
from ..utils.constants import (
    ANIMATION_DURATION_MS,
    BOX_BORDER_PX,
    BOX_CONTENT_INDIVIDUAL_PX,
    BOX_CONTENT_PAIRS_PX,
    BOX_GAP_PX,
    BOX_PADDING_PX,
    BOX_SPACING_FACTOR,
    GLOW_DURATION_MS,
)

logger = logging.getLogger(__name__)

Scheduler = Callable[[int, Callable[[], None]], Any]
TransitionFn = Callable[[GameState], GameState]
ApplyFn = Callable[[GameState], None]


def timer_scheduler(delay_ms: int, callback: Callable[[], None]) -> threading.Timer:
    """Run ``callback`` after ``delay_ms`` on a daemon timer thread."""
    timer = threading.Timer(delay_ms / 1000.0, callback)
    timer.daemon = True
    timer.start()
    return timer


def immediate_scheduler(delay_ms: int, callback: Callable[[], None]) -> None:
    """Run ``callback`` at once; for headless clients that do not animate."""
    callback()


@dataclass
class AnimationCallbacks:
    """UI hooks driven by the orchestrator."""
    set_animation_state: Callable[[AnimationState], None]
    set_hide_next_off_indicator: Callable[[bool], None] = lambda hidden: None
    set_recently_substituted_players: Callable[[Set[str]], None] = lambda player_ids: None


# ------------------------------------------------------------------
# Movement detection
# ------------------------------------------------------------------
def capture_player_positions(state: GameState) -> Dict[str, PlayerPosition]:
    """Index every seated player by their top-to-bottom slot position."""
    positions: Dict[str, PlayerPosition] = {}
    for index, slot in enumerate(state.team_config.mode.position_order):
        value = state.formation.get(slot)
        if isinstance(value, Pair):
            for pair_role in ("defender", "attacker"):
                player_id = getattr(value, pair_role)
                if player_id:
                    positions[player_id] = PlayerPosition(player_id, slot, index, pair_role)
        elif value:
            positions[value] = PlayerPosition(value, slot, index)
    return positions


def box_height_px(team_config: TeamConfiguration) -> int:
    content = BOX_CONTENT_PAIRS_PX if team_config.mode.is_pairs else BOX_CONTENT_INDIVIDUAL_PX
    return BOX_PADDING_PX + BOX_BORDER_PX + content + BOX_GAP_PX


def calculate_player_animations(
    before: Dict[str, PlayerPosition],
    after: Dict[str, PlayerPosition],
    team_config: TeamConfiguration,
) -> Dict[str, PlayerAnimation]:
    """
    Movement for each player whose slot changed.

    A role swap inside one pair keeps the slot, so it produces no movement.
    """
    height = box_height_px(team_config)
    animations: Dict[str, PlayerAnimation] = {}
    for player_id, old in before.items():
        new = after.get(player_id)
        if new is None or new.position == old.position:
            continue
        steps = new.position_index - old.position_index
        animations[player_id] = PlayerAnimation(
            player_id=player_id,
            from_position=old.position,
            to_position=new.position,
            from_index=old.position_index,
            to_index=new.position_index,
            distance_px=round(abs(steps) * height * BOX_SPACING_FACTOR, 2),
            direction="down" if steps > 0 else "up",
        )
    return animations


# ------------------------------------------------------------------
# Orchestrator
# ------------------------------------------------------------------
class AnimationOrchestrator:
    """Runs one visual sequence at a time around a transition function."""

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        animation_duration_ms: int = ANIMATION_DURATION_MS,
        glow_duration_ms: int = GLOW_DURATION_MS,
    ):
        self._schedule = scheduler or timer_scheduler
        self.animation_duration_ms = animation_duration_ms
        self.glow_duration_ms = glow_duration_ms
        self._state = AnimationState()
        self._lock = threading.Lock()
        self._glow_generation = 0

    @property
    def animation_state(self) -> AnimationState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state.is_idle

    @property
    def is_switching(self) -> bool:
        """True while a computed state is still waiting to be committed."""
        return self._state.phase is AnimationPhase.SWITCHING

    def animate(
        self,
        before_state: GameState,
        transition_fn: TransitionFn,
        apply_fn: ApplyFn,
        callbacks: AnimationCallbacks,
    ) -> Optional[GameState]:
        """
        Compute a transition and play it out.

        Args:
            before_state: State to transform
            transition_fn: Pure transition, e.g. ``calculate_substitution``
            apply_fn: Commits the new state; called exactly once
            callbacks: UI hooks for phases and highlights

        Returns:
            The new state, or None when another sequence is still running.
            Exceptions raised by ``transition_fn`` propagate and nothing is
            applied.
        """
        with self._lock:
            if not self.is_idle:
                logger.warning("Animation already in progress; trigger ignored")
                return None
            after_state = transition_fn(before_state)
            animations = calculate_player_animations(
                capture_player_positions(before_state),
                capture_player_positions(after_state),
                before_state.team_config,
            )
            highlighted = set(after_state.players_to_highlight)

            if not animations:
                apply_fn(after_state)
                if highlighted:
                    generation = self._start_glow(callbacks, highlighted)
                    self._schedule(self.glow_duration_ms, lambda: self._finish_glow(callbacks, generation))
                return after_state

            self._set_state(
                callbacks,
                AnimationState(AnimationType.GENERIC, AnimationPhase.SWITCHING, {"animations": animations}),
            )
            callbacks.set_hide_next_off_indicator(True)

        self._schedule(
            self.animation_duration_ms,
            lambda: self._complete(after_state, apply_fn, highlighted, callbacks),
        )
        return after_state

    # ------------------------------------------------------------------
    # Phase steps
    # ------------------------------------------------------------------
    def _set_state(self, callbacks: AnimationCallbacks, state: AnimationState) -> None:
        self._state = state
        callbacks.set_animation_state(state)

    def _complete(
        self,
        after_state: GameState,
        apply_fn: ApplyFn,
        highlighted: Iterable[str],
        callbacks: AnimationCallbacks,
    ) -> None:
        try:
            apply_fn(after_state)
        except Exception:
            logger.exception("Applying the new lineup failed; resetting animation")
            self._reset(callbacks)
            raise
        self._start_glow(callbacks, highlighted)
        self._set_state(
            callbacks,
            AnimationState(AnimationType.GENERIC, AnimationPhase.COMPLETING, self._state.data),
        )
        self._schedule(self.glow_duration_ms, lambda: self._reset(callbacks))

    def _reset(self, callbacks: AnimationCallbacks) -> None:
        self._set_state(callbacks, AnimationState())
        callbacks.set_hide_next_off_indicator(False)
        callbacks.set_recently_substituted_players(set())

    def _start_glow(self, callbacks: AnimationCallbacks, highlighted: Iterable[str]) -> int:
        self._glow_generation += 1
        callbacks.set_recently_substituted_players(set(highlighted))
        return self._glow_generation

    def _finish_glow(self, callbacks: AnimationCallbacks, generation: int) -> None:
        # A later sequence owns the highlight now.
        if generation == self._glow_generation:
            callbacks.set_recently_substituted_players(set())
