"""
Unit tests for the animation orchestrator.

A recording scheduler stands in for the UI event loop so each phase can be
stepped through by hand.
"""
import unittest

from sideline_rotation.models import AnimationPhase, AnimationType
from sideline_rotation.services import (
    AnimationCallbacks,
    AnimationOrchestrator,
    calculate_next_substitution_target,
    calculate_substitution,
    immediate_scheduler,
)
from sideline_rotation.services.animation_orchestrator import (
    box_height_px,
    calculate_player_animations,
    capture_player_positions,
)
from sideline_rotation.utils.constants import ANIMATION_DURATION_MS, BOX_SPACING_FACTOR, GLOW_DURATION_MS

from factories import individual_state, pairs_state


class RecordingScheduler:
    """Collects delayed callbacks instead of running them."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay_ms, callback):
        self.pending.append((delay_ms, callback))

    def run_next(self):
        delay_ms, callback = self.pending.pop(0)
        callback()
        return delay_ms


class TestMovementDetection(unittest.TestCase):
    """Working out who moves and how far."""

    def test_substitution_moves_three_players(self) -> None:
        before = individual_state()
        after = calculate_substitution(before, now=1100.0)
        animations = calculate_player_animations(
            capture_player_positions(before), capture_player_positions(after), before.team_config
        )

        self.assertEqual(set(animations), {"a", "e", "f"})
        self.assertEqual(animations["a"].direction, "down")
        self.assertEqual(animations["a"].from_position, "left_defender")
        self.assertEqual(animations["a"].to_position, "substitute_2")
        self.assertEqual(animations["e"].direction, "up")
        expected = round(5 * box_height_px(before.team_config) * BOX_SPACING_FACTOR, 2)
        self.assertEqual(animations["a"].distance_px, expected)

    def test_goalie_is_captured_at_top(self) -> None:
        positions = capture_player_positions(individual_state())
        self.assertEqual(positions["g"].position_index, 0)
        self.assertEqual(positions["e"].position, "substitute_1")

    def test_pair_role_swap_has_no_movement(self) -> None:
        state = pairs_state()
        positions = capture_player_positions(state)
        self.assertEqual(positions["a"].pair_role, "defender")
        self.assertEqual(calculate_player_animations(positions, positions, state.team_config), {})


class TestOrchestration(unittest.TestCase):
    """Two-phase sequence around a transition."""

    def setUp(self) -> None:
        self.scheduler = RecordingScheduler()
        self.orchestrator = AnimationOrchestrator(self.scheduler)
        self.applied = []
        self.phases = []
        self.hidden = []
        self.glowing = []
        self.callbacks = AnimationCallbacks(
            set_animation_state=lambda state: self.phases.append(state.phase),
            set_hide_next_off_indicator=self.hidden.append,
            set_recently_substituted_players=self.glowing.append,
        )

    def test_full_sequence_commits_once(self) -> None:
        before = individual_state()
        after = self.orchestrator.animate(
            before, lambda s: calculate_substitution(s, now=1100.0), self.applied.append, self.callbacks
        )

        self.assertIsNotNone(after)
        self.assertEqual(self.applied, [])
        self.assertEqual(self.orchestrator.animation_state.phase, AnimationPhase.SWITCHING)
        self.assertEqual(self.orchestrator.animation_state.type, AnimationType.GENERIC)
        self.assertEqual(self.hidden, [True])

        self.assertEqual(self.scheduler.run_next(), ANIMATION_DURATION_MS)
        self.assertEqual(self.applied, [after])
        self.assertEqual(self.orchestrator.animation_state.phase, AnimationPhase.COMPLETING)
        self.assertEqual(self.glowing[-1], {"e"})

        self.assertEqual(self.scheduler.run_next(), GLOW_DURATION_MS)
        self.assertTrue(self.orchestrator.is_idle)
        self.assertEqual(self.hidden, [True, False])
        self.assertEqual(self.glowing[-1], set())
        self.assertEqual(
            self.phases,
            [AnimationPhase.SWITCHING, AnimationPhase.COMPLETING, AnimationPhase.IDLE],
        )
        self.assertEqual(len(self.applied), 1)

    def test_trigger_during_sequence_is_ignored(self) -> None:
        state = individual_state()
        self.orchestrator.animate(state, calculate_substitution, self.applied.append, self.callbacks)
        second = self.orchestrator.animate(state, calculate_substitution, self.applied.append, self.callbacks)
        self.assertIsNone(second)
        self.assertEqual(len(self.scheduler.pending), 1)

    def test_change_without_movement_applies_immediately(self) -> None:
        state = individual_state()
        after = self.orchestrator.animate(
            state,
            lambda s: calculate_next_substitution_target(s, "right_attacker"),
            self.applied.append,
            self.callbacks,
        )
        self.assertEqual(self.applied, [after])
        self.assertTrue(self.orchestrator.is_idle)
        self.assertEqual(self.phases, [])

    def test_stale_glow_timer_keeps_later_highlight(self) -> None:
        state = individual_state()
        self.orchestrator.animate(
            state,
            lambda s: s.evolve(players_to_highlight=("c",)),
            self.applied.append,
            self.callbacks,
        )
        self.assertEqual(self.glowing, [{"c"}])
        self.assertTrue(self.orchestrator.is_idle)

        self.orchestrator.animate(
            state, lambda s: calculate_substitution(s, now=1100.0), self.applied.append, self.callbacks
        )
        _, complete = self.scheduler.pending.pop(1)
        complete()
        self.assertEqual(self.glowing[-1], {"e"})

        # Glow timer from the first change fires during the second one.
        self.assertEqual(self.scheduler.run_next(), GLOW_DURATION_MS)
        self.assertEqual(self.glowing[-1], {"e"})

        self.scheduler.run_next()
        self.assertEqual(self.glowing[-1], set())
        self.assertTrue(self.orchestrator.is_idle)

    def test_failing_transition_applies_nothing(self) -> None:
        def broken(state):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            self.orchestrator.animate(individual_state(), broken, self.applied.append, self.callbacks)
        self.assertEqual(self.applied, [])
        self.assertTrue(self.orchestrator.is_idle)

    def test_immediate_scheduler_runs_to_idle(self) -> None:
        orchestrator = AnimationOrchestrator(immediate_scheduler)
        orchestrator.animate(
            individual_state(), lambda s: calculate_substitution(s, now=1100.0), self.applied.append, self.callbacks
        )
        self.assertEqual(len(self.applied), 1)
        self.assertTrue(orchestrator.is_idle)


if __name__ == '__main__':
    unittest.main()
