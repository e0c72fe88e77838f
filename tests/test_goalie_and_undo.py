"""
Unit tests for goalie changes and single-level undo.

Undo must reproduce the prior formation, pointers and player stats exactly,
for substitutions and goalie switches alike.
"""
import unittest
from dataclasses import replace

from sideline_rotation.models import PlayerRole, PlayerStatus, SubTimerRestore, TeamConfiguration
from sideline_rotation.services import (
    calculate_goalie_switch,
    calculate_pause,
    calculate_position_switch,
    calculate_resume,
    calculate_substitution,
    calculate_undo,
    get_player_time_stats,
)

from factories import individual_state


class TestGoalieSwitch(unittest.TestCase):
    """Putting another player in goal."""

    def setUp(self) -> None:
        self.state = individual_state(now=1000.0)

    def test_field_player_becomes_goalie(self) -> None:
        after = calculate_goalie_switch(self.state, "c", now=1300.0)

        self.assertEqual(after.formation.goalie, "c")
        self.assertEqual(after.formation.slots["left_attacker"], "g")

        c_stats = after.players["c"].stats
        self.assertEqual(c_stats.current_status, PlayerStatus.GOALIE)
        self.assertEqual(c_stats.current_role, PlayerRole.NONE)
        self.assertEqual(c_stats.time_as_attacker_seconds, 300)
        self.assertEqual(c_stats.last_stint_start_time_epoch, 1300.0)

        g_stats = after.players["g"].stats
        self.assertEqual(g_stats.current_status, PlayerStatus.ON_FIELD)
        self.assertEqual(g_stats.current_role, PlayerRole.ATTACKER)
        self.assertEqual(g_stats.current_pair_key, "left_attacker")
        self.assertEqual(g_stats.time_as_goalie_seconds, 300)

    def test_old_goalie_takes_exact_queue_position(self) -> None:
        after = calculate_goalie_switch(self.state, "c", now=1300.0)
        self.assertEqual(after.rotation_queue, ("a", "b", "g", "d", "e", "f"))
        self.assertEqual(after.next_player_id_to_sub_out, "a")

    def test_substitute_becomes_goalie(self) -> None:
        after = calculate_goalie_switch(self.state, "e", now=1300.0)
        self.assertEqual(after.formation.slots["substitute_1"], "g")
        self.assertEqual(after.players["g"].stats.current_status, PlayerStatus.BENCH)
        self.assertIsNone(after.players["g"].stats.last_stint_start_time_epoch)
        self.assertEqual(after.rotation_queue, ("a", "b", "c", "d", "g", "f"))

    def test_rejected_switches(self) -> None:
        self.assertIs(calculate_goalie_switch(self.state, "g"), self.state)
        self.assertIs(calculate_goalie_switch(self.state, "nobody"), self.state)

        inactive = replace(self.state.players["e"].stats, is_inactive=True)
        state = self.state.with_player_stats({"e": inactive})
        self.assertIs(calculate_goalie_switch(state, "e"), state)

    def test_switch_is_recorded_for_undo(self) -> None:
        after = calculate_goalie_switch(self.state, "c", now=1300.0)
        record = after.last_substitution
        self.assertEqual(record.players_coming_on_ids, ("c",))
        self.assertEqual(record.players_going_off_ids, ("g",))


class TestUndo(unittest.TestCase):
    """Reversing the last rotation."""

    def assert_restored(self, undone, original) -> None:
        self.assertEqual(undone.formation, original.formation)
        self.assertEqual(undone.pointers, original.pointers)
        for pid, player in original.players.items():
            self.assertEqual(undone.players[pid].stats, player.stats, pid)

    def test_substitution_round_trip_while_running(self) -> None:
        state = individual_state(now=1000.0)
        after = calculate_substitution(state, now=1300.0)
        undone = calculate_undo(after, after.last_substitution, now=1400.0)

        self.assert_restored(undone, state)
        self.assertIsNone(undone.last_substitution)
        self.assertEqual(undone.players_to_highlight, ("a",))

    def test_substitution_round_trip_while_paused(self) -> None:
        state = individual_state(paused=True)
        after = calculate_substitution(state, now=1300.0)
        undone = calculate_undo(after, after.last_substitution, now=1400.0)
        self.assert_restored(undone, state)

    def test_undo_after_goalie_switch(self) -> None:
        state = individual_state(now=1000.0)
        after = calculate_goalie_switch(state, "c", now=1300.0)
        undone = calculate_undo(after, after.last_substitution, now=1500.0)

        self.assertEqual(undone.formation.goalie, "g")
        self.assertEqual(undone.formation.slots["left_attacker"], "c")
        self.assertEqual(undone.players["c"].stats.current_role, PlayerRole.ATTACKER)
        self.assert_restored(undone, state)

    def test_undo_signals_timer_restore(self) -> None:
        state = individual_state(now=1000.0).evolve(sub_timer_seconds=240)
        after = calculate_substitution(state, now=1240.0)
        self.assertEqual(after.sub_timer_seconds, 0)

        undone = calculate_undo(after, after.last_substitution, now=1300.0)
        self.assertEqual(undone.sub_timer_restore, SubTimerRestore(seconds=240, anchor_ts=1240.0))
        self.assertEqual(undone.sub_timer_seconds, 240)

    def test_undo_after_pause_credits_time_played_before_the_pause(self) -> None:
        state = individual_state(now=1000.0)
        after = calculate_substitution(state, now=1300.0)
        paused = calculate_pause(after, now=1350.0)
        undone = calculate_undo(paused, paused.last_substitution, now=1400.0)

        a_stats = undone.players["a"].stats
        self.assertEqual(a_stats.current_status, PlayerStatus.ON_FIELD)
        self.assertIsNone(a_stats.last_stint_start_time_epoch)
        self.assertEqual(a_stats.time_on_field_seconds, 350)

    def test_undo_across_pause_and_resume_skips_paused_interval(self) -> None:
        state = individual_state(now=1000.0)
        after = calculate_substitution(state, now=1100.0)
        after = calculate_pause(after, now=1150.0)
        after = calculate_resume(after, now=1300.0)
        undone = calculate_undo(after, after.last_substitution, now=1350.0)

        a_stats = undone.players["a"].stats
        self.assertEqual(a_stats.time_on_field_seconds, 200)
        self.assertEqual(a_stats.time_as_defender_seconds, 200)
        self.assertEqual(a_stats.last_stint_start_time_epoch, 1350.0)
        self.assertEqual(get_player_time_stats(undone, "a", now=1400.0).total_outfield_time, 250)
        self.assertEqual(get_player_time_stats(undone, "b", now=1400.0).total_outfield_time, 250)
        self.assertEqual(undone.players["e"].stats.time_on_field_seconds, 0)

    def test_missing_record_is_a_no_op(self) -> None:
        state = individual_state()
        self.assertIs(calculate_undo(state, None), state)

    def test_record_from_other_team_setup_is_ignored(self) -> None:
        after = calculate_substitution(individual_state(), now=1300.0)
        other = individual_state(squad_size=8)
        record = replace(after.last_substitution, team_config=TeamConfiguration("5v5", 6))
        self.assertIs(calculate_undo(other, record), other)

    def test_only_the_last_rotation_is_kept(self) -> None:
        state = individual_state(now=1000.0)
        first = calculate_substitution(state, now=1100.0)
        second = calculate_substitution(first, now=1200.0)
        undone = calculate_undo(second, second.last_substitution, now=1250.0)
        self.assert_restored(undone, first)

    def test_other_changes_clear_the_record(self) -> None:
        after = calculate_substitution(individual_state(), now=1100.0)
        switched = calculate_position_switch(after, "b", "c", now=1150.0)
        self.assertIsNone(switched.last_substitution)


if __name__ == '__main__':
    unittest.main()
