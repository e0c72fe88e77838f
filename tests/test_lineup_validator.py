"""
Unit tests for starting-lineup validation and match setup.
"""
import unittest

from sideline_rotation.models import (
    Formation,
    Pair,
    Player,
    PlayerRole,
    PlayerStatus,
    SubstitutionType,
    TeamConfiguration,
)
from sideline_rotation.services import (
    LineupValidationError,
    LineupValidationService,
    build_game_state,
    lineup_from_order,
)

from factories import make_players


class TestLineupValidation(unittest.TestCase):
    """Rules applied to a proposed starting lineup."""

    def setUp(self) -> None:
        self.config = TeamConfiguration("5v5", 7, "2-2")
        self.players = {p.id: p for p in make_players(list("abcdef"))}
        self.service = LineupValidationService(self.config, self.players)

    def test_complete_lineup_is_valid(self) -> None:
        lineup = lineup_from_order(self.config, "g", list("abcdef"))
        result = self.service.validate(lineup)
        self.assertTrue(result.is_valid, result.errors)

    def test_missing_goalie_and_field_player(self) -> None:
        lineup = lineup_from_order(self.config, None, list("abc"))
        result = self.service.validate(lineup)
        self.assertFalse(result.is_valid)
        self.assertIn("A goalie must be assigned", result.errors)
        self.assertIn("Position 'right_attacker' must be filled", result.errors)

    def test_duplicate_assignment(self) -> None:
        lineup = lineup_from_order(self.config, "g", list("abcdea"))
        result = self.service.validate(lineup)
        self.assertIn("Player 'a' is assigned to multiple positions", result.errors)
        self.assertIn("Player 'f' has no position in the lineup", result.errors)

    def test_unknown_slot_and_player(self) -> None:
        lineup = Formation(
            goalie="g",
            slots={
                "left_defender": "a",
                "right_defender": "b",
                "left_attacker": "c",
                "right_attacker": "zz",
                "sweeper": "d",
            },
        )
        errors = self.service.validate(lineup).errors
        self.assertIn("Unknown position 'sweeper' for 5v5 2-2", errors)
        self.assertIn("Player 'zz' is not in the squad", errors)

    def test_substitutes_fill_from_the_front(self) -> None:
        lineup = lineup_from_order(self.config, "g", list("abcd")).with_slots(
            {"substitute_1": None, "substitute_2": "e"}
        )
        errors = self.service.validate(lineup).errors
        self.assertIn("Substitute slots must be filled from the front", errors)

    def test_duplicate_jersey_numbers(self) -> None:
        players = dict(self.players)
        players["f"] = Player(id="f", name="F", number=2)
        service = LineupValidationService(self.config, players)
        lineup = lineup_from_order(self.config, "g", list("abcdef"))
        self.assertIn("Jersey number 2 is assigned to multiple players", service.validate(lineup).errors)

    def test_pairs_need_complete_field_pairs(self) -> None:
        config = TeamConfiguration("5v5", 7, "2-2", SubstitutionType.PAIRS)
        lineup = Formation(
            goalie="g",
            slots={
                "left_pair": Pair(defender="a"),
                "right_pair": Pair(defender="c", attacker="d"),
                "sub_pair": Pair(defender="e", attacker="f"),
            },
        )
        errors = LineupValidationService(config, self.players).validate(lineup).errors
        self.assertIn("Pair 'left_pair' needs both a defender and an attacker", errors)

    def test_lineup_completeness(self) -> None:
        lineup = lineup_from_order(self.config, "g", list("abcde"))
        self.assertEqual(
            self.service.get_lineup_completeness(lineup),
            {"filled": 6, "total": 7, "empty": 1},
        )


class TestBuildGameState(unittest.TestCase):
    """Seating a squad into the first game state."""

    def test_players_are_seated_with_roles(self) -> None:
        config = TeamConfiguration("5v5", 6, "1-2-1")
        lineup = lineup_from_order(config, "g", list("abcde"))
        state = build_game_state(config, make_players(list("abcde")), lineup, is_paused=False, now=50.0)

        self.assertEqual(state.players["g"].stats.current_status, PlayerStatus.GOALIE)
        self.assertEqual(state.players["b"].stats.current_role, PlayerRole.MIDFIELDER)
        self.assertEqual(state.players["d"].stats.current_role, PlayerRole.ATTACKER)
        self.assertEqual(state.players["e"].stats.current_status, PlayerStatus.BENCH)
        self.assertEqual(state.players["e"].stats.current_pair_key, "substitute_1")
        self.assertEqual(state.players["a"].stats.last_stint_start_time_epoch, 50.0)
        self.assertIsNone(state.players["e"].stats.last_stint_start_time_epoch)

    def test_players_may_be_given_as_dictionaries(self) -> None:
        config = TeamConfiguration("5v5", 6, "2-2")
        squad = [{"id": pid, "name": pid} for pid in "gabcde"]
        state = build_game_state(config, squad, lineup_from_order(config, "g", list("abcde")))
        self.assertTrue(state.is_sub_timer_paused)
        self.assertEqual(state.rotation_queue, ("a", "b", "c", "d", "e"))

    def test_invalid_lineup_raises(self) -> None:
        config = TeamConfiguration("5v5", 6, "2-2")
        with self.assertRaises(LineupValidationError) as ctx:
            build_game_state(config, make_players(list("abcde")), Formation(goalie="g"))
        self.assertIn("Position 'left_defender' must be filled", ctx.exception.errors)


if __name__ == '__main__':
    unittest.main()
