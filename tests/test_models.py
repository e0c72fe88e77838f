"""
Unit tests for team configuration and state models.
"""
import unittest

from sideline_rotation.models import (
    Formation,
    GameState,
    Pair,
    PlayerRole,
    SubstitutionType,
    TeamConfiguration,
    TeamConfigurationError,
)
from sideline_rotation.services import calculate_substitution

from factories import individual_state, pairs_state


class TestTeamConfiguration(unittest.TestCase):
    """Derived slot layouts and validation."""

    def test_individual_layout(self) -> None:
        config = TeamConfiguration("7v7", 10, "2-3-1")
        mode = config.mode
        self.assertEqual(config.substitute_count, 3)
        self.assertEqual(mode.substitute_positions, ("substitute_1", "substitute_2", "substitute_3"))
        self.assertEqual(mode.role_for("center_midfielder"), PlayerRole.MIDFIELDER)
        self.assertEqual(mode.role_for("substitute_1"), PlayerRole.NONE)
        self.assertEqual(mode.substitute_rotation_pattern, "advanced_carousel")
        self.assertTrue(mode.supports_inactive_users)
        self.assertTrue(mode.supports_next_next_indicators)

    def test_pairs_layout(self) -> None:
        mode = TeamConfiguration("5v5", 7, "2-2", SubstitutionType.PAIRS).mode
        self.assertTrue(mode.is_pairs)
        self.assertEqual(mode.field_positions, ("left_pair", "right_pair"))
        self.assertEqual(mode.substitute_positions, ("sub_pair",))
        self.assertFalse(mode.supports_inactive_users)

    def test_no_substitutes(self) -> None:
        mode = TeamConfiguration("5v5", 5, "2-2").mode
        self.assertEqual(mode.substitute_positions, ())
        self.assertFalse(mode.supports_inactive_users)
        self.assertEqual(mode.substitute_rotation_pattern, "simple")

    def test_invalid_configurations(self) -> None:
        with self.assertRaises(TeamConfigurationError):
            TeamConfiguration("5v5", 12, "2-2")
        with self.assertRaises(TeamConfigurationError):
            TeamConfiguration("7v7", 6, "2-2-2")
        with self.assertRaises(TeamConfigurationError):
            TeamConfiguration("5v5", 7, "2-2-2")
        with self.assertRaises(TeamConfigurationError):
            TeamConfiguration("5v5", 8, "2-2", SubstitutionType.PAIRS)
        with self.assertRaises(TeamConfigurationError):
            TeamConfiguration("9v9", 10, "3-3-2")

    def test_from_dict(self) -> None:
        config = TeamConfiguration.from_dict(
            {"format": "7v7", "squad_size": "9", "formation": "2-2-2"}
        )
        self.assertEqual(config.squad_size, 9)
        self.assertEqual(config.substitution_type, SubstitutionType.INDIVIDUAL)
        self.assertEqual(TeamConfiguration.from_dict(config.to_dict()), config)

        with self.assertRaises(TeamConfigurationError):
            TeamConfiguration.from_dict({"substitution_type": "triples"})


class TestFormation(unittest.TestCase):
    """Slot lookups."""

    def test_find_player_in_pairs(self) -> None:
        formation = pairs_state().formation
        self.assertEqual(formation.find_player("d"), ("right_pair", "attacker"))
        self.assertEqual(formation.find_player("g"), ("goalie", None))
        self.assertIsNone(formation.find_player("nobody"))
        self.assertEqual(list(formation.player_ids())[:3], ["g", "a", "b"])

    def test_from_dict_builds_pairs(self) -> None:
        formation = Formation.from_dict(
            {"goalie": "g", "left_pair": {"defender": "a", "attacker": "b"}, "substitute_1": "e"}
        )
        self.assertEqual(formation.slots["left_pair"], Pair("a", "b"))
        self.assertEqual(formation.slots["substitute_1"], "e")
        self.assertEqual(formation.get("goalie"), "g")


class TestGameStateSerialization(unittest.TestCase):
    """JSON form of a mid-match state."""

    def test_state_with_undo_record_survives_json(self) -> None:
        state = calculate_substitution(individual_state(now=1000.0), now=1300.0)
        restored = GameState.from_json(state.to_json())

        self.assertEqual(restored.formation, state.formation)
        self.assertEqual(restored.pointers, state.pointers)
        self.assertEqual(restored.players, state.players)
        self.assertEqual(restored.last_substitution, state.last_substitution)


if __name__ == '__main__':
    unittest.main()
