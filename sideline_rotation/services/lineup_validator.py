"""
Lineup validation for match setup.

The transition engine assumes well-formed game states. This module checks a
starting lineup once, when a match is set up, so that malformed input is
rejected with readable messages instead of surfacing later as a broken
rotation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter
from typing import Dict, List, Optional

from ..models import Formation, GOALIE_SLOT, Pair, Player, TeamConfiguration


class LineupValidationError(ValueError):
    """Raised when a starting lineup is not usable."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class ValidationResult:
    """Result of a validation operation with success status and error messages."""

    def __init__(self, is_valid: bool = True, errors: Optional[List[str]] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def add_error(self, error: str) -> None:
        """Add an error message and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def combine(self, other: 'ValidationResult') -> 'ValidationResult':
        """Combine with another validation result."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors
        )


class ValidationRule(ABC):
    """Abstract base class for lineup validation rules."""

    @abstractmethod
    def validate(self, formation: Formation) -> ValidationResult:
        """Perform validation and return result."""


class LineupStructureValidator(ValidationRule):
    """Checks that the formation uses exactly the slots of the team configuration."""

    def __init__(self, team_config: TeamConfiguration):
        self.team_config = team_config

    def validate(self, formation: Formation) -> ValidationResult:
        result = ValidationResult()
        mode = self.team_config.mode

        if not formation.goalie:
            result.add_error("A goalie must be assigned")

        expected = set(mode.field_positions) | set(mode.substitute_positions)
        unknown = sorted(set(formation.slots) - expected)
        for slot in unknown:
            result.add_error(f"Unknown position '{slot}' for {self.team_config.format} {self.team_config.formation}")

        for slot in mode.field_positions:
            value = formation.slots.get(slot)
            if mode.is_pairs:
                if not isinstance(value, Pair) or len(value.members()) != 2:
                    result.add_error(f"Pair '{slot}' needs both a defender and an attacker")
            elif not value:
                result.add_error(f"Position '{slot}' must be filled")

        if mode.is_pairs:
            for slot in mode.substitute_positions:
                value = formation.slots.get(slot)
                if value is not None and not isinstance(value, Pair):
                    result.add_error(f"Substitute pair '{slot}' must be a defender/attacker pair")
        else:
            seated = [bool(formation.slots.get(slot)) for slot in mode.substitute_positions]
            if any(later and not earlier for earlier, later in zip(seated, seated[1:])):
                result.add_error("Substitute slots must be filled from the front")
        return result


class PlayerAssignmentValidator(ValidationRule):
    """Validates player assignments against the squad."""

    def __init__(self, players: Dict[str, Player], team_config: TeamConfiguration):
        self.players = players
        self.team_config = team_config

    def validate(self, formation: Formation) -> ValidationResult:
        result = ValidationResult()
        assigned = list(formation.player_ids())

        for player_id in assigned:
            if player_id not in self.players:
                result.add_error(f"Player '{player_id}' is not in the squad")

        for player_id, count in Counter(assigned).items():
            if count > 1:
                result.add_error(f"Player '{player_id}' is assigned to multiple positions")

        for player_id in self.players:
            if player_id not in assigned:
                result.add_error(f"Player '{player_id}' has no position in the lineup")

        if len(self.players) > self.team_config.squad_size:
            result.add_error(
                f"Squad has {len(self.players)} players but the team setup allows {self.team_config.squad_size}"
            )

        numbers = [p.number for p in self.players.values() if p.number is not None]
        for number, count in Counter(numbers).items():
            if count > 1:
                result.add_error(f"Jersey number {number} is assigned to multiple players")
            if not 0 <= number <= 99:
                result.add_error(f"Invalid jersey number {number} (must be 0-99)")
        return result


class LineupValidationService:
    """Runs every lineup rule for one team configuration and squad."""

    def __init__(self, team_config: TeamConfiguration, players: Dict[str, Player]):
        self.team_config = team_config
        self.rules: List[ValidationRule] = [
            LineupStructureValidator(team_config),
            PlayerAssignmentValidator(players, team_config),
        ]

    def validate(self, formation: Formation) -> ValidationResult:
        result = ValidationResult()
        for rule in self.rules:
            result = result.combine(rule.validate(formation))
        return result

    def get_lineup_completeness(self, formation: Formation) -> Dict[str, int]:
        """Count filled and empty slots, goalie included."""
        mode = self.team_config.mode
        filled = 1 if formation.get(GOALIE_SLOT) else 0
        for slot in mode.field_positions + mode.substitute_positions:
            if formation.slots.get(slot):
                filled += 1
        total = len(mode.position_order)
        return {"filled": filled, "total": total, "empty": total - filled}
