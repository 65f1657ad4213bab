#!/usr/bin/env python3
"""
Record Schemas

Typed, immutable record shapes for the three leaderboard sources:
- Player (Players sheet)
- PlayerRank (PlayerRanks sheet)
- UserSelection (UserSelections sheet)

Raw spreadsheet rows are loosely typed (numbers where strings are expected,
blank cells, stray whitespace). Each schema's ``from_row`` applies the
defaults once at the load boundary so the scoring code only ever sees the
shapes defined here.

Usage:
    from leaderboard.validation.schemas import Player, validate_record

    result = validate_record(Player, {"PlayerId": 7, "Name": "A", "Role": "Batter"})
    if not result.valid:
        print(f"Validation errors: {result.errors}")

    players = players_from_rows(rows)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from leaderboard.data_schemas import (
    PLAYER_ID_COLUMN,
    PLAYER_NAME_COLUMN,
    PLAYER_ROLE_COLUMN,
    PLAYER_TEAM_COLUMN,
    RANK_COLUMN,
    ROLE_TOKENS,
    ROSTER_SLOTS,
    USER_NAME_COLUMN,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]
Row = Mapping[str, Any]

T = TypeVar("T")


# Validation result types
@dataclass
class ValidationError:
    """A single validation error."""
    field: str
    message: str
    value: Any = None
    constraint: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of validating a record."""
    valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationError] = field(default_factory=list)
    record_type: Optional[str] = None
    record_id: Optional[str] = None

    def add_error(self, field: str, message: str, value: Any = None, constraint: str = None) -> None:
        """Add a validation error."""
        self.errors.append(ValidationError(field, message, value, constraint))
        self.valid = False

    def add_warning(self, field: str, message: str, value: Any = None) -> None:
        """Add a validation warning (doesn't fail validation)."""
        self.warnings.append(ValidationError(field, message, value))


# =============================================================================
# FIELD COERCION
# =============================================================================

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def get_field(row: Row, column: str) -> Any:
    """
    Best-effort column access.

    Exact column name first, then a case- and whitespace-insensitive match,
    since hand-edited workbooks drift on header spelling.
    """
    if column in row:
        return row[column]
    wanted = column.strip().lower()
    for key, value in row.items():
        if isinstance(key, str) and key.strip().lower() == wanted:
            return value
    return None


def normalize_player_id(value: Any) -> Optional[str]:
    """
    Normalize a player identifier to a string.

    Integral numbers lose their decimal part (``101.0`` -> ``"101"``) because
    spreadsheet readers hand back floats for numeric ID columns that contain
    blanks.
    """
    if _is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def is_empty_slot(value: Any) -> bool:
    """A roster slot is empty when its cell is blank or falsy (including 0)."""
    if _is_missing(value):
        return True
    if isinstance(value, (bool, int, float)) and not value:
        return True
    return False


def coerce_text(value: Any) -> str:
    if _is_missing(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def coerce_rank(value: Any) -> Optional[Number]:
    """
    Coerce a rank cell to a number.

    Returns None when the value is blank or not numeric; integral values are
    returned as int so totals stay integral.
    """
    if _is_missing(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    if number.is_integer():
        return int(number)
    return number


# =============================================================================
# RECORD SCHEMAS
# =============================================================================

@dataclass(frozen=True)
class Player:
    """
    A player from the Players sheet.

    Identity is ``player_id``. ``role`` is free text; see
    ``leaderboard.scoring.roles.partition_by_role``.
    """
    player_id: str
    name: str = ""
    role: str = ""
    team: str = ""

    @classmethod
    def from_row(cls, row: Row) -> "Player":
        return cls(
            player_id=normalize_player_id(get_field(row, PLAYER_ID_COLUMN)) or "",
            name=coerce_text(get_field(row, PLAYER_NAME_COLUMN)),
            role=coerce_text(get_field(row, PLAYER_ROLE_COLUMN)),
            team=coerce_text(get_field(row, PLAYER_TEAM_COLUMN)),
        )

    def validate(self) -> ValidationResult:
        """Validate this player record."""
        result = ValidationResult(valid=True, record_type="player", record_id=self.player_id)

        if not self.player_id:
            result.add_error("player_id", "PlayerId is required")

        if not self.name:
            result.add_warning("name", "Name is empty")

        role = self.role.lower()
        if not any(token in role for token in ROLE_TOKENS):
            result.add_warning(
                "role",
                f"Role does not match any of {', '.join(ROLE_TOKENS)}; excluded from top performers",
                self.role,
            )

        return result


@dataclass(frozen=True)
class PlayerRank:
    """A performance score for one player. Higher is better."""
    player_id: str
    rank: Number = 0

    @classmethod
    def from_row(cls, row: Row) -> "PlayerRank":
        rank = coerce_rank(get_field(row, RANK_COLUMN))
        return cls(
            player_id=normalize_player_id(get_field(row, PLAYER_ID_COLUMN)) or "",
            rank=0 if rank is None else rank,
        )

    def validate(self) -> ValidationResult:
        """Validate this rank record."""
        result = ValidationResult(valid=True, record_type="player_rank", record_id=self.player_id)

        if not self.player_id:
            result.add_error("player_id", "PlayerId is required")

        return result


@dataclass(frozen=True)
class UserSelection:
    """
    A user's team: the user name plus the 11 named roster slots.

    ``slots`` pairs each slot name with its player identifier (None when the
    slot is empty), in declaration order.
    """
    user_name: str
    slots: Tuple[Tuple[str, Optional[str]], ...] = ()

    @classmethod
    def from_row(cls, row: Row) -> "UserSelection":
        slots = []
        for slot in ROSTER_SLOTS:
            value = get_field(row, slot)
            slots.append((slot, None if is_empty_slot(value) else normalize_player_id(value)))
        return cls(
            user_name=coerce_text(get_field(row, USER_NAME_COLUMN)),
            slots=tuple(slots),
        )

    @classmethod
    def build(cls, user_name: str, **slot_ids: Optional[str]) -> "UserSelection":
        """Build a selection from slot keyword arguments, e.g. ``Batter1="P1"``."""
        unknown = set(slot_ids) - set(ROSTER_SLOTS)
        if unknown:
            raise ValueError(f"Unknown roster slots: {', '.join(sorted(unknown))}")
        return cls.from_row({USER_NAME_COLUMN: user_name, **slot_ids})

    def slot(self, name: str) -> Optional[str]:
        for slot_name, player_id in self.slots:
            if slot_name == name:
                return player_id
        raise KeyError(name)

    def selected_ids(self) -> Tuple[str, ...]:
        """Identifiers of the non-empty slots, in slot order."""
        return tuple(player_id for _, player_id in self.slots if player_id)

    def validate(self) -> ValidationResult:
        """Validate this selection record."""
        result = ValidationResult(valid=True, record_type="user_selection", record_id=self.user_name)

        if not self.user_name:
            result.add_error("user_name", "UserName is required")

        selected = self.selected_ids()
        if not selected:
            result.add_warning("slots", "No players selected")

        seen = set()
        for player_id in selected:
            if player_id in seen:
                result.add_warning("slots", "Player selected more than once", player_id)
            seen.add(player_id)

        return result


# =============================================================================
# ROW CONVERSION
# =============================================================================

def players_from_rows(rows: Iterable[Row]) -> List[Player]:
    """Convert raw Players rows; rows without a PlayerId are dropped."""
    players = []
    for row in rows:
        player = Player.from_row(row)
        if not player.player_id:
            continue
        players.append(player)
    return players


def ranks_from_rows(rows: Iterable[Row]) -> List[PlayerRank]:
    """Convert raw PlayerRanks rows; non-numeric ranks default to 0."""
    ranks = []
    for row in rows:
        record = PlayerRank.from_row(row)
        if not record.player_id:
            continue
        if coerce_rank(get_field(row, RANK_COLUMN)) is None:
            logger.warning(
                f"Rank for player {record.player_id} is not numeric "
                f"({get_field(row, RANK_COLUMN)!r}); using 0"
            )
        ranks.append(record)
    return ranks


def selections_from_rows(rows: Iterable[Row]) -> List[UserSelection]:
    """Convert raw UserSelections rows. Rows are kept even without a UserName."""
    selections = []
    for row in rows:
        selections.append(UserSelection.from_row(row))
    return selections


# =============================================================================
# VALIDATION UTILITIES
# =============================================================================

def validate_record(
    schema_class: Type[T],
    data: Dict[str, Any],
    strict: bool = False
) -> ValidationResult:
    """
    Validate a raw row against a schema class.

    Args:
        schema_class: One of Player, PlayerRank, UserSelection
        data: Raw row (column name -> value)
        strict: If True, treat warnings as errors

    Returns:
        ValidationResult with validation status and any errors
    """
    try:
        instance = schema_class.from_row(data)
    except (AttributeError, TypeError) as e:
        result = ValidationResult(valid=False, record_type=schema_class.__name__)
        result.add_error("_schema", f"Failed to create schema instance: {e}")
        return result

    result = instance.validate()

    if strict and result.warnings:
        for warning in result.warnings:
            result.add_error(warning.field, warning.message, warning.value)

    return result


def validate_batch(
    schema_class: Type[T],
    records: List[Dict[str, Any]],
    stop_on_first_error: bool = False,
    strict: bool = False
) -> Tuple[List[ValidationResult], int, int]:
    """
    Validate a batch of rows against a schema.

    Returns:
        Tuple of (list of results, valid_count, invalid_count)
    """
    results = []
    valid_count = 0
    invalid_count = 0

    for record in records:
        result = validate_record(schema_class, record, strict)
        results.append(result)

        if result.valid:
            valid_count += 1
        else:
            invalid_count += 1
            if stop_on_first_error:
                break

    return results, valid_count, invalid_count


# Schema registry for dynamic lookup
SCHEMA_REGISTRY: Dict[str, Type] = {
    "players": Player,
    "ranks": PlayerRank,
    "selections": UserSelection,
}
