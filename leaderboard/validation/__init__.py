"""
Record shapes and validation for the leaderboard sources.

This module provides:
- Immutable record schemas for players, ranks and user selections
- Row conversion applied once at the load boundary
- Per-record validation helpers
"""

from leaderboard.validation.schemas import (
    Player,
    PlayerRank,
    UserSelection,
    ValidationError,
    ValidationResult,
    players_from_rows,
    ranks_from_rows,
    selections_from_rows,
    validate_batch,
    validate_record,
)

__all__ = [
    "Player",
    "PlayerRank",
    "UserSelection",
    "ValidationError",
    "ValidationResult",
    "players_from_rows",
    "ranks_from_rows",
    "selections_from_rows",
    "validate_batch",
    "validate_record",
]
