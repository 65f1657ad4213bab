from __future__ import annotations

from typing import Any, Dict, List, Tuple

SCHEMA_VERSION = "1.0.0"
SCHEMA_URI = "https://json-schema.org/draft/2020-12/schema"

# Source columns
PLAYER_ID_COLUMN = "PlayerId"
PLAYER_NAME_COLUMN = "Name"
PLAYER_ROLE_COLUMN = "Role"
PLAYER_TEAM_COLUMN = "TeamName"
RANK_COLUMN = "Rank"
USER_NAME_COLUMN = "UserName"

# Roster slots in declaration order: 5 batters, 1 wicketkeeper, 5 bowlers
BATTER_SLOTS: Tuple[str, ...] = tuple(f"Batter{i}" for i in range(1, 6))
WICKETKEEPER_SLOTS: Tuple[str, ...] = ("Wicketkeeper",)
BOWLER_SLOTS: Tuple[str, ...] = tuple(f"Bowler{i}" for i in range(1, 6))
ROSTER_SLOTS: Tuple[str, ...] = BATTER_SLOTS + WICKETKEEPER_SLOTS + BOWLER_SLOTS

SELECTION_COLUMNS: List[str] = [USER_NAME_COLUMN, *ROSTER_SLOTS]

# Role tokens, checked in this order; the first substring match wins
ROLE_TOKENS: Tuple[str, ...] = ("batter", "wicketkeeper", "bowler")

TEAM_ENTRY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name", "role", "rank"],
    "properties": {
        "name": {"type": "string"},
        "role": {"type": "string"},
        "rank": {"type": "number"},
    },
}

LEADERBOARD_ENTRY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["position", "user_name", "total_score", "team"],
    "properties": {
        "position": {"type": "integer"},
        "user_name": {"type": "string"},
        "total_score": {"type": "number"},
        "team": {"type": "array", "items": TEAM_ENTRY_SCHEMA},
        "team_summary": {"type": "array", "items": {"type": "string"}},
    },
}

TOP_PERFORMER_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["player_id", "name", "rank"],
    "properties": {
        "player_id": {"type": "string"},
        "name": {"type": "string"},
        "role": {"type": "string"},
        "team": {"type": "string"},
        "rank": {"type": "number"},
    },
}

LEADERBOARD_SCHEMA: Dict[str, Any] = {
    "$schema": SCHEMA_URI,
    "type": "object",
    "required": ["schemaVersion", "leaderboard", "top_performers"],
    "properties": {
        "schemaVersion": {"type": "string"},
        "generated_at": {"type": ["string", "null"]},
        "leaderboard": {"type": "array", "items": LEADERBOARD_ENTRY_SCHEMA},
        "top_performers": {
            "type": "object",
            "required": ["batters", "wicketkeepers", "bowlers"],
            "properties": {
                "batters": {"type": "array", "items": TOP_PERFORMER_SCHEMA},
                "wicketkeepers": {"type": "array", "items": TOP_PERFORMER_SCHEMA},
                "bowlers": {"type": "array", "items": TOP_PERFORMER_SCHEMA},
            },
        },
    },
}
