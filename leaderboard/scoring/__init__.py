"""
Leaderboard Scoring Module

Joins user selections to player and rank data and ranks the results:
    - indices: player_id -> player / rank lookups
    - roster: resolve a selection's slots to team entries
    - standings: per-user totals and the ranked leaderboard
    - roles: role buckets and top performers
"""

from leaderboard.scoring.indices import build_indices, build_player_index, build_rank_index
from leaderboard.scoring.roles import (
    RankedPlayer,
    TopPerformers,
    partition_by_role,
    top_performers,
)
from leaderboard.scoring.roster import TeamEntry, resolve_player, resolve_roster
from leaderboard.scoring.standings import (
    ScoredSelection,
    rank_leaderboard,
    score_selection,
    score_selections,
    top_users,
    total_score,
)

__all__ = [
    "build_indices",
    "build_player_index",
    "build_rank_index",
    "RankedPlayer",
    "TopPerformers",
    "partition_by_role",
    "top_performers",
    "TeamEntry",
    "resolve_player",
    "resolve_roster",
    "ScoredSelection",
    "rank_leaderboard",
    "score_selection",
    "score_selections",
    "top_users",
    "total_score",
]
