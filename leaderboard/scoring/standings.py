"""
Score aggregation and leaderboard ranking.

Each user's total is the sum of the ranks of the players in their roster.
The leaderboard is a stable descending sort on that total, so users with
equal totals keep their order from the selections source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from leaderboard.config import LEADERBOARD_SIZE
from leaderboard.scoring.indices import PlayerIndex, RankIndex
from leaderboard.scoring.roster import TeamEntry, resolve_roster
from leaderboard.validation.schemas import Number, UserSelection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredSelection:
    """A user selection with its derived total and team details."""
    selection: UserSelection
    total_score: Number
    team_details: Tuple[TeamEntry, ...]

    @property
    def user_name(self) -> str:
        return self.selection.user_name


def total_score(entries: Iterable[TeamEntry]) -> Number:
    """Sum of entry ranks; 0 for an empty roster."""
    return sum(entry.rank for entry in entries)


def score_selection(
    selection: UserSelection,
    player_index: PlayerIndex,
    rank_index: RankIndex
) -> ScoredSelection:
    entries = resolve_roster(selection, player_index, rank_index)
    return ScoredSelection(
        selection=selection,
        total_score=total_score(entries),
        team_details=entries,
    )


def score_selections(
    selections: Iterable[UserSelection],
    player_index: PlayerIndex,
    rank_index: RankIndex
) -> List[ScoredSelection]:
    """Score every selection, preserving input order."""
    scored = [score_selection(s, player_index, rank_index) for s in selections]
    logger.debug(f"Scored {len(scored)} selections")
    return scored


def rank_leaderboard(scored: Iterable[ScoredSelection]) -> List[ScoredSelection]:
    """Full leaderboard, highest total first. Ties keep input order."""
    # sorted() is stable under reverse=True
    return sorted(scored, key=lambda s: s.total_score, reverse=True)


def top_users(ranked: Sequence[ScoredSelection], k: int = LEADERBOARD_SIZE) -> List[ScoredSelection]:
    """The first ``k`` users of an already ranked leaderboard."""
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    return list(ranked[:k])
