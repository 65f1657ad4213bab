"""
Role buckets and top performers.

Players are classified by case-insensitive substring match of their role
against "batter", "wicketkeeper" and "bowler", checked in that order; the
first match wins, so "Wicketkeeper/Batter" is a batter. Only players with a
rank record are bucketed. Roles matching none of the tokens are left out of
the buckets but still resolve normally in rosters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

import numpy as np
import pandas as pd

from leaderboard.config import TOP_PERFORMERS_SIZE
from leaderboard.data_schemas import ROLE_TOKENS
from leaderboard.scoring.indices import build_rank_index
from leaderboard.validation.schemas import Number, Player, PlayerRank

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["player_id", "name", "role", "team", "rank"]


@dataclass(frozen=True)
class RankedPlayer:
    """A player together with their rank, as listed under top performers."""
    player_id: str
    name: str
    role: str
    team: str
    rank: Number

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "role": self.role,
            "team": self.team,
            "rank": self.rank,
        }


@dataclass(frozen=True)
class TopPerformers:
    batters: Tuple[RankedPlayer, ...] = ()
    wicketkeepers: Tuple[RankedPlayer, ...] = ()
    bowlers: Tuple[RankedPlayer, ...] = ()

    def as_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "batters": [p.to_dict() for p in self.batters],
            "wicketkeepers": [p.to_dict() for p in self.wicketkeepers],
            "bowlers": [p.to_dict() for p in self.bowlers],
        }


def ranked_players_frame(
    players: Iterable[Player],
    ranks: Iterable[PlayerRank]
) -> pd.DataFrame:
    """
    One row per ranked player, in player load order, with a ``bucket``
    column holding the classified role ("" when unclassified) and a float
    ``sort_rank`` copy of ``rank`` to sort on.
    """
    rank_index = build_rank_index(ranks)

    rows = []
    unranked = 0
    for player in players:
        if player.player_id not in rank_index:
            unranked += 1
            continue
        rows.append({
            "player_id": player.player_id,
            "name": player.name,
            "role": player.role,
            "team": player.team,
            "rank": rank_index[player.player_id],
        })

    if unranked:
        logger.debug(f"{unranked} players have no rank and are left out of role buckets")

    # object dtype keeps ranks as the ints/floats the records carry
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS, dtype=object)
    df["sort_rank"] = df["rank"].astype(float)
    role_lower = df["role"].astype(str).str.lower()

    # np.select takes the first matching condition, which keeps the token order
    conditions = [role_lower.str.contains(token, regex=False).to_numpy(dtype=bool) for token in ROLE_TOKENS]
    df["bucket"] = np.select(conditions, list(ROLE_TOKENS), default="")

    return df


def _to_ranked_players(df: pd.DataFrame) -> List[RankedPlayer]:
    return [
        RankedPlayer(
            player_id=row["player_id"],
            name=row["name"],
            role=row["role"],
            team=row["team"],
            rank=row["rank"],
        )
        for row in df[FRAME_COLUMNS].to_dict(orient="records")
    ]


def partition_by_role(
    players: Iterable[Player],
    ranks: Iterable[PlayerRank]
) -> Dict[str, List[RankedPlayer]]:
    """
    Full role buckets keyed by token, each sorted by rank descending.
    Ties keep player load order.
    """
    df = ranked_players_frame(players, ranks)

    buckets: Dict[str, List[RankedPlayer]] = {}
    for token in ROLE_TOKENS:
        bucket_df = df[df["bucket"] == token].sort_values("sort_rank", ascending=False, kind="stable")
        buckets[token] = _to_ranked_players(bucket_df)

    return buckets


def top_performers(
    players: Iterable[Player],
    ranks: Iterable[PlayerRank],
    k: int = TOP_PERFORMERS_SIZE
) -> TopPerformers:
    """Top ``k`` players per role bucket."""
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")

    buckets = partition_by_role(players, ranks)
    return TopPerformers(
        batters=tuple(buckets["batter"][:k]),
        wicketkeepers=tuple(buckets["wicketkeeper"][:k]),
        bowlers=tuple(buckets["bowler"][:k]),
    )
