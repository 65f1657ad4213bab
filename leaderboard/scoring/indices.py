"""
Lookup indices over players and ranks.

Both indices are rebuilt from scratch on every run and never mutated after
construction. A repeated identifier overwrites the earlier record
(last-write-wins); this follows load order and is not otherwise guaranteed.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Tuple

from leaderboard.validation.schemas import Number, Player, PlayerRank

logger = logging.getLogger(__name__)

PlayerIndex = Dict[str, Player]
RankIndex = Dict[str, Number]


def build_player_index(players: Iterable[Player]) -> PlayerIndex:
    """Map player_id -> Player."""
    index: PlayerIndex = {}
    for player in players:
        if player.player_id in index:
            logger.debug(f"Duplicate player {player.player_id}; keeping the later row")
        index[player.player_id] = player
    return index


def build_rank_index(ranks: Iterable[PlayerRank]) -> RankIndex:
    """Map player_id -> rank."""
    index: RankIndex = {}
    for record in ranks:
        if record.player_id in index:
            logger.debug(f"Duplicate rank for {record.player_id}; keeping the later row")
        index[record.player_id] = record.rank
    return index


def build_indices(
    players: Iterable[Player],
    ranks: Iterable[PlayerRank]
) -> Tuple[PlayerIndex, RankIndex]:
    return build_player_index(players), build_rank_index(ranks)
