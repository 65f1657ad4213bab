from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from leaderboard.scoring.indices import PlayerIndex, RankIndex
from leaderboard.validation.schemas import Number, UserSelection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeamEntry:
    """One resolved roster slot, as shown in a user's team details."""
    name: str
    role: str
    rank: Number

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "role": self.role, "rank": self.rank}


def resolve_player(player_id: str, player_index: PlayerIndex, rank_index: RankIndex) -> TeamEntry:
    """
    Resolve one identifier against the indices.

    An unranked player scores 0; an unknown player is shown by its identifier
    with an empty role.
    """
    rank = rank_index.get(player_id, 0)
    player = player_index.get(player_id)
    if player is None:
        logger.warning(f"Unknown player id {player_id!r} in roster")
        return TeamEntry(name=player_id, role="", rank=rank)
    return TeamEntry(name=player.name or player_id, role=player.role, rank=rank)


def resolve_roster(
    selection: UserSelection,
    player_index: PlayerIndex,
    rank_index: RankIndex
) -> Tuple[TeamEntry, ...]:
    """
    Resolve a selection's non-empty slots in declaration order:
    Batter1..Batter5, Wicketkeeper, Bowler1..Bowler5.
    """
    return tuple(
        resolve_player(player_id, player_index, rank_index)
        for player_id in selection.selected_ids()
    )
