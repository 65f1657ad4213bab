from __future__ import annotations

import pytest

from leaderboard.scoring.indices import build_indices
from leaderboard.scoring.roles import (
    RankedPlayer,
    partition_by_role,
    top_performers,
)
from leaderboard.scoring.roster import resolve_player
from leaderboard.validation.schemas import Player, PlayerRank


@pytest.mark.parametrize(
    "role, expected",
    [
        ("Batter", "batter"),
        ("BOWLER", "bowler"),
        ("wicketkeeper", "wicketkeeper"),
        ("Wicketkeeper/Batter", "batter"),
        ("Batter/Wicketkeeper", "batter"),
        ("Wicketkeeper-Bowler", "wicketkeeper"),
        ("All-rounder", None),
        ("", None),
    ],
)
def test_role_buckets_check_tokens_in_fixed_order(role, expected):
    buckets = partition_by_role([Player("P1", "A", role, "X")], [PlayerRank("P1", 10)])

    placed = [token for token, players in buckets.items() if players]
    assert placed == ([expected] if expected else [])


def test_integral_ranks_stay_int_next_to_fractional_ranks():
    players = [Player("P1", "A", "Batter", "X"), Player("P2", "B", "Batter", "X")]
    ranks = [PlayerRank("P1", 80), PlayerRank("P2", 72.5)]

    top = top_performers(players, ranks)

    assert [(p.player_id, p.rank) for p in top.batters] == [("P1", 80), ("P2", 72.5)]
    assert type(top.batters[0].rank) is int
    assert type(top.as_dict()["batters"][0]["rank"]) is int
    assert type(top.batters[1].rank) is float

    player_index, rank_index = build_indices(players, ranks)
    assert resolve_player("P1", player_index, rank_index).rank == top.batters[0].rank


def test_top_three_batters_in_descending_order():
    players = [Player(f"B{i}", f"Bat {i}", "Batter", "X") for i in range(5)]
    ranks = [PlayerRank(f"B{i}", r) for i, r in enumerate([40, 95, 10, 70, 88])]

    top = top_performers(players, ranks)

    assert [p.player_id for p in top.batters] == ["B1", "B4", "B3"]
    assert [p.rank for p in top.batters] == [95, 88, 70]
    assert top.wicketkeepers == ()
    assert top.bowlers == ()


def test_unranked_and_unclassified_players_are_left_out():
    players = [
        Player("P1", "A", "Batter", "X"),
        Player("P2", "B", "Bowler", "X"),
        Player("P3", "C", "All-rounder", "Y"),
        Player("P4", "D", "Wicketkeeper/Batter", "Y"),
    ]
    ranks = [PlayerRank("P1", 50), PlayerRank("P3", 99), PlayerRank("P4", 60)]

    buckets = partition_by_role(players, ranks)

    assert [p.player_id for p in buckets["batter"]] == ["P4", "P1"]
    assert buckets["bowler"] == []
    assert buckets["wicketkeeper"] == []
    ranked_ids = {r.player_id for r in ranks}
    for bucket in buckets.values():
        assert all(p.player_id in ranked_ids for p in bucket)


def test_bucket_entries_carry_player_details():
    top = top_performers([Player("P2", "B", "Bowler", "X")], [PlayerRank("P2", 60)])
    assert top.bowlers == (RankedPlayer("P2", "B", "Bowler", "X", 60),)
    assert top.as_dict()["bowlers"] == [
        {"player_id": "P2", "name": "B", "role": "Bowler", "team": "X", "rank": 60}
    ]


def test_ties_keep_player_order_and_size_is_capped():
    players = [Player(f"W{i}", f"K{i}", "Wicketkeeper", "X") for i in range(5)]
    ranks = [PlayerRank(f"W{i}", 50) for i in range(5)]

    top = top_performers(players, ranks)

    assert [p.player_id for p in top.wicketkeepers] == ["W0", "W1", "W2"]
    assert len(top_performers(players, ranks, k=10).wicketkeepers) == 5


def test_rank_lookup_uses_last_rank_record():
    players = [Player("P1", "A", "Bowler", "X"), Player("P2", "B", "Bowler", "X")]
    ranks = [PlayerRank("P1", 90), PlayerRank("P2", 60), PlayerRank("P1", 10)]

    top = top_performers(players, ranks)

    assert [(p.player_id, p.rank) for p in top.bowlers] == [("P2", 60), ("P1", 10)]


def test_no_players_gives_empty_buckets():
    top = top_performers([], [])
    assert (top.batters, top.wicketkeepers, top.bowlers) == ((), (), ())
