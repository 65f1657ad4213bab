from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
import pytest
import requests

from leaderboard import data_loader
from leaderboard.data_loader import DataLoadError, SourceData, load_all_sources, load_source, read_table
from leaderboard.data_schemas import SELECTION_COLUMNS
from leaderboard.validation.schemas import Player, PlayerRank

from tests.conftest import write_workbook


def _sources(directory: Path) -> dict:
    return {
        "players": str(directory / "Players.xlsx"),
        "selections": str(directory / "UserSelections.xlsx"),
        "ranks": str(directory / "PlayerRanks.xlsx"),
    }


def test_read_table_returns_first_sheet_rows_with_blanks_as_none(tmp_path: Path):
    path = tmp_path / "book.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as xw:
        pd.DataFrame([
            {"UserName": "U1", "Batter1": "P1", "Bowler1": None},
            {"UserName": None, "Batter1": None, "Bowler1": None},
            {"UserName": "U2", "Batter1": "P2", "Bowler1": "P3"},
        ]).to_excel(xw, index=False, sheet_name="first")
        pd.DataFrame([{"UserName": "ignored"}]).to_excel(xw, index=False, sheet_name="second")

    rows = read_table(str(path))

    assert rows == [
        {"UserName": "U1", "Batter1": "P1", "Bowler1": None},
        {"UserName": "U2", "Batter1": "P2", "Bowler1": "P3"},
    ]


def test_read_table_reads_csv(tmp_path: Path):
    path = tmp_path / "ranks.csv"
    path.write_text("PlayerId,Rank\nP1,80\nP2,\n")

    rows = read_table(str(path))

    assert rows == [{"PlayerId": "P1", "Rank": "80"}, {"PlayerId": "P2", "Rank": None}]


def test_read_table_fetches_remote_sources(monkeypatch, tmp_path: Path):
    path = write_workbook(tmp_path / "remote.xlsx", [{"PlayerId": "P1", "Rank": 80}])

    class FakeResponse:
        content = path.read_bytes()

        def raise_for_status(self):
            return None

    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse()

    monkeypatch.setattr(data_loader.requests, "get", fake_get)

    rows = read_table("https://example.com/data/PlayerRanks.xlsx", timeout=5)

    assert calls == [("https://example.com/data/PlayerRanks.xlsx", 5)]
    assert rows == [{"PlayerId": "P1", "Rank": 80}]


def test_load_source_wraps_http_errors(monkeypatch):
    def fake_get(url, timeout):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(data_loader.requests, "get", fake_get)

    with pytest.raises(DataLoadError) as ex:
        load_source("players", "https://example.com/Players.xlsx")

    assert ex.value.source == "players"
    assert isinstance(ex.value.__cause__, requests.ConnectionError)


def test_load_source_wraps_parse_errors(tmp_path: Path):
    path = tmp_path / "Players.xlsx"
    path.write_text("this is not a workbook")

    with pytest.raises(DataLoadError) as ex:
        load_source("players", str(path))

    assert ex.value.location == str(path)


def test_load_all_sources_returns_typed_records(data_dir: Path):
    data = load_all_sources(_sources(data_dir))

    assert isinstance(data, SourceData)
    assert data.players[0] == Player("P1", "A", "Batter", "X")
    assert data.ranks[:2] == (PlayerRank("P1", 80), PlayerRank("P2", 60))
    assert [s.user_name for s in data.selections] == ["U1", "U2", "U3"]
    assert data.selections[1].selected_ids() == ("P4", "P3", "P2")


def test_numeric_identifiers_join_across_sources(tmp_path: Path):
    write_workbook(tmp_path / "Players.xlsx", [{"PlayerId": 101, "Name": "A", "Role": "Batter", "TeamName": "X"}])
    write_workbook(tmp_path / "PlayerRanks.xlsx", [{"PlayerId": 101, "Rank": 42}])
    write_workbook(
        tmp_path / "UserSelections.xlsx",
        [{"UserName": "U1", "Batter1": 101}, {"UserName": "U2", "Bowler1": 101}],
        columns=SELECTION_COLUMNS,
    )

    data = load_all_sources(_sources(tmp_path))

    assert data.players[0].player_id == "101"
    assert data.ranks[0] == PlayerRank("101", 42)
    assert data.selections[0].selected_ids() == ("101",)
    assert data.selections[1].selected_ids() == ("101",)


def test_one_failed_source_fails_the_whole_load(data_dir: Path):
    (data_dir / "PlayerRanks.xlsx").unlink()

    with pytest.raises(DataLoadError) as ex:
        load_all_sources(_sources(data_dir))

    assert ex.value.source == "ranks"


def test_missing_source_name_is_rejected(data_dir: Path):
    sources = _sources(data_dir)
    del sources["selections"]

    with pytest.raises(ValueError):
        load_all_sources(sources)


def test_validate_sources_counts_and_logs_problems(caplog):
    rows = {
        "players": [
            {"PlayerId": "P1", "Name": "A", "Role": "Coach"},
            {"Name": "nobody", "Role": "Batter"},
        ],
        "ranks": [{"PlayerId": "P1", "Rank": 10}],
        "selections": [{"UserName": "U1", "Batter1": "P1", "Batter2": "P1"}],
    }

    with caplog.at_level(logging.WARNING, logger="leaderboard.data_loader"):
        summary = data_loader.validate_sources(rows)

    assert summary["players"] == (1, 1, 1)
    assert summary["ranks"] == (1, 0, 0)
    assert summary["selections"] == (1, 0, 1)
    assert "PlayerId is required" in caplog.text
    assert "Role does not match" in caplog.text
    assert "Player selected more than once" in caplog.text


def test_load_all_sources_reports_validation_warnings(tmp_path: Path, caplog):
    write_workbook(tmp_path / "Players.xlsx", [{"PlayerId": "P1", "Name": "A", "Role": "All-rounder", "TeamName": "X"}])
    write_workbook(tmp_path / "PlayerRanks.xlsx", [{"PlayerId": "P1", "Rank": 5}])
    write_workbook(
        tmp_path / "UserSelections.xlsx",
        [{"UserName": "U1", "Batter1": "P1", "Bowler1": "P1"}],
        columns=SELECTION_COLUMNS,
    )

    with caplog.at_level(logging.WARNING, logger="leaderboard.data_loader"):
        data = load_all_sources(_sources(tmp_path))

    assert data.players == (Player("P1", "A", "All-rounder", "X"),)
    assert "players record P1: Role does not match" in caplog.text
    assert "selections record U1: Player selected more than once ('P1')" in caplog.text
