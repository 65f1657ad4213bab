from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import pytest

from leaderboard import config
from leaderboard.data_schemas import SELECTION_COLUMNS


PLAYER_ROWS: List[Dict[str, Any]] = [
    {"PlayerId": "P1", "Name": "A", "Role": "Batter", "TeamName": "X"},
    {"PlayerId": "P2", "Name": "B", "Role": "Bowler", "TeamName": "X"},
    {"PlayerId": "P3", "Name": "C", "Role": "Wicketkeeper", "TeamName": "Y"},
    {"PlayerId": "P4", "Name": "D", "Role": "Batter", "TeamName": "Y"},
]

RANK_ROWS: List[Dict[str, Any]] = [
    {"PlayerId": "P1", "Rank": 80},
    {"PlayerId": "P2", "Rank": 60},
    {"PlayerId": "P3", "Rank": 70},
]

SELECTION_ROWS: List[Dict[str, Any]] = [
    {"UserName": "U1", "Batter1": "P1", "Bowler1": "P2"},
    {"UserName": "U2", "Batter1": "P4", "Wicketkeeper": "P3", "Bowler1": "P2"},
    {"UserName": "U3", "Batter1": "P1", "Batter2": "P9"},
]


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch):
    for aliases in config.ENV_VAR_ALIASES.values():
        for var_name in aliases:
            monkeypatch.delenv(var_name, raising=False)
    config.get_config.cache_clear()
    yield
    config.get_config.cache_clear()


def write_workbook(path: Path, rows: List[Dict[str, Any]], columns: List[str] = None) -> Path:
    pd.DataFrame(rows, columns=columns).to_excel(path, index=False, sheet_name="Sheet1")
    return path


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A directory holding the three default workbooks."""
    write_workbook(tmp_path / "Players.xlsx", PLAYER_ROWS)
    write_workbook(tmp_path / "PlayerRanks.xlsx", RANK_ROWS)
    write_workbook(tmp_path / "UserSelections.xlsx", SELECTION_ROWS, columns=SELECTION_COLUMNS)
    return tmp_path
