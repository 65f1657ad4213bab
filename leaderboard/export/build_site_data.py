#!/usr/bin/env python3
"""
Leaderboard Export for Frontend

Turns a pipeline result into files the site can render directly:
- leaderboard.json: top users with team details, plus top performers
- leaderboard.csv / top_performers.csv
- leaderboard.xlsx with one sheet per view

Usage:
    from leaderboard.export import SiteDataExporter

    exporter = SiteDataExporter(output_path=Path("public/data"))
    exporter.export(result, "json")
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Sequence

import pandas as pd
from jsonschema import Draft202012Validator

from leaderboard.data_schemas import LEADERBOARD_SCHEMA, SCHEMA_VERSION
from leaderboard.scoring.roles import TopPerformers
from leaderboard.scoring.roster import TeamEntry
from leaderboard.scoring.standings import ScoredSelection

if TYPE_CHECKING:
    from leaderboard.pipeline.orchestrator import PipelineResult

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "csv", "xlsx")

VALIDATOR = Draft202012Validator(LEADERBOARD_SCHEMA)


@dataclass
class ExportResult:
    """Result of an export operation."""
    files: List[Path] = field(default_factory=list)
    total_bytes: int = 0
    errors: List[str] = field(default_factory=list)


def format_team_entry(entry: TeamEntry) -> str:
    return f"{entry.name} ({entry.role}, {entry.rank} pts)"


def format_team_details(entries: Iterable[TeamEntry]) -> List[str]:
    """One display line per roster entry, e.g. ``"A (Batter, 80 pts)"``."""
    return [format_team_entry(entry) for entry in entries]


def leaderboard_entries(users: Sequence[ScoredSelection]) -> List[Dict[str, Any]]:
    """Users as JSON-ready dicts with 1-based positions."""
    return [
        {
            "position": position,
            "user_name": user.user_name,
            "total_score": user.total_score,
            "team": [entry.to_dict() for entry in user.team_details],
            "team_summary": format_team_details(user.team_details),
        }
        for position, user in enumerate(users, start=1)
    ]


def build_leaderboard_payload(
    users: Sequence[ScoredSelection],
    performers: TopPerformers,
    generated_at: str = None
) -> Dict[str, Any]:
    """Payload matching LEADERBOARD_SCHEMA."""
    return {
        "schemaVersion": SCHEMA_VERSION,
        "generated_at": generated_at or datetime.now().isoformat(),
        "leaderboard": leaderboard_entries(users),
        "top_performers": performers.as_dict(),
    }


def validate_payload(payload: Dict[str, Any]) -> List[str]:
    """Schema problems in a leaderboard payload, one message each (empty if valid)."""
    errors = sorted(VALIDATOR.iter_errors(payload), key=lambda e: e.path)
    issues = [f"{list(e.path)}: {e.message}" for e in errors]

    if payload.get("schemaVersion") != SCHEMA_VERSION:
        issues.append(
            f"schemaVersion {payload.get('schemaVersion')} does not match {SCHEMA_VERSION}"
        )
    return issues


def leaderboard_frame(users: Sequence[ScoredSelection]) -> pd.DataFrame:
    rows = [
        {
            "position": position,
            "user_name": user.user_name,
            "total_score": user.total_score,
            "players": len(user.team_details),
            "team": "; ".join(format_team_details(user.team_details)),
        }
        for position, user in enumerate(users, start=1)
    ]
    return pd.DataFrame(rows, columns=["position", "user_name", "total_score", "players", "team"])


def top_performers_frame(performers: TopPerformers) -> pd.DataFrame:
    rows = []
    for bucket, players in performers.as_dict().items():
        for position, player in enumerate(players, start=1):
            rows.append({"bucket": bucket, "position": position, **player})
    return pd.DataFrame(
        rows,
        columns=["bucket", "position", "player_id", "name", "role", "team", "rank"],
    )


class SiteDataExporter:
    """
    Writes leaderboard views for the frontend.

    Only the top users of the result are exported; the full leaderboard
    stays in memory.
    """

    def __init__(self, output_path: Path, minify: bool = False):
        self.output_path = Path(output_path)
        self.minify = minify

    def _write_json(self, data: Any, path: Path) -> int:
        if self.minify:
            content = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        else:
            content = json.dumps(data, indent=2, ensure_ascii=False)
        path.write_text(content, encoding="utf-8")
        return len(content.encode("utf-8"))

    def export(self, result: "PipelineResult", fmt: str = "json") -> ExportResult:
        """Write the result in the given format and report the files written."""
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unknown export format: {fmt} (expected one of {', '.join(EXPORT_FORMATS)})")

        self.output_path.mkdir(parents=True, exist_ok=True)
        export_result = ExportResult()

        if fmt == "json":
            path = self.output_path / "leaderboard.json"
            payload = build_leaderboard_payload(
                result.top_users, result.top_performers, generated_at=result.completed_at
            )
            issues = validate_payload(payload)
            if issues:
                logger.error(f"Schema validation failed for {path.name}: {len(issues)} issue(s)")
                export_result.errors.extend(issues)
                return export_result
            export_result.total_bytes += self._write_json(payload, path)
            export_result.files.append(path)

        elif fmt == "csv":
            for name, df in (
                ("leaderboard.csv", leaderboard_frame(result.top_users)),
                ("top_performers.csv", top_performers_frame(result.top_performers)),
            ):
                path = self.output_path / name
                df.to_csv(path, index=False)
                export_result.total_bytes += path.stat().st_size
                export_result.files.append(path)

        else:
            path = self.output_path / "leaderboard.xlsx"
            with pd.ExcelWriter(path, engine="openpyxl") as xw:
                leaderboard_frame(result.top_users).to_excel(xw, index=False, sheet_name="leaderboard")
                top_performers_frame(result.top_performers).to_excel(
                    xw, index=False, sheet_name="top_performers"
                )
            export_result.total_bytes += path.stat().st_size
            export_result.files.append(path)

        logger.info(f"Exported {len(export_result.files)} file(s) to {self.output_path}")
        return export_result
