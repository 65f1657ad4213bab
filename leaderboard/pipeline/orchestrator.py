#!/usr/bin/env python3
"""
Leaderboard Pipeline

Loads the three sources, then computes the leaderboard:
- Concurrent load of players, selections and ranks (all-or-nothing)
- Player and rank indices
- Roster resolution and per-user totals
- Ranked leaderboard and top users
- Top performers per role

Usage:
    # Run with configured sources (data/*.xlsx by default)
    python -m leaderboard.pipeline.orchestrator

    # Point at another data directory and show the top 10
    python -m leaderboard.pipeline.orchestrator --data-dir ./season_2025 --top 10

    # Export results for the site
    python -m leaderboard.pipeline.orchestrator --export json --output-dir public/data
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from leaderboard.config import LeaderboardSettings, get_settings
from leaderboard.data_loader import DataLoadError, SourceData, load_all_sources
from leaderboard.export.build_site_data import SiteDataExporter
from leaderboard.scoring.indices import build_indices
from leaderboard.scoring.roles import TopPerformers, top_performers
from leaderboard.scoring.standings import (
    ScoredSelection,
    rank_leaderboard,
    score_selections,
    top_users,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Error loading data. Please try again later."


@dataclass
class PipelineResult:
    """Result of a full leaderboard run."""
    build_id: str
    started_at: str
    completed_at: Optional[str] = None
    duration_seconds: float = 0.0
    status: str = "pending"

    # Input counts
    players_loaded: int = 0
    ranks_loaded: int = 0
    selections_loaded: int = 0

    # Outputs
    leaderboard: List[ScoredSelection] = field(default_factory=list)
    top_users: List[ScoredSelection] = field(default_factory=list)
    top_performers: TopPerformers = field(default_factory=TopPerformers)

    errors: List[str] = field(default_factory=list)


class LeaderboardPipeline:
    """
    Runs one full leaderboard refresh.

    Nothing is cached between runs: indices, totals and buckets are rebuilt
    from the freshly loaded sources every time.
    """

    def __init__(self, settings: Optional[LeaderboardSettings] = None):
        self.settings = settings or get_settings()

    def load(self) -> SourceData:
        """Load all sources. Raises DataLoadError if any of them fails."""
        return load_all_sources(
            self.settings.source_paths(),
            max_workers=self.settings.max_workers,
            timeout=self.settings.request_timeout,
        )

    def process(self, data: SourceData, result: PipelineResult) -> PipelineResult:
        """Compute the leaderboard and top performers from loaded data."""
        player_index, rank_index = build_indices(data.players, data.ranks)
        logger.info(f"Indexed {len(player_index)} players and {len(rank_index)} ranks")

        scored = score_selections(data.selections, player_index, rank_index)
        result.leaderboard = rank_leaderboard(scored)
        result.top_users = top_users(result.leaderboard, self.settings.leaderboard_size)

        result.top_performers = top_performers(
            data.players, data.ranks, self.settings.top_performers_size
        )

        result.players_loaded = len(data.players)
        result.ranks_loaded = len(data.ranks)
        result.selections_loaded = len(data.selections)
        return result

    def run(self) -> PipelineResult:
        """
        Load and process.

        Returns:
            PipelineResult; on load failure its status is "failed" and it
            carries no leaderboard data.
        """
        build_id = f"leaderboard_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        result = PipelineResult(
            build_id=build_id,
            started_at=datetime.now().isoformat()
        )

        logger.info(f"Starting run: {build_id}")

        try:
            data = self.load()
        except DataLoadError as e:
            logger.error(f"Error initializing leaderboard: {e}")
            result.status = "failed"
            result.errors.append(str(e))
            return self._finalize(result)

        self.process(data, result)
        result.status = "success"
        return self._finalize(result)

    def _finalize(self, result: PipelineResult) -> PipelineResult:
        result.completed_at = datetime.now().isoformat()
        started = datetime.fromisoformat(result.started_at)
        completed = datetime.fromisoformat(result.completed_at)
        result.duration_seconds = (completed - started).total_seconds()

        logger.info(
            f"Run {result.build_id} completed: {result.status} "
            f"({result.selections_loaded} selections, {result.players_loaded} players, "
            f"{result.ranks_loaded} ranks)"
        )
        return result


def run_pipeline(settings: Optional[LeaderboardSettings] = None) -> PipelineResult:
    """Run the leaderboard pipeline."""
    return LeaderboardPipeline(settings).run()


def print_summary(result: PipelineResult) -> None:
    """Print the top users and top performers."""
    print("\n" + "=" * 60)
    print("LEADERBOARD")
    print("=" * 60)
    for position, user in enumerate(result.top_users, start=1):
        print(f"  {position}. {user.user_name}  {user.total_score}")
        for entry in user.team_details:
            print(f"       {entry.name} ({entry.role}, {entry.rank} pts)")

    sections = (
        ("Top Batters", result.top_performers.batters),
        ("Top Wicketkeepers", result.top_performers.wicketkeepers),
        ("Top Bowlers", result.top_performers.bowlers),
    )
    for title, players in sections:
        print(f"\n{title}")
        print("-" * 60)
        for player in players:
            print(f"  {player.name:<40} {player.rank}")

    print("=" * 60)


def _settings_from_args(args: argparse.Namespace) -> LeaderboardSettings:
    settings = get_settings()
    overrides: Dict[str, object] = {}

    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.players:
        overrides["players_file"] = args.players
    if args.selections:
        overrides["selections_file"] = args.selections
    if args.ranks:
        overrides["ranks_file"] = args.ranks
    if args.top is not None:
        overrides["leaderboard_size"] = args.top
    if args.top_performers is not None:
        overrides["top_performers_size"] = args.top_performers
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.output_dir:
        overrides["output_dir"] = args.output_dir

    return replace(settings, **overrides)


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Compute the fantasy cricket leaderboard",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding the source workbooks"
    )

    parser.add_argument(
        "--players",
        type=str,
        help="Players workbook (path or URL)"
    )

    parser.add_argument(
        "--selections",
        type=str,
        help="User selections workbook (path or URL)"
    )

    parser.add_argument(
        "--ranks",
        type=str,
        help="Player ranks workbook (path or URL)"
    )

    parser.add_argument(
        "--top",
        type=int,
        help="Number of users to show (default: 5)"
    )

    parser.add_argument(
        "--top-performers",
        type=int,
        help="Number of players to show per role (default: 3)"
    )

    parser.add_argument(
        "--workers",
        type=int,
        help="Max concurrent source loads (default: 3)"
    )

    parser.add_argument(
        "--export",
        choices=["json", "csv", "xlsx"],
        help="Export format for leaderboard files"
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Output directory for exported files"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = _settings_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    result = run_pipeline(settings)

    if result.status != "success":
        print(LOAD_ERROR_MESSAGE, file=sys.stderr)
        return 1

    print_summary(result)

    if args.export:
        exporter = SiteDataExporter(output_path=settings.output_dir)
        export_result = exporter.export(result, args.export)
        for issue in export_result.errors:
            print(f"Export error: {issue}", file=sys.stderr)
        if export_result.errors:
            return 1
        for path in export_result.files:
            print(f"Wrote: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
