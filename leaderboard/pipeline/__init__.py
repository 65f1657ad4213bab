"""
Leaderboard Pipeline Module

Provides the end-to-end run:
- Concurrent, all-or-nothing source loading
- Scoring and ranking
- CLI entry point
"""

from leaderboard.pipeline.orchestrator import (
    LeaderboardPipeline,
    PipelineResult,
    run_pipeline,
)

__all__ = [
    "LeaderboardPipeline",
    "PipelineResult",
    "run_pipeline",
]
