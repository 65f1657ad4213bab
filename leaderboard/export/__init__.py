"""
Site Export Module

Writes the leaderboard and top performers for the frontend as JSON, CSV or
an Excel workbook.
"""

from leaderboard.export.build_site_data import (
    ExportResult,
    SiteDataExporter,
    build_leaderboard_payload,
    format_team_details,
    validate_payload,
)

__all__ = [
    "ExportResult",
    "SiteDataExporter",
    "build_leaderboard_payload",
    "format_team_details",
    "validate_payload",
]
