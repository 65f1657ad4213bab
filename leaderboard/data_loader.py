from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union
from urllib.parse import urlparse

import pandas as pd
import requests

from leaderboard.config import is_remote
from leaderboard.validation.schemas import (
    SCHEMA_REGISTRY,
    Player,
    PlayerRank,
    UserSelection,
    players_from_rows,
    ranks_from_rows,
    selections_from_rows,
    validate_batch,
)

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

SOURCE_NAMES = ("players", "selections", "ranks")
CSV_SUFFIXES = {".csv", ".txt"}


class DataLoadError(RuntimeError):
    """A source could not be fetched or parsed. Fatal for the whole run."""

    def __init__(self, source: str, location: str, reason: str):
        super().__init__(f"Error loading {source} from {location}: {reason}")
        self.source = source
        self.location = location
        self.reason = reason


@dataclass(frozen=True)
class SourceData:
    """Typed records from all three sources, in load order."""
    players: Tuple[Player, ...]
    ranks: Tuple[PlayerRank, ...]
    selections: Tuple[UserSelection, ...]


def frame_to_records(df: pd.DataFrame) -> List[Record]:
    """Rows of a frame as dicts, skipping fully blank rows; blank cells become None."""
    df = df.dropna(how="all")
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def _read_frame(handle: Union[Path, io.BytesIO], suffix: str) -> pd.DataFrame:
    if suffix in CSV_SUFFIXES:
        return pd.read_csv(handle, dtype=object)
    # First sheet only
    return pd.read_excel(handle, sheet_name=0, dtype=object)


def read_table(location: str, timeout: int = 20) -> List[Record]:
    """
    Read the first sheet of a workbook (or a CSV file) into records.

    ``location`` is a local path or an http(s) URL.
    """
    if is_remote(location):
        response = requests.get(location, timeout=timeout)
        response.raise_for_status()
        suffix = Path(urlparse(location).path).suffix.lower()
        return frame_to_records(_read_frame(io.BytesIO(response.content), suffix))

    path = Path(location)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return frame_to_records(_read_frame(path, path.suffix.lower()))


def load_source(name: str, location: str, timeout: int = 20) -> List[Record]:
    """Load one named source, wrapping any failure in DataLoadError."""
    logger.info(f"Loading {name} from {location}")
    try:
        records = read_table(location, timeout=timeout)
    except Exception as e:
        logger.error(f"Error loading {location}: {e}")
        raise DataLoadError(name, location, str(e)) from e
    logger.info(f"Loaded {len(records)} {name} rows")
    return records


def validate_sources(rows: Mapping[str, List[Record]]) -> Dict[str, Tuple[int, int, int]]:
    """
    Validate raw rows against their record schema and log what was found.

    Returns:
        Source name -> (valid_count, invalid_count, warnings_count)
    """
    summary: Dict[str, Tuple[int, int, int]] = {}

    for name in SOURCE_NAMES:
        results, valid_count, invalid_count = validate_batch(SCHEMA_REGISTRY[name], rows.get(name, []))
        warnings_count = 0

        for i, result in enumerate(results):
            label = result.record_id or f"row {i}"
            for error in result.errors:
                logger.warning(f"Invalid {name} record {label}: {error.message}")
            for warning in result.warnings:
                warnings_count += 1
                value = f" ({warning.value!r})" if warning.value is not None else ""
                logger.warning(f"{name} record {label}: {warning.message}{value}")

        logger.info(
            f"Validated {name}: {valid_count} valid, {invalid_count} invalid, "
            f"{warnings_count} warnings"
        )
        summary[name] = (valid_count, invalid_count, warnings_count)

    return summary


def load_all_sources(
    sources: Mapping[str, str],
    max_workers: int = 3,
    timeout: int = 20
) -> SourceData:
    """
    Load the players, selections and ranks sources concurrently.

    Returns only once all three have loaded. The first failure cancels any
    load that has not started yet and is raised as DataLoadError.
    """
    missing = [name for name in SOURCE_NAMES if name not in sources]
    if missing:
        raise ValueError(f"Missing data sources: {', '.join(missing)}")

    rows: Dict[str, List[Record]] = {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(load_source, name, sources[name], timeout): name
            for name in SOURCE_NAMES
        }
        try:
            for future in as_completed(futures):
                rows[futures[future]] = future.result()
        except DataLoadError:
            for future in futures:
                future.cancel()
            raise

    validate_sources(rows)

    return SourceData(
        players=tuple(players_from_rows(rows["players"])),
        ranks=tuple(ranks_from_rows(rows["ranks"])),
        selections=tuple(selections_from_rows(rows["selections"])),
    )
