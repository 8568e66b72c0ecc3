"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, TextIO

import pandas as pd

from .models import Timeline, VersionEntry
from .time_utils import format_timestamp


logger = logging.getLogger(__name__)

COLUMNS = ["version", "observed_at", "commit"]


def format_entry(entry: VersionEntry) -> str:
    return f"Version: {entry.version}, Date: {format_timestamp(entry.observed_at)} UTC"


def print_timeline(
    timeline: Timeline, dependency: str, stream: Optional[TextIO] = None
) -> None:
    stream = stream or sys.stdout
    if not timeline:
        print(f"No versions found for {dependency}", file=stream)
        return
    for entry in timeline:
        print(format_entry(entry), file=stream)


def _output_stem(dependency: str) -> str:
    return dependency.replace("/", "_").replace("\\", "_")


def _records(timeline: Timeline) -> List[Dict]:
    return [
        {
            "version": entry.version,
            "observed_at": entry.observed_at.isoformat(),
            "commit": entry.commit_id,
        }
        for entry in timeline
    ]


def timeline_to_frame(timeline: Timeline) -> pd.DataFrame:
    """Return the timeline as a DataFrame with UTC timestamps."""
    df = pd.DataFrame(_records(timeline), columns=COLUMNS)
    df["observed_at"] = pd.to_datetime(df["observed_at"], utc=True)
    return df


def save_timeline_json(timeline: Timeline, output_dir: Path, dependency: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / f"{_output_stem(dependency)}_timeline.json"
    payload = {"dependency": dependency, "timeline": _records(timeline)}
    with open(results_file, 'w') as f:
        json.dump(payload, f, indent=2, default=str)
    logger.info("Timeline saved to %s", results_file)
    return results_file


def export_timeline_csv(timeline: Timeline, output_dir: Path, dependency: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_file = output_dir / f"{_output_stem(dependency)}_timeline.csv"
    timeline_to_frame(timeline).to_csv(csv_file, index=False)
    logger.info("Timeline CSV saved to %s", csv_file)
    return csv_file
