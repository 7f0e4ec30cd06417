from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

from insight_dashboard.records import RecordSet


def _unwrap_rows(payload: Any) -> list[Any]:
    if isinstance(payload, dict):
        payload = payload.get("data") or []
    if not isinstance(payload, list):
        raise ValueError("Records JSON must be a list or an object with a 'data' list")
    return payload


def load_records(path: Path) -> RecordSet:
    """Load records from a JSON export (plain list or API envelope) or a CSV file."""
    if path.suffix == ".json":
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        return RecordSet.from_rows(_unwrap_rows(payload))
    if path.suffix == ".csv":
        # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
        frame = pd.read_csv(path, encoding="utf-8-sig")
        return RecordSet.from_rows(frame.to_dict(orient="records"))
    raise ValueError(f"Unsupported records file type: {path.suffix}")
