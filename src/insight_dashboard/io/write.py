from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from insight_dashboard.records import RecordSet


def write_records(records: RecordSet, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = [record.to_dict() for record in records]
    path.write_text(json.dumps(rows, indent=2), encoding="utf-8")
    return path


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    return path
