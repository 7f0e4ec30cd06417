from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, fields
from typing import Any

import pandas as pd

TEXT_FIELDS = ("sector", "topic", "country", "region", "pestle", "source", "title", "end_year")
NUMERIC_FIELDS = ("intensity", "likelihood", "relevance")
RECORD_COLUMNS = [
    "sector",
    "topic",
    "country",
    "region",
    "pestle",
    "source",
    "end_year",
    "intensity",
    "likelihood",
    "relevance",
    "title",
]


def _clean_text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return str(int(value))
    if isinstance(value, (str, int, float)):
        text = str(value)
        return text if text.strip() else None
    return None


def _clean_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True, slots=True)
class Record:
    """One insight entry. Every attribute is optional."""

    sector: str | None = None
    topic: str | None = None
    country: str | None = None
    region: str | None = None
    pestle: str | None = None
    source: str | None = None
    title: str | None = None
    end_year: str | None = None
    intensity: float | None = None
    likelihood: float | None = None
    relevance: float | None = None

    @classmethod
    def from_mapping(cls, row: Any) -> Record:
        if not isinstance(row, Mapping):
            return cls()
        values: dict[str, Any] = {}
        for name in TEXT_FIELDS:
            values[name] = _clean_text(row.get(name))
        for name in NUMERIC_FIELDS:
            values[name] = _clean_number(row.get(name))
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


@dataclass(frozen=True, slots=True)
class RecordSet:
    """Immutable, already-filtered collection of records for one query."""

    records: tuple[Record, ...] = ()

    @classmethod
    def from_rows(cls, rows: Iterable[Any] | None) -> RecordSet:
        if rows is None:
            return cls()
        return cls(
            tuple(row if isinstance(row, Record) else Record.from_mapping(row) for row in rows)
        )

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def to_frame(self) -> pd.DataFrame:
        """Return a new frame each call; callers may mutate it freely."""
        frame = pd.DataFrame(
            [record.to_dict() for record in self.records],
            columns=RECORD_COLUMNS,
        )
        for column in NUMERIC_FIELDS:
            frame[column] = pd.to_numeric(frame[column], errors="coerce").astype(float)
        frame.insert(0, "row_order", range(len(frame)))
        return frame
