from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from typing import Any, Union

import pandas as pd

from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.config import LimitsConfig
from insight_dashboard.records import RecordSet

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SectorIntensity:
    sector: str
    avg_intensity: float


@dataclass(frozen=True, slots=True)
class TopicCount:
    topic: str
    count: int


@dataclass(frozen=True, slots=True)
class ScatterPoint:
    relevance: float
    likelihood: float
    intensity: float
    sector: str | None = None
    title: str | None = None


@dataclass(frozen=True, slots=True)
class CountryCount:
    country: str
    count: int


SeriesEntry = Union[SectorIntensity, TopicCount, ScatterPoint, CountryCount]


@dataclass(frozen=True, slots=True)
class AggregatedSeries:
    kind: ChartKind
    entries: tuple[SeriesEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[SeriesEntry]:
        return iter(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def labels(self) -> list[str]:
        """Category labels in series order; empty for the scatter sample."""
        if self.kind == ChartKind.sector_intensity:
            return [entry.sector for entry in self.entries]
        if self.kind == ChartKind.topic_counts:
            return [entry.topic for entry in self.entries]
        if self.kind == ChartKind.country_counts:
            return [entry.country for entry in self.entries]
        return []

    def values(self) -> list[float]:
        """The reduced metric per entry (intensity for the scatter sample)."""
        if self.kind == ChartKind.sector_intensity:
            return [float(entry.avg_intensity) for entry in self.entries]
        if self.kind == ChartKind.scatter_sample:
            return [float(entry.intensity) for entry in self.entries]
        return [float(entry.count) for entry in self.entries]

    def to_records(self) -> list[dict[str, Any]]:
        return [asdict(entry) for entry in self.entries]


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return None
    return str(value)


def _log_exclusions(kind: ChartKind, total: int, kept: int) -> None:
    if total > kept:
        LOGGER.debug(
            "%s: excluded %d of %d records missing required fields",
            kind.value,
            total - kept,
            total,
        )


def _ranked_counts(frame: pd.DataFrame, key: str, top_n: int) -> pd.DataFrame:
    grouped = (
        frame.groupby(key, sort=False)
        .agg(n=("row_order", "size"), first_seen=("row_order", "min"))
        .reset_index()
    )
    return grouped.sort_values(
        ["n", "first_seen"], ascending=[False, True], kind="mergesort"
    ).head(top_n)


def build_sector_intensity(frame: pd.DataFrame, top_n: int) -> tuple[SectorIntensity, ...]:
    qualifying = frame[frame["sector"].notna() & frame["intensity"].notna()]
    _log_exclusions(ChartKind.sector_intensity, len(frame), len(qualifying))
    if qualifying.empty:
        return ()
    # Mean as a sum of per-record shares stays finite for finite inputs near the float limit.
    sizes = qualifying.groupby("sector", sort=False)["intensity"].transform("size")
    grouped = (
        qualifying.assign(share=qualifying["intensity"] / sizes)
        .groupby("sector", sort=False)
        .agg(avg_intensity=("share", "sum"), first_seen=("row_order", "min"))
        .reset_index()
    )
    ranked = grouped.sort_values(
        ["avg_intensity", "first_seen"], ascending=[False, True], kind="mergesort"
    ).head(top_n)
    return tuple(
        SectorIntensity(sector=str(row.sector), avg_intensity=float(row.avg_intensity))
        for row in ranked.itertuples(index=False)
    )


def build_topic_counts(frame: pd.DataFrame, top_n: int) -> tuple[TopicCount, ...]:
    qualifying = frame[frame["topic"].notna()]
    _log_exclusions(ChartKind.topic_counts, len(frame), len(qualifying))
    if qualifying.empty:
        return ()
    ranked = _ranked_counts(qualifying, "topic", top_n)
    return tuple(
        TopicCount(topic=str(row.topic), count=int(row.n))
        for row in ranked.itertuples(index=False)
    )


def build_scatter_sample(frame: pd.DataFrame, limit: int) -> tuple[ScatterPoint, ...]:
    mask = (frame["relevance"] > 0) & (frame["likelihood"] > 0) & frame["intensity"].notna()
    qualifying = frame[mask]
    _log_exclusions(ChartKind.scatter_sample, len(frame), len(qualifying))
    sample = qualifying.sort_values("row_order", kind="mergesort").head(limit)
    return tuple(
        ScatterPoint(
            relevance=float(row.relevance),
            likelihood=float(row.likelihood),
            intensity=float(row.intensity),
            sector=_optional_text(row.sector),
            title=_optional_text(row.title),
        )
        for row in sample.itertuples(index=False)
    )


def build_country_counts(frame: pd.DataFrame, top_n: int) -> tuple[CountryCount, ...]:
    qualifying = frame[frame["country"].notna()]
    _log_exclusions(ChartKind.country_counts, len(frame), len(qualifying))
    if qualifying.empty:
        return ()
    ranked = _ranked_counts(qualifying, "country", top_n)
    return tuple(
        CountryCount(country=str(row.country), count=int(row.n))
        for row in ranked.itertuples(index=False)
    )


def aggregate(
    records: RecordSet,
    kind: ChartKind | str,
    limits: LimitsConfig | None = None,
) -> AggregatedSeries:
    """Reduce a record set into the chart-ready series for ``kind``.

    Records lacking the fields a chart needs are skipped, never zero-filled.
    Ranked series are sorted by their metric in descending order; ties keep
    the order in which their category first appeared.
    """
    kind = ChartKind(kind)
    limits = limits or LimitsConfig()
    frame = records.to_frame()

    if kind == ChartKind.sector_intensity:
        entries: tuple[SeriesEntry, ...] = build_sector_intensity(
            frame, limits.sector_intensity_top_n
        )
    elif kind == ChartKind.topic_counts:
        entries = build_topic_counts(frame, limits.topic_counts_top_n)
    elif kind == ChartKind.scatter_sample:
        entries = build_scatter_sample(frame, limits.scatter_sample_limit)
    else:
        entries = build_country_counts(frame, limits.country_counts_top_n)
    return AggregatedSeries(kind=kind, entries=entries)


def aggregate_all(
    records: RecordSet,
    limits: LimitsConfig | None = None,
) -> dict[ChartKind, AggregatedSeries]:
    return {kind: aggregate(records, kind, limits=limits) for kind in ChartKind}
