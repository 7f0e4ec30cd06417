from __future__ import annotations

from enum import Enum


class ChartKind(str, Enum):
    sector_intensity = "sector-intensity"
    topic_counts = "topic-counts"
    scatter_sample = "scatter-sample"
    country_counts = "country-counts"


CHART_TITLES: dict[ChartKind, str] = {
    ChartKind.sector_intensity: "Average Intensity by Sector",
    ChartKind.topic_counts: "Top Topics Distribution",
    ChartKind.scatter_sample: "Relevance vs Likelihood",
    ChartKind.country_counts: "Global Distribution",
}

EMPTY_PLACEHOLDERS: dict[ChartKind, str] = {
    ChartKind.sector_intensity: "No data available",
    ChartKind.topic_counts: "No topic data available",
    ChartKind.scatter_sample: "No data available",
    ChartKind.country_counts: "No geographic data available",
}

LOADING_PLACEHOLDER = "Loading chart..."
