from __future__ import annotations

from insight_dashboard.charts.bar import SectorIntensityBarRenderer
from insight_dashboard.charts.base import ChartRenderer
from insight_dashboard.charts.bubble import LikelihoodBubbleRenderer
from insight_dashboard.charts.country import CountryCirclesRenderer
from insight_dashboard.charts.donut import TopicDonutRenderer
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.config import ChartsConfig

RENDERER_TYPES: dict[ChartKind, type[ChartRenderer]] = {
    ChartKind.sector_intensity: SectorIntensityBarRenderer,
    ChartKind.topic_counts: TopicDonutRenderer,
    ChartKind.scatter_sample: LikelihoodBubbleRenderer,
    ChartKind.country_counts: CountryCirclesRenderer,
}


def renderer_for(kind: ChartKind | str, settings: ChartsConfig | None = None) -> ChartRenderer:
    return RENDERER_TYPES[ChartKind(kind)](settings)


def default_renderers(settings: ChartsConfig | None = None) -> dict[ChartKind, ChartRenderer]:
    return {kind: renderer_for(kind, settings) for kind in ChartKind}
