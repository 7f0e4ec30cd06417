from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from insight_dashboard.charts.aggregate import AggregatedSeries, TopicCount
from insight_dashboard.charts.base import ChartRenderer, TooltipContent
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.charts.scales import ScaleSet
from insight_dashboard.charts.scene import (
    AXIS_TEXT,
    MUTED_TEXT,
    TAU,
    Element,
    Scene,
    TextLabel,
    arc_centroid,
)


def pie_angles(values: Sequence[float]) -> list[tuple[float, float]]:
    """Clockwise start/end angles in input order; no re-sorting."""
    total = sum(max(value, 0.0) for value in values)
    if total <= 0:
        return [(0.0, 0.0) for _ in values]
    angles: list[tuple[float, float]] = []
    cursor = 0.0
    for value in values:
        span = max(value, 0.0) / total * TAU
        angles.append((cursor, cursor + span))
        cursor += span
    return angles


class TopicDonutRenderer(ChartRenderer):
    kind = ChartKind.topic_counts

    @property
    def enter_duration_ms(self) -> float:
        return float(self.settings.durations.donut_enter_ms)

    @property
    def outer_radius(self) -> float:
        canvas = self.settings.canvas
        return min(canvas.width, canvas.height) / 2.0 - self.settings.donut.ring_inset

    def layout(self, chart_id: str, series: AggregatedSeries, scales: ScaleSet) -> Scene:
        donut = self.settings.donut
        outer = self.outer_radius
        inner = outer * donut.inner_radius_ratio
        counts = [float(entry.count) for entry in series.entries]
        total = sum(counts)

        elements: list[Element] = []
        labels: list[TextLabel] = []
        for index, (entry, (start, end)) in enumerate(zip(series.entries, pie_angles(counts))):
            geometry = {
                "start_angle": start,
                "end_angle": end,
                "inner_radius": inner,
                "outer_radius": outer,
                "fill": scales.color(entry.topic),
                "stroke": donut.stroke,
                "stroke_width": 2.0,
            }
            elements.append(
                Element(
                    element_id=f"{chart_id}-arc-{index}",
                    shape="arc",
                    datum=entry,
                    attrs={**geometry, "opacity": 0.0},
                    target={**geometry, "opacity": donut.rest_opacity},
                )
            )
            share = entry.count / total if total else 0.0
            if share > donut.label_min_share:
                x, y = arc_centroid(inner, outer, start, end)
                labels.append(
                    TextLabel(
                        x=x,
                        y=y,
                        text=f"{share * 100:.0f}%",
                        fill="#fff",
                        font_size=10.0,
                        font_weight="bold",
                        dy=3.5,
                    )
                )

        labels.append(
            TextLabel(
                x=0.0,
                y=0.0,
                text="Top Topics",
                fill=AXIS_TEXT,
                font_size=14.0,
                font_weight="bold",
                dy=-7.0,
            )
        )
        labels.append(
            TextLabel(
                x=0.0,
                y=0.0,
                text=f"{len(series)} categories",
                fill=MUTED_TEXT,
                font_size=12.0,
                dy=12.0,
            )
        )
        canvas = self.settings.canvas
        return Scene(
            chart_id=chart_id,
            kind=self.kind,
            width=float(canvas.width),
            height=float(canvas.height),
            origin=(canvas.width / 2.0, canvas.height / 2.0),
            elements=elements,
            labels=labels,
        )

    def tooltip(self, element: Element, scene: Scene) -> TooltipContent:
        entry: TopicCount = element.datum
        total = sum(other.datum.count for other in scene.elements)
        percentage = entry.count / total * 100 if total else 0.0
        return TooltipContent(
            title=entry.topic,
            lines=(f"Count: {entry.count}", f"Percentage: {percentage:.1f}%"),
        )

    def hover_attrs(self, element: Element) -> dict[str, Any]:
        return {
            "outer_radius": element.target["outer_radius"] + self.settings.donut.hover_radius_delta,
            "opacity": 1.0,
        }

    def rest_attrs(self, element: Element) -> dict[str, Any]:
        return {
            "outer_radius": element.target["outer_radius"],
            "opacity": self.settings.donut.rest_opacity,
        }
