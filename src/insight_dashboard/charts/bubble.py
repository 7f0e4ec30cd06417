from __future__ import annotations

from typing import Any

from insight_dashboard.charts.aggregate import AggregatedSeries, ScatterPoint
from insight_dashboard.charts.base import ChartRenderer, TooltipContent, format_number, linear_axis
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.charts.scales import UNKNOWN_CATEGORY, ScaleSet, plot_area
from insight_dashboard.charts.scene import Element, Scene, TextLabel


class LikelihoodBubbleRenderer(ChartRenderer):
    kind = ChartKind.scatter_sample

    @property
    def enter_duration_ms(self) -> float:
        return float(self.settings.durations.bubble_enter_ms)

    def layout(self, chart_id: str, series: AggregatedSeries, scales: ScaleSet) -> Scene:
        bubble = self.settings.bubble
        width, height = plot_area(self.settings.canvas, bubble.margin)

        elements: list[Element] = []
        for index, point in enumerate(series.entries):
            common = {
                "cx": scales.x(point.relevance),
                "cy": scales.y(point.likelihood),
                "fill": scales.color(point.sector or UNKNOWN_CATEGORY),
                "opacity": bubble.rest_opacity,
                "stroke": "#fff",
                "stroke_width": 1.0,
            }
            elements.append(
                Element(
                    element_id=f"{chart_id}-bubble-{index}",
                    shape="circle",
                    datum=point,
                    attrs={**common, "r": 0.0},
                    target={**common, "r": scales.radius(point.intensity)},
                )
            )

        return Scene(
            chart_id=chart_id,
            kind=self.kind,
            width=float(self.settings.canvas.width),
            height=float(self.settings.canvas.height),
            origin=(float(bubble.margin.left), float(bubble.margin.top)),
            elements=elements,
            axes=[
                linear_axis(scales.x, orient="bottom", offset=height),
                linear_axis(scales.y),
            ],
            labels=[
                TextLabel(x=width / 2.0, y=height + 40.0, text="Relevance"),
                TextLabel(x=-40.0, y=height / 2.0, text="Likelihood", rotation=-90.0),
            ],
            caption="Bubble size represents intensity",
        )

    def tooltip(self, element: Element, scene: Scene) -> TooltipContent:
        point: ScatterPoint = element.datum
        limit = self.settings.bubble.title_max_chars
        title = point.title[:limit] + "..." if point.title else "No Title"
        return TooltipContent(
            title=title,
            lines=(
                f"Relevance: {format_number(point.relevance)}",
                f"Likelihood: {format_number(point.likelihood)}",
                f"Intensity: {format_number(point.intensity)}",
                f"Sector: {point.sector or UNKNOWN_CATEGORY}",
            ),
        )

    def hover_attrs(self, element: Element) -> dict[str, Any]:
        return {"opacity": 1.0, "stroke_width": 2.0}

    def rest_attrs(self, element: Element) -> dict[str, Any]:
        return {"opacity": self.settings.bubble.rest_opacity, "stroke_width": 1.0}
