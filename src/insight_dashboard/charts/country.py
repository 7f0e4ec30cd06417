from __future__ import annotations

import math
from typing import Any

from insight_dashboard.charts.aggregate import AggregatedSeries, CountryCount
from insight_dashboard.charts.base import ChartRenderer, TooltipContent, band_axis, linear_axis
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.charts.scales import ScaleSet, plot_area
from insight_dashboard.charts.scene import AXIS_TEXT, Element, Scene, TextLabel


class CountryCirclesRenderer(ChartRenderer):
    """Circles per country along a categorical axis, standing in for a world map."""

    kind = ChartKind.country_counts

    @property
    def enter_duration_ms(self) -> float:
        return float(self.settings.durations.country_enter_ms)

    def radius(self, count: int) -> float:
        return math.sqrt(count) * self.settings.country.radius_factor

    def layout(self, chart_id: str, series: AggregatedSeries, scales: ScaleSet) -> Scene:
        country = self.settings.country
        width, height = plot_area(self.settings.canvas, country.margin)

        elements: list[Element] = []
        for index, entry in enumerate(series.entries):
            common = {
                "cx": scales.x.center(entry.country),
                "cy": scales.y(entry.count),
                "fill": scales.color(entry.count),
                "opacity": 1.0,
                "stroke": "#fff",
                "stroke_width": 2.0,
            }
            elements.append(
                Element(
                    element_id=f"{chart_id}-country-{index}",
                    shape="circle",
                    datum=entry,
                    attrs={**common, "r": 0.0},
                    target={**common, "r": self.radius(entry.count)},
                )
            )

        return Scene(
            chart_id=chart_id,
            kind=self.kind,
            width=float(self.settings.canvas.width),
            height=float(self.settings.canvas.height),
            origin=(float(country.margin.left), float(country.margin.top)),
            elements=elements,
            axes=[
                band_axis(scales.x, offset=height, max_words=country.max_label_words),
                linear_axis(scales.y),
            ],
            labels=[
                TextLabel(x=width / 2.0, y=-5.0, text="Data Points by Country", fill=AXIS_TEXT)
            ],
            caption="Circle size represents number of insights",
        )

    def tooltip(self, element: Element, scene: Scene) -> TooltipContent:
        entry: CountryCount = element.datum
        return TooltipContent(title=entry.country, lines=(f"Insights: {entry.count}",))

    def hover_attrs(self, element: Element) -> dict[str, Any]:
        entry: CountryCount = element.datum
        return {
            "r": self.radius(entry.count) + self.settings.country.hover_radius_delta,
            "stroke_width": 3.0,
        }

    def rest_attrs(self, element: Element) -> dict[str, Any]:
        entry: CountryCount = element.datum
        return {"r": self.radius(entry.count), "stroke_width": 2.0}
