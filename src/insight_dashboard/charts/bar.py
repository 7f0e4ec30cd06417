from __future__ import annotations

from insight_dashboard.charts.aggregate import AggregatedSeries, SectorIntensity
from insight_dashboard.charts.base import ChartRenderer, TooltipContent, band_axis, linear_axis
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.charts.scales import ScaleSet, plot_area
from insight_dashboard.charts.scene import Element, Scene


class SectorIntensityBarRenderer(ChartRenderer):
    kind = ChartKind.sector_intensity

    @property
    def enter_duration_ms(self) -> float:
        return float(self.settings.durations.bar_enter_ms)

    def layout(self, chart_id: str, series: AggregatedSeries, scales: ScaleSet) -> Scene:
        bar = self.settings.bar
        width, height = plot_area(self.settings.canvas, bar.margin)
        x_scale, y_scale, color = scales.x, scales.y, scales.color

        elements: list[Element] = []
        for index, entry in enumerate(series.entries):
            top = min(y_scale(entry.avg_intensity), height)
            common = {
                "x": x_scale(entry.sector),
                "width": x_scale.bandwidth,
                "fill": color(entry.avg_intensity),
                "rx": bar.corner_radius,
                "opacity": 1.0,
            }
            elements.append(
                Element(
                    element_id=f"{chart_id}-bar-{index}",
                    shape="rect",
                    datum=entry,
                    attrs={**common, "y": height, "height": 0.0},
                    target={**common, "y": top, "height": max(height - top, 0.0)},
                )
            )

        return Scene(
            chart_id=chart_id,
            kind=self.kind,
            width=float(self.settings.canvas.width),
            height=float(self.settings.canvas.height),
            origin=(float(bar.margin.left), float(bar.margin.top)),
            elements=elements,
            axes=[band_axis(x_scale, offset=height), linear_axis(y_scale)],
        )

    def tooltip(self, element: Element, scene: Scene) -> TooltipContent:
        entry: SectorIntensity = element.datum
        return TooltipContent(
            title=entry.sector,
            lines=(f"Avg Intensity: {entry.avg_intensity:.2f}",),
        )
