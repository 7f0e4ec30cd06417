from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any

from insight_dashboard.charts.aggregate import AggregatedSeries
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.charts.scales import BandScale, LinearScale, ScaleSet
from insight_dashboard.charts.scene import AXIS_TEXT, Axis, Element, Scene, TextLabel, Tick
from insight_dashboard.config import ChartsConfig

PLACEHOLDER_POSITION = (200.0, 150.0)


def format_number(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def shorten_label(label: str, max_words: int | None) -> str:
    if max_words is None:
        return label
    words = label.split()
    if len(words) > max_words:
        return " ".join(words[:max_words]) + "..."
    return label


@dataclass(frozen=True)
class TooltipContent:
    title: str
    lines: tuple[str, ...] = ()

    def to_html(self) -> str:
        parts = [f"<strong>{escape(self.title)}</strong>"]
        parts.extend(escape(line) for line in self.lines)
        return "<br/>".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "lines": list(self.lines)}


def band_axis(
    scale: BandScale,
    offset: float,
    label_rotation: float = -45.0,
    max_words: int | None = None,
) -> Axis:
    ticks = tuple(
        Tick(position=scale.center(label) or 0.0, label=shorten_label(label, max_words))
        for label in scale.domain
    )
    return Axis(
        orient="bottom",
        extent=scale.range,
        ticks=ticks,
        offset=offset,
        label_rotation=label_rotation,
        label_anchor="end" if label_rotation else "middle",
    )


def linear_axis(scale: LinearScale, orient: str = "left", offset: float = 0.0) -> Axis:
    ticks = tuple(
        Tick(position=scale(value), label=scale.tick_label(value)) for value in scale.ticks()
    )
    return Axis(orient=orient, extent=scale.range, ticks=ticks, offset=offset)


class ChartRenderer:
    """Lays out one chart kind and describes its hover behaviour."""

    kind: ChartKind

    def __init__(self, settings: ChartsConfig | None = None) -> None:
        self.settings = settings or ChartsConfig()

    @property
    def enter_duration_ms(self) -> float:
        raise NotImplementedError

    def layout(self, chart_id: str, series: AggregatedSeries, scales: ScaleSet) -> Scene:
        raise NotImplementedError

    def tooltip(self, element: Element, scene: Scene) -> TooltipContent:
        raise NotImplementedError

    def hover_attrs(self, element: Element) -> dict[str, Any]:
        return {}

    def rest_attrs(self, element: Element) -> dict[str, Any]:
        return {}

    def placeholder(self, chart_id: str, text: str) -> Scene:
        x, y = PLACEHOLDER_POSITION
        return Scene(
            chart_id=chart_id,
            kind=self.kind,
            width=float(self.settings.canvas.width),
            height=float(self.settings.canvas.height),
            labels=[TextLabel(x=x, y=y, text=text, fill=AXIS_TEXT, font_size=14.0)],
            placeholder=text,
        )
