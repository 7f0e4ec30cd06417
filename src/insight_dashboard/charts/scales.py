from __future__ import annotations

import hashlib
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import matplotlib
from matplotlib.colors import to_hex

from insight_dashboard.charts.aggregate import AggregatedSeries
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.config import CanvasConfig, ChartsConfig, Margin

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)

UNKNOWN_CATEGORY = "Unknown"
UNKNOWN_COLOR = "#7f7f7f"


def _palette(name: str) -> tuple[str, ...]:
    return tuple(to_hex(color) for color in matplotlib.colormaps[name].colors)


CATEGORY10_PALETTE = _palette("tab10")
SET3_PALETTE = _palette("Set3")


def _static_table(labels: Sequence[str], palette: Sequence[str]) -> dict[str, str]:
    return {label: palette[index % len(palette)] for index, label in enumerate(labels)}


SECTOR_COLORS: dict[str, str] = {
    **_static_table(
        [
            "Energy",
            "Environment",
            "Government",
            "Aerospace & defence",
            "Manufacturing",
            "Retail",
            "Financial services",
            "Support services",
            "Information Technology",
            "Healthcare",
            "Food & agriculture",
            "Automotive",
            "Tourism & hospitality",
            "Construction",
            "Security",
            "Transport",
            "Water",
            "Media & entertainment",
        ],
        CATEGORY10_PALETTE,
    ),
    UNKNOWN_CATEGORY: UNKNOWN_COLOR,
}

TOPIC_COLORS: dict[str, str] = _static_table(
    [
        "oil",
        "gas",
        "market",
        "gdp",
        "economy",
        "growth",
        "consumption",
        "energy",
        "production",
        "export",
        "demand",
        "policy",
        "war",
        "technology",
        "climate",
        "population",
        "emission",
        "coal",
        "inflation",
        "investment",
    ],
    SET3_PALETTE,
)


def tick_increment(start: float, stop: float, count: int) -> float:
    """Signed step: positive steps are multiples, negative steps are 1/step."""
    if count <= 0:
        return 0.0
    step = (stop - start) / count
    if not math.isfinite(step) or step <= 0:
        return 0.0
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    if power >= 0:
        return factor * math.pow(10, power)
    return -math.pow(10, -power) / factor


def nice_domain(domain: tuple[float, float], count: int = 10) -> tuple[float, float]:
    start, stop = domain
    if not (math.isfinite(start) and math.isfinite(stop)) or start == stop:
        return domain
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    previous_step = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == previous_step or step == 0:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        else:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        previous_step = step
    if not (math.isfinite(start) and math.isfinite(stop)):
        return domain
    return (stop, start) if reverse else (start, stop)


def tick_values(domain: tuple[float, float], count: int = 10) -> list[float]:
    start, stop = min(domain), max(domain)
    if not (math.isfinite(start) and math.isfinite(stop)):
        return []
    if start == stop:
        return [float(start)]
    step = tick_increment(start, stop, count)
    if step > 0:
        first, last = math.ceil(start / step), math.floor(stop / step)
        values = [(first + index) * step for index in range(int(last - first) + 1)]
    elif step < 0:
        inverse = -step
        first, last = math.ceil(start * inverse), math.floor(stop * inverse)
        values = [(first + index) / inverse for index in range(int(last - first) + 1)]
    else:
        return []
    return [round(value, 12) for value in values]


def format_tick(value: float, domain: tuple[float, float], count: int = 10) -> str:
    step = abs(tick_increment(min(domain), max(domain), count))
    if step == 0:
        decimals = 0 if float(value).is_integer() else 2
    elif tick_increment(min(domain), max(domain), count) < 0:
        decimals = max(0, math.ceil(math.log10(step)))
    else:
        decimals = 0
    return f"{value:,.{decimals}f}"


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2.0
        return r0 + (float(value) - d0) / (d1 - d0) * (r1 - r0)

    def nice(self, count: int = 10) -> LinearScale:
        return LinearScale(domain=nice_domain(self.domain, count), range=self.range)

    def ticks(self, count: int = 10) -> list[float]:
        return tick_values(self.domain, count)

    def tick_label(self, value: float, count: int = 10) -> str:
        return format_tick(value, self.domain, count)


@dataclass(frozen=True)
class BandScale:
    domain: tuple[str, ...]
    range: tuple[float, float]
    padding: float = 0.0

    @property
    def step(self) -> float:
        start, stop = self.range
        count = len(self.domain)
        return (stop - start) / max(1.0, count - self.padding + self.padding * 2)

    @property
    def bandwidth(self) -> float:
        return self.step * (1.0 - self.padding)

    def _start(self) -> float:
        start, stop = self.range
        count = len(self.domain)
        return start + (stop - start - self.step * (count - self.padding)) * 0.5

    def __call__(self, label: str) -> float | None:
        try:
            index = self.domain.index(label)
        except ValueError:
            return None
        return self._start() + self.step * index

    def center(self, label: str) -> float | None:
        position = self(label)
        return None if position is None else position + self.bandwidth / 2.0


@dataclass(frozen=True)
class RadiusScale:
    """Square-root scale from ``[0, max_value]`` onto ``[min_radius, max_radius]``."""

    max_value: float
    min_radius: float
    max_radius: float

    def __call__(self, value: float | None) -> float:
        if value is None or not math.isfinite(value) or self.max_value <= 0:
            return self.min_radius
        clamped = min(max(float(value), 0.0), self.max_value)
        fraction = math.sqrt(clamped / self.max_value)
        return self.min_radius + fraction * (self.max_radius - self.min_radius)


@dataclass(frozen=True)
class SequentialColorScale:
    palette: str
    domain: tuple[float, float]

    def __call__(self, value: float) -> str:
        low, high = self.domain
        if high == low:
            fraction = 0.5
        else:
            fraction = min(max((float(value) - low) / (high - low), 0.0), 1.0)
        return to_hex(matplotlib.colormaps[self.palette](fraction))


@dataclass(frozen=True)
class CategoricalColorScale:
    table: Mapping[str, str]
    palette: tuple[str, ...]

    def __call__(self, label: str | None) -> str:
        key = label if label else UNKNOWN_CATEGORY
        color = self.table.get(key)
        if color is not None:
            return color
        if key == UNKNOWN_CATEGORY:
            return UNKNOWN_COLOR
        digest = hashlib.md5(key.encode("utf-8")).hexdigest()
        return self.palette[int(digest, 16) % len(self.palette)]


@dataclass(frozen=True)
class ScaleSet:
    x: LinearScale | BandScale | None = None
    y: LinearScale | None = None
    color: SequentialColorScale | CategoricalColorScale | None = None
    radius: RadiusScale | None = None


def plot_area(canvas: CanvasConfig, margin: Margin) -> tuple[float, float]:
    width = canvas.width - margin.left - margin.right
    height = canvas.height - margin.top - margin.bottom
    return float(max(width, 1)), float(max(height, 1))


def _zero_anchored(values: Sequence[float]) -> tuple[float, float]:
    high = max(values)
    return (0.0, float(high)) if high > 0 else (0.0, 1.0)


def _extent(values: Sequence[float]) -> tuple[float, float]:
    low, high = float(min(values)), float(max(values))
    if low == high:
        return low - 1.0, high + 1.0
    return low, high


def build_scales(
    series: AggregatedSeries,
    kind: ChartKind | str | None = None,
    settings: ChartsConfig | None = None,
) -> ScaleSet | None:
    """Build the scales a chart needs; ``None`` when the series is empty."""
    kind = ChartKind(kind) if kind is not None else series.kind
    settings = settings or ChartsConfig()
    if series.is_empty:
        return None

    if kind == ChartKind.sector_intensity:
        width, height = plot_area(settings.canvas, settings.bar.margin)
        values = series.values()
        return ScaleSet(
            x=BandScale(tuple(series.labels()), (0.0, width), settings.bar.band_padding),
            y=LinearScale(_zero_anchored(values), (height, 0.0)).nice(),
            color=SequentialColorScale(settings.bar.palette, (0.0, max(values))),
        )

    if kind == ChartKind.topic_counts:
        return ScaleSet(color=CategoricalColorScale(TOPIC_COLORS, SET3_PALETTE))

    if kind == ChartKind.scatter_sample:
        width, height = plot_area(settings.canvas, settings.bubble.margin)
        points = series.entries
        return ScaleSet(
            x=LinearScale(_extent([p.relevance for p in points]), (0.0, width)).nice(),
            y=LinearScale(_extent([p.likelihood for p in points]), (height, 0.0)).nice(),
            color=CategoricalColorScale(SECTOR_COLORS, CATEGORY10_PALETTE),
            radius=RadiusScale(
                max_value=max(p.intensity for p in points),
                min_radius=settings.bubble.min_radius,
                max_radius=settings.bubble.max_radius,
            ),
        )

    width, height = plot_area(settings.canvas, settings.country.margin)
    values = series.values()
    return ScaleSet(
        x=BandScale(tuple(series.labels()), (0.0, width), settings.country.band_padding),
        y=LinearScale(_zero_anchored(values), (height, 0.0)).nice(),
        color=SequentialColorScale(settings.country.palette, (0.0, max(values))),
    )
