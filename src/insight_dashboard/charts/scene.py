from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from insight_dashboard.charts.kinds import ChartKind

AXIS_STROKE = "#4B5563"
AXIS_TEXT = "#9CA3AF"
MUTED_TEXT = "#6B7280"

ShapeKind = Literal["rect", "circle", "arc"]
TAU = 2.0 * math.pi


class ElementState(str, Enum):
    entering = "entering"
    steady = "steady"
    replaced = "replaced"


@dataclass
class Element:
    """One data-bound shape.

    ``attrs`` holds what is currently drawn and is advanced by the timeline;
    ``target`` is the steady geometry the enter transition settles on. Both
    are in the scene's local coordinates (after ``Scene.origin``).
    """

    element_id: str
    shape: ShapeKind
    datum: Any
    attrs: dict[str, Any]
    target: dict[str, Any]
    state: ElementState = ElementState.entering

    def contains(self, x: float, y: float) -> bool:
        attrs = self.attrs
        if self.shape == "rect":
            return (
                attrs["x"] <= x <= attrs["x"] + attrs["width"]
                and attrs["y"] <= y <= attrs["y"] + attrs["height"]
            )
        if self.shape == "circle":
            return math.hypot(x - attrs["cx"], y - attrs["cy"]) <= attrs["r"]
        radius = math.hypot(x, y)
        if not attrs["inner_radius"] <= radius <= attrs["outer_radius"]:
            return False
        angle = math.atan2(x, -y) % TAU
        return attrs["start_angle"] <= angle < attrs["end_angle"]


@dataclass(frozen=True)
class Tick:
    position: float
    label: str


@dataclass(frozen=True)
class Axis:
    orient: Literal["bottom", "left"]
    extent: tuple[float, float]
    ticks: tuple[Tick, ...]
    offset: float = 0.0
    label_rotation: float = 0.0
    label_anchor: Literal["start", "middle", "end"] = "middle"


@dataclass(frozen=True)
class TextLabel:
    x: float
    y: float
    text: str
    anchor: Literal["start", "middle", "end"] = "middle"
    fill: str = AXIS_TEXT
    font_size: float = 12.0
    font_weight: Literal["normal", "bold"] = "normal"
    rotation: float = 0.0
    dy: float = 0.0


@dataclass
class Scene:
    chart_id: str
    kind: ChartKind
    width: float
    height: float
    origin: tuple[float, float] = (0.0, 0.0)
    elements: list[Element] = field(default_factory=list)
    axes: list[Axis] = field(default_factory=list)
    labels: list[TextLabel] = field(default_factory=list)
    placeholder: str | None = None
    caption: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None

    def element(self, element_id: str) -> Element | None:
        for element in self.elements:
            if element.element_id == element_id:
                return element
        return None

    def hit_test(self, x: float, y: float) -> Element | None:
        """Topmost live element under a point given in surface coordinates."""
        local_x, local_y = x - self.origin[0], y - self.origin[1]
        for element in reversed(self.elements):
            if element.state == ElementState.replaced:
                continue
            if element.contains(local_x, local_y):
                return element
        return None


def arc_centroid(
    inner_radius: float, outer_radius: float, start_angle: float, end_angle: float
) -> tuple[float, float]:
    radius = (inner_radius + outer_radius) / 2.0
    angle = (start_angle + end_angle) / 2.0 - math.pi / 2.0
    return math.cos(angle) * radius, math.sin(angle) * radius


def _polar(radius: float, angle: float) -> tuple[float, float]:
    return radius * math.sin(angle), -radius * math.cos(angle)


def arc_path(
    inner_radius: float, outer_radius: float, start_angle: float, end_angle: float
) -> str:
    """SVG path data for an annular sector; angles run clockwise from 12 o'clock."""
    sweep = end_angle - start_angle
    if outer_radius <= 0 or sweep <= 0:
        return ""
    if sweep >= TAU - 1e-9:
        middle = start_angle + math.pi
        return " ".join(
            part
            for part in (
                arc_path(inner_radius, outer_radius, start_angle, middle),
                arc_path(inner_radius, outer_radius, middle, start_angle + TAU),
            )
            if part
        )
    large_arc = 1 if sweep > math.pi else 0
    ox0, oy0 = _polar(outer_radius, start_angle)
    ox1, oy1 = _polar(outer_radius, end_angle)
    parts = [
        f"M{ox0:.3f},{oy0:.3f}",
        f"A{outer_radius:.3f},{outer_radius:.3f} 0 {large_arc} 1 {ox1:.3f},{oy1:.3f}",
    ]
    if inner_radius > 0:
        ix1, iy1 = _polar(inner_radius, end_angle)
        ix0, iy0 = _polar(inner_radius, start_angle)
        parts.append(f"L{ix1:.3f},{iy1:.3f}")
        parts.append(
            f"A{inner_radius:.3f},{inner_radius:.3f} 0 {large_arc} 0 {ix0:.3f},{iy0:.3f}"
        )
    else:
        parts.append("L0,0")
    parts.append("Z")
    return "".join(parts)
