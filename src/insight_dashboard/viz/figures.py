from __future__ import annotations

import math
from collections.abc import Mapping
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.patches import Circle, FancyBboxPatch, Rectangle, Wedge

from insight_dashboard.charts.kinds import CHART_TITLES, ChartKind
from insight_dashboard.charts.scene import (
    AXIS_STROKE,
    AXIS_TEXT,
    MUTED_TEXT,
    Axis,
    Element,
    Scene,
    TextLabel,
)
from insight_dashboard.viz.common import BACKGROUND, PIXELS_PER_INCH, save_figure

TICK_SIZE = 6.0
TICK_PADDING = 3.0
# SVG sizes are pixels; matplotlib text sizes are points.
POINTS_PER_PIXEL = 0.75

_HORIZONTAL_ALIGNMENT = {"start": "left", "middle": "center", "end": "right"}


def _canvas(scene: Scene) -> Axes:
    fig = plt.figure(
        figsize=(scene.width / PIXELS_PER_INCH, scene.height / PIXELS_PER_INCH),
        dpi=PIXELS_PER_INCH,
        facecolor=BACKGROUND,
    )
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(0.0, scene.width)
    ax.set_ylim(scene.height, 0.0)
    ax.set_facecolor(BACKGROUND)
    ax.set_axis_off()
    return ax


def _draw_element(ax: Axes, element: Element, origin: tuple[float, float]) -> None:
    attrs = element.target
    ox, oy = origin
    fill = attrs.get("fill", AXIS_TEXT)
    opacity = float(attrs.get("opacity", 1.0))
    stroke = attrs.get("stroke")
    stroke_width = float(attrs.get("stroke_width", 0.0)) * POINTS_PER_PIXEL

    if element.shape == "rect":
        width, height = float(attrs["width"]), float(attrs["height"])
        if width <= 0 or height <= 0:
            return
        rounding = min(float(attrs.get("rx", 0.0)), width / 2.0, height / 2.0)
        anchor = (ox + attrs["x"], oy + attrs["y"])
        if rounding > 0:
            patch = FancyBboxPatch(
                anchor,
                width,
                height,
                boxstyle=f"round,pad=0,rounding_size={rounding}",
                facecolor=fill,
                edgecolor="none",
                alpha=opacity,
            )
        else:
            patch = Rectangle(anchor, width, height, facecolor=fill, alpha=opacity)
        ax.add_patch(patch)
        return

    if element.shape == "circle":
        if attrs["r"] <= 0:
            return
        ax.add_patch(
            Circle(
                (ox + attrs["cx"], oy + attrs["cy"]),
                attrs["r"],
                facecolor=fill,
                edgecolor=stroke or "none",
                linewidth=stroke_width,
                alpha=opacity,
            )
        )
        return

    start, end = attrs["start_angle"], attrs["end_angle"]
    if end <= start or attrs["outer_radius"] <= 0:
        return
    # Angles run clockwise from 12 o'clock; with the y axis inverted that is theta - 90.
    ax.add_patch(
        Wedge(
            (ox, oy),
            attrs["outer_radius"],
            math.degrees(start) - 90.0,
            math.degrees(end) - 90.0,
            width=attrs["outer_radius"] - attrs["inner_radius"],
            facecolor=fill,
            edgecolor=stroke or "none",
            linewidth=stroke_width,
            alpha=opacity,
        )
    )


def _draw_axis(ax: Axes, axis: Axis, origin: tuple[float, float]) -> None:
    ox, oy = origin
    low, high = sorted(axis.extent)
    if axis.orient == "bottom":
        y = oy + axis.offset
        ax.plot([ox + low, ox + high], [y, y], color=AXIS_STROKE, linewidth=0.75)
        for tick in axis.ticks:
            x = ox + tick.position
            ax.plot([x, x], [y, y + TICK_SIZE], color=AXIS_STROKE, linewidth=0.75)
            ax.text(
                x,
                y + TICK_SIZE + TICK_PADDING,
                tick.label,
                color=AXIS_TEXT,
                fontsize=10.0 * POINTS_PER_PIXEL,
                ha=_HORIZONTAL_ALIGNMENT[axis.label_anchor] if axis.label_rotation else "center",
                va="top",
                rotation=-axis.label_rotation,
                rotation_mode="anchor",
            )
        return

    x = ox + axis.offset
    ax.plot([x, x], [oy + low, oy + high], color=AXIS_STROKE, linewidth=0.75)
    for tick in axis.ticks:
        y = oy + tick.position
        ax.plot([x - TICK_SIZE, x], [y, y], color=AXIS_STROKE, linewidth=0.75)
        ax.text(
            x - TICK_SIZE - TICK_PADDING,
            y,
            tick.label,
            color=AXIS_TEXT,
            fontsize=10.0 * POINTS_PER_PIXEL,
            ha="right",
            va="center",
        )


def _draw_label(ax: Axes, label: TextLabel, origin: tuple[float, float]) -> None:
    ax.text(
        origin[0] + label.x,
        origin[1] + label.y + label.dy,
        label.text,
        color=label.fill,
        fontsize=label.font_size * POINTS_PER_PIXEL,
        fontweight=label.font_weight,
        ha=_HORIZONTAL_ALIGNMENT[label.anchor],
        va="center",
        rotation=-label.rotation,
    )


def plot_scene(scene: Scene, output_path: Path) -> Path:
    """Draw the steady state of a scene; placeholders come out as a single text line."""
    ax = _canvas(scene)
    for element in scene.elements:
        _draw_element(ax, element, scene.origin)
    for axis in scene.axes:
        _draw_axis(ax, axis, scene.origin)
    for label in scene.labels:
        _draw_label(ax, label, scene.origin)
    if scene.caption:
        ax.text(
            scene.width / 2.0,
            scene.height - 6.0,
            scene.caption,
            color=MUTED_TEXT,
            fontsize=11.0 * POINTS_PER_PIXEL,
            ha="center",
            va="bottom",
        )
    ax.text(
        4.0,
        4.0,
        CHART_TITLES[scene.kind],
        color=AXIS_TEXT,
        fontsize=10.0,
        ha="left",
        va="top",
    )
    return save_figure(output_path)


def plot_dashboard(
    scenes: Mapping[ChartKind, Scene], figures_dir: Path, figures_format: str = "png"
) -> dict[ChartKind, Path]:
    return {
        kind: plot_scene(scene, figures_dir / f"{kind.value}.{figures_format}")
        for kind, scene in scenes.items()
    }
