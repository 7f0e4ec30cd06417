from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from insight_dashboard.charts.kinds import CHART_TITLES, ChartKind
from insight_dashboard.charts.registry import renderer_for
from insight_dashboard.charts.scene import AXIS_STROKE, Axis, Element, Scene, TextLabel, arc_path
from insight_dashboard.config import ChartsConfig

TICK_SIZE = 6.0


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _round(value: Any) -> Any:
    if isinstance(value, float):
        return round(value, 3) if math.isfinite(value) else 0.0
    return value


def _shape_view(element: Element, tooltip_html: str) -> dict[str, Any]:
    attrs = {key: _round(value) for key, value in element.target.items()}
    view: dict[str, Any] = {
        "id": element.element_id,
        "fill": attrs.get("fill"),
        "opacity": attrs.get("opacity", 1.0),
        "stroke": attrs.get("stroke"),
        "stroke_width": attrs.get("stroke_width"),
        "tooltip": tooltip_html,
    }
    if element.shape == "rect":
        view.update(
            tag="rect",
            x=attrs["x"],
            y=attrs["y"],
            width=attrs["width"],
            height=attrs["height"],
            rx=attrs.get("rx", 0.0),
        )
    elif element.shape == "circle":
        view.update(tag="circle", cx=attrs["cx"], cy=attrs["cy"], r=attrs["r"])
    else:
        view.update(
            tag="path",
            d=arc_path(
                element.target["inner_radius"],
                element.target["outer_radius"],
                element.target["start_angle"],
                element.target["end_angle"],
            ),
        )
    return view


def _axis_view(axis: Axis) -> dict[str, Any]:
    low, high = sorted(axis.extent)
    if axis.orient == "bottom":
        line = {"x1": low, "y1": axis.offset, "x2": high, "y2": axis.offset}
        ticks = [
            {
                "x1": tick.position,
                "y1": axis.offset,
                "x2": tick.position,
                "y2": axis.offset + TICK_SIZE,
                "label_x": tick.position,
                "label_y": axis.offset + TICK_SIZE + 9.0,
                "label": tick.label,
            }
            for tick in axis.ticks
        ]
        anchor = axis.label_anchor if axis.label_rotation else "middle"
    else:
        line = {"x1": axis.offset, "y1": low, "x2": axis.offset, "y2": high}
        ticks = [
            {
                "x1": axis.offset - TICK_SIZE,
                "y1": tick.position,
                "x2": axis.offset,
                "y2": tick.position,
                "label_x": axis.offset - TICK_SIZE - 3.0,
                "label_y": tick.position + 3.5,
                "label": tick.label,
            }
            for tick in axis.ticks
        ]
        anchor = "end"
    return {
        "line": {key: _round(value) for key, value in line.items()},
        "ticks": [{key: _round(value) for key, value in tick.items()} for tick in ticks],
        "rotation": axis.label_rotation,
        "anchor": anchor,
        "stroke": AXIS_STROKE,
    }


def _label_view(label: TextLabel) -> dict[str, Any]:
    return {
        "x": _round(label.x),
        "y": _round(label.y),
        "dy": label.dy,
        "text": label.text,
        "anchor": label.anchor,
        "fill": label.fill,
        "font_size": label.font_size,
        "font_weight": label.font_weight,
        "rotation": label.rotation,
    }


def _scene_view(scene: Scene, settings: ChartsConfig) -> dict[str, Any]:
    renderer = renderer_for(scene.kind, settings)
    return {
        "chart_id": scene.chart_id,
        "overlay_id": f"tooltip-{scene.chart_id}",
        "kind": scene.kind.value,
        "title": CHART_TITLES[scene.kind],
        "width": scene.width,
        "height": scene.height,
        "origin": tuple(_round(value) for value in scene.origin),
        "shapes": [
            _shape_view(element, renderer.tooltip(element, scene).to_html())
            for element in scene.elements
        ],
        "axes": [_axis_view(axis) for axis in scene.axes],
        "labels": [_label_view(label) for label in scene.labels],
        "placeholder": scene.placeholder,
        "caption": scene.caption,
    }


def render_dashboard_html(
    scenes: Mapping[ChartKind, Scene],
    records_count: int,
    output_path: Path,
    settings: ChartsConfig | None = None,
    loading: bool = False,
) -> Path:
    """Write a standalone page with the four charts as inline SVG plus hover tooltips."""
    settings = settings or ChartsConfig()
    template = _template_env().get_template("dashboard.html.j2")
    rendered = template.render(
        generated_at=datetime.now(timezone.utc).isoformat(),
        records_count=records_count,
        loading=loading,
        charts=[_scene_view(scenes[kind], settings) for kind in ChartKind if kind in scenes],
        tooltip_offset=(settings.tooltip.offset_x, settings.tooltip.offset_y),
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered, encoding="utf-8")
    return output_path
