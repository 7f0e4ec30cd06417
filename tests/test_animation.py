from __future__ import annotations

import pytest

from insight_dashboard.charts.animation import Timeline, cubic_in_out, interpolate
from insight_dashboard.charts.scene import Element


def _circle(element_id: str = "c-0", r: float = 0.0) -> Element:
    attrs = {"cx": 10.0, "cy": 10.0, "r": r, "fill": "#000000"}
    return Element(element_id=element_id, shape="circle", datum=None, attrs=attrs, target={})


def test_cubic_in_out_endpoints_and_midpoint() -> None:
    assert cubic_in_out(0.0) == 0.0
    assert cubic_in_out(0.5) == 0.5
    assert cubic_in_out(1.0) == 1.0
    assert cubic_in_out(0.25) < 0.25


def test_interpolate_numbers_colors_and_snaps() -> None:
    assert interpolate(0.0, 10.0, 0.5) == 5.0
    assert interpolate("#000000", "#ffffff", 0.5) == "#808080"
    assert interpolate("bold", "normal", 0.5) == "bold"
    assert interpolate("bold", "normal", 1.0) == "normal"


def test_transition_runs_to_completion_and_calls_on_end_once() -> None:
    timeline = Timeline()
    element = _circle()
    finished: list[str] = []

    timeline.animate(element, {"r": 10.0}, 100, on_end=lambda: finished.append("done"))
    timeline.advance(50)

    assert element.attrs["r"] == pytest.approx(5.0)
    assert timeline.is_animating(element)

    timeline.advance(50)

    assert element.attrs["r"] == 10.0
    assert timeline.pending == 0
    assert finished == ["done"]


def test_new_transition_interrupts_same_attribute() -> None:
    timeline = Timeline()
    element = _circle()
    finished: list[str] = []

    timeline.animate(
        element, {"r": 10.0, "fill": "#ffffff"}, 100, on_end=lambda: finished.append("enter")
    )
    timeline.advance(50)
    timeline.animate(element, {"r": 20.0}, 100)

    assert timeline.pending == 2
    timeline.finish()

    assert element.attrs["r"] == 20.0
    assert element.attrs["fill"] == "#ffffff"
    assert finished == ["enter"]


def test_cancel_leaves_attributes_and_drops_callbacks() -> None:
    timeline = Timeline()
    element = _circle()
    finished: list[str] = []

    timeline.animate(element, {"r": 10.0}, 100, on_end=lambda: finished.append("done"))
    timeline.advance(25)
    partial = element.attrs["r"]
    timeline.cancel()
    timeline.advance(100)

    assert element.attrs["r"] == partial
    assert timeline.pending == 0
    assert finished == []


def test_zero_duration_and_empty_attrs_apply_immediately() -> None:
    timeline = Timeline()
    element = _circle()
    finished: list[str] = []

    timeline.animate(element, {"r": 7.0}, 0, on_end=lambda: finished.append("zero"))
    timeline.animate(element, {}, 100, on_end=lambda: finished.append("empty"))

    assert element.attrs["r"] == 7.0
    assert timeline.pending == 0
    assert finished == ["zero", "empty"]
