from __future__ import annotations

import pytest

from insight_dashboard.chart import ChartInstance
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.charts.scene import ElementState
from insight_dashboard.errors import ChartNotMountedError, OverlayCollisionError
from insight_dashboard.interaction import OverlayHost
from insight_dashboard.records import RecordSet

SECTORS = RecordSet.from_rows(
    [
        {"sector": "Energy", "intensity": 10},
        {"sector": "Energy", "intensity": 20},
        {"sector": "Retail", "intensity": 5},
    ]
)


def test_render_requires_mount() -> None:
    chart = ChartInstance(ChartKind.sector_intensity, host=OverlayHost())

    with pytest.raises(ChartNotMountedError):
        chart.render(SECTORS)


def test_mount_returns_surface_size_and_acquires_overlay() -> None:
    host = OverlayHost()
    chart = ChartInstance("sector-intensity", host=host, chart_id="bars")

    assert chart.mount() == (500, 300)
    assert chart.mounted
    assert "tooltip-bars" in host


def test_duplicate_instance_ids_collide() -> None:
    host = OverlayHost()
    ChartInstance(ChartKind.topic_counts, host=host, chart_id="same").mount()

    with pytest.raises(OverlayCollisionError):
        ChartInstance(ChartKind.country_counts, host=host, chart_id="same").mount()


def test_enter_transition_settles_into_steady_state() -> None:
    with ChartInstance(ChartKind.sector_intensity, host=OverlayHost()) as chart:
        scene = chart.render(SECTORS)
        assert all(element.state == ElementState.entering for element in scene.elements)

        chart.advance(400)
        assert 0.0 < scene.elements[0].attrs["height"] < scene.elements[0].target["height"]

        chart.advance(400)
        for element in scene.elements:
            assert element.state == ElementState.steady
            assert element.attrs == element.target


def test_rerender_replaces_previous_elements() -> None:
    with ChartInstance(ChartKind.sector_intensity, host=OverlayHost()) as chart:
        first = chart.render(SECTORS)
        chart.advance(100)
        second = chart.render(RecordSet.from_rows([{"sector": "Water", "intensity": 2}]))

        assert all(element.state == ElementState.replaced for element in first.elements)
        assert [element.datum.sector for element in second.elements] == ["Water"]
        assert chart.scene is second

        chart.settle()
        assert second.elements[0].state == ElementState.steady
        assert first.elements[0].state == ElementState.replaced


def test_loading_and_empty_placeholders() -> None:
    with ChartInstance(ChartKind.topic_counts, host=OverlayHost()) as chart:
        loading = chart.render(SECTORS, loading=True)
        empty = chart.render(RecordSet())

        assert loading.placeholder == "Loading chart..."
        assert loading.elements == []
        assert empty.placeholder == "No topic data available"
        assert chart.series is not None and chart.series.is_empty


def test_country_placeholder_text() -> None:
    with ChartInstance(ChartKind.country_counts, host=OverlayHost()) as chart:
        assert chart.render(RecordSet()).placeholder == "No geographic data available"


def test_teardown_releases_overlay_and_is_idempotent() -> None:
    host = OverlayHost()
    chart = ChartInstance(ChartKind.sector_intensity, host=host, chart_id="bars")
    chart.mount()
    overlay = chart.overlay
    chart.render(SECTORS)

    chart.teardown()
    chart.teardown()

    assert overlay is not None and overlay.released
    assert len(host) == 0
    assert chart.timeline.pending == 0
    assert chart.scene is None

    chart.mount()
    assert "tooltip-bars" in host


def test_teardown_mid_transition_freezes_elements_as_replaced() -> None:
    chart = ChartInstance(ChartKind.sector_intensity, host=OverlayHost())
    chart.mount()
    scene = chart.render(SECTORS)
    chart.advance(100)
    heights = [element.attrs["height"] for element in scene.elements]

    chart.teardown()
    chart.advance(800)

    assert [element.attrs["height"] for element in scene.elements] == heights
    assert all(element.state == ElementState.replaced for element in scene.elements)
    assert scene.elements[0].attrs != scene.elements[0].target
