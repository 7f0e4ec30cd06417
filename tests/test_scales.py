from __future__ import annotations

import matplotlib
import pytest
from matplotlib.colors import to_hex

from insight_dashboard.charts.aggregate import aggregate
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.charts.scales import (
    CATEGORY10_PALETTE,
    SECTOR_COLORS,
    UNKNOWN_COLOR,
    BandScale,
    CategoricalColorScale,
    LinearScale,
    RadiusScale,
    SequentialColorScale,
    build_scales,
    nice_domain,
    tick_increment,
    tick_values,
)
from insight_dashboard.records import RecordSet


def test_tick_increment_picks_one_two_five_steps() -> None:
    assert tick_increment(0, 15, 10) == 2
    assert tick_increment(0, 100, 10) == 10
    assert tick_increment(0, 0.5, 10) == -20


def test_nice_domain_and_ticks() -> None:
    assert nice_domain((0.0, 15.0)) == (0.0, 16.0)
    assert tick_values((0.0, 16.0)) == [0, 2, 4, 6, 8, 10, 12, 14, 16]
    assert tick_values((0.0, 0.5))[:3] == [0.0, 0.05, 0.1]


def test_linear_scale_maps_and_labels() -> None:
    scale = LinearScale((0.0, 15.0), (200.0, 0.0)).nice()

    assert scale.domain == (0.0, 16.0)
    assert scale(16.0) == 0.0
    assert scale(8.0) == pytest.approx(100.0)
    assert scale.tick_label(2.0) == "2"
    assert LinearScale((0.0, 0.5), (0.0, 1.0)).tick_label(0.05) == "0.05"


def test_degenerate_linear_scale_returns_range_midpoint() -> None:
    assert LinearScale((3.0, 3.0), (0.0, 100.0))(3.0) == 50.0


def test_band_scale_positions() -> None:
    scale = BandScale(("a", "b"), (0.0, 100.0), padding=0.2)

    assert scale.step == pytest.approx(100.0 / 2.2)
    assert scale.bandwidth == pytest.approx(100.0 / 2.2 * 0.8)
    assert scale("a") == pytest.approx((100.0 - scale.step * 1.8) / 2.0)
    assert scale("b") == pytest.approx(scale("a") + scale.step)
    assert scale.center("a") == pytest.approx(scale("a") + scale.bandwidth / 2.0)
    assert scale("missing") is None


def test_radius_scale_is_sqrt_and_clamped() -> None:
    scale = RadiusScale(max_value=4.0, min_radius=3.0, max_radius=20.0)

    assert scale(0.0) == 3.0
    assert scale(1.0) == pytest.approx(11.5)
    assert scale(4.0) == 20.0
    assert scale(8.0) == 20.0
    assert scale(-1.0) == 3.0
    assert scale(None) == 3.0
    assert RadiusScale(max_value=0.0, min_radius=3.0, max_radius=20.0)(5.0) == 3.0


def test_radius_scale_is_monotonic_and_bounded() -> None:
    scale = RadiusScale(max_value=37.0, min_radius=3.0, max_radius=20.0)
    values = [step / 4.0 for step in range(-20, 200)]

    radii = [scale(value) for value in values]

    assert all(3.0 <= radius <= 20.0 for radius in radii)
    assert all(left <= right for left, right in zip(radii, radii[1:]))
    assert radii[0] == 3.0 and radii[-1] == 20.0


def test_nice_domain_keeps_bounds_finite_near_float_limit() -> None:
    assert nice_domain((0.0, 1.7e308)) == (0.0, 1.7e308)


def test_sequential_color_uses_midpoint_for_degenerate_domain() -> None:
    scale = SequentialColorScale("Blues", (0.0, 0.0))

    assert scale(0.0) == to_hex(matplotlib.colormaps["Blues"](0.5))


def test_categorical_colors_are_stable() -> None:
    scale = CategoricalColorScale(SECTOR_COLORS, CATEGORY10_PALETTE)

    assert scale("Energy") == CATEGORY10_PALETTE[0]
    assert scale(None) == UNKNOWN_COLOR
    assert scale("") == UNKNOWN_COLOR
    assert scale("Zebra farming") == scale("Zebra farming")
    assert scale("Zebra farming") in CATEGORY10_PALETTE


def test_build_scales_for_each_kind() -> None:
    records = RecordSet.from_rows(
        [
            {
                "sector": "Energy",
                "intensity": 6,
                "topic": "oil",
                "country": "India",
                "relevance": 2,
                "likelihood": 3,
            }
        ]
    )

    bar = build_scales(aggregate(records, ChartKind.sector_intensity))
    donut = build_scales(aggregate(records, ChartKind.topic_counts))
    bubble = build_scales(aggregate(records, ChartKind.scatter_sample))
    country = build_scales(aggregate(records, ChartKind.country_counts))

    assert bar is not None and bar.y.domain == (0.0, 6.0)
    assert donut is not None and donut.x is None and donut.color is not None
    assert bubble is not None and bubble.x.domain == (1.0, 3.0)
    assert bubble.y(3.0) == pytest.approx(bubble.y.range[0] / 2.0)
    assert bubble.radius(6.0) == 20.0
    assert country is not None and country.x.domain == ("India",)


def test_build_scales_returns_none_for_empty_series() -> None:
    assert build_scales(aggregate(RecordSet(), ChartKind.sector_intensity)) is None


def test_zero_valued_series_gets_unit_domain() -> None:
    records = RecordSet.from_rows([{"sector": "Energy", "intensity": 0}])

    scales = build_scales(aggregate(records, ChartKind.sector_intensity))

    assert scales is not None
    assert scales.y.domain == (0.0, 1.0)
