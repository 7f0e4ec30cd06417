from __future__ import annotations

from pathlib import Path

from insight_dashboard.dashboard import Dashboard
from insight_dashboard.records import RecordSet
from insight_dashboard.report.render import render_dashboard_html

RECORDS = RecordSet.from_rows(
    [
        {"sector": "Energy", "topic": "oil", "country": "India", "intensity": 6},
        {"sector": "Retail", "topic": "gas", "country": "Mexico", "intensity": 2},
        {"sector": "<b>X</b>", "intensity": 1},
        {
            "relevance": 2,
            "likelihood": 3,
            "intensity": 4,
            "title": "<img src=x onerror=alert(1)>",
        },
    ]
)


def test_render_dashboard_html_writes_svg_charts_and_overlays(tmp_path: Path) -> None:
    with Dashboard() as dashboard:
        dashboard.update(RECORDS)
        dashboard.settle()
        output = render_dashboard_html(
            dashboard.scenes(),
            records_count=len(RECORDS),
            output_path=tmp_path / "report" / "dashboard.html",
        )

    html = output.read_text(encoding="utf-8")
    assert "<strong>4</strong> insights loaded" in html
    assert html.count("<svg") == 4
    for overlay_id in (
        "tooltip-dashboard-sector-intensity",
        "tooltip-dashboard-topic-counts",
        "tooltip-dashboard-scatter-sample",
        "tooltip-dashboard-country-counts",
    ):
        assert f'id="{overlay_id}"' in html
    assert "Average Intensity by Sector" in html
    assert "Bubble size represents intensity" in html
    assert "&lt;b&gt;X&lt;/b&gt;" in html
    assert "<b>X</b>" not in html
    assert "<img src=x" not in html
    assert "&amp;lt;img src=x onerror=alert(1)&amp;gt;" in html
    assert "Avg Intensity: 6.00" in html


def test_render_dashboard_html_placeholders(tmp_path: Path) -> None:
    with Dashboard() as dashboard:
        scenes = dashboard.update(RecordSet(), loading=True)
        output = render_dashboard_html(
            scenes, records_count=0, output_path=tmp_path / "dashboard.html", loading=True
        )

    html = output.read_text(encoding="utf-8")
    assert html.count("Loading chart...") == 4
    assert "insights loaded" not in html
