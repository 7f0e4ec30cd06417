from __future__ import annotations

from pathlib import Path

from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.dashboard import Dashboard
from insight_dashboard.records import RecordSet
from insight_dashboard.viz.figures import plot_dashboard, plot_scene

RECORDS = RecordSet.from_rows(
    [
        {"sector": "Energy", "topic": "oil", "country": "India", "intensity": 6},
        {"sector": "Retail", "topic": "gas", "country": "Mexico", "intensity": 0},
        {"relevance": 2, "likelihood": 3, "intensity": 6},
        {"relevance": 4, "likelihood": 1, "intensity": 0, "sector": "Retail"},
    ]
)


def test_plot_dashboard_writes_one_figure_per_chart(tmp_path: Path) -> None:
    with Dashboard() as dashboard:
        dashboard.update(RECORDS)
        dashboard.settle()
        paths = plot_dashboard(dashboard.scenes(), tmp_path / "figures")

    assert set(paths) == set(ChartKind)
    for kind, path in paths.items():
        assert path == tmp_path / "figures" / f"{kind.value}.png"
        assert path.exists()
        assert path.stat().st_size > 0


def test_plot_scene_draws_placeholders(tmp_path: Path) -> None:
    with Dashboard() as dashboard:
        scenes = dashboard.update(RecordSet())
        output = plot_scene(scenes[ChartKind.country_counts], tmp_path / "empty.png")

    assert output.exists()
