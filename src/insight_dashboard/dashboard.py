from __future__ import annotations

import logging
from types import TracebackType

from insight_dashboard.chart import ChartInstance
from insight_dashboard.charts.kinds import ChartKind
from insight_dashboard.charts.scene import Scene
from insight_dashboard.config import ChartsConfig
from insight_dashboard.interaction import OverlayHost
from insight_dashboard.records import RecordSet

LOGGER = logging.getLogger(__name__)


class Dashboard:
    """The four chart instances fed from one record set and loading flag."""

    def __init__(
        self,
        settings: ChartsConfig | None = None,
        host: OverlayHost | None = None,
        instance_prefix: str = "dashboard",
    ) -> None:
        self.settings = settings or ChartsConfig()
        self.host = host or OverlayHost()
        self.charts: dict[ChartKind, ChartInstance] = {
            kind: ChartInstance(
                kind,
                host=self.host,
                settings=self.settings,
                chart_id=f"{instance_prefix}-{kind.value}",
            )
            for kind in ChartKind
        }
        self.records = RecordSet()
        self.loading = False

    def mount(self) -> None:
        for chart in self.charts.values():
            chart.mount()

    def update(self, records: RecordSet, loading: bool = False) -> dict[ChartKind, Scene]:
        """Replace the record set wholesale and redraw every chart."""
        self.records = records
        self.loading = loading
        LOGGER.info("Rendering %d records (loading=%s)", len(records), loading)
        return {kind: chart.render(records, loading=loading) for kind, chart in self.charts.items()}

    def advance(self, elapsed_ms: float) -> None:
        for chart in self.charts.values():
            chart.advance(elapsed_ms)

    def settle(self) -> None:
        for chart in self.charts.values():
            chart.settle()

    def scenes(self) -> dict[ChartKind, Scene]:
        return {kind: chart.scene for kind, chart in self.charts.items() if chart.scene is not None}

    def teardown(self) -> None:
        for chart in self.charts.values():
            chart.teardown()

    def __enter__(self) -> Dashboard:
        self.mount()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.teardown()
