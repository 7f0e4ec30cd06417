from __future__ import annotations

import logging
from types import TracebackType

from insight_dashboard.charts.aggregate import AggregatedSeries, aggregate
from insight_dashboard.charts.animation import Timeline
from insight_dashboard.charts.base import ChartRenderer, TooltipContent
from insight_dashboard.charts.kinds import EMPTY_PLACEHOLDERS, LOADING_PLACEHOLDER, ChartKind
from insight_dashboard.charts.registry import renderer_for
from insight_dashboard.charts.scales import build_scales
from insight_dashboard.charts.scene import Element, ElementState, Scene
from insight_dashboard.config import ChartsConfig
from insight_dashboard.errors import ChartNotMountedError
from insight_dashboard.interaction import (
    InteractionController,
    OverlayHost,
    Pointer,
    TooltipOverlay,
)
from insight_dashboard.records import RecordSet

LOGGER = logging.getLogger(__name__)


class ChartInstance:
    """One mounted chart: owns its scene, animation timeline and tooltip overlay.

    ``render`` is the single entry point for new data or a loading-state
    change. It always retires the previous scene (elements become
    ``replaced`` and their transitions are abandoned) before building the
    next one, so no stale geometry survives an update.
    """

    def __init__(
        self,
        kind: ChartKind | str,
        host: OverlayHost,
        settings: ChartsConfig | None = None,
        chart_id: str | None = None,
        renderer: ChartRenderer | None = None,
    ) -> None:
        self.kind = ChartKind(kind)
        self.host = host
        self.settings = settings or ChartsConfig()
        self.chart_id = chart_id or self.kind.value
        self.renderer = renderer or renderer_for(self.kind, self.settings)
        self.timeline = Timeline()
        self.overlay: TooltipOverlay | None = None
        self.controller: InteractionController | None = None
        self.scene: Scene | None = None
        self.series: AggregatedSeries | None = None

    @property
    def mounted(self) -> bool:
        return self.overlay is not None

    def mount(self) -> tuple[int, int]:
        """Acquire this instance's overlay; returns the drawable surface size."""
        if not self.mounted:
            self.overlay = self.host.acquire(self.chart_id)
            self.controller = InteractionController(
                renderer=self.renderer,
                timeline=self.timeline,
                overlay=self.overlay,
                settings=self.settings,
            )
        return self.settings.canvas.width, self.settings.canvas.height

    def _require_controller(self) -> InteractionController:
        if self.controller is None:
            raise ChartNotMountedError(f"Chart {self.chart_id!r} is not mounted")
        return self.controller

    def _retire_scene(self) -> None:
        self.timeline.cancel()
        if self.scene is not None:
            for element in self.scene.elements:
                element.state = ElementState.replaced
        if self.controller is not None:
            self.controller.reset()
        self.scene = None
        self.series = None

    def _build_scene(self, records: RecordSet, loading: bool) -> Scene:
        if loading:
            return self.renderer.placeholder(self.chart_id, LOADING_PLACEHOLDER)
        series = aggregate(records, self.kind, limits=self.settings.limits)
        self.series = series
        if series.is_empty:
            return self.renderer.placeholder(self.chart_id, EMPTY_PLACEHOLDERS[self.kind])
        scales = build_scales(series, self.kind, self.settings)
        return self.renderer.layout(self.chart_id, series, scales)

    def render(self, records: RecordSet, loading: bool = False) -> Scene:
        controller = self._require_controller()
        self._retire_scene()
        scene = self._build_scene(records, loading)
        for element in scene.elements:
            self.timeline.animate(
                element,
                element.target,
                self.renderer.enter_duration_ms,
                on_end=lambda element=element: _settle(element),
            )
        self.scene = scene
        controller.attach(scene)
        LOGGER.debug(
            "Rendered %s: %d elements%s",
            self.chart_id,
            len(scene.elements),
            f" ({scene.placeholder})" if scene.is_placeholder else "",
        )
        return scene

    def advance(self, elapsed_ms: float) -> None:
        self.timeline.advance(elapsed_ms)

    def settle(self) -> None:
        self.timeline.finish()

    def pointer_enter(self, element_id: str, pointer: Pointer) -> TooltipContent | None:
        return self._require_controller().on_enter(element_id, pointer)

    def pointer_move(self, pointer: Pointer) -> None:
        self._require_controller().on_move(pointer)

    def pointer_leave(self, element_id: str) -> None:
        self._require_controller().on_leave(element_id)

    def pointer_at(self, pointer: Pointer) -> str | None:
        return self._require_controller().pointer_at(pointer)

    def teardown(self) -> None:
        """Release the overlay and abandon pending transitions. Idempotent."""
        self._retire_scene()
        if self.overlay is not None:
            self.host.release(self.overlay)
        self.overlay = None
        self.controller = None

    def __enter__(self) -> ChartInstance:
        self.mount()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.teardown()


def _settle(element: Element) -> None:
    if element.state == ElementState.entering:
        element.state = ElementState.steady
