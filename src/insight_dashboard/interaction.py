from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from insight_dashboard.charts.animation import Timeline
from insight_dashboard.charts.base import ChartRenderer, TooltipContent
from insight_dashboard.charts.scene import Element, ElementState, Scene
from insight_dashboard.config import ChartsConfig
from insight_dashboard.errors import OverlayCollisionError

LOGGER = logging.getLogger(__name__)

Pointer = tuple[float, float]


@dataclass
class TooltipOverlay:
    overlay_id: str
    opacity: float = 0.0
    content: TooltipContent | None = None
    left: float = 0.0
    top: float = 0.0
    released: bool = False

    @property
    def visible(self) -> bool:
        return self.opacity > 0.0

    def show(self, content: TooltipContent) -> None:
        self.content = content
        self.opacity = 1.0

    def hide(self) -> None:
        self.opacity = 0.0

    def move_to(self, left: float, top: float) -> None:
        self.left = left
        self.top = top


class OverlayHost:
    """Holds the live tooltip overlays of every mounted chart instance."""

    def __init__(self) -> None:
        self._overlays: dict[str, TooltipOverlay] = {}

    def __len__(self) -> int:
        return len(self._overlays)

    def __contains__(self, overlay_id: object) -> bool:
        return overlay_id in self._overlays

    def overlay_ids(self) -> list[str]:
        return sorted(self._overlays)

    def acquire(self, chart_id: str) -> TooltipOverlay:
        overlay_id = f"tooltip-{chart_id}"
        if overlay_id in self._overlays:
            raise OverlayCollisionError(f"Tooltip overlay already in use: {overlay_id}")
        overlay = TooltipOverlay(overlay_id=overlay_id)
        self._overlays[overlay_id] = overlay
        LOGGER.debug("Acquired tooltip overlay %s", overlay_id)
        return overlay

    def release(self, overlay: TooltipOverlay) -> None:
        overlay.hide()
        overlay.released = True
        self._overlays.pop(overlay.overlay_id, None)
        LOGGER.debug("Released tooltip overlay %s", overlay.overlay_id)

    @contextmanager
    def overlay(self, chart_id: str) -> Iterator[TooltipOverlay]:
        overlay = self.acquire(chart_id)
        try:
            yield overlay
        finally:
            self.release(overlay)


class InteractionController:
    """Hover state machine for one chart instance.

    Pointer coordinates are surface coordinates, the same space the scene's
    origin is expressed in. At most one element is hovered at a time.
    """

    def __init__(
        self,
        renderer: ChartRenderer,
        timeline: Timeline,
        overlay: TooltipOverlay,
        settings: ChartsConfig | None = None,
    ) -> None:
        self.renderer = renderer
        self.timeline = timeline
        self.overlay = overlay
        self.settings = settings or ChartsConfig()
        self.scene: Scene | None = None
        self.hovered_id: str | None = None

    def attach(self, scene: Scene) -> None:
        self.reset()
        self.scene = scene

    def reset(self) -> None:
        self.overlay.hide()
        self.hovered_id = None
        self.scene = None

    def _live_element(self, element_id: str) -> Element | None:
        if self.scene is None:
            return None
        element = self.scene.element(element_id)
        if element is None or element.state == ElementState.replaced:
            return None
        return element

    def _position(self, pointer: Pointer) -> None:
        tooltip = self.settings.tooltip
        self.overlay.move_to(pointer[0] + tooltip.offset_x, pointer[1] + tooltip.offset_y)

    def on_enter(self, element_id: str, pointer: Pointer) -> TooltipContent | None:
        element = self._live_element(element_id)
        if element is None or self.scene is None:
            return None
        if self.hovered_id is not None and self.hovered_id != element_id:
            self.on_leave(self.hovered_id)
        content = self.renderer.tooltip(element, self.scene)
        self.overlay.show(content)
        self._position(pointer)
        self.timeline.animate(
            element,
            self.renderer.hover_attrs(element),
            self.settings.durations.hover_ms,
        )
        self.hovered_id = element_id
        return content

    def on_move(self, pointer: Pointer) -> None:
        if self.hovered_id is None:
            return
        self._position(pointer)

    def on_leave(self, element_id: str) -> None:
        element = self._live_element(element_id)
        if element is not None:
            self.timeline.animate(
                element,
                self.renderer.rest_attrs(element),
                self.settings.durations.hover_ms,
            )
        if self.hovered_id == element_id:
            self.overlay.hide()
            self.hovered_id = None

    def pointer_at(self, pointer: Pointer) -> str | None:
        """Dispatch enter/move/leave from a raw pointer position via hit-testing."""
        if self.scene is None:
            return None
        hit = self.scene.hit_test(*pointer)
        hit_id = hit.element_id if hit is not None else None
        if hit_id == self.hovered_id:
            self.on_move(pointer)
        else:
            if self.hovered_id is not None:
                self.on_leave(self.hovered_id)
            if hit_id is not None:
                self.on_enter(hit_id, pointer)
        return self.hovered_id
