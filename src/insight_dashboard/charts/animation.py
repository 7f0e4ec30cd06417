from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from matplotlib.colors import to_hex, to_rgba

from insight_dashboard.charts.scene import Element


def cubic_in_out(t: float) -> float:
    t *= 2.0
    if t <= 1.0:
        return t * t * t / 2.0
    t -= 2.0
    return (t * t * t + 2.0) / 2.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def interpolate(start: Any, end: Any, t: float) -> Any:
    """Blend numbers linearly and colors in RGB; anything else snaps at the end."""
    if t >= 1.0:
        return end
    if _is_number(start) and _is_number(end):
        return start + (end - start) * t
    if (
        isinstance(start, str)
        and isinstance(end, str)
        and start.startswith("#")
        and end.startswith("#")
    ):
        r0, g0, b0, _ = to_rgba(start)
        r1, g1, b1, _ = to_rgba(end)
        return to_hex((r0 + (r1 - r0) * t, g0 + (g1 - g0) * t, b0 + (b1 - b0) * t))
    return start


class _Group:
    def __init__(self, size: int, on_end: Callable[[], None] | None) -> None:
        self.remaining = size
        self.on_end = on_end

    def settle(self) -> None:
        self.remaining -= 1
        if self.remaining == 0 and self.on_end is not None:
            self.on_end()


@dataclass
class Transition:
    element: Element
    attr: str
    start: Any
    end: Any
    duration_ms: float
    started_at_ms: float
    group: _Group

    def progress(self, now_ms: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return min(max((now_ms - self.started_at_ms) / self.duration_ms, 0.0), 1.0)

    def value_at(self, now_ms: float) -> Any:
        return interpolate(self.start, self.end, cubic_in_out(self.progress(now_ms)))


class Timeline:
    """Cooperative animation clock owned by a single chart instance.

    A transition on an (element, attribute) pair interrupts any transition
    already running on that pair; the interrupted transition still counts as
    settled for its group, so ``on_end`` fires once. ``cancel`` drops pending
    groups without calling their ``on_end``.
    """

    def __init__(self) -> None:
        self.now_ms = 0.0
        self._active: dict[tuple[str, str], Transition] = {}

    @property
    def pending(self) -> int:
        return len(self._active)

    def is_animating(self, element: Element) -> bool:
        return any(key[0] == element.element_id for key in self._active)

    def animate(
        self,
        element: Element,
        attrs: Mapping[str, Any],
        duration_ms: float,
        on_end: Callable[[], None] | None = None,
    ) -> list[Transition]:
        group = _Group(len(attrs), on_end)
        if not attrs:
            if on_end is not None:
                on_end()
            return []
        started: list[Transition] = []
        for attr, end in attrs.items():
            key = (element.element_id, attr)
            interrupted = self._active.pop(key, None)
            if interrupted is not None:
                interrupted.group.settle()
            transition = Transition(
                element=element,
                attr=attr,
                start=element.attrs.get(attr, end),
                end=end,
                duration_ms=float(duration_ms),
                started_at_ms=self.now_ms,
                group=group,
            )
            if duration_ms <= 0:
                element.attrs[attr] = end
                group.settle()
                continue
            self._active[key] = transition
            started.append(transition)
        return started

    def advance(self, elapsed_ms: float) -> None:
        self.now_ms += max(float(elapsed_ms), 0.0)
        for key, transition in list(self._active.items()):
            transition.element.attrs[transition.attr] = transition.value_at(self.now_ms)
            if transition.progress(self.now_ms) >= 1.0:
                del self._active[key]
                transition.group.settle()

    def finish(self) -> None:
        """Jump every running transition to its end value."""
        if not self._active:
            return
        horizon = max(t.started_at_ms + t.duration_ms for t in self._active.values())
        self.advance(max(horizon - self.now_ms, 0.0))

    def cancel(self) -> None:
        """Abandon all running transitions, leaving attributes where they are.

        Pending ``on_end`` callbacks are discarded, not run.
        """
        for transition in self._active.values():
            transition.group.on_end = None
        self._active.clear()
