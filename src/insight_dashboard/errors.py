from __future__ import annotations


class InsightDashboardError(Exception):
    """Base class for errors raised by insight_dashboard."""


class OverlayCollisionError(InsightDashboardError):
    """A tooltip overlay id is already held by another chart instance."""


class ChartNotMountedError(InsightDashboardError):
    """A chart operation needs a mounted instance."""


class RecordsApiError(InsightDashboardError):
    """The insights backend could not be reached or answered with an error."""
