from __future__ import annotations


class CycleChartError(Exception):
    """Base class for chart engine errors."""


class RecordDataError(CycleChartError, ValueError):
    """Raw day records could not be normalized."""


class ChartConfigError(CycleChartError, ValueError):
    """Render parameters or tuning values are invalid."""


class SurfaceUnavailableError(CycleChartError, RuntimeError):
    """The hosting surface is not mounted."""
