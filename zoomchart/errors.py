from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when plotted records cannot be projected onto numeric axes."""


class ChartConfigError(ValueError):
    """Raised when chart configuration values are missing or malformed."""
