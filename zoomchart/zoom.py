from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Unzoomed:
    """Axis follows the data extent (auto-fit)."""


UNZOOMED = Unzoomed()


@dataclass(frozen=True)
class Zoomed:
    min: float
    max: float

    def __post_init__(self) -> None:
        # min == max is a legal, degenerate window.
        if self.min > self.max:
            raise ValueError("zoom window min must be <= max")

    @property
    def span(self) -> float:
        return self.max - self.min


ZoomWindow = Unzoomed | Zoomed


@dataclass(frozen=True)
class AxisRange:
    min: float
    max: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


@dataclass(frozen=True)
class AutoFit:
    """Render-time instruction: fit the data extent, padded by `padding_px` per side."""

    padding_px: float = 20.0


AxisViewport = AutoFit | AxisRange


@dataclass(frozen=True)
class AxisWindows:
    x: ZoomWindow = UNZOOMED
    y: ZoomWindow = UNZOOMED


@dataclass(frozen=True)
class CommittedRanges:
    x: AxisRange | None = None
    y: AxisRange | None = None
