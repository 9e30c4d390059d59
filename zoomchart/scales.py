from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable

import numpy as np

from .errors import PlotDataError
from .zoom import AutoFit, AxisRange, AxisViewport


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float


@dataclass(frozen=True)
class PlotTransform:
    sx: float
    tx: float
    sy: float
    ty: float


_SI_PREFIXES = (
    (1e12, "T"),
    (1e9, "G"),
    (1e6, "M"),
    (1e3, "k"),
    (1.0, ""),
    (1e-3, "m"),
    (1e-6, "µ"),
    (1e-9, "n"),
)


def auto_fit_limits(values: Iterable[float], *, padding_px: float, plot_px: int, degenerate_ratio: float = 0.05) -> tuple[float, float]:
    """Tight extent of the finite values, padded by `padding_px` on each side of a `plot_px` wide axis."""

    arr = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=np.float64)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        raise PlotDataError("series contains no finite values")
    vmin = float(np.min(finite))
    vmax = float(np.max(finite))

    if vmin == vmax:
        delta = max(1.0, abs(vmin) * degenerate_ratio)
        return (vmin - delta, vmax + delta)

    usable = float(plot_px) - 2.0 * float(padding_px)
    if padding_px <= 0 or usable <= 0:
        return (vmin, vmax)
    pad = (vmax - vmin) * float(padding_px) / usable
    return (vmin - pad, vmax + pad)


def resolve_axis_limits(viewport: AxisViewport, values: Iterable[float], *, plot_px: int) -> tuple[float, float]:
    if isinstance(viewport, AxisRange):
        return viewport.as_tuple()
    if isinstance(viewport, AutoFit):
        return auto_fit_limits(values, padding_px=viewport.padding_px, plot_px=plot_px)
    raise TypeError(f"unsupported viewport: {viewport!r}")


def build_transform(limits: DataLimits, width: int, height: int) -> PlotTransform:
    if width <= 1 or height <= 1:
        raise ValueError("plot viewport width/height must be > 1")
    sx, tx = _axis_scale(limits.xmin, limits.xmax, width)
    sy, ty = _axis_scale(limits.ymin, limits.ymax, height)
    return PlotTransform(sx=sx, tx=tx, sy=sy, ty=ty)


def _axis_scale(vmin: float, vmax: float, size: int) -> tuple[float, float]:
    span = vmax - vmin
    if span == 0:
        # Degenerate window: every value lands on the center pixel.
        return 0.0, (size - 1) / 2.0
    scale = (size - 1) / span
    return scale, -vmin * scale


def data_to_pixels(x: np.ndarray, y: np.ndarray, transform: PlotTransform, height: int) -> tuple[np.ndarray, np.ndarray]:
    px = np.asarray(x, dtype=np.float64) * transform.sx + transform.tx
    py = np.asarray(y, dtype=np.float64) * transform.sy + transform.ty
    return px, (height - 1) - py


def pixels_to_data(px: float, py: float, limits: DataLimits, width: int, height: int) -> tuple[float, float]:
    if width <= 1 or height <= 1:
        raise ValueError("plot viewport width/height must be > 1")
    x = _invert(px, limits.xmin, limits.xmax, width)
    y = _invert((height - 1) - py, limits.ymin, limits.ymax, height)
    return x, y


def _invert(pixel: float, vmin: float, vmax: float, size: int) -> float:
    span = vmax - vmin
    if span == 0:
        return vmin
    return vmin + float(pixel) * span / (size - 1)


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    """Multiples of a 1/2/5 step spanning [vmin, vmax] in roughly `target` ticks."""

    if target <= 0:
        raise ValueError("target must be > 0")
    lo, hi = min(vmin, vmax), max(vmin, vmax)
    if lo == hi:
        return np.asarray([lo], dtype=np.float64)

    step = nice_number(nice_number(hi - lo, round_result=False) / max(target - 1, 1), round_result=True)
    first = np.floor(lo / step)
    last = np.ceil(hi / step)
    ticks = np.arange(first, last + 1.0, dtype=np.float64) * step
    ticks[np.abs(ticks) <= step * 1e-9] = 0.0
    return ticks


def visible_ticks(ticks: np.ndarray, vmin: float, vmax: float) -> np.ndarray:
    step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else 1.0
    eps = step * 1e-9
    return ticks[(ticks >= vmin - eps) & (ticks <= vmax + eps)]


def tick_step(positions: Iterable[float]) -> float | None:
    """Smallest positive gap between neighbouring tick positions, or None."""

    arr = np.asarray(list(positions), dtype=np.float64)
    if arr.size < 2:
        return None
    gaps = np.abs(np.diff(arr))
    gaps = gaps[np.isfinite(gaps) & (gaps > 0)]
    if gaps.size == 0:
        return None
    # Neighbour differences carry float noise (0.19999999999999996).
    return float(f"{np.min(gaps):.12g}")


def format_tick(value: float, *, step: float | None = None) -> str:
    """Decimal label for a numeric tick.

    With `step`, every tick of an axis gets the decimal count of the step so
    neighbours line up ("1.5", "2", "2.5"); values within float noise of
    zero print as "0". Very large or very small magnitudes switch to
    scientific notation.
    """

    if not np.isfinite(value):
        return str(value)
    spaced = step is not None and bool(np.isfinite(step)) and step > 0
    if spaced and abs(value) <= step * 1e-9:
        value = 0.0
    magnitude = abs(value)
    if magnitude != 0 and (magnitude >= 1e6 or magnitude < 1e-6 or (spaced and step < 1e-4)):
        return f"{value:.4e}"

    text = format(_quantize(value, _decimals_from_step(step) if spaced else 6), "f")
    if "." in text:
        # 30 stays "30"; 2.50 becomes "2.5".
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_si(value: float, *, precision: int = 3) -> str:
    """Format with an SI suffix, e.g. 1500 -> "1.5k", 0.25 -> "250m"."""

    if precision <= 0:
        raise ValueError("precision must be > 0")
    if not np.isfinite(value):
        return str(value)
    if value == 0:
        return "0"
    abs_v = abs(value)
    idx = len(_SI_PREFIXES) - 1
    for i, (candidate, _) in enumerate(_SI_PREFIXES):
        if abs_v >= candidate:
            idx = i
            break
    out = f"{value / _SI_PREFIXES[idx][0]:.{precision}g}"
    # Rounding can carry into the next prefix (999999 -> "1e+03k").
    if idx > 0 and abs(float(out)) >= 1000.0:
        idx -= 1
        out = f"{value / _SI_PREFIXES[idx][0]:.{precision}g}"
    if "e" in out:
        out = format(Decimal(out).normalize(), "f")
    return out + _SI_PREFIXES[idx][1]


# (upper bound on the leading digit, mantissa) pairs; anything above maps to 10.
_ROUNDED_MANTISSAS = ((1.5, 1.0), (3.0, 2.0), (7.0, 5.0))
_CEILING_MANTISSAS = ((1.0, 1.0), (2.0, 2.0), (5.0, 5.0))


def nice_number(value: float, *, round_result: bool) -> float:
    """1, 2, 5 or 10 times a power of ten near a positive `value`.

    `round_result` picks the closest such number; otherwise the smallest
    one that is >= `value`.
    """

    magnitude = 10.0 ** np.floor(np.log10(value))
    leading = value / magnitude
    if round_result:
        mantissa = next((m for bound, m in _ROUNDED_MANTISSAS if leading < bound), 10.0)
    else:
        mantissa = next((m for bound, m in _CEILING_MANTISSAS if leading <= bound), 10.0)
    return float(mantissa * magnitude)


def _decimals_from_step(step: float) -> int:
    exponent = Decimal(str(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))


def _quantize(value: float, decimals: int) -> Decimal:
    d = Decimal(str(value))
    try:
        return d.quantize(Decimal(1).scaleb(-decimals))
    except InvalidOperation:
        return d
