from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from pathlib import Path
import tomllib
from typing import Any, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ChartConfigError
from .interaction import CLICK_MOVE_LIMIT, DEFAULT_AUTO_FIT_PADDING_PX, AxisAccessors, ChartInteraction
from .pointer import PointerDecoder
from .scales import DataLimits
from .tick_labels import (
    ENGLISH_MONTH_ABBREVIATIONS,
    UNDEFINED_LABEL,
    AxisKind,
    TickContext,
    TickLabelConfig,
    label_ticks,
    numeric_tick_contexts,
)
from .time_ticks import generate_time_ticks

CONFIG_FILENAME = "chart.toml"


@dataclass(frozen=True)
class InteractionConfig:
    click_move_limit: int = CLICK_MOVE_LIMIT
    auto_fit_padding_px: float = DEFAULT_AUTO_FIT_PADDING_PX
    hover_radius_px: float = 24.0

    def __post_init__(self) -> None:
        if self.click_move_limit < 0:
            raise ChartConfigError("click_move_limit must be >= 0")
        if self.auto_fit_padding_px < 0:
            raise ChartConfigError("auto_fit_padding_px must be >= 0")
        if self.hover_radius_px < 0:
            raise ChartConfigError("hover_radius_px must be >= 0")


@dataclass(frozen=True)
class TickConfig:
    axis: AxisKind = "time"
    target_count: int = 6
    time_zone: str = "UTC"
    clock_24h: bool = True
    day_first: bool = False
    show_millis: bool = False
    month_names: tuple[str, ...] = ENGLISH_MONTH_ABBREVIATIONS
    undefined_label: str = UNDEFINED_LABEL

    def __post_init__(self) -> None:
        if self.axis not in {"numeric", "time"}:
            raise ChartConfigError("axis must be 'numeric' or 'time'")
        if self.target_count <= 0:
            raise ChartConfigError("target_count must be > 0")
        if len(self.month_names) != 12:
            raise ChartConfigError("month_names must have 12 entries")

    def tz(self) -> tzinfo:
        if self.time_zone.upper() == "UTC":
            return timezone.utc
        try:
            return ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ChartConfigError(f"unknown time_zone: {self.time_zone}") from exc

    def label_config(self) -> TickLabelConfig:
        return TickLabelConfig(
            axis=self.axis,
            tz=self.tz(),
            month_names=self.month_names,
            clock_24h=self.clock_24h,
            day_first=self.day_first,
            show_millis=self.show_millis,
            undefined_label=self.undefined_label,
        )

    def tick_contexts(self, vmin: float, vmax: float) -> list[TickContext]:
        """About `target_count` ticks across [vmin, vmax] for this axis kind."""

        if self.axis == "time":
            return generate_time_ticks(vmin, vmax, self.target_count, tz=self.tz())
        return numeric_tick_contexts(vmin, vmax, self.target_count)

    def labelled_ticks(self, vmin: float, vmax: float) -> list[tuple[float, str]]:
        contexts = self.tick_contexts(vmin, vmax)
        labels = label_ticks(contexts, self.label_config())
        return [(ctx.position, label) for ctx, label in zip(contexts, labels)]


@dataclass(frozen=True)
class ChartConfig:
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    x_ticks: TickConfig = field(default_factory=TickConfig)
    y_ticks: TickConfig = field(default_factory=lambda: TickConfig(axis="numeric"))

    def build_interaction(self, accessors: AxisAccessors) -> ChartInteraction:
        return ChartInteraction(
            accessors,
            click_move_limit=self.interaction.click_move_limit,
            auto_fit_padding_px=self.interaction.auto_fit_padding_px,
        )

    def build_decoder(
        self,
        records: Sequence[Any],
        accessors: AxisAccessors,
        limits: DataLimits,
        plot_rect: tuple[int, int, int, int],
    ) -> PointerDecoder:
        return PointerDecoder(records, accessors, limits, plot_rect, hover_radius_px=self.interaction.hover_radius_px)


def load_chart_config(path: str | Path) -> ChartConfig:
    """Load `chart.toml` from a file path or a directory containing one."""

    config_path = Path(path)
    if config_path.is_dir():
        config_path = config_path / CONFIG_FILENAME
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ChartConfigError(f"invalid chart config {config_path}: {exc}") from exc
    return parse_chart_config(raw)


def parse_chart_config(raw: dict[str, Any]) -> ChartConfig:
    interaction_raw = _coerce_table(raw.get("interaction", {}), "interaction")
    interaction = InteractionConfig(
        click_move_limit=_coerce_int(interaction_raw.get("click_move_limit", CLICK_MOVE_LIMIT), "click_move_limit"),
        auto_fit_padding_px=_coerce_float(
            interaction_raw.get("auto_fit_padding_px", DEFAULT_AUTO_FIT_PADDING_PX), "auto_fit_padding_px"
        ),
        hover_radius_px=_coerce_float(interaction_raw.get("hover_radius_px", 24.0), "hover_radius_px"),
    )
    ticks_raw = _coerce_table(raw.get("ticks", {}), "ticks")
    x_ticks = _parse_tick_config(
        {**ticks_raw, **_coerce_table(ticks_raw.get("x", {}), "ticks.x")}, default_axis="time"
    )
    y_ticks = _parse_tick_config(
        {**ticks_raw, **_coerce_table(ticks_raw.get("y", {}), "ticks.y")}, default_axis="numeric"
    )
    # Resolve zones eagerly so a bad name fails at load time.
    x_ticks.tz()
    y_ticks.tz()
    return ChartConfig(interaction=interaction, x_ticks=x_ticks, y_ticks=y_ticks)


def _parse_tick_config(raw: dict[str, Any], *, default_axis: AxisKind) -> TickConfig:
    month_names = raw.get("month_names", list(ENGLISH_MONTH_ABBREVIATIONS))
    if not isinstance(month_names, list) or not all(isinstance(m, str) for m in month_names):
        raise ChartConfigError("month_names must be a list of strings")
    return TickConfig(
        axis=str(raw.get("axis", default_axis)),  # type: ignore[arg-type]
        target_count=_coerce_int(raw.get("target_count", 6), "target_count"),
        time_zone=str(raw.get("time_zone", "UTC")),
        clock_24h=_coerce_bool(raw.get("clock_24h", True), "clock_24h"),
        day_first=_coerce_bool(raw.get("day_first", False), "day_first"),
        show_millis=_coerce_bool(raw.get("show_millis", False), "show_millis"),
        month_names=tuple(month_names),
        undefined_label=str(raw.get("undefined_label", UNDEFINED_LABEL)),
    )


def _coerce_table(value: object, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ChartConfigError(f"[{name}] must be a table")
    return value


def _coerce_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ChartConfigError(f"{name} must be an integer")
    return value


def _coerce_float(value: object, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ChartConfigError(f"{name} must be a number")
    return float(value)


def _coerce_bool(value: object, name: str) -> bool:
    if not isinstance(value, bool):
        raise ChartConfigError(f"{name} must be a boolean")
    return value
