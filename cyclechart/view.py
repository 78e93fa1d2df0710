from __future__ import annotations

from dataclasses import replace
import logging
from typing import Any, Callable, Sequence

from cyclechart.config import DEFAULT_THEME, DEFAULT_TUNING, ChartConfig, ChartTheme, ChartTuning, ChartVariant, ViewMode
from cyclechart.records import DailyRecord
from cyclechart.schedule import RenderScheduler, TimerFactory
from cyclechart.surface import ChartSurface, render_chart


LOGGER = logging.getLogger(__name__)

TapListener = Callable[[Any], None]


class ChartView:
    """Host binding for one chart: holds the current inputs and re-renders on change."""

    def __init__(
        self,
        surface: ChartSurface,
        *,
        config: ChartConfig | None = None,
        tuning: ChartTuning = DEFAULT_TUNING,
        theme: ChartTheme = DEFAULT_THEME,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        self.surface = surface
        self.tuning = tuning
        self.theme = theme
        self._records: tuple[DailyRecord, ...] | None = None
        self._config = config or ChartConfig()
        self._listeners: list[TapListener] = []
        self._scheduler = RenderScheduler(self._render, tuning=tuning, timer_factory=timer_factory)

    @property
    def records(self) -> tuple[DailyRecord, ...]:
        return self._records or ()

    @property
    def config(self) -> ChartConfig:
        return self._config

    @property
    def scheduler(self) -> RenderScheduler:
        return self._scheduler

    def update(self, records: Sequence[DailyRecord] | None = None, config: ChartConfig | None = None) -> bool:
        """Replace inputs; schedules a render when anything differs. Returns whether one was scheduled."""
        new_records = self._records if records is None else tuple(records)
        new_config = self._config if config is None else config
        if self._records is not None and new_records == self._records and new_config == self._config:
            return False
        self._records = new_records if new_records is not None else ()
        self._config = new_config
        return self._scheduler.schedule(self._records, self._config) is not None

    def set_records(self, records: Sequence[DailyRecord]) -> bool:
        return self.update(records=records)

    def set_view_mode(self, view_mode: ViewMode) -> bool:
        return self.update(config=replace(self._config, view_mode=view_mode))

    def set_size(self, width: float, height: float) -> bool:
        return self.update(config=replace(self._config, width=width, height=height))

    def set_enlarged(self, is_enlarged: bool) -> bool:
        return self.update(config=replace(self._config, is_enlarged=is_enlarged))

    def set_variant(self, variant: ChartVariant) -> bool:
        return self.update(config=replace(self._config, variant=variant))

    def on_chart_tapped(self, listener: TapListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def tap(self, detail: Any = None) -> None:
        for listener in list(self._listeners):
            listener(detail)

    def close(self) -> None:
        self._scheduler.teardown()
        self._listeners.clear()
        LOGGER.debug("chart view closed")

    def _render(self, records: Sequence[DailyRecord], config: ChartConfig) -> None:
        render_chart(records, config, self.surface, tuning=self.tuning, theme=self.theme)
