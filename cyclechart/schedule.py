from __future__ import annotations

from dataclasses import dataclass, field
import itertools
import logging
import threading
from typing import Callable, Protocol, Sequence

from cyclechart.config import DEFAULT_TUNING, ChartConfig, ChartTuning
from cyclechart.records import DailyRecord


LOGGER = logging.getLogger(__name__)

RenderCallback = Callable[[Sequence[DailyRecord], ChartConfig], None]


class TimerHandle(Protocol):
    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def _thread_timer(delay_s: float, fn: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay_s, fn)
    timer.daemon = True
    return timer


@dataclass
class ScheduledRender:
    token: int
    records: tuple[DailyRecord, ...]
    config: ChartConfig
    delay_s: float
    timer: TimerHandle | None = field(default=None, repr=False)
    cancelled: bool = False
    fired: bool = False


class RenderScheduler:
    """Debounces chart renders so a burst of updates produces one render.

    Scheduling replaces the pending render; only the newest handle may fire.
    """

    def __init__(
        self,
        render: RenderCallback,
        *,
        tuning: ChartTuning = DEFAULT_TUNING,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        self._render = render
        self._tuning = tuning
        self._timer_factory = timer_factory or _thread_timer
        self._lock = threading.Lock()
        # Held for the duration of a render so teardown can wait it out.
        self._render_lock = threading.RLock()
        self._tokens = itertools.count(1)
        self._pending: ScheduledRender | None = None
        self._closed = False
        self._renders = 0
        self._last_error: Exception | None = None

    @property
    def pending(self) -> ScheduledRender | None:
        with self._lock:
            return self._pending

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def render_count(self) -> int:
        with self._lock:
            return self._renders

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    def schedule(self, records: Sequence[DailyRecord], config: ChartConfig) -> ScheduledRender | None:
        delay_s = self._tuning.settle_delay(config.is_enlarged)
        with self._lock:
            if self._closed:
                LOGGER.warning("RenderScheduler.schedule called after teardown; ignored")
                return None
            previous = self._pending
            handle = ScheduledRender(
                token=next(self._tokens),
                records=tuple(records),
                config=config,
                delay_s=delay_s,
            )
            handle.timer = self._timer_factory(delay_s, lambda: self._fire(handle))
            self._pending = handle
        if previous is not None:
            self._cancel_handle(previous)
            LOGGER.debug("render %d superseded by %d", previous.token, handle.token)
        handle.timer.start()
        LOGGER.debug("render %d scheduled in %.3fs", handle.token, delay_s)
        return handle

    def cancel(self) -> bool:
        with self._lock:
            handle = self._pending
            self._pending = None
        if handle is None:
            return False
        self._cancel_handle(handle)
        return True

    def flush(self) -> bool:
        """Run the pending render now instead of waiting for its timer."""
        with self._lock:
            handle = self._pending
        if handle is None:
            return False
        if handle.timer is not None:
            handle.timer.cancel()
        return self._fire(handle)

    def teardown(self) -> None:
        """Cancel pending work and wait for any render already in progress."""
        with self._lock:
            self._closed = True
            handle = self._pending
            self._pending = None
        if handle is not None:
            self._cancel_handle(handle)
            LOGGER.debug("render %d cancelled by teardown", handle.token)
        with self._render_lock:
            pass

    def _cancel_handle(self, handle: ScheduledRender) -> None:
        handle.cancelled = True
        if handle.timer is not None:
            handle.timer.cancel()

    def _fire(self, handle: ScheduledRender) -> bool:
        with self._lock:
            if handle.cancelled or handle is not self._pending:
                return False
            self._pending = None
            handle.fired = True
        with self._render_lock:
            if self._closed:
                LOGGER.debug("render %d dropped by teardown", handle.token)
                return False
            try:
                self._render(handle.records, handle.config)
            except Exception as exc:  # noqa: BLE001
                self._last_error = exc
                LOGGER.exception("scheduled render %d failed: %s", handle.token, exc)
                return False
            with self._lock:
                self._renders += 1
        return True
