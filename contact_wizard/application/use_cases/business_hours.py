from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo


# weekday() -> (opening hour, closing hour), closing hour exclusive. Missing days are closed.
BUSINESS_SCHEDULE: dict[int, tuple[int, int]] = {
    0: (8, 18),
    1: (8, 18),
    2: (8, 18),
    3: (8, 18),
    4: (8, 18),
    5: (9, 14),
}


def is_within_business_hours(now: datetime) -> bool:
    hours = BUSINESS_SCHEDULE.get(now.weekday())
    if hours is None:
        return False
    opening, closing = hours
    return opening <= now.hour < closing


def _system_clock(timezone: ZoneInfo) -> datetime:
    return datetime.now(timezone)


class AvailabilityMonitor:
    """
    Recomputes the "we are available now" indicator on a fixed interval.

    Owned by one wizard instance: start() on mount, stop() on unmount.
    Read-only with respect to the form.
    """

    def __init__(
        self,
        timezone: ZoneInfo,
        interval_seconds: float = 60.0,
        clock: Callable[[ZoneInfo], datetime] = _system_clock,
        on_change: Callable[[bool], None] | None = None,
    ) -> None:
        self._timezone = timezone
        self._interval = interval_seconds
        self._clock = clock
        self._on_change = on_change
        self._available = False
        self._task: asyncio.Task | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def is_available(self) -> bool:
        return self._available

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def refresh(self) -> bool:
        available = is_within_business_hours(self._clock(self._timezone))
        if available != self._available:
            self._available = available
            if self._on_change is not None:
                self._on_change(available)
        return available

    def start(self) -> None:
        """Compute once and schedule periodic refreshes. Requires a running event loop."""
        if self.running:
            return
        self.refresh()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.refresh()
            except Exception as e:
                self._logger.warning("Availability refresh failed", extra={"reason": str(e)})
