"""Periodic single-flight publisher of the merged display state."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime
from enum import StrEnum

from meteodisplay.encoder import encode
from meteodisplay.models.display import DisplayRecord
from meteodisplay.state.store import DisplayStateStore

_logger = logging.getLogger(__name__)

Publisher = Callable[[str, str], Awaitable[None]]


class SchedulerState(StrEnum):
    IDLE = "idle"
    UPDATING = "updating"


class DisplayScheduler:
    """Re-emit the stored record on a wall-clock cadence.

    At most one publish is in flight at a time. A tick that arrives while a
    publish is still pending is dropped, not queued, so a slow broker can
    never build up a backlog.

    Usage::

        scheduler = DisplayScheduler(store, runtime.publish, topic="bus/devices/meteo-display/data")
        await scheduler.run()
    """

    def __init__(
        self,
        store: DisplayStateStore,
        publish: Publisher,
        *,
        topic: str,
        interval: float = 60.0,
        clock: Callable[[], datetime] = datetime.now,
        wall_time: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._publish = publish
        self._topic = topic
        self._interval = interval
        self._clock = clock
        self._wall_time = wall_time
        self._state = SchedulerState.IDLE
        self._tasks: set[asyncio.Task[bool]] = set()

    @property
    def state(self) -> SchedulerState:
        return self._state

    async def tick(self) -> bool:
        """Publish the stored record with the live clock overlaid.

        Returns ``False`` when the tick was dropped because a publish is
        already in flight.
        """
        if self._state is SchedulerState.UPDATING:
            _logger.debug("Tick dropped, publish still in flight")
            return False
        now = self._clock()
        record = self._store.snapshot().with_clock(now.hour, now.minute)
        return await self.send(record)

    async def send(self, record: DisplayRecord) -> bool:
        """Encode *record* as-is and publish it, honouring the single-flight guard."""
        if self._state is SchedulerState.UPDATING:
            _logger.debug("Send dropped, publish still in flight")
            return False

        self._state = SchedulerState.UPDATING
        try:
            try:
                code = encode(record)
            except Exception:
                _logger.exception("Encoding display record failed")
                return True
            _logger.info("Sending '%s'", code)
            try:
                await self._publish(self._topic, code)
            except Exception:
                _logger.exception("Publishing to topic=%s failed", self._topic)
            else:
                _logger.info("Data sent")
        finally:
            self._state = SchedulerState.IDLE
        return True

    def trigger(self) -> asyncio.Task[bool]:
        """Schedule a tick on the running loop without waiting for it."""
        task = asyncio.get_running_loop().create_task(self.tick())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def seconds_until_next_tick(self) -> float:
        """Delay to the next multiple of the interval in wall-clock time."""
        remainder = self._wall_time() % self._interval
        return self._interval - remainder

    async def run(self) -> None:
        """Tick immediately, then on every interval boundary until cancelled."""
        _logger.debug("Scheduler started interval=%ss", self._interval)
        self.trigger()
        while True:
            await asyncio.sleep(self.seconds_until_next_tick())
            self.trigger()

    async def aclose(self) -> None:
        """Cancel ticks still pending at shutdown."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
