"""Service wiring: broker runtime, ingestion, state store and scheduler."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from meteodisplay._mqtt import DisplayMqttRuntime, parse_broker_url
from meteodisplay._redact import redact_url
from meteodisplay.config import DisplayConfig
from meteodisplay.exceptions import DisplayPublishError
from meteodisplay.ingestion.mqtt import DisplayIngestor
from meteodisplay.models.display import DisplayRecord
from meteodisplay.scheduler import DisplayScheduler, Publisher
from meteodisplay.state.store import DisplayStateStore

_logger = logging.getLogger(__name__)


class DisplayService:
    """Long-running meteo display bridge.

    Usage::

        service = DisplayService(DisplayConfig.from_env())
        await service.run()

    ``publisher`` replaces the MQTT runtime for outbound codes; inbound
    messages can then be fed through :meth:`handle_message`.
    """

    def __init__(
        self,
        config: DisplayConfig,
        *,
        publisher: Publisher | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._publisher = publisher
        self._runtime: DisplayMqttRuntime | None = None
        self._store = DisplayStateStore()
        self._ingestor = DisplayIngestor(
            self._store,
            topic=config.inbound_topic,
            on_update=self._on_update if config.publish_on_update else None,
        )
        self._scheduler = DisplayScheduler(
            self._store,
            self._publish,
            topic=config.outbound_topic,
            interval=config.tick_interval,
            clock=clock or config.now,
        )

    @property
    def store(self) -> DisplayStateStore:
        return self._store

    @property
    def scheduler(self) -> DisplayScheduler:
        return self._scheduler

    def handle_message(self, topic: str, payload: bytes) -> bool:
        """Subscriber entry point."""
        return self._ingestor.handle(topic, payload)

    def _on_update(self, _record: DisplayRecord) -> None:
        self._scheduler.trigger()

    async def _publish(self, topic: str, payload: str) -> None:
        if self._publisher is not None:
            await self._publisher(topic, payload)
            return
        if self._runtime is None:
            raise DisplayPublishError("MQTT runtime has not been started", topic=topic)
        await self._runtime.publish(topic, payload)

    def _build_runtime(self, loop: asyncio.AbstractEventLoop) -> DisplayMqttRuntime:
        broker = parse_broker_url(self._config.mqtt_url)
        return DisplayMqttRuntime(
            loop=loop,
            broker=broker,
            subscribe_topic=self._config.inbound_topic,
            on_message=self.handle_message,
            ca_certificate_path=self._config.ca_certificate_path,
            client_id=self._config.client_id,
            keepalive=self._config.mqtt_keepalive,
        )

    async def run(self) -> None:
        """Run until cancelled."""
        loop = asyncio.get_running_loop()
        if self._publisher is None:
            runtime = self._build_runtime(loop)
            _logger.info("Connecting to %s", redact_url(self._config.mqtt_url))
            await loop.run_in_executor(None, runtime.start)
            self._runtime = runtime
        try:
            await self._scheduler.run()
        finally:
            await self._scheduler.aclose()
            runtime = self._runtime
            self._runtime = None
            if runtime is not None:
                await loop.run_in_executor(None, runtime.stop)
