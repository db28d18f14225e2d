"""Internal MQTT broker addressing and runtime helpers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast
from urllib.parse import unquote, urlsplit

import paho.mqtt.client as mqtt

from meteodisplay._redact import redact_url
from meteodisplay.exceptions import DisplayConfigError, DisplayPublishError

_TLS_SCHEMES = frozenset({"mqtts", "ssl", "tls"})
_PLAIN_SCHEMES = frozenset({"mqtt", "tcp"})


@dataclass(frozen=True)
class BrokerAddress:
    """Connection details parsed from a broker URL."""

    host: str
    port: int
    tls: bool
    username: str | None = None
    password: str | None = None


def parse_broker_url(url: str) -> BrokerAddress:
    """Parse ``mqtt[s]://[user[:password]@]host[:port]`` into a :class:`BrokerAddress`."""
    value = url.strip()
    if not value:
        raise DisplayConfigError("Broker URL is empty")
    if "://" not in value:
        value = f"mqtts://{value}"

    parts = urlsplit(value)
    scheme = parts.scheme.lower()
    if scheme in _TLS_SCHEMES:
        tls = True
    elif scheme in _PLAIN_SCHEMES:
        tls = False
    else:
        raise DisplayConfigError(f"Unsupported broker scheme {parts.scheme!r}")

    host = parts.hostname
    if not host:
        raise DisplayConfigError(f"Broker URL has no host: {redact_url(url)}")
    try:
        port = parts.port
    except ValueError as exc:
        raise DisplayConfigError(f"Broker URL has an invalid port: {redact_url(url)}") from exc
    if port is None:
        port = 8883 if tls else 1883

    return BrokerAddress(
        host=host,
        port=port,
        tls=tls,
        username=unquote(parts.username) if parts.username else None,
        password=unquote(parts.password) if parts.password is not None else None,
    )


class DisplayMqttRuntime:
    """Threaded paho-mqtt runtime that hands inbound messages to an asyncio loop.

    paho's network thread owns reconnection. Connection events are only
    logged; subscription is renewed on every successful connect.
    """

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        broker: BrokerAddress,
        subscribe_topic: str,
        on_message: Callable[[str, bytes], None],
        ca_certificate_path: str | None = None,
        client_id: str = "",
        keepalive: int = 60,
        qos: int = 0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._broker = broker
        self._subscribe_topic = subscribe_topic
        self._on_message = on_message
        self._ca_certificate_path = ca_certificate_path
        self._client_id = client_id
        self._keepalive = keepalive
        self._qos = qos
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether the MQTT runtime is actively running."""
        return self._running

    def _build_client(self) -> mqtt.Client:
        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=self._client_id,
            protocol=mqtt.MQTTv311,
        )
        client.enable_logger(self._logger)
        if self._broker.username:
            client.username_pw_set(self._broker.username, self._broker.password)
        if self._broker.tls:
            client.tls_set(ca_certs=self._ca_certificate_path or None)

        client.on_connect = self._handle_connect
        client.on_message = self._handle_message
        client.on_disconnect = self._handle_disconnect
        return client

    def _handle_connect(
        self,
        c: mqtt.Client,
        _userdata: Any,
        _flags: Any,
        reason_code: Any,
        _properties: Any,
    ) -> None:
        if reason_code.value != 0:
            self._logger.error("MQTT connect failed: %s", reason_code)
            return
        self._logger.info("Connected to mqtt host=%s port=%s", self._broker.host, self._broker.port)
        c.subscribe(self._subscribe_topic, qos=self._qos)
        self._logger.debug("MQTT subscribed topic=%s", self._subscribe_topic)

    def _handle_message(self, _c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
        self._loop.call_soon_threadsafe(self._on_message, msg.topic, bytes(msg.payload))

    def _handle_disconnect(
        self,
        _client: mqtt.Client,
        _userdata: Any,
        _disconnect_flags: Any,
        reason_code: Any,
        _properties: Any,
    ) -> None:
        if self._running:
            self._logger.error("MQTT disconnected: %s", reason_code)

    def start(self) -> None:
        """Start the network loop; connection happens in the background."""
        self.stop()
        self._logger.debug(
            "MQTT runtime start requested host=%s port=%s tls=%s topic=%s",
            self._broker.host,
            self._broker.port,
            self._broker.tls,
            self._subscribe_topic,
        )
        client = self._build_client()
        client.connect_async(self._broker.host, self._broker.port, keepalive=self._keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Stop and disconnect current MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    async def publish(self, topic: str, payload: str) -> None:
        """Publish *payload* and wait until paho has handed it to the socket."""
        client = self._client
        if client is None or not self._running:
            raise DisplayPublishError("MQTT runtime is not running", topic=topic)

        info = client.publish(topic, payload, qos=self._qos)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise DisplayPublishError(
                f"Publish failed: {mqtt.error_string(info.rc)}",
                topic=topic,
                rc=info.rc,
            )
        try:
            await self._loop.run_in_executor(None, info.wait_for_publish)
        except (RuntimeError, ValueError) as exc:
            raise DisplayPublishError(f"Publish failed: {exc}", topic=topic, rc=info.rc) from exc
