"""Custom exception hierarchy for meteodisplay."""

from __future__ import annotations


class MeteoDisplayError(Exception):
    """Base exception for all meteodisplay errors."""


class DisplayConfigError(MeteoDisplayError):
    """Invalid or missing configuration."""


class DisplayPayloadError(MeteoDisplayError):
    """Inbound message could not be decoded into a display record."""

    def __init__(self, message: str, *, topic: str = "") -> None:
        self.topic = topic
        super().__init__(message)


class DisplayTransportError(MeteoDisplayError):
    """Broker-level failure (connection, subscription)."""


class DisplayPublishError(DisplayTransportError):
    """Publishing an encoded code to the broker failed."""

    def __init__(self, message: str, *, topic: str = "", rc: int | None = None) -> None:
        self.topic = topic
        self.rc = rc
        super().__init__(message)
