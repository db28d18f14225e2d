"""meteodisplay - MQTT bridge rendering weather state into a fixed-position display code."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("meteodisplay")
except PackageNotFoundError:
    __version__ = "0+local"
from meteodisplay.config import DisplayConfig
from meteodisplay.encoder import DEFAULT_CODE, DISPLAY_LENGTH, encode
from meteodisplay.exceptions import (
    DisplayConfigError,
    DisplayPayloadError,
    DisplayPublishError,
    DisplayTransportError,
    MeteoDisplayError,
)
from meteodisplay.ingestion import DisplayIngestor, parse_payload
from meteodisplay.models import Clouds, DisplayRecord, Pressure, Visibility, Wind
from meteodisplay.scheduler import DisplayScheduler, SchedulerState
from meteodisplay.service import DisplayService
from meteodisplay.state import DisplayStateStore

__all__ = [
    "__version__",
    "Clouds",
    "DEFAULT_CODE",
    "DISPLAY_LENGTH",
    "DisplayConfig",
    "DisplayConfigError",
    "DisplayIngestor",
    "DisplayPayloadError",
    "DisplayPublishError",
    "DisplayRecord",
    "DisplayScheduler",
    "DisplayService",
    "DisplayStateStore",
    "DisplayTransportError",
    "MeteoDisplayError",
    "Pressure",
    "SchedulerState",
    "Visibility",
    "Wind",
    "encode",
    "parse_payload",
]
