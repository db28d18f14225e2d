"""Display payload models."""

from meteodisplay.models.display import Clouds, DisplayRecord, Pressure, Visibility, Wind

__all__ = [
    "Clouds",
    "DisplayRecord",
    "Pressure",
    "Visibility",
    "Wind",
]
