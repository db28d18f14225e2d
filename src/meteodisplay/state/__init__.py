"""State/store layer.

Holds the single cumulative display record that ingestion merges into
and the scheduler reads from.
"""

from meteodisplay.state.store import DisplayStateStore, deep_merge

__all__ = ["DisplayStateStore", "deep_merge"]
