# src/pksim/interfaces.py
"""
Narrow seams to the presentation layer. The numeric core never imports a
concrete renderer or exporter; the Qt layer implements these protocols.
"""
from typing import Any, Protocol, Sequence

from .types import Metrics, Sample


class ExportError(RuntimeError):
    """Raised when a chart region cannot be captured or encoded."""


class Renderer(Protocol):
    def render(self, samples: Sequence[Sample], metrics: Metrics) -> None:
        ...


class RegionExporter(Protocol):
    def export_region(self, target: Any, scale: float = 1.0) -> bytes:
        """Rasterize target to PNG bytes; raise ExportError on failure."""
        ...
