"""
Parse Result
============
Value objects handed back to the caller of a parse.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    import pyvista as pv


@dataclass(frozen=True)
class PropertyMeta:
    """Metadata of one per-vertex property."""
    name: str
    size: int = 1
    unit: Optional[str] = None
    kind: Optional[str] = None
    no_data: Optional[float] = None  # resolved sentinel for this property

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ParseStatistics:
    vertex_count: int
    triangle_count: int
    skipped_triangle_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TSurfParseResult:
    """
    Output of one parse.

    Attributes:
        mesh: Triangulated surface with one point-data array per property.
        properties: Property metadata in column order.
        stats: Vertex, triangle and skipped-triangle counts.
    """
    mesh: pv.PolyData
    properties: Tuple[PropertyMeta, ...]
    stats: ParseStatistics

    def find_property(self, name: str) -> Optional[PropertyMeta]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    @property
    def scalar_property(self) -> Optional[PropertyMeta]:
        """First single-component property, if any."""
        return next((p for p in self.properties if p.size == 1), None)

    def to_dict(self) -> Dict[str, Any]:
        """Metadata only (no mesh arrays), suitable for JSON."""
        return {
            "properties": [p.to_dict() for p in self.properties],
            "stats": self.stats.to_dict(),
        }
