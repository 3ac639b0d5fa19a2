"""
gocadtsurf

Reader for ASCII GOCAD TSurf surfaces into PyVista meshes.

- VRTX/PVRTX (with property columns), ATOM aliases and TRGL triangles
- PROPERTIES, PROPERTY_CLASSES, ESIZES, NO_DATA_VALUES, PROPERTY_CLASS_HEADER metadata
- Per-vertex properties as point-data arrays, optional point normals
"""

from .config import TSurfParseOptions
from .exceptions import TSurfError, StructuralError
from .controller.parser import TSurfParser, parse_tsurf
from .model.io import TSurfIO
from .model.result import PropertyMeta, ParseStatistics, TSurfParseResult

__all__ = [
    "TSurfParseOptions",
    "TSurfError",
    "StructuralError",
    "TSurfParser",
    "parse_tsurf",
    "TSurfIO",
    "PropertyMeta",
    "ParseStatistics",
    "TSurfParseResult",
]
