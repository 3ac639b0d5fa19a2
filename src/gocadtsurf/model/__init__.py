from .records import RecordKind, RawRecord, classify_line
from .metadata import MetadataRegistry
from .properties import PropertyBuffer, PropertyBufferStore
from .vertices import VertexTable
from .triangles import TriangleAssembler
from .result import PropertyMeta, ParseStatistics, TSurfParseResult

__all__ = [
    "RecordKind",
    "RawRecord",
    "classify_line",
    "MetadataRegistry",
    "PropertyBuffer",
    "PropertyBufferStore",
    "VertexTable",
    "TriangleAssembler",
    "PropertyMeta",
    "ParseStatistics",
    "TSurfParseResult",
]
