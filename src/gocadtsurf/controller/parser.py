"""
TSurf Reader
============
Single-pass scanner for ASCII GOCAD TSurf text.

Why is this file needed?
------------------------
1. Orchestration: It walks the lines once, classifies them and routes each
   record to the metadata registry, the vertex table or the triangle assembler.
2. Isolation: All intermediate state lives in a per-call scan object, so a
   parser instance can be reused and nothing is shared between calls.

Example:
    >>> result = parse_tsurf(text, compute_normals=True)
    >>> result.mesh.point_data["depth"]
"""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Iterator, Optional

from gocadtsurf.config import DEFAULT_OPTIONS, TSurfParseOptions
from gocadtsurf.controller.mesh_builder import MeshBuilder
from gocadtsurf.model.metadata import MetadataRegistry
from gocadtsurf.model.properties import PropertyBufferStore
from gocadtsurf.model.records import RawRecord, RecordKind, classify_line
from gocadtsurf.model.result import TSurfParseResult
from gocadtsurf.model.triangles import TriangleAssembler
from gocadtsurf.model.vertices import VertexTable
from gocadtsurf.utils import to_float, to_int

logger = logging.getLogger(__name__)


class _Scan:
    """State of one parse invocation."""

    def __init__(self, options: TSurfParseOptions) -> None:
        self.options = options
        self.registry = MetadataRegistry()
        self.store = PropertyBufferStore(self.registry)
        self.vertices = VertexTable(self.store)
        self.triangles = TriangleAssembler(self.vertices)
        self.skipped_records = 0

        self._handlers: Dict[RecordKind, Callable[[RawRecord, Iterator[str]], None]] = {
            RecordKind.VERTEX: self._on_vertex,
            RecordKind.PROPERTY_VERTEX: self._on_vertex,
            RecordKind.ATOM: self._on_atom,
            RecordKind.TRIANGLE: self._on_triangle,
            RecordKind.PROPERTIES_DECL: self._on_properties,
            RecordKind.PROPERTY_CLASSES_DECL: self._on_property_classes,
            RecordKind.NO_DATA_DECL: self._on_no_data,
            RecordKind.ESIZES_DECL: self._on_esizes,
            RecordKind.PROPERTY_CLASS_HEADER: self._on_property_class_header,
        }

    def run(self, text: str) -> None:
        lines = iter(text.splitlines())
        for line in lines:
            record = classify_line(line)
            if record is None:
                continue
            if record.kind is RecordKind.END:
                break
            handler = self._handlers.get(record.kind)
            if handler is not None:
                handler(record, lines)

        # Declarations without any property-bearing vertex still yield (all-NaN) arrays
        self.store.ensure_initialized()

    # --- GEOMETRY ---

    def _on_vertex(self, record: RawRecord, lines: Iterator[str]) -> None:
        args = record.args
        if len(args) < 4:
            self.skipped_records += 1
            return

        vertex_id = to_int(args[0])
        x, y, z = (to_float(t) for t in args[1:4])
        if vertex_id is None or any(math.isnan(v) for v in (x, y, z)):
            logger.debug(f"Skipped vertex record with non-numeric id or coordinates: {' '.join(record.tokens)}")
            self.skipped_records += 1
            return

        index = self.vertices.add_vertex(x, y, z)
        self.vertices.bind(vertex_id, index)

        values = [to_float(t) for t in args[4:]]
        if values:
            self.store.set_values(index, values)
        elif self.registry.names:
            self.store.ensure_initialized()

    def _on_atom(self, record: RawRecord, lines: Iterator[str]) -> None:
        args = record.args
        if len(args) < 2:
            self.skipped_records += 1
            return
        new_id, ref_id = to_int(args[0]), to_int(args[1])
        if new_id is None or ref_id is None:
            self.skipped_records += 1
            return
        self.vertices.resolve_atom(new_id, ref_id, share=self.options.share_atom_points)

    def _on_triangle(self, record: RawRecord, lines: Iterator[str]) -> None:
        args = record.args
        if len(args) < 3:
            self.skipped_records += 1
            return
        self.triangles.add_triangle(to_int(args[0]), to_int(args[1]), to_int(args[2]))

    # --- METADATA ---

    def _on_properties(self, record: RawRecord, lines: Iterator[str]) -> None:
        self.registry.declare_properties(record.args)
        self.store.sync_declarations()

    def _on_property_classes(self, record: RawRecord, lines: Iterator[str]) -> None:
        self.registry.declare_property_classes_fallback(record.args)
        self.store.sync_declarations()

    def _on_no_data(self, record: RawRecord, lines: Iterator[str]) -> None:
        self.registry.declare_no_data_values(record.args)

    def _on_esizes(self, record: RawRecord, lines: Iterator[str]) -> None:
        self.registry.declare_sizes(record.args)
        self.store.sync_declarations()

    def _on_property_class_header(self, record: RawRecord, lines: Iterator[str]) -> None:
        args = record.args
        name = args[0] if args and args[0] != "{" else None
        rest = " ".join(args[1:] if name else args)
        self.registry.declare_property_class_header(name, _prepend(rest, lines))


def _prepend(first: str, lines: Iterator[str]) -> Iterator[str]:
    """Yield ``first``, then pull from ``lines`` only on demand."""
    yield first
    yield from lines


class TSurfParser:
    """
    Parses TSurf text into a TSurfParseResult.

    The parser holds only options; every call to ``parse`` starts from scratch.
    """

    def __init__(self, options: Optional[TSurfParseOptions] = None) -> None:
        self.options = options or DEFAULT_OPTIONS

    def parse(self, text: str) -> TSurfParseResult:
        """
        Parse a complete TSurf text.

        Raises:
            StructuralError: If no vertex or no valid triangle was found.
        """
        scan = _Scan(self.options)
        scan.run(text)

        result = MeshBuilder(self.options).build(scan.registry, scan.vertices, scan.triangles, scan.store)

        logger.info(
            f"TSurf parsed: {result.stats.vertex_count} vertices, "
            f"{result.stats.triangle_count} triangles, "
            f"{result.stats.skipped_triangle_count} skipped triangles, "
            f"{len(result.properties)} properties."
        )
        if scan.skipped_records:
            logger.debug(f"{scan.skipped_records} malformed records ignored.")
        return result


def parse_tsurf(
    text: str,
    options: Optional[TSurfParseOptions | Dict[str, Any]] = None,
    **kwargs: Any,
) -> TSurfParseResult:
    """
    Convenience wrapper around TSurfParser.

    Options may be given as a TSurfParseOptions, a dict (snake_case or camelCase
    keys) or as keyword arguments, e.g. ``parse_tsurf(text, compute_normals=True)``.
    """
    if isinstance(options, dict):
        options = TSurfParseOptions.from_dict(options)
    if kwargs:
        merged = (options or DEFAULT_OPTIONS).to_dict()
        merged.update(kwargs)
        options = TSurfParseOptions.from_dict(merged)
    return TSurfParser(options).parse(text)
