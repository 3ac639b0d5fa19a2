"""
Mesh Builder & Result Composer
==============================
Turns the state accumulated by one scan into a PyVista surface.

Why is this file needed?
------------------------
1. Translation: It converts point positions, index triples and property buffers
   into the VTK representation (points, legacy cell array, point data).
2. Finishing: It runs the no-data pass and the optional normals filter exactly
   once, after the whole file was read.
3. Packaging: It composes the property metadata and statistics returned to the caller.
"""
from __future__ import annotations

import logging
from typing import List, Optional, TYPE_CHECKING

import numpy as np
import pyvista as pv

from gocadtsurf.config import DEFAULT_OPTIONS, TSurfParseOptions
from gocadtsurf.exceptions import StructuralError
from gocadtsurf.model.result import ParseStatistics, PropertyMeta, TSurfParseResult

if TYPE_CHECKING:
    import numpy.typing as npt
    from gocadtsurf.model.metadata import MetadataRegistry
    from gocadtsurf.model.properties import PropertyBufferStore
    from gocadtsurf.model.triangles import TriangleAssembler
    from gocadtsurf.model.vertices import VertexTable

logger = logging.getLogger(__name__)

# Field-data arrays carrying the per-property tags (aligned, "" = unset)
FIELD_PROPERTY_NAMES = "property_names"
FIELD_PROPERTY_UNITS = "property_units"
FIELD_PROPERTY_KINDS = "property_kinds"


class MeshBuilder:
    def __init__(self, options: Optional[TSurfParseOptions] = None) -> None:
        self.options = options or DEFAULT_OPTIONS

    def build(
        self,
        registry: MetadataRegistry,
        vertices: VertexTable,
        triangles: TriangleAssembler,
        store: PropertyBufferStore,
    ) -> TSurfParseResult:
        """
        Validate, finish and package one scan.

        Raises:
            StructuralError: If there is no vertex or no valid triangle.
        """
        if len(vertices) == 0:
            raise StructuralError("TSurf parse: no vertices found (need VRTX/PVRTX).")
        if len(triangles) == 0:
            raise StructuralError(
                f"TSurf parse: no valid triangles found (need TRGL); "
                f"{triangles.skipped_count} triangle records were skipped."
            )

        if self.options.no_data_to_nan:
            store.replace_no_data()

        properties = self.compose_properties(registry, store)
        mesh = self.build_polydata(vertices.points, triangles.triangles, store, properties)

        if self.options.compute_normals:
            mesh = self.compute_normals(mesh, properties)

        stats = ParseStatistics(
            vertex_count=len(vertices),
            triangle_count=len(triangles),
            skipped_triangle_count=triangles.skipped_count,
        )
        return TSurfParseResult(mesh=mesh, properties=tuple(properties), stats=stats)

    @staticmethod
    def compose_properties(registry: MetadataRegistry, store: PropertyBufferStore) -> List[PropertyMeta]:
        """Property metadata in column order, with unit/kind matched by name."""
        properties: List[PropertyMeta] = []
        count = len(store)
        for position, buf in enumerate(store):
            properties.append(PropertyMeta(
                name=buf.name,
                size=buf.size,
                unit=registry.unit_for(buf.name),
                kind=registry.kind_for(buf.name),
                no_data=registry.no_data_for(position, count),
            ))

        unmatched = registry.header_names() - set(store.names)
        if unmatched:
            logger.debug(f"PROPERTY_CLASS_HEADER blocks without a matching property ignored: {sorted(unmatched)}")
        return properties

    @staticmethod
    def pack_faces(triangles: npt.NDArray[np.int64]) -> npt.NDArray[np.int64]:
        """(M, 3) index triples -> VTK legacy cell array [3, a, b, c, 3, ...]."""
        counts = np.full((triangles.shape[0], 1), 3, dtype=np.int64)
        return np.hstack([counts, triangles]).ravel()

    @staticmethod
    def attach_field_tags(mesh: pv.PolyData, properties: List[PropertyMeta]) -> None:
        if not properties:
            return
        mesh.field_data[FIELD_PROPERTY_NAMES] = np.array([p.name for p in properties])
        mesh.field_data[FIELD_PROPERTY_UNITS] = np.array([p.unit or "" for p in properties])
        mesh.field_data[FIELD_PROPERTY_KINDS] = np.array([p.kind or "" for p in properties])

    @staticmethod
    def set_default_scalars(mesh: pv.PolyData, properties: List[PropertyMeta]) -> None:
        """Make the first single-component property the active scalars."""
        scalar = next((p for p in properties if p.size == 1), None)
        if scalar is not None:
            mesh.point_data.active_scalars_name = scalar.name

    def build_polydata(
        self,
        points: npt.NDArray[np.float64],
        triangles: npt.NDArray[np.int64],
        store: PropertyBufferStore,
        properties: List[PropertyMeta],
    ) -> pv.PolyData:
        mesh = pv.PolyData(points, faces=self.pack_faces(triangles))

        for buf in store:
            mesh.point_data.set_array(buf.to_array(), buf.name)

        self.attach_field_tags(mesh, properties)
        self.set_default_scalars(mesh, properties)
        logger.debug(f"PolyData built: {mesh.n_points} points, {mesh.n_cells} cells, {len(properties)} arrays.")
        return mesh

    def compute_normals(self, mesh: pv.PolyData, properties: List[PropertyMeta]) -> pv.PolyData:
        """Point normals with feature-angle splitting; replaces the mesh."""
        logger.debug(f"Computing point normals (feature angle {self.options.feature_angle} deg).")
        result = mesh.compute_normals(
            cell_normals=False,
            point_normals=True,
            split_vertices=True,
            consistent_normals=True,
            non_manifold_traversal=True,
            auto_orient_normals=False,
            feature_angle=self.options.feature_angle,
        )
        # Filter output does not reliably carry field data and active scalars
        self.attach_field_tags(result, properties)
        self.set_default_scalars(result, properties)
        return result
