"""
Vertex & Alias Table
====================
Assigns dense 0-based point indices to the external vertex ids of a TSurf file
and resolves ATOM aliases.

Indices are handed out in order of first appearance and never reassigned.
External ids need not be contiguous, ordered or start at any fixed value.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from gocadtsurf.model.properties import PropertyBufferStore

logger = logging.getLogger(__name__)


class VertexTable:
    """
    Point positions plus the external-id -> point-index map.

    Every new point is announced to the property store so that all property
    buffers stay exactly one run per point long.
    """

    def __init__(self, store: PropertyBufferStore) -> None:
        self.store = store
        self._positions: List[Tuple[float, float, float]] = []
        self._index_by_id: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, vertex_id: int) -> bool:
        return vertex_id in self._index_by_id

    def add_vertex(self, x: float, y: float, z: float) -> int:
        """Append a point and return its index."""
        index = len(self._positions)
        self._positions.append((x, y, z))
        self.store.append_vertex()
        return index

    def bind(self, vertex_id: int, index: int) -> None:
        """Map an external id onto a point index. A later binding of the same id wins."""
        if vertex_id in self._index_by_id:
            logger.debug(f"Vertex id {vertex_id} redefined; now refers to point {index}.")
        self._index_by_id[vertex_id] = index

    def resolve(self, vertex_id: Optional[int]) -> Optional[int]:
        if vertex_id is None:
            return None
        return self._index_by_id.get(vertex_id)

    def position(self, index: int) -> Tuple[float, float, float]:
        return self._positions[index]

    def resolve_atom(self, new_id: int, ref_id: int, share: bool = True) -> Optional[int]:
        """
        ATOM new_id ref_id.

        In share mode ``new_id`` maps onto the point of ``ref_id``. Otherwise a copy
        of the point is appended and the current property values of ``ref_id`` are
        copied into it (a snapshot, not a link).

        Returns:
            The point index ``new_id`` now refers to, or None if ``ref_id`` is
            unknown. In that case the alias is dropped and ``new_id`` stays
            unresolved.
        """
        ref_index = self._index_by_id.get(ref_id)
        if ref_index is None:
            logger.debug(f"ATOM {new_id} refers to unknown vertex {ref_id}; alias dropped.")
            return None

        if share:
            self.bind(new_id, ref_index)
            return ref_index

        new_index = self.add_vertex(*self._positions[ref_index])
        self.store.copy_vertex(ref_index, new_index)
        self.bind(new_id, new_index)
        return new_index

    @property
    def points(self) -> npt.NDArray[np.float64]:
        """(N, 3) array of point positions."""
        if not self._positions:
            return np.empty((0, 3), dtype=np.float64)
        return np.array(self._positions, dtype=np.float64)
