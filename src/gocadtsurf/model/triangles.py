"""
Triangle Assembler
==================
Turns TRGL records into point-index triples for the surface cells.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from gocadtsurf.model.vertices import VertexTable

logger = logging.getLogger(__name__)


class TriangleAssembler:
    """
    Collects TRGL records as point-index triples.

    A triangle is kept only if all three ids resolve at the time it is read and
    the three indices are pairwise distinct. Anything else is counted as skipped.
    """

    def __init__(self, vertices: VertexTable) -> None:
        self.vertices = vertices
        self._triangles: List[Tuple[int, int, int]] = []
        self.skipped_count = 0

    def __len__(self) -> int:
        return len(self._triangles)

    def add_triangle(self, id_a: Optional[int], id_b: Optional[int], id_c: Optional[int]) -> bool:
        """Resolve and store one triangle. Returns False if it was skipped."""
        a = self.vertices.resolve(id_a)
        b = self.vertices.resolve(id_b)
        c = self.vertices.resolve(id_c)

        if a is None or b is None or c is None or a == b or b == c or c == a:
            self.skipped_count += 1
            logger.debug(f"Skipped triangle ({id_a}, {id_b}, {id_c}) -> ({a}, {b}, {c}).")
            return False

        self._triangles.append((a, b, c))
        return True

    @property
    def triangles(self) -> npt.NDArray[np.int64]:
        """(M, 3) array of point indices."""
        if not self._triangles:
            return np.empty((0, 3), dtype=np.int64)
        return np.array(self._triangles, dtype=np.int64)
