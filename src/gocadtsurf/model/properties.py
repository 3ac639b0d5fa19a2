"""
Property Buffer Store
=====================
Per-property flat numeric buffers for per-vertex values.

The schema can grow while the file is scanned: a vertex record may carry more
columns than were declared, and vertices may appear before any property
declaration. Each buffer therefore keeps its own logical length and grows with
NaN placeholders, and every schema extension backfills NaN for the vertices
that were already seen.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, TYPE_CHECKING

import numpy as np

from gocadtsurf.config import AUTO_PROPERTY_PREFIX

if TYPE_CHECKING:
    import numpy.typing as npt
    from gocadtsurf.model.metadata import MetadataRegistry

logger = logging.getLogger(__name__)

INITIAL_CAPACITY = 64


class PropertyBuffer:
    """
    Growable flat float64 buffer for one property.

    The value of component ``c`` of vertex ``i`` lives at ``i * size + c``.
    Slots that were never written hold NaN.
    """

    def __init__(self, name: str, size: int = 1, n_vertices: int = 0) -> None:
        if size < 1:
            raise ValueError(f"Property '{name}' must have at least one component, got {size}.")
        self.name = name
        self.size = size
        self._n_vertices = 0
        self._values: npt.NDArray[np.float64] = np.full(
            max(n_vertices, INITIAL_CAPACITY) * size, np.nan, dtype=np.float64
        )
        self.resize(n_vertices)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, size={self.size}, n_vertices={self._n_vertices})"

    def __len__(self) -> int:
        """Logical length: vertex count times component count."""
        return self._n_vertices * self.size

    @property
    def n_vertices(self) -> int:
        return self._n_vertices

    def _reserve(self, n_vertices: int) -> None:
        capacity = self._values.size // self.size
        if n_vertices <= capacity:
            return
        new_capacity = max(n_vertices, 2 * capacity)
        grown = np.full(new_capacity * self.size, np.nan, dtype=np.float64)
        grown[: self._values.size] = self._values
        self._values = grown

    def resize(self, n_vertices: int) -> None:
        """Grow the logical length to ``n_vertices``; new slots read as NaN."""
        if n_vertices < self._n_vertices:
            raise ValueError(f"Property '{self.name}' cannot shrink from {self._n_vertices} to {n_vertices} vertices.")
        self._reserve(n_vertices)
        self._n_vertices = n_vertices

    def append_placeholder(self) -> None:
        self.resize(self._n_vertices + 1)

    def write(self, vertex_index: int, values: Sequence[float]) -> None:
        """
        Write the components of one vertex. Missing trailing components are NaN,
        extra ones are ignored. Grows the buffer if ``vertex_index`` is past the end.
        """
        if vertex_index >= self._n_vertices:
            self.resize(vertex_index + 1)
        chunk = np.full(self.size, np.nan, dtype=np.float64)
        n = min(len(values), self.size)
        chunk[:n] = values[:n]
        offset = vertex_index * self.size
        self._values[offset: offset + self.size] = chunk

    def read(self, vertex_index: int) -> npt.NDArray[np.float64]:
        offset = vertex_index * self.size
        return self._values[offset: offset + self.size].copy()

    def replace_value(self, sentinel: float) -> int:
        """Rewrite every slot exactly equal to ``sentinel`` as NaN. Returns the count."""
        view = self._values[: len(self)]
        mask = view == sentinel
        count = int(np.count_nonzero(mask))
        view[mask] = np.nan
        return count

    def to_array(self) -> npt.NDArray[np.float64]:
        """Copy of the values: shape (N,) for scalars, (N, size) otherwise."""
        values = self._values[: len(self)].copy()
        if self.size == 1:
            return values
        return values.reshape(-1, self.size)


class PropertyBufferStore:
    """
    Owns the property buffers of one parse.

    The schema is materialised lazily by ``ensure_initialized`` from the names
    and sizes in the registry. Once materialised, component counts are fixed and
    buffers are only ever appended, never removed or reordered.
    """

    def __init__(self, registry: MetadataRegistry) -> None:
        self.registry = registry
        self.buffers: Optional[List[PropertyBuffer]] = None
        self.n_vertices = 0

    @property
    def is_materialized(self) -> bool:
        return self.buffers is not None

    @property
    def names(self) -> List[str]:
        return [buf.name for buf in self.buffers or []]

    @property
    def total_width(self) -> int:
        """Number of value columns a vertex record fills (sum of component counts)."""
        return sum(buf.size for buf in self.buffers or [])

    def __iter__(self):
        return iter(self.buffers or [])

    def __len__(self) -> int:
        return len(self.buffers or [])

    def _unique_name(self, candidate: str) -> str:
        taken = set(self.names)
        name, suffix = candidate, 2
        while name in taken:
            name = f"{candidate}_{suffix}"
            suffix += 1
        return name

    def _name_for_position(self, position: int) -> str:
        """Declared name for a column position, else ``prop_<position + 1>``."""
        if position < len(self.registry.names):
            return self._unique_name(self.registry.names[position])
        return self._unique_name(f"{AUTO_PROPERTY_PREFIX}{position + 1}")

    def ensure_initialized(self, value_count: int = 0) -> bool:
        """
        Materialise the schema once.

        Uses the declared names and sizes if there are any; otherwise auto-names
        ``value_count`` single-component properties. Does nothing if there is
        neither a declaration nor any value. Existing vertices get NaN.

        Returns:
            True if buffers exist after the call.
        """
        if self.buffers is not None:
            return True

        if self.registry.names:
            count = len(self.registry.names)
            sizes = [self.registry.size_of(i) for i in range(count)]
        elif value_count > 0:
            count = value_count
            sizes = [1] * count
        else:
            return False

        self.buffers = []
        for position, size in enumerate(sizes):
            self.buffers.append(PropertyBuffer(self._name_for_position(position), size, self.n_vertices))

        logger.debug(
            f"Property schema materialised with {count} properties {self.names} "
            f"after {self.n_vertices} vertices."
        )
        return True

    def extend(self, extra_columns: int) -> None:
        """Append ``extra_columns`` single-component properties, backfilled with NaN."""
        if self.buffers is None:
            raise RuntimeError("Cannot extend property schema before it is materialised.")
        for _ in range(extra_columns):
            name = self._name_for_position(len(self.buffers))
            self.buffers.append(PropertyBuffer(name, 1, self.n_vertices))
            logger.debug(f"Property schema extended with '{name}', backfilled {self.n_vertices} vertices.")

    def sync_declarations(self) -> None:
        """
        Reconcile materialised buffers with declarations seen after materialisation.

        Buffers are renamed positionally after a late PROPERTIES line. Component
        counts stay fixed; a conflicting late ESIZES is reported and ignored.
        """
        if self.buffers is None:
            return

        # Outgoing names are released before any of them is reassigned
        renamed = {}
        for position, buf in enumerate(self.buffers):
            if position < len(self.registry.names) and buf.name != self.registry.names[position]:
                renamed[position] = buf.name
                buf.name = ""
        for position, old in renamed.items():
            buf = self.buffers[position]
            buf.name = self._name_for_position(position)
            if buf.name != old:
                logger.info(f"Property '{old}' renamed to '{buf.name}' by a later declaration.")

        for position, buf in enumerate(self.buffers):
            declared = self.registry.size_of(position)
            if position < len(self.registry.sizes) and declared != buf.size:
                logger.warning(
                    f"ESIZES declares {declared} components for '{buf.name}' but its buffer "
                    f"already holds {buf.size}; keeping {buf.size}."
                )

    # --- PER-VERTEX OPERATIONS ---

    def append_vertex(self) -> None:
        """Account for a new vertex: one NaN run per materialised property."""
        self.n_vertices += 1
        for buf in self.buffers or []:
            buf.append_placeholder()

    def set_values(self, vertex_index: int, values: Sequence[float]) -> None:
        """
        Store the trailing columns of a vertex record.

        Materialises the schema if needed and extends it when ``values`` is wider
        than the current schema. Values are consumed column by column, each
        property taking as many as its component count.
        """
        if not values:
            return
        self.ensure_initialized(len(values))

        width = self.total_width
        if len(values) > width:
            self.extend(len(values) - width)

        cursor = 0
        for buf in self.buffers:
            buf.write(vertex_index, values[cursor: cursor + buf.size])
            cursor += buf.size

    def copy_vertex(self, source_index: int, target_index: int) -> None:
        """Snapshot every property value of ``source_index`` into ``target_index``."""
        for buf in self.buffers or []:
            buf.write(target_index, buf.read(source_index))

    # --- POST-SCAN ---

    def replace_no_data(self) -> int:
        """
        Rewrite declared no-data sentinels as NaN. Runs once, after the scan.

        Returns:
            Number of replaced slots.
        """
        if not self.buffers:
            return 0
        replaced = 0
        count = len(self.buffers)
        for position, buf in enumerate(self.buffers):
            sentinel = self.registry.no_data_for(position, count)
            if sentinel is None or not np.isfinite(sentinel):
                continue
            replaced += buf.replace_value(sentinel)
        if replaced:
            logger.debug(f"Replaced {replaced} no-data values with NaN.")
        return replaced
