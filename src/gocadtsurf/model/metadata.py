"""
Metadata Registry
=================
Accumulates the property schema declared in a TSurf file.

Declarations (PROPERTIES, PROPERTY_CLASSES, ESIZES, NO_DATA_VALUES and
PROPERTY_CLASS_HEADER blocks) may appear in any order, any number of times,
before or in between the geometry records. The registry only records what was
declared; the buffer store decides when the schema gets materialised.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Iterator, List, Optional

from gocadtsurf.utils import finite_floats, to_int

logger = logging.getLogger(__name__)

# "unit: m", "kind: Real Number" - a value runs until the next "key:" or end of line.
HEADER_ENTRY_PATTERN = re.compile(
    r"\b(unit|kind)\s*:\s*(.*?)\s*(?=\s\*?\w+\s*:|$)",
    re.IGNORECASE,
)
BLOCK_CLOSE = "}"
BLOCK_OPEN = "{"


class MetadataRegistry:
    """
    Property schema as declared by the file.

    Attributes:
        names: Ordered property names (column order).
        sizes: Declared component counts, aligned with ``names`` where present.
        no_data_values: Declared sentinel list, or None if never declared.
    """

    def __init__(self) -> None:
        self.names: List[str] = []
        self.sizes: List[int] = []
        self.no_data_values: Optional[List[float]] = None
        self.header_units: Dict[str, str] = {}
        self.header_kinds: Dict[str, str] = {}
        self._has_properties_decl = False

    # --- DECLARATIONS ---

    def declare_properties(self, names: Iterable[str]) -> None:
        """PROPERTIES: replaces the full ordered name list."""
        names = list(names)
        if not names:
            return
        self.names = names
        self._has_properties_decl = True

    def declare_property_classes_fallback(self, names: Iterable[str]) -> None:
        """PROPERTY_CLASSES: adopted only while no PROPERTIES line has been seen."""
        names = list(names)
        if self._has_properties_decl or not names:
            return
        self.names = names

    def declare_no_data_values(self, tokens: Iterable[str]) -> None:
        """NO_DATA_VALUES: non-finite entries are dropped, an empty list is ignored."""
        values = finite_floats(tokens)
        if values:
            self.no_data_values = values

    def declare_sizes(self, tokens: Iterable[str]) -> None:
        """ESIZES: non-positive or non-numeric entries default to 1."""
        sizes = []
        for token in tokens:
            size = to_int(token)
            sizes.append(size if size is not None and size > 0 else 1)
        if sizes:
            self.sizes = sizes

    def declare_property_class_header(self, name: Optional[str], lines: Iterator[str]) -> None:
        """
        PROPERTY_CLASS_HEADER: consume ``lines`` up to and including the one holding
        the closing brace, collecting ``unit:`` and ``kind:`` entries for ``name``.

        The iterator is shared with the scanner, so consumed lines are never
        classified as records.
        """
        for line in lines:
            body, closed = line, False
            if BLOCK_CLOSE in line:
                body, closed = line.split(BLOCK_CLOSE, 1)[0], True
            body = body.replace(BLOCK_OPEN, " ")

            for key, value in HEADER_ENTRY_PATTERN.findall(body):
                if not name or not value:
                    continue
                if key.lower() == "unit":
                    self.header_units[name] = value
                else:
                    self.header_kinds[name] = value

            if closed:
                return

        logger.debug(f"PROPERTY_CLASS_HEADER '{name}' is not closed before end of input.")

    # --- QUERIES ---

    def size_of(self, position: int) -> int:
        """Declared component count for a property position; missing entries are 1."""
        if position < len(self.sizes):
            return self.sizes[position]
        return 1

    def unit_for(self, name: str) -> Optional[str]:
        return self.header_units.get(name)

    def kind_for(self, name: str) -> Optional[str]:
        return self.header_kinds.get(name)

    def no_data_for(self, position: int, property_count: int) -> Optional[float]:
        """
        Effective sentinel for one property.

        A list with one entry per property is applied positionally, otherwise the
        first entry applies to every property.
        """
        if not self.no_data_values:
            return None
        if len(self.no_data_values) == property_count:
            return self.no_data_values[position]
        return self.no_data_values[0]

    def header_names(self) -> set[str]:
        return set(self.header_units) | set(self.header_kinds)
