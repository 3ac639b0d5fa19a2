"""
Record Classifier
=================
Tags each line of a TSurf file with its record kind.

Classification is a pure function of one line: the scanner in
``controller.parser`` owns the cursor and decides what to do with each kind.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from gocadtsurf.config import COMMENT_MARKER, TERMINATOR_KEYWORD


class RecordKind(StrEnum):
    VERTEX = "vertex"
    PROPERTY_VERTEX = "property_vertex"
    ATOM = "atom"
    TRIANGLE = "triangle"
    PROPERTIES_DECL = "properties_decl"
    PROPERTY_CLASSES_DECL = "property_classes_decl"
    NO_DATA_DECL = "no_data_decl"
    ESIZES_DECL = "esizes_decl"
    PROPERTY_CLASS_HEADER = "property_class_header"
    END = "end"
    OTHER = "other"


# Order matters only for readability; every pattern is anchored on a whole keyword.
KEYWORD_PATTERNS: list[tuple[RecordKind, re.Pattern[str]]] = [
    (RecordKind.VERTEX, re.compile(r"^VRTX\b", re.IGNORECASE)),
    (RecordKind.PROPERTY_VERTEX, re.compile(r"^PVRTX\b", re.IGNORECASE)),
    (RecordKind.ATOM, re.compile(r"^ATOM\b", re.IGNORECASE)),
    (RecordKind.TRIANGLE, re.compile(r"^TRGL\b", re.IGNORECASE)),
    (RecordKind.PROPERTIES_DECL, re.compile(r"^PROPERTIES\b", re.IGNORECASE)),
    (RecordKind.PROPERTY_CLASSES_DECL, re.compile(r"^PROPERTY_CLASSES\b", re.IGNORECASE)),
    (RecordKind.NO_DATA_DECL, re.compile(r"^NO_DATA_VALUES?\b", re.IGNORECASE)),
    (RecordKind.ESIZES_DECL, re.compile(r"^ESIZES\b", re.IGNORECASE)),
    (RecordKind.PROPERTY_CLASS_HEADER, re.compile(r"^PROPERTY_CLASS_HEADER\b", re.IGNORECASE)),
]

VERTEX_KINDS = frozenset({RecordKind.VERTEX, RecordKind.PROPERTY_VERTEX})


@dataclass(frozen=True)
class RawRecord:
    """A classified line: its kind plus the whitespace-split tokens (keyword included)."""
    kind: RecordKind
    tokens: tuple[str, ...]

    @property
    def args(self) -> tuple[str, ...]:
        """Tokens after the keyword."""
        return self.tokens[1:]


def classify_line(line: str) -> Optional[RawRecord]:
    """
    Classify one input line.

    Returns:
        None for blank and comment lines, otherwise a RawRecord. Lines with an
        unknown keyword (HEADER, TFACE, BSTONE, BORDER, ...) are tagged OTHER.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_MARKER):
        return None

    tokens = tuple(stripped.split())
    if len(tokens) == 1 and tokens[0].upper() == TERMINATOR_KEYWORD:
        return RawRecord(RecordKind.END, tokens)

    for kind, pattern in KEYWORD_PATTERNS:
        if pattern.match(stripped):
            return RawRecord(kind, tokens)

    return RawRecord(RecordKind.OTHER, tokens)
