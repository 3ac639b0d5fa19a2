"""
Token Helpers
Numeric parsing of whitespace-separated TSurf tokens.

Malformed or non-finite numbers never raise here; callers decide whether a
missing value skips the record or is stored as NaN.
"""
from __future__ import annotations

import math
from typing import Iterable, Optional


def to_float(token: str) -> float:
    """Parse a numeric token, mapping anything non-finite or malformed to NaN."""
    try:
        value = float(token)
    except ValueError:
        return math.nan
    return value if math.isfinite(value) else math.nan


def to_int(token: str) -> Optional[int]:
    """
    Parse an integer token.

    Tokens such as ``"12.0"`` are accepted and truncated. Returns None if the
    token is not a finite number.
    """
    try:
        return int(token)
    except ValueError:
        value = to_float(token)
        if math.isnan(value):
            return None
        return int(value)


def finite_floats(tokens: Iterable[str]) -> list[float]:
    """Parse tokens and keep only the finite values."""
    values = (to_float(t) for t in tokens)
    return [v for v in values if not math.isnan(v)]
