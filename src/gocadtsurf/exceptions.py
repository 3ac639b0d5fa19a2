"""Error types raised by the TSurf reader."""


class TSurfError(ValueError):
    """Base class for all reader errors."""


class StructuralError(TSurfError):
    """
    The input does not describe a surface at all.

    Raised after the full scan when no vertex or no valid triangle was found.
    Nothing is returned in that case.
    """
