"""
Configuration & Constants
=========================
This module serves as the central registry for parse options and the
keywords/constants shared by the reader.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic strings ("prop_", "END", "#") from being
   scattered throughout the scanner and the buffer store.
2. Options: It defines the single options object accepted by the parser, the
   file loader and the command line.

Exports:
    TSurfParseOptions: Options controlling ATOM aliasing, no-data handling and normals.
    DEFAULT_OPTIONS: Options instance with all defaults.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict

# Global Constants
COMMENT_MARKER: str = "#"
TERMINATOR_KEYWORD: str = "END"
AUTO_PROPERTY_PREFIX: str = "prop_"
DEFAULT_FEATURE_ANGLE: float = 45.0

# Accepted spellings for TSurfParseOptions.from_dict
_OPTION_ALIASES: Dict[str, str] = {
    "computeNormals": "compute_normals",
    "shareAtomPoints": "share_atom_points",
    "noDataToNaN": "no_data_to_nan",
    "featureAngle": "feature_angle",
}


@dataclass(frozen=True)
class TSurfParseOptions:
    """
    Options for a single parse invocation.

    Attributes:
        compute_normals: Run the normals filter on the finished mesh.
        share_atom_points: If True, ``ATOM new ref`` maps ``new`` onto the point
            index of ``ref``. If False, the point is duplicated.
        no_data_to_nan: Replace declared NO_DATA_VALUES with NaN after the scan.
        feature_angle: Splitting angle (degrees) used by the normals filter.
    """
    compute_normals: bool = False
    share_atom_points: bool = True
    no_data_to_nan: bool = True
    feature_angle: float = DEFAULT_FEATURE_ANGLE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TSurfParseOptions:
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ValueError(f"Unknown TSurf parse option: '{key}'.")
            kwargs[name] = value
        return cls(**kwargs)


DEFAULT_OPTIONS = TSurfParseOptions()
