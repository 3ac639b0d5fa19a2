from .mesh_builder import MeshBuilder
from .parser import TSurfParser, parse_tsurf

__all__ = ["MeshBuilder", "TSurfParser", "parse_tsurf"]
