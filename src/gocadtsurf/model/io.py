"""
Input/Output Manager
Handles reading TSurf files from disk and exporting parsed surfaces.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Optional, TYPE_CHECKING

from gocadtsurf.controller.parser import TSurfParser

if TYPE_CHECKING:
    from gocadtsurf.config import TSurfParseOptions
    from gocadtsurf.model.result import TSurfParseResult

# Get module logger
logger = logging.getLogger(__name__)


class TSurfIO:
    @staticmethod
    def read_text(filepath: str) -> str:
        """Read a TSurf file; undecodable bytes are replaced rather than fatal."""
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"TSurf file not found: {filepath}")
        with open(filepath, "r", encoding="utf-8", errors="replace") as f:
            return f.read()

    @staticmethod
    def load(filepath: str, options: Optional[TSurfParseOptions] = None) -> TSurfParseResult:
        logger.info(f"Loading TSurf from: {filepath}")
        text = TSurfIO.read_text(filepath)
        return TSurfParser(options).parse(text)

    @staticmethod
    def export_mesh(result: TSurfParseResult, dest_path: str) -> str:
        """
        Saves the mesh through PyVista (format from the extension, e.g. .vtp, .vtk, .ply)
        and writes a JSON sidecar next to it with property metadata and statistics.

        Returns:
            Path of the JSON sidecar.
        """
        parent = os.path.dirname(os.path.abspath(dest_path))
        os.makedirs(parent, exist_ok=True)

        try:
            result.mesh.save(dest_path)
        except Exception as e:
            logger.exception(f"Failed to export mesh to '{dest_path}'")
            raise e
        logger.info(f"Mesh exported to: {dest_path}")

        meta_path = os.path.splitext(dest_path)[0] + ".json"
        with open(meta_path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2, allow_nan=False)
        logger.info(f"Metadata saved: {meta_path}")

        return meta_path
