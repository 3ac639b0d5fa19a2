"""Command-line interface."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from gocadtsurf.config import DEFAULT_FEATURE_ANGLE, TSurfParseOptions
from gocadtsurf.exceptions import TSurfError
from gocadtsurf.logging_config import setup_logging
from gocadtsurf.model.io import TSurfIO
from gocadtsurf.model.result import TSurfParseResult

logger = logging.getLogger("gocadtsurf.cli")


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="gocadtsurf",
        description="Read an ASCII GOCAD TSurf file into a VTK surface with per-vertex properties.",
    )
    ap.add_argument("input", help="Input .ts (GOCAD TSurf) file")
    ap.add_argument("-o", "--output", help="Export the surface (.vtp, .vtk, .ply, ...) plus a .json sidecar")
    ap.add_argument("--normals", action="store_true", help="Compute point normals")
    ap.add_argument("--feature-angle", type=float, default=DEFAULT_FEATURE_ANGLE,
                    help="Splitting angle in degrees for --normals (default: %(default)s)")
    ap.add_argument("--duplicate-atoms", action="store_true",
                    help="Duplicate ATOM points instead of sharing the referenced point")
    ap.add_argument("--keep-no-data", action="store_true",
                    help="Keep NO_DATA_VALUES sentinels instead of replacing them with NaN")
    ap.add_argument("--show", action="store_true", help="Render the surface colored by the active scalar")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("--log-file", help="Also write the log to this file")
    return ap


def options_from_args(args: argparse.Namespace) -> TSurfParseOptions:
    return TSurfParseOptions(
        compute_normals=args.normals,
        share_atom_points=not args.duplicate_atoms,
        no_data_to_nan=not args.keep_no_data,
        feature_angle=args.feature_angle,
    )


def log_summary(result: TSurfParseResult) -> None:
    stats = result.stats
    logger.info(
        f"Vertices: {stats.vertex_count}, triangles: {stats.triangle_count}, "
        f"skipped triangles: {stats.skipped_triangle_count}"
    )
    for prop in result.properties:
        logger.info(
            f"Property '{prop.name}': size={prop.size}, unit={prop.unit}, "
            f"kind={prop.kind}, no_data={prop.no_data}"
        )


def show(result: TSurfParseResult) -> None:
    import pyvista as pv

    plotter = pv.Plotter()
    scalar = result.scalar_property
    if scalar is None:
        plotter.add_mesh(result.mesh, color="lightgray", show_edges=False)
    else:
        title = f"{scalar.name} [{scalar.unit}]" if scalar.unit else scalar.name
        plotter.add_mesh(
            result.mesh,
            scalars=scalar.name,
            cmap="jet",
            show_edges=False,
            nan_opacity=0.3,
            scalar_bar_args={"title": title, "vertical": True},
        )
    plotter.show()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        result = TSurfIO.load(args.input, options_from_args(args))
        log_summary(result)
        if args.output:
            TSurfIO.export_mesh(result, args.output)
    except (TSurfError, OSError) as e:
        logger.error(f"{e}")
        return 1

    if args.show:
        show(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
