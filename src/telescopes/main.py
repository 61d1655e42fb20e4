"""
Command-Line Entry Point
========================
Builds one telescope from the command line and reports its shells.

Why is this file needed?
------------------------
It acts as the orchestration root. It:
1. Sets up logging.
2. Fills a TelescopeDesign from the arguments (diff or curve mode).
3. Runs the synthesis and builds the shell chain.
4. Optionally saves (.h5), exports (.vtp) and plots the result.

Usage:
    $ python -m telescopes diff --shells 5
    $ python -m telescopes curve --impulses 0 0.2 -0.4 --steps 2 1.5 1.2 --save out.h5
"""
from __future__ import annotations

import argparse
import logging
import os
from typing import Optional, Sequence

from telescopes.config import DEFAULT_WALL_THICKNESS, OUTPUT_PATH
from telescopes.logging_config import setup_logging
from telescopes.model.io import IOManager
from telescopes.model.parameters import TelescopeDiff, TelescopeParameters
from telescopes.model.state import CurveInputs, SynthesisMode, TelescopeDesign

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="telescopes",
        description="Synthesize nested telescoping shells from diffs or a torsion impulse curve.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    parser.add_argument("--name", default="Untitled Telescope", help="Design name stored in saved files.")
    parser.add_argument("--save", default=None, help="Save the design to this .h5 file.")
    parser.add_argument("--export", action="store_true",
                        help=f"Export curve/shell axes as .vtp files into {OUTPUT_PATH}.")
    parser.add_argument("--plot", action="store_true", help="Show a matplotlib preview (curve mode).")

    sub = parser.add_subparsers(dest="mode", required=True)

    p_diff = sub.add_parser("diff", help="Root shell followed by default child diffs.")
    p_diff.add_argument("--shells", type=int, default=4, help="Number of shells.")
    p_diff.add_argument("--length", type=float, default=1.0, help="Root shell length.")
    p_diff.add_argument("--radius", type=float, default=0.5, help="Root shell radius.")
    p_diff.add_argument("--thickness", type=float, default=DEFAULT_WALL_THICKNESS, help="Wall thickness.")
    p_diff.add_argument("--curvature", type=float, default=0.0, help="Root shell curvature.")
    p_diff.add_argument("--twist", type=float, default=0.0, help="Twist of each child (degrees).")

    p_curve = sub.add_parser("curve", help="Piecewise helix with torsion impulses.")
    p_curve.add_argument("--impulses", type=float, nargs="+", default=[0.0, 0.2],
                         help="Torsion impulses in radians (first one is ignored).")
    p_curve.add_argument("--steps", type=float, nargs="+", default=[2.0, 1.5],
                         help="Arc length of each segment.")
    p_curve.add_argument("--curvature", type=float, default=0.5)
    p_curve.add_argument("--torsion", type=float, default=0.1)
    p_curve.add_argument("--start-radius", type=float, default=None,
                         help="Outer radius (default: shells * wall + margin).")
    return parser


def design_from_args(args: argparse.Namespace) -> TelescopeDesign:
    design = TelescopeDesign(name=args.name, mode=SynthesisMode(args.mode))

    if design.mode == SynthesisMode.DIFF:
        if args.shells < 1:
            raise ValueError("--shells must be at least 1.")
        root = TelescopeParameters(
            length=args.length, radius=args.radius, thickness=args.thickness, curvature=args.curvature
        )
        # Each level already loses one wall; the diff itself keeps the radius
        child = TelescopeDiff(twist_from_parent=args.twist)
        design.entries = [root] + [child] * (args.shells - 1)
    else:
        design.curve_inputs = CurveInputs(
            curvature=args.curvature,
            torsion=args.torsion,
            impulses=list(args.impulses),
            arc_steps=list(args.steps),
            start_radius=args.start_radius,
        )
    return design


def format_table(params: Sequence[TelescopeParameters]) -> str:
    header = f"{'#':>3} {'length':>9} {'radius':>9} {'thick':>7} {'curv':>8} {'twist':>9} {'tors':>8}"
    rows = [header]
    for i, p in enumerate(params):
        rows.append(
            f"{i:>3} {p.length:>9.4f} {p.radius:>9.4f} {p.thickness:>7.3f} "
            f"{p.curvature:>8.4f} {p.twist_from_parent:>9.3f} {p.torsion:>8.4f}"
        )
    return "\n".join(rows)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    # 2. Build and synthesize the design
    try:
        design = design_from_args(args)
        params = design.synthesize()
        structure = design.build_structure()
    except ValueError as e:
        logger.error(f"Synthesis failed: {e}")
        return 1

    logger.info("Resolved shells:\n" + format_table(params))

    # 3. Optional outputs
    if args.save:
        IOManager.save_design(design, args.save)

    if args.export:
        IOManager.export_shells_to_vtk(structure, os.path.join(OUTPUT_PATH, "shells.vtp"))
        if design.curve is not None:
            IOManager.export_curve_to_vtk(design.curve, os.path.join(OUTPUT_PATH, "curve.vtp"))

    if args.plot:
        if design.curve is not None:
            design.curve.plot()
        else:
            logger.warning("Nothing to plot in diff mode.")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
