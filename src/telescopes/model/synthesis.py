"""
Parameter Synthesis
===================
Turns a telescope description into a list of concrete shell parameters.

Two input paths exist:

1. Diff mode: a root shell followed by per-shell diffs, accumulated with a
   left fold (`concrete_from_diffs`).
2. Curve mode: a torsion impulse curve, one shell per helix segment
   (`concrete_from_curve`).

Both results then go through the containment pass (`containment_pass`), which
grows every parent so that it can hold its retracted child, and are validated
before being returned. Nothing is returned on failure.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from functools import reduce
from typing import Optional, Sequence, Union, TYPE_CHECKING

from telescopes.config import (
    ARC_TOLERANCE, DEFAULT_SAMPLE_INTERVAL, DEFAULT_WALL_THICKNESS, START_RADIUS_MARGIN
)
from telescopes.model.curve import TorsionImpulseCurve
from telescopes.model.frames import OrthonormalFrame
from telescopes.model.geometry_utils import rad2deg
from telescopes.model.parameters import TelescopeDiff, TelescopeParameters

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

ShellEntry = Union[TelescopeParameters, TelescopeDiff]


# ------------------------------------------------------------------------------
# Diff mode
# ------------------------------------------------------------------------------
def _split_entries(entries: Sequence[ShellEntry]) -> tuple[TelescopeParameters, Sequence[TelescopeDiff]]:
    if len(entries) == 0:
        raise ValueError("At least one shell (the root) is required.")

    root = entries[0]
    if not isinstance(root, TelescopeParameters):
        raise TypeError(
            f"Entry 0 must be absolute TelescopeParameters, got {type(root).__name__}."
        )

    diffs = entries[1:]
    for i, diff in enumerate(diffs, start=1):
        if not isinstance(diff, TelescopeDiff):
            raise TypeError(f"Entry {i} must be a TelescopeDiff, got {type(diff).__name__}.")
    return root, diffs


def concrete_from_diffs(
    entries: Sequence[ShellEntry],
    wall_thickness: Optional[float] = None,
) -> tuple[TelescopeParameters, ...]:
    """
    Accumulate a diff list into concrete parameters (no containment pass).

    Args:
        entries: Absolute root parameters followed by one diff per child shell.
        wall_thickness: Radius lost per nesting level. Defaults to the root's
            own thickness.

    Returns:
        One concrete record per entry, in the same order.
    """
    root, diffs = _split_entries(entries)
    wall = root.thickness if wall_thickness is None else wall_thickness

    def accumulate(
        acc: tuple[TelescopeParameters, ...], diff: TelescopeDiff
    ) -> tuple[TelescopeParameters, ...]:
        child = acc[-1] + diff
        return acc + (replace(child, radius=child.radius - wall),)

    return reduce(accumulate, diffs, (root.copy(),))


# ------------------------------------------------------------------------------
# Curve mode
# ------------------------------------------------------------------------------
def default_start_radius(num_shells: int, wall_thickness: float = DEFAULT_WALL_THICKNESS) -> float:
    """Outer radius that leaves the innermost shell `START_RADIUS_MARGIN + wall` wide."""
    return num_shells * wall_thickness + START_RADIUS_MARGIN


def concrete_from_curve(
    curve: TorsionImpulseCurve,
    start_radius: Optional[float] = None,
    wall_thickness: float = DEFAULT_WALL_THICKNESS,
) -> tuple[TelescopeParameters, ...]:
    """
    One concrete shell per helix segment (no containment pass).

    The radius drops by one wall per nesting level. Child twist is the
    negated segment impulse converted to degrees; the root keeps its raw
    impulse.
    """
    segments = curve.segments
    if start_radius is None:
        start_radius = default_start_radius(len(segments), wall_thickness)

    first = segments[0]
    params = [
        TelescopeParameters(
            length=first.arc_length,
            radius=start_radius,
            thickness=wall_thickness,
            curvature=first.curvature,
            twist_from_parent=first.impulse,
            torsion=first.torsion,
        )
    ]

    radius = start_radius
    for segment in segments[1:]:
        radius -= wall_thickness
        params.append(
            TelescopeParameters(
                length=segment.arc_length,
                radius=radius,
                thickness=wall_thickness,
                curvature=segment.curvature,
                twist_from_parent=-rad2deg(segment.impulse),
                torsion=segment.torsion,
            )
        )
    return tuple(params)


# ------------------------------------------------------------------------------
# Containment
# ------------------------------------------------------------------------------
def grow_parent_to_child(parent: TelescopeParameters, child: TelescopeParameters) -> TelescopeParameters:
    """
    Smallest growth of `parent` that lets it hold `child` fully retracted.

    The child's centreline drifts laterally from the parent's by at most
    |c_parent - c_child| * L_child^2 / 2 when their curvatures differ, so that
    drift is added to the radius clearance.

    Returns:
        A new parent record; never smaller than the input in length or radius.
    """
    drift = abs(parent.curvature - child.curvature) * child.length ** 2 / 2.0
    min_radius = child.radius + parent.thickness + drift
    min_length = child.length

    return replace(
        parent,
        radius=max(parent.radius, min_radius),
        length=max(parent.length, min_length),
    )


def containment_pass(params: Sequence[TelescopeParameters]) -> tuple[TelescopeParameters, ...]:
    """
    Walk from the innermost shell outwards, growing each parent around its child.

    Children are never modified; running the pass twice changes nothing.
    """
    result = list(params)
    grown = 0
    for i in range(len(result) - 1, 0, -1):
        before = result[i - 1]
        after = grow_parent_to_child(before, result[i])
        if (after.radius - before.radius > ARC_TOLERANCE
                or after.length - before.length > ARC_TOLERANCE):
            grown += 1
            logger.debug(
                f"Grew shell {i - 1}: radius {before.radius:.4g} -> {after.radius:.4g}, "
                f"length {before.length:.4g} -> {after.length:.4g}"
            )
        result[i - 1] = after

    if grown:
        logger.info(f"Containment pass grew {grown} of {len(result) - 1} parent shells.")
    return tuple(result)


def validate_concrete(params: Sequence[TelescopeParameters]) -> None:
    """
    Raises:
        UnsatisfiableTelescopeError: If any shell cannot physically exist.
    """
    for i, p in enumerate(params):
        p.validate(index=i)


# ------------------------------------------------------------------------------
# Entry points
# ------------------------------------------------------------------------------
def synthesize_from_diffs(
    entries: Sequence[ShellEntry],
    wall_thickness: Optional[float] = None,
) -> tuple[TelescopeParameters, ...]:
    """
    Diff-mode synthesis: accumulate, contain, validate.

    Raises:
        TypeError: If the root is not absolute or a child entry is not a diff.
        UnsatisfiableTelescopeError: If a shell ends up with non-positive radius.
    """
    concrete = containment_pass(concrete_from_diffs(entries, wall_thickness))
    validate_concrete(concrete)
    logger.info(f"Synthesized {len(concrete)} shells from diffs.")
    for i, p in enumerate(concrete):
        logger.debug(f"Shell {i}: {p}")
    return concrete


def synthesize_from_curve(
    curvature: float,
    torsion: float,
    impulses: Sequence[float],
    arc_steps: Sequence[float],
    initial_frame: Optional[OrthonormalFrame] = None,
    initial_position: Optional[npt.ArrayLike] = None,
    start_radius: Optional[float] = None,
    sample_interval: float = DEFAULT_SAMPLE_INTERVAL,
) -> tuple[TorsionImpulseCurve, tuple[TelescopeParameters, ...]]:
    """
    Curve-mode synthesis: build the helix chain, one shell per segment, contain, validate.

    Returns:
        The curve (segments and sample points) and the concrete shell list.

    Raises:
        MalformedCurveError: If impulses/arc steps are empty, mismatched, negative or not finite.
        UnsatisfiableTelescopeError: If a shell ends up with non-positive radius.
    """
    curve = TorsionImpulseCurve(
        impulses=impulses,
        arc_steps=arc_steps,
        curvature=curvature,
        torsion=torsion,
        initial_frame=initial_frame,
        initial_position=initial_position,
        sample_interval=sample_interval,
    )
    concrete = containment_pass(concrete_from_curve(curve, start_radius=start_radius))
    validate_concrete(concrete)
    logger.info(f"Synthesized {len(concrete)} shells from a {len(curve)}-segment curve.")
    return curve, concrete
