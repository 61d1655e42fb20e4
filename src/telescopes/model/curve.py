"""
Torsion Impulse Curves
======================
A space curve made of helix segments that share one curvature and one torsion,
joined by discrete torsion impulses.

Why is this file needed?
------------------------
1. Construction: It chains HelixSegments so that each one starts exactly at
   the transported end point and end frame of the previous one.
2. Display: It produces the dense point list used for line previews and
   VTK export.
"""
from __future__ import annotations

import math
import logging
from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt

from telescopes.config import DEFAULT_SAMPLE_INTERVAL
from telescopes.model.errors import MalformedCurveError
from telescopes.model.frames import OrthonormalFrame
from telescopes.model.geometry_utils import as_vector, polyline_lengths
from telescopes.model.helix import HelixSegment

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def validate_curve_input(impulses: Sequence[float], arc_steps: Sequence[float]) -> None:
    """
    Check that impulses and arc steps can describe a curve.

    Raises:
        MalformedCurveError: If either list is empty, their lengths differ,
            a value is not finite, or an arc step is negative.
    """
    if len(impulses) == 0 or len(arc_steps) == 0:
        msg = "Impulse and arc-step lists must not be empty."
        logger.error(msg)
        raise MalformedCurveError(msg)

    if len(impulses) != len(arc_steps):
        msg = f"Got {len(impulses)} impulses but {len(arc_steps)} arc steps."
        logger.error(msg)
        raise MalformedCurveError(msg)

    if not all(math.isfinite(v) for v in impulses) or not all(math.isfinite(v) for v in arc_steps):
        msg = "Impulses and arc steps must be finite numbers."
        logger.error(msg)
        raise MalformedCurveError(msg)

    negative = [i for i, step in enumerate(arc_steps) if step < 0.0]
    if negative:
        msg = f"Arc steps must be non-negative (offending indices: {negative})."
        logger.error(msg)
        raise MalformedCurveError(msg)


def build_segments(
    impulses: Sequence[float],
    arc_steps: Sequence[float],
    curvature: float,
    torsion: float,
    initial_frame: OrthonormalFrame,
    initial_position: npt.ArrayLike,
) -> tuple[HelixSegment, ...]:
    """
    Chain helix segments from a list of torsion impulses and arc steps.

    Every segment uses the given curvature and the negated global torsion.
    The first impulse is ignored (segment 0 starts on the initial frame);
    impulse i rotates segment i's start frame about its tangent.

    Raises:
        MalformedCurveError: See `validate_curve_input`.
    """
    validate_curve_input(impulses, arc_steps)

    prev = HelixSegment(
        start_position=as_vector(initial_position),
        curvature=curvature,
        torsion=-torsion,
        impulse=0.0,
        arc_length=float(arc_steps[0]),
        frame=initial_frame,
    )
    segments = [prev]

    for impulse, arc_step in zip(impulses[1:], arc_steps[1:]):
        # New start point/frame is the end of the previous segment
        new_base = prev.end_position
        new_frame = prev.end_frame

        # Apply the torsion impulse about the transported tangent
        new_frame = new_frame.rolled(impulse)

        prev = HelixSegment(
            start_position=new_base,
            curvature=curvature,
            torsion=-torsion,
            impulse=float(impulse),
            arc_length=float(arc_step),
            frame=new_frame,
        )
        segments.append(prev)

    return tuple(segments)


def sample_segments(segments: Sequence[HelixSegment], interval: float) -> npt.NDArray[np.float64]:
    """
    Dense, ordered point list along a segment chain, ending at the exact final endpoint.

    Returns:
        Array of shape (N, 3).
    """
    chunks = [segment.sample(interval) for segment in segments]
    chunks.append(segments[-1].end_position[np.newaxis, :])
    return np.vstack(chunks)


class TorsionImpulseCurve:
    """
    A piecewise-helix curve defined by curvature, torsion and torsion impulses.

    The segment chain and the sample points are computed once in the
    constructor; the object is not meant to be mutated afterwards.
    """

    def __init__(
        self,
        impulses: Sequence[float],
        arc_steps: Sequence[float],
        curvature: float,
        torsion: float,
        initial_frame: Optional[OrthonormalFrame] = None,
        initial_position: Optional[npt.ArrayLike] = None,
        sample_interval: float = DEFAULT_SAMPLE_INTERVAL,
    ):
        if not math.isfinite(sample_interval) or sample_interval <= 0.0:
            msg = f"Sample interval must be a positive number, got {sample_interval}."
            logger.error(msg)
            raise MalformedCurveError(msg)

        self.impulses: tuple[float, ...] = tuple(float(i) for i in impulses)
        self.arc_steps: tuple[float, ...] = tuple(float(a) for a in arc_steps)
        self.curvature = float(curvature)
        self.torsion = float(torsion)
        self.initial_frame = initial_frame or OrthonormalFrame.identity()
        self.initial_position = as_vector(initial_position if initial_position is not None else [0.0, 0.0, 0.0])
        self.sample_interval = float(sample_interval)

        self.segments: tuple[HelixSegment, ...] = build_segments(
            self.impulses, self.arc_steps, self.curvature, self.torsion,
            self.initial_frame, self.initial_position,
        )
        self.points: npt.NDArray[np.float64] = sample_segments(self.segments, self.sample_interval)
        self.points.setflags(write=False)

        logger.info(
            f"Built torsion impulse curve: {len(self.segments)} segments, "
            f"{len(self.points)} sample points, length {self.total_arc_length:.4g}."
        )

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def start_position(self) -> npt.NDArray[np.float64]:
        return self.segments[0].start_position

    @property
    def end_position(self) -> npt.NDArray[np.float64]:
        return self.segments[-1].end_position

    @property
    def start_tangent(self) -> npt.NDArray[np.float64]:
        return self.segments[0].frame.tangent

    @property
    def end_tangent(self) -> npt.NDArray[np.float64]:
        return self.segments[-1].end_frame.tangent

    @property
    def total_arc_length(self) -> float:
        return float(sum(self.arc_steps))

    def resample(self, spacing: float) -> npt.NDArray[np.float64]:
        """
        Points at uniform chord-length spacing along the sampled polyline.

        The polyline is split into ceil(length / spacing) equal pieces, so the
        actual spacing is at most `spacing`. Both ends are kept.

        Returns:
            Array of shape (N, 3).
        """
        if spacing <= 0.0:
            raise ValueError("Resample spacing must be positive.")

        distances = polyline_lengths(self.points)
        total = distances[-1]
        if total == 0.0:
            return np.array(self.points[:1])

        num_pieces = max(1, math.ceil(total / spacing - 1e-9))
        targets = np.linspace(0.0, total, num_pieces + 1)
        return np.column_stack([
            np.interp(targets, distances, self.points[:, axis]) for axis in range(3)
        ])

    def plot(self, show: bool = True) -> plt.Figure:
        """
        Plot the sampled curve and the segment joints.
        """
        plt.rcParams["figure.constrained_layout.use"] = True
        fig = plt.figure(figsize=(7, 6))
        ax = fig.add_subplot(projection="3d")

        pts = self.points
        ax.plot(pts[:, 0], pts[:, 1], pts[:, 2], 'k', lw=1.5)

        joints = np.array([s.start_position for s in self.segments])
        ax.scatter(joints[:, 0], joints[:, 1], joints[:, 2], c='r', s=12)

        ax.set_title(f"Torsion impulse curve ({len(self.segments)} segments)")
        ax.set_xlabel("x")
        ax.set_ylabel("y")
        ax.set_zlabel("z")

        if show:
            plt.show()
        return fig
