"""
Constant-curvature, constant-torsion helix pieces.

The Frenet-Serret equations with constant curvature c and torsion t

    T' = c N,   N' = -c T + t B,   B' = -t N

rotate the frame about the Darboux vector (t, 0, c) (in local T, N, B
components) at rate w = sqrt(c^2 + t^2). Integrating the tangent gives the
closed-form position used below. Straight lines (c = 0) and planar arcs
(t = 0) get their own branches so nothing is ever divided by zero.
"""
from __future__ import annotations

import math
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy.spatial.transform import Rotation

from telescopes.config import ARC_TOLERANCE, DEGENERATE_EPS
from telescopes.model.frames import OrthonormalFrame
from telescopes.model.geometry_utils import as_vector

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def rotate_along_helix(curvature: float, torsion: float, arc_length: float) -> Rotation:
    """
    Rotation of the Frenet frame after travelling `arc_length` along a helix.

    The rotation is expressed in the local frame of the helix start, where
    the start frame is the identity (T = x, N = y, B = z).

    Args:
        curvature: Constant curvature of the helix.
        torsion: Constant torsion of the helix.
        arc_length: Distance travelled from the start.

    Returns:
        Local rotation taking the start frame to the frame at `arc_length`.
    """
    if abs(curvature) < DEGENERATE_EPS:
        # Straight line: no Frenet normal exists, so the frame is carried unchanged
        return Rotation.identity()

    if abs(torsion) < DEGENERATE_EPS:
        # Planar arc: rotate about the binormal
        return Rotation.from_rotvec([0.0, 0.0, curvature * arc_length])

    # General helix: rotate about the Darboux axis (t, 0, c)/w by w*s
    return Rotation.from_rotvec(arc_length * np.array([torsion, 0.0, curvature]))


def translate_along_helix(curvature: float, torsion: float, arc_length: float) -> npt.NDArray[np.float64]:
    """
    Position reached after travelling `arc_length` along a helix, in local coordinates.

    Args:
        curvature: Constant curvature of the helix.
        torsion: Constant torsion of the helix.
        arc_length: Distance travelled from the start.

    Returns:
        Array (3,) with the (T, N, B) components of the point.
    """
    s = arc_length

    if abs(curvature) < DEGENERATE_EPS:
        return np.array([s, 0.0, 0.0])

    if abs(torsion) < DEGENERATE_EPS:
        c = curvature
        return np.array([math.sin(c * s) / c, (1.0 - math.cos(c * s)) / c, 0.0])

    c, t = curvature, torsion
    w2 = c * c + t * t
    w = math.sqrt(w2)
    sin_ws = math.sin(w * s)
    cos_ws = math.cos(w * s)

    x = (t * t / w2) * s + (c * c / (w2 * w)) * sin_ws
    y = (c / w2) * (1.0 - cos_ws)
    z = (c * t / w2) * (s - sin_ws / w)
    return np.array([x, y, z])


@dataclass(frozen=True, eq=False)
class HelixSegment:
    """
    One piece of a piecewise-helix curve.

    Attributes:
        start_position: World position of the segment start.
        curvature: Constant curvature throughout this segment.
        torsion: Constant torsion throughout this segment.
        impulse: Torsion impulse (radians) applied at the start, relative to
            the previous segment's end frame.
        arc_length: Length of the segment.
        frame: Orthonormal frame at the start of the segment.
    """
    start_position: npt.NDArray[np.float64]
    curvature: float
    torsion: float
    impulse: float
    arc_length: float
    frame: OrthonormalFrame

    def __post_init__(self) -> None:
        position = as_vector(self.start_position).copy()
        position.setflags(write=False)
        object.__setattr__(self, "start_position", position)
        logger.debug(f"Created {self.describe()}")

    def _check_arc_length(self, s: float) -> None:
        if s < -ARC_TOLERANCE or s > self.arc_length + ARC_TOLERANCE:
            raise ValueError(
                f"Arc length {s} outside segment range [0, {self.arc_length}]."
            )

    def point_at(self, s: float) -> npt.NDArray[np.float64]:
        """World position at arc length `s` from the segment start."""
        self._check_arc_length(s)
        local = translate_along_helix(self.curvature, self.torsion, s)
        return self.start_position + self.frame.to_world(local)

    def frame_at(self, s: float) -> OrthonormalFrame:
        """World frame at arc length `s` from the segment start."""
        self._check_arc_length(s)
        start_rot = self.frame.rotation
        local = rotate_along_helix(self.curvature, self.torsion, s)
        # Conjugate the local rotation into world space
        return self.frame.rotated_by(start_rot * local * start_rot.inv())

    @property
    def end_position(self) -> npt.NDArray[np.float64]:
        return self.point_at(self.arc_length)

    @property
    def end_frame(self) -> OrthonormalFrame:
        return self.frame_at(self.arc_length)

    def sample(self, interval: float) -> npt.NDArray[np.float64]:
        """
        Sample the segment roughly every `interval` length units.

        The segment is split into ceil(arc_length / interval) equal steps.
        The start point is included, the end point is not (it is the next
        segment's start).

        Returns:
            Array of shape (M, 3).
        """
        if interval <= 0.0:
            raise ValueError("Sampling interval must be positive.")

        # Tolerance keeps e.g. 2.0 / 0.1 from rounding up to 21 steps
        num_steps = math.ceil(self.arc_length / interval - 1e-9)
        if num_steps <= 0:
            return np.empty((0, 3))

        step = self.arc_length / num_steps
        return np.array([self.point_at(i * step) for i in range(num_steps)])

    def describe(self) -> str:
        return (
            f"HelixSegment(start={np.round(self.start_position, 4).tolist()}, "
            f"c={self.curvature:.4g}, i={self.impulse:.4g}, "
            f"a={self.arc_length:.4g}, t={self.torsion:.4g})"
        )
