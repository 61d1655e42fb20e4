"""
Orthonormal reference frames (tangent, normal, binormal).
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy.spatial.transform import Rotation

from telescopes.model.geometry_utils import as_vector, normalize

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True, eq=False)
class OrthonormalFrame:
    """
    A right-handed frame of three unit, mutually orthogonal axes.

    Frames are values: every rotation returns a new frame and the stored axes
    are read-only arrays.
    """
    tangent: npt.NDArray[np.float64]
    normal: npt.NDArray[np.float64]
    binormal: npt.NDArray[np.float64]

    def __post_init__(self) -> None:
        for name in ("tangent", "normal", "binormal"):
            axis = as_vector(getattr(self, name)).copy()
            axis.setflags(write=False)
            object.__setattr__(self, name, axis)

        if not self.is_orthonormal(tol=1e-6):
            raise ValueError("Frame axes must be unit length, mutually orthogonal and right-handed.")

    # Short aliases matching the usual T, N, B notation
    @property
    def T(self) -> npt.NDArray[np.float64]:
        return self.tangent

    @property
    def N(self) -> npt.NDArray[np.float64]:
        return self.normal

    @property
    def B(self) -> npt.NDArray[np.float64]:
        return self.binormal

    @staticmethod
    def identity() -> OrthonormalFrame:
        return OrthonormalFrame(
            tangent=np.array([1.0, 0.0, 0.0]),
            normal=np.array([0.0, 1.0, 0.0]),
            binormal=np.array([0.0, 0.0, 1.0]),
        )

    @staticmethod
    def from_tangent_normal(tangent: npt.ArrayLike, normal: npt.ArrayLike) -> OrthonormalFrame:
        """
        Build a frame from a tangent and an approximate normal.

        The normal is made orthogonal to the tangent (Gram-Schmidt) and the
        binormal completes the right-handed triple.

        Raises:
            ValueError: If either vector is zero or they are parallel.
        """
        t = normalize(tangent)
        n_raw = as_vector(normal)
        n_perp = n_raw - np.dot(n_raw, t) * t
        try:
            n = normalize(n_perp, eps=1e-9)
        except ValueError:
            raise ValueError("Normal must not be parallel to the tangent.") from None
        return OrthonormalFrame(tangent=t, normal=n, binormal=np.cross(t, n))

    @staticmethod
    def from_matrix(matrix: npt.ArrayLike) -> OrthonormalFrame:
        """Frame whose axes are the columns (T, N, B) of a 3x3 matrix."""
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (3, 3):
            raise ValueError(f"Expected a 3x3 matrix, got shape {m.shape}.")
        return OrthonormalFrame(tangent=m[:, 0], normal=m[:, 1], binormal=m[:, 2])

    @staticmethod
    def from_rotation(rotation: Rotation) -> OrthonormalFrame:
        return OrthonormalFrame.from_matrix(rotation.as_matrix())

    @property
    def matrix(self) -> npt.NDArray[np.float64]:
        """3x3 matrix with T, N, B as columns (local -> world)."""
        return np.column_stack((self.tangent, self.normal, self.binormal))

    @property
    def rotation(self) -> Rotation:
        """The rotation carrying the identity frame onto this frame."""
        return Rotation.from_matrix(self.matrix)

    def rotated_by(self, rotation: Rotation) -> OrthonormalFrame:
        """Apply a world-space rotation to all three axes."""
        axes = rotation.apply(np.vstack((self.tangent, self.normal, self.binormal)))
        return OrthonormalFrame(tangent=axes[0], normal=axes[1], binormal=axes[2])

    def rolled(self, angle_rad: float) -> OrthonormalFrame:
        """Rotate the frame about its own tangent (right-hand rule)."""
        return self.rotated_by(Rotation.from_rotvec(angle_rad * self.tangent))

    def to_world(self, local: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Express a vector given in (T, N, B) components in world coordinates."""
        return self.matrix @ as_vector(local)

    def is_orthonormal(self, tol: float = 1e-9) -> bool:
        m = self.matrix
        if not np.allclose(m.T @ m, np.eye(3), atol=tol):
            return False
        # Right-handed: B == T x N
        return bool(np.allclose(np.cross(self.tangent, self.normal), self.binormal, atol=tol))

    def allclose(self, other: OrthonormalFrame, atol: float = 1e-9) -> bool:
        return bool(np.allclose(self.matrix, other.matrix, atol=atol))
