from __future__ import annotations

from typing import TYPE_CHECKING

from math import pi
import numpy as np

if TYPE_CHECKING:
    from numpy import typing as npt


def deg2rad(degrees: float) -> float:
    return degrees * pi / 180

def rad2deg(radians: float) -> float:
    return radians * 180 / pi

def as_vector(values: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """
    Convert any 3-sequence to a float64 array of shape (3,).

    Raises:
        ValueError: If the input does not hold exactly three components.
    """
    vec = np.asarray(values, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3D vector, got shape {np.shape(values)}.")
    return vec

def normalize(values: npt.ArrayLike, eps: float = 1e-12) -> npt.NDArray[np.float64]:
    """
    Return the unit vector pointing along `values`.

    Raises:
        ValueError: If the vector is (numerically) zero.
    """
    vec = as_vector(values)
    mag = np.linalg.norm(vec)
    if mag < eps:
        raise ValueError("Cannot normalize a zero-length vector.")
    return vec / mag

def polyline_lengths(points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Cumulative chord length along a polyline.

    Args:
        points: Array of shape (N, 3).

    Returns:
        Array of shape (N,) starting at 0.0.
    """
    if len(points) == 0:
        return np.zeros(0)
    steps = np.linalg.norm(np.diff(points, axis=0), axis=1)
    return np.concatenate(([0.0], np.cumsum(steps)))
