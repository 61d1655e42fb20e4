"""
Shell Parameters (Concrete and Diff)
====================================
Defines the two parameter records used to describe a telescope.

Why is this file needed?
------------------------
1. Separation: A *diff* (change relative to the parent shell) and a *concrete*
   value (the physical shell) are different things. Keeping them as two types
   stops a diff from ever being used as an absolute value.
2. Algebra: `concrete + diff` is the only supported addition, and it is not a
   plain field-wise sum (see `TelescopeParameters.__add__`).

Classes:
    TelescopeParameters: Absolute values for one shell.
    TelescopeDiff: Delta from a parent shell to its child.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, astuple, fields, replace
from typing import Optional

from telescopes.config import DEFAULT_WALL_THICKNESS
from telescopes.model.errors import UnsatisfiableTelescopeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelescopeParameters:
    """
    Concrete (absolute) parameters of a single shell.

    Attributes:
        length: Arc length of the shell centreline.
        radius: Outer radius.
        thickness: Wall thickness.
        curvature: Bend rate per unit arc length.
        twist_from_parent: Rotation about the parent's tangent, in degrees.
        torsion: Torsion of the centreline (curve mode only, 0 otherwise).
    """
    length: float
    radius: float
    thickness: float
    curvature: float = 0.0
    twist_from_parent: float = 0.0
    torsion: float = 0.0

    def __add__(self, diff: TelescopeDiff) -> TelescopeParameters:
        """
        Accumulate a diff onto these absolute values.

        Length, radius, curvature and torsion are summed. Thickness is kept
        from the base (a diff carries no physical wall). Twist is taken from
        the diff, it is always relative to the immediate parent.
        """
        if not isinstance(diff, TelescopeDiff):
            return NotImplemented
        return TelescopeParameters(
            length=self.length + diff.length,
            radius=self.radius + diff.radius,
            thickness=self.thickness,
            curvature=self.curvature + diff.curvature,
            twist_from_parent=diff.twist_from_parent,
            torsion=self.torsion + diff.torsion,
        )

    def copy(self) -> TelescopeParameters:
        return replace(self)

    def as_tuple(self) -> tuple[float, ...]:
        return astuple(self)

    def validate(self, index: Optional[int] = None) -> None:
        """
        Check that the shell can physically exist.

        Raises:
            UnsatisfiableTelescopeError: If radius <= 0, length < 0 or thickness < 0.
        """
        label = f"Shell {index}" if index is not None else "Shell"
        problems = []
        if self.radius <= 0.0:
            problems.append(f"radius {self.radius:.6g} is not positive")
        if self.length < 0.0:
            problems.append(f"length {self.length:.6g} is negative")
        if self.thickness < 0.0:
            problems.append(f"thickness {self.thickness:.6g} is negative")

        if problems:
            msg = f"{label}: " + ", ".join(problems) + "."
            logger.error(msg)
            raise UnsatisfiableTelescopeError(msg)


@dataclass(frozen=True)
class TelescopeDiff:
    """
    Change in parameters from a parent shell to its child.

    Same fields as TelescopeParameters. `thickness` is carried for symmetry
    but ignored when the diff is accumulated.
    """
    length: float = 0.0
    radius: float = 0.0
    thickness: float = 0.0
    curvature: float = 0.0
    twist_from_parent: float = 0.0
    torsion: float = 0.0

    @staticmethod
    def default_child(wall_thickness: float = DEFAULT_WALL_THICKNESS) -> TelescopeDiff:
        """Same length and curvature as the parent, one wall thinner."""
        return TelescopeDiff(length=0.0, radius=-wall_thickness, thickness=wall_thickness)

    def as_tuple(self) -> tuple[float, ...]:
        return astuple(self)


PARAMETER_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(TelescopeParameters))
