"""
Design State (Data Model)
=========================
This module defines the central data structure for one telescope design.

Why is this file needed?
------------------------
1. State Management: It holds the inputs of either synthesis path together
   with the latest results in one place.
2. Persistence: This object is what gets serialized by the IO manager.

Classes:
    SynthesisMode: Which input path the design uses.
    CurveInputs: Inputs of a curve-mode design.
    TelescopeDesign: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
import logging
from typing import Optional, TYPE_CHECKING

import numpy as np

from telescopes.config import DEFAULT_SAMPLE_INTERVAL, DEFAULT_WALL_THICKNESS
from telescopes.model.curve import TorsionImpulseCurve
from telescopes.model.frames import OrthonormalFrame
from telescopes.model.parameters import TelescopeDiff, TelescopeParameters
from telescopes.model.shells import TelescopeStructure, build_shell_chain
from telescopes.model.synthesis import ShellEntry, synthesize_from_curve, synthesize_from_diffs

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class SynthesisMode(StrEnum):
    DIFF = "diff"
    CURVE = "curve"


@dataclass
class CurveInputs:
    curvature: float = 0.5
    torsion: float = 0.1
    impulses: list[float] = field(default_factory=lambda: [0.0, 0.2])
    arc_steps: list[float] = field(default_factory=lambda: [2.0, 1.5])
    initial_frame: OrthonormalFrame = field(default_factory=OrthonormalFrame.identity)
    initial_position: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    sample_interval: float = DEFAULT_SAMPLE_INTERVAL
    start_radius: Optional[float] = None


def default_entries(num_shells: int = 4) -> list[ShellEntry]:
    """A straight telescope: one root followed by default child diffs (two walls per level)."""
    root = TelescopeParameters(length=1.0, radius=2 * DEFAULT_WALL_THICKNESS * num_shells,
                               thickness=DEFAULT_WALL_THICKNESS)
    child = TelescopeDiff.default_child(DEFAULT_WALL_THICKNESS)
    return [root] + [child] * (num_shells - 1)


@dataclass
class TelescopeDesign:
    """
    Holds the inputs and latest results of one telescope.

    Logic:
    1. Check 'mode'
    2. If DIFF -> use 'entries' (+ optional 'wall_thickness'), placed at 'initial_frame'
    3. If CURVE -> use 'curve_inputs'
    """
    name: str = "Untitled Telescope"
    mode: SynthesisMode = SynthesisMode.DIFF

    # Diff-mode inputs
    entries: list[ShellEntry] = field(default_factory=default_entries)
    wall_thickness: Optional[float] = None
    initial_frame: OrthonormalFrame = field(default_factory=OrthonormalFrame.identity)
    initial_position: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))

    # Curve-mode inputs
    curve_inputs: CurveInputs = field(default_factory=CurveInputs)

    # Results (filled by synthesize)
    parameters: tuple[TelescopeParameters, ...] = ()
    curve: Optional[TorsionImpulseCurve] = None
    results_mode: Optional[SynthesisMode] = None

    def synthesize(self) -> tuple[TelescopeParameters, ...]:
        """
        Run the synthesis path selected by `mode` and store the results.

        On failure the previous results are left untouched.
        """
        match self.mode:
            case SynthesisMode.DIFF:
                params = synthesize_from_diffs(self.entries, self.wall_thickness)
                curve = None
            case SynthesisMode.CURVE:
                ci = self.curve_inputs
                curve, params = synthesize_from_curve(
                    curvature=ci.curvature,
                    torsion=ci.torsion,
                    impulses=ci.impulses,
                    arc_steps=ci.arc_steps,
                    initial_frame=ci.initial_frame,
                    initial_position=ci.initial_position,
                    start_radius=ci.start_radius,
                    sample_interval=ci.sample_interval,
                )
            case _:
                raise ValueError(f"Unknown synthesis mode: {self.mode}")

        self.parameters = params
        self.curve = curve
        self.results_mode = self.mode
        logger.info(f"Design '{self.name}' synthesized in {self.mode} mode ({len(params)} shells).")
        return params

    def build_structure(self) -> TelescopeStructure:
        """
        Shell chain for the latest results.

        Results from another mode are stale and get re-synthesized first. Curve
        designs start at the curve start, diff designs at `initial_frame` and
        `initial_position`.
        """
        if not self.parameters or self.results_mode != self.mode:
            self.synthesize()

        if self.mode == SynthesisMode.CURVE:
            ci = self.curve_inputs
            return build_shell_chain(self.parameters, ci.initial_frame, ci.initial_position)
        return build_shell_chain(self.parameters, self.initial_frame, self.initial_position)

    def reset(self) -> None:
        """Clear all data for a new design"""
        self.name = "Untitled Telescope"
        self.mode = SynthesisMode.DIFF
        self.entries = default_entries()
        self.wall_thickness = None
        self.initial_frame = OrthonormalFrame.identity()
        self.initial_position = np.zeros(3)
        self.curve_inputs = CurveInputs()
        self.parameters = ()
        self.curve = None
        self.results_mode = None
        logger.info("Design state has been reset.")
