"""
Input/Output Manager (HDF5 + VTK)
Handles saving and loading a TelescopeDesign to .h5 files and exporting
curves and shell axes to .vtp files for ParaView.
"""
import logging
import os
from importlib.metadata import version, PackageNotFoundError

import h5py
import numpy as np
import pyvista as pv

from telescopes.model.curve import TorsionImpulseCurve
from telescopes.model.frames import OrthonormalFrame
from telescopes.model.geometry_utils import polyline_lengths
from telescopes.model.parameters import PARAMETER_FIELDS, TelescopeDiff, TelescopeParameters
from telescopes.model.shells import TelescopeStructure
from telescopes.model.state import CurveInputs, SynthesisMode, TelescopeDesign

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("telescopes")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


class IOManager:

    @staticmethod
    def save_design(design: TelescopeDesign, filepath: str) -> None:
        logger.info(f"Saving design to: {filepath}")
        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION
                f.attrs["design_name"] = design.name
                f.attrs["mode"] = str(design.mode)

                # --- 1. SAVE INPUTS ---
                if design.mode == SynthesisMode.DIFF:
                    grp = f.create_group("diff_inputs")
                    root, diffs = design.entries[0], design.entries[1:]
                    grp.create_dataset("root", data=np.array(root.as_tuple()))
                    grp.create_dataset(
                        "diffs",
                        data=np.array([d.as_tuple() for d in diffs]).reshape(-1, len(PARAMETER_FIELDS)),
                    )
                    # HDF5 attributes cannot hold None; absence means "use root thickness"
                    if design.wall_thickness is not None:
                        grp.attrs["wall_thickness"] = design.wall_thickness
                    grp.create_dataset("initial_frame", data=design.initial_frame.matrix)
                    grp.create_dataset("initial_position", data=np.asarray(design.initial_position))
                else:
                    ci = design.curve_inputs
                    grp = f.create_group("curve_inputs")
                    grp.attrs["curvature"] = ci.curvature
                    grp.attrs["torsion"] = ci.torsion
                    grp.attrs["sample_interval"] = ci.sample_interval
                    if ci.start_radius is not None:
                        grp.attrs["start_radius"] = ci.start_radius
                    grp.create_dataset("impulses", data=np.array(ci.impulses, dtype=np.float64))
                    grp.create_dataset("arc_steps", data=np.array(ci.arc_steps, dtype=np.float64))
                    grp.create_dataset("initial_frame", data=ci.initial_frame.matrix)
                    grp.create_dataset("initial_position", data=np.asarray(ci.initial_position))

                # --- 2. SAVE RESULTS ---
                if design.parameters:
                    data = np.array([p.as_tuple() for p in design.parameters])
                    dset = f.create_dataset("parameters", data=data)
                    dset.attrs["columns"] = np.array(PARAMETER_FIELDS, dtype=h5py.string_dtype())
                    logger.debug(f"Saved {len(design.parameters)} shells.")

                if design.curve is not None:
                    f.create_dataset("points", data=np.asarray(design.curve.points), compression="gzip")
                    logger.debug(f"Saved {len(design.curve.points)} curve samples.")

            logger.info(f"Design saved to: {filepath}")

        except Exception as e:
            logger.exception(f"Failed to save design: {e}")
            raise e

    @staticmethod
    def load_design(filepath: str) -> TelescopeDesign:
        """
        Load the inputs of a design and synthesize it again.

        Stored results are only compared against the fresh ones; a mismatch
        is logged, the fresh results win.
        """
        logger.info(f"Loading design from: {filepath}")
        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)

        with h5py.File(filepath, "r") as f:
            design = TelescopeDesign()
            design.name = str(f.attrs.get("design_name", design.name))
            design.mode = SynthesisMode(str(f.attrs.get("mode", SynthesisMode.DIFF)))

            # --- 1. LOAD INPUTS ---
            if design.mode == SynthesisMode.DIFF:
                grp = f["diff_inputs"]
                root = TelescopeParameters(*(float(v) for v in grp["root"][()]))
                diffs = [TelescopeDiff(*(float(v) for v in row)) for row in grp["diffs"][()]]
                design.entries = [root] + diffs
                if "wall_thickness" in grp.attrs:
                    design.wall_thickness = float(grp.attrs["wall_thickness"])
                if "initial_frame" in grp:
                    design.initial_frame = OrthonormalFrame.from_matrix(grp["initial_frame"][()])
                    design.initial_position = np.array(grp["initial_position"][()], dtype=np.float64)
            else:
                grp = f["curve_inputs"]
                design.curve_inputs = CurveInputs(
                    curvature=float(grp.attrs["curvature"]),
                    torsion=float(grp.attrs["torsion"]),
                    impulses=[float(v) for v in grp["impulses"][()]],
                    arc_steps=[float(v) for v in grp["arc_steps"][()]],
                    initial_frame=OrthonormalFrame.from_matrix(grp["initial_frame"][()]),
                    initial_position=np.array(grp["initial_position"][()], dtype=np.float64),
                    sample_interval=float(grp.attrs["sample_interval"]),
                    start_radius=float(grp.attrs["start_radius"]) if "start_radius" in grp.attrs else None,
                )

            stored = np.array(f["parameters"][()]) if "parameters" in f else None

        # --- 2. RE-SYNTHESIZE ---
        design.synthesize()
        if stored is not None:
            fresh = np.array([p.as_tuple() for p in design.parameters])
            if stored.shape != fresh.shape or not np.allclose(stored, fresh):
                logger.warning("Stored shell parameters differ from re-synthesized ones; using fresh values.")

        logger.info(f"Design loaded from: {filepath}")
        return design

    # ---- EXPORT HELPERS ----
    @staticmethod
    def export_curve_to_vtk(curve: TorsionImpulseCurve, dest_path: str) -> pv.PolyData:
        """
        Export the sampled curve as a VTK polyline with an 'arc_length' point array.
        """
        os.makedirs(os.path.dirname(os.path.abspath(dest_path)), exist_ok=True)

        poly = pv.lines_from_points(np.asarray(curve.points))
        poly.point_data["arc_length"] = polyline_lengths(np.asarray(curve.points))

        poly.save(dest_path)
        logger.info(f"Curve exported to: {dest_path}")
        return poly

    @staticmethod
    def export_shells_to_vtk(structure: TelescopeStructure, dest_path: str) -> pv.PolyData:
        """
        Export each shell's axis (base to base + length along its tangent) as a line cell,
        with radius/thickness/index as cell data.
        """
        os.makedirs(os.path.dirname(os.path.abspath(dest_path)), exist_ok=True)

        points = []
        for node, (position, rotation) in zip(structure, structure.world_poses()):
            points.append(position)
            points.append(position + rotation.apply([node.parameters.length, 0.0, 0.0]))

        n = len(structure)
        lines = np.column_stack((np.full(n, 2), 2 * np.arange(n), 2 * np.arange(n) + 1)).ravel()
        poly = pv.PolyData(np.array(points), lines=lines)
        poly.cell_data["shell_index"] = np.arange(n)
        poly.cell_data["radius"] = np.array([node.parameters.radius for node in structure])
        poly.cell_data["thickness"] = np.array([node.parameters.thickness for node in structure])

        poly.save(dest_path)
        logger.info(f"{n} shell axes exported to: {dest_path}")
        return poly
