"""
Configuration & Global Constants
================================
This module serves as the central registry for numeric defaults and output paths.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (wall thickness, sampling density,
   tolerances) from being scattered throughout the geometry code.
2. Consistency: Curve mode and diff mode must agree on the same defaults,
   otherwise shells built by the two paths would not be interchangeable.

Exports:
    DEFAULT_WALL_THICKNESS (float): Wall thickness of every shell built from a curve.
    DEFAULT_SAMPLE_INTERVAL (float): Distance between display samples on a curve.
    DEGENERATE_EPS (float): Below this, curvature/torsion are treated as zero.
    ARC_TOLERANCE (float): Slack allowed when evaluating a segment at its arc length.
    START_RADIUS_MARGIN (float): Extra radius added to the default outer shell.
    OUTPUT_PATH (str): Absolute path to the default output directory.
"""
import os
from pathlib import Path


def get_output_path(relative_path: str) -> str:
    """
    Get absolute path for generated files, relative to the project root.
    """
    # config.py is in src/telescopes/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Geometry defaults
DEFAULT_WALL_THICKNESS: float = 0.1
DEFAULT_SAMPLE_INTERVAL: float = 0.1
START_RADIUS_MARGIN: float = 0.1

# Numerical tolerances
DEGENERATE_EPS: float = 1e-9
ARC_TOLERANCE: float = 1e-6

OUTPUT_PATH: str = get_output_path("output")
