import matplotlib

# Headless backend for plot tests; must run before pyplot is imported
matplotlib.use("Agg")

import numpy as np
import pytest

from telescopes.model.frames import OrthonormalFrame


@pytest.fixture
def tilted_frame() -> OrthonormalFrame:
    return OrthonormalFrame.from_tangent_normal([1.0, 2.0, 0.5], [0.0, 0.0, 1.0])


@pytest.fixture
def origin() -> np.ndarray:
    return np.zeros(3)
