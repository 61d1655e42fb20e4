import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from telescopes.model.frames import OrthonormalFrame


def test_identity_is_orthonormal():
    frame = OrthonormalFrame.identity()
    assert frame.is_orthonormal()
    np.testing.assert_allclose(frame.matrix, np.eye(3))


def test_from_tangent_normal_orthogonalizes():
    frame = OrthonormalFrame.from_tangent_normal([0.0, 0.0, 2.0], [1.0, 0.0, 1.0])
    np.testing.assert_allclose(frame.T, [0.0, 0.0, 1.0])
    np.testing.assert_allclose(frame.N, [1.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(frame.B, np.cross(frame.T, frame.N))
    assert frame.is_orthonormal()


def test_from_tangent_normal_rejects_parallel_vectors():
    with pytest.raises(ValueError):
        OrthonormalFrame.from_tangent_normal([1.0, 0.0, 0.0], [2.0, 0.0, 0.0])


def test_from_tangent_normal_rejects_zero_tangent():
    with pytest.raises(ValueError):
        OrthonormalFrame.from_tangent_normal([0.0, 0.0, 0.0], [0.0, 1.0, 0.0])


def test_constructor_rejects_non_orthonormal_axes():
    with pytest.raises(ValueError):
        OrthonormalFrame([1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 0.0, 1.0])


def test_constructor_rejects_left_handed_axes():
    with pytest.raises(ValueError):
        OrthonormalFrame([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, -1.0])


def test_rotations_keep_frame_orthonormal(tilted_frame):
    rotations = Rotation.from_rotvec([[0.3, -1.2, 2.0], [4.0, 0.1, 0.0], [0.0, 0.0, -7.5]])
    frame = tilted_frame
    for rot in rotations:
        frame = frame.rotated_by(rot)
        assert frame.is_orthonormal(tol=1e-12)


def test_rotated_by_returns_new_frame(tilted_frame):
    before = tilted_frame.matrix.copy()
    rotated = tilted_frame.rotated_by(Rotation.from_rotvec([0.0, 0.0, 1.0]))
    np.testing.assert_allclose(tilted_frame.matrix, before)
    assert not rotated.allclose(tilted_frame)


def test_axes_are_read_only():
    frame = OrthonormalFrame.identity()
    with pytest.raises(ValueError):
        frame.T[0] = 5.0


def test_rolled_keeps_tangent_and_turns_normal(tilted_frame):
    rolled = tilted_frame.rolled(np.pi / 2)
    np.testing.assert_allclose(rolled.T, tilted_frame.T, atol=1e-12)
    np.testing.assert_allclose(rolled.N, tilted_frame.B, atol=1e-12)
    np.testing.assert_allclose(rolled.B, -tilted_frame.N, atol=1e-12)


def test_rotation_maps_identity_to_frame(tilted_frame):
    frame = OrthonormalFrame.identity().rotated_by(tilted_frame.rotation)
    assert frame.allclose(tilted_frame)


def test_to_world_uses_columns(tilted_frame):
    world = tilted_frame.to_world([2.0, -1.0, 0.5])
    expected = 2.0 * tilted_frame.T - 1.0 * tilted_frame.N + 0.5 * tilted_frame.B
    np.testing.assert_allclose(world, expected)


def test_from_matrix_round_trips_rotation(tilted_frame):
    assert OrthonormalFrame.from_matrix(tilted_frame.matrix).allclose(tilted_frame)
    assert OrthonormalFrame.from_rotation(tilted_frame.rotation).allclose(tilted_frame)
