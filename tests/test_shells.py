import math

import numpy as np
import pytest

from telescopes.model.parameters import TelescopeParameters
from telescopes.model.shells import build_shell_chain, child_base_rotation, child_base_translation


@pytest.fixture
def straight_params():
    return (
        TelescopeParameters(length=2.0, radius=0.5, thickness=0.1),
        TelescopeParameters(length=1.5, radius=0.4, thickness=0.1, twist_from_parent=90.0),
        TelescopeParameters(length=1.0, radius=0.3, thickness=0.1, twist_from_parent=-45.0),
    )


def test_child_translation_is_parent_length_along_tangent(straight_params):
    parent, child, _ = straight_params
    np.testing.assert_allclose(child_base_translation(parent, child), [2.0, 0.0, 0.0])


def test_child_rotation_twists_about_tangent(straight_params):
    parent, child, _ = straight_params
    rot = child_base_rotation(parent, child)
    np.testing.assert_allclose(rot.apply([1.0, 0.0, 0.0]), [1.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(rot.apply([0.0, 1.0, 0.0]), [0.0, 0.0, 1.0], atol=1e-12)


def test_rest_transforms_are_deterministic(straight_params):
    parent, child, _ = straight_params
    first = child_base_rotation(parent, child).as_quat()
    second = child_base_rotation(parent, child).as_quat()
    np.testing.assert_array_equal(first, second)
    np.testing.assert_array_equal(child_base_translation(parent, child), child_base_translation(parent, child))


def test_chain_links_each_shell_to_previous(straight_params):
    structure = build_shell_chain(straight_params)

    assert len(structure) == 3
    assert structure[0].is_root
    assert [node.parent for node in structure] == [None, 0, 1]
    assert structure.parameters == straight_params
    np.testing.assert_allclose(structure[0].base_translation, 0.0)
    np.testing.assert_allclose(structure[0].base_rotation.as_matrix(), np.eye(3))


def test_world_poses_stack_shells_along_tangent(straight_params):
    poses = build_shell_chain(straight_params).world_poses()

    positions = [p for p, _ in poses]
    np.testing.assert_allclose(positions, [[0, 0, 0], [2.0, 0, 0], [3.5, 0, 0]], atol=1e-12)

    total_twist = math.radians(90.0 - 45.0)
    _, last_rot = poses[-1]
    np.testing.assert_allclose(
        last_rot.apply([0.0, 1.0, 0.0]), [0.0, math.cos(total_twist), math.sin(total_twist)], atol=1e-12
    )


def test_root_placement_uses_initial_frame_and_root_twist(tilted_frame):
    params = (
        TelescopeParameters(length=1.0, radius=0.5, thickness=0.1, twist_from_parent=30.0),
        TelescopeParameters(length=1.0, radius=0.4, thickness=0.1),
    )
    structure = build_shell_chain(params, tilted_frame, [1.0, 1.0, 1.0])

    assert structure.root_frame.allclose(tilted_frame.rolled(math.radians(30.0)))
    frames = structure.world_frames()
    positions = [p for p, _ in structure.world_poses()]
    np.testing.assert_allclose(positions[1], np.array([1.0, 1.0, 1.0]) + tilted_frame.T, atol=1e-12)
    np.testing.assert_allclose(frames[1].T, tilted_frame.T, atol=1e-12)


def test_chain_requires_shells():
    with pytest.raises(ValueError):
        build_shell_chain([])
