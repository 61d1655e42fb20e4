"""
Shell Chain (Rest Transforms)
=============================
Places concrete shells relative to each other.

Why is this file needed?
------------------------
1. Rest transforms: Each child's translation/rotation relative to its parent
   is a pure function of the two parameter records.
2. Hierarchy: The telescope is a path (shell i is the child of shell i-1), so
   it is stored as a flat list with parent indices instead of nested objects.

Local coordinates are (T, N, B) components: the shell tangent is the first axis.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, TYPE_CHECKING

import numpy as np
from scipy.spatial.transform import Rotation

from telescopes.model.frames import OrthonormalFrame
from telescopes.model.geometry_utils import as_vector, deg2rad
from telescopes.model.parameters import TelescopeParameters

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

TANGENT_AXIS = np.array([1.0, 0.0, 0.0])


def child_base_translation(parent: TelescopeParameters, child: TelescopeParameters) -> npt.NDArray[np.float64]:
    """Offset of the child's base from the parent's base, along the parent tangent."""
    return parent.length * TANGENT_AXIS


def child_base_rotation(parent: TelescopeParameters, child: TelescopeParameters) -> Rotation:
    """Twist of the child about the parent tangent (twist is stored in degrees)."""
    return Rotation.from_rotvec(deg2rad(child.twist_from_parent) * TANGENT_AXIS)


@dataclass(frozen=True, eq=False)
class ShellNode:
    """One shell with its rest transform relative to its parent."""
    index: int
    parent: Optional[int]
    parameters: TelescopeParameters
    base_translation: npt.NDArray[np.float64]
    base_rotation: Rotation

    @property
    def is_root(self) -> bool:
        return self.parent is None


@dataclass(frozen=True, eq=False)
class TelescopeStructure:
    """
    The ordered shell list of one telescope.

    Attributes:
        nodes: Shells from outermost (root) to innermost.
        root_frame: World frame of the root shell, already rolled by its twist.
        root_position: World position of the root shell's base.
    """
    nodes: tuple[ShellNode, ...]
    root_frame: OrthonormalFrame
    root_position: npt.NDArray[np.float64]

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[ShellNode]:
        return iter(self.nodes)

    def __getitem__(self, index: int) -> ShellNode:
        return self.nodes[index]

    @property
    def parameters(self) -> tuple[TelescopeParameters, ...]:
        return tuple(node.parameters for node in self.nodes)

    def world_poses(self) -> list[tuple[npt.NDArray[np.float64], Rotation]]:
        """
        Compose rest transforms root to leaf.

        Returns:
            One (position, rotation) pair per shell. The rotation maps local
            (T, N, B) coordinates of that shell to world coordinates.
        """
        position = self.root_position
        rotation = self.root_frame.rotation
        poses = [(position, rotation)]
        for node in self.nodes[1:]:
            position = position + rotation.apply(node.base_translation)
            rotation = rotation * node.base_rotation
            poses.append((position, rotation))
        return poses

    def world_frames(self) -> list[OrthonormalFrame]:
        return [OrthonormalFrame.from_rotation(rot) for _, rot in self.world_poses()]


def build_shell_chain(
    params: Sequence[TelescopeParameters],
    initial_frame: Optional[OrthonormalFrame] = None,
    initial_position: Optional[npt.ArrayLike] = None,
) -> TelescopeStructure:
    """
    Assign every concrete shell its parent link and rest transform.

    Args:
        params: Concrete parameters, outermost first (output of a synthesis call).
        initial_frame: World frame of the root's base. Defaults to identity.
        initial_position: World position of the root's base. Defaults to origin.
    """
    if len(params) == 0:
        raise ValueError("Cannot build a telescope without shells.")

    frame = initial_frame or OrthonormalFrame.identity()
    position = as_vector(initial_position if initial_position is not None else [0.0, 0.0, 0.0])

    root = params[0]
    nodes = [
        ShellNode(
            index=0,
            parent=None,
            parameters=root,
            base_translation=np.zeros(3),
            base_rotation=Rotation.identity(),
        )
    ]
    for i in range(1, len(params)):
        parent_params, child_params = params[i - 1], params[i]
        nodes.append(
            ShellNode(
                index=i,
                parent=i - 1,
                parameters=child_params,
                base_translation=child_base_translation(parent_params, child_params),
                base_rotation=child_base_rotation(parent_params, child_params),
            )
        )

    logger.debug(f"Built shell chain with {len(nodes)} shells.")
    return TelescopeStructure(
        nodes=tuple(nodes),
        root_frame=frame.rolled(deg2rad(root.twist_from_parent)),
        root_position=position,
    )
