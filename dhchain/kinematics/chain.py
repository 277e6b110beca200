"""
ManipulatorChain: an ordered sequence of JointLinks on a fixed base.

The chain owns its links: it copies the links it is given, so the only
way to move it is through the chain or the link objects it exposes.
Joint variables live in the links alone; ``joint_vector`` and
``dh_table`` are read from them on every access.

Usage:
    chain = ManipulatorChain([
        JointLink.revolute(d=0.0, a=1.0, alpha=0.0, name="shoulder"),
        JointLink.revolute(d=0.0, a=1.0, alpha=0.0, name="elbow"),
    ])
    chain.update_joint_states([math.pi / 2, 0.0])
    T = chain.tool_transform()
    J = chain.jacobian()
"""

from __future__ import annotations

import copy
import logging
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np

from dhchain.config.kinematics_config import get_kinematics_config
from dhchain.kinematics import transforms as tf
from dhchain.kinematics.jacobian import geometric_jacobian
from dhchain.kinematics.link import JointLink, KinematicsValidationError

logger = logging.getLogger(__name__)


class ManipulatorChain:
    """Serial rigid-link manipulator described by DH links."""

    def __init__(
        self,
        links: Iterable[JointLink],
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        base: Optional[np.ndarray] = None,
        gravity: Optional[Sequence[float]] = None,
    ) -> None:
        defaults = get_kinematics_config().get("chain")

        owned: List[JointLink] = []
        for i, link in enumerate(links):
            if not isinstance(link, JointLink):
                raise KinematicsValidationError(
                    f"Element {i} is {type(link).__name__}, expected JointLink"
                )
            owned.append(copy.deepcopy(link))
        if not owned:
            raise KinematicsValidationError("A manipulator chain needs at least one link")
        self._links = owned

        self.name: str = name if name is not None else defaults["name"]
        self.description: str = (
            description if description is not None else defaults["description"]
        )

        base_tf = np.eye(4) if base is None else np.asarray(base, dtype=np.float64)
        if base_tf.shape != (4, 4):
            raise KinematicsValidationError(f"base must be 4x4, got shape {base_tf.shape}")
        self._base = base_tf.copy()

        g = np.asarray(defaults["gravity"] if gravity is None else gravity, dtype=np.float64)
        if g.size != 3:
            raise KinematicsValidationError(f"gravity must have 3 elements, got shape {g.shape}")
        self.gravity = g.reshape(3).copy()

        logger.debug("Built chain '%s' with %d links", self.name, len(self._links))

    # ----- structure -----

    @property
    def links(self) -> tuple[JointLink, ...]:
        return tuple(self._links)

    def link(self, index: int) -> JointLink:
        return self._links[index]

    @property
    def n_links(self) -> int:
        return len(self._links)

    @property
    def n_joints(self) -> int:
        # one joint per link
        return len(self._links)

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[JointLink]:
        return iter(self._links)

    @property
    def base(self) -> np.ndarray:
        """World -> base transform (copy)."""
        return self._base.copy()

    # ----- joint state -----

    @property
    def joint_vector(self) -> np.ndarray:
        """Current joint variables read from the links."""
        return np.array([link.q for link in self._links], dtype=np.float64)

    def set_joint_variable(self, index: int, value: float) -> None:
        """Set joint *index*; the link saturates the value to its limits."""
        self._links[index].set_joint_variable(value)

    def update_joint_states(self, q: Sequence[float]) -> None:
        """Write every joint variable from *q* (each clamped by its link)."""
        values = np.asarray(q, dtype=np.float64).reshape(-1)
        if values.shape != (self.n_joints,):
            raise KinematicsValidationError(
                f"Expected {self.n_joints} joint values, got shape {values.shape}"
            )
        if not np.all(np.isfinite(values)):
            raise KinematicsValidationError(f"joint values must be finite, got {values.tolist()}")
        for link, value in zip(self._links, values):
            link.set_joint_variable(value)

    @property
    def dh_table(self) -> np.ndarray:
        """Standard DH table, one [theta, d, a, alpha] row per link."""
        return np.vstack([link.dh_row() for link in self._links])

    # ----- forward kinematics -----

    def local_transforms(self) -> List[np.ndarray]:
        return tf.local_transforms(self)

    def base_transforms(self) -> List[np.ndarray]:
        """Frames T_0_i for i = 1..N in base coordinates."""
        return tf.chain_base_transforms(self)

    def world_transforms(self) -> List[np.ndarray]:
        return tf.world_transforms(self)

    def tool_transform(self) -> np.ndarray:
        """Base -> end-effector transform."""
        return tf.tool_transform(self)

    def world_tool_transform(self) -> np.ndarray:
        """World -> end-effector transform."""
        return self._base @ tf.tool_transform(self)

    def tool_position(self) -> np.ndarray:
        return tf.end_effector_position(self)

    def joint_positions(self) -> np.ndarray:
        """3 x N joint positions in base coordinates."""
        return tf.joint_positions(self)

    # ----- differential kinematics -----

    def jacobian(self, axis_frame: Optional[str] = None) -> np.ndarray:
        """6 x N geometric Jacobian at the current configuration."""
        return geometric_jacobian(self, axis_frame=axis_frame)

    def __repr__(self) -> str:
        return f"ManipulatorChain(name={self.name!r}, n_links={self.n_links})"
