"""
Geometric Jacobian of a ManipulatorChain.

For joint i, with p_e the tool position, p_i the joint position
(column i of ``joint_positions``) and z_i the joint axis:

    revolute : J[:3, i] = z_i x (p_e - p_i),  J[3:, i] = z_i
    prismatic: J[:3, i] = z_i,                J[3:, i] = 0

By default z_i is the third column of link i's *local* transform.  With
``axis_frame="base"`` it is the z-axis of frame i-1 in base coordinates,
which is the axis joint i actually moves about once earlier joints are
deflected.

Everything is recomputed from the links on each call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import numpy as np

from dhchain.config.kinematics_config import get_kinematics_config
from dhchain.kinematics import transforms as tf

if TYPE_CHECKING:
    from dhchain.kinematics.chain import ManipulatorChain

logger = logging.getLogger(__name__)

AXIS_FRAMES = ("local", "base")


def _joint_axes(chain: ManipulatorChain, axis_frame: str) -> np.ndarray:
    """3 x N matrix of joint axes."""
    if axis_frame == "local":
        return np.column_stack([link.joint_axis() for link in chain.links])

    frames = tf.chain_base_transforms(chain)
    axes = np.zeros((3, len(frames)), dtype=np.float64)
    axes[:, 0] = (0.0, 0.0, 1.0)
    for i in range(1, len(frames)):
        axes[:, i] = frames[i - 1][:3, 2]
    return axes


def geometric_jacobian(
    chain: ManipulatorChain, axis_frame: Optional[str] = None
) -> np.ndarray:
    """Compute the 6 x N geometric Jacobian (base coordinates).

    Args:
        chain: Manipulator at its current configuration.
        axis_frame: 'local' or 'base'.  Defaults to the configured
            ``jacobian.axis_frame`` ('local').

    Returns:
        6 x N array, linear rows first.
    """
    if axis_frame is None:
        axis_frame = get_kinematics_config().get("jacobian", "axis_frame")
    if axis_frame not in AXIS_FRAMES:
        raise ValueError(f"Invalid axis_frame '{axis_frame}', must be one of {AXIS_FRAMES}")

    p_ee = tf.end_effector_position(chain)
    positions = tf.joint_positions(chain)
    axes = _joint_axes(chain, axis_frame)

    J = np.zeros((6, chain.n_joints), dtype=np.float64)
    for i, link in enumerate(chain.links):
        z_i = axes[:, i]
        if link.is_revolute:
            J[:3, i] = np.cross(z_i, p_ee - positions[:, i])
            J[3:, i] = z_i
        else:
            J[:3, i] = z_i
    return J


def numerical_jacobian(chain: ManipulatorChain, epsilon: Optional[float] = None) -> np.ndarray:
    """Linear-velocity Jacobian (3 x N) by central differences of the tool position.

    The perturbation is applied to a copy of the DH table, so joint
    limits do not truncate it and the chain itself is left untouched.
    """
    if epsilon is None:
        epsilon = get_kinematics_config().get("jacobian", "fd_epsilon")
    if epsilon <= 0:
        raise ValueError(f"epsilon must be positive, got {epsilon}")

    table = chain.dh_table

    def _tool_pos(dh: np.ndarray) -> np.ndarray:
        return tf.base_transforms(tf.dh_transforms(dh))[-1][:3, 3]

    Jv = np.zeros((3, chain.n_joints), dtype=np.float64)
    for i, link in enumerate(chain.links):
        col = 0 if link.is_revolute else 1
        plus, minus = table.copy(), table.copy()
        plus[i, col] += epsilon
        minus[i, col] -= epsilon
        Jv[:, i] = (_tool_pos(plus) - _tool_pos(minus)) / (2.0 * epsilon)
    return Jv
