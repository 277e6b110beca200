"""
Homogeneous transforms and chain composition.

Turns DH rows into 4x4 link transforms and composes them into frames
expressed in the chain's base coordinates.  Every function here is a
pure function of its inputs; nothing is cached.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from dhchain.config.kinematics_config import get_kinematics_config

if TYPE_CHECKING:
    from dhchain.kinematics.chain import ManipulatorChain

logger = logging.getLogger(__name__)


def dh_transform(dh_row: Sequence[float]) -> np.ndarray:
    """Compute the 4x4 homogeneous transform for one DH row (standard DH).

    Args:
        dh_row: [theta, d, a, alpha].

    Returns:
        4x4 homogeneous transformation matrix from frame i-1 to frame i.
    """
    theta, d, a, alpha = (float(v) for v in dh_row)
    ct, st = math.cos(theta), math.sin(theta)
    ca, sa = math.cos(alpha), math.sin(alpha)

    return np.array([
        [ct,   -st*ca,   st*sa,  a*ct],
        [st,    ct*ca,  -ct*sa,  a*st],
        [0.0,   sa,      ca,     d],
        [0.0,   0.0,     0.0,    1.0],
    ], dtype=np.float64)


def dh_transforms(dh_table: np.ndarray) -> List[np.ndarray]:
    """Return one link transform per row of an N x 4 DH table."""
    table = np.atleast_2d(np.asarray(dh_table, dtype=np.float64))
    if table.shape[1] != 4:
        raise ValueError(f"DH table must be N x 4, got shape {table.shape}")
    return [dh_transform(row) for row in table]


def local_transforms(chain: ManipulatorChain) -> List[np.ndarray]:
    """Link-to-link transforms for the chain's current configuration."""
    return [link.local_transform() for link in chain.links]


def base_transforms(transforms: Iterable[np.ndarray]) -> List[np.ndarray]:
    """Compose link transforms into frames expressed in base coordinates.

    The accumulated product sits on the left and each new link transform
    is applied on the right, so ``result[i]`` is T_0_i.  The chain's
    world base transform is *not* included.

    Args:
        transforms: Link transforms T_{i-1}_i, base to tip.

    Returns:
        List of 4x4 transforms, same length as the input.
    """
    result: List[np.ndarray] = []
    T = np.eye(4, dtype=np.float64)
    for local in transforms:
        T = T @ np.asarray(local, dtype=np.float64)
        result.append(T.copy())
    return result


def chain_base_transforms(chain: ManipulatorChain) -> List[np.ndarray]:
    return base_transforms(local_transforms(chain))


def tool_transform(chain: ManipulatorChain) -> np.ndarray:
    """End-effector pose in base coordinates."""
    return chain_base_transforms(chain)[-1]


def end_effector_position(chain: ManipulatorChain) -> np.ndarray:
    """Convenience: return the 3D position (x, y, z) of the end-effector in base coordinates."""
    return tool_transform(chain)[:3, 3].copy()


def joint_positions(chain: ManipulatorChain) -> np.ndarray:
    """Return a 3 x N matrix of joint positions in base coordinates.

    Column 0 is the base origin.  Column i (i >= 1) is the origin of
    frame i-1, i.e. the translation of ``base_transforms[i-1]``: a joint
    sits at the start of its own link.
    """
    frames = chain_base_transforms(chain)
    positions = np.zeros((3, len(frames)), dtype=np.float64)
    for i in range(1, len(frames)):
        positions[:, i] = frames[i - 1][:3, 3]
    return positions


def world_transforms(chain: ManipulatorChain) -> List[np.ndarray]:
    """Frames of the chain expressed in world coordinates (base pose applied)."""
    base = chain.base
    return [base @ T for T in chain_base_transforms(chain)]


# ---------------------------------------------------------------------------
# Homogeneous matrix helpers
# ---------------------------------------------------------------------------


def homog_to_rot(T: np.ndarray) -> np.ndarray:
    """Top-left 3x3 rotation block of a homogeneous transform."""
    return np.asarray(T, dtype=np.float64)[:3, :3].copy()


def homog_to_trans(T: np.ndarray) -> np.ndarray:
    """Translation 3-vector of a homogeneous transform."""
    return np.asarray(T, dtype=np.float64)[:3, 3].copy()


def homog_to_rt(T: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Split a homogeneous transform into (R, t)."""
    return homog_to_rot(T), homog_to_trans(T)


def rt_to_homog(R: np.ndarray, t: Sequence[float]) -> np.ndarray:
    """Assemble a 4x4 homogeneous transform from a rotation and a translation."""
    R = np.asarray(R, dtype=np.float64)
    t = np.asarray(t, dtype=np.float64).reshape(-1)
    if R.shape != (3, 3):
        raise ValueError(f"Rotation must be 3x3, got shape {R.shape}")
    if t.shape != (3,):
        raise ValueError(f"Translation must have 3 elements, got shape {t.shape}")
    T = np.eye(4, dtype=np.float64)
    T[:3, :3] = R
    T[:3, 3] = t
    return T


def rot_to_rpy(
    R: np.ndarray, tolerance: Optional[float] = None
) -> tuple[np.ndarray, float, float, float]:
    """Extract roll/pitch/yaw (X-Y-Z fixed angles) from a rotation matrix.

    Returns ``(T, roll, pitch, yaw)`` where ``T`` maps RPY rates to
    angular velocity.  At pitch = +-pi/2 the decomposition is singular:
    roll is pinned to zero and yaw is taken from the third column.
    """
    R = np.asarray(R, dtype=np.float64)
    if R.ndim != 2 or R.shape[0] < 3 or R.shape[1] < 3:
        raise ValueError(f"Rotation must be at least 3x3, got shape {R.shape}")
    if tolerance is None:
        tolerance = get_kinematics_config().get("rpy", "singularity_tolerance")

    r11, r21, r31 = R[0, 0], R[1, 0], R[2, 0]
    r32, r33 = R[2, 1], R[2, 2]

    pitch = math.atan2(-r31, math.hypot(r11, r21))
    if abs(math.cos(pitch)) < tolerance:
        logger.warning("RPY extraction at a singular configuration (pitch=%.6f)", pitch)
        roll = 0.0
        yaw = math.atan2(R[1, 2], R[0, 2])
    else:
        roll = math.atan2(r32, r33)
        yaw = math.atan2(r21, r11)

    sa, ca = math.sin(roll), math.cos(roll)
    sb, cb = math.sin(pitch), math.cos(pitch)
    T = np.array([
        [1.0,  0.0, -sb],
        [0.0,  ca,   sa*cb],
        [0.0, -sa,   ca*cb],
    ], dtype=np.float64)
    return T, roll, pitch, yaw


def rpy_to_rot(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Rotation matrix for roll/pitch/yaw about fixed X, Y, Z axes."""
    return Rotation.from_euler("xyz", [roll, pitch, yaw]).as_matrix()
