"""
Kinematics for serial DH manipulators.

Provides the link model, the chain aggregate, transform composition and
the geometric Jacobian.
"""

from dhchain.kinematics.chain import ManipulatorChain
from dhchain.kinematics.dh_params import DHParam, planar_arm, scara_arm
from dhchain.kinematics.jacobian import geometric_jacobian, numerical_jacobian
from dhchain.kinematics.link import JointLink, JointType, KinematicsValidationError
from dhchain.kinematics.transforms import (
    base_transforms,
    dh_transform,
    dh_transforms,
    joint_positions,
    local_transforms,
    tool_transform,
    world_transforms,
)

__all__ = [
    "DHParam",
    "JointLink",
    "JointType",
    "KinematicsValidationError",
    "ManipulatorChain",
    "base_transforms",
    "dh_transform",
    "dh_transforms",
    "geometric_jacobian",
    "joint_positions",
    "local_transforms",
    "numerical_jacobian",
    "planar_arm",
    "scara_arm",
    "tool_transform",
    "world_transforms",
]
