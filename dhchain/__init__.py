"""
dhchain
-------
Forward kinematics and geometric Jacobians for serial manipulators
described by Denavit-Hartenberg links.
"""

from dhchain.kinematics import (
    JointLink,
    JointType,
    KinematicsValidationError,
    ManipulatorChain,
    geometric_jacobian,
)

__version__ = "0.1.0"

__all__ = [
    "JointLink",
    "JointType",
    "KinematicsValidationError",
    "ManipulatorChain",
    "geometric_jacobian",
]
