"""
Ready-made DH link tables.

Convention: Standard DH
  - theta : joint angle (rad)
  - d     : link offset along z_{i-1}
  - a     : link length along x_i
  - alpha : link twist about x_i (rad)

Each factory returns a fresh list of JointLinks so callers can hand it
straight to a ManipulatorChain.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from dhchain.kinematics.link import JointLink, JointType


@dataclass(frozen=True)
class DHParam:
    """A single row of a DH parameter table plus the joint it belongs to."""
    theta: float  # joint angle or its offset (rad)
    d: float      # link offset or its offset
    a: float      # link length
    alpha: float  # link twist (rad)
    joint_type: JointType = JointType.REVOLUTE

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.theta, self.d, self.a, self.alpha)

    def to_link(self, name: str, **kwargs) -> JointLink:
        return JointLink(self.as_tuple(), self.joint_type, name=name, **kwargs)


# SCARA (RRPR): two horizontal revolute links, a vertical quill, a wrist roll.
# The prismatic joint slides down the tool axis, hence alpha = pi on link 2.
SCARA_DH_PARAMS: List[DHParam] = [
    DHParam(theta=0.0, d=0.40, a=0.35, alpha=0.0),
    DHParam(theta=0.0, d=0.0,  a=0.30, alpha=math.pi),
    DHParam(theta=0.0, d=0.0,  a=0.0,  alpha=0.0, joint_type=JointType.PRISMATIC),
    DHParam(theta=0.0, d=0.10, a=0.0,  alpha=0.0),
]

SCARA_LIMITS: List[tuple[float, float]] = [
    (-2.5, 2.5),
    (-2.5, 2.5),
    (0.0, 0.20),
    (-math.pi, math.pi),
]


def planar_arm(lengths: Sequence[float], prefix: str = "link") -> List[JointLink]:
    """Planar nR arm: all joints revolute about parallel z-axes."""
    if len(lengths) == 0:
        raise ValueError("planar_arm needs at least one link length")
    return [
        JointLink.revolute(d=0.0, a=float(a), alpha=0.0, name=f"{prefix}{i + 1}")
        for i, a in enumerate(lengths)
    ]


def scara_arm() -> List[JointLink]:
    names = ["shoulder", "elbow", "quill", "wrist"]
    return [
        param.to_link(name, limits=lim)
        for param, name, lim in zip(SCARA_DH_PARAMS, names, SCARA_LIMITS)
    ]
