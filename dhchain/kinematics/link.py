"""
Single rigid link of a serial manipulator.

A link carries four DH constants, a joint type and one free joint
variable ``q``.  For a revolute link ``q`` drives theta; for a prismatic
link it drives d.  The constant in the driven slot becomes the link's
offset, added to ``q`` every time the DH row is read.

Convention: Standard DH
  - theta : joint angle (rad)
  - d     : link offset along z_{i-1}
  - a     : link length along x_i
  - alpha : link twist about x_i (rad)
"""

from __future__ import annotations

import enum
import logging
import math
from typing import Iterable, Optional, Sequence

import numpy as np

from dhchain.config.kinematics_config import get_kinematics_config
from dhchain.kinematics.transforms import dh_transform

logger = logging.getLogger(__name__)


class KinematicsValidationError(ValueError):
    """Raised when a link or chain is constructed from malformed data."""
    pass


class JointType(str, enum.Enum):
    REVOLUTE = "revolute"
    PRISMATIC = "prismatic"

    @classmethod
    def parse(cls, value: JointType | str) -> JointType:
        """Accept an enum member, its value, or the one-letter tag ('r'/'p')."""
        if isinstance(value, JointType):
            return value
        key = str(value).strip().lower()
        aliases = {"r": cls.REVOLUTE, "p": cls.PRISMATIC}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise KinematicsValidationError(
                f"Invalid joint type '{value}', must be 'revolute' or 'prismatic'"
            ) from None


def _as_vector(value, size: int, label: str, finite: bool = True) -> np.ndarray:
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError):
        raise KinematicsValidationError(f"{label} must be numeric, got {value!r}") from None
    if arr.size != size:
        raise KinematicsValidationError(
            f"{label} must have {size} elements, got shape {arr.shape}"
        )
    arr = arr.reshape(size)
    if finite and not np.all(np.isfinite(arr)):
        raise KinematicsValidationError(f"{label} must be finite, got {arr.tolist()}")
    return arr


class JointLink:
    """
    One rigid link with a single degree of freedom.

    Attributes
    ----------
    name              : str         Identifier for this link.
    joint_type        : JointType   Revolute or prismatic, fixed at construction.
    constant_geometry : tuple       (theta0, d0, a, alpha) DH constants.
    offset            : float       Constant added to q in the driven slot.
    limits            : tuple       (min, max) bounds applied to every write of q.
    q                 : float       Current joint variable, always within limits.
    mass, center_of_mass, inertia   Dynamic payload, never read by kinematics.
    """

    def __init__(
        self,
        dh: Sequence[float] = (0.0, 0.0, 0.0, 0.0),
        joint_type: JointType | str = JointType.REVOLUTE,
        *,
        name: Optional[str] = None,
        limits: Sequence[float] = (-math.inf, math.inf),
        q: float = 0.0,
        mass: float = 0.0,
        center_of_mass: Optional[Iterable[float]] = None,
        inertia: Optional[Iterable[Iterable[float]]] = None,
    ) -> None:
        """
        Create a link from its DH constants.

        Parameters
        ----------
        dh             : (theta0, d0, a, alpha).  The slot driven by the joint
                         variable holds the offset.
        joint_type     : 'revolute' or 'prismatic' (or 'r' / 'p').
        name           : Identifier for the link (default: configured link name).
        limits         : (min, max) joint limits (default: unbounded).
        q              : Initial joint variable, clamped to ``limits``.
        mass           : Link mass, must be a non-negative scalar.
        center_of_mass : 3-vector in the link frame (default: origin).
        inertia        : 3x3 inertia tensor in the link frame (default: zeros).
        """
        if name is None:
            name = get_kinematics_config().get("link", "name")
        if not isinstance(name, str):
            raise KinematicsValidationError(f"Link name must be a string, got {type(name).__name__}")
        self.name = name
        self._joint_type = JointType.parse(joint_type)

        geometry = _as_vector(dh, 4, "DH constants")
        self._geometry: tuple[float, float, float, float] = tuple(float(v) for v in geometry)

        lim = _as_vector(limits, 2, "limits", finite=False)
        if np.any(np.isnan(lim)):
            raise KinematicsValidationError(f"limits must not contain NaN, got {lim.tolist()}")
        if lim[0] > lim[1]:
            raise KinematicsValidationError(
                f"limits must satisfy min <= max, got ({lim[0]}, {lim[1]})"
            )
        self._limits: tuple[float, float] = (float(lim[0]), float(lim[1]))

        if not np.isscalar(mass) or isinstance(mass, (bool, str, complex, np.complexfloating)):
            raise KinematicsValidationError(f"mass must be a scalar, got {mass!r}")
        if not math.isfinite(mass) or mass < 0:
            raise KinematicsValidationError(f"mass must be finite and >= 0, got {mass}")
        self.mass = float(mass)

        if center_of_mass is None:
            self.center_of_mass = np.zeros(3)
        else:
            self.center_of_mass = _as_vector(center_of_mass, 3, "center_of_mass")

        if inertia is None:
            self.inertia = np.zeros((3, 3))
        else:
            I = np.asarray(inertia, dtype=np.float64)
            if I.shape != (3, 3):
                raise KinematicsValidationError(f"inertia must be 3x3, got shape {I.shape}")
            self.inertia = I.copy()

        if not np.isscalar(q) or isinstance(q, (bool, str, complex, np.complexfloating)):
            raise KinematicsValidationError(f"q must be a scalar, got {q!r}")
        self._q = 0.0
        self.set_joint_variable(q)

        logger.debug(
            "Created %s link '%s' dh=%s limits=%s",
            self._joint_type.value, self.name, self._geometry, self._limits,
        )

    # ----- alternate constructors -----

    @classmethod
    def revolute(cls, d: float, a: float, alpha: float, offset: float = 0.0, **kwargs) -> JointLink:
        """Revolute link: theta = q + offset, d fixed."""
        return cls((offset, d, a, alpha), JointType.REVOLUTE, **kwargs)

    @classmethod
    def prismatic(cls, theta: float, a: float, alpha: float, offset: float = 0.0, **kwargs) -> JointLink:
        """Prismatic link: d = q + offset, theta fixed."""
        return cls((theta, offset, a, alpha), JointType.PRISMATIC, **kwargs)

    # ----- read-only geometry -----

    @property
    def joint_type(self) -> JointType:
        return self._joint_type

    @property
    def is_revolute(self) -> bool:
        return self._joint_type is JointType.REVOLUTE

    @property
    def is_prismatic(self) -> bool:
        return self._joint_type is JointType.PRISMATIC

    @property
    def constant_geometry(self) -> tuple[float, float, float, float]:
        return self._geometry

    @property
    def offset(self) -> float:
        """Constant in the driven DH slot (theta0 or d0)."""
        return self._geometry[0] if self.is_revolute else self._geometry[1]

    @property
    def limits(self) -> tuple[float, float]:
        return self._limits

    # ----- joint variable -----

    @property
    def q(self) -> float:
        """Current joint variable (rad for revolute, length for prismatic)."""
        return self._q

    @q.setter
    def q(self, value: float) -> None:
        self.set_joint_variable(value)

    def joint_variable(self) -> float:
        return self._q

    def set_joint_variable(self, value: float) -> None:
        """Store *value* saturated to the joint limits.

        Out-of-range values are clamped silently. Non-finite values are
        rejected and leave the current value untouched.
        """
        value = float(value)
        if not math.isfinite(value):
            raise KinematicsValidationError(
                f"joint variable of '{self.name}' must be finite, got {value}"
            )
        lo, hi = self._limits
        self._q = max(lo, min(hi, value))

    # ----- derived kinematics -----

    def dh_row(self) -> np.ndarray:
        """Return the current [theta, d, a, alpha] row."""
        theta0, d0, a, alpha = self._geometry
        driven = self._q + self.offset
        if self.is_revolute:
            return np.array([driven, d0, a, alpha], dtype=np.float64)
        return np.array([theta0, driven, a, alpha], dtype=np.float64)

    def local_transform(self) -> np.ndarray:
        """4x4 transform from the previous frame to this link's frame."""
        return dh_transform(self.dh_row())

    def joint_axis(self) -> np.ndarray:
        """Third column of the local transform (rotation or slide axis)."""
        return self.local_transform()[:3, 2].copy()

    def __repr__(self) -> str:
        return (
            f"JointLink(name={self.name!r}, joint_type={self._joint_type.value!r}, "
            f"dh={self._geometry}, q={self._q:.6g}, limits={self._limits})"
        )
