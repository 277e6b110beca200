"""
Robot description files.

A manipulator is described in JSON as a list of links plus optional base
pose and gravity.  Descriptions are validated with pydantic and turned
into a ManipulatorChain with `build_chain()`.

Example:
    {
      "name": "planar_2r",
      "links": [
        {"name": "shoulder", "type": "revolute", "dh": [0, 0, 1, 0]},
        {"name": "elbow",    "type": "revolute", "dh": [0, 0, 1, 0],
         "limits": [-2.5, 2.5]}
      ]
    }
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from dhchain.kinematics.chain import ManipulatorChain
from dhchain.kinematics.link import JointLink, JointType

logger = logging.getLogger(__name__)


class LinkDescription(BaseModel):
    """One link of a robot description."""

    name: Optional[str] = Field(default=None, description="Link identifier")
    type: JointType = Field(default=JointType.REVOLUTE, description="'revolute' or 'prismatic'")
    dh: list[float] = Field(description="DH constants [theta, d, a, alpha]; driven slot is the offset")
    limits: list[float] = Field(
        default_factory=lambda: [-math.inf, math.inf],
        description="Joint limits [min, max]",
    )
    q: float = Field(default=0.0, description="Initial joint variable")
    mass: float = Field(default=0.0, ge=0.0, description="Link mass")
    center_of_mass: list[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0])
    inertia: list[list[float]] = Field(
        default_factory=lambda: [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]
    )

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, v):
        return JointType.parse(v)

    @field_validator("dh")
    @classmethod
    def _check_dh(cls, v: list[float]) -> list[float]:
        if len(v) != 4:
            raise ValueError(f"dh must have 4 values, got {len(v)}")
        return v

    @field_validator("limits")
    @classmethod
    def _check_limits(cls, v: list[float]) -> list[float]:
        if len(v) != 2:
            raise ValueError(f"limits must have 2 values, got {len(v)}")
        if v[0] > v[1]:
            raise ValueError(f"limits must satisfy min <= max, got {v}")
        return v

    @field_validator("center_of_mass")
    @classmethod
    def _check_com(cls, v: list[float]) -> list[float]:
        if len(v) != 3:
            raise ValueError(f"center_of_mass must have 3 values, got {len(v)}")
        return v

    @field_validator("inertia")
    @classmethod
    def _check_inertia(cls, v: list[list[float]]) -> list[list[float]]:
        if len(v) != 3 or any(len(row) != 3 for row in v):
            raise ValueError("inertia must be a 3x3 matrix")
        return v

    def to_link(self) -> JointLink:
        return JointLink(
            self.dh,
            self.type,
            name=self.name,
            limits=self.limits,
            q=self.q,
            mass=self.mass,
            center_of_mass=self.center_of_mass,
            inertia=self.inertia,
        )


class ChainDescription(BaseModel):
    """A whole manipulator: links base to tip, base pose and gravity."""

    name: Optional[str] = None
    description: Optional[str] = None
    links: list[LinkDescription] = Field(min_length=1)
    base: Optional[list[list[float]]] = Field(default=None, description="4x4 world -> base transform")
    gravity: Optional[list[float]] = None

    @field_validator("base")
    @classmethod
    def _check_base(cls, v):
        if v is not None and (len(v) != 4 or any(len(row) != 4 for row in v)):
            raise ValueError("base must be a 4x4 matrix")
        return v

    @field_validator("gravity")
    @classmethod
    def _check_gravity(cls, v):
        if v is not None and len(v) != 3:
            raise ValueError(f"gravity must have 3 values, got {len(v)}")
        return v


def build_chain(description: ChainDescription) -> ManipulatorChain:
    """Construct a ManipulatorChain from a validated description."""
    return ManipulatorChain(
        [link.to_link() for link in description.links],
        name=description.name,
        description=description.description,
        base=description.base,
        gravity=description.gravity,
    )


def describe_chain(chain: ManipulatorChain) -> ChainDescription:
    """Inverse of `build_chain`: capture a chain's geometry and current joint state."""
    return ChainDescription(
        name=chain.name,
        description=chain.description,
        base=chain.base.tolist(),
        gravity=chain.gravity.tolist(),
        links=[
            LinkDescription(
                name=link.name,
                type=link.joint_type,
                dh=list(link.constant_geometry),
                limits=list(link.limits),
                q=link.q,
                mass=link.mass,
                center_of_mass=link.center_of_mass.tolist(),
                inertia=link.inertia.tolist(),
            )
            for link in chain.links
        ],
    )


def load_description(path: Union[str, Path]) -> ChainDescription:
    """Read and validate a robot description JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Robot description not found: {path}")
    description = ChainDescription.model_validate(json.loads(path.read_text()))
    logger.debug("Loaded robot description '%s' (%d links) from %s",
                 description.name, len(description.links), path)
    return description


def load_chain(path: Union[str, Path]) -> ManipulatorChain:
    return build_chain(load_description(path))


def save_description(description: ChainDescription, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # unbounded limits are written as the JSON extension literals Infinity / -Infinity
    path.write_text(json.dumps(description.model_dump(), indent=2))
    logger.info("Saved robot description to %s", path)
    return path
