"""Pydantic models for manipulator state snapshots."""

from __future__ import annotations

import time

from pydantic import BaseModel, Field

from dhchain.kinematics.chain import ManipulatorChain


class ChainStateMessage(BaseModel):
    """Read-only kinematic snapshot of a chain, handed to plotting and other consumers."""

    name: str = Field(description="Manipulator name")
    joint_vector: list[float] = Field(description="N joint variables (rad or length)")
    dh_table: list[list[float]] = Field(description="N x 4 DH table [theta, d, a, alpha]")
    tool_transform: list[list[float]] = Field(description="4x4 base -> end-effector transform")
    world_tool_transform: list[list[float]] = Field(description="4x4 world -> end-effector transform")
    base_transforms: list[list[list[float]]] = Field(description="N 4x4 frames in base coordinates")
    joint_positions: list[list[float]] = Field(description="3 x N joint positions in base coordinates")
    jacobian: list[list[float]] = Field(description="6 x N geometric Jacobian")
    timestamp: float = Field(description="Unix timestamp of this snapshot")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "planar_2r",
                "joint_vector": [0.0, 0.0],
                "dh_table": [[0.0, 0.0, 1.0, 0.0], [0.0, 0.0, 1.0, 0.0]],
                "tool_transform": [[1, 0, 0, 2], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]],
                "world_tool_transform": [[1, 0, 0, 2], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]],
                "base_transforms": [
                    [[1, 0, 0, 1], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]],
                    [[1, 0, 0, 2], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]],
                ],
                "joint_positions": [[0.0, 1.0], [0.0, 0.0], [0.0, 0.0]],
                "jacobian": [
                    [0.0, 0.0], [2.0, 1.0], [0.0, 0.0],
                    [0.0, 0.0], [0.0, 0.0], [1.0, 1.0],
                ],
                "timestamp": 1700000000.0,
            }
        }

    @classmethod
    def from_chain(cls, chain: ManipulatorChain, axis_frame: str | None = None) -> ChainStateMessage:
        return cls(
            name=chain.name,
            joint_vector=chain.joint_vector.tolist(),
            dh_table=chain.dh_table.tolist(),
            tool_transform=chain.tool_transform().tolist(),
            world_tool_transform=chain.world_tool_transform().tolist(),
            base_transforms=[T.tolist() for T in chain.base_transforms()],
            joint_positions=chain.joint_positions().tolist(),
            jacobian=chain.jacobian(axis_frame=axis_frame).tolist(),
            timestamp=time.time(),
        )
