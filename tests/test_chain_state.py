"""Tests for the ChainStateMessage snapshot."""

import json
import math

import numpy as np

from dhchain.messages.chain_state import ChainStateMessage


def test_snapshot_matches_chain(planar_2r):
    planar_2r.update_joint_states([math.pi / 2, -math.pi / 2])
    msg = ChainStateMessage.from_chain(planar_2r)
    assert msg.name == "planar_2r"
    np.testing.assert_array_almost_equal(msg.joint_vector, planar_2r.joint_vector)
    np.testing.assert_array_almost_equal(msg.tool_transform, planar_2r.tool_transform())
    np.testing.assert_array_almost_equal(msg.jacobian, planar_2r.jacobian())
    assert np.array(msg.joint_positions).shape == (3, 2)
    assert np.array(msg.base_transforms).shape == (2, 4, 4)
    assert np.array(msg.dh_table).shape == (2, 4)
    assert msg.timestamp > 0


def test_snapshot_is_detached(planar_2r):
    msg = ChainStateMessage.from_chain(planar_2r)
    msg.joint_vector[0] = 1.0
    msg.tool_transform[0][3] = 99.0
    assert planar_2r.joint_vector[0] == 0.0
    assert planar_2r.tool_transform()[0, 3] == 2.0


def test_snapshot_json_round_trip(spatial_3r):
    msg = ChainStateMessage.from_chain(spatial_3r, axis_frame="base")
    data = json.loads(msg.model_dump_json())
    restored = ChainStateMessage.model_validate(data)
    assert restored.jacobian == msg.jacobian


def test_schema_has_example():
    schema = ChainStateMessage.model_json_schema()
    assert "example" in schema
