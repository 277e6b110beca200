"""Tests for robot description files."""

import json
import math

import numpy as np
import pytest
from pydantic import ValidationError

from dhchain.config.robot_description import (
    ChainDescription,
    LinkDescription,
    build_chain,
    describe_chain,
    load_chain,
    load_description,
    save_description,
)
from dhchain.kinematics.chain import ManipulatorChain
from dhchain.kinematics.dh_params import scara_arm
from dhchain.kinematics.link import JointType


class TestLinkDescription:
    def test_defaults(self):
        desc = LinkDescription(dh=[0, 0, 1, 0])
        assert desc.type is JointType.REVOLUTE
        assert desc.limits == [-math.inf, math.inf]
        assert desc.q == 0.0

    def test_type_alias(self):
        assert LinkDescription(dh=[0, 0, 0, 0], type="p").type is JointType.PRISMATIC

    def test_bad_type_rejected(self):
        with pytest.raises(ValidationError):
            LinkDescription(dh=[0, 0, 0, 0], type="ball")

    @pytest.mark.parametrize("field, value", [
        ("dh", [0, 0, 1]),
        ("limits", [1.0]),
        ("limits", [1.0, -1.0]),
        ("center_of_mass", [0.0, 0.0]),
        ("inertia", [[1, 0], [0, 1]]),
        ("mass", -1.0),
    ])
    def test_malformed_fields_rejected(self, field, value):
        data = {"dh": [0, 0, 1, 0], field: value}
        with pytest.raises(ValidationError):
            LinkDescription(**data)

    def test_to_link(self):
        link = LinkDescription(name="quill", type="prismatic", dh=[0, 0.1, 0, 0],
                               limits=[0, 0.2], q=0.5, mass=1.5).to_link()
        assert link.name == "quill"
        assert link.is_prismatic
        assert link.q == 0.2
        assert link.offset == 0.1
        assert link.mass == 1.5


class TestChainDescription:
    def test_empty_links_rejected(self):
        with pytest.raises(ValidationError):
            ChainDescription(links=[])

    def test_bad_base_rejected(self):
        with pytest.raises(ValidationError):
            ChainDescription(links=[{"dh": [0, 0, 1, 0]}], base=[[1, 0, 0], [0, 1, 0], [0, 0, 1]])

    def test_bad_gravity_rejected(self):
        with pytest.raises(ValidationError):
            ChainDescription(links=[{"dh": [0, 0, 1, 0]}], gravity=[0, -9.81])

    def test_build_chain(self):
        desc = ChainDescription(name="one", links=[{"dh": [0, 0, 1, 0]}])
        chain = build_chain(desc)
        assert isinstance(chain, ManipulatorChain)
        assert chain.name == "one"
        assert chain.description == "Serial Rigid Link Robot"
        np.testing.assert_array_equal(chain.base, np.eye(4))


class TestFiles:
    def test_load_description(self, robot_file):
        desc = load_description(robot_file)
        assert desc.name == "planar_2r"
        assert [link.name for link in desc.links] == ["shoulder", "elbow"]

    def test_load_chain(self, robot_file):
        chain = load_chain(robot_file)
        assert chain.n_links == 2
        assert chain.link(1).limits == (-2.0, 2.0)
        np.testing.assert_array_almost_equal(chain.world_tool_transform()[:3, 3], [2.0, 0.0, 0.5])

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_description(tmp_path / "nope.json")

    def test_invalid_file_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"name": "x", "links": [{"dh": [1, 2]}]}))
        with pytest.raises(ValidationError):
            load_description(path)

    def test_save_and_reload_preserves_chain(self, tmp_path):
        chain = ManipulatorChain(scara_arm(), name="scara")
        chain.update_joint_states([0.3, -0.2, 0.1, 0.5])
        path = save_description(describe_chain(chain), tmp_path / "out" / "scara.json")
        reloaded = load_chain(path)
        assert reloaded.name == "scara"
        assert [link.joint_type for link in reloaded] == [link.joint_type for link in chain]
        np.testing.assert_array_almost_equal(reloaded.joint_vector, chain.joint_vector)
        np.testing.assert_array_almost_equal(reloaded.tool_transform(), chain.tool_transform())

    def test_unbounded_limits_survive_save(self, tmp_path):
        desc = ChainDescription(links=[{"dh": [0, 0, 1, 0]}])
        reloaded = load_description(save_description(desc, tmp_path / "r.json"))
        assert reloaded.links[0].limits == [-math.inf, math.inf]
