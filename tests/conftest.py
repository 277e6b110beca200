"""
Shared test fixtures and configuration for the dhchain test suite.

Every test starts from a fresh process-wide KinematicsConfig with no
config overlay file, so tests cannot leak settings into each other.
"""

import json
import logging
import math

import pytest

from dhchain.config.kinematics_config import CONFIG_ENV_VAR, reset_kinematics_config
from dhchain.kinematics.chain import ManipulatorChain
from dhchain.kinematics.dh_params import planar_arm
from dhchain.kinematics.link import JointLink
from dhchain.utils.logging_config import LOG_LEVEL_ENV_VAR


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Reset the config singleton and ignore DHCHAIN_* settings from the environment."""
    monkeypatch.setenv(CONFIG_ENV_VAR, "")
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
    reset_kinematics_config()
    yield
    reset_kinematics_config()


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo handlers and level that setup_logging() put on the dhchain logger."""
    pkg_logger = logging.getLogger("dhchain")
    handlers, level = list(pkg_logger.handlers), pkg_logger.level
    yield
    for handler in pkg_logger.handlers:
        if handler not in handlers:
            handler.close()
    pkg_logger.handlers[:] = handlers
    pkg_logger.setLevel(level)


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def planar_2r():
    """Two-link planar arm, unit link lengths."""
    return ManipulatorChain(planar_arm([1.0, 1.0]), name="planar_2r")


@pytest.fixture
def planar_3r():
    return ManipulatorChain(planar_arm([0.5, 0.4, 0.3]), name="planar_3r")


@pytest.fixture
def spatial_3r():
    """Anthropomorphic arm with twisted links (non-zero alpha)."""
    return ManipulatorChain([
        JointLink.revolute(d=0.3, a=0.0, alpha=math.pi / 2, name="base"),
        JointLink.revolute(d=0.0, a=0.4, alpha=0.0, name="shoulder"),
        JointLink.revolute(d=0.0, a=0.35, alpha=0.0, name="elbow"),
    ])


@pytest.fixture
def robot_file(tmp_path):
    """Write a small robot description file and return its path."""
    path = tmp_path / "robot.json"
    path.write_text(json.dumps({
        "name": "planar_2r",
        "links": [
            {"name": "shoulder", "type": "revolute", "dh": [0, 0, 1, 0]},
            {"name": "elbow", "type": "r", "dh": [0, 0, 1, 0], "limits": [-2.0, 2.0]},
        ],
        "base": [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0.5], [0, 0, 0, 1]],
    }))
    return path
