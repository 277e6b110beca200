"""Configuration: kinematics defaults and robot description files."""

from dhchain.config.kinematics_config import (
    DEFAULTS,
    KinematicsConfig,
    get_kinematics_config,
    reset_kinematics_config,
)

__all__ = ["DEFAULTS", "KinematicsConfig", "get_kinematics_config", "reset_kinematics_config"]
