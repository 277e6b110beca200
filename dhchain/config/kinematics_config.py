"""
Kinematics defaults shared by every module.

Values come from ``DEFAULTS``, overlaid by the JSON file named in the
``DHCHAIN_CONFIG`` environment variable when it is set. The library reads
the process environment only; loading a ``.env`` file is left to the
entry point (see ``dhchain.cli.main``).

Use ``get_kinematics_config()`` rather than hardcoding these values.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DHCHAIN_CONFIG"

DEFAULTS: dict[str, Any] = {
    "chain": {
        "name": "NewRobot",
        "description": "Serial Rigid Link Robot",
        "gravity": [0.0, 0.0, -9.81],
    },
    "link": {
        "name": "NewLink",
    },
    "rpy": {
        "singularity_tolerance": 1e-6,
    },
    "jacobian": {
        "axis_frame": "local",
        "fd_epsilon": 1e-6,
    },
}

_MISSING = object()


def _deep_merge(target: dict, overlay: dict) -> None:
    for key, value in overlay.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            target[key] = value


def _changed(reference: dict, data: dict) -> dict:
    """Entries of *data* that are absent from or differ from *reference*."""
    out = {}
    for key, value in data.items():
        ref = reference.get(key, _MISSING)
        if isinstance(value, dict) and isinstance(ref, dict):
            nested = _changed(ref, value)
            if nested:
                out[key] = nested
        elif value != ref:
            out[key] = value
    return out


class KinematicsConfig:
    """In-memory kinematics settings with an optional JSON file behind them.

    Thread-safe. Edits made with ``set``/``reset`` are not persisted until
    ``save()`` is called.
    """

    def __init__(self, path: Union[str, Path, None] = None):
        self._lock = threading.RLock()
        self._path: Optional[Path] = Path(path) if path else None
        self._data: dict[str, Any] = copy.deepcopy(DEFAULTS)
        if self._path is not None:
            self._read_overlay(self._path)

    def _read_overlay(self, path: Path) -> None:
        if not path.exists():
            logger.warning("Config file %s does not exist, using defaults", path)
            return
        try:
            overlay = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unreadable kinematics config %s: %s", path, e)
            return
        if not isinstance(overlay, dict):
            logger.warning("Ignoring kinematics config %s: top level is not an object", path)
            return
        _deep_merge(self._data, overlay)
        logger.info("Kinematics config overlay applied from %s", path)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def get(self, section: str, key: Optional[str] = None) -> Any:
        """Return one value, or a copy of the whole *section* when *key* is None."""
        with self._lock:
            values = self._data.get(section, {})
            return copy.deepcopy(values if key is None else values.get(key))

    def set(self, section: str, key: str, value: Any) -> None:
        """Change one known setting. Unknown sections or keys raise ``KeyError``."""
        if key not in DEFAULTS.get(section, {}):
            raise KeyError(f"Unknown kinematics setting {section}.{key}")
        with self._lock:
            self._data[section][key] = copy.deepcopy(value)
        logger.debug("Kinematics config %s.%s = %r", section, key, value)

    def get_all(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._data)

    def get_defaults(self) -> dict[str, Any]:
        return copy.deepcopy(DEFAULTS)

    def diff(self) -> dict[str, Any]:
        """Settings that no longer match ``DEFAULTS``."""
        with self._lock:
            return copy.deepcopy(_changed(DEFAULTS, self._data))

    def reset(self) -> None:
        with self._lock:
            self._data = copy.deepcopy(DEFAULTS)

    def save(self, path: Union[str, Path, None] = None) -> Path:
        """Write the settings to *path*, or back to the overlay file in use."""
        target = Path(path) if path is not None else self._path
        if target is None:
            raise ValueError(f"No config path given and {CONFIG_ENV_VAR} is not set")
        with self._lock:
            payload = json.dumps(self._data, indent=2)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(payload)
        logger.info("Saved kinematics config to %s", target)
        return target


_config: Optional[KinematicsConfig] = None
_config_lock = threading.Lock()


def get_kinematics_config() -> KinematicsConfig:
    """Return the process-wide config, reading ``DHCHAIN_CONFIG`` on first use."""
    global _config
    with _config_lock:
        if _config is None:
            _config = KinematicsConfig(os.environ.get(CONFIG_ENV_VAR) or None)
        return _config


def reset_kinematics_config() -> None:
    """Drop the process-wide config so the next access re-reads the environment."""
    global _config
    with _config_lock:
        _config = None
