"""Test that the CLI picks up settings from a .env file."""

import json
import logging

from dhchain.cli import main
from dhchain.config.kinematics_config import CONFIG_ENV_VAR, get_kinematics_config
from dhchain.utils.logging_config import LOG_LEVEL_ENV_VAR


def _write_overlay(tmp_path):
    cfg_path = tmp_path / "dhchain.json"
    cfg_path.write_text(json.dumps({"jacobian": {"axis_frame": "base"}}))
    return cfg_path


def test_dotenv_in_working_directory_sets_config_path(monkeypatch, tmp_path, capsys):
    """A .env in the working directory names the config overlay file."""
    cfg_path = _write_overlay(tmp_path)
    (tmp_path / ".env").write_text(f"{CONFIG_ENV_VAR}={cfg_path}\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR)

    assert main(["config", "show", "jacobian"]) == 0
    assert json.loads(capsys.readouterr().out)["axis_frame"] == "base"
    assert get_kinematics_config().path == cfg_path


def test_dotenv_does_not_override_existing(monkeypatch, tmp_path, capsys):
    """An already-set DHCHAIN_CONFIG wins over the .env file."""
    cfg_path = _write_overlay(tmp_path)
    (tmp_path / ".env").write_text(f"{CONFIG_ENV_VAR}={cfg_path}\n")
    monkeypatch.chdir(tmp_path)
    # conftest sets DHCHAIN_CONFIG to "" (no overlay)

    assert main(["config", "show", "jacobian"]) == 0
    assert json.loads(capsys.readouterr().out)["axis_frame"] == "local"


def test_dotenv_sets_log_level(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text(f"{LOG_LEVEL_ENV_VAR}=info\n")
    monkeypatch.chdir(tmp_path)
    # recorded so monkeypatch removes the value load_dotenv writes
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "")
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR)

    assert main(["config", "diff"]) == 0
    assert logging.getLogger("dhchain").level == logging.INFO
