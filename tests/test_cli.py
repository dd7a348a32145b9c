"""Tests for the command-line front end."""

import pytest

from connect4net.config import GameConfig, load_config
from connect4net.debug import DebugLevel, debug
from connect4net.interfaces import cli


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "settings.json")


@pytest.fixture(autouse=True)
def restore_debug_level():
    level = debug.level
    yield
    debug.configure(level=level)


def test_offline_agent_game(config_path, capsys):
    assert cli.main(["--config", config_path, "--seed", "4", "play", "--agent"]) == 0
    out = capsys.readouterr().out
    assert "You lost. :(" in out


def test_offline_human_game(config_path, capsys, monkeypatch):
    columns = iter(["0", "1", "2", "3", "4", "5", "6", "x", "9",
                    "1", "2", "1", "2", "1", "2"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(columns))
    assert cli.main(["--config", config_path, "play"]) == 0
    out = capsys.readouterr().out
    assert "Invalid input" in out
    assert "Column must be between 0 and 6." in out
    assert "You lost. :(" in out


def test_quit(config_path, capsys, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt="": "q")
    assert cli.main(["--config", config_path, "play"]) == 0
    assert "Quitting game." in capsys.readouterr().out


def test_no_command(config_path, capsys):
    assert cli.main(["--config", config_path]) == 1


def test_join_failure_exit_code(config_path, capsys):
    code = cli.main(["--config", config_path, "join", "--host", "127.0.0.1", "--port", "1"])
    assert code == 2
    assert "Network error" in capsys.readouterr().out


def test_flags_override_and_save(config_path):
    app = cli.SimpleCLI()
    app.parse_args(["--config", config_path, "--debug-level", "error",
                    "join", "--host", "peer.local", "--port", "4555", "--save-config"])
    assert app.config.host == "peer.local"
    assert app.config.port == 4555
    assert debug.level == DebugLevel.ERROR
    assert load_config(config_path) == app.config
    assert app.config != GameConfig()
