"""Tests for the CLI module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from agent_reasoner.cli import _parse_since, main
from agent_reasoner.history import ReasoningHistoryStore


@pytest.fixture
def cli_env(tmp_path: Path):
	"""Point config and data dirs at tmp_path and keep logging unconfigured."""
	env = {
		"AGENT_REASONER_DATA_DIR": str(tmp_path / "data"),
		"AGENT_REASONER_CONFIG_DIR": str(tmp_path / "config"),
	}
	with patch.dict(os.environ, env), patch("agent_reasoner.cli.setup_logging"):
		yield tmp_path


def _main(*argv: str) -> None:
	with patch("sys.argv", ["agent-reasoner", *argv]):
		main()


def test_no_command_exits_1(cli_env):
	with pytest.raises(SystemExit) as exc_info:
		_main()
	assert exc_info.value.code == 1


@pytest.mark.parametrize("command", ["run", "status", "history"])
def test_subparsers_registered(command):
	with pytest.raises(SystemExit) as exc_info:
		_main(command, "--help")
	assert exc_info.value.code == 0


def test_run_json(cli_env, capsys):
	"""run --json prints the full result."""
	_main("run", "create a file called notes.txt", "--json", "--fast", "--no-history")

	data = json.loads(capsys.readouterr().out)
	assert data["status"] == "completed"
	assert data["actions"][0]["parameters"] == ["notes.txt"]
	assert data["effort"] == "medium"


def test_run_flags_become_overrides(cli_env, capsys):
	_main(
		"run", "create a file called a.txt and install package foo",
		"--json", "--fast", "--no-history",
		"--effort", "low", "--max-iterations", "1", "--no-reflection",
	)

	data = json.loads(capsys.readouterr().out)
	assert data["effort"] == "low"
	assert len(data["actions"]) == 1
	assert data["metadata"]["config"]["maxIterations"] == 1


def test_run_no_planning(cli_env, capsys):
	_main("run", "create something", "--json", "--fast", "--no-history", "--no-planning")

	data = json.loads(capsys.readouterr().out)
	assert data["plan"] is None
	assert data["actions"][0]["source"] == "direct"


def test_run_archives_history(cli_env, capsys):
	_main("run", "create a file called notes.txt", "--fast")

	output = capsys.readouterr().out
	assert "notes.txt" in output
	store = ReasoningHistoryStore(cli_env / "data" / "history.db")
	assert len(store.query()) == 1


def test_run_config_error_exits_1(cli_env, capsys):
	with patch.dict(os.environ, {"AGENT_REASONER_MAX_ITERATIONS": "zero"}):
		with pytest.raises(SystemExit) as exc_info:
			_main("run", "create a file", "--fast")

	assert exc_info.value.code == 1
	assert "Error:" in capsys.readouterr().err


def test_status(cli_env, capsys):
	_main("status", "--efforts")

	data = json.loads(capsys.readouterr().out)
	assert data["effort"] == "medium"
	assert data["maxIterations"] == 7
	assert data["paths"]["historyDb"] == str(cli_env / "data" / "history.db")
	assert set(data["efforts"]) == {"low", "medium", "high", "maximum"}


def test_history_views(cli_env, capsys):
	"""history renders list, stats and detail views."""
	_main("run", "create a file called notes.txt", "--fast")
	store = ReasoningHistoryStore(cli_env / "data" / "history.db")
	result_id = store.query()[0].result_id
	capsys.readouterr()

	_main("history")
	assert "Reasoning History" in capsys.readouterr().out

	_main("history", "--stats")
	assert "Reasoning Statistics" in capsys.readouterr().out

	_main("history", "--show", result_id)
	assert result_id in capsys.readouterr().out


def test_history_empty(cli_env, capsys):
	_main("history", "--since", "24h")
	assert "No reasoning history" in capsys.readouterr().out


def test_history_show_missing(cli_env):
	with pytest.raises(SystemExit) as exc_info:
		_main("history", "--show", "nope")
	assert exc_info.value.code == 1


def test_history_clear(cli_env, capsys):
	_main("run", "create a file", "--fast")
	capsys.readouterr()

	_main("history", "--clear")
	assert "Deleted 1 records." in capsys.readouterr().out


def test_parse_since_invalid():
	with pytest.raises(SystemExit):
		_parse_since("yesterday")
