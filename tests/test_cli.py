"""CLI commands that do not need a running server."""

import json
from unittest.mock import AsyncMock

from click.testing import CliRunner

from opencode_notifier.cli import config as config_cli
from opencode_notifier.cli.main import main
from opencode_notifier.models.decision import Classification


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_config_json(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"sound": True, "messages": {"complete": "Done: {{title}}"}, "volume": 0.4}))
    result = CliRunner().invoke(main, ["config", "--config", str(path), "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["volume"] == 0.4
    assert data["messages"]["complete"] == "Done: {{title}}"
    assert data["events"]["complete"] == {"sound": True, "notification": True}
    assert data["events"]["subagent"] == {"sound": False, "notification": False}


def test_config_table(tmp_path):
    result = CliRunner().invoke(main, ["config", "--config", str(tmp_path / "missing.json")])
    assert result.exit_code == 0, result.output
    assert "permission" in result.output


def test_test_command_dispatches(monkeypatch, tmp_path):
    dispatch = AsyncMock()
    monkeypatch.setattr(config_cli.Dispatcher, "dispatch", dispatch)
    result = CliRunner().invoke(main, ["test", "error", "--title", "Docs", "--config", str(tmp_path / "none.json")])
    assert result.exit_code == 0, result.output
    decision = dispatch.await_args.args[0]
    assert decision.classification is Classification.ERROR
    assert decision.session_title == "Docs"


def test_test_command_rejects_unknown_event():
    result = CliRunner().invoke(main, ["test", "bogus"])
    assert result.exit_code != 0
