"""Tests for the command line and result rendering."""

import io
import json

from prompt_optimizer import app
from prompt_optimizer.optimizer.orchestrator import PromptOptimizer
from prompt_optimizer.reporter import display_result, to_json


def test_json_output(tmp_path, capsys):
    exit_code = app.main(
        ["Create a login page", "--json", "--config", str(tmp_path / "missing.yaml")]
    )
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["original"] == "Create a login page"
    assert payload["improved"].startswith("# Objective")
    assert payload["mode"] == "fast"


def test_text_output_from_stdin(tmp_path, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("Create a login page\n"))

    exit_code = app.main(["--mode", "deep", "--config", str(tmp_path / "missing.yaml")])
    out = capsys.readouterr().out

    assert exit_code == 0
    assert "PROMPT ANALYSIS" in out
    assert "CLEAR Scores" in out
    assert "IMPROVED PROMPT:" in out


def test_config_file_drives_defaults(config_file, capsys, monkeypatch):
    for name in ("PROMPT_MODE", "OUTPUT_FORMAT"):
        monkeypatch.delenv(name, raising=False)

    exit_code = app.main(["Create a login page", "--config", str(config_file)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["mode"] == "deep"
    assert payload["clear_scores"] is not None


def test_auto_mode(tmp_path, capsys):
    exit_code = app.main(
        ["login page", "--mode", "auto", "--json", "--config", str(tmp_path / "missing.yaml")]
    )

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out)["mode"] == "deep"


def test_failure_returns_error_code(tmp_path, capsys, monkeypatch):
    def explode(self, *args, **kwargs):
        raise RuntimeError("scorer offline")

    monkeypatch.setattr(PromptOptimizer, "improve", explode)

    exit_code = app.main(["Create a login page", "--config", str(tmp_path / "missing.yaml")])

    assert exit_code == 1
    assert "scorer offline" in capsys.readouterr().out


def test_display_result_lists_patterns(capsys):
    result = PromptOptimizer().improve("Please create a login page", "deep")

    display_result(result)
    out = capsys.readouterr().out

    assert "Applied Patterns:" in out
    assert "Conciseness Filter" in out
    assert result.improved in out


def test_to_json_round_trips_fields():
    result = PromptOptimizer().improve("Create a login page")

    data = json.loads(to_json(result))

    assert data["intent"]["primary_intent"] == "code-generation"
    assert isinstance(data["analysis"]["gaps"], list)
    assert data["triage_result"]["needs_deep_analysis"] is True
