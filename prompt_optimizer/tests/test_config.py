"""Tests for YAML/environment configuration."""

from pathlib import Path

import pytest

from prompt_optimizer import config as config_module
from prompt_optimizer.config import Config, get_config
from prompt_optimizer.optimizer.orchestrator import PromptOptimizer
from prompt_optimizer.tests.helpers import assert_not_applied

REPOSITORY_CONFIG = Path(__file__).resolve().parents[2] / "config.yaml"


def test_config_loading(config_file):
    """Test that configuration loads successfully."""
    config = Config(str(config_file))

    assert config.library_config.disabled == ("conciseness-filter",)
    assert config.library_config.priority_overrides == {"step-decomposer": 10}
    assert config.library_config.custom_settings == {
        "edge-case-identifier": {"maxEdgeCases": 3}
    }
    assert config.triage_thresholds.conciseness_min == 70
    assert config.triage_thresholds.logic_min == 60


def test_config_properties(config_file, monkeypatch):
    """Test configuration properties."""
    for name in ("PROMPT_MODE", "OUTPUT_FORMAT", "VERBOSE_PATTERN_LOGS"):
        monkeypatch.delenv(name, raising=False)
    config = Config(str(config_file))

    assert config.default_mode == "deep"
    assert config.output_format == "json"
    assert config.verbose_pattern_logs is True
    assert config.get("intelligence.triage.conciseness_min") == 70
    assert config.get("intelligence.missing.key", "fallback") == "fallback"


def test_environment_overrides(config_file, monkeypatch):
    monkeypatch.setenv("PROMPT_MODE", "auto")
    monkeypatch.setenv("OUTPUT_FORMAT", "yaml")
    monkeypatch.setenv("VERBOSE_PATTERN_LOGS", "false")
    config = Config(str(config_file))

    assert config.default_mode is None
    assert config.output_format == "text"
    assert config.verbose_pattern_logs is False


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / "absent.yaml"))


def test_invalid_sections_fall_back_to_defaults(tmp_path, caplog):
    path = tmp_path / "config.yaml"
    path.write_text(
        "intelligence:\n"
        "  triage:\n"
        "    conciseness_min: 500\n"
        "  patterns:\n"
        "    disabled: 12\n"
    )
    config = Config(str(path))

    assert config.triage_thresholds.conciseness_min == 60
    assert config.library_config.disabled == ()
    assert "Using defaults" in caplog.text


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    config = Config(str(path))

    assert config.library_config.disabled == ()
    assert config.triage_thresholds.explicitness_min == 50


def test_repository_config_loads():
    config = Config(str(REPOSITORY_CONFIG))

    assert config.get("intelligence.patterns.customSettings.edge-case-identifier") == {
        "maxEdgeCases": 8
    }


def test_optimizer_from_config(config_file, monkeypatch):
    monkeypatch.delenv("VERBOSE_PATTERN_LOGS", raising=False)
    config = Config(str(config_file))
    optimizer = PromptOptimizer.from_config(config)

    result = optimizer.improve("Please create a login page")

    assert optimizer.verbose_pattern_logs is True
    assert optimizer.triage.thresholds.conciseness_min == 70
    assert_not_applied(result, "conciseness-filter")
    assert "Please" in result.improved


def test_get_config_returns_singleton(config_file, monkeypatch):
    monkeypatch.setattr(config_module, "_config", None)

    first = get_config(str(config_file))
    second = get_config("ignored.yaml")

    assert first is second


def test_invalid_pattern_entries_are_dropped_individually(tmp_path, caplog):
    path = tmp_path / "config.yaml"
    path.write_text(
        "intelligence:\n"
        "  patterns:\n"
        "    disabled: [conciseness-filter, 7]\n"
        "    priorityOverrides:\n"
        "      objective-clarifier: high\n"
        "      scope-definer: 5.5\n"
        "      step-decomposer: 9\n"
        "    customSettings:\n"
        "      edge-case-identifier: 3\n"
        "      ambiguity-detector:\n"
        "        maxClarifications: 4\n"
    )
    config = Config(str(path))

    assert config.library_config.disabled == ("conciseness-filter",)
    assert config.library_config.priority_overrides == {"step-decomposer": 9}
    assert config.library_config.custom_settings == {
        "ambiguity-detector": {"maxClarifications": 4}
    }
    assert "Ignoring priority override 'high' for objective-clarifier" in caplog.text
    assert "Ignoring disabled pattern id 7" in caplog.text


def test_null_pattern_lists_are_empty(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "intelligence:\n"
        "  patterns:\n"
        "    disabled:\n"
        "    priority_overrides:\n"
        "      objective-clarifier: 8\n"
    )
    config = Config(str(path))

    assert config.library_config.disabled == ()
    assert config.library_config.priority_overrides == {"objective-clarifier": 8}
