"""Configuration management for the prompt optimizer."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from prompt_optimizer.types import LibraryConfig, Mode, TriageThresholds

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")


class Config:
    """Application configuration manager."""

    def __init__(self, config_path: str = "config.yaml"):
        """Initialize configuration from YAML file and environment variables.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        self._config: dict[str, Any] = {}
        self._load_config()
        self._setup_logging()
        self._load_library_config()
        self._load_triage_thresholds()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path) as f:
            self._config = yaml.safe_load(f) or {}

        logger.info(f"Loaded configuration from {self.config_path}")

    def _setup_logging(self) -> None:
        """Set up logging configuration."""
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def _load_library_config(self) -> None:
        """Load pattern library settings, dropping invalid entries one at a time."""
        patterns = self.get("intelligence.patterns", {}) or {}
        if not isinstance(patterns, dict):
            logger.warning(
                f"Ignoring intelligence.patterns: expected a mapping, "
                f"got {type(patterns).__name__}. Using defaults."
            )
            patterns = {}

        self.library_config = LibraryConfig(
            disabled=_clean_disabled(_lookup(patterns, "disabled")),
            priority_overrides=_clean_overrides(
                _lookup(patterns, "priorityOverrides", "priority_overrides")
            ),
            custom_settings=_clean_custom_settings(
                _lookup(patterns, "customSettings", "custom_settings")
            ),
        )
        logger.info(
            f"Loaded pattern settings: {len(self.library_config.disabled)} disabled, "
            f"{len(self.library_config.priority_overrides)} priority overrides"
        )

    def _load_triage_thresholds(self) -> None:
        """Load and validate triage thresholds using Pydantic."""
        thresholds = self.get("intelligence.triage", {}) or {}
        try:
            self.triage_thresholds = TriageThresholds(**thresholds)
        except (ValidationError, TypeError) as e:
            logger.warning(f"Failed to load triage settings: {e}. Using defaults.")
            self.triage_thresholds = TriageThresholds()

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to configuration value (e.g., 'intelligence.triage')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    @property
    def default_mode(self) -> Mode | None:
        """Get the default analysis mode (fast, deep); None means auto via triage."""
        mode = os.getenv("PROMPT_MODE", self.get("optimizer.mode", "fast")).lower()
        if mode == "auto":
            return None
        if mode not in ("fast", "deep"):
            logger.warning(f"Unknown mode '{mode}'. Using fast.")
            return "fast"
        return mode

    @property
    def output_format(self) -> str:
        """Get the CLI output format (text, json)."""
        output_format = os.getenv("OUTPUT_FORMAT", self.get("optimizer.output_format", "text"))
        output_format = output_format.lower()
        return output_format if output_format in OUTPUT_FORMATS else "text"

    @property
    def verbose_pattern_logs(self) -> bool:
        """Check if every pattern outcome should be logged at INFO level."""
        env_value = os.getenv("VERBOSE_PATTERN_LOGS")
        if env_value is not None:
            return env_value.lower() == "true"
        return bool(self.get("intelligence.verbose_pattern_logs", False))

    def __repr__(self) -> str:
        """String representation of configuration."""
        return (
            f"Config(mode={self.default_mode or 'auto'}, "
            f"disabled_patterns={len(self.library_config.disabled)})"
        )


def _lookup(section: dict[str, Any], *keys: str) -> Any:
    """Return the value of the first key present in the section."""
    for key in keys:
        if key in section:
            return section[key]
    return None


def _mapping(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning(f"Ignoring patterns.{name}: expected a mapping, got {type(value).__name__}")
        return {}
    return value


def _clean_disabled(value: Any) -> tuple[str, ...]:
    """Keep the string ids of a disabled list; a null list is empty."""
    if value is None:
        return ()
    if not isinstance(value, list):
        logger.warning(f"Ignoring patterns.disabled: expected a list, got {type(value).__name__}")
        return ()
    disabled = []
    for pattern_id in value:
        if isinstance(pattern_id, str):
            disabled.append(pattern_id)
        else:
            logger.warning(f"Ignoring disabled pattern id {pattern_id!r}: expected a string")
    return tuple(disabled)


def _clean_overrides(value: Any) -> dict[str, int]:
    """Keep integer priority overrides; range checks happen at selection time."""
    overrides = {}
    for pattern_id, priority in _mapping(value, "priorityOverrides").items():
        if isinstance(priority, int) and not isinstance(priority, bool):
            overrides[str(pattern_id)] = priority
        else:
            logger.warning(
                f"Ignoring priority override {priority!r} for {pattern_id}: expected an integer"
            )
    return overrides


def _clean_custom_settings(value: Any) -> dict[str, dict[str, Any]]:
    settings = {}
    for pattern_id, pattern_settings in _mapping(value, "customSettings").items():
        if isinstance(pattern_settings, dict):
            settings[str(pattern_id)] = pattern_settings
        else:
            logger.warning(f"Ignoring custom settings for {pattern_id}: expected a mapping")
    return settings


# Global configuration instance
_config: Config | None = None


def get_config(config_path: str = "config.yaml") -> Config:
    """Get or create global configuration instance.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration instance
    """
    global _config
    if _config is None:
        _config = Config(config_path)
    return _config
