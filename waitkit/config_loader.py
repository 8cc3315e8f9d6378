"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration with environment variable override support, and
construction of wait policies from it.

Features:
    - YAML configuration loading
    - Environment variable override (WAIT_TIMEOUT overrides wait.timeout)
    - Dot notation path access
    - Per-scenario wait policy overrides (wait.scenarios.<name>)

Configuration is an explicit value: build a ConfigLoader and pass it to
whatever constructs policies. There is no process-wide instance.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

import yaml
from loguru import logger

from . import errors
from .errors import ConfigurationError
from .policy import WAIT_SCENARIOS, WaitPolicy, get_wait_policy


# Default configuration file path
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (WAIT_TIMEOUT, which policy_from_config
           applies to every scenario)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("wait.timeout", 10.0)
        15.0  # From YAML or env var

    Environment Variable Mapping:
        - wait.timeout -> WAIT_TIMEOUT
        - wait.poll_interval -> WAIT_POLL_INTERVAL
        - logging.level -> LOGGING_LEVEL
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Dict[str, Any] = {}
        self._load_config()

    @property
    def path(self) -> Path:
        return self._config_path

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {self._config_path}"
            )
        self._config = loaded
        logger.debug(f"Loaded configuration from: {self._config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "wait.timeout")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get entire configuration section.

        Args:
            section: Section name (e.g., "wait", "logging")

        Returns:
            Section dictionary or empty dict if not found
        """
        return self._config.get(section) or {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value


def resolve_error_types(names) -> Tuple[Type[BaseException], ...]:
    """
    Resolve configured error names (e.g. "DetachedError") to waitkit classes.

    Raises:
        ConfigurationError: If a name is not a waitkit exception
    """
    if isinstance(names, str):
        names = [n.strip() for n in names.split(",") if n.strip()]

    resolved = []
    for name in names or []:
        error_type = getattr(errors, name, None)
        if not (isinstance(error_type, type) and issubclass(error_type, BaseException)):
            raise ConfigurationError(f"Unknown error kind in configuration: {name!r}")
        resolved.append(error_type)
    return tuple(resolved)


def _as_seconds(name: str, value: Any) -> Any:
    # Env overrides and hand-written YAML often yield strings
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise ConfigurationError(f"{name} must be a number of seconds, got {value!r}")
    return value


def policy_from_config(config: ConfigLoader, scenario: Optional[str] = None) -> WaitPolicy:
    """
    Build a WaitPolicy from configuration.

    Resolution order for timeout and poll_interval:
        1. WAIT_TIMEOUT / WAIT_POLL_INTERVAL environment variables
        2. wait.scenarios.<scenario>.<field>
        3. the built-in preset, when the scenario names one
        4. wait.<field> from YAML
        5. the built-in default preset

    Ignored error kinds from wait.ignored_errors and from the scenario
    entry are combined.

    Args:
        config: Loaded configuration
        scenario: Optional scenario name

    Returns:
        Validated WaitPolicy

    Raises:
        ConfigurationError: If the configured values are invalid
    """
    scenario = scenario or "default"
    base = get_wait_policy(scenario)
    has_preset = scenario != "default" and scenario in WAIT_SCENARIOS

    overrides = config.get(f"wait.scenarios.{scenario}", {}) or {}
    if not isinstance(overrides, dict):
        raise ConfigurationError(f"wait.scenarios.{scenario} must be a mapping")

    def pick(field_name: str, preset_value: float) -> Any:
        env_value = os.environ.get(f"WAIT_{field_name.upper()}")
        if env_value is not None:
            return env_value
        if field_name in overrides:
            return overrides[field_name]
        if has_preset:
            return preset_value
        return config.get(f"wait.{field_name}", preset_value)

    timeout = _as_seconds("timeout", pick("timeout", base.timeout))
    poll_interval = _as_seconds("poll_interval", pick("poll_interval", base.poll_interval))
    ignored = resolve_error_types(config.get("wait.ignored_errors", [])) + resolve_error_types(
        overrides.get("ignored_errors", [])
    )

    policy = WaitPolicy(
        timeout=timeout,
        poll_interval=poll_interval,
    ).ignoring(*base.ignored_errors, *ignored)
    logger.debug(f"Wait policy for scenario={scenario or 'default'}: {policy}")
    return policy


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "policy_from_config",
    "resolve_error_types",
]
