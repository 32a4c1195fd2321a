"""Configuration loader for rfcsections.

This module provides the ConfigLoader class for loading the optional
rfcsections.yaml file, layering environment variables and CLI overrides on
top of it, and validating the result into an AppConfig.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from rfcsections.config.defaults import CONFIG_FILE_NAMES, ENV_VAR_MAP
from rfcsections.config.validator import format_validation_error
from rfcsections.lib.errors import ConfigError
from rfcsections.models.config import AppConfig

logger = logging.getLogger(__name__)


def _parse_env_value(field_name: str, value: str) -> Any:
    """Parse environment variable value to the field's type.

    Raises:
        ValueError: If value cannot be parsed
    """
    if field_name == "timeout":
        return float(value)
    return value


def _env_overrides(env_vars: Mapping[str, str]) -> dict[str, dict[str, Any]]:
    """Collect RFCSECTIONS_* variables into a nested override dict.

    Unparseable values are skipped with a warning.
    """
    overrides: dict[str, dict[str, Any]] = {}
    for (section, field_name), env_var_name in ENV_VAR_MAP.items():
        if env_var_name not in env_vars:
            continue
        try:
            value = _parse_env_value(field_name, env_vars[env_var_name])
        except ValueError:
            logger.warning(
                f"Ignoring {env_var_name}={env_vars[env_var_name]!r}: "
                f"not a valid {field_name}"
            )
            continue
        overrides.setdefault(section, {})[field_name] = value
    return overrides


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> None:
    """Deep merge override dict into base dict (in-place).

    For nested dicts, merging is recursive. For other types, override
    completely replaces base. None values in override are ignored so unset
    CLI options fall through to lower layers.
    """
    for key, override_value in override.items():
        if override_value is None:
            continue
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(override_value, Mapping)
        ):
            _deep_merge(base[key], override_value)
        elif isinstance(override_value, Mapping):
            base[key] = {}
            _deep_merge(base[key], override_value)
        else:
            base[key] = override_value


class ConfigLoader:
    """Loads and validates rfcsections configuration.

    Configuration priority (highest to lowest):
    1. CLI overrides
    2. YAML config file (--config, or rfcsections.yml|yaml in the working dir)
    3. Environment variables (RFCSECTIONS_*)
    4. Built-in defaults
    """

    def __init__(self, env_vars: Mapping[str, str] | None = None) -> None:
        """Initialize the loader.

        Args:
            env_vars: Environment mapping, defaults to os.environ
        """
        self._env_vars = env_vars if env_vars is not None else os.environ

    def parse_yaml(self, file_path: str | Path) -> dict[str, Any]:
        """Parse a YAML file and return its contents as a dictionary.

        Args:
            file_path: Path to the YAML file to parse

        Returns:
            Parsed mapping, empty if the file is empty

        Raises:
            ConfigError: If the file cannot be read, is not valid YAML, or
                does not contain a mapping
        """
        path = Path(file_path)

        try:
            with open(path, encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(
                "config_file",
                f"Configuration file not found at {path}. "
                f"Please ensure the file exists at this path.",
            ) from e
        except yaml.YAMLError as e:
            raise ConfigError(
                "yaml_parse",
                f"Failed to parse YAML file {path}: {str(e)}",
            ) from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(
                "yaml_parse",
                f"Expected a mapping at the top of {path}, "
                f"got {type(content).__name__}",
            )
        return content

    def find_config_file(self, directory: str | Path = ".") -> Path | None:
        """Locate rfcsections.yml or rfcsections.yaml in a directory.

        The .yml extension is preferred when both exist.
        """
        config_dir = Path(directory)
        candidates = [config_dir / name for name in CONFIG_FILE_NAMES]
        existing = [path for path in candidates if path.exists()]
        if not existing:
            return None
        if len(existing) > 1:
            logger.info(
                f"Both {existing[0]} and {existing[1]} exist. "
                f"Using {existing[0]} (prefer .yml extension)."
            )
        return existing[0]

    def load(
        self,
        config_path: str | Path | None = None,
        overrides: Mapping[str, Mapping[str, Any]] | None = None,
        search_dir: str | Path = ".",
    ) -> AppConfig:
        """Load the effective configuration.

        Args:
            config_path: Explicit YAML file; when None the working directory
                is searched
            overrides: Nested CLI overrides, e.g. {"output": {"output_dir": "out"}}
            search_dir: Directory searched when config_path is None

        Returns:
            Validated AppConfig

        Raises:
            ConfigError: If the file is unreadable or any value is invalid
        """
        merged: dict[str, Any] = {}
        _deep_merge(merged, _env_overrides(self._env_vars))

        path = Path(config_path) if config_path else self.find_config_file(search_dir)
        source = "defaults and environment"
        if path is not None:
            logger.debug(f"Loading configuration from {path}")
            _deep_merge(merged, self.parse_yaml(path))
            source = str(path)

        if overrides:
            _deep_merge(merged, overrides)

        try:
            return AppConfig(**merged)
        except PydanticValidationError as e:
            raise ConfigError(
                "config_validation", format_validation_error(e, source)
            ) from e
