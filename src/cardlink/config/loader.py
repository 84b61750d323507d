"""Configuration loader with layered YAML files and environment overrides."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml

from cardlink import __version__
from cardlink.exceptions import ConfigError
from cardlink.lib.paths import get_config_file, get_project_config_file

ENV_PREFIX = "CARDLINK_"

DEFAULT_CONFIG = {
    "fetch": {
        "timeout": 10,
        "agent": f"cardlink/{__version__}",
    },
    "convert": {
        "links": True,
        "images": False,
    },
}


class ConfigLoader:
    """
    Load and merge configuration from multiple sources.

    The ConfigLoader manages hierarchical configuration loading from:
    1. Built-in defaults
    2. User config (~/.config/cardlink/config.yaml)
    3. Project config (./cardlink.yaml)
    4. Explicit config file (--config)
    5. Environment variables (CARDLINK_*)

    Attributes
    ----------
    config_path : Path or None
        Explicit configuration file given on the command line.
    """

    def __init__(self, config_path: Path | None = None):
        """
        Initialize configuration loader.

        Parameters
        ----------
        config_path : Path or None, optional
            Extra config file merged over the user and project files,
            by default None.
        """
        self.config_path = config_path

    def _load_yaml_file(self, path: Path) -> dict:
        """
        Load and parse a YAML configuration file.

        Parameters
        ----------
        path : Path
            Path to YAML file to load.

        Returns
        -------
        dict
            Parsed YAML content, or empty dict if file doesn't exist.

        Raises
        ------
        ConfigError
            If YAML file contains invalid syntax or is not a mapping.
        """
        if not path.exists():
            return {}

        try:
            with open(path) as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")
        return content

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """
        Deep merge two dictionaries recursively.

        Nested dictionaries are merged recursively. For non-dict values,
        the override value replaces the base value.

        Parameters
        ----------
        base : dict
            Base dictionary to merge into.
        override : dict
            Override dictionary with values to merge.

        Returns
        -------
        dict
            New dictionary with merged contents.
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config: dict) -> dict:
        """
        Apply environment variable overrides to configuration.

        Variable names are converted from CARDLINK_SECTION_KEY format to
        nested dictionary paths. Values stay strings; typed getters coerce.

        Parameters
        ----------
        config : dict
            Configuration dictionary to apply overrides to.

        Returns
        -------
        dict
            Configuration with environment variable overrides applied.
        """
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX):
                continue

            key_path = env_key[len(ENV_PREFIX) :].lower().split("_")

            current = config
            for key in key_path[:-1]:
                if not isinstance(current.get(key), dict):
                    current[key] = {}
                current = current[key]

            current[key_path[-1]] = env_value

        return config

    def _get_candidate_files(self) -> list[Path]:
        files = [get_config_file(), get_project_config_file()]
        if self.config_path:
            files.append(Path(self.config_path))
        return files

    def load(self) -> dict:
        """
        Load and merge configuration from all sources.

        Returns
        -------
        dict
            Merged configuration dictionary with a ``_meta`` section listing
            the files that were loaded.

        Raises
        ------
        ConfigError
            If an explicit config file is missing or any file is invalid.
        """
        if self.config_path and not Path(self.config_path).exists():
            raise ConfigError(f"Config file not found: {self.config_path}")

        config = copy.deepcopy(DEFAULT_CONFIG)

        for path in self._get_candidate_files():
            config = self._deep_merge(config, self._load_yaml_file(path))

        config = self._apply_env_overrides(config)

        config["_meta"] = {
            "config_sources": self._get_loaded_sources(),
        }

        return config

    def _get_loaded_sources(self) -> list[str]:
        """
        Get list of configuration files that were loaded.

        Returns
        -------
        list of str
            Config file paths that exist.
        """
        return [str(path) for path in self._get_candidate_files() if path.exists()]


def get_config_value(config: dict, key_path: str, default: Any = None) -> Any:
    """
    Get configuration value using dot notation path.

    Parameters
    ----------
    config : dict
        Configuration dictionary to query.
    key_path : str
        Key path in dot notation (e.g., "fetch.timeout").
    default : Any, optional
        Default value to return if key doesn't exist, by default None.

    Returns
    -------
    Any
        Configuration value if found, default value otherwise.

    Examples
    --------
    >>> config = {"fetch": {"timeout": 10}}
    >>> get_config_value(config, "fetch.timeout")
    10
    >>> get_config_value(config, "nonexistent.key", "default")
    'default'
    """
    keys = key_path.split(".")
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value
