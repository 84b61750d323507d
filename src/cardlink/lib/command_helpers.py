"""
Command Helper Functions.

This module provides common helper functions used across cardlink commands to
reduce code duplication and ensure consistent behavior.

Functions
---------
require_config : Get configuration with validation
get_fetch_config : Get typed fetch settings
get_convert_config : Get typed convert settings
handle_dry_run : Handle dry-run mode with consistent messaging
read_document : Read a document from a path or stdin
"""

import sys
from pathlib import Path
from typing import Any, TypedDict

from cardlink.config.loader import DEFAULT_CONFIG, get_config_value
from cardlink.exceptions import ConfigError
from cardlink.lib.output import info

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


class CommandContext(TypedDict):
    """
    Type-safe command context dictionary.

    Attributes
    ----------
    config : dict
        Loaded configuration dictionary.
    verbose : bool
        Enable verbose output.
    quiet : bool
        Suppress informational output.
    dry_run : bool
        Simulate actions without executing them.
    args : argparse.Namespace
        Parsed command-line arguments.
    """

    config: dict
    verbose: bool
    quiet: bool
    dry_run: bool
    args: object  # argparse.Namespace


def require_config(ctx: CommandContext) -> dict:
    """
    Ensure configuration is loaded and return it.

    Parameters
    ----------
    ctx : CommandContext
        Command context dictionary.

    Returns
    -------
    dict
        Configuration dictionary.

    Raises
    ------
    ConfigError
        If configuration is not loaded.
    """
    config = ctx.get("config")
    if not config:
        raise ConfigError("Configuration not loaded")
    return config


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE_VALUES:
        return True
    if isinstance(value, str) and value.strip().lower() in _FALSE_VALUES:
        return False
    raise ConfigError(f"Expected a boolean for {key}", {"value": value})


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"Expected a number for {key}", {"value": value})
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Expected a number for {key}", {"value": value})
    if number <= 0:
        raise ConfigError(f"{key} must be positive", {"value": value})
    return number


def get_fetch_config(config: dict[str, Any]) -> dict[str, Any]:
    """
    Extract fetch settings with defaults and type coercion.

    Parameters
    ----------
    config : dict[str, Any]
        Loaded configuration dictionary.

    Returns
    -------
    dict[str, Any]
        ``timeout`` (float seconds) and ``agent`` (str).

    Raises
    ------
    ConfigError
        If a value has the wrong type.
    """
    defaults = DEFAULT_CONFIG["fetch"]
    timeout = get_config_value(config, "fetch.timeout", defaults["timeout"])
    agent = get_config_value(config, "fetch.agent", defaults["agent"])
    return {
        "timeout": _as_float(timeout, "fetch.timeout"),
        "agent": str(agent),
    }


def get_convert_config(config: dict[str, Any]) -> dict[str, bool]:
    """
    Extract convert settings with defaults and type coercion.

    Parameters
    ----------
    config : dict[str, Any]
        Loaded configuration dictionary.

    Returns
    -------
    dict[str, bool]
        ``links`` and ``images`` flags.

    Raises
    ------
    ConfigError
        If a value is not a boolean.
    """
    defaults = DEFAULT_CONFIG["convert"]
    return {
        key: _as_bool(get_config_value(config, f"convert.{key}", default), f"convert.{key}")
        for key, default in defaults.items()
    }


def handle_dry_run(ctx: CommandContext, message: str, details: dict | None = None) -> bool:
    """
    Handle dry-run mode with consistent messaging.

    Parameters
    ----------
    ctx : CommandContext
        Command context dictionary.
    message : str
        Main action description (e.g., "Write notes.md").
    details : dict, optional
        Additional details to display.

    Returns
    -------
    bool
        True if in dry-run mode (caller should return early), False otherwise.
    """
    if not ctx.get("dry_run"):
        return False

    info(f"DRY RUN: {message}")

    if details:
        for key, value in details.items():
            info(f"  {key}: {value}")

    return True


def read_document(path: str) -> str:
    """
    Read a document from a file, or from stdin when path is "-".

    Parameters
    ----------
    path : str
        File path or "-".

    Returns
    -------
    str
        Document text.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")
