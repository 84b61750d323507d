"""XDG-compliant path management for cardlink."""

import os
from pathlib import Path

APP_NAME = "cardlink"


def get_config_dir() -> Path:
    """
    Get the configuration directory following XDG Base Directory spec.

    Returns
    -------
    Path
        Path to ~/.config/cardlink/ or $XDG_CONFIG_HOME/cardlink/.
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base = Path(xdg_config_home)
    else:
        base = Path.home() / ".config"

    return base / APP_NAME


def get_config_file() -> Path:
    """
    Get path to main configuration file.

    Returns
    -------
    Path
        Path to config.yaml in the configuration directory.
    """
    return get_config_dir() / "config.yaml"


def get_project_config_file() -> Path:
    """
    Get path to project-local configuration file.

    Returns
    -------
    Path
        Path to ./cardlink.yaml in the current working directory.
    """
    return Path.cwd() / "cardlink.yaml"


def get_template_file() -> Path:
    """
    Get path to the bundled configuration template.

    Returns
    -------
    Path
        Path to config/templates/config.yaml inside the package.
    """
    return Path(__file__).parent.parent / "config" / "templates" / "config.yaml"
