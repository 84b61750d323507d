"""Handlers for config subcommands."""

import sys

import yaml

from cardlink.config.loader import get_config_value
from cardlink.exceptions import ConfigError
from cardlink.lib.command_helpers import require_config
from cardlink.lib.output import error, print_dict
from cardlink.lib.paths import get_config_dir

from .operations import initialize_config


def handle(ctx: dict) -> int:
    """Handle config command.

    Parameters
    ----------
    ctx : dict
        Command context

    Returns
    -------
    int
        Exit code
    """
    args = ctx["args"]
    subcommand = args.config_subcommand

    if not subcommand:
        if hasattr(args, "_config_parser"):
            args._config_parser.print_help()
        else:
            error("No subcommand provided. Use 'cardlink config --help' for usage.")
        return 1

    if subcommand == "init":
        return initialize_config(force=args.force)
    elif subcommand == "show":
        return handle_show(ctx)
    elif subcommand == "path":
        print(get_config_dir())
        return 0
    elif subcommand == "get":
        return handle_get(ctx)
    else:
        error(f"Unknown subcommand: {subcommand}")
        return 1


def handle_show(ctx: dict) -> int:
    """Show current configuration.

    Parameters
    ----------
    ctx : dict
        Command context

    Returns
    -------
    int
        Exit code
    """
    args = ctx["args"]

    try:
        config = require_config(ctx)
    except ConfigError as e:
        error(str(e))
        return 1

    settings = {k: v for k, v in config.items() if k != "_meta"}

    if args.raw:
        yaml.safe_dump(settings, sys.stdout, default_flow_style=False, sort_keys=False)
        return 0

    print("Configuration:")
    print_dict(settings)

    sources = config.get("_meta", {}).get("config_sources", [])
    print()
    if sources:
        print("Loaded from:")
        for source in sources:
            print(f"  - {source}")
    else:
        print("Loaded from: built-in defaults")

    return 0


def handle_get(ctx: dict) -> int:
    """Get config value.

    Parameters
    ----------
    ctx : dict
        Command context

    Returns
    -------
    int
        Exit code
    """
    config = ctx["config"] or {}
    args = ctx["args"]

    value = get_config_value(config, args.key)
    if value is None:
        error(f"Key not found: {args.key}")
        return 1

    if isinstance(value, dict):
        print_dict(value)
    else:
        print(value)
    return 0
