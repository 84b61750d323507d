"""Argument parser for config command."""

from typing import Any

from cardlink.lib.formatters import CapitalizedHelpFormatter, create_subparsers


def register_parser(subparsers: Any) -> None:
    """Register config command parser.

    Parameters
    ----------
    subparsers : Any
        Subparsers from main argument parser
    """
    parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage configuration files and settings for cardlink.",
        epilog="""Examples:
  cardlink config init
  cardlink config show
  cardlink config get fetch.timeout
""",
        formatter_class=CapitalizedHelpFormatter,
    )
    # Store parser for help printing
    parser.set_defaults(_config_parser=parser)

    config_subparsers = create_subparsers(parser, "config_subcommand")

    init_parser = config_subparsers.add_parser("init", help="Create config.yaml from the template")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing config.yaml")

    show_parser = config_subparsers.add_parser("show", help="Show current configuration")
    show_parser.add_argument("--raw", action="store_true", help="Show raw YAML")

    config_subparsers.add_parser("path", help="Show config directory path")

    get_parser = config_subparsers.add_parser("get", help="Get config value")
    get_parser.add_argument("key", help="Config key in dot notation (e.g., fetch.timeout)")
