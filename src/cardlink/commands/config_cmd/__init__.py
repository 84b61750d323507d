"""Configuration management commands.

Available subcommands:
    cardlink config init          Create config.yaml from the template
    cardlink config show          Show current configuration
    cardlink config path          Show config directory path
    cardlink config get           Get config value
"""

from .handlers import handle
from .parser import register_parser

__all__ = ["register_parser", "handle"]
