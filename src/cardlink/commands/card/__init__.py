"""Card command for turning one URL into a cardlink block."""

from .handlers import handle
from .parser import register_parser

__all__ = ["register_parser", "handle"]
