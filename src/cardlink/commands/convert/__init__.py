"""Convert command for rewriting URL lines of a document into card blocks."""

from .handlers import handle
from .parser import register_parser

__all__ = ["register_parser", "handle"]
