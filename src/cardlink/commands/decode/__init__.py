"""Decode command for reading cardlink blocks back out of a document."""

from .handlers import handle
from .parser import register_parser

__all__ = ["register_parser", "handle"]
