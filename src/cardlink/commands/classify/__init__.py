"""Classify command for checking whether text can become a card link."""

from .handlers import handle
from .parser import register_parser

__all__ = ["register_parser", "handle"]
