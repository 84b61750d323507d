"""Card links for Markdown documents: URL classification and cardlink block codec."""

__version__ = "0.1.0"
