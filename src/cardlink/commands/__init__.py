"""Command implementations for the cardlink CLI."""
