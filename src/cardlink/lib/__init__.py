"""Shared helpers for cardlink commands."""
