"""Configuration loading for cardlink."""
