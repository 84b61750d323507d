"""
Dual-mode logging for cardlink commands.

Provides human-readable console logs by default and JSON structured logs
when LOG_FORMAT=json, for running conversions from scripts and CI jobs.
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

ROOT_LOGGER = "cardlink"


def setup_logger(
    command: Optional[str] = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Setup dual-mode logger for the cardlink package.

    Configures the ``cardlink`` logger, which every module logs through via
    ``logging.getLogger(__name__)``. Logs go to stderr so that commands
    writing documents to stdout stay pipeable.

    Parameters
    ----------
    command : str, optional
        Command name added to every log entry (e.g., "convert", "decode")
    verbose : bool, optional
        Force DEBUG level regardless of LOG_LEVEL, by default False

    Returns
    -------
    logging.Logger
        Configured logger instance

    Examples
    --------
    >>> logger = setup_logger("convert")
    >>> logger.warning("Could not fetch https://example.com")

    Environment Variables
    ---------------------
    LOG_FORMAT : str
        Output format: "text" (console, default) or "json"
    LOG_LEVEL : str
        Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: WARNING)
    """
    logger = logging.getLogger(ROOT_LOGGER)

    if verbose:
        logger.setLevel(logging.DEBUG)
    else:
        log_level = os.getenv("LOG_LEVEL", "WARNING").upper()
        logger.setLevel(getattr(logging, log_level, logging.WARNING))

    # Remove existing handlers to avoid duplicates if called multiple times
    logger.handlers.clear()

    log_format = os.getenv("LOG_FORMAT", "text").lower()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logger.level)

    if log_format == "json":
        formatter = _create_json_formatter(command)
    else:
        formatter = _create_text_formatter(command)

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Don't propagate to root logger (prevents duplicate logs)
    logger.propagate = False

    return logger


def _create_json_formatter(command: Optional[str]) -> logging.Formatter:
    """
    Create JSON formatter for machine-readable logs.

    Uses python-json-logger so log collectors can parse and index entries.
    """

    class CommandFormatter(jsonlogger.JsonFormatter):
        def add_fields(self, log_record, record, message_dict):
            """Add command context to every log entry."""
            super().add_fields(log_record, record, message_dict)

            if command:
                log_record["command"] = command

            # Rename 'levelname' to 'severity' to match common collectors
            if "levelname" in log_record:
                log_record["severity"] = log_record.pop("levelname")

    return CommandFormatter(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def _create_text_formatter(command: Optional[str]) -> logging.Formatter:
    """
    Create human-readable formatter for console use.

    Outputs timestamps, logger name, severity and, when given, the command.
    """
    format_parts = [
        "%(asctime)s",
        "%(name)s",
        "%(levelname)s",
    ]

    if command:
        format_parts.append(f"[{command}]")

    format_parts.append("%(message)s")

    return logging.Formatter(
        fmt=" ".join(format_parts),
        datefmt="%Y-%m-%d %H:%M:%S",
    )
