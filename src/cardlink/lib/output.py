"""Status and formatted output for the cardlink CLI.

Status lines (success, info, warning, error) go to stderr so a converted
document or encoded card can be piped from stdout. In quiet mode only
warnings and errors are printed.
"""

import os
import sys
from typing import TextIO


# Global output state
_color_enabled = None  # None = auto-detect, True = force on, False = force off
_quiet = False


def set_color_enabled(enabled: bool | None) -> None:
    """
    Set global color output preference.

    Parameters
    ----------
    enabled : bool or None
        True to enable colors, False to disable, None to auto-detect.
    """
    global _color_enabled
    _color_enabled = enabled


def set_quiet(enabled: bool) -> None:
    """
    Suppress success and info messages for the rest of the run.

    Parameters
    ----------
    enabled : bool
        True for quiet mode (``--quiet``).
    """
    global _quiet
    _quiet = enabled


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


def supports_color(stream: TextIO | None = None) -> bool:
    """
    Check if a stream should get color output.

    Parameters
    ----------
    stream : file object, optional
        Stream the text is written to, by default stdout.

    Returns
    -------
    bool
        The ``--no-color`` preference if set. Otherwise True when the stream
        is a TTY, ``NO_COLOR`` is unset and the platform is not Windows.
    """
    if _color_enabled is not None:
        return _color_enabled
    if os.environ.get("NO_COLOR"):
        return False

    stream = stream or sys.stdout
    return stream.isatty() and not sys.platform.startswith("win")


def colorize(text: str, color: str, stream: TextIO | None = None) -> str:
    """
    Colorize text if the target stream supports it.

    Parameters
    ----------
    text : str
        Text to colorize.
    color : str
        ANSI color code from the Colors class.
    stream : file object, optional
        Stream the text is written to, by default stdout.

    Returns
    -------
    str
        Colorized text if supported, plain text otherwise.
    """
    if supports_color(stream):
        return f"{color}{text}{Colors.RESET}"
    return text


def _status(symbol: str, color: str, message: str) -> None:
    print(f"{colorize(symbol, color, sys.stderr)} {message}", file=sys.stderr)


def success(message: str) -> None:
    """Print a green check and the message to stderr, unless quiet."""
    if not _quiet:
        _status("✓", Colors.GREEN, message)


def error(message: str) -> None:
    """Print a red cross and the message to stderr."""
    _status("✗", Colors.RED, message)


def warning(message: str) -> None:
    """Print a yellow warning sign and the message to stderr."""
    _status("⚠", Colors.YELLOW, message)


def info(message: str) -> None:
    """
    Print an indented informational message to stderr, unless quiet.

    Used for dry-run previews, verbose settings and "nothing to do" notes.
    """
    if not _quiet:
        print(f"  {message}", file=sys.stderr)


def print_key_value(key: str, value: str, indent: int = 0) -> None:
    """Print ``key: value`` to stdout with a cyan key, two spaces per indent level."""
    print(f"{'  ' * indent}{colorize(key, Colors.CYAN)}: {value}")


def print_dict(data: dict, indent: int = 0) -> None:
    """
    Print a nested settings mapping to stdout, one key per line.

    Nested mappings become indented sections; top-level sections are
    separated by a blank line.

    Parameters
    ----------
    data : dict
        Mapping to print, such as a configuration section.
    indent : int, optional
        Indentation level (number of 2-space indents), by default 0.
    """
    for i, (key, value) in enumerate(data.items()):
        if not isinstance(value, dict):
            print_key_value(key, str(value), indent)
            continue
        if indent == 0 and i > 0:
            print()
        print(f"{'  ' * indent}{colorize(key, Colors.CYAN)}:")
        print_dict(value, indent + 1)
