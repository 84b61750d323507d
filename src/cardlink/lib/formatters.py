"""
Output Formatting Functions.

This module provides consistent formatting for argparse help, tables and
card records across cardlink commands.

Functions
---------
create_subparsers : Create subparsers with consistent formatting
format_table : Format data as ASCII table with headers
format_bool : Format a classification answer with color coding
truncate : Shorten a value to a column width

Classes
-------
CapitalizedHelpFormatter : Custom argparse formatter with capitalized section titles
"""

import argparse

from cardlink.lib.output import Colors, colorize


class CapitalizedHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """
    Custom help formatter that capitalizes section titles.

    Extends RawDescriptionHelpFormatter to:
    - Capitalize "usage:" to "Usage:"
    - Add newline after usage for better readability
    - Preserve raw formatting for description text
    """

    def add_usage(self, usage, actions, groups, prefix=None):
        if prefix is None:
            prefix = "Usage:\n  "
        return super().add_usage(usage, actions, groups, prefix)


def create_subparsers(parser: argparse.ArgumentParser, dest: str, **kwargs) -> argparse._SubParsersAction:
    """
    Create subparsers with consistent formatting applied automatically.

    Wraps parser.add_subparsers() so nested subcommands get
    CapitalizedHelpFormatter and an "Options" section title.

    Parameters
    ----------
    parser : argparse.ArgumentParser
        Parent parser to add subparsers to
    dest : str
        Destination attribute name for storing the subcommand
    **kwargs
        Additional arguments passed to add_subparsers()

    Returns
    -------
    argparse._SubParsersAction
        Subparsers object with formatting applied
    """
    defaults = {
        "help": "",
        "title": "Subcommands",
    }
    defaults.update(kwargs)

    subparsers = parser.add_subparsers(dest=dest, **defaults)

    original_add_parser = subparsers.add_parser

    def custom_add_parser(*args, **parse_kwargs):
        if "formatter_class" not in parse_kwargs:
            parse_kwargs["formatter_class"] = CapitalizedHelpFormatter
        subparser = original_add_parser(*args, **parse_kwargs)
        subparser._optionals.title = "Options"
        return subparser

    subparsers.add_parser = custom_add_parser

    return subparsers


def format_table(headers: list[str], rows: list[list[str]], column_widths: list[int] = None) -> str:
    """
    Format data as ASCII table with headers and rows.

    Parameters
    ----------
    headers : list of str
        Column headers.
    rows : list of list of str
        Table rows, where each row is a list of cell values.
    column_widths : list of int, optional
        Fixed column widths. If None, auto-calculated from data.

    Returns
    -------
    str
        Formatted ASCII table with aligned columns and separator line.

    Examples
    --------
    >>> headers = ["#", "Title"]
    >>> rows = [["1", "Example"], ["2", "Docs"]]
    >>> print(format_table(headers, rows))
    #  Title
    ----------
    1  Example
    2  Docs
    """
    if not headers or not rows:
        return ""

    if column_widths is None:
        column_widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(column_widths):
                    column_widths[i] = max(column_widths[i], len(str(cell)))

    header_row = "  ".join(h.ljust(w) for h, w in zip(headers, column_widths))
    separator = "-" * len(header_row)

    formatted_rows = []
    for row in rows:
        formatted_row = "  ".join(str(cell).ljust(w) for cell, w in zip(row, column_widths))
        formatted_rows.append(formatted_row.rstrip())

    return "\n".join([header_row.rstrip(), separator] + formatted_rows)


def format_bool(value: bool) -> str:
    """
    Format a yes/no answer with color coding.

    Parameters
    ----------
    value : bool
        Answer to format.

    Returns
    -------
    str
        Green "yes" or dimmed "no".
    """
    if value:
        return colorize("yes", Colors.GREEN)
    return colorize("no", Colors.DIM)


def truncate(value: str | None, width: int) -> str:
    """
    Shorten a value to fit a table column.

    Parameters
    ----------
    value : str or None
        Value to shorten; None renders as "-".
    width : int
        Maximum length including the trailing ellipsis.

    Returns
    -------
    str
        Single-line value of at most ``width`` characters.
    """
    if value is None:
        return "-"
    text = " ".join(value.split())
    if len(text) <= width:
        return text
    return text[: max(width - 1, 0)] + "…"
