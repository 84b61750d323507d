"""Argument parser for decode command."""

import argparse


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the decode command parser.

    Parameters
    ----------
    subparsers : argparse._SubParsersAction
        Subparser action from main parser
    """
    parser = subparsers.add_parser(
        "decode",
        help="List the cards stored in a document",
        description=(
            "Parse every cardlink block in a Markdown document. Blocks that cannot "
            "be parsed are reported and do not stop the others from being read."
        ),
        epilog="""Examples:
  cardlink decode notes.md
  cardlink decode notes.md --format json
  cardlink decode notes.md --strict   # exit 1 if any block is broken
""",
    )

    parser.add_argument("file", help='Markdown file to read ("-" for stdin)')

    parser.add_argument(
        "--format",
        choices=["table", "json", "yaml"],
        default="table",
        help="Output format (default: table)",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any block fails to decode",
    )
