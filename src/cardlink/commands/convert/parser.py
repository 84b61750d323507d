"""Argument parser for convert command."""

import argparse


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the convert command parser.

    Parameters
    ----------
    subparsers : argparse._SubParsersAction
        Subparser action from main parser
    """
    parser = subparsers.add_parser(
        "convert",
        help="Replace URL lines in a Markdown document with card blocks",
        description=(
            "Replace every line that is only a URL (or a [label](url) link) with a "
            "cardlink block built from the page metadata. Lines inside fenced code "
            "blocks are left alone. Lines whose page cannot be fetched stay as they are."
        ),
        epilog="""Examples:
  cardlink convert notes.md                 # print converted document
  cardlink convert notes.md -o cards.md
  cardlink convert notes.md --in-place
  cat notes.md | cardlink convert - > cards.md
""",
    )

    parser.add_argument("file", help='Markdown file to convert ("-" for stdin)')

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        help="Write the converted document to PATH (default: stdout)",
    )
    output.add_argument(
        "-i",
        "--in-place",
        action="store_true",
        help="Overwrite the input file",
    )

    parser.add_argument(
        "--no-links",
        action="store_true",
        help="Leave [label](url) lines alone (overrides convert.links)",
    )

    parser.add_argument(
        "--images",
        action="store_true",
        help="Also convert direct image links (overrides convert.images)",
    )
