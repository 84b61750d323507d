"""Argument parser for classify command."""

import argparse


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the classify command parser.

    Parameters
    ----------
    subparsers : argparse._SubParsersAction
        Subparser action from main parser
    """
    parser = subparsers.add_parser(
        "classify",
        help="Check whether text is a URL, a Markdown link or an image link",
        description=(
            "Classify text the way conversion does: bare URL, [label](url) link, "
            "image link, and the URLs found anywhere in the text."
        ),
        epilog="""Examples:
  cardlink classify https://example.com/path
  cardlink classify "[Example](https://example.com)"
  cardlink classify --json "see https://example.com and www.python.org/doc"
""",
    )

    parser.add_argument(
        "text",
        nargs="+",
        help="Text to classify (multiple words are joined with spaces)",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
