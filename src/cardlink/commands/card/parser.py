"""Argument parser for card command."""

import argparse


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("must be 0 or greater")
    return number


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the card command parser.

    Parameters
    ----------
    subparsers : argparse._SubParsersAction
        Subparser action from main parser
    """
    parser = subparsers.add_parser(
        "card",
        help="Print the cardlink block for a URL",
        description="Fetch page metadata for a URL or [label](url) link and print its cardlink block.",
        epilog="""Examples:
  cardlink card https://example.com
  cardlink card --indent 1 "[Docs](https://docs.python.org/3/)"
  cardlink card --offline www.example.com/page
""",
    )

    parser.add_argument("url", help="URL or Markdown link to convert")

    parser.add_argument(
        "--indent",
        type=_non_negative_int,
        default=0,
        help="Nesting depth of the card in a list (default: 0)",
    )

    parser.add_argument(
        "--offline",
        action="store_true",
        help="Do not fetch the page; use the URL as title",
    )

    parser.add_argument(
        "--fallback",
        action="store_true",
        help="Print a URL-only card instead of failing when the page cannot be fetched",
    )
