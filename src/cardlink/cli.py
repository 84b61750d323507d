"""Main CLI entry point for cardlink."""

import argparse
import sys
from pathlib import Path

from cardlink import __version__
from cardlink.config.loader import ConfigLoader
from cardlink.lib.formatters import CapitalizedHelpFormatter
from cardlink.lib.logger import setup_logger
from cardlink.lib.output import error, set_color_enabled, set_quiet


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser with all commands and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured argument parser with all commands registered.
    """
    parser = argparse.ArgumentParser(
        prog="cardlink",
        description="Turn URLs in Markdown documents into cardlink blocks and read them back",
        formatter_class=CapitalizedHelpFormatter,
    )

    # Global options
    parser.add_argument("--version", "-v", action="version", version=f"cardlink {__version__}")
    parser.add_argument("--config", "-c", type=Path, help="Extra config file merged over the defaults")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Quiet mode (errors only)")
    parser.add_argument("--dry-run", action="store_true", help="Show what would happen")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser._optionals.title = "Options"

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Monkey-patch add_parser to automatically set Options title and formatter
    original_add_parser = subparsers.add_parser

    def custom_add_parser(*args, **kwargs):
        if "formatter_class" not in kwargs:
            kwargs["formatter_class"] = CapitalizedHelpFormatter
        subparser = original_add_parser(*args, **kwargs)
        subparser._optionals.title = "Options"
        return subparser

    subparsers.add_parser = custom_add_parser

    from cardlink.commands import card, classify, config_cmd, convert, decode

    classify.register_parser(subparsers)
    card.register_parser(subparsers)
    convert.register_parser(subparsers)
    decode.register_parser(subparsers)
    config_cmd.register_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point for the cardlink command.

    Parses command-line arguments, loads configuration, creates command context,
    and routes execution to the appropriate command handler.

    Parameters
    ----------
    argv : list of str, optional
        Arguments to parse instead of sys.argv.

    Returns
    -------
    int
        Exit code: 0 for success, 1 for command failure, 2 for configuration error,
        130 for keyboard interrupt.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        set_color_enabled(False)
    set_quiet(args.quiet)

    if not args.command:
        parser.print_help()
        return 1

    setup_logger(args.command, verbose=args.verbose)

    try:
        config = ConfigLoader(config_path=args.config).load()
    except Exception as e:
        if args.verbose:
            import traceback

            traceback.print_exc()
        error(f"Failed to load configuration: {e}")
        return 2

    ctx = {
        "config": config,
        "verbose": args.verbose,
        "quiet": args.quiet,
        "dry_run": args.dry_run,
        "args": args,
    }

    try:
        if args.command == "classify":
            from cardlink.commands import classify

            return classify.handle(ctx)
        elif args.command == "card":
            from cardlink.commands import card

            return card.handle(ctx)
        elif args.command == "convert":
            from cardlink.commands import convert

            return convert.handle(ctx)
        elif args.command == "decode":
            from cardlink.commands import decode

            return decode.handle(ctx)
        elif args.command == "config":
            from cardlink.commands import config_cmd

            return config_cmd.handle(ctx)
        else:
            error(f"Command '{args.command}' not yet implemented")
            return 1

    except KeyboardInterrupt:
        print()
        return 130
    except Exception as e:
        error(f"Command failed: {e}")
        if ctx["verbose"]:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
