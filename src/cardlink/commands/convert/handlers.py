"""Handlers for convert command."""

import sys
from pathlib import Path
from typing import Any

from cardlink.exceptions import ConfigError
from cardlink.lib.command_helpers import (
    get_convert_config,
    get_fetch_config,
    handle_dry_run,
    read_document,
    require_config,
)
from cardlink.lib.metadata import MetadataFetcher
from cardlink.lib.output import error, info, success, warning

from .operations import convert_document


def handle(ctx: dict[str, Any]) -> int:
    """Handle convert command.

    Parameters
    ----------
    ctx : dict[str, Any]
        Command context

    Returns
    -------
    int
        Exit code
    """
    args = ctx["args"]
    verbose = ctx["verbose"]

    try:
        config = require_config(ctx)
        fetch_config = get_fetch_config(config)
        convert_config = get_convert_config(config)
    except ConfigError as e:
        error(str(e))
        return 2

    if args.in_place and args.file == "-":
        error("--in-place cannot be used with stdin")
        return 1

    try:
        text = read_document(args.file)
    except OSError as e:
        error(f"Failed to read {args.file}: {e}")
        return 1

    include_links = convert_config["links"] and not args.no_links
    include_images = convert_config["images"] or args.images

    if verbose:
        info(f"Timeout: {fetch_config['timeout']}s")
        info(f"Convert links: {include_links}, images: {include_images}")

    with MetadataFetcher(timeout=fetch_config["timeout"], user_agent=fetch_config["agent"]) as fetch:
        result = convert_document(
            text,
            fetch,
            include_links=include_links,
            include_images=include_images,
        )

    for failure in result.failures:
        warning(f"Line {failure.line}: {failure.url} left unchanged ({failure.reason})")

    target = args.file if args.in_place else args.output
    if target:
        if handle_dry_run(ctx, f"Write {target}", {"cards": len(result.converted)}):
            return 0
        Path(target).write_text(result.text, encoding="utf-8")
    else:
        sys.stdout.write(result.text)

    if result.converted:
        success(f"Converted {len(result.converted)} URL(s)" + (f" into {target}" if target else ""))
    elif not result.failures:
        info("No URL lines to convert")

    if result.failures and not result.converted:
        return 1
    return 0
