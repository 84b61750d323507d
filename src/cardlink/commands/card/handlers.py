"""Handlers for card command."""

import sys
from typing import Any

from cardlink.core.classifier import extract_card_url
from cardlink.core.codec import encode
from cardlink.core.models import LinkMetadata
from cardlink.exceptions import ConfigError, MetadataRetrievalError
from cardlink.lib.command_helpers import get_fetch_config, require_config
from cardlink.lib.metadata import MetadataFetcher
from cardlink.lib.output import error, info, warning


def handle(ctx: dict[str, Any]) -> int:
    """Handle card command.

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

    url = extract_card_url(args.url, include_links=True, include_images=True)
    if url is None:
        error(f"Not a URL or Markdown link: {args.url}")
        return 1

    if args.offline:
        record = LinkMetadata.from_url(url, indent=args.indent)
    else:
        try:
            fetch_config = get_fetch_config(require_config(ctx))
        except ConfigError as e:
            error(str(e))
            return 2

        if ctx["verbose"]:
            info(f"Fetching {url} (timeout {fetch_config['timeout']}s)")

        try:
            with MetadataFetcher(
                timeout=fetch_config["timeout"], user_agent=fetch_config["agent"]
            ) as fetch:
                record = fetch(url, indent=args.indent)
        except MetadataRetrievalError as e:
            if not args.fallback:
                error(str(e))
                return 1
            warning(f"{e}; using URL-only card")
            record = LinkMetadata.from_url(url, indent=args.indent)

    sys.stdout.write(encode(record))
    return 0
