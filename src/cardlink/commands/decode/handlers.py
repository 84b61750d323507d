"""Handlers for decode command."""

import json
import sys
from typing import Any

import yaml

from cardlink.core.codec import decode_blocks
from cardlink.lib.command_helpers import read_document
from cardlink.lib.output import error, info, warning

from .operations import block_to_dict, format_blocks_table


def handle(ctx: dict[str, Any]) -> int:
    """Handle decode command.

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

    try:
        text = read_document(args.file)
    except OSError as e:
        error(f"Failed to read {args.file}: {e}")
        return 1

    blocks = decode_blocks(text)
    failed = [block for block in blocks if not block.ok]

    if args.format == "json":
        print(json.dumps([block_to_dict(b) for b in blocks], indent=2, ensure_ascii=False))
    elif args.format == "yaml":
        yaml.safe_dump(
            [block_to_dict(b) for b in blocks],
            sys.stdout,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    else:
        table = format_blocks_table(blocks)
        if table:
            print(table)
        else:
            info("No cards found")

    for block in failed:
        warning(f"Block at line {block.start_line} could not be decoded: {block.error}")

    if failed and args.strict:
        return 1
    return 0
