"""Handlers for classify command."""

import json
from typing import Any

from cardlink.exceptions import ConfigError
from cardlink.lib.command_helpers import get_convert_config, require_config
from cardlink.lib.formatters import format_bool
from cardlink.lib.output import error, print_key_value

from .operations import classify_text


def handle(ctx: dict[str, Any]) -> int:
    """Handle classify command.

    Parameters
    ----------
    ctx : dict[str, Any]
        Command context

    Returns
    -------
    int
        Exit code: 0 if the text is convertible, 1 otherwise, 2 on config error
    """
    args = ctx["args"]

    try:
        convert_config = get_convert_config(require_config(ctx))
    except ConfigError as e:
        error(str(e))
        return 2

    text = " ".join(args.text)
    result = classify_text(
        text,
        include_links=convert_config["links"],
        include_images=convert_config["images"],
    )

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print_key_value("url", format_bool(result["is_url"]))
        print_key_value("linked url", format_bool(result["is_linked_url"]))
        print_key_value("image", format_bool(result["is_image"]))
        print_key_value("convertible", format_bool(result["convertible"]))
        if result["card_url"]:
            print_key_value("card url", result["card_url"])
        for url in result["urls"]:
            print_key_value("found", url)

    return 0 if result["convertible"] else 1
