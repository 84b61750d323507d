"""Block summaries for decode command."""

from typing import Any

from cardlink.core.codec import DecodedBlock
from cardlink.lib.formatters import format_table, truncate


def block_to_dict(block: DecodedBlock) -> dict[str, Any]:
    """Convert a decoded block into plain data for JSON or YAML output.

    Parameters
    ----------
    block : DecodedBlock
        Decoded block

    Returns
    -------
    dict[str, Any]
        Line range, records and error message (None on success)
    """
    return {
        "start_line": block.start_line,
        "end_line": block.end_line,
        "records": [record.to_dict() for record in block.records],
        "error": str(block.error) if block.error else None,
    }


def format_blocks_table(blocks: list[DecodedBlock]) -> str:
    """Format the records of successfully decoded blocks as a table.

    Parameters
    ----------
    blocks : list[DecodedBlock]
        Decoded blocks; failed blocks are skipped

    Returns
    -------
    str
        ASCII table, empty string if there are no records
    """
    rows = []
    for block in blocks:
        for record in block.records:
            title = "  " * record.indent + truncate(record.title, 40)
            rows.append(
                [
                    str(block.start_line),
                    str(record.indent),
                    title,
                    truncate(record.host, 24),
                    truncate(record.url, 60),
                ]
            )
    return format_table(["Line", "Indent", "Title", "Host", "URL"], rows)
