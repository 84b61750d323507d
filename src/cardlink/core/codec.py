"""Card block encoding and decoding.

A card block is a fenced code block with the ``cardlink`` language tag holding
one ``key: value`` line per populated field:

    ```cardlink
    url: https://example.com/
    title: "Example Domain"
    host: example.com
    	url: https://example.com/child
    	title: "Child page"
    ```

Each record line is indented by one tab per nesting level. ``title`` and
``description`` are always written as JSON double-quoted strings; other values
are written bare unless they need quoting. Quoting escapes quotes, backslashes
and line breaks, so every value stays on its own line.

A block may be indented as a whole, for example to stay inside a Markdown list
item. Record lines that repeat the opening fence's indentation are measured
from the end of it, and the fence's own depth is added to their level.
"""

import json
import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from cardlink.core.models import FIELD_NAMES, LinkMetadata
from cardlink.exceptions import (
    DecodeError,
    MalformedBlockError,
    MissingRequiredFieldError,
    ValidationError,
)

logger = logging.getLogger(__name__)

BLOCK_LANGUAGE = "cardlink"
OPEN_FENCE = f"```{BLOCK_LANGUAGE}"
CLOSE_FENCE = "```"
INDENT_UNIT = "\t"
SPACES_PER_LEVEL = 4
QUOTED_FIELDS = ("title", "description")

_LINE_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_-]*):(?:[ \t]+(.*))?$")
_FENCE_PATTERN = re.compile(r"^(`{3,}|~{3,})(.*)$")
_NEEDS_QUOTING = re.compile("[\x00-\x1f\x7f\x85\u2028\u2029]")
# Characters json.dumps leaves raw that some editors treat as line breaks
_JSON_RAW_BREAKS = re.compile("[\x7f\x85\u2028\u2029]")

# Decoder states
AWAITING_BLOCK = "awaiting_block"
IN_BLOCK = "in_block"
IN_OTHER_FENCE = "in_other_fence"


@dataclass
class DecodedBlock:
    """
    Result of decoding one fenced card block in a document.

    Attributes
    ----------
    start_line : int
        Line number (1-based) of the opening fence.
    end_line : int or None
        Line number of the closing fence, None if the block is not closed.
    source : str
        Block body between the fences.
    records : list of LinkMetadata
        Decoded records, empty when decoding failed.
    error : DecodeError or None
        Failure for this block, None on success.
    """

    start_line: int
    end_line: int | None
    source: str
    records: list[LinkMetadata] = field(default_factory=list)
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def quote_value(value: str) -> str:
    """
    Quote a value as a single-line JSON string.

    Parameters
    ----------
    value : str
        Raw field value.

    Returns
    -------
    str
        Double-quoted, escaped value.
    """
    quoted = json.dumps(value, ensure_ascii=False)
    return _JSON_RAW_BREAKS.sub(lambda m: f"\\u{ord(m.group(0)):04x}", quoted)


def _is_plain(value: str) -> bool:
    return (
        value != ""
        and value == value.strip()
        and not value.startswith('"')
        and _NEEDS_QUOTING.search(value) is None
    )


def format_value(name: str, value: str) -> str:
    """Render a field value the way it is written in a block."""
    if name in QUOTED_FIELDS or not _is_plain(value):
        return quote_value(value)
    return value


def _encode_record(record: LinkMetadata, prefix: str) -> list[str]:
    lines = []
    for name in FIELD_NAMES:
        value = getattr(record, name)
        if value is None:
            continue
        lines.append(f"{prefix}{name}: {format_value(name, value)}")
    return lines


def encode(records: LinkMetadata | Iterable[LinkMetadata], prefix: str | None = None) -> str:
    """
    Encode one or more records into a card block.

    Parameters
    ----------
    records : LinkMetadata or iterable of LinkMetadata
        Records to encode, in order. Each keeps its own ``indent``.
    prefix : str, optional
        Whitespace to start every line with, in place of the tabs of the
        shallowest record. Deeper records add one tab per extra level after
        it. Used to keep a block inside a space-indented list item.

    Returns
    -------
    str
        Block text including both fences and a trailing newline. The fences
        are indented to the shallowest record, or by ``prefix`` when given.

    Raises
    ------
    ValidationError
        If no records are given, or ``prefix`` is not whitespace.

    Examples
    --------
    >>> print(encode(LinkMetadata(url="https://example.com", title="Example")), end="")
    ```cardlink
    url: https://example.com
    title: "Example"
    ```
    """
    if isinstance(records, LinkMetadata):
        records = [records]
    records = list(records)
    if not records:
        raise ValidationError("At least one record is required to encode a card block")
    if prefix is not None and prefix.strip(" \t"):
        raise ValidationError(f"Block prefix must be spaces or tabs, got: {prefix!r}")

    base = min(record.indent for record in records)
    fence_prefix = INDENT_UNIT * base if prefix is None else prefix
    lines = [fence_prefix + OPEN_FENCE]
    for record in records:
        lines.extend(_encode_record(record, fence_prefix + INDENT_UNIT * (record.indent - base)))
    lines.append(fence_prefix + CLOSE_FENCE)
    return "\n".join(lines) + "\n"


def split_indent(line: str) -> tuple[str, str]:
    """Split a line into its leading spaces and tabs and the rest."""
    content = line.lstrip(" \t")
    return line[: len(line) - len(content)], content


def indent_depth(prefix: str) -> int:
    """
    Nesting depth of a run of leading whitespace.

    A tab counts as one level, as does every started run of SPACES_PER_LEVEL
    spaces, so the two spaces of a nested list item count as one level.
    """
    tabs = prefix.count("\t")
    spaces = len(prefix) - tabs
    return tabs + math.ceil(spaces / SPACES_PER_LEVEL)


def measure_indent(line: str, line_no: int | None = None) -> tuple[int, str]:
    """
    Split a line into its indentation level and content.

    A tab counts as one level, as does each run of SPACES_PER_LEVEL spaces.

    Raises
    ------
    MalformedBlockError
        If the spaces do not add up to whole levels.
    """
    prefix, content = split_indent(line)
    tabs = prefix.count("\t")
    spaces = len(prefix) - tabs
    if spaces % SPACES_PER_LEVEL:
        raise MalformedBlockError(
            f"Indentation of {spaces} spaces is not a multiple of {SPACES_PER_LEVEL}", line_no
        )
    return tabs + spaces // SPACES_PER_LEVEL, content


def _parse_value(raw: str, line_no: int) -> str:
    if not raw.startswith('"'):
        return raw
    try:
        return json.loads(raw)
    except ValueError as e:
        raise MalformedBlockError(f"Invalid quoted value: {raw}", line_no) from e


def parse_line(line: str, line_no: int | None = None) -> tuple[int, str, str]:
    """
    Parse one block line into ``(indent, key, value)``.

    Raises
    ------
    MalformedBlockError
        If the line is not a ``key: value`` pair.
    """
    indent, content = measure_indent(line, line_no)
    match = _LINE_PATTERN.match(content)
    if match is None:
        raise MalformedBlockError(f"Expected 'key: value', got: {content}", line_no)
    key = match.group(1)
    raw = (match.group(2) or "").strip()
    return indent, key, _parse_value(raw, line_no)


def _build_record(fields: dict, indent: int, line_no: int) -> LinkMetadata:
    if not fields.get("url"):
        raise MissingRequiredFieldError("url", line_no)
    if "title" not in fields:
        raise MissingRequiredFieldError("title", line_no)
    return LinkMetadata(indent=indent, **fields)


def parse_block(source: str, line_offset: int = 0, prefix: str = "") -> list[LinkMetadata]:
    """
    Parse the body of a card block into records.

    A line starts a new record when no record is open, when its key was
    already set on the open record, or when it is indented less than the
    first line of the open record. Other lines add fields to the open record.
    Unknown keys are skipped.

    Parameters
    ----------
    source : str
        Text between the fences.
    line_offset : int, optional
        Added to line numbers in errors, by default 0 (first body line is 1).
    prefix : str, optional
        Indentation of the opening fence. Lines starting with it are measured
        from the end of it, and the fence's own depth is added to their level.

    Returns
    -------
    list of LinkMetadata
        Records in block order.

    Raises
    ------
    MalformedBlockError
        If a line cannot be parsed.
    MissingRequiredFieldError
        If a record has no ``url`` or ``title``, or the block is empty.
    """
    records = []
    current = None
    current_indent = 0
    current_line = line_offset + 1
    base = indent_depth(prefix)

    for line_no, line in enumerate(source.split("\n"), start=line_offset + 1):
        line = line.rstrip("\r")
        if not line.strip():
            continue

        if prefix and line.startswith(prefix):
            indent, key, value = parse_line(line[len(prefix) :], line_no)
            indent += base
        else:
            indent, key, value = parse_line(line, line_no)
        if key not in FIELD_NAMES:
            logger.debug(f"Ignoring unknown key '{key}' on line {line_no}")
            continue

        if current is None or key in current or indent < current_indent:
            if current is not None:
                records.append(_build_record(current, current_indent, current_line))
            current = {}
            current_indent = indent
            current_line = line_no

        current[key] = value

    if current is None:
        raise MissingRequiredFieldError("url", current_line)
    records.append(_build_record(current, current_indent, current_line))
    return records


def decode_blocks(text: str) -> list[DecodedBlock]:
    """
    Find and decode every card block in a document.

    Fenced code blocks of other languages are skipped. A failure in one block
    is recorded on that block and does not affect the others.

    Parameters
    ----------
    text : str
        Document text.

    Returns
    -------
    list of DecodedBlock
        One entry per card block, in document order.
    """
    blocks = []
    state = AWAITING_BLOCK
    other_marker = ""
    start_line = 0
    fence_prefix = ""
    body = []

    for line_no, line in enumerate(text.split("\n"), start=1):
        stripped = line.strip()

        if state == AWAITING_BLOCK:
            if stripped == OPEN_FENCE:
                state = IN_BLOCK
                start_line = line_no
                fence_prefix = split_indent(line)[0]
                body = []
                continue
            fence = _FENCE_PATTERN.match(stripped)
            if fence:
                state = IN_OTHER_FENCE
                other_marker = fence.group(1)

        elif state == IN_BLOCK:
            if stripped == CLOSE_FENCE:
                blocks.append(_decode_body(start_line, line_no, "\n".join(body), fence_prefix))
                state = AWAITING_BLOCK
            else:
                body.append(line)

        elif state == IN_OTHER_FENCE:
            if _closes_fence(stripped, other_marker):
                state = AWAITING_BLOCK

    if state == IN_BLOCK:
        source = "\n".join(body)
        error = MalformedBlockError("Card block is not closed", start_line)
        logger.debug(f"Unterminated card block starting on line {start_line}")
        blocks.append(DecodedBlock(start_line, None, source, error=error))

    return blocks


def _closes_fence(stripped: str, marker: str) -> bool:
    fence = _FENCE_PATTERN.match(stripped)
    if fence is None or fence.group(2).strip():
        return False
    run = fence.group(1)
    return run[0] == marker[0] and len(run) >= len(marker)


def _decode_body(start_line: int, end_line: int, source: str, prefix: str) -> DecodedBlock:
    try:
        records = parse_block(source, line_offset=start_line, prefix=prefix)
    except DecodeError as e:
        return DecodedBlock(start_line, end_line, source, error=e)
    return DecodedBlock(start_line, end_line, source, records=records)


def decode(text: str) -> list[LinkMetadata]:
    """
    Decode the records of every well-formed card block in a document.

    Blocks that fail to decode are logged and skipped.

    Parameters
    ----------
    text : str
        Document text, or the output of ``encode``.

    Returns
    -------
    list of LinkMetadata
        Records in document order.
    """
    records = []
    for block in decode_blocks(text):
        if block.ok:
            records.extend(block.records)
        else:
            logger.warning(f"Skipping card block at line {block.start_line}: {block.error}")
    return records


def fenced_line_mask(lines: list[str]) -> list[bool]:
    """
    Flag the lines that belong to a fenced code block, fences included.

    Parameters
    ----------
    lines : list of str
        Document lines.

    Returns
    -------
    list of bool
        True for each line inside (or delimiting) a fenced block.
    """
    mask = []
    marker = None
    for line in lines:
        stripped = line.strip()
        if marker is None:
            fence = _FENCE_PATTERN.match(stripped)
            if fence:
                marker = fence.group(1)
            mask.append(fence is not None)
        else:
            if _closes_fence(stripped, marker):
                marker = None
            mask.append(True)
    return mask
