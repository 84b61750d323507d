"""Document conversion operations for convert command."""

import logging
from dataclasses import dataclass, field

from cardlink.core.classifier import extract_card_url
from cardlink.core.codec import encode, fenced_line_mask, indent_depth, split_indent
from cardlink.core.models import LinkMetadata
from cardlink.exceptions import MetadataRetrievalError
from cardlink.lib.metadata import MetadataProvider

logger = logging.getLogger(__name__)


@dataclass
class ConversionFailure:
    """A URL line that was left unchanged because its page could not be fetched."""

    line: int
    url: str
    reason: str


@dataclass
class ConversionResult:
    """Outcome of converting one document."""

    text: str
    converted: list[LinkMetadata] = field(default_factory=list)
    failures: list[ConversionFailure] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.converted)


def convert_document(
    text: str,
    provider: MetadataProvider,
    include_links: bool = True,
    include_images: bool = False,
) -> ConversionResult:
    """Replace eligible URL lines of a document with card blocks.

    A line is eligible when, apart from surrounding whitespace, it is a URL
    or a Markdown link to a URL, and it is not inside a fenced code block.
    The block keeps the line's leading whitespace on every line, so a card
    stays inside its list item, and the depth of that whitespace becomes the
    card's ``indent``.

    Parameters
    ----------
    text : str
        Document text
    provider : MetadataProvider
        Callable returning LinkMetadata for a URL
    include_links : bool
        Convert [label](url) lines too
    include_images : bool
        Convert direct image links too

    Returns
    -------
    ConversionResult
        Converted text, the records written, and the lines left unchanged
        because fetching failed
    """
    lines = text.split("\n")
    mask = fenced_line_mask(lines)
    result_lines = []
    converted = []
    failures = []

    for line_no, (line, fenced) in enumerate(zip(lines, mask), start=1):
        url = None
        if not fenced:
            url = extract_card_url(line, include_links=include_links, include_images=include_images)

        if url is None:
            result_lines.append(line)
            continue

        try:
            record = provider(url)
        except MetadataRetrievalError as e:
            logger.warning(f"Line {line_no}: leaving {url} unchanged: {e}")
            failures.append(ConversionFailure(line=line_no, url=url, reason=str(e)))
            result_lines.append(line)
            continue

        prefix, _ = split_indent(line)
        record = record.with_indent(indent_depth(prefix))
        converted.append(record)
        result_lines.append(encode(record, prefix=prefix).rstrip("\n"))

    return ConversionResult(text="\n".join(result_lines), converted=converted, failures=failures)
