"""URL classification, link metadata model and cardlink block codec."""

from .classifier import (
    extract_card_url,
    extract_linked_url,
    find_linked_urls,
    find_urls,
    is_convertible,
    is_image,
    is_linked_url,
    is_url,
)
from .codec import DecodedBlock, decode, decode_blocks, encode, parse_block
from .models import LinkMetadata

__all__ = [
    "LinkMetadata",
    "DecodedBlock",
    "encode",
    "decode",
    "decode_blocks",
    "parse_block",
    "is_url",
    "is_linked_url",
    "is_image",
    "is_convertible",
    "find_urls",
    "find_linked_urls",
    "extract_linked_url",
    "extract_card_url",
]
