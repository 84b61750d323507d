"""URL classification for card conversion.

Decides whether a piece of text is a bare URL, a Markdown link to a URL, or a
direct link to an image. All functions are pure and return a defined answer
for every input.
"""

import re
from urllib.parse import urlsplit

# Hostname label with internal hyphens, then TLD and at least 2 trailing characters
_LONG_HOST = r"[a-zA-Z0-9][a-zA-Z0-9-]+[a-zA-Z0-9]\.[^\s]{2,}"
_SHORT_HOST = r"[a-zA-Z0-9]+\.[^\s]{2,}"
_SCHEME = r"https?://(?:www\.|(?!www))"
_WWW = r"www\."

URL_GRAMMAR = "|".join(
    [
        _SCHEME + _LONG_HOST,
        _WWW + _LONG_HOST,
        _SCHEME + _SHORT_HOST,
        _WWW + _SHORT_HOST,
    ]
)

LINK_GRAMMAR = r"\[([^\[\]]*)\]\((" + URL_GRAMMAR + r")\)"

URL_PATTERN = re.compile(rf"^(?:{URL_GRAMMAR})$", re.IGNORECASE)
URL_LINE_PATTERN = re.compile(rf"(?:{URL_GRAMMAR})", re.IGNORECASE)
LINK_PATTERN = re.compile(rf"^{LINK_GRAMMAR}$", re.IGNORECASE)
LINK_LINE_PATTERN = re.compile(LINK_GRAMMAR, re.IGNORECASE)

IMAGE_EXTENSIONS = ("gif", "jpg", "jpeg", "tiff", "tif", "png", "webp", "bmp", "tga", "psd", "ai")
IMAGE_PATTERN = re.compile(r"\.(gif|jpe?g|tiff?|png|webp|bmp|tga|psd|ai)$", re.IGNORECASE)


def is_url(text: str) -> bool:
    """
    Check whether the whole trimmed text is a bare URL.

    Parameters
    ----------
    text : str
        Text to inspect.

    Returns
    -------
    bool
        True if the text, without surrounding whitespace, is a URL.

    Examples
    --------
    >>> is_url("https://example.com/path")
    True
    >>> is_url("see https://example.com")
    False
    """
    return URL_PATTERN.match(text.strip()) is not None


def find_urls(text: str) -> list[str]:
    """
    Find every bare URL inside free text, in order of appearance.

    Parameters
    ----------
    text : str
        Text to scan.

    Returns
    -------
    list of str
        Matched URLs.
    """
    return URL_LINE_PATTERN.findall(text)


def is_linked_url(text: str) -> bool:
    """
    Check whether the whole trimmed text is a Markdown link ``[label](url)``.

    Parameters
    ----------
    text : str
        Text to inspect.

    Returns
    -------
    bool
        True if the text is a single Markdown link to a URL.
    """
    return LINK_PATTERN.match(text.strip()) is not None


def find_linked_urls(text: str) -> list[tuple[str, str]]:
    """
    Find every Markdown link to a URL inside free text.

    Parameters
    ----------
    text : str
        Text to scan.

    Returns
    -------
    list of tuple of (str, str)
        ``(label, url)`` pairs in order of appearance.
    """
    return [(m.group(1), m.group(2)) for m in LINK_LINE_PATTERN.finditer(text)]


def extract_linked_url(text: str) -> str | None:
    """
    Return the URL of a Markdown link, or None if text is not one.

    Examples
    --------
    >>> extract_linked_url("[Example](https://example.com)")
    'https://example.com'
    """
    match = LINK_PATTERN.match(text.strip())
    if match is None:
        return None
    return match.group(2)


def is_image(text: str) -> bool:
    """
    Check whether the URL path ends with an image extension.

    Query string and fragment are ignored, so ``photo.png?w=200`` is an image.

    Parameters
    ----------
    text : str
        URL or path to inspect.

    Returns
    -------
    bool
        True if the path ends with one of IMAGE_EXTENSIONS (case-insensitive).
    """
    stripped = text.strip()
    if not stripped:
        return False
    try:
        path = urlsplit(stripped).path
    except ValueError:
        path = stripped
    return IMAGE_PATTERN.search(path) is not None


def extract_card_url(text: str, include_links: bool = True, include_images: bool = False) -> str | None:
    """
    Return the URL to build a card for, or None if text is not eligible.

    Parameters
    ----------
    text : str
        Candidate text (a pasted string or a document line).
    include_links : bool, optional
        Accept Markdown links ``[label](url)``, by default True.
    include_images : bool, optional
        Accept direct image links, by default False.

    Returns
    -------
    str or None
        The bare URL, or the target of a Markdown link.

    Examples
    --------
    >>> extract_card_url("  https://example.com/page ")
    'https://example.com/page'
    >>> extract_card_url("https://example.com/photo.png") is None
    True
    """
    if is_url(text):
        url = text.strip()
    elif include_links and is_linked_url(text):
        url = extract_linked_url(text)
    else:
        return None

    if not include_images and is_image(url):
        return None
    return url


def is_convertible(text: str, include_links: bool = True, include_images: bool = False) -> bool:
    """Check whether text is a URL (or linked URL) that a card adds value to."""
    return extract_card_url(text, include_links, include_images) is not None
