"""Fetch link metadata from a web page for card generation.

Title: og:title → twitter:title → <title> → the URL itself
Description: og:description → <meta name="description"> → twitter:description
Host: og:site_name → hostname of the URL
Image: og:image → twitter:image, resolved against the page URL
"""

import html
import logging
import re
from collections.abc import Callable
from urllib.parse import urljoin, urlsplit

import requests

from cardlink import __version__
from cardlink.core.models import LinkMetadata
from cardlink.exceptions import MetadataRetrievalError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
DEFAULT_USER_AGENT = f"cardlink/{__version__}"
# Metadata lives in <head>; stop reading after this many bytes
MAX_HTML_BYTES = 131_072

MetadataProvider = Callable[[str], LinkMetadata]

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_META_TAG = re.compile(r"<meta\b([^>]*)>", re.IGNORECASE)
_ATTRIBUTE = re.compile(r"""([a-zA-Z_:.-]+)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""")
_TITLE_TAG = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_HEADER_CHARSET = re.compile(r"charset\s*=", re.IGNORECASE)
_META_CHARSET = re.compile(rb"""<meta\b[^>]*?charset\s*=\s*["']?\s*([A-Za-z0-9_.:-]+)""", re.IGNORECASE)
# HTML requires <meta charset> within the first 1024 bytes
META_CHARSET_SCAN_BYTES = 1024


def normalize_url(url: str) -> str:
    """Add an https:// scheme to bare ``www.`` URLs."""
    url = url.strip()
    if _SCHEME.match(url):
        return url
    return f"https://{url}"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    text = " ".join(html.unescape(value).split())
    return text or None


def _collect_meta(document: str) -> dict[str, str]:
    """Map lowercased meta ``property``/``name`` to ``content``, first tag wins."""
    meta = {}
    for tag in _META_TAG.finditer(document):
        attrs = {}
        for m in _ATTRIBUTE.finditer(tag.group(1)):
            value = next((g for g in m.groups()[1:] if g is not None), "")
            attrs[m.group(1).lower()] = value
        key = attrs.get("property") or attrs.get("name")
        if key and "content" in attrs:
            meta.setdefault(key.lower(), attrs["content"])
    return meta


def _first(meta: dict[str, str], *keys: str) -> str | None:
    for key in keys:
        value = _clean(meta.get(key))
        if value:
            return value
    return None


def parse_link_metadata(document: str, url: str, indent: int = 0) -> LinkMetadata:
    """
    Extract card metadata from an HTML document.

    Parameters
    ----------
    document : str
        HTML text (the head is enough).
    url : str
        URL the document was fetched from; kept as the card URL.
    indent : int, optional
        Nesting depth for the resulting record, by default 0.

    Returns
    -------
    LinkMetadata
        Record with the title defaulting to ``url``.
    """
    meta = _collect_meta(document)

    title = _first(meta, "og:title", "twitter:title")
    if not title:
        m = _TITLE_TAG.search(document)
        title = _clean(m.group(1)) if m else None

    description = _first(meta, "og:description", "description", "twitter:description")
    host = _first(meta, "og:site_name") or urlsplit(normalize_url(url)).hostname

    image = _first(meta, "og:image", "og:image:url", "twitter:image")
    if image:
        image = urljoin(normalize_url(url), image)

    return LinkMetadata(
        url=url,
        title=title or url,
        description=description,
        host=host,
        image=image,
        indent=indent,
    )


def _page_encoding(response: requests.Response, data: bytes) -> str:
    """
    Pick the text encoding of a fetched page.

    requests reports ISO-8859-1 for any text/html response without a charset
    parameter, so its guess is only used when the header names one. Otherwise
    the page's own <meta charset> wins, then UTF-8.
    """
    if response.encoding and _HEADER_CHARSET.search(response.headers.get("Content-Type", "")):
        return response.encoding
    match = _META_CHARSET.search(data[:META_CHARSET_SCAN_BYTES])
    if match:
        return match.group(1).decode("ascii")
    return "utf-8"


def _read_html(response: requests.Response) -> str:
    chunks = []
    size = 0
    for chunk in response.iter_content(chunk_size=8192):
        chunks.append(chunk)
        size += len(chunk)
        if size >= MAX_HTML_BYTES:
            break
    data = b"".join(chunks)[:MAX_HTML_BYTES]
    try:
        return data.decode(_page_encoding(response, data), errors="replace")
    except LookupError:
        return data.decode("utf-8", errors="replace")


def fetch_link_metadata(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    session: requests.Session | None = None,
    indent: int = 0,
) -> LinkMetadata:
    """
    Fetch a page and build its card metadata.

    Parameters
    ----------
    url : str
        URL to fetch; ``www.`` URLs without a scheme are fetched over https.
    timeout : float, optional
        Request timeout in seconds.
    user_agent : str, optional
        User-Agent header value.
    session : requests.Session, optional
        Session to reuse connections; a one-off request is made if None.
    indent : int, optional
        Nesting depth for the resulting record, by default 0.

    Returns
    -------
    LinkMetadata
        Card record for the page.

    Raises
    ------
    MetadataRetrievalError
        If the request fails, returns an error status, or is not HTML.
    """
    http = session or requests
    request_url = normalize_url(url)
    logger.debug(f"Fetching metadata for {request_url}")

    try:
        response = http.get(
            request_url,
            headers={
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.1",
            },
            timeout=timeout,
            stream=True,
        )
        response.raise_for_status()
    except requests.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else None
        raise MetadataRetrievalError("HTTP error fetching page", url=url, status_code=status_code) from e
    except requests.RequestException as e:
        raise MetadataRetrievalError(f"Failed to fetch page: {e}", url=url) from e

    try:
        content_type = response.headers.get("Content-Type", "")
        if "html" not in content_type.lower():
            raise MetadataRetrievalError(
                f"Not an HTML page: {content_type or 'unknown content type'}", url=url
            )
        document = _read_html(response)
    except requests.RequestException as e:
        raise MetadataRetrievalError(f"Failed to read page: {e}", url=url) from e
    finally:
        response.close()

    return parse_link_metadata(document, url, indent=indent)


class MetadataFetcher:
    """
    Reusable metadata provider backed by a requests session.

    Calling the instance with a URL returns its LinkMetadata, so it can be
    passed anywhere a MetadataProvider is expected.

    Examples
    --------
    >>> with MetadataFetcher(timeout=5) as fetch:
    ...     card = fetch("https://example.com")
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session or requests.Session()

    def __call__(self, url: str, indent: int = 0) -> LinkMetadata:
        return fetch_link_metadata(
            url,
            timeout=self.timeout,
            user_agent=self.user_agent,
            session=self.session,
            indent=indent,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
