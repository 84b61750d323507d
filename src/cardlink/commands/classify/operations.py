"""Classification summary for classify command."""

from typing import Any

from cardlink.core.classifier import (
    extract_card_url,
    extract_linked_url,
    find_linked_urls,
    find_urls,
    is_image,
    is_linked_url,
    is_url,
)


def classify_text(text: str, include_links: bool = True, include_images: bool = False) -> dict[str, Any]:
    """Run every classifier over text.

    Parameters
    ----------
    text : str
        Text to classify
    include_links : bool
        Whether Markdown links count as convertible
    include_images : bool
        Whether image links count as convertible

    Returns
    -------
    dict[str, Any]
        Classification answers, the URL a card would be built for,
        and the URLs and links found by scanning the text
    """
    linked_url = extract_linked_url(text)
    card_url = extract_card_url(text, include_links=include_links, include_images=include_images)
    return {
        "text": text,
        "is_url": is_url(text),
        "is_linked_url": is_linked_url(text),
        "is_image": is_image(linked_url or text),
        "convertible": card_url is not None,
        "card_url": card_url,
        "urls": find_urls(text),
        "links": [{"label": label, "url": url} for label, url in find_linked_urls(text)],
    }
