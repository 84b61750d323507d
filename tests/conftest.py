"""Pytest configuration and shared fixtures."""

import copy
import logging
import os
from unittest.mock import Mock

import pytest

from cardlink.config.loader import DEFAULT_CONFIG
from cardlink.core.models import LinkMetadata
from cardlink.lib import output


@pytest.fixture(autouse=True)
def reset_cardlink_logging():
    """Undo setup_logger() side effects so caplog sees package records.

    The CLI configures the "cardlink" logger with its own handler and
    propagate=False; tests that run it would otherwise hide log records
    from later tests.
    """
    yield
    cardlink_logger = logging.getLogger("cardlink")
    cardlink_logger.handlers.clear()
    cardlink_logger.propagate = True
    cardlink_logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def plain_output():
    """Disable ANSI colors and quiet mode so output assertions see plain text."""
    output.set_color_enabled(False)
    output.set_quiet(False)
    yield
    output.set_color_enabled(None)
    output.set_quiet(False)


@pytest.fixture
def temp_config_dir(tmp_path, monkeypatch):
    """Point XDG_CONFIG_HOME at a temporary directory.

    Returns
    -------
    Path
        The cardlink config directory (not created yet).
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("CARDLINK_"):
            monkeypatch.delenv(key)
    return tmp_path / ".config" / "cardlink"


@pytest.fixture
def mock_config():
    """Standard test configuration.

    Returns
    -------
    dict
        Default configuration plus loader metadata.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["_meta"] = {"config_sources": []}
    return config


@pytest.fixture
def make_ctx(mock_config):
    """Build a command ctx dict with Mock args.

    Returns
    -------
    Callable
        ``make_ctx(config=..., verbose=..., quiet=..., dry_run=..., **args)``
    """

    def _make_ctx(config=None, verbose=False, quiet=False, dry_run=False, **args):
        return {
            "config": mock_config if config is None else config,
            "verbose": verbose,
            "quiet": quiet,
            "dry_run": dry_run,
            "args": Mock(**args),
        }

    return _make_ctx


@pytest.fixture
def example_card():
    """A fully populated top-level card."""
    return LinkMetadata(
        url="https://example.com/",
        title="Example Domain",
        description="This domain is for use in illustrative examples.",
        host="example.com",
        image="https://example.com/og.png",
    )


@pytest.fixture
def fake_provider():
    """Metadata provider that builds cards without network access.

    Returns
    -------
    Callable
        ``provider(url)`` returning a LinkMetadata titled "Title of <url>".
        Its ``calls`` attribute lists requested URLs.
    """

    def provider(url):
        provider.calls.append(url)
        return LinkMetadata(url=url, title=f"Title of {url}", host="example.com")

    provider.calls = []
    return provider


@pytest.fixture
def make_response():
    """Factory for mock requests responses.

    Returns
    -------
    Callable
        ``make_response(body, content_type=..., status_code=200, encoding=...)``;
        a str body is sent UTF-8 encoded, bytes are sent as given.
    """

    def _make_response(body="", content_type="text/html; charset=utf-8", status_code=200, encoding="utf-8"):
        response = Mock()
        response.status_code = status_code
        response.headers = {"Content-Type": content_type} if content_type else {}
        response.encoding = encoding
        data = body.encode("utf-8") if isinstance(body, str) else body
        response.iter_content.return_value = [data[i : i + 8192] for i in range(0, len(data), 8192)]
        response.raise_for_status.return_value = None
        return response

    return _make_response
