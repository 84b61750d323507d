"""Integration tests for card command."""

from unittest.mock import patch

from cardlink.commands import card
from cardlink.core.codec import decode
from cardlink.exceptions import MetadataRetrievalError


class TestCardCommand:
    """Test card command handler."""

    @patch("cardlink.commands.card.handlers.MetadataFetcher")
    def test_card_prints_block(self, mock_fetcher_class, make_ctx, example_card, capsys):
        """Test a fetched card is printed as a block."""
        fetch = mock_fetcher_class.return_value.__enter__.return_value
        fetch.return_value = example_card
        ctx = make_ctx(url="https://example.com/", indent=0, offline=False, fallback=False)

        exit_code = card.handle(ctx)

        assert exit_code == 0
        fetch.assert_called_once_with("https://example.com/", indent=0)
        assert decode(capsys.readouterr().out) == [example_card]

    @patch("cardlink.commands.card.handlers.MetadataFetcher")
    def test_card_uses_fetch_config(self, mock_fetcher_class, make_ctx, mock_config, example_card):
        """Test the fetcher gets timeout and agent from config."""
        mock_config["fetch"]["timeout"] = "4"
        mock_config["fetch"]["agent"] = "test-agent"
        mock_fetcher_class.return_value.__enter__.return_value.return_value = example_card
        ctx = make_ctx(url="https://example.com/", indent=0, offline=False, fallback=False)

        card.handle(ctx)

        mock_fetcher_class.assert_called_once_with(timeout=4.0, user_agent="test-agent")

    @patch("cardlink.commands.card.handlers.MetadataFetcher")
    def test_card_from_markdown_link(self, mock_fetcher_class, make_ctx, example_card):
        """Test [label](url) input fetches the link target."""
        fetch = mock_fetcher_class.return_value.__enter__.return_value
        fetch.return_value = example_card
        ctx = make_ctx(url="[Docs](https://docs.python.org/3/)", indent=2, offline=False, fallback=False)

        assert card.handle(ctx) == 0
        fetch.assert_called_once_with("https://docs.python.org/3/", indent=2)

    @patch("cardlink.commands.card.handlers.MetadataFetcher")
    def test_card_offline(self, mock_fetcher_class, make_ctx, capsys):
        """Test --offline builds a URL-only card without fetching."""
        ctx = make_ctx(url="www.example.com/page", indent=1, offline=True, fallback=False)

        assert card.handle(ctx) == 0
        mock_fetcher_class.assert_not_called()
        assert capsys.readouterr().out == (
            "\t```cardlink\n"
            "\turl: www.example.com/page\n"
            '\ttitle: "www.example.com/page"\n'
            "\t```\n"
        )

    def test_card_rejects_text(self, make_ctx, capsys):
        """Test non-URL input gives exit code 1."""
        ctx = make_ctx(url="not a url", indent=0, offline=True, fallback=False)

        assert card.handle(ctx) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Not a URL or Markdown link" in captured.err

    @patch("cardlink.commands.card.handlers.MetadataFetcher")
    def test_card_fetch_failure(self, mock_fetcher_class, make_ctx, capsys):
        """Test a fetch failure gives exit code 1 without --fallback."""
        fetch = mock_fetcher_class.return_value.__enter__.return_value
        fetch.side_effect = MetadataRetrievalError("HTTP error fetching page", status_code=404)
        ctx = make_ctx(url="https://example.com/missing", indent=0, offline=False, fallback=False)

        assert card.handle(ctx) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "HTTP error fetching page" in captured.err

    @patch("cardlink.commands.card.handlers.MetadataFetcher")
    def test_card_fetch_failure_fallback(self, mock_fetcher_class, make_ctx, capsys):
        """Test --fallback prints a URL-only card on fetch failure."""
        fetch = mock_fetcher_class.return_value.__enter__.return_value
        fetch.side_effect = MetadataRetrievalError("Failed to fetch page: refused")
        ctx = make_ctx(url="https://example.com/down", indent=0, offline=False, fallback=True)

        assert card.handle(ctx) == 0
        captured = capsys.readouterr()
        records = decode(captured.out)
        assert [(r.url, r.title) for r in records] == [("https://example.com/down",) * 2]
        assert "using URL-only card" in captured.err

    def test_card_bad_config(self, make_ctx, mock_config):
        """Test invalid fetch config gives exit code 2."""
        mock_config["fetch"]["timeout"] = "never"
        ctx = make_ctx(url="https://example.com/", indent=0, offline=False, fallback=False)

        assert card.handle(ctx) == 2
