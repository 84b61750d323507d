"""Unit tests for card block encoding and decoding."""

import logging

import pytest

from cardlink.core.codec import (
    DecodedBlock,
    decode,
    decode_blocks,
    encode,
    fenced_line_mask,
    format_value,
    indent_depth,
    measure_indent,
    parse_block,
    parse_line,
    quote_value,
    split_indent,
)
from cardlink.core.models import LinkMetadata
from cardlink.exceptions import (
    MalformedBlockError,
    MissingRequiredFieldError,
    ValidationError,
)


@pytest.mark.unit
class TestEncode:
    """Tests for encode()."""

    def test_single_record(self, example_card):
        assert encode(example_card) == (
            "```cardlink\n"
            "url: https://example.com/\n"
            'title: "Example Domain"\n'
            'description: "This domain is for use in illustrative examples."\n'
            "host: example.com\n"
            "image: https://example.com/og.png\n"
            "```\n"
        )

    def test_absent_fields_omitted(self):
        text = encode(LinkMetadata(url="https://example.com", title="Example"))
        assert "description" not in text
        assert "host" not in text
        assert "image" not in text

    def test_empty_fields_written_quoted(self):
        text = encode(LinkMetadata(url="https://example.com", title="", description="", host=""))
        assert 'title: ""\n' in text
        assert 'description: ""\n' in text
        assert 'host: ""\n' in text

    def test_nested_records_use_tabs(self):
        text = encode(
            [
                LinkMetadata(url="a", title="A"),
                LinkMetadata(url="b", title="B", indent=1),
            ]
        )
        assert text.splitlines() == [
            "```cardlink",
            "url: a",
            'title: "A"',
            "\turl: b",
            '\ttitle: "B"',
            "```",
        ]

    def test_fence_indented_to_shallowest_record(self):
        text = encode(
            [
                LinkMetadata(url="a", title="A", indent=2),
                LinkMetadata(url="b", title="B", indent=1),
            ]
        )
        lines = text.splitlines()
        assert lines[0] == "\t```cardlink"
        assert lines[-1] == "\t```"
        assert lines[1] == "\t\turl: a"
        assert lines[3] == "\turl: b"

    def test_title_escaping_stays_on_one_line(self):
        card = LinkMetadata(url="https://example.com", title='He said: "hi"\nbye')
        lines = encode(card).splitlines()
        assert len(lines) == 4
        assert lines[2] == r'title: "He said: \"hi\"\nbye"'

    def test_deterministic(self, example_card):
        assert encode(example_card) == encode(example_card)

    def test_accepts_generator(self, example_card):
        assert encode(r for r in [example_card]) == encode(example_card)

    def test_empty_input_raises(self):
        with pytest.raises(ValidationError):
            encode([])

    def test_prefix_replaces_fence_indentation(self):
        text = encode(
            [
                LinkMetadata(url="a", title="A", indent=1),
                LinkMetadata(url="b", title="B", indent=2),
            ],
            prefix="  ",
        )
        assert text.splitlines() == [
            "  ```cardlink",
            "  url: a",
            '  title: "A"',
            "  \turl: b",
            '  \ttitle: "B"',
            "  ```",
        ]

    def test_prefix_must_be_whitespace(self, example_card):
        with pytest.raises(ValidationError, match="spaces or tabs"):
            encode(example_card, prefix="- ")


@pytest.mark.unit
class TestFormatValue:
    """Tests for value quoting rules."""

    def test_plain_host_is_bare(self):
        assert format_value("host", "example.com") == "example.com"

    def test_title_always_quoted(self):
        assert format_value("title", "Plain") == '"Plain"'

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("", '""'),
            (" padded", '" padded"'),
            ('"quoted', '"\\"quoted"'),
            ("line\nbreak", '"line\\nbreak"'),
        ],
    )
    def test_bare_fields_quoted_when_needed(self, value, expected):
        assert format_value("image", value) == expected

    def test_unicode_kept_readable(self):
        assert quote_value("café") == '"café"'

    def test_unicode_line_separators_escaped(self):
        assert quote_value("a\u2028b") == '"a\\u2028b"'
        assert quote_value("a\x85b") == '"a\\u0085b"'


@pytest.mark.unit
class TestParseLine:
    """Tests for indentation helpers and parse_line()."""

    @pytest.mark.parametrize(
        "prefix,expected",
        [
            ("", 0),
            ("\t", 1),
            ("\t\t", 2),
            ("  ", 1),
            ("    ", 1),
            ("      ", 2),
            ("\t    ", 2),
        ],
    )
    def test_indent_depth(self, prefix, expected):
        assert indent_depth(prefix) == expected

    def test_split_indent(self):
        assert split_indent(" \t- item") == (" \t", "- item")
        assert split_indent("text") == ("", "text")

    def test_tabs(self):
        assert measure_indent("\t\turl: x") == (2, "url: x")

    def test_spaces(self):
        assert measure_indent("        url: x") == (2, "url: x")

    def test_uneven_spaces_raise(self):
        with pytest.raises(MalformedBlockError) as exc_info:
            measure_indent("   url: x", 7)
        assert exc_info.value.line == 7

    def test_line_number_optional(self):
        with pytest.raises(MalformedBlockError) as exc_info:
            parse_line("   url: x")
        assert exc_info.value.line is None

    def test_bare_value(self):
        assert parse_line("\thost: example.com") == (1, "host", "example.com")

    def test_quoted_value(self):
        assert parse_line(r'title: "a: \"b\""') == (0, "title", 'a: "b"')

    def test_value_keeps_inner_colons(self):
        assert parse_line("url: https://example.com:8080/x") == (0, "url", "https://example.com:8080/x")

    def test_key_without_value(self):
        assert parse_line("image:") == (0, "image", "")

    @pytest.mark.parametrize("line", ["no separator here", "1url: x", "url:x", ": value"])
    def test_malformed(self, line):
        with pytest.raises(MalformedBlockError):
            parse_line(line)

    def test_bad_quoted_value(self):
        with pytest.raises(MalformedBlockError, match="Invalid quoted value"):
            parse_line('title: "unterminated')


@pytest.mark.unit
class TestParseBlock:
    """Tests for parse_block()."""

    def test_repeated_key_starts_new_record(self):
        records = parse_block('url: a\ntitle: "A"\nurl: b\ntitle: "B"')
        assert [r.url for r in records] == ["a", "b"]
        assert [r.indent for r in records] == [0, 0]

    def test_lower_indent_starts_new_record(self):
        source = '\t\turl: a\n\t\ttitle: "A"\n\ttitle: "B"\n\turl: b'
        records = parse_block(source)
        assert [(r.url, r.title, r.indent) for r in records] == [("a", "A", 2), ("b", "B", 1)]

    def test_unknown_keys_ignored(self):
        records = parse_block('url: a\ncolor: red\ntitle: "A"')
        assert records == [LinkMetadata(url="a", title="A")]

    def test_blank_lines_and_crlf(self):
        records = parse_block('url: a\r\n\r\ntitle: "A"\r\n')
        assert records == [LinkMetadata(url="a", title="A")]

    def test_missing_title(self):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse_block("url: a\nhost: example.com")
        assert exc_info.value.field == "title"
        assert exc_info.value.line == 1

    def test_missing_url(self):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse_block('title: "A"')
        assert exc_info.value.field == "url"

    def test_empty_url(self):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse_block('url: ""\ntitle: "A"')
        assert exc_info.value.field == "url"

    def test_empty_block(self):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse_block("\n  \n")
        assert exc_info.value.field == "url"

    def test_line_offset_in_errors(self):
        with pytest.raises(MalformedBlockError) as exc_info:
            parse_block('url: a\ntitle: "A"\nbroken', line_offset=10)
        assert exc_info.value.line == 13


@pytest.mark.unit
class TestDecode:
    """Tests for decode() and decode_blocks()."""

    def test_round_trip(self, example_card):
        assert decode(encode(example_card)) == [example_card]

    @pytest.mark.parametrize(
        "records",
        [
            [LinkMetadata(url="https://example.com", title="")],
            [LinkMetadata(url="https://example.com", title="T", description="", host="", image="")],
            [
                LinkMetadata(url="a", title="A"),
                LinkMetadata(url="b", title="B", indent=1),
                LinkMetadata(url="c", title="C", host="c.org", indent=2),
                LinkMetadata(url="d", title="D", indent=1),
            ],
            [
                LinkMetadata(url="x", title="X", indent=3),
                LinkMetadata(url="y", title="Y", indent=3),
            ],
            [LinkMetadata(url="https://example.com", title='q: "x"\n\ty\\z', host=" spaced ")],
        ],
    )
    def test_round_trip_preserves_records(self, records):
        decoded = decode(encode(records))
        assert decoded == records
        assert [r.indent for r in decoded] == [r.indent for r in records]

    @pytest.mark.parametrize("separator", ["\n", "\r\n", "\u2028", "\u2029", "\x85"])
    def test_title_with_separator_round_trips(self, separator):
        title = f'Part 1: "quoted"{separator}Part 2'
        card = LinkMetadata(url="https://example.com", title=title, description=title)

        assert decode(encode(card)) == [card]

    def test_records_in_document_order(self):
        text = (
            "# Notes\n\n"
            + encode(LinkMetadata(url="a", title="A"))
            + "\nSome prose.\n\n"
            + encode([LinkMetadata(url="b", title="B"), LinkMetadata(url="c", title="C", indent=1)])
        )
        assert [r.url for r in decode(text)] == ["a", "b", "c"]

    def test_space_indented_block(self):
        text = '```cardlink\nurl: a\ntitle: "A"\n    url: b\n    title: "B"\n```\n'
        assert [(r.url, r.indent) for r in decode(text)] == [("a", 0), ("b", 1)]

    def test_block_indented_with_list_item(self):
        text = (
            "- parent\n"
            "  ```cardlink\n"
            "  url: a\n"
            '  title: "A"\n'
            "  \turl: b\n"
            '  \ttitle: "B"\n'
            "  ```\n"
        )
        assert [(r.url, r.indent) for r in decode(text)] == [("a", 1), ("b", 2)]

    def test_lines_without_fence_indentation_measured_from_margin(self):
        text = '\t```cardlink\n\turl: a\n\ttitle: "A"\nurl: b\ntitle: "B"\n\t```\n'
        assert [(r.url, r.indent) for r in decode(text)] == [("a", 1), ("b", 0)]

    def test_prefixed_block_round_trips(self):
        records = [LinkMetadata(url="a", title="A", indent=1), LinkMetadata(url="b", title="B", indent=2)]
        assert decode(encode(records, prefix="  ")) == records

    def test_other_fences_skipped(self):
        text = (
            "```python\n"
            "```cardlink\n"
            "url: fake\n"
            "```\n"
            "```cardlink\n"
            "url: real\n"
            'title: "Real"\n'
            "```\n"
        )
        assert [r.url for r in decode(text)] == ["real"]

    def test_tilde_fence_skipped(self):
        text = "~~~\n```cardlink\n~~~\n"
        assert decode_blocks(text) == []

    def test_malformed_block_does_not_affect_next(self, caplog):
        text = (
            "```cardlink\n"
            "url: a\n"
            "this is not a pair\n"
            "```\n"
            "\n"
            "```cardlink\n"
            "url: b\n"
            'title: "B"\n'
            "```\n"
        )
        blocks = decode_blocks(text)
        assert len(blocks) == 2
        assert isinstance(blocks[0].error, MalformedBlockError)
        assert blocks[0].error.line == 3
        assert blocks[0].records == []
        assert blocks[1].ok
        assert (blocks[1].start_line, blocks[1].end_line) == (6, 9)

        with caplog.at_level(logging.WARNING, logger="cardlink"):
            records = decode(text)
        assert [r.url for r in records] == ["b"]
        assert "line 1" in caplog.text

    def test_unterminated_block(self):
        blocks = decode_blocks('intro\n```cardlink\nurl: a\ntitle: "A"\n')
        assert len(blocks) == 1
        block = blocks[0]
        assert isinstance(block, DecodedBlock)
        assert block.end_line is None
        assert block.start_line == 2
        assert isinstance(block.error, MalformedBlockError)
        assert "not closed" in str(block.error)

    def test_missing_title_reported_on_block(self):
        blocks = decode_blocks("```cardlink\nurl: a\n```")
        assert isinstance(blocks[0].error, MissingRequiredFieldError)
        assert blocks[0].error.field == "title"

    def test_no_blocks(self):
        assert decode("plain text\nhttps://example.com\n") == []


@pytest.mark.unit
class TestFencedLineMask:
    """Tests for fenced_line_mask()."""

    def test_marks_fences_and_contents(self):
        lines = ["a", "```python", "https://example.com", "```", "b"]
        assert fenced_line_mask(lines) == [False, True, True, True, False]

    def test_longer_fence_needs_matching_close(self):
        lines = ["````", "```", "inside", "````", "after"]
        assert fenced_line_mask(lines) == [True, True, True, True, False]

    def test_unterminated_fence_runs_to_end(self):
        assert fenced_line_mask(["~~~", "x", "y"]) == [True, True, True]
