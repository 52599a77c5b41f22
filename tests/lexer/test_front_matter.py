"""Front matter detection and body scanning, item by item.

Each case lists the full expected item sequence as (type, bytes) pairs.
Positions are checked separately in test_lexer_state.py.
"""

import pytest

from pagelex.items import ItemType
from pagelex.lexer import PageLexer

TST_JSON = rb'{ "a": { "b": "\"Hugo\"}" } }'
TST_ORG = b"\n#+TITLE: T1\n#+AUTHOR: A1\n#+DESCRIPTION: D1\n"

EOF = (ItemType.EOF, b"")
SOME_TEXT = (ItemType.TEXT, b"\nSome text.\n")
FM_TOML = (ItemType.FRONT_MATTER_TOML, b'foo = "bar"\n')
FM_YAML = (ItemType.FRONT_MATTER_YAML, b'foo: "bar"\n')
DIVIDER = (ItemType.SUMMARY_DIVIDER, b"<!--more-->")
DIVIDER_ORG = (ItemType.SUMMARY_DIVIDER_ORG, b"# more")


def collect(source: bytes, **kwargs) -> list[tuple[ItemType, bytes]]:
    return [(item.type, bytes(item.val)) for item in PageLexer(source, **kwargs).tokenize()]


FRONT_MATTER_CASES = [
    ("empty", b"", [EOF]),
    (
        "HTML document",
        b"  <html>  ",
        [(ItemType.HTML_LEAD, b"  <"), (ItemType.TEXT, b"html>  "), EOF],
    ),
    ("YAML front matter", b'---\nfoo: "bar"\n---\n\nSome text.\n', [FM_YAML, SOME_TEXT, EOF]),
    (
        "YAML front matter CRLF",
        b'---\r\nfoo: "bar"\r\n---\n\nSome text.\n',
        [(ItemType.FRONT_MATTER_YAML, b'foo: "bar"\r\n'), SOME_TEXT, EOF],
    ),
    ("TOML front matter", b'+++\nfoo = "bar"\n+++\n\nSome text.\n', [FM_TOML, SOME_TEXT, EOF]),
    (
        "JSON front matter",
        TST_JSON + b"\r\n\nSome text.\n",
        [(ItemType.FRONT_MATTER_JSON, TST_JSON + b"\r\n"), SOME_TEXT, EOF],
    ),
    (
        "ORG front matter",
        TST_ORG + b"\nSome text.\n",
        [(ItemType.FRONT_MATTER_ORG, TST_ORG), SOME_TEXT, EOF],
    ),
    (
        "Summary divider ORG",
        TST_ORG + b"\nSome text.\n# more\nSome text.\n",
        [(ItemType.FRONT_MATTER_ORG, TST_ORG), SOME_TEXT, DIVIDER_ORG, SOME_TEXT, EOF],
    ),
    (
        "Summary divider",
        b'+++\nfoo = "bar"\n+++\n\nSome text.\n<!--more-->\nSome text.\n',
        [FM_TOML, SOME_TEXT, DIVIDER, SOME_TEXT, EOF],
    ),
]


@pytest.mark.parametrize(
    "source,expected",
    [pytest.param(source, expected, id=name) for name, source, expected in FRONT_MATTER_CASES],
)
def test_front_matter(source: bytes, expected: list) -> None:
    assert collect(source) == expected


class TestYamlAndToml:
    """Delimited front matter blocks."""

    def test_yaml_document_end_marker_closes(self) -> None:
        assert collect(b"---\na: 1\n...\nBody") == [
            (ItemType.FRONT_MATTER_YAML, b"a: 1\n"),
            (ItemType.TEXT, b"Body"),
            EOF,
        ]

    def test_toml_does_not_close_on_dots(self) -> None:
        items = collect(b"+++\na = 1\n...\n+++\nBody")
        assert items[0] == (ItemType.FRONT_MATTER_TOML, b"a = 1\n...\n")

    def test_empty_block(self) -> None:
        assert collect(b"---\n---\nBody") == [
            (ItemType.FRONT_MATTER_YAML, b""),
            (ItemType.TEXT, b"Body"),
            EOF,
        ]

    def test_closing_delimiter_at_end_of_input(self) -> None:
        assert collect(b"---\na: 1\n---") == [(ItemType.FRONT_MATTER_YAML, b"a: 1\n"), EOF]

    def test_leading_blank_lines_are_skipped(self) -> None:
        assert collect(b"\n\n---\na: 1\n---\nBody") == [
            (ItemType.FRONT_MATTER_YAML, b"a: 1\n"),
            (ItemType.TEXT, b"Body"),
            EOF,
        ]

    def test_lone_cr_line_endings(self) -> None:
        assert collect(b"---\rfoo: 1\r---\rBody") == [
            (ItemType.FRONT_MATTER_YAML, b"foo: 1\r"),
            (ItemType.TEXT, b"Body"),
            EOF,
        ]

    def test_toml_crlf_preserved(self) -> None:
        items = collect(b"+++\r\na = 1\r\nb = 2\r\n+++\r\nBody\r\n")
        assert items[0] == (ItemType.FRONT_MATTER_TOML, b"a = 1\r\nb = 2\r\n")
        assert items[1] == (ItemType.TEXT, b"Body\r\n")

    def test_delimiter_inside_a_line_does_not_close(self) -> None:
        items = collect(b"---\ntitle: a --- b\n---\n")
        assert items[0] == (ItemType.FRONT_MATTER_YAML, b"title: a --- b\n")

    def test_delimiter_with_trailing_text_does_not_close(self) -> None:
        items = collect(b"---\na: 1\n--- no\n---\n")
        assert items[0] == (ItemType.FRONT_MATTER_YAML, b"a: 1\n--- no\n")

    @pytest.mark.parametrize(
        "source",
        [b"--- not front matter\n", b"- list item\n", b"---", b"++ x\n", b"+++"],
    )
    def test_not_a_delimiter_line_is_body(self, source: bytes) -> None:
        assert collect(source) == [(ItemType.TEXT, source), EOF]


class TestJson:
    """Brace-balanced JSON front matter."""

    def test_brace_inside_string(self) -> None:
        assert collect(b'{"a": "}"}Body') == [
            (ItemType.FRONT_MATTER_JSON, b'{"a": "}"}'),
            (ItemType.TEXT, b"Body"),
            EOF,
        ]

    def test_escaped_backslash_before_closing_quote(self) -> None:
        blob = rb'{"a": "\\"}'
        assert collect(blob + b"\nX") == [
            (ItemType.FRONT_MATTER_JSON, blob + b"\n"),
            (ItemType.TEXT, b"X"),
            EOF,
        ]

    def test_only_one_line_terminator_is_consumed(self) -> None:
        items = collect(b'{"a": 1}\n\nBody')
        assert items[0] == (ItemType.FRONT_MATTER_JSON, b'{"a": 1}\n')
        assert items[1] == (ItemType.TEXT, b"\nBody")

    def test_leading_whitespace_is_part_of_the_block(self) -> None:
        items = collect(b'  {"a": 1}')
        assert items == [(ItemType.FRONT_MATTER_JSON, b'  {"a": 1}'), EOF]


class TestOrg:
    """ORG headers and the ORG summary divider."""

    def test_markdown_heading_is_not_org(self) -> None:
        source = b"# Title\n\nIntro<!--more-->Rest"
        assert collect(source) == [
            (ItemType.TEXT, b"# Title\n\nIntro"),
            DIVIDER,
            (ItemType.TEXT, b"Rest"),
            EOF,
        ]

    def test_org_headers_to_end_of_input(self) -> None:
        assert collect(b"#+TITLE: T") == [(ItemType.FRONT_MATTER_ORG, b"#+TITLE: T"), EOF]

    def test_generic_divider_is_plain_text_in_org(self) -> None:
        source = TST_ORG + b"a<!--more-->b"
        assert collect(source)[1] == (ItemType.TEXT, b"a<!--more-->b")

    def test_org_divider_must_start_a_line(self) -> None:
        source = TST_ORG + b"text # more\n"
        assert collect(source)[1:] == [(ItemType.TEXT, b"text # more\n"), EOF]

    def test_org_divider_must_fill_the_line(self) -> None:
        source = TST_ORG + b"# moreover\n"
        assert collect(source)[1:] == [(ItemType.TEXT, b"# moreover\n"), EOF]

    def test_org_divider_at_end_of_input(self) -> None:
        source = TST_ORG + b"a\n# more"
        assert collect(source)[1:] == [(ItemType.TEXT, b"a\n"), DIVIDER_ORG, EOF]


class TestBody:
    """Text and summary dividers after the intro."""

    def test_whitespace_only(self) -> None:
        assert collect(b"  \n") == [(ItemType.TEXT, b"  \n"), EOF]

    def test_plain_markdown(self) -> None:
        assert collect(b"Hello *world*\n") == [(ItemType.TEXT, b"Hello *world*\n"), EOF]

    def test_multiple_dividers(self) -> None:
        assert collect(b"a<!--more-->b<!--more-->c") == [
            (ItemType.TEXT, b"a"),
            DIVIDER,
            (ItemType.TEXT, b"b"),
            DIVIDER,
            (ItemType.TEXT, b"c"),
            EOF,
        ]

    def test_empty_text_is_suppressed(self) -> None:
        assert collect(b"+++\n+++\n<!--more-->") == [
            (ItemType.FRONT_MATTER_TOML, b""),
            DIVIDER,
            EOF,
        ]

    def test_html_document_keeps_dividers(self) -> None:
        assert collect(b"<p>a</p><!--more--><p>b</p>") == [
            (ItemType.HTML_LEAD, b"<"),
            (ItemType.TEXT, b"p>a</p>"),
            DIVIDER,
            (ItemType.TEXT, b"<p>b</p>"),
            EOF,
        ]

    def test_front_matter_after_html_is_text(self) -> None:
        items = collect(b"<br>\n---\na: 1\n---\n")
        assert [t for t, _ in items] == [ItemType.HTML_LEAD, ItemType.TEXT, ItemType.EOF]
