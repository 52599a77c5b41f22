"""Page assembly from the lexer's item stream.

Pulls items from a PageLexer and assembles the pieces a site build needs:
the decoded front matter, the body and the summary.

Example:
    >>> from pagelex.page import parse_page
    >>> page = parse_page(b"+++\\ntitle = 'Hi'\\n+++\\nIntro<!--more-->Rest")
    >>> page.metadata
    {'title': 'Hi'}
    >>> page.summary
    b'Intro'
    >>> page.content
    b'IntroRest'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pagelex.config import get_page_config
from pagelex.errors import LexError
from pagelex.items import Item, ItemType
from pagelex.lexer import LexerMode, PageLexer
from pagelex.metadecoders import Decoder, Format, decode_front_matter, format_from_item_type
from pagelex.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class FrontMatter:
    """A decoded front matter block.

    Attributes:
        format: Dialect the block was written in
        raw: Exact bytes of the block, as the lexer found them
        metadata: Decoded data (a mapping for well-formed front matter)
        pos: Byte offset of the block in the content file

    """

    format: Format
    raw: bytes
    metadata: Any = field(default_factory=dict)
    pos: int = 0


@dataclass(frozen=True, slots=True)
class Page:
    """A content file split into front matter, body and summary.

    Attributes:
        front_matter: Decoded front matter, or None
        content: Body bytes with summary dividers removed (includes the
            HTML lead for HTML documents)
        summary: Body bytes before the first divider, or None without one
        is_html: The file is a raw HTML document
        source_file: Source file path, if known

    """

    front_matter: FrontMatter | None
    content: bytes
    summary: bytes | None = None
    is_html: bool = False
    source_file: str | None = None

    @property
    def metadata(self) -> Any:
        """Decoded front matter, or an empty mapping."""
        return self.front_matter.metadata if self.front_matter else {}

    @property
    def has_summary_divider(self) -> bool:
        return self.summary is not None


def _lex_error(lexer: PageLexer, item: Item, source_file: str | None) -> LexError:
    return LexError(
        item.text,
        offset=item.pos,
        lineno=lexer.line_number(item.pos),
        source_file=source_file,
    )


def _open(
    source: bytes | bytearray | memoryview | str,
    strict: bool | None,
    source_file: str | None,
) -> tuple[PageLexer, Item]:
    """Start a run and pull its first item, recovering from bad front matter.

    A malformed front matter block either raises LexError (strict) or the
    file is lexed again with front matter detection switched off.
    """
    if strict is None:
        strict = get_page_config().strict_front_matter

    lexer = PageLexer(source, source_file=source_file)
    first = lexer.next_item()
    if first.is_error:
        if strict:
            raise _lex_error(lexer, first, source_file)
        logger.warning(
            "%s: %s; treating the whole file as content",
            source_file or "<input>",
            first.text,
        )
        lexer = PageLexer(lexer.input, mode=LexerMode.MAIN, source_file=source_file)
        first = lexer.next_item()
    return lexer, first


def _front_matter(item: Item, decoder: Decoder | None) -> FrontMatter | None:
    fmt = format_from_item_type(item.type)
    if fmt is None:
        return None
    return FrontMatter(
        format=fmt,
        raw=bytes(item.val),
        metadata=decode_front_matter(item, decoder),
        pos=item.pos,
    )


def parse_front_matter(
    source: bytes | bytearray | memoryview | str,
    *,
    decoder: Decoder | None = None,
    strict: bool | None = None,
    source_file: str | None = None,
) -> FrontMatter | None:
    """Read only the front matter of a content file.

    Stops after the first item; the body is never scanned.

    Raises:
        LexError: Malformed front matter in strict mode
        DecodeError: The block is not valid in its dialect
    """
    _, first = _open(source, strict, source_file)
    return _front_matter(first, decoder)


def parse_page(
    source: bytes | bytearray | memoryview | str,
    *,
    decoder: Decoder | None = None,
    strict: bool | None = None,
    source_file: str | None = None,
) -> Page:
    """Split a content file into front matter, content and summary.

    Args:
        source: Content file bytes
        decoder: Decoder options for the front matter (default options if None)
        strict: Raise on malformed front matter (config default if None)
        source_file: Source path for error messages

    Raises:
        LexError: Malformed front matter in strict mode
        DecodeError: The block is not valid in its dialect
    """
    lexer, item = _open(source, strict, source_file)

    front_matter = _front_matter(item, decoder)
    if front_matter is not None:
        item = lexer.next_item()

    is_html = item.type is ItemType.HTML_LEAD
    parts: list[bytes] = []
    summary: bytes | None = None

    while not item.type.is_terminal:
        if item.type.is_summary_divider:
            if summary is None:
                summary = b"".join(parts)
        else:
            parts.append(bytes(item.val))
        item = lexer.next_item()

    if item.is_error:
        raise _lex_error(lexer, item, source_file)

    return Page(
        front_matter=front_matter,
        content=b"".join(parts),
        summary=summary,
        is_html=is_html,
        source_file=source_file,
    )
