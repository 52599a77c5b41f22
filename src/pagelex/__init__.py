"""
pagelex: front matter lexer for static site content files

Finds the front matter block (YAML, TOML, JSON or ORG) or HTML lead at the
top of a content file and splits the body around summary dividers, keeping
every byte exactly as written (CRLF included).

Quick Start:
    >>> from pagelex import PageLexer
    >>> for item in PageLexer(b"---\\ntitle: Hi\\n---\\nBody"):
    ...     print(item)
    Item(FRONT_MATTER_YAML, b'title: Hi\\n', 4)
    Item(TEXT, b'Body', 18)
    Item(EOF, b'', 22)

    >>> from pagelex import parse_page
    >>> page = parse_page(b"---\\ntitle: Hi\\n---\\nBody")
    >>> page.metadata
    {'title': 'Hi'}

Installation:
    pip install pagelex
"""

from pagelex.config import (
    PageConfig,
    get_page_config,
    page_config_context,
    reset_page_config,
    set_page_config,
)
from pagelex.errors import (
    DecodeError,
    HighlightOptionError,
    LexError,
    PagelexError,
    UnmarshalError,
    UnsupportedFormatError,
)
from pagelex.highlight import highlight
from pagelex.items import Item, ItemType
from pagelex.lexer import LexerMode, PageLexer
from pagelex.metadecoders import Decoder, Format, decode_front_matter, unmarshal
from pagelex.page import FrontMatter, Page, parse_front_matter, parse_page
from pagelex.target import Filesystem
from pagelex.unmarshal import Resource, Unmarshaler

__version__ = "0.1.0"


def lex(
    source: bytes | bytearray | memoryview | str,
    pos: int = 0,
    mode: LexerMode = LexerMode.INTRO,
) -> list[Item]:
    """Lex a whole content file into a list of items.

    Convenience for callers that want every item; use PageLexer directly
    to stop early.
    """
    return list(PageLexer(source, pos, mode).tokenize())


__all__ = [
    # Lexer
    "Item",
    "ItemType",
    "LexerMode",
    "PageLexer",
    "lex",
    # Pages
    "FrontMatter",
    "Page",
    "parse_front_matter",
    "parse_page",
    # Decoding
    "Decoder",
    "Format",
    "Resource",
    "Unmarshaler",
    "decode_front_matter",
    "unmarshal",
    # Output
    "Filesystem",
    "highlight",
    # Config
    "PageConfig",
    "get_page_config",
    "page_config_context",
    "reset_page_config",
    "set_page_config",
    # Errors
    "DecodeError",
    "HighlightOptionError",
    "LexError",
    "PagelexError",
    "UnmarshalError",
    "UnsupportedFormatError",
]
