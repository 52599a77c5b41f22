"""State-function lexer for content files.

The lexer finds the HTML lead or front matter block at the top of a
content file and splits the body around summary dividers, without
copying or normalizing a single byte.

Architecture:
lexer/
├── __init__.py          # Re-exports PageLexer, LexerMode
├── core.py              # PageLexer engine (pull loop, cursor, emission)
├── modes.py             # LexerMode enum, delimiter constants
└── scanners/            # State functions
    ├── intro.py         # HTML lead, YAML, TOML, JSON, ORG detection
    └── main.py          # Body text and summary dividers

Usage:
    >>> from pagelex.lexer import PageLexer
    >>> for item in PageLexer(b"---\\ntitle: x\\n---\\nBody"):
    ...     print(item)
Item(FRONT_MATTER_YAML, b'title: x\\n', 4)
Item(TEXT, b'Body', 17)
Item(EOF, b'', 21)

"""

from pagelex.lexer.core import PageLexer, StateFunc
from pagelex.lexer.modes import LexerMode

__all__ = ["LexerMode", "PageLexer", "StateFunc"]
