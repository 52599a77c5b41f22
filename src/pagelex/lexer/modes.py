"""Lexer start modes and byte constants.

This module defines the entry points of the lexer's state machine and
the delimiter byte strings the state functions look for.
"""

from __future__ import annotations

from enum import Enum, auto


class LexerMode(Enum):
    """Where a lexer run starts.

    - INTRO: Detect an HTML lead or front matter, then scan the body
    - MAIN: Skip front matter detection and scan the body only

    """

    INTRO = auto()
    MAIN = auto()


# Returned by PageLexer._next() at end of input
EOF_BYTE = -1

# Single bytes compared against indexed bytes (ints)
CR = ord("\r")
LF = ord("\n")
LT = ord("<")
LBRACE = ord("{")
RBRACE = ord("}")
QUOTE = ord('"')
BACKSLASH = ord("\\")
HASH = ord("#")
DASH = ord("-")
PLUS = ord("+")

WHITESPACE = frozenset(b" \t\r\n")
LINE_TERMINATORS = frozenset(b"\r\n")

# Front matter delimiters
YAML_DELIM = b"---"
YAML_DOC_END = b"..."
TOML_DELIM = b"+++"
ORG_DELIM = b"#+"

# Summary dividers
SUMMARY_DIVIDER = b"<!--more-->"
SUMMARY_DIVIDER_ORG = b"# more"
