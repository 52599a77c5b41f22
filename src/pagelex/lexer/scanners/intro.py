"""Intro section scanner mixin: HTML lead and front matter detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagelex.items import ItemType
from pagelex.lexer.modes import (
    BACKSLASH,
    DASH,
    EOF_BYTE,
    HASH,
    LBRACE,
    LT,
    ORG_DELIM,
    PLUS,
    QUOTE,
    RBRACE,
    TOML_DELIM,
    WHITESPACE,
    YAML_DELIM,
    YAML_DOC_END,
)

if TYPE_CHECKING:
    from pagelex.lexer.core import StateFunc


class IntroScannerMixin:
    """Mixin providing the entry state and one state per front matter dialect.

    The intro state skips leading whitespace and looks at the first
    significant byte:

    - ``<``: HTML document, no front matter possible
    - ``---`` line: YAML front matter
    - ``+++`` line: TOML front matter
    - ``{``: JSON front matter
    - ``#+``: ORG front matter; the run switches to the ORG divider
    - anything else: no front matter, the body starts at the run origin

    """

    # These will be set by the PageLexer class
    _input: bytes
    _input_len: int
    _pos: int
    _start: int

    def _next(self) -> int:
        raise NotImplementedError

    def _backup(self) -> None:
        raise NotImplementedError

    def _has_prefix(self, prefix: bytes) -> bool:
        raise NotImplementedError

    def _consume_crlf(self) -> bool:
        raise NotImplementedError

    def _line_end(self, pos: int) -> int:
        raise NotImplementedError

    def _match_delimiter_line(self, delim: bytes, pos: int, *, allow_eof: bool) -> int:
        raise NotImplementedError

    def _emit(self, item_type: ItemType) -> None:
        raise NotImplementedError

    def _ignore(self) -> None:
        raise NotImplementedError

    def _errorf(self, message: str) -> StateFunc | None:
        raise NotImplementedError

    def _use_org_divider(self) -> None:
        raise NotImplementedError

    def _lex_main_section(self) -> StateFunc | None:
        raise NotImplementedError

    def _lex_intro_section(self) -> StateFunc | None:
        """Entry state: decide which construct, if any, opens the document."""
        while True:
            r = self._next()
            if r == EOF_BYTE:
                break
            if r in WHITESPACE:
                continue

            if r == LT:
                # Treated as plain HTML; the body scan takes it from here.
                self._emit(ItemType.HTML_LEAD)
                return self._lex_main_section

            self._backup()
            if r == DASH and self._match_delimiter_line(YAML_DELIM, self._pos, allow_eof=False) != -1:
                return self._lex_front_matter_yaml
            if r == PLUS and self._match_delimiter_line(TOML_DELIM, self._pos, allow_eof=False) != -1:
                return self._lex_front_matter_toml
            if r == LBRACE:
                return self._lex_front_matter_json
            if r == HASH:
                return self._lex_front_matter_org
            break

        # No front matter: leading whitespace belongs to the body.
        self._pos = self._start
        return self._lex_main_section

    def _lex_front_matter_yaml(self) -> StateFunc | None:
        return self._lex_front_matter_section(
            ItemType.FRONT_MATTER_YAML, "YAML", YAML_DELIM, (YAML_DELIM, YAML_DOC_END)
        )

    def _lex_front_matter_toml(self) -> StateFunc | None:
        return self._lex_front_matter_section(
            ItemType.FRONT_MATTER_TOML, "TOML", TOML_DELIM, (TOML_DELIM,)
        )

    def _lex_front_matter_section(
        self,
        item_type: ItemType,
        name: str,
        opening: bytes,
        closing: tuple[bytes, ...],
    ) -> StateFunc | None:
        """Lex a block between delimiter lines (YAML or TOML).

        The cursor sits on the opening delimiter. The delimiter lines are
        ignored; the item spans the lines strictly between them, with
        their terminators kept byte for byte.
        """
        self._pos = self._match_delimiter_line(opening, self._pos, allow_eof=False)
        self._ignore()

        line_start = self._pos
        while True:
            for delim in closing:
                end = self._match_delimiter_line(delim, line_start, allow_eof=True)
                if end != -1:
                    self._pos = line_start
                    self._emit(item_type)
                    self._pos = end
                    self._ignore()
                    return self._lex_main_section

            line_start = self._line_end(line_start)
            if line_start == -1:
                return self._errorf(f"EOF looking for end {name} front matter delimiter")

    def _lex_front_matter_json(self) -> StateFunc | None:
        """Lex a balanced JSON object, including one trailing line terminator."""
        depth = 0
        in_quote = False

        while True:
            r = self._next()
            if r == EOF_BYTE:
                return self._errorf("unexpected EOF parsing JSON front matter")

            if in_quote:
                if r == BACKSLASH:
                    self._next()
                elif r == QUOTE:
                    in_quote = False
                continue

            if r == QUOTE:
                in_quote = True
            elif r == LBRACE:
                depth += 1
            elif r == RBRACE:
                depth -= 1
                if depth == 0:
                    break

        self._consume_crlf()
        self._emit(ItemType.FRONT_MATTER_JSON)
        return self._lex_main_section

    def _lex_front_matter_org(self) -> StateFunc | None:
        """Lex contiguous ``#+KEY: value`` lines.

        Example:
            #+TITLE: Test File
            #+AUTHOR: Some Author
        """
        if not self._has_prefix(ORG_DELIM):
            # A Markdown heading, not ORG headers.
            self._pos = self._start
            return self._lex_main_section

        self._use_org_divider()

        while True:
            end = self._line_end(self._pos)
            if end == -1:
                self._pos = self._input_len
                break
            self._pos = end
            if not self._has_prefix(ORG_DELIM):
                break

        self._emit(ItemType.FRONT_MATTER_ORG)
        return self._lex_main_section
