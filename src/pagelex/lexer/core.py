"""State-function lexer for content files.

The lexer is driven by state functions: each state consumes bytes, queues
zero or more items and returns the next state (or None to finish). The
engine only runs states when the caller asks for an item, so a caller that
stops after the front matter never pays for scanning the body.

Thread Safety:
PageLexer instances are single-use and single-pass. Create one per input.
All state is instance-local; separate runs share nothing.

"""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Iterator
from typing import Protocol

from pagelex.items import Item, ItemType
from pagelex.lexer.modes import (
    CR,
    EOF_BYTE,
    LF,
    SUMMARY_DIVIDER,
    SUMMARY_DIVIDER_ORG,
    LexerMode,
)
from pagelex.lexer.scanners import IntroScannerMixin, MainScannerMixin
from pagelex.utils.logger import get_logger

logger = get_logger(__name__)

_LINE_END = re.compile(rb"\r\n?|\n")

_EMPTY = memoryview(b"")


class StateFunc(Protocol):
    """A lexer state: consumes input and returns the next state."""

    def __call__(self) -> StateFunc | None: ...


class PageLexer(
    # Body scanner first: the intro mixin only stubs _lex_main_section
    MainScannerMixin,
    IntroScannerMixin,
):
    """Pull-driven lexer over one immutable content buffer.

    Usage:
            >>> lexer = PageLexer(b"+++\\ntitle = 'x'\\n+++\\nBody")
            >>> for item in lexer.tokenize():
            ...     print(item)
        Item(FRONT_MATTER_TOML, b"title = 'x'\\n", 4)
        Item(TEXT, b'Body', 20)
        Item(EOF, b'', 24)

    Emission discipline:
        ``_start`` marks the beginning of the pending item and ``_pos`` the
        cursor. Emitting queues ``[_start, _pos)`` and moves ``_start`` up to
        ``_pos``. Ignoring moves ``_start`` without queueing, which is how the
        YAML/TOML delimiter lines are dropped.

    """

    __slots__ = (
        "_input",
        "_view",
        "_input_len",
        "_origin",  # Offset the run started at
        "_pos",
        "_start",
        "_width",  # Width of the last _next() read, for _backup()
        "_state",
        "_items",
        "_terminal",
        "_summary_divider",
        "_summary_divider_type",
        "_source_file",
    )

    def __init__(
        self,
        source: bytes | bytearray | memoryview | str,
        pos: int = 0,
        mode: LexerMode = LexerMode.INTRO,
        *,
        org: bool = False,
        source_file: str | None = None,
    ) -> None:
        """Initialize lexer over a content buffer.

        Args:
            source: Content file bytes. ``str`` is encoded as UTF-8; mutable
                buffers are frozen into ``bytes`` once.
            pos: Byte offset to start lexing at (for lexing a sub-span)
            mode: Start state (front matter detection or body only)
            org: Use the ORG summary divider from the start
            source_file: Optional source file path for log messages
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        elif not isinstance(source, bytes):
            source = bytes(source)
        if not 0 <= pos <= len(source):
            raise ValueError(f"start offset {pos} outside input of length {len(source)}")

        self._input = source
        self._view = memoryview(source)
        self._input_len = len(source)
        self._origin = pos
        self._pos = pos
        self._start = pos
        self._width = 0
        self._items: deque[Item] = deque()
        self._terminal: Item | None = None
        self._source_file = source_file

        if org:
            self._use_org_divider()
        else:
            self._summary_divider = SUMMARY_DIVIDER
            self._summary_divider_type = ItemType.SUMMARY_DIVIDER

        self._state: StateFunc | None
        if mode is LexerMode.INTRO:
            self._state = self._lex_intro_section
        else:
            self._state = self._lex_main_section

    # =========================================================================
    # Pull interface
    # =========================================================================

    def next_item(self) -> Item:
        """Return the next item, running states until one is available.

        After the terminal ERROR or EOF item has been returned, further
        calls keep returning that same item without running any state.
        """
        while not self._items:
            if self._terminal is not None:
                return self._terminal
            state = self._state
            if state is None:
                self._items.append(Item(ItemType.EOF, self._pos, _EMPTY))
                break
            self._state = state()

        item = self._items.popleft()
        if item.type.is_terminal:
            self._terminal = item
            self._state = None
            self._items.clear()
        return item

    def tokenize(self) -> Iterator[Item]:
        """Yield items up to and including the terminal ERROR/EOF item.

        Yields:
            Item objects one at a time, computed on demand
        """
        while True:
            item = self.next_item()
            yield item
            if item.type.is_terminal:
                return

    def __iter__(self) -> Iterator[Item]:
        return self.tokenize()

    @property
    def input(self) -> bytes:
        """The immutable buffer every emitted span views into."""
        return self._input

    @property
    def done(self) -> bool:
        """True once the terminal item has been handed out."""
        return self._terminal is not None

    def line_number(self, pos: int) -> int:
        """1-indexed line number of a byte offset (LF-counted)."""
        return self._input.count(b"\n", 0, pos) + 1

    # =========================================================================
    # Cursor primitives
    # =========================================================================

    def _next(self) -> int:
        """Consume one byte.

        Returns:
            The byte value, or EOF_BYTE at end of input.
        """
        if self._pos >= self._input_len:
            self._width = 0
            return EOF_BYTE
        b = self._input[self._pos]
        self._pos += 1
        self._width = 1
        return b

    def _backup(self) -> None:
        """Step back over the byte read by the last _next() call."""
        self._pos -= self._width
        self._width = 0

    def _peek(self) -> int:
        if self._pos >= self._input_len:
            return EOF_BYTE
        return self._input[self._pos]

    def _has_prefix(self, prefix: bytes) -> bool:
        return self._input.startswith(prefix, self._pos)

    def _consume_crlf(self) -> bool:
        """Consume one line terminator (CRLF, LF or a lone CR) if present."""
        consumed = False
        for expected in (CR, LF):
            if self._peek() == expected:
                self._pos += 1
                consumed = True
        return consumed

    def _line_end(self, pos: int) -> int:
        """Offset just past the terminator of the line containing pos.

        Returns:
            End offset, or -1 when the line runs to end of input unterminated.
        """
        match = _LINE_END.search(self._input, pos)
        return match.end() if match else -1

    def _match_delimiter_line(self, delim: bytes, pos: int, *, allow_eof: bool) -> int:
        """Match a line consisting of exactly ``delim`` at pos.

        Args:
            delim: Delimiter bytes (e.g. b"---")
            pos: Offset where the line starts
            allow_eof: Accept the delimiter as the unterminated last line

        Returns:
            Offset just past the line terminator, or -1 if no match.
        """
        if not self._input.startswith(delim, pos):
            return -1
        end = pos + len(delim)
        if end >= self._input_len:
            return end if allow_eof else -1
        b = self._input[end]
        if b == LF:
            return end + 1
        if b == CR:
            end += 1
            if end < self._input_len and self._input[end] == LF:
                end += 1
            return end
        return -1

    def _is_line_start(self, pos: int) -> bool:
        return pos == self._origin or self._input[pos - 1] in (CR, LF)

    # =========================================================================
    # Emission
    # =========================================================================

    def _emit(self, item_type: ItemType) -> None:
        """Queue the pending span ``[_start, _pos)`` as an item."""
        self._items.append(Item(item_type, self._start, self._view[self._start : self._pos]))
        self._start = self._pos

    def _emit_if_nonempty(self, item_type: ItemType) -> None:
        if self._pos > self._start:
            self._emit(item_type)

    def _ignore(self) -> None:
        """Drop the pending span without emitting it."""
        self._start = self._pos

    def _errorf(self, message: str) -> StateFunc | None:
        """Queue a terminal ERROR item and stop the state machine."""
        logger.debug(
            "lexing %s failed at offset %d: %s",
            self._source_file or "<input>",
            self._start,
            message,
        )
        self._items.append(Item(ItemType.ERROR, self._start, memoryview(message.encode("utf-8"))))
        return None

    def _use_org_divider(self) -> None:
        self._summary_divider = SUMMARY_DIVIDER_ORG
        self._summary_divider_type = ItemType.SUMMARY_DIVIDER_ORG
