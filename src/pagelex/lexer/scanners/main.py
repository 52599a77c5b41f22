"""Main section scanner mixin: body text and summary dividers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagelex.items import ItemType
from pagelex.lexer.modes import LINE_TERMINATORS

if TYPE_CHECKING:
    from pagelex.lexer.core import StateFunc


class MainScannerMixin:
    """Mixin providing body scanning.

    Body bytes are opaque except for the run's summary divider. Each call
    of the state emits at most one TEXT item and one divider, so the body
    is only scanned as far as the caller pulls.

    """

    # These will be set by the PageLexer class
    _input: bytes
    _input_len: int
    _pos: int
    _start: int
    _summary_divider: bytes
    _summary_divider_type: ItemType

    def _emit(self, item_type: ItemType) -> None:
        raise NotImplementedError

    def _emit_if_nonempty(self, item_type: ItemType) -> None:
        raise NotImplementedError

    def _is_line_start(self, pos: int) -> bool:
        raise NotImplementedError

    def _lex_main_section(self) -> StateFunc | None:
        """Emit text up to the next summary divider, then the divider."""
        idx = self._find_summary_divider(self._pos)
        if idx == -1:
            self._pos = self._input_len
            self._emit_if_nonempty(ItemType.TEXT)
            return None

        self._pos = idx
        self._emit_if_nonempty(ItemType.TEXT)
        self._pos += len(self._summary_divider)
        self._emit(self._summary_divider_type)
        return self._lex_main_section

    def _find_summary_divider(self, pos: int) -> int:
        """Offset of the next divider at or after pos, or -1.

        ``<!--more-->`` matches anywhere. ``# more`` must fill a whole line.
        """
        divider = self._summary_divider
        idx = self._input.find(divider, pos)
        if self._summary_divider_type is ItemType.SUMMARY_DIVIDER:
            return idx

        while idx != -1:
            end = idx + len(divider)
            if self._is_line_start(idx) and (
                end == self._input_len or self._input[end] in LINE_TERMINATORS
            ):
                return idx
            idx = self._input.find(divider, idx + 1)
        return -1
