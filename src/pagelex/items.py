"""Item and ItemType definitions for the pagelex lexer.

The lexer produces a stream of Item objects that page assembly and the
front matter decoders consume. Each Item has a type, a byte offset into
the input and a byte span.

Thread Safety:
Item is frozen (immutable) and safe to share across threads.
ItemType is an enum (inherently immutable).

Memory Note:
Item.val is a memoryview slice of the lexer's input buffer, so emitting
an item never copies bytes. The lexer always holds its input as immutable
``bytes``, so a view can never observe a mutation. Holding an Item keeps
the whole input buffer alive.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ItemType(Enum):
    """Item types produced by the lexer.

    Organized by category:
    - Stream control (ERROR, EOF)
    - Lead-in and front matter (one of these at most, always first)
    - Body content (TEXT and summary dividers)

    """

    # Stream control
    ERROR = auto()  # Terminal; value is the error message
    EOF = auto()  # Terminal; empty value

    # Lead-in and front matter
    HTML_LEAD = auto()  # Leading whitespace + "<"
    FRONT_MATTER_YAML = auto()  # Between --- delimiters
    FRONT_MATTER_TOML = auto()  # Between +++ delimiters
    FRONT_MATTER_JSON = auto()  # Balanced { ... }
    FRONT_MATTER_ORG = auto()  # Contiguous #+KEY: value lines

    # Body content
    TEXT = auto()
    SUMMARY_DIVIDER = auto()  # <!--more-->
    SUMMARY_DIVIDER_ORG = auto()  # # more

    @property
    def is_front_matter(self) -> bool:
        """True for the four front matter dialects."""
        return self in _FRONT_MATTER_TYPES

    @property
    def is_terminal(self) -> bool:
        """True for ERROR and EOF, the items that end a run."""
        return self is ItemType.ERROR or self is ItemType.EOF

    @property
    def is_summary_divider(self) -> bool:
        return self is ItemType.SUMMARY_DIVIDER or self is ItemType.SUMMARY_DIVIDER_ORG


_FRONT_MATTER_TYPES = frozenset(
    {
        ItemType.FRONT_MATTER_YAML,
        ItemType.FRONT_MATTER_TOML,
        ItemType.FRONT_MATTER_JSON,
        ItemType.FRONT_MATTER_ORG,
    }
)


@dataclass(frozen=True, slots=True)
class Item:
    """A lexical unit produced by the lexer.

    Attributes:
        type: The item type (from ItemType enum)
        pos: Absolute byte offset of the span start in the input
        val: Zero-copy view of the span (message bytes for ERROR)

    Equality compares type, position and span contents, so two runs over
    equal inputs produce equal item sequences.

    """

    type: ItemType
    pos: int
    val: memoryview

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = bytes(self.val)
        if len(val) > 20:
            val = val[:17] + b"..."
        return f"Item({self.type.name}, {val!r}, {self.pos})"

    def __bytes__(self) -> bytes:
        return bytes(self.val)

    @property
    def end(self) -> int:
        """Offset just past the span (equal to pos for synthetic items)."""
        if self.is_synthetic:
            return self.pos
        return self.pos + len(self.val)

    @property
    def is_synthetic(self) -> bool:
        """True for items whose value is not a slice of the input."""
        return self.type.is_terminal

    @property
    def is_error(self) -> bool:
        return self.type is ItemType.ERROR

    @property
    def is_eof(self) -> bool:
        return self.type is ItemType.EOF

    @property
    def text(self) -> str:
        """Span decoded as UTF-8 (invalid sequences replaced)."""
        return bytes(self.val).decode("utf-8", errors="replace")
