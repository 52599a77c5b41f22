"""Exception classes for pagelex.

Provides standardized exceptions for error handling throughout pagelex.
The lexer itself never raises on malformed input; it ends the item stream
with an ERROR item. Consumers turn that item into a LexError.
"""

from __future__ import annotations


class PagelexError(Exception):
    """Base exception for all pagelex errors.

    Subclass this for specific error categories.
    """

    pass


class LexError(PagelexError):
    """Error while lexing a content file.

    Raised by stream consumers when the lexer emits an ERROR item.
    """

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        lineno: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize lex error with optional location.

        Args:
            message: Error description (the ERROR item's value)
            offset: Byte offset where lexing failed
            lineno: Line number of that offset (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.offset = offset
        self.lineno = lineno
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
        if location:
            location = location.rstrip(":") + ": "

        suffix = f" (offset {offset})" if offset is not None else ""
        super().__init__(f"{location}{message}{suffix}")


class DecodeError(PagelexError):
    """Error decoding a front matter or data block.

    Wraps the underlying parser exception (YAML, TOML, JSON, CSV).
    """

    def __init__(self, fmt: str, message: str) -> None:
        """Initialize decode error.

        Args:
            fmt: Name of the format being decoded (e.g., "yaml")
            message: Description of the failure
        """
        self.format = fmt
        super().__init__(f"failed to decode {fmt}: {message}")


class UnsupportedFormatError(DecodeError):
    """Raised when no decoder exists for the requested format."""

    def __init__(self, fmt: str) -> None:
        super().__init__(fmt, "unsupported format")


class HighlightOptionError(PagelexError):
    """Invalid highlighting option string."""

    pass


class UnmarshalError(PagelexError):
    """Invalid arguments or options passed to the unmarshal helper."""

    pass
