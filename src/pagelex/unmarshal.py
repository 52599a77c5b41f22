"""Unmarshal data strings and data files with a content-addressed cache.

Sites load the same data files and inline data strings over and over
during a build. Results are cached by the MD5 of the content (or a
resource's own key) together with the decoder options.

Thread Safety:
    Unmarshaler guards its cache with a lock. Two threads decoding the same
    new key may both decode; the first stored result wins.

Example:
    >>> from pagelex.unmarshal import Unmarshaler
    >>> Unmarshaler().unmarshal('{"a": 1}')
    {'a': 1}
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pagelex.errors import UnmarshalError
from pagelex.metadecoders import (
    DEFAULT_DECODER,
    Decoder,
    format_from_media_type,
    format_from_string,
)
from pagelex.utils.hashing import hash_bytes, hash_str
from pagelex.utils.logger import get_logger

logger = get_logger(__name__)

# Option names accepted by decoder_from_options (lower-cased)
_OPTION_FIELDS = {
    "delimiter": "delimiter",
    "comma": "delimiter",
    "comment": "comment",
}


@dataclass(frozen=True, slots=True)
class Resource:
    """A data file to unmarshal.

    Attributes:
        path: File location
        media_type: MIME type; inferred from the file extension if None
        key: Stable cache key; MD5 of the file content if None

    """

    path: Path
    media_type: str | None = None
    key: str | None = None

    def read_bytes(self) -> bytes:
        return Path(self.path).read_bytes()


def decoder_from_options(options: Mapping[str, Any], base: Decoder = DEFAULT_DECODER) -> Decoder:
    """Build a Decoder from a user options mapping.

    Keys are case-insensitive; ``comma`` is an alias of ``delimiter``.

    Raises:
        UnmarshalError: Unknown key or a value that is not a single character
    """
    values = {"delimiter": base.delimiter, "comment": base.comment}
    for key, value in options.items():
        name = _OPTION_FIELDS.get(str(key).lower())
        if name is None:
            raise UnmarshalError(f"failed to decode options: unknown option {key!r}")
        value = "" if value is None else str(value)
        if len(value) > 1:
            raise UnmarshalError(f"failed to decode options: invalid character: {value!r}")
        values[name] = value
    try:
        return Decoder(**values)
    except ValueError as e:
        raise UnmarshalError(f"failed to decode options: {e}") from e


class Unmarshaler:
    """Decode data strings and resources, caching the results."""

    __slots__ = ("_decoder", "_cache", "_lock")

    def __init__(self, decoder: Decoder | None = None) -> None:
        self._decoder = decoder or DEFAULT_DECODER
        self._cache: dict[tuple[str, Decoder], Any] = {}
        self._lock = threading.Lock()

    def unmarshal(
        self,
        data: str | bytes | Resource,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Decode data as JSON, TOML, YAML, ORG or CSV.

        Strings have their format sniffed from the content; resources get
        it from their media type (or file extension).

        Args:
            data: Data string, bytes, or a Resource
            options: Decoder options (``delimiter``, ``comment``)

        Raises:
            UnmarshalError: Unsupported input type, options or format
            DecodeError: Data is not valid in its format
        """
        decoder = self._decoder
        if options is not None:
            decoder = decoder_from_options(options, decoder)

        if isinstance(data, Resource):
            return self._unmarshal_resource(data, decoder)

        if isinstance(data, (bytes, bytearray, memoryview)):
            raw = bytes(data)
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise UnmarshalError(f"data is not valid UTF-8: {e}") from e
        elif isinstance(data, str):
            text = data
        else:
            raise UnmarshalError(f"type {type(data).__name__} not supported")

        def create() -> Any:
            fmt = decoder.format_from_content_string(text)
            if fmt is None:
                raise UnmarshalError("unknown format")
            return decoder.unmarshal(text, fmt)

        return self._get_or_create((hash_str(text, algorithm="md5"), decoder), create)

    def _unmarshal_resource(self, resource: Resource, decoder: Decoder) -> Any:
        if resource.media_type is not None:
            fmt = format_from_media_type(resource.media_type)
            if fmt is None:
                raise UnmarshalError(f"MIME {resource.media_type!r} not supported")
        else:
            fmt = format_from_string(Path(resource.path).suffix)
            if fmt is None:
                raise UnmarshalError(f"cannot infer format of {resource.path}")

        content: bytes | None = None
        key = resource.key
        if not key:
            content = resource.read_bytes()
            key = hash_bytes(content, algorithm="md5")

        def create() -> Any:
            nonlocal content
            if content is None:
                content = resource.read_bytes()
            return decoder.unmarshal(content, fmt)

        return self._get_or_create((key, decoder), create)

    def _get_or_create(self, key: tuple[str, Decoder], create: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._cache:
                return self._cache[key]

        logger.debug("unmarshal cache miss for %s", key[0])
        value = create()

        with self._lock:
            return self._cache.setdefault(key, value)

    def clear(self) -> None:
        """Drop all cached results."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
