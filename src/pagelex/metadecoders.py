"""Decoders for front matter and data files.

The lexer only finds the bytes of a front matter block. This module turns
those bytes into Python data by delegating to existing parsers:

- YAML: PyYAML (``yaml.safe_load``)
- TOML: ``tomllib``
- JSON: ``json``
- CSV: ``csv``
- ORG: ``#+KEY: value`` header lines

Example:
    >>> from pagelex.metadecoders import Format, unmarshal
    >>> unmarshal(b"title: Hello\\n", Format.YAML)
    {'title': 'Hello'}
"""

from __future__ import annotations

import csv
import io
import json
import tomllib
from dataclasses import dataclass
from enum import Enum
from typing import Any

import yaml

from pagelex.errors import DecodeError, UnsupportedFormatError
from pagelex.items import Item, ItemType


class Format(Enum):
    """Data formats understood by the decoders."""

    JSON = "json"
    TOML = "toml"
    YAML = "yaml"
    ORG = "org"
    CSV = "csv"


_ITEM_FORMATS = {
    ItemType.FRONT_MATTER_JSON: Format.JSON,
    ItemType.FRONT_MATTER_TOML: Format.TOML,
    ItemType.FRONT_MATTER_YAML: Format.YAML,
    ItemType.FRONT_MATTER_ORG: Format.ORG,
}

_NAME_FORMATS = {
    "json": Format.JSON,
    "toml": Format.TOML,
    "yaml": Format.YAML,
    "yml": Format.YAML,
    "org": Format.ORG,
    "csv": Format.CSV,
}

_MEDIA_TYPE_FORMATS = {
    "application/json": Format.JSON,
    "application/toml": Format.TOML,
    "application/yaml": Format.YAML,
    "application/x-yaml": Format.YAML,
    "text/yaml": Format.YAML,
    "text/x-yaml": Format.YAML,
    "text/csv": Format.CSV,
    "text/org": Format.ORG,
}

# ORG headers whose values are space-separated lists
_ORG_LIST_KEYS = frozenset({"tags", "categories", "aliases"})


def format_from_item_type(item_type: ItemType) -> Format | None:
    """Format of a front matter item type, or None for other item types."""
    return _ITEM_FORMATS.get(item_type)


def format_from_string(name: str) -> Format | None:
    """Format from a name or file extension.

    Examples:
        >>> format_from_string("yml")
        <Format.YAML: 'yaml'>
        >>> format_from_string(".TOML")
        <Format.TOML: 'toml'>
        >>> format_from_string("data/authors.json")
        <Format.JSON: 'json'>
    """
    name = name.strip().lower()
    if "." in name:
        name = name.rsplit(".", 1)[1]
    return _NAME_FORMATS.get(name)


def format_from_media_type(media_type: str) -> Format | None:
    """Format from a MIME type, including ``+json``-style suffixes."""
    media_type = media_type.split(";", 1)[0].strip().lower()
    fmt = _MEDIA_TYPE_FORMATS.get(media_type)
    if fmt is None and "+" in media_type:
        fmt = _NAME_FORMATS.get(media_type.rsplit("+", 1)[1])
    return fmt


def _is_lower_index_than(first: int, *others: int) -> bool:
    if first == -1:
        return False
    return all(other == -1 or other >= first for other in others)


@dataclass(frozen=True, slots=True)
class Decoder:
    """Decoder options.

    Attributes:
        delimiter: CSV field delimiter
        comment: CSV comment character; lines starting with it are skipped
            (empty string disables comments)

    """

    delimiter: str = ","
    comment: str = "#"

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if len(self.comment) > 1:
            raise ValueError(f"comment must be at most one character, got {self.comment!r}")

    def unmarshal(self, data: bytes | memoryview | str, fmt: Format) -> Any:
        """Decode data in the given format.

        Empty input decodes to an empty mapping (an empty list for CSV).

        Raises:
            DecodeError: If the underlying parser rejects the data
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            try:
                text = bytes(data).decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(fmt.value, str(e)) from e
        else:
            text = data

        if not text.strip():
            return [] if fmt is Format.CSV else {}

        if fmt is Format.YAML:
            try:
                result = yaml.safe_load(text)
            except yaml.YAMLError as e:
                raise DecodeError(fmt.value, str(e)) from e
            return {} if result is None else result
        if fmt is Format.TOML:
            try:
                return tomllib.loads(text)
            except tomllib.TOMLDecodeError as e:
                raise DecodeError(fmt.value, str(e)) from e
        if fmt is Format.JSON:
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise DecodeError(fmt.value, str(e)) from e
        if fmt is Format.ORG:
            return self._unmarshal_org(text)
        if fmt is Format.CSV:
            return self._unmarshal_csv(text)
        raise UnsupportedFormatError(str(fmt))

    def format_from_content_string(self, data: str) -> Format | None:
        """Guess the format of a data string from its first structural character.

        Whichever of the CSV delimiter, ``{``, ``:`` and ``=`` comes first
        wins. A leading ``#+`` header means ORG.

        Examples:
            >>> Decoder().format_from_content_string('{"a": 1}')
            <Format.JSON: 'json'>
            >>> Decoder().format_from_content_string("a = 1")
            <Format.TOML: 'toml'>
        """
        if data.lstrip().startswith("#+"):
            return Format.ORG

        csv_idx = data.find(self.delimiter)
        json_idx = data.find("{")
        yaml_idx = data.find(":")
        toml_idx = data.find("=")

        if _is_lower_index_than(csv_idx, json_idx, yaml_idx, toml_idx):
            return Format.CSV
        if _is_lower_index_than(json_idx, yaml_idx, toml_idx):
            return Format.JSON
        if _is_lower_index_than(yaml_idx, toml_idx):
            return Format.YAML
        if toml_idx != -1:
            return Format.TOML
        return None

    def _unmarshal_csv(self, text: str) -> list[list[str]]:
        lines = text.splitlines(keepends=True)
        if self.comment:
            lines = [line for line in lines if not line.startswith(self.comment)]
        try:
            return [row for row in csv.reader(io.StringIO("".join(lines)), delimiter=self.delimiter)]
        except csv.Error as e:
            raise DecodeError(Format.CSV.value, str(e)) from e

    def _unmarshal_org(self, text: str) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for line in text.splitlines():
            line = line.strip()
            if not line.startswith("#+"):
                continue
            key, sep, value = line[2:].partition(":")
            if not sep:
                raise DecodeError(Format.ORG.value, f"missing ':' in header {line!r}")
            key = key.strip().lower()
            value = value.strip()
            if key in _ORG_LIST_KEYS:
                result[key] = value.split()
            else:
                result[key] = value
        return result


DEFAULT_DECODER = Decoder()


def unmarshal(data: bytes | memoryview | str, fmt: Format) -> Any:
    """Decode data with the default decoder options."""
    return DEFAULT_DECODER.unmarshal(data, fmt)


def decode_front_matter(item: Item, decoder: Decoder | None = None) -> Any:
    """Decode the span of a front matter item according to its dialect.

    Raises:
        ValueError: If the item is not a front matter item
        DecodeError: If the block is not valid in its dialect
    """
    fmt = format_from_item_type(item.type)
    if fmt is None:
        raise ValueError(f"not a front matter item: {item!r}")
    return (decoder or DEFAULT_DECODER).unmarshal(item.val, fmt)
