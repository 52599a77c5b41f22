"""Output path translation and publishing.

Maps a content path to its output file and writes rendered output under
the publish directory.

Example:
    >>> Filesystem().translate("posts/hello.md")
    'posts/hello/index.html'
    >>> Filesystem(ugly_urls=True).translate("posts/hello.md")
    'posts/hello.html'
"""

from __future__ import annotations

import posixpath
import shutil
from pathlib import Path
from typing import BinaryIO, Protocol

from pagelex.config import get_page_config
from pagelex.utils.logger import get_logger

logger = get_logger(__name__)

# Markup extensions whose output is HTML
_MARKUP_EXTENSIONS = frozenset({".md", ".rst"})


class Translator(Protocol):
    """Maps a source path to an output path."""

    def translate(self, src: str) -> str: ...


class Publisher(Protocol):
    """Writes output for a source path."""

    def publish(self, path: str, data: bytes | BinaryIO) -> Path: ...


class Filesystem:
    """Translator and Publisher writing into a local directory.

    Attributes:
        ugly_urls: Output "name.html" instead of "name/index.html"
        default_extension: Extension for paths that have none
        publish_dir: Output root

    """

    __slots__ = ("ugly_urls", "default_extension", "publish_dir")

    def __init__(
        self,
        ugly_urls: bool = False,
        default_extension: str = ".html",
        publish_dir: str | Path = "",
    ) -> None:
        self.ugly_urls = ugly_urls
        self.default_extension = default_extension
        self.publish_dir = Path(publish_dir)

    @classmethod
    def from_config(cls) -> Filesystem:
        """Filesystem configured from the active PageConfig."""
        config = get_page_config()
        return cls(
            ugly_urls=config.ugly_urls,
            default_extension=config.default_extension,
            publish_dir=config.publish_dir,
        )

    def translate(self, src: str) -> str:
        """Output path (slash-separated, relative to publish_dir) for src."""
        if src == "/":
            return "index.html"

        directory, file = posixpath.split(src)
        name, ext = posixpath.splitext(file)
        ext = self._extension(ext)

        if self.ugly_urls:
            return posixpath.join(directory, f"{name}{ext}")
        return posixpath.join(directory, name, f"index{ext}")

    def publish(self, path: str, data: bytes | BinaryIO) -> Path:
        """Write data to the translated location of path.

        Args:
            path: Source path to translate
            data: Output bytes, or a binary stream to copy

        Returns:
            Path of the written file

        Raises:
            OSError: Directory creation or write failed
        """
        dest = self.publish_dir / Path(*self.translate(path).split("/"))
        dest.parent.mkdir(parents=True, exist_ok=True)

        with open(dest, "wb") as f:
            if isinstance(data, (bytes, bytearray, memoryview)):
                f.write(data)
            else:
                shutil.copyfileobj(data, f)

        logger.debug("published %s -> %s", path, dest)
        return dest

    def _extension(self, ext: str) -> str:
        if ext in _MARKUP_EXTENSIONS:
            return ".html"
        if ext:
            return ext
        if self.default_extension:
            return self.default_extension
        return ".html"
