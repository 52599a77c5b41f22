"""ContextVar-based configuration for pagelex.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per build, read by page assembly, the highlighter and
the output target.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    from pagelex.config import PageConfig, page_config_context

    with page_config_context(PageConfig(cache_dir="/tmp/pagelex")):
        html = highlight(code, "python")

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PageConfig:
    """Immutable build configuration.

    Attributes:
        strict_front_matter: Raise on malformed front matter instead of
            treating the whole file as body
        cache_dir: Directory for the highlight cache (None = no disk cache)
        pygments_options: Default highlight options, "key=value,..." form
        pygments_style: Pygments style name (overrides pygments_options)
        pygments_use_classes: Emit CSS classes instead of inline styles
            (None = leave to pygments_options)
        ugly_urls: Publish "name.html" instead of "name/index.html"
        default_extension: Extension for paths that have none
        publish_dir: Root directory the target publishes into

    """

    strict_front_matter: bool = True
    cache_dir: str | None = None
    pygments_options: str = ""
    pygments_style: str | None = None
    pygments_use_classes: bool | None = None
    ugly_urls: bool = False
    default_extension: str = ".html"
    publish_dir: str = "public"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "PageConfig":
        """Create PageConfig from dictionary.

        Keys are matched case-insensitively against field names, so site
        config spellings like ``CacheDir`` or ``cacheDir`` are accepted after
        dropping underscores. Unknown keys are silently ignored.

        Example:
            >>> config = PageConfig.from_dict({"uglyurls": True, "unknown": 1})
            >>> config.ugly_urls
            True

        """
        by_key = {
            name.replace("_", "").lower(): name for name in cls.__dataclass_fields__
        }
        filtered = {}
        for key, value in config_dict.items():
            name = by_key.get(str(key).replace("_", "").lower())
            if name is not None:
                filtered[name] = value
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: PageConfig = PageConfig()

_page_config: ContextVar[PageConfig] = ContextVar(
    "page_config",
    default=_DEFAULT_CONFIG,
)


def get_page_config() -> PageConfig:
    """Get current configuration (thread-local)."""
    return _page_config.get()


def set_page_config(config: PageConfig) -> None:
    """Set configuration for current context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _page_config.set(config)


def reset_page_config() -> None:
    """Reset to default configuration."""
    _page_config.set(_DEFAULT_CONFIG)


@contextmanager
def page_config_context(config: PageConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with page_config_context(PageConfig(ugly_urls=True)):
        ...     get_page_config().ugly_urls
        True

    """
    previous = _page_config.get()
    _page_config.set(config)
    try:
        yield
    finally:
        _page_config.set(previous)


__all__ = [
    "PageConfig",
    "get_page_config",
    "page_config_context",
    "reset_page_config",
    "set_page_config",
]
