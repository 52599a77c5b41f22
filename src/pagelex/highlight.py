"""Syntax highlighting for code blocks via Pygments, with a disk cache.

Options use Pygments' "key=value,key=value" form, e.g.
``"style=monokai,linenos=table,hl_lines=2 4"``. Defaults come from the
active PageConfig and per-call options override them.

Failures never break a build: a bad option, unknown language or cache
error is logged and the code is returned unchanged.

Usage:
    from pagelex.highlight import highlight

    html = highlight("print('hi')", "python", "linenos=inline")
"""

from __future__ import annotations

import codecs
from pathlib import Path

import pygments
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound, OptionError

from pagelex.config import get_page_config
from pagelex.errors import HighlightOptionError
from pagelex.utils.hashing import hash_parts
from pagelex.utils.logger import get_logger

logger = get_logger(__name__)

PYGMENTS_KEYWORDS = frozenset(
    {
        "style",
        "encoding",
        "noclasses",
        "hl_lines",
        "linenos",
        "classprefix",
        "startinline",
    }
)

_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})

# Table layout puts line numbers in their own cell before the code cell
_CODE_CELL = '<td class="code">'


def parse_options(options: dict[str, str], in_: str) -> None:
    """Merge a "key=value,..." option string into options.

    Raises:
        HighlightOptionError: Malformed pair, unknown key or unknown encoding
    """
    in_ = in_.strip(" ")
    if not in_:
        return
    for pair in in_.split(","):
        key_val = pair.split("=")
        key = key_val[0].strip(" ").lower()
        if len(key_val) != 2 or key not in PYGMENTS_KEYWORDS:
            raise HighlightOptionError(f"invalid Pygments option: {key}")
        value = key_val[1]
        if key == "encoding":
            try:
                codecs.lookup(value)
            except LookupError as e:
                raise HighlightOptionError(f"invalid Pygments encoding: {value}") from e
        options[key] = value


def create_options_string(options: dict[str, str]) -> str:
    """Canonical option string: keys sorted, so equal options hash equally."""
    return ",".join(f"{key}={options[key]}" for key in sorted(options))


def default_options() -> dict[str, str]:
    """Options from the active config."""
    config = get_page_config()
    options: dict[str, str] = {}
    parse_options(options, config.pygments_options)

    if config.pygments_style is not None:
        options["style"] = config.pygments_style
    if config.pygments_use_classes is not None:
        options["noclasses"] = "false" if config.pygments_use_classes else "true"
    options.setdefault("encoding", "utf8")
    return options


def parse_pygments_options(in_: str) -> dict[str, str]:
    """Config defaults overridden by a per-call option string."""
    options = default_options()
    parse_options(options, in_)
    return options


def _get_lexer(code: str, lang: str, options: dict[str, str]) -> Lexer:
    lexer_options = {}
    if "startinline" in options:
        lexer_options["startinline"] = options["startinline"]
    if lang:
        return get_lexer_by_name(lang, **lexer_options)
    return guess_lexer(code, **lexer_options)


def _formatter(options: dict[str, str]) -> HtmlFormatter:
    formatter_options: dict[str, object] = {}
    for key in ("style", "noclasses", "hl_lines", "classprefix", "encoding"):
        if key in options:
            formatter_options[key] = options[key]
    linenos = options.get("linenos", "")
    if linenos.lower() not in _FALSE_VALUES:
        formatter_options["linenos"] = "inline" if linenos == "inline" else "table"
    return HtmlFormatter(**formatter_options)


def _cache_file(code: str, lang: str, options_str: str) -> Path | None:
    cache_dir = get_page_config().cache_dir
    if not cache_dir:
        return None
    return Path(cache_dir) / f"pygments-{hash_parts(code, lang, options_str)}"


def _wrap_code_tag(out: str, lang: str) -> str:
    """Open a language-tagged <code> inside the <pre> holding the code."""
    open_at = out.find("<pre>", max(out.find(_CODE_CELL), 0))
    if open_at == -1:
        return out
    close_at = out.find("</pre>", open_at)
    if close_at == -1:
        return out
    code_tag = f'<pre><code class="language-{lang}" data-lang="{lang}">'
    return (
        out[:open_at]
        + code_tag
        + out[open_at + len("<pre>") : close_at]
        + "</code></pre>"
        + out[close_at + len("</pre>") :]
    )


def highlight(code: str, lang: str, opts: str = "") -> str:
    """Highlight code as HTML.

    Args:
        code: Source code
        lang: Pygments lexer name or alias; empty to guess from the code
        opts: Per-call option string

    Returns:
        Highlighted HTML, or the code unchanged when highlighting fails
    """
    try:
        options = parse_pygments_options(opts)
    except HighlightOptionError as e:
        logger.error("%s", e)
        return code

    options_str = create_options_string(options)
    cache_file = _cache_file(code, lang, options_str)
    if cache_file is not None:
        try:
            if cache_file.exists():
                return cache_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("reading highlight cache %s: %s", cache_file, e)
            return code

    try:
        lexer = _get_lexer(code, lang, options)
        formatter = _formatter(options)
    except ClassNotFound as e:
        logger.warning("highlighting %r: %s", lang or "<guessed>", e)
        return code
    except OptionError as e:
        logger.error("highlighting %r: %s", lang or "<guessed>", e)
        return code

    out = pygments.highlight(code, lexer, formatter)
    if isinstance(out, bytes):
        out = out.decode(options["encoding"])

    if lang:
        out = _wrap_code_tag(out, lang)

    if cache_file is not None:
        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            cache_file.write_text(out, encoding="utf-8")
        except OSError as e:
            logger.error("writing highlight cache %s: %s", cache_file, e)

    return out


def supports_language(lang: str) -> bool:
    """Check if Pygments has a lexer for the language name or alias."""
    try:
        get_lexer_by_name(lang)
    except ClassNotFound:
        return False
    return True
