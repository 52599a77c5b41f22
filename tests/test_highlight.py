"""Tests for Pygments highlighting and its disk cache."""

import logging
from pathlib import Path

import pytest

from pagelex.config import PageConfig, page_config_context
from pagelex.errors import HighlightOptionError
from pagelex.highlight import (
    create_options_string,
    default_options,
    highlight,
    parse_options,
    parse_pygments_options,
    supports_language,
)

CODE = "def f():\n    return 1\n"


class TestOptions:
    """Option string parsing and canonical form."""

    def test_parse(self) -> None:
        options: dict[str, str] = {}
        parse_options(options, " style=monokai, LINENOS=table ")

        assert options == {"style": "monokai", "linenos": "table"}

    def test_empty(self) -> None:
        options: dict[str, str] = {}
        parse_options(options, "  ")

        assert options == {}

    @pytest.mark.parametrize("opts", ["bogus=1", "style", "style=a=b"])
    def test_invalid(self, opts: str) -> None:
        with pytest.raises(HighlightOptionError, match="invalid Pygments option"):
            parse_options({}, opts)

    def test_unknown_encoding(self) -> None:
        with pytest.raises(HighlightOptionError, match="invalid Pygments encoding: bogus"):
            parse_options({}, "encoding=bogus")

    def test_known_encoding_alias(self) -> None:
        options: dict[str, str] = {}
        parse_options(options, "encoding=latin-1")

        assert options == {"encoding": "latin-1"}

    def test_canonical_string_is_sorted(self) -> None:
        assert create_options_string({"style": "x", "encoding": "utf8", "linenos": "1"}) == (
            "encoding=utf8,linenos=1,style=x"
        )

    def test_defaults(self) -> None:
        assert default_options() == {"encoding": "utf8"}

    def test_defaults_from_config(self) -> None:
        config = PageConfig(
            pygments_options="linenos=inline",
            pygments_style="monokai",
            pygments_use_classes=False,
        )
        with page_config_context(config):
            assert default_options() == {
                "linenos": "inline",
                "style": "monokai",
                "noclasses": "true",
                "encoding": "utf8",
            }

    def test_call_options_override_defaults(self) -> None:
        with page_config_context(PageConfig(pygments_style="monokai")):
            assert parse_pygments_options("style=emacs")["style"] == "emacs"


class TestHighlight:
    """Rendering and failure fallbacks."""

    def test_injects_code_tag(self) -> None:
        out = highlight(CODE, "python")

        assert '<pre><code class="language-python" data-lang="python">' in out
        assert "</code></pre>" in out
        assert "highlight" in out

    def test_guesses_without_language(self) -> None:
        out = highlight("#!/usr/bin/env python\nprint(1)\n", "")

        assert "<pre>" in out
        assert "language-" not in out

    def test_unknown_language_returns_code(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="pagelex"):
            assert highlight(CODE, "no-such-language") == CODE
        assert "no-such-language" in caplog.text

    def test_invalid_option_returns_code(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="pagelex"):
            assert highlight(CODE, "python", "bogus=1") == CODE
        assert "invalid Pygments option: bogus" in caplog.text

    def test_unknown_encoding_returns_code(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="pagelex"):
            assert highlight(CODE, "python", "encoding=bogus") == CODE
        assert "invalid Pygments encoding: bogus" in caplog.text

    def test_unknown_encoding_in_config_returns_code(self) -> None:
        with page_config_context(PageConfig(pygments_options="encoding=bogus")):
            assert highlight(CODE, "python") == CODE

    def test_bad_boolean_option_returns_code(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="pagelex"):
            assert highlight(CODE, "python", "noclasses=maybe") == CODE
        assert "noclasses" in caplog.text

    def test_invalid_config_options_return_code(self) -> None:
        with page_config_context(PageConfig(pygments_options="nope")):
            assert highlight(CODE, "python") == CODE

    def test_unknown_style_returns_code(self) -> None:
        assert highlight(CODE, "python", "style=no-such-style") == CODE

    def test_line_numbers(self) -> None:
        plain = highlight(CODE, "python")
        numbered = highlight(CODE, "python", "linenos=table")

        assert numbered != plain
        assert highlight(CODE, "python", "linenos=false") == plain

    def test_table_line_numbers_tag_the_code_cell(self) -> None:
        out = highlight(CODE, "python", "linenos=table")
        code_cell = out.index('<td class="code">')

        assert out.count('<code class="language-python"') == 1
        assert out.index('<code class="language-python"') > code_cell
        assert "<code" not in out[:code_cell]
        assert out.count("</code></pre>") == 1
        assert out.index("</code></pre>") > code_cell


class TestCache:
    """Disk cache keyed by code, language and options."""

    def test_writes_and_reads_cache(self, tmp_path: Path) -> None:
        with page_config_context(PageConfig(cache_dir=str(tmp_path))):
            out = highlight(CODE, "python")
            files = list(tmp_path.glob("pygments-*"))

            assert len(files) == 1
            assert files[0].read_text(encoding="utf-8") == out

            files[0].write_text("cached!", encoding="utf-8")
            assert highlight(CODE, "python") == "cached!"

    def test_options_change_the_key(self, tmp_path: Path) -> None:
        with page_config_context(PageConfig(cache_dir=str(tmp_path))):
            highlight(CODE, "python")
            highlight(CODE, "python", "linenos=table")
            highlight(CODE, "pycon")

        assert len(list(tmp_path.glob("pygments-*"))) == 3

    def test_creates_cache_dir(self, tmp_path: Path) -> None:
        cache_dir = tmp_path / "nested" / "cache"
        with page_config_context(PageConfig(cache_dir=str(cache_dir))):
            highlight(CODE, "python")

        assert cache_dir.is_dir()

    def test_no_cache_without_cache_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        highlight(CODE, "python")

        assert list(tmp_path.iterdir()) == []


class TestSupportsLanguage:
    def test_known(self) -> None:
        assert supports_language("python")
        assert supports_language("py")

    def test_unknown(self) -> None:
        assert not supports_language("no-such-language")
