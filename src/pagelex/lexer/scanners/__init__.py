"""State-function scanners for the pagelex lexer.

Each scanner is a mixin holding the state functions for one section
of a content file (INTRO front matter detection, MAIN body).
"""

from __future__ import annotations

from pagelex.lexer.scanners.intro import IntroScannerMixin
from pagelex.lexer.scanners.main import MainScannerMixin

__all__ = [
    "IntroScannerMixin",
    "MainScannerMixin",
]
