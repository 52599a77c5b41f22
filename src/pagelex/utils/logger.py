"""Logger namespacing for pagelex.

Every module logs under the ``pagelex`` hierarchy, so an application can
tune the whole library (or one part, e.g. ``pagelex.highlight``) with a
single ``logging.getLogger(...).setLevel(...)`` call. Handlers are left to
the application.

Example:
    >>> import logging
    >>> logging.getLogger("pagelex.page").setLevel(logging.ERROR)  # hide front matter fallbacks
"""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "pagelex"


def get_logger(name: str) -> logging.Logger:
    """Logger for a pagelex module, placed under the ``pagelex`` hierarchy.

    Module ``__name__`` values are already inside it and pass through; any
    other name is nested below the root.

    Example:
        >>> get_logger("pagelex.lexer.core").name
        'pagelex.lexer.core'
        >>> get_logger("site_build").name
        'pagelex.site_build'
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
