"""litdoc - API docs and runnable examples from JavaScript doc comments.

    from litdoc import parse

    library = parse(open("lib/foo.js").read())
    for ns in library.namespaces:
        print(ns.namespace, [m.short_name for m in ns.all_members])
"""

from __future__ import annotations

from typing import Any

__version__ = "0.5.2"

from .core import Litdoc  # noqa: E402
from .errors import (  # noqa: E402
    CommentParseError,
    ConfigError,
    LitdocError,
    TemplateError,
    TypeExpressionError,
    TypeFormatError,
)
from .models import FunctionInfo, LibraryInfo, NamespaceInfo  # noqa: E402


def parse(code: str, **options: Any) -> LibraryInfo:
    """Parse JavaScript ``code`` with a one-off :class:`Litdoc`."""
    return Litdoc(**options).parse(code)


def generate(code: str, **options: Any) -> str:
    """Render HTML docs for JavaScript ``code`` with a one-off :class:`Litdoc`."""
    return Litdoc(**options).generate(code)


__all__ = [
    "CommentParseError",
    "ConfigError",
    "FunctionInfo",
    "LibraryInfo",
    "Litdoc",
    "LitdocError",
    "NamespaceInfo",
    "TemplateError",
    "TypeExpressionError",
    "TypeFormatError",
    "__version__",
    "generate",
    "parse",
]
