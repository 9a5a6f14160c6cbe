"""Exceptions raised by litdoc."""

from __future__ import annotations

from typing import Any


class LitdocError(Exception):
    """Base exception for litdoc operations."""


class TypeFormatError(LitdocError):
    """Raised when a type expression has a shape the formatter cannot render.

    This aborts the parse of the whole source file; the offending expression
    is kept on ``type_expr`` for diagnosis.
    """

    def __init__(self, type_expr: Any):
        super().__init__(
            f"Unable to format type {type(type_expr).__name__}: {type_expr!r}"
        )
        self.type_expr = type_expr


class TypeExpressionError(LitdocError):
    """Raised when the text inside a tag's ``{...}`` is not a valid type."""

    def __init__(self, message: str, text: str, position: int | None = None):
        super().__init__(message)
        self.text = text
        self.position = position


class CommentParseError(LitdocError):
    """Raised by a comment parser when a comment is not a doc comment."""


class ConfigError(LitdocError):
    """Raised when configuration or options are invalid."""


class TemplateError(LitdocError):
    """Raised when a template or template partial cannot be resolved."""
