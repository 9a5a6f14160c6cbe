"""Markdown rendering, internal links and code highlighting."""

from __future__ import annotations

import html
import re
from typing import Protocol

import markdown
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import JavascriptLexer

_LINK_RE = re.compile(r"\{@link ([^}]*)\}")


class MarkdownParser(Protocol):
    """Renders Markdown text to HTML."""

    def parse(self, text: str) -> str: ...


class Highlighter(Protocol):
    """Renders source code as highlighted HTML (without a wrapping element)."""

    def highlight(self, code: str) -> str: ...


class MarkdownRenderer:
    """Markdown renderer using Python-Markdown with fenced code and tables."""

    def __init__(self, extensions: list[str] | None = None):
        if extensions is None:
            extensions = ["fenced_code", "tables", "codehilite"]
        self._md = markdown.Markdown(extensions=extensions)

    def parse(self, text: str) -> str:
        return self._md.reset().convert(text)


class PygmentsHighlighter:
    """Highlights JavaScript with Pygments."""

    def __init__(self) -> None:
        self._lexer = JavascriptLexer()
        self._formatter = HtmlFormatter(nowrap=True)

    def highlight(self, code: str) -> str:
        return pygments_highlight(code, self._lexer, self._formatter).rstrip("\n")


def to_identifier(name: str) -> str:
    """Make a qualified name safe to use as a DOM id: ``Foo.Bar#baz`` -> ``Foo-Bar-baz``."""
    return re.sub(r"[.#]", "-", name)


def process_internal_links(text: str) -> str:
    """Replace ``{@link Name}`` references with anchors to the named member.

    >>> process_internal_links('{@link MyClass}')
    '<a href="#MyClass">MyClass</a>'
    """
    return _LINK_RE.sub(
        lambda m: f'<a href="#{to_identifier(m.group(1))}">{m.group(1)}</a>', text
    )


def highlight_code(code: str, highlighter: Highlighter | None = None) -> str:
    """Highlight ``code`` and wrap each line in a numbered span."""
    if highlighter is not None:
        highlighted = highlighter.highlight(code)
    else:
        highlighted = html.escape(code)

    return "\n".join(
        f'<span class="line" data-line-no="{i}">{line}</span>'
        for i, line in enumerate(highlighted.split("\n"))
    )
