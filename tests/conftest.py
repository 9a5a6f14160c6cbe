"""Shared fixtures for litdoc tests."""

import textwrap

import pytest

from litdoc.core import Litdoc
from litdoc.doclets import DocletParser


@pytest.fixture
def litdoc():
    """Litdoc with the default collaborators, highlighting off for stable output."""
    return Litdoc(highlight=False)


@pytest.fixture
def parse_js(litdoc):
    """Parse dedented JavaScript source with the ``litdoc`` fixture."""

    def _parse(source: str):
        return litdoc.parse(textwrap.dedent(source).lstrip("\n"))

    return _parse


@pytest.fixture
def doclet_parser():
    return DocletParser()


@pytest.fixture
def make_doclet(doclet_parser):
    """Build a Doclet from unwrapped comment text (no leading ``*``)."""

    def _make(text: str):
        return doclet_parser.parse(textwrap.dedent(text).strip("\n"), unwrap=False)

    return _make
