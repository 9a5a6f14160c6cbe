"""Splitting ``@examples`` and ``@benchmarks`` text into left/right pairs.

Both tags hold one pair per line::

    sum([1, 2, 3])  // => 6
    Lazy(array).map(fn) => lazy - Lazy.js

Lines before the first pair are setup code (the preamble). Lines that don't
form a pair after the first one are dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable

from .doclets import Doclet
from .models import (
    BenchmarkCase,
    BenchmarkCollection,
    BenchmarkInfo,
    ExampleCollection,
    ExampleInfo,
)

EXAMPLE_TAGS = ("examples", "example")
BENCHMARK_TAGS = ("benchmarks",)
DEFAULT_BENCHMARK_LABEL = "Ops/second"

# "// =>" splits at its first occurrence, so the right side may contain "//"
# (a URL, say). Without "=>" the last "//" splits, so the left side may.
_ARROW_COMMENT_PAIR_RE = re.compile(r"^\s*(.*?)\s*//\s*=>\s*(\S.*)$")
_COMMENT_PAIR_RE = re.compile(r"^\s*(.*)\s*//\s*(\S.*)$")
_ARROW_PAIR_RE = re.compile(r"^\s*(.*)\s*=>\s*(\S.*)$")


@dataclass
class PairInfo:
    left: str
    right: str
    line_number: int = 0


@dataclass
class CommentLines:
    """The lines of one tag, split into setup code and pairs."""

    content: str
    preamble: str
    pairs: list[PairInfo] = field(default_factory=list)


def parse_pair(line: str) -> PairInfo | None:
    """Parse ``left // => right`` (or ``left => right``) into a pair.

    The ``=>`` is optional after ``//`` as long as there is a left side.
    Both parts are trimmed. A line with nothing on the right is not a pair.

    >>> parse_pair(' bar(baz) //=> 10 ')
    PairInfo(left='bar(baz)', right='10', line_number=0)
    >>> parse_pair('// bar') is None
    True
    """
    if "//" in line:
        match = _ARROW_COMMENT_PAIR_RE.match(line)
        if match is None:
            match = _COMMENT_PAIR_RE.match(line)
            if match is None or not match.group(1).strip():
                return None
        left, right = match.groups()
        return PairInfo(left=left.strip(), right=right.strip())

    match = _ARROW_PAIR_RE.match(line)
    if not match:
        return None
    left, right = match.groups()
    return PairInfo(left=left.strip(), right=right.strip())


def parse_comment_lines(doclet: Doclet, tag_names: tuple[str, ...]) -> CommentLines:
    """Split the text of the first present tag in ``tag_names`` into pairs.

    A pair with an empty left side (``// => 5`` on its own line) takes the
    line above as its left side.
    """
    content = doclet.tag_description(*tag_names)
    lines = content.split("\n")
    preamble: list[str] = []
    pairs: list[PairInfo] = []

    for i, line in enumerate(lines):
        pair = parse_pair(line)

        if pair is None:
            if not pairs:
                preamble.append(line)
            continue

        if not pair.left:
            if pairs:
                pair.left = lines[i - 1].strip()
            elif preamble:
                pair.left = preamble.pop().strip()

        pair.line_number = i
        pairs.append(pair)

    return CommentLines(content=content, preamble="\n".join(preamble), pairs=pairs)


def divide(text: str, divider: str) -> tuple[str, str]:
    """Split ``text`` at the first ``divider``; the second part may be empty."""
    head, sep, tail = text.partition(divider)
    if not sep:
        return text, ""
    return head, tail


def escape_js_string(text: str) -> str:
    """Escape ``text`` for use inside a quoted JavaScript string literal."""
    return (
        text.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace('"', '\\"')
        .replace("\n", "\\n")
    )


def _identity(text: str) -> str:
    return text


def get_examples(
    doclet: Doclet,
    highlight: Callable[[str], str] = _identity,
    decorate: Callable[[ExampleInfo], ExampleInfo] | None = None,
) -> ExampleCollection:
    """Collect the examples of ``doclet``, numbered from 1.

    ``decorate`` gets each ExampleInfo before it is added to the list and
    returns the one to keep.
    """
    data = parse_comment_lines(doclet, EXAMPLE_TAGS)
    examples = []

    for example_id, pair in enumerate(data.pairs, start=1):
        example = ExampleInfo(
            id=example_id,
            line_number=pair.line_number,
            actual=pair.left,
            actual_escaped=escape_js_string(pair.left),
            expected=pair.right,
            expected_escaped=escape_js_string(pair.right),
        )
        if decorate is not None:
            example = decorate(example)
        examples.append(example)

    return ExampleCollection(
        code=data.content,
        highlighted_code=highlight(data.content) if data.content else "",
        setup=data.preamble,
        list=examples,
    )


def get_benchmarks(doclet: Doclet, highlight: Callable[[str], str] = _identity) -> BenchmarkCollection:
    """Collect the benchmarks of ``doclet``, grouped by name.

    Each case's label is its own: ``impl => group - Label`` labels only that
    case, the others in the group keep the default.
    """
    data = parse_comment_lines(doclet, BENCHMARK_TAGS)
    groups: dict[str, BenchmarkInfo] = {}

    for case_id, pair in enumerate(data.pairs, start=1):
        name, label = divide(pair.right, " - ")
        case = BenchmarkCase(
            case_id=case_id,
            impl=pair.left,
            name=name,
            label=label or DEFAULT_BENCHMARK_LABEL,
        )
        if name not in groups:
            groups[name] = BenchmarkInfo(id=len(groups) + 1, name=name)
        groups[name].cases.append(case)

    return BenchmarkCollection(
        code=data.content,
        highlighted_code=highlight(data.content) if data.content else "",
        setup=data.preamble,
        list=list(groups.values()),
    )
