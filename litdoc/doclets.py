"""Doc-comment parsing: turning ``/** ... */`` bodies into doclets."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

from .errors import CommentParseError, TypeExpressionError
from .syntax import CommentKind, SourceComment
from .typeexpr import TypeExpression, parse_type

log = logging.getLogger(__name__)

# Tags whose body may start with a {type}
TYPED_TAGS = frozenset(
    {
        "param",
        "arg",
        "argument",
        "property",
        "prop",
        "returns",
        "return",
        "type",
        "typedef",
        "throws",
        "exception",
        "enum",
        "define",
        "this",
    }
)

# Tags whose body names something after the optional {type}
NAMED_TAGS = frozenset({"param", "arg", "argument", "property", "prop", "typedef", "callback"})

_TAG_SPLIT_RE = re.compile(r"^[ \t]*@(?=\w)", re.MULTILINE)
_TITLE_RE = re.compile(r"(\w+)")


@dataclass
class Tag:
    """A single ``@title ...`` annotation."""

    title: str
    description: str | None = None
    name: str | None = None
    type: TypeExpression | None = None
    default: str | None = None
    optional: bool = False


@dataclass
class Doclet:
    """The parsed form of a doc comment."""

    description: str = ""
    tags: list[Tag] = field(default_factory=list)

    def has_tag(self, *titles: str) -> bool:
        return any(tag.title in titles for tag in self.tags)

    def find_tag(self, *titles: str) -> Tag | None:
        """Return the first tag with the first of ``titles`` that is present."""
        for title in titles:
            for tag in self.tags:
                if tag.title == title:
                    return tag
        return None

    def tags_titled(self, *titles: str) -> list[Tag]:
        return [tag for tag in self.tags if tag.title in titles]

    def tag_description(self, *titles: str) -> str:
        tag = self.find_tag(*titles)
        if tag is None:
            return ""
        return tag.description or ""

    @property
    def titles(self) -> list[str]:
        return [tag.title for tag in self.tags]


class CommentParser(Protocol):
    """Parses the body of a doc comment.

    Implementations raise CommentParseError for text that is not a doc
    comment.
    """

    def parse(self, text: str, unwrap: bool = True) -> Doclet: ...


def unwrap_comment(text: str) -> str:
    """Strip comment delimiters and the leading ``*`` of each line."""
    text = re.sub(r"^\s*/?\*+", "", text, count=1)
    text = re.sub(r"\*+/\s*$", "", text, count=1)
    lines = text.split("\n")
    return "\n".join(re.sub(r"^\s*(?:\*(?!\*)\s?)?", "", line, count=1) for line in lines)


def _take_braced(body: str) -> tuple[str, str] | None:
    """Split ``{type} rest`` into the text between the braces and the rest."""
    if not body.startswith("{"):
        return None
    depth = 0
    for i, c in enumerate(body):
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return body[1:i], body[i + 1 :]
    return None


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


class DocletParser:
    """Default comment parser for JSDoc-style comments.

    In lenient mode (the default) a tag whose ``{type}`` cannot be parsed is
    dropped with a warning; in strict mode the whole comment is rejected.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def parse(self, text: str, unwrap: bool = True) -> Doclet:
        if unwrap:
            text = unwrap_comment(text)

        chunks = _TAG_SPLIT_RE.split(text)
        doclet = Doclet(description=chunks[0].strip())

        for chunk in chunks[1:]:
            try:
                doclet.tags.append(self._parse_tag(chunk))
            except TypeExpressionError as e:
                if self.strict:
                    raise CommentParseError(f"Invalid tag @{chunk.split()[0]}: {e}") from e
                log.warning("Dropping tag @%s: %s", chunk.split()[0], e)

        return doclet

    def _parse_tag(self, chunk: str) -> Tag:
        match = _TITLE_RE.match(chunk)
        title = match.group(1)
        body = chunk[match.end() :]
        tag = Tag(title=title)

        if title in TYPED_TAGS:
            braced = _take_braced(body.lstrip())
            if braced is not None:
                type_text, body = braced
                tag.type = parse_type(type_text)

        if title in NAMED_TAGS:
            body = self._parse_name(tag, body)

        if title == "name":
            value = _strip_quotes(body.strip())
            tag.name = value or None
            tag.description = value or None
            return tag

        description = body.strip()
        tag.description = description or None
        return tag

    def _parse_name(self, tag: Tag, body: str) -> str:
        body = body.lstrip()
        if body.startswith("["):
            end = body.find("]")
            if end == -1:
                raise TypeExpressionError(f"Unclosed optional name in @{tag.title}", body)
            inner = body[1:end].strip()
            name, _, default = inner.partition("=")
            tag.name = name.strip()
            tag.default = default.strip() or None
            tag.optional = True
            return body[end + 1 :]

        match = re.match(r"(\S+)", body)
        if not match:
            return body
        tag.name = match.group(1)
        rest = body[match.end() :]
        # "@param name - description" style
        return re.sub(r"^\s*-\s", " ", rest, count=1)


def parse_comment(comment: SourceComment, parser: CommentParser) -> Doclet | None:
    """Parse a source comment into a doclet, or None if it isn't a doc comment."""
    if comment.kind != CommentKind.BLOCK or not comment.value.startswith("*"):
        return None

    value = re.sub(r"^\s*/\*|\*/\s*$", "", comment.value)
    try:
        return parser.parse(value, unwrap=True)
    except CommentParseError as e:
        log.debug("Skipping comment ending on line %d: %s", comment.end_line, e)
        return None
