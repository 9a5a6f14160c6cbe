"""Type expressions found in doc-comment tags, their parser and formatter.

Type expressions use the Closure Compiler syntax JSDoc inherited, e.g.
``Array.<string>``, ``{a: number}``, ``function(string):boolean``,
``...*``, ``number=``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

from .errors import TypeExpressionError, TypeFormatError


class TypeExpression:
    """Base class for every parsed type expression."""


@dataclass(frozen=True)
class NameExpression(TypeExpression):
    name: str


@dataclass(frozen=True)
class AllLiteral(TypeExpression):
    pass


@dataclass(frozen=True)
class NullLiteral(TypeExpression):
    pass


@dataclass(frozen=True)
class UndefinedLiteral(TypeExpression):
    pass


@dataclass(frozen=True)
class UnknownLiteral(TypeExpression):
    """A bare ``?``."""


@dataclass(frozen=True)
class TypeApplication(TypeExpression):
    expression: TypeExpression
    applications: tuple[TypeExpression, ...]


@dataclass(frozen=True)
class FieldType:
    key: str
    value: TypeExpression | None = None


@dataclass(frozen=True)
class RecordType(TypeExpression):
    fields: tuple[FieldType, ...]


@dataclass(frozen=True)
class ArrayType(TypeExpression):
    elements: tuple[TypeExpression, ...]


@dataclass(frozen=True)
class OptionalType(TypeExpression):
    expression: TypeExpression


@dataclass(frozen=True)
class NullableType(TypeExpression):
    expression: TypeExpression


@dataclass(frozen=True)
class NonNullableType(TypeExpression):
    expression: TypeExpression


@dataclass(frozen=True)
class UnionType(TypeExpression):
    elements: tuple[TypeExpression, ...]


@dataclass(frozen=True)
class RestType(TypeExpression):
    expression: TypeExpression | None = None


@dataclass(frozen=True)
class FunctionType(TypeExpression):
    params: tuple[TypeExpression, ...]
    result: TypeExpression | None = None


_TOKEN_RE = re.compile(
    r"""
    (?P<punct>\.\.\.|\.<|[{}()\[\]<>|,:=?!*])
    |(?P<name>[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*)
    |(?P<literal>"[^"]*"|'[^']*'|-?\d+(?:\.\d+)?)
    """,
    re.VERBOSE,
)

# Tokens that may follow a bare '?' or '...'
_TERMINATORS = frozenset({",", ")", "}", "]", "|", "=", ">", None})


@dataclass(frozen=True)
class _Token:
    kind: str
    value: str
    pos: int


def _tokenize(text: str) -> Iterator[_Token]:
    pos = 0
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise TypeExpressionError(
                f"Unexpected character {text[pos]!r} in type {text!r}", text, pos
            )
        yield _Token(match.lastgroup or "", match.group(), pos)
        pos = match.end()


class _TypeParser:
    """Recursive-descent parser over the tokens of one type expression."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = list(_tokenize(text))
        self.index = 0

    def peek(self) -> str | None:
        if self.index < len(self.tokens):
            return self.tokens[self.index].value
        return None

    def next(self) -> _Token:
        if self.index >= len(self.tokens):
            raise TypeExpressionError(
                f"Unexpected end of type {self.text!r}", self.text, len(self.text)
            )
        token = self.tokens[self.index]
        self.index += 1
        return token

    def expect(self, value: str) -> None:
        token = self.next()
        if token.value != value:
            raise TypeExpressionError(
                f"Expected {value!r} but found {token.value!r} in type {self.text!r}",
                self.text,
                token.pos,
            )

    def accept(self, value: str) -> bool:
        if self.peek() == value:
            self.index += 1
            return True
        return False

    def parse(self) -> TypeExpression:
        result = self.parse_union()
        if self.index < len(self.tokens):
            token = self.tokens[self.index]
            raise TypeExpressionError(
                f"Unexpected {token.value!r} in type {self.text!r}",
                self.text,
                token.pos,
            )
        return result

    def parse_union(self) -> TypeExpression:
        elements = [self.parse_prefix()]
        while self.accept("|"):
            elements.append(self.parse_prefix())
        if len(elements) == 1:
            return elements[0]
        return UnionType(tuple(elements))

    def parse_prefix(self) -> TypeExpression:
        if self.accept("?"):
            if self.peek() in _TERMINATORS:
                return UnknownLiteral()
            return NullableType(self.parse_prefix())
        if self.accept("!"):
            return NonNullableType(self.parse_prefix())
        if self.accept("..."):
            if self.peek() in _TERMINATORS:
                return RestType()
            return RestType(self.parse_prefix())
        return self.parse_postfix(self.parse_primary())

    def parse_postfix(self, expr: TypeExpression) -> TypeExpression:
        while True:
            value = self.peek()
            if value == "[" and self._peek_at(1) == "]":
                self.index += 2
                expr = TypeApplication(NameExpression("Array"), (expr,))
            elif value == "=":
                self.index += 1
                expr = OptionalType(expr)
            elif value == "?" and self._peek_at(1) in _TERMINATORS:
                self.index += 1
                expr = NullableType(expr)
            elif value == "!":
                self.index += 1
                expr = NonNullableType(expr)
            else:
                return expr

    def _peek_at(self, offset: int) -> str | None:
        index = self.index + offset
        if index < len(self.tokens):
            return self.tokens[index].value
        return None

    def parse_primary(self) -> TypeExpression:
        token = self.next()

        if token.value == "*":
            return AllLiteral()

        if token.value == "(":
            inner = self.parse_union()
            self.expect(")")
            return inner

        if token.value == "{":
            return self.parse_record()

        if token.value == "[":
            elements = []
            if not self.accept("]"):
                elements.append(self.parse_union())
                while self.accept(","):
                    elements.append(self.parse_union())
                self.expect("]")
            return ArrayType(tuple(elements))

        if token.kind == "literal":
            return NameExpression(token.value)

        if token.kind != "name":
            raise TypeExpressionError(
                f"Unexpected {token.value!r} in type {self.text!r}",
                self.text,
                token.pos,
            )

        if token.value == "null":
            return NullLiteral()
        if token.value == "undefined":
            return UndefinedLiteral()
        if token.value == "function" and self.peek() == "(":
            return self.parse_function()

        expr: TypeExpression = NameExpression(token.value)
        if self.accept(".<") or self.accept("<"):
            applications = [self.parse_union()]
            while self.accept(","):
                applications.append(self.parse_union())
            self.expect(">")
            expr = TypeApplication(expr, tuple(applications))
        return expr

    def parse_record(self) -> RecordType:
        fields = []
        if self.accept("}"):
            return RecordType(())
        while True:
            key = self.next()
            if key.kind not in ("name", "literal"):
                raise TypeExpressionError(
                    f"Expected a record key but found {key.value!r} in type {self.text!r}",
                    self.text,
                    key.pos,
                )
            value = self.parse_union() if self.accept(":") else None
            fields.append(FieldType(key.value.strip("'\""), value))
            if not self.accept(","):
                break
        self.expect("}")
        return RecordType(tuple(fields))

    def parse_function(self) -> FunctionType:
        self.expect("(")
        params = []
        if not self.accept(")"):
            while True:
                # 'this:' and 'new:' describe the receiver, not a parameter
                if self.peek() in ("this", "new") and self._peek_at(1) == ":":
                    self.index += 2
                    self.parse_union()
                else:
                    params.append(self.parse_union())
                if not self.accept(","):
                    break
            self.expect(")")
        result = self.parse_union() if self.accept(":") else None
        return FunctionType(tuple(params), result)


def parse_type(text: str) -> TypeExpression:
    """Parse the text between a tag's braces into a TypeExpression.

    Raises:
        TypeExpressionError: If the text is not a valid type expression.
    """
    if not text.strip():
        raise TypeExpressionError("Empty type expression", text, 0)
    return _TypeParser(text).parse()


def format_type(type_expr: TypeExpression | None) -> str:
    """Produce the display string for a type expression.

    A missing type formats as ``*``. Any object that is not one of the known
    variants raises TypeFormatError.
    """
    if type_expr is None:
        return "*"

    if isinstance(type_expr, NameExpression):
        return type_expr.name
    if isinstance(type_expr, AllLiteral):
        return "*"
    if isinstance(type_expr, NullLiteral):
        return "null"
    if isinstance(type_expr, UndefinedLiteral):
        return "undefined"
    if isinstance(type_expr, UnknownLiteral):
        return "?"
    if isinstance(type_expr, TypeApplication):
        applications = "|".join(format_type(t) for t in type_expr.applications)
        return f"{format_type(type_expr.expression)}.<{applications}>"
    if isinstance(type_expr, RecordType):
        fields = ", ".join(
            f"{f.key}:{format_type(f.value)}" if f.value is not None else f.key
            for f in type_expr.fields
        )
        return "{" + fields + "}"
    if isinstance(type_expr, ArrayType):
        return "[" + ", ".join(format_type(t) for t in type_expr.elements) + "]"
    if isinstance(type_expr, OptionalType):
        return format_type(type_expr.expression) + "?"
    if isinstance(type_expr, NullableType):
        return "?" + format_type(type_expr.expression)
    if isinstance(type_expr, NonNullableType):
        return "!" + format_type(type_expr.expression)
    if isinstance(type_expr, UnionType):
        return "|".join(format_type(t) for t in type_expr.elements)
    if isinstance(type_expr, RestType):
        if type_expr.expression is None:
            return "..."
        return "..." + format_type(type_expr.expression)
    if isinstance(type_expr, FunctionType):
        params = ", ".join(format_type(t) for t in type_expr.params)
        return f"function({params}):{format_type(type_expr.result)}"

    raise TypeFormatError(type_expr)
