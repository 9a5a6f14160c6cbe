"""
Tests for type expression parsing and formatting.
"""

import pytest

from litdoc.errors import TypeExpressionError, TypeFormatError
from litdoc.typeexpr import (
    AllLiteral,
    FieldType,
    FunctionType,
    NameExpression,
    OptionalType,
    RecordType,
    RestType,
    TypeApplication,
    TypeExpression,
    UnionType,
    format_type,
    parse_type,
)


class TestFormatType:
    """Formatting each kind of type expression."""

    def test_name(self):
        assert format_type(NameExpression("number")) == "number"

    def test_all_type(self):
        assert format_type(AllLiteral()) == "*"

    def test_missing_type_is_wildcard(self):
        assert format_type(None) == "*"

    def test_application_joins_with_pipes(self):
        expr = TypeApplication(
            NameExpression("Object"), (NameExpression("string"), NameExpression("number"))
        )
        assert format_type(expr) == "Object.<string|number>"

    def test_record_is_closed(self):
        expr = RecordType(
            (FieldType("x", NameExpression("number")), FieldType("y", NameExpression("string")))
        )
        assert format_type(expr) == "{x:number, y:string}"

    def test_optional(self):
        assert format_type(OptionalType(NameExpression("string"))) == "string?"

    def test_union(self):
        expr = UnionType((NameExpression("string"), NameExpression("Array")))
        assert format_type(expr) == "string|Array"

    def test_rest(self):
        assert format_type(RestType(NameExpression("number"))) == "...number"

    def test_function(self):
        expr = FunctionType((NameExpression("number"), NameExpression("string")), NameExpression("boolean"))
        assert format_type(expr) == "function(number, string):boolean"

    def test_function_without_result(self):
        assert format_type(FunctionType((), None)) == "function():*"

    def test_formatting_is_repeatable(self):
        expr = parse_type("function(Array.<{a: number}>, ...string):?Object")
        assert format_type(expr) == format_type(expr)


class TestUnknownTypes:
    """Unrecognized shapes are fatal."""

    def test_foreign_object_raises(self):
        with pytest.raises(TypeFormatError, match="Unable to format type"):
            format_type(object())

    def test_unknown_subclass_raises_with_expression(self):
        class Weird(TypeExpression):
            pass

        weird = Weird()
        with pytest.raises(TypeFormatError) as exc_info:
            format_type(UnionType((NameExpression("a"), weird)))
        assert exc_info.value.type_expr is weird


class TestParseType:
    """Round trips through the type parser."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("number", "number"),
            ("*", "*"),
            ("Array.<string>", "Array.<string>"),
            ("Array<string>", "Array.<string>"),
            ("string[]", "Array.<string>"),
            ("{a: number, b}", "{a:number, b}"),
            ("string=", "string?"),
            ("(string|number)", "string|number"),
            ("...number", "...number"),
            ("?string", "?string"),
            ("!Object", "!Object"),
            ("function(number, string):boolean", "function(number, string):boolean"),
            ("function(this:Foo, number)", "function(number):*"),
            ("Lazy.Sequence", "Lazy.Sequence"),
            ("null", "null"),
        ],
    )
    def test_parse_and_format(self, text, expected):
        assert format_type(parse_type(text)) == expected

    def test_nested_application(self):
        expr = parse_type("Object.<string, Array.<number>>")
        assert expr == TypeApplication(
            NameExpression("Object"),
            (NameExpression("string"), TypeApplication(NameExpression("Array"), (NameExpression("number"),))),
        )

    def test_empty_rejected(self):
        with pytest.raises(TypeExpressionError, match="Empty"):
            parse_type("  ")

    def test_unclosed_application_rejected(self):
        with pytest.raises(TypeExpressionError, match="Unexpected end"):
            parse_type("Array.<string")

    def test_trailing_garbage_rejected(self):
        with pytest.raises(TypeExpressionError) as exc_info:
            parse_type("string number")
        assert exc_info.value.position == 7

    def test_bad_character_rejected(self):
        with pytest.raises(TypeExpressionError, match="Unexpected character"):
            parse_type("string#")
