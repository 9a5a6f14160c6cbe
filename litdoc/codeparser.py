"""JavaScript code parser backed by tree-sitter.

tree-sitter produces a concrete syntax tree; this module converts the parts
of it litdoc cares about into :class:`~litdoc.syntax.Node` records and
collects every comment with its line span.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Callable, Protocol

import tree_sitter_javascript
from tree_sitter import Language, Parser

from .syntax import CommentKind, Node, NodeType, ParsedSource, SourceComment

log = logging.getLogger(__name__)

JS_LANGUAGE = Language(tree_sitter_javascript.language())


class CodeParser(Protocol):
    """Turns source text into a :class:`ParsedSource`."""

    def parse(self, code: str) -> ParsedSource: ...


# A handler returns a Node (or None), or is a generator that yields the
# tree-sitter children it needs, is sent each converted child back and returns
# its Node. _Converter.convert runs these generators from an explicit stack, so
# nesting depth in the source is not bounded by the recursion limit.
Conversion = Generator[object, "Node | None", "Node | None"]


class _Converter:
    """Converts one tree-sitter tree into litdoc nodes."""

    def __init__(self, source: bytes):
        self.source = source
        self.handlers: dict[str, Callable[[object], Node | Conversion | None]] = {
            "program": self.program,
            "statement_block": self.block,
            "expression_statement": self.expression_statement,
            "function_declaration": self.function_declaration,
            "generator_function_declaration": self.function_declaration,
            "function": self.function_expression,
            "function_expression": self.function_expression,
            "generator_function": self.function_expression,
            "arrow_function": self.function_expression,
            "class_declaration": self.class_,
            "class": self.class_,
            "method_definition": self.method_definition,
            "variable_declaration": self.variable_declaration,
            "lexical_declaration": self.variable_declaration,
            "variable_declarator": self.variable_declarator,
            "assignment_expression": self.assignment,
            "augmented_assignment_expression": self.assignment,
            "call_expression": self.call,
            "new_expression": self.new_expression,
            "member_expression": self.member,
            "subscript_expression": self.subscript,
            "parenthesized_expression": self.unwrap,
            "export_statement": self.export,
            "object": self.object_literal,
            "pair": self.pair,
            "shorthand_property_identifier": self.shorthand_property,
            "array": self.array,
            "sequence_expression": self.sequence,
            "if_statement": self.if_statement,
            "else_clause": self.unwrap,
            "ternary_expression": self.conditional,
            "for_statement": self.loop,
            "for_in_statement": self.loop,
            "while_statement": self.loop,
            "do_statement": self.loop,
            "labeled_statement": self.labeled,
            "with_statement": self.with_statement,
            "switch_statement": self.switch,
            "switch_case": self.switch_case,
            "switch_default": self.switch_case,
            "try_statement": self.try_statement,
            "unary_expression": self.unary,
            "binary_expression": self.binary,
            "identifier": self.identifier,
            "property_identifier": self.identifier,
            "private_property_identifier": self.identifier,
            "statement_identifier": self.identifier,
            "this": self.this_expression,
            "string": self.literal,
            "number": self.literal,
            "true": self.literal,
            "false": self.literal,
            "null": self.literal,
            "undefined": self.literal,
            "regex": self.literal,
            "template_string": self.literal,
        }

    def text(self, ts_node) -> str:
        return self.source[ts_node.start_byte : ts_node.end_byte].decode("utf-8", errors="replace")

    def make(self, node_type: NodeType, ts_node, **slots) -> Node:
        return Node(
            type=node_type,
            line=ts_node.start_point[0] + 1,
            start=ts_node.start_byte,
            end=ts_node.end_byte,
            **slots,
        )

    def dispatch(self, ts_node) -> Node | Conversion | None:
        if ts_node is None or ts_node.type == "comment":
            return None
        handler = self.handlers.get(ts_node.type)
        if handler is None:
            return self.make(NodeType.OTHER, ts_node)
        return handler(ts_node)

    def convert(self, ts_node) -> Node | None:
        stack: list[Conversion] = []
        pending = self.dispatch(ts_node)
        while True:
            if isinstance(pending, Generator):
                stack.append(pending)
                value = None
            elif not stack:
                return pending
            else:
                value = pending

            try:
                child = stack[-1].send(value)
            except StopIteration as done:
                stack.pop()
                pending = done.value
                continue
            pending = self.dispatch(child)

    def convert_all(self, ts_nodes) -> Conversion:
        nodes = []
        for child in ts_nodes:
            node = yield child
            if node is not None:
                nodes.append(node)
        return nodes

    def named_children(self, ts_node) -> list:
        return [c for c in ts_node.named_children if c.type != "comment"]

    def field(self, ts_node, name: str) -> Conversion:
        return (yield ts_node.child_by_field_name(name))

    # Statements

    def program(self, ts_node) -> Conversion:
        body = yield from self.convert_all(self.named_children(ts_node))
        return self.make(NodeType.PROGRAM, ts_node, body=body)

    def block(self, ts_node) -> Conversion:
        body = yield from self.convert_all(self.named_children(ts_node))
        return self.make(NodeType.BLOCK_STATEMENT, ts_node, body=body)

    def expression_statement(self, ts_node) -> Conversion:
        children = self.named_children(ts_node)
        expression = (yield children[0]) if children else None
        return self.make(NodeType.EXPRESSION_STATEMENT, ts_node, expression=expression)

    def variable_declaration(self, ts_node) -> Conversion:
        declarators = [c for c in ts_node.named_children if c.type == "variable_declarator"]
        body = yield from self.convert_all(declarators)
        return self.make(NodeType.VARIABLE_DECLARATION, ts_node, body=body)

    def variable_declarator(self, ts_node) -> Conversion:
        name = yield from self.field(ts_node, "name")
        init = yield from self.field(ts_node, "value")
        return self.make(NodeType.VARIABLE_DECLARATOR, ts_node, id=name, init=init)

    def if_statement(self, ts_node) -> Conversion:
        consequent = yield from self.field(ts_node, "consequence")
        alternate = yield from self.field(ts_node, "alternative")
        return self.make(NodeType.IF_STATEMENT, ts_node, consequent=consequent, alternate=alternate)

    def _single_body(self, node_type: NodeType, ts_node) -> Conversion:
        body = yield from self.field(ts_node, "body")
        return self.make(node_type, ts_node, body=[body] if body else [])

    def loop(self, ts_node) -> Conversion:
        return (yield from self._single_body(NodeType.LOOP_STATEMENT, ts_node))

    def labeled(self, ts_node) -> Conversion:
        return (yield from self._single_body(NodeType.LABELED_STATEMENT, ts_node))

    def with_statement(self, ts_node) -> Conversion:
        return (yield from self._single_body(NodeType.WITH_STATEMENT, ts_node))

    def switch(self, ts_node) -> Conversion:
        switch_body = ts_node.child_by_field_name("body")
        cases = self.named_children(switch_body) if switch_body is not None else []
        body = yield from self.convert_all(cases)
        return self.make(NodeType.SWITCH_STATEMENT, ts_node, body=body)

    def switch_case(self, ts_node) -> Conversion:
        body = yield from self.convert_all(ts_node.children_by_field_name("body"))
        return self.make(NodeType.SWITCH_CASE, ts_node, body=body)

    def try_statement(self, ts_node) -> Conversion:
        blocks = [ts_node.child_by_field_name("body")]
        for clause_field in ("handler", "finalizer"):
            clause = ts_node.child_by_field_name(clause_field)
            if clause is not None:
                blocks.append(clause.child_by_field_name("body"))
        body = yield from self.convert_all(blocks)
        return self.make(NodeType.TRY_STATEMENT, ts_node, body=body)

    def export(self, ts_node) -> Conversion:
        declaration = ts_node.child_by_field_name("declaration")
        if declaration is None:
            declaration = ts_node.child_by_field_name("value")
        if declaration is None:
            return self.make(NodeType.OTHER, ts_node)
        return (yield declaration)

    # Functions and classes

    def function_declaration(self, ts_node) -> Conversion:
        name = yield from self.field(ts_node, "name")
        body = yield from self.field(ts_node, "body")
        return self.make(NodeType.FUNCTION_DECLARATION, ts_node, id=name, body=[body] if body else [])

    def function_expression(self, ts_node) -> Conversion:
        name = yield from self.field(ts_node, "name")
        body = yield from self.field(ts_node, "body")
        return self.make(NodeType.FUNCTION_EXPRESSION, ts_node, id=name, body=[body] if body else [])

    def class_(self, ts_node) -> Conversion:
        class_body = ts_node.child_by_field_name("body")
        members = []
        if class_body is not None:
            members = [c for c in class_body.named_children if c.type == "method_definition"]
        name = yield from self.field(ts_node, "name")
        body = yield from self.convert_all(members)
        return self.make(NodeType.CLASS, ts_node, id=name, body=body)

    def method_definition(self, ts_node) -> Conversion:
        # The method's function starts where the method does, so a doc
        # comment right above it lands on the same line.
        body = yield from self.field(ts_node, "body")
        key = yield from self.field(ts_node, "name")
        function = self.make(NodeType.FUNCTION_EXPRESSION, ts_node, body=[body] if body else [])
        node_type = NodeType.METHOD_DEFINITION
        if ts_node.parent is not None and ts_node.parent.type == "object":
            node_type = NodeType.PROPERTY
        return self.make(
            node_type,
            ts_node,
            key=key,
            value=function,
            static=any(c.type == "static" for c in ts_node.children),
        )

    # Expressions

    def assignment(self, ts_node) -> Conversion:
        left = yield from self.field(ts_node, "left")
        right = yield from self.field(ts_node, "right")
        return self.make(NodeType.ASSIGNMENT_EXPRESSION, ts_node, left=left, right=right)

    def _arguments(self, ts_node) -> Conversion:
        arguments = ts_node.child_by_field_name("arguments")
        if arguments is None or arguments.type != "arguments":
            return []
        return (yield from self.convert_all(self.named_children(arguments)))

    def call(self, ts_node) -> Conversion:
        callee = yield from self.field(ts_node, "function")
        arguments = yield from self._arguments(ts_node)
        return self.make(NodeType.CALL_EXPRESSION, ts_node, callee=callee, arguments=arguments)

    def new_expression(self, ts_node) -> Conversion:
        callee = yield from self.field(ts_node, "constructor")
        arguments = yield from self._arguments(ts_node)
        return self.make(NodeType.NEW_EXPRESSION, ts_node, callee=callee, arguments=arguments)

    def member(self, ts_node) -> Conversion:
        obj = yield from self.field(ts_node, "object")
        prop = yield from self.field(ts_node, "property")
        return self.make(NodeType.MEMBER_EXPRESSION, ts_node, object=obj, property=prop)

    def subscript(self, ts_node) -> Conversion:
        obj = yield from self.field(ts_node, "object")
        index = yield from self.field(ts_node, "index")
        return self.make(NodeType.MEMBER_EXPRESSION, ts_node, object=obj, property=index, computed=True)

    def unwrap(self, ts_node) -> Conversion:
        children = self.named_children(ts_node)
        if not children:
            return self.make(NodeType.OTHER, ts_node)
        return (yield children[0])

    def object_literal(self, ts_node) -> Conversion:
        elements = yield from self.convert_all(self.named_children(ts_node))
        return self.make(NodeType.OBJECT_EXPRESSION, ts_node, elements=elements)

    def pair(self, ts_node) -> Conversion:
        key = ts_node.child_by_field_name("key")
        if key is not None and key.type == "computed_property_name":
            key_node = yield from self.unwrap(key)
        else:
            key_node = yield key
        value = yield from self.field(ts_node, "value")
        return self.make(NodeType.PROPERTY, ts_node, key=key_node, value=value)

    def shorthand_property(self, ts_node) -> Node:
        key = self.identifier(ts_node)
        value = self.identifier(ts_node)
        return self.make(NodeType.PROPERTY, ts_node, key=key, value=value)

    def array(self, ts_node) -> Conversion:
        elements = yield from self.convert_all(self.named_children(ts_node))
        return self.make(NodeType.ARRAY_EXPRESSION, ts_node, elements=elements)

    def sequence(self, ts_node) -> Conversion:
        elements: list[Node] = []
        for child in self.named_children(ts_node):
            converted = yield child
            if converted is None:
                continue
            if converted.type == NodeType.SEQUENCE_EXPRESSION:
                elements.extend(converted.elements)
            else:
                elements.append(converted)
        return self.make(NodeType.SEQUENCE_EXPRESSION, ts_node, elements=elements)

    def conditional(self, ts_node) -> Conversion:
        consequent = yield from self.field(ts_node, "consequence")
        alternate = yield from self.field(ts_node, "alternative")
        return self.make(
            NodeType.CONDITIONAL_EXPRESSION, ts_node, consequent=consequent, alternate=alternate
        )

    def unary(self, ts_node) -> Conversion:
        argument = yield from self.field(ts_node, "argument")
        return self.make(NodeType.UNARY_EXPRESSION, ts_node, expression=argument)

    def binary(self, ts_node) -> Conversion:
        left = yield from self.field(ts_node, "left")
        right = yield from self.field(ts_node, "right")
        return self.make(NodeType.BINARY_EXPRESSION, ts_node, left=left, right=right)

    def identifier(self, ts_node) -> Node:
        return self.make(NodeType.IDENTIFIER, ts_node, name=self.text(ts_node))

    def this_expression(self, ts_node) -> Node:
        return self.make(NodeType.THIS_EXPRESSION, ts_node)

    def literal(self, ts_node) -> Node:
        value = self.text(ts_node)
        if ts_node.type == "string":
            value = value[1:-1]
        return self.make(NodeType.LITERAL, ts_node, name=value)


def _collect_comments(root, source: bytes) -> list[SourceComment]:
    comments = []
    stack = [root]
    while stack:
        ts_node = stack.pop()
        if ts_node.type == "comment":
            text = source[ts_node.start_byte : ts_node.end_byte].decode("utf-8", errors="replace")
            if text.startswith("/*"):
                kind, value = CommentKind.BLOCK, text[2:-2]
            else:
                kind, value = CommentKind.LINE, text[2:]
            comments.append(
                (
                    ts_node.start_byte,
                    SourceComment(
                        kind=kind,
                        value=value,
                        line=ts_node.start_point[0] + 1,
                        end_line=ts_node.end_point[0] + 1,
                    ),
                )
            )
            continue
        stack.extend(ts_node.children)
    comments.sort(key=lambda pair: pair[0])
    return [comment for _, comment in comments]


class TreeSitterParser:
    """Default code parser using the tree-sitter JavaScript grammar."""

    def __init__(self) -> None:
        self._parser = Parser(JS_LANGUAGE)

    def parse(self, code: str) -> ParsedSource:
        source = code.encode("utf-8")
        tree = self._parser.parse(source)
        root = tree.root_node

        if root.has_error:
            log.warning("Source contains syntax errors; parsing what could be recovered")

        program = _Converter(source).convert(root)
        return ParsedSource(
            program=program,
            comments=_collect_comments(root, source),
            has_errors=root.has_error,
        )
