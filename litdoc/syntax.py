"""The subset of the JavaScript syntax tree that litdoc inspects.

Code parsers convert their own trees into :class:`Node` records. Only the
categories in :class:`NodeType` are modelled; everything else becomes
``NodeType.OTHER``, which has no children and no name.
"""

from __future__ import annotations

import enum
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Iterator


class NodeType(str, enum.Enum):
    PROGRAM = "Program"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_EXPRESSION = "FunctionExpression"
    CLASS = "Class"
    METHOD_DEFINITION = "MethodDefinition"
    BLOCK_STATEMENT = "BlockStatement"
    EXPRESSION_STATEMENT = "ExpressionStatement"
    VARIABLE_DECLARATION = "VariableDeclaration"
    VARIABLE_DECLARATOR = "VariableDeclarator"
    IF_STATEMENT = "IfStatement"
    LOOP_STATEMENT = "LoopStatement"  # for, for-in, while, do-while
    LABELED_STATEMENT = "LabeledStatement"
    WITH_STATEMENT = "WithStatement"
    SWITCH_STATEMENT = "SwitchStatement"
    SWITCH_CASE = "SwitchCase"
    TRY_STATEMENT = "TryStatement"
    ASSIGNMENT_EXPRESSION = "AssignmentExpression"
    CALL_EXPRESSION = "CallExpression"
    NEW_EXPRESSION = "NewExpression"
    MEMBER_EXPRESSION = "MemberExpression"
    CONDITIONAL_EXPRESSION = "ConditionalExpression"
    OBJECT_EXPRESSION = "ObjectExpression"
    ARRAY_EXPRESSION = "ArrayExpression"
    PROPERTY = "Property"
    UNARY_EXPRESSION = "UnaryExpression"
    BINARY_EXPRESSION = "BinaryExpression"
    SEQUENCE_EXPRESSION = "SequenceExpression"
    IDENTIFIER = "Identifier"
    THIS_EXPRESSION = "ThisExpression"
    LITERAL = "Literal"
    OTHER = "Other"


FUNCTION_TYPES = frozenset({NodeType.FUNCTION_DECLARATION, NodeType.FUNCTION_EXPRESSION})


@dataclass(eq=False)
class Node:
    """One syntax tree node.

    Which slots are populated depends on ``type``:

    - ``body``: statements of a program/block/switch case, the single body
      of functions, loops and labels, cases of a switch, blocks of a try,
      members of a class
    - ``expression``: the expression of an expression statement
    - ``id``: name of a function declaration, class or variable declarator
    - ``init``: initializer of a variable declarator
    - ``left``/``right``: assignment and binary operands
    - ``callee``/``arguments``: call and new expressions
    - ``object``/``property``/``computed``: member expressions
    - ``key``/``value``: object properties and class methods
    - ``consequent``/``alternate``: if statements and conditionals
    - ``elements``: array elements, object properties, sequence expressions
    - ``name``: identifier name or literal value
    """

    type: NodeType
    line: int = 0
    start: int = 0
    end: int = 0
    name: str | None = None
    id: Node | None = None
    body: list[Node] = field(default_factory=list)
    expression: Node | None = None
    init: Node | None = None
    left: Node | None = None
    right: Node | None = None
    callee: Node | None = None
    arguments: list[Node] = field(default_factory=list)
    object: Node | None = None
    property: Node | None = None
    computed: bool = False
    key: Node | None = None
    value: Node | None = None
    consequent: Node | None = None
    alternate: Node | None = None
    elements: list[Node] = field(default_factory=list)
    static: bool = False
    parent: Node | None = field(default=None, repr=False)

    def __repr__(self) -> str:
        return f"Node({self.type.value}, line={self.line}, name={self.name!r})"


class CommentKind(str, enum.Enum):
    BLOCK = "Block"
    LINE = "Line"


@dataclass(frozen=True)
class SourceComment:
    """A comment as found in the source.

    ``value`` excludes the ``/*``/``*/`` or ``//`` delimiters, so a doc
    comment's value starts with ``*``.
    """

    kind: CommentKind
    value: str
    line: int
    end_line: int


@dataclass
class ParsedSource:
    """What a code parser produces for one source text."""

    program: Node
    comments: list[SourceComment]
    has_errors: bool = False


def _compact(nodes: Iterable[Node | None]) -> list[Node]:
    return [n for n in nodes if n is not None]


def get_node_children(node: Node) -> list[Node]:
    """Return the children of ``node`` that could contain a function.

    Node types that cannot (however deep down) contain a function
    declaration or expression are treated as having no children.
    """
    t = node.type

    if t in (
        NodeType.PROGRAM,
        NodeType.BLOCK_STATEMENT,
        NodeType.FUNCTION_DECLARATION,
        NodeType.FUNCTION_EXPRESSION,
        NodeType.CLASS,
        NodeType.LOOP_STATEMENT,
        NodeType.LABELED_STATEMENT,
        NodeType.WITH_STATEMENT,
        NodeType.SWITCH_STATEMENT,
        NodeType.SWITCH_CASE,
        NodeType.TRY_STATEMENT,
    ):
        return _compact(node.body)

    if t in (NodeType.IF_STATEMENT, NodeType.CONDITIONAL_EXPRESSION):
        return _compact([node.consequent, node.alternate])

    if t == NodeType.EXPRESSION_STATEMENT:
        return _compact([node.expression])

    if t == NodeType.ASSIGNMENT_EXPRESSION:
        return _compact([node.right])

    if t in (NodeType.CALL_EXPRESSION, NodeType.NEW_EXPRESSION):
        return _compact([node.callee, *node.arguments])

    if t in (
        NodeType.OBJECT_EXPRESSION,
        NodeType.ARRAY_EXPRESSION,
        NodeType.SEQUENCE_EXPRESSION,
    ):
        return _compact(node.elements)

    if t == NodeType.MEMBER_EXPRESSION:
        if node.object is not None and node.object.type == NodeType.FUNCTION_EXPRESSION:
            return [node.object]
        return []

    if t == NodeType.UNARY_EXPRESSION:
        return _compact([node.expression])

    if t == NodeType.BINARY_EXPRESSION:
        return _compact([node.left, node.right])

    if t in (NodeType.PROPERTY, NodeType.METHOD_DEFINITION):
        return _compact([node.key, node.value])

    if t == NodeType.VARIABLE_DECLARATION:
        return _compact(node.body)

    if t == NodeType.VARIABLE_DECLARATOR:
        return _compact([node.init])

    return []


def assign_parents(node: Node) -> None:
    """Give every reachable node a ``parent`` reference."""
    stack = [node]
    while stack:
        current = stack.pop()
        for child in get_node_children(current):
            child.parent = current
            stack.append(child)


def walk_nodes(nodes: Iterable[Node]) -> Iterator[Node]:
    """Lazily yield ``nodes`` and all their descendants, depth first."""
    stack = list(reversed(list(nodes)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(get_node_children(node)))


def functions_by_line(body: Iterable[Node]) -> dict[int, list[Node]]:
    """Index every function-like node by its 1-based starting line."""
    index: dict[int, list[Node]] = defaultdict(list)
    for node in walk_nodes(body):
        if node.type in FUNCTION_TYPES:
            index[node.line].append(node)
    return dict(index)


def _literal_or_name(node: Node | None) -> str | None:
    if node is None:
        return None
    if node.type in (NodeType.IDENTIFIER, NodeType.LITERAL):
        return node.name
    return None


def _join(owner: str | None, member: str | None, separator: str = ".") -> str | None:
    if member is None:
        return None
    if owner is None:
        return member
    return owner + separator + member


def _rewrite_prototype(name: str | None) -> str | None:
    if name is None:
        return None
    return name.replace(".prototype.", "#", 1)


def get_identifier_name(node: Node | None, _visited: set[int] | None = None) -> str | None:
    """Derive the qualified name a function-like node is bound to.

    ``Foo.prototype.bar = function() {}`` yields ``Foo#bar``; a function
    nobody names (an immediately invoked callee, say) yields None.
    """
    visited = _visited if _visited is not None else set()

    # Walks up (or into the binding) iteratively; only member chains and
    # property owners recurse.
    while node is not None:
        if id(node) in visited:
            return None
        visited.add(id(node))

        t = node.type

        if t == NodeType.IDENTIFIER:
            return node.name

        if t in (NodeType.FUNCTION_DECLARATION, NodeType.VARIABLE_DECLARATOR):
            node = node.id
        elif t == NodeType.CLASS:
            node = node.id if node.id is not None else node.parent
        elif t == NodeType.ASSIGNMENT_EXPRESSION:
            node = node.left
        elif t == NodeType.EXPRESSION_STATEMENT:
            node = node.expression
        elif t == NodeType.MEMBER_EXPRESSION:
            if node.parent is not None and node.parent.type != NodeType.ASSIGNMENT_EXPRESSION:
                return None
            owner = get_identifier_name(node.object, visited)
            if node.computed:
                member = _literal_or_name(node.property)
            else:
                member = get_identifier_name(node.property, visited)
            return _rewrite_prototype(_join(owner, member))
        elif t == NodeType.PROPERTY:
            owner = get_identifier_name(node.parent, visited)
            return _rewrite_prototype(_join(owner, _literal_or_name(node.key)))
        elif t == NodeType.METHOD_DEFINITION:
            owner = get_identifier_name(node.parent, visited)
            key = _literal_or_name(node.key)
            if key == "constructor" and owner is not None:
                return owner
            return _join(owner, key, "." if node.static else "#")
        elif t in (NodeType.THIS_EXPRESSION, NodeType.LITERAL):
            return None
        else:
            # Function expressions and anything wrapping them take their
            # name from the enclosing node.
            node = node.parent

    return None


def get_module_exports_identifier(node: Node) -> str | None:
    """If ``node`` is ``module.exports = Foo``, return ``"Foo"``."""
    if node.type != NodeType.ASSIGNMENT_EXPRESSION:
        return None

    left = node.left
    if left is None or left.type != NodeType.MEMBER_EXPRESSION:
        return None

    parts = [left.object, left.property, node.right]
    if not all(p is not None and p.type == NodeType.IDENTIFIER for p in parts):
        return None

    if left.object.name != "module" or left.property.name != "exports":
        return None

    return node.right.name


def get_function_source(node: Node, code: str) -> str:
    """Return the source text spanned by ``node``.

    Node offsets are byte offsets into the UTF-8 encoding of ``code``.
    """
    return code.encode("utf-8")[node.start : node.end].decode("utf-8", errors="replace")
