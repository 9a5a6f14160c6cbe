"""
Tests for the node model: walking, locating functions and naming them.

These build trees by hand so they don't depend on any code parser.
"""

from litdoc.syntax import (
    Node,
    NodeType,
    assign_parents,
    functions_by_line,
    get_function_source,
    get_identifier_name,
    get_module_exports_identifier,
    walk_nodes,
)


def ident(name, line=1):
    return Node(NodeType.IDENTIFIER, line=line, name=name)


def member(obj, prop, line=1):
    return Node(NodeType.MEMBER_EXPRESSION, line=line, object=obj, property=prop)


def function(line=1, body=None):
    return Node(NodeType.FUNCTION_EXPRESSION, line=line, body=body or [])


def assign_statement(left, right, line=1):
    assignment = Node(NodeType.ASSIGNMENT_EXPRESSION, line=line, left=left, right=right)
    return Node(NodeType.EXPRESSION_STATEMENT, line=line, expression=assignment)


def program(*statements):
    root = Node(NodeType.PROGRAM, body=list(statements))
    assign_parents(root)
    return root


class TestFunctionsByLine:
    def test_indexes_declarations_and_expressions(self):
        declaration = Node(NodeType.FUNCTION_DECLARATION, line=1, id=ident("foo"))
        expression = function(line=3)
        root = program(declaration, assign_statement(ident("bar", 3), expression, 3))

        index = functions_by_line(root.body)
        assert index == {1: [declaration], 3: [expression]}

    def test_shared_line_keeps_source_order(self):
        first, second = function(line=2), function(line=2)
        declaration = Node(
            NodeType.VARIABLE_DECLARATION,
            line=2,
            body=[
                Node(NodeType.VARIABLE_DECLARATOR, line=2, id=ident("a"), init=first),
                Node(NodeType.VARIABLE_DECLARATOR, line=2, id=ident("b"), init=second),
            ],
        )
        assert functions_by_line(program(declaration).body)[2] == [first, second]

    def test_finds_nested_functions(self):
        inner = Node(NodeType.FUNCTION_DECLARATION, line=3, id=ident("inner"))
        block = Node(NodeType.BLOCK_STATEMENT, line=2, body=[inner])
        outer = function(line=1, body=[block])
        call = Node(NodeType.CALL_EXPRESSION, line=1, callee=outer)
        root = program(Node(NodeType.EXPRESSION_STATEMENT, line=1, expression=call))

        assert functions_by_line(root.body) == {1: [outer], 3: [inner]}

    def test_does_not_descend_into_unknown_nodes(self):
        hidden = function(line=5)
        other = Node(NodeType.OTHER, line=5, body=[hidden])
        assert functions_by_line(program(other).body) == {}

    def test_walk_is_lazy_and_depth_first(self):
        a = Node(NodeType.FUNCTION_DECLARATION, line=1, id=ident("a"))
        b = Node(NodeType.FUNCTION_DECLARATION, line=2, id=ident("b"))
        nodes = walk_nodes(program(a, b).body)
        assert next(nodes) is a
        assert next(nodes) is b


class TestIdentifierNames:
    """Deriving qualified names from the surrounding nodes."""

    def test_declaration(self):
        fn = Node(NodeType.FUNCTION_DECLARATION, id=ident("foo"))
        program(fn)
        assert get_identifier_name(fn) == "foo"

    def test_variable(self):
        fn = function()
        program(
            Node(
                NodeType.VARIABLE_DECLARATION,
                body=[Node(NodeType.VARIABLE_DECLARATOR, id=ident("foo"), init=fn)],
            )
        )
        assert get_identifier_name(fn) == "foo"

    def test_prototype_becomes_instance_member(self):
        fn = function()
        program(assign_statement(member(member(ident("Foo"), ident("prototype")), ident("bar")), fn))
        assert get_identifier_name(fn) == "Foo#bar"

    def test_static_member(self):
        fn = function()
        program(assign_statement(member(member(ident("Foo"), ident("Bar")), ident("baz")), fn))
        assert get_identifier_name(fn) == "Foo.Bar.baz"

    def test_computed_string_member(self):
        fn = function()
        key = Node(NodeType.LITERAL, name="odd-name")
        target = Node(NodeType.MEMBER_EXPRESSION, object=ident("Foo"), property=key, computed=True)
        program(assign_statement(target, fn))
        assert get_identifier_name(fn) == "Foo.odd-name"

    def test_object_property(self):
        fn = function()
        prop = Node(NodeType.PROPERTY, key=ident("add"), value=fn)
        obj = Node(NodeType.OBJECT_EXPRESSION, elements=[prop])
        program(
            Node(
                NodeType.VARIABLE_DECLARATION,
                body=[Node(NodeType.VARIABLE_DECLARATOR, id=ident("Lib"), init=obj)],
            )
        )
        assert get_identifier_name(fn) == "Lib.add"

    def test_class_methods(self):
        ctor_fn, push_fn, create_fn = function(), function(), function()
        klass = Node(
            NodeType.CLASS,
            id=ident("Stack"),
            body=[
                Node(NodeType.METHOD_DEFINITION, key=ident("constructor"), value=ctor_fn),
                Node(NodeType.METHOD_DEFINITION, key=ident("push"), value=push_fn),
                Node(NodeType.METHOD_DEFINITION, key=ident("create"), value=create_fn, static=True),
            ],
        )
        program(klass)
        assert get_identifier_name(ctor_fn) == "Stack"
        assert get_identifier_name(push_fn) == "Stack#push"
        assert get_identifier_name(create_fn) == "Stack.create"

    def test_immediately_invoked_function_is_anonymous(self):
        fn = function()
        call = Node(NodeType.CALL_EXPRESSION, callee=fn)
        program(Node(NodeType.EXPRESSION_STATEMENT, expression=call))
        assert get_identifier_name(fn) is None

    def test_this_member_drops_receiver(self):
        fn = function()
        program(assign_statement(member(Node(NodeType.THIS_EXPRESSION), ident("x")), fn))
        assert get_identifier_name(fn) == "x"


class TestModuleExports:
    def test_module_exports_identifier(self):
        statement = assign_statement(member(ident("module"), ident("exports")), ident("Lazy"))
        assert get_module_exports_identifier(statement.expression) == "Lazy"

    def test_other_assignment(self):
        statement = assign_statement(member(ident("window"), ident("Lazy")), ident("Lazy"))
        assert get_module_exports_identifier(statement.expression) is None

    def test_not_an_assignment(self):
        assert get_module_exports_identifier(ident("module")) is None


def test_function_source_uses_byte_offsets():
    code = "var s = 'é'; function f() {}"
    start = len("var s = 'é'; ".encode("utf-8"))
    fn = Node(NodeType.FUNCTION_DECLARATION, start=start, end=len(code.encode("utf-8")))
    assert get_function_source(fn, code) == "function f() {}"
