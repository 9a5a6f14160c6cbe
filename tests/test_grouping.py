"""
Tests for grouping functions by namespace.
"""

from litdoc.grouping import PRIVATE_NAMESPACE, group_by_namespace, group_namespaces
from litdoc.models import BenchmarkCollection, ExampleCollection, ExampleInfo, FunctionInfo


def fn(name, is_static=None, **overrides):
    """A FunctionInfo named like parse_name would name it."""
    namespace, _, short = name.replace("#", ".").rpartition(".")
    fields = dict(
        name=name,
        short_name=short,
        long_name=name.replace("#", ".prototype."),
        identifier=name.replace(".", "-").replace("#", "-"),
        namespace=namespace or None,
        description="",
        params=[],
        returns=None,
        is_constructor=False,
        is_static="#" not in name if is_static is None else is_static,
        is_public=False,
        is_private=False,
        is_global=False,
        signature="",
        highlighted_signature="",
        examples=ExampleCollection(),
        benchmarks=BenchmarkCollection(),
        tags=[],
        source="",
        line_number=1,
    )
    fields.update(overrides)
    return FunctionInfo(**fields)


class TestMemberOrdering:
    def test_static_before_instance_then_alphabetical(self):
        members = [fn("NS.b", is_static=False), fn("NS.a", is_static=True), fn("NS.c", is_static=True)]
        (ns,) = group_namespaces(members)
        assert [m.short_name for m in ns.members] == ["a", "c", "b"]

    def test_constructor_first_in_all_members(self):
        functions = [fn("Foo#bar"), fn("Foo.create"), fn("Foo", is_constructor=True)]
        foo = next(ns for ns in group_namespaces(functions) if ns.namespace == "Foo")
        assert foo.constructor_method.name == "Foo"
        assert [m.name for m in foo.members] == ["Foo.create", "Foo#bar"]
        assert [m.name for m in foo.all_members] == ["Foo", "Foo.create", "Foo#bar"]
        assert [m.section_type for m in foo.all_members] == ["constructor", "method", "method"]

    def test_no_constructor(self):
        (ns,) = group_namespaces([fn("util.trim")])
        assert ns.constructor_method is None
        assert [m.name for m in ns.all_members] == ["util.trim"]


class TestNamespaces:
    def test_first_seen_order(self):
        functions = [fn("Zed.a"), fn("Alpha.b"), fn("Zed.c")]
        assert [ns.namespace for ns in group_namespaces(functions)] == ["Zed", "Alpha"]

    def test_explicit_namespaces_filter_and_order(self):
        functions = [fn("Zed.a"), fn("Alpha.b"), fn("Mid.c")]
        namespaces = group_namespaces(functions, ["Alpha", "Zed"])
        assert [ns.namespace for ns in namespaces] == ["Alpha", "Zed"]

    def test_unknown_namespace_is_empty(self):
        (ns,) = group_namespaces([fn("Zed.a")], ["Nope"])
        assert ns.all_members == []
        assert ns.exclude_from_docs

    def test_functions_without_namespace_group_by_own_name(self):
        groups = group_by_namespace([fn("helper")])
        assert list(groups) == ["helper"]

    def test_private_members_share_a_group(self):
        functions = [fn("Foo#_secret", is_private=True), fn("Bar._hidden", is_private=True), fn("Foo#open")]
        namespaces = group_namespaces(functions)
        assert [ns.namespace for ns in namespaces] == [PRIVATE_NAMESPACE, "Foo"]

        private = namespaces[0]
        assert private.exclude_from_docs
        assert [m.name for m in private.private_members] == ["Bar._hidden", "Foo#_secret"]

    def test_private_constructor_still_heads_namespace(self):
        functions = [fn("Foo", is_private=True), fn("Foo#open")]
        foo = next(ns for ns in group_namespaces(functions) if ns.namespace == "Foo")
        assert foo.constructor_method.name == "Foo"
        assert [m.name for m in foo.private_members] == ["Foo"]


class TestNamespaceFlags:
    def test_has_examples(self):
        example = ExampleInfo(1, 0, "f()", "f()", "1", "1")
        functions = [fn("NS.a", examples=ExampleCollection(list=[example])), fn("NS.b")]
        (ns,) = group_namespaces(functions)
        assert ns.has_examples
        assert not ns.has_benchmarks

    def test_excluded_when_all_members_excluded(self):
        (ns,) = group_namespaces([fn("NS.a", exclude_from_docs=True)])
        assert ns.exclude_from_docs

    def test_included_when_any_member_included(self):
        (ns,) = group_namespaces([fn("NS.a", exclude_from_docs=True), fn("NS.b")])
        assert not ns.exclude_from_docs
