"""Data models handed to templates and callers."""

from __future__ import annotations

from dataclasses import dataclass, field

PRIVATE_NAMESPACE = "[private]"


@dataclass
class NameInfo:
    """The ways of naming one function: ``Foo.Bar#baz`` and its parts."""

    name: str  # "Foo.Bar#baz"
    short_name: str  # "baz"
    long_name: str  # "Foo.Bar.prototype.baz"
    namespace: str | None  # "Foo.Bar"
    identifier: str  # "Foo-Bar-baz"


@dataclass
class ParameterInfo:
    name: str | None
    type: str
    description: str  # Rendered HTML


@dataclass
class ReturnInfo:
    type: str
    description: str  # Rendered HTML


@dataclass
class ExampleInfo:
    """One ``actual // => expected`` example."""

    id: int
    line_number: int  # Line index within the tag text
    actual: str
    actual_escaped: str
    expected: str
    expected_escaped: str
    has_custom_handler: bool = False
    handler_index: int | None = None
    example_source: str | None = None  # Set when a handler template rendered it


@dataclass
class ExampleCollection:
    code: str = ""  # Raw text of the tag
    highlighted_code: str = ""
    setup: str = ""  # Preamble lines before the first example
    list: list[ExampleInfo] = field(default_factory=list)


@dataclass
class BenchmarkCase:
    case_id: int
    impl: str
    name: str  # Group the case belongs to
    label: str  # "Ops/second" unless given after " - "


@dataclass
class BenchmarkInfo:
    id: int
    name: str
    cases: list[BenchmarkCase] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.cases[0].label if self.cases else "Ops/second"


@dataclass
class BenchmarkCollection:
    code: str = ""
    highlighted_code: str = ""
    setup: str = ""
    list: list[BenchmarkInfo] = field(default_factory=list)

    @property
    def cases(self) -> list[BenchmarkCase]:
        return self.list[0].cases if self.list else []


@dataclass
class FunctionInfo:
    """Everything known about one documented function."""

    name: str
    short_name: str
    long_name: str
    identifier: str
    namespace: str | None
    description: str  # Rendered HTML
    params: list[ParameterInfo]
    returns: ReturnInfo | None
    is_constructor: bool
    is_static: bool
    is_public: bool
    is_private: bool
    is_global: bool
    signature: str
    highlighted_signature: str
    examples: ExampleCollection
    benchmarks: BenchmarkCollection
    tags: list[str]
    source: str
    line_number: int
    exclude_from_docs: bool = False

    @property
    def has_signature(self) -> bool:
        return bool(self.params) or self.returns is not None

    @property
    def has_examples(self) -> bool:
        return len(self.examples.list) > 0

    @property
    def has_benchmarks(self) -> bool:
        return len(self.benchmarks.list) > 0

    @property
    def section_type(self) -> str:
        return "constructor" if self.is_constructor else "method"


@dataclass
class TypeInfo:
    """A custom type declared with ``@typedef``."""

    name: str
    identifier: str
    description: str
    properties: list[ParameterInfo] = field(default_factory=list)


@dataclass
class NamespaceInfo:
    namespace: str
    constructor_method: FunctionInfo | None
    members: list[FunctionInfo]  # Static members first, then instance members
    private_members: list[FunctionInfo]
    all_members: list[FunctionInfo]  # Constructor followed by members

    @property
    def has_examples(self) -> bool:
        return any(m.has_examples for m in self.all_members)

    @property
    def has_benchmarks(self) -> bool:
        return any(m.has_benchmarks for m in self.all_members)

    @property
    def exclude_from_docs(self) -> bool:
        return self.namespace == PRIVATE_NAMESPACE or all(
            m.exclude_from_docs for m in self.all_members
        )


@dataclass
class LibrarySummary:
    name: str
    description: str  # Rendered HTML


@dataclass
class LibraryInfo:
    """The result of parsing one source file."""

    name: str
    reference_name: str | None
    description: str
    code: str
    namespaces: list[NamespaceInfo]
    docs: list[FunctionInfo]
    private_members: list[FunctionInfo] = field(default_factory=list)
    # Private member name -> documented functions in the namespace named by
    # its short name, so a private class can list its methods
    private_methods: dict[str, list[FunctionInfo]] = field(default_factory=dict)
    types: list[TypeInfo] = field(default_factory=list)
    all_functions: list[str] = field(default_factory=list)  # Every named function


@dataclass
class ValidationResult:
    """Results from documentation validation."""

    errors: list[str] = field(default_factory=list)  # Build fails if non-empty
    warnings: list[str] = field(default_factory=list)  # Printed but allowed
