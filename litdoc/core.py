"""The doc-comment to function pipeline.

:class:`Litdoc` ties the collaborators together: a code parser finds the
functions, a comment parser reads the doc comment on the line above each
one, and a Markdown parser renders the prose. The result is a plain
:class:`~litdoc.models.LibraryInfo` for templates to consume.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Any

from .codeparser import CodeParser, TreeSitterParser
from .config import ExampleHandler, ProjectConfig
from .doclets import CommentParser, Doclet, DocletParser, parse_comment
from .errors import TemplateError
from .extractors import (
    create_type_info,
    get_library_summary,
    get_params,
    get_returns,
    get_signature,
    parse_name,
)
from .generators import (
    JinjaTemplateEngine,
    TemplateEngine,
    build_template_data,
    filter_by_grep,
    load_default_template,
)
from .grouping import group_namespaces
from .models import ExampleInfo, FunctionInfo, LibraryInfo, TypeInfo
from .pairs import EXAMPLE_TAGS, get_benchmarks, get_examples, parse_comment_lines
from .rendering import (
    Highlighter,
    MarkdownParser,
    MarkdownRenderer,
    PygmentsHighlighter,
    highlight_code,
    process_internal_links,
)
from .syntax import (
    FUNCTION_TYPES,
    Node,
    NodeType,
    SourceComment,
    assign_parents,
    functions_by_line,
    get_function_source,
    get_identifier_name,
    get_module_exports_identifier,
    walk_nodes,
)

log = logging.getLogger(__name__)

_TYPEDEF_RE = re.compile(r"@typedef\b")


class Litdoc:
    """Parses JavaScript source into documentation data and renders it.

    Collaborators default to tree-sitter, the built-in doclet parser,
    Python-Markdown, Pygments and Jinja2. Pass ``highlight=False`` to
    skip syntax highlighting.
    """

    def __init__(
        self,
        *,
        code_parser: CodeParser | None = None,
        comment_parser: CommentParser | None = None,
        markdown_parser: MarkdownParser | None = None,
        highlighter: Highlighter | None = None,
        highlight: bool = True,
        template_engine: TemplateEngine | None = None,
        namespaces: list[str] | None = None,
        tags: list[str] | None = None,
        grep: str | None = None,
        javascripts: list[str] | None = None,
        template: str | None = None,
        template_partials: dict[str, str] | None = None,
        example_handlers: list[ExampleHandler] | None = None,
        extra_options: dict[str, Any] | None = None,
        require_description: bool = False,
    ):
        self.code_parser = code_parser or TreeSitterParser()
        self.comment_parser = comment_parser or DocletParser()
        self.markdown_parser = markdown_parser or MarkdownRenderer()
        if highlighter is None and highlight:
            highlighter = PygmentsHighlighter()
        self.highlighter = highlighter
        self.template_engine = template_engine or JinjaTemplateEngine()
        self.namespaces = list(namespaces or [])
        self.tags = list(tags or [])
        self.grep = grep
        self.javascripts = list(javascripts or [])
        self.template = template
        self.template_partials = dict(template_partials or {})
        self.example_handlers = list(example_handlers or [])
        self.extra_options = dict(extra_options or {})
        self.require_description = require_description

    @classmethod
    def from_config(cls, config: ProjectConfig, **overrides: Any) -> Litdoc:
        """Build an instance from a loaded project config.

        Keyword overrides (e.g. collaborators) take precedence over the config.
        """
        options: dict[str, Any] = {
            "namespaces": config.namespaces,
            "tags": config.tags,
            "grep": config.grep,
            "javascripts": config.javascripts,
            "template": config.read_template(),
            "template_partials": config.read_partials(),
            "example_handlers": config.example_handlers,
            "extra_options": config.extra_options,
            "require_description": config.require_description,
            "highlight": config.highlight,
        }
        options.update(overrides)
        return cls(**options)

    # Collaborator wrappers

    def parse_markdown(self, text: str) -> str:
        return process_internal_links(self.markdown_parser.parse(text))

    def highlight_code(self, code: str) -> str:
        return highlight_code(code, self.highlighter)

    def parse_comment(self, comment: SourceComment) -> Doclet | None:
        return parse_comment(comment, self.comment_parser)

    # Pipeline

    def parse(self, code: str) -> LibraryInfo:
        """Parse ``code`` into a LibraryInfo.

        Raises:
            TypeFormatError: A doc comment holds a type that cannot be displayed
            TemplateError: An example handler names an undefined partial
        """
        parsed = self.code_parser.parse(code)
        program = parsed.program
        assign_parents(program)

        summary = get_library_summary(
            (d for d in map(self.parse_comment, parsed.comments) if d is not None),
            self.parse_markdown,
        )

        by_line = functions_by_line(program.body)
        functions: list[FunctionInfo] = []

        for comment in parsed.comments:
            candidates = by_line.get(comment.end_line + 1)
            if not candidates:
                continue

            doclet = self.parse_comment(comment)
            if doclet is None:
                log.debug("Skipping comment on line %d: not a doc comment", comment.end_line)
                continue

            if not self._has_content(doclet):
                log.debug("Skipping comment on line %d: no description", comment.end_line)
                continue

            # Several functions can start on one line; the first one wins
            fn = candidates[0]
            functions.append(self.create_function_info(fn, doclet, get_function_source(fn, code)))

        functions = self._apply_tag_filter(functions)
        namespaces = group_namespaces(functions, self.namespaces)

        private_members: list[FunctionInfo] = []
        for ns in namespaces:
            for member in ns.private_members:
                if not any(member is seen for seen in private_members):
                    private_members.append(member)

        private_methods = {
            member.name: [fn for fn in functions if fn.namespace == member.short_name]
            for member in private_members
        }

        reference_name = next(
            filter(None, map(get_module_exports_identifier, walk_nodes(program.body))),
            None,
        )
        if reference_name is None:
            first_with_members = next((ns for ns in namespaces if ns.members), None)
            if first_with_members is not None:
                reference_name = first_with_members.namespace.split(".")[0]

        library = LibraryInfo(
            name=summary.name,
            reference_name=reference_name,
            description=summary.description,
            code=code,
            namespaces=namespaces,
            docs=functions,
            private_members=private_members,
            private_methods=private_methods,
            types=self._get_types(parsed.comments),
            all_functions=_all_function_names(program),
        )
        log.info(
            "Parsed %s: %d documented functions in %d namespaces",
            library.name,
            len(functions),
            len(namespaces),
        )
        return library

    def generate(self, source: str | LibraryInfo) -> str:
        """Render HTML docs for raw source code or an already parsed library."""
        library = self.parse(source) if isinstance(source, str) else source

        if self.grep:
            library = filter_by_grep(library, self.grep)

        data = build_template_data(library, self.javascripts, self.extra_options)
        template = self.template if self.template is not None else load_default_template()
        return self.template_engine.render(template, data, self.template_partials)

    def create_function_info(self, fn: Node, doclet: Doclet, source: str) -> FunctionInfo:
        name = parse_name(get_identifier_name(fn) or "", doclet)
        params = get_params(doclet, self.parse_markdown)
        signature = get_signature(name, params)

        return FunctionInfo(
            name=name.name,
            short_name=name.short_name,
            long_name=name.long_name,
            identifier=name.identifier,
            namespace=name.namespace,
            description=self.parse_markdown(doclet.description),
            params=params,
            returns=get_returns(doclet, self.parse_markdown),
            is_constructor=doclet.has_tag("constructor"),
            is_static="#" not in name.name,
            is_public=doclet.has_tag("public"),
            is_private=doclet.has_tag("private"),
            is_global=fn.parent is not None and fn.parent.type == NodeType.PROGRAM,
            signature=signature,
            highlighted_signature=self.highlight_code(signature),
            examples=get_examples(doclet, self.highlight_code, self._decorate_example),
            benchmarks=get_benchmarks(doclet, self.highlight_code),
            tags=doclet.titles,
            source=source,
            line_number=fn.line,
        )

    def _has_content(self, doclet: Doclet) -> bool:
        if doclet.description:
            return True
        if self.require_description:
            return False
        return bool(parse_comment_lines(doclet, EXAMPLE_TAGS).pairs)

    def _apply_tag_filter(self, functions: list[FunctionInfo]) -> list[FunctionInfo]:
        """Mark functions without any of the wanted tags as excluded from docs.

        Without explicit tags, the presence of any ``@public`` function means
        only ``@public`` functions are wanted.
        """
        tags = self.tags
        if not tags and any(fn.is_public for fn in functions):
            tags = ["public"]
        if not tags:
            return functions

        return [
            fn if any(tag in fn.tags for tag in tags) else dataclasses.replace(fn, exclude_from_docs=True)
            for fn in functions
        ]

    def _decorate_example(self, example: ExampleInfo) -> ExampleInfo:
        """Apply the first example handler whose pattern matches the expected value."""
        for i, handler in enumerate(self.example_handlers):
            match = re.search(handler.pattern, example.expected)
            if match is None:
                continue

            if handler.test is not None:
                return dataclasses.replace(example, has_custom_handler=True, handler_index=i)

            partial = self.template_partials.get(handler.template)
            if partial is None:
                raise TemplateError(f'Template "{handler.template}" not defined.')

            data = dataclasses.asdict(example)
            data["match"] = [match.group(0), *match.groups()]
            source = self.template_engine.render(partial, data, self.template_partials)
            return dataclasses.replace(example, example_source=source)

        return example

    def _get_types(self, comments: list[SourceComment]) -> list[TypeInfo]:
        types = []
        for comment in comments:
            if not _TYPEDEF_RE.search(comment.value):
                continue
            doclet = self.parse_comment(comment)
            if doclet is None or not doclet.has_tag("typedef"):
                continue
            types.append(create_type_info(doclet, self.parse_markdown))
        return types


def _all_function_names(program: Node) -> list[str]:
    names = set()
    for node in walk_nodes(program.body):
        if node.type in FUNCTION_TYPES:
            name = get_identifier_name(node)
            if name:
                names.add(name)
    return sorted(names)
