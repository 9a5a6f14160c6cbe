"""Extract names, signatures and tag data from doclets."""

from __future__ import annotations

import re
from typing import Callable, Iterable

from .doclets import Doclet
from .models import LibrarySummary, NameInfo, ParameterInfo, ReturnInfo, TypeInfo
from .rendering import to_identifier
from .typeexpr import format_type

PARAM_TAGS = ("param", "arg", "argument")
RETURN_TAGS = ("returns", "return")

DEFAULT_LIBRARY_NAME = "Untitled Library"
DEFAULT_LIBRARY_DESCRIPTION = "[No description]"


def parse_name(name: str, doclet: Doclet | None = None) -> NameInfo:
    """Split a qualified name like ``Foo.Bar#baz`` into its parts.

    ``@global`` in ``doclet`` takes the function out of its namespace;
    ``@memberOf X`` moves it into ``X`` (as an instance member when
    ``@instance`` is also present).

    >>> parse_name("Foo.Bar#baz").namespace
    'Foo.Bar'
    >>> parse_name("Foo").namespace is None
    True
    """
    parts = re.split(r"[.#]", name)
    short_name = parts.pop()
    namespace = ".".join(parts)

    if doclet is not None:
        if doclet.has_tag("global"):
            namespace = ""
            name = short_name
        elif doclet.has_tag("memberOf"):
            namespace = doclet.tag_description("memberOf")
            separator = "#" if doclet.has_tag("instance") else "."
            name = namespace + separator + short_name

    return NameInfo(
        name=name,
        short_name=short_name,
        long_name=name.replace("#", ".prototype.", 1),
        namespace=namespace or None,
        identifier=to_identifier(name),
    )


def get_signature(name: NameInfo, params: list[ParameterInfo]) -> str:
    """Build the display signature for a function.

    >>> get_signature(parse_name("Foo#bar"), [])
    'Foo.bar = function()'
    """
    formatted_params = "(" + ", ".join(p.name or "" for p in params) + ")"
    if name.name == name.short_name:
        return f"function {name.short_name}{formatted_params}"
    return f"{name.namespace}.{name.short_name} = function{formatted_params}"


def get_params(
    doclet: Doclet,
    render: Callable[[str], str],
    tag_names: tuple[str, ...] = PARAM_TAGS,
) -> list[ParameterInfo]:
    """One ParameterInfo per matching tag, in tag order."""
    return [
        ParameterInfo(
            name=tag.name,
            type=format_type(tag.type),
            description=render(tag.description or ""),
        )
        for tag in doclet.tags_titled(*tag_names)
    ]


def get_returns(doclet: Doclet, render: Callable[[str], str]) -> ReturnInfo | None:
    tag = doclet.find_tag(*RETURN_TAGS)
    if tag is None:
        return None
    return ReturnInfo(type=format_type(tag.type), description=render(tag.description or ""))


def get_library_summary(doclets: Iterable[Doclet], render: Callable[[str], str]) -> LibrarySummary:
    """Describe the library from the first doclet with a ``@fileOverview`` tag.

    Only that one doclet contributes. Without one, both name and description
    are placeholders.
    """
    overview = next((d for d in doclets if d.has_tag("fileOverview")), None)
    if overview is None:
        return LibrarySummary(
            name=DEFAULT_LIBRARY_NAME,
            description=render(DEFAULT_LIBRARY_DESCRIPTION),
        )

    description = overview.tag_description("fileOverview") or overview.description
    name = overview.tag_description("name")

    return LibrarySummary(
        name=name or DEFAULT_LIBRARY_NAME,
        description=render(description or DEFAULT_LIBRARY_DESCRIPTION),
    )


def create_type_info(doclet: Doclet, render: Callable[[str], str]) -> TypeInfo:
    """Describe a custom type declared with ``@typedef``."""
    tag = doclet.find_tag("typedef")
    name = (tag.name or tag.description or "") if tag is not None else ""
    return TypeInfo(
        name=name,
        identifier=to_identifier(name),
        description=render(doclet.description),
        properties=get_params(doclet, render, ("property", "prop")),
    )
