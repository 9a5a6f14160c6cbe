"""Output generators: HTML through a template engine, and JSON."""

from __future__ import annotations

import dataclasses
import json
import re
from importlib import resources
from typing import Any, Protocol

import jinja2
from markupsafe import Markup

from .errors import TemplateError
from .models import LibraryInfo

DEFAULT_TEMPLATE = "docs.html.j2"


class TemplateEngine(Protocol):
    """Renders template source text with data and named partials."""

    def render(self, template: str, data: dict[str, Any], partials: dict[str, str]) -> str: ...


class JinjaTemplateEngine:
    """Jinja2 template engine; partials are available to ``{% include %}``.

    Output is autoescaped, so fields that already hold HTML need ``|safe``
    and code placed inside ``<script>`` needs ``|script``.
    """

    def render(self, template: str, data: dict[str, Any], partials: dict[str, str]) -> str:
        env = jinja2.Environment(
            loader=jinja2.DictLoader(partials),
            autoescape=True,
            keep_trailing_newline=True,
        )
        env.filters["script"] = script_safe
        try:
            return env.from_string(template).render(**data)
        except jinja2.TemplateError as e:
            raise TemplateError(f"Template rendering failed: {e}") from e


def script_safe(value: object) -> Markup:
    """Mark text for embedding in a <script> element.

    Entities are not decoded inside <script>, so the text is kept as is
    apart from "</", which could close the element early.
    """
    return Markup(str(value).replace("</", "<\\/"))


def load_default_template() -> str:
    """The HTML template shipped with litdoc."""
    return resources.files("litdoc").joinpath("templates", DEFAULT_TEMPLATE).read_text()


def filter_by_grep(library: LibraryInfo, pattern: str) -> LibraryInfo:
    """Keep only members whose full name matches ``pattern`` (searched, not anchored)."""
    regex = re.compile(pattern)
    namespaces = [
        dataclasses.replace(ns, all_members=[m for m in ns.all_members if regex.search(m.name)])
        for ns in library.namespaces
    ]
    docs = [doc for doc in library.docs if regex.search(doc.name)]
    return dataclasses.replace(library, namespaces=namespaces, docs=docs)


def build_template_data(
    library: LibraryInfo,
    javascripts: list[str] | None = None,
    extra_options: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Top-level template variables: the library fields plus extras.

    ``extra_options`` win over library fields of the same name.
    """
    data = {f.name: getattr(library, f.name) for f in dataclasses.fields(library)}
    data["javascripts"] = list(javascripts or [])
    data.update(extra_options or {})
    return data


def _to_data(value: Any) -> Any:
    """Like dataclasses.asdict, but derived properties are included too."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = {f.name: _to_data(getattr(value, f.name)) for f in dataclasses.fields(value)}
        for name, attr in vars(type(value)).items():
            if isinstance(attr, property):
                data[name] = _to_data(getattr(value, name))
        return data
    if isinstance(value, (list, tuple)):
        return [_to_data(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_data(v) for k, v in value.items()}
    return value


def generate_json(library: LibraryInfo) -> str:
    """Serialize a LibraryInfo, e.g. for tooling that renders it elsewhere."""
    return json.dumps(_to_data(library), indent=2)
