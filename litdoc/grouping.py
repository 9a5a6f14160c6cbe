"""Group documented functions by namespace for presentation."""

from __future__ import annotations

from .models import PRIVATE_NAMESPACE, FunctionInfo, NamespaceInfo


def namespace_key(fn: FunctionInfo) -> str:
    """The group a function belongs to.

    Private functions all share one synthetic group; a function with no
    namespace is its own group (and usually that group's constructor).
    """
    if fn.is_private:
        return PRIVATE_NAMESPACE
    return fn.namespace or fn.short_name


def group_by_namespace(functions: list[FunctionInfo]) -> dict[str, list[FunctionInfo]]:
    """Bucket functions by namespace key, keys in first-seen order."""
    groups: dict[str, list[FunctionInfo]] = {}
    for fn in functions:
        groups.setdefault(namespace_key(fn), []).append(fn)
    return groups


def member_sort_key(fn: FunctionInfo) -> tuple[int, str]:
    """Static members first, then instance members, each alphabetically."""
    return (0 if fn.is_static else 1, fn.short_name)


def create_namespace_info(groups: dict[str, list[FunctionInfo]], namespace: str) -> NamespaceInfo:
    # The constructor can live in another group (e.g. a private class)
    constructor = next(
        (fn for group in groups.values() for fn in group if fn.name == namespace),
        None,
    )

    members = sorted(
        (fn for fn in groups.get(namespace, []) if fn.name != namespace),
        key=member_sort_key,
    )
    all_members = ([constructor] if constructor is not None else []) + members
    private_members = sorted((m for m in all_members if m.is_private), key=lambda m: m.name)

    return NamespaceInfo(
        namespace=namespace,
        constructor_method=constructor,
        members=members,
        private_members=private_members,
        all_members=all_members,
    )


def group_namespaces(
    functions: list[FunctionInfo], namespaces: list[str] | None = None
) -> list[NamespaceInfo]:
    """Build one NamespaceInfo per namespace.

    Args:
        functions: Every FunctionInfo from one parse
        namespaces: Namespaces to include, in order. Defaults to every
            namespace present, in the order first seen.

    Returns:
        NamespaceInfo list in the order of ``namespaces``
    """
    groups = group_by_namespace(functions)
    if not namespaces:
        namespaces = list(groups)
    return [create_namespace_info(groups, ns) for ns in namespaces]
