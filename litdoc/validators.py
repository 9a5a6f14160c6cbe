"""Documentation validation and quality checks."""

from __future__ import annotations

from .models import LibraryInfo, ValidationResult


def validate_docs(library: LibraryInfo, strict: bool = False) -> ValidationResult:
    """Validate extracted documentation.

    Checks:
    1. Documented functions should have a description (warning in normal
       mode, error in strict)
    2. Parameters and return values should have a type other than ``*``
       (warning)

    Args:
        library: Result of parsing one source file
        strict: If True, missing descriptions are errors instead of warnings

    Returns:
        ValidationResult with errors and warnings
    """
    result = ValidationResult()

    for doc in library.docs:
        if not doc.description.strip():
            msg = f"{doc.name}: missing description (examples only)"
            if strict:
                result.errors.append(msg)
            else:
                result.warnings.append(msg)

        for param in doc.params:
            if param.type == "*":
                result.warnings.append(f"{doc.name}: @param {param.name} has no type")

        if doc.returns is not None and doc.returns.type == "*":
            result.warnings.append(f"{doc.name}: @returns has no type")

    return result


def compute_coverage(library: LibraryInfo) -> float:
    """Fraction of named functions that are documented (0.0 - 1.0)."""
    total = len(library.all_functions)
    if total == 0:
        return 1.0
    documented = {doc.name for doc in library.docs} & set(library.all_functions)
    return len(documented) / total
