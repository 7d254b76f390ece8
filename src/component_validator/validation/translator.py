"""Render violations into stable, addressable messages."""

from collections.abc import Iterable

from .evaluator import Violation

UNNAMED = "<unnamed>"

MESSAGE_TEMPLATES: dict[str, str] = {
    "required": "Key '{field}': is required",
    "eq": "Key '{field}': Expected {value} to equal {param}",
    "ne": "Key '{field}': Expected {value} to not equal {param}",
    "kebab-case": "Key '{field}': {value} does not appear to be in kebab-case",
    "contains-semver": "Key '{field}': {value} Does not end in a semantic version",
    "not-contains": "Key '{field}': {value} must not contain '{param}'",
    "contains-entry": "Key '{field}': Does not contain the key/value '{param}'",
    "exact-set": "Key '{field}': Must only contain the values [{param}]",
    "non-empty": "Key '{field}': must not be empty",
    "dive": "Key '{field}': Expected a list but found {value}",
}

FALLBACK_TEMPLATE = "Key '{field}': failed on the '{constraint}' rule"


def render(violation: Violation) -> str:
    """Render one violation without its document prefix."""
    template = MESSAGE_TEMPLATES.get(violation.constraint_name, FALLBACK_TEMPLATE)
    return template.format(
        field=violation.path,
        value=violation.observed,
        param=violation.param,
        constraint=violation.constraint_name,
    )


def document_prefix(kind: str, name: str | None) -> str:
    return f"{kind}/{name or UNNAMED}"


def translate(kind: str, name: str | None, violations: Iterable[Violation]) -> list[str]:
    """Render violations for one document, each prefixed with ``kind/name``."""
    prefix = document_prefix(kind, name)
    return [f"{prefix} {render(violation)}" for violation in violations]
