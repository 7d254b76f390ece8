"""Named, pure predicates used as rule atoms.

Every predicate takes a ``FieldValue`` (or a raw value, which is wrapped) plus an
optional parameter and returns a bool. A value of the wrong shape makes the
predicate return False; predicates never raise on user input.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .document import FieldValue

# Canonical semver grammar from semver.org, anchored at the end of the string only.
# ASCII mode keeps \d to the digits 0-9.
SEMVER_SUFFIX_RE = re.compile(
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?\Z",
    re.ASCII,
)

_DELIMITERS_RE = re.compile(r"[-_\s]+")
_CASE_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

Predicate = Callable[[FieldValue, Any], bool]


def _wrap(value: Any) -> FieldValue:
    return value if isinstance(value, FieldValue) else FieldValue.of(value)


def _string(value: FieldValue) -> str | None:
    if value.is_scalar and isinstance(value.raw, str):
        return value.raw
    return None


def _same_value(observed: Any, expected: Any) -> bool:
    # bool is an int subclass; True must not compare equal to 1
    if isinstance(observed, bool) or isinstance(expected, bool):
        return isinstance(observed, bool) and isinstance(expected, bool) and observed is expected
    if isinstance(expected, str) != isinstance(observed, str):
        return False
    return observed == expected


def to_kebab_case(text: str) -> str:
    """Lowercase words joined by single hyphens, splitting camel and acronym boundaries."""
    words = []
    for chunk in _DELIMITERS_RE.split(text):
        if chunk:
            words.append(_CASE_BOUNDARY_RE.sub("-", chunk).lower())
    return "-".join(words)


def is_present(value: Any, param: Any = None) -> bool:
    return not _wrap(value).is_absent


def is_equal(value: Any, expected: Any) -> bool:
    value = _wrap(value)
    return value.is_scalar and _same_value(value.raw, expected)


def is_not_equal(value: Any, unexpected: Any) -> bool:
    value = _wrap(value)
    return value.is_scalar and not _same_value(value.raw, unexpected)


def is_kebab_case(value: Any, param: Any = None) -> bool:
    text = _string(_wrap(value))
    return text is not None and text == to_kebab_case(text)


def has_semver_suffix(value: Any, param: Any = None) -> bool:
    text = _string(_wrap(value))
    return text is not None and SEMVER_SUFFIX_RE.search(text) is not None


def lacks_substring(value: Any, substring: str) -> bool:
    text = _string(_wrap(value))
    return text is not None and substring not in text


def has_entry(value: Any, entry: tuple[str, str]) -> bool:
    """True iff the value is a non-empty mapping holding ``key`` mapped to exactly ``value``."""
    value = _wrap(value)
    if not value.is_mapping or len(value.raw) == 0:
        return False
    key, expected = entry
    if key not in value.raw:
        return False
    return _same_value(value.raw[key], expected)


def is_exact_set(value: Any, allowed: frozenset[str]) -> bool:
    """True iff the value is a list of strings equal to ``allowed`` as a set, with no extras."""
    value = _wrap(value)
    if not value.is_sequence:
        return False
    items = list(value.raw)
    if not all(isinstance(item, str) for item in items):
        return False
    return len(items) == len(allowed) and set(items) == set(allowed)


def is_non_empty(value: Any, param: Any = None) -> bool:
    value = _wrap(value)
    if value.is_absent:
        return False
    if value.is_mapping or value.is_sequence:
        return len(value.raw) > 0
    if isinstance(value.raw, str):
        return value.raw.strip() != ""
    return True


@dataclass(frozen=True)
class Constraint:
    """A named predicate bound to its parameter.

    ``applies_to_absent`` marks constraints that still run when an optional
    field is missing, because absence itself fails them.
    """
    name: str
    predicate: Predicate
    param: Any = None
    applies_to_absent: bool = False

    def __call__(self, value: Any) -> bool:
        return self.predicate(_wrap(value), self.param)

    def describe_param(self) -> str:
        if self.param is None:
            return ""
        if isinstance(self.param, frozenset):
            return ", ".join(sorted(self.param))
        if self.name == "contains-entry":
            key, expected = self.param
            return f"{key}: {expected}"
        return format_value(self.param)


def format_value(raw: Any) -> str:
    """Render a value the way it reads in YAML."""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if raw is None:
        return "null"
    return str(raw)


def required() -> Constraint:
    return Constraint("required", is_present)


def equals(expected: Any) -> Constraint:
    return Constraint("eq", is_equal, expected)


def not_equals(unexpected: Any) -> Constraint:
    return Constraint("ne", is_not_equal, unexpected)


def kebab_case() -> Constraint:
    return Constraint("kebab-case", is_kebab_case)


def contains_semver_suffix() -> Constraint:
    return Constraint("contains-semver", has_semver_suffix)


def not_contains(substring: str) -> Constraint:
    return Constraint("not-contains", lacks_substring, substring)


def mapping_contains_entry(key: str, value: str) -> Constraint:
    return Constraint("contains-entry", has_entry, (key, value), applies_to_absent=True)


def exact_set(allowed: Iterable[str]) -> Constraint:
    return Constraint("exact-set", is_exact_set, frozenset(allowed), applies_to_absent=True)


def non_empty() -> Constraint:
    return Constraint("non-empty", is_non_empty)
