"""In-memory model of one decoded manifest.

A document wraps the generic tree produced by the decoder and exposes read-only
field-path lookup. Lookups return a ``FieldValue`` tagged with its shape so that
predicates can match on it without guessing at runtime types.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueShape(str, Enum):
    """Shape of a resolved field value."""
    ABSENT = "absent"
    SCALAR = "scalar"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


@dataclass(frozen=True)
class FieldValue:
    """A resolved field value together with its shape."""
    shape: ValueShape
    raw: Any = None

    @classmethod
    def of(cls, raw: Any) -> "FieldValue":
        """Wrap a raw decoded value. ``None`` (YAML null) counts as absent."""
        if raw is None:
            return ABSENT
        if isinstance(raw, Mapping):
            return cls(ValueShape.MAPPING, raw)
        if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
            return cls(ValueShape.SEQUENCE, raw)
        return cls(ValueShape.SCALAR, raw)

    @property
    def is_absent(self) -> bool:
        return self.shape == ValueShape.ABSENT

    @property
    def is_scalar(self) -> bool:
        return self.shape == ValueShape.SCALAR

    @property
    def is_mapping(self) -> bool:
        return self.shape == ValueShape.MAPPING

    @property
    def is_sequence(self) -> bool:
        return self.shape == ValueShape.SEQUENCE

    def lookup(self, path: str | Sequence[str]) -> "FieldValue":
        """Resolve a dotted path relative to this value."""
        current = self
        for segment in split_path(path):
            if not current.is_mapping or segment not in current.raw:
                return ABSENT
            current = FieldValue.of(current.raw[segment])
        return current

    def elements(self) -> list["FieldValue"]:
        """Elements of a sequence value, empty for any other shape."""
        if not self.is_sequence:
            return []
        return [FieldValue.of(item) for item in self.raw]


ABSENT = FieldValue(ValueShape.ABSENT)


def split_path(path: str | Sequence[str]) -> tuple[str, ...]:
    """Split a dotted field path into its segments."""
    if isinstance(path, str):
        return tuple(segment for segment in path.split(".") if segment)
    return tuple(path)


@dataclass(frozen=True)
class Document:
    """One decoded manifest from an input batch.

    ``error`` is set instead of ``body`` when the document could not be decoded.
    """
    body: Any
    position: int = 0
    source: str | None = None
    error: str | None = None

    @property
    def root(self) -> FieldValue:
        return FieldValue.of(self.body)

    @property
    def is_mapping(self) -> bool:
        return isinstance(self.body, Mapping)

    @property
    def kind(self) -> str | None:
        return self._string_at("kind")

    @property
    def api_version(self) -> str | None:
        return self._string_at("apiVersion")

    @property
    def name(self) -> str | None:
        return self._string_at("metadata.name")

    def lookup(self, path: str | Sequence[str]) -> FieldValue:
        """Resolve a dotted field path against the document body.

        Returns ``ABSENT`` when any segment is missing or when an intermediate
        segment is not a mapping.
        """
        return self.root.lookup(path)

    def _string_at(self, path: str) -> str | None:
        value = self.lookup(path)
        if value.is_scalar and isinstance(value.raw, str):
            return value.raw
        return None

    def __str__(self) -> str:
        return f"{self.kind or '<no kind>'}/{self.name or '<unnamed>'}"
