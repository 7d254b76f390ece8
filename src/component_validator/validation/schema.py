"""Schemas and the registry that maps a document kind to its schema."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .predicates import Constraint

logger = logging.getLogger(__name__)


class TraversalMode(str, Enum):
    """How a field rule applies its constraints."""
    SCALAR = "scalar"
    DIVE = "dive"


@dataclass(frozen=True)
class FieldRule:
    """Binding of a field path to an ordered list of constraints.

    In ``DIVE`` mode the constraints run against every element of the sequence
    at ``path`` and ``element_rules`` run relative to each element.
    """
    path: str
    constraints: tuple[Constraint, ...] = ()
    mode: TraversalMode = TraversalMode.SCALAR
    element_rules: tuple["FieldRule", ...] = ()
    group: str | None = None

    @property
    def is_required(self) -> bool:
        return any(constraint.name == "required" for constraint in self.constraints)


@dataclass(frozen=True)
class Schema:
    """Ordered field rules for one document kind."""
    kind: str
    api_version: str
    rules: tuple[FieldRule, ...]
    fail_fast_groups: frozenset[str] = field(default_factory=frozenset)


def rule(path: str, *constraints: Constraint, group: str | None = None) -> FieldRule:
    """Declare a scalar field rule."""
    return FieldRule(path, tuple(constraints), group=group)


def dive(path: str, *constraints: Constraint, rules: tuple[FieldRule, ...] = ()) -> FieldRule:
    """Declare a rule applied to every element of a sequence field."""
    return FieldRule(path, tuple(constraints), TraversalMode.DIVE, tuple(rules))


class SchemaRegistry:
    """Process-wide mapping from kind to schema.

    Populated once at start-up; read-only while batches are validated.
    """

    def __init__(self, schemas: list[Schema] | None = None):
        self._schemas: dict[str, Schema] = {}
        for schema in schemas or []:
            self.register(schema.kind, schema)

    def register(self, kind: str, schema: Schema, replace: bool = False) -> None:
        """Register a schema for a kind.

        Raises:
            ValueError: If the kind is already registered and ``replace`` is False
        """
        if kind in self._schemas and not replace:
            raise ValueError(f"A schema is already registered for kind '{kind}'")
        self._schemas[kind] = schema
        logger.debug(f"Registered schema for kind {kind} with {len(schema.rules)} rules")

    def lookup(self, kind: str | None) -> Schema | None:
        """Schema for ``kind``, or None when no schema is registered."""
        if kind is None:
            return None
        return self._schemas.get(kind)

    def kinds(self) -> list[str]:
        return list(self._schemas)

    def __contains__(self, kind: str) -> bool:
        return kind in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)
