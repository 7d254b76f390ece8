"""Declarative validation of component manifests.

Schemas bind field paths of a manifest to named predicates; the framework
evaluates every document of a batch and aggregates the rendered violations.
"""

from .document import ABSENT, Document, FieldValue, ValueShape
from .evaluator import Violation, evaluate
from .framework import (
    DocumentResult,
    StructuralFailure,
    ValidationFramework,
    ValidationResult,
    ValidationStatus,
    aggregate,
)
from .kinds import component_schema, default_registry, pipeline_schema, task_schema
from .schema import FieldRule, Schema, SchemaRegistry, TraversalMode, dive, rule
from .translator import translate

__all__ = [
    "ABSENT",
    "Document",
    "FieldValue",
    "ValueShape",
    "Violation",
    "evaluate",
    "DocumentResult",
    "StructuralFailure",
    "ValidationFramework",
    "ValidationResult",
    "ValidationStatus",
    "aggregate",
    "component_schema",
    "default_registry",
    "pipeline_schema",
    "task_schema",
    "FieldRule",
    "Schema",
    "SchemaRegistry",
    "TraversalMode",
    "dive",
    "rule",
    "translate",
]
