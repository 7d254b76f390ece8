"""Rule evaluation: walk a document against its schema and collect violations.

Field rules run in declaration order. A missing required field yields exactly one
``required`` violation; its other constraints and every rule nested below it
are skipped. Sibling rules are otherwise independent, so one pass reports the
complete set of violations.
"""

import logging
from dataclasses import dataclass
from typing import Any

from .document import Document, FieldValue
from .predicates import Constraint, format_value
from .schema import FieldRule, Schema, TraversalMode

logger = logging.getLogger(__name__)


def _is_sequence(value: FieldValue, param: Any = None) -> bool:
    return value.is_sequence


# Reported when a dive rule meets a value that is not a list
SEQUENCE_SHAPE = Constraint("dive", _is_sequence)


@dataclass(frozen=True)
class Violation:
    """One failed constraint evaluation."""
    kind: str
    name: str | None
    path: str
    constraint: Constraint
    value: Any = None
    index: int | None = None

    @property
    def constraint_name(self) -> str:
        return self.constraint.name

    @property
    def param(self) -> str:
        return self.constraint.describe_param()

    @property
    def observed(self) -> str:
        return format_value(self.value)


class RuleEvaluator:
    """Evaluates a single document against a single schema."""

    def __init__(self, document: Document, schema: Schema):
        self.document = document
        self.schema = schema
        self._kind = document.kind or schema.kind
        self._name = document.name

    def evaluate(self) -> list[Violation]:
        violations = self._evaluate_rules(self.schema.rules, self.document.root, "")
        logger.debug(f"{self.document}: {len(violations)} violation(s)")
        return violations

    def _evaluate_rules(
        self, rules: tuple[FieldRule, ...], base: FieldValue, prefix: str, index: int | None = None
    ) -> list[Violation]:
        violations: list[Violation] = []
        missing: list[str] = []
        failed_groups: set[str] = set()

        for field_rule in rules:
            if any(field_rule.path.startswith(f"{path}.") for path in missing):
                continue
            if field_rule.group in failed_groups:
                continue

            value = base.lookup(field_rule.path)
            full_path = f"{prefix}.{field_rule.path}" if prefix else field_rule.path

            if field_rule.mode == TraversalMode.DIVE:
                produced = self._dive(field_rule, value, full_path)
            else:
                produced = self._check(field_rule.constraints, value, full_path, index)

            if value.is_absent and field_rule.is_required:
                missing.append(field_rule.path)
            if produced and field_rule.group in self.schema.fail_fast_groups:
                failed_groups.add(field_rule.group)
            violations.extend(produced)

        return violations

    def _dive(self, field_rule: FieldRule, value: FieldValue, path: str) -> list[Violation]:
        if value.is_absent:
            return self._check(field_rule.constraints, value, path)
        if not value.is_sequence:
            return [self._violation(path, SEQUENCE_SHAPE, value)]

        violations: list[Violation] = []
        for position, element in enumerate(value.elements()):
            element_path = f"{path}[{position}]"
            element_violations = self._check(field_rule.constraints, element, element_path, position)
            violations.extend(element_violations)
            if element.is_absent and element_violations:
                continue
            violations.extend(
                self._evaluate_rules(field_rule.element_rules, element, element_path, position)
            )
        return violations

    def _check(
        self, constraints: tuple[Constraint, ...], value: FieldValue, path: str, index: int | None = None
    ) -> list[Violation]:
        if value.is_absent:
            for constraint in constraints:
                if constraint.name == "required":
                    return [self._violation(path, constraint, value, index)]
            return [
                self._violation(path, constraint, value, index)
                for constraint in constraints
                if constraint.applies_to_absent and not constraint(value)
            ]

        return [
            self._violation(path, constraint, value, index)
            for constraint in constraints
            if not constraint(value)
        ]

    def _violation(
        self, path: str, constraint: Constraint, value: FieldValue, index: int | None = None
    ) -> Violation:
        return Violation(
            kind=self._kind,
            name=self._name,
            path=path,
            constraint=constraint,
            value=value.raw,
            index=index,
        )


def evaluate(document: Document, schema: Schema) -> list[Violation]:
    """Evaluate ``document`` against ``schema`` and return its violations in order."""
    return RuleEvaluator(document, schema).evaluate()
