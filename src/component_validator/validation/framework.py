"""Core validation framework for component manifests.

Looks up each document's schema, evaluates its field rules and aggregates the
rendered violations of a whole batch into a single ``ValidationResult``.
"""

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum

from ..config import ValidatorConfig
from .document import Document
from .evaluator import Violation, evaluate
from .kinds import default_registry
from .schema import Schema, SchemaRegistry
from .translator import translate

logger = logging.getLogger(__name__)


class ValidationStatus(str, Enum):
    """Overall outcome of a batch."""
    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"


@dataclass(frozen=True)
class StructuralFailure:
    """A document that could not be interpreted as a manifest at all."""
    position: int
    reason: str
    source: str | None = None

    def __str__(self) -> str:
        location = f" in {self.source}" if self.source else ""
        return f"document {self.position}{location}: {self.reason}"


@dataclass
class DocumentResult:
    """Outcome of validating one document."""
    document: Document
    violations: list[Violation] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)
    failure: StructuralFailure | None = None
    skipped: bool = False


@dataclass
class ValidationResult:
    """Aggregate outcome of validating a batch."""
    messages: list[str] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)
    failures: list[StructuralFailure] = field(default_factory=list)
    counters: dict[str, int] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return not self.violations and not self.failures

    @property
    def status(self) -> ValidationStatus:
        if self.failures:
            return ValidationStatus.ERROR
        if self.violations:
            return ValidationStatus.FAIL
        return ValidationStatus.PASS

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = pass, 1 = violations, 2 = documents that could not be validated."""
        return {
            ValidationStatus.PASS: 0,
            ValidationStatus.FAIL: 1,
            ValidationStatus.ERROR: 2,
        }[self.status]

    def increment_counter(self, name: str, value: int = 1) -> None:
        self.counters[name] = self.counters.get(name, 0) + value

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "status": self.status.value,
            "exit_code": self.exit_code,
            "counters": self.counters,
            "messages": list(self.messages),
            "failures": [
                {
                    "position": failure.position,
                    "source": failure.source,
                    "reason": failure.reason,
                }
                for failure in self.failures
            ],
        }


def _missing_or_mistyped(document: Document, key: str) -> str:
    if document.body.get(key) is not None:
        return f"field '{key}' must be a string"
    return f"missing required field '{key}'"


def check_structure(document: Document) -> StructuralFailure | None:
    """Return a failure when the document lacks the shape every manifest needs."""
    reason = None
    if document.error is not None:
        reason = f"could not be decoded: {document.error}"
    elif not document.is_mapping:
        reason = f"expected a mapping but found {type(document.body).__name__}"
    elif document.kind is None:
        reason = _missing_or_mistyped(document, "kind")
    elif document.api_version is None:
        reason = _missing_or_mistyped(document, "apiVersion")

    if reason is None:
        return None
    return StructuralFailure(document.position, reason, document.source)


def aggregate(results: Iterable[DocumentResult]) -> ValidationResult:
    """Fold per-document results, in input order, into one batch result."""
    result = ValidationResult()
    for document_result in results:
        result.increment_counter("documents")
        if document_result.failure is not None:
            result.failures.append(document_result.failure)
            result.increment_counter("structural_failures")
            continue
        if document_result.skipped:
            result.increment_counter("skipped")
            continue
        result.increment_counter("validated")
        result.violations.extend(document_result.violations)
        result.messages.extend(document_result.messages)

    result.increment_counter("violations", len(result.violations))
    return result


class ValidationFramework:
    """Validates batches of decoded manifests against registered schemas."""

    def __init__(self, config: ValidatorConfig | None = None, registry: SchemaRegistry | None = None):
        self.config = config or ValidatorConfig()
        self.registry = registry if registry is not None else default_registry(self.config.policy)

    def register_schema(self, kind: str, schema: Schema, replace: bool = False) -> None:
        """Add support for a kind. Not safe to call while a batch is being validated."""
        self.registry.register(kind, schema, replace=replace)

    def validate_document(self, document: Document) -> DocumentResult:
        failure = check_structure(document)
        if failure is not None:
            logger.error(f"Cannot validate {failure}")
            return DocumentResult(document, failure=failure)

        schema = self.registry.lookup(document.kind)
        if schema is None:
            logger.warning(f"no validation specified for {document.kind}")
            return DocumentResult(document, skipped=True)

        logger.debug(f"Validating {document} against the {schema.kind} schema")
        violations = evaluate(document, schema)
        messages = translate(document.kind, document.name, violations)
        return DocumentResult(document, violations=violations, messages=messages)

    def validate_batch(self, documents: Sequence[Document]) -> ValidationResult:
        """Validate every document and return the aggregated result.

        Documents are independent; with more than one worker they are evaluated
        in parallel, but results are still aggregated in input order.
        """
        logger.info(f"Validating {len(documents)} document(s)")

        max_workers = self.config.engine.max_workers
        if max_workers > 1 and len(documents) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                results = list(executor.map(self.validate_document, documents))
        else:
            results = [self.validate_document(document) for document in documents]

        result = aggregate(results)
        logger.info(
            f"Validation completed with status: {result.status.value} "
            f"({len(result.violations)} violation(s), {len(result.failures)} structural failure(s))"
        )
        return result
