"""Tests for validation framework core functionality."""

import logging

import pytest

from component_validator.config import EngineConfig, ValidatorConfig
from component_validator.validation.document import Document
from component_validator.validation.framework import (
    DocumentResult,
    StructuralFailure,
    ValidationFramework,
    ValidationResult,
    ValidationStatus,
    aggregate,
    check_structure,
)
from component_validator.validation.predicates import kebab_case, required
from component_validator.validation.schema import Schema, SchemaRegistry, rule


def pipeline(name="my-pipeline", api_version="tekton.dev/v1", position=1):
    return Document(
        body={"apiVersion": api_version, "kind": "Pipeline", "metadata": {"name": name}},
        position=position,
    )


@pytest.fixture
def framework():
    return ValidationFramework()


class TestValidationResult:
    """Test ValidationResult class."""

    def test_initial_status(self):
        result = ValidationResult()
        assert result.status == ValidationStatus.PASS
        assert result.passed is True
        assert result.exit_code == 0

    def test_status_with_violations(self, framework):
        result = framework.validate_batch([pipeline(name="Bad_Name")])
        assert result.status == ValidationStatus.FAIL
        assert result.exit_code == 1

    def test_structural_failure_takes_precedence(self, framework):
        result = framework.validate_batch([pipeline(name="Bad_Name"), Document(body="text", position=2)])
        assert result.status == ValidationStatus.ERROR
        assert result.exit_code == 2

    def test_to_dict(self, framework):
        result = framework.validate_batch([pipeline(name="Bad_Name"), Document(body={"kind": "Task"}, position=2)])
        data = result.to_dict()

        assert data["status"] == "error"
        assert data["exit_code"] == 2
        assert data["messages"] == [
            "Pipeline/Bad_Name Key 'metadata.name': Bad_Name does not appear to be in kebab-case"
        ]
        assert data["failures"] == [
            {"position": 2, "source": None, "reason": "missing required field 'apiVersion'"}
        ]
        assert data["counters"]["documents"] == 2


class TestCheckStructure:
    """Test structural failure detection."""

    def test_valid_structure(self):
        assert check_structure(pipeline()) is None

    @pytest.mark.parametrize("body, reason", [
        (["a", "list"], "expected a mapping but found list"),
        ({"apiVersion": "v1"}, "missing required field 'kind'"),
        ({"kind": "Task"}, "missing required field 'apiVersion'"),
        ({"kind": "Task", "apiVersion": None}, "missing required field 'apiVersion'"),
        ({"kind": "Task", "apiVersion": 1}, "field 'apiVersion' must be a string"),
        ({"kind": ["Task"], "apiVersion": "v1"}, "field 'kind' must be a string"),
    ])
    def test_failures(self, body, reason):
        failure = check_structure(Document(body=body, position=3, source="carvel.yaml"))
        assert failure == StructuralFailure(3, reason, "carvel.yaml")
        assert str(failure) == f"document 3 in carvel.yaml: {reason}"

    def test_undecodable_document(self):
        document = Document(body=None, position=2, source="carvel.yaml", error="line 7: mapping values are not allowed here")
        failure = check_structure(document)

        assert failure.reason == "could not be decoded: line 7: mapping values are not allowed here"
        assert failure.position == 2


class TestValidateBatch:
    """Test batch validation and aggregation."""

    def test_valid_batch_passes(self, framework):
        result = framework.validate_batch([pipeline(), pipeline(name="other-pipeline")])
        assert result.passed
        assert result.messages == []
        assert result.counters["validated"] == 2

    def test_violation_attributed_to_second_document(self, framework):
        result = framework.validate_batch([pipeline(), pipeline(name="second", api_version="tekton.dev/v1beta1")])

        assert result.messages == [
            "Pipeline/second Key 'apiVersion': Expected tekton.dev/v1beta1 to equal tekton.dev/v1"
        ]
        assert [v.name for v in result.violations] == ["second"]

    def test_unknown_kind_is_skipped_and_logged(self, framework, caplog):
        config_map = Document(body={"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "cfg"}})

        with caplog.at_level(logging.WARNING):
            result = framework.validate_batch([pipeline(), config_map, pipeline(name="other-pipeline")])

        assert result.passed
        assert result.status == ValidationStatus.PASS
        assert result.counters["skipped"] == 1
        assert "no validation specified for ConfigMap" in caplog.text

    def test_structural_failure_does_not_stop_batch(self, framework):
        documents = [
            Document(body={"metadata": {"name": "nameless"}}, position=1),
            pipeline(name="Bad_Name", position=2),
        ]
        result = framework.validate_batch(documents)

        assert [f.position for f in result.failures] == [1]
        assert result.messages == [
            "Pipeline/Bad_Name Key 'metadata.name': Bad_Name does not appear to be in kebab-case"
        ]

    def test_empty_batch(self, framework):
        result = framework.validate_batch([])
        assert result.passed
        assert result.counters == {"violations": 0}

    def test_parallel_evaluation_keeps_input_order(self):
        documents = [pipeline(name=f"Bad_{i}", position=i) for i in range(20)]
        sequential = ValidationFramework().validate_batch(documents)
        parallel = ValidationFramework(ValidatorConfig(engine=EngineConfig(max_workers=4))).validate_batch(documents)

        assert parallel.messages == sequential.messages
        assert [v.name for v in parallel.violations] == [f"Bad_{i}" for i in range(20)]


class TestSchemaRegistration:
    """Test extending the supported kinds."""

    WIDGET = Schema("Widget", "example.dev/v1", (rule("metadata.name", required(), kebab_case()),))

    def test_register_schema(self, framework):
        framework.register_schema("Widget", self.WIDGET)
        widget = Document(body={"apiVersion": "example.dev/v1", "kind": "Widget", "metadata": {"name": "MyWidget"}})

        result = framework.validate_batch([widget])

        assert result.messages == [
            "Widget/MyWidget Key 'metadata.name': MyWidget does not appear to be in kebab-case"
        ]

    def test_duplicate_registration_rejected(self, framework):
        with pytest.raises(ValueError, match="already registered"):
            framework.register_schema("Task", self.WIDGET)

    def test_replace_registration(self, framework):
        framework.register_schema("Pipeline", self.WIDGET, replace=True)
        assert framework.registry.lookup("Pipeline") is self.WIDGET

    def test_custom_registry(self):
        framework = ValidationFramework(registry=SchemaRegistry())
        result = framework.validate_batch([pipeline(name="Bad_Name")])

        assert result.passed
        assert result.counters["skipped"] == 1


def test_aggregate_orders_by_document():
    first, second = pipeline(position=1), pipeline(position=2)
    results = [
        DocumentResult(first, messages=["a1", "a2"]),
        DocumentResult(second, messages=["b1"]),
    ]
    assert aggregate(results).messages == ["a1", "a2", "b1"]
