"""Tests for the document model and field-path lookup."""

from component_validator.validation.document import ABSENT, Document, FieldValue, ValueShape


def make_document():
    return Document(
        body={
            "apiVersion": "tekton.dev/v1",
            "kind": "Task",
            "metadata": {"name": "my-task", "labels": {}},
            "spec": {
                "description": "",
                "params": [],
                "stepTemplate": {"securityContext": {"runAsUser": 0}},
                "nothing": None,
            },
        },
        position=1,
    )


class TestFieldValue:
    """Test shape tagging of raw values."""

    def test_shapes(self):
        assert FieldValue.of("x").shape == ValueShape.SCALAR
        assert FieldValue.of(0).shape == ValueShape.SCALAR
        assert FieldValue.of(False).shape == ValueShape.SCALAR
        assert FieldValue.of({}).shape == ValueShape.MAPPING
        assert FieldValue.of([]).shape == ValueShape.SEQUENCE
        assert FieldValue.of(None) is ABSENT

    def test_strings_are_not_sequences(self):
        assert FieldValue.of("ALL").is_scalar

    def test_elements(self):
        elements = FieldValue.of(["a", {"name": "b"}]).elements()
        assert [e.shape for e in elements] == [ValueShape.SCALAR, ValueShape.MAPPING]
        assert FieldValue.of("a").elements() == []


class TestDocumentLookup:
    """Test field-path lookup distinguishes absence from emptiness."""

    def test_identity_fields(self):
        document = make_document()
        assert document.kind == "Task"
        assert document.api_version == "tekton.dev/v1"
        assert document.name == "my-task"
        assert str(document) == "Task/my-task"

    def test_nested_lookup(self):
        value = make_document().lookup("spec.stepTemplate.securityContext.runAsUser")
        assert value.is_scalar
        assert value.raw == 0

    def test_absent_path(self):
        document = make_document()
        assert document.lookup("spec.results").is_absent
        assert document.lookup("spec.stepTemplate.securityContext.seccompProfile.type").is_absent

    def test_present_but_empty_values_are_present(self):
        document = make_document()
        assert not document.lookup("spec.description").is_absent
        assert not document.lookup("spec.params").is_absent
        assert not document.lookup("metadata.labels").is_absent
        assert not document.lookup("spec.stepTemplate.securityContext.runAsUser").is_absent

    def test_null_is_absent(self):
        assert make_document().lookup("spec.nothing").is_absent

    def test_lookup_through_scalar_is_absent(self):
        assert make_document().lookup("metadata.name.first").is_absent

    def test_non_mapping_document(self):
        document = Document(body=["not", "a", "mapping"])
        assert not document.is_mapping
        assert document.kind is None
        assert document.lookup("kind").is_absent
        assert str(document) == "<no kind>/<unnamed>"

    def test_non_string_kind_is_not_a_kind(self):
        assert Document(body={"kind": 5}).kind is None
