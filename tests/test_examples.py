import json

import pytest

from slate_docgen.errors import DanglingReference, ExampleSerializationError
from slate_docgen.generator.examples import ExampleSynthesizer, to_json
from slate_docgen.parser.base import (
    ArrayModel,
    ArrayProperty,
    BooleanProperty,
    ComposedModel,
    DateProperty,
    DateTimeProperty,
    DoubleProperty,
    IntegerProperty,
    LongProperty,
    MapProperty,
    ModelImpl,
    ObjectProperty,
    Operation,
    Parameter,
    RefModel,
    RefProperty,
    StringProperty,
)

DEFINITIONS = {
    "Pet": ModelImpl(properties={
        "name": StringProperty(required=True),
        "age": IntegerProperty(),
        "owner": RefProperty(ref="Owner"),
    }),
    "Owner": ModelImpl(properties={
        "name": StringProperty(),
        "pets": ArrayProperty(items=RefProperty(ref="Pet")),
    }),
    "Node": ModelImpl(properties={"next": RefProperty(ref="Node"), "value": DoubleProperty()}),
    "Pets": ArrayModel(items=RefProperty(ref="Pet")),
    "Tree": ArrayModel(items=RefProperty(ref="Tree")),
}


@pytest.fixture
def synthesizer():
    return ExampleSynthesizer(DEFINITIONS)


class TestLeafPolicy:
    def test_explicit_example_wins(self, synthesizer):
        assert synthesizer.synthesize(StringProperty(example="Fido")) == "Fido"
        assert synthesizer.synthesize(RefProperty(ref="Pet", example={"x": 1})) == {"x": 1}

    def test_type_defaults(self, synthesizer):
        assert synthesizer.synthesize(StringProperty()) == "str"
        assert synthesizer.synthesize(IntegerProperty()) == 1
        assert synthesizer.synthesize(LongProperty()) == 1
        assert synthesizer.synthesize(DoubleProperty()) == 1.0
        assert synthesizer.synthesize(BooleanProperty()) is True
        assert synthesizer.synthesize(DateProperty()) == "2015-01-20"
        assert synthesizer.synthesize(DateTimeProperty()) == "2016-03-03T10:15:30.00Z"
        assert synthesizer.synthesize(MapProperty()) == {"prop": {}}
        assert synthesizer.synthesize(ObjectProperty()) == "object"

    def test_first_enum_literal(self, synthesizer):
        assert synthesizer.synthesize(StringProperty(enum=["sold", "available"])) == "sold"

    def test_inline_object_properties(self, synthesizer):
        prop = ObjectProperty(properties={"a": IntegerProperty()})
        assert synthesizer.synthesize(prop) == {"a": 1}


class TestStructures:
    def test_array_single_element(self, synthesizer):
        assert synthesizer.synthesize(ArrayProperty(items=IntegerProperty())) == [1]

    def test_reference_expands_definition(self, synthesizer):
        value = synthesizer.synthesize(RefProperty(ref="Owner"))
        assert value["name"] == "str"
        assert value["pets"][0]["name"] == "str"
        assert value["pets"][0]["owner"] == {}

    def test_self_reference_terminates(self, synthesizer):
        value = synthesizer.synthesize(RefModel(ref="Node"))
        assert value == {"next": {}, "value": 1.0}
        json.loads(to_json(value))

    def test_self_referential_array_terminates(self, synthesizer):
        assert synthesizer.synthesize(RefModel(ref="Tree")) == [[]]

    def test_composed_union_later_overrides(self, synthesizer):
        model = ComposedModel(all_of=[
            ModelImpl(properties={"a": StringProperty(), "b": StringProperty()}),
            ModelImpl(properties={"b": IntegerProperty(), "c": BooleanProperty()}),
        ])
        value = synthesizer.synthesize(model)
        assert value == {"a": "str", "b": 1, "c": True}
        assert list(value) == ["a", "b", "c"]

    def test_dangling_reference_raises(self, synthesizer):
        with pytest.raises(DanglingReference):
            synthesizer.synthesize(RefProperty(ref="Ghost"))


class TestOperationPayload:
    def test_body_reference(self, synthesizer):
        op = Operation(parameters=[Parameter(name="body", location="body", schema=RefModel(ref="Pet"))])
        payload = json.loads(synthesizer.operation_payload(op))
        assert payload["name"] == "str"
        assert payload["age"] == 1

    def test_body_array_definition_shows_one_item(self, synthesizer):
        op = Operation(parameters=[Parameter(name="body", location="body", schema=RefModel(ref="Pets"))])
        payload = json.loads(synthesizer.operation_payload(op))
        assert isinstance(payload, list)
        assert len(payload) == 1
        assert payload[0]["name"] == "str"

    def test_body_with_path_parameter(self, synthesizer):
        op = Operation(parameters=[
            Parameter(name="id", location="path", property=StringProperty()),
            Parameter(name="body", location="body", schema=ModelImpl(properties={"x": BooleanProperty()})),
        ])
        assert json.loads(synthesizer.operation_payload(op)) == {"x": True}

    def test_form_parameters(self, synthesizer):
        op = Operation(parameters=[
            Parameter(name="petId", location="form", property=LongProperty()),
            Parameter(name="note", location="form", property=StringProperty()),
            Parameter(name="q", location="query", property=StringProperty()),
        ])
        assert json.loads(synthesizer.operation_payload(op)) == {"petId": 1, "note": "str"}

    def test_no_payload(self, synthesizer):
        op = Operation(parameters=[Parameter(name="q", location="query", property=StringProperty())])
        assert synthesizer.operation_payload(op) is None

    def test_payload_is_indented(self, synthesizer):
        op = Operation(parameters=[Parameter(name="a", location="form", property=IntegerProperty())])
        assert synthesizer.operation_payload(op) == '{\n  "a": 1\n}'


class TestToJson:
    def test_unserializable_fails_loudly(self):
        with pytest.raises(ExampleSerializationError):
            to_json({"when": object()})

    def test_nan_rejected(self):
        with pytest.raises(ExampleSerializationError):
            to_json(float("nan"))
