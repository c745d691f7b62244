import logging

import pytest

from slate_docgen.errors import DanglingReference
from slate_docgen.generator.types import TypeResolver, default_value
from slate_docgen.parser.base import (
    ArrayModel,
    ArrayProperty,
    BooleanProperty,
    ComposedModel,
    DateTimeProperty,
    DoubleProperty,
    IntegerProperty,
    LongProperty,
    MapProperty,
    ModelImpl,
    Parameter,
    RefModel,
    RefProperty,
    StringProperty,
)

DEFINITIONS = {
    "Pet": ModelImpl(properties={"name": StringProperty(required=True), "age": IntegerProperty()}),
}


@pytest.fixture
def resolver():
    return TypeResolver(DEFINITIONS)


class TestResolve:
    def test_reference_links_and_registers(self, resolver):
        refs = set()
        assert resolver.resolve(RefProperty(ref="Pet"), refs) == "[Pet](#pet)"
        assert refs == {"Pet"}

    def test_reference_model(self, resolver):
        refs = set()
        assert resolver.resolve(RefModel(ref="Pet"), refs) == "[Pet](#pet)"
        assert "Pet" in refs

    def test_array_of_references(self, resolver):
        refs = set()
        label = resolver.resolve(ArrayProperty(items=RefProperty(ref="Pet")), refs)
        assert label == "[Pet](#pet) array"
        assert refs == {"Pet"}

    def test_nested_arrays(self, resolver):
        prop = ArrayProperty(items=ArrayProperty(items=StringProperty()))
        assert resolver.resolve(prop, set()) == "string array array"

    def test_array_model(self, resolver):
        assert resolver.resolve(ArrayModel(items=IntegerProperty(format="int32")), set()) == "integer (int32) array"

    def test_string_enum(self, resolver):
        prop = StringProperty(enum=["available", "pending", "sold"])
        assert resolver.resolve(prop, set()) == "enum (available, pending, sold)"

    def test_type_with_format(self, resolver):
        assert resolver.resolve(LongProperty(format="int64"), set()) == "integer (int64)"
        assert resolver.resolve(DateTimeProperty(format="date-time"), set()) == "string (date-time)"
        assert resolver.resolve(DoubleProperty(format="double"), set()) == "number (double)"

    def test_type_without_format(self, resolver):
        assert resolver.resolve(BooleanProperty(), set()) == "boolean"
        assert resolver.resolve(MapProperty(), set()) == "object"

    def test_blank_format_ignored(self, resolver):
        assert resolver.resolve(StringProperty(format="  "), set()) == "string"

    def test_plain_and_composed_models(self, resolver):
        assert resolver.resolve(ModelImpl(), set()) == "object"
        assert resolver.resolve(ComposedModel(all_of=[RefModel(ref="Pet")]), set()) == "object"

    def test_dangling_reference_raises(self, resolver):
        refs = set()
        with pytest.raises(DanglingReference) as exc:
            resolver.resolve(ArrayProperty(items=RefProperty(ref="Ghost")), refs)
        assert exc.value.name == "Ghost"
        assert refs == set()

    def test_deterministic(self, resolver):
        prop = ArrayProperty(items=RefProperty(ref="Pet"))
        assert resolver.resolve(prop, set()) == resolver.resolve(prop, set())


class TestLabel:
    def test_dangling_reference_degrades_to_placeholder(self, resolver, caplog):
        with caplog.at_level(logging.WARNING):
            label = resolver.label(RefProperty(ref="Ghost"), set())
        assert label == "Ghost (undefined)"
        assert "Ghost" in caplog.text

    def test_none_is_empty(self, resolver):
        assert resolver.label(None, set()) == ""


class TestResolveParameter:
    def test_body_parameter_redirects_to_schema(self, resolver):
        refs = set()
        param = Parameter(name="body", location="body", schema=RefModel(ref="Pet"))
        assert resolver.resolve_parameter(param, refs) == "[Pet](#pet)"
        assert refs == {"Pet"}

    def test_body_parameter_without_schema(self, resolver):
        param = Parameter(name="body", location="body")
        assert resolver.resolve_parameter(param, set()) == "string"

    def test_query_enum(self, resolver):
        param = Parameter(name="status", location="query", property=StringProperty(enum=["a", "b"]))
        assert resolver.resolve_parameter(param, set()) == "enum (a, b)"

    def test_array_collection_format(self, resolver):
        param = Parameter(
            name="ids",
            location="query",
            property=ArrayProperty(items=StringProperty()),
            collection_format="csv",
        )
        assert resolver.resolve_parameter(param, set()) == "csv string array"

    def test_reference_parameter_registers(self, resolver):
        refs = set()
        param = Parameter(name="Limit", location="query", ref="Limit")
        assert resolver.resolve_parameter(param, refs) == "[Limit](#limit)"
        assert refs == {"Limit"}


class TestDefaultValue:
    def test_defaults(self):
        assert default_value(StringProperty()) == ""
        assert default_value(StringProperty(default="x")) == "x"
        assert default_value(BooleanProperty(default=False)) == "false"
        assert default_value(IntegerProperty(default=3)) == "3"
