from slate_docgen.parser.base import (
    ArrayProperty,
    IntegerProperty,
    ModelImpl,
    Operation,
    OperationKey,
    Parameter,
    RefModel,
    RefProperty,
    Response,
    Specification,
    StringProperty,
)


class TestProperty:
    def test_create_string_property(self):
        p = StringProperty(enum=["a", "b"], required=True)
        assert p.type == "string"
        assert p.required is True
        assert p.description == ""
        assert p.example is None

    def test_array_items_validated_from_dict(self):
        p = ArrayProperty(items={"type": "reference", "ref": "Pet"})
        assert isinstance(p.items, RefProperty)
        assert p.items.ref == "Pet"


class TestModel:
    def test_plain_model_properties_validated_from_dict(self):
        m = ModelImpl(properties={"age": {"type": "integer"}, "name": {"type": "string"}})
        assert isinstance(m.properties["age"], IntegerProperty)
        assert list(m.properties) == ["age", "name"]


class TestParameterAndResponse:
    def test_schema_alias(self):
        param = Parameter(name="body", location="body", schema=RefModel(ref="Pet"))
        assert param.schema_.ref == "Pet"

        resp = Response(schema=RefProperty(ref="Pet"))
        assert resp.schema_.ref == "Pet"

    def test_non_body_parameter_carries_property(self):
        param = Parameter(name="id", location="path", required=True, property=StringProperty())
        assert param.schema_ is None
        assert param.property.type == "string"


class TestSpecification:
    def test_iter_operations_discovery_order(self):
        spec = Specification(
            paths={
                "/b": {"delete": Operation(), "get": Operation(), "put": Operation()},
                "/a": {"options": Operation(), "post": Operation(), "patch": Operation()},
            }
        )
        keys = [key for key, _ in spec.iter_operations()]
        assert keys == [
            OperationKey("/b", "GET"),
            OperationKey("/b", "PUT"),
            OperationKey("/b", "DELETE"),
            OperationKey("/a", "POST"),
            OperationKey("/a", "PATCH"),
            OperationKey("/a", "OPTIONS"),
        ]

    def test_operation_key_is_hashable_identity(self):
        cache = {OperationKey("/pets", "GET"): "x"}
        assert cache[OperationKey("/pets", "GET")] == "x"
