"""Example payload synthesizer.

Walks the same schema graph as the type resolver but produces representative
values instead of labels. Self-referential definitions are cut off with a
visited set of definition names, so synthesis always terminates.
"""

import json

from slate_docgen.errors import DanglingReference, ExampleSerializationError
from slate_docgen.generator.definitions import flatten_properties
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
    Model,
    ModelImpl,
    ObjectProperty,
    Operation,
    Parameter,
    RefModel,
    RefProperty,
    SchemaNode,
    StringProperty,
)

EXAMPLE_DATE = "2015-01-20"
EXAMPLE_DATE_TIME = "2016-03-03T10:15:30.00Z"


def to_json(value) -> str:
    """Pretty-print a synthesized value, failing loudly if it cannot be encoded."""
    try:
        return json.dumps(value, indent=2, allow_nan=False, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ExampleSerializationError(f"Example generator couldn't generate a valid JSON: {e}") from e


class ExampleSynthesizer:
    """Produces example values for properties, models and parameters."""

    def __init__(self, definitions: dict[str, Model]):
        self.definitions = definitions

    def synthesize(self, node: SchemaNode, visited: frozenset[str] = frozenset()):
        if node.example is not None:
            return node.example

        if isinstance(node, StringProperty):
            return node.enum[0] if node.enum else "str"
        if isinstance(node, (IntegerProperty, LongProperty)):
            return 1
        if isinstance(node, DoubleProperty):
            return 1.0
        if isinstance(node, BooleanProperty):
            return True
        if isinstance(node, DateProperty):
            return EXAMPLE_DATE
        if isinstance(node, DateTimeProperty):
            return EXAMPLE_DATE_TIME
        if isinstance(node, MapProperty):
            return {"prop": {}}
        if isinstance(node, ObjectProperty):
            if node.all_of:
                composed = ComposedModel(all_of=[*node.all_of, ModelImpl(properties=node.properties)])
                return self.synthesize(composed, visited)
            if not node.properties:
                return "object"
            return self._mapping(node.properties, visited)
        if isinstance(node, (ArrayProperty, ArrayModel)):
            return [self.synthesize(node.items, visited)]
        if isinstance(node, (RefProperty, RefModel)):
            return self._definition(node.ref, visited)
        if isinstance(node, ModelImpl):
            return self._mapping(node.properties, visited)
        if isinstance(node, ComposedModel):
            return self._mapping(flatten_properties(node, self.definitions, visited), visited)
        raise TypeError(f"Unsupported schema node: {type(node).__name__}")

    def synthesize_parameter(self, parameter: Parameter):
        if parameter.location == "body" and parameter.schema_ is not None:
            return self.synthesize(parameter.schema_)
        if parameter.property is not None:
            return self.synthesize(parameter.property)
        return "str"

    def operation_payload(self, operation: Operation) -> str | None:
        """JSON payload for the shell example, or None without body/form parameters.

        A single body parameter is synthesized from its schema; an array
        definition is shown as one representative item. Otherwise the form
        parameters are collected into a flat mapping.
        """
        body = [p for p in operation.parameters if p.location == "body"]
        if body:
            return to_json(self._body_value(body[0]))

        form = [p for p in operation.parameters if p.location == "form"]
        if not form:
            return None
        return to_json({p.name: self.synthesize_parameter(p) for p in form})

    def _body_value(self, parameter: Parameter):
        schema = parameter.schema_
        if schema is None:
            return "str"
        visited: frozenset[str] = frozenset()
        target = schema
        if isinstance(schema, RefModel):
            target = self._lookup(schema.ref)
            visited = frozenset([schema.ref])
        if isinstance(target, ArrayModel):
            return [self.synthesize(target.items, visited)]
        return self.synthesize(schema)

    def _mapping(self, properties: dict, visited: frozenset[str]) -> dict:
        return {name: self.synthesize(prop, visited) for name, prop in properties.items()}

    def _definition(self, name: str, visited: frozenset[str]):
        target = self._lookup(name)
        if name in visited:
            return [] if isinstance(target, ArrayModel) else {}
        return self.synthesize(target, visited | {name})

    def _lookup(self, name: str) -> Model:
        try:
            return self.definitions[name]
        except KeyError:
            raise DanglingReference(name) from None
