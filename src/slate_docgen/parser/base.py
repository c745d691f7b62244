"""Data model for a parsed API specification.

The parser converts Swagger documents into these models, and the generators
only ever read them. Schema nodes are tagged unions: properties are
discriminated by ``type`` and models by ``kind``.
"""

from typing import Annotated, Any, ClassVar, Iterator, Literal, NamedTuple, Union

from pydantic import BaseModel, ConfigDict, Field

HTTP_METHODS = ("get", "put", "post", "delete", "patch", "options")


class _PropertyBase(BaseModel):
    format: str | None = None
    description: str = ""
    required: bool = False
    default: Any = None
    example: Any = None

    # Type name as it appears in the rendered document
    display_type: ClassVar[str] = "object"


class StringProperty(_PropertyBase):
    type: Literal["string"] = "string"
    enum: list[str] = []

    display_type = "string"


class IntegerProperty(_PropertyBase):
    type: Literal["integer"] = "integer"

    display_type = "integer"


class LongProperty(_PropertyBase):
    type: Literal["long"] = "long"

    display_type = "integer"


class DoubleProperty(_PropertyBase):
    type: Literal["double"] = "double"

    display_type = "number"


class BooleanProperty(_PropertyBase):
    type: Literal["boolean"] = "boolean"

    display_type = "boolean"


class DateProperty(_PropertyBase):
    type: Literal["date"] = "date"

    display_type = "string"


class DateTimeProperty(_PropertyBase):
    type: Literal["date-time"] = "date-time"

    display_type = "string"


class ArrayProperty(_PropertyBase):
    type: Literal["array"] = "array"
    items: "Property"

    display_type = "array"


class MapProperty(_PropertyBase):
    type: Literal["map"] = "map"
    additional_properties: "Property | None" = None


class ObjectProperty(_PropertyBase):
    """Inline object; ``all_of`` holds the components of an inline composition."""

    type: Literal["object"] = "object"
    properties: dict[str, "Property"] = {}
    all_of: list["Model"] = []


class RefProperty(_PropertyBase):
    """Points to a named definition."""

    type: Literal["reference"] = "reference"
    ref: str


Property = Annotated[
    Union[
        StringProperty,
        IntegerProperty,
        LongProperty,
        DoubleProperty,
        BooleanProperty,
        DateProperty,
        DateTimeProperty,
        ArrayProperty,
        MapProperty,
        ObjectProperty,
        RefProperty,
    ],
    Field(discriminator="type"),
]


class _ModelBase(BaseModel):
    description: str = ""
    example: Any = None


class ModelImpl(_ModelBase):
    """A plain model: a map of named properties."""

    kind: Literal["plain"] = "plain"
    properties: dict[str, Property] = {}


class RefModel(_ModelBase):
    kind: Literal["reference"] = "reference"
    ref: str


class ComposedModel(_ModelBase):
    """An ``allOf`` chain; later components override earlier ones."""

    kind: Literal["composed"] = "composed"
    all_of: list["Model"] = []


class ArrayModel(_ModelBase):
    kind: Literal["array"] = "array"
    items: Property


Model = Annotated[
    Union[ModelImpl, RefModel, ComposedModel, ArrayModel],
    Field(discriminator="kind"),
]

SchemaNode = Union[
    StringProperty,
    IntegerProperty,
    LongProperty,
    DoubleProperty,
    BooleanProperty,
    DateProperty,
    DateTimeProperty,
    ArrayProperty,
    MapProperty,
    ObjectProperty,
    RefProperty,
    ModelImpl,
    RefModel,
    ComposedModel,
    ArrayModel,
]

for _cls in (ArrayProperty, MapProperty, ObjectProperty, ComposedModel):
    _cls.model_rebuild()


class Parameter(BaseModel):
    """A single operation parameter.

    Non-body parameters describe their type with an inline ``property``;
    body parameters carry a ``schema`` model.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str  # body / path / header / form / query
    required: bool = False
    description: str = ""
    property: Property | None = None
    schema_: Model | None = Field(default=None, alias="schema")
    collection_format: str | None = None
    ref: str | None = None


class Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str = ""
    schema_: Model | Property | None = Field(default=None, alias="schema")
    example: Any = None


class Operation(BaseModel):
    summary: str = ""
    description: str = ""
    operation_id: str | None = None
    tags: list[str] = []
    parameters: list[Parameter] = []
    responses: dict[str, Response] = {}
    security: list[dict[str, list[str]]] | None = None


class OperationKey(NamedTuple):
    """Identity of an operation: one HTTP method on one path template."""

    path: str
    method: str  # upper-case


class Contact(BaseModel):
    name: str | None = None
    email: str | None = None
    url: str | None = None


class License(BaseModel):
    name: str | None = None
    url: str | None = None


class Info(BaseModel):
    title: str = ""
    version: str = ""
    description: str | None = None
    contact: Contact | None = None
    license: License | None = None
    terms_of_service: str | None = None


class Tag(BaseModel):
    name: str
    description: str = ""


class Specification(BaseModel):
    info: Info = Field(default_factory=Info)
    host: str | None = None
    base_path: str | None = None
    schemes: list[str] = []
    tags: list[Tag] = []
    paths: dict[str, dict[str, Operation]] = {}
    definitions: dict[str, Model] = {}

    def iter_operations(self) -> Iterator[tuple[OperationKey, Operation]]:
        """Yield every operation in path order, then GET, PUT, POST, DELETE, PATCH, OPTIONS."""
        for path, methods in self.paths.items():
            for method in HTTP_METHODS:
                operation = methods.get(method)
                if operation is not None:
                    yield OperationKey(path, method.upper()), operation
