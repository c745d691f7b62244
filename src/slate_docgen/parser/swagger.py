"""Swagger 2.0 document parser.

Loads a Swagger 2.0 document from a file or URL and converts it into a
Specification model.
"""

import logging
from pathlib import Path

import requests
import yaml

from slate_docgen.errors import UnsupportedSpecification
from .base import (
    HTTP_METHODS,
    ArrayModel,
    ArrayProperty,
    BooleanProperty,
    ComposedModel,
    Contact,
    DateProperty,
    DateTimeProperty,
    DoubleProperty,
    Info,
    IntegerProperty,
    License,
    LongProperty,
    MapProperty,
    ModelImpl,
    ObjectProperty,
    Operation,
    Parameter,
    RefModel,
    RefProperty,
    Response,
    Specification,
    StringProperty,
    Tag,
)
from .detect import detect_format

logger = logging.getLogger(__name__)

DEFINITIONS_PREFIX = "#/definitions/"
PARAMETERS_PREFIX = "#/parameters/"

LOCATIONS = {"formData": "form"}


def load_document(source: str | Path) -> dict:
    """Read a YAML or JSON document from a local path or an http(s) URL."""
    source = str(source)
    if source.startswith(("http://", "https://")):
        response = requests.get(source, timeout=30)
        response.raise_for_status()
        text = response.text
    else:
        text = Path(source).read_text(encoding="utf-8")
    return yaml.safe_load(text)


def load_specification(source: str | Path) -> Specification:
    """Load and parse a Swagger 2.0 specification from a path or URL."""
    return parse_swagger(load_document(source))


def parse_swagger(doc: dict) -> Specification:
    """Convert a loaded Swagger 2.0 document into a Specification."""
    fmt = detect_format(doc)
    if fmt != "swagger":
        raise UnsupportedSpecification(
            f"Only Swagger 2.0 documents are supported (detected format: {fmt})."
        )

    shared_params = doc.get("parameters") or {}
    global_security = doc.get("security")

    paths = {}
    for path, methods in (doc.get("paths") or {}).items():
        path_params = methods.get("parameters", [])
        operations = {}
        for method, operation in methods.items():
            if method.lower() not in HTTP_METHODS:
                continue
            operations[method.lower()] = _parse_operation(
                operation, path_params, shared_params, global_security
            )
        paths[path] = operations

    definitions = {
        name: _parse_model(schema) for name, schema in (doc.get("definitions") or {}).items()
    }

    tags = [
        Tag(name=t["name"], description=t.get("description") or "")
        for t in doc.get("tags") or []
    ]
    if not tags:
        tags = _collect_tags(paths)

    return Specification(
        info=_parse_info(doc.get("info") or {}),
        host=doc.get("host"),
        base_path=doc.get("basePath"),
        schemes=doc.get("schemes") or [],
        tags=tags,
        paths=paths,
        definitions=definitions,
    )


def _parse_info(info: dict) -> Info:
    contact = info.get("contact")
    license_ = info.get("license")
    return Info(
        title=info.get("title", ""),
        version=str(info.get("version", "")),
        description=info.get("description"),
        contact=Contact(**contact) if contact else None,
        license=License(**license_) if license_ else None,
        terms_of_service=info.get("termsOfService"),
    )


def _collect_tags(paths: dict[str, dict[str, Operation]]) -> list[Tag]:
    """Derive tags from operations, in order of first appearance."""
    seen: list[str] = []
    for operations in paths.values():
        for operation in operations.values():
            for name in operation.tags:
                if name not in seen:
                    seen.append(name)
    return [Tag(name=name) for name in seen]


def _parse_operation(
    operation: dict, path_params: list[dict], shared_params: dict, global_security
) -> Operation:
    params = {}
    for raw in path_params + operation.get("parameters", []):
        param = _parse_parameter(raw, shared_params)
        # Operation-level parameters override path-level ones
        params[(param.name, param.location)] = param

    responses = {
        str(code): Response(
            description=resp.get("description", ""),
            schema=_parse_response_schema(resp["schema"]) if resp.get("schema") else None,
            example=(resp.get("examples") or {}).get("application/json"),
        )
        for code, resp in (operation.get("responses") or {}).items()
    }

    return Operation(
        summary=operation.get("summary") or "",
        description=operation.get("description") or "",
        operation_id=operation.get("operationId"),
        tags=operation.get("tags") or [],
        parameters=list(params.values()),
        responses=responses,
        security=operation.get("security", global_security),
    )


def _parse_parameter(raw: dict, shared_params: dict) -> Parameter:
    if "$ref" in raw:
        ref = raw["$ref"]
        name = ref.rsplit("/", 1)[-1]
        if ref.startswith(PARAMETERS_PREFIX) and name in shared_params:
            return _parse_parameter(shared_params[name], shared_params)
        logger.warning("Parameter reference %s cannot be resolved locally.", ref)
        return Parameter(name=name, location="query", ref=name)

    location = raw.get("in", "query")
    location = LOCATIONS.get(location, location)
    common = dict(
        name=raw["name"],
        location=location,
        required=raw.get("required", False),
        description=raw.get("description") or "",
    )
    if location == "body":
        return Parameter(schema=_parse_model(raw.get("schema") or {}), **common)

    return Parameter(
        property=_parse_property(raw),
        collection_format=raw.get("collectionFormat"),
        **common,
    )


def _ref_name(ref: str) -> str:
    if ref.startswith(DEFINITIONS_PREFIX):
        return ref[len(DEFINITIONS_PREFIX):]
    return ref.rsplit("/", 1)[-1]


def _parse_model(schema: dict):
    """Convert a schema object into a Model node."""
    common = dict(description=schema.get("description") or "", example=schema.get("example"))
    if "$ref" in schema:
        return RefModel(ref=_ref_name(schema["$ref"]), **common)
    if "allOf" in schema:
        return ComposedModel(all_of=[_parse_model(s) for s in schema["allOf"]], **common)
    if schema.get("type") == "array":
        return ArrayModel(items=_parse_property(schema.get("items") or {}), **common)
    return ModelImpl(properties=_parse_properties(schema), **common)


def _parse_response_schema(schema: dict):
    # Inline object and composed schemas keep their structure as models
    if "$ref" not in schema and ("allOf" in schema or _is_inline_object(schema)):
        return _parse_model(schema)
    return _parse_property(schema)


def _is_inline_object(schema: dict) -> bool:
    return (
        schema.get("type", "object") == "object"
        and bool(schema.get("properties"))
        and not isinstance(schema.get("additionalProperties"), dict)
    )


def _parse_properties(schema: dict) -> dict:
    required = set(schema.get("required") or [])
    properties = {}
    for name, prop in (schema.get("properties") or {}).items():
        properties[name] = _parse_property(prop, required=name in required)
    return properties


def _parse_property(schema: dict, required: bool = False):
    """Convert a schema (or non-body parameter) object into a Property node."""
    common = dict(
        format=schema.get("format"),
        description=schema.get("description") or "",
        required=required,
        default=schema.get("default"),
        example=schema.get("example", schema.get("x-example")),
    )
    if "$ref" in schema:
        return RefProperty(ref=_ref_name(schema["$ref"]), **common)
    if "allOf" in schema:
        return ObjectProperty(
            all_of=[_parse_model(s) for s in schema["allOf"]], properties=_parse_properties(schema), **common
        )

    type_ = schema.get("type")
    fmt = schema.get("format")
    if type_ == "array":
        return ArrayProperty(items=_parse_property(schema.get("items") or {}), **common)
    if type_ == "string":
        if fmt == "date":
            return DateProperty(**common)
        if fmt == "date-time":
            return DateTimeProperty(**common)
        return StringProperty(enum=[str(e) for e in schema.get("enum") or []], **common)
    if type_ == "file":
        common["format"] = "binary"
        return StringProperty(**common)
    if type_ == "integer":
        if fmt == "int64":
            return LongProperty(**common)
        return IntegerProperty(**common)
    if type_ == "number":
        return DoubleProperty(**common)
    if type_ == "boolean":
        return BooleanProperty(**common)
    if isinstance(schema.get("additionalProperties"), dict):
        return MapProperty(
            additional_properties=_parse_property(schema["additionalProperties"]), **common
        )
    return ObjectProperty(properties=_parse_properties(schema), **common)
