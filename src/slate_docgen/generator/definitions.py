"""Definitions appendix: one entry per definition linked from the operations."""

import logging

from slate_docgen.descriptions.loader import DescriptionLoader
from slate_docgen.generator.markdown import DocumentSink
from slate_docgen.generator.types import TypeResolver, default_value
from slate_docgen.parser.base import (
    ArrayModel,
    ComposedModel,
    Model,
    ModelImpl,
    RefModel,
    Specification,
)

logger = logging.getLogger(__name__)

DEFINITIONS = "Definitions"
IGNORED_DEFINITIONS = ("Void",)
PROPERTY_HEADER = "name|description|required|type|default"


def flatten_properties(
    model: Model, definitions: dict[str, Model], visited: frozenset[str] = frozenset()
) -> dict:
    """Collect a model's properties, unioning ``allOf`` chains depth-first.

    Later components override earlier ones on name collision. A reference
    model contributes its target's properties; array models contribute none.
    """
    if isinstance(model, RefModel):
        if model.ref in visited:
            return {}
        target = definitions.get(model.ref)
        if target is None:
            logger.warning("Reference '%s' is not defined; it contributes no properties.", model.ref)
            return {}
        return flatten_properties(target, definitions, visited | {model.ref})
    if isinstance(model, ComposedModel):
        properties = {}
        for inner in model.all_of:
            properties.update(flatten_properties(inner, definitions, visited))
        return properties
    if isinstance(model, ModelImpl):
        return dict(model.properties)
    if isinstance(model, ArrayModel):
        return {}
    raise TypeError(f"Unsupported model: {type(model).__name__}")


class DefinitionsSection:
    """Writes the trailing Definitions section, restricted to referenced names."""

    def __init__(
        self,
        spec: Specification,
        sink: DocumentSink,
        descriptions: DescriptionLoader | None = None,
    ):
        self.spec = spec
        self.sink = sink
        self.descriptions = descriptions
        self.resolver = TypeResolver(spec.definitions)

    def process(self, refs: set[str]) -> list[str]:
        """Write the appendix and return the definition names it contains."""
        selected = []
        for name in self.spec.definitions:
            if not name.strip() or name not in refs:
                continue
            if name in IGNORED_DEFINITIONS:
                logger.debug("Definition was ignored: %s", name)
                continue
            selected.append(name)

        if not selected:
            return []

        self.sink.document_title(DEFINITIONS)
        for name in selected:
            self._definition(name, self.spec.definitions[name])
            logger.info("Definition processed: %s", name)
        return selected

    def _definition(self, name: str, model: Model) -> None:
        self.sink.section_title_level1(name)
        description = self._override(name) or model.description
        if description and description.strip():
            self.sink.paragraph(description)

        properties = flatten_properties(model, self.spec.definitions)
        if not properties:
            return

        # Appendix labels never widen the appendix itself
        scratch: set[str] = set()
        rows = [PROPERTY_HEADER]
        for prop_name, prop in properties.items():
            rows.append("|".join([
                prop_name,
                cell(self._override(name, prop_name) or prop.description),
                str(prop.required).lower(),
                self.resolver.label(prop, scratch),
                cell(default_value(prop)),
            ]))
        self.sink.table_with_header_row(rows)

    def _override(self, name: str, prop_name: str | None = None) -> str | None:
        if self.descriptions is None:
            return None
        if prop_name is None:
            return self.descriptions.definition_description(name)
        return self.descriptions.property_description(name, prop_name)


def cell(text: str | None) -> str:
    """Table-safe text: trimmed, on one line, with pipes escaped."""
    if text is None or text == "null":
        return ""
    return " ".join(text.split()).replace("|", "\\|")
