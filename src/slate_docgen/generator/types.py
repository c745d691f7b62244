"""Human-readable type labels for schema nodes and parameters.

Every reference the resolver links to is recorded in the caller's ``refs``
set, which later scopes the definitions appendix.
"""

import logging

from slate_docgen.errors import DanglingReference
from slate_docgen.parser.base import (
    ArrayModel,
    ArrayProperty,
    BooleanProperty,
    ComposedModel,
    Model,
    ModelImpl,
    Parameter,
    RefModel,
    RefProperty,
    SchemaNode,
    StringProperty,
)

logger = logging.getLogger(__name__)


def link(name: str) -> str:
    """Markdown link to a definition's anchor in the appendix."""
    return f"[{name}](#{name.lower()})"


def enum_label(values: list) -> str:
    return f"enum ({', '.join(str(v) for v in values)})"


def with_format(type_name: str | None, fmt: str | None) -> str:
    if fmt and fmt.strip():
        return f"{type_name or ''} ({fmt})"
    return type_name or ""


class TypeResolver:
    """Maps schema nodes to display strings such as ``[Pet](#pet) array``."""

    def __init__(self, definitions: dict[str, Model]):
        self.definitions = definitions

    def resolve(self, node: SchemaNode, refs: set[str]) -> str:
        """Resolve a property or model to its label.

        Raises DanglingReference when a reference names an unknown definition.
        """
        if isinstance(node, (RefProperty, RefModel)):
            return self._reference(node.ref, refs)
        if isinstance(node, (ArrayProperty, ArrayModel)):
            return f"{self.resolve(node.items, refs)} array"
        if isinstance(node, StringProperty) and node.enum:
            return enum_label(node.enum)
        if isinstance(node, (ModelImpl, ComposedModel)):
            return "object"
        return with_format(node.display_type, node.format)

    def resolve_parameter(self, parameter: Parameter, refs: set[str]) -> str:
        if parameter.ref:
            return self._reference(parameter.ref, refs, check=False)
        if parameter.location == "body":
            if parameter.schema_ is None:
                return "string"
            return self.resolve(parameter.schema_, refs)
        if parameter.property is None:
            return ""

        label = self.resolve(parameter.property, refs)
        if isinstance(parameter.property, ArrayProperty) and parameter.collection_format:
            label = f"{parameter.collection_format} {label}"
        return label

    def label(self, node: SchemaNode | None, refs: set[str]) -> str:
        """Like ``resolve`` but degrades dangling references to a placeholder."""
        if node is None:
            return ""
        try:
            return self.resolve(node, refs)
        except DanglingReference as e:
            logger.warning("%s Using a placeholder label.", e)
            return placeholder(e.name)

    def parameter_label(self, parameter: Parameter, refs: set[str]) -> str:
        try:
            return self.resolve_parameter(parameter, refs)
        except DanglingReference as e:
            logger.warning("%s Using a placeholder label for parameter '%s'.", e, parameter.name)
            return placeholder(e.name)

    def _reference(self, name: str, refs: set[str], check: bool = True) -> str:
        if check and name not in self.definitions:
            raise DanglingReference(name)
        refs.add(name)
        return link(name)


def placeholder(name: str) -> str:
    return f"{name} (undefined)"


def default_value(node: SchemaNode) -> str:
    """Text for the default column of a property table."""
    default = getattr(node, "default", None)
    if default is None:
        return ""
    if isinstance(node, BooleanProperty) or isinstance(default, bool):
        return str(default).lower()
    return str(default)
