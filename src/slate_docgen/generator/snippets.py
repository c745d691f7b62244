"""Snippet renderer — binds operation metadata into per-language example templates."""

import json
import keyword
import re
from pathlib import Path
from typing import Protocol

from jinja2 import BaseLoader, Environment, FileSystemLoader, Template, TemplateNotFound

from slate_docgen.config import LanguageConfig
from slate_docgen.errors import MissingTemplateResource, UnsupportedLanguage
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
    OperationKey,
    Parameter,
    RefModel,
    RefProperty,
    SchemaNode,
    Specification,
    StringProperty,
)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
TEMPLATE_SUFFIX = "_api_example.j2"


def camelize(text: str, lower_first: bool = False) -> str:
    words = [w for w in re.split(r"[^A-Za-z0-9]+", text) if w]
    result = "".join(w[:1].upper() + w[1:] for w in words)
    if lower_first:
        result = result[:1].lower() + result[1:]
    return result


def underscore(text: str) -> str:
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", text)
    text = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", text)
    text = re.sub(r"[^A-Za-z0-9]+", "_", text)
    return text.strip("_").lower()


def generated_operation_id(key: OperationKey) -> str:
    """Operation id for operations without one, e.g. 'petsIdGet' for GET /pets/{id}."""
    base = camelize(key.path, lower_first=True) or "root"
    return base + key.method.capitalize()


class LanguageProfile:
    """Naming conventions and type vocabulary of one client language."""

    name = ""
    default_api_package = ""
    default_model_package = ""
    any_type = "Object"
    any_example = "null"
    scalar_types: dict[type, str] = {}
    scalar_examples: dict[type, str] = {}

    def api_class_name(self, tag: str) -> str:
        return camelize(tag or "default") + "Api"

    def api_package(self, config: LanguageConfig) -> str:
        return self.normalize_package(config.api_package or self.default_api_package)

    def model_package(self, config: LanguageConfig) -> str:
        return self.normalize_package(config.model_package or self.default_model_package)

    def invoker_package(self, config: LanguageConfig) -> str:
        return self.api_package(config).rsplit(".", 1)[0]

    def normalize_package(self, package: str) -> str:
        return re.sub(r"[^\w.]", "_", package.strip())

    def param_name(self, name: str) -> str:
        return camelize(name, lower_first=True)

    def nickname(self, operation_id: str) -> str:
        return camelize(operation_id, lower_first=True)

    def data_type(self, node: SchemaNode | None, config: LanguageConfig) -> str:
        if node is None or isinstance(node, (ObjectProperty, ModelImpl, ComposedModel)):
            return self.any_type
        if isinstance(node, (RefProperty, RefModel)):
            return self.model_type(node.ref, config)
        if isinstance(node, (ArrayProperty, ArrayModel)):
            return self.list_type(self.data_type(node.items, config))
        if isinstance(node, MapProperty):
            return self.map_type(self.data_type(node.additional_properties, config))
        return self.scalar_types[type(node)]

    def example(self, node: SchemaNode | None, name: str, config: LanguageConfig) -> str:
        if node is None:
            return self.any_example
        if isinstance(node.example, (str, int, float, bool)):
            return self.literal(node.example)
        if isinstance(node, StringProperty):
            return self.literal(node.enum[0] if node.enum else f"{name}_example")
        if isinstance(node, (RefProperty, RefModel)):
            return self.new_model(node.ref, config)
        if isinstance(node, (ArrayProperty, ArrayModel)):
            return self.list_literal(self.example(node.items, name, config))
        if isinstance(node, MapProperty):
            return self.map_literal(self.example(node.additional_properties, name, config))
        if isinstance(node, (ObjectProperty, ModelImpl, ComposedModel)):
            return self.any_example
        return self.scalar_examples[type(node)]

    def literal(self, value) -> str:
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, str):
            return json.dumps(value)
        return repr(value)

    def model_type(self, name: str, config: LanguageConfig) -> str:
        return name

    def new_model(self, name: str, config: LanguageConfig) -> str:
        return f"new {self.model_type(name, config)}()"

    def list_type(self, item: str) -> str:
        raise NotImplementedError

    def map_type(self, value: str) -> str:
        raise NotImplementedError

    def list_literal(self, item: str) -> str:
        raise NotImplementedError

    def map_literal(self, value: str) -> str:
        raise NotImplementedError


class JavaProfile(LanguageProfile):
    name = "java"
    default_api_package = "io.swagger.client.api"
    default_model_package = "io.swagger.client.model"
    reserved = {"abstract", "class", "default", "enum", "final", "import", "interface",
                "new", "package", "private", "public", "return", "static", "switch", "this"}
    scalar_types = {
        StringProperty: "String",
        IntegerProperty: "Integer",
        LongProperty: "Long",
        DoubleProperty: "Double",
        BooleanProperty: "Boolean",
        DateProperty: "LocalDate",
        DateTimeProperty: "OffsetDateTime",
    }
    scalar_examples = {
        IntegerProperty: "56",
        LongProperty: "789L",
        DoubleProperty: "3.4",
        BooleanProperty: "true",
        DateProperty: "LocalDate.now()",
        DateTimeProperty: "OffsetDateTime.now()",
    }
    any_example = "new Object()"

    def param_name(self, name: str) -> str:
        name = super().param_name(name)
        return f"_{name}" if name in self.reserved else name

    def list_type(self, item: str) -> str:
        return f"List<{item}>"

    def map_type(self, value: str) -> str:
        return f"Map<String, {value}>"

    def list_literal(self, item: str) -> str:
        return f"Arrays.asList({item})"

    def map_literal(self, value: str) -> str:
        return "new HashMap()"


class PythonProfile(LanguageProfile):
    name = "python"
    default_package_name = "swagger_client"
    any_type = "object"
    any_example = "None"
    scalar_types = {
        StringProperty: "str",
        IntegerProperty: "int",
        LongProperty: "int",
        DoubleProperty: "float",
        BooleanProperty: "bool",
        DateProperty: "date",
        DateTimeProperty: "datetime",
    }
    scalar_examples = {
        IntegerProperty: "56",
        LongProperty: "789",
        DoubleProperty: "3.4",
        BooleanProperty: "True",
        DateProperty: "'2013-10-20'",
        DateTimeProperty: "'2013-10-20T19:20:30+01:00'",
    }

    def package_name(self, config: LanguageConfig) -> str:
        if "packageName" in config.additional_properties:
            return self.normalize_package(config.additional_properties["packageName"])
        if config.model_package:
            return self.model_package(config).split(".")[0]
        return self.default_package_name

    def api_package(self, config: LanguageConfig) -> str:
        if config.api_package:
            return self.normalize_package(config.api_package)
        return f"{self.package_name(config)}.api"

    def model_package(self, config: LanguageConfig) -> str:
        if config.model_package:
            return self.normalize_package(config.model_package)
        return f"{self.package_name(config)}.models"

    def normalize_package(self, package: str) -> str:
        return ".".join(underscore(part) for part in package.split(".") if part.strip())

    def param_name(self, name: str) -> str:
        name = underscore(name)
        return f"_{name}" if keyword.iskeyword(name) else name

    def nickname(self, operation_id: str) -> str:
        return underscore(operation_id)

    def literal(self, value) -> str:
        return repr(value)

    def new_model(self, name: str, config: LanguageConfig) -> str:
        return f"{self.package_name(config)}.{name}()"

    def list_type(self, item: str) -> str:
        return f"list[{item}]"

    def map_type(self, value: str) -> str:
        return f"dict(str, {value})"

    def list_literal(self, item: str) -> str:
        return f"[{item}]"

    def map_literal(self, value: str) -> str:
        return f"{{'key': {value}}}"


class PhpProfile(LanguageProfile):
    name = "php"
    default_api_package = "Swagger\\Client\\Api"
    default_model_package = "Swagger\\Client\\Model"
    any_type = "object"
    any_example = "new \\stdClass"
    scalar_types = {
        StringProperty: "string",
        IntegerProperty: "int",
        LongProperty: "int",
        DoubleProperty: "float",
        BooleanProperty: "bool",
        DateProperty: "\\DateTime",
        DateTimeProperty: "\\DateTime",
    }
    scalar_examples = {
        IntegerProperty: "56",
        LongProperty: "789",
        DoubleProperty: "3.4",
        BooleanProperty: "true",
        DateProperty: 'new \\DateTime("2013-10-20")',
        DateTimeProperty: 'new \\DateTime("2013-10-20T19:20:30+01:00")',
    }

    def invoker_package(self, config: LanguageConfig) -> str:
        return self.api_package(config).rsplit("\\", 1)[0]

    def normalize_package(self, package: str) -> str:
        parts = re.split(r"[.\\/]+", package.strip())
        return "\\".join(camelize(part) for part in parts if part)

    def param_name(self, name: str) -> str:
        return underscore(name)

    def model_type(self, name: str, config: LanguageConfig) -> str:
        return f"\\{self.model_package(config)}\\{name}"

    def list_type(self, item: str) -> str:
        return f"{item}[]"

    def map_type(self, value: str) -> str:
        return f"map[string,{value}]"

    def list_literal(self, item: str) -> str:
        return f"array({item})"

    def map_literal(self, value: str) -> str:
        return f"array('key' => {value})"


PROFILES: dict[str, LanguageProfile] = {
    profile.name: profile for profile in (JavaProfile(), PythonProfile(), PhpProfile())
}
SUPPORTED_LANGUAGES = tuple(PROFILES)


class TemplateSource(Protocol):
    def template_for(self, language: str) -> Template: ...


class JinjaTemplateSource:
    """Looks up '<language>_api_example.j2' templates.

    A custom ``loader`` replaces the lookup entirely; ``search_path`` adds a
    directory that is searched before the bundled templates.
    """

    def __init__(self, loader: BaseLoader | None = None, search_path: Path | None = None):
        if loader is None:
            paths = [str(search_path)] if search_path else []
            loader = FileSystemLoader(paths + [str(TEMPLATES_DIR)])
        self.env = Environment(loader=loader, trim_blocks=True, lstrip_blocks=True)

    def template_for(self, language: str) -> Template:
        try:
            return self.env.get_template(f"{language}{TEMPLATE_SUFFIX}")
        except TemplateNotFound as e:
            raise MissingTemplateResource(language) from e


class SnippetRenderer:
    """Renders one example snippet per (operation, language) pair."""

    def __init__(self, spec: Specification, template_source: TemplateSource | None = None):
        self.spec = spec
        self.template_source = template_source or JinjaTemplateSource()

    def validate(self, configs: list[LanguageConfig]) -> None:
        for config in configs:
            if config.lang not in PROFILES:
                raise UnsupportedLanguage(config.lang, SUPPORTED_LANGUAGES)

    def render_all(self, configs: list[LanguageConfig]) -> dict[OperationKey, dict[str, str]]:
        """Render every language, then index snippets by operation in configuration order."""
        self.validate(configs)
        rendered = {config.lang: self.render(config) for config in configs}

        snippets: dict[OperationKey, dict[str, str]] = {}
        for config in configs:
            for key, text in rendered[config.lang].items():
                snippets.setdefault(key, {})[config.lang] = text
        return snippets

    def render(self, config: LanguageConfig) -> dict[OperationKey, str]:
        self.validate([config])
        profile = PROFILES[config.lang]
        template = self.template_source.template_for(config.lang)
        return {
            key: template.render(**self.context(profile, config, key, operation)).strip("\n")
            for key, operation in self.spec.iter_operations()
        }

    def context(
        self, profile: LanguageProfile, config: LanguageConfig, key: OperationKey, operation: Operation
    ) -> dict:
        tag = operation.tags[0] if operation.tags else "default"
        params = sorted(operation.parameters, key=lambda p: not p.required)
        context = {
            "classname": profile.api_class_name(tag),
            "api_package": profile.api_package(config),
            "model_package": profile.model_package(config),
            "invoker_package": profile.invoker_package(config),
            "hostname": self.spec.host,
            "base_path": self.spec.base_path or "",
            "scheme": self.spec.schemes[0] if self.spec.schemes else "https",
            "additional_properties": config.additional_properties,
            "operation": {
                "nickname": profile.nickname(operation.operation_id or generated_operation_id(key)),
                "http_method": key.method,
                "path": key.path,
                "summary": operation.summary,
                "notes": operation.description,
                "all_params": [self._param(profile, config, p) for p in params],
                "has_params": bool(params),
                "return_type": self._return_type(profile, config, operation),
                "auth_methods": [
                    {"name": name, "var_name": profile.param_name(name)}
                    for requirement in operation.security or []
                    for name in requirement
                ],
            },
        }
        if isinstance(profile, PythonProfile):
            context["package_name"] = profile.package_name(config)
        return context

    def _param(self, profile: LanguageProfile, config: LanguageConfig, param: Parameter) -> dict:
        node = param.schema_ if param.location == "body" else param.property
        name = profile.param_name(param.name)
        if param.ref and node is None:
            data_type = example = None
        else:
            data_type = profile.data_type(node, config)
            example = profile.example(node, name, config)
        return {
            "param_name": name,
            "base_name": param.name,
            "data_type": data_type or profile.any_type,
            "example": example or profile.any_example,
            "description": " ".join(param.description.split()),
            "required": param.required,
            "is_body_param": param.location == "body",
            "location": param.location,
        }

    def _return_type(self, profile: LanguageProfile, config: LanguageConfig, operation: Operation) -> str | None:
        for code, response in operation.responses.items():
            if code.startswith("2") and response.schema_ is not None:
                return profile.data_type(response.schema_, config)
        return None
