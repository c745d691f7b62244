"""Document assembler — compiles a Specification into a Slate-style reference document."""

import logging
from dataclasses import dataclass, field

import yaml

from slate_docgen.config import LanguageConfig
from slate_docgen.descriptions.loader import DescriptionLoader
from slate_docgen.errors import (
    DanglingReference,
    ExampleSerializationError,
    NoOperationsError,
    UnsupportedParameterLocation,
)
from slate_docgen.generator.definitions import DefinitionsSection, cell, flatten_properties
from slate_docgen.generator.examples import ExampleSynthesizer, to_json
from slate_docgen.generator.markdown import MarkdownBuilder
from slate_docgen.generator.snippets import SnippetRenderer, TemplateSource
from slate_docgen.generator.types import TypeResolver
from slate_docgen.parser.base import (
    ArrayModel,
    Operation,
    OperationKey,
    Parameter,
    RefModel,
    Specification,
)

logger = logging.getLogger(__name__)

# Parameter locations in the order their tables appear
PARAMETER_LOCATIONS = {
    "body": "Body",
    "path": "Path",
    "header": "Header",
    "form": "Form",
    "query": "Query",
}
PARAMETER_HEADER = "Parameter|Required|Type|Description"

TERMS_OF_SERVICE = "Terms of service: "
URI_SCHEME = "URI scheme"
HOST = "Host: "
BASE_PATH = "BasePath: "
SCHEMES = "Schemes: "
RESPONSE_INTRO = "> The above command returns JSON structured like this:"


@dataclass
class BuildContext:
    """State owned by exactly one ``build()`` call."""

    snippets: dict[OperationKey, dict[str, str]]
    refs: set[str] = field(default_factory=set)


def tag_title(name: str) -> str:
    """'user_profiles' -> 'UserProfiles', 'pet-store' -> 'Pet store'."""
    words = name.replace("-", " ").split("_")
    return "".join(w[:1].upper() + w[1:].lower() for w in words)


def text(value: str | None) -> str:
    if value is None or value == "null":
        return ""
    return value.strip()


class DocumentAssembler:
    """Builds the full document: front matter, introduction, tag sections, definitions."""

    def __init__(
        self,
        spec: Specification,
        configs: list[LanguageConfig],
        template_source: TemplateSource | None = None,
        descriptions: DescriptionLoader | None = None,
    ):
        self.spec = spec
        self.configs = configs
        self.languages = [c.lang for c in configs]
        self.renderer = SnippetRenderer(spec, template_source)
        self.descriptions = descriptions
        self.resolver = TypeResolver(spec.definitions)
        self.synthesizer = ExampleSynthesizer(spec.definitions)

    def build(self) -> MarkdownBuilder:
        """Compile the document.

        Configuration errors (unsupported language, missing template, no
        operations) are raised before any text is produced.
        """
        self.renderer.validate(self.configs)
        if next(self.spec.iter_operations(), None) is None:
            raise NoOperationsError("The specification does not declare any operations.")

        ctx = BuildContext(snippets=self.renderer.render_all(self.configs))
        doc = MarkdownBuilder()

        self._front_matter(doc)
        self._introduction(doc)
        self._uri_scheme(doc)
        for tag in self.spec.tags:
            doc.document_title(tag_title(tag.name)).new_line()
            if text(tag.description):
                doc.text_line(text(tag.description)).new_line()
            self._tag_operations(doc, ctx, tag.name)

        DefinitionsSection(self.spec, doc, self.descriptions).process(ctx.refs)
        return doc

    # -- front matter and introduction ---------------------------------------

    def _front_matter(self, doc: MarkdownBuilder) -> None:
        front_matter = {
            "title": "API Reference",
            "language_tabs": ["shell"] + self.languages,
            "toc_footers": ["<a href='#'>Sign Up for a Developer Key</a>"],
            "includes": ["errors"],
            "search": True,
        }
        doc.text_line("---")
        doc.text_line(yaml.safe_dump(front_matter, sort_keys=False, default_flow_style=False).rstrip("\n"))
        doc.text_line("---")
        doc.new_line()

    def _introduction(self, doc: MarkdownBuilder) -> None:
        info = self.spec.info
        doc.document_title("Introduction")
        doc.listing(
            f"We have language bindings in {', '.join(self.languages)}! You can view code "
            "examples in the dark area to the right, and you can switch the programming "
            "language of the examples with the tabs in the top right."
        )

        if text(info.description):
            doc.text_line(text(info.description)).new_line()

        if text(info.version):
            doc.section_title_level1("Version")
            doc.text_line("Version: " + text(info.version)).new_line()

        contact = info.contact
        if contact and (text(contact.name) or text(contact.email) or text(contact.url)):
            doc.section_title_level1("Contact Information")
            if text(contact.name):
                doc.text_line("Contact: " + text(contact.name))
            if text(contact.email):
                doc.text_line("Email: " + text(contact.email))
            if text(contact.url):
                doc.text_line("URL: " + text(contact.url))
            doc.new_line()

        license_ = info.license
        if license_ and (text(license_.name) or text(license_.url)):
            doc.section_title_level1("License")
            if text(license_.name):
                doc.text_line("License: " + text(license_.name)).new_line()
            if text(license_.url):
                doc.text_line("License url: " + text(license_.url))
            doc.new_line()

        if text(info.terms_of_service):
            doc.text_line(TERMS_OF_SERVICE + text(info.terms_of_service)).new_line()

    def _uri_scheme(self, doc: MarkdownBuilder) -> None:
        host, base_path = text(self.spec.host), text(self.spec.base_path)
        if not (host or base_path):
            return
        doc.section_title_level1(URI_SCHEME)
        if host:
            doc.text_line(HOST + host)
        if base_path:
            doc.text_line(BASE_PATH + base_path)
        if self.spec.schemes:
            doc.text_line(SCHEMES + ", ".join(self.spec.schemes))
        doc.new_line()

    # -- operations ----------------------------------------------------------

    def _tag_operations(self, doc: MarkdownBuilder, ctx: BuildContext, tag: str) -> None:
        for key, operation in self.spec.iter_operations():
            if tag not in operation.tags:
                continue
            position = doc.mark()
            refs = set(ctx.refs)
            try:
                self._operation(doc, ctx, key, operation, refs)
            except Exception:
                logger.exception(
                    "An error occurred while processing operation. %s %s. Skipping..",
                    key.method, key.path,
                )
                doc.rollback(position)
                continue
            ctx.refs = refs

    def _operation(
        self, doc: MarkdownBuilder, ctx: BuildContext, key: OperationKey, operation: Operation, refs: set[str]
    ) -> None:
        doc.section_title_level1(text(operation.summary) or f"{key.method} {key.path}")

        doc.source(self._shell_example(key, operation), "shell")
        for language, snippet in ctx.snippets.get(key, {}).items():
            doc.source(snippet, language)

        self._response_example(doc, key, operation)

        doc.section_title_level2("HTTP Request")
        doc.text_line(f"`{key.method} {key.path}`").new_line()

        self._parameters(doc, operation, refs)
        self._responses(doc, operation, refs)

        description = text(operation.description)
        if description:
            doc.paragraph(description)

    def _shell_example(self, key: OperationKey, operation: Operation) -> str:
        scheme = f"{self.spec.schemes[0]}://" if self.spec.schemes and self.spec.host else ""
        url = f"{scheme}{text(self.spec.host)}{text(self.spec.base_path)}{key.path}"
        command = f'curl "{url}"'
        for requirement in operation.security or []:
            for name in requirement:
                command += f' -H "{name}: my{name}"'
        command += f" -X {key.method}"

        try:
            payload = self.synthesizer.operation_payload(operation)
        except (DanglingReference, ExampleSerializationError) as e:
            logger.error("Cannot build the request example for %s %s: %s", key.method, key.path, e)
            payload = None
        if payload is not None:
            command += f" -d @- << EOF \n{payload}\nEOF"
        return command

    def _response_example(self, doc: MarkdownBuilder, key: OperationKey, operation: Operation) -> None:
        response = operation.responses.get("200")
        if response is None:
            return
        schema = response.schema_
        try:
            if schema is not None and schema.example is not None:
                example = _example_text(schema.example)
            elif response.example is not None:
                example = _example_text(response.example)
            elif schema is not None:
                example = to_json(self.synthesizer.synthesize(schema))
            else:
                return
        except (DanglingReference, ExampleSerializationError) as e:
            logger.error("Cannot build the response example for %s %s: %s", key.method, key.path, e)
            return
        doc.text_line(RESPONSE_INTRO).new_line()
        doc.source(example, "json")

    def _parameters(self, doc: MarkdownBuilder, operation: Operation, refs: set[str]) -> None:
        groups: dict[str, list[Parameter]] = {location: [] for location in PARAMETER_LOCATIONS}
        for parameter in operation.parameters:
            if parameter.location not in groups:
                raise UnsupportedParameterLocation(parameter.location)
            groups[parameter.location].append(parameter)

        for location, parameters in groups.items():
            if not parameters:
                continue
            if location == "body":
                rows = self._body_rows(parameters[0], refs)
            else:
                rows = [
                    "|".join([
                        p.name,
                        str(p.required).lower(),
                        self.resolver.parameter_label(p, refs),
                        cell(p.description),
                    ])
                    for p in parameters
                ]
            doc.section_title_level2(f"{PARAMETER_LOCATIONS[location]} Parameters")
            doc.table_with_header_row([PARAMETER_HEADER] + rows)

    def _body_rows(self, parameter: Parameter, refs: set[str]) -> list[str]:
        schema = parameter.schema_
        if schema is None:
            return [f"{parameter.name}|{str(parameter.required).lower()}|string|{cell(parameter.description)}"]

        target = schema
        if isinstance(schema, RefModel):
            target = self.spec.definitions.get(schema.ref)
            if target is None:
                label = self.resolver.label(schema, refs)
                return [f"{parameter.name}|{str(parameter.required).lower()}|{label}|{cell(parameter.description)}"]

        if isinstance(target, ArrayModel):
            properties = {"array": target.items}
        else:
            properties = flatten_properties(target, self.spec.definitions)
        return [
            "|".join([
                name,
                str(prop.required).lower(),
                self.resolver.label(prop, refs),
                cell(prop.description),
            ])
            for name, prop in properties.items()
        ]

    def _responses(self, doc: MarkdownBuilder, operation: Operation, refs: set[str]) -> None:
        if not operation.responses:
            return
        doc.section_title_level2("Responses for status codes")
        doc.table_with_header_row([
            "|".join(operation.responses),
            "|".join(self.resolver.label(r.schema_, refs) for r in operation.responses.values()),
        ])


def _example_text(example) -> str:
    if isinstance(example, str):
        return example
    return to_json(example)
