"""Errors raised while compiling a specification into a reference document."""


class DocumentationError(Exception):
    """Base class for all documentation build errors."""


class DanglingReference(DocumentationError):
    """A named reference does not exist in the specification's definitions."""

    def __init__(self, name: str):
        super().__init__(f"Reference '{name}' is not defined in the specification.")
        self.name = name


class UnsupportedParameterLocation(DocumentationError):
    def __init__(self, location: str):
        super().__init__(f"Parameter type '{location}' not supported yet.")
        self.location = location


class UnsupportedLanguage(DocumentationError):
    def __init__(self, language: str, supported: tuple[str, ...]):
        super().__init__(
            f"Language {language} is not supported at the moment. "
            f"Supported languages: {', '.join(supported)}."
        )
        self.language = language


class MissingTemplateResource(DocumentationError):
    """Template lookup failed for a language that passed validation."""

    def __init__(self, language: str):
        super().__init__(f"No example template found for language '{language}'.")
        self.language = language


class ExampleSerializationError(DocumentationError):
    """A synthesized example could not be encoded as JSON."""


class NoOperationsError(DocumentationError):
    """The specification declares no operations to document."""


class UnsupportedSpecification(DocumentationError):
    """The input document is not a Swagger 2.0 specification."""
