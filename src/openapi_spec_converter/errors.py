"""Exceptions raised while converting API description documents.

Every error derives from ConverterError so callers (the CLI in particular)
can report any conversion failure with a single handler.
"""


class ConverterError(Exception):
    """Base class for all conversion errors."""


class UnsupportedVersion(ConverterError):
    """The document's version marker names no supported dialect."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Unsupported input document OpenAPI version: {version}")


class ParseFailure(ConverterError):
    """The input is not a readable JSON or YAML mapping."""


class AggregateBuildFailure(ConverterError):
    """Several structural errors found while building the document model."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Errors loading document: " + "; ".join(errors))


class StepConversionFailure(ConverterError):
    """One upgrade or downgrade step failed."""

    def __init__(self, source, target, cause: Exception):
        self.source = source
        self.target = target
        self.cause = cause
        super().__init__(f"Error converting {source.label} to {target.label}: {cause}")
