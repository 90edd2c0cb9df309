"""Detect which OpenAPI dialect a document is written in."""

from enum import IntEnum

from openapi_spec_converter import codec
from openapi_spec_converter.errors import ParseFailure, UnsupportedVersion

SWAGGER_VERSIONS = ("2.0",)
OPENAPI30_VERSIONS = ("3.0.0", "3.0.1", "3.0.2", "3.0.3", "3.0.4")
OPENAPI31_VERSIONS = ("3.1.0", "3.1.1")


class Dialect(IntEnum):
    """Supported dialects, ordered oldest first."""

    SWAGGER = 0
    OPENAPI30 = 1
    OPENAPI31 = 2

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def cli_name(self) -> str:
        return _CLI_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> "Dialect":
        """Look up a dialect by its command-line name (swagger, 3.0, 3.1)."""
        for dialect, cli_name in _CLI_NAMES.items():
            if cli_name == name.lower():
                return dialect
        raise ValueError(f"Invalid target version {name}")


_LABELS = {
    Dialect.SWAGGER: "Swagger 2.0",
    Dialect.OPENAPI30: "OpenAPI 3.0",
    Dialect.OPENAPI31: "OpenAPI 3.1",
}

_CLI_NAMES = {
    Dialect.SWAGGER: "swagger",
    Dialect.OPENAPI30: "3.0",
    Dialect.OPENAPI31: "3.1",
}


def dialect_for_version(version: str) -> Dialect:
    """Map a literal version marker to its dialect."""
    if version in SWAGGER_VERSIONS:
        return Dialect.SWAGGER
    if version in OPENAPI30_VERSIONS:
        return Dialect.OPENAPI30
    if version in OPENAPI31_VERSIONS:
        return Dialect.OPENAPI31
    raise UnsupportedVersion(version)


def detect_dialect(data: bytes | str) -> Dialect:
    """Read only the version marker of a document and classify it.

    JSON input goes through the JSON parser, so tab indentation is accepted.
    The ``openapi`` field wins; ``swagger`` is used when it is missing.
    """
    try:
        doc = codec.load(data)
    except ParseFailure as e:
        raise ParseFailure("Cannot parse Swagger or OpenAPI document") from e

    version = doc.get("openapi") or doc.get("swagger") or ""
    # An unquoted `swagger: 2.0` loads as a float.
    return dialect_for_version(str(version))
