"""Swagger 2.0 document model."""

from collections.abc import Iterator
from typing import Any

from pydantic import Field

from .base import HTTP_METHODS, Schema, SpecModel


class SwaggerParameter(SpecModel):
    ref: str | None = Field(None, alias="$ref")
    name: str | None = None
    location: str | None = Field(None, alias="in")
    description: str | None = None
    required: bool | None = None
    schema_: Schema | None = Field(None, alias="schema")


class SwaggerResponse(SpecModel):
    ref: str | None = Field(None, alias="$ref")
    description: str | None = None
    schema_: Schema | None = Field(None, alias="schema")


class SwaggerOperation(SpecModel):
    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = None
    consumes: list[str] | None = None
    produces: list[str] | None = None
    parameters: list[SwaggerParameter] | None = None
    responses: dict[str, SwaggerResponse] | None = None


class SwaggerPathItem(SpecModel):
    get: SwaggerOperation | None = None
    put: SwaggerOperation | None = None
    post: SwaggerOperation | None = None
    delete: SwaggerOperation | None = None
    options: SwaggerOperation | None = None
    head: SwaggerOperation | None = None
    patch: SwaggerOperation | None = None

    def operations(self) -> Iterator[tuple[str, SwaggerOperation]]:
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                yield method, operation


class SwaggerDocument(SpecModel):
    swagger: str
    info: dict[str, Any] | None = None
    definitions: dict[str, Schema] | None = None
    paths: dict[str, SwaggerPathItem] | None = None
