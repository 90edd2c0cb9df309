"""OpenAPI 3.0 / 3.1 document model."""

from collections.abc import Iterator
from typing import Any

from pydantic import Field

from .base import HTTP_METHODS, Schema, SpecModel


class Parameter(SpecModel):
    ref: str | None = Field(None, alias="$ref")
    name: str | None = None
    location: str | None = Field(None, alias="in")
    description: str | None = None
    required: bool | None = None
    schema_: Schema | None = Field(None, alias="schema")


class MediaType(SpecModel):
    schema_: Schema | None = Field(None, alias="schema")


class RequestBody(SpecModel):
    ref: str | None = Field(None, alias="$ref")
    description: str | None = None
    content: dict[str, MediaType] | None = None
    required: bool | None = None


class Response(SpecModel):
    ref: str | None = Field(None, alias="$ref")
    description: str | None = None
    content: dict[str, MediaType] | None = None


class Operation(SpecModel):
    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = None
    request_body: RequestBody | None = None
    responses: dict[str, Response] | None = None


class PathItem(SpecModel):
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None

    def operations(self) -> Iterator[tuple[str, Operation]]:
        """Yield (method, operation) for every method that is defined."""
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                yield method, operation


class Components(SpecModel):
    schemas: dict[str, Schema] | None = None
    parameters: dict[str, Parameter] | None = None


class OpenAPIDocument(SpecModel):
    openapi: str
    info: dict[str, Any] | None = None
    json_schema_dialect: str | None = None
    paths: dict[str, PathItem] | None = None
    webhooks: dict[str, Any] | None = None
    components: Components | None = None

    def operations(self) -> Iterator[Operation]:
        for path_item in (self.paths or {}).values():
            for _, operation in path_item.operations():
                yield operation
