"""Walk every schema fragment of a document and apply a rule to it."""

from collections.abc import Callable, Iterator

from openapi_spec_converter.model.base import Schema
from openapi_spec_converter.model.openapi3 import OpenAPIDocument

SchemaRule = Callable[[Schema], None]


def visit_schema(schema: Schema | None, rule: SchemaRule) -> None:
    """Apply ``rule`` to every fragment below ``schema``, then to ``schema``.

    Children are visited in a fixed order: property schemas, array items,
    allOf, oneOf, anyOf. The fragment itself comes last, so a rule that
    rewrites ``type`` or adds composite branches never sees its own output.
    """
    if schema is None:
        return

    for child in _children(schema):
        visit_schema(child, rule)

    rule(schema)


def visit_document(document: OpenAPIDocument, rule: SchemaRule) -> None:
    """Apply ``rule`` to every fragment reachable from the document roots.

    Roots are the component schemas, the component parameter schemas, and
    the media type schemas of every request body and response.
    """
    for root in _roots(document):
        visit_schema(root, rule)


def _children(schema: Schema) -> Iterator[Schema]:
    # Boolean schemas (`true` / `false`) have no keywords to rewrite.
    if schema.properties:
        yield from [p for p in schema.properties.values() if isinstance(p, Schema)]
    if isinstance(schema.items, Schema):
        yield schema.items
    for composite in (schema.all_of, schema.one_of, schema.any_of):
        if composite:
            # Snapshot: a rule may replace the list while we walk it.
            yield from [c for c in composite if isinstance(c, Schema)]


def _roots(document: OpenAPIDocument) -> Iterator[Schema | None]:
    components = document.components
    if components is not None:
        if components.schemas:
            yield from components.schemas.values()
        if components.parameters:
            for parameter in components.parameters.values():
                yield parameter.schema_

    for operation in document.operations():
        if operation.request_body is not None and operation.request_body.content:
            for media_type in operation.request_body.content.values():
                yield media_type.schema_
        for response in (operation.responses or {}).values():
            for media_type in (response.content or {}).values():
                yield media_type.schema_
