"""Field transformation rules applied when crossing a dialect boundary.

Schema rules take one fragment and rewrite it in place; each one leaves a
fragment alone when its trigger is absent, so applying it twice is harmless.
Upgrade (3.0 -> 3.1) and downgrade (3.1 -> 3.0) rules are separate functions
rather than inverses of each other: 3.1 allows shapes 3.0 cannot express,
and some downgrades drop information.

Document rules operate on request bodies and top-level fields.

See https://www.openapis.org/blog/2021/02/16/migrating-from-openapi-3-0-to-3-1-0
"""

from openapi_spec_converter.model.base import Schema
from openapi_spec_converter.model.openapi3 import OpenAPIDocument

NULL_TYPE = "null"
OCTET_STREAM = "application/octet-stream"
BASE64 = "base64"
COMPONENT_SCHEMA_PREFIX = "#/components/schemas/"


# -- nullability ------------------------------------------------------------


def nullable_to_type_array(schema: Schema) -> None:
    """{type: T, nullable: true} -> {type: [T, "null"]}; nullable is dropped."""
    if schema.nullable is None:
        return
    if schema.nullable:
        schema.type = [*(schema.type or []), NULL_TYPE]
    schema.nullable = None


def type_array_to_nullable(schema: Schema) -> None:
    """Turn a 3.1 type array back into ``nullable`` or a ``oneOf``.

    {type: [T, "null"]}         -> {type: T, nullable: true}
    {type: [A, B]}              -> {oneOf: [{type: A}, {type: B}]}
    {type: [A, B, "null"]}      -> {oneOf: [{type: A, nullable: true},
                                            {type: B, nullable: true}]}
    """
    types = schema.type or []
    nullable = NULL_TYPE in types
    non_null = [t for t in types if t != NULL_TYPE]

    if nullable and len(types) == 2:
        schema.type = non_null[-1:] or None
        schema.nullable = True
    elif len(types) >= 2:
        schema.one_of = [
            Schema(type=[t], nullable=True) if nullable else Schema(type=[t])
            for t in non_null
        ]
        schema.type = None


# -- numeric bounds ---------------------------------------------------------


def exclusive_bounds_to_numeric(schema: Schema) -> None:
    """{minimum: 10, exclusiveMinimum: true} -> {exclusiveMinimum: 10}.

    A boolean ``false`` is simply dropped, leaving the inclusive bound.
    """
    schema.minimum, schema.exclusive_minimum = _bound_to_numeric(
        schema.minimum, schema.exclusive_minimum
    )
    schema.maximum, schema.exclusive_maximum = _bound_to_numeric(
        schema.maximum, schema.exclusive_maximum
    )


def exclusive_bounds_to_boolean(schema: Schema) -> None:
    """{exclusiveMinimum: 10} -> {minimum: 10, exclusiveMinimum: true}."""
    schema.minimum, schema.exclusive_minimum = _bound_to_boolean(
        schema.minimum, schema.exclusive_minimum
    )
    schema.maximum, schema.exclusive_maximum = _bound_to_boolean(
        schema.maximum, schema.exclusive_maximum
    )


def _bound_to_numeric(bound, exclusive):
    if not isinstance(exclusive, bool):
        return bound, exclusive
    if not exclusive:
        return bound, None
    if bound is None:
        return None, exclusive
    return None, bound


def _bound_to_boolean(bound, exclusive):
    if exclusive is None or isinstance(exclusive, bool):
        return bound, exclusive
    return exclusive, True


# -- examples ---------------------------------------------------------------


def example_to_examples(schema: Schema) -> None:
    if schema.example is not None:
        schema.examples = [schema.example]
        schema.example = None


def examples_to_example(schema: Schema) -> None:
    """Keep the first entry of ``examples``; the rest cannot be expressed."""
    if schema.examples:
        schema.example = schema.examples[0]
        if schema.example is None:
            schema.keep_null("example")
        schema.examples = None


# -- binary string encoding -------------------------------------------------


def format_to_content_fields(schema: Schema) -> None:
    """Replace binary string formats with 3.1 content keywords.

    {type: string, format: binary|byte} -> {type: string, contentMediaType: base64}
    {type: string, format: base64}      -> {type: string, contentEncoding: base64}

    Any other format on a plain string is dropped as well.
    """
    if not schema.is_string or not schema.format:
        return

    if schema.format in ("binary", "byte"):
        schema.content_media_type = BASE64
    elif schema.format == BASE64:
        schema.content_encoding = BASE64

    schema.format = None


def content_fields_to_format(schema: Schema) -> None:
    """Restore the 3.0 string format from 3.1 content keywords.

    {type: string, contentMediaType: application/octet-stream} -> {format: binary}
    {type: string, contentEncoding: base64}                    -> {format: base64}
    """
    if not schema.is_string:
        return

    if schema.content_media_type:
        if schema.content_media_type == OCTET_STREAM:
            schema.format = "binary"
        schema.content_media_type = None

    if schema.content_encoding:
        if schema.content_encoding == BASE64:
            schema.format = BASE64
        schema.content_encoding = None


# -- required / readOnly ----------------------------------------------------


def drop_read_only_from_required(schema: Schema, schemas: dict | None = None) -> None:
    """Swagger 2.0 forbids a property that is both required and readOnly.

    A property given as a local ``$ref`` is looked up in ``schemas`` (the
    component schemas) before its readOnly flag is checked.
    """
    if not schema.properties or not schema.required:
        return

    schema.required = [
        name
        for name in schema.required
        if not _is_read_only(schema.properties.get(name), schemas or {})
    ]


def _is_read_only(prop, schemas: dict) -> bool:
    seen = set()
    while isinstance(prop, Schema) and prop.ref and prop.ref.startswith(COMPONENT_SCHEMA_PREFIX):
        if prop.ref in seen:
            return False
        seen.add(prop.ref)
        prop = schemas.get(prop.ref.removeprefix(COMPONENT_SCHEMA_PREFIX))
    return isinstance(prop, Schema) and bool(prop.read_only)


# -- composed per direction -------------------------------------------------


def upgrade_schema(schema: Schema) -> None:
    """All 3.0 -> 3.1 schema rules, in a fixed order."""
    nullable_to_type_array(schema)
    exclusive_bounds_to_numeric(schema)
    example_to_examples(schema)
    format_to_content_fields(schema)


def downgrade_schema(schema: Schema) -> None:
    """All 3.1 -> 3.0 schema rules, in a fixed order."""
    type_array_to_nullable(schema)
    exclusive_bounds_to_boolean(schema)
    examples_to_example(schema)
    content_fields_to_format(schema)


# -- document rules ---------------------------------------------------------


def _request_contents(document: OpenAPIDocument):
    for operation in document.operations():
        if operation.request_body is not None and operation.request_body.content:
            yield operation.request_body.content


def clear_binary_upload_schemas(document: OpenAPIDocument) -> None:
    """3.1 implies the type of an octet-stream request body; drop its schema."""
    for content in _request_contents(document):
        if OCTET_STREAM in content:
            content[OCTET_STREAM].schema_ = None


def set_binary_upload_schemas(document: OpenAPIDocument) -> None:
    """3.0 needs an explicit {type: string, format: binary} upload schema."""
    for content in _request_contents(document):
        if OCTET_STREAM in content:
            content[OCTET_STREAM].schema_ = Schema(type=["string"], format="binary")


def ensure_request_body_schemas(document: OpenAPIDocument) -> None:
    """Give every schema-less request body content a {type: object} schema."""
    for content in _request_contents(document):
        for media_type in content.values():
            if media_type.schema_ is None:
                media_type.schema_ = Schema(type=["object"])


def strip_openapi31_only_fields(document: OpenAPIDocument) -> None:
    """Remove top-level fields that only exist in OpenAPI 3.1."""
    document.json_schema_dialect = None
    document.webhooks = None
    if document.info is not None:
        document.info.pop("summary", None)

