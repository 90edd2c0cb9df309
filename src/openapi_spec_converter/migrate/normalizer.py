"""Post-processing of documents downgraded to Swagger 2.0.

Swagger tooling expects things the structural conversion does not produce:
an explicit schema on binary upload parameters, a summary on every
operation, unique tags, and a shared error response. The error response
follows the gRPC gateway convention (``rpcStatus`` / ``googleprotobufAny``).
"""

import logging

from openapi_spec_converter.model.base import Schema
from openapi_spec_converter.model.swagger import (
    SwaggerDocument,
    SwaggerOperation,
    SwaggerResponse,
)

LOG = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"

ANY_DEFINITION = "googleprotobufAny"
STATUS_DEFINITION = "rpcStatus"
DEFAULT_RESPONSE = "default"
DEFAULT_RESPONSE_DESCRIPTION = "An unexpected error response."

# Only methods that usually carry a request body are checked for uploads.
UPLOAD_METHODS = ("post", "options", "patch", "put")

CLIENT_NAME_LABEL = "gRPC客户端名称：{}"
METHOD_NAME_LABEL = "接口方法名称：{}"


def normalize_swagger(document: SwaggerDocument) -> None:
    """Apply every Swagger 2.0 repair to ``document`` in place."""
    fix_upload_formats(document)
    add_default_error_responses(document)


def fix_upload_formats(document: SwaggerDocument) -> None:
    """Give schema-less body parameters of binary uploads a string/binary schema."""
    for path_item in (document.paths or {}).values():
        for method, operation in path_item.operations():
            if method in UPLOAD_METHODS:
                _fix_upload_format(operation)


def _fix_upload_format(operation: SwaggerOperation) -> None:
    if OCTET_STREAM not in (operation.consumes or []):
        return
    for param in operation.parameters or []:
        if param.location == "body" and param.schema_ is None:
            param.schema_ = Schema(type=["string"], format="binary")


def add_default_error_responses(document: SwaggerDocument) -> None:
    """Add the shared error definitions and tidy every operation.

    The two definitions are only created when missing. Every operation gets
    its summary filled in, its description annotated, its tags deduplicated,
    and its ``default`` response pointed at ``rpcStatus``.
    """
    if document.definitions is None:
        document.definitions = {}
    if ANY_DEFINITION not in document.definitions:
        document.definitions[ANY_DEFINITION] = _any_definition()
    if STATUS_DEFINITION not in document.definitions:
        document.definitions[STATUS_DEFINITION] = _status_definition()

    count = 0
    for path_item in (document.paths or {}).values():
        for _, operation in path_item.operations():
            copy_description_to_summary(operation)
            deduplicate_tags(operation)
            add_default_error_response(operation)
            count += 1
    LOG.debug("Normalized %d Swagger operations", count)


def copy_description_to_summary(operation: SwaggerOperation) -> None:
    """Fall back to the description for a missing summary, then annotate it.

    The note appended to the description names the client (first tag) and
    the method (the part of operationId after the last underscore).
    """
    parts = []
    if operation.tags:
        parts.append(CLIENT_NAME_LABEL.format(operation.tags[0]))
    method_name = _method_name(operation.operation_id or "")
    if method_name:
        parts.append(METHOD_NAME_LABEL.format(method_name))

    if not operation.summary and operation.description:
        operation.summary = operation.description

    if parts:
        note = "\n".join(parts)
        if operation.description:
            operation.description = f"{operation.description}\n\n{note}"
        else:
            operation.description = note


def _method_name(operation_id: str) -> str:
    # "Service_Method" -> "Method"; a trailing underscore keeps the whole id.
    index = operation_id.rfind("_")
    if 0 <= index < len(operation_id) - 1:
        return operation_id[index + 1 :]
    return operation_id


def deduplicate_tags(operation: SwaggerOperation) -> None:
    if operation.tags:
        operation.tags = list(dict.fromkeys(operation.tags))


def add_default_error_response(operation: SwaggerOperation) -> None:
    if operation.responses is None:
        operation.responses = {}
    operation.responses[DEFAULT_RESPONSE] = SwaggerResponse(
        description=DEFAULT_RESPONSE_DESCRIPTION,
        schema_=Schema(ref=f"#/definitions/{STATUS_DEFINITION}"),
    )


def _any_definition() -> Schema:
    return Schema(
        type=["object"],
        description=(
            "`Any` contains an arbitrary serialized protocol buffer message along with a\n"
            "URL that describes the type of the serialized message."
        ),
        properties={
            "@type": Schema(
                type=["string"],
                description=(
                    "A URL/resource name that uniquely identifies the type of the serialized\n"
                    "protocol buffer message."
                ),
            ),
        },
        additional_properties=Schema(),
    )


def _status_definition() -> Schema:
    return Schema(
        type=["object"],
        properties={
            "code": Schema(type=["integer"], format="int32"),
            "message": Schema(type=["string"]),
            "details": Schema(
                type=["array"],
                items=Schema(ref=f"#/definitions/{ANY_DEFINITION}"),
            ),
        },
    )
