"""Single-step conversions between adjacent dialects.

Every step takes serialized text and returns serialized JSON. The document
is parsed into a fresh model at the start of a step and rendered at the end,
so nothing mutated by one step is visible to the next.
"""

import functools
import logging
from collections.abc import Callable
from typing import NamedTuple

from openapi_spec_converter.dialect import Dialect
from openapi_spec_converter.model import builder

from . import rules
from .normalizer import normalize_swagger
from .swagger import openapi3_to_swagger, swagger_to_openapi3
from .visitor import visit_document

LOG = logging.getLogger(__name__)

OPENAPI31_VERSION = "3.1.1"
OPENAPI30_VERSION = "3.0.4"


def upgrade_swagger_to_openapi30(data: bytes) -> bytes:
    swagger = builder.parse_swagger(data)
    document = builder.parse_openapi(swagger_to_openapi3(swagger.to_dict()))
    return builder.serialize(document)


def upgrade_openapi30_to_openapi31(data: bytes) -> bytes:
    """Rewrite a 3.0 document with 3.1 schema keywords."""
    document = builder.parse_openapi(data)
    document.openapi = OPENAPI31_VERSION

    # Before the schema walk, so the cleared upload schemas are not visited.
    rules.clear_binary_upload_schemas(document)
    visit_document(document, rules.upgrade_schema)

    return builder.serialize(document)


def downgrade_openapi31_to_openapi30(data: bytes) -> bytes:
    """Rewrite a 3.1 document with 3.0 schema keywords.

    3.1-only top-level fields (jsonSchemaDialect, webhooks, info.summary)
    are removed.
    """
    document = builder.parse_openapi(data)
    document.openapi = OPENAPI30_VERSION

    rules.set_binary_upload_schemas(document)
    visit_document(document, rules.downgrade_schema)
    rules.strip_openapi31_only_fields(document)

    return builder.serialize(document)


def downgrade_openapi30_to_swagger(data: bytes) -> bytes:
    """Convert a 3.0 document to Swagger 2.0 and repair what Swagger requires."""
    document = builder.parse_openapi(data)

    # Swagger validation rejects properties that are both required and readOnly.
    schemas = document.components.schemas if document.components else None
    visit_document(
        document, functools.partial(rules.drop_read_only_from_required, schemas=schemas)
    )
    # The structural conversion needs a schema on every request body.
    rules.ensure_request_body_schemas(document)

    # Render and reload before restructuring the whole document.
    document = builder.parse_openapi(builder.serialize(document))

    swagger = builder.parse_swagger(openapi3_to_swagger(document.to_dict()))
    normalize_swagger(swagger)
    return builder.serialize(swagger)


class Step(NamedTuple):
    target: Dialect
    convert: Callable[[bytes], bytes]


STEPS: dict[Dialect, dict[str, Step]] = {
    Dialect.SWAGGER: {
        "up": Step(Dialect.OPENAPI30, upgrade_swagger_to_openapi30),
    },
    Dialect.OPENAPI30: {
        "up": Step(Dialect.OPENAPI31, upgrade_openapi30_to_openapi31),
        "down": Step(Dialect.SWAGGER, downgrade_openapi30_to_swagger),
    },
    Dialect.OPENAPI31: {
        "down": Step(Dialect.OPENAPI30, downgrade_openapi31_to_openapi30),
    },
}


def next_step(current: Dialect, target: Dialect) -> Step:
    """Pick the adjacent step from ``current`` that moves towards ``target``."""
    direction = "up" if current < target else "down"
    step = STEPS[current][direction]
    LOG.debug("Next step %s -> %s (%s)", current.label, step.target.label, direction)
    return step
