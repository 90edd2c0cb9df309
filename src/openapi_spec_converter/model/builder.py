"""Build document models from raw text and render them back.

Each conversion step parses its input into a fresh model and serializes the
model when done, so no object is ever shared between two steps.
"""

import logging

from pydantic import ValidationError

from openapi_spec_converter import codec
from openapi_spec_converter.errors import AggregateBuildFailure

from .base import SpecModel
from .openapi3 import OpenAPIDocument
from .swagger import SwaggerDocument

LOG = logging.getLogger(__name__)


def parse_openapi(data: bytes | str | dict) -> OpenAPIDocument:
    """Build an OpenAPI 3.x model from text or an already loaded mapping."""
    return _build(OpenAPIDocument, data)


def parse_swagger(data: bytes | str | dict) -> SwaggerDocument:
    """Build a Swagger 2.0 model from text or an already loaded mapping."""
    return _build(SwaggerDocument, data)


def serialize(document: SpecModel) -> bytes:
    """Render a document model as JSON."""
    return codec.dump(document.to_dict(), codec.Notation.JSON)


def _build(model_cls: type[SpecModel], data: bytes | str | dict):
    doc = data if isinstance(data, dict) else codec.load(data)
    try:
        return model_cls.model_validate(doc)
    except ValidationError as e:
        errors = [_format_error(err) for err in e.errors()]
        LOG.debug("Building %s failed with %d errors", model_cls.__name__, len(errors))
        raise AggregateBuildFailure(errors) from e


def _format_error(error: dict) -> str:
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}"
