"""Convert a document to a target dialect one adjacent step at a time."""

import logging

from openapi_spec_converter.dialect import Dialect, detect_dialect
from openapi_spec_converter.errors import ConverterError, StepConversionFailure

from .steps import next_step

LOG = logging.getLogger(__name__)


def convert_document(data: bytes, target: Dialect) -> bytes:
    """Convert ``data`` to ``target``.

    Versions are ordered Swagger 2.0 < OpenAPI 3.0 < OpenAPI 3.1; the
    document moves one version at a time (e.g. Swagger -> 3.0 -> 3.1).
    A document already at ``target`` is returned as is.

    Raises:
        UnsupportedVersion: the version marker is not recognised.
        ParseFailure: the input is not a JSON or YAML mapping.
        StepConversionFailure: a step failed; no partial output is returned.
    """
    current = detect_dialect(data)
    LOG.debug("Input is %s, target is %s", current.label, target.label)

    while current != target:
        step = next_step(current, target)
        try:
            data = step.convert(data)
        except StepConversionFailure:
            raise
        except (ConverterError, ValueError, TypeError, KeyError, AttributeError) as e:
            raise StepConversionFailure(current, step.target, e) from e
        current = step.target

    return data
