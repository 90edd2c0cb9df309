"""JSON / YAML text codec for API description documents."""

import json
from datetime import date, datetime
from enum import Enum

import yaml

from openapi_spec_converter.errors import ParseFailure


class Notation(str, Enum):
    JSON = "json"
    YAML = "yaml"


def detect_notation(data: bytes | str) -> Notation:
    """Guess the notation from the first non-whitespace character.

    A document starting with ``{`` is JSON, anything else (including an
    all-whitespace document) is treated as YAML.
    """
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    stripped = text.lstrip(" \t\r\n")
    if stripped.startswith("{"):
        return Notation.JSON
    return Notation.YAML


def load(data: bytes | str) -> dict:
    """Parse JSON or YAML text into a JSON-compatible mapping."""
    try:
        if detect_notation(data) == Notation.JSON:
            doc = json.loads(data)
        else:
            doc = yaml.safe_load(data)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ParseFailure(f"Cannot parse document: {e}") from e

    if not isinstance(doc, dict):
        raise ParseFailure("Cannot parse document: top level is not a mapping")
    return _json_compatible(doc)


def dump(doc: dict, notation: Notation = Notation.JSON) -> bytes:
    """Serialize a mapping in the requested notation."""
    if notation == Notation.JSON:
        return json.dumps(doc, indent=2, ensure_ascii=False).encode("utf-8")
    return yaml.safe_dump(
        doc, sort_keys=False, allow_unicode=True, default_flow_style=False
    ).encode("utf-8")


def convert(data: bytes, notation: Notation) -> bytes:
    """Re-emit ``data`` in ``notation`` unless it is already written that way."""
    if detect_notation(data) == notation:
        return data
    return dump(load(data), notation)


def _json_compatible(value):
    # YAML allows integer keys (response codes) and timestamps; JSON does not.
    if isinstance(value, dict):
        return {str(k): _json_compatible(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_compatible(v) for v in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
