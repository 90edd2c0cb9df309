"""Structural conversion between Swagger 2.0 and OpenAPI 3.0.

These functions reshape whole documents: definitions move under components,
body and form parameters become request bodies, response schemas move under
media types, and every ``$ref`` is re-targeted. They work on plain mappings;
the field-level differences between the dialects are handled by the rule
library and the Swagger normalizer.
"""

import copy
import logging
import re
from urllib.parse import urlsplit

from openapi_spec_converter.model.base import HTTP_METHODS

LOG = logging.getLogger(__name__)

SWAGGER_VERSION = "2.0"
OPENAPI30_VERSION = "3.0.3"

JSON_MEDIA = "application/json"
OCTET_STREAM = "application/octet-stream"
FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"
FORM_MEDIA = (MULTIPART, FORM_URLENCODED)

# OpenAPI 3.0 has no parameter name for a request body; keep it for the way back.
ORIGINAL_PARAM_NAME = "x-originalParamName"

# Keywords of a non-body Swagger parameter that describe its value.
VALUE_KEYS = (
    "type",
    "format",
    "items",
    "default",
    "maximum",
    "exclusiveMaximum",
    "minimum",
    "exclusiveMinimum",
    "maxLength",
    "minLength",
    "pattern",
    "maxItems",
    "minItems",
    "uniqueItems",
    "enum",
    "multipleOf",
)

PASSTHROUGH_KEYS = ("info", "tags", "externalDocs", "security")

OAUTH2_FLOWS = {
    "implicit": "implicit",
    "password": "password",
    "application": "clientCredentials",
    "accessCode": "authorizationCode",
}

DELIMITED_STYLES = {"ssv": "spaceDelimited", "pipes": "pipeDelimited"}


# ---------------------------------------------------------------------------
# Swagger 2.0 -> OpenAPI 3.0
# ---------------------------------------------------------------------------


def swagger_to_openapi3(swagger: dict) -> dict:
    """Convert a Swagger 2.0 mapping into an OpenAPI 3.0 mapping."""
    doc = copy.deepcopy(swagger)
    global_params = doc.get("parameters") or {}
    consumes = doc.get("consumes") or []
    produces = doc.get("produces") or []

    result = {"openapi": OPENAPI30_VERSION}
    result.update(_passthrough(doc))

    servers = _servers_from_host(doc)
    if servers:
        result["servers"] = servers

    result["paths"] = {
        path: _path_item_to_v3(item, global_params, consumes, produces)
        for path, item in (doc.get("paths") or {}).items()
    }

    components = _components_to_v3(doc, global_params, consumes, produces)
    if components:
        result["components"] = components

    body_params = {name for name, p in global_params.items() if p.get("in") == "body"}
    return _rewrite_refs(result, lambda ref: _ref_to_v3(ref, body_params))


def _passthrough(doc: dict) -> dict:
    result = {key: doc[key] for key in PASSTHROUGH_KEYS if key in doc}
    result.update({k: v for k, v in doc.items() if k.startswith("x-")})
    return result


def _servers_from_host(doc: dict) -> list[dict]:
    host = doc.get("host")
    base_path = doc.get("basePath", "")
    if host:
        schemes = doc.get("schemes") or ["https"]
        return [{"url": f"{scheme}://{host}{base_path}"} for scheme in schemes]
    if base_path:
        return [{"url": base_path}]
    return []


def _components_to_v3(doc, global_params, consumes, produces) -> dict:
    components = {}

    if doc.get("definitions"):
        components["schemas"] = {
            name: _schema_to_v3(schema) for name, schema in doc["definitions"].items()
        }

    parameters, request_bodies = {}, {}
    for name, param in global_params.items():
        if param.get("in") == "body":
            request_bodies[name] = _body_to_request_body(param, consumes or [JSON_MEDIA])
        elif param.get("in") != "formData":
            parameters[name] = _parameter_to_v3(param)
    if parameters:
        components["parameters"] = parameters
    if request_bodies:
        components["requestBodies"] = request_bodies

    if doc.get("responses"):
        components["responses"] = {
            name: _response_to_v3(response, produces or [JSON_MEDIA])
            for name, response in doc["responses"].items()
        }

    if doc.get("securityDefinitions"):
        components["securitySchemes"] = {
            name: _security_scheme_to_v3(scheme)
            for name, scheme in doc["securityDefinitions"].items()
        }

    return components


def _path_item_to_v3(path_item, global_params, consumes, produces) -> dict:
    shared = path_item.get("parameters") or []
    # Body and form parameters cannot live on a 3.0 path item; push them down.
    inherited = [p for p in shared if _location(p, global_params) in ("body", "formData")]

    result = {}
    for key, value in path_item.items():
        if key in HTTP_METHODS:
            result[key] = _operation_to_v3(
                value, inherited, global_params, consumes, produces
            )
        elif key == "parameters":
            params = [_parameter_to_v3(p) for p in value if p not in inherited]
            if params:
                result["parameters"] = params
        else:
            result[key] = value
    return result


def _operation_to_v3(operation, inherited, global_params, consumes, produces) -> dict:
    consumes = operation.get("consumes") or consumes or [JSON_MEDIA]
    produces = operation.get("produces") or produces or [JSON_MEDIA]

    parameters, body, form = [], None, []
    for param in [*inherited, *(operation.get("parameters") or [])]:
        location = _location(param, global_params)
        if location == "body":
            body = param
        elif location == "formData":
            form.append(_resolve_param(param, global_params))
        else:
            parameters.append(_parameter_to_v3(param))

    result = {}
    for key, value in operation.items():
        if key in ("consumes", "produces", "parameters"):
            continue
        if key == "responses":
            result[key] = {
                code: _response_to_v3(response, produces)
                for code, response in value.items()
            }
        else:
            result[key] = value

    if parameters:
        result["parameters"] = parameters
    if body is not None:
        result["requestBody"] = _body_to_request_body(body, consumes)
    elif form:
        result["requestBody"] = _form_to_request_body(form, consumes)
    return result


def _location(param: dict, global_params: dict) -> str | None:
    return _resolve_param(param, global_params).get("in")


def _resolve_param(param: dict, global_params: dict) -> dict:
    if "$ref" in param:
        return global_params.get(param["$ref"].rsplit("/", 1)[-1], {})
    return param


def _parameter_to_v3(param: dict) -> dict:
    if "$ref" in param:
        return {"$ref": param["$ref"]}

    result = {k: v for k, v in param.items() if k not in VALUE_KEYS}
    schema = {k: param[k] for k in VALUE_KEYS if k in param}
    if schema:
        result["schema"] = _schema_to_v3(schema)

    collection_format = result.pop("collectionFormat", None)
    if collection_format == "multi":
        result["style"] = "form"
        result["explode"] = True
    elif collection_format in DELIMITED_STYLES:
        result["style"] = DELIMITED_STYLES[collection_format]
    elif collection_format == "csv":
        result["explode"] = False
    return result


def _body_to_request_body(param: dict, consumes: list[str]) -> dict:
    if "$ref" in param:
        return {"$ref": param["$ref"]}

    schema = _schema_to_v3(param.get("schema") or {})
    result = {}
    if param.get("description"):
        result["description"] = param["description"]
    result["content"] = {media: {"schema": copy.deepcopy(schema)} for media in consumes}
    if param.get("required"):
        result["required"] = True
    if param.get("name"):
        result[ORIGINAL_PARAM_NAME] = param["name"]
    return result


def _form_to_request_body(params: list[dict], consumes: list[str]) -> dict:
    properties, required = {}, []
    has_file = False
    for param in params:
        if param.get("type") == "file":
            has_file = True
            prop = {"type": "string", "format": "binary"}
        else:
            prop = _schema_to_v3({k: param[k] for k in VALUE_KEYS if k in param})
        if param.get("description"):
            prop["description"] = param["description"]
        properties[param["name"]] = prop
        if param.get("required"):
            required.append(param["name"])

    schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required

    media_types = [m for m in consumes if m in FORM_MEDIA]
    if not media_types:
        media_types = [MULTIPART if has_file else FORM_URLENCODED]
    return {"content": {m: {"schema": copy.deepcopy(schema)} for m in media_types}}


def _response_to_v3(response: dict, produces: list[str]) -> dict:
    if "$ref" in response:
        return {"$ref": response["$ref"]}

    result = {k: v for k, v in response.items() if k not in ("schema", "examples", "headers")}
    result.setdefault("description", "")

    if response.get("schema") is not None:
        schema = _schema_to_v3(response["schema"])
        content = {m: {"schema": copy.deepcopy(schema)} for m in produces}
        for media, example in (response.get("examples") or {}).items():
            if media in content:
                content[media]["example"] = example
        result["content"] = content

    if response.get("headers"):
        result["headers"] = {
            name: _header_to_v3(header) for name, header in response["headers"].items()
        }
    return result


def _header_to_v3(header: dict) -> dict:
    result = {k: v for k, v in header.items() if k not in VALUE_KEYS}
    schema = {k: header[k] for k in VALUE_KEYS if k in header}
    if schema:
        result["schema"] = _schema_to_v3(schema)
    result.pop("collectionFormat", None)
    return result


def _security_scheme_to_v3(scheme: dict) -> dict:
    kind = scheme.get("type")
    if kind == "basic":
        result = {"type": "http", "scheme": "basic"}
    elif kind == "oauth2":
        flow = {}
        for key in ("authorizationUrl", "tokenUrl"):
            if key in scheme:
                flow[key] = scheme[key]
        flow["scopes"] = scheme.get("scopes") or {}
        flow_name = OAUTH2_FLOWS.get(scheme.get("flow"), "implicit")
        result = {"type": "oauth2", "flows": {flow_name: flow}}
    else:
        result = {k: v for k, v in scheme.items() if k != "description"}
    if scheme.get("description"):
        result["description"] = scheme["description"]
    return result


def _schema_to_v3(node):
    if isinstance(node, list):
        return [_schema_to_v3(item) for item in node]
    if not isinstance(node, dict):
        return node

    result = {k: _schema_to_v3(v) for k, v in node.items()}
    if result.get("type") == "file":
        result["type"] = "string"
        result["format"] = "binary"
    if "x-nullable" in result:
        result["nullable"] = result.pop("x-nullable")
    return result


def _ref_to_v3(ref: str, body_params: set[str]) -> str:
    if ref.startswith("#/definitions/"):
        return "#/components/schemas/" + ref.removeprefix("#/definitions/")
    if ref.startswith("#/parameters/"):
        name = ref.removeprefix("#/parameters/")
        if name in body_params:
            return "#/components/requestBodies/" + name
        return "#/components/parameters/" + name
    if ref.startswith("#/responses/"):
        return "#/components/responses/" + ref.removeprefix("#/responses/")
    return ref


# ---------------------------------------------------------------------------
# OpenAPI 3.0 -> Swagger 2.0
# ---------------------------------------------------------------------------


def openapi3_to_swagger(openapi: dict) -> dict:
    """Convert an OpenAPI 3.0 mapping into a Swagger 2.0 mapping.

    A request body carrying only ``application/octet-stream`` becomes a body
    parameter without a schema; the Swagger normalizer fills it in.
    """
    doc = copy.deepcopy(openapi)
    components = doc.get("components") or {}
    request_bodies = components.get("requestBodies") or {}

    result = {"swagger": SWAGGER_VERSION}
    result.update(_passthrough(doc))
    result.update(_host_from_servers(doc.get("servers") or []))

    result["paths"] = {
        path: _path_item_to_v2(item, request_bodies)
        for path, item in (doc.get("paths") or {}).items()
    }

    if components.get("schemas"):
        result["definitions"] = {
            name: _schema_to_v2(schema) for name, schema in components["schemas"].items()
        }

    parameters = {
        name: _parameter_to_v2(param)
        for name, param in (components.get("parameters") or {}).items()
    }
    for name, body in request_bodies.items():
        body_params, _ = _request_body_to_v2(body, request_bodies)
        if body_params and body_params[0].get("in") == "body":
            parameters[name] = body_params[0]
    if parameters:
        result["parameters"] = parameters

    if components.get("responses"):
        result["responses"] = {
            name: _response_to_v2(response, [])
            for name, response in components["responses"].items()
        }

    security_definitions = {}
    for name, scheme in (components.get("securitySchemes") or {}).items():
        converted = _security_scheme_to_v2(scheme)
        if converted is None:
            LOG.debug("Dropping security scheme %s: no Swagger 2.0 equivalent", name)
            continue
        security_definitions[name] = converted
    if security_definitions:
        result["securityDefinitions"] = security_definitions

    return _rewrite_refs(result, _ref_to_v2)


def _host_from_servers(servers: list[dict]) -> dict:
    if not servers:
        return {}

    urls = [_expand_server_url(server) for server in servers]
    first = urlsplit(urls[0])
    result = {}
    if first.netloc:
        result["host"] = first.netloc
    if first.path:
        result["basePath"] = first.path
    schemes = []
    for url in urls:
        parts = urlsplit(url)
        if parts.scheme and parts.netloc == first.netloc and parts.scheme not in schemes:
            schemes.append(parts.scheme)
    if schemes:
        result["schemes"] = schemes
    return result


def _expand_server_url(server: dict) -> str:
    variables = server.get("variables") or {}

    def substitute(match):
        return str(variables.get(match.group(1), {}).get("default", ""))

    return re.sub(r"\{([^}]+)\}", substitute, server.get("url", ""))


def _path_item_to_v2(path_item: dict, request_bodies: dict) -> dict:
    result = {}
    for key, value in path_item.items():
        if key in HTTP_METHODS:
            result[key] = _operation_to_v2(value, request_bodies)
        elif key == "parameters":
            result[key] = [_parameter_to_v2(p) for p in value]
        elif key in ("servers", "summary", "description", "trace"):
            continue
        else:
            result[key] = value
    return result


def _operation_to_v2(operation: dict, request_bodies: dict) -> dict:
    parameters = [_parameter_to_v2(p) for p in operation.get("parameters") or []]
    produces: list[str] = []
    consumes: list[str] = []

    result = {}
    for key, value in operation.items():
        if key in ("parameters", "requestBody", "callbacks", "servers"):
            continue
        if key == "responses":
            result[key] = {
                code: _response_to_v2(response, produces)
                for code, response in value.items()
            }
        else:
            result[key] = value

    if operation.get("requestBody") is not None:
        body_params, consumes = _request_body_to_v2(operation["requestBody"], request_bodies)
        parameters.extend(body_params)

    if consumes:
        result["consumes"] = consumes
    if produces:
        result["produces"] = produces
    if parameters:
        result["parameters"] = parameters
    return result


def _request_body_to_v2(body: dict, request_bodies: dict) -> tuple[list[dict], list[str]]:
    if "$ref" in body:
        target = request_bodies.get(body["$ref"].rsplit("/", 1)[-1], {})
        media_types = list((target.get("content") or {}).keys())
        if any(m in FORM_MEDIA for m in media_types):
            params, _ = _request_body_to_v2(target, request_bodies)
            return params, media_types
        return [{"$ref": body["$ref"]}], media_types

    content = body.get("content") or {}
    media_types = list(content.keys())
    form_media = [m for m in media_types if m in FORM_MEDIA]
    if form_media:
        return _form_parameters(content[form_media[0]].get("schema") or {}), media_types

    param = {"name": body.get(ORIGINAL_PARAM_NAME, "body"), "in": "body"}
    if body.get("description"):
        param["description"] = body["description"]
    if body.get("required"):
        param["required"] = True

    media = _preferred_media(content)
    if media is not None and media != OCTET_STREAM:
        schema = content[media].get("schema")
        if schema is not None:
            param["schema"] = _schema_to_v2(schema)
    return [param], media_types


def _form_parameters(schema: dict) -> list[dict]:
    required = set(schema.get("required") or [])
    params = []
    for name, prop in (schema.get("properties") or {}).items():
        if not isinstance(prop, dict):
            prop = {}
        param = {"name": name, "in": "formData"}
        if prop.get("description"):
            param["description"] = prop["description"]
        if name in required:
            param["required"] = True
        if prop.get("type") == "string" and prop.get("format") == "binary":
            param["type"] = "file"
        else:
            converted = _schema_to_v2(prop)
            param.update({k: converted[k] for k in VALUE_KEYS if k in converted})
            param.setdefault("type", "string")
        params.append(param)
    return params


def _preferred_media(content: dict) -> str | None:
    for media in content:
        if media == JSON_MEDIA or media.endswith("+json"):
            return media
    return next(iter(content), None)


def _parameter_to_v2(param: dict) -> dict:
    if "$ref" in param:
        return {"$ref": param["$ref"]}

    dropped = ("schema", "style", "explode", "example", "examples", "content", "allowReserved")
    result = {k: v for k, v in param.items() if k not in dropped}
    schema = _schema_to_v2(param.get("schema") or {})
    result.update({k: schema[k] for k in VALUE_KEYS if k in schema})
    result.setdefault("type", "string")

    if result["type"] == "array":
        style = param.get("style")
        if style in ("spaceDelimited", "pipeDelimited"):
            result["collectionFormat"] = "ssv" if style == "spaceDelimited" else "pipes"
        elif param.get("in") in ("query", "cookie") and param.get("explode", True):
            result["collectionFormat"] = "multi"
        else:
            result["collectionFormat"] = "csv"
    return result


def _response_to_v2(response: dict, produces: list[str]) -> dict:
    if "$ref" in response:
        return {"$ref": response["$ref"]}

    result = {k: v for k, v in response.items() if k not in ("content", "headers", "links")}
    result.setdefault("description", "")

    content = response.get("content") or {}
    for media in content:
        if media not in produces:
            produces.append(media)

    media = _preferred_media(content)
    if media is not None and content[media].get("schema") is not None:
        result["schema"] = _schema_to_v2(content[media]["schema"])
    examples = {m: c["example"] for m, c in content.items() if "example" in c}
    if examples:
        result["examples"] = examples

    if response.get("headers"):
        result["headers"] = {
            name: _header_to_v2(header) for name, header in response["headers"].items()
        }
    return result


def _header_to_v2(header: dict) -> dict:
    result = {k: v for k, v in header.items() if k in ("description",)}
    schema = _schema_to_v2(header.get("schema") or {})
    result.update({k: schema[k] for k in VALUE_KEYS if k in schema})
    result.setdefault("type", "string")
    return result


def _security_scheme_to_v2(scheme: dict) -> dict | None:
    kind = scheme.get("type")
    if kind == "http" and scheme.get("scheme", "").lower() == "basic":
        result = {"type": "basic"}
    elif kind == "http" and scheme.get("scheme", "").lower() == "bearer":
        result = {"type": "apiKey", "name": "Authorization", "in": "header"}
    elif kind == "apiKey":
        result = {k: scheme[k] for k in ("type", "name", "in") if k in scheme}
    elif kind == "oauth2":
        flows = scheme.get("flows") or {}
        if not flows:
            return None
        flow_name, flow = next(iter(flows.items()))
        reverse = {v: k for k, v in OAUTH2_FLOWS.items()}
        result = {"type": "oauth2", "flow": reverse.get(flow_name, flow_name)}
        for key in ("authorizationUrl", "tokenUrl"):
            if key in flow:
                result[key] = flow[key]
        result["scopes"] = flow.get("scopes") or {}
    else:
        return None
    if scheme.get("description"):
        result["description"] = scheme["description"]
    return result


def _schema_to_v2(node):
    if isinstance(node, list):
        return [_schema_to_v2(item) for item in node]
    if not isinstance(node, dict):
        return node

    result = {k: _schema_to_v2(v) for k, v in node.items()}
    if "nullable" in result and isinstance(result["nullable"], bool):
        result["x-nullable"] = result.pop("nullable")
    return result


def _ref_to_v2(ref: str) -> str:
    for prefix, replacement in (
        ("#/components/schemas/", "#/definitions/"),
        ("#/components/parameters/", "#/parameters/"),
        ("#/components/requestBodies/", "#/parameters/"),
        ("#/components/responses/", "#/responses/"),
    ):
        if ref.startswith(prefix):
            return replacement + ref.removeprefix(prefix)
    return ref


# ---------------------------------------------------------------------------


def _rewrite_refs(node, rewrite):
    """Return ``node`` with every ``$ref`` string passed through ``rewrite``."""
    if isinstance(node, list):
        return [_rewrite_refs(item, rewrite) for item in node]
    if not isinstance(node, dict):
        return node

    result = {}
    for key, value in node.items():
        if key == "$ref" and isinstance(value, str):
            result[key] = rewrite(value)
        else:
            result[key] = _rewrite_refs(value, rewrite)
    return result
