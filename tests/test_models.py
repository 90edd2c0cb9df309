import json

import pytest
from openapi_spec_converter.errors import AggregateBuildFailure
from openapi_spec_converter.model import builder
from openapi_spec_converter.model.base import HTTP_METHODS, Schema
from openapi_spec_converter.model.openapi3 import OpenAPIDocument


class TestSchema:
    def test_scalar_type_becomes_list(self):
        s = Schema.model_validate({"type": "string"})
        assert s.type == ["string"]
        assert s.is_string is True

    def test_single_type_written_as_scalar(self):
        s = Schema(type=["string"])
        assert s.to_dict() == {"type": "string"}

    def test_type_array_written_as_list(self):
        s = Schema(type=["string", "null"])
        assert s.to_dict() == {"type": ["string", "null"]}

    def test_exclusive_bound_keeps_boolean_form(self):
        s = Schema.model_validate({"minimum": 1, "exclusiveMinimum": True})
        assert s.exclusive_minimum is True
        assert s.minimum == 1

    def test_exclusive_bound_keeps_numeric_form(self):
        s = Schema.model_validate({"exclusiveMinimum": 1})
        assert s.exclusive_minimum == 1
        assert not isinstance(s.exclusive_minimum, bool)

    def test_unknown_keywords_survive(self):
        data = {"type": "string", "enum": ["a", "b"], "x-order": 3}
        assert Schema.model_validate(data).to_dict() == data

    def test_nested_schemas_are_models(self):
        s = Schema.model_validate({
            "type": "object",
            "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
            "oneOf": [{"type": "integer"}],
        })
        assert isinstance(s.properties["tags"].items, Schema)
        assert s.one_of[0].type == ["integer"]

    def test_ref_alias(self):
        s = Schema.model_validate({"$ref": "#/components/schemas/Pet"})
        assert s.ref == "#/components/schemas/Pet"
        assert s.to_dict() == {"$ref": "#/components/schemas/Pet"}


class TestBuilder:
    def test_parse_openapi_from_text(self):
        doc = builder.parse_openapi(b'{"openapi": "3.0.3", "paths": {"/x": {"get": {"responses": {"200": {"description": "ok"}}}}}}')
        assert isinstance(doc, OpenAPIDocument)
        assert doc.paths["/x"].get.responses["200"].description == "ok"

    def test_serialize_roundtrip(self):
        data = {
            "openapi": "3.0.3",
            "info": {"title": "T", "version": "1"},
            "paths": {
                "/x": {
                    "post": {
                        "operationId": "Svc_Create",
                        "requestBody": {"content": {"application/json": {"schema": {"type": "object"}}}},
                        "responses": {"200": {"description": "ok"}},
                    }
                }
            },
        }
        doc = builder.parse_openapi(data)
        assert json.loads(builder.serialize(doc)) == data

    def test_build_errors_are_aggregated(self):
        with pytest.raises(AggregateBuildFailure) as exc:
            builder.parse_openapi({"paths": {"/x": {"get": {"tags": "not-a-list"}}}})
        assert len(exc.value.errors) == 2
        assert any(e.startswith("openapi") for e in exc.value.errors)

    def test_parse_swagger(self):
        doc = builder.parse_swagger({"swagger": "2.0", "paths": {"/x": {"put": {"consumes": ["application/octet-stream"], "parameters": [{"name": "body", "in": "body"}]}}}})
        operation = doc.paths["/x"].put
        assert operation.parameters[0].location == "body"
        assert operation.parameters[0].schema_ is None


class TestExplicitNulls:
    def test_null_keywords_survive(self):
        data = {"type": ["string", "null"], "default": None, "example": None}
        assert Schema.model_validate(data).to_dict() == data

    def test_cleared_field_is_omitted(self):
        s = Schema.model_validate({"type": "string", "format": "date"})
        s.format = None
        assert s.to_dict() == {"type": "string"}

    def test_keep_null(self):
        s = Schema(type=["string"])
        s.keep_null("example")
        assert s.to_dict() == {"type": "string", "example": None}


class TestBooleanSchemas:
    def test_boolean_property_and_branches(self):
        data = {
            "type": "object",
            "properties": {"anything": True, "nothing": False, "name": {"type": "string"}},
            "allOf": [True, {"type": "object"}],
        }
        s = Schema.model_validate(data)
        assert s.properties["anything"] is True
        assert isinstance(s.properties["name"], Schema)
        assert s.to_dict() == data


class TestPathItem:
    def test_operations_in_method_order(self):
        doc = builder.parse_openapi({
            "openapi": "3.0.3",
            "paths": {"/x": {m: {} for m in reversed(HTTP_METHODS)}},
        })
        assert [m for m, _ in doc.paths["/x"].operations()] == list(HTTP_METHODS)
