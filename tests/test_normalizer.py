import pytest
from openapi_spec_converter.migrate import normalizer
from openapi_spec_converter.model import builder
from openapi_spec_converter.model.swagger import SwaggerOperation


def _operation(**fields) -> SwaggerOperation:
    return SwaggerOperation.model_validate(fields)


def _upload_doc(method: str):
    return builder.parse_swagger({
        "swagger": "2.0",
        "paths": {"/upload": {method: {
            "consumes": ["application/octet-stream"],
            "parameters": [
                {"name": "id", "in": "path", "type": "string"},
                {"name": "body", "in": "body"},
            ],
            "responses": {"200": {"description": "ok"}},
        }}},
    })


class TestCopyDescriptionToSummary:
    def test_summary_falls_back_to_description(self):
        op = _operation(description="List pets")
        normalizer.copy_description_to_summary(op)
        assert op.summary == "List pets"
        assert op.description == "List pets"

    def test_existing_summary_is_kept(self):
        op = _operation(summary="Short", description="Long text", operationId="PetService_ListPets", tags=["PetService"])
        normalizer.copy_description_to_summary(op)
        assert op.summary == "Short"
        assert op.description == "Long text\n\ngRPC客户端名称：PetService\n接口方法名称：ListPets"

    def test_annotation_without_description(self):
        op = _operation(operationId="ListPets")
        normalizer.copy_description_to_summary(op)
        assert op.summary is None
        assert op.description == "接口方法名称：ListPets"

    def test_summary_uses_description_before_annotation(self):
        op = _operation(description="Pets", tags=["PetService"])
        normalizer.copy_description_to_summary(op)
        assert op.summary == "Pets"
        assert op.description == "Pets\n\ngRPC客户端名称：PetService"

    def test_nothing_to_annotate(self):
        op = _operation()
        normalizer.copy_description_to_summary(op)
        assert op.description is None
        assert op.summary is None

    @pytest.mark.parametrize("operation_id, expected", [
        ("Svc_Method", "Method"),
        ("a_b_c", "c"),
        ("Plain", "Plain"),
        ("Trailing_", "Trailing_"),
    ])
    def test_method_name(self, operation_id, expected):
        assert normalizer._method_name(operation_id) == expected


class TestDeduplicateTags:
    def test_first_occurrence_order(self):
        op = _operation(tags=["b", "a", "b", "c", "a"])
        normalizer.deduplicate_tags(op)
        assert op.tags == ["b", "a", "c"]

    def test_no_tags(self):
        op = _operation()
        normalizer.deduplicate_tags(op)
        assert op.tags is None


class TestDefaultErrorResponses:
    def test_default_response_is_overwritten(self):
        doc = builder.parse_swagger({
            "swagger": "2.0",
            "paths": {"/x": {"get": {"responses": {"default": {"description": "old"}}}}},
        })
        normalizer.add_default_error_responses(doc)
        default = doc.to_dict()["paths"]["/x"]["get"]["responses"]["default"]
        assert default == {
            "description": "An unexpected error response.",
            "schema": {"$ref": "#/definitions/rpcStatus"},
        }

    def test_definitions_are_added(self):
        doc = builder.parse_swagger({"swagger": "2.0", "paths": {}})
        normalizer.add_default_error_responses(doc)
        definitions = doc.to_dict()["definitions"]
        assert definitions["rpcStatus"]["properties"]["code"] == {"type": "integer", "format": "int32"}
        assert definitions["rpcStatus"]["properties"]["details"] == {
            "type": "array",
            "items": {"$ref": "#/definitions/googleprotobufAny"},
        }
        assert definitions["googleprotobufAny"]["additionalProperties"] == {}

    def test_existing_definitions_are_kept(self):
        doc = builder.parse_swagger({
            "swagger": "2.0",
            "definitions": {"rpcStatus": {"type": "object", "title": "mine"}},
        })
        normalizer.add_default_error_responses(doc)
        assert doc.definitions["rpcStatus"].title == "mine"
        assert "googleprotobufAny" in doc.definitions

    def test_every_method_gets_a_default(self):
        methods = ["get", "put", "post", "delete", "options", "head", "patch"]
        doc = builder.parse_swagger({
            "swagger": "2.0",
            "paths": {"/x": {m: {"responses": {"200": {"description": "ok"}}} for m in methods}},
        })
        normalizer.add_default_error_responses(doc)
        path = doc.to_dict()["paths"]["/x"]
        assert all("default" in path[m]["responses"] for m in methods)


class TestFixUploadFormats:
    @pytest.mark.parametrize("method", ["post", "put", "patch", "options"])
    def test_body_gets_binary_schema(self, method):
        doc = _upload_doc(method)
        normalizer.fix_upload_formats(doc)
        params = doc.to_dict()["paths"]["/upload"][method]["parameters"]
        assert params[1]["schema"] == {"type": "string", "format": "binary"}
        assert "schema" not in params[0]

    @pytest.mark.parametrize("method", ["get", "delete", "head"])
    def test_other_methods_skipped(self, method):
        doc = _upload_doc(method)
        normalizer.fix_upload_formats(doc)
        params = doc.to_dict()["paths"]["/upload"][method]["parameters"]
        assert "schema" not in params[1]

    def test_existing_schema_kept(self):
        doc = builder.parse_swagger({
            "swagger": "2.0",
            "paths": {"/upload": {"post": {
                "consumes": ["application/octet-stream"],
                "parameters": [{"name": "body", "in": "body", "schema": {"type": "object"}}],
            }}},
        })
        normalizer.fix_upload_formats(doc)
        assert doc.paths["/upload"].post.parameters[0].schema_.to_dict() == {"type": "object"}

    def test_requires_octet_stream_consumes(self):
        doc = builder.parse_swagger({
            "swagger": "2.0",
            "paths": {"/upload": {"post": {"parameters": [{"name": "body", "in": "body"}]}}},
        })
        normalizer.fix_upload_formats(doc)
        assert doc.paths["/upload"].post.parameters[0].schema_ is None
