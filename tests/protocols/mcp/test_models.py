"""Tests for MCP JSON-RPC models."""

import json

import pytest
from pydantic import ValidationError

from cendoj_mcp.protocols.mcp.models import (
    HANDSHAKE_ID,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPToolDef,
    ToolCallParams,
    object_schema,
    text_content,
)


class TestJsonRpcRequest:
    def test_defaults(self) -> None:
        req = JsonRpcRequest(method="tools/list")
        assert req.jsonrpc == "2.0"
        assert req.id is None
        assert req.params == {}

    def test_parse_request(self) -> None:
        req = JsonRpcRequest.model_validate_json(
            '{"jsonrpc": "2.0", "method": "tools/call", "id": 42, "params": {"name": "x"}}'
        )
        assert req.method == "tools/call"
        assert req.id == 42
        assert req.params["name"] == "x"
        assert not req.is_notification

    def test_missing_id_is_notification(self) -> None:
        req = JsonRpcRequest.model_validate_json(
            '{"jsonrpc": "2.0", "method": "notifications/initialized"}'
        )
        assert req.is_notification

    def test_explicit_null_id_is_not_notification(self) -> None:
        req = JsonRpcRequest.model_validate_json('{"jsonrpc": "2.0", "method": "x", "id": null}')
        assert req.id is None
        assert not req.is_notification
        assert json.loads(req.to_wire())["id"] is None

    @pytest.mark.parametrize("raw_id", ["true", "false", "1.0"])
    def test_bool_and_float_ids_are_invalid(self, raw_id: str) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate_json(
                f'{{"jsonrpc": "2.0", "method": "x", "id": {raw_id}}}'
            )
        with pytest.raises(ValidationError):
            JsonRpcResponse.model_validate_json(
                f'{{"jsonrpc": "2.0", "id": {raw_id}, "result": 1}}'
            )

    def test_wrong_version_is_invalid(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate_json('{"jsonrpc": "1.0", "method": "x", "id": 1}')

    def test_missing_method_is_invalid(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate_json('{"jsonrpc": "2.0", "id": 1}')

    def test_non_object_is_invalid(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate_json("[1, 2]")

    def test_wire_omits_missing_id(self) -> None:
        wire = json.loads(JsonRpcRequest(method="notifications/initialized").to_wire())
        assert "id" not in wire

    def test_wire_shape(self) -> None:
        wire = json.loads(JsonRpcRequest(method="initialize", id=1).to_wire())
        assert wire == {"jsonrpc": "2.0", "method": "initialize", "id": 1, "params": {}}


class TestJsonRpcError:
    def test_basic(self) -> None:
        err = JsonRpcError(code=-32600, message="Invalid request")
        assert err.code == -32600
        assert err.data is None


class TestJsonRpcResponse:
    def test_success_wire_has_result_not_error(self) -> None:
        wire = json.loads(JsonRpcResponse.success(5, {"tools": []}).to_wire())
        assert wire == {"jsonrpc": "2.0", "result": {"tools": []}, "id": 5}

    def test_null_result_is_kept(self) -> None:
        wire = json.loads(JsonRpcResponse.success(5, None).to_wire())
        assert "result" in wire
        assert wire["result"] is None

    def test_failure_wire_keeps_null_id(self) -> None:
        wire = json.loads(JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error").to_wire())
        assert wire == {
            "jsonrpc": "2.0",
            "error": {"code": -32700, "message": "Parse error"},
            "id": None,
        }

    def test_failure_includes_data_when_set(self) -> None:
        wire = json.loads(JsonRpcResponse.failure(1, -32602, "bad", data={"f": 1}).to_wire())
        assert wire["error"]["data"] == {"f": 1}

    def test_handshake_detection(self) -> None:
        assert JsonRpcResponse.success(HANDSHAKE_ID, {}).is_handshake
        assert not JsonRpcResponse.success(1, {}).is_handshake
        assert not JsonRpcResponse.failure(HANDSHAKE_ID, -1, "x").is_handshake

    def test_parse_error_reply(self) -> None:
        resp = JsonRpcResponse.model_validate_json(
            '{"jsonrpc": "2.0", "id": 3, "error": {"code": -32601, "message": "nope"}}'
        )
        assert resp.error is not None
        assert resp.error.code == -32601


class TestMCPToolDef:
    def test_alias_round_trip(self) -> None:
        tool = MCPToolDef.model_validate(
            {"name": "get_sentence", "inputSchema": {"type": "object"}}
        )
        assert tool.input_schema == {"type": "object"}
        assert tool.to_wire() == {
            "name": "get_sentence",
            "description": "",
            "inputSchema": {"type": "object"},
        }

    def test_frozen(self) -> None:
        tool = MCPToolDef(name="x")
        with pytest.raises(ValidationError):
            tool.name = "y"  # type: ignore[misc]


class TestToolCallParams:
    def test_arguments_default_to_empty(self) -> None:
        assert ToolCallParams.model_validate({"name": "x"}).arguments == {}

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError):
            ToolCallParams.model_validate({"arguments": {}})


class TestHelpers:
    def test_object_schema(self) -> None:
        schema = object_schema({"id": {"type": "integer"}}, ["id"])
        assert schema == {
            "type": "object",
            "properties": {"id": {"type": "integer"}},
            "required": ["id"],
        }

    def test_text_content_is_compact_json(self) -> None:
        content = text_content({"data": {"id": 2, "juez": "María López"}})
        assert content == {
            "content": [
                {"type": "text", "text": '{"data":{"id":2,"juez":"María López"}}'}
            ]
        }


class TestJsonRpcResponseParsing:
    def test_request_shaped_message_is_not_a_reply(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcResponse.model_validate_json('{"jsonrpc": "2.0", "method": "x", "id": 1}')

    def test_string_id_reply(self) -> None:
        resp = JsonRpcResponse.model_validate_json('{"jsonrpc": "2.0", "id": "a", "result": 2}')
        assert resp.id == "a"
        assert not resp.is_handshake
