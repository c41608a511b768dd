"""Tests for JSON-RPC 2.0 decoding and formatting."""

import json

import pytest

from mcp_session_proxy.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JsonRpcError,
    Message,
    Method,
    decode,
    format_error,
    format_response,
)


class TestDecode:
    """Tests for decoding client lines."""

    def test_decodes_request(self):
        """Should decode a request with id and params."""
        msg = decode(json.dumps({"jsonrpc": "2.0", "id": 7, "method": "tools/list"}))

        assert isinstance(msg, Message)
        assert msg.id == 7
        assert msg.method == "tools/list"
        assert not msg.is_notification

    def test_decodes_notification(self):
        """A message without id is a notification."""
        msg = decode(json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}))

        assert msg.is_notification

    def test_null_id_is_notification(self):
        """An explicit null id counts as no id."""
        msg = decode(json.dumps({"jsonrpc": "2.0", "id": None, "method": "x"}))

        assert msg.is_notification

    @pytest.mark.parametrize("raw", ["", "not json", '{"jsonrpc": "2.0",', "{'a': 1}"])
    def test_invalid_json_returns_none(self, raw):
        """Text that is not JSON is dropped, not reported."""
        assert decode(raw) is None

    def test_missing_method_raises_invalid_request_with_id(self):
        """Should carry the request id on Invalid Request."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode(json.dumps({"jsonrpc": "2.0", "id": "abc"}))

        assert exc_info.value.code == INVALID_REQUEST
        assert exc_info.value.msg_id == "abc"

    def test_non_object_raises_invalid_request(self):
        """A JSON value that is not an object cannot be a request."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode("[1, 2, 3]")

        assert exc_info.value.code == INVALID_REQUEST
        assert exc_info.value.msg_id is None

    def test_does_not_require_jsonrpc_member(self):
        """The jsonrpc version member is not enforced."""
        msg = decode(json.dumps({"id": 1, "method": "initialize"}))

        assert msg.method == "initialize"

    def test_tool_call_accessors(self):
        """Should expose the tool name and arguments of a tools/call."""
        msg = decode(
            json.dumps(
                {
                    "id": 1,
                    "method": "tools/call",
                    "params": {"name": "echo", "arguments": {"message": "hi"}},
                }
            )
        )

        assert msg.tool_name == "echo"
        assert msg.arguments == {"message": "hi"}

    def test_tool_call_accessors_tolerate_missing_params(self):
        msg = decode(json.dumps({"id": 1, "method": "tools/call"}))

        assert msg.tool_name is None
        assert msg.arguments == {}

    def test_to_dict_keeps_unknown_members(self):
        """Members the proxy does not interpret survive re-encoding."""
        raw = {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "_meta": {"x": 1}}
        msg = decode(json.dumps(raw))

        assert msg.to_dict() == raw


class TestMethod:
    """Tests for the closed method set."""

    def test_parses_known_methods(self):
        assert Method.parse("initialize") is Method.INITIALIZE
        assert Method.parse("tools/list") is Method.TOOLS_LIST
        assert Method.parse("tools/call") is Method.TOOLS_CALL
        assert Method.parse("notifications/initialized") is Method.INITIALIZED

    def test_unknown_method_is_none(self):
        assert Method.parse("resources/list") is None


class TestFormatting:
    """Tests for response formatting."""

    def test_format_response(self):
        data = json.loads(format_response(3, {"ok": True}))

        assert data == {"jsonrpc": "2.0", "id": 3, "result": {"ok": True}}

    def test_format_error(self):
        data = json.loads(format_error(4, METHOD_NOT_FOUND, "Method not found"))

        assert data["id"] == 4
        assert data["error"] == {"code": -32601, "message": "Method not found"}

    def test_format_error_with_data_and_null_id(self):
        data = json.loads(format_error(None, INTERNAL_ERROR, "boom", data={"x": 1}))

        assert data["id"] is None
        assert data["error"]["data"] == {"x": 1}

    def test_output_is_single_line(self):
        assert "\n" not in format_response(1, {"text": "a\nb"})
