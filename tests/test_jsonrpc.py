"""Tests for the JSON-RPC 2.0 message model and codec."""

import json

import pytest

from boost_mcp.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    Message,
    decode,
    encode,
    error_response,
)


class TestErrorCodes:
    """Tests for the fixed error-code table."""

    def test_codes_match_jsonrpc_spec(self):
        """Should use the standard JSON-RPC 2.0 codes."""
        assert PARSE_ERROR == -32700
        assert INVALID_REQUEST == -32600
        assert METHOD_NOT_FOUND == -32601
        assert INVALID_PARAMS == -32602
        assert INTERNAL_ERROR == -32603


class TestMessage:
    """Tests for the Message model."""

    def test_from_dict_defaults_missing_fields(self):
        """Should not fail on missing optional fields."""
        msg = Message.from_dict({})

        assert msg.id is None
        assert msg.method is None
        assert msg.params == {}
        assert msg.result is None
        assert msg.error is None
        assert msg.jsonrpc == "2.0"

    def test_to_dict_omits_unset_fields(self):
        """Should only emit fields that are set."""
        assert Message(method="ping").to_dict() == {"jsonrpc": "2.0", "method": "ping"}

    def test_to_dict_emits_all_set_fields_in_stable_order(self):
        """Should emit jsonrpc, id, method, params in order."""
        msg = Message(id=7, method="tools/call", params={"name": "x"})

        assert list(msg.to_dict()) == ["jsonrpc", "id", "method", "params"]

    def test_request_predicates(self):
        """Should classify a request with an id."""
        msg = Message(id=1, method="tools/list")

        assert msg.is_request
        assert not msg.is_response
        assert not msg.is_notification

    def test_notification_requires_method_without_id(self):
        """Should be a notification iff method is set and id is absent."""
        assert Message(method="notifications/initialized").is_notification
        assert not Message(id=1, method="ping").is_notification
        assert not Message(result={"ok": True}).is_notification
        assert not Message().is_notification

    def test_id_zero_is_not_absent(self):
        """Should treat id 0 as a real correlation token."""
        msg = Message(id=0, method="ping")

        assert not msg.is_notification
        assert msg.to_dict()["id"] == 0

    def test_success_builder(self):
        """Should build a success response."""
        msg = Message.success(3, {"tools": []})

        assert msg.is_response
        assert not msg.is_request
        assert msg.to_dict() == {"jsonrpc": "2.0", "id": 3, "result": {"tools": []}}

    def test_failure_builder_with_data(self):
        """Should build an error response including data."""
        msg = Message.failure(3, INVALID_PARAMS, "Bad params", {"field": "name"})

        assert msg.is_response
        assert msg.result is None
        assert msg.error == {"code": -32602, "message": "Bad params", "data": {"field": "name"}}

    def test_failure_builder_omits_data_when_none(self):
        """Should omit data when not provided."""
        msg = Message.failure(None, PARSE_ERROR, "Parse error")

        assert "data" not in msg.error

    def test_empty_result_is_still_a_response(self):
        """Should treat an empty object result as set."""
        msg = Message.success(1, {})

        assert msg.is_response
        assert msg.to_dict()["result"] == {}


class TestDecode:
    """Tests for decoding wire text."""

    def test_decodes_valid_request(self):
        """Should parse a valid request."""
        msg = decode(
            json.dumps(
                {"jsonrpc": "2.0", "id": 1, "method": "tools/list", "params": {"cursor": "abc"}}
            )
        )

        assert msg.id == 1
        assert msg.method == "tools/list"
        assert msg.params == {"cursor": "abc"}
        assert msg.is_request

    def test_decodes_string_id(self):
        """Should accept string IDs."""
        msg = decode('{"jsonrpc": "2.0", "id": "req-123", "method": "ping"}')

        assert msg.id == "req-123"

    def test_decodes_notification(self):
        """Should parse notification (no id)."""
        msg = decode('{"jsonrpc": "2.0", "method": "notifications/initialized"}')

        assert msg.is_notification

    def test_null_id_is_treated_as_absent(self):
        """Should treat an explicit null id as a notification."""
        msg = decode('{"jsonrpc": "2.0", "id": null, "method": "ping"}')

        assert msg.is_notification

    def test_decodes_response(self):
        """Should parse a response message."""
        msg = decode('{"jsonrpc": "2.0", "id": 4, "result": {"ok": true}}')

        assert msg.is_response
        assert not msg.is_request

    def test_invalid_json_is_parse_error(self):
        """Should return parse error for invalid JSON."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode("not valid json{")
        assert exc_info.value.code == PARSE_ERROR

    def test_missing_version_is_invalid_request(self):
        """Should reject missing jsonrpc field."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode('{"id": 1, "method": "ping"}')
        assert exc_info.value.code == INVALID_REQUEST

    def test_wrong_version_is_invalid_request(self):
        """Should reject wrong jsonrpc version."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode('{"jsonrpc": "1.0", "id": 1, "method": "ping"}')
        assert exc_info.value.code == INVALID_REQUEST

    def test_numeric_version_is_invalid_request(self):
        """Should require the literal string '2.0'."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode('{"jsonrpc": 2.0, "id": 1, "method": "ping"}')
        assert exc_info.value.code == INVALID_REQUEST

    def test_array_is_invalid_request(self):
        """Should reject array (batch not supported)."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode('[{"jsonrpc": "2.0", "id": 1, "method": "ping"}]')
        assert exc_info.value.code == INVALID_REQUEST

    def test_non_object_params_is_invalid_request(self):
        """Should reject positional params."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode('{"jsonrpc": "2.0", "id": 1, "method": "ping", "params": [1, 2]}')
        assert exc_info.value.code == INVALID_REQUEST

    def test_non_string_method_is_invalid_request(self):
        """Should reject a numeric method."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode('{"jsonrpc": "2.0", "id": 1, "method": 42}')
        assert exc_info.value.code == INVALID_REQUEST

    def test_oversized_message_is_parse_error(self):
        """Should reject messages larger than the limit."""
        raw = json.dumps({"jsonrpc": "2.0", "id": 1, "method": "ping", "params": {"d": "x" * 200}})

        with pytest.raises(JsonRpcError) as exc_info:
            decode(raw, max_size=100)

        assert exc_info.value.code == PARSE_ERROR
        assert "too large" in exc_info.value.message.lower()

    def test_deeply_nested_input_is_parse_error(self):
        """Should report nesting beyond the recursion limit as a parse error."""
        with pytest.raises(JsonRpcError) as exc_info:
            decode("[" * 100_000)

        assert exc_info.value.code == PARSE_ERROR


class TestEncode:
    """Tests for encoding messages to wire text."""

    def test_encodes_error_response(self):
        """Should encode a complete error object."""
        parsed = json.loads(encode(Message.failure(1, INVALID_REQUEST, "Invalid request")))

        assert parsed == {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32600, "message": "Invalid request"},
        }

    def test_output_is_a_single_ascii_line(self):
        """Should escape control characters and non-ASCII text."""
        text = "path\nwith\ttabs\x00 and ünïcödé   😀 \udc80"
        line = encode(Message.success(1, {"text": text}))

        assert "\n" not in line
        assert line.isascii()
        assert json.loads(line)["result"]["text"] == text

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_rejects_non_finite_numbers(self, value):
        """Should refuse to emit NaN or infinity, which are not JSON."""
        with pytest.raises(ValueError):
            encode(Message.success(1, {"ratio": value}))

    @pytest.mark.parametrize(
        "raw",
        [
            '{"jsonrpc": "2.0", "id": 1, "method": "tools/call", '
            '"params": {"name": "echo", "arguments": {"x": 1}}}',
            '{"jsonrpc": "2.0", "method": "notifications/initialized"}',
            '{"jsonrpc": "2.0", "id": "abc", "method": "ping", "params": {}}',
        ],
    )
    def test_round_trip_is_stable(self, raw):
        """Should decode what it encodes to the same message."""
        msg = decode(raw)

        assert decode(encode(msg)) == msg


class TestErrorResponse:
    """Tests for the error response helper."""

    def test_builds_error_message(self):
        """Should build an error response without raising."""
        msg = error_response(None, PARSE_ERROR, "Parse error")

        assert msg.id is None
        assert msg.error["code"] == PARSE_ERROR

    def test_unknown_id_is_encoded_as_null(self):
        """Should emit an explicit null id on error responses."""
        parsed = json.loads(encode(error_response(None, PARSE_ERROR, "Parse error")))

        assert "id" in parsed
        assert parsed["id"] is None

    def test_error_class_stores_code_message_and_data(self):
        """Should store code, message and optional data."""
        error = JsonRpcError(INTERNAL_ERROR, "Something went wrong", {"field": "name"})

        assert error.code == INTERNAL_ERROR
        assert error.message == "Something went wrong"
        assert error.data == {"field": "name"}
        assert str(error) == "Something went wrong"
