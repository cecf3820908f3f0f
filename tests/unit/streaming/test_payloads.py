"""Unit tests for the stream payload decoders."""

import json

import pytest

from deepseek_client.exceptions import DecodeError
from deepseek_client.streaming.payloads import (
    decode_chat_chunk,
    decode_fim_chunk,
    decode_json_payload,
)
from deepseek_client.types.chat import ChatCompletionChunk
from deepseek_client.types.fim import FIMCompletionChunk


class TestDecodeJsonPayload:
    """Tests for decode_json_payload()."""

    def test_passes_document_to_builder(self):
        result = decode_json_payload('{"a": 1}', dict, "thing")
        assert result == {"a": 1}

    def test_accepts_bytes(self):
        result = decode_json_payload(b'{"a": "\xc3\xa9"}', dict, "thing")
        assert result == {"a": "é"}

    def test_malformed_json(self):
        with pytest.raises(DecodeError, match="Malformed JSON in thing") as exc_info:
            decode_json_payload("{oops", dict, "thing")
        assert exc_info.value.payload == "{oops"

    def test_deeply_nested_json(self):
        payload = "[" * 200000
        with pytest.raises(DecodeError, match="nested too deeply") as exc_info:
            decode_json_payload(payload, dict, "thing")
        assert isinstance(exc_info.value.__cause__, RecursionError)
        assert exc_info.value.payload == payload

    def test_builder_type_error_becomes_decode_error(self):
        def build(document):
            raise TypeError("choices must be a list")

        with pytest.raises(DecodeError, match="Unexpected thing schema: choices must be a list"):
            decode_json_payload("{}", build, "thing")

    def test_long_payload_truncated_in_message(self):
        payload = "x" * 500
        with pytest.raises(DecodeError) as exc_info:
            decode_json_payload(payload, dict, "thing")
        assert "..." in str(exc_info.value)
        assert exc_info.value.payload == payload


class TestDecodeChatChunk:
    """Tests for decode_chat_chunk()."""

    def test_decodes_delta(self):
        payload = json.dumps(
            {
                "id": "chatcmpl-1",
                "object": "chat.completion.chunk",
                "created": 1,
                "model": "deepseek-chat",
                "choices": [
                    {
                        "index": 0,
                        "delta": {"role": "assistant", "content": "Hi", "reasoning_content": "think"},
                        "finish_reason": None,
                    }
                ],
            }
        )

        chunk = decode_chat_chunk(payload)

        assert isinstance(chunk, ChatCompletionChunk)
        assert chunk.content == "Hi"
        assert chunk.choices[0].delta.role == "assistant"
        assert chunk.choices[0].delta.reasoning_content == "think"
        assert chunk.finish_reason is None

    def test_usage_only_final_frame(self):
        payload = json.dumps(
            {
                "id": "chatcmpl-1",
                "model": "deepseek-chat",
                "choices": [],
                "usage": {"prompt_tokens": 5, "completion_tokens": 7, "total_tokens": 12},
            }
        )

        chunk = decode_chat_chunk(payload)

        assert chunk.choices == ()
        assert chunk.content == ""
        assert chunk.usage is not None
        assert chunk.usage.total_tokens == 12

    def test_tool_call_fragments(self):
        payload = json.dumps(
            {
                "id": "c",
                "model": "m",
                "choices": [
                    {
                        "index": 0,
                        "delta": {
                            "tool_calls": [
                                {
                                    "index": 0,
                                    "id": "call_1",
                                    "type": "function",
                                    "function": {"name": "get_weather", "arguments": '{"ci'},
                                }
                            ]
                        },
                    }
                ],
            }
        )

        chunk = decode_chat_chunk(payload)
        call = chunk.choices[0].delta.tool_calls[0]

        assert call.id == "call_1"
        assert call.name == "get_weather"
        assert call.arguments == '{"ci'

    @pytest.mark.parametrize(
        "payload",
        [
            "[]",
            '"text"',
            '{"choices": "nope"}',
            '{"choices": [{"delta": "nope"}]}',
            '{"id": 5}',
        ],
    )
    def test_schema_mismatch(self, payload):
        with pytest.raises(DecodeError, match="Unexpected chat chunk schema"):
            decode_chat_chunk(payload)


class TestDecodeFimChunk:
    """Tests for decode_fim_chunk()."""

    def test_decodes_text(self):
        payload = json.dumps(
            {
                "id": "cmpl-1",
                "object": "text_completion",
                "model": "deepseek-chat",
                "choices": [{"index": 0, "text": "    return x", "finish_reason": "stop"}],
            }
        )

        chunk = decode_fim_chunk(payload)

        assert isinstance(chunk, FIMCompletionChunk)
        assert chunk.text == "    return x"
        assert chunk.finish_reason == "stop"

    def test_malformed(self):
        with pytest.raises(DecodeError, match="Malformed JSON in FIM chunk"):
            decode_fim_chunk("{")
