"""
Unit tests for chat completion types.

These tests verify request validation and serialization, and decoding of
single-shot responses from API documents.
"""

import dataclasses

import pytest

from deepseek_client.exceptions import RequestBuildError
from deepseek_client.types import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    StreamChatCompletionRequest,
    ToolCall,
    Usage,
)
from deepseek_client.types.chat import FunctionCall


def user(content="Hello"):
    return ChatMessage(role="user", content=content)


class TestChatCompletionRequestValidate:
    """Tests for ChatCompletionRequest.validate()."""

    def test_valid_request(self):
        ChatCompletionRequest(model="deepseek-chat", messages=[user()]).validate()

    def test_dict_messages_accepted(self):
        request = ChatCompletionRequest(
            model="deepseek-chat", messages=[{"role": "system", "content": "Be brief"}]
        )
        request.validate()

    def test_empty_model(self):
        with pytest.raises(RequestBuildError, match="model must not be empty"):
            ChatCompletionRequest(model="", messages=[user()]).validate()

    def test_empty_messages(self):
        with pytest.raises(RequestBuildError, match="messages must not be empty"):
            ChatCompletionRequest(model="deepseek-chat", messages=[]).validate()

    def test_unknown_role(self):
        request = ChatCompletionRequest(
            model="deepseek-chat", messages=[ChatMessage(role="robot", content="beep")]
        )
        with pytest.raises(RequestBuildError, match="unknown message role: 'robot'"):
            request.validate()

    def test_max_tokens_must_be_positive(self):
        request = ChatCompletionRequest(model="deepseek-chat", messages=[user()], max_tokens=0)
        with pytest.raises(RequestBuildError, match="max_tokens must be at least 1"):
            request.validate()

    def test_request_build_error_is_value_error(self):
        with pytest.raises(ValueError):
            ChatCompletionRequest(model="", messages=[user()]).validate()


class TestChatCompletionRequestToDict:
    """Tests for ChatCompletionRequest.to_dict()."""

    def test_minimal_request_drops_none(self):
        data = ChatCompletionRequest(model="deepseek-chat", messages=[user("Hi")]).to_dict()

        assert data == {
            "model": "deepseek-chat",
            "messages": [{"role": "user", "content": "Hi"}],
        }

    def test_optional_fields_included(self):
        data = ChatCompletionRequest(
            model="deepseek-chat",
            messages=[user()],
            max_tokens=256,
            temperature=0.2,
            stop=["\n\n"],
            response_format={"type": "json_object"},
        ).to_dict()

        assert data["max_tokens"] == 256
        assert data["temperature"] == 0.2
        assert data["stop"] == ["\n\n"]
        assert data["response_format"] == {"type": "json_object"}
        assert "stream" not in data

    def test_stream_options_only_when_streaming(self):
        request = ChatCompletionRequest(
            model="deepseek-chat",
            messages=[user()],
            stream_options={"include_usage": True},
        )

        assert "stream_options" not in request.to_dict()

        streaming = dataclasses.replace(request, stream=True).to_dict()
        assert streaming["stream"] is True
        assert streaming["stream_options"] == {"include_usage": True}

    def test_stream_request_defaults_to_streaming(self):
        request = StreamChatCompletionRequest(model="deepseek-chat", messages=[user()])

        assert request.stream is True
        assert request.to_dict()["stream"] is True

    def test_assistant_message_with_tool_calls(self):
        message = ChatMessage(
            role="assistant",
            content="",
            tool_calls=[ToolCall(id="call_1", function=FunctionCall("lookup", '{"q": 1}'))],
        )

        assert message.to_dict() == {
            "role": "assistant",
            "content": "",
            "tool_calls": [
                {
                    "id": "call_1",
                    "type": "function",
                    "function": {"name": "lookup", "arguments": '{"q": 1}'},
                }
            ],
        }

    def test_tool_message(self):
        message = ChatMessage(role="tool", content="42", tool_call_id="call_1")

        assert message.to_dict() == {"role": "tool", "content": "42", "tool_call_id": "call_1"}


class TestChatCompletionResponse:
    """Tests for ChatCompletionResponse.from_dict()."""

    def test_full_response(self):
        response = ChatCompletionResponse.from_dict(
            {
                "id": "chatcmpl-1",
                "object": "chat.completion",
                "created": 1700000000,
                "model": "deepseek-reasoner",
                "choices": [
                    {
                        "index": 0,
                        "message": {
                            "role": "assistant",
                            "content": "Paris",
                            "reasoning_content": "The capital of France...",
                        },
                        "finish_reason": "stop",
                    }
                ],
                "usage": {
                    "prompt_tokens": 10,
                    "completion_tokens": 20,
                    "total_tokens": 30,
                    "prompt_cache_hit_tokens": 4,
                    "prompt_cache_miss_tokens": 6,
                    "completion_tokens_details": {"reasoning_tokens": 15},
                },
                "system_fingerprint": "fp_1",
            }
        )

        assert response.content == "Paris"
        assert response.choices[0].finish_reason == "stop"
        assert response.choices[0].message.reasoning_content == "The capital of France..."
        assert response.usage == Usage(
            prompt_tokens=10,
            completion_tokens=20,
            total_tokens=30,
            prompt_cache_hit_tokens=4,
            prompt_cache_miss_tokens=6,
            reasoning_tokens=15,
        )
        assert response.system_fingerprint == "fp_1"

    def test_tool_calls_decoded(self):
        response = ChatCompletionResponse.from_dict(
            {
                "id": "x",
                "model": "deepseek-chat",
                "choices": [
                    {
                        "index": 0,
                        "message": {
                            "role": "assistant",
                            "content": None,
                            "tool_calls": [
                                {
                                    "id": "call_9",
                                    "type": "function",
                                    "function": {"name": "f", "arguments": "{}"},
                                }
                            ],
                        },
                        "finish_reason": "tool_calls",
                    }
                ],
            }
        )

        message = response.choices[0].message
        assert message.content == ""
        assert message.tool_calls == [ToolCall(id="call_9", function=FunctionCall("f", "{}"))]

    def test_no_choices(self):
        response = ChatCompletionResponse.from_dict({"id": "x", "model": "m"})

        assert response.choices == ()
        assert response.content == ""
        assert response.usage is None

    def test_wrong_type_raises_type_error(self):
        with pytest.raises(TypeError, match="choices must be a list"):
            ChatCompletionResponse.from_dict({"id": "x", "model": "m", "choices": {}})
