"""Unit tests for API error parsing."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest

from deepseek_client.exceptions import APIError, TransportError
from deepseek_client.http.errors import parse_api_error, read_api_error


class TestParseApiError:
    """Tests for parse_api_error()."""

    def test_structured_error(self) -> None:
        body = (
            '{"error": {"message": "Authentication Fails", '
            '"type": "authentication_error", "code": "invalid_request_error"}}'
        )

        error = parse_api_error(401, body)

        assert isinstance(error, APIError)
        assert error.status_code == 401
        assert error.message == "Authentication Fails"
        assert error.error_type == "authentication_error"
        assert error.code == "invalid_request_error"
        assert error.body == body
        assert str(error) == "API returned 401: Authentication Fails"

    def test_numeric_code_stringified(self) -> None:
        error = parse_api_error(429, '{"error": {"message": "slow down", "code": 429}}')
        assert error.code == "429"

    def test_string_error_field(self) -> None:
        error = parse_api_error(400, '{"error": "bad model"}')
        assert error.message == "bad model"

    def test_top_level_message(self) -> None:
        error = parse_api_error(503, '{"message": "overloaded"}')
        assert error.message == "overloaded"

    def test_plain_text_body(self) -> None:
        error = parse_api_error(502, "  Bad Gateway from upstream \n")
        assert error.message == "Bad Gateway from upstream"
        assert error.error_type is None

    def test_empty_body_uses_reason(self) -> None:
        error = parse_api_error(500, "", "Internal Server Error")
        assert error.message == "Internal Server Error"

    def test_empty_body_without_reason(self) -> None:
        error = parse_api_error(500, "")
        assert error.message == "unknown error"


class TestReadApiError:
    """Tests for read_api_error()."""

    @pytest.mark.asyncio
    async def test_reads_and_closes_response(self) -> None:
        response = httpx.Response(
            401,
            content=b'{"error": {"message": "Authentication Fails"}}',
            request=httpx.Request("POST", "https://api.deepseek.com/chat/completions"),
        )

        error = await read_api_error(response)

        assert error.status_code == 401
        assert error.message == "Authentication Fails"
        assert response.is_closed

    @pytest.mark.asyncio
    async def test_read_failure_becomes_transport_error(self) -> None:
        response = httpx.Response(500)
        response.aread = AsyncMock(side_effect=httpx.ReadError("reset"))  # type: ignore[method-assign]
        response.aclose = AsyncMock()  # type: ignore[method-assign]

        with pytest.raises(TransportError, match="status 500"):
            await read_api_error(response)

        response.aclose.assert_awaited_once()
