# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Fluent builder for API requests.

Usage:
    request = (
        RequestBuilder(api_key)
        .set_base_url("https://api.deepseek.com/")
        .set_path("chat/completions")
        .set_body(chat_request)
        .set_api_type(ApiType.DEEPSEEK)
        .build_stream()
    )
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..config import ApiType
from ..exceptions import RequestBuildError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
EVENT_STREAM_CONTENT_TYPE = "text/event-stream"


class RequestBuilder:
    """
    Build ``httpx.Request`` objects for the completion API.

    ``build()`` produces a request for a single JSON response;
    ``build_stream()`` adds the headers asking the server to keep the
    connection open and deliver server-sent events.
    """

    def __init__(self, auth_token: str | None) -> None:
        self._auth_token = auth_token or ""
        self._base_url = ""
        self._path = ""
        self._body: Any = None
        self._api_type = ApiType.DEEPSEEK
        self._headers: dict[str, str] = {}

    def set_base_url(self, base_url: str) -> RequestBuilder:
        self._base_url = base_url
        return self

    def set_path(self, path: str) -> RequestBuilder:
        self._path = path
        return self

    def set_body(self, body: Any) -> RequestBuilder:
        """Set the body: an object with ``to_dict()`` or a mapping."""
        self._body = body
        return self

    def set_api_type(self, api_type: ApiType) -> RequestBuilder:
        self._api_type = api_type
        return self

    def set_header(self, name: str, value: str) -> RequestBuilder:
        self._headers[name] = value
        return self

    @property
    def url(self) -> str:
        """Base URL and path joined with exactly one slash."""
        if not self._path:
            return self._base_url
        return f"{self._base_url.rstrip('/')}/{self._path.lstrip('/')}"

    def build(self) -> httpx.Request:
        """
        Build a request expecting a single JSON response.

        Raises:
            RequestBuildError: If the token, base URL or body is missing,
                or the body cannot be serialized to JSON
        """
        return self._build(accept=JSON_CONTENT_TYPE, stream=False)

    def build_stream(self) -> httpx.Request:
        """
        Build a request expecting a server-sent event stream.

        Raises:
            RequestBuildError: Same conditions as build()
        """
        return self._build(accept=EVENT_STREAM_CONTENT_TYPE, stream=True)

    def _build(self, *, accept: str, stream: bool) -> httpx.Request:
        if not self._base_url:
            raise RequestBuildError("base URL must not be empty")
        if self._api_type.requires_auth and not self._auth_token:
            raise RequestBuildError("auth token must not be empty")
        if self._body is None:
            raise RequestBuildError("request body must not be None")

        content = self._serialize_body()

        headers = {
            "Content-Type": JSON_CONTENT_TYPE,
            "Accept": accept,
        }
        if stream:
            headers["Cache-Control"] = "no-cache"
            headers["Connection"] = "keep-alive"
        headers.update(self._auth_headers())
        headers.update(self._headers)

        try:
            request = httpx.Request("POST", self.url, content=content, headers=headers)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise RequestBuildError(f"invalid URL {self.url!r}: {e}") from e

        logger.debug(f"Built {'streaming ' if stream else ''}request POST {request.url}")
        return request

    def _serialize_body(self) -> bytes:
        body = self._body
        if hasattr(body, "to_dict"):
            body = body.to_dict()
        if not isinstance(body, Mapping):
            raise RequestBuildError(
                f"request body must be a mapping or define to_dict(), "
                f"got {type(self._body).__name__}"
            )
        try:
            return json.dumps(body, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RequestBuildError(f"request body is not JSON-serializable: {e}") from e

    def _auth_headers(self) -> dict[str, str]:
        if not self._auth_token:
            return {}
        if self._api_type is ApiType.AZURE:
            return {"api-key": self._auth_token}
        return {"Authorization": f"Bearer {self._auth_token}"}


__all__ = [
    "EVENT_STREAM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "RequestBuilder",
]
