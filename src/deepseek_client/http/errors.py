# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Parsing of API error responses into APIError."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping

import httpx

from ..exceptions import APIError, TransportError

logger = logging.getLogger(__name__)


def parse_api_error(status_code: int, text: str, reason: str = "") -> APIError:
    """
    Build an APIError from a status code and response body text.

    The API reports errors as ``{"error": {"message", "type", "code"}}``.
    Bodies that are not JSON or lack that shape fall back to the raw text,
    or to the reason phrase for an empty body.
    """
    message = text.strip() or reason or "unknown error"
    error_type: str | None = None
    code: str | None = None

    try:
        document = json.loads(text) if text else None
    except json.JSONDecodeError:
        document = None

    if isinstance(document, Mapping):
        error = document.get("error")
        if isinstance(error, Mapping):
            if isinstance(error.get("message"), str) and error["message"]:
                message = error["message"]
            if error.get("type") is not None:
                error_type = str(error["type"])
            if error.get("code") is not None:
                code = str(error["code"])
        elif isinstance(error, str) and error:
            message = error
        elif isinstance(document.get("message"), str) and document["message"]:
            message = document["message"]

    return APIError(status_code, message, error_type=error_type, code=code, body=text)


async def read_api_error(response: httpx.Response) -> APIError:
    """
    Read an error response body, close it, and return the matching APIError.

    Raises:
        TransportError: If the body cannot be read
    """
    try:
        body = await response.aread()
    except (httpx.HTTPError, OSError) as e:
        raise TransportError(
            f"Failed to read error body (status {response.status_code}): {e}"
        ) from e
    finally:
        await response.aclose()

    text = body.decode("utf-8", errors="replace")
    error = parse_api_error(response.status_code, text, response.reason_phrase)
    logger.debug(f"API error {error.status_code}: {error.message}")
    return error


__all__ = ["parse_api_error", "read_api_error"]
