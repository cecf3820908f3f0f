# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the DeepSeek client library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from DeepSeekError, making it easy to catch
all client-related exceptions with a single except clause.
"""

from __future__ import annotations

# Longest slice of an offending payload quoted in an error message
_PAYLOAD_PREVIEW_CHARS = 200


class DeepSeekError(Exception):
    """Base exception for all client errors.

    This is the root exception class for the library. Catch this exception
    to handle any error originating from a request, a transport failure,
    the API itself or a streamed response.

    Example:
        try:
            response = await client.create_chat_completion(request)
        except DeepSeekError as e:
            logger.error(f"Completion failed: {e}")
    """

    pass


class RequestBuildError(DeepSeekError, ValueError):
    """Raised when a request cannot be built from the given input.

    No network call is attempted when this is raised. Common causes:
    - A None request object
    - Field validation failures (e.g. FIM max_tokens above the ceiling)
    - A missing auth token or base URL
    - A body that cannot be serialized to JSON

    Example:
        try:
            stream = await client.create_fim_stream_completion(request)
        except RequestBuildError as e:
            logger.error(f"Invalid request: {e}")
    """

    pass


class ConfigurationError(DeepSeekError):
    """Raised when client configuration cannot be resolved.

    This is raised by ClientConfig.from_env() when a required setting
    (such as DEEPSEEK_API_KEY) is missing or malformed.

    Example:
        try:
            config = ClientConfig.from_env()
        except ConfigurationError as e:
            logger.error(f"Invalid configuration: {e}")
            raise SystemExit(1)
    """

    pass


class TransportError(DeepSeekError):
    """Raised when the connection fails while sending or streaming.

    Wraps connection resets, timeouts, TLS failures and similar I/O errors.
    The original exception is chained as ``__cause__``. Transport errors
    are fatal to the current call or stream session and are never retried
    by the library.
    """

    pass


class APIError(DeepSeekError):
    """Raised when the API answers with an HTTP status of 400 or above.

    For streaming calls this is raised before any stream session is
    constructed, so there is nothing to close.

    Attributes:
        status_code: The HTTP status code of the response.
        message: Human-readable error message from the API (or the raw body).
        error_type: The ``error.type`` field of the error body, if present.
        code: The ``error.code`` field of the error body, if present.
        body: The raw response body text.

    Example:
        try:
            stream = await client.create_chat_completion_stream(request)
        except APIError as e:
            if e.status_code == 401:
                logger.error("Check DEEPSEEK_API_KEY")
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        error_type: str | None = None,
        code: str | None = None,
        body: str | None = None,
    ):
        super().__init__(f"API returned {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.error_type = error_type
        self.code = code
        self.body = body


class DecodeError(DeepSeekError):
    """Raised when a response payload cannot be decoded.

    This covers malformed JSON in a single-shot response body as well as
    a malformed ``data:`` frame inside a stream. A stream that raises this
    error is closed and raises the same error on every later pull.

    Attributes:
        payload: The offending payload text, if available.
    """

    def __init__(self, message: str, payload: str | None = None):
        if payload is not None:
            preview = payload[:_PAYLOAD_PREVIEW_CHARS]
            if len(payload) > _PAYLOAD_PREVIEW_CHARS:
                preview += "..."
            message = f"{message} (payload: {preview!r})"
        super().__init__(message)
        self.payload = payload


class IncompleteStreamError(DecodeError):
    """Raised when the server closes a stream without sending ``[DONE]``.

    Only raised when the stream was opened with ``require_sentinel=True``
    (see ClientConfig.require_stream_sentinel). By default a connection
    closed without the sentinel counts as a normal end of stream.
    """

    def __init__(self, message: str = "Stream ended without [DONE] sentinel"):
        super().__init__(message)


class StreamCancelledError(DeepSeekError):
    """Raised when a stream session was cancelled or closed by the caller.

    Cancellation is not a fault. A cancelled session raises the same
    instance of this error on every later pull.

    Attributes:
        reason: Optional reason given when the cancellation was triggered.
    """

    def __init__(self, message: str = "Stream cancelled", reason: str | None = None):
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.reason = reason


__all__ = [
    "APIError",
    "ConfigurationError",
    "DecodeError",
    "DeepSeekError",
    "IncompleteStreamError",
    "RequestBuildError",
    "StreamCancelledError",
    "TransportError",
]
