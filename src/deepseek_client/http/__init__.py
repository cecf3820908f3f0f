# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
HTTP request construction and error-response parsing.

Classes:
    RequestBuilder: Fluent builder for authenticated API requests.

Functions:
    parse_api_error: Build an APIError from a status code and body text.
    read_api_error: Read and close an error response, returning APIError.
"""

from .builder import EVENT_STREAM_CONTENT_TYPE, JSON_CONTENT_TYPE, RequestBuilder
from .errors import parse_api_error, read_api_error

__all__ = [
    "EVENT_STREAM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "RequestBuilder",
    "parse_api_error",
    "read_api_error",
]
