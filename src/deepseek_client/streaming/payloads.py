# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Payload decoders for the two stream modes.

Each decoder turns the text of one ``data:`` frame into a typed delta
event and satisfies the PayloadDecoder protocol. Every failure, whether
invalid JSON, a non-object document or a schema mismatch, is reported
as DecodeError carrying the offending payload.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, TypeVar

from ..exceptions import DecodeError
from ..types.chat import ChatCompletionChunk
from ..types.fim import FIMCompletionChunk

T = TypeVar("T")


def decode_json_payload(payload: str | bytes, build: Callable[[Any], T], kind: str) -> T:
    """
    Parse ``payload`` as JSON and hand the document to ``build``.

    Args:
        payload: Raw JSON text
        build: Constructor taking the decoded document (e.g. ``from_dict``)
        kind: Name used in error messages ("chat chunk", "FIM chunk", ...)

    Raises:
        DecodeError: If the JSON is malformed or does not match the schema
    """
    text = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Malformed JSON in {kind}: {e.msg}", payload=text) from e
    except RecursionError as e:
        raise DecodeError(f"JSON in {kind} is nested too deeply", payload=text) from e

    try:
        return build(document)
    except (TypeError, ValueError, KeyError, RecursionError) as e:
        raise DecodeError(f"Unexpected {kind} schema: {e}", payload=text) from e


def decode_chat_chunk(payload: str) -> ChatCompletionChunk:
    """Decode one chat completion stream frame."""
    return decode_json_payload(payload, ChatCompletionChunk.from_dict, "chat chunk")


def decode_fim_chunk(payload: str) -> FIMCompletionChunk:
    """Decode one FIM completion stream frame."""
    return decode_json_payload(payload, FIMCompletionChunk.from_dict, "FIM chunk")


__all__ = [
    "decode_chat_chunk",
    "decode_fim_chunk",
    "decode_json_payload",
]
