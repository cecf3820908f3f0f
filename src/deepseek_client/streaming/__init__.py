# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Streaming response decoding.

This package turns an open, chunked HTTP response body into a pull-based
sequence of typed completion deltas.

Classes:
    FrameReader: Line reader over an async byte iterator.
    StreamDecoder: Stream session state machine, generic over the payload
        decoder.
    StreamState: Lifecycle states of a stream session.

Type aliases:
    ChatCompletionStream: StreamDecoder yielding ChatCompletionChunk.
    FIMCompletionStream: StreamDecoder yielding FIMCompletionChunk.
"""

from ..types.chat import ChatCompletionChunk
from ..types.fim import FIMCompletionChunk
from .decoder import DATA_PREFIX, DONE_SENTINEL, StreamDecoder, StreamState, extract_payload
from .payloads import decode_chat_chunk, decode_fim_chunk, decode_json_payload
from .reader import EndOfStream, FrameReader

ChatCompletionStream = StreamDecoder[ChatCompletionChunk]
FIMCompletionStream = StreamDecoder[FIMCompletionChunk]

__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "ChatCompletionStream",
    "EndOfStream",
    "FIMCompletionStream",
    "FrameReader",
    "StreamDecoder",
    "StreamState",
    "decode_chat_chunk",
    "decode_fim_chunk",
    "decode_json_payload",
    "extract_payload",
]
