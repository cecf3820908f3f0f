# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for stream session collaborators.

Available protocols:
- StreamingBodyProtocol: Interface for open, closable response bodies
- PayloadDecoder: Interface for mode-specific payload deserialization
"""

from .body import StreamingBodyProtocol
from .decoder import PayloadDecoder

__all__ = [
    "PayloadDecoder",
    "StreamingBodyProtocol",
]
