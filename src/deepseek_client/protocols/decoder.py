# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for payload deserialization."""

from typing import Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class PayloadDecoder(Protocol[T_co]):
    """
    Protocol for turning one stream payload into a typed delta event.

    The payload is the text after the ``data:`` marker, with surrounding
    whitespace removed. Implementations return the decoded event or raise
    DecodeError describing the offending payload.
    """

    def __call__(self, payload: str) -> T_co:
        """Decode one payload."""
        ...
