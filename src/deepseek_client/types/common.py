# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Shared response types and field helpers.

The ``from_dict`` constructors in this package are strict about types
(a string where an object is expected raises TypeError) and lenient
about presence (missing optional fields become None or defaults). The
payload decoders convert those TypeErrors into DecodeError.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def expect_mapping(value: Any, name: str) -> Mapping[str, Any]:
    """Return ``value`` if it is a JSON object, else raise TypeError."""
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be an object, got {type(value).__name__}")
    return value


def optional_field(data: Mapping[str, Any], key: str, *types: type) -> Any:
    """Return ``data[key]`` or None, checking its type when present."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, types):
        expected = " or ".join(t.__name__ for t in types)
        raise TypeError(f"{key} must be {expected}, got {type(value).__name__}")
    return value


def list_field(data: Mapping[str, Any], key: str) -> list[Any]:
    """Return ``data[key]`` as a list (empty when absent)."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"{key} must be a list, got {type(value).__name__}")
    return value


def drop_none(data: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a mapping without its None values."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class Usage:
    """
    Token usage reported by the API.

    For streams this usually arrives only on the final frame (and only
    when ``stream_options={"include_usage": True}`` was requested).

    Attributes:
        prompt_tokens: Tokens in the prompt
        completion_tokens: Tokens generated
        total_tokens: prompt_tokens + completion_tokens
        prompt_cache_hit_tokens: Prompt tokens served from the context cache
        prompt_cache_miss_tokens: Prompt tokens not found in the cache
        reasoning_tokens: Completion tokens spent on reasoning content
    """

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    prompt_cache_hit_tokens: int | None = None
    prompt_cache_miss_tokens: int | None = None
    reasoning_tokens: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Usage:
        data = expect_mapping(data, "usage")
        details = optional_field(data, "completion_tokens_details", Mapping) or {}
        return cls(
            prompt_tokens=optional_field(data, "prompt_tokens", int) or 0,
            completion_tokens=optional_field(data, "completion_tokens", int) or 0,
            total_tokens=optional_field(data, "total_tokens", int) or 0,
            prompt_cache_hit_tokens=optional_field(data, "prompt_cache_hit_tokens", int),
            prompt_cache_miss_tokens=optional_field(data, "prompt_cache_miss_tokens", int),
            reasoning_tokens=optional_field(details, "reasoning_tokens", int),
        )


def optional_usage(data: Mapping[str, Any]) -> Usage | None:
    """Parse the ``usage`` field if present."""
    raw = data.get("usage")
    return Usage.from_dict(raw) if raw is not None else None


__all__ = [
    "Usage",
    "drop_none",
    "expect_mapping",
    "list_field",
    "optional_field",
    "optional_usage",
]
