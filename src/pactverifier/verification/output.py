"""
Handler output normalization.

Provider handlers may return a message in several shapes. The adapter maps a
native return value into the HandlerOutput union, and normalize() reduces the
union to a NormalizedOutput. Shapes are checked in a fixed order so values
that carry explicit metadata never fall through to the textual fallback:

1. MessageAndMetadata, used as-is
2. a two-element tuple of (payload, metadata mapping)
3. a foreign pair type exposing ``left``/``right`` attributes
4. anything else, rendered as text with empty metadata
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .models import NormalizedOutput


@dataclass(frozen=True)
class MessageAndMetadata:
    """Return this from a message handler to supply explicit payload and metadata."""

    contents: bytes
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExplicitOutput:
    payload: bytes
    metadata: Mapping[str, Any]


@dataclass(frozen=True)
class PairOutput:
    first: Any
    second: Mapping[str, Any]


@dataclass(frozen=True)
class ScalarOutput:
    value: Any


HandlerOutput = Union[ExplicitOutput, PairOutput, ScalarOutput]


def _is_foreign_pair(value: Any) -> bool:
    return (
        hasattr(value, "left")
        and hasattr(value, "right")
        and isinstance(getattr(value, "right"), Mapping)
    )


def to_handler_output(value: Any) -> HandlerOutput:
    """Map a handler's native return value into the HandlerOutput union."""
    if isinstance(value, (ExplicitOutput, PairOutput, ScalarOutput)):
        return value
    if isinstance(value, MessageAndMetadata):
        return ExplicitOutput(payload=_as_bytes(value.contents), metadata=value.metadata)
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[1], Mapping):
        return PairOutput(first=value[0], second=value[1])
    if _is_foreign_pair(value):
        return PairOutput(first=value.left, second=value.right)
    return ScalarOutput(value=value)


def _as_bytes(value: Any) -> bytes:
    """Textual form of a value as bytes; raw bytes pass through untouched."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return str(value).encode("utf-8")


def normalize(output: Any) -> NormalizedOutput:
    """
    Reduce a handler output to a NormalizedOutput.

    Accepts either a HandlerOutput or a raw handler return value, which is
    passed through to_handler_output() first.
    """
    output = to_handler_output(output)
    if isinstance(output, ExplicitOutput):
        return NormalizedOutput(payload=output.payload, metadata=dict(output.metadata))
    if isinstance(output, PairOutput):
        return NormalizedOutput(payload=_as_bytes(output.first), metadata=dict(output.second))
    return NormalizedOutput(payload=_as_bytes(output.value), metadata={})
