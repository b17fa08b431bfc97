"""Tests for handler output normalization."""

from dataclasses import dataclass
from typing import Any

from pactverifier.verification.output import (
    ExplicitOutput,
    MessageAndMetadata,
    PairOutput,
    ScalarOutput,
    normalize,
    to_handler_output,
)


@dataclass
class ForeignPair:
    """Pair type from another library, exposing left/right instead of indexing."""

    left: Any
    right: Any


class TestToHandlerOutput:
    """Tests for mapping native return values into the output union."""

    def test_message_and_metadata_is_explicit(self):
        """The wrapper type maps to the explicit shape."""
        output = to_handler_output(MessageAndMetadata(b"hi", {"content-type": "text/plain"}))
        assert isinstance(output, ExplicitOutput)
        assert output.payload == b"hi"

    def test_tuple_with_mapping_is_pair(self):
        """A (payload, metadata) tuple maps to the pair shape."""
        output = to_handler_output(("hello", {"k": "v"}))
        assert isinstance(output, PairOutput)
        assert output.first == "hello"

    def test_foreign_pair_is_pair(self):
        """Objects exposing left/right map to the pair shape."""
        output = to_handler_output(ForeignPair("hello", {"k": "v"}))
        assert isinstance(output, PairOutput)
        assert output.second == {"k": "v"}

    def test_tuple_without_mapping_is_scalar(self):
        """A tuple whose second element is not a mapping is not a pair."""
        output = to_handler_output(("a", "b"))
        assert isinstance(output, ScalarOutput)

    def test_three_tuple_is_scalar(self):
        """Only two-element tuples are pairs."""
        assert isinstance(to_handler_output(("a", {}, "c")), ScalarOutput)

    def test_union_values_pass_through(self):
        """Values already in the union are returned unchanged."""
        explicit = ExplicitOutput(b"x", {})
        assert to_handler_output(explicit) is explicit


class TestNormalize:
    """Tests for reducing outputs to payload bytes and metadata."""

    def test_wrapper_keeps_metadata(self):
        """Wrapper metadata is used exactly, never the textual fallback."""
        normalized = normalize(MessageAndMetadata(b"hi", {"content-type": "text/plain"}))
        assert normalized.payload == b"hi"
        assert normalized.text == "hi"
        assert normalized.metadata == {"content-type": "text/plain"}

    def test_plain_pair(self):
        """The first element's text is the payload, the second the metadata."""
        normalized = normalize(("hello", {"k": "v"}))
        assert normalized.text == "hello"
        assert normalized.metadata == {"k": "v"}

    def test_pair_with_bytes_payload(self):
        """Bytes in a pair are used raw, not rendered as a bytes literal."""
        normalized = normalize((b'{"a": 1}', {}))
        assert normalized.payload == b'{"a": 1}'

    def test_foreign_pair(self):
        """Foreign pairs are treated like plain pairs."""
        normalized = normalize(ForeignPair(123, {"k": 1}))
        assert normalized.text == "123"
        assert normalized.metadata == {"k": 1}

    def test_scalar_fallback(self):
        """Unrecognized values become text with empty metadata."""
        normalized = normalize(42)
        assert normalized.text == "42"
        assert normalized.metadata == {}

    def test_dict_is_rendered_as_text(self):
        """A bare dict has no explicit metadata and falls back to text."""
        normalized = normalize({"a": 1})
        assert normalized.text == "{'a': 1}"
        assert normalized.metadata == {}
