"""Tests for the default structural comparator."""

import json

from pactverifier.pact.models import Response
from pactverifier.verification.comparison import StructuralComparator, diff_values


class TestDiffValues:
    """Tests for recursive value diffs."""

    def test_identical_values_have_no_diff(self):
        """Equal nested structures produce an empty diff."""
        assert diff_values({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]}) == {}

    def test_nested_paths(self):
        """Nested object keys are joined with dots."""
        diff = diff_values({"a": {"b": 1}}, {"a": {"b": 2}})
        assert list(diff) == ["a.b"]

    def test_list_index_paths(self):
        """List items are addressed by index."""
        diff = diff_values({"items": [1, 2]}, {"items": [1, 3]})
        assert list(diff) == ["items[1]"]

    def test_list_length_mismatch(self):
        """Lists of different lengths are reported at the list path."""
        diff = diff_values([1, 2], [1])
        assert "expected 2 items but got 1" in diff["$"]["mismatch"]

    def test_missing_key(self):
        """Expected keys absent from the actual value are reported."""
        diff = diff_values({"a": 1}, {})
        assert diff["a"]["mismatch"] == "missing key"

    def test_extra_actual_keys_allowed(self):
        """Keys only present in the actual value are ignored."""
        assert diff_values({"a": 1}, {"a": 1, "b": 2}) == {}

    def test_type_mismatch(self):
        """An object never matches a list."""
        assert "$" in diff_values({"a": 1}, [1])

    def test_boolean_does_not_match_number(self):
        """true and 1 are different JSON values."""
        assert diff_values({"a": True}, {"a": 1}) == {"a": {"expected": True, "actual": 1}}
        assert "a" in diff_values({"a": 0}, {"a": False})

    def test_number_does_not_match_string(self):
        """A number never matches its string form."""
        assert "a" in diff_values({"a": 1}, {"a": "1"})

    def test_integer_and_float_compare_by_value(self):
        """Integers and floats are both JSON numbers."""
        assert diff_values({"a": 1}, {"a": 1.0}) == {}
        assert "a" in diff_values({"a": 1}, {"a": 1.5})

    def test_null_does_not_match_value(self):
        """null only matches null."""
        assert diff_values({"a": None}, {"a": None}) == {}
        assert "a" in diff_values({"a": None}, {"a": 0})


class TestCompareBody:
    """Tests for payload comparison."""

    def test_repeated_matching_comparison_is_empty(self):
        """Comparing identical payloads is stable and empty."""
        comparator = StructuralComparator()
        body = json.dumps({"a": 1}).encode()
        assert comparator.compare(body, body) == {}
        assert comparator.compare(body, body) == {}

    def test_mismatch_reports_path(self):
        """A differing field is reported with both values."""
        comparator = StructuralComparator()
        diff = comparator.compare(b'{"a": 1}', b'{"a": 2}')
        assert "a" in diff
        assert diff["a"] == {"expected": 1, "actual": 2}

    def test_boolean_body_field_against_number(self):
        """A provider returning 1 for an expected true fails."""
        diff = StructuralComparator().compare(b'{"a": true}', b'{"a": 1}')
        assert diff == {"a": {"expected": True, "actual": 1}}

    def test_text_bodies(self):
        """Non-JSON payloads are compared as text."""
        comparator = StructuralComparator()
        assert comparator.compare(b"hello", b"hello") == {}
        assert "$" in comparator.compare(b"hello", b"goodbye")

    def test_no_expected_body_matches_anything(self):
        """Without an expected body there is nothing to compare."""
        assert StructuralComparator().compare(None, b"whatever") == {}

    def test_missing_actual_body(self):
        """An expected body with no actual body is a mismatch."""
        assert "$" in StructuralComparator().compare(b'{"a": 1}', None)


class TestCompareMetadata:
    """Tests for metadata comparison."""

    def test_matching_key_is_none(self):
        """Matching metadata keys map to None."""
        result = StructuralComparator().compare_metadata(
            {"content-type": "application/json"}, {"content-type": "application/json"}
        )
        assert result == {"content-type": None}

    def test_mismatched_key(self):
        """Mismatched keys carry a diff keyed by the metadata name."""
        result = StructuralComparator().compare_metadata(
            {"content-type": "application/json"}, {"content-type": "text/plain"}
        )
        assert result["content-type"] == {
            "content-type": {"expected": "application/json", "actual": "text/plain"}
        }

    def test_missing_key(self):
        """Expected metadata missing from the output is reported."""
        result = StructuralComparator().compare_metadata({"topic": "orders"}, {})
        assert result["topic"]["topic"]["mismatch"] == "missing key"

    def test_unexpected_actual_keys_ignored(self):
        """Extra actual metadata is not compared."""
        assert StructuralComparator().compare_metadata({}, {"extra": 1}) == {}


class TestCompareResponse:
    """Tests for request/response comparison."""

    def test_matching_response(self):
        """Status, headers and body all match."""
        expected = Response(
            status=200, headers={"Content-Type": "application/json"}, body=b'{"id": 1}'
        )
        actual = {
            "statusCode": 200,
            "headers": {"content-type": "application/json"},
            "data": {"id": 1},
        }
        comparison = StructuralComparator().compare_response(expected, actual)
        assert comparison.matched
        assert comparison.headers == {"Content-Type": None}

    def test_status_mismatch(self):
        """A different status code is reported."""
        comparison = StructuralComparator().compare_response(
            Response(status=200), {"statusCode": 404}
        )
        assert comparison.status == "expected status of 200 but was 404"
        assert not comparison.matched

    def test_missing_status(self):
        """A response without a status fails."""
        comparison = StructuralComparator().compare_response(Response(status=201), {})
        assert "none was returned" in comparison.status

    def test_header_mismatch_and_missing(self):
        """Wrong and absent headers are both reported."""
        expected = Response(headers={"X-A": "1", "X-B": "2"})
        comparison = StructuralComparator().compare_response(
            expected, {"status": 200, "headers": {"x-a": "9"}}
        )
        assert "to have value '1' but was '9'" in comparison.headers["X-A"]
        assert "was missing" in comparison.headers["X-B"]

    def test_list_header_values_joined(self):
        """Multi-valued headers are joined before comparison."""
        expected = Response(headers={"Accept": "a, b"})
        comparison = StructuralComparator().compare_response(
            expected, {"status": 200, "headers": {"Accept": ["a", "b"]}}
        )
        assert comparison.headers["Accept"] is None

    def test_body_mismatch(self):
        """Body diffs are carried on the comparison."""
        comparison = StructuralComparator().compare_response(
            Response(body=b'{"a": 1}'), {"status": 200, "body": '{"a": 2}'}
        )
        assert "a" in comparison.body
