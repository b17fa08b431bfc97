"""
Comparison of expected contract content against actual provider output.

The verifier only depends on the Comparator protocol. StructuralComparator is
the default implementation: JSON bodies are compared field by field, anything
else is compared as text.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

from pactverifier.pact.models import Response

from .models import DiffResult

ROOT = "$"


@dataclass
class ResponseComparison:
    """Diffs for each part of an HTTP response. None/empty means matched."""

    status: Optional[str] = None
    headers: Dict[str, Optional[str]] = field(default_factory=dict)
    body: DiffResult = field(default_factory=dict)

    @property
    def matched(self) -> bool:
        return (
            self.status is None
            and all(v is None for v in self.headers.values())
            and not self.body
        )


class Comparator(Protocol):
    """Structural comparison of expected vs actual values."""

    def compare(self, expected: Optional[bytes], actual: Optional[bytes]) -> DiffResult:
        ...

    def compare_metadata(
        self, expected: Mapping[str, Any], actual: Mapping[str, Any]
    ) -> Dict[str, Optional[DiffResult]]:
        ...

    def compare_response(
        self, expected: Response, actual: Mapping[str, Any]
    ) -> ResponseComparison:
        ...


def _decode(body: Optional[bytes | str]) -> Any:
    if body is None:
        return None
    text = body.decode("utf-8", errors="replace") if isinstance(body, (bytes, bytearray)) else body
    try:
        return json.loads(text)
    except ValueError:
        return text


def _join(path: str, key: str) -> str:
    return key if path == ROOT else f"{path}.{key}"


def _same_kind(expected: Any, actual: Any) -> bool:
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool)
    if isinstance(expected, (int, float)):
        return isinstance(actual, (int, float))
    return type(expected) is type(actual)


def diff_values(expected: Any, actual: Any, path: str = ROOT) -> DiffResult:
    """
    Recursively diff two decoded values.

    Objects are compared by expected keys (unexpected extra keys are allowed),
    lists element by element with matching lengths, scalars by type and
    equality. Integers and floats are both JSON numbers and compare by value;
    booleans only match booleans.
    """
    if isinstance(expected, dict):
        if not isinstance(actual, dict):
            return {path: {"expected": expected, "actual": actual}}
        diffs: DiffResult = {}
        for key, value in expected.items():
            sub = _join(path, str(key))
            if key not in actual:
                diffs[sub] = {"expected": value, "actual": None, "mismatch": "missing key"}
            else:
                diffs.update(diff_values(value, actual[key], sub))
        return diffs

    if isinstance(expected, list):
        if not isinstance(actual, list):
            return {path: {"expected": expected, "actual": actual}}
        if len(expected) != len(actual):
            return {
                path: {
                    "expected": expected,
                    "actual": actual,
                    "mismatch": f"expected {len(expected)} items but got {len(actual)}",
                }
            }
        diffs = {}
        for index, (exp, act) in enumerate(zip(expected, actual)):
            diffs.update(diff_values(exp, act, f"{path}[{index}]"))
        return diffs

    if not _same_kind(expected, actual) or expected != actual:
        return {path: {"expected": expected, "actual": actual}}
    return {}


class StructuralComparator:
    """Default comparator used when no other implementation is injected."""

    def compare(self, expected: Optional[bytes], actual: Optional[bytes]) -> DiffResult:
        if expected is None:
            return {}
        return diff_values(_decode(expected), _decode(actual))

    def compare_metadata(
        self, expected: Mapping[str, Any], actual: Mapping[str, Any]
    ) -> Dict[str, Optional[DiffResult]]:
        results: Dict[str, Optional[DiffResult]] = {}
        for key, value in expected.items():
            if key not in actual:
                results[key] = {key: {"expected": value, "actual": None, "mismatch": "missing key"}}
                continue
            diff = diff_values(value, actual[key], key)
            results[key] = diff or None
        return results

    def compare_response(
        self, expected: Response, actual: Mapping[str, Any]
    ) -> ResponseComparison:
        comparison = ResponseComparison()

        actual_status = actual.get("statusCode", actual.get("status"))
        if actual_status is not None and int(actual_status) != expected.status:
            comparison.status = f"expected status of {expected.status} but was {actual_status}"
        elif actual_status is None:
            comparison.status = f"expected status of {expected.status} but none was returned"

        actual_headers = {str(k).lower(): v for k, v in (actual.get("headers") or {}).items()}
        for name, value in expected.headers.items():
            got = actual_headers.get(name.lower())
            if isinstance(got, (list, tuple)):
                got = ", ".join(str(v) for v in got)
            if got is None:
                comparison.headers[name] = f"Expected a header '{name}' but was missing"
            elif str(got) != str(value):
                comparison.headers[name] = (
                    f"Expected header '{name}' to have value '{value}' but was '{got}'"
                )
            else:
                comparison.headers[name] = None

        actual_body = actual.get("data", actual.get("body"))
        if isinstance(actual_body, (dict, list)):
            actual_body = json.dumps(actual_body)
        if isinstance(actual_body, str):
            actual_body = actual_body.encode("utf-8")
        comparison.body = self.compare(expected.body, actual_body)

        return comparison
