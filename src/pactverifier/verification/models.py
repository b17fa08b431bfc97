"""
Models for provider verification results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from pactverifier.core.errors import ExitCode
from pactverifier.pact.models import Consumer, Pact

# Field path -> mismatch detail. Empty means the values matched.
DiffResult = Dict[str, Any]


@dataclass(frozen=True)
class NormalizedOutput:
    """Handler output reduced to raw payload bytes plus metadata."""

    payload: bytes
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.payload.decode("utf-8", errors="replace")


@dataclass
class InteractionResult:
    """Outcome of verifying one interaction, with its failure entries."""

    description: str
    passed: bool
    failures: Dict[str, Any] = field(default_factory=dict)

    def merge(self, other: InteractionResult) -> InteractionResult:
        """AND two partial results together (one per handler)."""
        return InteractionResult(
            description=self.description,
            passed=self.passed and other.passed,
            failures={**self.failures, **other.failures},
        )


@dataclass(frozen=True)
class VerificationVerdict:
    """Aggregate result of verifying a whole pact, as published to a broker."""

    success: bool
    provider_version: str
    consumer: Consumer


@dataclass
class VerificationRun:
    """Everything produced by verifying one pact."""

    pact: Pact
    results: List[InteractionResult] = field(default_factory=list)
    failures: Mapping[str, Any] = field(default_factory=dict)
    verdict: VerificationVerdict | None = None
    published: bool = False
    skipped: bool = False

    @property
    def success(self) -> bool:
        """True when the ledger is empty and every interaction passed."""
        return not self.failures and all(r.passed for r in self.results)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    @property
    def exit_code(self) -> int:
        """
        Exit code for CI/CD pipelines.

        0 = Every interaction verified
        1 = One or more interactions failed
        """
        return ExitCode.SUCCESS if self.success else ExitCode.FAILED


@dataclass
class ProviderInfo:
    """The provider being verified and where its handlers live."""

    name: str
    packages_to_scan: List[str] = field(default_factory=list)


@dataclass
class ConsumerInfo:
    """A consumer whose pact is verified; its packages override the provider's."""

    name: str
    packages_to_scan: List[str] = field(default_factory=list)
