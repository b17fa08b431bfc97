"""
Provider verification.

Checks that a provider honours the interactions recorded in a consumer's pact:
- handlers are registered per interaction description
- their output is normalized and compared with the contract
- results go to reporters and, optionally, back to the pact broker
"""

from .comparison import Comparator, ResponseComparison, StructuralComparator
from .console import ConsoleReporter
from .ledger import FailureLedger
from .models import (
    ConsumerInfo,
    InteractionResult,
    NormalizedOutput,
    ProviderInfo,
    VerificationRun,
    VerificationVerdict,
)
from .output import MessageAndMetadata, normalize, to_handler_output
from .publisher import ResultPublisher
from .registry import HandlerRegistry, HandlerResolver, default_registry, verify_provider
from .reporters import BaseReporter, LoggingReporter, ReporterFanout, VerifierReporter
from .verifier import ProviderVerifier

__all__ = [
    "BaseReporter",
    "Comparator",
    "ConsoleReporter",
    "ConsumerInfo",
    "FailureLedger",
    "HandlerRegistry",
    "HandlerResolver",
    "InteractionResult",
    "LoggingReporter",
    "MessageAndMetadata",
    "NormalizedOutput",
    "ProviderInfo",
    "ProviderVerifier",
    "ReporterFanout",
    "ResponseComparison",
    "ResultPublisher",
    "StructuralComparator",
    "VerificationRun",
    "VerificationVerdict",
    "VerifierReporter",
    "default_registry",
    "normalize",
    "to_handler_output",
    "verify_provider",
]
