"""
Error types for provider verification.

Exit Codes:
- 0: Success (every interaction verified)
- 1: Verification failed (one or more interactions failed)
- 10: Configuration error
- 11: Provider error (handler lookup or invocation failure)
- 127: Unknown/internal error
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ExitCode(IntEnum):
    """Exit codes for callers that turn a verification run into a process status."""

    SUCCESS = 0
    FAILED = 1
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    UNKNOWN_ERROR = 127


class PactVerifierError(Exception):
    """Base exception for verification errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PactVerifierError):
    """Raised for configuration-related errors."""

    exit_code = ExitCode.CONFIG_ERROR


class ResolutionError(PactVerifierError):
    """Raised when the handler search space cannot be constructed."""

    exit_code = ExitCode.PROVIDER_ERROR


class HandlerInvocationError(PactVerifierError):
    """Raised when a provider handler fails or returns an unusable value."""

    exit_code = ExitCode.PROVIDER_ERROR


class PublishError(PactVerifierError):
    """Failure to publish verification results to a pact broker."""

    exit_code = ExitCode.PROVIDER_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


class HandlerNotFoundError(ResolutionError):
    """No handler is registered for an interaction's description."""
