"""Core definitions shared across the verifier."""

from pactverifier.core.errors import (
    ConfigurationError,
    ExitCode,
    HandlerInvocationError,
    HandlerNotFoundError,
    PactVerifierError,
    PublishError,
    ResolutionError,
)

__all__ = [
    "ExitCode",
    "PactVerifierError",
    "ConfigurationError",
    "ResolutionError",
    "HandlerInvocationError",
    "HandlerNotFoundError",
    "PublishError",
]
