"""Pact broker integration."""

from .client import (
    PUBLISH_VERIFICATION_RESULTS,
    Err,
    Ok,
    PactBrokerClient,
    PublishResult,
)

__all__ = [
    "PUBLISH_VERIFICATION_RESULTS",
    "Err",
    "Ok",
    "PactBrokerClient",
    "PublishResult",
]
