"""Contract model consumed by the verifier."""

from .models import (
    BrokerUrlSource,
    Consumer,
    FileSource,
    Interaction,
    Message,
    Pact,
    PactSource,
    Provider,
    ProviderState,
    Request,
    RequestResponseInteraction,
    Response,
    UnknownSource,
)

__all__ = [
    "BrokerUrlSource",
    "Consumer",
    "FileSource",
    "Interaction",
    "Message",
    "Pact",
    "PactSource",
    "Provider",
    "ProviderState",
    "Request",
    "RequestResponseInteraction",
    "Response",
    "UnknownSource",
]
