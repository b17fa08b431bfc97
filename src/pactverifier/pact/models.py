"""
Contract (pact) data model.

Pacts are loaded elsewhere and handed to the verifier fully built; every type
here is frozen so verification can never mutate a contract.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union


def _frozen(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Consumer:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Provider:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ProviderState:
    """A named precondition the provider must be put into before an interaction."""

    name: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", _frozen(self.params))


@dataclass(frozen=True)
class Request:
    method: str = "GET"
    path: str = "/"
    query: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "query", _frozen(self.query))
        object.__setattr__(self, "headers", _frozen(self.headers))


@dataclass(frozen=True)
class Response:
    status: int = 200
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _frozen(self.headers))


@dataclass(frozen=True)
class RequestResponseInteraction:
    """An expected HTTP request and the response the provider must return."""

    description: str
    request: Request = field(default_factory=Request)
    response: Response = field(default_factory=Response)
    provider_states: Tuple[ProviderState, ...] = ()


@dataclass(frozen=True)
class Message:
    """An asynchronous message the provider must be able to produce."""

    description: str
    contents: Optional[bytes] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    provider_states: Tuple[ProviderState, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _frozen(self.metadata))


Interaction = Union[RequestResponseInteraction, Message]


@dataclass(frozen=True)
class FileSource:
    """Pact read from a local file."""

    path: str


@dataclass(frozen=True)
class BrokerUrlSource:
    """
    Pact fetched from a pact broker.

    ``attributes`` holds the HAL links returned with the pact; the
    ``pb:publish-verification-results`` link is where the verdict goes.
    ``options`` holds the client options (e.g. authentication) used to fetch it.
    """

    url: str
    pact_broker_url: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", _frozen(self.attributes))
        object.__setattr__(self, "options", _frozen(self.options))


@dataclass(frozen=True)
class UnknownSource:
    description: str = "unknown"


PactSource = Union[FileSource, BrokerUrlSource, UnknownSource]


@dataclass(frozen=True)
class Pact:
    """A recorded set of interactions between one consumer and one provider."""

    consumer: Consumer
    provider: Provider
    interactions: Tuple[Interaction, ...] = ()
    source: PactSource = field(default_factory=UnknownSource)

    def __post_init__(self) -> None:
        object.__setattr__(self, "interactions", tuple(self.interactions))
