"""
Provider handler registry and resolver.

Handlers are zero-argument callables registered against an interaction
description. The registry is built at startup (directly or through the
``verify_provider`` decorator) and handed to the verifier; nothing is
discovered by scanning at verification time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import structlog

from pactverifier.core.errors import ResolutionError
from pactverifier.pact.models import Interaction

logger = structlog.get_logger()

HandlerFunc = Callable[[], Any]


@dataclass(frozen=True)
class RegisteredHandler:
    """A provider handler and the description it was registered for."""

    description: str
    func: HandlerFunc
    namespace: str = ""

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", None) or repr(self.func)

    def __call__(self) -> Any:
        return self.func()


class HandlerRegistry:
    """In-memory registry mapping interaction descriptions to handlers."""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[RegisteredHandler]] = {}

    def register(
        self,
        description: str,
        func: HandlerFunc,
        *,
        namespace: Optional[str] = None,
    ) -> RegisteredHandler:
        """Register a handler for an exact interaction description."""
        if not description:
            raise ValueError("Handler description is required")
        if namespace is None:
            namespace = getattr(func, "__module__", None) or ""
        handler = RegisteredHandler(description=description, func=func, namespace=namespace)
        self._handlers.setdefault(description, []).append(handler)
        return handler

    def verify_provider(self, description: str) -> Callable[[HandlerFunc], HandlerFunc]:
        """Decorator registering the wrapped function for ``description``."""

        def decorator(func: HandlerFunc) -> HandlerFunc:
            self.register(description, func)
            return func

        return decorator

    def search(self, packages: Sequence[str], description: str) -> frozenset[RegisteredHandler]:
        """All handlers for ``description`` whose namespace lies within ``packages``."""
        space = SearchSpace.build(packages)
        return frozenset(h for h in self._handlers.get(description, ()) if space.contains(h))

    def handlers(self) -> List[RegisteredHandler]:
        return [h for group in self._handlers.values() for h in group]

    def descriptions(self) -> List[str]:
        return list(self._handlers.keys())

    def clear(self) -> None:
        self._handlers.clear()


@dataclass(frozen=True)
class SearchSpace:
    """Namespace prefixes a handler must live under. Empty means unrestricted."""

    packages: Tuple[str, ...] = ()

    @classmethod
    def build(cls, packages: Iterable[str]) -> SearchSpace:
        packages = tuple(packages or ())
        for package in packages:
            if not isinstance(package, str) or not package.strip():
                raise ResolutionError(
                    "Cannot build handler search space from a blank package name",
                    details={"packages": list(packages)},
                )
        return cls(packages=tuple(p.strip() for p in packages))

    def contains(self, handler: RegisteredHandler) -> bool:
        if not self.packages:
            return True
        ns = handler.namespace
        return any(ns == p or ns.startswith(p + ".") for p in self.packages)


def packages_to_scan(provider_info: Any = None, consumer_info: Any = None) -> List[str]:
    """Consumer-level packages override provider-level ones."""
    consumer_packages = list(getattr(consumer_info, "packages_to_scan", None) or [])
    if consumer_packages:
        return consumer_packages
    return list(getattr(provider_info, "packages_to_scan", None) or [])


class HandlerResolver:
    """Resolves the handlers responsible for an interaction."""

    def __init__(self, registry: HandlerRegistry, packages: Sequence[str] = ()) -> None:
        self._registry = registry
        self._packages = tuple(packages)
        self._cache: Dict[str, frozenset[RegisteredHandler]] = {}

    @property
    def packages(self) -> Tuple[str, ...]:
        return self._packages

    def resolve(self, interaction: Interaction) -> frozenset[RegisteredHandler]:
        """
        Return every handler registered for the interaction's description.

        Raises:
            ResolutionError: If the configured search space is invalid
        """
        description = interaction.description
        if description not in self._cache:
            self._cache[description] = self._registry.search(self._packages, description)
            logger.debug(
                "handlers_resolved",
                description=description,
                packages=list(self._packages),
                handlers=sorted(h.name for h in self._cache[description]),
            )
        return self._cache[description]


default_registry = HandlerRegistry()


def verify_provider(description: str) -> Callable[[HandlerFunc], HandlerFunc]:
    """Register a handler on the default registry."""
    return default_registry.verify_provider(description)
