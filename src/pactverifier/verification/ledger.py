"""Failure ledger for a single verification run."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import structlog

from .models import InteractionResult

logger = structlog.get_logger()


class FailureLedger:
    """
    Collects failure entries from interaction results.

    Keys are human-readable assertion descriptions. Two interactions can
    phrase the same key (for example "event Given s" with no states next to
    "event" given state "s"); the later entry is kept under the key with a
    " (n)" suffix so no failure is lost.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}
        self._owners: Dict[str, str] = {}
        self._frozen = False

    def merge(self, result: InteractionResult) -> None:
        """Add the failure entries carried by an interaction result."""
        if self._frozen:
            raise RuntimeError("Failure ledger is frozen")
        for key, detail in result.failures.items():
            entry_key = self._unique_key(key)
            if entry_key != key:
                logger.warning(
                    "failure_key_collision",
                    key=key,
                    recorded_as=entry_key,
                    description=result.description,
                    owner=self._owners[key],
                )
            self._entries[entry_key] = detail
            self._owners[entry_key] = result.description
        if result.failures:
            logger.debug(
                "failures_recorded",
                description=result.description,
                count=len(result.failures),
            )

    def _unique_key(self, key: str) -> str:
        candidate = key
        n = 1
        while candidate in self._entries:
            n += 1
            candidate = f"{key} ({n})"
        return candidate

    def owner(self, key: str) -> Optional[str]:
        """Description of the interaction that recorded ``key``."""
        return self._owners.get(key)

    def freeze(self) -> Mapping[str, Any]:
        """Stop accepting entries and return a read-only view."""
        self._frozen = True
        return MappingProxyType(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def is_empty(self) -> bool:
        return not self._entries
