"""Interaction filters driven by the pact.filter.* settings."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from pactverifier.config.settings import VerifierSettings
from pactverifier.core.errors import ConfigurationError
from pactverifier.pact.models import Interaction, Pact


def _compile(pattern: Optional[str], setting: str) -> Optional[re.Pattern[str]]:
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(
            f"Invalid regular expression for {setting}: {e}",
            details={"pattern": pattern},
        ) from e


class InteractionFilter:
    """Selects which consumers and interactions are verified."""

    def __init__(
        self,
        consumers: Sequence[str] = (),
        description: Optional[str] = None,
        provider_state: Optional[str] = None,
    ) -> None:
        self.consumers = list(consumers)
        self._description = _compile(description, "pact.filter.description")
        self._provider_state_pattern = provider_state
        self._provider_state = _compile(provider_state, "pact.filter.providerState")

    @classmethod
    def from_settings(cls, settings: VerifierSettings) -> InteractionFilter:
        return cls(
            consumers=settings.consumers,
            description=settings.filter_description,
            provider_state=settings.filter_providerstate,
        )

    def consumer_selected(self, pact: Pact) -> bool:
        return not self.consumers or pact.consumer.name in self.consumers

    def selected(self, interaction: Interaction) -> bool:
        if self._description is not None and not self._description.match(
            interaction.description
        ):
            return False
        if self._provider_state is not None:
            states = interaction.provider_states
            if self._provider_state_pattern == "":
                # An empty filter selects interactions without provider states
                return not states
            return any(self._provider_state.match(s.name) for s in states)
        return True

    def apply(self, pact: Pact) -> List[Interaction]:
        return [i for i in pact.interactions if self.selected(i)]
