"""
Verifier settings using Pydantic.

Provides environment-based configuration loading with PACT_ prefix. Field names
are chosen so the environment variables line up with the verifier's
historical property names (``pact.verifier.publishResults`` becomes
``PACT_VERIFIER_PUBLISH_RESULTS`` and so on).
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic_settings import BaseSettings

from pactverifier.core.errors import ConfigurationError

# Dotted property names accepted by from_properties()
PACT_VERIFIER_PUBLISH_RESULTS = "pact.verifier.publishResults"
PACT_FILTER_CONSUMERS = "pact.filter.consumers"
PACT_FILTER_DESCRIPTION = "pact.filter.description"
PACT_FILTER_PROVIDERSTATE = "pact.filter.providerState"
PACT_SHOW_STACKTRACE = "pact.showStacktrace"
PACT_SHOW_FULLDIFF = "pact.showFullDiff"
PACT_PROVIDER_VERSION = "pact.provider.version"
PACT_PROVIDER_VERSION_TRIM_SNAPSHOT = "pact.provider.version.trimSnapshot"

PROPERTY_FIELDS = {
    PACT_VERIFIER_PUBLISH_RESULTS: "verifier_publish_results",
    PACT_FILTER_CONSUMERS: "filter_consumers",
    PACT_FILTER_DESCRIPTION: "filter_description",
    PACT_FILTER_PROVIDERSTATE: "filter_providerstate",
    PACT_SHOW_STACKTRACE: "show_stacktrace",
    PACT_SHOW_FULLDIFF: "show_full_diff",
    PACT_PROVIDER_VERSION: "provider_version",
    PACT_PROVIDER_VERSION_TRIM_SNAPSHOT: "provider_version_trim_snapshot",
}

DEFAULT_PROVIDER_VERSION = "0.0.0"
SNAPSHOT_SUFFIX = "-SNAPSHOT"


class VerifierSettings(BaseSettings):
    """Settings consumed by the verification engine."""

    # Publishing (only the exact string "true", any case, enables it)
    verifier_publish_results: str | None = None

    # Reporting
    show_stacktrace: bool = False
    show_full_diff: bool = False

    # Provider version
    provider_version: str | None = None
    provider_version_trim_snapshot: bool = False

    # Interaction filters (comma separated consumers, regex description/state)
    filter_consumers: str | None = None
    filter_description: str | None = None
    filter_providerstate: str | None = None

    # Broker HTTP client
    broker_timeout: float = 30.0
    broker_max_retries: int = 3

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "PACT_"

    @property
    def publish_results_enabled(self) -> bool:
        """True only when the publish flag is the string "true"."""
        if self.verifier_publish_results is None:
            return False
        return self.verifier_publish_results.lower() == "true"

    @property
    def consumers(self) -> list[str]:
        """Consumer names from the comma separated filter."""
        if not self.filter_consumers:
            return []
        return [c.strip() for c in self.filter_consumers.split(",") if c.strip()]

    def resolved_provider_version(self) -> str:
        """Provider version to publish, with the snapshot suffix trimmed if requested."""
        version = self.provider_version or DEFAULT_PROVIDER_VERSION
        if self.provider_version_trim_snapshot and version.endswith(SNAPSHOT_SUFFIX):
            version = version[: -len(SNAPSHOT_SUFFIX)]
        return version

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> VerifierSettings:
        """
        Build settings from dotted property names.

        Accepts the names build tools pass through (``pact.showStacktrace``),
        as well as plain field names. Unknown pact.* names are rejected.
        """
        values: dict[str, Any] = {}
        for name, value in properties.items():
            if name in PROPERTY_FIELDS:
                values[PROPERTY_FIELDS[name]] = value
            elif name in cls.model_fields:
                values[name] = value
            elif name.startswith("pact."):
                raise ConfigurationError(
                    f"Unknown verifier property '{name}'",
                    details={"property": name},
                )
        if isinstance(values.get("filter_consumers"), (list, tuple)):
            values["filter_consumers"] = ",".join(values["filter_consumers"])
        return cls(**values)
