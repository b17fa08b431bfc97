"""
Publishing of verification verdicts to a pact broker.

Publishing is best-effort: any failure is logged and swallowed so it can never
change the outcome of a verification run.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import structlog

from pactverifier.broker.client import Err, PactBrokerClient
from pactverifier.config.settings import VerifierSettings
from pactverifier.pact.models import BrokerUrlSource, Pact

from .models import VerificationVerdict

logger = structlog.get_logger()

BrokerClientFactory = Callable[..., Any]


class ResultPublisher:
    """Sends a pact's verification verdict back to the broker it came from."""

    def __init__(
        self,
        settings: Optional[VerifierSettings] = None,
        client_factory: BrokerClientFactory = PactBrokerClient,
    ) -> None:
        self._settings = settings or VerifierSettings()
        self._client_factory = client_factory

    def publishing_results_disabled(self) -> bool:
        """True unless the publish flag is set to "true"."""
        return not self._settings.publish_results_enabled

    def publish(
        self,
        pact: Pact,
        verdict: VerificationVerdict,
        client: Any = None,
    ) -> bool:
        """
        Publish the verdict if the pact came from a broker and publishing is on.

        Returns:
            True if a publish request was attempted
        """
        if self.publishing_results_disabled():
            logger.debug(
                "publishing_disabled",
                consumer=pact.consumer.name,
                flag=self._settings.verifier_publish_results,
            )
            return False

        source = pact.source
        if not isinstance(source, BrokerUrlSource):
            logger.info("skipping_publish", consumer=pact.consumer.name, source=repr(source))
            return False

        try:
            broker = client or self._client_factory(
                source.pact_broker_url,
                source.options,
                timeout=self._settings.broker_timeout,
                max_retries=self._settings.broker_max_retries,
            )
            result = broker.publish_verification_results(
                source.attributes, verdict.success, verdict.provider_version
            )
        except Exception as e:
            logger.error("publish_failed", consumer=pact.consumer.name, error=str(e))
            logger.debug("publish_failed_cause", cause=repr(e.__cause__), exc_info=True)
            return True

        if isinstance(result, Err):
            logger.error(
                "publish_failed",
                consumer=pact.consumer.name,
                error=result.error.message,
            )
            logger.debug("publish_failed_cause", cause=repr(result.error.__cause__))
        else:
            logger.info(
                "published_verification_result",
                consumer=pact.consumer.name,
                result=verdict.success,
                version=verdict.provider_version,
            )
        return True
