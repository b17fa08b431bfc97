"""
Provider verifier.

Verifies every interaction of a pact against the provider handlers registered
for it, reports each outcome and publishes the aggregate verdict.

Per interaction: resolve handlers -> invoke -> normalize -> compare -> record.
Any error raised along the way fails that interaction only; verification of
the remaining interactions carries on.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence

import structlog

from pactverifier.config.settings import VerifierSettings
from pactverifier.core.errors import HandlerInvocationError, HandlerNotFoundError
from pactverifier.logging import bind_context, interaction_context
from pactverifier.pact.models import (
    Interaction,
    Message,
    Pact,
    ProviderState,
    RequestResponseInteraction,
    Response,
)

from .comparison import Comparator, StructuralComparator
from .filters import InteractionFilter
from .ledger import FailureLedger
from .models import (
    ConsumerInfo,
    DiffResult,
    InteractionResult,
    ProviderInfo,
    VerificationRun,
    VerificationVerdict,
)
from .output import normalize
from .publisher import ResultPublisher
from .registry import (
    HandlerRegistry,
    HandlerResolver,
    RegisteredHandler,
    default_registry,
    packages_to_scan,
)
from .reporters import ReporterFanout, VerifierReporter

logger = structlog.get_logger()

GENERATES_A_MESSAGE = " generates a message which"


class StateChange(Protocol):
    """Puts the provider into (and out of) a provider state."""

    def setup(self, state: ProviderState, interaction: Interaction) -> None:
        ...

    def teardown(self, state: ProviderState, interaction: Interaction) -> None:
        ...


def invoke_handler(handler: RegisteredHandler) -> Any:
    """Call a provider handler, wrapping anything it raises."""
    try:
        return handler()
    except Exception as e:
        raise HandlerInvocationError(
            f"Failed to invoke provider method '{handler.name}'",
            details={"description": handler.description},
        ) from e


def _ordered(handlers: Iterable[RegisteredHandler]) -> List[RegisteredHandler]:
    return sorted(handlers, key=lambda h: (h.namespace, h.name))


class ProviderVerifier:
    """Verifies pacts against provider handlers."""

    def __init__(
        self,
        settings: Optional[VerifierSettings] = None,
        registry: Optional[HandlerRegistry] = None,
        reporters: Sequence[VerifierReporter] = (),
        comparator: Optional[Comparator] = None,
        publisher: Optional[ResultPublisher] = None,
        state_change: Optional[StateChange] = None,
    ) -> None:
        self.settings = settings or VerifierSettings()
        self.registry = registry if registry is not None else default_registry
        self.reporters = ReporterFanout(reporters)
        self.comparator: Comparator = comparator or StructuralComparator()
        self.publisher = publisher or ResultPublisher(self.settings)
        self.state_change = state_change
        self.filter = InteractionFilter.from_settings(self.settings)

    @property
    def provider_version(self) -> str:
        if not self.settings.provider_version:
            logger.warning(
                "provider_version_not_set",
                hint="Set PACT_PROVIDER_VERSION or pact.provider.version",
            )
        return self.settings.resolved_provider_version()

    def verify_pact(
        self,
        pact: Pact,
        provider_info: Optional[ProviderInfo] = None,
        consumer_info: Optional[ConsumerInfo] = None,
    ) -> VerificationRun:
        """
        Verify every selected interaction in a pact.

        Reports are finalised exactly once, whatever the outcome.

        Returns:
            VerificationRun with per-interaction results, the frozen failure
            ledger and the verdict
        """
        log = bind_context(consumer=pact.consumer.name, provider=pact.provider.name)
        run = VerificationRun(pact=pact)

        try:
            if not self.filter.consumer_selected(pact):
                log.info("skipping_consumer", consumers=self.filter.consumers)
                run.skipped = True
                return run

            interactions = self.filter.apply(pact)
            log.info(
                "verifying_pact",
                interactions=len(interactions),
                filtered=len(pact.interactions) - len(interactions),
            )

            packages = packages_to_scan(provider_info, consumer_info)
            resolver = HandlerResolver(self.registry, packages)
            ledger = FailureLedger()
            for interaction in interactions:
                result = self.verify_interaction(pact, interaction, resolver)
                run.results.append(result)
                ledger.merge(result)

            run.failures = ledger.freeze()
            run.verdict = VerificationVerdict(
                success=run.success,
                provider_version=self.provider_version,
                consumer=pact.consumer,
            )

            if len(interactions) != len(pact.interactions):
                log.warning("skipping_publish_filtered", reason="interactions were filtered")
            else:
                run.published = self.publisher.publish(pact, run.verdict)

            self.display_failures(run.failures)
            log.info("pact_verified", success=run.success, failed=run.failed_count)
        finally:
            self.finalise_reports()

        return run

    @staticmethod
    def interaction_message(pact: Pact, interaction: Interaction) -> str:
        """Human-readable context used as the prefix of every failure key."""
        message = (
            f"Verifying a pact between {pact.consumer.name} and {pact.provider.name}"
            f" - {interaction.description}"
        )
        for state in interaction.provider_states:
            message += f" Given {state.name}"
        return message

    def verify_interaction(
        self,
        pact: Pact,
        interaction: Interaction,
        resolver: HandlerResolver,
    ) -> InteractionResult:
        """Verify one interaction; never raises."""
        message = self.interaction_message(pact, interaction)
        prepared: List[ProviderState] = []
        try:
            for state in interaction.provider_states:
                self._change_state(state, interaction, is_setup=True)
                prepared.append(state)

            handlers = resolver.resolve(interaction)
            if not handlers:
                return self._no_handlers(interaction, message)

            if isinstance(interaction, Message):
                return self.verify_message_pact(handlers, interaction, message)
            return self._verify_request_response(handlers, interaction, message)
        except Exception as e:
            logger.debug(
                "interaction_failed", **interaction_context(pact, interaction), exc_info=True
            )
            return self._failed(interaction, message, e)
        finally:
            for state in reversed(prepared):
                self._teardown(state, interaction)

    def _change_state(self, state: ProviderState, interaction: Interaction, is_setup: bool) -> None:
        self.reporters.emit("state_for_interaction", state, is_setup)
        if self.state_change is None:
            return
        if is_setup:
            self.state_change.setup(state, interaction)
        else:
            self.state_change.teardown(state, interaction)

    def _teardown(self, state: ProviderState, interaction: Interaction) -> None:
        try:
            self._change_state(state, interaction, is_setup=False)
        except Exception as e:
            logger.warning(
                "state_teardown_failed",
                state=state.name,
                description=interaction.description,
                error=str(e),
            )

    def _failed(
        self, interaction: Interaction, message: str, error: Exception
    ) -> InteractionResult:
        logger.debug("handler_failed", description=interaction.description, error=str(error))
        self.reporters.emit(
            "verification_failed", interaction, error, self.settings.show_stacktrace
        )
        return InteractionResult(interaction.description, False, {message: error})

    def _no_handlers(self, interaction: Interaction, message: str) -> InteractionResult:
        self.reporters.emit("no_handler_found", interaction)
        error = HandlerNotFoundError(
            f"No handlers were found for interaction '{interaction.description}'. "
            f"Register a handler with @verify_provider({interaction.description!r}) "
            "that returns the provider output.",
            details={"description": interaction.description},
        )
        return InteractionResult(interaction.description, False, {message: error})

    def verify_message_pact(
        self,
        handlers: Iterable[RegisteredHandler],
        message: Message,
        interaction_message: str,
    ) -> InteractionResult:
        """Invoke each handler and compare the message it produces; all must pass."""
        result = InteractionResult(message.description, True)
        context = interaction_message + GENERATES_A_MESSAGE
        for handler in _ordered(handlers):
            self.reporters.emit("generates_a_message_which")
            try:
                actual = normalize(invoke_handler(handler))
            except Exception as e:
                return result.merge(self._failed(message, interaction_message, e))

            body = self.display_body_result(
                message.description,
                self.comparator.compare(message.contents, actual.payload),
                context,
            )
            metadata = self.display_metadata_result(
                message.description, message.metadata, actual.metadata, context
            )
            result = result.merge(body).merge(metadata)
        return result

    def _verify_request_response(
        self,
        handlers: Iterable[RegisteredHandler],
        interaction: RequestResponseInteraction,
        interaction_message: str,
    ) -> InteractionResult:
        result = InteractionResult(interaction.description, True)
        for handler in _ordered(handlers):
            try:
                actual = invoke_handler(handler)
                if not isinstance(actual, Mapping):
                    raise HandlerInvocationError(
                        f"Provider method '{handler.name}' must return a mapping describing "
                        f"the response, got {type(actual).__name__}",
                        details={"description": handler.description},
                    )
            except Exception as e:
                return result.merge(self._failed(interaction, interaction_message, e))
            result = result.merge(
                self.verify_request_response_pact(
                    interaction.description, interaction.response, actual, interaction_message
                )
            )
        return result

    def verify_request_response_pact(
        self,
        description: str,
        expected: Response,
        actual: Mapping[str, Any],
        interaction_message: str,
    ) -> InteractionResult:
        """Compare an actual response mapping with the expected response."""
        comparison = self.comparator.compare_response(expected, actual)
        failures: dict[str, Any] = {}

        if comparison.status is None:
            self.reporters.emit("status_comparison_ok", expected.status)
        else:
            self.reporters.emit("status_comparison_failed", expected.status, comparison.status)
            failures[f"{interaction_message} has status code {expected.status}"] = (
                comparison.status
            )

        for key, header_diff in comparison.headers.items():
            value = expected.headers.get(key)
            if header_diff is None:
                self.reporters.emit("header_comparison_ok", key, value)
            else:
                self.reporters.emit("header_comparison_failed", key, value, header_diff)
                failures[f'{interaction_message} includes headers "{key}" with value "{value}"'] = (
                    header_diff
                )

        result = InteractionResult(description, not failures, failures)
        body = self.display_body_result(description, comparison.body, interaction_message)
        return result.merge(body)

    def display_body_result(
        self, description: str, diff: DiffResult, context: str
    ) -> InteractionResult:
        if not diff:
            self.reporters.emit("body_comparison_ok")
            return InteractionResult(description, True)
        self.reporters.emit("body_comparison_failed", diff)
        return InteractionResult(description, False, {f"{context} has a matching body": diff})

    def display_metadata_result(
        self,
        description: str,
        expected: Mapping[str, Any],
        actual: Mapping[str, Any],
        context: str,
    ) -> InteractionResult:
        if not expected and not actual:
            return InteractionResult(description, True)

        comparison = self.comparator.compare_metadata(expected, actual)
        if not comparison:
            self.reporters.emit("metadata_comparison_ok")
            return InteractionResult(description, True)

        self.reporters.emit("includes_metadata")
        failures: dict[str, Any] = {}
        for key, diff in comparison.items():
            expected_value = expected.get(key)
            if diff is None:
                self.reporters.emit("metadata_comparison_ok", key, expected_value)
            else:
                self.reporters.emit("metadata_comparison_failed", key, expected_value, diff)
                key_phrase = f'includes metadata "{key}" with value "{expected_value}"'
                failures[f"{context} {key_phrase}"] = diff
        return InteractionResult(description, not failures, failures)

    def display_failures(self, failures: Mapping[str, Any]) -> None:
        self.reporters.emit("display_failures", failures)

    def finalise_reports(self) -> None:
        self.reporters.finalise()
