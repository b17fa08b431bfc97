"""
Verification reporters.

Every observable outcome is broadcast to each registered reporter, in
registration order, before verification moves on. A reporter that raises is
logged and skipped; it never stops delivery to the others.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

import structlog

from pactverifier.pact.models import Interaction, ProviderState

logger = structlog.get_logger()


@runtime_checkable
class VerifierReporter(Protocol):
    """Events emitted while verifying a pact."""

    def state_for_interaction(self, state: ProviderState, is_setup: bool) -> None:
        ...

    def generates_a_message_which(self) -> None:
        ...

    def body_comparison_ok(self) -> None:
        ...

    def body_comparison_failed(self, diff: Mapping[str, Any]) -> None:
        ...

    def includes_metadata(self) -> None:
        ...

    def metadata_comparison_ok(self, key: Optional[str] = None, value: Any = None) -> None:
        ...

    def metadata_comparison_failed(self, key: str, expected: Any, diff: Any) -> None:
        ...

    def status_comparison_ok(self, status: int) -> None:
        ...

    def status_comparison_failed(self, status: int, diff: str) -> None:
        ...

    def header_comparison_ok(self, key: str, value: Any) -> None:
        ...

    def header_comparison_failed(self, key: str, value: Any, diff: str) -> None:
        ...

    def no_handler_found(self, interaction: Interaction) -> None:
        ...

    def verification_failed(
        self, interaction: Interaction, error: BaseException, show_stacktrace: bool
    ) -> None:
        ...

    def display_failures(self, failures: Mapping[str, Any]) -> None:
        ...

    def finalise_report(self) -> None:
        ...


class BaseReporter:
    """Reporter with no-op handlers; subclass and override what you need."""

    def state_for_interaction(self, state: ProviderState, is_setup: bool) -> None:
        pass

    def generates_a_message_which(self) -> None:
        pass

    def body_comparison_ok(self) -> None:
        pass

    def body_comparison_failed(self, diff: Mapping[str, Any]) -> None:
        pass

    def includes_metadata(self) -> None:
        pass

    def metadata_comparison_ok(self, key: Optional[str] = None, value: Any = None) -> None:
        pass

    def metadata_comparison_failed(self, key: str, expected: Any, diff: Any) -> None:
        pass

    def status_comparison_ok(self, status: int) -> None:
        pass

    def status_comparison_failed(self, status: int, diff: str) -> None:
        pass

    def header_comparison_ok(self, key: str, value: Any) -> None:
        pass

    def header_comparison_failed(self, key: str, value: Any, diff: str) -> None:
        pass

    def no_handler_found(self, interaction: Interaction) -> None:
        pass

    def verification_failed(
        self, interaction: Interaction, error: BaseException, show_stacktrace: bool
    ) -> None:
        pass

    def display_failures(self, failures: Mapping[str, Any]) -> None:
        pass

    def finalise_report(self) -> None:
        pass


class ReporterFanout:
    """Delivers each event to every reporter, isolating reporter failures."""

    def __init__(self, reporters: Sequence[VerifierReporter] = ()) -> None:
        self._reporters: List[VerifierReporter] = []
        for reporter in reporters:
            self.add(reporter)

    def add(self, reporter: VerifierReporter) -> None:
        if any(r is reporter for r in self._reporters):
            return
        self._reporters.append(reporter)

    @property
    def reporters(self) -> List[VerifierReporter]:
        return list(self._reporters)

    def emit(self, event: str, *args: Any, **kwargs: Any) -> None:
        """Call ``event`` on every reporter in registration order."""
        for reporter in self._reporters:
            handler = getattr(reporter, event, None)
            if handler is None:
                continue
            try:
                handler(*args, **kwargs)
            except Exception as e:
                logger.warning(
                    "reporter_event_failed",
                    reporter=type(reporter).__name__,
                    event_name=event,
                    error=str(e),
                    exc_info=True,
                )

    def finalise(self) -> None:
        self.emit("finalise_report")


class LoggingReporter(BaseReporter):
    """Reports verification events as structured log entries."""

    def __init__(self, logger_: Any = None) -> None:
        self._log = logger_ or structlog.get_logger("pactverifier.report")
        self.failures: Dict[str, Any] = {}

    def state_for_interaction(self, state: ProviderState, is_setup: bool) -> None:
        self._log.info(
            "provider_state", state=state.name, phase="setup" if is_setup else "teardown"
        )

    def body_comparison_ok(self) -> None:
        self._log.info("body_matched")

    def body_comparison_failed(self, diff: Mapping[str, Any]) -> None:
        self._log.warning("body_mismatch", paths=sorted(diff))

    def metadata_comparison_ok(self, key: Optional[str] = None, value: Any = None) -> None:
        self._log.info("metadata_matched", key=key)

    def metadata_comparison_failed(self, key: str, expected: Any, diff: Any) -> None:
        self._log.warning("metadata_mismatch", key=key, expected=expected)

    def status_comparison_failed(self, status: int, diff: str) -> None:
        self._log.warning("status_mismatch", expected=status, detail=diff)

    def header_comparison_failed(self, key: str, value: Any, diff: str) -> None:
        self._log.warning("header_mismatch", header=key, expected=value, detail=diff)

    def no_handler_found(self, interaction: Interaction) -> None:
        self._log.error("no_handler_found", description=interaction.description)

    def verification_failed(
        self, interaction: Interaction, error: BaseException, show_stacktrace: bool
    ) -> None:
        self._log.error(
            "verification_failed",
            description=interaction.description,
            error=str(error),
            exc_info=error if show_stacktrace else None,
        )

    def display_failures(self, failures: Mapping[str, Any]) -> None:
        self.failures = dict(failures)
        for key in failures:
            self._log.warning("failure", key=key)
