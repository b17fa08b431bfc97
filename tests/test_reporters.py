"""Tests for reporter fan-out and the bundled reporters."""

import io
from unittest.mock import MagicMock

from pactverifier.config.settings import VerifierSettings
from pactverifier.core.errors import HandlerInvocationError
from pactverifier.pact.models import Message, ProviderState
from pactverifier.verification.console import VERIFIER_THEME, ConsoleReporter
from pactverifier.verification.reporters import (
    BaseReporter,
    LoggingReporter,
    ReporterFanout,
    VerifierReporter,
)
from rich.console import Console


class RecordingReporter(BaseReporter):
    def __init__(self, name, calls):
        self.name = name
        self.calls = calls

    def body_comparison_ok(self):
        self.calls.append((self.name, "body_comparison_ok"))

    def finalise_report(self):
        self.calls.append((self.name, "finalise_report"))


class ExplodingReporter(BaseReporter):
    def body_comparison_ok(self):
        raise RuntimeError("reporter bug")

    def finalise_report(self):
        raise RuntimeError("reporter bug")


def _console():
    return Console(file=io.StringIO(), theme=VERIFIER_THEME, width=200, color_system=None)


class TestReporterFanout:
    """Tests for delivering events to reporters."""

    def test_registration_order(self):
        """Events reach reporters in registration order."""
        calls = []
        fanout = ReporterFanout([RecordingReporter("a", calls), RecordingReporter("b", calls)])
        fanout.emit("body_comparison_ok")
        assert calls == [("a", "body_comparison_ok"), ("b", "body_comparison_ok")]

    def test_failing_reporter_does_not_block_others(self):
        """A raising reporter does not stop the others."""
        calls = []
        fanout = ReporterFanout([ExplodingReporter(), RecordingReporter("b", calls)])
        fanout.emit("body_comparison_ok")
        fanout.finalise()
        assert calls == [("b", "body_comparison_ok"), ("b", "finalise_report")]

    def test_same_reporter_added_once(self):
        """Adding the same reporter twice keeps one."""
        reporter = MagicMock()
        fanout = ReporterFanout([reporter, reporter])
        fanout.finalise()
        reporter.finalise_report.assert_called_once_with()

    def test_missing_event_method_is_skipped(self):
        """Reporters without a handler for an event are skipped."""
        fanout = ReporterFanout([object()])
        fanout.emit("body_comparison_ok")

    def test_arguments_passed_through(self):
        """Event arguments reach the reporter unchanged."""
        reporter = MagicMock()
        fanout = ReporterFanout([reporter])
        fanout.emit("metadata_comparison_failed", "topic", "orders", {"topic": {}})
        reporter.metadata_comparison_failed.assert_called_once_with(
            "topic", "orders", {"topic": {}}
        )


class TestBaseReporter:
    """Tests for the no-op base reporter."""

    def test_satisfies_protocol(self):
        """The logging reporter implements the reporter protocol."""
        assert isinstance(BaseReporter(), VerifierReporter)
        assert isinstance(LoggingReporter(), VerifierReporter)
        assert isinstance(ConsoleReporter(_console()), VerifierReporter)


class TestLoggingReporter:
    """Tests for the structured logging reporter."""

    def test_logs_failures(self):
        """Each failure key is logged."""
        log = MagicMock()
        reporter = LoggingReporter(log)
        reporter.display_failures({"a failure": {}})
        assert reporter.failures == {"a failure": {}}
        log.warning.assert_called_once_with("failure", key="a failure")

    def test_verification_failed_gates_stacktrace(self):
        """The traceback is attached only when requested."""
        log = MagicMock()
        reporter = LoggingReporter(log)
        error = RuntimeError("boom")
        reporter.verification_failed(Message("event"), error, False)
        assert log.error.call_args.kwargs["exc_info"] is None
        reporter.verification_failed(Message("event"), error, True)
        assert log.error.call_args.kwargs["exc_info"] is error


class TestConsoleReporter:
    """Tests for terminal output."""

    def test_message_progress(self):
        """Message progress lines are printed."""
        console = _console()
        reporter = ConsoleReporter(console)
        reporter.state_for_interaction(ProviderState("an order exists"), True)
        reporter.generates_a_message_which()
        reporter.body_comparison_ok()
        reporter.includes_metadata()
        reporter.metadata_comparison_failed("topic", "orders", {})
        output = console.file.getvalue()
        assert "Given an order exists" in output
        assert "generates a message which" in output
        assert "has a matching body (OK)" in output
        assert '"topic" with value "orders" (FAILED)' in output

    def test_bracketed_contract_values_printed_verbatim(self):
        """State names, metadata and headers containing markup are printed as-is."""
        console = _console()
        reporter = ConsoleReporter(console)
        reporter.state_for_interaction(ProviderState("user [bold]x"), True)
        reporter.state_for_interaction(ProviderState("user [/x]"), False)
        reporter.metadata_comparison_ok("[key]", "[/value]")
        reporter.metadata_comparison_failed("topic", "[orders]", {})
        reporter.header_comparison_ok("X-Tag", "[a]")
        reporter.header_comparison_failed("X-Tag", "[/b]", "diff")
        output = console.file.getvalue()
        assert "Given user [bold]x" in output
        assert "Tearing down user [/x]" in output
        assert '"[key]" with value "[/value]" (OK)' in output
        assert '"topic" with value "[orders]" (FAILED)' in output
        assert '"X-Tag" with value "[a]" (OK)' in output
        assert '"X-Tag" with value "[/b]" (FAILED)' in output

    def test_no_handler_found(self):
        """The missing handler notice names the interaction."""
        console = _console()
        ConsoleReporter(console).no_handler_found(
            Message("[odd] event")
        )
        assert "No handlers were found for interaction '[odd] event'" in console.file.getvalue()

    def test_verification_failed_with_stacktrace(self):
        """The traceback is printed when requested."""
        console = _console()
        try:
            raise HandlerInvocationError("Failed to invoke provider method 'x'")
        except HandlerInvocationError as e:
            ConsoleReporter(console).verification_failed(Message("event"), e, True)
        output = console.file.getvalue()
        assert "Verification Failed - Failed to invoke provider method 'x'" in output
        assert "Traceback" in output

    def test_display_failures(self):
        """Failures are listed with their keys."""
        console = _console()
        ConsoleReporter(console).display_failures(
            {
                "body mismatch": {"a": {"expected": 1, "actual": 2}},
                "status mismatch": "expected status of 200 but was 500",
                "error": RuntimeError("boom"),
            }
        )
        output = console.file.getvalue()
        assert "0) body mismatch" in output
        assert "    a" in output
        assert "expected status of 200 but was 500" in output
        assert "RuntimeError: boom" in output

    def test_display_full_diff(self):
        """Full diffs are printed as JSON."""
        console = _console()
        ConsoleReporter(console, show_full_diff=True).display_failures(
            {"body mismatch": {"a": {"expected": 1, "actual": 2}}}
        )
        assert '"expected": 1' in console.file.getvalue()

    def test_from_settings(self):
        """Filters are read from settings."""
        reporter = ConsoleReporter.from_settings(VerifierSettings(show_full_diff=True), _console())
        assert reporter.show_full_diff is True

    def test_no_failures_prints_nothing(self):
        """An empty ledger prints nothing."""
        console = _console()
        ConsoleReporter(console).display_failures({})
        assert console.file.getvalue() == ""
