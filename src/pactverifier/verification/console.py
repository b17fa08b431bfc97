"""
Console reporter using rich.

Respects NO_COLOR through rich's own detection, so it is safe to use in CI.
"""

from __future__ import annotations

import json
import traceback
from typing import Any, Mapping, Optional

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from pactverifier.config.settings import VerifierSettings
from pactverifier.pact.models import Interaction, ProviderState

from .reporters import BaseReporter

VERIFIER_THEME = Theme(
    {
        "info": "#88C0D0",
        "success": "#A3BE8C",
        "warning": "#EBCB8B",
        "error": "#BF616A bold",
        "muted": "#D8DEE9",
    }
)


def _key_value(key: Any, value: Any) -> str:
    return f'"{escape(str(key))}" with value "{escape(str(value))}"'


def _render(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, default=str)
    return str(value)


class ConsoleReporter(BaseReporter):
    """Prints verification progress and failures to the terminal."""

    def __init__(self, console: Optional[Console] = None, show_full_diff: bool = False) -> None:
        self.console = console or Console(theme=VERIFIER_THEME, highlight=False)
        self.show_full_diff = show_full_diff

    @classmethod
    def from_settings(
        cls, settings: VerifierSettings, console: Optional[Console] = None
    ) -> ConsoleReporter:
        return cls(console=console, show_full_diff=settings.show_full_diff)

    def state_for_interaction(self, state: ProviderState, is_setup: bool) -> None:
        phase = "Given" if is_setup else "Tearing down"
        self.console.print(f"  [info]{phase}[/info] {escape(state.name)}")

    def generates_a_message_which(self) -> None:
        self.console.print("    generates a message which")

    def body_comparison_ok(self) -> None:
        self.console.print("      has a matching body ([success]OK[/success])")

    def body_comparison_failed(self, diff: Mapping[str, Any]) -> None:
        self.console.print("      has a matching body ([error]FAILED[/error])")

    def includes_metadata(self) -> None:
        self.console.print("      includes message metadata")

    def metadata_comparison_ok(self, key: Optional[str] = None, value: Any = None) -> None:
        if key is None:
            self.console.print("      has matching metadata ([success]OK[/success])")
        else:
            self.console.print(f"        {_key_value(key, value)} ([success]OK[/success])")

    def metadata_comparison_failed(self, key: str, expected: Any, diff: Any) -> None:
        self.console.print(f"        {_key_value(key, expected)} ([error]FAILED[/error])")

    def status_comparison_ok(self, status: int) -> None:
        self.console.print(f"      has status code {status} ([success]OK[/success])")

    def status_comparison_failed(self, status: int, diff: str) -> None:
        self.console.print(f"      has status code {status} ([error]FAILED[/error])")

    def header_comparison_ok(self, key: str, value: Any) -> None:
        self.console.print(f"        {_key_value(key, value)} ([success]OK[/success])")

    def header_comparison_failed(self, key: str, value: Any, diff: str) -> None:
        self.console.print(f"        {_key_value(key, value)} ([error]FAILED[/error])")

    def no_handler_found(self, interaction: Interaction) -> None:
        self.console.print(
            f"  [warning]No handlers were found for interaction "
            f"'{escape(interaction.description)}'[/warning]"
        )

    def verification_failed(
        self, interaction: Interaction, error: BaseException, show_stacktrace: bool
    ) -> None:
        self.console.print(f"      [error]Verification Failed - {escape(str(error))}[/error]")
        if show_stacktrace:
            trace = traceback.format_exception(type(error), error, error.__traceback__)
            self.console.print("".join(trace), markup=False)

    def display_failures(self, failures: Mapping[str, Any]) -> None:
        if not failures:
            return
        self.console.print()
        self.console.print("[error]Failures:[/error]")
        self.console.print()
        for index, (description, detail) in enumerate(failures.items()):
            self.console.print(f"{index}) {description}", markup=False)
            if isinstance(detail, BaseException):
                self.console.print(f"    {type(detail).__name__}: {detail}", markup=False)
            elif self.show_full_diff:
                self.console.print(_render(detail), markup=False)
            elif isinstance(detail, Mapping):
                for path in detail:
                    self.console.print(f"    {path}", markup=False)
            else:
                self.console.print(f"    {detail}", markup=False)
            self.console.print()

