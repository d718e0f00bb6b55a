"""Reporters that render scenario results."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from rich.console import Console

from .models import ScenarioResult, ScenarioStatus


class Reporter(ABC):
    """Interface for publishing scenario outcomes."""

    @abstractmethod
    def scenario_finished(self, result: ScenarioResult) -> None:
        """Publish the result of one scenario."""

    def run_finished(self, results: Sequence[ScenarioResult]) -> None:
        """Called once after the last scenario."""


class ConsoleReporter(Reporter):
    """Prints one line per scenario using Rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def scenario_finished(self, result: ScenarioResult) -> None:
        style = {
            ScenarioStatus.PASSED: "green",
            ScenarioStatus.FAILED: "red",
            ScenarioStatus.ERROR: "yellow",
        }.get(result.status, "white")
        self._console.print(
            f"[{result.status.value.upper()}] {result.name} ({result.duration:.2f}s)",
            style=style,
            markup=False,
        )
        if result.message and not result.passed:
            self._console.print(result.message, style="dim", markup=False)

    def run_finished(self, results: Sequence[ScenarioResult]) -> None:
        passed = sum(1 for result in results if result.passed)
        style = "green" if passed == len(results) else "red"
        self._console.print(f"{passed}/{len(results)} scenarios passed", style=style)

