"""Registry and sequential runner for scenarios."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from ..browser.base import AutomationProvider
from ..config import HarnessSettings
from ..errors import HarnessError
from ..models import ScenarioResult, ScenarioStatus
from ..reporting import Reporter
from .scenario import RemoteProviderFactory, ScenarioContext

LOGGER = logging.getLogger(__name__)

ScenarioFunc = Callable[[ScenarioContext], None]


@dataclass
class Scenario:
    """A named scenario function plus selection tags."""

    name: str
    func: ScenarioFunc
    description: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)


class ScenarioRegistry:
    """Ordered collection of scenarios."""

    def __init__(self) -> None:
        self._scenarios: dict[str, Scenario] = {}

    def register(
        self,
        name: str,
        *,
        tags: Iterable[str] = (),
    ) -> Callable[[ScenarioFunc], ScenarioFunc]:
        def decorator(func: ScenarioFunc) -> ScenarioFunc:
            if name in self._scenarios:
                raise ValueError(f"Scenario {name!r} is already registered")
            doc = (func.__doc__ or "").strip().splitlines()
            self._scenarios[name] = Scenario(
                name=name,
                func=func,
                description=doc[0] if doc else "",
                tags=frozenset(tags),
            )
            return func

        return decorator

    def get(self, name: str) -> Scenario:
        try:
            return self._scenarios[name]
        except KeyError:
            raise KeyError(f"Unknown scenario: {name}") from None

    def all(self) -> list[Scenario]:
        return list(self._scenarios.values())

    def select(
        self,
        names: Iterable[str] = (),
        *,
        tags: Iterable[str] = (),
        exclude_tags: Iterable[str] = (),
    ) -> list[Scenario]:
        """Pick scenarios by name or tag.

        Explicit names always win; otherwise every scenario matching ``tags``
        (all of them when empty) minus those carrying an excluded tag.
        """

        names = list(names)
        if names:
            return [self.get(name) for name in names]
        wanted = set(tags)
        excluded = set(exclude_tags) - wanted
        selected = []
        for scenario in self._scenarios.values():
            if wanted and not wanted & scenario.tags:
                continue
            if excluded & scenario.tags:
                continue
            selected.append(scenario)
        return selected


class ScenarioRunner:
    """Runs scenarios one after another, each in its own context."""

    def __init__(
        self,
        settings: HarnessSettings,
        provider: AutomationProvider,
        *,
        remote_provider_factory: Optional[RemoteProviderFactory] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self._settings = settings
        self._provider = provider
        self._remote_provider_factory = remote_provider_factory
        self._reporter = reporter

    def run(self, scenarios: Iterable[Scenario]) -> list[ScenarioResult]:
        results = [self.run_one(scenario) for scenario in scenarios]
        if self._reporter:
            self._reporter.run_finished(results)
        return results

    def run_one(self, scenario: Scenario) -> ScenarioResult:
        LOGGER.info("Running scenario %s", scenario.name)
        context = ScenarioContext(
            self._settings,
            self._provider,
            remote_provider_factory=self._remote_provider_factory,
            name=scenario.name,
        )
        started = time.monotonic()
        status = ScenarioStatus.PASSED
        message: Optional[str] = None
        try:
            with context:
                scenario.func(context)
        except AssertionError as exc:
            status, message = ScenarioStatus.FAILED, str(exc) or "assertion failed"
        except HarnessError as exc:
            status, message = ScenarioStatus.ERROR, f"{type(exc).__name__}: {exc}"
        except Exception as exc:
            LOGGER.exception("Unhandled error in scenario %s", scenario.name)
            status, message = ScenarioStatus.ERROR, f"{type(exc).__name__}: {exc}"
        result = ScenarioResult(
            name=scenario.name,
            status=status,
            message=message,
            mismatches=[str(mismatch) for mismatch in context.mismatches],
            sessions_started=context.sessions_started,
            sessions_ended=context.sessions_ended,
            duration=time.monotonic() - started,
        )
        LOGGER.info("Scenario %s %s", scenario.name, status.value)
        if self._reporter:
            self._reporter.scenario_finished(result)
        return result
