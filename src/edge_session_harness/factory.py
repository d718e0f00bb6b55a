"""Factories for constructing components from configuration."""

from __future__ import annotations

from .browser.grid import GridStatusClient
from .browser.selenium_provider import EdgeDriverProvider, RemoteEdgeProvider
from .config import GridConfig, HarnessSettings
from .harness.runner import ScenarioRunner
from .harness.scenario import RemoteProviderFactory
from .reporting import ConsoleReporter, Reporter


def build_provider() -> EdgeDriverProvider:
    return EdgeDriverProvider()


def build_remote_provider_factory(config: GridConfig) -> RemoteProviderFactory:
    status_client = GridStatusClient(timeout=config.probe_timeout) if config.probe else None

    def _factory(endpoint: str) -> RemoteEdgeProvider:
        return RemoteEdgeProvider(endpoint, status_client=status_client)

    return _factory


def build_reporter() -> Reporter:
    return ConsoleReporter()


def build_runner(settings: HarnessSettings) -> ScenarioRunner:
    return ScenarioRunner(
        settings,
        build_provider(),
        remote_provider_factory=build_remote_provider_factory(settings.grid),
        reporter=build_reporter(),
    )
