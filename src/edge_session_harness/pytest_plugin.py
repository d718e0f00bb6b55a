"""pytest fixtures exposing a scenario context with guaranteed teardown."""

from __future__ import annotations

from typing import Iterator

import pytest

from .browser.base import AutomationProvider
from .config import HarnessSettings, load_config
from .factory import build_provider, build_remote_provider_factory
from .harness.scenario import ScenarioContext


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", "edge: scenario drives a real Microsoft Edge browser"
    )


@pytest.fixture
def harness_settings() -> HarnessSettings:
    return load_config()


@pytest.fixture
def edge_provider() -> AutomationProvider:
    return build_provider()


@pytest.fixture
def scenario_context(
    request: pytest.FixtureRequest,
    harness_settings: HarnessSettings,
    edge_provider: AutomationProvider,
) -> Iterator[ScenarioContext]:
    """A fresh context per test; its sessions end even if the test fails."""

    with ScenarioContext(
        harness_settings,
        edge_provider,
        remote_provider_factory=build_remote_provider_factory(harness_settings.grid),
        name=request.node.name,
    ) as context:
        yield context
