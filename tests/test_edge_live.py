"""Scenarios against a real Edge browser.

Enable with ``EDGE_HARNESS_LIVE=1``; needs Edge and a matching msedgedriver.
"""

import os

import pytest

from edge_session_harness.scenarios import REGISTRY

pytestmark = [
    pytest.mark.edge,
    pytest.mark.skipif(
        os.environ.get("EDGE_HARNESS_LIVE") != "1",
        reason="set EDGE_HARNESS_LIVE=1 to drive a real Edge browser",
    ),
]


@pytest.mark.parametrize(
    "scenario",
    REGISTRY.select(exclude_tags=["legacy"]),
    ids=lambda scenario: scenario.name,
)
def test_builtin_scenario(scenario, scenario_context):
    scenario.func(scenario_context)
