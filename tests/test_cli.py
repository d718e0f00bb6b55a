from __future__ import annotations

from typer.testing import CliRunner

from edge_session_harness.cli import app
from edge_session_harness.config import HarnessSettings
from edge_session_harness.models import ScenarioResult, ScenarioStatus


def _install_fakes(monkeypatch, status: ScenarioStatus = ScenarioStatus.PASSED):
    state: dict[str, object] = {}

    def fake_load_config(path, *, env_file=None, **overrides):  # type: ignore[no-untyped-def]
        state["path"] = path
        state["env_file"] = env_file
        state["overrides"] = overrides
        return HarnessSettings()

    class DummyRunner:
        def run(self, scenarios):
            state["scenarios"] = [scenario.name for scenario in scenarios]
            return [ScenarioResult(name=scenario.name, status=status) for scenario in scenarios]

    def fake_build_runner(settings):
        state["settings"] = settings
        return DummyRunner()

    monkeypatch.setattr("edge_session_harness.cli.load_config", fake_load_config)
    monkeypatch.setattr("edge_session_harness.cli.build_runner", fake_build_runner)
    return state


def test_run_command_passes_overrides(monkeypatch, tmp_path):
    state = _install_fakes(monkeypatch)
    config_path = tmp_path / "harness.yaml"
    config_path.write_text("session: {}\n")
    driver = tmp_path / "msedgedriver"

    result = CliRunner().invoke(
        app,
        [
            "run",
            "--config",
            str(config_path),
            "--headless",
            "--driver-path",
            str(driver),
            "--accept-language",
            "de",
            "--grid-url",
            "http://unreachable-host:4444/wd/hub",
            "--scenario",
            "launch",
            "--scenario",
            "remote-grid",
        ],
    )

    assert result.exit_code == 0, result.output
    assert state["path"] == config_path
    assert state["overrides"] == {
        "session": {"headless": True, "driver_path": str(driver), "accept_languages": "de"},
        "grid": {"url": "http://unreachable-host:4444/wd/hub"},
    }
    assert state["scenarios"] == ["launch", "remote-grid"]


def test_run_command_selects_by_tag_and_fails_on_failure(monkeypatch):
    state = _install_fakes(monkeypatch, status=ScenarioStatus.FAILED)

    result = CliRunner().invoke(app, ["run", "--tag", "language"])

    assert result.exit_code == 1
    assert state["overrides"] == {}
    assert state["scenarios"] == ["preferred-language"]


def test_run_command_rejects_unknown_scenario(monkeypatch):
    state = _install_fakes(monkeypatch)

    result = CliRunner().invoke(app, ["run", "--scenario", "nope"])

    assert result.exit_code != 0
    assert "scenarios" not in state


def test_list_command_shows_scenarios():
    result = CliRunner().invoke(app, ["list"])

    assert result.exit_code == 0
    assert "launch\t[local]" in result.output
    assert "headless-preferred-language" in result.output
    assert "remote-grid\t[remote]" in result.output


def test_run_command_rejects_scenario_with_tag(monkeypatch):
    state = _install_fakes(monkeypatch)

    result = CliRunner().invoke(app, ["run", "--scenario", "launch", "--tag", "remote"])

    assert result.exit_code == 2
    assert state == {}
