"""Command line interface for edge-session-harness."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from .config import load_config
from .factory import build_runner
from .scenarios import REGISTRY

app = typer.Typer(help="Run Selenium scenarios against Microsoft Edge")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("edge-session-harness"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command("list")
def list_scenarios() -> None:
    """List the available scenarios and their tags."""

    for scenario in REGISTRY.all():
        tags = ",".join(sorted(scenario.tags))
        typer.echo(f"{scenario.name}\t[{tags}]\t{scenario.description}")


@app.command()
def run(
    scenario: Annotated[
        Optional[list[str]],
        typer.Option("--scenario", "-s", help="Scenario to run; repeat for several."),
    ] = None,
    tag: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="Run scenarios carrying this tag."),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run the browser in headless mode (or headed)."),
    ] = None,
    driver_path: Annotated[
        Optional[Path],
        typer.Option("--driver-path", help="Path to the msedgedriver executable."),
    ] = None,
    accept_language: Annotated[
        Optional[str],
        typer.Option("--accept-language", help="Default intl.accept_languages preference."),
    ] = None,
    grid_url: Annotated[
        Optional[str],
        typer.Option("--grid-url", help="Remote WebDriver endpoint for remote scenarios."),
    ] = None,
) -> None:
    """Run scenarios and exit non-zero if any of them fails."""

    if scenario and tag:
        raise typer.BadParameter(
            "--scenario and --tag cannot be combined", param_hint="--tag"
        )

    overrides: dict[str, Any] = {}
    if headless is not None or driver_path is not None or accept_language is not None:
        overrides.setdefault("session", {})
        if headless is not None:
            overrides["session"]["headless"] = headless
        if driver_path is not None:
            overrides["session"]["driver_path"] = str(driver_path)
        if accept_language is not None:
            overrides["session"]["accept_languages"] = accept_language
    if grid_url is not None:
        overrides["grid"] = {"url": grid_url}

    settings = load_config(config_path, env_file=env_file, **overrides)
    try:
        selected = REGISTRY.select(
            scenario or (),
            tags=tag or (),
            exclude_tags=settings.exclude_tags,
        )
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0]), param_hint="--scenario") from exc
    if not selected:
        typer.echo("No scenarios selected.")
        raise typer.Exit(code=1)

    runner = build_runner(settings)
    results = runner.run(selected)
    if not all(result.passed for result in results):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
