"""Configuration models for the Edge session harness."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EDGE_BROWSER_NAME = "MicrosoftEdge"
ACCEPT_LANGUAGES_PREFERENCE = "intl.accept_languages"


class SessionConfig(BaseModel):
    """Options used to create one browser session.

    The configuration may be changed freely until a session is started from
    it; providers keep a private copy so later edits never reach a live
    session.
    """

    model_config = ConfigDict(validate_assignment=True)

    browser_name: str = EDGE_BROWSER_NAME
    headless: bool = False
    accept_languages: Optional[str] = None
    platform_name: Optional[str] = None
    arguments: list[str] = Field(default_factory=list)
    preferences: dict[str, Any] = Field(default_factory=dict)
    driver_path: Optional[Path] = None
    binary_location: Optional[Path] = None
    page_load_timeout: float = Field(default=30.0, gt=0)
    script_timeout: float = Field(default=30.0, gt=0)

    @field_validator("accept_languages")
    @classmethod
    def _strip_language(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    def add_argument(self, argument: str) -> "SessionConfig":
        """Append a command line switch passed verbatim to the browser."""

        self.arguments = [*self.arguments, argument]
        return self

    def add_preference(self, name: str, value: Any) -> "SessionConfig":
        """Set a user profile preference such as ``intl.accept_languages``."""

        self.preferences = {**self.preferences, name: value}
        return self

    def effective_preferences(self) -> dict[str, Any]:
        prefs = dict(self.preferences)
        if self.accept_languages:
            prefs[ACCEPT_LANGUAGES_PREFERENCE] = self.accept_languages
        return prefs


class GridConfig(BaseModel):
    """Settings for the remote WebDriver endpoint."""

    url: str = "http://192.168.0.200:4444/wd/hub"
    probe: bool = Field(
        default=True,
        description="Query the endpoint status before requesting a session.",
    )
    probe_timeout: float = Field(default=5.0, gt=0)


class PagesConfig(BaseModel):
    """Pages the built-in scenarios navigate to."""

    example_url: str = "http://example.com"
    example_title: str = "Example Domain"
    language_url: str = "https://manytools.org/http-html-text/browser-language/"
    language_title: str = (
        "Browser language - display the list of languages your browser says you prefer"
    )


class HarnessSettings(BaseSettings):
    """Top-level configuration for running scenarios."""

    model_config = SettingsConfigDict(
        env_prefix="EDGE_HARNESS_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    session: SessionConfig = Field(default_factory=SessionConfig)
    grid: GridConfig = Field(default_factory=GridConfig)
    pages: PagesConfig = Field(default_factory=PagesConfig)
    exclude_tags: list[str] = Field(
        default_factory=lambda: ["legacy"],
        description="Scenario tags skipped unless selected explicitly.",
    )


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> HarnessSettings:
    """Load settings from an optional YAML file, env file and overrides.

    Precedence, highest first: ``overrides``, the YAML file, ``EDGE_HARNESS_*``
    environment variables and the env file, then defaults.
    """

    data = _read_yaml(path) if path else {}
    _merge(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    return HarnessSettings(**data, **settings_kwargs)


def _read_yaml(path: Path) -> dict[str, Any]:
    import yaml

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{path}: expected a mapping at the top level")
    unknown = sorted(set(data) - set(HarnessSettings.model_fields))
    if unknown:
        raise ValueError(f"{path}: unknown configuration keys: {', '.join(map(str, unknown))}")
    return dict(data)


def _merge(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    for key, value in updates.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge(existing, value)
        elif isinstance(value, Mapping):
            target[key] = dict(value)
        else:
            target[key] = value
