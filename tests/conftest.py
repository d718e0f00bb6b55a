from __future__ import annotations

from typing import Any, Callable, Optional

import pytest

from edge_session_harness.browser.base import AutomationProvider, SessionHandle
from edge_session_harness.config import HarnessSettings, SessionConfig
from edge_session_harness.errors import NavigationError, ScriptExecutionError
from edge_session_harness.models import ScriptValue


class FakePage:
    def __init__(self, config: SessionConfig, titles: dict[str, str]) -> None:
        self.config = config
        self.titles = titles
        self.url: Optional[str] = None
        self.quit_calls = 0

    @property
    def title(self) -> str:
        return self.titles.get(self.url or "", "")


class StubProvider(AutomationProvider):
    """In-memory provider; scripts are answered by ``script_results``."""

    def __init__(
        self,
        titles: Optional[dict[str, str]] = None,
        script_results: Optional[dict[str, Callable[[FakePage], Any]]] = None,
    ) -> None:
        self.titles = titles or {}
        self.script_results = script_results or {}
        self.pages: list[FakePage] = []
        self.unreachable: set[str] = set()

    def _launch(self, config: SessionConfig) -> FakePage:
        page = FakePage(config, self.titles)
        self.pages.append(page)
        return page

    def _shutdown(self, native: FakePage) -> None:
        native.quit_calls += 1

    def set_url(self, handle: SessionHandle, url: str) -> None:
        handle.require_open(NavigationError)
        if url in self.unreachable:
            raise NavigationError(f"net::ERR_NAME_NOT_RESOLVED at {url}", url=url)
        handle.native.url = url

    def get_title(self, handle: SessionHandle) -> str:
        handle.require_open()
        return handle.native.title

    def execute_script(self, handle: SessionHandle, script: str, *args: Any) -> ScriptValue:
        handle.require_open()
        try:
            answer = self.script_results[script]
        except KeyError:
            raise ScriptExecutionError(f"ReferenceError in {script!r}") from None
        return ScriptValue.from_raw(answer(handle.native))


EXAMPLE_URL = "http://example.com"
LANGUAGE_URL = "https://manytools.org/http-html-text/browser-language/"


def _user_agent(page: FakePage) -> str:
    prefix = "HeadlessEdg" if page.config.headless else "Edg"
    return f"Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 {prefix}/120.0"


def _language(page: FakePage) -> str:
    return page.config.effective_preferences().get("intl.accept_languages", "en-US")


@pytest.fixture
def settings() -> HarnessSettings:
    return HarnessSettings()


@pytest.fixture
def provider(settings: HarnessSettings) -> StubProvider:
    return StubProvider(
        titles={
            EXAMPLE_URL: settings.pages.example_title,
            LANGUAGE_URL: settings.pages.language_title,
        },
        script_results={
            "return window.navigator.userAgent": _user_agent,
            "return window.navigator.userlanguage || window.navigator.language": _language,
        },
    )
