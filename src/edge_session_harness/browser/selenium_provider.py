"""Selenium-powered Edge session providers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from selenium import webdriver
from selenium.common.exceptions import (
    JavascriptException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.edge.service import Service as EdgeService
from urllib3.exceptions import HTTPError as TransportError

from ..config import SessionConfig
from ..errors import (
    NavigationError,
    RemoteConnectionError,
    ScriptExecutionError,
    SessionStartError,
)
from ..models import ScriptValue
from .base import AutomationProvider, SessionHandle
from .grid import GridStatusClient

LOGGER = logging.getLogger(__name__)

HEADLESS_ARGUMENT = "--headless"


def build_edge_options(config: SessionConfig) -> EdgeOptions:
    """Translate a session configuration into Selenium ``EdgeOptions``."""

    options = EdgeOptions()
    if config.headless and not _has_headless_argument(config.arguments):
        options.add_argument(HEADLESS_ARGUMENT)
    for argument in config.arguments:
        options.add_argument(argument)
    prefs = config.effective_preferences()
    if prefs:
        options.add_experimental_option("prefs", prefs)
    if config.platform_name:
        options.platform_name = config.platform_name
    if config.binary_location:
        options.binary_location = str(config.binary_location)
    return options


def _has_headless_argument(arguments: list[str]) -> bool:
    return any(arg.lstrip("-").split("=", 1)[0] == "headless" for arg in arguments)


class SeleniumProvider(AutomationProvider):
    """Shared page operations for any Selenium ``WebDriver``."""

    def set_url(self, handle: SessionHandle, url: str) -> None:
        handle.require_open(NavigationError)
        LOGGER.info("Session %s navigating to %s", handle.id[:8], url)
        try:
            handle.native.get(url)
        except TimeoutException as exc:
            raise NavigationError(
                f"Timed out after {handle.config.page_load_timeout}s loading {url}",
                url=url,
            ) from exc
        except WebDriverException as exc:
            raise NavigationError(f"Failed to load {url}: {exc.msg or exc}", url=url) from exc

    def get_title(self, handle: SessionHandle) -> str:
        handle.require_open()
        try:
            return handle.native.title
        except WebDriverException as exc:
            raise ScriptExecutionError(f"Could not read page title: {exc.msg or exc}") from exc

    def execute_script(self, handle: SessionHandle, script: str, *args: Any) -> ScriptValue:
        handle.require_open()
        LOGGER.debug("Session %s executing script %r", handle.id[:8], script)
        try:
            raw = handle.native.execute_script(script, *args)
        except JavascriptException as exc:
            raise ScriptExecutionError(f"Script raised: {exc.msg or exc}") from exc
        except WebDriverException as exc:
            raise ScriptExecutionError(f"Page context unavailable: {exc.msg or exc}") from exc
        return ScriptValue.from_raw(raw)

    def _shutdown(self, native: Any) -> None:
        try:
            native.quit()
        except (WebDriverException, TransportError, OSError) as exc:
            LOGGER.warning("Ignoring error while quitting driver: %s", exc)

    @staticmethod
    def _apply_timeouts(driver: Any, config: SessionConfig) -> None:
        driver.set_page_load_timeout(config.page_load_timeout)
        driver.set_script_timeout(config.script_timeout)


class EdgeDriverProvider(SeleniumProvider):
    """Launches a local Chromium-based Edge through ``msedgedriver``."""

    def _launch(self, config: SessionConfig) -> Any:
        options = build_edge_options(config)
        service = EdgeService(
            executable_path=str(config.driver_path) if config.driver_path else None
        )
        LOGGER.debug("Starting Edge (headless=%s)", config.headless)
        try:
            driver = webdriver.Edge(options=options, service=service)
        except WebDriverException as exc:
            raise SessionStartError(f"Could not start Edge: {exc.msg or exc}") from exc
        except OSError as exc:
            raise SessionStartError(f"Could not start msedgedriver: {exc}") from exc
        try:
            self._apply_timeouts(driver, config)
        except WebDriverException as exc:
            self._shutdown(driver)
            raise SessionStartError(f"Could not configure Edge session: {exc.msg or exc}") from exc
        return driver


class RemoteEdgeProvider(SeleniumProvider):
    """Requests Edge sessions from a remote WebDriver endpoint."""

    def __init__(
        self,
        endpoint: str,
        *,
        status_client: Optional[GridStatusClient] = None,
    ) -> None:
        self.endpoint = endpoint
        self._status_client = status_client

    def start_session(self, config: SessionConfig) -> SessionHandle:
        handle = super().start_session(config)
        handle.remote_endpoint = self.endpoint
        return handle

    def _launch(self, config: SessionConfig) -> Any:
        if self._status_client is not None:
            self._status_client.ensure_supports(self.endpoint, config)
        options = build_edge_options(config)
        LOGGER.debug("Requesting remote Edge session from %s", self.endpoint)
        try:
            driver = webdriver.Remote(command_executor=self.endpoint, options=options)
        except (WebDriverException, TransportError, OSError) as exc:
            raise RemoteConnectionError(
                f"Remote endpoint {self.endpoint} refused the session: {exc}",
                endpoint=self.endpoint,
            ) from exc
        try:
            self._apply_timeouts(driver, config)
        except WebDriverException as exc:
            self._shutdown(driver)
            raise RemoteConnectionError(
                f"Remote session at {self.endpoint} rejected timeouts: {exc.msg or exc}",
                endpoint=self.endpoint,
            ) from exc
        return driver
