"""Per-scenario session bookkeeping and assertions."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

from ..browser.base import AutomationProvider, SessionHandle
from ..config import HarnessSettings, SessionConfig
from ..errors import AssertionMismatch, AssertionScopeFailure, HarnessError
from ..models import RemoteSessionRequest, ScriptValue

LOGGER = logging.getLogger(__name__)

RemoteProviderFactory = Callable[[str], AutomationProvider]
E = TypeVar("E", bound=BaseException)


class ScenarioContext:
    """Everything one scenario is allowed to touch.

    Every handle started through the context is ended when the context is
    closed, whatever happened before. Use it as a context manager::

        with ScenarioContext(settings, provider) as ctx:
            handle = ctx.start_session()
            ctx.navigate(handle, "http://example.com")
            ctx.assert_title_equals(handle, "Example Domain")
    """

    def __init__(
        self,
        settings: HarnessSettings,
        provider: AutomationProvider,
        *,
        remote_provider_factory: Optional[RemoteProviderFactory] = None,
        name: str = "scenario",
    ) -> None:
        self.settings = settings
        self.name = name
        self._provider = provider
        self._remote_provider_factory = remote_provider_factory
        self._handles: list[SessionHandle] = []
        self._mismatches: list[AssertionMismatch] = []
        self._scope: Optional[list[AssertionMismatch]] = None
        self.sessions_ended = 0

    def __enter__(self) -> "ScenarioContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def pages(self):
        return self.settings.pages

    @property
    def handles(self) -> list[SessionHandle]:
        return list(self._handles)

    @property
    def mismatches(self) -> list[AssertionMismatch]:
        return list(self._mismatches)

    @property
    def sessions_started(self) -> int:
        return len(self._handles)

    def configure(self) -> SessionConfig:
        """Return a fresh copy of the default session configuration."""

        return self.settings.session.model_copy(deep=True)

    def start_session(self, config: Optional[SessionConfig] = None) -> SessionHandle:
        config = config if config is not None else self.configure()
        LOGGER.info("[%s] starting session (headless=%s)", self.name, config.headless)
        handle = self._provider.start_session(config)
        self._handles.append(handle)
        return handle

    def start_remote_session(
        self,
        config: Optional[SessionConfig] = None,
        endpoint: Optional[str] = None,
    ) -> SessionHandle:
        if self._remote_provider_factory is None:
            raise HarnessError("No remote provider configured for this scenario")
        request = RemoteSessionRequest(
            endpoint=endpoint or self.settings.grid.url,
            config=config if config is not None else self.configure(),
        )
        LOGGER.info("[%s] requesting remote session from %s", self.name, request.endpoint)
        provider = self._remote_provider_factory(request.endpoint)
        handle = provider.start_session(request.config)
        self._handles.append(handle)
        return handle

    def navigate(self, handle: SessionHandle, url: str) -> None:
        handle.url = url

    def evaluate_script(self, handle: SessionHandle, script: str, *args: Any) -> ScriptValue:
        return handle.execute_script(script, *args)

    def end_session(self, handle: SessionHandle) -> None:
        if handle.ended:
            return
        LOGGER.debug("[%s] ending session %s", self.name, handle.id[:8])
        handle.end()
        self.sessions_ended += 1

    def close(self) -> None:
        """End every session started in this scenario, newest first."""

        for handle in reversed(self._handles):
            try:
                self.end_session(handle)
            except Exception:  # pragma: no cover - providers swallow quit errors
                LOGGER.exception("[%s] failed to end session %s", self.name, handle.id[:8])

    @contextmanager
    def assertion_scope(self) -> Iterator[None]:
        """Collect mismatches and report them together when the block exits."""

        outer = self._scope
        collected: list[AssertionMismatch] = []
        self._scope = collected
        try:
            yield
        finally:
            self._scope = outer
        if not collected:
            return
        if outer is not None:
            outer.extend(collected)
            return
        if len(collected) == 1:
            raise collected[0]
        raise AssertionScopeFailure(collected)

    def assert_title_equals(self, handle: SessionHandle, expected: str) -> None:
        self.assert_equal("page title", handle.title, expected)

    def assert_equal(
        self,
        description: str,
        actual: Any,
        expected: Any,
        *,
        case_insensitive: bool = False,
    ) -> None:
        if _normalize(actual, case_insensitive) != _normalize(expected, case_insensitive):
            self._record(AssertionMismatch(description, expected, actual))

    def assert_not_equal(
        self,
        description: str,
        actual: Any,
        unexpected: Any,
        *,
        case_insensitive: bool = False,
    ) -> None:
        if _normalize(actual, case_insensitive) == _normalize(unexpected, case_insensitive):
            self._record(AssertionMismatch(description, f"anything but {unexpected!r}", actual))

    def assert_contains(
        self,
        description: str,
        actual: Any,
        fragment: str,
        *,
        case_insensitive: bool = False,
    ) -> None:
        haystack = _normalize(str(actual), case_insensitive)
        if _normalize(fragment, case_insensitive) not in haystack:
            self._record(AssertionMismatch(description, f"text containing {fragment!r}", actual))

    def assert_raises(
        self,
        expected: type[E],
        func: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> Optional[E]:
        """Call ``func`` and record a mismatch unless it raises ``expected``."""

        try:
            func(*args, **kwargs)
        except expected as exc:
            LOGGER.info("[%s] got expected %s: %s", self.name, type(exc).__name__, exc)
            return exc
        self._record(AssertionMismatch(f"call to {_describe(func)}", expected.__name__, "no error"))
        return None

    def _record(self, mismatch: AssertionMismatch) -> None:
        self._mismatches.append(mismatch)
        LOGGER.debug("[%s] %s", self.name, mismatch)
        if self._scope is None:
            raise mismatch
        self._scope.append(mismatch)


def _normalize(value: Any, case_insensitive: bool) -> Any:
    if isinstance(value, ScriptValue):
        value = value.as_text()
    if case_insensitive and isinstance(value, str):
        return value.casefold()
    return value


def _describe(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", None) or repr(func)
