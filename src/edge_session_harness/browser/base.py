"""Browser session abstractions."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..config import EDGE_BROWSER_NAME, SessionConfig
from ..errors import HarnessError, ScriptExecutionError, SessionStartError
from ..models import ScriptValue, SessionState


class SessionHandle:
    """One live browser instance created by an :class:`AutomationProvider`.

    Setting :attr:`url` navigates the browser, :attr:`title` reflects the
    loaded page. The handle owns a snapshot of the configuration it was
    created from.
    """

    def __init__(
        self,
        provider: "AutomationProvider",
        config: SessionConfig,
        native: Any = None,
        *,
        remote_endpoint: Optional[str] = None,
    ) -> None:
        self.id = uuid.uuid4().hex
        self.config = config
        self.native = native
        self.remote_endpoint = remote_endpoint
        self.state = SessionState.UNINITIALIZED
        self._provider = provider
        self._last_url: Optional[str] = None

    def __repr__(self) -> str:
        return f"SessionHandle(id={self.id[:8]!r}, state={self.state.value!r})"

    @property
    def ended(self) -> bool:
        return self.state == SessionState.ENDED

    @property
    def url(self) -> Optional[str]:
        return self._last_url

    @url.setter
    def url(self, value: str) -> None:
        self._provider.set_url(self, value)
        self._last_url = value
        self.state = SessionState.NAVIGATED

    @property
    def title(self) -> str:
        return self._provider.get_title(self)

    def execute_script(self, script: str, *args: Any) -> ScriptValue:
        return self._provider.execute_script(self, script, *args)

    def end(self) -> None:
        self._provider.end_session(self)

    def require_open(self, error: type[HarnessError] = ScriptExecutionError) -> None:
        if self.state in (SessionState.UNINITIALIZED, SessionState.ENDED):
            raise error(f"Session {self.id[:8]} is {self.state.value}")


class AutomationProvider(ABC):
    """Interface for something that can start and drive browser sessions."""

    def start_session(self, config: SessionConfig) -> SessionHandle:
        """Create a new session from a private copy of ``config``."""

        if config.browser_name != EDGE_BROWSER_NAME:
            raise SessionStartError(
                f"Unsupported browser {config.browser_name!r}; expected {EDGE_BROWSER_NAME!r}"
            )
        frozen = config.model_copy(deep=True)
        handle = SessionHandle(self, frozen)
        handle.native = self._launch(frozen)
        handle.state = SessionState.STARTED
        return handle

    def end_session(self, handle: SessionHandle) -> None:
        """Release the session. Ending twice, or a never-started handle, is a no-op."""

        if handle.state == SessionState.ENDED:
            return
        native = handle.native
        handle.state = SessionState.ENDED
        handle.native = None
        if native is not None:
            self._shutdown(native)

    @abstractmethod
    def _launch(self, config: SessionConfig) -> Any:
        """Start the browser and return the underlying driver object."""

    @abstractmethod
    def _shutdown(self, native: Any) -> None:
        """Tear down the underlying driver object; must not raise."""

    @abstractmethod
    def set_url(self, handle: SessionHandle, url: str) -> None:
        """Navigate and block until the page has loaded."""

    @abstractmethod
    def get_title(self, handle: SessionHandle) -> str:
        """Return the title of the currently loaded page."""

    @abstractmethod
    def execute_script(self, handle: SessionHandle, script: str, *args: Any) -> ScriptValue:
        """Evaluate ``script`` in the page context."""
