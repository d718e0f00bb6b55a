"""Exception types raised by the session harness."""

from __future__ import annotations

from typing import Any, Optional, Sequence


class HarnessError(RuntimeError):
    """Base class for failures reported by the harness."""


class SessionStartError(HarnessError):
    """Raised when the automation provider cannot create a session."""


class RemoteConnectionError(SessionStartError):
    """Raised when a remote endpoint cannot provision the requested session."""

    def __init__(self, message: str, *, endpoint: Optional[str] = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class NavigationError(HarnessError):
    """Raised when a page load times out or the host cannot be reached."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class ScriptExecutionError(HarnessError):
    """Raised when a script throws or the page context is gone."""


class AssertionMismatch(AssertionError):
    """An observed value differed from the expected one."""

    def __init__(self, description: str, expected: Any, actual: Any) -> None:
        self.description = description
        self.expected = expected
        self.actual = actual
        super().__init__(f"{description}: expected {expected!r}, got {actual!r}")


class AssertionScopeFailure(AssertionError):
    """Several assertions failed inside one assertion scope."""

    def __init__(self, mismatches: Sequence[AssertionMismatch]) -> None:
        self.mismatches = list(mismatches)
        lines = [str(mismatch) for mismatch in self.mismatches]
        super().__init__(
            f"{len(lines)} assertion(s) failed:\n" + "\n".join(f"  - {line}" for line in lines)
        )
