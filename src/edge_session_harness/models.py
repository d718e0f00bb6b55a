"""Shared models used across the session harness."""

from __future__ import annotations

import enum
import json
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from .config import SessionConfig


class SessionState(str, enum.Enum):
    """Lifecycle states of a session handle."""

    UNINITIALIZED = "uninitialized"
    STARTED = "started"
    NAVIGATED = "navigated"
    ENDED = "ended"


class ScriptValueKind(str, enum.Enum):
    """JavaScript result categories returned by the WebDriver."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    STRUCTURED = "structured"


class ScriptValue(BaseModel):
    """Tagged result of evaluating a script in the page context."""

    kind: ScriptValueKind
    value: Union[str, int, float, bool, None, list[Any], dict[str, Any]] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ScriptValue":
        if raw is None:
            return cls(kind=ScriptValueKind.NULL)
        # bool is a subclass of int, check it first
        if isinstance(raw, bool):
            return cls(kind=ScriptValueKind.BOOLEAN, value=raw)
        if isinstance(raw, (int, float)):
            return cls(kind=ScriptValueKind.NUMBER, value=raw)
        if isinstance(raw, str):
            return cls(kind=ScriptValueKind.STRING, value=raw)
        if isinstance(raw, (list, tuple)):
            return cls(kind=ScriptValueKind.STRUCTURED, value=list(raw))
        if isinstance(raw, dict):
            return cls(kind=ScriptValueKind.STRUCTURED, value=dict(raw))
        # WebElement references and other driver objects
        return cls(kind=ScriptValueKind.STRUCTURED, value=repr(raw))

    def as_text(self) -> str:
        """Render the value the way JavaScript's ``String()`` would."""

        if self.kind == ScriptValueKind.NULL:
            return "null"
        if self.kind == ScriptValueKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind == ScriptValueKind.NUMBER:
            if isinstance(self.value, float) and self.value.is_integer():
                return str(int(self.value))
            return str(self.value)
        if self.kind == ScriptValueKind.STRING:
            return str(self.value)
        if isinstance(self.value, str):
            return self.value
        return json.dumps(self.value, default=str, sort_keys=True)

    def __str__(self) -> str:
        return self.as_text()


class RemoteSessionRequest(BaseModel):
    """A session configuration addressed to a remote WebDriver endpoint."""

    endpoint: str = Field(description="URI of the remote endpoint, e.g. http://host:4444/wd/hub")
    config: SessionConfig = Field(default_factory=SessionConfig)


class ScenarioStatus(str, enum.Enum):
    """Outcome of a single scenario run."""

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


class ScenarioResult(BaseModel):
    """Pass/fail record for one scenario."""

    name: str
    status: ScenarioStatus
    message: Optional[str] = None
    mismatches: list[str] = Field(default_factory=list)
    sessions_started: int = 0
    sessions_ended: int = 0
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration: float = 0.0

    @property
    def passed(self) -> bool:
        return self.status == ScenarioStatus.PASSED
