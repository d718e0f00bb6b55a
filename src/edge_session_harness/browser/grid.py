"""HTTP client for the status endpoint of a remote WebDriver grid."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, Field

from ..config import SessionConfig
from ..errors import RemoteConnectionError

LOGGER = logging.getLogger(__name__)


class GridSlot(BaseModel):
    """Capabilities one grid slot can serve."""

    browser_name: Optional[str] = None
    platform_name: Optional[str] = None


class GridStatus(BaseModel):
    """Parsed response of ``GET <endpoint>/status``."""

    ready: bool
    message: str = ""
    slots: List[GridSlot] = Field(default_factory=list)

    def supports(self, config: SessionConfig) -> bool:
        """Return whether any slot matches the requested capability profile.

        A grid that does not advertise its nodes (a standalone server) is
        assumed to serve whatever it was started with.
        """

        if not self.slots:
            return True
        for slot in self.slots:
            if slot.browser_name and slot.browser_name.lower() != config.browser_name.lower():
                continue
            if (
                config.platform_name
                and slot.platform_name
                and not platform_matches(config.platform_name, slot.platform_name)
            ):
                continue
            return True
        return False


# Generic platform name -> names a grid node may advertise for it.
PLATFORM_FAMILIES = {
    "windows": {"windows", "win11", "win10", "win8_1", "win8", "win7", "vista", "xp"},
    "mac": {
        "mac",
        "macos",
        "os x",
        "mac os x",
        "sonoma",
        "ventura",
        "monterey",
        "big sur",
        "catalina",
        "mojave",
        "high sierra",
        "sierra",
        "el capitan",
    },
    "linux": {"linux", "unix"},
}
GENERIC_PLATFORMS = {"windows", "mac", "macos", "linux", "unix"}


def _platform_family(platform: str) -> Optional[str]:
    for family, members in PLATFORM_FAMILIES.items():
        if platform in members:
            return family
    return None


def platform_matches(requested: str, offered: str) -> bool:
    """Match platform names the way a grid does.

    A generic name such as ``windows`` matches any member of its family
    (``WIN10``, ``WIN11``); two specific versions must be equal.
    """

    requested, offered = requested.strip().lower(), offered.strip().lower()
    if requested == offered or "any" in (requested, offered):
        return True
    family = _platform_family(requested)
    if family is None or family != _platform_family(offered):
        return False
    return requested in GENERIC_PLATFORMS or offered in GENERIC_PLATFORMS


class GridStatusClient:
    """Wrapper around the WebDriver ``/status`` endpoint."""

    def __init__(
        self,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    def probe(self, endpoint: str) -> GridStatus:
        base_url = endpoint.rstrip("/")
        LOGGER.debug("Probing remote endpoint %s", base_url)
        try:
            with httpx.Client(
                base_url=base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = client.get("/status")
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise RemoteConnectionError(
                f"Remote endpoint {base_url} answered {exc.response.status_code}",
                endpoint=endpoint,
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteConnectionError(
                f"Remote endpoint {base_url} is unreachable: {exc}",
                endpoint=endpoint,
            ) from exc
        except ValueError as exc:
            raise RemoteConnectionError(
                f"Remote endpoint {base_url} returned malformed status",
                endpoint=endpoint,
            ) from exc
        return _parse_status(data)

    def ensure_supports(self, endpoint: str, config: SessionConfig) -> GridStatus:
        """Probe ``endpoint`` and fail unless it can serve ``config``."""

        status = self.probe(endpoint)
        if not status.ready:
            raise RemoteConnectionError(
                f"Remote endpoint {endpoint} is not ready: {status.message or 'no reason given'}",
                endpoint=endpoint,
            )
        if not status.supports(config):
            profile = config.browser_name
            if config.platform_name:
                profile = f"{profile} on {config.platform_name}"
            raise RemoteConnectionError(
                f"Remote endpoint {endpoint} cannot provide {profile}",
                endpoint=endpoint,
            )
        return status


def _parse_status(data: Any) -> GridStatus:
    value = data.get("value", data) if isinstance(data, dict) else {}
    if not isinstance(value, dict):
        value = {}
    slots: list[GridSlot] = []
    for node in _dicts(value.get("nodes")):
        for slot in _dicts(node.get("slots")):
            stereotype = slot.get("stereotype")
            if not isinstance(stereotype, dict):
                continue
            slots.append(
                GridSlot(
                    browser_name=_text(stereotype.get("browserName")),
                    platform_name=_text(stereotype.get("platformName")),
                )
            )
    return GridStatus(
        ready=value.get("ready") is True,
        message=str(value.get("message") or ""),
        slots=slots,
    )


def _dicts(items: Any) -> list[dict[str, Any]]:
    # malformed entries are ignored rather than trusted
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None
