"""Core data models used across protocol, session, dispatcher, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class PowerState(str, Enum):
    ACTIVE = "active"
    STANDBY = "standby"

    @classmethod
    def from_status(cls, status: Any) -> PowerState:
        # Anything other than "active" means the display is off.
        return cls.ACTIVE if status == "active" else cls.STANDBY


@dataclass(frozen=True)
class Endpoint:
    host: str
    psk: str
    mac: str | None = None


@dataclass(frozen=True)
class Settings:
    endpoint: Endpoint
    debug: bool = False


@dataclass(frozen=True)
class FlatResult:
    method: str
    data: dict[str, Any]


@dataclass(frozen=True)
class NestedResult:
    method: str
    items: tuple[dict[str, Any], ...]


ApiResult = Union[FlatResult, NestedResult]


@dataclass(frozen=True)
class Report:
    """A normalized result paired with its human-readable rendering."""

    result: ApiResult
    text: str
