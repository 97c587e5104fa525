"""Stable public API for building tooling on top of braviactl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from typing import Any

from braviactl.core.commands import CommandDispatcher
from braviactl.core.config import MacResolver, apply_debug, load_settings
from braviactl.core.errors import (
    ApplicationError,
    AuthRejectedError,
    BadRequestError,
    BraviaError,
    CommandRejectedError,
    ConfigError,
    DeviceBusyError,
    HttpStatusError,
    MalformedResponseError,
    NotFoundError,
    ProtocolError,
    StateStoreError,
    TransportError,
    UnreachableError,
)
from braviactl.core.model import (
    ConnectionState,
    Endpoint,
    FlatResult,
    NestedResult,
    PowerState,
    Report,
)
from braviactl.core.poller import POLL_INTERVAL_S, START_UP_DELAY_S, Poller
from braviactl.core.session import BraviaSession, ConnectionListener
from braviactl.core.store import MemoryStateStore, StateStore, YamlStateStore
from braviactl.core.system import resolve_mac
from braviactl.transports.base import Transport

__all__ = [
    "ApplicationError",
    "AuthRejectedError",
    "BadRequestError",
    "BraviaError",
    "CommandRejectedError",
    "ConfigError",
    "DeviceBusyError",
    "HttpStatusError",
    "MalformedResponseError",
    "NotFoundError",
    "ProtocolError",
    "StateStoreError",
    "TransportError",
    "UnreachableError",
    "ConnectionState",
    "Endpoint",
    "FlatResult",
    "NestedResult",
    "PowerState",
    "Report",
    "MemoryStateStore",
    "StateStore",
    "YamlStateStore",
    "Transport",
    "Client",
]


class Client:
    """Public client for one Bravia television.

    A `Client` wraps the connection session, the command dispatcher and the
    background poller. Without an explicit `Endpoint` the configuration is read
    from the state store (IP, PSK, MAC, DebugEnabled).
    """

    def __init__(
        self,
        endpoint: Endpoint | None = None,
        *,
        store: StateStore | None = None,
        transport: Transport | None = None,
        mac_resolver: MacResolver = resolve_mac,
    ) -> None:
        store = store or MemoryStateStore()
        if endpoint is None:
            settings = load_settings(store, mac_resolver)
            apply_debug(settings)
            endpoint = settings.endpoint
        self._session = BraviaSession(endpoint, transport=transport, store=store)
        self._commands = CommandDispatcher(self._session)
        self._poller: Poller | None = None

    @property
    def endpoint(self) -> Endpoint:
        return self._session.endpoint

    @property
    def state(self) -> ConnectionState:
        return self._session.state

    @property
    def connected(self) -> bool:
        return self._session.connected

    @property
    def model(self) -> str | None:
        return self._session.model

    @property
    def power_state(self) -> PowerState | None:
        return self._session.power_state

    @property
    def volume(self) -> int | None:
        return self._session.volume

    @property
    def muted(self) -> bool | None:
        return self._session.muted

    def add_listener(self, listener: ConnectionListener) -> None:
        self._session.add_listener(listener)

    def poll(self) -> ConnectionState:
        return self._session.poll()

    def sync(self) -> ConnectionState:
        """Connect if needed and read the television status once."""
        return self._session.poll()

    def start_polling(
        self,
        *,
        interval_s: float = POLL_INTERVAL_S,
        start_delay_s: float = START_UP_DELAY_S,
    ) -> Poller:
        if self._poller is None:
            self._poller = Poller(self._session, interval_s=interval_s, start_delay_s=start_delay_s)
        self._poller.start()
        return self._poller

    def stop_polling(self) -> None:
        if self._poller is not None:
            self._poller.stop()

    def refresh_ir_codes(self) -> int:
        return self._session.refresh_ir_codes()

    def resolve_ir_code(self, name_or_code: str) -> str | None:
        return self._session.ir_codes.resolve(name_or_code)

    def set_power(self, on: bool | str) -> None:
        self._commands.set_power(on)

    def set_mute(self, value: bool | str) -> bool:
        return self._commands.set_mute(value)

    def set_volume(self, level: int | str) -> None:
        self._commands.set_volume(level)

    def set_volume_step(self, step: int | str) -> None:
        self._commands.set_volume_step(step)

    def set_active_app(self, uri: str) -> bool:
        return self._commands.set_active_app(uri)

    def set_play_content(self, uri: str) -> None:
        self._commands.set_play_content(uri)

    def set_text_form(self, text: str) -> None:
        self._commands.set_text_form(text)

    def terminate_apps(self) -> None:
        self._commands.terminate_apps()

    def send_remote_code(self, name_or_code: str) -> bool:
        return self._commands.send_remote_code(name_or_code)

    def execute_method(
        self,
        method: str,
        params: list[Any] | None = None,
        *,
        service: str | None = None,
    ) -> dict[str, Any]:
        return self._commands.execute_method(method, params, service)

    def wake(self) -> bool:
        return self._commands.wake()

    def power_status(self) -> Report:
        return self._commands.power_status()

    def status_report(self) -> Report:
        return self._commands.status_report()

    def volume_information(self) -> Report:
        return self._commands.volume_information()

    def system_information(self) -> Report:
        return self._commands.system_information()

    def playing_content_info(self) -> Report:
        return self._commands.playing_content_info()

    def wol_mode(self) -> Report:
        return self._commands.wol_mode()

    def power_saving_mode(self) -> Report:
        return self._commands.power_saving_mode()

    def application_list(self) -> Report:
        return self._commands.application_list()

    def remote_controller_info(self) -> Report:
        return self._commands.remote_controller_info()

    def schemes_and_sources(self) -> Report:
        return self._commands.schemes_and_sources()

    def method_types(self, service: str) -> Report:
        return self._commands.method_types(service)

    def known_services(self) -> tuple[str, ...]:
        return self._commands.known_services()
