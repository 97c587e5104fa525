"""Per-device session: connection state machine and cached observable state."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import cast

from braviactl.core.client import ApiClient
from braviactl.core.errors import BraviaError
from braviactl.core.ircodes import IRCommandTable
from braviactl.core.model import (
    ConnectionState,
    Endpoint,
    FlatResult,
    NestedResult,
    PowerState,
)
from braviactl.core.protocol import DecodeShape, SimpleRequest
from braviactl.core.store import (
    CONNECTED,
    DISPLAY_IS_ON,
    MODEL,
    MUTE,
    VOLUME,
    MemoryStateStore,
    StateStore,
    write_flag,
)
from braviactl.transports.base import Transport
from braviactl.transports.http_transport import HTTPTransport

LOGGER = logging.getLogger(__name__)

ConnectionListener = Callable[[ConnectionState], None]


class BraviaSession:
    """Owns everything the poll cycle and the command dispatcher share.

    All state transitions happen under ``lock``; callers issuing commands
    hold the same lock so a command never interleaves with a poll tick.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        *,
        transport: Transport | None = None,
        store: StateStore | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.api = ApiClient(endpoint, transport or HTTPTransport())
        self.store = store or MemoryStateStore()
        self.ir_codes = IRCommandTable()
        self.lock = threading.RLock()
        self.model: str | None = None
        self._state = ConnectionState.DISCONNECTED
        self._power_state: PowerState | None = None
        self._volume: int | None = None
        self._muted: bool | None = None
        self._listeners: list[ConnectionListener] = []

        write_flag(self.store, CONNECTED, False)
        write_flag(self.store, DISPLAY_IS_ON, False)

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def power_state(self) -> PowerState | None:
        return self._power_state

    @property
    def display_on(self) -> bool:
        return self._power_state is PowerState.ACTIVE

    @property
    def volume(self) -> int | None:
        return self._volume

    @property
    def muted(self) -> bool | None:
        return self._muted

    def add_listener(self, listener: ConnectionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ConnectionListener) -> None:
        self._listeners.remove(listener)

    def set_display_on(self, on: bool) -> None:
        self._power_state = PowerState.ACTIVE if on else PowerState.STANDBY
        write_flag(self.store, DISPLAY_IS_ON, on)

    def set_volume(self, volume: int) -> None:
        self._volume = max(0, min(100, volume))
        self.store.set(VOLUME, str(self._volume))

    def set_muted(self, muted: bool) -> None:
        self._muted = muted
        write_flag(self.store, MUTE, muted)

    def refresh_ir_codes(self) -> int:
        """Replace the IR code table from getRemoteControllerInfo and return its size."""
        with self.lock:
            result = cast(
                NestedResult,
                self.api.fetch(SimpleRequest("getRemoteControllerInfo"), DecodeShape.NESTED),
            )
            count = self.ir_codes.replace(result.items)
            LOGGER.debug("Loaded %d IR codes", count)
            return count

    def poll(self) -> ConnectionState:
        """Run one poll tick and return the resulting connection state."""
        with self.lock:
            if self._state is ConnectionState.DISCONNECTED:
                self._try_connect()
            else:
                self._update_status()
            return self._state

    def _try_connect(self) -> None:
        # getSystemInformation answers regardless of the power status.
        try:
            info = cast(FlatResult, self.api.fetch(SimpleRequest("getSystemInformation"), DecodeShape.FLAT))
        except BraviaError as exc:
            LOGGER.debug("Television not reachable yet: %s", exc)
            return

        model = info.data.get("model")
        if model is not None:
            self.model = str(model)
            self.store.set(MODEL, self.model)

        try:
            self.refresh_ir_codes()
        except BraviaError as exc:
            LOGGER.debug("Could not load IR codes, staying disconnected: %s", exc)
            return

        self._transition(ConnectionState.CONNECTED)
        # The connecting tick reads power and volume as well.
        self._update_status()

    def _update_status(self) -> None:
        try:
            status = cast(FlatResult, self.api.fetch(SimpleRequest("getPowerStatus"), DecodeShape.FLAT))
        except BraviaError as exc:
            # The IR table stays; it is refreshed on the next connection.
            LOGGER.info("Lost connection to %s: %s", self.endpoint.host, exc)
            self._transition(ConnectionState.DISCONNECTED)
            return

        power = PowerState.from_status(status.data.get("status"))
        self.set_display_on(power is PowerState.ACTIVE)

        if power is PowerState.STANDBY:
            # No display, no sound: volume information is not exposed.
            self.set_volume(0)
            self.set_muted(False)
            return

        try:
            volume_info = cast(
                NestedResult,
                self.api.fetch(SimpleRequest("getVolumeInformation"), DecodeShape.NESTED),
            )
        except BraviaError as exc:
            LOGGER.debug("Could not read volume information: %s", exc)
            return

        for target in volume_info.items:
            if target.get("target") != "speaker":
                continue
            try:
                self.set_volume(int(target.get("volume", 0)))
            except (TypeError, ValueError):
                LOGGER.debug("Ignoring non-numeric speaker volume %r", target.get("volume"))
            self.set_muted(bool(target.get("mute")))
            LOGGER.debug("Volume: %s Mute: %s", self._volume, self._muted)

    def _transition(self, new_state: ConnectionState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        write_flag(self.store, CONNECTED, new_state is ConnectionState.CONNECTED)
        LOGGER.info("Connection to %s is now %s", self.endpoint.host, new_state.value)
        for listener in list(self._listeners):
            listener(new_state)
