"""Start-up configuration read from the state store."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from braviactl.core.errors import ConfigError
from braviactl.core.model import Endpoint, Settings
from braviactl.core.store import DEBUG_ENABLED, IP, MAC, PSK, StateStore
from braviactl.core.system import is_mac_address, resolve_mac

LOGGER = logging.getLogger(__name__)

_IP_RE = re.compile(r"^(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})")

MacResolver = Callable[[str], "str | None"]


def load_settings(store: StateStore, mac_resolver: MacResolver = resolve_mac) -> Settings:
    """Build the endpoint from the store, resolving the MAC address over ARP if needed."""
    debug_enabled = store.get(DEBUG_ENABLED)
    if debug_enabled in (None, ""):
        debug_enabled = "0"
        store.set(DEBUG_ENABLED, debug_enabled)

    psk = store.get(PSK) or ""
    ip = store.get(IP) or ""
    if not psk or not ip:
        raise ConfigError("Enter IP address and or a Pre-Shared Key")
    LOGGER.debug("Using pre-shared key: %s", psk)

    match = _IP_RE.match(ip.strip())
    if match is None:
        raise ConfigError(f"Enter a valid IP address (got '{ip}')")
    host = match.group(1)
    LOGGER.debug("Using IP address: %s", host)

    mac = (store.get(MAC) or "").strip()
    if not is_mac_address(mac):
        mac = mac_resolver(host) or ""
    if not mac:
        raise ConfigError(f"MAC address not found for {host}")
    store.set(MAC, mac)
    LOGGER.debug("Using MAC address: %s", mac)

    return Settings(endpoint=Endpoint(host=host, psk=psk, mac=mac), debug=debug_enabled == "1")


def apply_debug(settings: Settings) -> None:
    if settings.debug:
        logging.getLogger("braviactl").setLevel(logging.DEBUG)
