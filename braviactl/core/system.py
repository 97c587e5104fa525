"""Best-effort OS collaborators: ARP lookup and Wake-on-LAN."""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Sequence

import wakeonlan

LOGGER = logging.getLogger(__name__)

_MAC_COLON_RE = re.compile(r"([0-9a-f]{2}(?::[0-9a-f]{2}){5})", re.IGNORECASE)
_MAC_DASH_RE = re.compile(r"([0-9a-f]{2}(?:-[0-9a-f]{2}){5})", re.IGNORECASE)
_MAC_EXACT_RE = re.compile(
    r"^(?:[0-9a-f]{2}(?::[0-9a-f]{2}){5}|[0-9a-f]{2}(?:-[0-9a-f]{2}){5})$",
    re.IGNORECASE,
)


def is_mac_address(value: str | None) -> bool:
    return bool(value) and _MAC_EXACT_RE.match(value) is not None


def resolve_mac(ip_address: str) -> str | None:
    """Look up the MAC address of ip_address in the local ARP cache."""
    result = _run_command(["arp", "-n", ip_address])
    if result is None:
        LOGGER.warning("arp command not available; cannot resolve MAC for %s", ip_address)
        return None
    if result.returncode != 0:
        LOGGER.warning("arp lookup for %s failed: %s", ip_address, (result.stderr or "").strip())
        return None

    match = _MAC_COLON_RE.search(result.stdout) or _MAC_DASH_RE.search(result.stdout)
    return match.group(1) if match else None


def send_wake_on_lan(mac_address: str | None) -> bool:
    """Send a magic packet to mac_address. Failures are logged, never raised."""
    if not is_mac_address(mac_address):
        LOGGER.warning("Not sending Wake On LAN: invalid MAC address %r", mac_address)
        return False

    LOGGER.debug("Sending Wake On LAN packet to %s", mac_address)
    try:
        wakeonlan.send_magic_packet(mac_address)
    except (OSError, ValueError) as exc:
        LOGGER.warning("Wake On LAN to %s failed: %s", mac_address, exc)
        return False
    return True


def _run_command(cmd: Sequence[str]) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            cmd,
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        return None
