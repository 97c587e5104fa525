from __future__ import annotations

import pytest

from braviactl.core.config import load_settings
from braviactl.core.errors import ConfigError
from braviactl.core.store import MemoryStateStore


def _no_arp(ip: str) -> str | None:
    raise AssertionError(f"Unexpected ARP lookup for {ip}")


def test_settings_from_store() -> None:
    store = MemoryStateStore({"IP": "192.168.1.50", "PSK": "0000", "MAC": "aa-bb-cc-dd-ee-ff"})

    settings = load_settings(store, _no_arp)

    assert settings.endpoint.host == "192.168.1.50"
    assert settings.endpoint.psk == "0000"
    assert settings.endpoint.mac == "aa-bb-cc-dd-ee-ff"
    assert settings.debug is False
    assert store.get("DebugEnabled") == "0"


def test_ip_prefix_is_extracted_and_debug_read() -> None:
    store = MemoryStateStore(
        {"IP": "192.168.1.50:80", "PSK": "0000", "MAC": "aa:bb:cc:dd:ee:ff", "DebugEnabled": "1"}
    )

    settings = load_settings(store, _no_arp)

    assert settings.endpoint.host == "192.168.1.50"
    assert settings.debug is True


@pytest.mark.parametrize(
    "values",
    [
        {"IP": "192.168.1.50"},
        {"PSK": "0000"},
        {"IP": "", "PSK": "0000"},
        {"IP": "tv.local", "PSK": "0000"},
    ],
)
def test_missing_or_invalid_endpoint(values: dict[str, str]) -> None:
    with pytest.raises(ConfigError):
        load_settings(MemoryStateStore(values), _no_arp)


def test_mac_resolved_over_arp_and_written_back() -> None:
    store = MemoryStateStore({"IP": "192.168.1.50", "PSK": "0000", "MAC": ""})

    settings = load_settings(store, lambda ip: "aa:bb:cc:dd:ee:ff" if ip == "192.168.1.50" else None)

    assert settings.endpoint.mac == "aa:bb:cc:dd:ee:ff"
    assert store.get("MAC") == "aa:bb:cc:dd:ee:ff"


def test_unresolvable_mac_is_config_error() -> None:
    store = MemoryStateStore({"IP": "192.168.1.50", "PSK": "0000", "MAC": "not-a-mac"})

    with pytest.raises(ConfigError):
        load_settings(store, lambda ip: None)
