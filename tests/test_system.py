from __future__ import annotations

import subprocess

import pytest

from braviactl.core import system
from braviactl.core.system import is_mac_address, resolve_mac, send_wake_on_lan


def _cp(cmd: list[str], rc: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(cmd, rc, stdout=stdout, stderr=stderr)


def test_resolve_mac_parses_arp_output(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text):
        assert cmd == ["arp", "-n", "192.168.1.50"]
        return _cp(
            cmd,
            0,
            stdout=(
                "Address                  HWtype  HWaddress           Flags Mask            Iface\n"
                "192.168.1.50             ether   ac:9b:0a:12:34:56   C                     eth0\n"
            ),
        )

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert resolve_mac("192.168.1.50") == "ac:9b:0a:12:34:56"


def test_resolve_mac_accepts_dashed_output(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda cmd, check, capture_output, text: _cp(cmd, 0, stdout="  192.168.1.50  ac-9b-0a-12-34-56  dynamic\n"),
    )
    assert resolve_mac("192.168.1.50") == "ac-9b-0a-12-34-56"


def test_resolve_mac_missing_entry_or_command(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda cmd, check, capture_output, text: _cp(cmd, 1, stderr="no entry"),
    )
    assert resolve_mac("192.168.1.50") is None

    def missing(cmd, check, capture_output, text):
        raise FileNotFoundError("arp")

    monkeypatch.setattr(subprocess, "run", missing)
    assert resolve_mac("192.168.1.50") is None


def test_is_mac_address() -> None:
    assert is_mac_address("AA:BB:CC:DD:EE:FF")
    assert is_mac_address("aa-bb-cc-dd-ee-ff")
    assert not is_mac_address("aa:bb:cc:dd:ee")
    assert not is_mac_address("")
    assert not is_mac_address(None)


def test_wake_on_lan_sends_magic_packet(monkeypatch: pytest.MonkeyPatch) -> None:
    sent: list[str] = []
    monkeypatch.setattr(system.wakeonlan, "send_magic_packet", lambda mac: sent.append(mac))

    assert send_wake_on_lan("AA:BB:CC:DD:EE:FF") is True
    assert sent == ["AA:BB:CC:DD:EE:FF"]


def test_wake_on_lan_failures_are_not_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(mac):
        raise OSError("Network is unreachable")

    monkeypatch.setattr(system.wakeonlan, "send_magic_packet", broken)

    assert send_wake_on_lan("AA:BB:CC:DD:EE:FF") is False
    assert send_wake_on_lan("bogus") is False
