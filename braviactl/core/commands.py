"""Command dispatcher used by the public client and the CLI."""

from __future__ import annotations

import logging
from typing import Any, cast

from braviactl.core.errors import BraviaError, CommandRejectedError
from braviactl.core.model import FlatResult, NestedResult, Report
from braviactl.core.normalize import format_value, render_failure, render_report
from braviactl.core.protocol import KNOWN_SERVICES, DecodeShape, ParamsRequest, SimpleRequest
from braviactl.core.session import BraviaSession
from braviactl.core.system import send_wake_on_lan

LOGGER = logging.getLogger(__name__)

APP_URI_PREFIX = "com.sony.dtv."
VOLUME_STEPS = (2, 5, 10)

_TRUE_WORDS = {"1", "on", "true", "yes"}
_FALSE_WORDS = {"0", "off", "false", "no"}
_TOGGLE_WORDS = {"t", "toggle"}


def _parse_switch(value: bool | str, *, allow_toggle: bool, what: str) -> bool | None:
    """Return True/False, or None for a toggle request."""
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    if allow_toggle and lowered in _TOGGLE_WORDS:
        return None
    allowed = "on, off, toggle" if allow_toggle else "on, off"
    raise CommandRejectedError(f"Invalid {what} value '{value}'. Allowed: {allowed}")


def _parse_int(value: int | str, *, what: str) -> int:
    if isinstance(value, bool):
        raise CommandRejectedError(f"Invalid {what} '{value}': expected a number")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise CommandRejectedError(f"Invalid {what} '{value}': expected a whole number") from None


class CommandDispatcher:
    def __init__(self, session: BraviaSession) -> None:
        self.session = session

    def _require_display(self, command: str) -> None:
        # Volume and mute can't be altered while the display is off.
        if not self.session.display_on:
            raise CommandRejectedError(f"{command} requires the display to be on")

    def set_power(self, on: bool | str) -> None:
        power = _parse_switch(on, allow_toggle=False, what="power")
        with self.session.lock:
            self.session.api.execute(ParamsRequest("setPowerStatus", [{"status": power}]))
            self.session.set_display_on(bool(power))

    def set_mute(self, value: bool | str) -> bool:
        """Mute, unmute or toggle. Returns False when a toggle had nothing to toggle."""
        requested = _parse_switch(value, allow_toggle=True, what="mute")
        with self.session.lock:
            self._require_display("setMute")
            if requested is None:
                if self.session.muted is None:
                    LOGGER.debug("Mute toggle ignored: mute state unknown")
                    return False
                requested = not self.session.muted

            self.session.api.execute(ParamsRequest("setAudioMute", [{"status": requested}]))
            if requested:
                self.session.set_volume(0)
            self.session.set_muted(requested)
            return True

    def set_volume(self, level: int | str) -> None:
        with self.session.lock:
            self._require_display("setVolume")
            volume = _parse_int(level, what="volume")
            if volume < 0 or volume > 100:
                raise CommandRejectedError(f"Volume {volume} is out of range 0..100")
            self.session.api.execute(
                ParamsRequest("setAudioVolume", [{"target": "speaker", "volume": str(volume)}])
            )
            self.session.set_volume(volume)

    def set_volume_step(self, step: int | str) -> None:
        with self.session.lock:
            self._require_display("setVolumeStep")
            delta = _parse_int(step, what="volume step")
            if abs(delta) not in VOLUME_STEPS:
                allowed = ", ".join(f"+/-{s}" for s in VOLUME_STEPS)
                raise CommandRejectedError(f"Volume step {delta} not allowed. Allowed: {allowed}")

            # A leading sign on the level string asks for a relative change.
            self.session.api.execute(
                ParamsRequest("setAudioVolume", [{"target": "speaker", "volume": f"{delta:+d}"}])
            )
            if self.session.volume is not None:
                self.session.set_volume(self.session.volume + delta)

    def set_active_app(self, uri: str) -> bool:
        if not uri or not uri.startswith(APP_URI_PREFIX):
            LOGGER.debug("Ignoring app URI without %s prefix: %r", APP_URI_PREFIX, uri)
            return False
        with self.session.lock:
            self.session.api.execute(ParamsRequest("setActiveApp", [{"uri": uri}]))
        return True

    def set_play_content(self, uri: str) -> None:
        # URIs such as 'extInput:hdmi?port=1' are case sensitive.
        with self.session.lock:
            self.session.api.execute(ParamsRequest("setPlayContent", [{"uri": uri}]))

    def set_text_form(self, text: str) -> None:
        LOGGER.debug("setTextForm: %s", text)
        with self.session.lock:
            self.session.api.execute(ParamsRequest("setTextForm", [text]))

    def terminate_apps(self) -> None:
        with self.session.lock:
            self.session.api.execute(SimpleRequest("terminateApps"))

    def send_remote_code(self, name_or_code: str) -> bool:
        with self.session.lock:
            found = self.session.ir_codes.lookup(name_or_code or "")
            if found is None:
                LOGGER.warning("IR code %r not found in the IR code table. Code not sent.", name_or_code)
                return False
            name, code = found
            LOGGER.debug("Sending code: %s: %s", name, code)
            self.session.api.send_ircc(code)
            return True

    def execute_method(
        self,
        method: str,
        params: list[Any] | None = None,
        service: str | None = None,
    ) -> dict[str, Any]:
        with self.session.lock:
            return self.session.api.execute(ParamsRequest(method, list(params or []), service))

    def wake(self) -> bool:
        return send_wake_on_lan(self.session.endpoint.mac)

    def _report(
        self,
        request: SimpleRequest | ParamsRequest,
        shape: DecodeShape,
        *,
        title: str | None = None,
    ) -> Report:
        with self.session.lock:
            result = self.session.api.fetch(request, shape)
        return Report(result=result, text=render_report(result, title=title))

    def power_status(self) -> Report:
        return self._report(SimpleRequest("getPowerStatus"), DecodeShape.FLAT)

    def volume_information(self) -> Report:
        return self._report(SimpleRequest("getVolumeInformation"), DecodeShape.NESTED)

    def system_information(self) -> Report:
        return self._report(SimpleRequest("getSystemInformation"), DecodeShape.FLAT)

    def playing_content_info(self) -> Report:
        return self._report(SimpleRequest("getPlayingContentInfo"), DecodeShape.FLAT)

    def wol_mode(self) -> Report:
        return self._report(SimpleRequest("getWolMode"), DecodeShape.FLAT)

    def power_saving_mode(self) -> Report:
        return self._report(SimpleRequest("getPowerSavingMode"), DecodeShape.FLAT)

    def application_list(self) -> Report:
        with self.session.lock:
            result = cast(
                NestedResult,
                self.session.api.fetch(SimpleRequest("getApplicationList"), DecodeShape.NESTED),
            )
        apps = sorted(result.items, key=lambda app: str(app.get("title", "")).lower())
        lines = ["getApplicationList:"]
        for app in apps:
            # title and uri first, anything else after
            ordered = {"title": app.get("title"), "uri": app.get("uri")}
            ordered.update((k, v) for k, v in app.items() if k not in ordered)
            lines.append("\n".join(f"\t{k}: {format_value(v)}" for k, v in ordered.items()) + "\n")
        sorted_result = NestedResult(method=result.method, items=tuple(apps))
        return Report(result=sorted_result, text="\n".join(lines) + "\n")

    def remote_controller_info(self) -> Report:
        """List the IR codes and reload the IR code table from them."""
        with self.session.lock:
            self.session.refresh_ir_codes()
            entries = self.session.ir_codes.items()
        items = tuple({"name": name, "value": code} for name, code in entries)
        lines = ["getRemoteControllerInfo:"]
        lines.extend(f"\t{code} {name}" for name, code in entries)
        return Report(
            result=NestedResult(method="getRemoteControllerInfo", items=items),
            text="\n".join(lines) + "\n",
        )

    def schemes_and_sources(self) -> Report:
        lines = ["getSchemeList then getSourceList:"]
        items: list[dict[str, Any]] = []
        with self.session.lock:
            schemes = cast(
                NestedResult,
                self.session.api.fetch(SimpleRequest("getSchemeList"), DecodeShape.NESTED),
            )
            for entry in schemes.items:
                scheme = entry.get("scheme")
                lines.append(f"\t{scheme}:")
                try:
                    sources = cast(
                        NestedResult,
                        self.session.api.fetch(
                            ParamsRequest("getSourceList", [{"scheme": scheme}]),
                            DecodeShape.NESTED,
                        ),
                    )
                except BraviaError as exc:
                    lines.append(f"\t\t{exc}")
                    continue
                for source in sources.items:
                    lines.append(f"\t\t{source.get('source')}")
                    items.append({"scheme": scheme, **source})
        return Report(
            result=NestedResult(method="getSourceList", items=tuple(items)),
            text="\n".join(lines) + "\n",
        )

    def method_types(self, service: str) -> Report:
        if not service:
            raise CommandRejectedError("getMethodTypes requires a service name")
        # An empty version string returns every version of every method.
        request = ParamsRequest("getMethodTypes", [""], service=service)
        with self.session.lock:
            result = cast(NestedResult, self.session.api.fetch(request, DecodeShape.LISTING))

        lines = [f"getMethodTypes service = {service}:"]
        for row in result.items:
            lines.append(f"\t{row['name']}")
            lines.extend(f"\t{value}" for value in row["request"])
            lines.extend(f"\t{value}" for value in row["response"])
            lines.append(f"\t{row['version']}\n")
        return Report(result=result, text="\n".join(lines) + "\n")

    @staticmethod
    def known_services() -> tuple[str, ...]:
        return KNOWN_SERVICES

    def status_report(self) -> Report:
        """Power status plus, when the display is on, the speaker volume."""
        power = self.power_status()
        data = cast(FlatResult, power.result).data
        if data.get("status") != "active":
            return power
        try:
            volume = self.volume_information()
        except BraviaError as exc:
            return Report(result=power.result, text=power.text + render_failure("getVolumeInformation", str(exc)))
        return Report(result=power.result, text=power.text + volume.text)
