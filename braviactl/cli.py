"""Typer CLI entrypoint."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path

import typer

from braviactl.api import Client
from braviactl.core.errors import BraviaError
from braviactl.core.model import ConnectionState
from braviactl.core.poller import POLL_INTERVAL_S
from braviactl.core.store import IP, MAC, PSK, YamlStateStore

app = typer.Typer(help="Sony Bravia television control over the REST and IRCC APIs")


@dataclass
class CliOptions:
    host: str | None = None
    psk: str | None = None
    mac: str | None = None
    state_file: Path | None = None


@app.callback()
def main(
    ctx: typer.Context,
    host: str | None = typer.Option(None, "--host", envvar="BRAVIA_HOST", help="Television IP address"),
    psk: str | None = typer.Option(None, "--psk", envvar="BRAVIA_PSK", help="Pre-Shared Key"),
    mac: str | None = typer.Option(None, "--mac", envvar="BRAVIA_MAC", help="Television MAC address"),
    state_file: Path | None = typer.Option(None, "--state-file", help="YAML state file"),
    debug: bool = typer.Option(False, "--debug", help="Log requests and responses"),
) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING)
    ctx.obj = CliOptions(host=host, psk=psk, mac=mac, state_file=state_file)


def _build_client(ctx: typer.Context) -> Client:
    options: CliOptions = ctx.obj or CliOptions()
    store = YamlStateStore(options.state_file)
    for name, value in ((IP, options.host), (PSK, options.psk), (MAC, options.mac)):
        if value:
            store.set(name, value)
    return Client(store=store)


def _connected_client(ctx: typer.Context) -> Client:
    client = _build_client(ctx)
    if client.sync() is not ConnectionState.CONNECTED:
        raise BraviaError(f"Television at {client.endpoint.host} is not reachable")
    return client


def _fail(exc: BraviaError) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1) from None


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Connect, then show power status and speaker volume."""
    try:
        client = _build_client(ctx)
        state = client.sync()
        typer.echo(f"{client.endpoint.host}: {state.value}")
        if state is not ConnectionState.CONNECTED:
            return
        if client.model:
            typer.echo(f"Model: {client.model}")
        typer.echo(client.status_report().text, nl=False)
    except BraviaError as exc:
        _fail(exc)


@app.command("monitor")
def monitor(
    ctx: typer.Context,
    interval: float = typer.Option(POLL_INTERVAL_S, "--interval", help="Seconds between polls"),
) -> None:
    """Poll the television until interrupted, printing connection changes."""
    try:
        client = _build_client(ctx)
        client.add_listener(lambda state: typer.echo(f"{client.endpoint.host}: {state.value}"))
        poller = client.start_polling(interval_s=interval, start_delay_s=0)
        try:
            while poller.running:
                time.sleep(1.0)
        except KeyboardInterrupt:
            pass
        finally:
            client.stop_polling()
    except BraviaError as exc:
        _fail(exc)


@app.command("power")
def power(
    ctx: typer.Context,
    value: str = typer.Argument(..., help="on or off"),
    wake: bool = typer.Option(False, "--wake", help="Send Wake-on-LAN before powering on"),
) -> None:
    """Switch the display on or off."""
    try:
        client = _build_client(ctx)
        if wake and value.lower() in ("on", "1"):
            client.wake()
        client.set_power(value)
        typer.echo(f"Power {value}")
    except BraviaError as exc:
        _fail(exc)


@app.command("volume")
def volume(ctx: typer.Context, level: str) -> None:
    """Set the absolute speaker volume (0-100)."""
    try:
        client = _connected_client(ctx)
        client.set_volume(level)
        typer.echo(f"Volume {client.volume}")
    except BraviaError as exc:
        _fail(exc)


@app.command("step")
def step(
    ctx: typer.Context,
    delta: str = typer.Argument(..., help="+/-2, +/-5 or +/-10 (put -- before negative values)"),
) -> None:
    """Change the speaker volume relative to its current level."""
    try:
        client = _connected_client(ctx)
        client.set_volume_step(delta)
        typer.echo(f"Volume {client.volume}")
    except BraviaError as exc:
        _fail(exc)


@app.command("mute")
def mute(ctx: typer.Context, value: str = typer.Argument(..., help="on, off or toggle")) -> None:
    """Mute, unmute or toggle the speaker."""
    try:
        client = _connected_client(ctx)
        if not client.set_mute(value):
            typer.echo("Mute state unknown, nothing toggled")
            return
        typer.echo("Muted" if client.muted else "Unmuted")
    except BraviaError as exc:
        _fail(exc)


@app.command("app")
def active_app(ctx: typer.Context, uri: str) -> None:
    """Launch an application by URI (com.sony.dtv.*)."""
    try:
        client = _build_client(ctx)
        if not client.set_active_app(uri):
            typer.echo(f"Error: '{uri}' is not an application URI", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Launched {uri}")
    except BraviaError as exc:
        _fail(exc)


@app.command("apps")
def apps(ctx: typer.Context) -> None:
    """List installed applications."""
    try:
        typer.echo(_build_client(ctx).application_list().text, nl=False)
    except BraviaError as exc:
        _fail(exc)


@app.command("content")
def play_content(ctx: typer.Context, uri: str) -> None:
    """Switch input or content, e.g. 'extInput:hdmi?port=1'."""
    try:
        _build_client(ctx).set_play_content(uri)
        typer.echo(f"Playing {uri}")
    except BraviaError as exc:
        _fail(exc)


@app.command("sources")
def sources(ctx: typer.Context) -> None:
    """List schemes and their sources."""
    try:
        typer.echo(_build_client(ctx).schemes_and_sources().text, nl=False)
    except BraviaError as exc:
        _fail(exc)


@app.command("text")
def text_form(ctx: typer.Context, text: str) -> None:
    """Type text into the on-screen keyboard entry box."""
    try:
        _build_client(ctx).set_text_form(text)
        typer.echo("Text sent")
    except BraviaError as exc:
        _fail(exc)


@app.command("terminate")
def terminate(ctx: typer.Context) -> None:
    """Close all running applications."""
    try:
        _build_client(ctx).terminate_apps()
        typer.echo("Applications terminated")
    except BraviaError as exc:
        _fail(exc)


@app.command("remote")
def remote(ctx: typer.Context, code: str = typer.Argument(..., help="Button name or IRCC code")) -> None:
    """Press a remote-control button."""
    try:
        client = _connected_client(ctx)
        if not client.send_remote_code(code):
            typer.echo(f"Error: IR code '{code}' not found", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Sent {code}")
    except BraviaError as exc:
        _fail(exc)


@app.command("codes")
def codes(ctx: typer.Context) -> None:
    """List the television's remote-control IR codes."""
    try:
        typer.echo(_build_client(ctx).remote_controller_info().text, nl=False)
    except BraviaError as exc:
        _fail(exc)


@app.command("info")
def info(ctx: typer.Context) -> None:
    """Show system, playing content, Wake-on-LAN and power saving information."""
    try:
        client = _build_client(ctx)
        for report in (
            client.system_information,
            client.playing_content_info,
            client.wol_mode,
            client.power_saving_mode,
        ):
            typer.echo(report().text, nl=False)
    except BraviaError as exc:
        _fail(exc)


@app.command("methods")
def methods(ctx: typer.Context, service: str | None = typer.Argument(None)) -> None:
    """List API methods of a service, or the known services when none is given."""
    try:
        client = _build_client(ctx)
        if service is None:
            typer.echo("Services: " + ", ".join(client.known_services()))
            return
        typer.echo(client.method_types(service).text, nl=False)
    except BraviaError as exc:
        _fail(exc)


@app.command("call")
def call(
    ctx: typer.Context,
    method: str,
    params: str | None = typer.Argument(None, help="JSON array of parameters"),
    service: str | None = typer.Option(None, "--service", help="Service, when the method is not known"),
) -> None:
    """Execute any API method and print the raw JSON reply."""
    try:
        parsed = json.loads(params) if params else []
    except ValueError as exc:
        typer.echo(f"Error: params must be a JSON array: {exc}", err=True)
        raise typer.Exit(code=1) from None
    if not isinstance(parsed, list):
        typer.echo("Error: params must be a JSON array", err=True)
        raise typer.Exit(code=1)
    try:
        document = _build_client(ctx).execute_method(method, parsed, service=service)
        typer.echo(json.dumps(document, indent=2))
    except BraviaError as exc:
        _fail(exc)


@app.command("wake")
def wake(ctx: typer.Context) -> None:
    """Send a Wake-on-LAN packet to the television."""
    try:
        client = _build_client(ctx)
        if not client.wake():
            typer.echo(f"Error: Wake-on-LAN to {client.endpoint.mac} failed", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Wake-on-LAN sent to {client.endpoint.mac}")
    except BraviaError as exc:
        _fail(exc)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
