"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from wolvirt.core.config import Config, load_config
from wolvirt.core.errors import ConfigValidationError, VmNotFoundError, WolvirtError
from wolvirt.core.model import WakeAction
from wolvirt.core.packet import decode_packet
from wolvirt.core.service import WakeService, serve
from wolvirt.platforms.libvirt import LibvirtPlatform
from wolvirt.transports.udp import UDPListener

app = typer.Typer(help="Wake libvirt virtual machines with Wake-on-LAN magic packets")

LOGGER = logging.getLogger(__name__)

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
_LOG_FORMAT = "%(asctime)s [%(levelname)-1.1s] %(name)s: %(message)s"
_ACTION_TEXT = {
    WakeAction.STARTED: "started",
    WakeAction.RESUMED: "resumed",
    WakeAction.NONE: "left unchanged",
}


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())


def _load(config_path: Path | None, log_level: str | None) -> Config:
    config = load_config(config_path)
    if log_level is not None and log_level.lower() not in _LOG_LEVELS:
        raise ConfigValidationError(f"Unknown log level '{log_level}'")
    configure_logging(log_level or config.log_level)
    return config


@contextmanager
def _open_service(uri: str) -> Iterator[WakeService]:
    with LibvirtPlatform(uri) as platform:
        yield WakeService(platform)


@app.command("serve")
def serve_command(
    address: str | None = typer.Option(None, "--address", "-a", help="UDP listen address (IP:PORT)"),
    libvirt_uri: str | None = typer.Option(None, "--libvirt-uri", "-l", help="Libvirt connection URI"),
    log_level: str | None = typer.Option(None, "--log-level", help="debug, info, warning, error"),
    config_path: Path | None = typer.Option(None, "--config", help="Path to config.yaml"),
) -> None:
    """Listen for WOL packets and start the VM owning the target MAC."""
    try:
        config = _load(config_path, log_level)
        LOGGER.info("wolvirt starting...")
        with _open_service(libvirt_uri or config.libvirt_uri) as service, UDPListener(
            address or config.address, buffer_size=config.buffer_size
        ) as listener:
            serve(service, listener)
    except KeyboardInterrupt:
        LOGGER.info("Interrupted, shutting down")
    except WolvirtError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("wake")
def wake_command(
    mac: str,
    libvirt_uri: str | None = typer.Option(None, "--libvirt-uri", "-l", help="Libvirt connection URI"),
    log_level: str | None = typer.Option(None, "--log-level", help="debug, info, warning, error"),
    config_path: Path | None = typer.Option(None, "--config", help="Path to config.yaml"),
) -> None:
    """Wake the VM owning MAC without sending a packet."""
    try:
        config = _load(config_path, log_level or "warning")
        with _open_service(libvirt_uri or config.libvirt_uri) as service:
            result = service.wake(mac)
        typer.echo(
            f"{result.name} ({result.uuid}) {_ACTION_TEXT[result.action]}, "
            f"state was {result.state.name.lower()}"
        )
    except VmNotFoundError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2) from None
    except WolvirtError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("decode")
def decode_command(packet_hex: str = typer.Argument(..., metavar="HEX")) -> None:
    """Decode a hex-encoded magic packet and print its target MAC."""
    try:
        data = bytes.fromhex(packet_hex.replace(":", "").replace(" ", ""))
    except ValueError:
        typer.echo("Error: packet must be hexadecimal", err=True)
        raise typer.Exit(code=1) from None

    try:
        packet = decode_packet(data)
    except WolvirtError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo(packet.target_mac_string())
    if packet.password:
        typer.echo(f"password={packet.password.hex()}")


@app.command("list")
def list_command(
    libvirt_uri: str | None = typer.Option(None, "--libvirt-uri", "-l", help="Libvirt connection URI"),
    config_path: Path | None = typer.Option(None, "--config", help="Path to config.yaml"),
) -> None:
    """List every VM with its state and interface MACs."""
    try:
        config = _load(config_path, "warning")
        with _open_service(libvirt_uri or config.libvirt_uri) as service:
            vms = service.list_vms()
        if not vms:
            typer.echo("No VMs defined")
            return
        for vm in vms:
            macs = ", ".join(vm.macs) if vm.macs else "<no-interfaces>"
            typer.echo(f"{vm.name} {vm.uuid} [{vm.state.name.lower()}]: {macs}")
    except WolvirtError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
