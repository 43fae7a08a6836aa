"""Typer CLI entrypoint.

Diagnostics go to stderr; stdout only carries structured JSON results.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import typer

from roomectl.core.errors import AdapterNotFoundError, InvalidArgumentError, RoomectlError
from roomectl.core.locator import DEFAULT_LOCATE_TIMEOUT_S
from roomectl.core.model import SwitchAction
from roomectl.core.service import SwitchService

app = typer.Typer(help="Control a Roome three-channel BLE relay switch", add_completion=False)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )


def _build_service(locate_timeout_s: float) -> SwitchService:
    return SwitchService(locate_timeout_s=locate_timeout_s)


def _emit(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, sort_keys=True))


def _requested_action(switch_on: int | None, switch_off: int | None) -> tuple[SwitchAction, int] | None:
    if switch_on is not None and switch_off is not None:
        raise InvalidArgumentError("Use only one of --switch-on and --switch-off")
    if switch_on is not None:
        return SwitchAction.ON, switch_on
    if switch_off is not None:
        return SwitchAction.OFF, switch_off
    return None


@app.command()
def main(
    list_adaptors: bool = typer.Option(False, "--list-adaptors", help="List Bluetooth adapters and exit"),
    scan: bool = typer.Option(False, "--scan", help="Scan for devices for 20 seconds"),
    device_mac: str | None = typer.Option(None, "--device-mac", help="Target device MAC address"),
    query_status: bool = typer.Option(False, "--query-status", help="Print the on/off state of each switch"),
    switch_on: int | None = typer.Option(None, "--switch-on", help="Switch id to turn on"),
    switch_off: int | None = typer.Option(None, "--switch-off", help="Switch id to turn off"),
    adaptor: str | None = typer.Option(None, "--adaptor", help="Adapter to use (default adapter if omitted)"),
    locate_timeout: float = typer.Option(
        DEFAULT_LOCATE_TIMEOUT_S, "--locate-timeout", min=1.0, help="Seconds to wait for the device per attempt"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """Scan for, or switch channels on, a Roome BLE relay switch."""
    _configure_logging(verbose)
    try:
        service = _build_service(locate_timeout)

        if list_adaptors:
            adapters = service.list_adapters()
            if not adapters:
                raise AdapterNotFoundError("No Bluetooth adapters found")
            for adapter in adapters:
                state = "powered" if adapter.powered else "off"
                default = " [default]" if adapter.default else ""
                typer.echo(f"{adapter.name} {adapter.address} {state}{default}", err=True)
            return

        if scan:
            for device in service.scan(adapter_name=adaptor):
                _emit({"mac": device.mac, "name": device.name})
            return

        if device_mac is None:
            raise InvalidArgumentError("Please specify the device mac address as --device-mac=<mac>")

        if query_status:
            status = service.query_status(device_mac, adapter_name=adaptor)
            _emit({"status": "ok", "mac": device_mac.upper(), "switches": status})
            return

        requested = _requested_action(switch_on, switch_off)
        if requested is None:
            raise InvalidArgumentError(
                "Please specify the action as --query-status or --switch-on=<switch-id> or --switch-off=<switch-id>"
            )

        action, channel = requested
        result = service.set_switch(device_mac, channel, action, adapter_name=adaptor)
        _emit(
            {
                "status": "ok",
                "mac": result.mac,
                "channel": result.channel,
                "action": result.action.value,
                "payload": result.payload_hex,
                "attempts": result.attempts,
            }
        )
    except RoomectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        _emit({"status": "error", "error": exc.code, "message": str(exc)})
        raise typer.Exit(code=exc.exit_code) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
