"""BlueZ command-line helpers for adapter enumeration and pairing."""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Sequence

from roomectl.core.errors import AdapterNotFoundError, PairingFailedError
from roomectl.core.model import AdapterInfo

_CONTROLLER_RE = re.compile(r"^(hci\d+):")
_MAC_RE = re.compile(r"([0-9A-F]{2}(?::[0-9A-F]{2}){5})", re.IGNORECASE)
_PROPERTY_RE = re.compile(r"^\s*([A-Za-z][\w ]*):\s*(.*)$")
LOGGER = logging.getLogger(__name__)


def list_adapters() -> list[AdapterInfo]:
    """Enumerate local controllers, lowest index first; the first one is the default."""
    commands = [
        (["btmgmt", "info"], _parse_btmgmt),
        (["hciconfig", "-a"], _parse_hciconfig),
    ]
    command_errors: list[str] = []

    for cmd, parse in commands:
        result = _run_command(cmd)
        if result is None:
            continue
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            if stderr:
                command_errors.append(f"{' '.join(cmd)} -> {stderr}")
            continue

        adapters = parse(result.stdout)
        if adapters:
            adapters.sort(key=lambda a: int(a.name[3:]))
            first = adapters[0]
            adapters[0] = AdapterInfo(name=first.name, address=first.address, powered=first.powered, default=True)
            return adapters

    if command_errors:
        joined = " | ".join(command_errors)
        raise AdapterNotFoundError(
            f"Bluetooth adapter query failed. Ensure BlueZ is installed and running. Details: {joined}"
        )

    return []


def _split_controller_blocks(output: str) -> dict[str, list[str]]:
    blocks: dict[str, list[str]] = {}
    current: list[str] | None = None
    for line in output.splitlines():
        match = _CONTROLLER_RE.match(line)
        if match:
            current = blocks.setdefault(match.group(1), [])
            current.append(line)
        elif current is not None:
            current.append(line)
    return blocks


def _parse_btmgmt(output: str) -> list[AdapterInfo]:
    adapters: list[AdapterInfo] = []
    for name, lines in _split_controller_blocks(output).items():
        address = ""
        powered = False
        for line in lines:
            stripped = line.strip()
            if stripped.startswith("addr "):
                match = _MAC_RE.search(stripped)
                if match:
                    address = match.group(1).upper()
            elif stripped.startswith("current settings:"):
                powered = "powered" in stripped.split(":", 1)[1].split()
        adapters.append(AdapterInfo(name=name, address=address, powered=powered))
    return adapters


def _parse_hciconfig(output: str) -> list[AdapterInfo]:
    adapters: list[AdapterInfo] = []
    for name, lines in _split_controller_blocks(output).items():
        address = ""
        powered = False
        for line in lines:
            stripped = line.strip()
            if stripped.startswith("BD Address:"):
                match = _MAC_RE.search(stripped)
                if match:
                    address = match.group(1).upper()
            elif stripped.split()[:1] == ["UP"]:
                powered = True
        adapters.append(AdapterInfo(name=name, address=address, powered=powered))
    return adapters


def device_properties(mac: str) -> dict[str, str] | None:
    """Return BlueZ's cached properties for ``mac``; None when bluetoothctl is unavailable."""
    result = _run_command(["bluetoothctl", "info", mac])
    if result is None:
        return None
    if result.returncode != 0:
        LOGGER.debug("bluetoothctl info %s failed: %s", mac, (result.stderr or result.stdout).strip())
        return {}

    properties: dict[str, str] = {}
    for line in result.stdout.splitlines():
        if not line.startswith(("\t", " ")):
            continue
        match = _PROPERTY_RE.match(line)
        if match:
            properties.setdefault(match.group(1), match.group(2).strip())
    return properties


def is_paired(mac: str) -> bool:
    properties = device_properties(mac)
    return bool(properties) and properties.get("Paired", "").lower() == "yes"


def pair_device(mac: str, *, timeout_s: float = 20.0) -> None:
    cmd = ["bluetoothctl", "--timeout", str(int(timeout_s)), "pair", mac]
    result = _run_command(cmd)
    if result is None:
        raise PairingFailedError("bluetoothctl is not installed; cannot pair the device")

    output = f"{result.stdout or ''}\n{result.stderr or ''}"
    if "Pairing successful" in output or "AlreadyExists" in output:
        LOGGER.debug("bluetoothctl pair %s: %s", mac, output.strip())
        return

    lines = [line.strip() for line in output.splitlines() if line.strip()]
    detail = lines[-1] if lines else f"exit status {result.returncode}"
    raise PairingFailedError(f"Pairing with {mac} failed: {detail}")


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
