"""Core data models used across profile loader, session, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SwitchAction(str, Enum):
    ON = "on"
    OFF = "off"


@dataclass(frozen=True)
class AdapterInfo:
    name: str
    address: str
    powered: bool
    default: bool = False


@dataclass(frozen=True)
class DetectedDevice:
    mac: str
    name: str


@dataclass(frozen=True)
class GattEndpoint:
    service_uuid: str
    char_uuid: str
    write_with_response: bool = True


@dataclass(frozen=True)
class SwitchProfile:
    id: str
    name: str
    endpoint: GattEndpoint
    preamble: bytes
    opcode: bytes
    field: bytes
    actions: dict[SwitchAction, bytes]
    channels: tuple[int, ...]


@dataclass(frozen=True)
class SwitchCommand:
    action: SwitchAction
    channel: int
    payload: bytes

    @property
    def payload_hex(self) -> str:
        return self.payload.hex()


@dataclass(frozen=True)
class SwitchResult:
    mac: str
    channel: int
    action: SwitchAction
    payload_hex: str
    attempts: int
