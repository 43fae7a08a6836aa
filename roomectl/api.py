"""Stable public API for building tooling on top of roomectl.

This module is the supported integration surface for third-party callers
(home automation bridges, scripts, services). Avoid importing from
private/internal modules unless intentionally depending on non-stable
internals.
"""

from __future__ import annotations

from roomectl.core.errors import (
    AdapterNotFoundError,
    AdapterNotPoweredError,
    CharacteristicNotFoundError,
    ConnectionExhaustedError,
    ConnectionFailedError,
    DeviceNotFoundError,
    DiscoveryError,
    DiscoveryTimeoutError,
    InvalidArgumentError,
    PairingFailedError,
    ProfileLoadError,
    ProfileValidationError,
    RoomectlError,
    ServiceNotFoundError,
    SessionError,
    StatusQueryUnsupportedError,
    WriteFailedError,
)
from roomectl.core.locator import DEFAULT_LOCATE_TIMEOUT_S, DEFAULT_SCAN_WINDOW_S
from roomectl.core.model import (
    AdapterInfo,
    DetectedDevice,
    GattEndpoint,
    SwitchAction,
    SwitchProfile,
    SwitchResult,
)
from roomectl.core.service import SwitchService
from roomectl.transports.base import AdapterBackend

__all__ = [
    "RoomectlError",
    "AdapterNotFoundError",
    "AdapterNotPoweredError",
    "SessionError",
    "DiscoveryError",
    "DeviceNotFoundError",
    "DiscoveryTimeoutError",
    "PairingFailedError",
    "ConnectionFailedError",
    "ConnectionExhaustedError",
    "ServiceNotFoundError",
    "CharacteristicNotFoundError",
    "WriteFailedError",
    "StatusQueryUnsupportedError",
    "InvalidArgumentError",
    "ProfileLoadError",
    "ProfileValidationError",
    "AdapterInfo",
    "DetectedDevice",
    "GattEndpoint",
    "SwitchAction",
    "SwitchProfile",
    "SwitchResult",
    "AdapterBackend",
    "Client",
]


class Client:
    """Public client for controlling Roome BLE relay switches.

    Each call performs one complete operation (open adapter, discover,
    connect, write, tear down) and returns once it has finished.
    """

    def __init__(
        self,
        *,
        adapter: str | None = None,
        backend: AdapterBackend | None = None,
        profile: SwitchProfile | None = None,
        locate_timeout_s: float = DEFAULT_LOCATE_TIMEOUT_S,
    ) -> None:
        self.adapter = adapter
        self._service = SwitchService(
            backend=backend,
            profile=profile,
            locate_timeout_s=locate_timeout_s,
        )

    @property
    def profile(self) -> SwitchProfile:
        return self._service.profile

    def list_adapters(self) -> list[AdapterInfo]:
        return self._service.list_adapters()

    def scan(self, window_s: float = DEFAULT_SCAN_WINDOW_S) -> list[DetectedDevice]:
        return self._service.scan(adapter_name=self.adapter, window_s=window_s)

    def set_switch(self, mac: str, channel: int, action: SwitchAction | str) -> SwitchResult:
        return self._service.set_switch(mac, channel, action, adapter_name=self.adapter)

    def switch_on(self, mac: str, channel: int) -> SwitchResult:
        return self.set_switch(mac, channel, SwitchAction.ON)

    def switch_off(self, mac: str, channel: int) -> SwitchResult:
        return self.set_switch(mac, channel, SwitchAction.OFF)

    def query_status(self, mac: str) -> dict[str, str]:
        return self._service.query_status(mac, adapter_name=self.adapter)
