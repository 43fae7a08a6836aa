"""Transport interfaces for adapter and device handles."""

from __future__ import annotations

from typing import Any, Protocol

from roomectl.core.model import AdapterInfo


class GattService(Protocol):
    uuid: str

    def get_characteristic(self, uuid: str) -> Any | None:
        """Return the characteristic with ``uuid`` or None."""


class DeviceHandle(Protocol):
    address: str
    name: str | None

    async def is_paired(self) -> bool: ...

    async def pair(self) -> None: ...

    async def is_connected(self) -> bool: ...

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def get_service(self, uuid: str) -> GattService | None:
        """Return the primary service with ``uuid`` from the connected device, or None."""

    async def write(self, characteristic: Any, payload: bytes, *, response: bool = True) -> None: ...


class AdapterHandle(Protocol):
    name: str

    async def is_powered(self) -> bool: ...

    async def is_discovering(self) -> bool: ...

    async def start_discovery(self) -> None: ...

    async def stop_discovery(self) -> None: ...

    async def wait_device(self, mac: str) -> DeviceHandle:
        """Block until a device with ``mac`` has been observed."""

    async def devices(self) -> list[DeviceHandle]:
        """Return observed devices in observation order."""

    async def close(self) -> None:
        """Release the adapter: stop discovery and drop transport resources."""


class AdapterBackend(Protocol):
    def list_adapters(self) -> list[AdapterInfo]: ...

    def open(self, info: AdapterInfo) -> AdapterHandle: ...
