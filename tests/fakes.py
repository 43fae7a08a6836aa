from __future__ import annotations

import asyncio

from roomectl.core.errors import AdapterNotFoundError, ConnectionFailedError, PairingFailedError, WriteFailedError
from roomectl.core.model import AdapterInfo

SERVICE_UUID = "6e400001-b5a3-f393-e0a9-e50e24dcca9e"
CHAR_UUID = "6e400002-b5a3-f393-e0a9-e50e24dcca9e"


class FakeCharacteristic:
    def __init__(self, uuid: str) -> None:
        self.uuid = uuid


class FakeGattService:
    def __init__(self, uuid: str, char_uuids: tuple[str, ...]) -> None:
        self.uuid = uuid
        self.characteristics = {u: FakeCharacteristic(u) for u in char_uuids}

    def get_characteristic(self, uuid: str) -> FakeCharacteristic | None:
        return self.characteristics.get(uuid)


def switch_services() -> dict[str, FakeGattService]:
    return {SERVICE_UUID: FakeGattService(SERVICE_UUID, (CHAR_UUID,))}


class FakeDevice:
    def __init__(
        self,
        address: str,
        name: str | None = None,
        *,
        paired: bool = True,
        connect_failures: int = 0,
        pair_failures: int = 0,
        services: dict[str, FakeGattService] | None = None,
        write_error: Exception | None = None,
        events: list[str] | None = None,
    ) -> None:
        self.address = address
        self.name = name
        self.paired = paired
        self.connected = False
        self.connect_failures = connect_failures
        self.pair_failures = pair_failures
        self.services = switch_services() if services is None else services
        self.write_error = write_error
        self.events = events if events is not None else []
        self.connect_calls = 0
        self.pair_calls = 0
        self.disconnect_calls = 0
        self.writes: list[tuple[str, bytes, bool]] = []

    async def is_paired(self) -> bool:
        return self.paired

    async def pair(self) -> None:
        self.pair_calls += 1
        self.events.append("pair")
        if self.pair_failures > 0:
            self.pair_failures -= 1
            raise PairingFailedError("org.bluez.Error.AuthenticationFailed")
        self.paired = True

    async def is_connected(self) -> bool:
        return self.connected

    async def connect(self) -> None:
        self.connect_calls += 1
        self.events.append("connect")
        if self.connect_failures > 0:
            self.connect_failures -= 1
            raise ConnectionFailedError(f"BLE connect failed for {self.address}")
        self.connected = True

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.events.append("disconnect")
        self.connected = False

    async def get_service(self, uuid: str) -> FakeGattService | None:
        return self.services.get(uuid)

    async def write(self, characteristic: FakeCharacteristic, payload: bytes, *, response: bool = True) -> None:
        assert self.connected, "write on a disconnected device"
        self.events.append("write")
        if self.write_error is not None:
            raise self.write_error
        self.writes.append((characteristic.uuid, payload, response))


class FakeAdapter:
    def __init__(
        self,
        name: str = "hci0",
        *,
        powered: bool = True,
        devices: list[FakeDevice] | None = None,
        events: list[str] | None = None,
    ) -> None:
        self.name = name
        self.powered = powered
        self.discovering = False
        self.visible = list(devices or [])
        self.events = events if events is not None else []
        self.close_calls = 0

    async def is_powered(self) -> bool:
        self.events.append("is_powered")
        return self.powered

    async def is_discovering(self) -> bool:
        return self.discovering

    async def start_discovery(self) -> None:
        self.events.append("start_discovery")
        self.discovering = True

    async def stop_discovery(self) -> None:
        self.events.append("stop_discovery")
        self.discovering = False

    async def wait_device(self, mac: str) -> FakeDevice:
        self.events.append("wait_device")
        for device in self.visible:
            if device.address.upper() == mac.upper():
                return device
        await asyncio.Event().wait()
        raise AssertionError("unreachable")

    async def devices(self) -> list[FakeDevice]:
        return list(self.visible)

    async def close(self) -> None:
        self.close_calls += 1
        self.events.append("close")
        self.discovering = False


class FakeBackend:
    def __init__(self, *adapters: FakeAdapter, addresses: dict[str, str] | None = None) -> None:
        self.adapters = {a.name: a for a in adapters}
        self.addresses = addresses or {}
        self.opened: list[str] = []

    def list_adapters(self) -> list[AdapterInfo]:
        return [
            AdapterInfo(
                name=a.name,
                address=self.addresses.get(a.name, "00:1A:7D:DA:71:1" + str(i)),
                powered=a.powered,
                default=i == 0,
            )
            for i, a in enumerate(self.adapters.values())
        ]

    def open(self, info: AdapterInfo) -> FakeAdapter:
        if info.name not in self.adapters:
            raise AdapterNotFoundError(info.name)
        self.opened.append(info.name)
        return self.adapters[info.name]


def write_error() -> WriteFailedError:
    return WriteFailedError("BLE GATT write failed: org.bluez.Error.Failed")
