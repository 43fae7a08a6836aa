"""BLE GATT transport implementation backed by bleak and BlueZ."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakError

from roomectl.core.errors import (
    ConnectionFailedError,
    DiscoveryError,
    PairingFailedError,
    WriteFailedError,
)
from roomectl.core.model import AdapterInfo
from roomectl.transports import bluez

LOGGER = logging.getLogger(__name__)


class BleakDevice:
    """A located peripheral; owns one BleakClient for the session."""

    def __init__(
        self,
        ble_device: BLEDevice,
        *,
        connect_timeout_s: float = 10.0,
        pair_timeout_s: float = 20.0,
    ) -> None:
        self._ble_device = ble_device
        self._client = BleakClient(ble_device, timeout=connect_timeout_s)
        self._pair_timeout_s = pair_timeout_s

    @property
    def address(self) -> str:
        return self._ble_device.address

    @property
    def name(self) -> str | None:
        return self._ble_device.name

    async def is_paired(self) -> bool:
        return await asyncio.to_thread(bluez.is_paired, self.address)

    async def pair(self) -> None:
        await asyncio.to_thread(bluez.pair_device, self.address, timeout_s=self._pair_timeout_s)
        if not await self.is_paired():
            raise PairingFailedError(f"BlueZ does not report {self.address} as paired after pairing")

    async def is_connected(self) -> bool:
        return self._client.is_connected

    async def connect(self) -> None:
        try:
            await self._client.connect()
        except (BleakError, asyncio.TimeoutError, OSError) as exc:
            raise ConnectionFailedError(f"BLE connect failed for {self.address}: {exc}") from exc
        if not self._client.is_connected:
            raise ConnectionFailedError(f"BLE connect failed for {self.address}")

    async def disconnect(self) -> None:
        await self._client.disconnect()

    async def get_service(self, uuid: str) -> Any | None:
        return self._client.services.get_service(uuid)

    async def write(self, characteristic: Any, payload: bytes, *, response: bool = True) -> None:
        try:
            await self._client.write_gatt_char(characteristic, payload, response=response)
        except (BleakError, asyncio.TimeoutError, OSError) as exc:
            raise WriteFailedError(f"BLE GATT write failed: {exc}") from exc


class BleakAdapter:
    """Discovery on one BlueZ controller; records devices in observation order."""

    def __init__(
        self,
        info: AdapterInfo,
        *,
        connect_timeout_s: float = 10.0,
        poll_interval_s: float = 0.1,
    ) -> None:
        self.info = info
        self.name = info.name
        self._connect_timeout_s = connect_timeout_s
        self._poll_interval_s = poll_interval_s
        self._scanner: BleakScanner | None = None
        self._seen: dict[str, BLEDevice] = {}
        self._handles: dict[str, BleakDevice] = {}

    def _on_detection(self, device: BLEDevice, _: AdvertisementData) -> None:
        key = device.address.upper()
        if key not in self._seen:
            LOGGER.debug("Observed %s (%s)", device.address, device.name)
        self._seen[key] = device

    def _handle(self, key: str) -> BleakDevice:
        handle = self._handles.get(key)
        if handle is None:
            handle = BleakDevice(self._seen[key], connect_timeout_s=self._connect_timeout_s)
            self._handles[key] = handle
        return handle

    async def is_powered(self) -> bool:
        adapters = await asyncio.to_thread(bluez.list_adapters)
        return any(a.name == self.name and a.powered for a in adapters)

    async def is_discovering(self) -> bool:
        return self._scanner is not None

    async def start_discovery(self) -> None:
        if self._scanner is not None:
            return
        scanner = BleakScanner(detection_callback=self._on_detection, adapter=self.name)
        try:
            await scanner.start()
        except (BleakError, OSError) as exc:
            raise DiscoveryError(f"Could not start discovery on {self.name}: {exc}") from exc
        self._scanner = scanner

    async def stop_discovery(self) -> None:
        scanner, self._scanner = self._scanner, None
        if scanner is None:
            return
        try:
            await scanner.stop()
        except (BleakError, OSError) as exc:
            raise DiscoveryError(f"Could not stop discovery on {self.name}: {exc}") from exc

    async def wait_device(self, mac: str) -> BleakDevice:
        key = mac.upper()
        while key not in self._seen:
            await asyncio.sleep(self._poll_interval_s)
        return self._handle(key)

    async def devices(self) -> list[BleakDevice]:
        return [self._handle(key) for key in list(self._seen)]

    async def close(self) -> None:
        try:
            await self.stop_discovery()
        finally:
            self._handles.clear()
            self._seen.clear()


class BleakBackend:
    def __init__(self, *, connect_timeout_s: float = 10.0) -> None:
        self._connect_timeout_s = connect_timeout_s

    def list_adapters(self) -> list[AdapterInfo]:
        return bluez.list_adapters()

    def open(self, info: AdapterInfo) -> BleakAdapter:
        return BleakAdapter(info, connect_timeout_s=self._connect_timeout_s)
