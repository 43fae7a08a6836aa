"""Device discovery: locate one device by address, or snapshot everything seen."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from roomectl.core.errors import DiscoveryTimeoutError
from roomectl.core.model import DetectedDevice
from roomectl.transports.base import AdapterHandle, DeviceHandle

DEFAULT_LOCATE_TIMEOUT_S = 15.0
DEFAULT_SCAN_WINDOW_S = 20.0
LOGGER = logging.getLogger(__name__)


async def ensure_discovering(adapter: AdapterHandle) -> None:
    if not await adapter.is_discovering():
        LOGGER.debug("Starting discovery on %s", adapter.name)
        await adapter.start_discovery()


async def locate(
    adapter: AdapterHandle,
    mac: str,
    timeout_s: float = DEFAULT_LOCATE_TIMEOUT_S,
) -> DeviceHandle:
    """Wait for ``mac`` to be observed. Discovery is left running."""
    await ensure_discovering(adapter)
    try:
        return await asyncio.wait_for(adapter.wait_device(mac), timeout=timeout_s)
    except asyncio.TimeoutError:
        raise DiscoveryTimeoutError(
            f"Device {mac} was not found within {timeout_s:g} seconds"
        ) from None


def describe(device: DeviceHandle) -> DetectedDevice:
    return DetectedDevice(mac=device.address.upper(), name=device.name or "<unknown-device>")


async def discover_all(
    adapter: AdapterHandle,
    window_s: float = DEFAULT_SCAN_WINDOW_S,
    *,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> list[DetectedDevice]:
    await ensure_discovering(adapter)
    LOGGER.info("Scanning for devices for %g seconds...", window_s)
    await sleep(window_s)
    await adapter.stop_discovery()
    LOGGER.info("Scanning finished.")
    return [describe(device) for device in await adapter.devices()]
