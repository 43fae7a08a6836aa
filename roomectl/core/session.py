"""Session management: bring a located device to a connected state, with bounded retry."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from roomectl.core.errors import ConnectionExhaustedError, PairingFailedError
from roomectl.core.locator import DEFAULT_LOCATE_TIMEOUT_S, locate
from roomectl.transports.base import AdapterHandle, DeviceHandle

MAX_CONNECT_ATTEMPTS = 4
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectOutcome:
    device: DeviceHandle | None
    attempts: int
    errors: tuple[BaseException, ...]

    @property
    def connected(self) -> bool:
        return self.device is not None


@dataclass(frozen=True)
class ConnectedSession:
    device: DeviceHandle
    attempts: int


async def connect_device(
    adapter: AdapterHandle,
    mac: str,
    *,
    locate_timeout_s: float = DEFAULT_LOCATE_TIMEOUT_S,
) -> DeviceHandle:
    """Run one pair-and-connect attempt. Discovery is stopped before returning."""
    LOGGER.info("Looking for %s...", mac)
    device = await locate(adapter, mac, locate_timeout_s)

    if not await device.is_paired():
        LOGGER.info("Device is not paired. Pairing...")
        try:
            await device.pair()
        except PairingFailedError as exc:
            LOGGER.warning("Pairing failed: %s", exc)
            raise
        LOGGER.info("Pairing finished.")

    if not await device.is_connected():
        LOGGER.info("Connecting to %s...", mac)
        await device.connect()
        LOGGER.info("Connected.")

    if await adapter.is_discovering():
        await adapter.stop_discovery()
    return device


async def attempt_connect(
    adapter: AdapterHandle,
    mac: str,
    *,
    attempts: int = MAX_CONNECT_ATTEMPTS,
    locate_timeout_s: float = DEFAULT_LOCATE_TIMEOUT_S,
) -> ConnectOutcome:
    """Repeat :func:`connect_device` without backoff until it succeeds or ``attempts`` run out.

    Any failure abandons the attempt; cancellation still propagates.
    """
    errors: list[BaseException] = []
    for attempt in range(1, attempts + 1):
        try:
            device = await connect_device(adapter, mac, locate_timeout_s=locate_timeout_s)
        except Exception as exc:
            errors.append(exc)
            LOGGER.warning("Connection attempt %d/%d failed: %s", attempt, attempts, str(exc) or type(exc).__name__)
            continue
        return ConnectOutcome(device=device, attempts=attempt, errors=tuple(errors))
    return ConnectOutcome(device=None, attempts=attempts, errors=tuple(errors))


async def release_device(device: DeviceHandle) -> None:
    """Disconnect ``device``; failures are logged so they never mask the caller's outcome."""
    try:
        await device.disconnect()
    except Exception as exc:
        LOGGER.warning("Disconnect from %s failed: %s", device.address, exc)
    else:
        LOGGER.info("Disconnected.")


async def _release_stranded(adapter: AdapterHandle, mac: str) -> None:
    for device in await adapter.devices():
        if device.address.upper() == mac.upper() and await device.is_connected():
            await release_device(device)


async def connect_with_retry(
    adapter: AdapterHandle,
    mac: str,
    *,
    attempts: int = MAX_CONNECT_ATTEMPTS,
    locate_timeout_s: float = DEFAULT_LOCATE_TIMEOUT_S,
) -> ConnectedSession:
    outcome = await attempt_connect(adapter, mac, attempts=attempts, locate_timeout_s=locate_timeout_s)
    if outcome.device is None:
        # A failed attempt may still have left the link up.
        await _release_stranded(adapter, mac)
        last_error = outcome.errors[-1] if outcome.errors else None
        message = f"Could not connect to {mac} after {outcome.attempts} attempts"
        if last_error is not None:
            message += f": {last_error}"
        if isinstance(last_error, PairingFailedError):
            message += ". Try to pair the device with bluetoothctl first."
        raise ConnectionExhaustedError(message, attempts=outcome.attempts, last_error=last_error)
    return ConnectedSession(device=outcome.device, attempts=outcome.attempts)
