"""Service layer used by CLI and the public API."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable

from roomectl.core.adapters import open_adapter
from roomectl.core.codec import encode, resolve_endpoint
from roomectl.core.errors import InvalidArgumentError, StatusQueryUnsupportedError
from roomectl.core.locator import DEFAULT_LOCATE_TIMEOUT_S, DEFAULT_SCAN_WINDOW_S, discover_all
from roomectl.core.model import AdapterInfo, DetectedDevice, SwitchAction, SwitchProfile, SwitchResult
from roomectl.core.profile_loader import default_profile
from roomectl.core.session import MAX_CONNECT_ATTEMPTS, connect_with_retry, release_device
from roomectl.transports.base import AdapterBackend
from roomectl.transports.ble_gatt import BleakBackend

_MAC_RE = re.compile(r"^[0-9A-F]{2}(?::[0-9A-F]{2}){5}$", re.IGNORECASE)
LOGGER = logging.getLogger(__name__)


class SwitchService:
    def __init__(
        self,
        *,
        backend: AdapterBackend | None = None,
        profile: SwitchProfile | None = None,
        locate_timeout_s: float = DEFAULT_LOCATE_TIMEOUT_S,
        max_attempts: int = MAX_CONNECT_ATTEMPTS,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.backend = backend or BleakBackend()
        self.profile = profile or default_profile()
        self.locate_timeout_s = locate_timeout_s
        self.max_attempts = max_attempts
        self._sleep = sleep

    def list_adapters(self) -> list[AdapterInfo]:
        return self.backend.list_adapters()

    def scan(
        self,
        adapter_name: str | None = None,
        window_s: float = DEFAULT_SCAN_WINDOW_S,
    ) -> list[DetectedDevice]:
        return asyncio.run(self._scan(adapter_name, window_s))

    async def _scan(self, adapter_name: str | None, window_s: float) -> list[DetectedDevice]:
        async with open_adapter(self.backend, adapter_name) as adapter:
            return await discover_all(adapter, window_s, sleep=self._sleep)

    def set_switch(
        self,
        mac: str,
        channel: int,
        action: SwitchAction | str,
        adapter_name: str | None = None,
    ) -> SwitchResult:
        mac = normalize_mac(mac)
        try:
            action = SwitchAction(action)
        except ValueError:
            raise InvalidArgumentError(f"Unknown action '{action}'. Use 'on' or 'off'.") from None
        if channel not in self.profile.channels:
            allowed = ", ".join(str(c) for c in self.profile.channels)
            raise InvalidArgumentError(f"Switch id must be one of {allowed}, got {channel}")
        return asyncio.run(self._set_switch(mac, channel, action, adapter_name))

    async def _set_switch(
        self,
        mac: str,
        channel: int,
        action: SwitchAction,
        adapter_name: str | None,
    ) -> SwitchResult:
        LOGGER.info("Switching %s the switch with id %d", action.value, channel)
        command = encode(action, channel, self.profile)
        async with open_adapter(self.backend, adapter_name) as adapter:
            session = await connect_with_retry(
                adapter,
                mac,
                attempts=self.max_attempts,
                locate_timeout_s=self.locate_timeout_s,
            )
            try:
                characteristic = await resolve_endpoint(session.device, self.profile.endpoint)
                LOGGER.debug("Writing %s to %s", command.payload_hex, self.profile.endpoint.char_uuid)
                await session.device.write(
                    characteristic,
                    command.payload,
                    response=self.profile.endpoint.write_with_response,
                )
            finally:
                await release_device(session.device)

        return SwitchResult(
            mac=mac,
            channel=channel,
            action=action,
            payload_hex=command.payload_hex,
            attempts=session.attempts,
        )

    def query_status(self, mac: str, adapter_name: str | None = None) -> dict[str, str]:
        normalize_mac(mac)
        raise StatusQueryUnsupportedError(
            "Status query is not supported: the switch's state read protocol is unknown"
        )


def normalize_mac(mac: str) -> str:
    normalized = mac.strip().upper().replace("-", ":")
    if not _MAC_RE.match(normalized):
        raise InvalidArgumentError(f"Invalid device MAC address '{mac}'")
    return normalized

