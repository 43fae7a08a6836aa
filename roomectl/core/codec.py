"""Switch command encoding and GATT endpoint resolution.

Frame layout (6 bytes)::

    01 40 | 01     | xx     | 01    | yy
    preamble opcode  action   field   channel

``xx`` is 01 to switch on and 00 to switch off; ``yy`` is the channel index.
"""

from __future__ import annotations

from typing import Any

from roomectl.core.errors import CharacteristicNotFoundError, ServiceNotFoundError
from roomectl.core.model import GattEndpoint, SwitchAction, SwitchCommand, SwitchProfile
from roomectl.core.profile_loader import default_profile
from roomectl.transports.base import DeviceHandle


def encode(action: SwitchAction, channel: int, profile: SwitchProfile | None = None) -> SwitchCommand:
    profile = profile or default_profile()
    if channel not in profile.channels:
        raise ValueError(f"Channel {channel} is not one of {list(profile.channels)}")
    action = SwitchAction(action)
    payload = profile.preamble + profile.opcode + profile.actions[action] + profile.field + bytes([channel])
    return SwitchCommand(action=action, channel=channel, payload=payload)


async def resolve_endpoint(device: DeviceHandle, endpoint: GattEndpoint) -> Any:
    service = await device.get_service(endpoint.service_uuid)
    if service is None:
        raise ServiceNotFoundError(
            f"Device {device.address} does not expose service {endpoint.service_uuid}"
        )
    characteristic = service.get_characteristic(endpoint.char_uuid)
    if characteristic is None:
        raise CharacteristicNotFoundError(
            f"Service {endpoint.service_uuid} on {device.address} has no characteristic {endpoint.char_uuid}"
        )
    return characteristic
