from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from roomectl.core.model import AdapterInfo
from roomectl.transports import bluez
from roomectl.transports.ble_gatt import BleakAdapter, BleakBackend

HCI0 = AdapterInfo(name="hci0", address="5C:F3:70:6B:2A:1D", powered=True, default=True)


def test_is_powered_rereads_adapter_state(monkeypatch: pytest.MonkeyPatch) -> None:
    states = iter([True, False])
    monkeypatch.setattr(
        bluez,
        "list_adapters",
        lambda: [AdapterInfo(name="hci0", address=HCI0.address, powered=next(states))],
    )
    adapter = BleakAdapter(HCI0)

    assert asyncio.run(adapter.is_powered()) is True
    assert asyncio.run(adapter.is_powered()) is False


def test_is_powered_false_for_missing_adapter(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(bluez, "list_adapters", lambda: [])
    assert asyncio.run(BleakAdapter(HCI0).is_powered()) is False


def test_detections_are_kept_in_observation_order() -> None:
    adapter = BleakAdapter(HCI0)
    adapter._on_detection(SimpleNamespace(address="22:33:44:55:66:77", name="D2"), None)
    adapter._on_detection(SimpleNamespace(address="11:22:33:44:55:66", name="D1"), None)
    adapter._on_detection(SimpleNamespace(address="22:33:44:55:66:77", name="D2"), None)

    assert list(adapter._seen) == ["22:33:44:55:66:77", "11:22:33:44:55:66"]


def test_wait_device_blocks_until_observed() -> None:
    adapter = BleakAdapter(HCI0, poll_interval_s=0.001)

    async def _wait() -> None:
        await asyncio.wait_for(adapter.wait_device("AA:BB:CC:DD:EE:FF"), timeout=0.02)

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(_wait())


def test_stop_and_close_without_discovery_are_noops() -> None:
    adapter = BleakAdapter(HCI0)
    asyncio.run(adapter.stop_discovery())
    asyncio.run(adapter.close())
    assert asyncio.run(adapter.is_discovering()) is False


def test_backend_opens_adapter_for_info() -> None:
    adapter = BleakBackend().open(HCI0)
    assert adapter.name == "hci0"
    assert adapter.info is HCI0
