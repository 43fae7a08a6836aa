from __future__ import annotations

import pytest

from roomectl.api import Client, StatusQueryUnsupportedError, SwitchAction
from tests.fakes import FakeAdapter, FakeBackend, FakeDevice

MAC = "AA:BB:CC:DD:EE:FF"


def test_public_client_switch_on_and_off() -> None:
    device = FakeDevice(MAC)
    client = Client(backend=FakeBackend(FakeAdapter(devices=[device])), locate_timeout_s=0.01)

    on = client.switch_on(MAC, 0)
    off = client.switch_off(MAC, 0)

    assert on.action is SwitchAction.ON
    assert off.action is SwitchAction.OFF
    assert [w[1].hex() for w in device.writes] == ["014001010100", "014001000100"]
    assert device.disconnect_calls == 2


def test_public_client_uses_named_adapter() -> None:
    device = FakeDevice(MAC)
    backend = FakeBackend(FakeAdapter("hci0"), FakeAdapter("hci1", devices=[device]))
    client = Client(adapter="hci1", backend=backend, locate_timeout_s=0.01)

    client.set_switch(MAC, 2, "on")

    assert backend.opened == ["hci1"]
    assert len(device.writes) == 1


def test_public_client_profile_and_adapters() -> None:
    client = Client(backend=FakeBackend(FakeAdapter()))
    assert client.profile.id == "roome_switch"
    assert client.profile.channels == (0, 1, 2)
    assert [a.name for a in client.list_adapters()] == ["hci0"]


def test_public_client_query_status_unsupported() -> None:
    client = Client(backend=FakeBackend(FakeAdapter()))
    with pytest.raises(StatusQueryUnsupportedError):
        client.query_status(MAC)
