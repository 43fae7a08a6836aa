"""Adapter selection and scoped acquisition."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from roomectl.core.errors import AdapterNotFoundError, AdapterNotPoweredError
from roomectl.core.model import AdapterInfo
from roomectl.transports.base import AdapterBackend, AdapterHandle

LOGGER = logging.getLogger(__name__)


def resolve_adapter(backend: AdapterBackend, name: str | None = None) -> AdapterInfo:
    adapters = backend.list_adapters()
    if not adapters:
        raise AdapterNotFoundError("No Bluetooth adapters found. Use --list-adaptors to inspect available adapters.")

    if name is None:
        return next((a for a in adapters if a.default), adapters[0])

    for adapter in adapters:
        if name == adapter.name or name.upper() == adapter.address.upper():
            return adapter

    available = ", ".join(a.name for a in adapters)
    raise AdapterNotFoundError(f"Unknown adapter '{name}'. Available: {available}")


@asynccontextmanager
async def open_adapter(backend: AdapterBackend, name: str | None = None) -> AsyncIterator[AdapterHandle]:
    """Resolve and open an adapter, refusing powered-off radios; always closes the handle."""
    info = resolve_adapter(backend, name)
    adapter = backend.open(info)
    try:
        if not await adapter.is_powered():
            raise AdapterNotPoweredError(
                f"Adapter {info.name} is powered off. Please power on the adapter (e.g. 'bluetoothctl power on')."
            )
        LOGGER.debug("Using adapter %s (%s)", info.name, info.address)
        yield adapter
    finally:
        try:
            await adapter.close()
        except Exception as exc:
            LOGGER.warning("Releasing adapter %s failed: %s", info.name, exc)
