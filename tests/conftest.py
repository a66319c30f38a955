from __future__ import annotations

import asyncio

import pytest

from beverage_calc.models import DeviceDescriptor
from beverage_calc.transport import PrinterTransport

PRINTER_A = DeviceDescriptor("/dev/rfcomm0", "PT-210")
PRINTER_B = DeviceDescriptor("/dev/rfcomm1", "MTP-II")


class FakeTransport(PrinterTransport):
    """Scriptable transport. Set ``*_error`` to fail a call, ``*_gate`` to hold it open."""

    def __init__(self, devices=(PRINTER_A, PRINTER_B)) -> None:
        self.devices = list(devices)
        self.calls: list[tuple] = []
        self.printed: list[str] = []
        self.init_error: Exception | None = None
        self.list_error: Exception | None = None
        self.connect_error: Exception | None = None
        self.disconnect_error: Exception | None = None
        self.send_error: Exception | None = None
        self.list_gate: asyncio.Event | None = None
        self.connect_gate: asyncio.Event | None = None
        self.send_gate: asyncio.Event | None = None

    async def initialize(self) -> None:
        self.calls.append(("initialize",))
        if self.init_error:
            raise self.init_error

    async def list_devices(self):
        self.calls.append(("list_devices",))
        if self.list_gate is not None:
            await self.list_gate.wait()
        if self.list_error:
            raise self.list_error
        return list(self.devices)

    async def connect(self, device_id: str) -> None:
        self.calls.append(("connect", device_id))
        if self.connect_gate is not None:
            await self.connect_gate.wait()
        if self.connect_error:
            raise self.connect_error

    async def disconnect(self) -> None:
        self.calls.append(("disconnect",))
        if self.disconnect_error:
            raise self.disconnect_error

    async def send_text(self, text: str) -> None:
        self.calls.append(("send_text", text))
        if self.send_gate is not None:
            await self.send_gate.wait()
        if self.send_error:
            raise self.send_error
        self.printed.append(text)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
