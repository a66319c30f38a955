"""Printer connection state machine.

Owns which printer is bound and whether it is idle or mid-operation. One
instance per app session; it is handed a transport and a permission gate
instead of reaching for globals.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from beverage_calc.errors import (
    ConnectFailed,
    DisconnectFailed,
    InvalidState,
    NotConnected,
    PermissionDenied,
    PrintFailed,
    ScanFailed,
)
from beverage_calc.models import ConnectionState, DeviceDescriptor, PrinterConnection
from beverage_calc.permissions import PermissionGate, StaticPermissionGate
from beverage_calc.transport import PrinterTransport

log = logging.getLogger(__name__)

ConnectionListener = Callable[[PrinterConnection], None]


class PrinterConnectionManager:
    """Serializes scan/connect/disconnect/print against one printer.

    ``scan``, ``connect`` and ``disconnect`` queue behind any operation in
    flight and validate the state once they run. ``print_text`` never queues:
    it fails with ``NotConnected`` unless the printer is connected and idle.
    """

    def __init__(self, transport: PrinterTransport, permission_gate: PermissionGate | None = None) -> None:
        self.transport = transport
        self.permission_gate = permission_gate or StaticPermissionGate(granted=True)
        self._state = ConnectionState.DISCONNECTED
        self._device_id: str | None = None
        self._known_devices: tuple[DeviceDescriptor, ...] = ()
        self._lock = asyncio.Lock()
        self._listeners: list[ConnectionListener] = []

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def device_id(self) -> str | None:
        return self._device_id

    @property
    def known_devices(self) -> tuple[DeviceDescriptor, ...]:
        return self._known_devices

    @property
    def is_idle(self) -> bool:
        return not self._lock.locked()

    def can_print(self) -> bool:
        return self._state is ConnectionState.CONNECTED and self.is_idle

    def snapshot(self) -> PrinterConnection:
        return PrinterConnection(state=self._state, device_id=self._device_id, known_devices=self._known_devices)

    def subscribe(self, listener: ConnectionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def scan(self) -> tuple[DeviceDescriptor, ...]:
        """Discover printers and replace ``known_devices`` with the result."""
        async with self._lock:
            if self._state is not ConnectionState.DISCONNECTED:
                raise InvalidState(f"Cannot scan while {self._state.value}")

            try:
                granted = await self.permission_gate.request()
            except Exception as exc:
                log.warning("permission request failed: %s", exc)
                raise PermissionDenied(f"Permission request failed: {exc}") from exc
            if not granted:
                raise PermissionDenied("Bluetooth permission was not granted")

            self._known_devices = ()
            self._set_state(ConnectionState.SCANNING)
            try:
                await self.transport.initialize()
                devices = tuple(await self.transport.list_devices())
            except Exception as exc:
                log.warning("scan failed: %s", exc)
                raise ScanFailed(str(exc) or type(exc).__name__) from exc
            finally:
                self._set_state(ConnectionState.DISCONNECTED)

            self._known_devices = devices
            log.info("scan found %d device(s)", len(devices))
            self._notify()
            return devices

    async def connect(self, device_id: str) -> None:
        async with self._lock:
            if self._state is not ConnectionState.DISCONNECTED:
                raise InvalidState(f"Cannot connect while {self._state.value}")
            if all(device.device_id != device_id for device in self._known_devices):
                raise ConnectFailed(f"Unknown device {device_id}; scan again")

            try:
                await self.transport.connect(device_id)
            except Exception as exc:
                log.warning("connect to %s failed: %s", device_id, exc)
                raise ConnectFailed(str(exc) or type(exc).__name__) from exc

            self._device_id = device_id
            self._set_state(ConnectionState.CONNECTED)

    async def disconnect(self) -> None:
        """Release the bound printer. Always ends disconnected."""
        async with self._lock:
            if self._state is ConnectionState.DISCONNECTED:
                return

            device_id = self._device_id
            try:
                await self.transport.disconnect()
            except Exception as exc:
                # The device is usually already gone; nothing for the user to act on.
                failure = DisconnectFailed(f"{device_id}: {exc}")
                log.warning("disconnect treated as success: %s", failure)
            self._device_id = None
            self._set_state(ConnectionState.DISCONNECTED)

    async def print_text(self, text: str) -> None:
        if not self.can_print():
            raise NotConnected(f"Printer is {self._state.value}")

        async with self._lock:
            # A disconnect queued ahead of us may have run while we waited.
            if self._state is not ConnectionState.CONNECTED:
                raise NotConnected(f"Printer is {self._state.value}")
            self._set_state(ConnectionState.BUSY)
            try:
                await self.transport.send_text(text)
            except Exception as exc:
                log.warning("print on %s failed: %s", self._device_id, exc)
                raise PrintFailed(str(exc) or type(exc).__name__) from exc
            finally:
                self._set_state(ConnectionState.CONNECTED)
            log.info("printed %d chars on %s", len(text), self._device_id)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        log.info("printer %s -> %s device=%s", self._state.value, state.value, self._device_id)
        self._state = state
        self._notify()

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
