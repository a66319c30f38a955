"""Domain models for the beverage calculator."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


@dataclass
class LineItem:
    """One beverage row. ``line_total`` is maintained by the ledger."""

    item_id: str
    name: str = ""
    unit_price: Decimal = Decimal("0")
    quantity: int = 0
    line_total: Decimal = field(default=Decimal("0"))


@dataclass(frozen=True)
class DeviceDescriptor:
    """A printer found by the most recent scan."""

    device_id: str
    display_name: str = ""

    @property
    def label(self) -> str:
        return self.display_name or "Unknown Device"


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    SCANNING = "scanning"
    CONNECTED = "connected"
    BUSY = "busy"


@dataclass(frozen=True)
class PrinterConnection:
    """Read-only snapshot of the connection manager."""

    state: ConnectionState
    device_id: str | None = None
    known_devices: tuple[DeviceDescriptor, ...] = ()
