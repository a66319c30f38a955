"""Rendering helpers for the terminal UI."""

from __future__ import annotations

from decimal import Decimal

from rich.text import Text

from beverage_calc.errors import (
    ConnectFailed,
    DisconnectFailed,
    InvalidState,
    NotConnected,
    PermissionDenied,
    PrinterError,
    PrintFailed,
    ScanFailed,
)
from beverage_calc.models import ConnectionState, DeviceDescriptor, LineItem, PrinterConnection
from beverage_calc.receipt import format_money

CURRENCY_SIGN = "₱"

_ERROR_MESSAGES: dict[type[PrinterError], str] = {
    PermissionDenied: (
        "Permission required: this app needs access to Bluetooth serial ports to scan for printers "
        "(add your user to the dialout group)."
    ),
    ScanFailed: "Scan error: {detail}. Make sure Bluetooth is enabled and the printer is bound to a serial port.",
    ConnectFailed: (
        "Connection failed: {detail}. Try turning the printer off/on, re-pairing it, or moving closer."
    ),
    DisconnectFailed: "Disconnection error: {detail}",
    NotConnected: "No printer connected. Open Devices (V) and connect a printer first.",
    InvalidState: "Printer is busy: {detail}",
    PrintFailed: "Print error: {detail}",
}


def badge_style(state: ConnectionState) -> str:
    """Return a consistent badge style for connection states."""
    if state is ConnectionState.CONNECTED:
        return "bold #0b1f0f on #5fbf72"
    if state is ConnectionState.BUSY:
        return "bold #1f1600 on #e0b341"
    if state is ConnectionState.SCANNING:
        return "bold #ffffff on #2f6db5"
    return "bold #ffffff on #b23a48"


def format_currency(amount: Decimal) -> str:
    return f"{CURRENCY_SIGN}{format_money(amount)}"


def format_connection(connection: PrinterConnection) -> Text:
    text = Text()
    text.append(f" {connection.state.value.upper()} ", style=badge_style(connection.state))
    if connection.device_id:
        name = next(
            (device.label for device in connection.known_devices if device.device_id == connection.device_id),
            connection.device_id,
        )
        text.append(f" {name}")
    return text


def format_item_row(index: int, item: LineItem, selected: bool) -> Text:
    """Render one calculator row: number, name, price, cases, total."""
    text = Text()
    text.append("➤ " if selected else "  ")
    text.append(f"{index + 1:>2}. ", style="dim")
    name = item.name or "(no name)"
    text.append(f"{name[:18]:<18} ", style="bold" if selected else "")
    price = format_money(item.unit_price) if item.unit_price > 0 else "-"
    qty = str(item.quantity) if item.quantity > 0 else "-"
    text.append(f"{price:>10} x {qty:>4} ")
    text.append(f"{format_currency(item.line_total):>13}", style="bold #5fbf72")
    return text


def format_device_row(device: DeviceDescriptor, selected: bool, connected: bool) -> Text:
    text = Text()
    text.append("➤ " if selected else "  ")
    text.append(device.label, style="bold white" if selected else "white")
    text.append(f"  {device.device_id}", style="dim")
    if connected:
        text.append("  ✓ Connected", style="bold #5fbf72")
    return text


def describe_printer_error(exc: PrinterError) -> str:
    """Map a printer failure to the message shown to the user."""
    for error_type, template in _ERROR_MESSAGES.items():
        if isinstance(exc, error_type):
            return template.format(detail=str(exc) or error_type.__name__)
    return f"Printer error: {exc}"
