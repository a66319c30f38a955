"""Printer devices modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from beverage_calc.connection import PrinterConnectionManager
from beverage_calc.models import ConnectionState, PrinterConnection
from beverage_calc.rendering import format_connection, format_device_row

_TROUBLESHOOTING = (
    "No Devices Found\n\n"
    "Troubleshooting:\n"
    "• Enable Bluetooth and turn on your thermal printer\n"
    "• Pair the printer in system settings and bind it (rfcomm / COM port)\n"
    "• Move closer to the printer\n"
    "• Press R to scan again"
)


class DevicesModal(ModalScreen[None]):
    """List scanned printers and connect, disconnect or rescan."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "connect_current", "Connect"),
        ("x", "disconnect", "Disconnect"),
        ("r", "rescan", "Scan"),
    ]

    CSS = """
    DevicesModal {
        align: center middle;
        background: $background 60%;
    }

    #devices-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #devices-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #devices-body {
        margin-bottom: 1;
        color: white;
    }

    #devices-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(
        self,
        manager: PrinterConnectionManager,
        on_scan: Callable[[], None],
        on_connect: Callable[[str], None],
        on_disconnect: Callable[[], None],
    ) -> None:
        super().__init__()
        self.manager = manager
        self.on_scan = on_scan
        self.on_connect = on_connect
        self.on_disconnect = on_disconnect
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        with Container(id="devices-dialog"):
            yield Static("Devices", id="devices-title")
            yield Static(id="devices-body")
            yield Static("J/K/↑/↓ move, Enter connect, X disconnect, R scan, Esc/q close", id="devices-help")

    def on_mount(self) -> None:
        self._unsubscribe = self.manager.subscribe(self._on_connection_change)
        self._refresh_content()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def action_close(self) -> None:
        self.dismiss()

    def action_move_cursor(self, delta: int) -> None:
        devices = self.manager.known_devices
        if not devices:
            return
        self.cursor_index = (self.cursor_index + delta) % len(devices)
        self._refresh_content()

    def action_connect_current(self) -> None:
        devices = self.manager.known_devices
        if not devices:
            return
        self.on_connect(devices[self.cursor_index].device_id)

    def action_disconnect(self) -> None:
        self.on_disconnect()

    def action_rescan(self) -> None:
        self.cursor_index = 0
        self.on_scan()

    def _on_connection_change(self, _connection: PrinterConnection) -> None:
        self._refresh_content()

    def _refresh_content(self) -> None:
        connection = self.manager.snapshot()
        devices = connection.known_devices
        if self.cursor_index >= len(devices):
            self.cursor_index = max(0, len(devices) - 1)

        content = Text(style="white")
        content.append_text(format_connection(connection))
        content.append("\n\n")

        if connection.state is ConnectionState.SCANNING:
            content.append("Scanning for Bluetooth devices...", style="italic")
        elif not devices:
            content.append(_TROUBLESHOOTING, style="dim")
        else:
            for idx, device in enumerate(devices):
                if idx > 0:
                    content.append("\n")
                content.append_text(
                    format_device_row(
                        device,
                        selected=idx == self.cursor_index,
                        connected=device.device_id == connection.device_id,
                    )
                )
        self.query_one("#devices-body", Static).update(content)
