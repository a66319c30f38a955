"""Main Textual app class."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from beverage_calc.connection import PrinterConnectionManager
from beverage_calc.data import DEFAULT_BEVERAGES, STORE_NAME
from beverage_calc.devices_modal import DevicesModal
from beverage_calc.errors import NotConnected, PrinterError
from beverage_calc.help_modal import HelpModal
from beverage_calc.item_edit_modal import ItemEditModal
from beverage_calc.ledger import Ledger
from beverage_calc.models import LineItem, PrinterConnection
from beverage_calc.permissions import SerialAccessGate
from beverage_calc.receipt import format_receipt
from beverage_calc.rendering import (
    describe_printer_error,
    format_connection,
    format_currency,
    format_item_row,
)
from beverage_calc.transport import EscposSerialTransport, build_transport, check_printer_dependencies

log = logging.getLogger(__name__)

_INITIAL_SCAN_DELAY_SECONDS = 0.5


class CalculatorApp(App):
    """A Textual app for totalling beverage cases and printing the receipt."""

    TITLE = "Beverage Calculator"
    SUB_TITLE = STORE_NAME

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #items-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #summary-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #items-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #grand-total {
        border: heavy #5fbf72;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #printer-status {
        height: 3;
        margin-bottom: 1;
    }

    #status-line {
        height: 1fr;
        color: $text-muted;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    selected_index = reactive(0)

    BINDINGS = [
        ("j", "move_selection(1)", "Next row"),
        ("k", "move_selection(-1)", "Previous row"),
        ("down", "move_selection(1)", "Next row"),
        ("up", "move_selection(-1)", "Previous row"),
        ("a", "add_item", "Add item"),
        ("d", "delete_item", "Delete row"),
        ("e", "edit_item", "Edit row"),
        ("enter", "edit_item", "Edit row"),
        ("c", "clear_all", "Clear all"),
        ("p", "print_receipt", "Print"),
        ("v", "show_devices", "Devices"),
        ("question_mark", "show_help", "Help"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        ledger: Ledger | None = None,
        manager: PrinterConnectionManager | None = None,
        clock: Callable[[], datetime] = datetime.now,
        scan_on_start: bool = True,
    ) -> None:
        super().__init__()
        self.ledger = ledger if ledger is not None else Ledger(DEFAULT_BEVERAGES)
        self.manager = manager or PrinterConnectionManager(build_transport(), SerialAccessGate())
        self.clock = clock
        self.scan_on_start = scan_on_start
        self.system_status = ""
        self._unsubscribers: list[Callable[[], None]] = []
        log.debug("app_init rows=%d transport=%s", len(self.ledger), type(self.manager.transport).__name__)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="items-pane"):
                yield Static("Beverages", classes="pane-title")
                yield Static("(no items yet)", id="items-list")
            with Vertical(id="summary-pane"):
                yield Static(id="grand-total")
                yield Static(id="printer-status")
                yield Static(id="status-line")

    def on_mount(self) -> None:
        self._unsubscribers.append(self.ledger.subscribe(self._on_ledger_change))
        self._unsubscribers.append(self.manager.subscribe(self._on_connection_change))
        if isinstance(self.manager.transport, EscposSerialTransport):
            _, msg = check_printer_dependencies(self.manager.transport.render_mode)
        else:
            msg = "Demo printer ready"
        self.system_status = msg
        log.info("on_mount printer_status=%r", msg)
        self._refresh_all()
        if self.scan_on_start:
            self.set_timer(_INITIAL_SCAN_DELAY_SECONDS, self.start_scan)

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _modal_open(self) -> bool:
        return isinstance(self.screen, ModalScreen)

    def action_move_selection(self, delta: int) -> None:
        if self._modal_open() or not len(self.ledger):
            return
        self.selected_index = (self.selected_index + delta) % len(self.ledger)
        self._refresh_items()

    def action_add_item(self) -> None:
        if self._modal_open():
            return
        self.ledger.add_item(name=f"Item {len(self.ledger) + 1}")
        self.selected_index = len(self.ledger) - 1
        self._refresh_items()

    def action_delete_item(self) -> None:
        if self._modal_open():
            return
        item = self._selected_item()
        if item is None:
            return
        # Keep at least one row to type into.
        if len(self.ledger) <= 1:
            self._set_status("Cannot remove the last item")
            return
        self.ledger.remove_item(item.item_id)
        self.selected_index = min(self.selected_index, len(self.ledger) - 1)
        self._refresh_items()

    def action_edit_item(self) -> None:
        if self._modal_open():
            return
        item = self._selected_item()
        if item is None:
            return
        self.push_screen(ItemEditModal(item), callback=lambda values: self._apply_edit(item.item_id, values))

    def action_clear_all(self) -> None:
        if self._modal_open():
            return
        self.ledger.clear_all()
        self._set_status("Cleared all prices and cases")

    def action_print_receipt(self) -> None:
        if self._modal_open():
            return
        if not self.ledger.has_nonzero_total():
            self._set_status("Nothing to print: the grand total is zero")
            return
        if not self.manager.can_print():
            self._set_status(describe_printer_error(NotConnected(self.manager.state.value)))
            return

        text = format_receipt(self.ledger, self.clock())
        self.run_worker(self._print_receipt(text), group="printer")

    def action_show_devices(self) -> None:
        if self._modal_open():
            return
        self.push_screen(
            DevicesModal(
                self.manager,
                on_scan=self.start_scan,
                on_connect=self.start_connect,
                on_disconnect=self.start_disconnect,
            ),
            callback=self._on_modal_closed,
        )

    def action_show_help(self) -> None:
        if self._modal_open():
            return
        self.push_screen(HelpModal(), callback=self._on_modal_closed)

    def start_scan(self) -> None:
        self.run_worker(self._scan_devices(), group="printer")

    def start_connect(self, device_id: str) -> None:
        self.run_worker(self._connect_device(device_id), group="printer")

    def start_disconnect(self) -> None:
        self.run_worker(self._disconnect_device(), group="printer")

    async def _scan_devices(self) -> None:
        self._set_status("Scanning for printers...")
        try:
            devices = await self.manager.scan()
        except PrinterError as exc:
            self._set_status(describe_printer_error(exc))
            return
        if devices:
            self._set_status(f"Found {len(devices)} device(s)")
        else:
            self._set_status("No devices found. Open Devices (V) for troubleshooting tips.")

    async def _connect_device(self, device_id: str) -> None:
        self._set_status(f"Connecting to {device_id}...")
        try:
            await self.manager.connect(device_id)
        except PrinterError as exc:
            self._set_status(describe_printer_error(exc))
            return
        self._set_status("Printer connected successfully!")

    async def _disconnect_device(self) -> None:
        await self.manager.disconnect()
        self._set_status("Printer disconnected")

    async def _print_receipt(self, text: str) -> None:
        self._set_status("Printing...")
        try:
            await self.manager.print_text(text)
        except PrinterError as exc:
            self._set_status(describe_printer_error(exc))
            return
        self._set_status("Receipt printed")

    def _apply_edit(self, item_id: str, values: dict[str, str] | None) -> None:
        if values is not None:
            for field, value in values.items():
                self.ledger.update_item(item_id, field, value)
        self._on_modal_closed(None)

    def _on_modal_closed(self, _result: object) -> None:
        # Widgets on the main screen can't be queried while a modal is on top.
        self.call_after_refresh(self._refresh_all)

    def _selected_item(self) -> LineItem | None:
        items = self.ledger.items()
        if not (0 <= self.selected_index < len(items)):
            return None
        return items[self.selected_index]

    def _on_ledger_change(self, _ledger: Ledger) -> None:
        self._refresh_items()
        self._refresh_summary()

    def _on_connection_change(self, _connection: PrinterConnection) -> None:
        self._refresh_summary()

    def _set_status(self, message: str) -> None:
        self.system_status = message
        log.debug("status %s", message)
        self._refresh_summary()

    def _refresh_all(self) -> None:
        self._refresh_items()
        self._refresh_summary()

    def _refresh_items(self) -> None:
        try:
            items_widget = self.query_one("#items-list", Static)
        except NoMatches:
            return
        items = self.ledger.items()
        if not items:
            items_widget.update("(no items yet)")
            return

        if self.selected_index >= len(items):
            self.selected_index = len(items) - 1

        lines = Text()
        for idx, item in enumerate(items):
            if idx > 0:
                lines.append("\n")
            lines.append_text(format_item_row(idx, item, selected=idx == self.selected_index))
        items_widget.update(lines)

    def _refresh_summary(self) -> None:
        try:
            total_widget = self.query_one("#grand-total", Static)
            printer_widget = self.query_one("#printer-status", Static)
            status_widget = self.query_one("#status-line", Static)
        except NoMatches:
            return

        total = Text()
        total.append("Grand Total\n", style="bold")
        total.append(format_currency(self.ledger.grand_total()), style="bold #5fbf72")
        total_widget.update(total)

        printer = Text()
        printer.append("Printer: ")
        printer.append_text(format_connection(self.manager.snapshot()))
        printer.append("\nA add  D delete  E edit  C clear  P print  V devices  ? help", style="dim")
        printer_widget.update(printer)

        status_widget.update(Text(self.system_status or "Ready"))
