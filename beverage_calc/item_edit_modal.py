"""Line item edit modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from beverage_calc.models import LineItem

_FIELDS = ("name", "unit_price", "quantity")
_LABELS = {"name": "Item", "unit_price": "Price", "quantity": "Cases"}
_MAX_NAME_LENGTH = 40
_MAX_NUMBER_LENGTH = 10


class ItemEditModal(ModalScreen[dict[str, str] | None]):
    """Edit one row's name, price and cases; dismisses with the typed values."""

    CSS = """
    ItemEditModal {
        align: center middle;
        background: $background 60%;
    }

    #item-edit-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #item-edit-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #item-edit-fields {
        color: white;
        margin-bottom: 1;
    }

    #item-edit-help {
        color: #dddddd;
    }
    """

    def __init__(self, item: LineItem) -> None:
        super().__init__()
        self.item = item
        self.values = {
            "name": item.name,
            "unit_price": str(item.unit_price) if item.unit_price > 0 else "",
            "quantity": str(item.quantity) if item.quantity > 0 else "",
        }
        self.field_index = 0

    @property
    def current_field(self) -> str:
        return _FIELDS[self.field_index]

    def compose(self) -> ComposeResult:
        with Container(id="item-edit-dialog"):
            yield Static("Edit Item", id="item-edit-title")
            yield Static(id="item-edit-fields")
            yield Static(
                "Tab/↑/↓ switch field. Enter save. Backspace delete. Esc cancel.",
                id="item-edit-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self.dismiss(dict(self.values))
            event.stop()
            return

        if event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(_FIELDS)
            self._refresh_content()
            event.stop()
            return

        if event.key in {"shift+tab", "up"}:
            self.field_index = (self.field_index - 1) % len(_FIELDS)
            self._refresh_content()
            event.stop()
            return

        if event.key == "backspace":
            field = self.current_field
            if self.values[field]:
                self.values[field] = self.values[field][:-1]
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if self._accepts(event.character):
                self.values[self.current_field] += event.character
                self._refresh_content()
            event.stop()

    def _accepts(self, char: str) -> bool:
        field = self.current_field
        value = self.values[field]
        if field == "name":
            return len(value) < _MAX_NAME_LENGTH
        if len(value) >= _MAX_NUMBER_LENGTH:
            return False
        if char.isdigit():
            return True
        return field == "unit_price" and char == "." and "." not in value

    def _refresh_content(self) -> None:
        lines = []
        for idx, field in enumerate(_FIELDS):
            pointer = "➤ " if idx == self.field_index else "  "
            cursor = "|" if idx == self.field_index else ""
            lines.append(f"{pointer}{_LABELS[field]:<6} {self.values[field]}{cursor}")
        self.query_one("#item-edit-fields", Static).update("\n".join(lines))
