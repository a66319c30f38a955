"""Usage instructions modal."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from beverage_calc.data import HELP_TEXT


class HelpModal(ModalScreen[None]):
    """Simple centered modal with usage instructions."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("question_mark", "close", "Close"),
    ]

    CSS = """
    HelpModal {
        align: center middle;
        background: $background 60%;
    }

    #help-dialog {
        width: 76;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #help-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #help-footer {
        margin-top: 1;
        color: $text-muted;
    }
    """

    def compose(self) -> ComposeResult:
        with Container(id="help-dialog"):
            yield Static("How to Use This App", id="help-title")
            yield Static(HELP_TEXT, id="help-body")
            yield Static("Esc / q to close", id="help-footer")

    def action_close(self) -> None:
        self.dismiss()
