"""Entry point for the beverage calculator Textual app."""

from __future__ import annotations

import logging
from pathlib import Path

from beverage_calc.calculator_app import CalculatorApp
from beverage_calc.config import resolve_log_path


def configure_logging(path: str | None = None) -> None:
    """Send logs to a file; the terminal belongs to the Textual UI."""
    log_path = Path(path or resolve_log_path())
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_path,
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    CalculatorApp().run()


if __name__ == "__main__":
    main()
