"""Editable static seed data and receipt text."""

from __future__ import annotations

STORE_NAME = "JOY LOVE CONSUMER GOODS"

RECEIPT_HEADER_LINES: tuple[str, ...] = (
    STORE_NAME,
    "Beverage List",
)

RECEIPT_FOOTER_LINES: tuple[str, ...] = (
    "Thank you for your purchase!",
)

# Rows shown on a cold start; prices and cases start empty.
DEFAULT_BEVERAGES: tuple[str, ...] = (
    "Coke",
    "Sprite",
    "Pepsi",
)

HELP_TEXT = """\
1. Calculator
   - Enter the beverage name, price and quantity (cases).
   - Add more rows with A, remove the selected row with D.
   - The total is calculated automatically.
   - Press P to print the receipt to the connected printer.

2. Devices (V)
   - Pair the Bluetooth printer in the system Bluetooth settings first
     and bind it to a serial port (rfcomm / COM port).
   - R scans for printers, Enter connects, X disconnects.

3. Printing
   - Only one printer can be connected at a time.
   - The receipt shows the beverage list and the grand total.
   - For best results use 58mm thermal paper.
"""
