"""Runtime configuration defaults for the ledger, receipt and printer."""

from __future__ import annotations

import os

DEBUG_LOG_PATH = "/tmp/beverage-calc-debug.log"

# 58mm thermal paper prints 32 columns in the printer's default font.
RECEIPT_WIDTH_CHARS = 32
# Columns are separated by one space: name, qty, price, total.
RECEIPT_COLUMN_GAP = 1
RECEIPT_NAME_WIDTH = 10
RECEIPT_QTY_WIDTH = 3
RECEIPT_PRICE_WIDTH = 8
RECEIPT_TOTAL_WIDTH = 8
RECEIPT_FEED_LINES = 3
RECEIPT_CURRENCY_CODE = "PHP"
RECEIPT_THOUSANDS_SEPARATOR = ","
RECEIPT_DECIMAL_SEPARATOR = "."

# Bluetooth SPP printers show up as serial ports (/dev/rfcomm*, COMx).
PRINTER_BAUDRATE = 9600
PRINTER_SERIAL_TIMEOUT = 2
PRINTER_RENDER_MODE = "text"
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 19
PRINTER_FONT_PATH = "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf"
PRINTER_LEFT_INDENT_PX = 4

TRANSPORT_SERIAL = "serial"
TRANSPORT_DUMMY = "dummy"
RENDER_MODES = ("text", "image")

_LOG_PATH_ENV = "BEVERAGE_CALC_LOG_PATH"
_TRANSPORT_ENV = "BEVERAGE_CALC_TRANSPORT"
_BAUDRATE_ENV = "BEVERAGE_CALC_BAUDRATE"
_RENDER_MODE_ENV = "BEVERAGE_CALC_RENDER_MODE"
FONT_OVERRIDE_ENV = "BEVERAGE_CALC_PRINTER_FONT_PATH"


def resolve_log_path() -> str:
    return os.environ.get(_LOG_PATH_ENV, "").strip() or DEBUG_LOG_PATH


def resolve_transport_kind() -> str:
    """Return ``serial`` (real printer) or ``dummy`` (in-memory demo printer)."""
    kind = os.environ.get(_TRANSPORT_ENV, "").strip().lower() or TRANSPORT_SERIAL
    if kind not in {TRANSPORT_SERIAL, TRANSPORT_DUMMY}:
        raise ValueError(f"{_TRANSPORT_ENV} must be '{TRANSPORT_SERIAL}' or '{TRANSPORT_DUMMY}', got {kind!r}")
    return kind


def resolve_baudrate() -> int:
    raw = os.environ.get(_BAUDRATE_ENV, "").strip()
    if not raw:
        return PRINTER_BAUDRATE
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{_BAUDRATE_ENV} must be an integer, got {raw!r}") from exc


def resolve_render_mode() -> str:
    mode = os.environ.get(_RENDER_MODE_ENV, "").strip().lower() or PRINTER_RENDER_MODE
    if mode not in RENDER_MODES:
        raise ValueError(f"{_RENDER_MODE_ENV} must be one of {', '.join(RENDER_MODES)}, got {mode!r}")
    return mode
