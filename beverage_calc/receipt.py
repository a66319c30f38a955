"""Fixed-width receipt text for narrow thermal printers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from beverage_calc.calculation import grand_total, line_total, quantize_money
from beverage_calc.config import (
    RECEIPT_COLUMN_GAP,
    RECEIPT_CURRENCY_CODE,
    RECEIPT_DECIMAL_SEPARATOR,
    RECEIPT_FEED_LINES,
    RECEIPT_NAME_WIDTH,
    RECEIPT_PRICE_WIDTH,
    RECEIPT_QTY_WIDTH,
    RECEIPT_THOUSANDS_SEPARATOR,
    RECEIPT_TOTAL_WIDTH,
    RECEIPT_WIDTH_CHARS,
)
from beverage_calc.data import RECEIPT_FOOTER_LINES, RECEIPT_HEADER_LINES
from beverage_calc.ledger import Ledger
from beverage_calc.models import LineItem


@dataclass(frozen=True)
class ReceiptLayout:
    """Column geometry and currency conventions for one paper width."""

    width: int = RECEIPT_WIDTH_CHARS
    name_width: int = RECEIPT_NAME_WIDTH
    qty_width: int = RECEIPT_QTY_WIDTH
    price_width: int = RECEIPT_PRICE_WIDTH
    total_width: int = RECEIPT_TOTAL_WIDTH
    column_gap: int = RECEIPT_COLUMN_GAP
    feed_lines: int = RECEIPT_FEED_LINES
    currency_code: str = RECEIPT_CURRENCY_CODE
    thousands_separator: str = RECEIPT_THOUSANDS_SEPARATOR
    decimal_separator: str = RECEIPT_DECIMAL_SEPARATOR
    header_lines: tuple[str, ...] = RECEIPT_HEADER_LINES
    footer_lines: tuple[str, ...] = RECEIPT_FOOTER_LINES


DEFAULT_LAYOUT = ReceiptLayout()


def format_money(amount: Decimal, layout: ReceiptLayout = DEFAULT_LAYOUT) -> str:
    """Two decimals, thousands grouped, separators taken from ``layout`` only."""
    raw = f"{quantize_money(amount):,.2f}"
    # Swap through a placeholder so "," -> "." and "." -> "," can't collide.
    return (
        raw.replace(",", "\0")
        .replace(".", layout.decimal_separator)
        .replace("\0", layout.thousands_separator)
    )


def _rule(layout: ReceiptLayout) -> str:
    return "-" * layout.width


def _center(text: str, layout: ReceiptLayout) -> str:
    return text[: layout.width].center(layout.width).rstrip()


def _split_line(left: str, right: str, layout: ReceiptLayout) -> str:
    gap = max(1, layout.width - len(left) - len(right))
    return f"{left}{' ' * gap}{right}"


def _column_header(layout: ReceiptLayout) -> str:
    gap = " " * layout.column_gap
    return (
        "Item".ljust(layout.name_width)
        + gap
        + "Qty".rjust(layout.qty_width)
        + gap
        + "Price".rjust(layout.price_width)
        + gap
        + "Total".rjust(layout.total_width)
    )


def format_item_row(item: LineItem, layout: ReceiptLayout = DEFAULT_LAYOUT) -> str:
    """One receipt row; long names are clipped, never wrapped.

    Amounts wider than their column take room from the name so the row
    still fits the paper.
    """
    gap = " " * layout.column_gap
    qty = str(item.quantity).rjust(layout.qty_width)
    price = format_money(item.unit_price, layout).rjust(layout.price_width)
    total = format_money(line_total(item.unit_price, item.quantity), layout).rjust(layout.total_width)
    amounts = f"{qty}{gap}{price}{gap}{total}"

    name_width = min(layout.name_width, max(0, layout.width - len(amounts) - len(gap)))
    name = item.name[:name_width].ljust(name_width)
    return f"{name}{gap}{amounts}"


def format_receipt(
    ledger: Ledger | Iterable[LineItem],
    timestamp: datetime,
    layout: ReceiptLayout = DEFAULT_LAYOUT,
) -> str:
    """Render a ledger snapshot.

    The output depends only on the rows, ``timestamp`` and ``layout``, so the
    same inputs always produce the same text.
    """
    items = ledger.items() if isinstance(ledger, Ledger) else list(ledger)

    lines: list[str] = [_center(text, layout) for text in layout.header_lines]
    lines.append(_rule(layout))
    lines.append(f"Date: {timestamp:%Y-%m-%d}")
    lines.append(f"Time: {timestamp:%H:%M:%S}")
    lines.append(_rule(layout))
    lines.append(_column_header(layout))
    lines.append(_rule(layout))
    lines.extend(format_item_row(item, layout) for item in items)
    lines.append(_rule(layout))

    total = format_money(grand_total(items), layout)
    amount = f"{layout.currency_code} {total}" if layout.currency_code else total
    lines.append(_split_line("Grand Total:", amount, layout))
    lines.append(_rule(layout))
    lines.append("")
    lines.extend(_center(text, layout) for text in layout.footer_lines)
    lines.extend("" for _ in range(layout.feed_lines))
    return "\n".join(lines) + "\n"


def encode_receipt(text: str) -> bytes:
    return text.encode("utf-8")
