"""In-memory line item store with derived totals."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Callable, Iterable
from uuid import uuid4

from beverage_calc.calculation import ZERO, grand_total, line_total, to_price, to_quantity
from beverage_calc.models import LineItem

log = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "unit_price", "quantity")

LedgerListener = Callable[["Ledger"], None]


class Ledger:
    """Ordered beverage rows.

    Mutators never fail on user input: numeric values are coerced and clamped
    to zero. Every mutation notifies subscribers after the change is applied,
    so a listener always reads the new totals.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._items: list[LineItem] = []
        self._listeners: list[LedgerListener] = []
        for name in names:
            self._items.append(LineItem(item_id=uuid4().hex, name=name))

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> list[LineItem]:
        """Return copies of the rows in insertion order."""
        return [replace(item) for item in self._items]

    def get(self, item_id: str) -> LineItem | None:
        item = self._find(item_id)
        return replace(item) if item is not None else None

    def subscribe(self, listener: LedgerListener) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add_item(self, name: str = "") -> str:
        item = LineItem(item_id=uuid4().hex, name=name)
        self._items.append(item)
        log.debug("add_item id=%s name=%r", item.item_id, name)
        self._notify()
        return item.item_id

    def remove_item(self, item_id: str) -> None:
        item = self._find(item_id)
        if item is None:
            return
        self._items.remove(item)
        log.debug("remove_item id=%s", item_id)
        self._notify()

    def update_item(self, item_id: str, field: str, value: object) -> None:
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"field must be one of {', '.join(EDITABLE_FIELDS)}, got {field!r}")
        item = self._find(item_id)
        if item is None:
            return

        if field == "name":
            item.name = "" if value is None else str(value)
        elif field == "unit_price":
            item.unit_price = to_price(value)
        else:
            item.quantity = to_quantity(value)
        item.line_total = line_total(item.unit_price, item.quantity)
        self._notify()

    def clear_all(self) -> None:
        """Zero every price and quantity; names, ids and row count are kept."""
        for item in self._items:
            item.unit_price = ZERO
            item.quantity = 0
            item.line_total = ZERO
        log.debug("clear_all rows=%d", len(self._items))
        self._notify()

    def grand_total(self) -> Decimal:
        return grand_total(self._items)

    def has_nonzero_total(self) -> bool:
        return self.grand_total() > 0

    def _find(self, item_id: str) -> LineItem | None:
        for item in self._items:
            if item.item_id == item_id:
                return item
        return None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
