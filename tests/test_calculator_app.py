import asyncio
from datetime import datetime
from decimal import Decimal

from beverage_calc.calculator_app import CalculatorApp
from beverage_calc.connection import PrinterConnectionManager
from beverage_calc.devices_modal import DevicesModal
from beverage_calc.ledger import Ledger
from beverage_calc.models import ConnectionState

from conftest import PRINTER_A, FakeTransport

WHEN = datetime(2026, 10, 19, 9, 30, 0)


def _app(names=("Coke", "Sprite")) -> tuple[CalculatorApp, FakeTransport]:
    transport = FakeTransport()
    app = CalculatorApp(
        ledger=Ledger(names),
        manager=PrinterConnectionManager(transport),
        clock=lambda: WHEN,
        scan_on_start=False,
    )
    return app, transport


def _price(app: CalculatorApp, index: int, price: str, qty: int) -> None:
    item_id = app.ledger.items()[index].item_id
    app.ledger.update_item(item_id, "unit_price", price)
    app.ledger.update_item(item_id, "quantity", qty)


def test_add_and_delete_rows():
    async def run():
        app, _ = _app()
        async with app.run_test() as pilot:
            await pilot.press("a")
            assert [item.name for item in app.ledger.items()] == ["Coke", "Sprite", "Item 3"]
            assert app.selected_index == 2

            await pilot.press("d")
            assert [item.name for item in app.ledger.items()] == ["Coke", "Sprite"]

    asyncio.run(run())


def test_last_row_cannot_be_deleted():
    async def run():
        app, _ = _app(names=("Coke",))
        async with app.run_test() as pilot:
            await pilot.press("d")
            assert len(app.ledger) == 1
            assert app.system_status == "Cannot remove the last item"

    asyncio.run(run())


def test_clear_all_keeps_rows():
    async def run():
        app, _ = _app()
        async with app.run_test() as pilot:
            _price(app, 0, "45", 3)
            await pilot.press("c")
            assert app.ledger.grand_total() == 0
            assert len(app.ledger) == 2

    asyncio.run(run())


def test_edit_modal_updates_selected_row():
    async def run():
        app, _ = _app()
        async with app.run_test() as pilot:
            await pilot.press("e")
            await pilot.press("tab", "4", "5", "tab", "3", "enter")
            await pilot.pause()
            item = app.ledger.items()[0]
            assert item.unit_price == Decimal("45")
            assert item.quantity == 3
            assert item.line_total == Decimal("135")

    asyncio.run(run())


def test_print_needs_a_nonzero_total():
    async def run():
        app, transport = _app()
        async with app.run_test() as pilot:
            await pilot.press("p")
            assert "grand total is zero" in app.system_status
            assert transport.printed == []

    asyncio.run(run())


def test_print_needs_a_connection():
    async def run():
        app, transport = _app()
        async with app.run_test() as pilot:
            _price(app, 0, "45", 3)
            await pilot.press("p")
            assert app.system_status.startswith("No printer connected")
            assert transport.printed == []

    asyncio.run(run())


def test_print_sends_formatted_receipt():
    async def run():
        app, transport = _app()
        async with app.run_test() as pilot:
            _price(app, 0, "45.00", 3)
            _price(app, 1, "40.00", 2)
            await app.manager.scan()
            await app.manager.connect(PRINTER_A.device_id)

            await pilot.press("p")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert len(transport.printed) == 1
            receipt = transport.printed[0]
            assert "Date: 2026-10-19" in receipt
            assert "PHP 215.00" in receipt
            assert app.system_status == "Receipt printed"
            assert app.manager.state is ConnectionState.CONNECTED

    asyncio.run(run())


def test_devices_modal_connects_and_disconnects():
    async def run():
        app, _ = _app()
        async with app.run_test() as pilot:
            app.start_scan()
            await app.workers.wait_for_complete()

            await pilot.press("v")
            assert isinstance(app.screen, DevicesModal)

            await pilot.press("enter")
            await app.workers.wait_for_complete()
            assert app.manager.device_id == PRINTER_A.device_id

            await pilot.press("x")
            await app.workers.wait_for_complete()
            assert app.manager.state is ConnectionState.DISCONNECTED

            await pilot.press("escape")
            await pilot.pause()
            assert not isinstance(app.screen, DevicesModal)

    asyncio.run(run())
