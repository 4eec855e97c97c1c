import asyncio

from textual.widgets import DataTable

from ordertally import report_app
from ordertally.printer import TicketRow
from ordertally.report_app import ToppingReportApp
from ordertally.toppings import aggregate


def _groups():
    return aggregate([["cheese", "pepperoni"], ["pepperoni", "cheese"], ["mushroom"], ["olive"]])


def test_table_lists_every_group():
    async def scenario():
        app = ToppingReportApp(_groups(), total_pizzas=4)
        async with app.run_test():
            table = app.query_one("#groups", DataTable)
            assert table.row_count == 3
            assert str(table.get_row_at(0)[3]) == "cheese, pepperoni"

    asyncio.run(scenario())


def test_selection_follows_j_and_k():
    async def scenario():
        app = ToppingReportApp(_groups(), total_pizzas=4)
        async with app.run_test() as pilot:
            assert app.selected_index == 0
            await pilot.press("j", "j")
            assert app.selected_index == 2
            await pilot.press("k")
            assert app.selected_index == 1

    asyncio.run(scenario())


def test_print_key_prints_report(monkeypatch):
    printed = []
    monkeypatch.setattr(report_app, "print_ticket", printed.append)

    async def scenario():
        app = ToppingReportApp(_groups(), total_pizzas=4)
        async with app.run_test() as pilot:
            await pilot.press("p")
            assert app.system_status == "Printed 3 groups"

    asyncio.run(scenario())
    assert printed[0][2] == TicketRow("1. cheese, pepperoni", "2")


def test_print_failure_becomes_status(monkeypatch):
    def fail(rows):
        raise RuntimeError("no device")

    monkeypatch.setattr(report_app, "print_ticket", fail)

    async def scenario():
        app = ToppingReportApp(_groups(), total_pizzas=4)
        async with app.run_test() as pilot:
            await pilot.press("p")
            assert app.system_status == "Print failed: no device"

    asyncio.run(scenario())


def test_empty_report_has_nothing_to_print():
    async def scenario():
        app = ToppingReportApp([], total_pizzas=0)
        async with app.run_test() as pilot:
            await pilot.press("p")
            assert app.system_status == "Nothing to print"

    asyncio.run(scenario())
