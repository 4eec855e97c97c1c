"""Textual viewer for the topping report."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.widgets import DataTable, Footer, Header, Static

from ordertally.models import ToppingGroup
from ordertally.printer import print_ticket, printer_status, report_ticket
from ordertally.rendering import group_row

logger = logging.getLogger(__name__)


class ToppingReportApp(App):
    """Browse the most frequent topping combinations and print them."""

    TITLE = "Order Tally"
    SUB_TITLE = "Top toppings"

    CSS = """
    #summary {
        text-style: bold;
        padding: 0 1;
    }

    #groups {
        height: 1fr;
        border: round $primary;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 3;
    }
    """

    BINDINGS = [
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("p", "print_report", "Print"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, groups: list[ToppingGroup], total_pizzas: int) -> None:
        super().__init__()
        self.groups = groups
        self.total_pizzas = total_pizzas
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(f"{len(self.groups)} groups from {self.total_pizzas} pizzas", id="summary")
        yield DataTable(id="groups", cursor_type="row", zebra_stripes=True)
        yield Static(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#groups", DataTable)
        table.add_columns("#", "Count", "Share", "Toppings")
        for rank, group in enumerate(self.groups, 1):
            table.add_row(*group_row(rank, group, self.total_pizzas))
        table.focus()

        _, self.system_status = printer_status()
        logger.debug("report app mounted printer_status=%r groups=%d", self.system_status, len(self.groups))
        self._show_status()

    @property
    def selected_index(self) -> int:
        return self.query_one("#groups", DataTable).cursor_row

    def action_move_cursor(self, delta: int) -> None:
        table = self.query_one("#groups", DataTable)
        if delta > 0:
            table.action_cursor_down()
        else:
            table.action_cursor_up()

    def action_print_report(self) -> None:
        if not self.groups:
            self.system_status = "Nothing to print"
            self._show_status()
            return

        try:
            print_ticket(report_ticket(self.groups))
        except Exception as exc:
            self.system_status = f"Print failed: {exc}"
            logger.debug("report print failed error=%r", exc)
        else:
            self.system_status = f"Printed {len(self.groups)} groups"
        self._show_status()

    def _show_status(self) -> None:
        self.query_one("#status-bar", Static).update(self.system_status or "Ready")
