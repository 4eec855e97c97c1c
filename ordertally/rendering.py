"""Rendering helpers for topping reports and priced orders."""

from __future__ import annotations

from rich.text import Text

from ordertally.models import OrderResult, ToppingGroup
from ordertally.pricing import format_currency

_NO_TOPPINGS_LABEL = "(plain)"
_BAR_WIDTH = 20


def toppings_label(group: ToppingGroup) -> Text:
    """Toppings joined by commas; a plain pizza gets a dimmed placeholder."""
    if group.toppings:
        return Text(", ".join(group.toppings))
    return Text(_NO_TOPPINGS_LABEL, style="dim")


def share_bar(count: int, total: int, width: int = _BAR_WIDTH) -> Text:
    """A bar proportional to ``count / total`` followed by the percentage."""
    share = count / total if total > 0 else 0.0
    filled = round(share * width)
    text = Text()
    text.append("█" * filled, style="green")
    text.append("░" * (width - filled), style="dim")
    text.append(f" {share:6.1%}")
    return text


def group_row(rank: int, group: ToppingGroup, total_pizzas: int) -> tuple[Text, Text, Text, Text]:
    """Cells of one report table row: rank, count, share and toppings."""
    return (
        Text(str(rank), justify="right"),
        Text(str(group.count), style="bold", justify="right"),
        share_bar(group.count, total_pizzas),
        toppings_label(group),
    )


def format_order_receipt(result: OrderResult) -> Text:
    """Render a priced order with a customer header and a total line."""
    text = Text()
    text.append(f"Order for {result.customer}", style="bold")
    for line in result.lines:
        text.append("\n")
        text.append(line.summary_line)
    text.append("\n")
    text.append(f"Total: {format_currency(result.total)}", style="bold")
    return text
