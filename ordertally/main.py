"""Entry point for the order-tally command line."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from rich.console import Console

from ordertally.config import TOP_GROUP_LIMIT, debug_log_path, pizzas_path
from ordertally.errors import OrderTallyError
from ordertally.pricing import load_order, process_order
from ordertally.printer import order_ticket, print_ticket, report_ticket
from ordertally.rendering import format_order_receipt
from ordertally.toppings import aggregate, format_group_line, load_pizzas

logger = logging.getLogger("ordertally")

_COMMANDS = {"toppings", "order", "-h", "--help"}


def configure_logging() -> None:
    """
    Send debug logging to the debug log file, never to stdout.

    Calling it again after the log path changed moves logging to the new file
    and closes the old one.
    """
    log_file = Path(debug_log_path())
    target = os.path.abspath(log_file)
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.FileHandler):
            continue
        if handler.baseFilename == target:
            return
        logger.removeHandler(handler)
        handler.close()

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        # Logging must never interfere with the report.
        return
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="order-tally")
    commands = parser.add_subparsers(dest="command")

    toppings = commands.add_parser("toppings", help="Tally the most frequent topping combinations")
    toppings.add_argument("path", nargs="?", help="Pizzas JSON file")
    toppings.add_argument("--top", type=int, default=TOP_GROUP_LIMIT, help="Number of groups to report")
    toppings.add_argument("--tui", action="store_true", help="Browse the report interactively")
    toppings.add_argument("--print", dest="print_ticket", action="store_true", help="Print the report ticket")

    order = commands.add_parser("order", help="Price an order and show its summary")
    order.add_argument("path", help="Order JSON file")
    order.add_argument("--print", dest="print_ticket", action="store_true", help="Print the receipt ticket")
    return parser


def run_toppings(args: argparse.Namespace) -> None:
    pizzas = load_pizzas(args.path or pizzas_path())
    groups = aggregate(pizzas, limit=args.top)
    logger.debug("toppings report pizzas=%d groups=%d", len(pizzas), len(groups))

    if args.tui:
        from ordertally.report_app import ToppingReportApp

        ToppingReportApp(groups, total_pizzas=len(pizzas)).run()
        return

    for group in groups:
        print(format_group_line(group))

    if args.print_ticket:
        print_ticket(report_ticket(groups))


def run_order(args: argparse.Namespace) -> None:
    customer, products = load_order(args.path)
    result = process_order(customer, products)
    Console().print(format_order_receipt(result))

    if args.print_ticket:
        print_ticket(order_ticket(result))


def main(argv: list[str] | None = None) -> int:
    """Run the command line and return the process exit status."""
    configure_logging()
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv or argv[0] not in _COMMANDS:
        argv = ["toppings", *argv]
    args = build_parser().parse_args(argv)

    try:
        if args.command == "order":
            run_order(args)
        else:
            run_toppings(args)
    except (OrderTallyError, RuntimeError) as exc:
        logger.debug("command %s failed error=%r", args.command, exc)
        print(f"order-tally: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
