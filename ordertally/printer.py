"""Thermal tickets for priced orders and topping reports.

A ticket is a list of rows. Each row holds a description on the left and an
optional amount flush right, or is a horizontal rule. The whole ticket is laid
out into a single 1-bit Pillow image at printer width and sent through
python-escpos.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ordertally.config import PRINTER_FONT_SIZE, PRINTER_MARGIN_PX, PRINTER_WIDTH_PX, printer_device, printer_font
from ordertally.models import OrderLine, OrderResult, PerPoundProduct, ToppingGroup
from ordertally.pricing import format_currency

logger = logging.getLogger(__name__)

_RULE_HEIGHT_PX = 14
_RULE_THICKNESS_PX = 2
_LINE_SPACING_PX = 6
_AMOUNT_GAP_PX = 16
_INDENT = "  "


@dataclass(frozen=True)
class TicketRow:
    """One printed row: a description, an optional right-hand amount, or a rule."""

    text: str = ""
    amount: str = ""
    rule: bool = False


RULE = TicketRow(rule=True)


def _unit_detail(line: OrderLine) -> str:
    product = line.product
    if isinstance(product, PerPoundProduct):
        return f"{product.weight} lb @ {format_currency(product.price)}/lb"
    return f"{product.quantity} @ {format_currency(product.price)}"


def order_ticket(result: OrderResult) -> list[TicketRow]:
    """Receipt rows: customer, one priced row plus unit detail per product, total."""
    rows = [TicketRow(result.customer), RULE]
    for line in result.lines:
        rows.append(TicketRow(line.product.name, format_currency(line.price)))
        rows.append(TicketRow(_INDENT + _unit_detail(line)))
    rows.append(RULE)
    rows.append(TicketRow("Total", format_currency(result.total)))
    return rows


def report_ticket(groups: list[ToppingGroup]) -> list[TicketRow]:
    """Report rows: one row per topping group with its count flush right."""
    rows = [TicketRow("Top toppings", "count"), RULE]
    for rank, group in enumerate(groups, 1):
        toppings = ", ".join(group.toppings) or "(plain)"
        rows.append(TicketRow(f"{rank}. {toppings}", str(group.count)))
    return rows


def load_font(size: int = PRINTER_FONT_SIZE) -> object:
    """Load the configured TrueType font, or Pillow's built-in font when it is missing."""
    from PIL import ImageFont

    name = printer_font()
    try:
        return ImageFont.truetype(name, size)
    except OSError:
        logger.debug("printer font %r not found, using Pillow default", name)
        return ImageFont.load_default(size=size)


def wrap_text(text: str, font: object, max_width: float) -> list[str]:
    """Greedy word wrap by rendered width; words wider than a line are split."""
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if font.getlength(candidate) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        while font.getlength(word) > max_width and len(word) > 1:
            cut = len(word) - 1
            while cut > 1 and font.getlength(word[:cut]) > max_width:
                cut -= 1
            lines.append(word[:cut])
            word = word[cut:]
        current = word
    lines.append(current)
    return lines


def render_ticket(rows: list[TicketRow], font: object, width: int = PRINTER_WIDTH_PX) -> object:
    """Lay out ticket rows into one image, wrapping descriptions beside their amounts."""
    from PIL import Image, ImageDraw

    line_height = font.getbbox("Ag")[3] + _LINE_SPACING_PX
    usable = width - 2 * PRINTER_MARGIN_PX

    # None marks a rule; otherwise (text, amount) per printed line.
    laid_out: list[tuple[str, str] | None] = []
    for row in rows:
        if row.rule:
            laid_out.append(None)
            continue
        reserved = font.getlength(row.amount) + _AMOUNT_GAP_PX if row.amount else 0
        wrapped = wrap_text(row.text, font, usable - reserved)
        laid_out.append((wrapped[0], row.amount))
        laid_out.extend((continuation, "") for continuation in wrapped[1:])

    height = 2 * PRINTER_MARGIN_PX + sum(_RULE_HEIGHT_PX if entry is None else line_height for entry in laid_out)
    img = Image.new("1", (width, height), color=1)
    draw = ImageDraw.Draw(img)

    y = PRINTER_MARGIN_PX
    for entry in laid_out:
        if entry is None:
            mid = y + _RULE_HEIGHT_PX // 2
            draw.line((PRINTER_MARGIN_PX, mid, width - PRINTER_MARGIN_PX, mid), fill=0, width=_RULE_THICKNESS_PX)
            y += _RULE_HEIGHT_PX
            continue
        text, amount = entry
        draw.text((PRINTER_MARGIN_PX, y), text, font=font, fill=0)
        if amount:
            draw.text((width - PRINTER_MARGIN_PX - font.getlength(amount), y), amount, font=font, fill=0)
        y += line_height
    return img


def printer_status() -> tuple[bool, str]:
    """Report whether a ticket can be printed, without raising."""
    try:
        from escpos.printer import File  # noqa: F401
    except Exception as exc:
        return (False, f"Printer support unavailable: {exc}")
    device = printer_device()
    if not Path(device).exists():
        return (False, f"No printer at {device}")
    return (True, f"Printer ready at {device}")


def open_printer() -> object:
    """Open the ESC/POS printer device."""
    device = printer_device()
    try:
        from escpos.printer import File

        printer = File(device)
        printer.open()
    except Exception as exc:
        raise RuntimeError(f"Cannot open printer {device}: {exc}") from exc
    return printer


def print_ticket(rows: list[TicketRow], printer: object | None = None, font: object | None = None) -> None:
    """Render the ticket, print it as one image and cut the paper."""
    if not rows:
        return
    image = render_ticket(rows, font if font is not None else load_font())
    owned = printer is None
    if owned:
        printer = open_printer()
    logger.debug("printing ticket rows=%d height=%d", len(rows), image.height)
    try:
        printer.image(image)
        printer.cut()
    finally:
        if owned:
            printer.close()
