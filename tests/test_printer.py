from decimal import Decimal

import pytest
from PIL import ImageFont

from ordertally import printer
from ordertally.config import PRINTER_WIDTH_PX
from ordertally.models import PerItemProduct, PerPoundProduct, ToppingGroup
from ordertally.pricing import process_order
from ordertally.printer import RULE, TicketRow


class FakePrinter:
    def __init__(self):
        self.images = []
        self.cut_count = 0

    def image(self, img):
        self.images.append(img)

    def cut(self):
        self.cut_count += 1


@pytest.fixture
def font():
    return ImageFont.load_default(size=20)


def _order():
    return process_order(
        "Jane",
        [
            PerPoundProduct(name="Pulled Pork", price=Decimal("6.99"), weight=Decimal("0.5")),
            PerItemProduct(name="Coke", price=Decimal("3"), quantity=Decimal("2")),
        ],
    )


def test_order_ticket_prices_each_product_with_unit_detail():
    assert printer.order_ticket(_order()) == [
        TicketRow("Jane"),
        RULE,
        TicketRow("Pulled Pork", "$3.50"),
        TicketRow("  0.5 lb @ $6.99/lb"),
        TicketRow("Coke", "$6.00"),
        TicketRow("  2 @ $3.00"),
        RULE,
        TicketRow("Total", "$9.50"),
    ]


def test_report_ticket_ranks_groups_with_counts():
    groups = [
        ToppingGroup(toppings=("cheese", "pepperoni"), count=2, first_seen_index=0),
        ToppingGroup(toppings=(), count=1, first_seen_index=2),
    ]
    assert printer.report_ticket(groups) == [
        TicketRow("Top toppings", "count"),
        RULE,
        TicketRow("1. cheese, pepperoni", "2"),
        TicketRow("2. (plain)", "1"),
    ]


def test_wrap_text_keeps_short_text_on_one_line(font):
    assert printer.wrap_text("cheese, pepperoni", font, 1000) == ["cheese, pepperoni"]
    assert printer.wrap_text("", font, 1000) == [""]


def test_wrap_text_breaks_on_words_and_splits_long_words(font):
    width = font.getlength("mushroom")
    assert printer.wrap_text("ham mushroom", font, width) == ["ham", "mushroom"]
    pieces = printer.wrap_text("x" * 60, font, width)
    assert len(pieces) > 1
    assert "".join(pieces) == "x" * 60
    assert all(font.getlength(piece) <= width for piece in pieces)


def test_render_ticket_grows_with_wrapped_rows(font):
    short = printer.render_ticket([TicketRow("Coke", "$6.00")], font)
    long = printer.render_ticket([TicketRow("extra " * 30, "$6.00")], font)
    assert short.width == long.width == PRINTER_WIDTH_PX
    assert long.height > short.height


def test_render_ticket_draws_amount_flush_right(font):
    img = printer.render_ticket([TicketRow("", "$6.00")], font)
    left_half = img.crop((0, 0, PRINTER_WIDTH_PX // 2, img.height))
    right_half = img.crop((PRINTER_WIDTH_PX // 2, 0, PRINTER_WIDTH_PX, img.height))
    # 1-bit images: a band with ink has a minimum of 0.
    assert left_half.getextrema() == (255, 255)
    assert right_half.getextrema()[0] == 0


def test_print_ticket_sends_one_image_and_cuts(font):
    fake = FakePrinter()
    printer.print_ticket(printer.order_ticket(_order()), printer=fake, font=font)
    assert len(fake.images) == 1
    assert fake.images[0].width == PRINTER_WIDTH_PX
    assert fake.cut_count == 1


def test_print_ticket_skips_empty_ticket(font):
    fake = FakePrinter()
    printer.print_ticket([], printer=fake, font=font)
    assert fake.images == []
    assert fake.cut_count == 0


def test_missing_font_falls_back_to_pillow_default(monkeypatch):
    monkeypatch.setenv("ORDER_TALLY_PRINTER_FONT", "/nonexistent/font.ttf")
    font = printer.load_font(18)
    assert font.getlength("Total") > 0


def test_printer_status_reports_missing_device(tmp_path, monkeypatch):
    device = tmp_path / "lp0"
    monkeypatch.setenv("ORDER_TALLY_PRINTER_DEVICE", str(device))
    ok, message = printer.printer_status()
    assert not ok
    assert str(device) in message

    device.write_bytes(b"")
    ok, message = printer.printer_status()
    assert ok
    assert message == f"Printer ready at {device}"


def test_open_printer_failure_is_a_runtime_error(tmp_path, monkeypatch):
    monkeypatch.setenv("ORDER_TALLY_PRINTER_DEVICE", str(tmp_path / "missing" / "lp0"))
    with pytest.raises(RuntimeError, match="Cannot open printer"):
        printer.open_printer()
