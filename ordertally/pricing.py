"""Order pricing for per-pound and per-item products."""

from __future__ import annotations

import json
import logging
from decimal import MAX_PREC, ROUND_HALF_UP, Context, Decimal, DecimalException, InvalidOperation, localcontext
from pathlib import Path
from typing import Any, Iterable, Mapping

from ordertally.config import CURRENCY_SYMBOL
from ordertally.errors import InvalidProduct, OrderParseError, UnknownPricingMethod
from ordertally.models import OrderLine, OrderResult, PerItemProduct, PerPoundProduct, PricingMethod, Product

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")
# Products, sums and cent rounding stay exact however many digits they need.
_EXACT = Context(prec=MAX_PREC, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal) -> str:
    """Format an amount as currency, rounding half away from zero to cents."""
    try:
        with localcontext(_EXACT):
            rounded = amount.quantize(_CENT)
            sign = "-" if rounded < 0 else ""
            return f"{sign}{CURRENCY_SYMBOL}{abs(rounded):,.2f}"
    except DecimalException as exc:
        raise InvalidProduct(f"Amount {amount} is out of range") from exc


def _to_decimal(value: Any, field_name: str) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidProduct(f"'{field_name}' must be a number")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise InvalidProduct(f"'{field_name}' must be a number") from exc
    if not number.is_finite():
        raise InvalidProduct(f"'{field_name}' must be a finite number")
    return number


def product_from_dict(raw: Mapping[str, Any]) -> Product:
    """Build a product variant from its tagged mapping form."""
    tag = raw.get("pricing_method")
    try:
        method = PricingMethod(tag)
    except ValueError as exc:
        raise UnknownPricingMethod(f"Unknown pricing method: {tag!r}") from exc

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise InvalidProduct("Product name is missing")
    price = _to_decimal(raw.get("price"), "price")
    if price is None:
        raise InvalidProduct(f"Price is missing for {name}")

    if method is PricingMethod.PER_POUND:
        return PerPoundProduct(name=name, price=price, weight=_to_decimal(raw.get("weight"), "weight"))
    return PerItemProduct(name=name, price=price, quantity=_to_decimal(raw.get("quantity"), "quantity"))


def _line_amount(name: str, amount: Decimal, unit_price: Decimal) -> Decimal:
    try:
        with localcontext(_EXACT):
            return amount * unit_price
    except DecimalException as exc:
        raise InvalidProduct(f"Price of {name} is out of range") from exc


def price_product(product: Product) -> OrderLine:
    """Price one product and build its summary line."""
    if isinstance(product, PerPoundProduct):
        if product.weight is None or product.weight < 0:
            raise InvalidProduct("Weight is missing")
        price = _line_amount(product.name, product.weight, product.price)
    elif isinstance(product, PerItemProduct):
        if product.quantity is None or product.quantity < 0:
            raise InvalidProduct("Quantity is missing")
        price = _line_amount(product.name, product.quantity, product.price)
    else:
        raise UnknownPricingMethod(f"Unknown pricing method for {product!r}")

    return OrderLine(product=product, price=price, summary_line=f"{product.name}: {format_currency(price)}")


def process_order(customer: str, products: Iterable[Product]) -> OrderResult:
    """
    Price every product of an order and total it.

    The first failing product aborts the whole order; no partial result is
    returned.
    """
    lines = tuple(price_product(product) for product in products)
    try:
        with localcontext(_EXACT):
            total = sum((line.price for line in lines), Decimal("0"))
    except DecimalException as exc:
        raise InvalidProduct(f"Order total for {customer} is out of range") from exc
    logger.debug("priced order customer=%r lines=%d total=%s", customer, len(lines), total)
    return OrderResult(customer=customer, lines=lines, total=total)


def load_order(source: str | Path) -> tuple[str, list[Product]]:
    """Load ``{"customer": ..., "products": [...]}`` from a JSON path or text."""
    if isinstance(source, Path) or not source.lstrip().startswith("{"):
        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise OrderParseError(f"Cannot read order file {path}: {exc}") from exc
    else:
        text = source

    try:
        raw = json.loads(text, parse_float=Decimal, parse_int=Decimal)
    except json.JSONDecodeError as exc:
        raise OrderParseError(f"Invalid JSON in order data: {exc}") from exc

    if not isinstance(raw, dict):
        raise OrderParseError("Order data must be a JSON object")
    customer = raw.get("customer")
    if not isinstance(customer, str):
        raise OrderParseError("Order must include a 'customer' string")
    items = raw.get("products")
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise OrderParseError("Order 'products' must be an array of objects")

    return customer, [product_from_dict(item) for item in items]
