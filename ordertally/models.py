"""Domain models for order-tally."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


@dataclass
class ToppingGroup:
    """Pizzas sharing one sorted topping list, with how often it occurred."""

    toppings: tuple[str, ...]
    count: int
    first_seen_index: int


class PricingMethod(str, Enum):
    """How a product's line price is computed."""

    PER_POUND = "PerPound"
    PER_ITEM = "PerItem"


@dataclass(frozen=True)
class PerPoundProduct:
    """A product sold by weight."""

    name: str
    price: Decimal
    weight: Decimal | None = None


@dataclass(frozen=True)
class PerItemProduct:
    """A product sold by count."""

    name: str
    price: Decimal
    quantity: Decimal | None = None


Product = PerPoundProduct | PerItemProduct


@dataclass(frozen=True)
class OrderLine:
    """A priced product and its summary line."""

    product: Product
    price: Decimal
    summary_line: str


@dataclass(frozen=True)
class OrderResult:
    """A fully priced order."""

    customer: str
    lines: tuple[OrderLine, ...]
    total: Decimal

    @property
    def summary(self) -> str:
        return "\n".join(line.summary_line for line in self.lines)
