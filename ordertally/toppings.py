"""Topping-combination tally over a list of pizza orders."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Sequence

from ordertally.config import TOP_GROUP_LIMIT
from ordertally.errors import InvalidInput, ToppingsParseError
from ordertally.models import ToppingGroup

logger = logging.getLogger(__name__)


def load_pizzas(source: str | Path) -> list[list[str]]:
    """
    Load pizza topping lists from a JSON file path or JSON text.

    The document must be an array of objects, each with a ``toppings`` array
    of strings. Anything else raises ToppingsParseError.
    """
    if isinstance(source, Path) or not source.lstrip().startswith(("[", "{")):
        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ToppingsParseError(f"Cannot read pizzas file {path}: {exc}") from exc
    else:
        text = source

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ToppingsParseError(f"Invalid JSON in pizzas data: {exc}") from exc

    if not isinstance(raw, list):
        raise ToppingsParseError("Pizzas data must be a JSON array")

    pizzas: list[list[str]] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict) or "toppings" not in item:
            raise ToppingsParseError(f"Pizza #{idx} must be an object with 'toppings'")
        toppings = item["toppings"]
        if not isinstance(toppings, list) or not all(isinstance(name, str) for name in toppings):
            raise ToppingsParseError(f"Pizza #{idx} 'toppings' must be an array of strings")
        pizzas.append(list(toppings))

    logger.debug("loaded %d pizzas", len(pizzas))
    return pizzas


def _grouping_key(pizza: Sequence[str], idx: int) -> tuple[str, ...]:
    if isinstance(pizza, (str, bytes)) or not isinstance(pizza, Sequence):
        raise InvalidInput(f"Pizza #{idx} must be a sequence of topping names")
    if not all(isinstance(name, str) for name in pizza):
        raise InvalidInput(f"Pizza #{idx} has a non-string topping")
    if len(pizza) > 1:
        return tuple(sorted(pizza))
    return tuple(pizza)


def count_groups(pizzas: Iterable[Sequence[str]] | None) -> list[ToppingGroup]:
    """Group pizzas by sorted topping list and return groups in creation order."""
    if pizzas is None:
        raise InvalidInput("Pizza list is required")

    groups: dict[tuple[str, ...], ToppingGroup] = {}
    for idx, pizza in enumerate(pizzas):
        key = _grouping_key(pizza, idx)
        group = groups.get(key)
        if group is not None:
            group.count += 1
            continue
        groups[key] = ToppingGroup(toppings=key, count=1, first_seen_index=idx)

    return list(groups.values())


def aggregate(pizzas: Iterable[Sequence[str]] | None, limit: int = TOP_GROUP_LIMIT) -> list[ToppingGroup]:
    """
    Return the most frequent topping groups, most frequent first.

    Groups with equal counts are ordered latest-created first.
    """
    if limit < 0:
        raise InvalidInput("limit must not be negative")

    groups = count_groups(pizzas)
    groups.sort(key=lambda group: (-group.count, -group.first_seen_index))
    logger.debug("aggregated %d groups, reporting %d", len(groups), min(limit, len(groups)))
    return groups[:limit]


def format_group_line(group: ToppingGroup) -> str:
    """Format a group as ``<count><TAB><topping, topping, ...>``."""
    return f"{group.count}\t{', '.join(group.toppings)}"
