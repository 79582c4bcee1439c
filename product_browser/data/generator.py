"""
Deterministic product dataset generator.

The same seed always yields the same rows, so every view (and every test)
browses an identical table.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, List

from product_browser.models.product import Product, STATUSES

CATEGORIES = ["Electronics", "Clothing", "Books", "Toys", "Home", "Beauty", "Sports", "Automotive"]
SUPPLIERS = ["Acme Corp", "Globex", "Umbrella", "Wayne Enterprises", "Stark Industries", "Wonka", "Initech"]
LOCATIONS = ["A1", "A2", "B1", "B2", "C1", "C2", "D1", "D2"]
PRODUCT_NAMES = [
    "Widget", "Gadget", "Book", "Shirt", "Laptop", "Phone", "Sneakers", "Backpack", "Blender", "Headphones",
    "Camera", "Watch", "Mug", "Lamp", "Tablet", "Jacket", "Socks", "Bicycle", "Drill", "Sofa",
]

DEFAULT_ROW_COUNT = 10_000
DEFAULT_SEED = 42

_DATE_START = datetime(2015, 1, 1, tzinfo=timezone.utc)
_DATE_END = datetime(2025, 1, 1, tzinfo=timezone.utc)

_LCG_MULTIPLIER = 1664525
_LCG_INCREMENT = 1013904223
_LCG_MODULUS = 2 ** 32


def lcg(seed: int) -> Callable[[], float]:
    """Linear congruential generator returning floats in [0, 1)."""
    state = seed

    def _next() -> float:
        nonlocal state
        state = (_LCG_MULTIPLIER * state + _LCG_INCREMENT) % _LCG_MODULUS
        return state / _LCG_MODULUS

    return _next


def _pick(values, rand: Callable[[], float]):
    return values[int(rand() * len(values))]


def _random_date(rand: Callable[[], float]) -> str:
    span_ms = (_DATE_END - _DATE_START) / timedelta(milliseconds=1)
    moment = _DATE_START + timedelta(milliseconds=rand() * span_ms)
    return moment.date().isoformat()


def iter_products(count: int = DEFAULT_ROW_COUNT, seed: int = DEFAULT_SEED) -> Iterator[Product]:
    """Yield `count` products; ids are PRD-00001, PRD-00002, ..."""
    rand = lcg(seed)
    for i in range(count):
        category = _pick(CATEGORIES, rand)
        supplier = _pick(SUPPLIERS, rand)
        location = _pick(LOCATIONS, rand)
        status = _pick(STATUSES, rand)
        product_name = f"{_pick(PRODUCT_NAMES, rand)} {int(rand() * 1000)}"
        price = round(rand() * 500 + 5, 2)
        # discontinued products draw no stock value
        quantity = 0 if status == "discontinued" else int(rand() * 200)
        weight = round(rand() * 10 + 0.1, 2)
        date_added = _random_date(rand)

        yield Product(
            product_id=f"PRD-{i + 1:05d}",
            product_name=product_name,
            category=category,
            price=price,
            quantity_in_stock=quantity,
            supplier_name=supplier,
            date_added=date_added,
            location=location,
            weight=weight,
            status=status,
        )


def generate_products(count: int = DEFAULT_ROW_COUNT, seed: int = DEFAULT_SEED) -> List[Product]:
    return list(iter_products(count, seed))
