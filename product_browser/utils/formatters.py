"""
Formatting utility functions
"""

from typing import Any

from product_browser.models.product import Product


def format_price(value: Any) -> str:
    """
    Format a price with two decimals

    Args:
        value: Price value to format

    Returns:
        Formatted price or empty string if invalid
    """
    try:
        return f"{float(value):.2f}"
    except (TypeError, ValueError):
        return ""


def format_weight(value: Any) -> str:
    try:
        return f"{float(value):.2f}"
    except (TypeError, ValueError):
        return ""


def format_cell(product: Product, column: str) -> str:
    """Display text for one cell of the product table."""
    value = product.value(column)
    if column == "price":
        return format_price(value)
    if column == "weight":
        return format_weight(value)
    return str(value)


def product_cells(product: Product, columns) -> list:
    return [format_cell(product, key) for key in columns]


def truncate(text: str, width: int) -> str:
    """Cut text to `width` cells, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width == 1:
        return "…"
    return text[: width - 1] + "…"
