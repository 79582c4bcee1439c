"""
Virtualized product list: draws only the lines on screen and tells the page
loader which rows are visible.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from rich.segment import Segment
from rich.style import Style
from textual import events
from textual.geometry import Size
from textual.message import Message
from textual.scroll_view import ScrollView
from textual.strip import Strip

from product_browser.models.product import COLUMNS
from product_browser.models.table_state import TableSort
from product_browser.paging.loader import PageLoader
from product_browser.paging.page_cache import Loaded
from product_browser.utils.formatters import format_cell, truncate

COLUMN_WIDTHS: Dict[str, int] = {
    "product_id": 10,
    "product_name": 15,
    "category": 12,
    "price": 10,
    "quantity_in_stock": 7,
    "supplier_name": 17,
    "date_added": 11,
    "location": 9,
    "weight": 12,
    "status": 13,
}
RIGHT_ALIGNED = {"price", "quantity_in_stock", "weight"}
SEPARATOR = " "
HEADER_LINES = 1
PENDING_TEXT = "Loading..."


def _column_spans() -> List[Tuple[str, int, int]]:
    """(key, first cell, last cell) for every column on a row line."""
    spans = []
    x = 0
    for key, _ in COLUMNS:
        width = COLUMN_WIDTHS[key]
        spans.append((key, x, x + width - 1))
        x += width + len(SEPARATOR)
    return spans


COLUMN_SPANS = _column_spans()
ROW_WIDTH = COLUMN_SPANS[-1][2] + 1


def _fit(text: str, key: str) -> str:
    width = COLUMN_WIDTHS[key]
    text = truncate(text, width)
    return text.rjust(width) if key in RIGHT_ALIGNED else text.ljust(width)


class VirtualProductList(ScrollView, can_focus=True):
    """
    Line-API list over a PageLoader. Line 0 is a sticky column header; every
    other line is one row slot, either a product or a loading placeholder.
    """

    COMPONENT_CLASSES = {
        "virtual-list--header",
        "virtual-list--odd",
        "virtual-list--pending",
    }

    DEFAULT_CSS = """
    VirtualProductList {
        height: 1fr;
    }

    VirtualProductList > .virtual-list--header {
        text-style: bold;
        background: $primary-background;
    }

    VirtualProductList > .virtual-list--odd {
        background: $surface-lighten-1;
    }

    VirtualProductList > .virtual-list--pending {
        color: $text-muted;
        text-style: italic;
    }
    """

    class SortRequested(Message):
        """Header clicked"""
        def __init__(self, column: str) -> None:
            super().__init__()
            self.column = column

    def __init__(
        self,
        loader: PageLoader,
        sort: TableSort,
        *,
        name: Optional[str] = None,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.loader = loader
        self.sort = sort
        self._last_range: Optional[Tuple[int, int]] = None

    # ------------------------------------------------------------------ #
    # geometry
    # ------------------------------------------------------------------ #

    @property
    def visible_rows(self) -> int:
        return max(1, self.scrollable_content_region.height - HEADER_LINES)

    def visible_range(self) -> Tuple[int, int]:
        """Inclusive (start, stop) row indices on screen."""
        start = int(self.scroll_offset.y)
        stop = start + self.visible_rows - 1
        if self.loader.total_known and self.loader.total_count > 0:
            stop = min(stop, self.loader.total_count - 1)
        return start, max(start, stop)

    def refresh_rows(self) -> None:
        """Resize to the current total and repaint."""
        self.virtual_size = Size(ROW_WIDTH, self.loader.total_count + HEADER_LINES)
        self.refresh()

    def reset_scroll(self) -> None:
        self.scroll_to(y=0, animate=False)
        self._last_range = None

    def report_visible_range(self, force: bool = False) -> None:
        """Tell the loader what is on screen, unless nothing moved."""
        current = self.visible_range()
        if not force and current == self._last_range:
            return
        self._last_range = current
        self.loader.on_visible_range_changed(*current)

    # ------------------------------------------------------------------ #
    # textual hooks
    # ------------------------------------------------------------------ #

    def on_mount(self) -> None:
        self.refresh_rows()
        self.call_after_refresh(self.report_visible_range)

    def on_resize(self, event: events.Resize) -> None:
        self.report_visible_range()

    def watch_scroll_y(self, old_value: float, new_value: float) -> None:
        super().watch_scroll_y(old_value, new_value)
        if round(old_value) != round(new_value):
            self.report_visible_range()

    def on_click(self, event: events.Click) -> None:
        if event.y >= HEADER_LINES:
            return
        x = event.x + int(self.scroll_offset.x)
        for key, first, last in COLUMN_SPANS:
            if first <= x <= last:
                self.post_message(self.SortRequested(key))
                return

    # ------------------------------------------------------------------ #
    # rendering
    # ------------------------------------------------------------------ #

    def render_line(self, y: int) -> Strip:
        scroll_x, scroll_y = self.scroll_offset
        width = self.scrollable_content_region.width

        if y < HEADER_LINES:
            line = self._header_line()
            style = self.get_component_rich_style("virtual-list--header")
        else:
            index = int(scroll_y) + y - HEADER_LINES
            if index >= self.loader.total_count:
                return Strip.blank(width, self.rich_style)
            line, style = self._row_line(index)

        strip = Strip([Segment(line.ljust(ROW_WIDTH), style)], ROW_WIDTH)
        return strip.crop(int(scroll_x), int(scroll_x) + width)

    def _header_line(self) -> str:
        cells = []
        for key, label in COLUMNS:
            marker = self.sort.marker(key)
            cells.append(_fit(f"{label} {marker}" if marker else label, key))
        return SEPARATOR.join(cells)

    def _row_line(self, index: int) -> Tuple[str, Style]:
        slot = self.loader.slot(index)
        if not isinstance(slot, Loaded):
            return PENDING_TEXT, self.get_component_rich_style("virtual-list--pending")

        line = SEPARATOR.join(_fit(format_cell(slot.row, key), key) for key, _ in COLUMNS)
        if index % 2:
            return line, self.get_component_rich_style("virtual-list--odd")
        return line, self.rich_style
