"""
Pagination widget for navigating through product pages
"""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button, Label, Select

from product_browser.models.table_state import PAGE_SIZE_CHOICES, Paginator


class Pagination(Horizontal):
    """
    Prev/next buttons, a 'Showing a-b of n' label and a page-size selector
    """

    DEFAULT_CSS = """
    Pagination {
        height: 3;
        content-align: center middle;
    }

    Pagination > Button {
        min-width: 10;
        margin: 0 1;
    }

    Pagination > #page-indicator, Pagination > #showing {
        min-width: 18;
        height: 3;
        content-align: center middle;
    }

    Pagination > #page-size {
        width: 18;
    }
    """

    class PageChanged(Message):
        """A neighbouring page was requested"""
        def __init__(self, page: int) -> None:
            super().__init__()
            self.page = page

    class PageSizeChanged(Message):
        """Another page size was picked"""
        def __init__(self, page_size: int) -> None:
            super().__init__()
            self.page_size = page_size

    def __init__(
        self,
        *,
        page_size: int = 25,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        super().__init__(id=id, classes=classes)
        self._page_size = page_size
        self._page = 1
        self._pages = 1

    def compose(self) -> ComposeResult:
        yield Label("Showing 0-0 of 0", id="showing")
        yield Button("< Prev", id="prev-page", disabled=True)
        yield Label("Page [b]1[/b] of [b]1[/b]", id="page-indicator")
        yield Button("Next >", id="next-page", disabled=True)
        yield Select(
            [(f"{size} / page", size) for size in PAGE_SIZE_CHOICES],
            value=self._page_size,
            allow_blank=False,
            id="page-size",
        )

    def update_from(self, paginator: Paginator) -> None:
        """Mirror the paginator: labels, button states and the remembered page."""
        self._page = paginator.page
        self._pages = paginator.pages

        self.query_one("#showing", Label).update(paginator.showing())
        self.query_one("#page-indicator", Label).update(
            f"Page [b]{paginator.page}[/b] of [b]{paginator.pages}[/b]"
        )
        self.query_one("#prev-page", Button).disabled = not paginator.has_prev()
        self.query_one("#next-page", Button).disabled = not paginator.has_next()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        step = {"prev-page": -1, "next-page": 1}.get(event.button.id or "", 0)
        target = self._page + step
        if step and 1 <= target <= self._pages:
            self.post_message(self.PageChanged(target))

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        if event.value is Select.BLANK or event.value == self._page_size:
            return
        self._page_size = int(event.value)
        self.post_message(self.PageSizeChanged(self._page_size))
