"""
Main Textual application class for the Product Browser
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from textual.app import App
from textual.binding import Binding

from product_browser.config import VIEWS
from product_browser.di import Container, build_container
from product_browser.ui.screens.long_screen import LongScreen
from product_browser.ui.screens.on_demand_screen import OnDemandScreen
from product_browser.ui.screens.paginated_screen import PaginatedScreen
from simple_logger import Slogger


class ProductBrowserApp(App):
    """Browse a large product table three ways: paginated, on-demand, all at once."""

    CSS_PATH = "css/main.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("1", "show_view('paginated')", "Paginated", show=True),
        Binding("2", "show_view('on-demand')", "On Demand", show=True),
        Binding("3", "show_view('long')", "Long", show=True),
        Binding("f", "focus_filters", "Filter", show=True),
        Binding("c", "clear_filters", "Clear Filters", show=True),
    ]

    # ------------------------------------------------------------------ #
    # init / mount
    # ------------------------------------------------------------------ #

    def __init__(self, config: Dict[str, Any], container: Optional[Container] = None) -> None:
        super().__init__()
        self.config = config
        self.container: Container = container or build_container(config)
        self.current_view: Optional[str] = None

    def on_mount(self) -> None:
        inserted = self.container.seed()
        if inserted:
            Slogger.info("Seeded product table", {"rows": inserted})

        service = self.container.product_service
        self.install_screen(PaginatedScreen(service, self.config), name="paginated")
        self.install_screen(OnDemandScreen(self.container), name="on-demand")
        self.install_screen(LongScreen(service, self.config), name="long")

        self.action_show_view(self.config.get("ui", {}).get("default_view", "paginated"))

    def on_unmount(self) -> None:
        self.container.close()

    # ------------------------------------------------------------------ #
    # key-binding actions
    # ------------------------------------------------------------------ #

    def action_show_view(self, view: str) -> None:
        if view not in VIEWS:
            self.notify(f"Unknown view: {view}", severity="error")
            return
        if view == self.current_view:
            return

        Slogger.info("Switching view", {"from": self.current_view, "to": view})
        if self.current_view is None:
            self.push_screen(view)
        else:
            self.switch_screen(view)
        self.current_view = view

    def action_focus_filters(self) -> None:
        if hasattr(self.screen, "action_focus_filters"):
            self.screen.action_focus_filters()

    def action_clear_filters(self) -> None:
        if hasattr(self.screen, "action_clear_filters"):
            self.screen.action_clear_filters()
