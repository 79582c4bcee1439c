# product_browser/ui/mixins/table_controls_mixin.py

from typing import Dict

from product_browser.models.table_state import TableFilters, TableSort
from product_browser.ui.widgets.filter_bar import FilterBar


class TableControlsMixin:
    """Mixin holding sort/filter state for the product screens"""

    sort: TableSort
    filters: TableFilters

    def _init_table_controls(self) -> None:
        self.sort = TableSort()
        self.filters = TableFilters()

    def apply_sort(self, column: str) -> None:
        """Header click: toggle the sort and reload"""
        self.sort.toggle(column)
        self.on_table_controls_changed()

    def apply_filters(self, filters: Dict[str, str]) -> None:
        """Settled filter values: replace them and reload"""
        self.filters.clear()
        for column, value in filters.items():
            self.filters.set(column, value)
        self.on_table_controls_changed()

    def on_table_controls_changed(self) -> None:
        raise NotImplementedError("Screens must implement this method")

    def on_filter_bar_changed(self, event: FilterBar.Changed) -> None:
        self.apply_filters(event.filters)

    def action_focus_filters(self) -> None:
        self.query_one(FilterBar).focus_first()

    def action_clear_filters(self) -> None:
        """Empty the filter inputs; FilterBar posts the change"""
        self.query_one(FilterBar).clear()

    def action_focus_table(self) -> None:
        """Leave the filter inputs; AUTO_FOCUS names the screen's table"""
        self.query_one(self.AUTO_FOCUS).focus()
