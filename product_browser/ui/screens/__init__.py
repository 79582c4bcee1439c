from product_browser.ui.screens.long_screen import LongScreen
from product_browser.ui.screens.on_demand_screen import OnDemandScreen
from product_browser.ui.screens.paginated_screen import PaginatedScreen

__all__ = ["LongScreen", "OnDemandScreen", "PaginatedScreen"]
