from textual import on, work
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import ScreenResume
from textual.widgets import MarkdownViewer

from shop.report import store_summary
from utils import config
from utils.messages import CatalogChangedMessage, ModeSwitchedMessage, OrdersChangedMessage
from utils.pure import format_price, generate_markdown_table
from views.base_screen import BaseScreen


class AdminOverviewScreen(BaseScreen):
    """
    Admin dashboard: product counts, order counts by status, revenue.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-overview", show_table_of_contents=False)

    def on_mount(self) -> None:
        self.handle_reload()

    @on(OrdersChangedMessage)
    @on(CatalogChangedMessage)
    @on(ScreenResume)
    @on(ModeSwitchedMessage)
    @work(exclusive=True)
    async def handle_reload(self) -> None:
        state = self.app.state
        summary = store_summary(await state.catalog.list(), await state.orders.list())

        category_rows = [
            [config.CATEGORIES.get(k, k), n]
            for k, n in summary["products_per_category"].items()
        ]
        status_rows = [[s, n] for s, n in summary["orders_per_status"].items()]

        md = (
            "### Store Overview\n\n"
            f"- Total Products: {summary['total_products']}\n"
            f"- Total Orders: {summary['total_orders']}\n"
            f"- Items Sold: {summary['items_sold']}\n"
            f"- Revenue (excl. cancelled): {format_price(summary['revenue'])}\n\n"
            "#### Products by Category\n\n"
            + generate_markdown_table(["Category", "Products"], category_rows, ["l", "r"])
            + "\n\n#### Orders by Status\n\n"
            + generate_markdown_table(["Status", "Orders"], status_rows, ["l", "r"])
        )
        await self.query_one("#md-overview", MarkdownViewer).document.update(md)
