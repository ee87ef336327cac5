from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.widgets import DataTable, Input, Label, Select

from shop.catalog import search_products
from utils import config
from utils.messages import CartChangedMessage, CatalogChangedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen
from views.modal_prod_detail import ProdDetailModal

CATEGORY_OPTIONS = [("All Products", "all")] + [
    (label, key) for key, label in config.CATEGORIES.items()
]


class CatalogScreen(BaseScreen):
    """
    Product listing with category tabs and keyword filter, for everyone.
    """

    # only here to be displayed in the footer
    BINDINGS = [
        Binding("enter", "noop", "View Product", show=True, key_display="⏎"),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-filters"):
            yield Input(id="input-search", placeholder="Search products...")
            yield Select(
                CATEGORY_OPTIONS, value="all", allow_blank=False, id="select-category"
            )
        yield DataTable(id="table-products")
        yield Label("", id="label-result-cnt")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Category", "Price")

        self.query_one("#input-search").focus()

    def action_noop(self) -> None:
        pass

    @on(Input.Changed, "#input-search")
    @on(Select.Changed, "#select-category")
    @on(ScreenResume)
    @on(CatalogChangedMessage)
    def handle_filter_change(self) -> None:
        self.update_listing(
            self.query_one("#input-search", Input).value,
            self.query_one("#select-category", Select).value,
        )

    @work(exclusive=True)
    async def update_listing(self, query: str, category: str) -> None:
        products = await self.app.state.catalog.list()
        found = search_products(products, query, category)

        table = self.query_one(DataTable)
        table.clear()
        for p in found:
            table.add_row(
                p.id,
                p.name,
                config.CATEGORIES.get(p.category, p.category),
                format_price(p.price),
                key=str(p.id),
            )
        self.query_one("#label-result-cnt", Label).update(
            f"{len(found)} of {len(products)} products"
        )

    @on(DataTable.RowSelected, "#table-products")
    @work
    async def handle_view_product(self, event: DataTable.RowSelected) -> None:
        product_id = int(event.row_key.value)
        if await self.app.push_screen_wait(ProdDetailModal(product_id)):
            self.post_message(CartChangedMessage())
