from __future__ import annotations

from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, MarkdownViewer

from db.models import Product
from shop.catalog import search_products
from utils import config
from utils.messages import CatalogChangedMessage
from utils.pure import format_price, generate_markdown_table
from views.base_screen import BaseScreen
from views.modal_dialog import confirm
from views.modal_product_form import ProductFormModal


class AdminProductsScreen(BaseScreen):
    """
    Admin can search products, add new ones, edit or delete the highlighted one.
    """

    current_id: Optional[int] = None

    def __init__(self) -> None:
        super().__init__()
        self._products: List[Product] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield Input(id="input-search", placeholder="Search for product...")
            yield DataTable(id="table-prods")
            yield MarkdownViewer(id="md-prod", show_table_of_contents=False)
            with Horizontal(id="hort-controls"):
                yield Button("Add Product", id="btn-add", variant="success")
                yield Button("Edit", id="btn-edit", variant="primary")
                yield Button("Delete", id="btn-delete", variant="error")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Category", "Price")
        self.query_one("#input-search", Input).focus()

    @on(Input.Changed, "#input-search")
    @on(ScreenResume)
    @on(CatalogChangedMessage)
    def handle_reload(self) -> None:
        self.reload_table(self.query_one("#input-search", Input).value)

    @work(exclusive=True)
    async def reload_table(self, query: str) -> None:
        self._products = await self.app.state.catalog.list()
        table = self.query_one(DataTable)
        table.clear()
        for p in search_products(self._products, query):
            table.add_row(
                p.id,
                p.name,
                config.CATEGORIES.get(p.category, p.category),
                format_price(p.price),
                key=str(p.id),
            )
        if table.row_count == 0:
            self.current_id = None
            self.render_product()

    @on(DataTable.RowHighlighted, "#table-prods")
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        self.current_id = int(event.row_key.value)
        self.render_product()

    def _current(self) -> Optional[Product]:
        for p in self._products:
            if p.id == self.current_id:
                return p
        return None

    @work(exclusive=True, group="detail")
    async def render_product(self) -> None:
        viewer = self.query_one("#md-prod", MarkdownViewer)
        prod = self._current()
        if prod is None:
            await viewer.document.update("### Select a product to manage it.")
            return

        rows = [
            ["ID", prod.id],
            ["Category", config.CATEGORIES.get(prod.category, prod.category)],
            ["Price", format_price(prod.price)],
            ["Image", prod.image],
            ["Description", prod.description],
        ]
        md_table = generate_markdown_table(["Attribute", "Value"], rows, ["l", "l"])
        await viewer.document.update(f"### {prod.name}\n\n" + md_table)

    @on(Button.Pressed, "#btn-add")
    @work
    async def handle_add(self) -> None:
        if await self.app.push_screen_wait(ProductFormModal()):
            self.post_message(CatalogChangedMessage())

    @on(Button.Pressed, "#btn-edit")
    @work
    async def handle_edit(self) -> None:
        prod = self._current()
        if prod is None:
            self.notify("Select a product first.", severity="warning")
            return
        if await self.app.push_screen_wait(ProductFormModal(prod)):
            self.post_message(CatalogChangedMessage())

    @on(Button.Pressed, "#btn-delete")
    @work
    async def handle_delete(self) -> None:
        prod = self._current()
        if prod is None:
            self.notify("Select a product first.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            confirm(f"Delete {prod.name}? This cannot be undone.", tone="error")
        ):
            return
        await self.app.state.catalog.delete(prod.id)
        self.notify("Product deleted successfully!", title="Success")
        self.post_message(CatalogChangedMessage())
