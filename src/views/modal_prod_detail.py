from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, MarkdownViewer

from db.models import Product
from shop import cart as cart_ops
from shop.contact import product_inquiry_link
from utils import config
from utils.pure import format_price, generate_markdown_table


class ProdDetailModal(ModalScreen[bool]):
    """
    Product detail with add-to-cart and a WhatsApp inquiry link.
    Returns True if the cart changed.
    """

    def __init__(self, product_id: int) -> None:
        super().__init__()

        self._product_id = product_id
        self._prod: Product | None = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-prod-detail"):
            yield MarkdownViewer("", show_table_of_contents=False)
            with Vertical(id="vert-prod-actions"):
                yield Label("", id="label-in-cart")
                yield Button("Add to Cart", id="btn-addcart", variant="primary")
                yield Button("Ask on WhatsApp", id="btn-whatsapp", variant="success")
                yield Button("Go Back", id="btn-quit")

    async def on_mount(self):
        self._prod = await self.app.state.catalog.get(self._product_id)
        if self._prod is None:
            self.notify("Product not found.", severity="error")
            self.dismiss(False)
            return

        p = self._prod
        rows = [
            ["Category", config.CATEGORIES.get(p.category, p.category)],
            ["Price", format_price(p.price)],
            ["Description", p.description],
            ["Image", p.image],
        ]
        md = f"### {p.name}\n\n" + generate_markdown_table(
            ["Attribute", "Value"], rows, ["l", "l"]
        )
        await self.query_one(MarkdownViewer).document.update(md)
        self._show_cart_qty()
        self.query_one("#btn-addcart").focus()

    def _show_cart_qty(self) -> None:
        line = cart_ops.find_line(self.app.state.cart, self._product_id)
        self.query_one("#label-in-cart", Label).update(
            f"In cart: {line.quantity}" if line else "Not in cart"
        )

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)

    @on(Button.Pressed, "#btn-whatsapp")
    def handle_whatsapp(self):
        self.app.open_url(product_inquiry_link(self._prod))

    @on(Button.Pressed, "#btn-addcart")
    def handle_addcart(self):
        self.app.state.add_to_cart(self._prod)
        self.app.notify(f"{self._prod.name} has been added to your cart.")
        self.dismiss(True)
