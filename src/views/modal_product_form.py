from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.validation import Integer
from textual.widgets import Button, Input, Label, Select, TextArea

from db.models import Product
from shop.errors import ValidationError
from utils import config

FIELD_WIDGETS = {
    "name": "#input-prod-name",
    "category": "#select-prod-category",
    "price": "#input-prod-price",
    "image": "#input-prod-image",
    "description": "#textarea-prod-descr",
}


class ProductFormModal(ModalScreen[Product | None]):
    """
    Add (product=None) or edit a product. Submits through the catalog manager
    and stays open on validation errors. Returns the saved Product or None.
    """

    def __init__(self, product: Product | None = None) -> None:
        super().__init__()
        self.product = product

    def compose(self) -> ComposeResult:
        title = f"Edit Product #{self.product.id}" if self.product else "Add New Product"
        with VerticalScroll(id="vert-prod-form"):
            yield Label(title, id="label-form-title")
            yield Label("Product Name *")
            yield Input(placeholder="Enter product name", id="input-prod-name")
            yield Label("Category *")
            yield Select(
                [(label, key) for key, label in config.CATEGORIES.items()],
                prompt="Select category",
                id="select-prod-category",
            )
            yield Label("Price (KSh) *")
            yield Input(
                placeholder="Enter price",
                id="input-prod-price",
                type="integer",
                validators=[Integer(minimum=1)],
            )
            yield Label("Image URL")
            yield Input(
                placeholder="Leave blank for the default image", id="input-prod-image"
            )
            yield Label("Description *")
            yield TextArea(id="textarea-prod-descr")
            with Horizontal():
                yield Button("Cancel", id="btn-cancel")
                yield Button(
                    "Update Product" if self.product else "Add Product",
                    id="btn-save",
                    variant="primary",
                )

    def on_mount(self) -> None:
        if self.product:
            p = self.product
            self.query_one("#input-prod-name", Input).value = p.name
            self.query_one("#select-prod-category", Select).value = p.category
            self.query_one("#input-prod-price", Input).value = str(p.price)
            self.query_one("#input-prod-image", Input).value = p.image
            self.query_one("#textarea-prod-descr", TextArea).text = p.description
        self.query_one("#input-prod-name").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    def collect_fields(self) -> dict:
        category = self.query_one("#select-prod-category", Select).value
        return {
            "name": self.query_one("#input-prod-name", Input).value,
            "category": category if isinstance(category, str) else "",
            "price": self.query_one("#input-prod-price", Input).value,
            "image": self.query_one("#input-prod-image", Input).value,
            "description": self.query_one("#textarea-prod-descr", TextArea).text,
        }

    @on(Button.Pressed, "#btn-save")
    @work(exclusive=True)
    async def handle_save(self) -> None:
        for selector in FIELD_WIDGETS.values():
            self.query_one(selector).remove_class("-invalid")

        catalog = self.app.state.catalog
        try:
            if self.product:
                saved = await catalog.update(self.product.id, self.collect_fields())
            else:
                saved = await catalog.create(self.collect_fields())
        except ValidationError as e:
            widget = self.query_one(FIELD_WIDGETS.get(e.field, "#input-prod-name"))
            widget.add_class("-invalid")
            widget.focus()
            self.notify(str(e), title="Error", severity="error")
            return

        if saved is None:
            self.notify("Product no longer exists.", severity="error")
        else:
            verb = "updated" if self.product else "added"
            self.notify(f"Product {verb} successfully!", title="Success")
        self.dismiss(saved)

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(None)
