from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label

from db.models import PAYMENT_METHODS, Order
from shop.contact import order_followup_link
from utils.pure import format_price


class OrderSuccessModal(ModalScreen[None]):
    """Confirmation shown after checkout, with a WhatsApp follow-up link."""

    def __init__(self, order: Order) -> None:
        super().__init__()
        self.order = order

    def compose(self) -> ComposeResult:
        o = self.order
        with Vertical(id="div-order-success"):
            yield Label("Order placed successfully!", id="label-success-title")
            yield Label(f"Order number: {o.order_number}")
            yield Label(f"Total: {format_price(o.total)}")
            yield Label(
                f"Payment: {PAYMENT_METHODS.get(o.payment_method, o.payment_method)}"
            )
            yield Label("Your order will be delivered within 90 minutes.")
            with Horizontal():
                yield Button("Contact us on WhatsApp", id="btn-whatsapp", variant="success")
                yield Button("Back to Shop", id="btn-close", variant="primary")

    @on(Button.Pressed, "#btn-whatsapp")
    def handle_whatsapp(self) -> None:
        self.app.open_url(order_followup_link(self.order))

    @on(Button.Pressed, "#btn-close")
    def handle_close(self) -> None:
        self.dismiss(None)
