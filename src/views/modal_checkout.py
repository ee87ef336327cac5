from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, MarkdownViewer, RadioButton, RadioSet, Select

from db.models import CustomerInfo, Order
from shop.errors import PaymentFailedError, ShopError, ValidationError
from shop.orders import DELIVERY_AREAS
from utils.pure import format_price, generate_markdown_table
from views.modal_dialog import confirm

FIELD_INPUTS = {
    "name": "#input-name",
    "address": "#input-address",
    "area": "#select-area",
    "phone": "#input-phone",
}


class CheckoutModal(ModalScreen[Order | None]):
    """
    Delivery details, payment method and order summary.
    Returns the placed Order, or None if the customer backed out or payment failed.
    """

    _processing = False

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-checkout"):
            with VerticalScroll(id="vert-checkout-form"):
                yield Label("Full Name *")
                yield Input(id="input-name")
                yield Label("Email")
                yield Input(id="input-email")
                yield Label("Delivery Area *")
                yield Select(
                    [(label, key) for key, label in DELIVERY_AREAS.items()],
                    prompt="Select your area",
                    id="select-area",
                )
                yield Label("Detailed Address *")
                yield Input(placeholder="Building, street, house number", id="input-address")
                yield Label("Payment Method")
                with RadioSet(id="radio-payment"):
                    yield RadioButton("M-Pesa Payment", value=True, id="radio-mpesa")
                    yield RadioButton("Cash on Delivery", id="radio-cod")
                yield Label("M-Pesa Phone Number *", id="label-phone")
                yield Input(placeholder="07XXXXXXXX or 254XXXXXXXX", id="input-phone")
            with Vertical(id="vert-checkout-summary"):
                yield MarkdownViewer("", show_table_of_contents=False)
                with Horizontal():
                    yield Button("Go Back", id="btn-quit")
                    yield Button("Place Order", id="btn-submit", variant="primary")

    async def on_mount(self):
        defaults = self.app.state.customer_defaults()
        self.query_one("#input-name", Input).value = defaults.name
        self.query_one("#input-email", Input).value = defaults.email
        await self.render_summary()
        self.query_one("#input-address").focus()

    @property
    def payment_method(self) -> str:
        pressed = self.query_one("#radio-payment", RadioSet).pressed_button
        return "cod" if pressed is not None and pressed.id == "radio-cod" else "mpesa"

    @property
    def area(self) -> str:
        value = self.query_one("#select-area", Select).value
        return value if isinstance(value, str) else ""

    def collect_customer(self) -> CustomerInfo:
        def val(selector: str) -> str:
            return self.query_one(selector, Input).value.strip()

        return CustomerInfo(
            name=val("#input-name"),
            email=val("#input-email"),
            phone=val("#input-phone") if self.payment_method == "mpesa" else "",
            address=val("#input-address"),
            area=self.area,
        )

    @on(Select.Changed, "#select-area")
    async def render_summary(self) -> None:
        cart = self.app.state.cart
        quote = self.app.state.orders.quote(cart, self.area)
        rows = [
            [line.product.name, line.quantity, format_price(line.line_total)]
            for line in cart
        ]
        md = "### Order Summary\n\n" + generate_markdown_table(
            ["Product", "Qty", "Price"], rows, ["l", "c", "r"]
        )
        area_label = DELIVERY_AREAS.get(self.area, "Select area")
        md += (
            f"\n\n**Subtotal:** {format_price(quote['subtotal'])}  \n"
            f"**Delivery ({area_label}):** {format_price(quote['delivery_fee'])}  \n"
            f"**Total:** {format_price(quote['total'])}\n\n"
            "Delivery within 90 minutes."
        )
        await self.query_one(MarkdownViewer).document.update(md)

    @on(RadioSet.Changed, "#radio-payment")
    def handle_payment_change(self) -> None:
        is_mpesa = self.payment_method == "mpesa"
        self.query_one("#label-phone").display = is_mpesa
        self.query_one("#input-phone").display = is_mpesa

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.handle_quit()

    def _mark_invalid(self, field: str | None) -> None:
        selector = FIELD_INPUTS.get(field or "")
        if selector:
            widget = self.query_one(selector)
            widget.add_class("-invalid")
            widget.focus()

    def _set_processing(self, flag: bool) -> None:
        # the payment prompt must resolve before the modal can close
        self._processing = flag
        submit = self.query_one("#btn-submit", Button)
        submit.disabled = flag
        submit.label = "Processing..." if flag else "Place Order"
        self.query_one("#btn-quit", Button).disabled = flag

    def _report(self, error: ShopError) -> None:
        if isinstance(error, ValidationError):
            self._mark_invalid(error.field)
            self.notify(str(error), title="Error", severity="error")
        elif isinstance(error, PaymentFailedError):
            self.notify(
                "M-Pesa payment failed. Please try again.",
                title="Payment Failed",
                severity="error",
            )
        else:
            self.notify(str(error), severity="warning")
            self.dismiss(None)

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        for selector in FIELD_INPUTS.values():
            self.query_one(selector).remove_class("-invalid")

        state = self.app.state
        customer = self.collect_customer()
        method = self.payment_method
        try:
            state.orders.validate(state.cart, customer, method)
        except ShopError as e:
            self._report(e)
            return

        total = state.orders.quote(state.cart, customer.area)["total"]
        if not await self.app.push_screen_wait(
            confirm(f"Place order for {format_price(total)}?", tone="positive")
        ):
            return

        self._set_processing(True)
        if method == "mpesa":
            self.notify(
                f"Please check your phone {customer.phone} for an M-Pesa prompt "
                f"of {format_price(total)}.",
                title="M-Pesa Prompt Sent",
            )

        try:
            order = await state.checkout(customer, method)
        except ShopError as e:
            self._set_processing(False)
            self._report(e)
            return

        self._processing = False
        if method == "mpesa":
            self.notify("M-Pesa payment completed successfully!", title="Payment Successful")
        self.notify(
            "Your order is being processed and will be delivered within 90 minutes.",
            title="Order placed successfully!",
        )
        self.dismiss(order)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        if self._processing:
            self.notify("Waiting for the M-Pesa payment to complete.", severity="warning")
            return
        self.dismiss(None)
