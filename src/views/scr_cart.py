from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, HorizontalGroup, VerticalScroll
from textual.events import ScreenResume
from textual.message import Message
from textual.widgets import Button, Label, Rule

from db.models import CartLine
from shop import cart as cart_ops
from utils.messages import CartChangedMessage, ModeSwitchedMessage, OrdersChangedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen
from views.modal_checkout import CheckoutModal
from views.modal_dialog import confirm
from views.modal_order_success import OrderSuccessModal


class CartLineActionMessage(Message):
    bubble = True

    def __init__(self, product_id: int, action: str) -> None:
        super().__init__()
        self.product_id = product_id
        self.action = action  # "inc" | "dec" | "remove"


class CartLineActionLabel(Label):
    def __init__(self, product_id: int, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.product_id = product_id

    def action_inc(self):
        self.post_message(CartLineActionMessage(self.product_id, "inc"))

    def action_dec(self):
        self.post_message(CartLineActionMessage(self.product_id, "dec"))

    def action_remove(self):
        self.post_message(CartLineActionMessage(self.product_id, "remove"))


class CartLineWidget(HorizontalGroup):
    def __init__(self, line: CartLine):
        super().__init__()
        self.line = line

    def compose(self):
        pid = self.line.product.id
        with Container(id="div-cart-item-group"):
            with Container(id="div-item"):
                yield Label(self.line.product.name, id="label-item-name")
                yield Label(
                    f"{format_price(self.line.product.price)} x {self.line.quantity}",
                    id="label-item-qty",
                )
                yield Label(format_price(self.line.line_total), id="label-item-price")
            with Container(id="div-actions"):
                yield CartLineActionLabel(pid, "[@click=dec()] - [/]", id="link-item-dec")
                yield CartLineActionLabel(pid, "[@click=inc()] + [/]", id="link-item-inc")
                yield CartLineActionLabel(
                    pid, "[@click=remove()]Remove[/]", id="link-item-remove"
                )


class CartScreen(BaseScreen):
    """
    Cart lines with quantity controls, plus checkout.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield VerticalScroll(id="vertscroll-content")
        yield Label("Total: KSh 0", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Continue Shopping", id="btn-shop")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    @on(CartChangedMessage)
    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    @work(exclusive=True)  # exclusive, else concurrent refreshes mount duplicate ids
    async def handle_cart_change(self):
        cart = self.app.state.cart
        content = self.query_one("#vertscroll-content")

        await content.remove_children()
        await content.mount_all([CartLineWidget(line) for line in cart])
        content.set_class(not cart, "no-items")

        self.query_one("#label-cart-total", Label).update(
            f"Total: {format_price(cart_ops.total_price(cart))}"
            f"  ({cart_ops.total_items(cart)} item(s))"
        )

    @on(CartLineActionMessage)
    @work
    async def handle_line_action(self, message: CartLineActionMessage) -> None:
        line = cart_ops.find_line(self.app.state.cart, message.product_id)
        if line is None:
            return

        state = self.app.state
        if message.action == "inc":
            state.update_quantity(line.product.id, line.quantity + 1)
        elif message.action == "dec" and line.quantity > 1:
            state.update_quantity(line.product.id, line.quantity - 1)
        else:
            if not await self.app.push_screen_wait(
                confirm(f"Remove {line.product.name} from your cart?")
            ):
                return
            state.remove_from_cart(line.product.id)
            self.notify("Item removed from cart.", severity="information")
        self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-clear-cart")
    @work
    async def handle_clear_cart(self) -> None:
        if not self.app.state.cart:
            self.app.notify("Cart is empty.", severity="warning")
            return

        if await self.app.push_screen_wait(
            confirm("Do you really want to remove all items from cart?", tone="error")
        ):
            self.app.state.clear_cart()
            self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-shop")
    async def handle_continue_shopping(self) -> None:
        self.post_message(ModeSwitchedMessage(self.app.current_mode, "catalog"))
        await self.app.switch_mode("catalog")

    @on(Button.Pressed, "#btn-checkout")
    @work
    async def handle_checkout(self) -> None:
        # checkout is never opened on an empty cart; stay here instead
        if not self.app.state.cart:
            self.app.notify("Cart is empty.", severity="warning")
            return

        order = await self.app.push_screen_wait(CheckoutModal())
        self.post_message(CartChangedMessage())
        if order is not None:
            self.post_message(OrdersChangedMessage())
            await self.app.push_screen_wait(OrderSuccessModal(order))
