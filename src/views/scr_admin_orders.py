from math import ceil
from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.reactive import reactive
from textual.widgets import Button, DataTable, Label, MarkdownViewer, Select

from db.models import ORDER_STATUSES, PAYMENT_METHODS, Order
from shop.orders import DELIVERY_AREAS
from utils.messages import ModeSwitchedMessage, OrdersChangedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen

PAGE_SIZE = 5


class AdminOrdersScreen(BaseScreen):
    """
    Admin browses all orders (newest first, paginated), views details and
    sets the status of the highlighted order.
    """

    page_idx = reactive(1, init=False)
    page_cnt = reactive(1)

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []
        self._selected: Order | None = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield DataTable(id="table-orders")
        with Horizontal(id="hort-table-control"):
            yield Button("<", id="btn-prev")
            yield Label(" 1 / 1 ", id="label-page")
            yield Button(">", id="btn-next")
            yield Select(
                [(s, s) for s in ORDER_STATUSES],
                prompt="Set status",
                id="select-status",
            )
            yield Button("Update Status", id="btn-status", variant="primary")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Date", "Customer", "Items", "Total", "Status")

    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    @on(OrdersChangedMessage)
    def handle_refresh(self):
        self._load_orders(self.page_idx)

    def watch_page_idx(self, old: int, new: int) -> None:
        self._load_orders(new)

    def _refresh_buttons(self) -> None:
        self.query_one("#btn-prev", Button).disabled = self.page_idx <= 1
        self.query_one("#btn-next", Button).disabled = self.page_idx >= self.page_cnt
        self.query_one("#label-page", Label).update(
            f" {self.page_idx} / {self.page_cnt} "
        )

    @on(Button.Pressed, "#btn-prev")
    def handle_prev(self) -> None:
        if self.page_idx > 1:
            self.page_idx -= 1

    @on(Button.Pressed, "#btn-next")
    def handle_next(self) -> None:
        if self.page_idx < self.page_cnt:
            self.page_idx += 1

    @work(exclusive=True, group="orders")
    async def _load_orders(self, page: int) -> None:
        orders = list(reversed(await self.app.state.orders.list()))
        self.page_cnt = max(ceil(len(orders) / PAGE_SIZE), 1)
        page = min(page, self.page_cnt)
        self.set_reactive(AdminOrdersScreen.page_idx, page)
        self._orders = orders[(page - 1) * PAGE_SIZE : page * PAGE_SIZE]

        table = self.query_one(DataTable)
        table.clear()
        for o in self._orders:
            table.add_row(
                o.order_number,
                o.created_at.strftime("%Y-%m-%d %H:%M"),
                o.customer.name,
                o.item_count,
                format_price(o.total),
                o.status,
                key=str(o.id),
            )
        self._refresh_buttons()
        if not self._orders:
            self._render_detail(None)

    @on(DataTable.RowHighlighted, "#table-orders")
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        order_id = int(event.row_key.value)
        self._selected = next((o for o in self._orders if o.id == order_id), None)
        self._render_detail(self._selected)

    def _render_detail(self, order: Order | None) -> None:
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        if order is None:
            viewer.document.update("### Select an order to view its details.")
            return

        c = order.customer
        area = DELIVERY_AREAS.get(c.area, c.area or "-")
        payment = PAYMENT_METHODS.get(order.payment_method, order.payment_method)
        header = (
            f"### Order {order.order_number} ({order.status})\n"
            f"Date: {order.created_at:%Y-%m-%d %H:%M}  \n"
            f"Customer: {c.name} {c.email}  \n"
            f"Deliver to: {c.address}, {area}  \n"
            f"Payment: {payment} {c.phone} {order.transaction_id}\n\n"
        )
        rows = [
            "| Product | Qty | Unit Price | Line Total |",
            "|:---|---:|---:|---:|",
        ]
        for line in order.items:
            rows.append(
                f"| {line.product.name} | {line.quantity} "
                f"| {format_price(line.product.price)} | {format_price(line.line_total)} |"
            )
        footer = (
            f"\n\nSubtotal: {format_price(order.subtotal)}  \n"
            f"Delivery: {format_price(order.delivery_fee)}  \n"
            f"**Total:** {format_price(order.total)}"
        )
        viewer.document.update(header + "\n".join(rows) + footer)

    @on(Button.Pressed, "#btn-status")
    @work(exclusive=True, group="status")
    async def handle_update_status(self) -> None:
        status = self.query_one("#select-status", Select).value
        if self._selected is None or not isinstance(status, str):
            self.notify("Select an order and a status first.", severity="warning")
            return

        if await self.app.state.orders.update_status(self._selected.id, status):
            self.notify(f"Order {self._selected.order_number} marked {status}.")
        else:
            self.notify("Order no longer exists.", severity="error")
        self._load_orders(self.page_idx)
