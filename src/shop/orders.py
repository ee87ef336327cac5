from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, List, Optional, Protocol

from db.models import ORDER_STATUSES, Cart, CustomerInfo, Order
from db.store import KeyValueStore
from shop import cart as cart_ops
from shop.errors import EmptyCartError, PaymentFailedError, ValidationError
from shop.payment import PaymentGateway, SimulatedMpesaGateway
from utils import config
from utils.logger import get_logger
from utils.pure import timestamp_id

_logger = get_logger(__name__)

# ---------------------------
# Delivery fees
# ---------------------------

DELIVERY_AREAS: Dict[str, str] = {
    "city-center": "Nairobi City Center",
    "westlands": "Westlands",
    "karen": "Karen",
    "kiambu": "Kiambu",
    "thika": "Thika",
    "other": "Other Areas",
}


class DeliveryFeePolicy(Protocol):
    requires_area: bool

    def fee_for(self, area: str) -> int: ...


class AreaDeliveryFees:
    FEES: Dict[str, int] = {
        "city-center": 150,
        "westlands": 200,
        "karen": 300,
        "kiambu": 400,
        "thika": 500,
        "other": 350,
    }
    UNKNOWN_AREA_FEE = 350
    # shown in the summary before an area is picked; checkout requires one
    NO_AREA_FEE = 200
    requires_area = True

    def fee_for(self, area: str) -> int:
        if not area:
            return self.NO_AREA_FEE
        return self.FEES.get(area, self.UNKNOWN_AREA_FEE)


class FlatDeliveryFee:
    requires_area = False

    def __init__(self, amount: int = 0) -> None:
        self.amount = amount

    def fee_for(self, area: str) -> int:
        return self.amount


def delivery_policy_from_config(mode: str = config.DELIVERY_FEE_MODE) -> DeliveryFeePolicy:
    if mode == "flat":
        return FlatDeliveryFee(0)
    return AreaDeliveryFees()


# ---------------------------
# Orders
# ---------------------------


def validate_checkout(
    cart: Cart,
    customer: CustomerInfo,
    payment_method: str,
    requires_area: bool = False,
) -> None:
    if not cart:
        raise EmptyCartError("Your cart is empty.")
    if not customer.name.strip():
        raise ValidationError("missing_field", "name")
    if not customer.address.strip():
        raise ValidationError("missing_field", "address")
    if requires_area and not customer.area:
        raise ValidationError(
            "missing_field", "area", "Please select your delivery area."
        )
    if not (payment_method or "").strip():
        raise ValidationError("missing_field", "payment_method")
    if payment_method == "mpesa" and not customer.phone.strip():
        raise ValidationError(
            "missing_field", "phone", "Please enter your M-Pesa phone number."
        )


class OrderManager:
    """Owns the persisted order list."""

    def __init__(
        self,
        store: KeyValueStore,
        gateway: Optional[PaymentGateway] = None,
        delivery_fees: Optional[DeliveryFeePolicy] = None,
        clock: Callable[[], datetime] = datetime.now,
        key: str = config.ORDERS_KEY,
    ) -> None:
        self._store = store
        self._gateway = gateway or SimulatedMpesaGateway()
        self.delivery_fees = delivery_fees or delivery_policy_from_config()
        self._clock = clock
        self._key = key

    async def list(self) -> List[Order]:
        """All orders in insertion order; an unreadable record reads as empty."""
        raw = await self._store.get(self._key)
        if not isinstance(raw, list):
            return []
        try:
            return [Order.from_record(rec) for rec in raw]
        except (KeyError, TypeError, ValueError, AttributeError):
            _logger.warning("Stored orders are malformed; treating as empty.")
            return []

    async def _save(self, orders: List[Order]) -> None:
        await self._store.set(self._key, [o.to_record() for o in orders])

    async def get(self, order_id: int) -> Optional[Order]:
        for o in await self.list():
            if o.id == order_id:
                return o
        return None

    def validate(self, cart: Cart, customer: CustomerInfo, payment_method: str) -> None:
        """Raise the error place_order would raise, without paying or writing."""
        validate_checkout(
            cart, customer, payment_method, self.delivery_fees.requires_area
        )

    def quote(self, cart: Cart, area: str = "") -> Dict[str, int]:
        """Subtotal, delivery fee and total for the checkout summary."""
        subtotal = cart_ops.total_price(cart)
        fee = self.delivery_fees.fee_for(area)
        return {"subtotal": subtotal, "delivery_fee": fee, "total": subtotal + fee}

    async def place_order(
        self, cart: Cart, customer: CustomerInfo, payment_method: str
    ) -> Order:
        """
        Turn a cart snapshot into a persisted Order with status Processing.

        For "mpesa" the payment prompt is awaited first; if it is declined,
        PaymentFailedError is raised and nothing is written. Clearing the
        cart is left to the caller.
        """
        self.validate(cart, customer, payment_method)
        quote = self.quote(cart, customer.area)

        transaction_id = ""
        if payment_method == "mpesa":
            result = await self._gateway.request_payment(customer.phone, quote["total"])
            if not result.success:
                raise PaymentFailedError(result.error or "M-Pesa payment failed.")
            transaction_id = result.transaction_id

        orders = await self.list()
        order = Order(
            id=timestamp_id(o.id for o in orders),
            customer=customer,
            items=cart.lines,
            subtotal=quote["subtotal"],
            delivery_fee=quote["delivery_fee"],
            total=quote["total"],
            payment_method=payment_method,
            status="Processing",
            created_at=self._clock(),
            transaction_id=transaction_id,
        )
        orders.append(order)
        await self._save(orders)
        _logger.info(
            f"Order {order.order_number} placed by {customer.name}: "
            f"{order.item_count} item(s), total {order.total}."
        )
        return order

    async def update_status(self, order_id: int, status: str) -> bool:
        """Overwrite one order's status. Any status may follow any other."""
        if status not in ORDER_STATUSES:
            raise ValidationError("invalid_status", "status")
        orders = await self.list()
        for i, o in enumerate(orders):
            if o.id == order_id:
                orders[i] = o.with_status(status)
                await self._save(orders)
                _logger.info(f"Order {o.order_number}: {o.status} -> {status}.")
                return True
        return False
