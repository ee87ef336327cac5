from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from db.models import Cart, CustomerInfo, Order, Product
from db.store import KeyValueStore, SqliteKeyValueStore
from shop import cart as cart_ops
from shop.catalog import CatalogManager
from shop.orders import OrderManager
from shop.payment import PaymentGateway
from shop.session import IdentityVerifier, SessionManager
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass
class AppState:
    """
    Composition root shared by screens.

    Fields:
      - store: the key-value port every manager persists through
      - session / catalog / orders: managers owning their collections
      - cart: the active session's cart, replaced on every change
    """

    store: KeyValueStore
    session: SessionManager
    catalog: CatalogManager
    orders: OrderManager
    cart: Cart = field(default_factory=Cart)

    @classmethod
    def create(
        cls,
        store: Optional[KeyValueStore] = None,
        verifier: Optional[IdentityVerifier] = None,
        gateway: Optional[PaymentGateway] = None,
        **order_kwargs,
    ) -> AppState:
        store = store or SqliteKeyValueStore()
        return cls(
            store=store,
            session=SessionManager(store, verifier),
            catalog=CatalogManager(store),
            orders=OrderManager(store, gateway, **order_kwargs),
        )

    async def start(self) -> None:
        """Restore the persisted session and make sure the catalog is seeded."""
        await self.session.load()
        await self.catalog.list()

    async def logout(self) -> None:
        await self.session.logout()
        self.cart = cart_ops.clear_cart(self.cart)

    # ---------------------------
    # Cart
    # ---------------------------

    def add_to_cart(self, product: Product) -> None:
        self.cart = cart_ops.add_to_cart(self.cart, product)

    def remove_from_cart(self, product_id: int) -> None:
        self.cart = cart_ops.remove_from_cart(self.cart, product_id)

    def update_quantity(self, product_id: int, quantity: int) -> None:
        self.cart = cart_ops.update_quantity(self.cart, product_id, quantity)

    def clear_cart(self) -> None:
        self.cart = cart_ops.clear_cart(self.cart)

    # ---------------------------
    # Checkout
    # ---------------------------

    def customer_defaults(self) -> CustomerInfo:
        user = self.session.user
        if user is None:
            return CustomerInfo(name="")
        return CustomerInfo(name=user.name, email=user.email)

    async def checkout(self, customer: CustomerInfo, payment_method: str) -> Order:
        """
        Place an order from the current cart, then empty the cart.
        On any error the cart is left as it was.
        """
        order = await self.orders.place_order(self.cart, customer, payment_method)
        self.clear_cart()
        return order
