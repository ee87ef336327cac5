# provide dataclass models and their plain-dict (JSON) records

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Literal, Tuple

OrderStatus = Literal[
    "Processing", "Confirmed", "Out for Delivery", "Delivered", "Cancelled"
]
ORDER_STATUSES: Tuple[str, ...] = (
    "Processing",
    "Confirmed",
    "Out for Delivery",
    "Delivered",
    "Cancelled",
)

PAYMENT_METHODS = {"mpesa": "M-Pesa", "cod": "Cash on Delivery"}


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    category: str
    price: int
    image: str
    description: str

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> Product:
        return cls(
            id=int(rec["id"]),
            name=str(rec["name"]),
            category=str(rec["category"]),
            price=int(rec["price"]),
            image=str(rec.get("image", "")),
            description=str(rec.get("description", "")),
        )


@dataclass(frozen=True)
class CartLine:
    product: Product  # denormalized copy taken when the line was created
    quantity: int

    @property
    def line_total(self) -> int:
        return self.product.price * self.quantity

    def to_record(self) -> Dict[str, Any]:
        return {**self.product.to_record(), "quantity": self.quantity}

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> CartLine:
        return cls(product=Product.from_record(rec), quantity=int(rec["quantity"]))


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str
    is_admin: bool = False

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "isAdmin": self.is_admin,
        }

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> User:
        return cls(
            id=int(rec["id"]),
            name=str(rec["name"]),
            email=str(rec["email"]),
            is_admin=bool(rec.get("isAdmin", False)),
        )


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    area: str = ""

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> CustomerInfo:
        return cls(
            name=str(rec.get("name", "")),
            email=str(rec.get("email", "")),
            phone=str(rec.get("phone", "")),
            address=str(rec.get("address", "")),
            area=str(rec.get("area", "")),
        )


@dataclass(frozen=True)
class Order:
    id: int
    customer: CustomerInfo
    items: Tuple[CartLine, ...]
    subtotal: int
    delivery_fee: int
    total: int
    payment_method: str
    status: str
    created_at: datetime
    transaction_id: str = ""

    @property
    def order_number(self) -> str:
        """Short customer-facing reference, e.g. UA123456."""
        return f"UA{str(self.id)[-6:]}"

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    def with_status(self, status: str) -> Order:
        return replace(self, status=status)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "customer": self.customer.to_record(),
            "items": [line.to_record() for line in self.items],
            "subtotal": self.subtotal,
            "deliveryFee": self.delivery_fee,
            "total": self.total,
            "paymentMethod": self.payment_method,
            "status": self.status,
            "date": self.created_at.isoformat(),
            "transactionId": self.transaction_id,
        }

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> Order:
        return cls(
            id=int(rec["id"]),
            customer=CustomerInfo.from_record(rec.get("customer") or {}),
            items=tuple(CartLine.from_record(r) for r in rec["items"]),
            subtotal=int(rec["subtotal"]),
            delivery_fee=int(rec.get("deliveryFee", 0)),
            total=int(rec["total"]),
            payment_method=str(rec.get("paymentMethod", "")),
            status=str(rec.get("status", "Processing")),
            created_at=datetime.fromisoformat(rec["date"]),
            transaction_id=str(rec.get("transactionId", "")),
        )


@dataclass(frozen=True)
class Cart:
    """The active session's cart; replaced wholesale on every change."""

    lines: Tuple[CartLine, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def __bool__(self) -> bool:
        return bool(self.lines)
