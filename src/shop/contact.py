# pre-filled WhatsApp deep links; opened by the UI, nothing comes back
from urllib.parse import quote

from db.models import Order, Product
from utils import config


def whatsapp_link(message: str, phone: str = config.CONTACT_PHONE) -> str:
    return f"https://wa.me/{phone}?text={quote(message, safe='')}"


def product_inquiry_link(product: Product) -> str:
    return whatsapp_link(
        f"Hi! I'm interested in the {product.name} "
        f"({config.CURRENCY} {product.price:,}). Can you provide more details?"
    )


def order_followup_link(order: Order) -> str:
    return whatsapp_link(
        f"Hi! I just placed an order ({order.order_number}). "
        "Can you confirm my order details?"
    )
