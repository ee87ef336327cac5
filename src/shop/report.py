from typing import Any, Dict, Iterable

from db.models import ORDER_STATUSES, Order, Product
from utils import config


def store_summary(products: Iterable[Product], orders: Iterable[Order]) -> Dict[str, Any]:
    """
    Figures for the admin overview.
    Revenue counts every order that has not been cancelled.
    """
    products = list(products)
    orders = list(orders)

    per_category = {c: 0 for c in config.CATEGORIES}
    for p in products:
        per_category[p.category] = per_category.get(p.category, 0) + 1

    per_status = {s: 0 for s in ORDER_STATUSES}
    for o in orders:
        per_status[o.status] = per_status.get(o.status, 0) + 1

    return {
        "total_products": len(products),
        "products_per_category": per_category,
        "total_orders": len(orders),
        "orders_per_status": per_status,
        "revenue": sum(o.total for o in orders if o.status != "Cancelled"),
        "items_sold": sum(o.item_count for o in orders if o.status != "Cancelled"),
    }
