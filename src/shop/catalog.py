from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

from db.models import Product
from db.store import KeyValueStore
from shop.errors import ValidationError
from utils import config
from utils.logger import get_logger
from utils.pure import timestamp_id

_logger = get_logger(__name__)

_IMG = "https://images.unsplash.com/photo-{}?w=400&h=400&fit=crop"

DEFAULT_PRODUCTS: List[Product] = [
    Product(
        1,
        "Clear iPhone 15 Case",
        "iphone-cases",
        2500,
        _IMG.format("1601784551446-20c9e07cdbdb"),
        "Crystal clear protection for your iPhone 15",
    ),
    Product(
        2,
        "Leather iPhone 15 Pro Case",
        "iphone-cases",
        4500,
        _IMG.format("1556656793-08538906a9f8"),
        "Premium leather case with card slots",
    ),
    Product(
        3,
        "MagSafe iPhone 14 Case",
        "iphone-cases",
        3500,
        _IMG.format("1592779677260-dea1358c09d3"),
        "Compatible with MagSafe charging",
    ),
    Product(
        4,
        "Aviator Sunglasses",
        "sunglasses",
        6500,
        _IMG.format("1572635196237-14b3f281503f"),
        "Classic aviator style with UV protection",
    ),
    Product(
        5,
        "Polarized Sport Sunglasses",
        "sunglasses",
        8500,
        _IMG.format("1511499767150-a48a237f0083"),
        "Perfect for outdoor activities",
    ),
    Product(
        6,
        "Vintage Round Sunglasses",
        "sunglasses",
        5500,
        _IMG.format("1508296695146-257a814070b4"),
        "Retro style meets modern protection",
    ),
]


def _parse_price(raw: Any) -> int:
    text = str(raw if raw is not None else "").strip()
    if not text:
        raise ValidationError("missing_field", "price")
    try:
        price = int(text)
    except ValueError:
        raise ValidationError("invalid_price", "price") from None
    if price <= 0:
        raise ValidationError("invalid_price", "price")
    return price


def validate_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check admin form input and return the normalized mutable fields.
    Raises ValidationError on the first problem found.
    """
    cleaned: Dict[str, Any] = {}
    for name in ("name", "category", "description"):
        value = str(fields.get(name) or "").strip()
        if not value:
            raise ValidationError("missing_field", name)
        cleaned[name] = value
    if cleaned["category"] not in config.CATEGORIES:
        raise ValidationError("invalid_category", "category")
    cleaned["price"] = _parse_price(fields.get("price"))
    cleaned["image"] = str(fields.get("image") or "").strip()
    return cleaned


def search_products(
    products: List[Product], query: str = "", category: str = "all"
) -> List[Product]:
    """
    Category tab filter plus a case-insensitive keyword match over name and
    description. Every whitespace-separated word must match somewhere.
    """
    words = (query or "").strip().lower().split()
    result = []
    for p in products:
        if category not in ("all", "", None) and p.category != category:
            continue
        haystack = f"{p.name} {p.description}".lower()
        if all(w in haystack for w in words):
            result.append(p)
    return result


class CatalogManager:
    """Owns the persisted product list."""

    def __init__(self, store: KeyValueStore, key: str = config.PRODUCTS_KEY):
        self._store = store
        self._key = key

    async def _load(self) -> Optional[List[Product]]:
        raw = await self._store.get(self._key)
        if not isinstance(raw, list):
            return None
        try:
            products = [Product.from_record(rec) for rec in raw]
        except (KeyError, TypeError, ValueError, AttributeError):
            _logger.warning("Stored catalog is malformed; reseeding defaults.")
            return None

        ids = [p.id for p in products]
        if len(set(ids)) != len(ids) or any(p.price <= 0 for p in products):
            _logger.warning("Stored catalog has duplicate ids or bad prices; reseeding defaults.")
            return None
        return products

    async def _save(self, products: List[Product]) -> None:
        await self._store.set(self._key, [p.to_record() for p in products])

    async def list(self) -> List[Product]:
        products = await self._load()
        if products is None:
            _logger.info(f"Seeding catalog with {len(DEFAULT_PRODUCTS)} products.")
            products = list(DEFAULT_PRODUCTS)
            await self._save(products)
        return products

    async def get(self, product_id: int) -> Optional[Product]:
        for p in await self.list():
            if p.id == product_id:
                return p
        return None

    async def create(self, fields: Mapping[str, Any]) -> Product:
        cleaned = validate_fields(fields)
        products = await self.list()
        product = Product(
            id=timestamp_id(p.id for p in products),
            name=cleaned["name"],
            category=cleaned["category"],
            price=cleaned["price"],
            image=cleaned["image"] or config.DEFAULT_IMAGE,
            description=cleaned["description"],
        )
        products.append(product)
        await self._save(products)
        _logger.info(f"Product {product.id} '{product.name}' created.")
        return product

    async def update(self, product_id: int, fields: Mapping[str, Any]) -> Optional[Product]:
        """Replace all mutable fields; returns None if the id is unknown."""
        cleaned = validate_fields(fields)
        products = await self.list()
        for i, old in enumerate(products):
            if old.id != product_id:
                continue
            products[i] = replace(
                old,
                name=cleaned["name"],
                category=cleaned["category"],
                price=cleaned["price"],
                image=cleaned["image"] or old.image,
                description=cleaned["description"],
            )
            await self._save(products)
            _logger.info(f"Product {product_id} updated.")
            return products[i]
        return None

    async def delete(self, product_id: int) -> None:
        products = await self.list()
        kept = [p for p in products if p.id != product_id]
        if len(kept) == len(products):
            return
        await self._save(kept)
        _logger.info(f"Product {product_id} deleted.")
