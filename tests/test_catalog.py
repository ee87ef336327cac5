import unittest

from db.store import MemoryKeyValueStore
from shop.catalog import DEFAULT_PRODUCTS, CatalogManager, search_products
from shop.errors import ValidationError
from utils import config


def fields(**overrides):
    base = {
        "name": "Matte iPhone 13 Case",
        "category": "iphone-cases",
        "price": "3000",
        "image": "",
        "description": "Soft touch finish",
    }
    base.update(overrides)
    return base


class CatalogTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = MemoryKeyValueStore()
        self.catalog = CatalogManager(self.store)

    # ---------- seeding ----------

    async def test_first_list_seeds_and_persists_defaults(self):
        products = await self.catalog.list()
        self.assertEqual(len(products), 6)
        cats = [p.category for p in products]
        self.assertEqual(cats.count("iphone-cases"), 3)
        self.assertEqual(cats.count("sunglasses"), 3)
        self.assertEqual(len(await self.store.get(config.PRODUCTS_KEY)), 6)

    async def test_existing_catalog_is_not_reseeded(self):
        await self.catalog.list()
        await self.catalog.delete(1)
        self.assertEqual(len(await CatalogManager(self.store).list()), 5)

    async def test_malformed_catalog_is_reseeded(self):
        self.store.data[config.PRODUCTS_KEY] = "{broken"
        self.assertEqual(len(await self.catalog.list()), 6)

        await self.store.set(config.PRODUCTS_KEY, [{"id": 1}])
        self.assertEqual(
            [p.id for p in await self.catalog.list()],
            [p.id for p in DEFAULT_PRODUCTS],
        )

    async def test_catalog_breaking_product_rules_is_reseeded(self):
        good = DEFAULT_PRODUCTS[0].to_record()
        bad_records = [
            [good, dict(good, name="Copy")],
            [dict(good, price=0)],
            [dict(good, price=-100)],
        ]
        for records in bad_records:
            with self.subTest(records=records):
                await self.store.set(config.PRODUCTS_KEY, records)
                products = await self.catalog.list()
                self.assertEqual(
                    [p.id for p in products], [p.id for p in DEFAULT_PRODUCTS]
                )
                self.assertEqual(len(await self.store.get(config.PRODUCTS_KEY)), 6)

    # ---------- create ----------

    async def test_create_appends_with_fresh_id_and_default_image(self):
        product = await self.catalog.create(fields())
        products = await self.catalog.list()
        self.assertEqual(len(products), 7)
        self.assertEqual(products[-1], product)
        self.assertEqual(product.price, 3000)
        self.assertEqual(product.image, config.DEFAULT_IMAGE)
        self.assertGreater(product.id, max(p.id for p in DEFAULT_PRODUCTS))

    async def test_create_ids_unique_and_increasing(self):
        a = await self.catalog.create(fields(name="A"))
        b = await self.catalog.create(fields(name="B"))
        self.assertGreater(b.id, a.id)

    async def test_create_validation_leaves_catalog_unchanged(self):
        await self.catalog.list()
        cases = [
            (fields(price="-5"), "invalid_price"),
            (fields(price=""), "missing_field"),
            (fields(price="abc"), "invalid_price"),
            (fields(price="0"), "invalid_price"),
            (fields(name=""), "missing_field"),
            (fields(description="   "), "missing_field"),
            (fields(category=""), "missing_field"),
            (fields(category="watches"), "invalid_category"),
        ]
        for bad, reason in cases:
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError) as ctx:
                    await self.catalog.create(bad)
                self.assertEqual(ctx.exception.reason, reason)
                self.assertEqual(len(await self.catalog.list()), 6)

    async def test_validation_error_names_field(self):
        with self.assertRaises(ValidationError) as ctx:
            await self.catalog.create(fields(name=""))
        self.assertEqual(ctx.exception.field, "name")

    # ---------- update / delete ----------

    async def test_update_replaces_fields_and_keeps_id(self):
        updated = await self.catalog.update(
            4, fields(name="Gold Aviators", category="sunglasses", price=7000)
        )
        self.assertEqual(updated.id, 4)
        self.assertEqual(updated.name, "Gold Aviators")
        self.assertEqual(updated.price, 7000)
        # empty image keeps the old one
        self.assertEqual(updated.image, DEFAULT_PRODUCTS[3].image)
        self.assertEqual((await self.catalog.get(4)).name, "Gold Aviators")

        # position in the list is unchanged
        self.assertEqual([p.id for p in await self.catalog.list()], [1, 2, 3, 4, 5, 6])

    async def test_update_with_new_image(self):
        updated = await self.catalog.update(1, fields(image="teal"))
        self.assertEqual(updated.image, "teal")

    async def test_update_invalid_is_not_applied(self):
        with self.assertRaises(ValidationError):
            await self.catalog.update(1, fields(price="-1"))
        self.assertEqual((await self.catalog.get(1)).price, 2500)

    async def test_update_unknown_id(self):
        self.assertIsNone(await self.catalog.update(424242, fields()))

    async def test_delete(self):
        await self.catalog.delete(2)
        self.assertIsNone(await self.catalog.get(2))
        self.assertEqual(len(await self.catalog.list()), 5)

        await self.catalog.delete(424242)
        self.assertEqual(len(await self.catalog.list()), 5)

    # ---------- search ----------

    def test_search_by_category_and_keyword(self):
        self.assertEqual(len(search_products(DEFAULT_PRODUCTS)), 6)
        self.assertEqual(len(search_products(DEFAULT_PRODUCTS, "", "sunglasses")), 3)

        res = search_products(DEFAULT_PRODUCTS, "  IPHONE 15 ")
        self.assertEqual({p.id for p in res}, {1, 2})

        res = search_products(DEFAULT_PRODUCTS, "uv", "sunglasses")
        self.assertEqual([p.id for p in res], [4])

        self.assertEqual(search_products(DEFAULT_PRODUCTS, "uv", "iphone-cases"), [])
