import os
import tempfile
import unittest

from db import database as db_database
from db.store import MemoryKeyValueStore, SqliteKeyValueStore


class SqliteStoreTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # Point the DB to a temporary file and force re-initialization
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "nested", "test.sqlite")
        db_database.DB_PATH = self.db_path
        db_database._initialized = False
        self.store = SqliteKeyValueStore()

    def tearDown(self):
        self.temp_dir.cleanup()

    async def test_creates_file_and_table_on_first_use(self):
        self.assertIsNone(await self.store.get("missing"))
        self.assertTrue(os.path.exists(self.db_path))
        async with db_database.connect() as conn:
            self.assertTrue(await db_database._table_exists(conn, "kv_store"))

    async def test_set_get_overwrite_remove(self):
        await self.store.set("urbanaura_orders", [{"id": 1}])
        self.assertEqual(await self.store.get("urbanaura_orders"), [{"id": 1}])

        await self.store.set("urbanaura_orders", [{"id": 1}, {"id": 2}])
        self.assertEqual(len(await self.store.get("urbanaura_orders")), 2)

        await self.store.remove("urbanaura_orders")
        self.assertIsNone(await self.store.get("urbanaura_orders"))

        # removing an absent key is fine
        await self.store.remove("urbanaura_orders")

    async def test_collections_are_independent(self):
        await self.store.set("a", {"x": 1})
        await self.store.set("b", {"y": 2})
        await self.store.remove("a")
        self.assertIsNone(await self.store.get("a"))
        self.assertEqual(await self.store.get("b"), {"y": 2})

    async def test_unreadable_value_reads_as_absent(self):
        async with db_database.connect() as conn:
            await conn.execute(
                "INSERT INTO kv_store(key, value) VALUES (?, ?);",
                ("urbanaura_products", "{not json"),
            )
            await conn.commit()
        self.assertIsNone(await self.store.get("urbanaura_products"))


class MemoryStoreTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_values_are_copies(self):
        store = MemoryKeyValueStore()
        value = {"items": [1, 2]}
        await store.set("k", value)
        value["items"].append(3)
        self.assertEqual(await store.get("k"), {"items": [1, 2]})

    async def test_unreadable_value_reads_as_absent(self):
        store = MemoryKeyValueStore({"k": "[1, 2"})
        self.assertIsNone(await store.get("k"))
        await store.remove("k")
        self.assertEqual(store.data, {})
