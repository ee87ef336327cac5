import unittest

from db.models import User
from db.store import MemoryKeyValueStore
from shop.session import MockIdentityVerifier, SessionManager
from utils import config


class SessionTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = MemoryKeyValueStore()
        self.session = SessionManager(self.store)
        self.loading_events = []
        self.session.add_loading_listener(self.loading_events.append)

    # ---------- login ----------

    async def test_admin_login(self):
        self.assertTrue(await self.session.login("admin@urbanaura.com", "admin123"))
        self.assertTrue(self.session.is_admin)
        self.assertEqual(self.session.user.name, "Admin")
        self.assertEqual(
            await self.store.get(config.USER_KEY),
            {"id": 1, "name": "Admin", "email": "admin@urbanaura.com", "isAdmin": True},
        )

    async def test_regular_login_derives_name_from_email(self):
        self.assertTrue(await self.session.login("jane.doe@example.com", "anything"))
        self.assertFalse(self.session.is_admin)
        self.assertEqual(self.session.user.name, "jane.doe")

    async def test_admin_email_with_wrong_password_is_regular_user(self):
        self.assertTrue(await self.session.login("admin@urbanaura.com", "nope"))
        self.assertFalse(self.session.is_admin)
        self.assertEqual(self.session.user.name, "admin")

    async def test_admin_password_must_match_exactly(self):
        self.assertTrue(await self.session.login("admin@urbanaura.com", " admin123"))
        self.assertFalse(self.session.is_admin)

    async def test_empty_credentials_fail_without_persisting(self):
        self.assertFalse(await self.session.login("a@b.com", ""))
        self.assertFalse(await self.session.login("", "pw"))
        self.assertIsNone(self.session.user)
        self.assertIsNone(await self.store.get(config.USER_KEY))

    async def test_failed_login_keeps_existing_session_record(self):
        await self.session.login("jane@example.com", "pw")
        before = await self.store.get(config.USER_KEY)
        self.assertFalse(await self.session.login("a@b.com", ""))
        self.assertEqual(await self.store.get(config.USER_KEY), before)

    async def test_loading_notified_regardless_of_outcome(self):
        await self.session.login("a@b.com", "")
        await self.session.login("a@b.com", "pw")
        self.assertEqual(self.loading_events, [True, False, True, False])
        self.assertFalse(self.session.is_loading)

    # ---------- register / logout / load ----------

    async def test_register_always_succeeds(self):
        self.assertTrue(await self.session.register("Jane", "jane@example.com", "pw"))
        user = self.session.user
        self.assertEqual(user.name, "Jane")
        self.assertFalse(user.is_admin)
        self.assertGreater(user.id, 2)
        self.assertEqual(self.loading_events, [True, False])
        self.assertEqual((await self.store.get(config.USER_KEY))["id"], user.id)

    async def test_logout_clears_memory_and_store(self):
        await self.session.login("jane@example.com", "pw")
        await self.session.logout()
        self.assertIsNone(self.session.user)
        self.assertFalse(self.session.is_authenticated)
        self.assertIsNone(await self.store.get(config.USER_KEY))

    async def test_load_restores_persisted_session(self):
        await self.session.login("admin@urbanaura.com", "admin123")
        fresh = SessionManager(self.store)
        self.assertEqual(await fresh.load(), User(1, "Admin", "admin@urbanaura.com", True))
        self.assertTrue(fresh.is_authenticated)

    async def test_load_without_record_is_anonymous(self):
        self.assertIsNone(await self.session.load())
        self.assertFalse(self.session.is_authenticated)

    async def test_load_malformed_record_is_anonymous(self):
        await self.store.set(config.USER_KEY, {"name": "no id"})
        self.assertIsNone(await self.session.load())
        self.assertIsNone(await self.store.get(config.USER_KEY))

    async def test_removed_listener_is_not_called(self):
        self.session.remove_loading_listener(self.loading_events.append)
        await self.session.login("a@b.com", "pw")
        self.assertEqual(self.loading_events, [])


class MockVerifierTestCase(unittest.TestCase):
    def test_custom_admin_pair(self):
        verifier = MockIdentityVerifier("boss@shop.test", "s3cret")
        self.assertTrue(verifier.verify("boss@shop.test", "s3cret").is_admin)
        self.assertFalse(verifier.verify("admin@urbanaura.com", "admin123").is_admin)
        self.assertIsNone(verifier.verify("", ""))
