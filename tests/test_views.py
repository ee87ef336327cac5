import asyncio
import unittest

from textual.widgets import Button, Input, Select

from db.store import MemoryKeyValueStore
from main import StorefrontApp
from shop.catalog import DEFAULT_PRODUCTS
from shop.orders import AreaDeliveryFees
from shop.payment import PaymentResult
from utils.state import AppState
from views.modal_checkout import CheckoutModal
from views.modal_dialog import DialogModal
from views.scr_catalog import CatalogScreen
from views.scr_login import LoginScreen


class HeldGateway:
    """Approves only once `release` is set."""

    def __init__(self):
        self.release = asyncio.Event()
        self.calls = []

    async def request_payment(self, phone, amount):
        self.calls.append((phone, amount))
        await self.release.wait()
        return PaymentResult.ok("TXN9")


async def wait_until(pilot, predicate, attempts: int = 100) -> bool:
    for _ in range(attempts):
        if predicate():
            return True
        await pilot.pause(0.02)
    return bool(predicate())


def fill_checkout(modal: CheckoutModal, address="", area=None, phone="") -> None:
    modal.query_one("#input-address", Input).value = address
    modal.query_one("#input-phone", Input).value = phone
    if area is not None:
        modal.query_one("#select-area", Select).value = area


class CheckoutModalTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.gateway = HeldGateway()
        self.state = AppState.create(
            store=MemoryKeyValueStore(),
            gateway=self.gateway,
            delivery_fees=AreaDeliveryFees(),
        )
        await self.state.session.login("jane@example.com", "pw")
        self.app = StorefrontApp(self.state)

    async def open_checkout(self, pilot) -> CheckoutModal:
        await wait_until(pilot, lambda: isinstance(self.app.screen, CatalogScreen))
        self.state.add_to_cart(DEFAULT_PRODUCTS[0])
        modal = CheckoutModal()
        await self.app.push_screen(modal)
        await pilot.pause()
        return modal

    async def test_invalid_form_is_flagged_before_any_confirmation(self):
        async with self.app.run_test() as pilot:
            modal = await self.open_checkout(pilot)

            fill_checkout(modal, address="", area="karen", phone="0712345678")
            modal.handle_submit()
            await pilot.pause()
            self.assertIs(self.app.screen, modal)
            self.assertTrue(modal.query_one("#input-address").has_class("-invalid"))

            fill_checkout(modal, address="Kimathi St", phone="0712345678")
            modal.query_one("#select-area", Select).clear()
            modal.handle_submit()
            await pilot.pause()
            self.assertNotIsInstance(self.app.screen, DialogModal)
            self.assertTrue(modal.query_one("#select-area").has_class("-invalid"))
            self.assertFalse(modal.query_one("#input-address").has_class("-invalid"))

        self.assertEqual(self.gateway.calls, [])
        self.assertEqual(await self.state.orders.list(), [])

    async def test_modal_stays_open_until_payment_resolves(self):
        async with self.app.run_test() as pilot:
            modal = await self.open_checkout(pilot)
            fill_checkout(modal, address="Kimathi St", area="karen", phone="0712345678")

            modal.handle_submit()
            self.assertTrue(
                await wait_until(pilot, lambda: isinstance(self.app.screen, DialogModal))
            )
            self.app.screen.query_one("#btn-primary", Button).press()
            self.assertTrue(await wait_until(pilot, lambda: self.gateway.calls))

            # neither Escape nor Go Back abandons the pending prompt
            await pilot.press("escape")
            modal.handle_quit()
            await pilot.pause()
            self.assertIs(self.app.screen, modal)
            self.assertTrue(modal.query_one("#btn-quit", Button).disabled)
            self.assertTrue(modal.query_one("#btn-submit", Button).disabled)

            self.gateway.release.set()
            self.assertTrue(await wait_until(pilot, lambda: self.app.screen is not modal))

        self.assertEqual(self.gateway.calls, [("0712345678", 2500 + 300)])
        orders = await self.state.orders.list()
        self.assertEqual(len(orders), 1)
        self.assertEqual(orders[0].transaction_id, "TXN9")
        self.assertFalse(self.state.cart)


class LoginScreenTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_password_is_submitted_verbatim(self):
        state = AppState.create(store=MemoryKeyValueStore())
        app = StorefrontApp(state)
        async with app.run_test() as pilot:
            self.assertTrue(
                await wait_until(pilot, lambda: isinstance(app.screen, LoginScreen))
            )
            screen = app.screen
            screen.query_one("#input-login-email", Input).value = " admin@urbanaura.com "
            screen.query_one("#input-login-pwd", Input).value = " admin123"
            screen.handle_login_submit()
            self.assertTrue(await wait_until(pilot, lambda: state.session.user is not None))

        self.assertEqual(state.session.user.email, "admin@urbanaura.com")
        self.assertFalse(state.session.is_admin)
