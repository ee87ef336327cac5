from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from utils.logger import get_logger
from utils.messages import ModeSwitchedMessage, QuitRequestedMessage, UserLogoutMessage
from utils.state import AppState
from views.scr_admin_orders import AdminOrdersScreen
from views.scr_admin_overview import AdminOverviewScreen
from views.scr_admin_products import AdminProductsScreen
from views.scr_cart import CartScreen
from views.scr_catalog import CatalogScreen
from views.scr_login import LoginScreen

_logger = get_logger(__name__)


class StorefrontApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "catalog": CatalogScreen,
        "cart": CartScreen,
        "admin_overview": AdminOverviewScreen,
        "admin_products": AdminProductsScreen,
        "admin_orders": AdminOrdersScreen,
    }

    ADMIN_MODES = {
        "admin_overview": "Dashboard",
        "admin_products": "Manage Products",
        "admin_orders": "Orders",
    }
    CUSTOMER_MODES = {
        "catalog": "Shop",
        "cart": "Cart",
    }

    CSS_PATH = [
        "styles/index.tcss",
        "styles/login.tcss",
        "styles/catalog.tcss",
        "styles/cart.tcss",
        "styles/checkout.tcss",
        "styles/admin.tcss",
    ]

    state: AppState

    def __init__(self, state: AppState | None = None):
        super().__init__()
        self.state = state or AppState.create()

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.state.logout()
        self.notify("Logout successful.")
        self.main_flow()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        # the session record is kept so the next start resumes it
        self.exit()

    @work(exclusive=True, group="main-flow")
    async def main_flow(self):
        await self.state.start()
        if not self.state.session.is_authenticated:
            await self.push_screen_wait(LoginScreen())
        else:
            self.notify(f"Welcome back, {self.state.session.user.name}!")

        target = "admin_overview" if self.state.session.is_admin else "catalog"
        _logger.debug(f"Entering mode {target}.")
        self.post_message(ModeSwitchedMessage(self.current_mode, target))
        await self.switch_mode(target)


def main():
    StorefrontApp().run()


if __name__ == "__main__":
    main()
