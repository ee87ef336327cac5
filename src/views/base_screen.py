from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import ScreenResume
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from shop import cart as cart_ops
from utils.messages import (
    CartChangedMessage,
    ModeSwitchedMessage,
    UserLoginMessage,
    UserLogoutMessage,
)
from utils.pure import generate_markdown_table
from views.modal_dialog import QuitDialogModal, confirm


class Sidebar(Container):
    def compose(self) -> ComposeResult:
        yield Label("User Info", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Log out", id="btn-logout", variant="error")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    def menu_modes(self) -> dict:
        modes = dict(self.app.CUSTOMER_MODES)
        if self.app.state.session.is_admin:
            modes.update(self.app.ADMIN_MODES)
        return modes

    async def refresh_info(self) -> None:
        user = self.app.state.session.user
        if user is None:
            return

        cart_items = cart_ops.total_items(self.app.state.cart)
        rows = [
            ["Name", user.name],
            ["Email", user.email],
            ["Role", "Admin" if user.is_admin else "Customer"],
            ["Cart", f"{cart_items} item(s)"],
        ]
        await self.query_one(Markdown).update(
            generate_markdown_table(None, rows, ["l", "l"])
        )

        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            [
                ListItem(Label(v), id="list-menu-item-" + k)
                for k, v in self.menu_modes().items()
            ]
        )
        self.highlight_item(self.app.current_mode)

    async def on_list_view_selected(self, event: ListView.Selected):
        selected_mode = event.item.id.removeprefix("list-menu-item-")
        self.highlight_item(self.app.current_mode)
        if self.app.current_mode != selected_mode:
            self.post_message(ModeSwitchedMessage(self.app.current_mode, selected_mode))
            await self.app.switch_mode(selected_mode)

    @on(Button.Pressed, "#btn-logout")
    @work
    async def handle_logout(self):
        if await self.app.push_screen_wait(confirm("Are you sure you want to log out?")):
            self.post_message(UserLogoutMessage())

    def highlight_item(self, mode_str: str):
        for item in self.query_one("#list-menu").children:
            item.highlighted = item.id == "list-menu-item-" + mode_str


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()

        self.configure()

    def configure(
        self,
        header_sub_title: str = "UrbanAura",
        show_sidebar: bool = True,
    ) -> None:
        """
        Set the header titles; mode screens take their sub title from the
        app's mode labels.
        """
        self.app.title = "UrbanAura"
        self.sub_title = header_sub_title
        labels = {**self.app.CUSTOMER_MODES, **self.app.ADMIN_MODES}
        for k, v in self.app.MODES.items():
            if isinstance(self, v) and k in labels:
                self.sub_title = labels[k]

        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    @on(UserLoginMessage)
    @on(CartChangedMessage)
    @on(ScreenResume)
    async def refresh_sidebar(self):
        if self._show_sidebar:
            await self.query_one(Sidebar).refresh_info()

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
