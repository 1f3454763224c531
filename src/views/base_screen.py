from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import ScreenResume
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from utils.messages import (
    CartChangedMessage,
    ModeSwitchedMessage,
    ProfileChangedMessage,
    UserLoginMessage,
    UserLogoutMessage,
)
from utils.pure import format_price, generate_markdown_table
from views.modal_dialog import ConfirmModal, QuitDialogModal


class Sidebar(Container):
    init_mode = ""

    def compose(self) -> ComposeResult:
        yield Label("Account", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Log in", id="btn-login", variant="primary")
        yield Button("Log out", id="btn-logout", variant="error")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    async def on_mount(self):
        self.init_mode = self.app.current_mode

        list_menu: ListView = self.query_one("#list-menu")
        await list_menu.clear()
        await list_menu.extend(
            [
                ListItem(Label(v), id="list-menu-item-" + k)
                for k, v in self.app.MODE_TITLES.items()
            ]
        )
        self.highlight_item(self.init_mode)
        await self.refresh_info()

    async def refresh_info(self) -> None:
        state = self.app.state
        user = state.session.user

        cart_line = [
            "Cart",
            f"{state.cart.total_items} item(s), {format_price(state.cart.total_price())}",
        ]
        if user:
            table_rows = [
                ["Name", user.display_name],
                ["Email", user.email],
                cart_line,
            ]
        else:
            table_rows = [["Guest", "not logged in"], cart_line]
        md_table_str = generate_markdown_table(None, table_rows, ["l", "l"])
        await self.query_one("#md-userinfo", Markdown).update(md_table_str)

        self.query_one("#btn-login").display = user is None
        self.query_one("#btn-logout").display = user is not None

    async def on_list_view_selected(self, event: ListView.Selected):
        selected_mode = event.item.id.removeprefix("list-menu-item-")
        self.highlight_item(self.init_mode)
        if self.app.current_mode != selected_mode:
            self.post_message(ModeSwitchedMessage(self.app.current_mode, selected_mode))
            await self.app.switch_mode(selected_mode)

    @on(Button.Pressed, "#btn-login")
    @work()
    async def handle_login(self):
        # imported here, the login screen itself builds on BaseScreen
        from views.scr_login import LoginScreen

        if await self.app.push_screen_wait(LoginScreen()):
            self.post_message(UserLoginMessage())

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self):
        if not await self.app.push_screen_wait(
            ConfirmModal("Are you sure you want to log out?")
        ):
            return

        self.post_message(UserLogoutMessage())

    def highlight_item(self, mode_str: str):
        list_menu = self.query_one("#list-menu")
        for item in list_menu.children:
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
        header_sub_title: str = "Organi.Live",
        show_sidebar: bool = True,
    ) -> None:
        """
        configure title, subtitle and sidebar of the screen
        """
        self.app.title = "Organi.Live"
        self.sub_title = header_sub_title
        for k, v in self.app.MODES.items():
            if isinstance(self, v):
                self.sub_title = self.app.MODE_TITLES.get(k, header_sub_title)

        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    async def refresh_sidebar(self) -> None:
        for sidebar in self.query(Sidebar):
            await sidebar.refresh_info()

    @on(ScreenResume)
    @on(UserLoginMessage)
    async def handle_screen_resume(self):
        await self.refresh_sidebar()
        await self.refresh_content()

    @on(CartChangedMessage)
    @on(ProfileChangedMessage)
    async def handle_sidebar_stale(self):
        await self.refresh_sidebar()

    async def refresh_content(self) -> None:
        """Redraw screen-specific content from app state; overridden by screens."""

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())


class AccountScreen(BaseScreen):
    """
    Base for screens that need a logged-in user.
    Shows a notice instead of the content while anonymous.
    """

    def compose_notice(self) -> ComposeResult:
        with Container(id="div-login-required"):
            yield Label("Please log in to see this page.")
            yield Button("Log in", id="btn-notice-login", variant="primary")

    @on(Button.Pressed, "#btn-notice-login")
    @work()
    async def handle_notice_login(self):
        from views.scr_login import LoginScreen

        if await self.app.push_screen_wait(LoginScreen()):
            self.post_message(UserLoginMessage())

    async def refresh_content(self) -> None:
        logged_in = self.app.state.session.is_authenticated
        self.query_one("#div-login-required").display = not logged_in
        self.query_one("#div-account-content").display = logged_in
        if logged_in:
            await self.refresh_account()

    async def refresh_account(self) -> None:
        """Redraw the content for the logged-in user."""
