import argparse

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from utils.config import load_settings
from utils.logger import close_log_file, get_logger
from utils.messages import (
    ModeSwitchedMessage,
    QuitRequestedMessage,
    UserLoginMessage,
    UserLogoutMessage,
)
from utils.state import AppState
from views.base_screen import BaseScreen
from views.scr_activity import ActivityScreen
from views.scr_cart import CartScreen
from views.scr_catalog import CatalogScreen
from views.scr_contact import ContactScreen
from views.scr_preferences import APP_THEMES, PreferencesScreen
from views.scr_profile import ProfileScreen

_logger = get_logger(__name__)


class StorefrontApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "catalog": CatalogScreen,
        "cart": CartScreen,
        "contact": ContactScreen,
        "profile": ProfileScreen,
        "preferences": PreferencesScreen,
        "activity": ActivityScreen,
    }

    MODE_TITLES = {
        "catalog": "Our Products",
        "cart": "Cart",
        "contact": "Contact Us",
        "profile": "My Account",
        "preferences": "Preferences",
        "activity": "Activity History",
    }

    CSS_PATH = "styles/index.tcss"

    state: AppState

    def __init__(self, state: AppState):
        super().__init__()
        self.state = state

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "textual-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    def apply_user_theme(self) -> None:
        user = self.state.session.user
        if user:
            self.theme = APP_THEMES.get(user.preferences.theme, self.theme)

    @on(UserLoginMessage)
    def handle_user_login(self):
        self.apply_user_theme()

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.state.session.logout()
        self.notify("Logout successful.")
        self.post_message(ModeSwitchedMessage(self.current_mode, "catalog"))
        await self.switch_mode("catalog")
        if isinstance(self.screen, BaseScreen):
            await self.screen.refresh_sidebar()
            await self.screen.refresh_content()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.exit()

    @work
    async def main_flow(self):
        await self.state.start()
        self.apply_user_theme()
        if self.state.catalog.error:
            self.notify(self.state.catalog.error, severity="error")
        self.post_message(ModeSwitchedMessage(self.current_mode, "catalog"))
        await self.switch_mode("catalog")


def run() -> None:
    parser = argparse.ArgumentParser(description="Organi.Live terminal storefront")
    parser.add_argument(
        "--memory",
        action="store_true",
        help="keep accounts in memory only; nothing is written to disk",
    )
    args = parser.parse_args()

    settings = load_settings()
    state = AppState.in_memory(settings) if args.memory else AppState.build(settings)
    _logger.debug(f"Starting with {settings}")
    try:
        StorefrontApp(state).run()
    finally:
        close_log_file()


if __name__ == "__main__":
    run()
