from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Button, Label, Select, Switch

from utils.messages import ProfileChangedMessage
from utils.results import Submission
from views.base_screen import AccountScreen

LANGUAGES = [("Español", "es"), ("English", "en"), ("Português", "pt")]
REGIONS = [("Colombia", "CO"), ("España", "ES"), ("México", "MX"), ("United States", "US")]
THEMES = [("Light", "light"), ("Dark", "dark")]

APP_THEMES = {"light": "textual-light", "dark": "textual-dark"}

SELECTS = {"language": LANGUAGES, "region": REGIONS, "theme": THEMES}

# (group, key, label)
SWITCHES = (
    ("notifications", "email", "Email notifications"),
    ("notifications", "push", "Push notifications"),
    ("notifications", "sms", "SMS notifications"),
    ("privacy", "public_profile", "Public profile"),
    ("privacy", "share_data", "Share data with partners"),
)


class PreferencesScreen(AccountScreen):
    def __init__(self):
        super().__init__()
        self._save = Submission(self.app.state.settings.simulated_delay)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield from self.compose_notice()
        with VerticalScroll(id="div-account-content"):
            yield Label("Notifications & Privacy", classes="section-title")
            for group, key, label in SWITCHES:
                with Horizontal(classes="switch-row"):
                    yield Switch(id=f"switch-{group}-{key}")
                    yield Label(label)
            yield Label("Language & Region", classes="section-title")
            yield Select(LANGUAGES, allow_blank=False, id="select-language")
            yield Select(REGIONS, allow_blank=False, id="select-region")
            yield Label("Appearance", classes="section-title")
            yield Select(THEMES, allow_blank=False, id="select-theme")
            with Horizontal(id="div-pref-btns"):
                yield Button("Reset", id="btn-pref-reset")
                yield Button("Save Preferences", id="btn-pref-save", variant="primary")

    async def refresh_account(self) -> None:
        prefs = self.app.state.session.user.preferences
        for group, key, _ in SWITCHES:
            self.query_one(f"#switch-{group}-{key}", Switch).value = bool(
                getattr(prefs, group).get(key, False)
            )
        for name, options in SELECTS.items():
            value = getattr(prefs, name)
            # stored values that are no longer offered keep the default
            if any(v == value for _, v in options):
                self.query_one(f"#select-{name}", Select).value = value

    def _changes(self) -> dict:
        changes = {"notifications": {}, "privacy": {}}
        for group, key, _ in SWITCHES:
            changes[group][key] = self.query_one(f"#switch-{group}-{key}", Switch).value
        for name in SELECTS:
            changes[name] = self.query_one(f"#select-{name}", Select).value
        return changes

    @on(Button.Pressed, "#btn-pref-reset")
    async def handle_reset(self) -> None:
        await self.refresh_account()

    @on(Button.Pressed, "#btn-pref-save")
    @work(exclusive=True)
    async def handle_save(self) -> None:
        if self._save.pending:
            return
        session = self.app.state.session
        changes = self._changes()

        async def save():
            result = await session.update_preferences(**changes)
            if result.ok:
                await session.add_activity(
                    "preferences",
                    "Preferences updated",
                    "Notification and display settings changed",
                )
            return result

        button = self.query_one("#btn-pref-save", Button)
        button.disabled = True
        result = await self._save.run(save)
        button.disabled = False

        if result.ok:
            self.app.theme = APP_THEMES.get(changes["theme"], self.app.theme)
            self.notify("Preferences saved!")
            self.post_message(ProfileChangedMessage())
        else:
            self.notify(result.error, severity="error")
