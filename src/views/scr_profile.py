from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Input, Label, Markdown, Rule, Select

from accounts.activity import recent_activity
from utils.messages import ProfileChangedMessage
from utils.pure import format_price, format_timestamp, generate_markdown_table
from utils.results import Submission
from utils.validation import validate_profile
from views.base_screen import AccountScreen
from views.modal_dialog import FormErrorsModal
from views.modal_password import ChangePasswordModal

# (field, label, placeholder)
PROFILE_INPUTS = (
    ("first_name", "First name *", "Your first name"),
    ("last_name", "Last name *", "Your last name"),
    ("email", "Email *", "you@example.com"),
    ("phone", "Phone", "+34 612 345 678"),
    ("birth_date", "Birth date", "YYYY-MM-DD"),
    ("address", "Address", "Street and number"),
    ("city", "City", "City"),
    ("postal_code", "Postal code", "12345"),
    ("country", "Country", "Country"),
    ("bio", "About you", "A few words about yourself"),
    ("avatar", "Avatar URL", "https://..."),
)

GENDERS = [
    ("Prefer not to say", ""),
    ("Female", "female"),
    ("Male", "male"),
    ("Other", "other"),
]


class ProfileScreen(AccountScreen):
    """
    Account dashboard plus the edit-profile form
    """

    def __init__(self):
        super().__init__()
        self._save = Submission(self.app.state.settings.simulated_delay)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield from self.compose_notice()
        with VerticalScroll(id="div-account-content"):
            yield Markdown("", id="md-dashboard")
            with Horizontal():
                yield Button("Change Password", id="btn-change-pwd")
            yield Rule(line_style="dashed")
            yield Label("Edit Profile", classes="section-title")
            with Vertical(id="div-profile-form"):
                for key, label, placeholder in PROFILE_INPUTS:
                    yield Label(label)
                    yield Input(placeholder=placeholder, id=f"input-profile-{key}")
                yield Label("Gender")
                yield Select(GENDERS, value="", allow_blank=False, id="select-gender")
                with Horizontal(id="div-profile-btns"):
                    yield Button("Reset", id="btn-profile-reset")
                    yield Button("Save Changes", id="btn-profile-save", variant="primary")

    async def refresh_account(self) -> None:
        user = self.app.state.session.user

        stats_table = generate_markdown_table(
            ["Orders", "Products bought", "Total savings", "Points"],
            [
                [
                    user.stats.orders_placed,
                    user.stats.products_bought,
                    format_price(user.stats.total_savings),
                    user.stats.points,
                ]
            ],
        )
        activity_rows = [
            [format_timestamp(a.timestamp), a.action, a.description]
            for a in recent_activity(user)
        ]
        activity_table = (
            generate_markdown_table(
                ["When", "What", "Details"], activity_rows, ["l", "l", "l"]
            )
            or "_No activity yet._"
        )
        md = (
            f"## Hello, {user.display_name}\n\n"
            f"{user.email} · {user.phone}\n\n"
            f"Member since {user.registered_at:%Y-%m-%d} · "
            f"last access {format_timestamp(user.last_access)}\n\n"
            f"### Your numbers\n\n{stats_table}\n\n"
            f"### Recent activity\n\n{activity_table}\n"
        )
        await self.query_one("#md-dashboard", Markdown).update(md)
        self.fill_form()

    def fill_form(self) -> None:
        user = self.app.state.session.user
        for key, _, _ in PROFILE_INPUTS:
            field = self.query_one(f"#input-profile-{key}", Input)
            field.value = getattr(user, key) or ""
            field.remove_class("-invalid")
        self.query_one("#select-gender", Select).value = user.gender or ""

    def _form(self) -> dict:
        form = {
            key: self.query_one(f"#input-profile-{key}", Input).value.strip()
            for key, _, _ in PROFILE_INPUTS
        }
        form["gender"] = self.query_one("#select-gender", Select).value
        return form

    @on(Button.Pressed, "#btn-profile-reset")
    def handle_reset(self) -> None:
        self.fill_form()

    @on(Button.Pressed, "#btn-profile-save")
    @work(exclusive=True)
    async def handle_save(self) -> None:
        if self._save.pending:
            return
        session = self.app.state.session
        form = self._form()

        errors = validate_profile(form)
        if form["email"] != session.user.email and not session.email_available(
            form["email"]
        ):
            errors["email"] = "This email is already registered"
        if errors:
            for key in errors:
                self.query_one(f"#input-profile-{key}", Input).add_class("-invalid")
            await self.app.push_screen_wait(FormErrorsModal(errors))
            return

        user = session.user
        changes = {k: (v or None) for k, v in form.items()}
        for required in ("first_name", "last_name", "email", "phone"):
            changes[required] = form[required]
        changed_fields = [k for k, v in changes.items() if getattr(user, k) != v]
        if not changed_fields:
            self.notify("Nothing to save.")
            return

        async def save():
            result = await session.update_user(**changes)
            if result.ok:
                await session.add_activity(
                    "profile",
                    "Profile updated",
                    "Personal information changed",
                    details={"fields": changed_fields},
                )
            return result

        button = self.query_one("#btn-profile-save", Button)
        button.disabled = True
        button.label = "Saving..."
        result = await self._save.run(save)
        button.disabled = False
        button.label = "Save Changes"

        if result.ok:
            self.notify("Profile updated!")
            self.post_message(ProfileChangedMessage())
            await self.refresh_account()
        else:
            self.notify(result.error, severity="error")

    @on(Button.Pressed, "#btn-change-pwd")
    @work()
    async def handle_change_password(self) -> None:
        if await self.app.push_screen_wait(ChangePasswordModal()):
            await self.refresh_account()
