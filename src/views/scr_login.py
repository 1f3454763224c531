from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Checkbox, Input, Label, TabbedContent, TabPane

from utils.results import Submission
from utils.validation import validate_registration
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal, FormErrorsModal

REG_FIELDS = ("first_name", "last_name", "email", "phone", "password", "confirm_password")


class LoginScreen(BaseScreen):
    """
    Login and sign-up tabs.
    Dismissed with True after a successful login, False if the user backs out.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Log in", show_sidebar=False)
        delay = self.app.state.settings.simulated_delay
        self._login = Submission(delay)
        self._register = Submission(delay)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-loginscr"):
            with TabPane("Log in", id="tab-login"):
                with Vertical(id="div-login"):
                    yield Label("Email")
                    yield Input(placeholder="you@example.com", id="input-login-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-login-pwd"
                    )
                    with Horizontal(id="div-login-btns"):
                        yield Button("Back", id="btn-back")
                        yield Button("Log in", id="btn-login", variant="primary")

            with TabPane("Sign up", id="tab-signup"):
                with Vertical(id="div-reg"):
                    with Horizontal(classes="form-row"):
                        with Vertical():
                            yield Label("First name *")
                            yield Input(placeholder="Jane", id="input-reg-first_name")
                        with Vertical():
                            yield Label("Last name *")
                            yield Input(placeholder="Doe", id="input-reg-last_name")
                    yield Label("Email *")
                    yield Input(placeholder="you@example.com", id="input-reg-email")
                    yield Label("Phone *")
                    yield Input(placeholder="+1 234 567 8900", id="input-reg-phone")
                    with Horizontal(classes="form-row"):
                        with Vertical():
                            yield Label("Password *")
                            yield Input(
                                placeholder="At least 8 characters",
                                password=True,
                                id="input-reg-password",
                            )
                        with Vertical():
                            yield Label("Confirm password *")
                            yield Input(
                                placeholder="Repeat your password",
                                password=True,
                                id="input-reg-confirm_password",
                            )
                    yield Checkbox(
                        "I accept the terms and the privacy policy",
                        id="chk-reg-terms",
                    )
                    with Container(id="div-reg-btns"):
                        yield Button("Create account", id="btn-reg", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-email").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()
        if event.key == "escape":
            self.dismiss(False)

    def on_input_changed(self, message: Input.Changed) -> None:
        message.input.remove_class("-invalid")

    @on(Button.Pressed, "#btn-back")
    def handle_back(self) -> None:
        self.dismiss(False)

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        if self._login.pending:
            return
        email = self.query_one("#input-login-email", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value

        if not email or not pwd:
            self.notify("Email or password cannot be empty!", severity="error")
            return

        button = self.query_one("#btn-login", Button)
        button.disabled = True
        button.label = "Logging in..."
        result = await self._login.run(
            lambda: self.app.state.session.login(email, pwd)
        )
        button.disabled = False
        button.label = "Log in"

        if result.ok:
            self.notify(f"Welcome back, {result.value.first_name}!")
            self.dismiss(True)
        else:
            self.notify(result.error, severity="error")
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")

    def _registration_form(self) -> dict:
        form = {
            key: self.query_one(f"#input-reg-{key}", Input).value for key in REG_FIELDS
        }
        for key in ("first_name", "last_name", "email", "phone"):
            form[key] = form[key].strip()
        form["accept_terms"] = self.query_one("#chk-reg-terms", Checkbox).value
        return form

    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        if self._register.pending:
            return
        session = self.app.state.session
        form = self._registration_form()

        errors = validate_registration(form, session.email_available)
        if errors:
            for key in errors:
                if key in REG_FIELDS:
                    self.query_one(f"#input-reg-{key}", Input).add_class("-invalid")
            await self.app.push_screen_wait(FormErrorsModal(errors))
            return

        button = self.query_one("#btn-reg", Button)
        button.disabled = True
        button.label = "Creating account..."
        result = await self._register.run(
            lambda: session.register(
                first_name=form["first_name"],
                last_name=form["last_name"],
                email=form["email"],
                password=form["password"],
                phone=form["phone"],
            )
        )
        button.disabled = False
        button.label = "Create account"

        if not result.ok:
            self.notify(result.error, severity="error")
            return

        await self.app.push_screen_wait(
            DialogModal("Registration successful! You can log in now.", tone="confirm")
        )
        for key in REG_FIELDS:
            self.query_one(f"#input-reg-{key}", Input).value = ""
        self.query_one("#chk-reg-terms", Checkbox).value = False

        self.query_one(TabbedContent).active = "tab-login"
        self.query_one("#input-login-email", Input).value = form["email"]
        self.query_one("#input-login-pwd", Input).focus()
