from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label

from utils.results import Submission
from utils.validation import validate_password_change


class ChangePasswordModal(ModalScreen[bool]):
    """
    Asks for the current password and a new one.
    Returns True once the password was changed.
    """

    def __init__(self) -> None:
        super().__init__()
        self._submission = Submission(self.app.state.settings.simulated_delay)

    def compose(self) -> ComposeResult:
        with Vertical(id="div-dialog"):
            yield Label("Change Password", id="caption")
            yield Label("Current password")
            yield Input(password=True, id="input-pwd-current")
            yield Label("New password")
            yield Input(password=True, id="input-pwd-new")
            yield Label("Confirm new password")
            yield Input(password=True, id="input-pwd-confirm")
            with Horizontal(id="dialog"):
                yield Button("Cancel", id="btn-pwd-cancel")
                yield Button("Change", id="btn-pwd-submit", variant="primary")

    def on_mount(self):
        self.query_one("#input-pwd-current").focus()

    @on(Button.Pressed, "#btn-pwd-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(False)

    @on(Button.Pressed, "#btn-pwd-submit")
    @work(exclusive=True)
    async def handle_submit(self) -> None:
        if self._submission.pending:
            return
        current = self.query_one("#input-pwd-current", Input).value
        new = self.query_one("#input-pwd-new", Input).value
        confirm = self.query_one("#input-pwd-confirm", Input).value

        errors = validate_password_change(current, new, confirm)
        if errors:
            self.notify("\n".join(errors.values()), severity="error")
            for key in errors:
                self.query_one(f"#input-pwd-{key}", Input).add_class("-invalid")
            return

        result = await self._submission.run(
            lambda: self.app.state.session.change_password(current, new)
        )
        if result.ok:
            self.notify("Password changed.")
            self.dismiss(True)
        else:
            self.notify(result.error, severity="error")
            self.query_one("#input-pwd-current", Input).add_class("-invalid")
