from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, Markdown, TextArea

from db.models import ContactMessage
from utils.pure import generate_markdown_table
from utils.results import Status, Submission
from utils.validation import validate_contact
from views.base_screen import BaseScreen
from views.modal_dialog import FormErrorsModal

CONTACT_INPUTS = ("name", "email", "phone")


class ContactScreen(BaseScreen):
    """
    Contact form plus the store's contact details
    """

    def __init__(self):
        super().__init__()
        self._send = Submission(self.app.state.settings.simulated_delay)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="div-contact"):
            with Vertical(id="div-contact-form"):
                yield Label("Questions about our organic products? Write to us!")
                yield Label("Name *")
                yield Input(placeholder="Your full name", id="input-contact-name")
                yield Label("Email *")
                yield Input(placeholder="you@example.com", id="input-contact-email")
                yield Label("Phone")
                yield Input(placeholder="Your phone number", id="input-contact-phone")
                yield Label("Message *")
                yield TextArea(id="input-contact-message")
                yield Label("", id="label-contact-status")
                yield Button("Send Message", id="btn-contact-send", variant="primary")
            yield Markdown("", id="md-contact-info")

    async def on_mount(self):
        info = self.app.state.contact_info
        rows = [
            ["Phone", info.phone, info.tel_link],
            ["Email", info.email, info.mailto_link],
            ["Address", info.address, None],
            ["WhatsApp", info.whatsapp_number, info.whatsapp_link()],
        ]
        rows = [[k, v, link or ""] for k, v, link in rows if v]
        table = generate_markdown_table(["", "", "Link"], rows, ["l", "l", "l"])
        await self.query_one("#md-contact-info", Markdown).update(
            "### Contact information\n\n" + (table or "_No contact details set._")
        )

    async def refresh_content(self) -> None:
        user = self.app.state.session.user
        if user is None:
            return
        # prefill from the account, never overwrite what was typed
        for key, value in (
            ("name", user.display_name),
            ("email", user.email),
            ("phone", user.phone),
        ):
            field = self.query_one(f"#input-contact-{key}", Input)
            if not field.value:
                field.value = value

    def _form(self) -> dict:
        form = {
            key: self.query_one(f"#input-contact-{key}", Input).value.strip()
            for key in CONTACT_INPUTS
        }
        form["message"] = self.query_one("#input-contact-message", TextArea).text
        return form

    @on(Button.Pressed, "#btn-contact-send")
    @work(exclusive=True)
    async def handle_send(self) -> None:
        if self._send.pending:
            return
        form = self._form()
        errors = validate_contact(form)
        if errors:
            await self.app.push_screen_wait(FormErrorsModal(errors))
            return

        status = self.query_one("#label-contact-status", Label)
        button = self.query_one("#btn-contact-send", Button)
        button.disabled = True
        button.label = "Sending..."
        status.update("")

        result = await self._send.run(
            lambda: self.app.state.contact.send(ContactMessage(**form))
        )

        button.disabled = False
        button.label = "Send Message"
        status.update(result.value if result.ok else result.error)
        status.set_class(self._send.status == Status.FAILURE, "-error")

        if result.ok:
            for key in CONTACT_INPUTS:
                self.query_one(f"#input-contact-{key}", Input).value = ""
            self.query_one("#input-contact-message", TextArea).load_text("")
