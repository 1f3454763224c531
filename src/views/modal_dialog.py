from typing import Dict, Literal, Mapping, Tuple, override

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label

from utils.messages import QuitRequestedMessage

Tone = Literal["info", "confirm", "warning", "danger"]
ButtonVariant = Literal["primary", "default", "success", "warning", "error"]

# tone -> (accept button, cancel button)
TONE_VARIANTS: Dict[str, Tuple[ButtonVariant, ButtonVariant]] = {
    "info": ("primary", "default"),
    "confirm": ("success", "default"),
    "warning": ("warning", "default"),
    "danger": ("error", "primary"),
}


class DialogModal(ModalScreen[bool]):
    """
    Caption plus one or two buttons. Resolves True on accept, False on cancel
    or escape.
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(
        self,
        caption: str,
        accept: str = "OK",
        cancel: str = "",
        tone: Tone = "info",
    ):
        super().__init__()
        self.caption = caption
        self.accept_label = accept
        self.cancel_label = cancel
        self.tone = tone

    def compose(self) -> ComposeResult:
        accept_variant, cancel_variant = TONE_VARIANTS[self.tone]
        with Container(id="div-dialog"):
            yield Label(self.caption, id="caption")
            with Horizontal(id="dialog"):
                if self.cancel_label:
                    yield Button(self.cancel_label, variant=cancel_variant, id="btn-cancel")
                yield Button(self.accept_label, variant=accept_variant, id="btn-accept")

    def on_mount(self):
        # dangerous dialogs start on the cancel button
        focus_id = "#btn-cancel" if self.cancel_label and self.tone == "danger" else "#btn-accept"
        self.query_one(focus_id).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-accept":
            self.accept()
        elif event.button.id == "btn-cancel":
            self.action_cancel()

    def accept(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class ConfirmModal(DialogModal):
    """Yes/No question."""

    def __init__(self, question: str, tone: Tone = "warning"):
        super().__init__(question, accept="Yes", cancel="No", tone=tone)


class FormErrorsModal(DialogModal):
    """Lists a form's field errors, one per line."""

    def __init__(self, errors: Mapping[str, str]):
        lines = "\n".join(f"- {msg}" for msg in errors.values())
        super().__init__(f"Please fix the following:\n{lines}", tone="warning")


class QuitDialogModal(ConfirmModal):
    def __init__(self):
        super().__init__("Are you sure you want to quit?", tone="danger")

    @override
    def accept(self) -> None:
        self.post_message(QuitRequestedMessage())
        self.dismiss(True)
