"""Modal dialog used for confirmations.

Usage:
    from steer_dashboard.tui.components import Modal

    app.push_screen(
        Modal.confirm_delete("release", "default/my-app"),
        callback=handle_result,
    )
"""

from __future__ import annotations

from typing import Literal

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

ButtonVariant = Literal["default", "primary", "success", "warning", "error"]

CONFIRM = "confirm"
CANCEL = "cancel"


class Modal(ModalScreen[str | None]):
    """A centered dialog that dismisses with the id of the pressed button.

    Escape or the cancel button dismisses with None.
    """

    DEFAULT_CSS = """
    Modal {
        align: center middle;
    }

    Modal > Container {
        width: auto;
        max-width: 80%;
        min-width: 40;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    Modal .modal-title {
        text-style: bold;
        width: 100%;
        text-align: center;
        margin-bottom: 1;
    }

    Modal .modal-buttons {
        width: 100%;
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    Modal .modal-buttons Button {
        margin: 0 1;
        min-width: 10;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("tab", "focus_next", "Next", show=False),
        Binding("shift+tab", "focus_previous", "Previous", show=False),
    ]

    def __init__(
        self,
        title: str,
        body: str,
        buttons: list[tuple[str, str, ButtonVariant]] | None = None,
        *,
        cancel_label: str = "Cancel",
    ) -> None:
        """Initialize the modal.

        Args:
            title: Title shown at the top.
            body: Message text.
            buttons: ``(label, id, variant)`` tuples; defaults to a single OK.
                A cancel button is appended unless one is already present.
            cancel_label: Label of the appended cancel button.
        """
        super().__init__()
        self._title = title
        self._body = body
        buttons = list(buttons or [("OK", "ok", "primary")])
        if all(button_id != CANCEL for _, button_id, _ in buttons):
            buttons.append((cancel_label, CANCEL, "default"))
        self._buttons = buttons

    @classmethod
    def confirm_delete(cls, noun: str, key: str) -> Modal:
        """Confirmation dialog for deleting one resource."""
        return cls(
            title="Confirm Delete",
            body=f"Delete {noun} '{escape(key)}'? This cannot be undone.",
            buttons=[("Delete", CONFIRM, "error")],
        )

    def compose(self) -> ComposeResult:
        with Container():
            yield Label(self._title, classes="modal-title")
            yield Static(self._body, classes="modal-body")
            with Horizontal(classes="modal-buttons"):
                for label, button_id, variant in self._buttons:
                    yield Button(label, id=f"modal-btn-{button_id}", variant=variant)

    def on_mount(self) -> None:
        """Focus the first button."""
        self.query(Button).first().focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = (event.button.id or "").removeprefix("modal-btn-")
        self.dismiss(None if button_id == CANCEL else button_id)

    def action_cancel(self) -> None:
        self.dismiss(None)
