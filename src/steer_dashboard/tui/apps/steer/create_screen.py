"""Form-based creation screen for releases and test jobs.

Renders the field descriptors of the chosen kind, hands the collected
values to the form builders and submits the result through the owning
list screen's refresh controller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal, ScrollableContainer, Vertical
from textual.widgets import Button, Input, Label, Select, TextArea

from steer_dashboard.core.exceptions import FormValidationError
from steer_dashboard.core.forms import (
    RELEASE_FORM_FIELDS,
    TEST_JOB_FORM_FIELDS,
    FieldSpec,
    build_release,
    build_test_job,
)
from steer_dashboard.core.references import selection_options
from steer_dashboard.integrations.steer.models import ResourceKind
from steer_dashboard.tui.base import BaseScreen

if TYPE_CHECKING:
    from steer_dashboard.core.refresh import RefreshController

logger = structlog.get_logger()

FORM_FIELDS: dict[ResourceKind, list[FieldSpec]] = {
    ResourceKind.RELEASE: RELEASE_FORM_FIELDS,
    ResourceKind.TEST_JOB: TEST_JOB_FORM_FIELDS,
}

# Fields shown only for one schedule type
SCHEDULE_FIELDS: dict[str, set[str]] = {
    "once": {"delay"},
    "cron": {"cron", "timezone"},
}


class ResourceCreateScreen(BaseScreen[str | None]):
    """Create form; dismisses with the new resource's key, or None."""

    DEFAULT_CSS = """
    ResourceCreateScreen .form-field {
        height: auto;
        margin-bottom: 1;
    }

    ResourceCreateScreen .form-help {
        color: $text-muted;
    }

    ResourceCreateScreen #form-error {
        color: $error;
        height: auto;
    }

    ResourceCreateScreen .field-invalid {
        border: tall $error;
    }

    ResourceCreateScreen TextArea {
        height: 6;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("ctrl+s", "submit", "Create"),
    ]

    def __init__(self, kind: ResourceKind, controller: RefreshController) -> None:
        """Initialize the form.

        Args:
            kind: Which resource the form creates.
            controller: Controller of the list screen that opened the form.
        """
        super().__init__()
        self._kind = kind
        self._controller = controller
        self._field_specs = FORM_FIELDS[kind]
        self._log = logger.bind(screen="create", kind=kind.value)

    def _options(self, spec: FieldSpec) -> list[tuple[str, str]]:
        if spec.name == "release" and self._kind is ResourceKind.TEST_JOB:
            releases = self._controller.snapshot.releases
            return [(escape(label), key) for label, key in selection_options(releases)]
        return spec.options or []

    def compose(self) -> ComposeResult:
        """Build the form from the field descriptors."""
        yield Label(f"Create {self._kind.kind_name}", id="create-header")

        with ScrollableContainer(id="create-form"):
            for spec in self._field_specs:
                with Vertical(classes="form-field", id=f"wrap-{spec.name}"):
                    yield Label(f"{spec.label} *" if spec.required else spec.label, classes="form-label")

                    if spec.field_type == "select":
                        options = self._options(spec)
                        values = {value for _, value in options}
                        yield Select(
                            options,
                            value=spec.default if spec.default in values else Select.NULL,
                            id=f"field-{spec.name}",
                        )
                    elif spec.field_type == "textarea":
                        yield TextArea(spec.default, id=f"field-{spec.name}")
                    elif spec.field_type == "int":
                        yield Input(
                            value=spec.default,
                            placeholder=spec.placeholder,
                            id=f"field-{spec.name}",
                            type="integer",
                        )
                    else:
                        yield Input(
                            value=spec.default,
                            placeholder=spec.placeholder,
                            id=f"field-{spec.name}",
                        )

                    if spec.help_text:
                        yield Label(spec.help_text, classes="form-help")

        yield Label("", id="form-error")
        with Horizontal(id="create-buttons"):
            yield Button("Create", variant="success", id="btn-create")
            yield Button("Cancel", variant="default", id="btn-cancel")

    def on_mount(self) -> None:
        if self._kind is ResourceKind.TEST_JOB:
            self._toggle_schedule_fields("once")

    def _toggle_schedule_fields(self, schedule_type: str) -> None:
        for branch, names in SCHEDULE_FIELDS.items():
            for name in names:
                self.query_one(f"#wrap-{name}").display = branch == schedule_type

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "field-schedule_type" and event.value != Select.NULL:
            self._toggle_schedule_fields(str(event.value))

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button clicks."""
        if event.button.id == "btn-create":
            await self.action_submit()
        elif event.button.id == "btn-cancel":
            self.action_cancel()

    def action_cancel(self) -> None:
        """Close without creating."""
        self.dismiss(None)

    def _collect_values(self) -> dict[str, Any]:
        """Read raw widget values keyed by field name."""
        values: dict[str, Any] = {}
        for spec in self._field_specs:
            widget_id = f"#field-{spec.name}"
            if spec.field_type == "select":
                select = self.query_one(widget_id, Select)
                values[spec.name] = "" if select.value == Select.NULL else str(select.value)
            elif spec.field_type == "textarea":
                values[spec.name] = self.query_one(widget_id, TextArea).text
            else:
                values[spec.name] = self.query_one(widget_id, Input).value
        return values

    def show_error(self, error: FormValidationError) -> None:
        """Show a validation error next to the form and mark the field."""
        for wrapper in self.query(".form-field"):
            wrapper.set_class(wrapper.id == f"wrap-{error.field}", "field-invalid")
        self.query_one("#form-error", Label).update(escape(str(error)))

    def _clear_error(self) -> None:
        for wrapper in self.query(".form-field"):
            wrapper.remove_class("field-invalid")
        self.query_one("#form-error", Label).update("")

    async def action_submit(self) -> None:
        """Validate the form and create the resource.

        Validation errors stay on the form. Backend errors are reported as
        notifications by the controller and leave the form open.
        """
        values = self._collect_values()
        try:
            if self._kind is ResourceKind.RELEASE:
                resource: Any = build_release(values)
            else:
                resource = build_test_job(values)
        except FormValidationError as e:
            self._log.debug("form_invalid", field=e.field, error=e.message)
            self.show_error(e)
            return

        self._clear_error()
        if self._kind is ResourceKind.RELEASE:
            created = await self._controller.create_release(resource)
        else:
            created = await self._controller.create_test_job(resource)

        if created is not None:
            self._log.info("resource_created", key=resource.key)
            self.dismiss(resource.key)
