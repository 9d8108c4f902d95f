"""Payment method modal."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from foodstand.constant import PAYMENT_METHOD_LABELS, PAYMENT_METHOD_OTHER


@dataclass(frozen=True)
class PaymentChoice:
    method: str
    reference: str = ""
    other_text: str = ""


class PaymentModal(ModalScreen[PaymentChoice | None]):
    """Pick a payment method and an optional reference."""

    CSS = """
    PaymentModal {
        align: center middle;
        background: $background 60%;
    }

    #payment-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #payment-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #payment-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    _FIELD_METHOD = "method"
    _FIELD_OTHER = "other"
    _FIELD_REFERENCE = "reference"

    def __init__(self, customer_name: str, amount_text: str) -> None:
        super().__init__()
        self.customer_name = customer_name
        self.amount_text = amount_text
        self.methods = list(PAYMENT_METHOD_LABELS)
        self.method_index = 0
        self.field = self._FIELD_METHOD
        self.other_text = ""
        self.reference = ""

    def compose(self) -> ComposeResult:
        with Container(id="payment-dialog"):
            yield Static(f"Cobrar a {self.customer_name} ({self.amount_text})", id="payment-title")
            yield Static(id="payment-body")
            yield Static(id="payment-help")

    def on_mount(self) -> None:
        self._refresh_content()

    @property
    def selected_method(self) -> str:
        return self.methods[self.method_index]

    def _fields(self) -> list[str]:
        if self.selected_method == PAYMENT_METHOD_OTHER:
            return [self._FIELD_METHOD, self._FIELD_OTHER, self._FIELD_REFERENCE]
        return [self._FIELD_METHOD, self._FIELD_REFERENCE]

    def on_key(self, event: Key) -> None:
        key = event.key
        event.stop()
        if key == "escape":
            self.dismiss(None)
            return
        if key == "ctrl+s" or (key == "enter" and self.field != self._FIELD_OTHER):
            self._confirm()
            return
        if key == "tab":
            fields = self._fields()
            self.field = fields[(fields.index(self.field) + 1) % len(fields)]
        elif self.field == self._FIELD_METHOD:
            if key == "up":
                self.method_index = (self.method_index - 1) % len(self.methods)
            elif key == "down":
                self.method_index = (self.method_index + 1) % len(self.methods)
        elif key == "enter":
            self.field = self._FIELD_REFERENCE
        elif key == "backspace":
            self._set_text(self._text()[:-1])
        elif event.is_printable and event.character and len(self._text()) < 40:
            self._set_text(self._text() + event.character)
        self._refresh_content()

    def _text(self) -> str:
        return self.other_text if self.field == self._FIELD_OTHER else self.reference

    def _set_text(self, value: str) -> None:
        if self.field == self._FIELD_OTHER:
            self.other_text = value
        else:
            self.reference = value

    def _confirm(self) -> None:
        self.dismiss(PaymentChoice(method=self.selected_method, reference=self.reference, other_text=self.other_text))

    def _refresh_content(self) -> None:
        content = Text(style="white")
        for idx, method in enumerate(self.methods):
            active = self.field == self._FIELD_METHOD and idx == self.method_index
            marker = "(•)" if idx == self.method_index else "( )"
            content.append(f"{'➤ ' if active else '  '}{marker} {PAYMENT_METHOD_LABELS[method]}\n", style="bold" if active else "")
        if self.selected_method == PAYMENT_METHOD_OTHER:
            active = self.field == self._FIELD_OTHER
            content.append(f"\n{'➤ ' if active else '  '}Método: {self.other_text}{'|' if active else ''}")
        active = self.field == self._FIELD_REFERENCE
        content.append(f"\n{'➤ ' if active else '  '}Referencia: {self.reference}{'|' if active else ''}")
        self.query_one("#payment-body", Static).update(content)
        self.query_one("#payment-help", Static).update("↑/↓ method, Tab next field, Enter/Ctrl+S confirm, Esc cancel")
