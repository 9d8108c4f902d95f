"""New order modal: cart editor plus customer fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from foodstand.cart import Cart
from foodstand.exports import format_currency
from foodstand.models import CartLine, CatalogItem


@dataclass(frozen=True)
class NewOrderDraft:
    """Everything typed into the modal, handed to the ledger on save."""

    customer_name: str
    phone: str
    note: str
    lines: list[CartLine]
    mark_paid: bool


class NewOrderModal(ModalScreen[bool]):
    """Assemble a cart and customer data; dismisses with True once saved."""

    CSS = """
    NewOrderModal {
        align: center middle;
        background: $background 60%;
    }

    #new-order-dialog {
        width: 84;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #new-order-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #new-order-body {
        color: white;
    }

    #new-order-error {
        color: #ffb3b3;
        margin-top: 1;
    }

    #new-order-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    _FIELD_MENU = "menu"
    _FIELD_NAME = "name"
    _FIELD_PHONE = "phone"
    _FIELD_NOTE = "note"
    _FIELD_PAID = "paid"
    _FIELDS = (_FIELD_MENU, _FIELD_NAME, _FIELD_PHONE, _FIELD_NOTE, _FIELD_PAID)
    _TEXT_LIMITS = {_FIELD_NAME: 40, _FIELD_PHONE: 20, _FIELD_NOTE: 120}

    def __init__(
        self,
        catalog: list[CatalogItem],
        on_save: Callable[[NewOrderDraft], str | None],
        initial_item: CatalogItem | None = None,
    ) -> None:
        super().__init__()
        self.catalog = catalog
        self.on_save = on_save
        self.cart = Cart()
        if initial_item is not None:
            self.cart.add(initial_item)
        self.field = self._FIELD_MENU
        self.menu_index = catalog.index(initial_item) if initial_item in catalog else 0
        self.values = {self._FIELD_NAME: "", self._FIELD_PHONE: "", self._FIELD_NOTE: ""}
        self.mark_paid = False
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="new-order-dialog"):
            yield Static("Nueva orden", id="new-order-title")
            yield Static(id="new-order-body")
            yield Static(id="new-order-error")
            yield Static(id="new-order-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        key = event.key
        # The modal owns the keyboard while open.
        event.stop()
        if key == "escape":
            self.dismiss(False)
            return
        if key == "ctrl+s":
            if self._save():
                return
        elif key == "tab":
            self._move_field(1)
        elif key == "shift+tab":
            self._move_field(-1)
        elif self.field == self._FIELD_MENU:
            self._handle_menu_key(event)
        elif self.field == self._FIELD_PAID:
            if key in {"space", "enter"}:
                self.mark_paid = not self.mark_paid
        else:
            self._handle_text_key(event)
        self._refresh_content()

    def _handle_menu_key(self, event: Key) -> None:
        if not self.catalog:
            return
        item = self.catalog[self.menu_index]
        if event.key == "up":
            self.menu_index = (self.menu_index - 1) % len(self.catalog)
        elif event.key == "down":
            self.menu_index = (self.menu_index + 1) % len(self.catalog)
        elif event.key in {"enter", "right"} or event.character == "+":
            self.cart.add(item)
            self.error = ""
        elif event.key in {"backspace", "left"} or event.character == "-":
            self.cart.remove(item)
        elif event.character == "x":
            self.cart.clear()

    def _handle_text_key(self, event: Key) -> None:
        value = self.values[self.field]
        if event.key == "backspace":
            self.values[self.field] = value[:-1]
            return
        if event.key == "enter":
            self._move_field(1)
            return
        if event.is_printable and event.character and len(value) < self._TEXT_LIMITS[self.field]:
            self.values[self.field] = value + event.character

    def _move_field(self, delta: int) -> None:
        idx = self._FIELDS.index(self.field)
        self.field = self._FIELDS[(idx + delta) % len(self._FIELDS)]

    def _save(self) -> bool:
        """Hand the draft to ``on_save``; True once the order is stored and the modal closed."""
        if self.cart.is_empty():
            self.error = "Agrega al menos un producto"
            return False
        draft = NewOrderDraft(
            customer_name=self.values[self._FIELD_NAME],
            phone=self.values[self._FIELD_PHONE],
            note=self.values[self._FIELD_NOTE],
            lines=self.cart.lines(),
            mark_paid=self.mark_paid,
        )
        error = self.on_save(draft)
        if error:
            self.error = error
            return False
        self.cart.clear()
        self.dismiss(True)
        return True

    def _field_line(self, content: Text, field: str, label: str, value: str) -> None:
        active = self.field == field
        pointer = "➤ " if active else "  "
        content.append(f"{pointer}{label}: ", style="bold white" if active else "white")
        content.append(value)
        if active:
            content.append("|", style="bold")
        content.append("\n")

    def _refresh_content(self) -> None:
        body = self.query_one("#new-order-body", Static)
        error_widget = self.query_one("#new-order-error", Static)
        help_widget = self.query_one("#new-order-help", Static)

        content = Text(style="white")
        self._field_line(content, self._FIELD_NAME, "Cliente", self.values[self._FIELD_NAME])
        self._field_line(content, self._FIELD_PHONE, "Teléfono", self.values[self._FIELD_PHONE])
        self._field_line(content, self._FIELD_NOTE, "Observaciones", self.values[self._FIELD_NOTE])
        paid_active = self.field == self._FIELD_PAID
        content.append("➤ " if paid_active else "  ")
        content.append(f"{'[x]' if self.mark_paid else '[ ]'} Marcado como pagado\n", style="bold" if paid_active else "")

        content.append("\nProductos\n", style="bold")
        menu_active = self.field == self._FIELD_MENU
        for idx, item in enumerate(self.catalog):
            pointer = "➤ " if menu_active and idx == self.menu_index else "  "
            qty = self.cart.quantity_of(item)
            style = "bold white" if qty else "white"
            content.append(f"{pointer}{qty:>2} × {item.name:<22} {format_currency(item.unit_price):>10}\n", style=style)

        content.append("\nCarrito\n", style="bold")
        if self.cart.is_empty():
            content.append("  Aún no has agregado productos.\n", style="dim")
        for line in self.cart.lines():
            content.append(f"  {line.quantity} x {line.item.name}  {format_currency(line.item.unit_price * line.quantity)}\n")
        content.append(f"  Total: {format_currency(self.cart.total())}", style="bold")

        body.update(content)
        error_widget.update(self.error)
        if menu_active:
            help_widget.update("↑/↓ move, Enter/+ add, Backspace/- remove, x empty, Tab next field, Ctrl+S save, Esc cancel")
        elif paid_active:
            help_widget.update("Space toggle paid, Tab next field, Ctrl+S save, Esc cancel")
        else:
            help_widget.update("Type text, Backspace delete, Tab next field, Ctrl+S save, Esc cancel")
