"""Main Textual app class."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from foodstand.aggregate import STATUS_ALL, compute_totals, filter_by_status, order_total
from foodstand.config import EXPORT_DIR
from foodstand.constant import HISTORY_STATUS_FILTERS, HISTORY_STATUS_LABELS, STAND_NAME
from foodstand.data import CATALOG
from foodstand.exports import format_currency, summary_text, whatsapp_link, write_text_export
from foodstand.history_modal import HistoryModal
from foodstand.ledger import EmptyOrderError, Ledger
from foodstand.models import CatalogItem, KitchenStatus, Order
from foodstand.new_order_modal import NewOrderDraft, NewOrderModal
from foodstand.payment_modal import PaymentChoice, PaymentModal
from foodstand.persistence import KeyValueStore, load_admin_phone, save_admin_phone
from foodstand.prompt_modal import ConfirmModal, TextPromptModal
from foodstand.receipt import check_printer_dependencies, print_receipt, save_receipt_png
from foodstand.rendering import format_order_row, format_totals
from foodstand.states import next_kitchen_status

logger = logging.getLogger(__name__)

_KITCHEN_BY_KEY = {
    "1": KitchenStatus.PENDING,
    "2": KitchenStatus.PREPARING,
    "3": KitchenStatus.READY,
}


class FoodStandApp(App):
    """A Textual app for taking, charging and tracking the day's orders."""

    TITLE = STAND_NAME
    SUB_TITLE = "Comida rápida"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #orders-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #menu-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #totals-bar {
        margin-bottom: 1;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 4;
    }

    #orders-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #menu-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    status_filter = reactive(STATUS_ALL)
    menu_index = reactive(0)
    order_selected_index = reactive(None)

    BINDINGS = [
        ("up", "move_menu(-1)", "Previous product"),
        ("down", "move_menu(1)", "Next product"),
        ("enter", "new_order_with_selected", "New order with product"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, store: KeyValueStore, export_dir: str | Path = EXPORT_DIR) -> None:
        super().__init__()
        self.store = store
        self.export_dir = export_dir
        self.ledger = Ledger.load(store)
        self.catalog: list[CatalogItem] = list(CATALOG)
        self.admin_phone = load_admin_phone(store)
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="orders-pane"):
                yield Static(id="orders-title", classes="pane-title")
                yield Static(id="totals-bar")
                yield Static("(sin pedidos todavía)", id="orders-list")
            with Vertical(id="menu-pane"):
                yield Static("Menú rápido", classes="pane-title")
                yield Static(id="menu-list")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        _, msg = check_printer_dependencies()
        self.system_status = msg
        logger.info("on_mount day=%s printer_status=%r", self.ledger.today_key(), msg)
        self._refresh_all()

    @property
    def day_key(self) -> str:
        return self.ledger.today_key()

    def visible_orders(self) -> list[Order]:
        return filter_by_status(self.ledger.orders_for(self.day_key), self.status_filter)

    def selected_order(self) -> Order | None:
        orders = self.visible_orders()
        if self.order_selected_index is None:
            return None
        if not (0 <= self.order_selected_index < len(orders)):
            return None
        return orders[self.order_selected_index]

    def on_key(self, event: Key) -> None:
        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        handlers = {
            "j": lambda: self._move_order_selection(1),
            "k": lambda: self._move_order_selection(-1),
            "n": self.action_new_order,
            "p": self.action_toggle_payment,
            "c": self.action_cycle_kitchen,
            "e": self.action_edit_note,
            "d": self.action_delete_order,
            "f": self.action_cycle_filter,
            "h": self.action_show_history,
            "r": lambda: self.action_export_receipt("recibo"),
            "i": lambda: self.action_export_receipt("factura"),
            "t": self.action_print_receipt,
            "s": self.action_share_summary,
            "a": self.action_edit_admin_phone,
        }
        key = event.character.lower()
        if key in _KITCHEN_BY_KEY:
            self._set_kitchen(_KITCHEN_BY_KEY[key])
            event.stop()
            return
        handler = handlers.get(key)
        if handler is None:
            return
        handler()
        event.stop()

    def action_move_menu(self, delta: int) -> None:
        if not self.catalog:
            return
        self.menu_index = (self.menu_index + delta) % len(self.catalog)
        self._refresh_menu()

    def action_new_order_with_selected(self) -> None:
        if not self.catalog:
            return
        self._open_new_order(self.catalog[self.menu_index])

    def action_new_order(self) -> None:
        self._open_new_order(None)

    def _open_new_order(self, initial_item: CatalogItem | None) -> None:
        self.push_screen(
            NewOrderModal(self.catalog, on_save=self.save_draft, initial_item=initial_item),
            callback=self._after_new_order,
        )

    def save_draft(self, draft: NewOrderDraft) -> str | None:
        """Store a drafted order for today. Returns an error message, or None on success."""
        try:
            order = self.ledger.create_order(
                self.day_key, draft.customer_name, draft.phone, draft.note, draft.lines, draft.mark_paid
            )
        except EmptyOrderError as exc:
            return str(exc)
        self.system_status = f"Orden guardada: {order.customer_name} ({format_currency(order_total(order))})"
        return None

    def _after_new_order(self, saved: bool | None) -> None:
        if saved:
            self.order_selected_index = 0
        self._refresh_all()

    def action_toggle_payment(self) -> None:
        order = self.selected_order()
        if order is None:
            return
        if order.is_paid:
            self.push_screen(
                ConfirmModal(
                    f"¿Marcar como pendiente el pedido de {order.customer_name}? "
                    "Se borran el método y la referencia de pago."
                ),
                callback=lambda confirmed: self._revert_payment(order, confirmed),
            )
            return
        self.push_screen(
            PaymentModal(order.customer_name, format_currency(order_total(order))),
            callback=lambda choice: self._apply_payment(order, choice),
        )

    def _apply_payment(self, order: Order, choice: PaymentChoice | None) -> None:
        if choice is None:
            return
        if self.ledger.mark_paid(order.day_key, order.order_id, choice.method, choice.reference, choice.other_text):
            self.system_status = f"Pagado: {order.customer_name} ({order.payment_method})"
        self._refresh_all()

    def _revert_payment(self, order: Order, confirmed: bool | None) -> None:
        if not confirmed:
            return
        if self.ledger.revert_to_unpaid(order.day_key, order.order_id):
            self.system_status = f"Pendiente: {order.customer_name}"
        self._refresh_all()

    def action_cycle_kitchen(self) -> None:
        order = self.selected_order()
        if order is None:
            return
        self._set_kitchen(next_kitchen_status(order.kitchen_status))

    def _set_kitchen(self, status: KitchenStatus) -> None:
        order = self.selected_order()
        if order is None:
            return
        self.ledger.set_kitchen_status(order.day_key, order.order_id, status)
        self._refresh_orders()

    def action_edit_note(self) -> None:
        order = self.selected_order()
        if order is None:
            return

        def apply(note: str | None) -> None:
            if note is None:
                return
            self.ledger.set_note(order.day_key, order.order_id, note)
            self._refresh_orders()

        self.push_screen(TextPromptModal("Observaciones", initial=order.note), callback=apply)

    def action_delete_order(self) -> None:
        order = self.selected_order()
        if order is None:
            return

        def apply(confirmed: bool | None) -> None:
            if not confirmed:
                return
            self.ledger.remove_order(order.day_key, order.order_id)
            self.system_status = f"Eliminado: {order.customer_name}"
            self._refresh_all()

        self.push_screen(ConfirmModal(f"¿Eliminar el pedido de {order.customer_name}?"), callback=apply)

    def action_cycle_filter(self) -> None:
        idx = HISTORY_STATUS_FILTERS.index(self.status_filter)
        self.status_filter = HISTORY_STATUS_FILTERS[(idx + 1) % len(HISTORY_STATUS_FILTERS)]
        self.order_selected_index = None
        self._refresh_orders()

    def action_show_history(self) -> None:
        self.push_screen(HistoryModal(self.ledger, self.export_dir))

    def action_export_receipt(self, kind: str) -> None:
        order = self.selected_order()
        if order is None:
            return
        try:
            path = save_receipt_png(order, kind, self.export_dir)
        except OSError as exc:
            self.system_status = f"Export failed: {exc}"
        else:
            self.system_status = f"Imagen guardada: {path}"
        self._refresh_status()

    def action_print_receipt(self) -> None:
        order = self.selected_order()
        if order is None:
            return
        try:
            print_receipt(order)
        except Exception as exc:
            logger.warning("print_failed order_id=%s error=%r", order.order_id, exc)
            self.system_status = f"Print failed: {exc}"
        else:
            self.system_status = f"Impreso: {order.customer_name}"
        self._refresh_status()

    def action_share_summary(self) -> None:
        text = summary_text(self.day_key, self.ledger.orders_for(self.day_key))
        link = whatsapp_link(text, self.admin_phone)
        try:
            path = write_text_export(f"resumen_{self.day_key}.txt", text, self.export_dir)
        except OSError as exc:
            self.system_status = f"Export failed: {exc}"
        else:
            self.copy_to_clipboard(link)
            self.system_status = f"Resumen: {path}\nWhatsApp (copiado): {link[:60]}..."
        self._refresh_status()

    def action_edit_admin_phone(self) -> None:
        def apply(phone: str | None) -> None:
            if phone is None:
                return
            self.admin_phone = phone
            if not save_admin_phone(self.store, phone):
                self.system_status = "No se pudo guardar el WhatsApp del administrador"
            self._refresh_status()

        self.push_screen(
            TextPromptModal("WhatsApp administrador (para el resumen)", initial=self.admin_phone, max_length=20),
            callback=apply,
        )

    def _refresh_all(self) -> None:
        self._refresh_orders()
        self._refresh_menu()
        self._refresh_status()

    def _move_order_selection(self, delta: int) -> None:
        orders = self.visible_orders()
        if not orders:
            return

        if self.order_selected_index is None:
            self.order_selected_index = 0 if delta > 0 else len(orders) - 1
        else:
            self.order_selected_index = (self.order_selected_index + delta) % len(orders)
        self._refresh_orders()

    def _visible_rows(self, widget: Static, rows_per_item: int = 1) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height // rows_per_item)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_orders(self) -> None:
        try:
            title_widget = self.query_one("#orders-title", Static)
            totals_widget = self.query_one("#totals-bar", Static)
            orders_widget = self.query_one("#orders-list", Static)
        except NoMatches:
            return

        day_orders = self.ledger.orders_for(self.day_key)
        title = Text(f"{STAND_NAME} — {self.day_key}  ", style="bold")
        title.append(f"[{HISTORY_STATUS_LABELS[self.status_filter]}]", style="dim")
        title_widget.update(title)
        totals_widget.update(format_totals(compute_totals(day_orders)))

        orders = filter_by_status(day_orders, self.status_filter)
        if not orders:
            self.order_selected_index = None
            orders_widget.update("(sin pedidos todavía)")
            return

        if self.order_selected_index is not None and self.order_selected_index >= len(orders):
            self.order_selected_index = len(orders) - 1

        visible_rows = self._visible_rows(orders_widget, rows_per_item=3)
        start, end = self._window_bounds(len(orders), visible_rows, self.order_selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.order_selected_index else "  "
            lines.append(pointer)
            lines.append_text(format_order_row(orders[idx]))

        if end < len(orders):
            lines.append("\n⋮", style="dim")

        orders_widget.update(lines)

    def _refresh_menu(self) -> None:
        try:
            menu_widget = self.query_one("#menu-list", Static)
        except NoMatches:
            return
        visible_rows = self._visible_rows(menu_widget)
        start, end = self._window_bounds(len(self.catalog), visible_rows, self.menu_index)
        lines = Text()
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            item = self.catalog[idx]
            pointer = "➤ " if idx == self.menu_index else "  "
            lines.append(f"{pointer}{item.name:<22} {format_currency(item.unit_price):>10}")
        menu_widget.update(lines)

    def _refresh_status(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        status = self.system_status or "Listo"
        bar.update(
            "n nueva · Enter nueva con producto · j/k mover · p pago · c/1/2/3 cocina · e nota · d eliminar · "
            f"f filtro · h historial · r/i recibo/factura · t imprimir · s resumen · a WhatsApp admin\n{status}"
        )
