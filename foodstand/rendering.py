"""rich rendering helpers for the terminal UI."""

from __future__ import annotations

from rich.text import Text

from foodstand.aggregate import order_total
from foodstand.constant import KITCHEN_LABELS, PAYMENT_LABELS
from foodstand.exports import format_currency, items_text
from foodstand.models import KitchenStatus, Order, Totals


def kitchen_style(status: KitchenStatus) -> str:
    """Return a consistent badge style for kitchen states."""
    if status is KitchenStatus.PREPARING:
        return "bold #ffffff on #2f6db5"
    if status is KitchenStatus.READY:
        return "bold #0b1f0f on #5fbf72"
    return "bold #1a1a1a on #b9b9b9"


def payment_style(order: Order) -> str:
    if order.is_paid:
        return "bold #0b1f0f on #5fbf72"
    return "bold #1a1a1a on #f0b429"


def format_payment_badge(order: Order) -> Text:
    text = Text()
    label = PAYMENT_LABELS["PAID"] if order.is_paid else PAYMENT_LABELS["UNPAID"]
    text.append(f" {label} ", style=payment_style(order))
    if order.is_paid and order.payment_method:
        text.append(f" {order.payment_method}", style="dim")
        if order.payment_reference:
            text.append(f" Ref:{order.payment_reference}", style="dim")
    return text


def format_kitchen_badge(status: KitchenStatus) -> Text:
    return Text(f" {KITCHEN_LABELS[status.value]} ", style=kitchen_style(status))


def format_order_row(order: Order, day_key: str | None = None) -> Text:
    """One order as a header line plus indented detail lines."""
    text = Text()
    if day_key:
        text.append(f"{day_key} ", style="dim")
    text.append(order.customer_name, style="bold")
    text.append(f" • {order.created_at.astimezone().strftime('%H:%M:%S')}", style="dim")
    text.append("  ")
    text.append_text(format_payment_badge(order))
    text.append(" ")
    text.append_text(format_kitchen_badge(order.kitchen_status))
    text.append(f"\n      {items_text(order, ' · ')} — ")
    text.append(format_currency(order_total(order)), style="bold")
    if order.phone:
        text.append(f"\n      Tel: {order.phone}", style="dim")
    if order.note:
        text.append(f"\n      Nota: {order.note}", style="italic dim")
    return text


def format_totals(totals: Totals, title: str = "Total del día") -> Text:
    text = Text()
    text.append(f"{title}: ", style="bold")
    text.append(format_currency(totals.gross))
    text.append("   Cobrado: ", style="bold")
    text.append(format_currency(totals.collected), style="#5fbf72")
    text.append("   Pendiente: ", style="bold")
    text.append(format_currency(totals.outstanding), style="#f0b429")
    return text
