"""Totals and history views derived from the ledger. Nothing here mutates orders."""

from __future__ import annotations

from typing import Iterable, Mapping

from foodstand.models import HistoryEntry, HistoryResult, Order, Totals

STATUS_ALL = "all"
STATUS_PAID = "paid"
STATUS_UNPAID = "unpaid"


def order_total(order: Order) -> int:
    return sum(line.item.unit_price * line.quantity for line in order.lines)


def compute_totals(orders: Iterable[Order]) -> Totals:
    gross = 0
    collected = 0
    for order in orders:
        amount = order_total(order)
        gross += amount
        if order.is_paid:
            collected += amount
    return Totals(gross=gross, collected=collected, outstanding=gross - collected)


def matches_status(order: Order, status: str | None) -> bool:
    if status in (None, "", STATUS_ALL):
        return True
    if status == STATUS_PAID:
        return order.is_paid
    if status == STATUS_UNPAID:
        return not order.is_paid
    raise ValueError(f"Unknown status filter: {status!r}")


def filter_by_status(orders: Iterable[Order], status: str | None = STATUS_ALL) -> list[Order]:
    """Today's list filter: ``all``, ``paid`` or ``unpaid``."""
    return [order for order in orders if matches_status(order, status)]


def history_days(orders_by_day: Mapping[str, list[Order]], exclude_day_key: str, date: str | None = None) -> list[str]:
    if date:
        return [date] if date in orders_by_day else []
    return sorted((day for day in orders_by_day if day != exclude_day_key), reverse=True)


def query_history(
    orders_by_day: Mapping[str, list[Order]],
    exclude_day_key: str,
    date: str | None = None,
    status: str | None = STATUS_ALL,
) -> HistoryResult:
    """Orders from every day but ``exclude_day_key``, newest day first.

    With ``date`` set only that day is read, when it exists.
    """
    entries = [
        HistoryEntry(day_key=day_key, order=order)
        for day_key in history_days(orders_by_day, exclude_day_key, date)
        for order in orders_by_day.get(day_key, [])
        if matches_status(order, status)
    ]
    return HistoryResult(entries=entries, totals=compute_totals(entry.order for entry in entries))
