"""Summary text, CSV and share-link exports."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable
from urllib.parse import quote

from foodstand.aggregate import compute_totals, order_total
from foodstand.config import EXPORT_DIR, WHATSAPP_BASE_URL
from foodstand.constant import CSV_HEADER, PAYMENT_LABELS
from foodstand.models import HistoryEntry, Order

logger = logging.getLogger(__name__)


def format_currency(amount: int) -> str:
    """Whole pesos with dot thousands separators, e.g. ``$ 24.000``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}$ {abs(amount):,}".replace(",", ".")


def items_text(order: Order, separator: str = ", ") -> str:
    return separator.join(f"{line.quantity}x {line.item.name}" for line in order.lines)


def payment_tag(order: Order) -> str:
    if not order.is_paid:
        return f"[{PAYMENT_LABELS['UNPAID']}]"
    parts = [PAYMENT_LABELS["PAID"]]
    if order.payment_method:
        parts.append(order.payment_method)
    if order.payment_reference:
        parts.append(f"Ref:{order.payment_reference}")
    return f"[{' - '.join(parts)}]"


def summary_text(day_key: str, orders: list[Order]) -> str:
    """Plain-text day summary meant for a chat message."""
    totals = compute_totals(orders)
    lines = [
        f"Resumen {day_key}",
        f"Total pedidos: {len(orders)}",
        (
            f"Cobrado: {format_currency(totals.collected)} | "
            f"Pendiente: {format_currency(totals.outstanding)} | "
            f"Total: {format_currency(totals.gross)}"
        ),
        "",
    ]
    for order in orders:
        lines.append(
            f"• {order.customer_name} — {items_text(order)} ({format_currency(order_total(order))}) {payment_tag(order)}"
        )
    return "\n".join(lines)


def whatsapp_link(text: str, admin_phone: str = "") -> str:
    """wa.me link carrying ``text``; only the digits of ``admin_phone`` are used."""
    digits = re.sub(r"\D", "", admin_phone or "")
    return f"{WHATSAPP_BASE_URL}{digits}?text={quote(text, safe='')}"


def _quoted(value: str) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def csv_row(entry: HistoryEntry) -> str:
    order = entry.order
    return ",".join(
        [
            entry.day_key,
            order.created_at.astimezone().strftime("%H:%M:%S"),
            _quoted(order.customer_name),
            _quoted(order.phone),
            _quoted(items_text(order, " + ")),
            str(order_total(order)),
            PAYMENT_LABELS["PAID"] if order.is_paid else PAYMENT_LABELS["UNPAID"],
        ]
    )


def csv_text(entries: Iterable[HistoryEntry]) -> str:
    """CSV with free-text columns quoted."""
    return "\n".join([",".join(CSV_HEADER), *(csv_row(entry) for entry in entries)])


def sanitize_filename_part(value: str) -> str:
    cleaned = re.sub(r"[^A-Za-z0-9_-]+", "_", (value or "").strip()).strip("_")
    return cleaned or "cliente"


def export_filename(kind: str, day_key: str, customer_name: str, suffix: str = ".png") -> str:
    return f"{kind}_{day_key}_{sanitize_filename_part(customer_name)}{suffix}"


def write_text_export(filename: str, content: str, directory: str | Path = EXPORT_DIR) -> Path:
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    path.write_text(content, encoding="utf-8")
    logger.info("export_written path=%s bytes=%d", path, len(content.encode("utf-8")))
    return path


def write_history_csv(
    entries: Iterable[HistoryEntry], filename: str = "historial_filtrado.csv", directory: str | Path = EXPORT_DIR
) -> Path:
    return write_text_export(filename, csv_text(entries), directory)
