"""Payment and kitchen state transitions.

Each function inspects an order and returns the field changes for a legal
transition, or ``None`` when the transition is not allowed from the order's
current state. Applying the changes is the ledger's job.
"""

from __future__ import annotations

from typing import Any

from foodstand.constant import PAYMENT_METHOD_CASH, PAYMENT_METHOD_OTHER, PAYMENT_METHOD_LABELS
from foodstand.models import KitchenStatus, Order, PaymentStatus


def resolve_payment_method(method: str, other_text: str = "") -> str:
    """Return the method label to store.

    Known methods are kept as-is. For ``other`` the free text typed by the
    cashier becomes the stored label; blank free text keeps ``other``.
    Unknown labels pass through untouched.
    """
    method = (method or "").strip()
    if not method:
        return PAYMENT_METHOD_OTHER
    if method == PAYMENT_METHOD_OTHER:
        return other_text.strip() or PAYMENT_METHOD_OTHER
    return method


def is_known_payment_method(method: str) -> bool:
    return method in PAYMENT_METHOD_LABELS


def paid_changes(order: Order, method: str, reference: str = "", other_text: str = "") -> dict[str, Any] | None:
    """UNPAID -> PAID."""
    if order.payment_status is not PaymentStatus.UNPAID:
        return None
    return {
        "payment_status": PaymentStatus.PAID,
        "payment_method": resolve_payment_method(method, other_text),
        "payment_reference": (reference or "").strip(),
    }


def unpaid_changes(order: Order) -> dict[str, Any] | None:
    """PAID -> UNPAID. Discards the stored method and reference."""
    if order.payment_status is not PaymentStatus.PAID:
        return None
    return {
        "payment_status": PaymentStatus.UNPAID,
        "payment_method": "",
        "payment_reference": "",
    }


def initial_payment(mark_paid: bool) -> dict[str, Any]:
    """Payment fields for a freshly created order."""
    if mark_paid:
        return {
            "payment_status": PaymentStatus.PAID,
            "payment_method": PAYMENT_METHOD_CASH,
            "payment_reference": "",
        }
    return {
        "payment_status": PaymentStatus.UNPAID,
        "payment_method": "",
        "payment_reference": "",
    }


def coerce_kitchen_status(status: KitchenStatus | str) -> KitchenStatus:
    """Accept an enum member or its name; raise ValueError for anything else."""
    if isinstance(status, KitchenStatus):
        return status
    try:
        return KitchenStatus(str(status).upper())
    except ValueError:
        raise ValueError(f"Unknown kitchen status: {status!r}") from None


def coerce_payment_status(status: PaymentStatus | str) -> PaymentStatus:
    """Accept an enum member or its name; raise ValueError for anything else."""
    if isinstance(status, PaymentStatus):
        return status
    try:
        return PaymentStatus(str(status).upper())
    except ValueError:
        raise ValueError(f"Unknown payment status: {status!r}") from None


def kitchen_changes(status: KitchenStatus | str) -> dict[str, Any]:
    """Any kitchen status may follow any other so mis-clicks can be corrected."""
    return {"kitchen_status": coerce_kitchen_status(status)}


_KITCHEN_CYCLE = (KitchenStatus.PENDING, KitchenStatus.PREPARING, KitchenStatus.READY)


def next_kitchen_status(status: KitchenStatus) -> KitchenStatus:
    """Next status in display order, wrapping from READY back to PENDING."""
    idx = _KITCHEN_CYCLE.index(status)
    return _KITCHEN_CYCLE[(idx + 1) % len(_KITCHEN_CYCLE)]
