"""Day-keyed order ledger.

The ledger maps a local calendar date (``YYYY-MM-DD``) to that day's orders,
newest first. It is loaded once from a key-value store and every mutation
re-saves the whole mapping. Write failures are logged and otherwise ignored:
the in-memory ledger stays authoritative until the next successful save.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from datetime import datetime
from typing import Any, Callable, Iterable
from uuid import uuid4

from foodstand.codec import dumps_ledger, loads_ledger
from foodstand.config import LEDGER_STORAGE_KEY
from foodstand.constant import NO_NAME
from foodstand.models import CartLine, CatalogItem, KitchenStatus, Order, OrderLine
from foodstand.persistence import KeyValueStore
from foodstand.states import (
    coerce_kitchen_status,
    coerce_payment_status,
    initial_payment,
    kitchen_changes,
    paid_changes,
    unpaid_changes,
)

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"order_id", "created_at", "day_key", "lines"})
_ORDER_FIELDS = frozenset(f.name for f in fields(Order))
_TEXT_FIELDS = frozenset({"customer_name", "phone", "note", "payment_method", "payment_reference"})


class EmptyOrderError(ValueError):
    """Raised when an order is created from an empty cart."""


def _coerce_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """Normalize patch values to the types ``Order`` holds; ValueError on bad values."""
    coerced = dict(changes)
    if "payment_status" in coerced:
        coerced["payment_status"] = coerce_payment_status(coerced["payment_status"])
    if "kitchen_status" in coerced:
        coerced["kitchen_status"] = coerce_kitchen_status(coerced["kitchen_status"])
    for name in _TEXT_FIELDS & set(coerced):
        value = coerced[name]
        if value is None:
            coerced[name] = ""
        elif not isinstance(value, str):
            raise ValueError(f"Order field {name} must be text, got {type(value).__name__}")
    return coerced


def _local_now() -> datetime:
    return datetime.now().astimezone()


def today_key(now: datetime | None = None) -> str:
    """Local calendar date as ``YYYY-MM-DD``."""
    moment = now if now is not None else _local_now()
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date().isoformat()


class Ledger:
    """All orders, keyed by day. The only source of truth for totals and history."""

    def __init__(
        self,
        store: KeyValueStore,
        orders_by_day: dict[str, list[Order]] | None = None,
        clock: Callable[[], datetime] = _local_now,
        id_factory: Callable[[], str] = lambda: uuid4().hex,
    ) -> None:
        self.store = store
        self._orders_by_day: dict[str, list[Order]] = orders_by_day if orders_by_day is not None else {}
        self._clock = clock
        self._id_factory = id_factory

    @classmethod
    def load(cls, store: KeyValueStore, **kwargs: Any) -> Ledger:
        """Read the ledger from ``store``; anything unreadable becomes an empty ledger."""
        try:
            raw = store.get(LEDGER_STORAGE_KEY)
        except Exception:
            logger.warning("Could not read stored ledger; starting empty", exc_info=True)
            raw = None
        orders_by_day = loads_ledger(raw)
        logger.info(
            "Ledger loaded days=%d orders=%d",
            len(orders_by_day),
            sum(len(orders) for orders in orders_by_day.values()),
        )
        return cls(store, orders_by_day, **kwargs)

    def save(self) -> bool:
        """Re-save the whole ledger. Returns False when the store rejected the write."""
        payload = dumps_ledger(self._orders_by_day)
        try:
            self.store.set(LEDGER_STORAGE_KEY, payload)
        except Exception:
            logger.warning("Ledger save failed; keeping in-memory state", exc_info=True)
            return False
        return True

    def today_key(self) -> str:
        return today_key(self._clock())

    def day_keys(self) -> list[str]:
        return list(self._orders_by_day)

    def snapshot(self) -> dict[str, list[Order]]:
        """Shallow copy of the day mapping for read-only queries."""
        return {day_key: list(orders) for day_key, orders in self._orders_by_day.items()}

    def orders_for(self, day_key: str) -> list[Order]:
        return list(self._orders_by_day.get(day_key, []))

    def find(self, day_key: str, order_id: str) -> Order | None:
        for order in self._orders_by_day.get(day_key, []):
            if order.order_id == order_id:
                return order
        return None

    def create_order(
        self,
        day_key: str,
        customer_name: str,
        phone: str,
        note: str,
        cart_lines: Iterable[CartLine],
        mark_paid: bool = False,
    ) -> Order:
        """Snapshot ``cart_lines`` into a new order at the top of ``day_key``."""
        lines = tuple(
            OrderLine(
                item=CatalogItem(item_id=line.item.item_id, name=line.item.name, unit_price=line.item.unit_price),
                quantity=line.quantity,
            )
            for line in cart_lines
            if line.quantity >= 1
        )
        if not lines:
            logger.info("create_order rejected day=%s reason=empty_cart", day_key)
            raise EmptyOrderError("Add at least one product before saving the order")

        order = Order(
            order_id=self._id_factory(),
            created_at=self._clock(),
            day_key=day_key,
            lines=lines,
            customer_name=(customer_name or "").strip() or NO_NAME,
            phone=(phone or "").strip(),
            note=(note or "").strip(),
            kitchen_status=KitchenStatus.PENDING,
            **initial_payment(mark_paid),
        )
        self._orders_by_day.setdefault(day_key, []).insert(0, order)
        logger.info("create_order day=%s order_id=%s lines=%d paid=%s", day_key, order.order_id, len(lines), mark_paid)
        self.save()
        return order

    def remove_order(self, day_key: str, order_id: str) -> bool:
        orders = self._orders_by_day.get(day_key)
        if not orders:
            return False
        remaining = [order for order in orders if order.order_id != order_id]
        if len(remaining) == len(orders):
            return False
        self._orders_by_day[day_key] = remaining
        logger.info("remove_order day=%s order_id=%s", day_key, order_id)
        self.save()
        return True

    def update_order(self, day_key: str, order_id: str, **changes: Any) -> Order | None:
        """Apply a partial field update in place. Unknown ids are ignored."""
        unknown = set(changes) - _ORDER_FIELDS
        if unknown:
            raise ValueError(f"Unknown order fields: {sorted(unknown)}")
        frozen = set(changes) & _IMMUTABLE_FIELDS
        if frozen:
            raise ValueError(f"Order fields cannot be changed: {sorted(frozen)}")
        changes = _coerce_changes(changes)

        order = self.find(day_key, order_id)
        if order is None:
            return None
        for name, value in changes.items():
            setattr(order, name, value)
        logger.info("update_order day=%s order_id=%s fields=%s", day_key, order_id, ",".join(sorted(changes)))
        self.save()
        return order

    def mark_paid(self, day_key: str, order_id: str, method: str, reference: str = "", other_text: str = "") -> bool:
        order = self.find(day_key, order_id)
        if order is None:
            return False
        changes = paid_changes(order, method, reference, other_text)
        if changes is None:
            logger.info("mark_paid ignored order_id=%s reason=already_paid", order_id)
            return False
        self.update_order(day_key, order_id, **changes)
        return True

    def revert_to_unpaid(self, day_key: str, order_id: str) -> bool:
        """Drop the payment; the previous method and reference are not kept."""
        order = self.find(day_key, order_id)
        if order is None:
            return False
        changes = unpaid_changes(order)
        if changes is None:
            logger.info("revert_to_unpaid ignored order_id=%s reason=not_paid", order_id)
            return False
        self.update_order(day_key, order_id, **changes)
        return True

    def set_kitchen_status(self, day_key: str, order_id: str, status: KitchenStatus | str) -> bool:
        changes = kitchen_changes(status)
        return self.update_order(day_key, order_id, **changes) is not None

    def set_note(self, day_key: str, order_id: str, note: str) -> bool:
        return self.update_order(day_key, order_id, note=(note or "").strip()) is not None
