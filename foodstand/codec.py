"""JSON encoding of the day-keyed ledger.

Two order record shapes exist on disk:

* current: ``{"lines": [{"item": {...}, "quantity": n}, ...], ...}``
* legacy: ``{"item": {...}, "quantity": n, ...}`` (one product per order)

Legacy records are upgraded to the current shape as soon as they are read, so
the rest of the package only ever sees ``Order`` objects with ``lines``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Mapping

from foodstand.constant import NO_NAME
from foodstand.models import CatalogItem, KitchenStatus, Order, OrderLine, PaymentStatus

logger = logging.getLogger(__name__)

OrdersByDay = dict[str, list[Order]]

SHAPE_CURRENT = "lines"
SHAPE_LEGACY = "legacy"


class RecordError(ValueError):
    """A stored order record cannot be read."""


def item_to_record(item: CatalogItem) -> dict[str, Any]:
    return {"id": item.item_id, "name": item.name, "unit_price": item.unit_price}


def item_from_record(record: Mapping[str, Any]) -> CatalogItem:
    try:
        price = int(record.get("unit_price", record.get("price", 0)) or 0)
        return CatalogItem(item_id=str(record["id"]), name=str(record.get("name", "")), unit_price=max(0, price))
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise RecordError(f"Invalid item record: {record!r}") from exc


def order_to_record(order: Order) -> dict[str, Any]:
    return {
        "id": order.order_id,
        "created_at": order.created_at.isoformat(),
        "day_key": order.day_key,
        "customer_name": order.customer_name,
        "phone": order.phone,
        "note": order.note,
        "lines": [{"item": item_to_record(line.item), "quantity": line.quantity} for line in order.lines],
        "payment_status": order.payment_status.value,
        "payment_method": order.payment_method,
        "payment_reference": order.payment_reference,
        "kitchen_status": order.kitchen_status.value,
    }


def record_shape(record: Mapping[str, Any]) -> str:
    if "lines" in record:
        return SHAPE_CURRENT
    if "item" in record:
        return SHAPE_LEGACY
    raise RecordError(f"Order record has neither lines nor item: {record.get('id')!r}")


def upgrade_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``record`` in the current shape."""
    if record_shape(record) == SHAPE_CURRENT:
        return dict(record)
    upgraded = {key: value for key, value in record.items() if key not in {"item", "quantity"}}
    upgraded["lines"] = [{"item": record["item"], "quantity": record.get("quantity", 1)}]
    return upgraded


def _parse_created_at(value: Any) -> datetime:
    if not isinstance(value, str):
        raise RecordError(f"Invalid created_at: {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise RecordError(f"Invalid created_at: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def _parse_enum(enum_cls: type, value: Any, default: Any) -> Any:
    if value in (None, ""):
        return default
    try:
        return enum_cls(str(value).upper())
    except ValueError as exc:
        raise RecordError(f"Invalid {enum_cls.__name__}: {value!r}") from exc


def order_from_record(record: Mapping[str, Any], day_key: str) -> Order:
    """Build an ``Order`` from either record shape."""
    if not isinstance(record, Mapping):
        raise RecordError(f"Order record must be an object, got {type(record).__name__}")
    current = upgrade_record(record)

    raw_lines = current.get("lines") or []
    if not isinstance(raw_lines, list):
        raise RecordError(f"Order {current.get('id')!r} lines must be a list, got {type(raw_lines).__name__}")

    lines: list[OrderLine] = []
    for raw_line in raw_lines:
        try:
            quantity = int(raw_line["quantity"])
            item = item_from_record(raw_line["item"])
        except (KeyError, TypeError, ValueError) as exc:
            raise RecordError(f"Invalid order line: {raw_line!r}") from exc
        if quantity >= 1:
            lines.append(OrderLine(item=item, quantity=quantity))
    if not lines:
        raise RecordError(f"Order {current.get('id')!r} has no lines")

    if "id" not in current:
        raise RecordError("Order record has no id")

    return Order(
        order_id=str(current["id"]),
        created_at=_parse_created_at(current.get("created_at")),
        day_key=str(current.get("day_key") or day_key),
        lines=tuple(lines),
        customer_name=str(current.get("customer_name") or NO_NAME),
        phone=str(current.get("phone") or ""),
        note=str(current.get("note") or ""),
        payment_status=_parse_enum(PaymentStatus, current.get("payment_status"), PaymentStatus.UNPAID),
        payment_method=str(current.get("payment_method") or ""),
        payment_reference=str(current.get("payment_reference") or ""),
        kitchen_status=_parse_enum(KitchenStatus, current.get("kitchen_status"), KitchenStatus.PENDING),
    )


def dumps_ledger(ledger: Mapping[str, list[Order]]) -> str:
    payload = {day_key: [order_to_record(order) for order in orders] for day_key, orders in ledger.items()}
    return json.dumps(payload, ensure_ascii=False)


def loads_ledger(text: str | None) -> OrdersByDay:
    """Decode a stored ledger.

    Unreadable content yields an empty ledger. A malformed order record is
    dropped and the remaining orders are kept.
    """
    if not text:
        return {}
    try:
        payload = json.loads(text)
    except ValueError:
        logger.warning("Stored ledger is not valid JSON; starting with an empty ledger")
        return {}
    if not isinstance(payload, dict):
        logger.warning("Stored ledger has unexpected type %s; starting with an empty ledger", type(payload).__name__)
        return {}

    ledger: OrdersByDay = {}
    for day_key, records in payload.items():
        if not isinstance(records, list):
            logger.warning("Skipping day %s: expected a list of orders", day_key)
            continue
        orders: list[Order] = []
        for record in records:
            try:
                orders.append(order_from_record(record, str(day_key)))
            except RecordError as exc:
                logger.warning("Dropping unreadable order record on %s: %s", day_key, exc)
        ledger[str(day_key)] = orders
    return ledger
