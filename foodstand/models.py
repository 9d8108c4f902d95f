"""Domain models for the food stand order ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from foodstand.constant import NO_NAME


class PaymentStatus(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


class KitchenStatus(str, Enum):
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    READY = "READY"


@dataclass(frozen=True)
class CatalogItem:
    """A purchasable product with its unit price in whole pesos."""

    item_id: str
    name: str
    unit_price: int


@dataclass
class CartLine:
    """An unsaved cart row; quantity is always at least 1."""

    item: CatalogItem
    quantity: int


@dataclass(frozen=True)
class OrderLine:
    """A saved order row holding a copy of the catalog data at order time."""

    item: CatalogItem
    quantity: int

    @property
    def subtotal(self) -> int:
        return self.item.unit_price * self.quantity


@dataclass
class Order:
    """A finalized order filed under the calendar day it was created on."""

    order_id: str
    created_at: datetime
    day_key: str
    lines: tuple[OrderLine, ...]
    customer_name: str = NO_NAME
    phone: str = ""
    note: str = ""
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    payment_method: str = ""
    payment_reference: str = ""
    kitchen_status: KitchenStatus = KitchenStatus.PENDING

    @property
    def is_paid(self) -> bool:
        return self.payment_status is PaymentStatus.PAID


@dataclass(frozen=True)
class Totals:
    """Gross, collected and outstanding amounts over a set of orders."""

    gross: int = 0
    collected: int = 0
    outstanding: int = 0


@dataclass(frozen=True)
class HistoryEntry:
    """An order tagged with the day key it was read from."""

    day_key: str
    order: Order


@dataclass(frozen=True)
class HistoryResult:
    entries: list[HistoryEntry] = field(default_factory=list)
    totals: Totals = field(default_factory=Totals)

    @property
    def count(self) -> int:
        return len(self.entries)
