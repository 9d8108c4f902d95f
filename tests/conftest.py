from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from foodstand.ledger import Ledger
from foodstand.models import CartLine, CatalogItem
from foodstand.persistence import MemoryStore

BOGOTA = timezone(timedelta(hours=-5))


@pytest.fixture
def burger() -> CatalogItem:
    return CatalogItem(item_id="burger", name="Burger", unit_price=12000)


@pytest.fixture
def soda() -> CatalogItem:
    return CatalogItem(item_id="soda", name="Gaseosa", unit_price=3000)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def clock():
    moment = datetime(2024, 5, 17, 18, 30, tzinfo=BOGOTA)
    return lambda: moment


@pytest.fixture
def ledger(store, clock) -> Ledger:
    counter = itertools.count(1)
    return Ledger(store, clock=clock, id_factory=lambda: f"order-{next(counter)}")


def make_lines(*pairs: tuple[CatalogItem, int]) -> list[CartLine]:
    return [CartLine(item=item, quantity=qty) for item, qty in pairs]
