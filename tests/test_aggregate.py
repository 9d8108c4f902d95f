from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from foodstand.aggregate import compute_totals, filter_by_status, order_total, query_history
from foodstand.models import CatalogItem, Order, OrderLine, PaymentStatus

TZ = timezone(timedelta(hours=-5))
_ids = count(1)


def _order(day: str, amount: int, paid: bool) -> Order:
    return Order(
        order_id=f"o-{next(_ids)}",
        created_at=datetime.fromisoformat(f"{day}T12:00:00").replace(tzinfo=TZ),
        day_key=day,
        lines=(OrderLine(CatalogItem("x", "Item", amount), 1),),
        payment_status=PaymentStatus.PAID if paid else PaymentStatus.UNPAID,
        payment_method="cash" if paid else "",
    )


@pytest.fixture
def ledger_days():
    return {
        "2024-05-15": [_order("2024-05-15", 10000, True), _order("2024-05-15", 5000, False)],
        "2024-05-16": [_order("2024-05-16", 2000, False)],
        "2024-05-17": [_order("2024-05-17", 7000, True)],
    }


def test_order_total_sums_lines():
    order = Order(
        order_id="o",
        created_at=datetime(2024, 5, 17, tzinfo=TZ),
        day_key="2024-05-17",
        lines=(
            OrderLine(CatalogItem("a", "A", 6000), 2),
            OrderLine(CatalogItem("b", "B", 3000), 1),
        ),
    )
    assert order_total(order) == 15000


@pytest.mark.parametrize("paid", [True, False])
def test_single_order_reconciles(paid):
    order = _order("2024-05-17", 13000, paid)
    totals = compute_totals([order])
    assert totals.collected + totals.outstanding == order_total(order)
    assert totals.gross == order_total(order)


def test_totals_reconcile_over_mixed_orders(ledger_days):
    orders = [o for day in ledger_days.values() for o in day]
    totals = compute_totals(orders)
    assert totals.gross == 24000
    assert totals.collected == 17000
    assert totals.collected + totals.outstanding == totals.gross


def test_totals_of_nothing_are_zero():
    totals = compute_totals([])
    assert (totals.gross, totals.collected, totals.outstanding) == (0, 0, 0)


def test_history_excludes_today():
    days = {
        "D1": [_order("2024-05-15", 10000, True), _order("2024-05-15", 5000, False)],
        "D2": [_order("2024-05-17", 7000, True)],
    }

    result = query_history(days, "D2", status="all")

    assert [entry.day_key for entry in result.entries] == ["D1", "D1"]
    assert result.count == 2
    assert (result.totals.gross, result.totals.collected, result.totals.outstanding) == (15000, 10000, 5000)


def test_history_days_most_recent_first(ledger_days):
    result = query_history(ledger_days, "2024-05-17")
    assert [entry.day_key for entry in result.entries] == ["2024-05-16", "2024-05-15", "2024-05-15"]


def test_history_status_filters(ledger_days):
    paid = query_history(ledger_days, "2024-05-17", status="paid")
    unpaid = query_history(ledger_days, "2024-05-17", status="unpaid")

    assert paid.count == 1 and paid.totals.outstanding == 0
    assert unpaid.count == 2 and unpaid.totals.collected == 0
    assert unpaid.totals.gross == 7000


def test_history_date_filter(ledger_days):
    assert query_history(ledger_days, "2024-05-17", date="2024-05-16").count == 1
    assert query_history(ledger_days, "2024-05-17", date="2023-01-01").entries == []


def test_history_does_not_mutate(ledger_days):
    before = {day: list(orders) for day, orders in ledger_days.items()}
    query_history(ledger_days, "2024-05-17", status="unpaid")
    assert ledger_days == before


def test_filter_by_status(ledger_days):
    orders = ledger_days["2024-05-15"]
    assert filter_by_status(orders, "all") == orders
    assert [o.is_paid for o in filter_by_status(orders, "paid")] == [True]
    assert [o.is_paid for o in filter_by_status(orders, "unpaid")] == [False]
    with pytest.raises(ValueError):
        filter_by_status(orders, "refunded")
