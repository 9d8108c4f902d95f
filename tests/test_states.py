from datetime import datetime, timezone

import pytest

from foodstand.models import CatalogItem, KitchenStatus, Order, OrderLine, PaymentStatus
from foodstand.states import (
    coerce_kitchen_status,
    coerce_payment_status,
    initial_payment,
    is_known_payment_method,
    kitchen_changes,
    next_kitchen_status,
    paid_changes,
    resolve_payment_method,
    unpaid_changes,
)


def _order(status: PaymentStatus = PaymentStatus.UNPAID) -> Order:
    return Order(
        order_id="o",
        created_at=datetime(2024, 5, 17, tzinfo=timezone.utc),
        day_key="2024-05-17",
        lines=(OrderLine(CatalogItem("a", "A", 1000), 1),),
        payment_status=status,
    )


def test_paid_changes_only_from_unpaid():
    assert paid_changes(_order(), "cash", " 12 ") == {
        "payment_status": PaymentStatus.PAID,
        "payment_method": "cash",
        "payment_reference": "12",
    }
    assert paid_changes(_order(PaymentStatus.PAID), "cash") is None


def test_unpaid_changes_only_from_paid():
    assert unpaid_changes(_order()) is None
    assert unpaid_changes(_order(PaymentStatus.PAID)) == {
        "payment_status": PaymentStatus.UNPAID,
        "payment_method": "",
        "payment_reference": "",
    }


def test_resolve_payment_method():
    assert resolve_payment_method("nequi") == "nequi"
    assert resolve_payment_method("other", "  Bono regalo ") == "Bono regalo"
    assert resolve_payment_method("other", "   ") == "other"
    assert resolve_payment_method("") == "other"
    assert resolve_payment_method("trueque") == "trueque"


def test_known_payment_methods():
    assert is_known_payment_method("cash")
    assert is_known_payment_method("other")
    assert not is_known_payment_method("Bono regalo")


def test_initial_payment():
    assert initial_payment(True)["payment_method"] == "cash"
    assert initial_payment(False) == {
        "payment_status": PaymentStatus.UNPAID,
        "payment_method": "",
        "payment_reference": "",
    }


@pytest.mark.parametrize("target", list(KitchenStatus))
def test_any_kitchen_target_is_accepted(target):
    assert kitchen_changes(target) == {"kitchen_status": target}
    assert kitchen_changes(target.value.lower()) == {"kitchen_status": target}


def test_coerce_kitchen_status():
    assert coerce_kitchen_status("preparing") is KitchenStatus.PREPARING
    with pytest.raises(ValueError):
        coerce_kitchen_status("burnt")


def test_next_kitchen_status_wraps():
    assert next_kitchen_status(KitchenStatus.PENDING) is KitchenStatus.PREPARING
    assert next_kitchen_status(KitchenStatus.PREPARING) is KitchenStatus.READY
    assert next_kitchen_status(KitchenStatus.READY) is KitchenStatus.PENDING


def test_coerce_payment_status():
    assert coerce_payment_status(PaymentStatus.PAID) is PaymentStatus.PAID
    assert coerce_payment_status("unpaid") is PaymentStatus.UNPAID
    with pytest.raises(ValueError):
        coerce_payment_status("refunded")
