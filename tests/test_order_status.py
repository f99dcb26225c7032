import pytest

from storefront.core.errors import InvalidStatusTransitionError, NotFoundError, PersistenceError
from storefront.services import order_status


@pytest.mark.parametrize("current, target", [
    ("pending", "confirmed"),
    ("pending", "cancelled"),
    ("confirmed", "shipped"),
    ("confirmed", "cancelled"),
    ("shipped", "delivered"),
])
def test_allowed_transitions(current, target):
    assert order_status.can_transition(current, target)


@pytest.mark.parametrize("current, target", [
    ("pending", "shipped"),
    ("pending", "pending"),
    ("shipped", "cancelled"),
    ("delivered", "cancelled"),
    ("cancelled", "confirmed"),
    ("unknown", "confirmed"),
])
def test_rejected_transitions(current, target):
    assert not order_status.can_transition(current, target)
    with pytest.raises(InvalidStatusTransitionError):
        order_status.ensure_transition(current, target)


def test_confirming_twice_reads_as_already_processed():
    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        order_status.ensure_transition("confirmed", "confirmed")
    assert exc_info.value.message == "This order has already been processed."


def test_labels():
    assert order_status.label("shipped") == "In transit"
    assert order_status.label("mystery") == "mystery"


@pytest.fixture
def pending_order(db):
    db.data["orders"] = {"o1": {"owner_id": "user-1", "status": "pending", "total_amount": 1000}}
    return "o1"


def test_set_status_writes_through(db, pending_order):
    updated = order_status.set_status(db, pending_order, "cancelled")
    assert updated["status"] == "cancelled"
    assert db.docs("orders")["o1"]["status"] == "cancelled"
    assert "updated_at" in db.docs("orders")["o1"]


def test_set_status_rejects_invalid_move(db, pending_order):
    with pytest.raises(InvalidStatusTransitionError):
        order_status.set_status(db, pending_order, "delivered")
    assert db.docs("orders")["o1"]["status"] == "pending"


def test_set_status_unknown_order(db):
    with pytest.raises(NotFoundError):
        order_status.set_status(db, "missing", "cancelled")


def test_write_failure(db, pending_order):
    db.failing_collections.add("orders")
    with pytest.raises(PersistenceError):
        order_status.set_status(db, pending_order, "confirmed")
