"""
storefront/services/order_status.py - Order status machine.

    pending ──► confirmed ──► shipped ──► delivered
       │            │
       └────────────┴──► cancelled

`delivered` and `cancelled` are terminal. Every status write goes through
`transition_order`, never a direct field assignment.
"""
import logging
from typing import Any, Dict, Optional

from storefront.core.errors import InvalidStatusTransitionError, NotFoundError
from storefront.repositories import orders as orders_repo
from storefront.repositories.firestore import write_guard

logger = logging.getLogger("storefront.order_status")

PENDING = "pending"
CONFIRMED = "confirmed"
SHIPPED = "shipped"
DELIVERED = "delivered"
CANCELLED = "cancelled"

TRANSITIONS = {
    PENDING: frozenset({CONFIRMED, CANCELLED}),
    CONFIRMED: frozenset({SHIPPED, CANCELLED}),
    SHIPPED: frozenset({DELIVERED}),
    DELIVERED: frozenset(),
    CANCELLED: frozenset(),
}

STATUS_LABELS = {
    PENDING: "Awaiting payment",
    CONFIRMED: "Payment complete",
    SHIPPED: "In transit",
    DELIVERED: "Delivered",
    CANCELLED: "Cancelled",
}


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def ensure_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidStatusTransitionError(current, target)


def label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def transition_order(db, order: Dict[str, Any], target: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Moves `order` to `target`, writing `extra` fields in the same update."""
    current = order.get("status")
    ensure_transition(current, target)
    with write_guard("Failed to update the order status.", logger):
        patch = orders_repo.update(db, order["id"], {**(extra or {}), "status": target})
    logger.info("Order %s: %s -> %s", order["id"], current, target)
    return {**order, **patch}


def set_status(db, order_id: str, target: str) -> Dict[str, Any]:
    """Admin entry point: transition any order by id."""
    order = orders_repo.get_any(db, order_id)
    if not order:
        raise NotFoundError("Order not found.")
    return transition_order(db, order, target)
