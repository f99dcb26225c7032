"""
storefront/services/orders.py - Checkout and order history.

`create_order` re-validates the selected cart lines against live products,
snapshots name and unit price into order lines and writes header plus lines
atomically. Totals always satisfy

    total_amount == sum(price * quantity) + shipping_fee(sum)
"""
import logging
import math
from typing import Any, Dict, List, Optional

from storefront.core.constants import ORDERS_PER_PAGE
from storefront.core.errors import (
    NotFoundError,
    OrderValidationError,
    OutOfStockError,
    ProductUnavailableError,
    ValidationFailedError,
)
from storefront.repositories import cart_items as cart_repo
from storefront.repositories import orders as orders_repo
from storefront.repositories import products as products_repo
from storefront.repositories.firestore import write_guard
from storefront.services import order_status
from storefront.services.cart import require_uid
from storefront.services.shipping import shipping_fee

logger = logging.getLogger("storefront.orders")


def _with_label(order: Dict[str, Any]) -> Dict[str, Any]:
    order["status_label"] = order_status.label(order.get("status", ""))
    return order


def create_order(
    db,
    uid: str,
    line_ids: List[str],
    shipping_address: Dict[str, Any],
    order_note: Optional[str] = None,
) -> Dict[str, Any]:
    require_uid(uid)
    if not line_ids:
        raise ValidationFailedError("Select the items to order.")

    lines = cart_repo.get_many(db, uid, line_ids)
    if not lines:
        raise NotFoundError("The selected items could not be found.")
    if len(lines) < len(set(line_ids)):
        logger.warning("create_order uid=%s: %s of %s selected lines not found, ordering the rest",
                       uid, len(set(line_ids)) - len(lines), len(set(line_ids)))

    problems: List[ValidationFailedError] = []
    priced = []
    for line in lines:
        product = products_repo.get(db, line["product_id"])
        if not product:
            raise NotFoundError("Product information could not be found.")
        name = product.get("name", "")
        quantity = int(line["quantity"])
        stock = int(product.get("stock_quantity", 0))
        if not product.get("is_active"):
            problems.append(ProductUnavailableError(name))
        elif stock < quantity:
            problems.append(OutOfStockError(stock, product_name=name))
        else:
            priced.append((line, product))

    if problems:
        logger.info("create_order rejected uid=%s: %s", uid, [p.message for p in problems])
        raise problems[0] if len(problems) == 1 else OrderValidationError(problems)

    subtotal = sum(int(p["price"]) * int(line["quantity"]) for line, p in priced)
    fee = shipping_fee(subtotal)
    total = subtotal + fee

    header = {
        "owner_id": uid,
        "total_amount": total,
        "status": order_status.PENDING,
        "shipping_address": shipping_address,
        "order_note": order_note or None,
    }
    snapshots = [
        {
            "product_id": product["id"],
            "product_name": product.get("name", ""),
            "quantity": int(line["quantity"]),
            "price": int(product["price"]),
        }
        for line, product in priced
    ]
    with write_guard("Failed to create the order.", logger):
        order = orders_repo.create_with_items(db, header, snapshots)

    logger.info("Order %s created uid=%s lines=%s subtotal=%s shipping=%s total=%s",
                order["id"], uid, len(snapshots), subtotal, fee, total)
    order["shipping_fee"] = fee
    return _with_label(order)


def get_order(db, uid: str, order_id: str) -> Dict[str, Any]:
    require_uid(uid)
    order = orders_repo.get(db, uid, order_id)
    if not order:
        raise NotFoundError("Order not found.")
    return _with_label(order)


def get_order_with_items(db, uid: str, order_id: str) -> Dict[str, Any]:
    order = get_order(db, uid, order_id)
    order["items"] = orders_repo.items_for_order(db, order_id)
    return order


def get_user_orders(db, uid: str, status: str = "all", sort: str = "latest", page: int = 1) -> Dict[str, Any]:
    require_uid(uid)
    if status != "all" and status not in order_status.TRANSITIONS:
        raise ValidationFailedError(f"Unknown order status: {status}")
    if sort not in orders_repo.SORTS:
        raise ValidationFailedError(f"Unknown sort option: {sort}")

    page = max(1, page)
    orders, total = orders_repo.list_for_owner(
        db,
        uid,
        status=None if status == "all" else status,
        sort=sort,
        offset=(page - 1) * ORDERS_PER_PAGE,
        limit=ORDERS_PER_PAGE,
    )
    return {
        "orders": [_with_label(o) for o in orders],
        "page": page,
        "total_count": total,
        "total_pages": math.ceil(total / ORDERS_PER_PAGE),
    }
