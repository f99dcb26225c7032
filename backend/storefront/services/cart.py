"""
storefront/services/cart.py - Cart line operations for one caller.

Every function takes the Firestore client and the caller's uid explicitly.
Stock is checked against the live product row at call time; nothing is
reserved, so two concurrent adds of the same product can both pass the check
(last write wins on the quantity).
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from storefront.core.errors import (
    AuthenticationRequiredError,
    NotFoundError,
    OutOfStockError,
    ProductUnavailableError,
    ValidationFailedError,
)
from storefront.repositories import cart_items as cart_repo
from storefront.repositories import products as products_repo
from storefront.repositories.firestore import write_guard
from storefront.services.shipping import remaining_for_free_shipping, shipping_fee

logger = logging.getLogger("storefront.cart")


def require_uid(uid: Optional[str]) -> str:
    if not uid:
        raise AuthenticationRequiredError()
    return uid


def _require_quantity(quantity: int) -> None:
    if quantity < 1:
        raise ValidationFailedError("Quantity must be at least 1.")


def product_summary(product: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not product:
        return None
    return {
        "id": product["id"],
        "name": product.get("name", ""),
        "price": int(product.get("price", 0)),
        "stock_quantity": int(product.get("stock_quantity", 0)),
        "category": product.get("category"),
        "is_active": bool(product.get("is_active", False)),
    }


def add_line(db, uid: str, product_id: str, quantity: int = 1) -> Dict[str, Any]:
    """Adds quantity of a product; repeat adds grow the existing line."""
    require_uid(uid)
    _require_quantity(quantity)

    product = products_repo.get(db, product_id)
    if not product or not product.get("is_active"):
        raise NotFoundError("Product not found.")
    stock = int(product.get("stock_quantity", 0))

    existing = cart_repo.find_by_product(db, uid, product_id)
    in_cart = int(existing["quantity"]) if existing else 0
    if in_cart + quantity > stock:
        logger.info("add_line rejected uid=%s product=%s stock=%s in_cart=%s requested=%s",
                    uid, product_id, stock, in_cart, quantity)
        raise OutOfStockError(stock, in_cart=in_cart if existing else None)

    with write_guard("Failed to update the cart.", logger):
        if existing:
            line = cart_repo.set_quantity(db, existing, in_cart + quantity)
        else:
            line = cart_repo.insert(db, uid, product_id, quantity)
    logger.info("Cart line %s uid=%s product=%s quantity=%s", line["id"], uid, product_id, line["quantity"])
    line["product"] = product_summary(product)
    return line


def list_lines(db, uid: str) -> List[Dict[str, Any]]:
    """Caller's lines joined with the live product rows (display only)."""
    require_uid(uid)
    products: Dict[str, Optional[Dict[str, Any]]] = {}
    lines = cart_repo.list_for_owner(db, uid)
    for line in lines:
        pid = line.get("product_id")
        if pid not in products:
            products[pid] = products_repo.get(db, pid)
        line["product"] = product_summary(products[pid])
    return lines


def count_lines(db, uid: str) -> int:
    require_uid(uid)
    return cart_repo.count_for_owner(db, uid)


def summarize(lines: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Totals for a joined cart; lines whose product vanished count for nothing."""
    item_count = 0
    subtotal = 0
    for line in lines:
        product = line.get("product")
        if not product:
            continue
        item_count += int(line["quantity"])
        subtotal += int(product["price"]) * int(line["quantity"])
    fee = shipping_fee(subtotal) if item_count else 0
    return {
        "item_count": item_count,
        "subtotal": subtotal,
        "shipping_fee": fee,
        "total": subtotal + fee,
        "remaining_for_free_shipping": remaining_for_free_shipping(subtotal) if item_count else 0,
    }


def update_line_quantity(db, uid: str, line_id: str, quantity: int) -> Dict[str, Any]:
    require_uid(uid)
    _require_quantity(quantity)

    line = cart_repo.get(db, uid, line_id)
    if not line:
        raise NotFoundError("Cart item not found.")

    product = products_repo.get(db, line["product_id"])
    if not product or not product.get("is_active"):
        raise ProductUnavailableError((product or {}).get("name") or "This product")
    stock = int(product.get("stock_quantity", 0))
    if quantity > stock:
        raise OutOfStockError(stock, product_name=product.get("name"))

    with write_guard("Failed to update the cart.", logger):
        line = cart_repo.set_quantity(db, line, quantity)
    line["product"] = product_summary(product)
    return line


def remove_line(db, uid: str, line_id: str) -> None:
    require_uid(uid)
    if not cart_repo.get(db, uid, line_id):
        raise NotFoundError("Cart item not found.")
    with write_guard("Failed to remove the cart item.", logger):
        cart_repo.delete(db, line_id)


def remove_lines(db, uid: str, line_ids: Iterable[str]) -> int:
    """Removes the caller's lines among line_ids; ids of other callers are skipped."""
    require_uid(uid)
    owned = [line["id"] for line in cart_repo.get_many(db, uid, line_ids)]
    if not owned:
        return 0
    with write_guard("Failed to remove the cart items.", logger):
        return cart_repo.delete_many(db, owned)


def clear_all(db, uid: str) -> int:
    require_uid(uid)
    with write_guard("Failed to clear the cart.", logger):
        removed = cart_repo.delete_all_for_owner(db, uid)
    logger.info("Cleared cart uid=%s lines=%s", uid, removed)
    return removed
