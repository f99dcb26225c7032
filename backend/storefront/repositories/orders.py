from typing import Any, Dict, List, Optional, Tuple

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from storefront.core.constants import ORDER_ITEMS, ORDERS
from storefront.repositories.firestore import collection, count, now, snap_to_dict

SORTS = {
    "latest": ("created_at", firestore.Query.DESCENDING),
    "oldest": ("created_at", firestore.Query.ASCENDING),
    "price_high": ("total_amount", firestore.Query.DESCENDING),
    "price_low": ("total_amount", firestore.Query.ASCENDING),
}


def get(db, uid: str, order_id: str) -> Optional[Dict[str, Any]]:
    """An order header, only if it belongs to uid."""
    order = snap_to_dict(collection(db, ORDERS).document(order_id).get())
    if not order or order.get("owner_id") != uid:
        return None
    return order


def get_any(db, order_id: str) -> Optional[Dict[str, Any]]:
    return snap_to_dict(collection(db, ORDERS).document(order_id).get())


def create_with_items(db, header: Dict[str, Any], lines: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Writes the order header and its line snapshots in ONE batch so either all
    documents exist afterwards or none do.
    """
    order_ref = collection(db, ORDERS).document()
    items_col = collection(db, ORDER_ITEMS)
    ts = now()

    order = {**header, "created_at": ts, "updated_at": ts}
    batch = db.batch()
    batch.set(order_ref, order)
    for position, line in enumerate(lines):
        batch.set(items_col.document(), {
            **line,
            "order_id": order_ref.id,
            "position": position,
            "created_at": ts,
        })
    batch.commit()
    return {**order, "id": order_ref.id}


def items_for_order(db, order_id: str) -> List[Dict[str, Any]]:
    q = (
        collection(db, ORDER_ITEMS)
        .where(filter=FieldFilter("order_id", "==", order_id))
        .order_by("position", direction=firestore.Query.ASCENDING)
    )
    return [snap_to_dict(d) for d in q.stream()]


def list_for_owner(
    db,
    uid: str,
    status: Optional[str] = None,
    sort: str = "latest",
    offset: int = 0,
    limit: Optional[int] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    q = collection(db, ORDERS).where(filter=FieldFilter("owner_id", "==", uid))
    if status:
        q = q.where(filter=FieldFilter("status", "==", status))

    total = count(q)

    field, direction = SORTS[sort]
    q = q.order_by(field, direction=direction)
    if offset:
        q = q.offset(offset)
    if limit is not None:
        q = q.limit(limit)
    return [snap_to_dict(d) for d in q.stream()], total


def update(db, order_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    patch = {**patch, "updated_at": now()}
    collection(db, ORDERS).document(order_id).update(patch)
    return patch
