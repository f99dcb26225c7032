from typing import Any, Dict, List, Optional, Tuple

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from storefront.core.constants import PRODUCTS
from storefront.repositories.firestore import collection, count, snap_to_dict

# sort key -> (field, direction)
SORTS = {
    "latest": ("created_at", firestore.Query.DESCENDING),
    "price-asc": ("price", firestore.Query.ASCENDING),
    "price-desc": ("price", firestore.Query.DESCENDING),
}


def get(db, product_id: str) -> Optional[Dict[str, Any]]:
    return snap_to_dict(collection(db, PRODUCTS).document(product_id).get())


def query_active(
    db,
    category: Optional[str] = None,
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
    sort: str = "latest",
    offset: int = 0,
    limit: Optional[int] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    """Active products matching the filters; returns (page, total matching)."""
    q = collection(db, PRODUCTS).where(filter=FieldFilter("is_active", "==", True))
    if category:
        q = q.where(filter=FieldFilter("category", "==", category))
    if min_price is not None:
        q = q.where(filter=FieldFilter("price", ">=", min_price))
    if max_price is not None:
        q = q.where(filter=FieldFilter("price", "<", max_price))

    total = count(q)

    field, direction = SORTS[sort]
    q = q.order_by(field, direction=direction)
    if offset:
        q = q.offset(offset)
    if limit is not None:
        q = q.limit(limit)
    return [snap_to_dict(d) for d in q.stream()], total
