from typing import Any, Dict, Iterable, List, Optional

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from storefront.core.constants import CART_ITEMS
from storefront.repositories.firestore import collection, count, now, snap_to_dict

# Firestore caps a write batch at 500 operations
BATCH_LIMIT = 400


def _owned(db, uid: str):
    return collection(db, CART_ITEMS).where(filter=FieldFilter("owner_id", "==", uid))


def get(db, uid: str, line_id: str) -> Optional[Dict[str, Any]]:
    """A cart line, only if it belongs to uid."""
    line = snap_to_dict(collection(db, CART_ITEMS).document(line_id).get())
    if not line or line.get("owner_id") != uid:
        return None
    return line


def get_many(db, uid: str, line_ids: Iterable[str]) -> List[Dict[str, Any]]:
    out = []
    seen = set()
    for line_id in line_ids:
        if line_id in seen:
            continue
        seen.add(line_id)
        line = get(db, uid, line_id)
        if line:
            out.append(line)
    return out


def find_by_product(db, uid: str, product_id: str) -> Optional[Dict[str, Any]]:
    docs = list(_owned(db, uid).where(filter=FieldFilter("product_id", "==", product_id)).limit(1).stream())
    return snap_to_dict(docs[0]) if docs else None


def list_for_owner(db, uid: str) -> List[Dict[str, Any]]:
    q = _owned(db, uid).order_by("created_at", direction=firestore.Query.ASCENDING)
    return [snap_to_dict(d) for d in q.stream()]


def count_for_owner(db, uid: str) -> int:
    return count(_owned(db, uid))


def insert(db, uid: str, product_id: str, quantity: int) -> Dict[str, Any]:
    ref = collection(db, CART_ITEMS).document()
    ts = now()
    data = {
        "owner_id": uid,
        "product_id": product_id,
        "quantity": quantity,
        "created_at": ts,
        "updated_at": ts,
    }
    ref.set(data)
    return {**data, "id": ref.id}


def set_quantity(db, line: Dict[str, Any], quantity: int) -> Dict[str, Any]:
    patch = {"quantity": quantity, "updated_at": now()}
    collection(db, CART_ITEMS).document(line["id"]).update(patch)
    return {**line, **patch}


def delete(db, line_id: str) -> None:
    collection(db, CART_ITEMS).document(line_id).delete()


def delete_many(db, line_ids: Iterable[str]) -> int:
    col = collection(db, CART_ITEMS)
    batch = db.batch()
    n = 0
    for line_id in line_ids:
        batch.delete(col.document(line_id))
        n += 1
        if n % BATCH_LIMIT == 0:
            batch.commit()
            batch = db.batch()
    if n % BATCH_LIMIT:
        batch.commit()
    return n


def delete_all_for_owner(db, uid: str) -> int:
    return delete_many(db, [d.id for d in _owned(db, uid).stream()])
