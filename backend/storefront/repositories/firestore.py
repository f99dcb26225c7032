"""Small helpers shared by the Firestore repositories."""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from google.api_core.exceptions import GoogleAPIError

from storefront.config import settings
from storefront.core.errors import PersistenceError


def collection(db, name: str):
    """Prefix-aware collection reference (FIREBASE_COLLECTION_PREFIX)."""
    prefix = (settings.firebase_collection_prefix or "").strip()
    return db.collection(f"{prefix}{name}" if prefix else name)


def now() -> datetime:
    return datetime.now(timezone.utc)


def snap_to_dict(snap) -> Optional[Dict[str, Any]]:
    """Document snapshot -> plain dict with its id, or None if it does not exist."""
    if snap is None or not snap.exists:
        return None
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return data


def count(query) -> int:
    """Server-side COUNT aggregation for a query."""
    result = query.count(alias="total").get()
    return int(result[0][0].value)


@contextmanager
def write_guard(message: str, log: logging.Logger):
    """Turns Firestore API failures inside the block into a PersistenceError(message)."""
    try:
        yield
    except GoogleAPIError as exc:
        log.error("%s: %s", message, exc)
        raise PersistenceError(message) from exc
