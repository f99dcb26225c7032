"""Pytest fixtures for storefront tests.

Firestore is replaced by an in-memory client that implements the part of the
google-cloud-firestore API the repositories use: collections, documents,
FieldFilter queries with ordering/offset/limit, COUNT aggregation and write
batches. Reads and writes can be made to fail, with any exception, to exercise
error paths.
"""
import copy
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from google.api_core.exceptions import NotFound, ServiceUnavailable
from google.cloud.firestore import Query

from storefront.config import get_db
from storefront.core.auth import get_principal
from storefront.core.errors import PaymentGatewayError
from storefront.integrations.payment import get_payment_gateway
from storefront.main import app
from storefront.schemas.principal import Principal

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)

_OPS = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a is not None and a < b,
    "<=": lambda a, b: a is not None and a <= b,
    ">": lambda a, b: a is not None and a > b,
    ">=": lambda a, b: a is not None and a >= b,
    "in": lambda a, b: a in b,
}


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, db, collection, doc_id):
        self._db = db
        self.collection = collection
        self.id = doc_id

    def get(self):
        self._db.check_read(self.collection)
        return FakeSnapshot(self, self._db.data.get(self.collection, {}).get(self.id))

    def set(self, data):
        self._db.check_write(self.collection)
        self._db.data.setdefault(self.collection, {})[self.id] = copy.deepcopy(data)

    def update(self, patch):
        self._db.check_write(self.collection)
        docs = self._db.data.get(self.collection, {})
        if self.id not in docs:
            raise NotFound(f"{self.collection}/{self.id}")
        docs[self.id].update(copy.deepcopy(patch))

    def delete(self):
        self._db.check_write(self.collection)
        self._db.data.get(self.collection, {}).pop(self.id, None)


class FakeQuery:
    def __init__(self, db, collection, filters=(), orders=(), offset=0, limit=None):
        self._db = db
        self._collection = collection
        self._filters = tuple(filters)
        self._orders = tuple(orders)
        self._offset = offset
        self._limit = limit

    def _copy(self, **changes):
        state = {
            "filters": self._filters,
            "orders": self._orders,
            "offset": self._offset,
            "limit": self._limit,
        }
        state.update(changes)
        return FakeQuery(self._db, self._collection, **state)

    def where(self, field_path=None, op_string=None, value=None, *, filter=None):
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        return self._copy(filters=self._filters + ((field_path, op_string, value),))

    def order_by(self, field_path, direction=Query.ASCENDING):
        return self._copy(orders=self._orders + ((field_path, direction),))

    def offset(self, n):
        return self._copy(offset=n)

    def limit(self, n):
        return self._copy(limit=n)

    def _matching(self):
        self._db.check_read(self._collection)
        out = []
        for doc_id, data in self._db.data.get(self._collection, {}).items():
            if all(_OPS[op](data.get(field), value) for field, op, value in self._filters):
                out.append((doc_id, data))
        return out

    def stream(self):
        rows = self._matching()
        for field, direction in reversed(self._orders):
            rows = [r for r in rows if r[1].get(field) is not None]
            rows.sort(key=lambda r: r[1][field], reverse=direction == Query.DESCENDING)
        rows = rows[self._offset:]
        if self._limit is not None:
            rows = rows[:self._limit]
        for doc_id, data in rows:
            yield FakeSnapshot(FakeDocRef(self._db, self._collection, doc_id), data)

    def get(self):
        return list(self.stream())

    def count(self, alias=None):
        n = len(self._matching())
        return SimpleNamespace(get=lambda: [[SimpleNamespace(alias=alias, value=n)]])


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        super().__init__(db, name)
        self.id = name

    def document(self, doc_id=None):
        return FakeDocRef(self._db, self._collection, doc_id or uuid.uuid4().hex)


class FakeBatch:
    def __init__(self, db):
        self._db = db
        self._ops = []

    def set(self, ref, data):
        self._ops.append(("set", ref, copy.deepcopy(data)))

    def update(self, ref, data):
        self._ops.append(("update", ref, copy.deepcopy(data)))

    def delete(self, ref):
        self._ops.append(("delete", ref, None))

    def commit(self):
        # All or nothing, like a real batch
        for _, ref, _ in self._ops:
            self._db.check_write(ref.collection)
        self._db.commits += 1
        for op, ref, data in self._ops:
            if op == "set":
                ref.set(data)
            elif op == "update":
                ref.update(data)
            else:
                ref.delete()
        self._ops = []


class FakeFirestore:
    def __init__(self):
        self.data = {}
        self.failing_collections = set()
        # Raised instead of ServiceUnavailable for writes to failing_collections
        self.write_error = None
        # Raised by every document read and query when set
        self.read_error = None
        self.commits = 0

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)

    def check_write(self, collection):
        if collection in self.failing_collections:
            raise self.write_error or ServiceUnavailable(f"writes to {collection} are unavailable")

    def check_read(self, collection):
        if self.read_error is not None:
            raise self.read_error

    def docs(self, collection):
        return self.data.get(collection, {})


class FakeGateway:
    """Stands in for TossPaymentsClient."""

    def __init__(self, status="DONE", error=None, configured=True):
        self.status = status
        self.error = error
        self.configured = configured
        self.calls = []

    def confirm(self, payment_key, order_id, amount):
        self.calls.append((payment_key, order_id, amount))
        if self.error is not None:
            raise self.error
        return {
            "paymentKey": payment_key,
            "orderId": order_id,
            "status": self.status,
            "totalAmount": amount,
            "method": "카드",
            "approvedAt": "2025-01-01T12:00:00+09:00",
            "card": {"number": "12345678****789*"},
            "receipt": {"url": "https://receipt.example/1"},
        }


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def seed_product(db):
    """Insert a product row; returns its id."""
    counter = {"n": 0}

    def _seed(product_id, price, stock, name=None, active=True, category=None, created_at=None):
        counter["n"] += 1
        db.data.setdefault("products", {})[product_id] = {
            "name": name or product_id.title(),
            "description": None,
            "price": price,
            "stock_quantity": stock,
            "is_active": active,
            "category": category,
            "created_at": created_at or BASE_TIME + timedelta(minutes=counter["n"]),
            "updated_at": BASE_TIME,
        }
        return product_id

    return _seed


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def principal():
    return Principal(uid="user-1", role="user")


@pytest.fixture
def client(db, gateway, principal):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_principal] = lambda: principal
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db):
    """Real authentication dependency; only the database is faked."""
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def address():
    return {
        "recipient_name": "Kim Minsu",
        "phone": "010-1234-5678",
        "postal_code": "06236",
        "address": "123 Teheran-ro, Gangnam-gu",
        "address_detail": "Suite 501",
    }


@pytest.fixture
def gateway_error():
    return PaymentGatewayError("Card was rejected.", gateway_code="REJECT_CARD_PAYMENT", http_status=400)
