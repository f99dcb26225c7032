"""
storefront/routers/orders.py
Checkout and order history for the caller, plus the admin status endpoint.
"""
from fastapi import APIRouter, Depends, Query, status

from storefront.config import get_db
from storefront.core.auth import get_principal, require_admin
from storefront.schemas.order import (
    OrderCreate,
    OrderCreated,
    OrderDetail,
    OrderPage,
    OrderSort,
    OrderStatusResult,
    StatusChangeBody,
    StatusFilter,
)
from storefront.schemas.principal import Principal
from storefront.services import order_status, orders

router = APIRouter(prefix="/orders", tags=["Orders"])
admin_router = APIRouter(prefix="/orders", tags=["Admin Orders"])


@router.post("", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, principal: Principal = Depends(get_principal), db=Depends(get_db)):
    order = orders.create_order(
        db,
        principal.uid,
        payload.line_ids,
        payload.shipping_address.model_dump(),
        payload.order_note,
    )
    return OrderCreated(
        message="Order created.",
        order_id=order["id"],
        total_amount=order["total_amount"],
        shipping_fee=order["shipping_fee"],
    )


@router.get("", response_model=OrderPage)
def list_my_orders(
    status_filter: StatusFilter = Query("all", alias="status"),
    sort: OrderSort = Query("latest"),
    page: int = Query(1, ge=1),
    principal: Principal = Depends(get_principal),
    db=Depends(get_db),
):
    return OrderPage(**orders.get_user_orders(db, principal.uid, status=status_filter, sort=sort, page=page))


@router.get("/{order_id}", response_model=OrderDetail)
def get_order_detail(order_id: str, principal: Principal = Depends(get_principal), db=Depends(get_db)):
    return OrderDetail(order=orders.get_order_with_items(db, principal.uid, order_id))


@admin_router.post("/{order_id}/status", response_model=OrderStatusResult, dependencies=[Depends(require_admin)])
def admin_change_status(order_id: str, payload: StatusChangeBody, db=Depends(get_db)):
    order = order_status.set_status(db, order_id, payload.status)
    order["status_label"] = order_status.label(order["status"])
    return OrderStatusResult(message="Order status updated.", order=order)
