"""
storefront/routers/carts.py
Cart endpoints (logged-in users): add, list with live product info and totals,
count, change quantity, remove one / several, clear.
"""
from fastapi import APIRouter, Depends

from storefront.config import get_db
from storefront.core.auth import get_principal
from storefront.schemas.cart import (
    AddItemBody,
    CartCount,
    CartLineResult,
    CartOut,
    RemovedCount,
    RemoveLinesBody,
    UpdateQuantityBody,
)
from storefront.schemas.common import ActionResult
from storefront.schemas.principal import Principal
from storefront.services import cart as cart_service

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartOut)
def get_cart(principal: Principal = Depends(get_principal), db=Depends(get_db)):
    lines = cart_service.list_lines(db, principal.uid)
    return CartOut(items=lines, summary=cart_service.summarize(lines))


@router.get("/count", response_model=CartCount)
def cart_count(principal: Principal = Depends(get_principal), db=Depends(get_db)):
    return CartCount(count=cart_service.count_lines(db, principal.uid))


@router.post("/items", response_model=CartLineResult)
def add_to_cart(payload: AddItemBody, principal: Principal = Depends(get_principal), db=Depends(get_db)):
    line = cart_service.add_line(db, principal.uid, payload.product_id, payload.quantity)
    return CartLineResult(message="Added to cart.", cart_item=line)


@router.post("/items/remove", response_model=RemovedCount)
def remove_cart_items(payload: RemoveLinesBody, principal: Principal = Depends(get_principal), db=Depends(get_db)):
    removed = cart_service.remove_lines(db, principal.uid, payload.line_ids)
    return RemovedCount(message="Removed from cart.", removed=removed)


@router.patch("/items/{line_id}", response_model=CartLineResult)
def update_cart_item(
    line_id: str,
    payload: UpdateQuantityBody,
    principal: Principal = Depends(get_principal),
    db=Depends(get_db),
):
    line = cart_service.update_line_quantity(db, principal.uid, line_id, payload.quantity)
    return CartLineResult(message="Quantity updated.", cart_item=line)


@router.delete("/items/{line_id}", response_model=ActionResult)
def remove_cart_item(line_id: str, principal: Principal = Depends(get_principal), db=Depends(get_db)):
    cart_service.remove_line(db, principal.uid, line_id)
    return ActionResult(message="Removed from cart.")


@router.delete("", response_model=RemovedCount)
def clear_cart(principal: Principal = Depends(get_principal), db=Depends(get_db)):
    removed = cart_service.clear_all(db, principal.uid)
    return RemovedCount(message="Cart cleared.", removed=removed)
