"""
storefront/schemas/cart.py - Pydantic models for the cart.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from storefront.schemas.common import ActionResult
from storefront.schemas.product import ProductSummary


def _clean_id(v: str) -> str:
    v = (v or "").strip()
    for ch in ("\u200b", "\u200c", "\u200d", "\ufeff", "\xa0"):
        v = v.replace(ch, "")
    if not v:
        raise ValueError("id cannot be empty")
    return v


class AddItemBody(BaseModel):
    product_id: str = Field(..., description="Product ID (the same 'id' you see in /products).")
    quantity: int = Field(1, ge=1, le=10000, description="Quantity (>=1).")

    @field_validator("product_id")
    @classmethod
    def _clean_pid(cls, v: str) -> str:
        return _clean_id(v)


class UpdateQuantityBody(BaseModel):
    # Range is enforced by the service so the rejection reads like the other stock errors
    quantity: int = Field(..., description="New quantity (>=1).")


class RemoveLinesBody(BaseModel):
    line_ids: List[str] = Field(..., description="Cart line IDs to remove.")

    @field_validator("line_ids")
    @classmethod
    def _clean_ids(cls, v: List[str]) -> List[str]:
        return [_clean_id(x) for x in v]


class CartLineOut(BaseModel):
    id: str
    owner_id: str
    product_id: str
    quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Live product row; None when the product no longer exists
    product: Optional[ProductSummary] = None


class CartSummary(BaseModel):
    item_count: int = 0
    subtotal: int = 0
    shipping_fee: int = 0
    total: int = 0
    remaining_for_free_shipping: int = 0


class CartLineResult(ActionResult):
    cart_item: CartLineOut


class CartOut(ActionResult):
    items: List[CartLineOut] = Field(default_factory=list)
    summary: CartSummary = Field(default_factory=CartSummary)


class CartCount(ActionResult):
    count: int


class RemovedCount(ActionResult):
    removed: int
