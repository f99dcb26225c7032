# storefront/schemas/order.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from storefront.core import constants as C
from storefront.schemas.common import ActionResult, PageInfo

# Order statuses; transitions live in storefront.services.order_status
OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]
OrderSort = Literal["latest", "oldest", "price_high", "price_low"]
StatusFilter = Literal["all", "pending", "confirmed", "shipped", "delivered", "cancelled"]


class ShippingAddress(BaseModel):
    """Delivery details captured on the checkout form; stored embedded in the order."""
    recipient_name: str = Field(..., min_length=C.RECIPIENT_NAME_MIN_LENGTH, max_length=C.RECIPIENT_NAME_MAX_LENGTH)
    phone: str = Field(..., pattern=C.PHONE_PATTERN, description="e.g. 010-1234-5678")
    postal_code: str = Field(..., pattern=C.POSTAL_CODE_PATTERN, description="5 digits")
    address: str = Field(..., min_length=C.ADDRESS_MIN_LENGTH, max_length=C.ADDRESS_MAX_LENGTH)
    address_detail: str = Field(..., min_length=C.ADDRESS_DETAIL_MIN_LENGTH, max_length=C.ADDRESS_DETAIL_MAX_LENGTH)

    @field_validator("recipient_name", "phone", "postal_code", "address", "address_detail", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


# (Input) checkout payload
class OrderCreate(BaseModel):
    line_ids: List[str] = Field(default_factory=list, description="Selected cart line IDs")
    shipping_address: ShippingAddress
    order_note: Optional[str] = Field(None, max_length=C.ORDER_NOTE_MAX_LENGTH)


class StatusChangeBody(BaseModel):
    status: OrderStatus


# (Output) order line snapshot
class OrderItemOut(BaseModel):
    id: str
    order_id: str
    product_id: str
    product_name: str
    quantity: int
    price: int
    created_at: Optional[datetime] = None


class PaymentInfo(BaseModel):
    payment_key: str
    method: Optional[str] = None
    approved_at: Optional[str] = None
    receipt_url: Optional[str] = None


class OrderOut(BaseModel):
    id: str
    owner_id: str
    total_amount: int
    status: OrderStatus
    status_label: str = ""
    shipping_address: ShippingAddress
    order_note: Optional[str] = None
    payment: Optional[PaymentInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderWithItemsOut(OrderOut):
    items: List[OrderItemOut] = Field(default_factory=list)


class OrderCreated(ActionResult):
    order_id: str
    total_amount: int
    shipping_fee: int


class OrderDetail(ActionResult):
    order: OrderWithItemsOut


class OrderPage(ActionResult, PageInfo):
    orders: List[OrderOut] = Field(default_factory=list)


class OrderStatusResult(ActionResult):
    order: OrderOut
