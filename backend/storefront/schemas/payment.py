"""
storefront/schemas/payment.py - Payment confirmation request/response models.
"""
from typing import Optional

from pydantic import BaseModel, Field

from storefront.schemas.common import ActionResult


class PaymentApprovalRequest(BaseModel):
    """Query parameters the gateway redirects back with, forwarded by the client."""
    payment_key: str = Field(..., min_length=1)
    order_id: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)


class PaymentReceipt(BaseModel):
    payment_key: str
    order_id: str
    status: str
    total_amount: int
    method: Optional[str] = None
    approved_at: Optional[str] = None
    card_number: Optional[str] = None
    receipt_url: Optional[str] = None


class PaymentApprovalResult(ActionResult):
    payment: Optional[PaymentReceipt] = None


class PaymentFailure(ActionResult):
    success: bool = False
    code: str
    order_id: Optional[str] = None
