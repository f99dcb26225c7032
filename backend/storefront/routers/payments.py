"""
storefront/routers/payments.py
Gateway redirect targets: confirm on success, explain on failure.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from storefront.config import get_db
from storefront.core.auth import get_principal
from storefront.integrations.payment import describe_failure, get_payment_gateway
from storefront.schemas.payment import PaymentApprovalRequest, PaymentApprovalResult, PaymentFailure
from storefront.schemas.principal import Principal
from storefront.services import payments

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/confirm", response_model=PaymentApprovalResult)
def confirm_payment(
    payload: PaymentApprovalRequest,
    principal: Principal = Depends(get_principal),
    db=Depends(get_db),
    gateway=Depends(get_payment_gateway),
):
    result = payments.approve_payment(db, principal.uid, payload.payment_key, payload.order_id, payload.amount, gateway)
    return PaymentApprovalResult(**result)


@router.get("/failure", response_model=PaymentFailure)
def payment_failure(
    code: str = Query("UNKNOWN_ERROR"),
    message: Optional[str] = Query(None),
    order_id: Optional[str] = Query(None, alias="orderId"),
):
    return PaymentFailure(code=code, message=describe_failure(code, message), order_id=order_id)
