"""
storefront/services/payments.py - Payment confirmation.

Order of checks matters: the order must exist for the caller, still be
pending, and the redirected amount must equal the stored total BEFORE the
gateway is asked to capture anything.
"""
import logging
from typing import Any, Dict

from storefront.core.errors import (
    AmountMismatchError,
    NotFoundError,
    PaymentConfigurationError,
    PaymentGatewayError,
    PersistenceError,
)
from storefront.integrations.payment import STATUS_DONE, mask_card_number, payment_method_name
from storefront.repositories import orders as orders_repo
from storefront.services import cart as cart_service
from storefront.services import order_status

logger = logging.getLogger("storefront.payments")


def _receipt(payment: Dict[str, Any], payment_key: str, order_id: str, amount: int) -> Dict[str, Any]:
    card = payment.get("card") or {}
    receipt = payment.get("receipt") or {}
    return {
        "payment_key": payment.get("paymentKey") or payment_key,
        "order_id": payment.get("orderId") or order_id,
        "status": payment.get("status", ""),
        "total_amount": int(payment.get("totalAmount", amount)),
        "method": payment_method_name(payment.get("method")),
        "approved_at": payment.get("approvedAt"),
        "card_number": mask_card_number(card["number"]) if card.get("number") else None,
        "receipt_url": receipt.get("url"),
    }


def approve_payment(db, uid: str, payment_key: str, order_id: str, amount: int, gateway) -> Dict[str, Any]:
    """
    Confirms a payment for one of the caller's pending orders and marks it confirmed.

    Returns {"message", "payment"}; raises StorefrontError subclasses on rejection.
    """
    cart_service.require_uid(uid)

    order = orders_repo.get(db, uid, order_id)
    if not order:
        raise NotFoundError("Order information could not be found.")

    # Rejects already confirmed (or otherwise processed) orders
    order_status.ensure_transition(order.get("status"), order_status.CONFIRMED)

    if int(order.get("total_amount", -1)) != amount:
        logger.error("Amount mismatch order=%s stored=%s requested=%s", order_id, order.get("total_amount"), amount)
        raise AmountMismatchError(int(order.get("total_amount", 0)), amount)

    if not gateway.configured:
        logger.error("Payment secret key is not configured")
        raise PaymentConfigurationError()

    try:
        payment = gateway.confirm(payment_key, order_id, amount)
    except PaymentGatewayError as exc:
        logger.warning("Gateway rejected payment order=%s: %s", order_id, exc.message)
        raise

    status = payment.get("status")
    if status != STATUS_DONE:
        logger.warning("Payment not completed order=%s status=%s", order_id, status)
        raise PaymentGatewayError(f"Unexpected payment status: {status}")

    receipt = _receipt(payment, payment_key, order_id, amount)
    try:
        order_status.transition_order(db, order, order_status.CONFIRMED, extra={
            "payment": {
                "payment_key": receipt["payment_key"],
                "method": receipt["method"],
                "approved_at": receipt["approved_at"],
                "receipt_url": receipt["receipt_url"],
            },
        })
    except PersistenceError:
        # The charge went through; this order needs manual reconciliation
        logger.error("Payment %s captured but order %s is still pending", receipt["payment_key"], order_id)
        return {
            "message": "Payment completed, but the order status could not be updated.",
            "payment": receipt,
        }

    try:
        cart_service.clear_all(db, uid)
    except Exception as exc:
        # Payment is already captured; never fail the request from here
        logger.warning("Failed to clear cart after payment uid=%s: %r", uid, exc)

    logger.info("Payment approved order=%s amount=%s", order_id, amount)
    return {"message": "Payment completed.", "payment": receipt}
