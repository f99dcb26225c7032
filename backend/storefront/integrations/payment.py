"""
storefront/integrations/payment.py - Payment gateway (Toss Payments) integration.

The browser completes the card flow on the gateway's hosted page and is
redirected back with a paymentKey. The charge only becomes final once the
server calls the confirmation endpoint with the secret key, which is what
`TossPaymentsClient.confirm` does. Also holds the static tables used to turn
gateway codes into human readable text.
"""
import base64
import logging
import re
from typing import Any, Dict, Optional

import requests

from storefront.config import settings
from storefront.core.errors import PaymentGatewayError

logger = logging.getLogger("storefront.integrations.payment")

CONFIRM_PATH = "/v1/payments/confirm"
STATUS_DONE = "DONE"

# Redirect failure codes -> what we tell the customer
FAILURE_MESSAGES = {
    "PAY_PROCESS_CANCELED": "You cancelled the payment.",
    "PAY_PROCESS_ABORTED": "The payment was aborted.",
    "REJECT_CARD_PAYMENT": "The card payment was declined. Please check your card details.",
    "INVALID_CARD_EXPIRATION": "The card expiry date is invalid.",
    "NOT_FOUND_PAYMENT_SESSION": "The payment session timed out (10 minutes).",
    "BELOW_MINIMUM_AMOUNT": "The payment amount is below the minimum.",
    "EXCEED_MAX_CARD_INSTALLMENT_PLAN": "The number of installment months exceeds the card's limit.",
}

# The gateway reports methods either as codes or as Korean display names
PAYMENT_METHOD_NAMES = {
    "CARD": "Card",
    "카드": "Card",
    "VIRTUAL_ACCOUNT": "Virtual account",
    "가상계좌": "Virtual account",
    "TRANSFER": "Bank transfer",
    "계좌이체": "Bank transfer",
    "MOBILE_PHONE": "Mobile phone",
    "휴대폰": "Mobile phone",
    "GIFT_CERTIFICATE": "Gift certificate",
    "상품권": "Gift certificate",
    "EASY_PAY": "Easy pay",
    "간편결제": "Easy pay",
}


def encode_secret_key(secret_key: str) -> str:
    """Basic auth header value: base64("<secret>:")."""
    encoded = base64.b64encode(f"{secret_key}:".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def describe_failure(code: Optional[str], message: Optional[str] = None) -> str:
    if code and code in FAILURE_MESSAGES:
        return FAILURE_MESSAGES[code]
    return message or "An error occurred while processing the payment."


def payment_method_name(method: Optional[str]) -> Optional[str]:
    if method is None:
        return None
    return PAYMENT_METHOD_NAMES.get(method, method)


def mask_card_number(card_number: str) -> str:
    """1234567812345678 -> 1234-****-****-5678; already masked numbers pass through."""
    if "*" in card_number:
        return card_number
    digits = re.sub(r"\D", "", card_number)
    if len(digits) < 8:
        return card_number
    return f"{digits[:4]}-****-****-{digits[-4:]}"


class TossPaymentsClient:
    """Minimal client for the confirmation endpoint."""

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.tosspayments.com",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.secret_key = secret_key or ""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.secret_key)

    def confirm(self, payment_key: str, order_id: str, amount: int) -> Dict[str, Any]:
        """
        Finalizes a payment. Returns the gateway's payment object.
        Raises PaymentGatewayError carrying the gateway's own message on any failure.
        """
        logger.info("Confirming payment order=%s amount=%s key=%s...", order_id, amount, payment_key[:20])
        try:
            resp = self.session.post(
                f"{self.base_url}{CONFIRM_PATH}",
                headers={
                    "Authorization": encode_secret_key(self.secret_key),
                    "Content-Type": "application/json",
                },
                json={"paymentKey": payment_key, "orderId": order_id, "amount": amount},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Payment gateway unreachable: %s", exc)
            raise PaymentGatewayError("Could not reach the payment gateway.") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not resp.ok:
            logger.warning("Payment confirmation failed: %s %s", resp.status_code, data)
            raise PaymentGatewayError(
                data.get("message") or "Payment approval failed.",
                gateway_code=data.get("code"),
                http_status=resp.status_code,
            )

        logger.info("Payment confirmed order=%s status=%s method=%s",
                    data.get("orderId"), data.get("status"), data.get("method"))
        return data


def get_payment_gateway() -> TossPaymentsClient:
    """FastAPI dependency built from settings."""
    return TossPaymentsClient(
        secret_key=settings.toss_secret_key,
        base_url=settings.toss_api_base_url,
        timeout=settings.toss_timeout_seconds,
    )
