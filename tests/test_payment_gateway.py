import base64
from unittest import mock

import pytest
import requests

from storefront.core.errors import PaymentGatewayError
from storefront.integrations.payment import (
    TossPaymentsClient,
    describe_failure,
    encode_secret_key,
    mask_card_number,
    payment_method_name,
)


def _response(status_code, body):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.json.return_value = body
    return resp


def _client(resp=None, side_effect=None):
    session = mock.Mock()
    session.post.return_value = resp
    session.post.side_effect = side_effect
    return TossPaymentsClient("test_sk_abc", base_url="https://pay.example/", timeout=5, session=session), session


def test_confirm_request_shape():
    client, session = _client(_response(200, {"status": "DONE", "orderId": "o1"}))

    data = client.confirm("pk_1", "o1", 43000)

    assert data["status"] == "DONE"
    args, kwargs = session.post.call_args
    assert args == ("https://pay.example/v1/payments/confirm",)
    assert kwargs["json"] == {"paymentKey": "pk_1", "orderId": "o1", "amount": 43000}
    assert kwargs["timeout"] == 5
    expected = base64.b64encode(b"test_sk_abc:").decode()
    assert kwargs["headers"]["Authorization"] == f"Basic {expected}"


def test_gateway_rejection_carries_its_message():
    client, _ = _client(_response(400, {"code": "REJECT_CARD_PAYMENT", "message": "Limit exceeded."}))

    with pytest.raises(PaymentGatewayError) as exc_info:
        client.confirm("pk_1", "o1", 43000)
    assert exc_info.value.message == "Limit exceeded."
    assert exc_info.value.gateway_code == "REJECT_CARD_PAYMENT"
    assert exc_info.value.http_status == 400


def test_rejection_without_body():
    resp = _response(500, None)
    resp.json.side_effect = ValueError("no json")
    client, _ = _client(resp)

    with pytest.raises(PaymentGatewayError, match="Payment approval failed."):
        client.confirm("pk_1", "o1", 43000)


def test_network_failure():
    client, _ = _client(side_effect=requests.ConnectionError("boom"))
    with pytest.raises(PaymentGatewayError, match="Could not reach the payment gateway."):
        client.confirm("pk_1", "o1", 43000)


def test_configured():
    assert TossPaymentsClient("sk").configured
    assert not TossPaymentsClient("").configured


def test_encode_secret_key():
    assert encode_secret_key("sk") == "Basic " + base64.b64encode(b"sk:").decode()


@pytest.mark.parametrize("code, message, expected", [
    ("PAY_PROCESS_CANCELED", None, "You cancelled the payment."),
    ("SOMETHING_NEW", "Gateway says no.", "Gateway says no."),
    (None, None, "An error occurred while processing the payment."),
])
def test_describe_failure(code, message, expected):
    assert describe_failure(code, message) == expected


@pytest.mark.parametrize("method, expected", [
    ("카드", "Card"),
    ("EASY_PAY", "Easy pay"),
    ("CRYPTO", "CRYPTO"),
    (None, None),
])
def test_payment_method_name(method, expected):
    assert payment_method_name(method) == expected


@pytest.mark.parametrize("number, expected", [
    ("1234567812345678", "1234-****-****-5678"),
    ("1234-5678-1234-5678", "1234-****-****-5678"),
    ("12345678****789*", "12345678****789*"),
    ("1234", "1234"),
])
def test_mask_card_number(number, expected):
    assert mask_card_number(number) == expected
