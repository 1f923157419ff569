import base64
import json

import httpx
import pytest

from services.payment_service.gateway import RazorpayGateway, make_receipt, sign, to_paise
from shared.errors import GatewayError


def gateway_with(handler, **kwargs):
    params = dict(key_id="rzp_test_key", key_secret="rzp_test_secret", base_url="https://razorpay.test/v1/")
    params.update(kwargs)
    return RazorpayGateway(transport=httpx.MockTransport(handler), **params)


def test_amounts_are_sent_in_paise():
    assert to_paise(1330) == 133000
    assert to_paise(0.1 + 0.2) == 30


def test_receipt_prefix():
    assert make_receipt("ws").startswith("ws_")


async def test_create_order_posts_to_razorpay():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "order_abc", "amount": seen["body"]["amount"], "currency": "INR"})

    order = await gateway_with(handler).create_order(2500, "ws_1", {"guests": 2})

    assert order["id"] == "order_abc"
    assert seen["url"] == "https://razorpay.test/v1/orders"
    assert seen["auth"] == "Basic " + base64.b64encode(b"rzp_test_key:rzp_test_secret").decode()
    assert seen["body"] == {"amount": 250000, "currency": "INR", "receipt": "ws_1", "notes": {"guests": "2"}}


async def test_rejected_order_raises_gateway_error():
    gateway = gateway_with(lambda request: httpx.Response(400, json={"error": {"code": "BAD_REQUEST_ERROR"}}))

    with pytest.raises(GatewayError):
        await gateway.create_order(100, "ord_1", {})


async def test_unreachable_gateway_raises_gateway_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GatewayError):
        await gateway_with(handler).create_order(100, "ord_1", {})


async def test_missing_credentials():
    gateway = gateway_with(lambda request: httpx.Response(200, json={}), key_id="", key_secret="")

    with pytest.raises(GatewayError, match="credentials not configured"):
        await gateway.create_order(100, "ord_1", {})
    with pytest.raises(GatewayError):
        gateway.verify_signature("order_1", "pay_1", "sig")


def test_signature_check():
    gateway = RazorpayGateway(key_id="rzp_test_key", key_secret="rzp_test_secret")
    good = sign("rzp_test_secret", "order_1", "pay_1")

    assert gateway.verify_signature("order_1", "pay_1", good)
    assert not gateway.verify_signature("order_1", "pay_2", good)
    assert not gateway.verify_signature("order_1", "pay_1", sign("other_secret", "order_1", "pay_1"))
    assert not gateway.verify_signature("order_1", "pay_1", "")
