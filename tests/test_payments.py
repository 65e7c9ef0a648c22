from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest

from src.api.core.payment import PaymentGatewayFactory
from src.api.core.payment.gateways.vnpay_gateway import VNPayGateway
from src.api.models import Order, OrderStatusEnum, PaymentMethodEnum, PaymentStatusEnum
from tests.test_orders_api import add_to_cart, checkout, medium_white

SECRET = "TESTHASHSECRET"


@pytest.fixture
def gateway():
    return VNPayGateway(
        tmn_code="TESTTMN",
        hash_secret=SECRET,
        payment_url="https://sandbox.vnpayment.vn/paymentv2/vpcpay.html",
        return_url="http://localhost:8000/api/payments/vnpay/callback",
    )


@pytest.fixture
def order(client, session, customer_headers, store_settings, address, product):
    store_settings.payment_credit_card_enabled = True
    session.add(store_settings)
    session.commit()

    add_to_cart(client, customer_headers, product, medium_white(product), quantity=1)
    response = checkout(client, customer_headers, address, paymentMethod="VNPAY")
    assert response.status_code == 201
    return session.get(Order, response.json()["data"]["id"])


def signed_callback(gateway, order, amount=None, response_code="00", **extra):
    params = {
        "vnp_Amount": str(int((amount if amount is not None else order.total) * 100)),
        "vnp_BankCode": "NCB",
        "vnp_OrderInfo": f"Thanh toan don hang {order.order_number}",
        "vnp_PayDate": "20250601120000",
        "vnp_ResponseCode": response_code,
        "vnp_TmnCode": "TESTTMN",
        "vnp_TransactionNo": "14000000",
        "vnp_TransactionStatus": "00" if response_code == "00" else "02",
        "vnp_TxnRef": order.order_number,
    }
    params.update(extra)
    params["vnp_SecureHash"] = gateway.generate_signature(params)
    return params


class TestVNPayGateway:
    def test_signature_ignores_order_and_empty_values(self, gateway):
        a = gateway.generate_signature({"vnp_B": "2", "vnp_A": "x y", "vnp_C": ""})
        b = gateway.generate_signature({"vnp_A": "x y", "vnp_B": "2"})
        assert a == b
        assert len(a) == 128

    def test_build_query_encodes_spaces_as_plus(self, gateway):
        assert gateway.build_query({"b": "a b", "a": "1&2"}) == "a=1%262&b=a+b"

    def test_payment_url(self, gateway):
        result = gateway.initiate_payment("ORD-1", Decimal("530000.40"), "Thanh toan <don> hang")

        assert result.success
        query = parse_qs(urlparse(result.redirect_url).query)
        assert query["vnp_Amount"] == ["53000000"]
        assert query["vnp_OrderInfo"] == ["Thanh toan don hang"]
        assert query["vnp_TxnRef"] == ["ORD-1"]
        signature = query.pop("vnp_SecureHash")[0]
        assert gateway.verify_signature({k: v[0] for k, v in query.items()}, signature)

    def test_rejects_zero_amount(self, gateway):
        result = gateway.initiate_payment("ORD-1", Decimal("0"), "x")

        assert not result.success
        assert result.error_code == "INVALID_AMOUNT"

    def test_tampered_callback(self, gateway):
        params = {"vnp_Amount": "100", "vnp_ResponseCode": "00", "vnp_TxnRef": "ORD-1"}
        params["vnp_SecureHash"] = gateway.generate_signature(params)
        params["vnp_Amount"] = "1"

        assert gateway.process_callback(params).valid is False

    def test_unconfigured_gateway(self, monkeypatch):
        monkeypatch.setattr(VNPayGateway, "initialize", lambda self: False)

        assert PaymentGatewayFactory.get_gateway("vnpay") is None
        assert PaymentGatewayFactory.get_gateway("unknown") is None


class TestVNPayRoutes:
    def test_create_payment_url(self, client, session, customer_headers, order):
        response = client.post("/payments/vnpay/create", json={"orderId": order.id}, headers=customer_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["orderNumber"] == order.order_number
        assert "vnp_SecureHash=" in data["paymentUrl"]
        session.refresh(order)
        assert order.payment_method == PaymentMethodEnum.VNPAY
        assert order.payment_metadata["paymentUrl"] == data["paymentUrl"]

    def test_create_for_paid_order(self, client, session, customer_headers, order):
        order.payment_status = PaymentStatusEnum.PAID
        session.add(order)
        session.commit()

        response = client.post("/payments/vnpay/create", json={"orderId": order.id}, headers=customer_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Order already paid"

    def test_successful_callback(self, client, session, gateway, order):
        response = client.get(
            "/payments/vnpay/callback",
            params=signed_callback(gateway, order),
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == f"http://frontend.test/orders/{order.id}?payment=success"
        session.refresh(order)
        assert order.payment_status == PaymentStatusEnum.PAID
        assert order.paid_at is not None
        assert order.payment_metadata["vnp_TransactionNo"] == "14000000"

    def test_repeated_callback_is_idempotent(self, client, session, gateway, order):
        params = signed_callback(gateway, order)
        client.get("/payments/vnpay/callback", params=params, follow_redirects=False)
        session.refresh(order)
        paid_at = order.paid_at

        response = client.get("/payments/vnpay/callback", params=params, follow_redirects=False)

        assert response.headers["location"].endswith("?payment=success")
        session.refresh(order)
        assert order.paid_at == paid_at

    def test_failed_callback(self, client, session, gateway, order):
        response = client.get(
            "/payments/vnpay/callback",
            params=signed_callback(gateway, order, response_code="24"),
            follow_redirects=False,
        )

        assert response.headers["location"] == f"http://frontend.test/payment/failed?orderId={order.id}&error=24"
        session.refresh(order)
        assert order.payment_status == PaymentStatusEnum.FAILED
        assert order.status == OrderStatusEnum.PENDING
        assert order.payment_metadata["errorMessage"] == "Customer cancelled the transaction"

    def test_amount_mismatch(self, client, session, gateway, order):
        response = client.get(
            "/payments/vnpay/callback",
            params=signed_callback(gateway, order, amount=Decimal("1000")),
            follow_redirects=False,
        )

        assert response.headers["location"].endswith("error=amount_mismatch")
        session.refresh(order)
        assert order.payment_status == PaymentStatusEnum.PENDING

    def test_bad_signature(self, client, gateway, order):
        params = signed_callback(gateway, order)
        params["vnp_SecureHash"] = "0" * 128

        response = client.get("/payments/vnpay/callback", params=params, follow_redirects=False)

        assert response.headers["location"] == "http://frontend.test/payment/failed?error=verification_failed"

    def test_unknown_order(self, client, gateway, order):
        params = signed_callback(gateway, order, vnp_TxnRef="ORD-0-MISSING")

        response = client.get("/payments/vnpay/callback", params=params, follow_redirects=False)

        assert response.headers["location"].endswith("error=order_not_found")

    def test_missing_response_code(self, client):
        response = client.get("/payments/vnpay/callback", follow_redirects=False)

        assert response.headers["location"].endswith("error=invalid_response")
