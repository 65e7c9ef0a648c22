from datetime import datetime, timedelta, timezone

from tests.conftest import make_coupon


def apply(client, code, subtotal):
    return client.post("/coupons/apply", json={"code": code, "subtotal": subtotal})


def test_apply_percentage_coupon(client, coupon):
    response = apply(client, " save10 ", 250000)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data == {
        "couponId": coupon.id,
        "code": "SAVE10",
        "type": "PERCENTAGE",
        "discount": 25000,
        "description": None,
    }


def test_apply_does_not_consume_usage(client, session):
    coupon = make_coupon(session, code="ONE", usage_limit=1)

    assert apply(client, "ONE", 100000).status_code == 200
    assert apply(client, "ONE", 100000).status_code == 200
    session.refresh(coupon)
    assert coupon.used_count == 0


def test_unknown_coupon(client):
    response = apply(client, "NOPE", 100000)

    assert response.status_code == 404
    assert response.json() == {"success": False, "detail": "Coupon not found", "code": "COUPON_NOT_FOUND"}


def test_rejection_codes(client, session):
    now = datetime.now(timezone.utc)
    make_coupon(session, code="OFF", active=False)
    make_coupon(session, code="SOON", valid_from=now + timedelta(days=1))
    make_coupon(session, code="OLD", valid_until=now - timedelta(days=1))
    make_coupon(session, code="USED", usage_limit=5, used_count=5)
    make_coupon(session, code="BIG", min_order_amount=1000000)

    expected = {
        "OFF": "COUPON_INACTIVE",
        "SOON": "COUPON_NOT_YET_VALID",
        "OLD": "COUPON_EXPIRED",
        "USED": "COUPON_EXHAUSTED",
        "BIG": "COUPON_MINIMUM_NOT_MET",
    }
    for code, error_code in expected.items():
        response = apply(client, code, 100000)
        assert response.status_code == 400, code
        assert response.json()["code"] == error_code


def test_one_slot_left_is_accepted(client, session):
    make_coupon(session, code="LAST", usage_limit=5, used_count=4)

    assert apply(client, "LAST", 100000).status_code == 200


class TestAdminCoupons:
    def payload(self, **kwargs):
        now = datetime.now(timezone.utc)
        data = {
            "code": "welcome",
            "type": "FIXED",
            "value": 50000,
            "validFrom": now.isoformat(),
            "validUntil": (now + timedelta(days=7)).isoformat(),
        }
        data.update(kwargs)
        return data

    def test_create_normalises_code_and_zero_limits(self, client, admin_headers):
        response = client.post(
            "/admin/coupons",
            json=self.payload(usageLimit=0, minOrderAmount=0),
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["code"] == "WELCOME"
        assert data["usageLimit"] is None
        assert data["minOrderAmount"] is None
        assert data["usedCount"] == 0

    def test_duplicate_code(self, client, session, admin_headers):
        make_coupon(session, code="WELCOME")

        response = client.post("/admin/coupons", json=self.payload(), headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Coupon code already exists"

    def test_window_must_be_ordered(self, client, admin_headers):
        now = datetime.now(timezone.utc)
        response = client.post(
            "/admin/coupons",
            json=self.payload(validFrom=now.isoformat(), validUntil=(now - timedelta(days=1)).isoformat()),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_COUPON_WINDOW"

    def test_percentage_over_100(self, client, admin_headers):
        response = client.post(
            "/admin/coupons",
            json=self.payload(type="PERCENTAGE", value=150),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_COUPON_VALUE"

    def test_update_and_delete(self, client, coupon, admin_headers):
        response = client.put(
            f"/admin/coupons/{coupon.id}",
            json={"active": False, "description": "Paused"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["active"] is False

        assert client.delete(f"/admin/coupons/{coupon.id}", headers=admin_headers).status_code == 200
        assert client.get(f"/admin/coupons/{coupon.id}", headers=admin_headers).status_code == 404

    def test_usage_limit_cannot_drop_below_used_count(self, client, session, admin_headers):
        coupon = make_coupon(session, code="POPULAR", usage_limit=5, used_count=5)

        response = client.put(f"/admin/coupons/{coupon.id}", json={"usageLimit": 2}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_COUPON_USAGE_LIMIT"
        session.refresh(coupon)
        assert coupon.usage_limit == 5

        unlimited = client.put(f"/admin/coupons/{coupon.id}", json={"usageLimit": 0}, headers=admin_headers)
        assert unlimited.status_code == 200
        assert unlimited.json()["data"]["usageLimit"] is None

    def test_customers_cannot_manage_coupons(self, client, customer_headers):
        assert client.get("/admin/coupons", headers=customer_headers).status_code == 403
