from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.api.models import Coupon, CouponType
from src.api.services.discount_service import (
    CouponExhausted,
    CouponExpired,
    CouponInactive,
    CouponMinimumNotMet,
    CouponNotFound,
    CouponNotYetValid,
    apply_coupon,
    calculate_discount,
    redeem_coupon,
    validate_coupon,
)
from tests.conftest import make_coupon

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def build_coupon(**kwargs) -> Coupon:
    values = {
        "id": 1,
        "code": "TEST",
        "type": CouponType.PERCENTAGE,
        "value": Decimal("10"),
        "valid_from": NOW - timedelta(days=1),
        "valid_until": NOW + timedelta(days=1),
        "active": True,
        "used_count": 0,
    }
    values.update(kwargs)
    return Coupon(**values)


class TestCalculateDiscount:
    def test_percentage_without_cap(self):
        coupon = build_coupon(value=Decimal("20"))
        assert calculate_discount(coupon, Decimal("1000000")) == Decimal("200000")

    def test_percentage_is_capped(self):
        coupon = build_coupon(value=Decimal("50"), max_discount_amount=Decimal("100000"))
        assert calculate_discount(coupon, Decimal("1000000")) == Decimal("100000")

    def test_fixed_is_clamped_to_subtotal(self):
        coupon = build_coupon(type=CouponType.FIXED, value=Decimal("300000"))
        assert calculate_discount(coupon, Decimal("200000")) == Decimal("200000")

    def test_fixed_below_subtotal(self):
        coupon = build_coupon(type=CouponType.FIXED, value=Decimal("50000"))
        assert calculate_discount(coupon, Decimal("200000")) == Decimal("50000")

    def test_rounds_half_up(self):
        # 12.5% of 1.004 = 125.5
        coupon = build_coupon(value=Decimal("12.5"))
        assert calculate_discount(coupon, Decimal("1004")) == Decimal("126")

    def test_never_exceeds_subtotal(self):
        coupon = build_coupon(value=Decimal("100"))
        assert calculate_discount(coupon, Decimal("75000")) == Decimal("75000")


class TestValidateCoupon:
    def test_missing(self):
        with pytest.raises(CouponNotFound) as exc:
            validate_coupon(None, Decimal("100"), NOW)
        assert exc.value.status_code == 404

    def test_inactive_is_checked_before_dates(self):
        coupon = build_coupon(active=False, valid_until=NOW - timedelta(days=5))
        with pytest.raises(CouponInactive):
            validate_coupon(coupon, Decimal("100"), NOW)

    def test_not_yet_valid(self):
        coupon = build_coupon(valid_from=NOW + timedelta(hours=1))
        with pytest.raises(CouponNotYetValid):
            validate_coupon(coupon, Decimal("100"), NOW)

    def test_expired(self):
        coupon = build_coupon(valid_until=NOW - timedelta(seconds=1))
        with pytest.raises(CouponExpired):
            validate_coupon(coupon, Decimal("100"), NOW)

    def test_naive_dates_are_utc(self):
        coupon = build_coupon(
            valid_from=(NOW - timedelta(hours=1)).replace(tzinfo=None),
            valid_until=(NOW + timedelta(hours=1)).replace(tzinfo=None),
        )
        assert validate_coupon(coupon, Decimal("100"), NOW) is coupon

    def test_exhausted_before_minimum(self):
        coupon = build_coupon(usage_limit=3, used_count=3, min_order_amount=Decimal("1000000"))
        with pytest.raises(CouponExhausted):
            validate_coupon(coupon, Decimal("100"), NOW)

    def test_minimum_order_message(self):
        coupon = build_coupon(min_order_amount=Decimal("500000"))
        with pytest.raises(CouponMinimumNotMet) as exc:
            validate_coupon(coupon, Decimal("499999"), NOW)
        assert exc.value.detail == "Minimum order of 500.000 ₫ is required to use this coupon"

    def test_minimum_order_is_inclusive(self):
        coupon = build_coupon(min_order_amount=Decimal("500000"))
        assert validate_coupon(coupon, Decimal("500000"), NOW) is coupon


class TestApplyAndRedeem:
    def test_apply_normalises_code_and_keeps_usage(self, session):
        coupon = make_coupon(session, code="SUMMER", usage_limit=1)

        applied = apply_coupon(session, "  summer ", Decimal("200000"))

        assert applied.code == "SUMMER"
        assert applied.discount == Decimal("20000")
        session.refresh(coupon)
        assert coupon.used_count == 0

    def test_redeem_takes_one_slot(self, session):
        coupon = make_coupon(session, code="ONCE", usage_limit=1)

        redeem_coupon(session, coupon.id)
        session.commit()
        session.refresh(coupon)
        assert coupon.used_count == 1

        with pytest.raises(CouponExhausted):
            redeem_coupon(session, coupon.id)

    def test_redeem_unlimited(self, session):
        coupon = make_coupon(session, code="FOREVER")
        for _ in range(3):
            redeem_coupon(session, coupon.id)
        session.commit()
        session.refresh(coupon)
        assert coupon.used_count == 3
