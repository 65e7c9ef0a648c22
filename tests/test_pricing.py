from datetime import datetime, timedelta, timezone
from decimal import Decimal

from src.api.models import Coupon, CouponType
from src.api.services.discount_service import calculate_discount
from src.api.services.pricing_service import (
    calculate_shipping_fee,
    calculate_tax,
    calculate_totals,
)

SETTINGS = {
    "shipping_fee": 30000,
    "free_shipping_threshold": 499000,
    "tax_rate": 8,
}


def test_shipping_is_free_from_threshold():
    assert calculate_shipping_fee(Decimal("499000"), SETTINGS) == Decimal("0")
    assert calculate_shipping_fee(Decimal("498999"), SETTINGS) == Decimal("30000")


def test_shipping_without_threshold():
    settings = {**SETTINGS, "free_shipping_threshold": None}
    assert calculate_shipping_fee(Decimal("5000000"), settings) == Decimal("30000")


def test_tax_is_on_subtotal_before_discount():
    assert calculate_tax(Decimal("1000000"), SETTINGS) == Decimal("80000")


def test_tax_is_not_rounded():
    assert calculate_tax(Decimal("1005"), {"tax_rate": 10}) == Decimal("100.5")


def test_capped_percentage_order():
    """10% of 1.000.000 capped at 50.000, free shipping, 8% tax"""
    now = datetime.now(timezone.utc)
    coupon = Coupon(
        id=1,
        code="SAVE10",
        type=CouponType.PERCENTAGE,
        value=Decimal("10"),
        max_discount_amount=Decimal("50000"),
        valid_from=now - timedelta(days=1),
        valid_until=now + timedelta(days=1),
    )
    subtotal = Decimal("1000000")
    discount = calculate_discount(coupon, subtotal)

    totals = calculate_totals(subtotal, SETTINGS, discount)

    assert totals.discount == Decimal("50000")
    assert totals.shipping == Decimal("0")
    assert totals.tax == Decimal("80000")
    assert totals.total == Decimal("1030000")


def test_small_order_pays_shipping():
    totals = calculate_totals(Decimal("200000"), SETTINGS)

    assert totals.discount == Decimal("0")
    assert totals.shipping == Decimal("30000")
    assert totals.tax == Decimal("16000")
    assert totals.total == Decimal("246000")


def test_as_dict_keys():
    totals = calculate_totals(Decimal("100"), {"shipping_fee": 0, "tax_rate": 0})
    assert set(totals.as_dict()) == {"subtotal", "discount", "shipping", "tax", "total"}
