# src/api/core/decimal_formatter.py
"""
Helpers for money values.

Money is kept as Decimal inside the application and only turned into a JSON
number at the response boundary. VND has no minor units, so whole amounts are
emitted as integers.
"""
from typing import Optional, Union
from decimal import Decimal, ROUND_HALF_UP

Number = Union[int, float, Decimal]

WHOLE_UNIT = Decimal("1")


def to_decimal(value: Optional[Number]) -> Decimal:
    """
    Convert a numeric value to Decimal without float artefacts

    Examples:
        to_decimal(10) -> Decimal("10")
        to_decimal(0.1) -> Decimal("0.1")
        to_decimal(None) -> Decimal("0")
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Optional[Number]) -> Decimal:
    """Round half-up to a whole currency unit"""
    return to_decimal(value).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def to_number(value: Optional[Number]) -> Optional[Union[int, float]]:
    """
    JSON representation of a money value

    Examples:
        to_number(Decimal("50000.00")) -> 50000
        to_number(Decimal("12.50")) -> 12.5
        to_number(None) -> None
    """
    if value is None:
        return None
    decimal_value = to_decimal(value)
    if decimal_value == decimal_value.to_integral_value():
        return int(decimal_value)
    return float(decimal_value)


def format_vnd(value: Optional[Number]) -> str:
    """
    Format an amount the way vi-VN currency formatting does

    Examples:
        format_vnd(500000) -> "500.000 ₫"
        format_vnd(1234567.6) -> "1.234.568 ₫"
    """
    amount = round_money(value)
    grouped = f"{abs(int(amount)):,}".replace(",", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}{grouped} ₫"


# Money fields across all response payloads (snake_case and camelCase)
MONETARY_FIELDS = {
    # Price fields
    "price", "compare_price", "comparePrice",

    # Coupon fields
    "value", "discount", "min_order_amount", "minOrderAmount",
    "max_discount_amount", "maxDiscountAmount",

    # Order fields
    "subtotal", "shipping", "tax", "total",

    # Settings fields
    "shipping_fee", "shippingFee",
    "free_shipping_threshold", "freeShippingThreshold",

    # Analytics fields
    "revenue", "total_revenue", "totalRevenue",
    "average_order_value", "averageOrderValue",
    "total_spent", "totalSpent",
}

