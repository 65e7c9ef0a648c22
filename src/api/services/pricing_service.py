# src/api/services/pricing_service.py
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from src.api.core.decimal_formatter import Number, to_decimal


@dataclass
class OrderTotals:
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal

    def as_dict(self) -> dict:
        return asdict(self)


def calculate_shipping_fee(subtotal: Number, settings: Mapping[str, Any]) -> Decimal:
    threshold = settings.get("free_shipping_threshold")
    if threshold is not None and to_decimal(subtotal) >= to_decimal(threshold):
        return Decimal("0")
    return to_decimal(settings.get("shipping_fee"))


def calculate_tax(subtotal: Number, settings: Mapping[str, Any]) -> Decimal:
    return to_decimal(subtotal) * to_decimal(settings.get("tax_rate")) / Decimal("100")


def calculate_totals(
    subtotal: Number,
    settings: Mapping[str, Any],
    discount: Optional[Number] = None,
) -> OrderTotals:
    """
    total = subtotal - discount + shipping + tax

    The discount comes from the discount engine already clamped to the
    subtotal and is not clamped again here.
    """
    subtotal = to_decimal(subtotal)
    discount = to_decimal(discount)
    shipping = calculate_shipping_fee(subtotal, settings)
    tax = calculate_tax(subtotal, settings)

    return OrderTotals(
        subtotal=subtotal,
        discount=discount,
        shipping=shipping,
        tax=tax,
        total=subtotal - discount + shipping + tax,
    )
