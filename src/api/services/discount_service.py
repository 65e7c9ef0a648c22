# src/api/services/discount_service.py
"""
Coupon validation and discount computation.

apply_coupon() is a read-only preview: it never touches used_count.
A usage slot is only consumed by redeem_coupon(), inside the transaction
that commits the order.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import or_, update as sql_update
from sqlmodel import Session, select

from src.api.core.decimal_formatter import Number, format_vnd, round_money, to_decimal
from src.api.core.exceptions import AppError
from src.api.core.utility import as_utc
from src.api.models.couponModel import Coupon, CouponType, normalize_code

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------
# Rejections, checked in this order
# --------------------------------------------------------------------
class CouponError(AppError):
    status_code = 400
    code = "COUPON_ERROR"


class CouponNotFound(CouponError):
    status_code = 404
    code = "COUPON_NOT_FOUND"


class CouponInactive(CouponError):
    code = "COUPON_INACTIVE"


class CouponNotYetValid(CouponError):
    code = "COUPON_NOT_YET_VALID"


class CouponExpired(CouponError):
    code = "COUPON_EXPIRED"


class CouponExhausted(CouponError):
    code = "COUPON_EXHAUSTED"


class CouponMinimumNotMet(CouponError):
    code = "COUPON_MINIMUM_NOT_MET"


@dataclass
class CouponDiscount:
    coupon_id: int
    code: str
    type: CouponType
    discount: Decimal
    description: Optional[str] = None


def find_coupon(session: Session, code: str) -> Optional[Coupon]:
    """Lookup by normalised code, codes are stored normalised"""
    normalized = normalize_code(code or "")
    if not normalized:
        return None
    return session.exec(select(Coupon).where(Coupon.code == normalized)).first()


def validate_coupon(coupon: Optional[Coupon], subtotal: Number, now: Optional[datetime] = None) -> Coupon:
    """Raise the first failing rejection, return the coupon when usable"""
    if coupon is None:
        raise CouponNotFound("Coupon not found")

    if not coupon.active:
        raise CouponInactive("Coupon is not active")

    now = as_utc(now) if now else datetime.now(timezone.utc)
    if now < as_utc(coupon.valid_from):
        raise CouponNotYetValid("Coupon is not valid yet")
    if now > as_utc(coupon.valid_until):
        raise CouponExpired("Coupon has expired")

    if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
        raise CouponExhausted("Coupon usage limit has been reached")

    if coupon.min_order_amount is not None and to_decimal(subtotal) < to_decimal(coupon.min_order_amount):
        raise CouponMinimumNotMet(
            f"Minimum order of {format_vnd(coupon.min_order_amount)} is required to use this coupon"
        )

    return coupon


def calculate_discount(coupon: Coupon, subtotal: Number) -> Decimal:
    """
    PERCENTAGE: subtotal * value / 100, capped by max_discount_amount
    FIXED: value, capped by subtotal
    Rounded half-up to a whole currency unit after clamping.
    """
    subtotal = to_decimal(subtotal)
    value = to_decimal(coupon.value)

    if coupon.type == CouponType.PERCENTAGE:
        discount = subtotal * value / Decimal("100")
        if coupon.max_discount_amount is not None:
            discount = min(discount, to_decimal(coupon.max_discount_amount))
    else:
        discount = value

    discount = min(discount, subtotal)
    return round_money(max(discount, Decimal("0")))


def apply_coupon(session: Session, code: str, subtotal: Number, now: Optional[datetime] = None) -> CouponDiscount:
    coupon = validate_coupon(find_coupon(session, code), subtotal, now)
    return CouponDiscount(
        coupon_id=coupon.id,
        code=coupon.code,
        type=coupon.type,
        discount=calculate_discount(coupon, subtotal),
        description=coupon.description,
    )


def redeem_coupon(session: Session, coupon_id: int) -> None:
    """
    Consume one usage slot with a conditional update. Must run in the same
    transaction as the order insert; the caller rolls back on CouponExhausted.
    """
    stmt = (
        sql_update(Coupon)
        .where(Coupon.id == coupon_id)
        .where(
            or_(
                Coupon.usage_limit.is_(None),
                Coupon.used_count < Coupon.usage_limit,
            )
        )
        .values(used_count=Coupon.used_count + 1)
    )
    result = session.exec(stmt)
    if result.rowcount == 0:
        logger.info("Coupon %s has no usage slot left", coupon_id)
        raise CouponExhausted("Coupon usage limit has been reached")


def check_coupon_rules(
    coupon_type: CouponType,
    value: Number,
    valid_from: datetime,
    valid_until: datetime,
    usage_limit: Optional[int] = None,
    used_count: int = 0,
) -> None:
    """Admin write checks that involve more than one field"""
    if as_utc(valid_until) <= as_utc(valid_from):
        raise AppError("Valid until must be after valid from", code="INVALID_COUPON_WINDOW")
    if coupon_type == CouponType.PERCENTAGE and to_decimal(value) > 100:
        raise AppError("Percentage discount cannot exceed 100%", code="INVALID_COUPON_VALUE")
    if usage_limit is not None and usage_limit < used_count:
        raise AppError(
            f"Usage limit cannot be lower than the {used_count} uses already redeemed",
            code="INVALID_COUPON_USAGE_LIMIT",
        )
