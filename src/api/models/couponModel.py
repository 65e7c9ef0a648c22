# src/api/models/couponModel.py
from typing import Optional
from enum import Enum
from datetime import datetime
from decimal import Decimal
from pydantic import Field as PydanticField, field_validator
from sqlmodel import Field

from src.api.models.baseModel import ApiSchema, TimeStampedModel, TimeStampReadModel


# --------------------------------------------------------------------
# ENUM: Coupon Types
# --------------------------------------------------------------------
class CouponType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


def normalize_code(code: str) -> str:
    return code.strip().upper()


# --------------------------------------------------------------------
# MAIN MODEL
# --------------------------------------------------------------------
class Coupon(TimeStampedModel, table=True):
    __tablename__ = "coupons"

    id: Optional[int] = Field(default=None, primary_key=True)
    # always stored normalised, see normalize_code
    code: str = Field(index=True, unique=True, max_length=50)
    type: CouponType = Field(default=CouponType.FIXED)
    value: Decimal = Field(max_digits=14, decimal_places=2)
    description: Optional[str] = None
    min_order_amount: Optional[Decimal] = Field(default=None, max_digits=14, decimal_places=2)
    # PERCENTAGE only
    max_discount_amount: Optional[Decimal] = Field(default=None, max_digits=14, decimal_places=2)
    usage_limit: Optional[int] = None
    used_count: int = Field(default=0)
    valid_from: datetime
    valid_until: datetime
    active: bool = Field(default=True)


# --------------------------------------------------------------------
# CRUD SCHEMAS
# --------------------------------------------------------------------
class CouponCreate(ApiSchema):
    code: str = PydanticField(min_length=1, max_length=50)
    type: CouponType
    value: Decimal = PydanticField(gt=0)
    description: Optional[str] = None
    min_order_amount: Optional[Decimal] = PydanticField(default=None, ge=0)
    max_discount_amount: Optional[Decimal] = PydanticField(default=None, ge=0)
    usage_limit: Optional[int] = PydanticField(default=None, ge=0)
    valid_from: datetime
    valid_until: datetime
    active: bool = True

    @field_validator("code")
    @classmethod
    def normalize(cls, v: str) -> str:
        v = normalize_code(v)
        if not v:
            raise ValueError("Coupon code is required")
        return v


class CouponUpdate(ApiSchema):
    code: Optional[str] = PydanticField(default=None, min_length=1, max_length=50)
    type: Optional[CouponType] = None
    value: Optional[Decimal] = PydanticField(default=None, gt=0)
    description: Optional[str] = None
    min_order_amount: Optional[Decimal] = PydanticField(default=None, ge=0)
    max_discount_amount: Optional[Decimal] = PydanticField(default=None, ge=0)
    usage_limit: Optional[int] = PydanticField(default=None, ge=0)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    active: Optional[bool] = None

    @field_validator("code")
    @classmethod
    def normalize(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = normalize_code(v)
        if not v:
            raise ValueError("Coupon code is required")
        return v


class CouponRead(TimeStampReadModel):
    id: int
    code: str
    type: CouponType
    value: Decimal
    description: Optional[str] = None
    min_order_amount: Optional[Decimal] = None
    max_discount_amount: Optional[Decimal] = None
    usage_limit: Optional[int] = None
    used_count: int
    valid_from: datetime
    valid_until: datetime
    active: bool


class ApplyCouponRequest(ApiSchema):
    code: str = PydanticField(min_length=1)
    subtotal: Decimal = PydanticField(ge=0)


class AppliedCoupon(ApiSchema):
    coupon_id: int
    code: str
    type: CouponType
    discount: Decimal
    description: Optional[str] = None
