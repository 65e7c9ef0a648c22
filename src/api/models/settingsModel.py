# src/api/models/settingsModel.py
from typing import Optional
from decimal import Decimal
from pydantic import Field as PydanticField
from sqlmodel import Field

from src.api.models.baseModel import ApiSchema, TimeStampedModel


# --------------------------------------------------------------------
# MAIN MODEL (singleton row, id is always SETTINGS_ID)
# --------------------------------------------------------------------
class Settings(TimeStampedModel, table=True):
    __tablename__ = "settings"

    id: int = Field(default=1, primary_key=True)

    # store
    store_name: str = Field(default="Fashion Store", max_length=191)
    store_logo: Optional[str] = None
    store_email: Optional[str] = None
    store_phone: Optional[str] = None
    store_address: Optional[str] = None
    store_description: Optional[str] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    youtube_url: Optional[str] = None

    # payment
    payment_cod_enabled: bool = Field(default=True)
    payment_bank_transfer_enabled: bool = Field(default=True)
    payment_credit_card_enabled: bool = Field(default=False)

    # shipping
    shipping_fee: Decimal = Field(default=Decimal("30000"), max_digits=14, decimal_places=2)
    free_shipping_threshold: Optional[Decimal] = Field(default=None, max_digits=14, decimal_places=2)

    # tax, percentage
    tax_rate: Decimal = Field(default=Decimal("0"), max_digits=5, decimal_places=2)

    # orders
    order_expiry_minutes: int = Field(default=10)

    # system
    currency: str = Field(default="VND", max_length=10)
    timezone: str = Field(default="Asia/Ho_Chi_Minh", max_length=64)
    language: str = Field(default="vi", max_length=10)

    # seo
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    og_image: Optional[str] = None
    favicon: Optional[str] = None


# --------------------------------------------------------------------
# SCHEMAS
# --------------------------------------------------------------------
class PublicSettingsRead(ApiSchema):
    store_name: str
    store_logo: Optional[str] = None
    store_email: Optional[str] = None
    store_phone: Optional[str] = None
    store_address: Optional[str] = None
    store_description: Optional[str] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    youtube_url: Optional[str] = None
    payment_cod_enabled: bool
    payment_bank_transfer_enabled: bool
    payment_credit_card_enabled: bool
    currency: str
    shipping_fee: float
    free_shipping_threshold: Optional[float] = None
    tax_rate: float


class SettingsRead(PublicSettingsRead):
    order_expiry_minutes: int
    timezone: str
    language: str
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    og_image: Optional[str] = None
    favicon: Optional[str] = None


class SettingsUpdate(ApiSchema):
    store_name: Optional[str] = PydanticField(default=None, min_length=1, max_length=191)
    store_logo: Optional[str] = None
    store_email: Optional[str] = None
    store_phone: Optional[str] = None
    store_address: Optional[str] = None
    store_description: Optional[str] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    youtube_url: Optional[str] = None
    payment_cod_enabled: Optional[bool] = None
    payment_bank_transfer_enabled: Optional[bool] = None
    payment_credit_card_enabled: Optional[bool] = None
    shipping_fee: Optional[Decimal] = PydanticField(default=None, ge=0)
    free_shipping_threshold: Optional[Decimal] = PydanticField(default=None, ge=0)
    tax_rate: Optional[Decimal] = PydanticField(default=None, ge=0, le=100)
    order_expiry_minutes: Optional[int] = PydanticField(default=None, ge=1)
    currency: Optional[str] = None
    timezone: Optional[str] = None
    language: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    og_image: Optional[str] = None
    favicon: Optional[str] = None
