# src/api/models/order_model/orderModel.py
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from pydantic import Field as PydanticField
from sqlalchemy import Column, JSON
from sqlmodel import Field, Relationship

from src.api.models.baseModel import ApiSchema, TimeStampedModel, TimeStampReadModel
from src.api.models.product_model.productsModel import ProductBrief

if TYPE_CHECKING:
    from src.api.models import User, Product, ProductVariant


class OrderStatusEnum(str, PyEnum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatusEnum(str, PyEnum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PaymentMethodEnum(str, PyEnum):
    COD = "COD"
    BANK_TRANSFER = "BANK_TRANSFER"
    CREDIT_CARD = "CREDIT_CARD"
    VNPAY = "VNPAY"


class Order(TimeStampedModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(max_length=64, unique=True, index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    status: OrderStatusEnum = Field(default=OrderStatusEnum.PENDING, index=True)
    payment_status: PaymentStatusEnum = Field(default=PaymentStatusEnum.PENDING, index=True)
    payment_method: PaymentMethodEnum = Field(default=PaymentMethodEnum.COD)
    subtotal: Decimal = Field(max_digits=14, decimal_places=2)
    discount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    shipping: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    tax: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    total: Decimal = Field(max_digits=14, decimal_places=2)
    coupon_id: Optional[int] = Field(default=None, foreign_key="coupons.id")
    coupon_code: Optional[str] = Field(default=None, max_length=50)
    shipping_address: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    billing_address: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    # gateway reference, cancellation reason, ...
    payment_metadata: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    notes: Optional[str] = None
    paid_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    user: Optional["User"] = Relationship(back_populates="orders")
    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class OrderItem(TimeStampedModel, table=True):
    __tablename__ = "order_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    variant_id: Optional[int] = Field(default=None, foreign_key="product_variants.id")
    # name and price are snapshots taken at checkout
    name: str = Field(max_length=191)
    quantity: int
    price: Decimal = Field(max_digits=14, decimal_places=2)
    total: Decimal = Field(max_digits=14, decimal_places=2)

    order: Optional[Order] = Relationship(back_populates="items")
    product: Optional["Product"] = Relationship()
    variant: Optional["ProductVariant"] = Relationship()


# --------------------------------------------------------------------
# SCHEMAS
# --------------------------------------------------------------------
class CheckoutRequest(ApiSchema):
    shipping_address_id: int
    billing_address_id: Optional[int] = None
    payment_method: PaymentMethodEnum = PaymentMethodEnum.COD
    coupon_code: Optional[str] = None
    notes: Optional[str] = PydanticField(default=None, max_length=1000)


class CheckoutPreviewRequest(ApiSchema):
    coupon_code: Optional[str] = None


class OrderTotalsRead(ApiSchema):
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    coupon_code: Optional[str] = None


class CustomerOrderUpdate(ApiSchema):
    status: OrderStatusEnum


class AdminOrderUpdate(ApiSchema):
    status: Optional[OrderStatusEnum] = None
    payment_status: Optional[PaymentStatusEnum] = None
    notes: Optional[str] = None


class OrderItemRead(ApiSchema):
    id: int
    product_id: int
    variant_id: Optional[int] = None
    name: str
    quantity: int
    price: Decimal
    total: Decimal
    product: Optional[ProductBrief] = None


class OrderRead(TimeStampReadModel):
    id: int
    order_number: str
    user_id: int
    status: OrderStatusEnum
    payment_status: PaymentStatusEnum
    payment_method: PaymentMethodEnum
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    coupon_code: Optional[str] = None
    shipping_address: Dict[str, Any]
    billing_address: Dict[str, Any]
    notes: Optional[str] = None
    paid_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    items: List[OrderItemRead] = []


class OrderCustomerBrief(ApiSchema):
    id: int
    name: str
    email: str
    phone: Optional[str] = None


class AdminOrderRead(OrderRead):
    user: Optional[OrderCustomerBrief] = None
    payment_metadata: Optional[Dict[str, Any]] = None


class PaymentCreateRequest(ApiSchema):
    order_id: int
