from typing import TYPE_CHECKING, List, Optional
from decimal import Decimal
from pydantic import Field as PydanticField
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship

from src.api.models.baseModel import ApiSchema, TimeStampedModel
from src.api.models.product_model.productsModel import ProductBrief, VariantRead

if TYPE_CHECKING:
    from src.api.models import User, Product, ProductVariant


class Cart(TimeStampedModel, table=True):
    __tablename__ = "carts"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True, index=True)

    user: Optional["User"] = Relationship(back_populates="cart")
    items: List["CartItem"] = Relationship(
        back_populates="cart",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class CartItem(TimeStampedModel, table=True):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", "variant_id", name="uq_cart_item"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    cart_id: int = Field(foreign_key="carts.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    variant_id: Optional[int] = Field(default=None, foreign_key="product_variants.id")
    quantity: int = Field(default=1)

    cart: Optional[Cart] = Relationship(back_populates="items")
    product: Optional["Product"] = Relationship()
    variant: Optional["ProductVariant"] = Relationship()

    @property
    def unit_price(self) -> Decimal:
        if self.variant is not None and self.variant.price is not None:
            return self.variant.price
        return self.product.price

    @property
    def available(self) -> int:
        if self.variant is not None:
            return self.variant.quantity
        return self.product.quantity


# --------------------------------------------------------------------
# SCHEMAS
# --------------------------------------------------------------------
class CartItemCreate(ApiSchema):
    product_id: int
    variant_id: Optional[int] = None
    quantity: int = PydanticField(default=1, ge=1)


class CartItemUpdate(ApiSchema):
    quantity: int = PydanticField(ge=1)


class CartItemRead(ApiSchema):
    id: int
    product_id: int
    variant_id: Optional[int] = None
    quantity: int
    price: Decimal
    total: Decimal
    product: ProductBrief
    variant: Optional[VariantRead] = None


class CartRead(ApiSchema):
    id: Optional[int] = None
    items: List[CartItemRead] = []
    item_count: int = 0
    subtotal: Decimal = Decimal("0")
