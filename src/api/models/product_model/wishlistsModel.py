# src/api/models/product_model/wishlistsModel.py
from typing import TYPE_CHECKING, Optional
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship

from src.api.models.baseModel import ApiSchema, TimeStampedModel

if TYPE_CHECKING:
    from src.api.models import User, Product


class Wishlist(TimeStampedModel, table=True):
    __tablename__ = "wishlists"
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)

    user: Optional["User"] = Relationship(back_populates="wishlists")
    product: Optional["Product"] = Relationship()


class WishlistCreate(ApiSchema):
    product_id: int
