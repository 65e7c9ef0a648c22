# src/api/models/reviewModel.py
from typing import TYPE_CHECKING, Optional
from pydantic import Field as PydanticField
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship

from src.api.models.baseModel import ApiSchema, TimeStampedModel, TimeStampReadModel

if TYPE_CHECKING:
    from src.api.models import User, Product


# --------------------------------------------------------------------
# MAIN MODEL
# --------------------------------------------------------------------
class Review(TimeStampedModel, table=True):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_review_user_product"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None

    user: Optional["User"] = Relationship(back_populates="reviews")
    product: Optional["Product"] = Relationship(back_populates="reviews")


# --------------------------------------------------------------------
# CRUD SCHEMAS
# --------------------------------------------------------------------
class ReviewCreate(ApiSchema):
    rating: int = PydanticField(ge=1, le=5)
    comment: Optional[str] = PydanticField(default=None, max_length=2000)


class ReviewUser(ApiSchema):
    id: int
    name: str
    image: Optional[str] = None


class ReviewRead(TimeStampReadModel):
    id: int
    product_id: int
    user_id: int
    rating: int
    comment: Optional[str] = None
    user: Optional[ReviewUser] = None
