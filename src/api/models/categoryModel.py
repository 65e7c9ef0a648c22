# src/api/models/categoryModel.py
from typing import TYPE_CHECKING, List, Optional
from pydantic import Field as PydanticField
from sqlmodel import Field, Relationship

from src.api.models.baseModel import ApiSchema, TimeStampedModel, TimeStampReadModel

if TYPE_CHECKING:
    from src.api.models import Product


class Category(TimeStampedModel, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=191)
    slug: str = Field(max_length=191, index=True, unique=True)
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)

    # self reference, categories form a tree
    parent: Optional["Category"] = Relationship(
        back_populates="children",
        sa_relationship_kwargs={"remote_side": "Category.id"},
    )
    children: List["Category"] = Relationship(back_populates="parent")
    products: List["Product"] = Relationship(back_populates="category")


# --------------------------------------------------------------------
# CRUD SCHEMAS
# --------------------------------------------------------------------
class CategoryCreate(ApiSchema):
    name: str = PydanticField(min_length=1, max_length=191)
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[int] = None


class CategoryUpdate(ApiSchema):
    name: Optional[str] = PydanticField(default=None, min_length=1, max_length=191)
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[int] = None


class CategoryRead(TimeStampReadModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[int] = None


class CategoryBrief(ApiSchema):
    id: int
    name: str
    slug: str
