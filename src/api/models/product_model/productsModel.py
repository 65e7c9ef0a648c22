# src/api/models/product_model/productsModel.py
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from decimal import Decimal
from pydantic import Field as PydanticField
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, Relationship

from src.api.models.baseModel import ApiSchema, TimeStampedModel, TimeStampReadModel
from src.api.models.categoryModel import CategoryBrief
from src.api.models.reviewModel import ReviewRead

if TYPE_CHECKING:
    from src.api.models import Category, Review


class Product(TimeStampedModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=191, index=True)
    slug: str = Field(max_length=191, index=True, unique=True)
    description: Optional[str] = None
    price: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    compare_price: Optional[Decimal] = Field(default=None, max_digits=14, decimal_places=2)
    sku: Optional[str] = Field(default=None, max_length=191, unique=True)
    quantity: int = Field(default=0)
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    brand: Optional[str] = Field(default=None, max_length=191, index=True)
    featured: bool = Field(default=False)
    published: bool = Field(default=True)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)

    # relationships
    category: Optional["Category"] = Relationship(back_populates="products")
    variants: List["ProductVariant"] = Relationship(
        back_populates="product",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    reviews: List["Review"] = Relationship(
        back_populates="product",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class ProductVariant(SQLModel, table=True):
    __tablename__ = "product_variants"

    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    name: str = Field(max_length=191)
    sku: Optional[str] = Field(default=None, max_length=191)
    # overrides the product price when set
    price: Optional[Decimal] = Field(default=None, max_digits=14, decimal_places=2)
    quantity: int = Field(default=0)
    size: Optional[str] = Field(default=None, max_length=50, index=True)
    color: Optional[str] = Field(default=None, max_length=50, index=True)
    attributes: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    product: Optional[Product] = Relationship(back_populates="variants")


# --------------------------------------------------------------------
# CRUD SCHEMAS
# --------------------------------------------------------------------
class VariantCreate(ApiSchema):
    name: str
    sku: Optional[str] = None
    price: Optional[Decimal] = PydanticField(default=None, ge=0)
    quantity: int = PydanticField(default=0, ge=0)
    size: Optional[str] = None
    color: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None


class VariantRead(ApiSchema):
    id: int
    name: str
    sku: Optional[str] = None
    price: Optional[Decimal] = None
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None


class ProductCreate(ApiSchema):
    name: str = PydanticField(min_length=1, max_length=191)
    slug: Optional[str] = None
    description: Optional[str] = None
    price: Decimal = PydanticField(ge=0)
    compare_price: Optional[Decimal] = PydanticField(default=None, ge=0)
    sku: Optional[str] = None
    quantity: int = PydanticField(default=0, ge=0)
    images: List[str] = []
    brand: Optional[str] = None
    featured: bool = False
    published: bool = True
    category_id: Optional[int] = None
    variants: List[VariantCreate] = []


class ProductUpdate(ApiSchema):
    name: Optional[str] = PydanticField(default=None, min_length=1, max_length=191)
    slug: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = PydanticField(default=None, ge=0)
    compare_price: Optional[Decimal] = PydanticField(default=None, ge=0)
    sku: Optional[str] = None
    quantity: Optional[int] = PydanticField(default=None, ge=0)
    images: Optional[List[str]] = None
    brand: Optional[str] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None
    category_id: Optional[int] = None
    # replaces all variants when provided
    variants: Optional[List[VariantCreate]] = None


class ProductRead(TimeStampReadModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    price: Decimal
    compare_price: Optional[Decimal] = None
    sku: Optional[str] = None
    quantity: int
    images: List[str] = []
    brand: Optional[str] = None
    featured: bool
    published: bool
    category_id: Optional[int] = None


class ProductListItem(ProductRead):
    category: Optional[CategoryBrief] = None
    variants: List[VariantRead] = []
    average_rating: float = 0
    review_count: int = 0


class ProductDetail(ProductListItem):
    reviews: List[ReviewRead] = []
    related_products: List[ProductListItem] = []


class ProductBrief(ApiSchema):
    id: int
    name: str
    slug: str
    price: Decimal
    images: List[str] = []
    quantity: Optional[int] = None
    sku: Optional[str] = None


class ProductFilterOptions(ApiSchema):
    categories: List[CategoryBrief] = []
    brands: List[str] = []
    sizes: List[str] = []
    colors: List[str] = []
    min_price: float = 0
    max_price: float = 0
