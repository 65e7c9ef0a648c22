# src/api/services/catalog_service.py
"""
Read side of the catalog (categories, products, filter options, search).

Every public read goes through cache_aside(): results are stored already
encoded for the wire (camelCase keys, plain numbers) so a cache hit can be
returned verbatim. Admin writes call invalidate_catalog_cache().
"""
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple

from sqlalchemy import asc, desc, func, or_
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from src.api.core.cache_helper import (
    DETAIL_TTL,
    LIST_TTL,
    cache_aside,
    get_cache_key,
    invalidate,
)
from src.api.core.operation import paginate
from src.api.core.response import encode_data
from src.api.models import Category, Product, ProductVariant, Review
from src.api.models.categoryModel import CategoryBrief, CategoryRead
from src.api.models.product_model.productsModel import (
    ProductDetail,
    ProductFilterOptions,
    ProductListItem,
)

logger = logging.getLogger(__name__)

SORT_FIELDS = ("name", "price", "createdAt", "rating")
CATEGORY_PRODUCTS_DEFAULT = 8
RELATED_PRODUCTS_LIMIT = 4


@dataclass
class ProductQuery:
    page: int = 1
    limit: int = 12
    category: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    search: Optional[str] = None
    sort: str = "createdAt"
    order: str = "desc"
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    featured: Optional[bool] = None
    brands: List[str] = field(default_factory=list)
    sizes: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    ratings: List[int] = field(default_factory=list)
    in_stock: bool = False

    def cache_params(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "category": self.category,
            "categories": self.categories,
            "search": self.search,
            "sort": self.sort,
            "order": self.order,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "featured": self.featured,
            "brands": self.brands,
            "sizes": self.sizes,
            "colors": self.colors,
            "ratings": self.ratings,
            "inStock": self.in_stock or None,
        }


# --------------------------------------------------------------------
# Ratings
# --------------------------------------------------------------------
def average_rating(total, count) -> float:
    """Mean rating rounded half-up to one decimal, 0 without reviews"""
    if not count:
        return 0
    mean = Decimal(int(total)) / Decimal(int(count))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def rating_stats(session: Session, product_ids: List[int]) -> Dict[int, Tuple[float, int]]:
    if not product_ids:
        return {}
    rows = session.exec(
        select(Review.product_id, func.sum(Review.rating), func.count(Review.id))
        .where(Review.product_id.in_(product_ids))
        .group_by(Review.product_id)
    ).all()
    return {product_id: (average_rating(total, count), count) for product_id, total, count in rows}


def serialize_products(session: Session, products: List[Product]) -> List[dict]:
    stats = rating_stats(session, [p.id for p in products])
    items = []
    for product in products:
        item = ProductListItem.model_validate(product)
        item.average_rating, item.review_count = stats.get(product.id, (0, 0))
        items.append(item)
    return encode_data(items)


# --------------------------------------------------------------------
# Product statements
# --------------------------------------------------------------------
def _published_products():
    return select(Product).where(Product.published == True)  # noqa: E712


def _category_ids_for(session: Session, values: List[str]) -> List[int]:
    """Category filter values may be ids, slugs or names"""
    ids = [int(v) for v in values if v.isdigit()]
    names = [v.lower() for v in values if not v.isdigit()]
    conditions = []
    if ids:
        conditions.append(Category.id.in_(ids))
    if names:
        conditions.append(func.lower(Category.name).in_(names))
        conditions.append(Category.slug.in_(names))
    if not conditions:
        return []
    return list(session.exec(select(Category.id).where(or_(*conditions))).all())


def _apply_sort(statement, sort: str, order: str):
    direction = asc if order == "asc" else desc
    if sort == "rating":
        ratings = (
            select(Review.product_id, func.avg(Review.rating).label("avg_rating"))
            .group_by(Review.product_id)
            .subquery()
        )
        statement = statement.outerjoin(ratings, ratings.c.product_id == Product.id)
        return statement.order_by(direction(func.coalesce(ratings.c.avg_rating, 0)), Product.id)

    column = {
        "name": Product.name,
        "price": Product.price,
        "createdAt": Product.created_at,
    }.get(sort, Product.created_at)
    return statement.order_by(direction(column), direction(Product.id))


def build_product_statement(session: Session, query: ProductQuery):
    statement = _published_products()

    if query.search:
        term = f"%{query.search}%"
        statement = statement.where(
            or_(
                Product.name.ilike(term),
                Product.description.ilike(term),
                Product.sku.ilike(term),
            )
        )

    if query.category:
        statement = statement.where(Product.category_id.in_(_category_ids_for(session, [query.category])))
    if query.categories:
        statement = statement.where(Product.category_id.in_(_category_ids_for(session, query.categories)))

    if query.brands:
        statement = statement.where(Product.brand.in_(query.brands))

    if query.min_price is not None:
        statement = statement.where(Product.price >= query.min_price)
    if query.max_price is not None:
        statement = statement.where(Product.price <= query.max_price)

    if query.featured:
        statement = statement.where(Product.featured == True)  # noqa: E712

    if query.sizes:
        statement = statement.where(
            Product.id.in_(select(ProductVariant.product_id).where(ProductVariant.size.in_(query.sizes)))
        )
    if query.colors:
        statement = statement.where(
            Product.id.in_(select(ProductVariant.product_id).where(ProductVariant.color.in_(query.colors)))
        )

    if query.in_stock:
        statement = statement.where(
            or_(
                Product.quantity > 0,
                Product.id.in_(select(ProductVariant.product_id).where(ProductVariant.quantity > 0)),
            )
        )

    if query.ratings:
        # any review at or above the highest selected rating
        min_rating = max(query.ratings)
        statement = statement.where(
            Product.id.in_(select(Review.product_id).where(Review.rating >= min_rating))
        )

    return _apply_sort(statement, query.sort, query.order)


PRODUCT_LOAD_OPTIONS = [selectinload(Product.category), selectinload(Product.variants)]


# --------------------------------------------------------------------
# Reads
# --------------------------------------------------------------------
def list_products(session: Session, query: ProductQuery) -> dict:
    def load():
        statement = build_product_statement(session, query)
        products, pagination = paginate(session, statement, query.page, query.limit, PRODUCT_LOAD_OPTIONS)
        return {"products": serialize_products(session, products), "pagination": pagination}

    return cache_aside(get_cache_key("products:list", query.cache_params()), LIST_TTL, load)


def get_category_products(session: Session, category_id: int, query: ProductQuery) -> Optional[dict]:
    """Published products of a category and its direct children, None if the category is missing"""

    def load():
        category = session.get(Category, category_id)
        if category is None:
            return None
        category_ids = [category.id] + [child.id for child in category.children]
        statement = _published_products().where(Product.category_id.in_(category_ids))
        if query.min_price is not None:
            statement = statement.where(Product.price >= query.min_price)
        if query.max_price is not None:
            statement = statement.where(Product.price <= query.max_price)
        if query.featured:
            statement = statement.where(Product.featured == True)  # noqa: E712
        statement = _apply_sort(statement, query.sort, query.order)

        products, pagination = paginate(session, statement, query.page, query.limit, PRODUCT_LOAD_OPTIONS)
        return {
            "category": encode_data(CategoryBrief.model_validate(category)),
            "products": serialize_products(session, products),
            "pagination": pagination,
        }

    params = {**query.cache_params(), "categoryId": category_id}
    return cache_aside(get_cache_key("products:category", params), LIST_TTL, load)


def search_products(session: Session, q: str, limit: int = 10) -> List[dict]:
    term = q.strip()

    def load():
        pattern = f"%{term}%"
        statement = (
            _published_products()
            .where(
                or_(
                    Product.name.ilike(pattern),
                    Product.description.ilike(pattern),
                    Product.sku.ilike(pattern),
                    Product.brand.ilike(pattern),
                )
            )
            .order_by(Product.created_at.desc(), Product.id.desc())
            .limit(limit * 3)
        )
        for option in PRODUCT_LOAD_OPTIONS:
            statement = statement.options(option)
        products = list(session.exec(statement).all())

        # exact name > name prefix > name contains > other fields
        lowered = term.lower()

        def score(product: Product) -> int:
            name = product.name.lower()
            if name == lowered:
                return 0
            if name.startswith(lowered):
                return 1
            if lowered in name:
                return 2
            return 3

        products.sort(key=score)
        return serialize_products(session, products[:limit])

    return cache_aside(get_cache_key("products:search", {"q": term.lower(), "limit": limit}), LIST_TTL, load)


def get_filter_options(session: Session) -> dict:
    def load():
        categories = session.exec(
            select(Category)
            .where(Category.id.in_(select(Product.category_id).where(Product.published == True)))  # noqa: E712
            .order_by(Category.name)
        ).all()
        brands = session.exec(
            select(Product.brand)
            .where(Product.published == True, Product.brand.is_not(None))  # noqa: E712
            .distinct()
        ).all()
        variants = session.exec(
            select(ProductVariant.size, ProductVariant.color)
            .join(Product, Product.id == ProductVariant.product_id)
            .where(Product.published == True)  # noqa: E712
        ).all()
        min_price, max_price = session.exec(
            select(func.min(Product.price), func.max(Product.price)).where(Product.published == True)  # noqa: E712
        ).one()

        options = ProductFilterOptions(
            categories=[CategoryBrief.model_validate(c) for c in categories],
            brands=sorted(set(brands)),
            sizes=sorted({size for size, _ in variants if size}),
            colors=sorted({color for _, color in variants if color}),
            min_price=math.floor(min_price) if min_price is not None else 0,
            max_price=math.ceil(max_price) if max_price is not None else 0,
        )
        return encode_data(options)

    return cache_aside("products:filter-options", LIST_TTL, load)


def get_product_detail(session: Session, product_id: int) -> Optional[dict]:
    def load():
        product = session.exec(
            _published_products()
            .where(Product.id == product_id)
            .options(*PRODUCT_LOAD_OPTIONS, selectinload(Product.reviews).selectinload(Review.user))
        ).first()
        if product is None:
            return None

        detail = ProductDetail.model_validate(product)
        detail.reviews = sorted(detail.reviews, key=lambda r: r.created_at, reverse=True)
        detail.review_count = len(product.reviews)
        detail.average_rating = average_rating(sum(r.rating for r in product.reviews), len(product.reviews))

        if product.category_id is not None:
            related = session.exec(
                _published_products()
                .where(Product.category_id == product.category_id, Product.id != product.id)
                .order_by(Product.created_at.desc())
                .limit(RELATED_PRODUCTS_LIMIT)
                .options(*PRODUCT_LOAD_OPTIONS)
            ).all()
            stats = rating_stats(session, [p.id for p in related])
            for rel in related:
                item = ProductListItem.model_validate(rel)
                item.average_rating, item.review_count = stats.get(rel.id, (0, 0))
                detail.related_products.append(item)

        return encode_data(detail)

    return cache_aside(f"product:{product_id}", DETAIL_TTL, load)


def list_categories(
    session: Session,
    include_products: bool = False,
    limit: Optional[int] = None,
    search: Optional[str] = None,
    parent_id: Optional[int] = None,
) -> List[dict]:
    """
    Category tree two levels deep with product counts; optionally the
    first `limit` published products of each top-level category.
    """

    def load():
        categories = session.exec(select(Category).order_by(Category.name)).all()
        counts = dict(
            session.exec(
                select(Product.category_id, func.count(Product.id))
                .where(Product.published == True)  # noqa: E712
                .group_by(Product.category_id)
            ).all()
        )
        children_of = defaultdict(list)
        for category in categories:
            children_of[category.parent_id].append(category)

        def node(category: Category, depth: int) -> dict:
            data = encode_data(CategoryRead.model_validate(category))
            data["productCount"] = counts.get(category.id, 0)
            if depth < 2:
                data["children"] = [node(child, depth + 1) for child in children_of[category.id]]
            return data

        if search:
            lowered = search.lower()
            top = [c for c in categories if lowered in c.name.lower()]
        else:
            top = children_of[parent_id]

        result = []
        for category in top:
            data = node(category, 0)
            if include_products:
                products = session.exec(
                    _published_products()
                    .where(Product.category_id == category.id)
                    .order_by(Product.created_at.desc())
                    .limit(limit or CATEGORY_PRODUCTS_DEFAULT)
                    .options(*PRODUCT_LOAD_OPTIONS)
                ).all()
                data["products"] = serialize_products(session, list(products))
            result.append(data)
        return result

    params = {
        "includeProducts": include_products,
        "limit": limit,
        "search": search.lower() if search else None,
        "parentId": parent_id,
    }
    return cache_aside(get_cache_key("categories", params), LIST_TTL, load)


# --------------------------------------------------------------------
# Invalidation
# --------------------------------------------------------------------
def invalidate_catalog_cache(product_id: Optional[int] = None) -> None:
    """
    Drop every parameterised list and the affected detail entries.
    Without a product id all product details go as well.
    """
    detail_key = f"product:{product_id}" if product_id is not None else "product:*"
    invalidate("products:*", "categories*", detail_key)
    logger.debug("catalog cache invalidated (%s)", detail_key)
