from decimal import Decimal
from typing import List, Optional

from fastapi import Query

from src.api.services.catalog_service import ProductQuery


class list_query_params:
    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        limit: int = Query(10, ge=1, le=100, description="Number of items to return"),
        search: Optional[str] = Query(None, description="Search term"),
    ):
        self.page = page
        self.limit = limit
        self.search = search.strip() if search and search.strip() else None


def split_list(value: Optional[str]) -> List[str]:
    """'a, b,,c' -> ['a', 'b', 'c']"""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def product_query_params(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    category: Optional[str] = Query(None),
    categories: Optional[str] = Query(None, description="Comma separated ids, slugs or names"),
    search: Optional[str] = Query(None),
    sort: str = Query("createdAt", pattern="^(name|price|createdAt|rating)$"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    featured: Optional[bool] = Query(None),
    brands: Optional[str] = Query(None),
    sizes: Optional[str] = Query(None),
    colors: Optional[str] = Query(None),
    ratings: Optional[str] = Query(None),
    in_stock: bool = Query(False, alias="inStock"),
) -> ProductQuery:
    return ProductQuery(
        page=page,
        limit=limit,
        category=category.strip() if category and category.strip() else None,
        categories=split_list(categories),
        search=search.strip() if search and search.strip() else None,
        sort=sort,
        order=order,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
        brands=split_list(brands),
        sizes=split_list(sizes),
        colors=split_list(colors),
        ratings=[int(r) for r in split_list(ratings) if r.isdigit() and 1 <= int(r) <= 5],
        in_stock=in_stock,
    )
