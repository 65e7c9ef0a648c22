from typing import Optional

from fastapi import APIRouter, Query

from src.api.core.dependencies import GetSession, ProductQueryParams
from src.api.core.response import api_response, raiseExceptions
from src.api.services.catalog_service import get_category_products, list_categories

router = APIRouter(prefix="/categories", tags=["Category"])


# ✅ LIST (tree)
@router.get("")
def read_categories(
    session: GetSession,
    include_products: bool = Query(False, alias="includeProducts"),
    limit: Optional[int] = Query(None, ge=1, le=50),
    search: Optional[str] = Query(None),
    parent_id: Optional[int] = Query(None, alias="parentId"),
):
    search = search.strip() if search and search.strip() else None
    categories = list_categories(session, include_products, limit, search, parent_id)
    return api_response(200, "Categories found", categories, total=len(categories))


# ✅ PRODUCTS OF A CATEGORY
@router.get("/{id}/products")
def read_category_products(id: int, session: GetSession, query: ProductQueryParams):
    result = get_category_products(session, id, query)
    raiseExceptions((result, 404, "Category not found"))

    return api_response(
        200,
        "Products found",
        {"category": result["category"], "products": result["products"]},
        pagination=result["pagination"],
    )
