from fastapi import APIRouter
from sqlalchemy import func
from sqlmodel import select

from src.api.core.dependencies import GetSession, ListQueryParams, requireAdmin
from src.api.core.operation import paginate, updateOp
from src.api.core.response import api_response, raiseExceptions
from src.api.core.utility import uniqueSlugify
from src.api.models import Category, Product
from src.api.models.categoryModel import CategoryCreate, CategoryRead, CategoryUpdate
from src.api.services.catalog_service import invalidate_catalog_cache

router = APIRouter(prefix="/admin/categories", tags=["Admin Category"])


def _with_counts(session, categories):
    ids = [c.id for c in categories]
    product_counts = dict(
        session.exec(
            select(Product.category_id, func.count(Product.id))
            .where(Product.category_id.in_(ids))
            .group_by(Product.category_id)
        ).all()
    ) if ids else {}
    child_counts = dict(
        session.exec(
            select(Category.parent_id, func.count(Category.id))
            .where(Category.parent_id.in_(ids))
            .group_by(Category.parent_id)
        ).all()
    ) if ids else {}

    data = []
    for category in categories:
        item = CategoryRead.model_validate(category).model_dump(by_alias=True)
        item["productCount"] = product_counts.get(category.id, 0)
        item["childrenCount"] = child_counts.get(category.id, 0)
        data.append(item)
    return data


def _check_parent(session, parent_id, id=None):
    if parent_id is None:
        return
    raiseExceptions(
        (parent_id == id, 400, "A category cannot be its own parent", True),
        (session.get(Category, parent_id), 400, "Parent category not found"),
    )


# ✅ LIST
@router.get("")
def list_categories(admin: requireAdmin, session: GetSession, query_params: ListQueryParams):
    statement = select(Category)
    if query_params.search:
        statement = statement.where(Category.name.ilike(f"%{query_params.search}%"))
    statement = statement.order_by(Category.name)

    categories, pagination = paginate(session, statement, query_params.page, query_params.limit)
    return api_response(200, "Categories found", _with_counts(session, categories), pagination=pagination)


# ✅ CREATE
@router.post("")
def create_category(request: CategoryCreate, admin: requireAdmin, session: GetSession):
    _check_parent(session, request.parent_id)

    category = Category(
        **request.model_dump(exclude={"slug"}),
        slug=uniqueSlugify(session, Category, request.slug or request.name),
    )
    session.add(category)
    session.commit()
    session.refresh(category)

    invalidate_catalog_cache()
    return api_response(201, "Category created successfully", CategoryRead.model_validate(category))


# ✅ READ BY ID
@router.get("/{id}")
def read_category(id: int, admin: requireAdmin, session: GetSession):
    category = session.get(Category, id)
    raiseExceptions((category, 404, "Category not found"))

    return api_response(200, "Category found", _with_counts(session, [category])[0])


# ✅ UPDATE
@router.put("/{id}")
def update_category(id: int, request: CategoryUpdate, admin: requireAdmin, session: GetSession):
    category = session.get(Category, id)
    raiseExceptions((category, 404, "Category not found"))
    if "parent_id" in request.model_fields_set:
        _check_parent(session, request.parent_id, id)

    updateOp(category, request, session, exclude={"slug"})
    if request.slug:
        category.slug = uniqueSlugify(session, Category, request.slug, exclude_id=id)
    session.commit()
    session.refresh(category)

    invalidate_catalog_cache()
    return api_response(200, "Category updated successfully", CategoryRead.model_validate(category))


# ✅ DELETE
@router.delete("/{id}")
def delete_category(id: int, admin: requireAdmin, session: GetSession):
    category = session.get(Category, id)
    raiseExceptions((category, 404, "Category not found"))

    counts = _with_counts(session, [category])[0]
    raiseExceptions(
        (counts["productCount"], 400, "Cannot delete category with products", True),
        (counts["childrenCount"], 400, "Cannot delete category with subcategories", True),
    )

    name = category.name
    session.delete(category)
    session.commit()

    invalidate_catalog_cache()
    return api_response(200, f"Category {name} deleted successfully")
