import logging
from typing import List, Optional

from fastapi import APIRouter, Query
from sqlalchemy import delete as sql_delete, or_, update as sql_update
from sqlmodel import select

from src.api.core.dependencies import GetSession, ListQueryParams, requireAdmin
from src.api.core.operation import paginate, updateOp
from src.api.core.response import api_response, raiseExceptions
from src.api.core.utility import uniqueSlugify
from src.api.models import CartItem, Category, OrderItem, Product, ProductVariant, Wishlist
from src.api.models.product_model.productsModel import ProductCreate, ProductUpdate, VariantCreate
from src.api.services.catalog_service import (
    PRODUCT_LOAD_OPTIONS,
    invalidate_catalog_cache,
    serialize_products,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/products", tags=["Admin Product"])


def _check_category(session, category_id: Optional[int]):
    if category_id is not None:
        raiseExceptions((session.get(Category, category_id), 400, "Category not found"))


def _check_variant_skus(variants: List[VariantCreate]):
    skus = [v.sku for v in variants if v.sku]
    duplicates = sorted({sku for sku in skus if skus.count(sku) > 1})
    raiseExceptions((duplicates, 400, f"Duplicate variant SKUs: {', '.join(duplicates)}", True))


def _load(session, id: int) -> Optional[Product]:
    return session.exec(select(Product).where(Product.id == id).options(*PRODUCT_LOAD_OPTIONS)).first()


# ✅ LIST
@router.get("")
def list_products(
    admin: requireAdmin,
    session: GetSession,
    query_params: ListQueryParams,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    published: Optional[bool] = Query(None),
):
    statement = select(Product)
    if query_params.search:
        term = f"%{query_params.search}%"
        statement = statement.where(
            or_(Product.name.ilike(term), Product.sku.ilike(term), Product.description.ilike(term))
        )
    if category_id is not None:
        statement = statement.where(Product.category_id == category_id)
    if published is not None:
        statement = statement.where(Product.published == published)
    statement = statement.order_by(Product.created_at.desc(), Product.id.desc())

    products, pagination = paginate(session, statement, query_params.page, query_params.limit, PRODUCT_LOAD_OPTIONS)
    return api_response(200, "Products found", serialize_products(session, products), pagination=pagination)


# ✅ CREATE
@router.post("")
def create_product(request: ProductCreate, admin: requireAdmin, session: GetSession):
    _check_category(session, request.category_id)
    _check_variant_skus(request.variants)
    if request.sku:
        existing = session.exec(select(Product.id).where(Product.sku == request.sku)).first()
        raiseExceptions((existing, 400, "Product with this SKU already exists", True))

    data = request.model_dump(exclude={"variants", "slug"})
    product = Product(
        **data,
        slug=uniqueSlugify(session, Product, request.slug or request.name),
        variants=[ProductVariant(**v.model_dump()) for v in request.variants],
    )
    session.add(product)
    session.commit()

    invalidate_catalog_cache(product.id)
    logger.info("Product %s created", product.id)

    return api_response(201, "Product created successfully", serialize_products(session, [_load(session, product.id)])[0])


# ✅ READ BY ID
@router.get("/{id}")
def read_product(id: int, admin: requireAdmin, session: GetSession):
    product = _load(session, id)
    raiseExceptions((product, 404, "Product not found"))

    return api_response(200, "Product found", serialize_products(session, [product])[0])


# ✅ UPDATE
@router.put("/{id}")
def update_product(id: int, request: ProductUpdate, admin: requireAdmin, session: GetSession):
    product = _load(session, id)
    raiseExceptions((product, 404, "Product not found"))

    if "category_id" in request.model_fields_set:
        _check_category(session, request.category_id)
    if request.sku and request.sku != product.sku:
        existing = session.exec(select(Product.id).where(Product.sku == request.sku, Product.id != id)).first()
        raiseExceptions((existing, 400, "Product with this SKU already exists", True))

    updateOp(product, request, session, exclude={"variants", "slug"})
    if request.slug:
        product.slug = uniqueSlugify(session, Product, request.slug, exclude_id=id)

    # variants are replaced as a whole
    if request.variants is not None:
        _check_variant_skus(request.variants)
        old_ids = [v.id for v in product.variants]
        if old_ids:
            session.exec(sql_delete(CartItem).where(CartItem.variant_id.in_(old_ids)))
            # order lines keep their name snapshot
            session.exec(sql_update(OrderItem).where(OrderItem.variant_id.in_(old_ids)).values(variant_id=None))
        product.variants = [ProductVariant(**v.model_dump()) for v in request.variants]

    session.commit()

    invalidate_catalog_cache(id)
    return api_response(200, "Product updated successfully", serialize_products(session, [_load(session, id)])[0])


# ✅ DELETE
@router.delete("/{id}")
def delete_product(id: int, admin: requireAdmin, session: GetSession):
    product = session.get(Product, id)
    raiseExceptions((product, 404, "Product not found"))

    ordered = session.exec(select(OrderItem.id).where(OrderItem.product_id == id)).first()
    raiseExceptions((ordered, 400, "Cannot delete product with existing orders", True))

    session.exec(sql_delete(CartItem).where(CartItem.product_id == id))
    session.exec(sql_delete(Wishlist).where(Wishlist.product_id == id))
    name = product.name
    session.delete(product)
    session.commit()

    invalidate_catalog_cache(id)
    logger.info("Product %s deleted", id)
    return api_response(200, f"Product {name} deleted successfully")
