import logging

from fastapi import APIRouter, Query
from sqlalchemy.orm import selectinload
from sqlmodel import select

from src.api.core.dependencies import GetSession, ProductQueryParams, requireSignin
from src.api.core.response import api_response, raiseExceptions
from src.api.models import Order, OrderItem, OrderStatusEnum, Product, Review
from src.api.models.reviewModel import ReviewCreate, ReviewRead
from src.api.services.catalog_service import (
    get_filter_options,
    get_product_detail,
    invalidate_catalog_cache,
    list_products,
    search_products,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Product"])


# ✅ LIST (filters + pagination)
@router.get("")
def read_products(session: GetSession, query: ProductQueryParams):
    result = list_products(session, query)
    return api_response(200, "Products found", result["products"], pagination=result["pagination"])


# ✅ SEARCH
@router.get("/search")
def search(
    session: GetSession,
    q: str = Query("", max_length=100),
    limit: int = Query(10, ge=1, le=50),
):
    if not q.strip():
        return api_response(200, "Products found", [], total=0)

    products = search_products(session, q, limit)
    return api_response(200, "Products found", products, total=len(products))


# ✅ FILTER OPTIONS
@router.get("/filter-options")
def filter_options(session: GetSession):
    return api_response(200, "Filter options found", get_filter_options(session))


# ✅ READ BY ID
@router.get("/{id}")
def read_product(id: int, session: GetSession):
    product = get_product_detail(session, id)
    raiseExceptions((product, 404, "Product not found"))

    return api_response(200, "Product found", product)


# ✅ REVIEWS
@router.get("/{id}/reviews")
def read_reviews(id: int, session: GetSession):
    raiseExceptions((session.get(Product, id), 404, "Product not found"))

    reviews = session.exec(
        select(Review)
        .where(Review.product_id == id)
        .options(selectinload(Review.user))
        .order_by(Review.created_at.desc(), Review.id.desc())
    ).all()
    return api_response(
        200,
        "Reviews found",
        [ReviewRead.model_validate(r) for r in reviews],
        total=len(reviews),
    )


@router.post("/{id}/reviews")
def create_review(id: int, request: ReviewCreate, user: requireSignin, session: GetSession):
    user_id = user.get("id")
    product = session.get(Product, id)
    raiseExceptions((product, 404, "Product not found"))

    purchased = session.exec(
        select(OrderItem.id)
        .join(Order, Order.id == OrderItem.order_id)
        .where(
            Order.user_id == user_id,
            Order.status == OrderStatusEnum.DELIVERED,
            OrderItem.product_id == id,
        )
    ).first()
    raiseExceptions((purchased, 403, "You can only review products from delivered orders"))

    existing = session.exec(
        select(Review).where(Review.user_id == user_id, Review.product_id == id)
    ).first()
    raiseExceptions((existing, 400, "You have already reviewed this product", True))

    review = Review(
        product_id=id,
        user_id=user_id,
        rating=request.rating,
        comment=request.comment.strip() if request.comment else None,
    )
    session.add(review)
    session.commit()
    session.refresh(review)

    # ratings are part of every cached product listing
    invalidate_catalog_cache(id)
    logger.info("Review %s added to product %s", review.id, id)

    return api_response(201, "Review submitted", ReviewRead.model_validate(review))
