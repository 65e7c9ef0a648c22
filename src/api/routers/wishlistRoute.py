from fastapi import APIRouter, Query
from sqlalchemy.orm import selectinload
from sqlmodel import select

from src.api.core.dependencies import GetSession, ListQueryParams, requireSignin
from src.api.core.operation import paginate
from src.api.core.response import api_response, raiseExceptions
from src.api.models import Product, Wishlist
from src.api.models.product_model.wishlistsModel import WishlistCreate
from src.api.services.catalog_service import serialize_products

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


# ✅ LIST
@router.get("")
def read_wishlist(user: requireSignin, session: GetSession, query_params: ListQueryParams):
    statement = (
        select(Wishlist)
        .where(Wishlist.user_id == user.get("id"))
        .order_by(Wishlist.created_at.desc(), Wishlist.id.desc())
    )
    items, pagination = paginate(
        session,
        statement,
        query_params.page,
        query_params.limit,
        [selectinload(Wishlist.product).selectinload(Product.category), selectinload(Wishlist.product).selectinload(Product.variants)],
    )

    products = serialize_products(session, [item.product for item in items])
    data = [
        {"id": item.id, "productId": item.product_id, "createdAt": item.created_at, "product": product}
        for item, product in zip(items, products)
    ]
    return api_response(200, "Wishlist found", data, pagination=pagination)


# ✅ ADD
@router.post("")
def add_to_wishlist(request: WishlistCreate, user: requireSignin, session: GetSession):
    user_id = user.get("id")
    product = session.get(Product, request.product_id)
    raiseExceptions((product and product.published, 404, "Product not found or not available"))

    existing = session.exec(
        select(Wishlist).where(Wishlist.user_id == user_id, Wishlist.product_id == request.product_id)
    ).first()
    raiseExceptions((existing, 400, "Product is already in your wishlist", True))

    item = Wishlist(user_id=user_id, product_id=request.product_id)
    session.add(item)
    session.commit()
    session.refresh(item)

    return api_response(
        201,
        "Product added to wishlist",
        {"id": item.id, "productId": item.product_id, "createdAt": item.created_at},
    )


# ✅ CHECK
@router.get("/check")
def check_wishlist(
    user: requireSignin,
    session: GetSession,
    product_id: int = Query(..., alias="productId"),
):
    item = session.exec(
        select(Wishlist).where(Wishlist.user_id == user.get("id"), Wishlist.product_id == product_id)
    ).first()

    return api_response(
        200,
        "Wishlist checked",
        {
            "isInWishlist": item is not None,
            "wishlistItemId": item.id if item else None,
            "addedAt": item.created_at if item else None,
        },
    )


# ✅ REMOVE
@router.delete("/{product_id}")
def remove_from_wishlist(product_id: int, user: requireSignin, session: GetSession):
    item = session.exec(
        select(Wishlist).where(Wishlist.user_id == user.get("id"), Wishlist.product_id == product_id)
    ).first()
    raiseExceptions((item, 404, "Product is not in your wishlist"))

    session.delete(item)
    session.commit()
    return api_response(200, "Product removed from wishlist")
