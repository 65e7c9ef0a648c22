from fastapi import APIRouter
from sqlalchemy import delete as sql_delete
from sqlmodel import select

from src.api.core.dependencies import GetSession, requireSignin
from src.api.core.response import api_response, raiseExceptions
from src.api.models import Cart, CartItem, Product, ProductVariant
from src.api.models.cart_model.cartModel import CartItemCreate, CartItemUpdate
from src.api.services.cart_service import get_or_create_cart, load_cart, serialize_cart

router = APIRouter(prefix="/cart", tags=["Cart"])


def _user_cart_item(session, user_id: int, item_id: int):
    return session.exec(
        select(CartItem)
        .join(Cart, Cart.id == CartItem.cart_id)
        .where(CartItem.id == item_id, Cart.user_id == user_id)
    ).first()


def _cart_payload(session, user_id: int):
    return serialize_cart(load_cart(session, user_id))


# ✅ READ
@router.get("")
def read_cart(user: requireSignin, session: GetSession):
    get_or_create_cart(session, user.get("id"))
    session.commit()
    return api_response(200, "Cart found", _cart_payload(session, user.get("id")))


# ✅ ADD ITEM (merges with an existing line)
@router.post("")
def add_item(request: CartItemCreate, user: requireSignin, session: GetSession):
    user_id = user.get("id")

    product = session.get(Product, request.product_id)
    raiseExceptions((product and product.published, 404, "Product not found or not available"))

    variant = None
    if request.variant_id is not None:
        variant = session.get(ProductVariant, request.variant_id)
        raiseExceptions((variant and variant.product_id == product.id, 404, "Variant not found"))

    available = variant.quantity if variant is not None else product.quantity
    cart = get_or_create_cart(session, user_id)

    item = session.exec(
        select(CartItem).where(
            CartItem.cart_id == cart.id,
            CartItem.product_id == product.id,
            CartItem.variant_id == request.variant_id if request.variant_id is not None else CartItem.variant_id.is_(None),
        )
    ).first()

    quantity = request.quantity + (item.quantity if item else 0)
    raiseExceptions((quantity <= available, 400, f"Insufficient stock. Only {available} available"))

    if item:
        item.quantity = quantity
    else:
        item = CartItem(
            cart_id=cart.id,
            product_id=product.id,
            variant_id=request.variant_id,
            quantity=quantity,
        )
    session.add(item)
    session.commit()

    return api_response(201, "Item added to cart", _cart_payload(session, user_id))


# ✅ CLEAR
@router.delete("")
def clear_cart(user: requireSignin, session: GetSession):
    cart = session.exec(select(Cart).where(Cart.user_id == user.get("id"))).first()
    if not cart:
        return api_response(200, "Cart already empty")

    session.exec(sql_delete(CartItem).where(CartItem.cart_id == cart.id))
    session.commit()
    return api_response(200, "Cart cleared")


# ✅ UPDATE QUANTITY
@router.put("/items/{id}")
def update_item(id: int, request: CartItemUpdate, user: requireSignin, session: GetSession):
    user_id = user.get("id")
    item = _user_cart_item(session, user_id, id)
    raiseExceptions((item, 404, "Cart item not found"))
    raiseExceptions((request.quantity <= item.available, 400, f"Insufficient stock. Only {item.available} available"))

    item.quantity = request.quantity
    session.add(item)
    session.commit()

    return api_response(200, "Cart item updated", _cart_payload(session, user_id))


# ✅ REMOVE ITEM
@router.delete("/items/{id}")
def remove_item(id: int, user: requireSignin, session: GetSession):
    user_id = user.get("id")
    item = _user_cart_item(session, user_id, id)
    raiseExceptions((item, 404, "Cart item not found"))

    session.delete(item)
    session.commit()

    return api_response(200, "Item removed from cart", _cart_payload(session, user_id))
