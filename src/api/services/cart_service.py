# src/api/services/cart_service.py
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from src.api.models import Cart, CartItem
from src.api.models.cart_model.cartModel import CartItemRead, CartRead
from src.api.models.product_model.productsModel import ProductBrief, VariantRead


def load_cart(session: Session, user_id: int) -> Optional[Cart]:
    return session.exec(
        select(Cart)
        .where(Cart.user_id == user_id)
        .options(
            selectinload(Cart.items).selectinload(CartItem.product),
            selectinload(Cart.items).selectinload(CartItem.variant),
        )
    ).first()


def get_or_create_cart(session: Session, user_id: int) -> Cart:
    cart = load_cart(session, user_id)
    if cart is None:
        cart = Cart(user_id=user_id)
        session.add(cart)
        session.flush()
    return cart


def cart_subtotal(cart: Optional[Cart]) -> Decimal:
    if cart is None:
        return Decimal("0")
    return sum((item.unit_price * item.quantity for item in cart.items), Decimal("0"))


def serialize_cart(cart: Optional[Cart]) -> CartRead:
    if cart is None:
        return CartRead()

    items = [
        CartItemRead(
            id=item.id,
            product_id=item.product_id,
            variant_id=item.variant_id,
            quantity=item.quantity,
            price=item.unit_price,
            total=item.unit_price * item.quantity,
            product=ProductBrief.model_validate(item.product),
            variant=VariantRead.model_validate(item.variant) if item.variant else None,
        )
        for item in sorted(cart.items, key=lambda i: i.id)
    ]
    return CartRead(
        id=cart.id,
        items=items,
        item_count=sum(item.quantity for item in cart.items),
        subtotal=cart_subtotal(cart),
    )
