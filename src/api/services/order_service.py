# src/api/services/order_service.py
"""
Checkout and order lifecycle.

create_order() runs as one transaction: order insert, coupon redemption,
stock decrement and cart clearing commit together or not at all.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from src.api.core.cache_helper import invalidate
from src.api.core.exceptions import AppError, CheckoutError, InsufficientStock
from src.api.core.utility import as_utc, generate_order_number
from src.api.models import (
    Address,
    Order,
    OrderItem,
    OrderStatusEnum,
    PaymentMethodEnum,
    PaymentStatusEnum,
)
from src.api.models.order_model.orderModel import AdminOrderUpdate, CheckoutRequest
from src.api.services.cart_service import cart_subtotal, load_cart
from src.api.services.discount_service import CouponDiscount, apply_coupon, redeem_coupon
from src.api.services.pricing_service import OrderTotals, calculate_totals
from src.api.services.settings_service import get_settings

logger = logging.getLogger(__name__)

# forward flow, cancellation is handled separately
STATUS_FLOW = [
    OrderStatusEnum.PENDING,
    OrderStatusEnum.PROCESSING,
    OrderStatusEnum.SHIPPED,
    OrderStatusEnum.DELIVERED,
]

PAYMENT_METHOD_SETTINGS = {
    PaymentMethodEnum.COD: "payment_cod_enabled",
    PaymentMethodEnum.BANK_TRANSFER: "payment_bank_transfer_enabled",
    PaymentMethodEnum.CREDIT_CARD: "payment_credit_card_enabled",
    PaymentMethodEnum.VNPAY: "payment_credit_card_enabled",
}

ORDER_LOAD_OPTIONS = [
    selectinload(Order.items).selectinload(OrderItem.product),
    selectinload(Order.items).selectinload(OrderItem.variant),
]


def _require_cart(session: Session, user_id: int):
    cart = load_cart(session, user_id)
    if cart is None or not cart.items:
        raise CheckoutError("Cart is empty", code="CART_EMPTY")
    return cart


def preview_order(session: Session, user_id: int, coupon_code: Optional[str] = None) -> Tuple[OrderTotals, Optional[CouponDiscount]]:
    settings = get_settings(session)
    cart = _require_cart(session, user_id)
    subtotal = cart_subtotal(cart)

    applied = apply_coupon(session, coupon_code, subtotal) if coupon_code else None
    totals = calculate_totals(subtotal, settings, applied.discount if applied else None)
    return totals, applied


def _user_address(session: Session, user_id: int, address_id: int, label: str) -> Address:
    address = session.exec(
        select(Address).where(Address.id == address_id, Address.user_id == user_id)
    ).first()
    if address is None:
        raise CheckoutError(f"{label} address not found", code="ADDRESS_NOT_FOUND")
    return address


def create_order(session: Session, user_id: int, request: CheckoutRequest) -> Order:
    # settings first: a cold read may commit the default row
    settings = get_settings(session)

    setting_flag = PAYMENT_METHOD_SETTINGS.get(request.payment_method)
    if setting_flag and not settings.get(setting_flag):
        raise CheckoutError("Payment method is not available", code="PAYMENT_METHOD_DISABLED")

    cart = _require_cart(session, user_id)
    for item in cart.items:
        if not item.product.published:
            raise CheckoutError(f"{item.product.name} is no longer available", code="PRODUCT_UNAVAILABLE")
        if item.available < item.quantity:
            raise InsufficientStock(
                f"Insufficient stock for {item.product.name}. Only {item.available} available."
            )

    shipping_address = _user_address(session, user_id, request.shipping_address_id, "Shipping")
    billing_address = (
        _user_address(session, user_id, request.billing_address_id, "Billing")
        if request.billing_address_id
        else shipping_address
    )

    subtotal = cart_subtotal(cart)
    applied = apply_coupon(session, request.coupon_code, subtotal) if request.coupon_code else None
    totals = calculate_totals(subtotal, settings, applied.discount if applied else None)

    order = Order(
        order_number=generate_order_number(),
        user_id=user_id,
        payment_method=request.payment_method,
        subtotal=totals.subtotal,
        discount=totals.discount,
        shipping=totals.shipping,
        tax=totals.tax,
        total=totals.total,
        coupon_id=applied.coupon_id if applied else None,
        coupon_code=applied.code if applied else None,
        shipping_address=shipping_address.snapshot(),
        billing_address=billing_address.snapshot(),
        notes=request.notes or None,
        items=[
            OrderItem(
                product_id=item.product_id,
                variant_id=item.variant_id,
                name=item.product.name if item.variant is None else f"{item.product.name} - {item.variant.name}",
                quantity=item.quantity,
                price=item.unit_price,
                total=item.unit_price * item.quantity,
            )
            for item in cart.items
        ],
    )

    try:
        session.add(order)
        session.flush()

        if applied:
            redeem_coupon(session, applied.coupon_id)

        for item in cart.items:
            item.product.quantity -= item.quantity
            session.add(item.product)
            if item.variant is not None:
                item.variant.quantity -= item.quantity
                session.add(item.variant)
            session.delete(item)

        session.commit()
    except AppError:
        session.rollback()
        raise

    session.refresh(order)
    logger.info("Order %s created for user %s (total %s)", order.order_number, user_id, order.total)

    invalidate(*[f"product:{item.product_id}" for item in order.items])
    return order


def restore_stock(session: Session, order: Order) -> int:
    """Give the reserved quantities back, returns the number of units restored"""
    restored = 0
    for item in order.items:
        if item.product is not None:
            item.product.quantity += item.quantity
            session.add(item.product)
        if item.variant is not None:
            item.variant.quantity += item.quantity
            session.add(item.variant)
        restored += item.quantity
    return restored


def cancel_order(session: Session, order: Order, reason: str, payment_status: Optional[PaymentStatusEnum] = None) -> int:
    """Cancel and restore stock. Coupon slots are not released."""
    restored = 0
    if order.status != OrderStatusEnum.CANCELLED:
        restored = restore_stock(session, order)
    order.status = OrderStatusEnum.CANCELLED
    if payment_status is not None:
        order.payment_status = payment_status
    order.payment_metadata = {
        **(order.payment_metadata or {}),
        "cancelledAt": datetime.now(timezone.utc).isoformat(),
        "reason": reason,
    }
    order.updated_at = datetime.now(timezone.utc)
    session.add(order)
    invalidate(*[f"product:{item.product_id}" for item in order.items])
    return restored


def customer_cancel(session: Session, order: Order) -> Order:
    if order.status != OrderStatusEnum.PENDING:
        raise AppError("Only pending orders can be cancelled", code="ORDER_NOT_CANCELLABLE")
    if order.payment_status == PaymentStatusEnum.PAID:
        raise AppError("Paid orders cannot be cancelled", code="ORDER_NOT_CANCELLABLE")

    cancel_order(session, order, reason="customer")
    session.commit()
    session.refresh(order)
    return order


def admin_update_order(session: Session, order: Order, request: AdminOrderUpdate) -> Order:
    now = datetime.now(timezone.utc)

    if request.status is not None and request.status != order.status:
        if order.status == OrderStatusEnum.CANCELLED:
            raise AppError("Cancelled orders cannot be changed", code="INVALID_STATUS_TRANSITION")
        if request.status == OrderStatusEnum.CANCELLED:
            cancel_order(session, order, reason="admin")
        else:
            if STATUS_FLOW.index(request.status) < STATUS_FLOW.index(order.status):
                raise AppError("Order status cannot move backwards", code="INVALID_STATUS_TRANSITION")
            order.status = request.status
            if request.status == OrderStatusEnum.DELIVERED:
                order.delivered_at = now

    if request.payment_status is not None and request.payment_status != order.payment_status:
        order.payment_status = request.payment_status
        if request.payment_status == PaymentStatusEnum.PAID:
            order.paid_at = now

    if request.notes is not None:
        order.notes = request.notes

    order.updated_at = now
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def find_expired_orders(session: Session, expiry_minutes: int, now: Optional[datetime] = None) -> List[Order]:
    now = as_utc(now) if now else datetime.now(timezone.utc)
    cutoff = now - timedelta(minutes=expiry_minutes)
    orders = session.exec(
        select(Order)
        .where(
            Order.status == OrderStatusEnum.PENDING,
            Order.payment_status == PaymentStatusEnum.PENDING,
        )
        .options(*ORDER_LOAD_OPTIONS)
    ).all()
    # compared in Python, SQLite hands datetimes back without tzinfo
    return [order for order in orders if as_utc(order.created_at) < cutoff]


def cancel_expired_orders(session: Session, now: Optional[datetime] = None) -> dict:
    """Cancel pending unpaid orders older than the configured expiry"""
    expiry_minutes = get_settings(session)["order_expiry_minutes"]
    expired = find_expired_orders(session, expiry_minutes, now)

    restored = 0
    for order in expired:
        restored += cancel_order(session, order, reason="expired", payment_status=PaymentStatusEnum.FAILED)
    session.commit()

    if expired:
        logger.info("Cancelled %d expired orders", len(expired))
    return {
        "expiredCount": len(expired),
        "restoredProducts": restored,
        "expiryMinutes": expiry_minutes,
    }
