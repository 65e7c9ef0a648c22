import logging
from typing import Optional

from fastapi import APIRouter, Query
from sqlalchemy import or_
from sqlalchemy.orm import selectinload
from sqlmodel import select

from src.api.core.dependencies import GetSession, ListQueryParams, requireAdmin
from src.api.core.operation import paginate
from src.api.core.response import api_response, raiseExceptions
from src.api.models import Order, OrderStatusEnum, PaymentStatusEnum, User
from src.api.models.order_model.orderModel import AdminOrderRead, AdminOrderUpdate
from src.api.services.order_service import (
    ORDER_LOAD_OPTIONS,
    admin_update_order,
    cancel_expired_orders,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/orders", tags=["Admin Order"])

ADMIN_ORDER_OPTIONS = [*ORDER_LOAD_OPTIONS, selectinload(Order.user)]


def _load(session, id: int) -> Optional[Order]:
    return session.exec(select(Order).where(Order.id == id).options(*ADMIN_ORDER_OPTIONS)).first()


# ✅ LIST
@router.get("")
def list_orders(
    admin: requireAdmin,
    session: GetSession,
    query_params: ListQueryParams,
    status: Optional[OrderStatusEnum] = Query(None),
    payment_status: Optional[PaymentStatusEnum] = Query(None, alias="paymentStatus"),
):
    statement = select(Order)
    if query_params.search:
        term = f"%{query_params.search}%"
        statement = statement.where(
            or_(
                Order.order_number.ilike(term),
                Order.user_id.in_(
                    select(User.id).where(or_(User.name.ilike(term), User.email.ilike(term)))
                ),
            )
        )
    if status:
        statement = statement.where(Order.status == status)
    if payment_status:
        statement = statement.where(Order.payment_status == payment_status)
    statement = statement.order_by(Order.created_at.desc(), Order.id.desc())

    orders, pagination = paginate(session, statement, query_params.page, query_params.limit, ADMIN_ORDER_OPTIONS)
    return api_response(200, "Orders found", [AdminOrderRead.model_validate(o) for o in orders], pagination=pagination)


# ✅ CLEANUP (cancel expired unpaid orders)
@router.post("/cleanup")
def cleanup_orders(admin: requireAdmin, session: GetSession):
    result = cancel_expired_orders(session)
    return api_response(200, f"Cancelled {result['expiredCount']} expired orders", result)


# ✅ READ BY ID
@router.get("/{id}")
def read_order(id: int, admin: requireAdmin, session: GetSession):
    order = _load(session, id)
    raiseExceptions((order, 404, "Order not found"))

    return api_response(200, "Order found", AdminOrderRead.model_validate(order))


# ✅ UPDATE STATUS / PAYMENT / NOTES
@router.patch("/{id}")
def update_order(id: int, request: AdminOrderUpdate, admin: requireAdmin, session: GetSession):
    order = _load(session, id)
    raiseExceptions((order, 404, "Order not found"))

    admin_update_order(session, order, request)
    logger.info("Order %s updated by admin %s", order.order_number, admin.get("id"))

    return api_response(200, "Order updated successfully", AdminOrderRead.model_validate(_load(session, id)))
