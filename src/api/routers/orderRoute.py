from typing import Optional

from fastapi import APIRouter, Query
from sqlmodel import select

from src.api.core.dependencies import GetSession, ListQueryParams, requireSignin
from src.api.core.operation import paginate
from src.api.core.response import api_response, raiseExceptions
from src.api.models import Order, OrderStatusEnum
from src.api.models.order_model.orderModel import (
    CheckoutPreviewRequest,
    CheckoutRequest,
    CustomerOrderUpdate,
    OrderRead,
    OrderTotalsRead,
)
from src.api.services.order_service import (
    ORDER_LOAD_OPTIONS,
    create_order,
    customer_cancel,
    preview_order,
)

router = APIRouter(prefix="/orders", tags=["Order"])


def _user_order(session, user_id: int, id: int) -> Optional[Order]:
    return session.exec(
        select(Order)
        .where(Order.id == id, Order.user_id == user_id)
        .options(*ORDER_LOAD_OPTIONS)
    ).first()


# ✅ PREVIEW TOTALS
@router.post("/preview")
def preview(request: CheckoutPreviewRequest, user: requireSignin, session: GetSession):
    totals, applied = preview_order(session, user.get("id"), request.coupon_code)
    return api_response(
        200,
        "Order totals calculated",
        OrderTotalsRead(**totals.as_dict(), coupon_code=applied.code if applied else None),
    )


# ✅ LIST
@router.get("")
def list_orders(
    user: requireSignin,
    session: GetSession,
    query_params: ListQueryParams,
    status: Optional[OrderStatusEnum] = Query(None),
):
    statement = select(Order).where(Order.user_id == user.get("id"))
    if status:
        statement = statement.where(Order.status == status)
    if query_params.search:
        statement = statement.where(Order.order_number.ilike(f"%{query_params.search}%"))
    statement = statement.order_by(Order.created_at.desc(), Order.id.desc())

    orders, pagination = paginate(session, statement, query_params.page, query_params.limit, ORDER_LOAD_OPTIONS)
    return api_response(
        200,
        "Orders found",
        [OrderRead.model_validate(o) for o in orders],
        pagination=pagination,
    )


# ✅ CREATE (checkout)
@router.post("")
def checkout(request: CheckoutRequest, user: requireSignin, session: GetSession):
    order = create_order(session, user.get("id"), request)
    order = _user_order(session, user.get("id"), order.id)
    return api_response(201, "Order created successfully", OrderRead.model_validate(order))


# ✅ READ BY ID
@router.get("/{id}")
def read_order(id: int, user: requireSignin, session: GetSession):
    order = _user_order(session, user.get("id"), id)
    raiseExceptions((order, 404, "Order not found"))

    return api_response(200, "Order found", OrderRead.model_validate(order))


# ✅ CANCEL
@router.patch("/{id}")
def cancel(id: int, request: CustomerOrderUpdate, user: requireSignin, session: GetSession):
    raiseExceptions((request.status == OrderStatusEnum.CANCELLED, 400, "Customers can only cancel orders"))

    order = _user_order(session, user.get("id"), id)
    raiseExceptions((order, 404, "Order not found"))

    order = customer_cancel(session, order)
    return api_response(200, "Order cancelled", OrderRead.model_validate(order))
