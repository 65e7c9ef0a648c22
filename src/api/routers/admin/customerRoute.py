from decimal import Decimal

from fastapi import APIRouter
from sqlalchemy import func, or_
from sqlmodel import select

from src.api.core.dependencies import GetSession, ListQueryParams, requireAdmin
from src.api.core.operation import paginate
from src.api.core.response import api_response, raiseExceptions
from src.api.models import Address, Order, PaymentStatusEnum, User, UserRole
from src.api.models.addressModel import AddressRead
from src.api.models.order_model.orderModel import OrderRead
from src.api.models.usersModel import UserRead
from src.api.services.order_service import ORDER_LOAD_OPTIONS

router = APIRouter(prefix="/admin/customers", tags=["Admin Customer"])

RECENT_ORDERS_LIMIT = 10


def _order_stats(session, user_ids):
    """{user_id: (order count, total spent on paid orders)}"""
    if not user_ids:
        return {}
    counts = dict(
        session.exec(
            select(Order.user_id, func.count(Order.id))
            .where(Order.user_id.in_(user_ids))
            .group_by(Order.user_id)
        ).all()
    )
    spent = dict(
        session.exec(
            select(Order.user_id, func.sum(Order.total))
            .where(Order.user_id.in_(user_ids), Order.payment_status == PaymentStatusEnum.PAID)
            .group_by(Order.user_id)
        ).all()
    )
    return {uid: (counts.get(uid, 0), spent.get(uid) or Decimal("0")) for uid in user_ids}


def _customer_data(user, stats) -> dict:
    data = UserRead.model_validate(user).model_dump(by_alias=True)
    data["orderCount"], data["totalSpent"] = stats.get(user.id, (0, Decimal("0")))
    return data


# ✅ LIST
@router.get("")
def list_customers(admin: requireAdmin, session: GetSession, query_params: ListQueryParams):
    statement = select(User).where(User.role == UserRole.CUSTOMER)
    if query_params.search:
        term = f"%{query_params.search}%"
        statement = statement.where(or_(User.name.ilike(term), User.email.ilike(term)))
    statement = statement.order_by(User.created_at.desc(), User.id.desc())

    customers, pagination = paginate(session, statement, query_params.page, query_params.limit)
    stats = _order_stats(session, [c.id for c in customers])
    return api_response(
        200,
        "Customers found",
        [_customer_data(c, stats) for c in customers],
        pagination=pagination,
    )


# ✅ READ BY ID (with addresses and recent orders)
@router.get("/{id}")
def read_customer(id: int, admin: requireAdmin, session: GetSession):
    customer = session.get(User, id)
    raiseExceptions((customer and customer.role == UserRole.CUSTOMER, 404, "Customer not found"))

    data = _customer_data(customer, _order_stats(session, [id]))
    addresses = session.exec(select(Address).where(Address.user_id == id)).all()
    orders = session.exec(
        select(Order)
        .where(Order.user_id == id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(RECENT_ORDERS_LIMIT)
        .options(*ORDER_LOAD_OPTIONS)
    ).all()
    data["addresses"] = [AddressRead.model_validate(a) for a in addresses]
    data["recentOrders"] = [OrderRead.model_validate(o) for o in orders]

    return api_response(200, "Customer found", data)
