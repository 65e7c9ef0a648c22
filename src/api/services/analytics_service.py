# src/api/services/analytics_service.py
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from src.api.core.decimal_formatter import round_money, to_decimal
from src.api.core.utility import as_utc, utc_naive
from src.api.models import Order, OrderItem, PaymentStatusEnum, Product, User, UserRole

TOP_PRODUCTS_LIMIT = 10
REVENUE_DAYS = 30


def _date_window(statement, column, start: Optional[datetime], end: Optional[datetime]):
    if start is not None:
        statement = statement.where(column >= utc_naive(start))
    if end is not None:
        statement = statement.where(column <= utc_naive(end))
    return statement


def revenue_by_date(session: Session, days: int = REVENUE_DAYS, now: Optional[datetime] = None) -> list:
    """Paid revenue per UTC day over the last `days` days, oldest first"""
    now = as_utc(now) if now else datetime.now(timezone.utc)
    since = now - timedelta(days=days)
    rows = session.exec(
        select(Order.created_at, Order.total).where(
            Order.payment_status == PaymentStatusEnum.PAID,
            Order.created_at >= utc_naive(since),
        )
    ).all()

    buckets = OrderedDict()
    for created_at, total in sorted(rows, key=lambda r: as_utc(r[0])):
        day = as_utc(created_at).date().isoformat()
        bucket = buckets.setdefault(day, {"date": day, "revenue": Decimal("0"), "orders": 0})
        bucket["revenue"] += to_decimal(total)
        bucket["orders"] += 1
    return list(buckets.values())


def get_analytics(session: Session, start: Optional[datetime] = None, end: Optional[datetime] = None) -> dict:
    paid = _date_window(
        select(func.coalesce(func.sum(Order.total), 0), func.count(Order.id)).where(
            Order.payment_status == PaymentStatusEnum.PAID
        ),
        Order.created_at,
        start,
        end,
    )
    total_revenue, paid_orders = session.exec(paid).one()
    total_revenue = to_decimal(total_revenue)

    total_orders = session.exec(
        _date_window(select(func.count(Order.id)), Order.created_at, start, end)
    ).one()
    total_customers = session.exec(
        _date_window(
            select(func.count(User.id)).where(User.role == UserRole.CUSTOMER),
            User.created_at,
            start,
            end,
        )
    ).one()

    by_status = session.exec(
        _date_window(
            select(Order.status, func.count(Order.id)).group_by(Order.status),
            Order.created_at,
            start,
            end,
        )
    ).all()

    top = session.exec(
        _date_window(
            select(
                OrderItem.product_id,
                func.sum(OrderItem.quantity).label("quantity"),
                func.sum(OrderItem.total).label("revenue"),
            )
            .join(Order, Order.id == OrderItem.order_id)
            .where(Order.payment_status == PaymentStatusEnum.PAID)
            .group_by(OrderItem.product_id)
            .order_by(func.sum(OrderItem.quantity).desc())
            .limit(TOP_PRODUCTS_LIMIT),
            Order.created_at,
            start,
            end,
        )
    ).all()
    products = {
        p.id: p
        for p in session.exec(select(Product).where(Product.id.in_([row[0] for row in top]))).all()
    } if top else {}

    return {
        "totalRevenue": total_revenue,
        "totalOrders": total_orders,
        "totalCustomers": total_customers,
        "averageOrderValue": round_money(total_revenue / paid_orders) if paid_orders else 0,
        "ordersByStatus": [{"status": status, "count": count} for status, count in by_status],
        "topProducts": [
            {
                "product": {
                    "id": product_id,
                    "name": products[product_id].name if product_id in products else None,
                    "images": products[product_id].images if product_id in products else [],
                },
                "quantity": int(quantity or 0),
                "revenue": to_decimal(revenue),
            }
            for product_id, quantity, revenue in top
        ],
        "revenueByDate": revenue_by_date(session),
    }
