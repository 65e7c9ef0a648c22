import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query
from sqlmodel import select

from src.api.core.dependencies import GetSession, ListQueryParams, requireAdmin
from src.api.core.operation import paginate
from src.api.core.response import api_response, raiseExceptions
from src.api.core.utility import utc_naive
from src.api.models import Coupon, Order
from src.api.models.couponModel import CouponCreate, CouponRead, CouponUpdate
from src.api.services.discount_service import check_coupon_rules

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/coupons", tags=["Admin Coupon"])

# 0 means "no limit" for these
OPTIONAL_LIMIT_FIELDS = ("min_order_amount", "max_discount_amount", "usage_limit")


def _coupon_data(request, exclude_unset: bool = False) -> dict:
    data = request.model_dump(exclude_unset=exclude_unset)
    for field in OPTIONAL_LIMIT_FIELDS:
        if field in data and not data[field]:
            data[field] = None
    for field in ("valid_from", "valid_until"):
        if data.get(field) is not None:
            data[field] = utc_naive(data[field])
    return data


def _code_taken(session, code: str, exclude_id=None) -> bool:
    statement = select(Coupon.id).where(Coupon.code == code)
    if exclude_id is not None:
        statement = statement.where(Coupon.id != exclude_id)
    return session.exec(statement).first() is not None


# ✅ LIST
@router.get("")
def list_coupons(
    admin: requireAdmin,
    session: GetSession,
    query_params: ListQueryParams,
    active: Optional[bool] = Query(None),
):
    statement = select(Coupon)
    if query_params.search:
        statement = statement.where(Coupon.code.ilike(f"%{query_params.search}%"))
    if active is not None:
        statement = statement.where(Coupon.active == active)
    statement = statement.order_by(Coupon.created_at.desc(), Coupon.id.desc())

    coupons, pagination = paginate(session, statement, query_params.page, query_params.limit)
    return api_response(200, "Coupons found", [CouponRead.model_validate(c) for c in coupons], pagination=pagination)


# ✅ CREATE
@router.post("")
def create_coupon(request: CouponCreate, admin: requireAdmin, session: GetSession):
    check_coupon_rules(request.type, request.value, request.valid_from, request.valid_until)
    raiseExceptions((_code_taken(session, request.code), 400, "Coupon code already exists", True))

    coupon = Coupon(**_coupon_data(request))
    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    logger.info("Coupon %s created", coupon.code)

    return api_response(201, "Coupon created successfully", CouponRead.model_validate(coupon))


# ✅ READ BY ID
@router.get("/{id}")
def read_coupon(id: int, admin: requireAdmin, session: GetSession):
    coupon = session.get(Coupon, id)
    raiseExceptions((coupon, 404, "Coupon not found"))

    return api_response(200, "Coupon found", CouponRead.model_validate(coupon))


# ✅ UPDATE
@router.put("/{id}")
def update_coupon(id: int, request: CouponUpdate, admin: requireAdmin, session: GetSession):
    coupon = session.get(Coupon, id)
    raiseExceptions((coupon, 404, "Coupon not found"))
    if request.code:
        raiseExceptions((_code_taken(session, request.code, exclude_id=id), 400, "Coupon code already exists", True))

    data = _coupon_data(request, exclude_unset=True)
    check_coupon_rules(
        data.get("type") or coupon.type,
        data.get("value") or coupon.value,
        data.get("valid_from") or coupon.valid_from,
        data.get("valid_until") or coupon.valid_until,
        usage_limit=data["usage_limit"] if "usage_limit" in data else coupon.usage_limit,
        used_count=coupon.used_count,
    )

    for key, value in data.items():
        setattr(coupon, key, value)
    coupon.updated_at = datetime.now(timezone.utc)
    session.add(coupon)
    session.commit()
    session.refresh(coupon)

    return api_response(200, "Coupon updated successfully", CouponRead.model_validate(coupon))


# ✅ DELETE
@router.delete("/{id}")
def delete_coupon(id: int, admin: requireAdmin, session: GetSession):
    coupon = session.get(Coupon, id)
    raiseExceptions((coupon, 404, "Coupon not found"))

    used = session.exec(select(Order.id).where(Order.coupon_id == id)).first()
    raiseExceptions((used, 400, "Coupon is used by existing orders, deactivate it instead", True))

    code = coupon.code
    session.delete(coupon)
    session.commit()
    return api_response(200, f"Coupon {code} deleted successfully")
