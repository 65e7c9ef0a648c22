from fastapi import APIRouter

from src.api.core.dependencies import GetSession
from src.api.core.response import api_response
from src.api.models.couponModel import AppliedCoupon, ApplyCouponRequest
from src.api.services.discount_service import apply_coupon

router = APIRouter(prefix="/coupons", tags=["Coupon"])


# ✅ APPLY (preview only, no usage slot is taken)
@router.post("/apply")
def apply(request: ApplyCouponRequest, session: GetSession):
    applied = apply_coupon(session, request.code, request.subtotal)
    return api_response(
        200,
        "Coupon applied successfully",
        AppliedCoupon(
            coupon_id=applied.coupon_id,
            code=applied.code,
            type=applied.type,
            discount=applied.discount,
            description=applied.description,
        ),
    )
