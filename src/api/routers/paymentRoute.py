import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse
from sqlmodel import select

from src.config import FRONTEND_URL
from src.api.core.dependencies import GetSession, requireSignin
from src.api.core.exceptions import PaymentGatewayError
from src.api.core.payment import PaymentGatewayFactory
from src.api.core.response import api_response, raiseExceptions
from src.api.core.decimal_formatter import round_money
from src.api.models import Order, OrderStatusEnum, PaymentMethodEnum, PaymentStatusEnum
from src.api.models.order_model.orderModel import PaymentCreateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payment"])


def _frontend_redirect(path: str) -> RedirectResponse:
    return RedirectResponse(url=f"{FRONTEND_URL.rstrip('/')}{path}", status_code=302)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for") or request.headers.get("x-real-ip")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "127.0.0.1"


# ✅ VNPAY: CREATE PAYMENT URL
@router.post("/vnpay/create")
def create_vnpay_payment(
    body: PaymentCreateRequest,
    request: Request,
    user: requireSignin,
    session: GetSession,
):
    order = session.exec(
        select(Order).where(Order.id == body.order_id, Order.user_id == user.get("id"))
    ).first()
    raiseExceptions((order, 404, "Order not found"))
    raiseExceptions(
        (order.payment_status == PaymentStatusEnum.PAID, 400, "Order already paid", True),
        (order.status == OrderStatusEnum.CANCELLED, 400, "Order has been cancelled", True),
    )

    gateway = PaymentGatewayFactory.get_gateway("vnpay")
    if gateway is None:
        raise PaymentGatewayError("VNPay is not configured")

    result = gateway.initiate_payment(
        transaction_id=order.order_number,
        amount=order.total,
        description=f"Thanh toan don hang {order.order_number}",
        client_ip=_client_ip(request),
    )
    if not result.success:
        logger.error("VNPay initiation failed for %s: %s", order.order_number, result.error_message)
        raise PaymentGatewayError(result.error_message or "Could not create payment", code=result.error_code)

    order.payment_method = PaymentMethodEnum.VNPAY
    order.payment_metadata = {**(order.payment_metadata or {}), "gateway": "vnpay", "paymentUrl": result.redirect_url}
    order.updated_at = datetime.now(timezone.utc)
    session.add(order)
    session.commit()

    return api_response(
        200,
        "Payment URL created",
        {"paymentUrl": result.redirect_url, "orderNumber": order.order_number},
    )


# ✅ VNPAY: RETURN / CALLBACK
@router.get("/vnpay/callback")
def vnpay_callback(request: Request, session: GetSession):
    params = dict(request.query_params)
    if not params.get("vnp_ResponseCode"):
        return _frontend_redirect("/payment/failed?error=invalid_response")

    gateway = PaymentGatewayFactory.get_gateway("vnpay")
    if gateway is None:
        logger.error("VNPay callback received but the gateway is not configured")
        return _frontend_redirect("/payment/failed?error=internal_error")

    result = gateway.process_callback(params)
    if not result.valid:
        return _frontend_redirect("/payment/failed?error=verification_failed")

    order = session.exec(select(Order).where(Order.order_number == result.transaction_id)).first()
    if not order:
        return _frontend_redirect("/payment/failed?error=order_not_found")

    # already settled by an earlier callback
    if order.payment_status == PaymentStatusEnum.PAID:
        return _frontend_redirect(f"/orders/{order.id}?payment=success")

    if result.success and result.amount is not None and result.amount != round_money(order.total):
        logger.warning(
            "VNPay amount mismatch for %s: paid %s, expected %s",
            order.order_number,
            result.amount,
            order.total,
        )
        return _frontend_redirect(f"/payment/failed?orderId={order.id}&error=amount_mismatch")

    now = datetime.now(timezone.utc)
    metadata = {**(order.payment_metadata or {}), **(result.parsed_data or {})}
    if result.success:
        order.payment_status = PaymentStatusEnum.PAID
        order.paid_at = now
    else:
        order.payment_status = PaymentStatusEnum.FAILED
        metadata["errorMessage"] = result.message
    order.payment_metadata = metadata
    order.updated_at = now
    session.add(order)
    session.commit()

    if result.success:
        logger.info("Order %s paid through VNPay (%s)", order.order_number, result.gateway_transaction_id)
        return _frontend_redirect(f"/orders/{order.id}?payment=success")

    logger.info("VNPay payment for %s failed with code %s", order.order_number, result.response_code)
    return _frontend_redirect(f"/payment/failed?orderId={order.id}&error={result.response_code}")
