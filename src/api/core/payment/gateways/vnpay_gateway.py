import hashlib
import hmac
import logging
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Dict, Any
from urllib.parse import quote_plus

from src.config import (
    VNPAY_HASH_SECRET,
    VNPAY_RETURN_URL,
    VNPAY_TMN_CODE,
    VNPAY_URL,
)
from src.api.core.decimal_formatter import round_money, to_decimal
from ..base_gateway import (
    BasePaymentGateway,
    PaymentCallbackResult,
    PaymentInitiationResult,
)

logger = logging.getLogger(__name__)

# VNPay timestamps are local Vietnam time
VN_TZ = timezone(timedelta(hours=7))
PAYMENT_EXPIRY_MINUTES = 15

RESPONSE_MESSAGES = {
    "00": "Transaction successful",
    "07": "Amount deducted, transaction flagged as suspicious",
    "09": "Card/account is not registered for internet banking",
    "10": "Card/account verification failed more than 3 times",
    "11": "Payment window expired, please try again",
    "12": "Card/account is locked",
    "13": "Wrong OTP, please try again",
    "24": "Customer cancelled the transaction",
    "51": "Insufficient balance",
    "65": "Daily transaction limit exceeded",
    "75": "Paying bank is under maintenance",
    "79": "Wrong payment password too many times",
    "99": "Unknown error",
    "03": "Invalid data format",
}


class VNPayGateway(BasePaymentGateway):
    """VNPay (Vietnam) redirect gateway, API version 2.1.0"""

    gateway_name = "vnpay"

    def __init__(
        self,
        tmn_code: Optional[str] = None,
        hash_secret: Optional[str] = None,
        payment_url: Optional[str] = None,
        return_url: Optional[str] = None,
    ):
        self.tmn_code = tmn_code or VNPAY_TMN_CODE
        self.hash_secret = hash_secret or VNPAY_HASH_SECRET
        self.payment_url = payment_url or VNPAY_URL
        self.return_url = return_url or VNPAY_RETURN_URL

    def initialize(self) -> bool:
        """Verify VNPay configuration"""
        return all([
            self.tmn_code,
            self.hash_secret,
            self.payment_url,
            self.return_url,
        ])

    @staticmethod
    def format_date(dt: datetime) -> str:
        """yyyyMMddHHmmss in Vietnam time"""
        return dt.astimezone(VN_TZ).strftime("%Y%m%d%H%M%S")

    @staticmethod
    def clean_description(description: str) -> str:
        cleaned = description[:255]
        cleaned = re.sub(r"[<>\"']", "", cleaned)
        return re.sub(r"\s+", " ", cleaned).strip()

    @staticmethod
    def build_query(data: Dict[str, Any]) -> str:
        """Sorted key=value pairs, values url-encoded with '+' for spaces"""
        pairs = [
            f"{key}={quote_plus(str(value))}"
            for key, value in sorted(data.items())
            if value is not None and value != ""
        ]
        return "&".join(pairs)

    def generate_signature(self, data: Dict[str, Any]) -> str:
        """HMAC-SHA512 over the sorted, encoded query string"""
        return hmac.new(
            self.hash_secret.encode("utf-8"),
            self.build_query(data).encode("utf-8"),
            hashlib.sha512,
        ).hexdigest()

    def verify_signature(self, data: Dict[str, Any], signature: str) -> bool:
        if not signature:
            return False
        expected = self.generate_signature(data)
        return hmac.compare_digest(expected.lower(), signature.lower())

    def initiate_payment(
        self,
        transaction_id: str,
        amount: Decimal,
        description: str,
        client_ip: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentInitiationResult:
        """Build the signed VNPay redirect URL"""
        amount = round_money(amount)
        if amount <= 0:
            return PaymentInitiationResult(
                success=False,
                transaction_id=transaction_id,
                error_code="INVALID_AMOUNT",
                error_message="Amount must be greater than 0",
            )
        if len(transaction_id) > 100:
            return PaymentInitiationResult(
                success=False,
                transaction_id=transaction_id,
                error_code="INVALID_TXN_REF",
                error_message="Order reference must be less than 100 characters",
            )

        now = datetime.now(timezone.utc)
        params = {
            "vnp_Version": "2.1.0",
            "vnp_Command": "pay",
            "vnp_TmnCode": self.tmn_code,
            "vnp_Locale": (metadata or {}).get("locale", "vn"),
            "vnp_CurrCode": self.currency,
            "vnp_TxnRef": transaction_id,
            "vnp_OrderInfo": self.clean_description(description),
            "vnp_OrderType": (metadata or {}).get("order_type", "other"),
            # VNPay expects the amount multiplied by 100
            "vnp_Amount": str(int(amount * 100)),
            "vnp_ReturnUrl": self.return_url,
            "vnp_IpAddr": client_ip or "127.0.0.1",
            "vnp_CreateDate": self.format_date(now),
            "vnp_ExpireDate": self.format_date(now + timedelta(minutes=PAYMENT_EXPIRY_MINUTES)),
        }

        query = self.build_query(params)
        signature = self.generate_signature(params)
        redirect_url = f"{self.payment_url}?{query}&vnp_SecureHash={signature}"

        logger.info("VNPay payment URL created for %s", transaction_id)
        return PaymentInitiationResult(
            success=True,
            transaction_id=transaction_id,
            redirect_url=redirect_url,
            payment_data=params,
        )

    def process_callback(self, callback_data: Dict[str, Any]) -> PaymentCallbackResult:
        data = {
            k: v
            for k, v in callback_data.items()
            if k.startswith("vnp_") and k not in ("vnp_SecureHash", "vnp_SecureHashType")
        }
        signature = callback_data.get("vnp_SecureHash", "")
        response_code = callback_data.get("vnp_ResponseCode")
        transaction_id = callback_data.get("vnp_TxnRef")

        if not self.verify_signature(data, signature):
            logger.warning("VNPay callback signature mismatch for %s", transaction_id)
            return PaymentCallbackResult(
                valid=False,
                success=False,
                transaction_id=transaction_id,
                response_code=response_code,
                message="Invalid signature",
            )

        success = response_code == "00" and callback_data.get("vnp_TransactionStatus") == "00"
        raw_amount = callback_data.get("vnp_Amount")
        amount = to_decimal(raw_amount) / 100 if raw_amount else None

        return PaymentCallbackResult(
            valid=True,
            success=success,
            transaction_id=transaction_id,
            gateway_transaction_id=callback_data.get("vnp_TransactionNo"),
            amount=amount,
            response_code=response_code,
            message=RESPONSE_MESSAGES.get(response_code, RESPONSE_MESSAGES["99"]),
            parsed_data={
                "vnp_ResponseCode": response_code,
                "vnp_TransactionNo": callback_data.get("vnp_TransactionNo"),
                "vnp_BankCode": callback_data.get("vnp_BankCode"),
                "vnp_CardType": callback_data.get("vnp_CardType"),
                "vnp_PayDate": callback_data.get("vnp_PayDate"),
                "vnp_BankTranNo": callback_data.get("vnp_BankTranNo"),
            },
        )
