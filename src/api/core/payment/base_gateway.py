from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass
class PaymentInitiationResult:
    success: bool
    transaction_id: str
    redirect_url: Optional[str] = None
    payment_data: Optional[Dict[str, Any]] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class PaymentCallbackResult:
    """Parsed gateway return. `valid` is the signature check, `success` the payment outcome"""
    valid: bool
    success: bool
    transaction_id: Optional[str] = None
    gateway_transaction_id: Optional[str] = None
    amount: Optional[Decimal] = None
    response_code: Optional[str] = None
    message: Optional[str] = None
    parsed_data: Optional[Dict[str, Any]] = None


class BasePaymentGateway(ABC):
    """Redirect-style gateway: build a signed URL, then verify what comes back"""

    gateway_name: str = ""
    currency: str = "VND"

    @abstractmethod
    def initialize(self) -> bool:
        """False when credentials are missing"""

    @abstractmethod
    def initiate_payment(
        self,
        transaction_id: str,
        amount: Decimal,
        description: str,
        client_ip: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentInitiationResult:
        ...

    @abstractmethod
    def process_callback(self, callback_data: Dict[str, Any]) -> PaymentCallbackResult:
        ...

    @abstractmethod
    def generate_signature(self, data: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def verify_signature(self, data: Dict[str, Any], signature: str) -> bool:
        ...
