from .base_gateway import (
    BasePaymentGateway,
    PaymentCallbackResult,
    PaymentInitiationResult,
)
from .gateway_factory import PaymentGatewayFactory
