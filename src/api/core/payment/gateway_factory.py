from typing import Dict, Optional, Type

from .base_gateway import BasePaymentGateway
from .gateways.vnpay_gateway import VNPayGateway


class PaymentGatewayFactory:
    """Keeps one configured instance per gateway name"""

    _gateways: Dict[str, Type[BasePaymentGateway]] = {
        VNPayGateway.gateway_name: VNPayGateway,
    }
    _instances: Dict[str, BasePaymentGateway] = {}

    @classmethod
    def get_gateway(cls, name: str) -> Optional[BasePaymentGateway]:
        """None when the name is unknown or the gateway is not configured"""
        name = name.lower()
        gateway_class = cls._gateways.get(name)
        if gateway_class is None:
            return None

        gateway = cls._instances.get(name)
        if gateway is None:
            gateway = gateway_class()
            if not gateway.initialize():
                return None
            cls._instances[name] = gateway
        return gateway

    @classmethod
    def clear_instances(cls) -> None:
        cls._instances.clear()
