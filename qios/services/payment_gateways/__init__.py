from .dispatch import create_payment, is_settled, resolve_payment_method, verify_payment
from .factory import GATEWAY_INFO, PaymentGatewayConfig, PaymentGatewayFactory, config_from_settings

__all__ = [
    "create_payment",
    "verify_payment",
    "resolve_payment_method",
    "is_settled",
    "GATEWAY_INFO",
    "PaymentGatewayConfig",
    "PaymentGatewayFactory",
    "config_from_settings",
]
