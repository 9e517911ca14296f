"""Route a payment request to the right call on the right gateway."""
import logging

from qios.schemas.payment import PaymentCreate, PaymentResult, PaymentVerify, UtilityPaymentRequest
from qios.services.payment_gateways.factory import PaymentGatewayFactory
from qios.services.payment_gateways.midtrans import EWALLET_TYPES
from qios.services.payment_gateways.xendit import EWALLET_CHANNELS

log = logging.getLogger(__name__)

BANK_GATEWAYS = ("bca", "mandiri")
EWALLET_GATEWAYS = ("dana", "ovo", "linkaja", "gopay")
UTILITY_GATEWAYS = ("pln", "pdam")

SETTLED_STATUSES = {"settlement", "capture", "paid", "succeeded", "success", "completed"}


def is_settled(status) -> bool:
    return bool(status) and str(status).lower() in SETTLED_STATUSES


def utility_request(request: PaymentCreate) -> UtilityPaymentRequest:
    details = request.customer_details
    return UtilityPaymentRequest(
        customer_id=details.phone,
        customer_name=details.full_name,
        customer_phone=details.phone,
        customer_email=details.email,
        amount=request.amount,
        reference_number=request.order_id,
        description=", ".join(i.name for i in request.item_details),
    )


def resolve_payment_method(gateway, request: PaymentCreate):
    """The gateway call for this method, not yet awaited."""
    name = request.gateway_type
    method = request.payment_method

    if name == "midtrans":
        if method == "bank_transfer":
            return gateway.create_transaction(request)
        if method in EWALLET_TYPES:
            return gateway.create_ewallet_transaction(request, method)
    elif name == "xendit":
        if method == "virtual_account":
            return gateway.create_virtual_account(request, "BCA")
        if method in EWALLET_CHANNELS:
            return gateway.create_ewallet_payment(request, method)
        if method == "qris":
            return gateway.create_qris_payment(request)
    elif name in BANK_GATEWAYS:
        return gateway.create_virtual_account(request)
    elif name in EWALLET_GATEWAYS:
        return gateway.create_payment(request)
    elif name in UTILITY_GATEWAYS:
        return gateway.create_payment(utility_request(request))

    raise ValueError(f"Unsupported payment method: {method}")


async def create_payment(factory: PaymentGatewayFactory, request: PaymentCreate) -> PaymentResult:
    """Raises ValueError for unknown/unconfigured gateways and unsupported methods."""
    gateway = factory.get_gateway(request.gateway_type)
    call = resolve_payment_method(gateway, request)

    log.info(
        "create_payment: gateway=%s method=%s order=%s amount=%s",
        request.gateway_type, request.payment_method, request.order_id, request.amount,
    )
    return await call


async def verify_payment(factory: PaymentGatewayFactory, request: PaymentVerify) -> PaymentResult:
    gateway = factory.get_gateway(request.gateway_type)
    reference = request.order_id
    if request.gateway_type == "xendit":
        reference = request.payment_id or request.order_id

    result = await gateway.verify_payment(reference)
    log.info(
        "verify_payment: gateway=%s ref=%s success=%s status=%s",
        request.gateway_type, reference, result.success, result.status,
    )
    return result
