import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from qios.core.config import settings
from qios.db import get_db
from qios.schemas.payment import PaymentCreate, PaymentVerify
from qios.services import orders as order_service
from qios.services.payment_gateways import (
    PaymentGatewayFactory,
    config_from_settings,
    create_payment,
    is_settled,
    verify_payment,
)
from qios.services.payment_gateways.dispatch import UTILITY_GATEWAYS

log = logging.getLogger(__name__)

router = APIRouter(tags=["payment"])


def get_gateway_factory() -> PaymentGatewayFactory:
    return PaymentGatewayFactory(config_from_settings(settings))


@router.post("/create")
async def create(payload: PaymentCreate, factory: PaymentGatewayFactory = Depends(get_gateway_factory)):
    try:
        result = await create_payment(factory, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not result.success:
        raise HTTPException(status_code=400, detail=result.error or "Payment failed")

    return {
        "success": True,
        "data": result.data,
        "paymentUrl": result.payment_url,
        "virtualAccountNumber": result.virtual_account_number,
        "qrCode": result.qr_code,
        "deepLink": result.deep_link,
        "token": result.token,
    }


@router.post("/verify")
async def verify(
    payload: PaymentVerify,
    factory: PaymentGatewayFactory = Depends(get_gateway_factory),
    db: AsyncSession = Depends(get_db),
):
    try:
        result = await verify_payment(factory, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not result.success:
        raise HTTPException(status_code=400, detail=result.error or "Verification failed")

    order_paid = False
    if is_settled(result.status):
        order = await order_service.confirm_payment_by_reference(
            db, payload.order_id, reference=payload.payment_id or payload.order_id
        )
        order_paid = order is not None

    return {
        "success": True,
        "data": result.data,
        "status": result.status,
        "paymentType": result.payment_type,
        "orderPaid": order_paid,
    }


# 🧾 Outstanding utility bill (PLN / PDAM)
@router.get("/bill/{gateway_type}/{customer_id}")
async def check_bill(
    gateway_type: str,
    customer_id: str,
    factory: PaymentGatewayFactory = Depends(get_gateway_factory),
):
    if gateway_type not in UTILITY_GATEWAYS:
        raise HTTPException(status_code=400, detail=f"Bill check not supported for {gateway_type}")
    try:
        gateway = factory.get_gateway(gateway_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = await gateway.check_bill(customer_id)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error or "Bill check failed")

    return {
        "success": True,
        "data": result.data,
        "billAmount": result.bill_amount,
        "dueDate": result.due_date,
        "status": result.status,
    }


@router.get("/gateways")
async def gateways(factory: PaymentGatewayFactory = Depends(get_gateway_factory)):
    return {
        "success": True,
        "data": [g.model_dump(by_alias=True) for g in factory.describe_available()],
    }
