import logging
from typing import Optional

import midtransclient
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from qios.schemas.payment import PaymentRequest, PaymentResult
from qios.services.payment_gateways.base import callback_url

log = logging.getLogger(__name__)

EWALLET_TYPES = ("gopay", "shopeepay", "dana", "ovo", "linkaja")


class MidtransConfig(BaseModel):
    server_key: str
    client_key: Optional[str] = None
    is_production: bool = False


def _charge_params(request: PaymentRequest) -> dict:
    details = request.customer_details
    return {
        "transaction_details": {
            "order_id": request.order_id,
            "gross_amount": int(request.amount),
        },
        "customer_details": {
            "first_name": details.first_name,
            "last_name": details.last_name,
            "email": details.email,
            "phone": details.phone,
        },
        "item_details": [
            {"id": i.id, "price": int(i.price), "quantity": i.quantity, "name": i.name}
            for i in request.item_details
        ],
    }


def _deeplink(response: dict) -> Optional[str]:
    for action in response.get("actions") or []:
        if action.get("name") in ("deeplink-redirect", "deeplink_redirect"):
            return action.get("url")
    return None


class MidtransGateway:
    """Midtrans Core API. The SDK is synchronous, so calls run in the threadpool."""

    name = "midtrans"

    def __init__(self, config: MidtransConfig, core_api=None):
        self.config = config
        self.core = core_api or midtransclient.CoreApi(
            is_production=config.is_production,
            server_key=config.server_key,
            client_key=config.client_key,
        )

    async def _call(self, fn, *args) -> PaymentResult:
        try:
            response = await run_in_threadpool(fn, *args)
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            log.warning("payment vendor failure: gateway=midtrans error=%s", message)
            return PaymentResult(success=False, error=message)
        return PaymentResult(success=True, data=response)

    async def create_transaction(self, request: PaymentRequest, bank: str = "bca") -> PaymentResult:
        params = _charge_params(request)
        params["payment_type"] = "bank_transfer"
        params["bank_transfer"] = {"bank": bank}

        result = await self._call(self.core.charge, params)
        if result.success:
            data = result.data
            result.payment_url = data.get("redirect_url")
            result.token = data.get("token")
            accounts = data.get("va_numbers") or []
            if accounts:
                result.virtual_account_number = accounts[0].get("va_number")
        return result

    async def create_ewallet_transaction(self, request: PaymentRequest, ewallet_type: str) -> PaymentResult:
        params = _charge_params(request)
        params["payment_type"] = ewallet_type
        params[ewallet_type] = {"callback_url": callback_url()}

        result = await self._call(self.core.charge, params)
        if result.success:
            result.payment_url = _deeplink(result.data)
            result.deep_link = result.payment_url
            result.token = result.data.get("token")
        return result

    async def verify_payment(self, order_id: str) -> PaymentResult:
        result = await self._call(self.core.transactions.status, order_id)
        if result.success:
            result.status = result.data.get("transaction_status")
            result.payment_type = result.data.get("payment_type")
        return result
