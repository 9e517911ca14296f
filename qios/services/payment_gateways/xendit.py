from typing import Optional

import httpx
from pydantic import BaseModel

from qios.schemas.payment import PaymentRequest, PaymentResult
from qios.services.payment_gateways.base import RestGateway, callback_url, expiry_iso, failure

EWALLET_CHANNELS = ("OVO", "DANA", "LINKAJA", "SHOPEEPAY")
QR_API_VERSION = "2022-07-31"


class XenditConfig(BaseModel):
    secret_key: str
    public_key: Optional[str] = None
    base_url: str = "https://api.xendit.co"


class XenditGateway(RestGateway):
    """Xendit REST API, basic auth with the secret key as username."""

    name = "xendit"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.base_url.rstrip("/"),
            auth=(self.config.secret_key, ""),
            timeout=30.0,
            transport=self.transport,
        )

    async def create_virtual_account(self, request: PaymentRequest, bank_code: str = "BCA") -> PaymentResult:
        payload = {
            "external_id": request.order_id,
            "bank_code": bank_code,
            "name": request.customer_details.full_name,
            "suggested_amount": int(request.amount),
            "expected_amount": int(request.amount),
            "is_closed": True,
            "is_single_use": True,
            "expiration_date": expiry_iso(24),
        }
        try:
            data = await self._post("/callback_virtual_accounts", payload)
        except (httpx.HTTPError, ValueError) as e:
            return failure(e, self.name)

        return PaymentResult(
            success=True,
            data=data,
            virtual_account_number=data.get("account_number"),
            payment_url=data.get("payment_url"),
        )

    async def create_ewallet_payment(self, request: PaymentRequest, channel: str) -> PaymentResult:
        details = request.customer_details
        payload = {
            "reference_id": request.order_id,
            "currency": "IDR",
            "amount": int(request.amount),
            "checkout_method": "ONE_TIME_PAYMENT",
            "channel_code": f"ID_{channel}",
            "channel_properties": {
                "mobile_number": details.phone,
                "success_redirect_url": callback_url("/payment/success"),
                "failure_redirect_url": callback_url("/payment/failure"),
            },
            "customer": {
                "given_names": details.first_name,
                "surname": details.last_name,
                "email": details.email,
                "mobile_number": details.phone,
            },
            "basket": [
                {
                    "reference_id": i.id,
                    "name": i.name,
                    "category": "General",
                    "currency": "IDR",
                    "quantity": i.quantity,
                    "price": int(i.price),
                }
                for i in request.item_details
            ],
        }
        try:
            data = await self._post("/ewallets/charges", payload)
        except (httpx.HTTPError, ValueError) as e:
            return failure(e, self.name)

        actions = data.get("actions") or {}
        return PaymentResult(
            success=True,
            data=data,
            payment_url=actions.get("mobile_web_checkout_url"),
            deep_link=actions.get("mobile_deeplink_checkout_url"),
        )

    async def create_qris_payment(self, request: PaymentRequest) -> PaymentResult:
        payload = {
            "reference_id": request.order_id,
            "type": "DYNAMIC",
            "currency": "IDR",
            "amount": int(request.amount),
        }
        try:
            async with self._client() as client:
                response = await client.post(
                    "/qr_codes", json=payload, headers={"api-version": QR_API_VERSION}
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            return failure(e, self.name)

        return PaymentResult(
            success=True,
            data=data,
            qr_code=data.get("qr_string"),
            payment_url=data.get("qr_string"),
        )

    async def verify_payment(self, payment_id: str) -> PaymentResult:
        try:
            data = await self._get(f"/payment_requests/{payment_id}")
        except (httpx.HTTPError, ValueError) as e:
            return failure(e, self.name)

        method = data.get("payment_method")
        return PaymentResult(
            success=True,
            data=data,
            status=data.get("status"),
            payment_type=method.get("type") if isinstance(method, dict) else method,
        )
