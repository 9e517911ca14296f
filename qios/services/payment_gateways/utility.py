import httpx
from pydantic import BaseModel

from qios.schemas.payment import PaymentResult, UtilityPaymentRequest
from qios.services.payment_gateways.base import RestGateway, callback_url, failure


class UtilityConfig(BaseModel):
    api_key: str
    base_url: str


class UtilityGateway(RestGateway):
    """Utility bill payment (electricity, water)."""

    async def create_payment(self, request: UtilityPaymentRequest) -> PaymentResult:
        payload = {
            "customerId": request.customer_id,
            "customerName": request.customer_name,
            "customerPhone": request.customer_phone,
            "customerEmail": request.customer_email,
            "amount": float(request.amount),
            "referenceNumber": request.reference_number,
            "description": request.description,
            "paymentType": self.payment_type,
            "callbackUrl": callback_url(),
            "redirectUrl": callback_url("/payment/success"),
        }
        try:
            data = await self._post("/payment/create", payload)
        except (httpx.HTTPError, ValueError) as e:
            return failure(e, self.name)

        return PaymentResult(
            success=True,
            data=data,
            payment_url=data.get("paymentUrl"),
            virtual_account_number=data.get("virtualAccountNumber"),
        )

    def status_path(self, reference: str) -> str:
        return f"/payment/status/{reference}"

    async def check_bill(self, customer_id: str) -> PaymentResult:
        try:
            data = await self._get(f"/bill/check/{customer_id}")
        except (httpx.HTTPError, ValueError) as e:
            return failure(e, self.name)

        return PaymentResult(
            success=True,
            data=data,
            status=data.get("status"),
            bill_amount=data.get("billAmount"),
            due_date=data.get("dueDate"),
        )


class PLNGateway(UtilityGateway):
    name = "pln"
    payment_type = "PLN"


class PDAMGateway(UtilityGateway):
    name = "pdam"
    payment_type = "PDAM"
