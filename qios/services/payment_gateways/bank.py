import httpx
from pydantic import BaseModel

from qios.schemas.payment import PaymentRequest, PaymentResult
from qios.services.payment_gateways.base import RestGateway, expiry_iso, failure, item_payload


class BankConfig(BaseModel):
    api_key: str
    base_url: str
    merchant_id: str = ""


class BankVirtualAccountGateway(RestGateway):
    """Direct bank virtual-account API."""

    async def create_virtual_account(self, request: PaymentRequest) -> PaymentResult:
        details = request.customer_details
        payload = {
            "merchantId": self.config.merchant_id,
            "orderId": request.order_id,
            "amount": float(request.amount),
            "customerName": details.full_name,
            "customerEmail": details.email,
            "customerPhone": details.phone,
            "items": item_payload(request.item_details),
            "expiryDate": expiry_iso(24),
        }
        try:
            data = await self._post("/virtual-account", payload)
        except (httpx.HTTPError, ValueError) as e:
            return failure(e, self.name)

        return PaymentResult(
            success=True,
            data=data,
            virtual_account_number=data.get("virtualAccountNumber"),
            payment_url=data.get("paymentUrl"),
        )

    def status_path(self, reference: str) -> str:
        return f"/payment-status/{reference}"


class BCAGateway(BankVirtualAccountGateway):
    name = "bca"
    payment_type = "BCA_VIRTUAL_ACCOUNT"


class MandiriGateway(BankVirtualAccountGateway):
    name = "mandiri"
    payment_type = "MANDIRI_VIRTUAL_ACCOUNT"
